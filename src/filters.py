"""
Filtros locais das telas de listagem.

As linhas já vieram do banco; aqui só se estreita o conjunto em memória
(busca por texto, dropdowns) e se fatia em páginas.
"""

from __future__ import annotations

import math
import unicodedata
from typing import Any, Iterable

import pandas as pd

TODOS = "todos"


def norm_text(s: Any) -> str:
    """Normaliza para comparação: trim + lower + sem acento."""
    if s is None or (isinstance(s, float) and math.isnan(s)):
        return ""
    s = str(s).strip().lower()
    s = unicodedata.normalize("NFKD", s)
    return "".join(ch for ch in s if not unicodedata.combining(ch))


def to_frame(rows: list[dict]) -> pd.DataFrame:
    """
    Lista de dicts (resposta do Supabase) -> DataFrame.
    Relações embutidas viram colunas com '_' (ex.: residente_nome).
    """
    if not rows:
        return pd.DataFrame()
    df = pd.json_normalize(rows, sep="_").astype(object)
    # NaN -> None: as telas testam "vazio" com `or`
    return df.where(pd.notna(df), None)


def search(df: pd.DataFrame, term: str, columns: Iterable[str]) -> pd.DataFrame:
    """Mantém as linhas em que alguma das colunas contém o termo."""
    key = norm_text(term)
    if df.empty or not key:
        return df
    cols = [c for c in columns if c in df.columns]
    if not cols:
        return df.iloc[0:0]
    mask = pd.Series(False, index=df.index)
    for c in cols:
        mask |= df[c].map(norm_text).str.contains(key, regex=False)
    return df[mask]


def equals(df: pd.DataFrame, column: str, value: Any) -> pd.DataFrame:
    """Filtro de dropdown; 'todos' (ou vazio) não filtra."""
    if df.empty or value in (None, "", TODOS) or column not in df.columns:
        return df
    return df[df[column] == value]


def distinct(df: pd.DataFrame, column: str) -> list:
    """Opções de um dropdown a partir dos dados já carregados."""
    if df.empty or column not in df.columns:
        return []
    return sorted(v for v in df[column].dropna().unique().tolist() if v != "")


def paginate(df: pd.DataFrame, page: int, per_page: int) -> tuple[pd.DataFrame, int, int]:
    """
    Fatia a página pedida. Retorna (fatia, página ajustada, total de páginas);
    a página sempre fica entre 1 e o total.
    """
    pages = max(1, math.ceil(len(df) / per_page))
    page = min(max(1, int(page)), pages)
    start = (page - 1) * per_page
    return df.iloc[start:start + per_page], page, pages


def sort_rows(df: pd.DataFrame, by: list[tuple[str, bool]]) -> pd.DataFrame:
    """
    Ordena por (coluna, desc), o mesmo formato do `order_by` de
    repository.fetch_rows; colunas ausentes são ignoradas.
    """
    cols = [(c, desc) for c, desc in by if c in df.columns]
    if df.empty or not cols:
        return df
    return df.sort_values(
        [c for c, _ in cols],
        ascending=[not desc for _, desc in cols],
        na_position="last",
        kind="stable",
    )
