"""
Leitura para o responsável: resumo do dia dos residentes vinculados e o
prontuário completo de um residente. Tudo vem de RPCs; aqui só se
recorta o que a tela mostra.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from src import repository
from src.filters import norm_text
from src.formatters import format_date_numeric, to_date

logger = logging.getLogger(__name__)

CONSULTAS_FUTURAS = "futuras"
CONSULTAS_TODAS = "todas"


# ============================================================
# Painel do responsável
# ============================================================

def load_family(id_responsavel: int, today: Optional[date] = None, client=None) -> list[dict]:
    """
    Um item por residente vinculado: residente, medicamentos_ativos,
    administracoes_dia, atividades_dia, consultas_semana, exames_semana
    e ocorrencias_dia.
    """
    items = repository.call_rpc(
        "get_detalhes_residentes_por_responsavel",
        {"p_id_responsavel": id_responsavel, "p_data_referencia": format_date_numeric(today)},
        client=client,
    )
    logger.info("Familiares carregados", extra={"id_responsavel": id_responsavel, "residentes": len(items or [])})
    return items or []


def next_medication(item: dict) -> Optional[dict]:
    """Primeira administração pendente do dia, pelo horário previsto."""
    pendentes = [a for a in (item.get("administracoes_dia") or []) if a.get("status") == "pendente"]
    if not pendentes:
        return None
    return min(pendentes, key=lambda a: a.get("horario_previsto") or "")


def from_today(rows: list[dict] | None, date_field: str, today: Optional[date] = None) -> list[dict]:
    """Linhas com data de hoje em diante, da mais próxima para a mais distante."""
    hoje = today or date.today()
    kept = [r for r in (rows or []) if r.get(date_field) and to_date(r[date_field]) >= hoje]
    return sorted(kept, key=lambda r: (to_date(r[date_field]), r.get("horario") or r.get("horario_previsto") or ""))


def flatten(items: list[dict], section: str) -> list[dict]:
    """
    Visão "casa": junta a seção de todos os residentes, marcando cada
    linha com `nome_residente`.
    """
    rows = []
    for item in items:
        nome = (item.get("residente") or {}).get("nome")
        rows.extend({**row, "nome_residente": nome} for row in (item.get(section) or []))
    return rows


def step(items: list[dict], index: int, delta: int) -> int:
    """Anterior/próximo na visão "familiar", dando a volta na lista."""
    if not items:
        return 0
    return (index + delta) % len(items)


# ============================================================
# Prontuário
# ============================================================

def load_record(id_residente: int, client=None) -> dict:
    """Prontuário completo (get_dados_completos_residente). Vazio se o residente não existir."""
    data = repository.call_rpc("get_dados_completos_residente", {"p_id_residente": id_residente}, client=client)
    # a function devolve um objeto; algumas versões do postgrest embrulham numa lista
    if isinstance(data, list):
        data = data[0] if data else {}
    return data or {}


def filter_incidents(rows: list[dict] | None, term: str) -> list[dict]:
    t = norm_text(term)
    if not t:
        return list(rows or [])
    return [
        r for r in (rows or [])
        if t in norm_text(r.get("titulo")) or t in norm_text(r.get("descricao"))
    ]


def record_consultas(rows: list[dict] | None, mode: str = CONSULTAS_FUTURAS, today: Optional[date] = None) -> list[dict]:
    if mode == CONSULTAS_TODAS:
        return sorted(rows or [], key=lambda r: (r.get("data_consulta") or "", r.get("horario") or ""), reverse=True)
    return from_today(rows, "data_consulta", today)


def guardian_residents(items: list[dict]) -> list[dict]:
    """Residentes que o responsável pode abrir no prontuário."""
    return [item["residente"] for item in items if (item.get("residente") or {}).get("id")]
