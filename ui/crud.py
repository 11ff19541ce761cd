"""
Partes comuns das telas de cadastro: barra de ações, paginação local,
envio de formulário de modal e exclusão.
"""

from __future__ import annotations

from typing import Callable, Optional

import pandas as pd
import streamlit as st

from src import repository
from src.errors import RemoteError
from src.filters import paginate
from src.helpers import (
    clear_errors, flash, get_page, get_rows, load_rows, render_pagination, set_errors, set_page, set_rows,
)
from src.schemas import validate_form
from ui.forms import confirm_delete, forget_keys

PER_PAGE = 10


def toolbar(key: str, title: str, new_label: Optional[str] = None) -> tuple[bool, bool]:
    """Título + botões "Atualizar" e "Novo …". Retorna (atualizar, novo)."""
    c_title, c_refresh, c_new = st.columns([4, 1, 1], vertical_alignment="bottom")
    with c_title:
        st.title(title)
    with c_refresh:
        refresh = st.button("🔄 Atualizar", use_container_width=True, key=f"{key}_refresh")
    with c_new:
        create = bool(new_label) and st.button(f"➕ {new_label}", type="primary", use_container_width=True, key=f"{key}_new")
    return refresh, create


def page_slice(df: pd.DataFrame, key: str, filter_key) -> tuple[pd.DataFrame, int, int]:
    """
    Página atual do conjunto filtrado. Quando os filtros mudam, volta para a 1.
    """
    state_key = f"{key}_last_filter"
    if st.session_state.get(state_key) != filter_key:
        st.session_state[state_key] = filter_key
        set_page(key, 1)

    page_df, page, pages = paginate(df, get_page(key), PER_PAGE)
    set_page(key, page)
    return page_df, page, pages


def pagination(key: str, page: int, pages: int, total: int):
    if pages > 1:
        st.divider()
        render_pagination(key, page, pages, total)


def open_form(prefix: str, form_key: str):
    """Limpa widgets/erros do último modal antes de abrir outro."""
    forget_keys(prefix)
    clear_errors(form_key)


def submit(form_key: str, schema, values: dict, save: Callable, success: str, rows_key: str, prefix: str):
    """
    Valida `values`; com erro, re-renderiza só o modal mostrando os erros.
    Válido: chama `save(modelo)`, recarrega a lista e fecha o modal.
    """
    model, errors = validate_form(schema, values)
    if errors:
        set_errors(form_key, errors)
        st.rerun(scope="fragment")

    try:
        save(model)
    except RemoteError as e:
        st.error(f"{e.message}: {e.detail}" if e.detail else e.message)
        return

    clear_errors(form_key)
    forget_keys(prefix)
    st.session_state.pop(f"rows_{rows_key}", None)
    flash(success)
    st.rerun()


def delete_button(rows_key: str, table: str, row: dict, label: str,
                  remove: Optional[Callable] = None, warning: str = ""):
    """
    Botão 🗑️ com confirmação. Depois do delete, tira a linha da lista local.
    `remove(id)` substitui o delete simples (ex.: desvincular filhos antes).
    """
    if not st.button("🗑️", key=f"{rows_key}_del_{row['id']}", help="Excluir"):
        return

    def _delete():
        if remove:
            remove(row["id"])
        else:
            repository.delete_row(table, row["id"])
        set_rows(rows_key, repository.remove_from(get_rows(rows_key), row["id"]))
        flash(f"{label} excluído(a) com sucesso.")

    confirm_delete(f"Deseja excluir **{label}**? {warning}".strip(), _delete)


def update_local(rows_key: str, row_id, changes: dict, success: Optional[str] = None):
    """Atualiza a linha na lista local (depois de um update de status, por ex.)."""
    set_rows(rows_key, repository.replace_in(get_rows(rows_key), row_id, changes))
    if success:
        flash(success)


def residente_options() -> dict:
    """{id: nome} dos residentes, para os selects dos registros."""
    rows = load_rows(
        "residentes_opcoes",
        lambda: repository.fetch_rows("residente", "id, nome", order_by=[("nome", False)]),
    )
    return {r["id"]: r["nome"] for r in rows}
