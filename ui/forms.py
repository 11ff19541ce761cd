"""
Pedaços de formulário usados por várias telas: erro embaixo do campo,
bloco de endereço com busca de CEP, seleção por id e diálogo de exclusão.
"""

from __future__ import annotations

from datetime import date, time
from typing import Callable, Optional

import streamlit as st

from src.cep import lookup_cep
from src.config import get_settings
from src.errors import RemoteError
from src.formatters import to_date

ADDRESS_FIELDS = ("cep", "logradouro", "numero", "complemento", "bairro", "cidade", "estado")
UFS = [
    "AC", "AL", "AP", "AM", "BA", "CE", "DF", "ES", "GO", "MA", "MT", "MS", "MG", "PA",
    "PB", "PR", "PE", "PI", "RJ", "RN", "RS", "RO", "RR", "SC", "SP", "SE", "TO",
]


def field_error(errors: dict, name: str):
    msg = (errors or {}).get(name)
    if msg:
        st.caption(f":red[{msg}]")


def as_date(value) -> Optional[date]:
    """Valor do banco (ISO) -> date para o st.date_input; vazio vira None."""
    if not value:
        return None
    return to_date(value)


def as_time(value) -> Optional[time]:
    """'HH:MM' ou 'HH:MM:SS' (coluna time do Postgres) -> time; vazio vira None."""
    if not value:
        return None
    if isinstance(value, time):
        return value
    hh, mm = str(value).split(":")[:2]
    return time(int(hh), int(mm))


def seed(key: str, value):
    """Valor inicial de um widget, sem sobrescrever o que o usuário já digitou."""
    if key not in st.session_state:
        st.session_state[key] = value


def select_id(label: str, options: dict, key: str, errors: dict | None = None, name: str | None = None,
              placeholder: str = "Selecione", disabled: bool = False):
    """
    Selectbox de registros: `options` é {id: rótulo}. Devolve o id (ou None).
    """
    value = st.selectbox(
        label,
        list(options.keys()),
        format_func=lambda i: options.get(i, str(i)),
        index=None,
        placeholder=placeholder,
        key=key,
        disabled=disabled,
    )
    if name:
        field_error(errors, name)
    return value


# ============================================================
# Endereço com busca de CEP
# ============================================================

def _fill_from_cep(prefix: str, name_prefix: str):
    cep = st.session_state.get(f"{prefix}_{name_prefix}cep", "")
    try:
        found = lookup_cep(cep, timeout=get_settings().cep_timeout)
    except ValueError as e:
        st.session_state[f"{prefix}_cep_msg"] = ("warning", str(e))
        return
    except RemoteError as e:
        st.session_state[f"{prefix}_cep_msg"] = ("error", e.message)
        return

    for field, value in found.items():
        if value:
            st.session_state[f"{prefix}_{name_prefix}{field}"] = value
    st.session_state[f"{prefix}_cep_msg"] = ("success", "Endereço preenchido pelo CEP.")


def address_fields(prefix: str, errors: dict | None = None, name_prefix: str = "",
                   disabled: bool = False) -> dict:
    """
    Campos de endereço. As chaves dos widgets são `{prefix}_{name_prefix}{campo}`
    e o dict devolvido usa `{name_prefix}{campo}` (mesmo nome do esquema).
    O botão "Buscar CEP" preenche logradouro/bairro/cidade/estado (ViaCEP).
    """
    def k(field):
        return f"{prefix}_{name_prefix}{field}"

    def n(field):
        return f"{name_prefix}{field}"

    c_cep, c_btn = st.columns([3, 1], vertical_alignment="bottom")
    with c_cep:
        st.text_input("CEP", key=k("cep"), placeholder="00000-000", disabled=disabled)
    with c_btn:
        st.button(
            "Buscar CEP",
            key=f"{prefix}_cep_btn",
            on_click=_fill_from_cep,
            args=(prefix, name_prefix),
            disabled=disabled,
            use_container_width=True,
        )
    field_error(errors, n("cep"))

    msg = st.session_state.pop(f"{prefix}_cep_msg", None)
    if msg:
        kind, text = msg
        {"success": st.success, "warning": st.warning}.get(kind, st.error)(text)

    c1, c2 = st.columns([3, 1])
    with c1:
        st.text_input("Logradouro", key=k("logradouro"), disabled=disabled)
        field_error(errors, n("logradouro"))
    with c2:
        st.text_input("Número", key=k("numero"), disabled=disabled)
        field_error(errors, n("numero"))

    c3, c4 = st.columns(2)
    with c3:
        st.text_input("Complemento", key=k("complemento"), disabled=disabled)
    with c4:
        st.text_input("Bairro", key=k("bairro"), disabled=disabled)
        field_error(errors, n("bairro"))

    c5, c6 = st.columns([3, 1])
    with c5:
        st.text_input("Cidade", key=k("cidade"), disabled=disabled)
        field_error(errors, n("cidade"))
    with c6:
        st.selectbox("Estado", UFS, index=None, placeholder="UF", key=k("estado"), disabled=disabled)
        field_error(errors, n("estado"))

    return {n(f): st.session_state.get(k(f)) for f in ADDRESS_FIELDS}


def seed_address(prefix: str, endereco: dict, name_prefix: str = ""):
    for field in ADDRESS_FIELDS:
        value = (endereco or {}).get(field) or ""
        if field == "estado" and value not in UFS:
            value = None
        seed(f"{prefix}_{name_prefix}{field}", value)


def forget_keys(prefix: str):
    """Limpa os widgets de um formulário (ex.: depois de salvar)."""
    for key in [k for k in st.session_state.keys() if str(k).startswith(f"{prefix}_")]:
        del st.session_state[key]


# ============================================================
# Exclusão com confirmação
# ============================================================

@st.dialog("Confirmar exclusão")
def confirm_delete(message: str, on_confirm: Callable[[], None]):
    st.write(message)
    st.caption("Esta ação não pode ser desfeita.")

    c1, c2 = st.columns(2)
    with c1:
        if st.button("Excluir", type="primary", use_container_width=True):
            try:
                on_confirm()
            except RemoteError as e:
                st.error(e.message)
                return
            st.rerun()
    with c2:
        if st.button("Cancelar", use_container_width=True):
            st.rerun()
