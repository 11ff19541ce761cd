from datetime import date

import streamlit as st

from src.auth import change_password
from src.errors import RemoteError
from src.formatters import format_cpf, format_phone
from src.helpers import (
    clear_errors, flash, get_errors, init_state, is_editing, require_role, set_editing, set_errors, show_flash,
)
from src.profile import load_profile, update_address, update_personal
from src.schemas import EnderecoSchema, SenhaSchema, UsuarioSchema, validate_form
from ui.forms import address_fields, as_date, field_error, forget_keys, seed, seed_address
from ui.sidebar import render_sidebar_menu, roles_for

st.set_page_config(page_title="Meu perfil • ILPI", layout="wide")

init_state()
user = require_role(*roles_for("Meu perfil"))

st.session_state["current_page"] = "Meu perfil"
render_sidebar_menu()

st.title("👤 Meu perfil")
show_flash()

if "perfil" not in st.session_state:
    try:
        st.session_state["perfil"] = load_profile(user["email"], user["role"])
    except RemoteError as e:
        st.error(e.message)
        st.stop()

perfil = st.session_state["perfil"]
if not perfil:
    st.warning("Usuário não encontrado no cadastro.")
    st.stop()

pessoa = perfil["pessoa"]
if not pessoa:
    st.info("Sem cadastro de funcionário ou responsável vinculado; os dados pessoais e o endereço ficam só para consulta.")


def reload_profile(section: str, message: str):
    st.session_state.pop("perfil", None)
    set_editing(section, False)
    forget_keys(f"perf_{section}")
    flash(message)
    st.rerun()


def edit_toggle(section: str):
    editing = is_editing(section)
    if st.button("Cancelar" if editing else "✏️ Editar", key=f"{section}_toggle"):
        set_editing(section, not editing)
        forget_keys(f"perf_{section}")
        st.rerun()
    return editing


# ============================================================
# Dados pessoais
# ============================================================

with st.container(border=True):
    h, b = st.columns([5, 1], vertical_alignment="bottom")
    with h:
        st.subheader("Dados pessoais")
    with b:
        editing = edit_toggle("dados")

    errors = get_errors("dados")

    def k(field):
        return f"perf_dados_{field}"

    seed(k("nome"), pessoa.get("nome") or perfil["usuario"].get("nome") or "")
    seed(k("email"), pessoa.get("email") or perfil["usuario"].get("email") or "")
    seed(k("cpf"), format_cpf(pessoa.get("cpf")))
    seed(k("data_nascimento"), as_date(pessoa.get("data_nascimento")))
    for field in ("telefone_principal", "telefone_secundario", "contato_emergencia_telefone"):
        seed(k(field), format_phone(pessoa.get(field)))
    seed(k("contato_emergencia_nome"), pessoa.get("contato_emergencia_nome") or "")

    c1, c2 = st.columns(2)
    with c1:
        st.text_input("Nome", key=k("nome"), disabled=not editing)
        field_error(errors, "nome")
        st.text_input("CPF", key=k("cpf"), disabled=not editing)
        field_error(errors, "cpf")
        st.text_input("Telefone principal", key=k("telefone_principal"), disabled=not editing)
        field_error(errors, "telefone_principal")
        st.text_input("Contato de emergência", key=k("contato_emergencia_nome"), disabled=not editing)
    with c2:
        st.text_input("Email", key=k("email"), disabled=not editing)
        field_error(errors, "email")
        st.date_input("Data de nascimento", key=k("data_nascimento"), min_value=date(1900, 1, 1),
                      max_value=date.today(), format="DD/MM/YYYY", disabled=not editing)
        field_error(errors, "data_nascimento")
        st.text_input("Telefone secundário", key=k("telefone_secundario"), disabled=not editing)
        st.text_input("Telefone de emergência", key=k("contato_emergencia_telefone"), disabled=not editing)

    if editing and st.button("Salvar dados pessoais", type="primary", key="dados_save"):
        model, errors = validate_form(UsuarioSchema, {f: st.session_state.get(k(f)) for f in UsuarioSchema.model_fields})
        if errors:
            set_errors("dados", errors)
            st.rerun()
        try:
            update_personal(perfil, model)
        except RemoteError as e:
            st.error(e.message)
        else:
            clear_errors("dados")
            reload_profile("dados", "Dados pessoais atualizados com sucesso!")

# ============================================================
# Endereço
# ============================================================

with st.container(border=True):
    h, b = st.columns([5, 1], vertical_alignment="bottom")
    with h:
        st.subheader("Endereço")
    with b:
        editing = edit_toggle("endereco")

    errors = get_errors("endereco")
    seed_address("perf_endereco", perfil.get("endereco") or {})
    values = address_fields("perf_endereco", errors, disabled=not editing)

    if editing and st.button("Salvar endereço", type="primary", key="endereco_save"):
        model, errors = validate_form(EnderecoSchema, values)
        if errors:
            set_errors("endereco", errors)
            st.rerun()
        try:
            update_address(perfil, model)
        except RemoteError as e:
            st.error(e.message)
        else:
            clear_errors("endereco")
            reload_profile("endereco", "Endereço atualizado com sucesso!")

# ============================================================
# Senha
# ============================================================

with st.container(border=True):
    h, b = st.columns([5, 1], vertical_alignment="bottom")
    with h:
        st.subheader("Senha")
    with b:
        editing = edit_toggle("senha")

    if not editing:
        st.caption("••••••••")
    else:
        errors = get_errors("senha")
        st.text_input("Senha atual", type="password", key="perf_senha_senha_atual")
        field_error(errors, "senha_atual")
        st.text_input("Nova senha", type="password", key="perf_senha_nova_senha")
        field_error(errors, "nova_senha")
        st.text_input("Confirmar nova senha", type="password", key="perf_senha_confirmar_senha")
        field_error(errors, "confirmar_senha")

        if st.button("Alterar senha", type="primary", key="senha_save"):
            model, errors = validate_form(
                SenhaSchema, {f: st.session_state.get(f"perf_senha_{f}") for f in SenhaSchema.model_fields}
            )
            if errors:
                set_errors("senha", errors)
                st.rerun()
            try:
                change_password(perfil["usuario"]["id"], model.senha_atual, model.nova_senha)
            except RemoteError as e:
                set_errors("senha", {"senha_atual": e.message})
                st.rerun()
            else:
                clear_errors("senha")
                reload_profile("senha", "Senha alterada com sucesso!")
