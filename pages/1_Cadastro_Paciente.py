from datetime import date

import streamlit as st

from src import repository
from src.auth import ROLE_ADMIN
from src.config import get_settings
from src.errors import RemoteError
from src.formatters import format_cpf
from src.helpers import (
    clear_errors, flash, get_errors, init_state, load_rows, require_role, set_errors, show_flash,
)
from src.schemas import ESTADOS_CIVIS, NIVEIS_DEPENDENCIA, SEXOS
from src.wizard import (
    FIRST_STEP, LAST_STEP, STEPS, empty_form, first_step_with_errors, next_step, prev_step,
    submit_registration,
)
from ui.forms import address_fields, field_error, forget_keys, select_id
from ui.sidebar import render_sidebar_menu

st.set_page_config(page_title="Cadastrar paciente • ILPI", layout="wide")

init_state()
require_role(ROLE_ADMIN)

st.session_state["current_page"] = "Cadastrar paciente"
render_sidebar_menu()

st.session_state.setdefault("wiz_step", FIRST_STEP)
st.session_state.setdefault("wiz_data", empty_form())

step = st.session_state["wiz_step"]
data = st.session_state["wiz_data"]
errors = get_errors("wizard")


def k(field: str) -> str:
    return f"wiz_{field}"


NONE_WHEN_EMPTY = {"resp_estado", "idoso_sexo", "idoso_estado_civil", "idoso_nivel_dependencia", "idoso_data_nascimento"}


def seed_step_widgets():
    # widgets de outras etapas somem do session_state; o valor fica em wiz_data
    for field, value in data.items():
        if k(field) not in st.session_state:
            st.session_state[k(field)] = None if value == "" and field in NONE_WHEN_EMPTY else value


def collect(fields):
    for field in fields:
        if k(field) in st.session_state:
            data[field] = st.session_state[k(field)]


def text(label: str, field: str, **kwargs):
    st.text_input(label, key=k(field), **kwargs)
    field_error(errors, field)


def choice(label: str, field: str, options: list):
    if st.session_state.get(k(field)) not in options:
        st.session_state[k(field)] = None
    st.selectbox(label, options, index=None, placeholder="Selecione", key=k(field))
    field_error(errors, field)


def birth_date(label: str, field: str):
    if st.session_state.get(k(field)) == "":
        st.session_state[k(field)] = None
    st.date_input(label, key=k(field), min_value=date(1900, 1, 1), max_value=date.today(), format="DD/MM/YYYY")
    field_error(errors, field)


seed_step_widgets()

# ============================================================
# Cabeçalho + progresso
# ============================================================

st.title("🧓 Cadastro de paciente")
show_flash()

st.progress(step / LAST_STEP, text=f"Etapa {step} de {LAST_STEP} • {STEPS[step]}")

with st.container(border=True):

    # ---------- Etapa 1: responsável ----------
    if step == 1:
        st.subheader("Responsável")
        st.radio(
            "Tipo de responsável",
            ["novo", "existente"],
            format_func=lambda t: "Cadastrar novo" if t == "novo" else "Selecionar existente",
            horizontal=True,
            key=k("tipo_responsavel"),
        )

        if st.session_state[k("tipo_responsavel")] == "existente":
            rows = load_rows(
                "responsaveis_opcoes",
                lambda: repository.fetch_rows("responsavel", "id, nome, cpf", order_by=[("nome", False)]),
            )
            options = {r["id"]: f"{r['nome']} • {format_cpf(r.get('cpf'))}" for r in rows}
            if st.session_state.get(k("resp_existente_id")) not in options:
                st.session_state[k("resp_existente_id")] = None
            select_id("Responsável", options, key=k("resp_existente_id"), errors=errors, name="resp_existente_id")
            collect(["tipo_responsavel", "resp_existente_id"])
        else:
            c1, c2 = st.columns(2)
            with c1:
                text("Nome completo", "resp_nome_completo")
                text("Telefone principal", "resp_telefone_principal", placeholder="(00) 00000-0000")
                text("Email", "resp_email")
            with c2:
                text("CPF", "resp_cpf", placeholder="000.000.000-00")
                text("Telefone secundário", "resp_telefone_secundario")
                text("Observações", "resp_observacoes")

            st.markdown("**Endereço**")
            address_fields("wiz", errors, name_prefix="resp_")
            collect(["tipo_responsavel"] + [f for f in data if f.startswith("resp_") and f != "resp_existente_id"])

    # ---------- Etapa 2: paciente ----------
    elif step == 2:
        st.subheader("Paciente")
        c1, c2 = st.columns(2)
        with c1:
            text("Nome completo", "idoso_nome_completo")
            birth_date("Data de nascimento", "idoso_data_nascimento")
            choice("Sexo", "idoso_sexo", SEXOS)
        with c2:
            text("Nome social", "idoso_nome_social")
            text("CPF", "idoso_cpf", placeholder="000.000.000-00")
        collect(["idoso_nome_completo", "idoso_nome_social", "idoso_data_nascimento", "idoso_cpf", "idoso_sexo"])

    # ---------- Etapa 3: dados adicionais ----------
    else:
        st.subheader("Dados adicionais")
        c1, c2 = st.columns(2)
        with c1:
            choice("Estado civil", "idoso_estado_civil", ESTADOS_CIVIS)
            text("Naturalidade", "idoso_naturalidade")
            text("Quarto", "idoso_localizacao_quarto")
            choice("Grau de dependência", "idoso_nivel_dependencia", NIVEIS_DEPENDENCIA)
        with c2:
            text("Parentesco com o responsável", "idoso_responsavel_parentesco")
            text("Plano de saúde", "idoso_plano_saude")
            text("Número da carteirinha", "idoso_numero_carteirinha")
            text("URL da foto de perfil", "idoso_foto_perfil_url", placeholder="https://…")

        foto = st.file_uploader("…ou envie a foto (PNG/JPEG, até 5MB)", type=["png", "jpg", "jpeg"], key="wiz_foto_upload")
        st.text_area("Observações", key=k("idoso_observacoes"))
        collect([f for f in data if f.startswith("idoso_") and f not in (
            "idoso_nome_completo", "idoso_nome_social", "idoso_data_nascimento", "idoso_cpf", "idoso_sexo",
        )])

# ============================================================
# Navegação
# ============================================================

b_prev, _, b_next = st.columns([1, 2, 1])

with b_prev:
    if st.button("⬅️ Voltar", use_container_width=True, disabled=(step <= FIRST_STEP)):
        clear_errors("wizard")
        st.session_state["wiz_step"] = prev_step(step)
        st.rerun()

with b_next:
    if step < LAST_STEP:
        if st.button("Avançar ➡️", type="primary", use_container_width=True):
            new_step, step_errors = next_step(step, data)
            set_errors("wizard", step_errors)
            st.session_state["wiz_step"] = new_step
            st.rerun()
    elif st.button("Cadastrar", type="primary", use_container_width=True):
        if foto is not None:
            problem = repository.check_image(foto.type, foto.size)
            if problem:
                st.error(problem)
                st.stop()
            try:
                with st.spinner("Enviando foto…"):
                    data["idoso_foto_perfil_url"] = repository.upload_photo(
                        get_settings().photo_bucket, foto.name, foto.getvalue(), foto.type,
                    )
            except RemoteError as e:
                st.error(e.message)
                st.stop()

        try:
            with st.spinner("Cadastrando…"):
                id_idoso, submit_errors = submit_registration(data)
        except RemoteError as e:
            st.error(f"{e.message}: {e.detail}" if e.detail else e.message)
            st.stop()

        if submit_errors:
            set_errors("wizard", submit_errors)
            st.session_state["wiz_step"] = first_step_with_errors(submit_errors, data["tipo_responsavel"])
            st.rerun()

        nome = data["idoso_nome_completo"]
        clear_errors("wizard")
        forget_keys("wiz")
        st.session_state.pop("rows_responsaveis_opcoes", None)
        st.session_state.pop("rows_residentes", None)
        flash(f"Paciente {nome} cadastrado com sucesso!")
        st.rerun()
