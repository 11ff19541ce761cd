from datetime import date

import streamlit as st

from src import repository
from src.auth import ROLE_ADMIN
from src.errors import RemoteError
from src.filters import TODOS, distinct, equals, search, sort_rows, to_frame
from src.formatters import format_cpf, format_date, format_phone
from src.helpers import get_errors, init_state, load_rows, require_role, show_flash, status_badge
from src.people import next_status, save_funcionario
from src.schemas import STATUS_FUNCIONARIO, VINCULOS, FuncionarioSchema
from ui.crud import delete_button, open_form, page_slice, pagination, submit, toolbar, update_local
from ui.forms import address_fields, as_date, field_error, seed, seed_address
from ui.sidebar import render_sidebar_menu

st.set_page_config(page_title="Funcionários • ILPI", layout="wide")

init_state()
require_role(ROLE_ADMIN)

st.session_state["current_page"] = "Funcionários"
render_sidebar_menu()

ROWS = "funcionarios"
FORM = "funcionario"
PREFIX = "funcdlg"

PAPEIS = ["Cuidador", "Enfermagem", "Admin"]


def fetch_funcionarios():
    return repository.fetch_rows("funcionario", "*, endereco(*), usuario(papel)", order_by=[("nome", False)])


@st.dialog("Funcionário", width="large")
def funcionario_dialog(row: dict | None = None):
    row = row or {}
    errors = get_errors(FORM)

    def k(field):
        return f"{PREFIX}_{field}"

    seed(k("vinculo"), row.get("vinculo") if row.get("vinculo") in VINCULOS else None)
    papel = (row.get("usuario") or {}).get("papel")
    seed(k("papel"), papel if papel in PAPEIS else "Cuidador")
    seed(k("nome"), row.get("nome") or "")
    seed(k("cpf"), format_cpf(row.get("cpf")))
    seed(k("email"), row.get("email") or "")
    seed(k("data_nascimento"), as_date(row.get("data_nascimento")))
    seed(k("data_admissao"), as_date(row.get("data_admissao")) or date.today())
    for field in ("cargo", "registro_profissional", "contato_emergencia_nome"):
        seed(k(field), row.get(field) or "")
    for field in ("telefone_principal", "telefone_secundario", "contato_emergencia_telefone"):
        seed(k(field), format_phone(row.get(field)))
    seed_address(PREFIX, row.get("endereco") or {})

    c1, c2, c3 = st.columns(3)
    with c1:
        st.selectbox("Vínculo", VINCULOS, index=None, placeholder="Selecione", key=k("vinculo"))
        field_error(errors, "vinculo")
    with c2:
        st.text_input("Cargo", key=k("cargo"))
        field_error(errors, "cargo")
    with c3:
        st.selectbox("Perfil de acesso", PAPEIS, key=k("papel"), disabled=bool(row.get("id")))

    c1, c2 = st.columns(2)
    with c1:
        st.text_input("Nome completo", key=k("nome"))
        field_error(errors, "nome")
        st.text_input("Email", key=k("email"))
        field_error(errors, "email")
        st.date_input("Data de nascimento", key=k("data_nascimento"), min_value=date(1900, 1, 1),
                      max_value=date.today(), format="DD/MM/YYYY")
        field_error(errors, "data_nascimento")
        st.text_input("Telefone principal", key=k("telefone_principal"), placeholder="(00) 00000-0000")
        field_error(errors, "telefone_principal")
        st.text_input("Contato de emergência", key=k("contato_emergencia_nome"))
    with c2:
        st.text_input("CPF", key=k("cpf"), placeholder="000.000.000-00")
        field_error(errors, "cpf")
        st.text_input("Registro profissional", key=k("registro_profissional"), placeholder="COREN, CRM…")
        st.date_input("Data de admissão", key=k("data_admissao"), format="DD/MM/YYYY")
        field_error(errors, "data_admissao")
        st.text_input("Telefone secundário", key=k("telefone_secundario"))
        st.text_input("Telefone de emergência", key=k("contato_emergencia_telefone"))

    st.markdown("**Endereço**")
    endereco = address_fields(PREFIX, errors)

    if not st.button("Salvar", type="primary", use_container_width=True, key=k("save")):
        return

    values = {f: st.session_state.get(k(f)) for f in FuncionarioSchema.model_fields if f not in endereco}
    values.update(endereco)

    submit(
        FORM, FuncionarioSchema, values,
        lambda model: save_funcionario(model, row.get("id")),
        "Funcionário atualizado com sucesso!" if row.get("id") else "Funcionário cadastrado com sucesso!",
        ROWS, PREFIX,
    )


# ============================================================
# Lista
# ============================================================

refresh, create = toolbar(ROWS, "🧑‍⚕️ Funcionários", "Novo funcionário")
show_flash()

if create:
    open_form(PREFIX, FORM)
    funcionario_dialog()

rows = load_rows(ROWS, fetch_funcionarios, force=refresh)
df = to_frame(rows)

with st.container(border=True):
    f1, f2, f3 = st.columns([2, 1, 1])
    with f1:
        termo = st.text_input("Buscar", placeholder="Nome ou cargo", key="func_busca")
    with f2:
        status = st.selectbox("Status", [TODOS] + STATUS_FUNCIONARIO, key="func_status")
    with f3:
        vinculo = st.selectbox("Vínculo", [TODOS] + distinct(df, "vinculo"), key="func_vinculo")

view = search(df, termo, ["nome", "cargo"])
view = equals(view, "status", status)
view = equals(view, "vinculo", vinculo)
view = sort_rows(view, [("nome", False)])

page_df, page, pages = page_slice(view, ROWS, (termo, status, vinculo))

if view.empty:
    st.info("Nenhum funcionário encontrado.")

for r in page_df.to_dict("records"):
    with st.container(border=True):
        c_info, c_cargo, c_contato, c_status, c_actions = st.columns([2.2, 1.6, 2, 1, 1.6], vertical_alignment="center")
        with c_info:
            st.markdown(f"**{r['nome']}**")
            st.caption(f"CPF {format_cpf(r.get('cpf'))} • Admissão {format_date(r.get('data_admissao'))}")
        with c_cargo:
            st.write(r.get("cargo") or "—")
            st.caption(r.get("vinculo") or "")
        with c_contato:
            st.write(r.get("email") or "—")
            st.caption(format_phone(r.get("telefone_principal")))
        with c_status:
            st.markdown(status_badge(r.get("status")), unsafe_allow_html=True)
        with c_actions:
            a1, a2, a3 = st.columns(3)
            with a1:
                if st.button("✏️", key=f"func_edit_{r['id']}", help="Editar"):
                    open_form(PREFIX, FORM)
                    funcionario_dialog(repository.find_in(rows, r["id"]))
            with a2:
                novo = next_status(r.get("status"))
                if st.button("🔁", key=f"func_status_{r['id']}", help=f"Mudar status para {novo}"):
                    try:
                        repository.update_row("funcionario", r["id"], {"status": novo})
                    except RemoteError as e:
                        st.error(e.message)
                    else:
                        update_local(ROWS, r["id"], {"status": novo}, f"Status alterado para {novo}.")
                        st.rerun()
            with a3:
                delete_button(ROWS, "funcionario", r, r["nome"])

pagination(ROWS, page, pages, len(view))
