from datetime import date

import streamlit as st

from src import repository
from src.auth import ROLE_ADMIN
from src.errors import RemoteError
from src.filters import TODOS, equals, search, sort_rows, to_frame
from src.formatters import format_cpf, format_phone
from src.helpers import bool_status, get_errors, init_state, load_rows, require_role, show_flash, status_badge
from src.people import delete_responsavel, save_responsavel
from src.schemas import ResponsavelSchema
from ui.crud import delete_button, open_form, page_slice, pagination, submit, toolbar, update_local
from ui.forms import address_fields, as_date, field_error, seed, seed_address
from ui.sidebar import render_sidebar_menu

st.set_page_config(page_title="Responsáveis • ILPI", layout="wide")

init_state()
require_role(ROLE_ADMIN)

st.session_state["current_page"] = "Responsáveis"
render_sidebar_menu()

ROWS = "responsaveis"
FORM = "responsavel"
PREFIX = "respdlg"


def fetch_responsaveis():
    return repository.fetch_rows(
        "responsavel",
        "*, endereco(*), residente(id, nome)",
        order_by=[("nome", False)],
    )


@st.dialog("Responsável", width="large")
def responsavel_dialog(row: dict | None = None):
    row = row or {}
    errors = get_errors(FORM)

    def k(field):
        return f"{PREFIX}_{field}"

    seed(k("nome"), row.get("nome") or "")
    seed(k("cpf"), format_cpf(row.get("cpf")))
    seed(k("email"), row.get("email") or "")
    seed(k("data_nascimento"), as_date(row.get("data_nascimento")))
    for field in ("telefone_principal", "telefone_secundario", "contato_emergencia_telefone"):
        seed(k(field), format_phone(row.get(field)))
    for field in ("contato_emergencia_nome", "observacoes"):
        seed(k(field), row.get(field) or "")
    seed_address(PREFIX, row.get("endereco") or {})

    c1, c2 = st.columns(2)
    with c1:
        st.text_input("Nome completo", key=k("nome"))
        field_error(errors, "nome")
        st.text_input("Email", key=k("email"))
        field_error(errors, "email")
        st.text_input("Telefone principal", key=k("telefone_principal"), placeholder="(00) 00000-0000")
        field_error(errors, "telefone_principal")
        st.text_input("Contato de emergência", key=k("contato_emergencia_nome"))
    with c2:
        st.text_input("CPF", key=k("cpf"), placeholder="000.000.000-00")
        field_error(errors, "cpf")
        st.date_input("Data de nascimento", key=k("data_nascimento"), min_value=date(1900, 1, 1),
                      max_value=date.today(), format="DD/MM/YYYY")
        field_error(errors, "data_nascimento")
        st.text_input("Telefone secundário", key=k("telefone_secundario"))
        st.text_input("Telefone de emergência", key=k("contato_emergencia_telefone"))

    st.markdown("**Endereço**")
    endereco = address_fields(PREFIX, errors)
    st.text_area("Observações", key=k("observacoes"))

    if not st.button("Salvar", type="primary", use_container_width=True, key=k("save")):
        return

    values = {f: st.session_state.get(k(f)) for f in ResponsavelSchema.model_fields if f not in endereco}
    values.update(endereco)

    submit(
        FORM, ResponsavelSchema, values,
        lambda model: save_responsavel(model, row.get("id")),
        "Responsável atualizado com sucesso!" if row.get("id") else "Responsável cadastrado com sucesso!",
        ROWS, PREFIX,
    )


# ============================================================
# Lista
# ============================================================

refresh, create = toolbar(ROWS, "👪 Responsáveis", "Novo responsável")
show_flash()

if create:
    open_form(PREFIX, FORM)
    responsavel_dialog()

rows = load_rows(ROWS, fetch_responsaveis, force=refresh)
df = to_frame(rows)
if not df.empty:
    df["status_label"] = df["status"].map(bool_status)

with st.container(border=True):
    f1, f2 = st.columns([3, 1])
    with f1:
        termo = st.text_input("Buscar", placeholder="Nome, CPF ou email", key="resp_busca")
    with f2:
        status = st.selectbox("Status", [TODOS, "ativo", "inativo"], key="resp_status")

view = search(df, termo, ["nome", "cpf", "email"])
view = equals(view, "status_label", status)
view = sort_rows(view, [("nome", False)])

page_df, page, pages = page_slice(view, ROWS, (termo, status))

if view.empty:
    st.info("Nenhum responsável encontrado.")

for r in page_df.to_dict("records"):
    with st.container(border=True):
        c_info, c_contato, c_res, c_status, c_actions = st.columns([2.2, 2, 1.8, 1, 1.6], vertical_alignment="center")
        with c_info:
            st.markdown(f"**{r['nome']}**")
            st.caption(f"CPF {format_cpf(r.get('cpf'))}")
        with c_contato:
            st.write(r.get("email") or "—")
            st.caption(format_phone(r.get("telefone_principal")))
        with c_res:
            residentes = r.get("residente") or []
            st.caption("Residentes")
            st.write(", ".join(x["nome"] for x in residentes) or "—")
        with c_status:
            st.markdown(status_badge(r["status_label"]), unsafe_allow_html=True)
        with c_actions:
            a1, a2, a3 = st.columns(3)
            with a1:
                if st.button("✏️", key=f"resp_edit_{r['id']}", help="Editar"):
                    open_form(PREFIX, FORM)
                    responsavel_dialog(repository.find_in(rows, r["id"]))
            with a2:
                if st.button("⏸️" if r.get("status") else "▶️", key=f"resp_toggle_{r['id']}", help="Ativar/Desativar"):
                    novo = not bool(r.get("status"))
                    try:
                        repository.update_row("responsavel", r["id"], {"status": novo})
                    except RemoteError as e:
                        st.error(e.message)
                    else:
                        update_local(ROWS, r["id"], {"status": novo},
                                     f"Responsável {'ativado' if novo else 'desativado'} com sucesso!")
                        st.rerun()
            with a3:
                delete_button(
                    ROWS, "responsavel", r, r["nome"],
                    remove=delete_responsavel,
                    warning="Os residentes vinculados ficarão sem responsável.",
                )

pagination(ROWS, page, pages, len(view))
