from datetime import date, datetime

import streamlit as st

from src import repository
from src.errors import RemoteError
from src.filters import TODOS, equals, search, sort_rows, to_frame
from src.formatters import format_date
from src.helpers import current_user, get_errors, init_state, load_rows, require_role, show_flash, status_badge
from src.records import incident_counts, incident_state
from src.schemas import CATEGORIAS_OCORRENCIA, OcorrenciaSchema, to_record
from ui.crud import (
    delete_button, open_form, page_slice, pagination, residente_options, submit, toolbar, update_local,
)
from ui.forms import as_date, as_time, field_error, seed, select_id
from ui.sidebar import render_sidebar_menu, roles_for

st.set_page_config(page_title="Ocorrências • ILPI", layout="wide")

init_state()
require_role(*roles_for("Ocorrências"))

st.session_state["current_page"] = "Ocorrências"
render_sidebar_menu()

ROWS = "ocorrencias"
FORM = "ocorrencia"
PREFIX = "ocordlg"


def fetch_ocorrencias():
    return repository.fetch_rows(
        "ocorrencia",
        "*, residente(id, nome), funcionario(id, nome)",
        order_by=[("data", True), ("hora", True)],
    )


def funcionario_rows():
    return load_rows(
        "funcionarios_opcoes",
        lambda: repository.fetch_rows("funcionario", "id, nome, email", order_by=[("nome", False)]),
    )


@st.dialog("Ocorrência", width="large")
def ocorrencia_dialog(row: dict | None = None):
    row = row or {}
    errors = get_errors(FORM)

    def k(field):
        return f"{PREFIX}_{field}"

    funcionarios = funcionario_rows()
    # nova ocorrência: quem registra é o funcionário logado, se houver
    eu = next((f["id"] for f in funcionarios if f.get("email") == (current_user() or {}).get("email")), None)

    seed(k("id_residente"), row.get("id_residente"))
    seed(k("id_funcionario"), row.get("id_funcionario") or eu)
    seed(k("categoria"), row.get("categoria") if row.get("categoria") in CATEGORIAS_OCORRENCIA else None)
    seed(k("data"), as_date(row.get("data")) or date.today())
    seed(k("hora"), as_time(row.get("hora")) or datetime.now().time().replace(second=0, microsecond=0))
    for field in ("titulo", "descricao", "providencias"):
        seed(k(field), row.get(field) or "")

    with st.form(f"{PREFIX}_form", border=False):
        c1, c2 = st.columns(2)
        with c1:
            select_id("Residente", residente_options(), key=k("id_residente"), errors=errors, name="id_residente")
        with c2:
            select_id("Funcionário", {f["id"]: f["nome"] for f in funcionarios}, key=k("id_funcionario"),
                      errors=errors, name="id_funcionario")

        st.text_input("Título", key=k("titulo"))
        field_error(errors, "titulo")

        c1, c2, c3 = st.columns(3)
        with c1:
            st.selectbox("Categoria", CATEGORIAS_OCORRENCIA, index=None, placeholder="Selecione", key=k("categoria"))
            field_error(errors, "categoria")
        with c2:
            st.date_input("Data", key=k("data"), format="DD/MM/YYYY")
            field_error(errors, "data")
        with c3:
            st.time_input("Hora", key=k("hora"), step=300)
            field_error(errors, "hora")

        st.text_area("Descrição", key=k("descricao"))
        st.text_area("Providências", key=k("providencias"))

        submitted = st.form_submit_button("Salvar", type="primary", use_container_width=True)

    if not submitted:
        return

    values = {f: st.session_state.get(k(f)) for f in OcorrenciaSchema.model_fields}

    def save(model):
        record = to_record(model)
        if row.get("id"):
            repository.update_row("ocorrencia", row["id"], record)
        else:
            repository.insert_row("ocorrencia", {**record, "resolvido": False})

    submit(FORM, OcorrenciaSchema, values, save,
           "Ocorrência atualizada com sucesso!" if row.get("id") else "Ocorrência registrada com sucesso!",
           ROWS, PREFIX)


# ============================================================
# Lista
# ============================================================

refresh, create = toolbar(ROWS, "📋 Ocorrências", "Nova ocorrência")
show_flash()

if create:
    open_form(PREFIX, FORM)
    ocorrencia_dialog()

rows = load_rows(ROWS, fetch_ocorrencias, force=refresh)
df = to_frame(rows)
if not df.empty:
    df["situacao"] = df["resolvido"].map(lambda v: incident_state({"resolvido": v}))

counts = incident_counts(rows)
m1, m2, m3 = st.columns(3)
m1.metric("Total", counts["total"])
m2.metric("Pendentes", counts["pendentes"])
m3.metric("Resolvidas", counts["resolvidas"])

residentes = residente_options()

with st.container(border=True):
    f1, f2, f3, f4 = st.columns([2, 1.5, 1, 1])
    with f1:
        termo = st.text_input("Buscar", placeholder="Título ou descrição", key="ocor_busca")
    with f2:
        residente = st.selectbox(
            "Residente", [TODOS] + list(residentes),
            format_func=lambda i: "Todos" if i == TODOS else residentes.get(i, str(i)),
            key="ocor_residente",
        )
    with f3:
        categoria = st.selectbox("Categoria", [TODOS] + CATEGORIAS_OCORRENCIA, key="ocor_categoria")
    with f4:
        situacao = st.selectbox("Situação", [TODOS, "pendente", "resolvida"], key="ocor_situacao")

view = search(df, termo, ["titulo", "descricao"])
view = equals(view, "id_residente", residente)
view = equals(view, "categoria", categoria)
view = equals(view, "situacao", situacao)
view = sort_rows(view, [("data", True), ("hora", True)])

page_df, page, pages = page_slice(view, ROWS, (termo, residente, categoria, situacao))

if view.empty:
    st.info("Nenhuma ocorrência encontrada.")

for r in page_df.to_dict("records"):
    with st.container(border=True):
        c_data, c_info, c_res, c_status, c_actions = st.columns([1.2, 3, 1.8, 1, 1.6], vertical_alignment="center")
        with c_data:
            st.markdown(f"**{format_date(r.get('data'))}**")
            st.caption((r.get("hora") or "")[:5])
        with c_info:
            st.markdown(f"**{r.get('titulo') or ''}** • {r.get('categoria') or ''}")
            if r.get("descricao"):
                st.write(r["descricao"])
            if r.get("providencias"):
                st.caption(f"Providências: {r['providencias']}")
        with c_res:
            st.write(r.get("residente_nome") or "—")
            st.caption(f"Registrada por {r.get('funcionario_nome') or '—'}")
        with c_status:
            st.markdown(status_badge(r["situacao"]), unsafe_allow_html=True)
        with c_actions:
            a1, a2, a3 = st.columns(3)
            with a1:
                if st.button("✏️", key=f"ocor_edit_{r['id']}", help="Editar"):
                    open_form(PREFIX, FORM)
                    ocorrencia_dialog(repository.find_in(rows, r["id"]))
            with a2:
                resolvido = bool(r.get("resolvido"))
                if st.button("↩️" if resolvido else "✅", key=f"ocor_toggle_{r['id']}",
                             help="Reabrir" if resolvido else "Marcar como resolvida"):
                    try:
                        repository.update_row("ocorrencia", r["id"], {"resolvido": not resolvido})
                    except RemoteError as e:
                        st.error(e.message)
                    else:
                        update_local(ROWS, r["id"], {"resolvido": not resolvido},
                                     "Ocorrência reaberta." if resolvido else "Ocorrência resolvida.")
                        st.rerun()
            with a3:
                delete_button(ROWS, "ocorrencia", r, r.get("titulo") or "Ocorrência")

pagination(ROWS, page, pages, len(view))
