from datetime import date

import streamlit as st

from src import repository
from src.filters import TODOS, equals, search, sort_rows, to_frame
from src.formatters import format_date
from src.helpers import get_errors, init_state, load_rows, require_role, show_flash
from src.schemas import ConsultaSchema, to_record
from ui.crud import delete_button, open_form, page_slice, pagination, residente_options, submit, toolbar
from ui.forms import as_date, as_time, field_error, seed, select_id
from ui.sidebar import render_sidebar_menu, roles_for

st.set_page_config(page_title="Consultas • ILPI", layout="wide")

init_state()
require_role(*roles_for("Consultas"))

st.session_state["current_page"] = "Consultas"
render_sidebar_menu()

ROWS = "consultas"
FORM = "consulta"
PREFIX = "consdlg"


def fetch_consultas():
    return repository.fetch_rows(
        "consulta",
        "*, residente(id, nome)",
        order_by=[("data_consulta", True), ("horario", False)],
    )


@st.dialog("Consulta", width="large")
def consulta_dialog(row: dict | None = None):
    row = row or {}
    errors = get_errors(FORM)

    def k(field):
        return f"{PREFIX}_{field}"

    seed(k("id_residente"), row.get("id_residente"))
    seed(k("data_consulta"), as_date(row.get("data_consulta")) or date.today())
    seed(k("horario"), as_time(row.get("horario")))
    for field in ("medico", "motivo_consulta", "tratamento_indicado", "observacao"):
        seed(k(field), row.get(field) or "")

    with st.form(f"{PREFIX}_form", border=False):
        select_id("Residente", residente_options(), key=k("id_residente"), errors=errors, name="id_residente")

        c1, c2, c3 = st.columns(3)
        with c1:
            st.date_input("Data", key=k("data_consulta"), format="DD/MM/YYYY")
            field_error(errors, "data_consulta")
        with c2:
            st.time_input("Horário", key=k("horario"), step=300)
            field_error(errors, "horario")
        with c3:
            st.text_input("Médico", key=k("medico"))
            field_error(errors, "medico")

        st.text_input("Motivo da consulta", key=k("motivo_consulta"))
        field_error(errors, "motivo_consulta")
        st.text_area("Tratamento indicado", key=k("tratamento_indicado"))
        st.text_area("Observação", key=k("observacao"))

        submitted = st.form_submit_button("Salvar", type="primary", use_container_width=True)

    if not submitted:
        return

    values = {f: st.session_state.get(k(f)) for f in ConsultaSchema.model_fields}

    def save(model):
        record = to_record(model)
        if row.get("id"):
            repository.update_row("consulta", row["id"], record)
        else:
            repository.insert_row("consulta", record)

    submit(FORM, ConsultaSchema, values, save,
           "Consulta atualizada com sucesso!" if row.get("id") else "Consulta registrada com sucesso!",
           ROWS, PREFIX)


# ============================================================
# Lista
# ============================================================

refresh, create = toolbar(ROWS, "🩺 Consultas", "Nova consulta")
show_flash()

if create:
    open_form(PREFIX, FORM)
    consulta_dialog()

rows = load_rows(ROWS, fetch_consultas, force=refresh)
df = to_frame(rows)
residentes = residente_options()

with st.container(border=True):
    f1, f2 = st.columns([2, 1.5])
    with f1:
        termo = st.text_input("Buscar", placeholder="Médico ou motivo", key="cons_busca")
    with f2:
        residente = st.selectbox(
            "Residente", [TODOS] + list(residentes),
            format_func=lambda i: "Todos" if i == TODOS else residentes.get(i, str(i)),
            key="cons_residente",
        )

view = search(df, termo, ["medico", "motivo_consulta"])
view = equals(view, "id_residente", residente)
# mais recentes primeiro; no mesmo dia, pela hora
view = sort_rows(view, [("data_consulta", True), ("horario", False)])

page_df, page, pages = page_slice(view, ROWS, (termo, residente))

if view.empty:
    st.info("Nenhuma consulta encontrada.")

for r in page_df.to_dict("records"):
    with st.container(border=True):
        c_data, c_info, c_res, c_actions = st.columns([1.2, 3, 1.8, 1], vertical_alignment="center")
        with c_data:
            st.markdown(f"**{format_date(r.get('data_consulta'))}**")
            st.caption((r.get("horario") or "")[:5])
        with c_info:
            st.markdown(f"**{r.get('motivo_consulta') or ''}**")
            st.caption(f"Dr(a). {r.get('medico') or '—'}")
            if r.get("tratamento_indicado"):
                st.write(r["tratamento_indicado"])
        with c_res:
            st.write(r.get("residente_nome") or "—")
        with c_actions:
            a1, a2 = st.columns(2)
            with a1:
                if st.button("✏️", key=f"cons_edit_{r['id']}", help="Editar"):
                    open_form(PREFIX, FORM)
                    consulta_dialog(repository.find_in(rows, r["id"]))
            with a2:
                delete_button(ROWS, "consulta", r, f"Consulta de {format_date(r.get('data_consulta'))}")

pagination(ROWS, page, pages, len(view))
