from datetime import date

import streamlit as st

from src import repository
from src.errors import RemoteError
from src.filters import TODOS, equals, search, sort_rows, to_frame
from src.formatters import format_date
from src.helpers import get_errors, init_state, load_rows, require_role, show_flash, status_badge
from src.records import atividade_residentes, delete_atividade, save_atividade
from src.schemas import CATEGORIAS_ATIVIDADE, STATUS_ATIVIDADE, AtividadeSchema
from ui.crud import (
    delete_button, open_form, page_slice, pagination, residente_options, submit, toolbar, update_local,
)
from ui.forms import as_date, as_time, field_error, seed
from ui.sidebar import render_sidebar_menu, roles_for

st.set_page_config(page_title="Atividades • ILPI", layout="wide")

init_state()
require_role(*roles_for("Atividades"))

st.session_state["current_page"] = "Atividades"
render_sidebar_menu()

ROWS = "atividades"
FORM = "atividade"
PREFIX = "ativdlg"


def fetch_atividades():
    return repository.fetch_rows(
        "atividade",
        "*, atividade_residente(id_residente, residente(id, nome))",
        order_by=[("data", True), ("horario_inicio", False)],
    )


@st.dialog("Atividade", width="large")
def atividade_dialog(row: dict | None = None):
    row = row or {}
    errors = get_errors(FORM)
    residentes = residente_options()

    def k(field):
        return f"{PREFIX}_{field}"

    seed(k("residentes"), [rid for rid in atividade_residentes(row) if rid in residentes])
    seed(k("categoria"), row.get("categoria") if row.get("categoria") in CATEGORIAS_ATIVIDADE else None)
    seed(k("status"), row.get("status") if row.get("status") in STATUS_ATIVIDADE else "agendada")
    seed(k("data"), as_date(row.get("data")) or date.today())
    seed(k("horario_inicio"), as_time(row.get("horario_inicio")))
    seed(k("horario_fim"), as_time(row.get("horario_fim")))
    for field in ("nome", "local", "observacao"):
        seed(k(field), row.get(field) or "")

    with st.form(f"{PREFIX}_form", border=False):
        c1, c2 = st.columns(2)
        with c1:
            st.text_input("Atividade", key=k("nome"))
            field_error(errors, "nome")
        with c2:
            st.selectbox("Categoria", CATEGORIAS_ATIVIDADE, index=None, placeholder="Selecione", key=k("categoria"))
            field_error(errors, "categoria")

        st.multiselect(
            "Residentes",
            list(residentes),
            format_func=lambda i: residentes.get(i, str(i)),
            key=k("residentes"),
            placeholder="Selecione um ou mais",
        )
        field_error(errors, "residentes")

        c1, c2, c3, c4 = st.columns(4)
        with c1:
            st.date_input("Data", key=k("data"), format="DD/MM/YYYY")
            field_error(errors, "data")
        with c2:
            st.time_input("Início", key=k("horario_inicio"), step=300)
            field_error(errors, "horario_inicio")
        with c3:
            st.time_input("Fim", key=k("horario_fim"), step=300)
            field_error(errors, "horario_fim")
        with c4:
            st.selectbox("Status", STATUS_ATIVIDADE, key=k("status"))

        st.text_input("Local", key=k("local"))
        st.text_area("Observação", key=k("observacao"))

        submitted = st.form_submit_button("Salvar", type="primary", use_container_width=True)

    if not submitted:
        return

    values = {f: st.session_state.get(k(f)) for f in AtividadeSchema.model_fields}
    submit(
        FORM, AtividadeSchema, values,
        lambda model: save_atividade(model, row.get("id")),
        "Atividade atualizada com sucesso!" if row.get("id") else "Atividade cadastrada com sucesso!",
        ROWS, PREFIX,
    )


# ============================================================
# Lista
# ============================================================

refresh, create = toolbar(ROWS, "🎨 Atividades", "Nova atividade")
show_flash()

if create:
    open_form(PREFIX, FORM)
    atividade_dialog()

rows = load_rows(ROWS, fetch_atividades, force=refresh)
df = to_frame(rows)

with st.container(border=True):
    f1, f2, f3 = st.columns([2, 1, 1])
    with f1:
        termo = st.text_input("Buscar", placeholder="Atividade ou local", key="ativ_busca")
    with f2:
        categoria = st.selectbox("Categoria", [TODOS] + CATEGORIAS_ATIVIDADE, key="ativ_categoria")
    with f3:
        status = st.selectbox("Status", [TODOS] + STATUS_ATIVIDADE, key="ativ_status")

view = search(df, termo, ["nome", "local"])
view = equals(view, "categoria", categoria)
view = equals(view, "status", status)
view = sort_rows(view, [("data", True), ("horario_inicio", False)])

page_df, page, pages = page_slice(view, ROWS, (termo, categoria, status))

if view.empty:
    st.info("Nenhuma atividade encontrada.")

for r in page_df.to_dict("records"):
    original = repository.find_in(rows, r["id"])
    with st.container(border=True):
        c_data, c_info, c_res, c_status, c_actions = st.columns([1.2, 2.4, 2.2, 1, 1.6], vertical_alignment="center")
        with c_data:
            st.markdown(f"**{format_date(r.get('data'))}**")
            inicio, fim = (r.get("horario_inicio") or "")[:5], (r.get("horario_fim") or "")[:5]
            st.caption(f"{inicio} – {fim}" if fim else inicio)
        with c_info:
            st.markdown(f"**{r['nome']}**")
            st.caption(f"{r.get('categoria') or ''} • {r.get('local') or 'Local não informado'}")
        with c_res:
            nomes = [(link.get("residente") or {}).get("nome", "") for link in original.get("atividade_residente") or []]
            st.write(", ".join(n for n in nomes if n) or "—")
        with c_status:
            st.markdown(status_badge(r.get("status")), unsafe_allow_html=True)
        with c_actions:
            a1, a2, a3 = st.columns(3)
            with a1:
                if st.button("✏️", key=f"ativ_edit_{r['id']}", help="Editar"):
                    open_form(PREFIX, FORM)
                    atividade_dialog(original)
            with a2:
                with st.popover("⚙️", help="Status"):
                    for opcao in STATUS_ATIVIDADE:
                        if st.button(opcao, key=f"ativ_status_{r['id']}_{opcao}", disabled=(opcao == r.get("status"))):
                            try:
                                repository.update_row("atividade", r["id"], {"status": opcao})
                            except RemoteError as e:
                                st.error(e.message)
                            else:
                                update_local(ROWS, r["id"], {"status": opcao}, f"Status alterado para {opcao}.")
                                st.rerun()
            with a3:
                delete_button(ROWS, "atividade", r, r["nome"], remove=delete_atividade)

pagination(ROWS, page, pages, len(view))
