from datetime import date

import streamlit as st

from src import repository
from src.errors import RemoteError
from src.filters import TODOS, equals, search, sort_rows, to_frame
from src.formatters import format_date
from src.helpers import get_errors, init_state, load_rows, require_role, show_flash, status_badge
from src.schemas import RECORRENCIAS, STATUS_MEDICAMENTO, MedicamentoSchema, to_record
from ui.crud import (
    delete_button, open_form, page_slice, pagination, residente_options, submit, toolbar, update_local,
)
from ui.forms import as_date, as_time, field_error, seed, select_id
from ui.sidebar import render_sidebar_menu, roles_for

st.set_page_config(page_title="Medicamentos • ILPI", layout="wide")

init_state()
require_role(*roles_for("Medicamentos"))

st.session_state["current_page"] = "Medicamentos"
render_sidebar_menu()

ROWS = "medicamentos"
FORM = "medicamento"
PREFIX = "meddlg"


def fetch_medicamentos():
    return repository.fetch_rows(
        "medicamento",
        "*, residente(id, nome)",
        order_by=[("data_inicio", True), ("horario_inicio", False)],
    )


@st.dialog("Medicamento", width="large")
def medicamento_dialog(row: dict | None = None):
    row = row or {}
    errors = get_errors(FORM)

    def k(field):
        return f"{PREFIX}_{field}"

    seed(k("id_residente"), row.get("id_residente"))
    seed(k("data_inicio"), as_date(row.get("data_inicio")) or date.today())
    seed(k("data_fim"), as_date(row.get("data_fim")))
    seed(k("horario_inicio"), as_time(row.get("horario_inicio")))
    seed(k("recorrencia"), row.get("recorrencia") if row.get("recorrencia") in RECORRENCIAS else "unico")
    seed(k("intervalo"), int(row.get("intervalo") or 1))
    for field in ("nome", "dosagem", "dose", "efeitos_colaterais", "observacao", "saude_relacionada"):
        seed(k(field), row.get(field) or "")

    with st.form(f"{PREFIX}_form", border=False):
        select_id("Residente", residente_options(), key=k("id_residente"), errors=errors, name="id_residente")

        c1, c2, c3 = st.columns(3)
        with c1:
            st.text_input("Medicamento", key=k("nome"))
            field_error(errors, "nome")
        with c2:
            st.text_input("Dosagem", key=k("dosagem"), placeholder="500mg")
            field_error(errors, "dosagem")
        with c3:
            st.text_input("Dose", key=k("dose"), placeholder="1 comprimido")
            field_error(errors, "dose")

        c1, c2, c3 = st.columns(3)
        with c1:
            st.date_input("Início", key=k("data_inicio"), format="DD/MM/YYYY")
            field_error(errors, "data_inicio")
        with c2:
            st.time_input("Horário de início", key=k("horario_inicio"), step=300)
            field_error(errors, "horario_inicio")
        with c3:
            st.date_input("Fim (opcional)", key=k("data_fim"), format="DD/MM/YYYY")

        c1, c2 = st.columns(2)
        with c1:
            st.selectbox("Recorrência", list(RECORRENCIAS), format_func=RECORRENCIAS.get, key=k("recorrencia"))
            field_error(errors, "recorrencia")
        with c2:
            st.number_input("A cada (intervalo)", min_value=1, step=1, key=k("intervalo"))
            field_error(errors, "intervalo")

        st.text_input("Condição de saúde relacionada", key=k("saude_relacionada"))
        st.text_area("Efeitos colaterais", key=k("efeitos_colaterais"))
        st.text_area("Observação", key=k("observacao"))

        submitted = st.form_submit_button("Salvar", type="primary", use_container_width=True)

    if not submitted:
        return

    values = {f: st.session_state.get(k(f)) for f in MedicamentoSchema.model_fields}

    def save(model):
        record = to_record(model, exclude={"foto"})
        if row.get("id"):
            repository.update_row("medicamento", row["id"], record)
        else:
            repository.insert_row("medicamento", {**record, "status": "ativo"})

    submit(FORM, MedicamentoSchema, values, save,
           "Medicamento atualizado com sucesso!" if row.get("id") else "Medicamento cadastrado com sucesso!",
           ROWS, PREFIX)


# ============================================================
# Lista
# ============================================================

refresh, create = toolbar(ROWS, "💊 Medicamentos", "Novo medicamento")
show_flash()

if create:
    open_form(PREFIX, FORM)
    medicamento_dialog()

rows = load_rows(ROWS, fetch_medicamentos, force=refresh)
df = to_frame(rows)
residentes = residente_options()

with st.container(border=True):
    f1, f2, f3 = st.columns([2, 1.5, 1])
    with f1:
        termo = st.text_input("Buscar", placeholder="Medicamento ou condição", key="med_busca")
    with f2:
        residente = st.selectbox(
            "Residente", [TODOS] + list(residentes),
            format_func=lambda i: "Todos" if i == TODOS else residentes.get(i, str(i)),
            key="med_residente",
        )
    with f3:
        status = st.selectbox("Status", [TODOS] + STATUS_MEDICAMENTO, key="med_status")

view = search(df, termo, ["nome", "saude_relacionada"])
view = equals(view, "id_residente", residente)
view = equals(view, "status", status)
view = sort_rows(view, [("residente_nome", False), ("horario_inicio", False)])

page_df, page, pages = page_slice(view, ROWS, (termo, residente, status))

if view.empty:
    st.info("Nenhum medicamento encontrado.")

for r in page_df.to_dict("records"):
    with st.container(border=True):
        c_info, c_res, c_horario, c_status, c_actions = st.columns([2.2, 1.8, 1.8, 1, 1.6], vertical_alignment="center")
        with c_info:
            st.markdown(f"**{r['nome']}** • {r.get('dosagem') or ''}")
            st.caption(f"Dose: {r.get('dose') or '—'}")
        with c_res:
            st.write(r.get("residente_nome") or "—")
        with c_horario:
            recorrencia = RECORRENCIAS.get(r.get("recorrencia"), r.get("recorrencia") or "")
            intervalo = r.get("intervalo")
            st.write(f"{(r.get('horario_inicio') or '')[:5]} • {recorrencia}" + (f" ({intervalo})" if intervalo else ""))
            st.caption(f"{format_date(r.get('data_inicio'))} até {format_date(r.get('data_fim')) or '—'}")
        with c_status:
            st.markdown(status_badge(r.get("status")), unsafe_allow_html=True)
        with c_actions:
            a1, a2, a3 = st.columns(3)
            with a1:
                if st.button("✏️", key=f"med_edit_{r['id']}", help="Editar"):
                    open_form(PREFIX, FORM)
                    medicamento_dialog(repository.find_in(rows, r["id"]))
            with a2:
                with st.popover("⚙️", help="Status"):
                    for opcao in STATUS_MEDICAMENTO:
                        if st.button(opcao, key=f"med_status_{r['id']}_{opcao}", disabled=(opcao == r.get("status"))):
                            try:
                                repository.update_row("medicamento", r["id"], {"status": opcao})
                            except RemoteError as e:
                                st.error(e.message)
                            else:
                                update_local(ROWS, r["id"], {"status": opcao}, f"Status alterado para {opcao}.")
                                st.rerun()
            with a3:
                delete_button(ROWS, "medicamento", r, r["nome"])

pagination(ROWS, page, pages, len(view))
