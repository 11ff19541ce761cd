import streamlit as st

from src import repository
from src.filters import TODOS, equals, search, sort_rows, to_frame
from src.helpers import get_errors, init_state, load_rows, require_role, show_flash
from src.schemas import TIPOS_PREFERENCIA, PreferenciaSchema, to_record
from ui.crud import delete_button, open_form, page_slice, pagination, residente_options, submit, toolbar
from ui.forms import field_error, seed, select_id
from ui.sidebar import render_sidebar_menu, roles_for

st.set_page_config(page_title="Preferências • ILPI", layout="wide")

init_state()
require_role(*roles_for("Preferências"))

st.session_state["current_page"] = "Preferências"
render_sidebar_menu()

ROWS = "preferencias"
FORM = "preferencia"
PREFIX = "prefdlg"


def fetch_preferencias():
    return repository.fetch_rows("preferencia", "*, residente(id, nome)", order_by=[("id", True)])


@st.dialog("Preferência")
def preferencia_dialog(row: dict | None = None):
    row = row or {}
    errors = get_errors(FORM)

    def k(field):
        return f"{PREFIX}_{field}"

    seed(k("id_residente"), row.get("id_residente"))
    seed(k("tipo_preferencia"), row.get("tipo_preferencia") if row.get("tipo_preferencia") in TIPOS_PREFERENCIA else None)
    for field in ("titulo", "descricao", "foto_url"):
        seed(k(field), row.get(field) or "")

    with st.form(f"{PREFIX}_form", border=False):
        select_id("Residente", residente_options(), key=k("id_residente"), errors=errors, name="id_residente")
        st.selectbox("Categoria", TIPOS_PREFERENCIA, index=None, placeholder="Selecione", key=k("tipo_preferencia"))
        field_error(errors, "tipo_preferencia")
        st.text_input("Título", key=k("titulo"))
        field_error(errors, "titulo")
        st.text_area("Descrição", key=k("descricao"))
        field_error(errors, "descricao")
        st.text_input("URL da foto (opcional)", key=k("foto_url"))

        submitted = st.form_submit_button("Salvar", type="primary", use_container_width=True)

    if not submitted:
        return

    values = {f: st.session_state.get(k(f)) for f in PreferenciaSchema.model_fields}

    def save(model):
        record = to_record(model)
        if row.get("id"):
            repository.update_row("preferencia", row["id"], record)
        else:
            repository.insert_row("preferencia", record)

    submit(FORM, PreferenciaSchema, values, save,
           "Preferência atualizada com sucesso!" if row.get("id") else "Preferência cadastrada com sucesso!",
           ROWS, PREFIX)


# ============================================================
# Lista
# ============================================================

refresh, create = toolbar(ROWS, "⭐ Preferências", "Nova preferência")
show_flash()

if create:
    open_form(PREFIX, FORM)
    preferencia_dialog()

rows = load_rows(ROWS, fetch_preferencias, force=refresh)
df = to_frame(rows)
residentes = residente_options()

with st.container(border=True):
    f1, f2, f3 = st.columns([2, 1.5, 1])
    with f1:
        termo = st.text_input("Buscar", placeholder="Título ou descrição", key="pref_busca")
    with f2:
        residente = st.selectbox(
            "Residente", [TODOS] + list(residentes),
            format_func=lambda i: "Todos" if i == TODOS else residentes.get(i, str(i)),
            key="pref_residente",
        )
    with f3:
        tipo = st.selectbox("Categoria", [TODOS] + TIPOS_PREFERENCIA, key="pref_tipo")

view = search(df, termo, ["titulo", "descricao"])
view = equals(view, "id_residente", residente)
view = equals(view, "tipo_preferencia", tipo)
view = sort_rows(view, [("residente_nome", False), ("titulo", False)])

page_df, page, pages = page_slice(view, ROWS, (termo, residente, tipo))

if view.empty:
    st.info("Nenhuma preferência encontrada.")

for r in page_df.to_dict("records"):
    with st.container(border=True):
        c_foto, c_info, c_res, c_actions = st.columns([0.6, 3.2, 1.8, 1], vertical_alignment="center")
        with c_foto:
            if r.get("foto_url"):
                st.image(r["foto_url"], width=56)
            else:
                st.markdown("### ⭐")
        with c_info:
            st.markdown(f"**{r['titulo']}** • {r.get('tipo_preferencia') or ''}")
            st.write(r.get("descricao") or "")
        with c_res:
            st.write(r.get("residente_nome") or "—")
        with c_actions:
            a1, a2 = st.columns(2)
            with a1:
                if st.button("✏️", key=f"pref_edit_{r['id']}", help="Editar"):
                    open_form(PREFIX, FORM)
                    preferencia_dialog(repository.find_in(rows, r["id"]))
            with a2:
                delete_button(ROWS, "preferencia", r, r["titulo"])

pagination(ROWS, page, pages, len(view))
