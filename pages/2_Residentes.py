from datetime import date

import streamlit as st

from src import repository
from src.config import get_settings
from src.errors import RemoteError
from src.filters import TODOS, distinct, equals, search, sort_rows, to_frame
from src.formatters import calc_age, format_cpf, format_date
from src.helpers import (
    bool_status, get_errors, init_state, load_rows, require_role, show_flash, status_badge,
)
from src.schemas import ESTADOS_CIVIS, NIVEIS_DEPENDENCIA, SEXOS, ResidenteSchema, to_record
from ui.crud import delete_button, open_form, page_slice, pagination, submit, toolbar, update_local
from ui.forms import as_date, field_error, seed, select_id
from ui.sidebar import PAGES, render_sidebar_menu, roles_for

st.set_page_config(page_title="Residentes • ILPI", layout="wide")

init_state()
require_role(*roles_for("Residentes"))

st.session_state["current_page"] = "Residentes"
render_sidebar_menu()

ROWS = "residentes"
FORM = "residente"
PREFIX = "resdlg"


def fetch_residentes():
    return repository.fetch_rows("residente", "*, responsavel(id, nome)", order_by=[("nome", False)])


def fetch_responsaveis():
    return repository.fetch_rows("responsavel", "id, nome, cpf", order_by=[("nome", False)])


# ============================================================
# Modal de cadastro / edição
# ============================================================

@st.dialog("Residente", width="large")
def residente_dialog(row: dict | None = None):
    row = row or {}
    errors = get_errors(FORM)

    def k(field):
        return f"{PREFIX}_{field}"

    seed(k("nome"), row.get("nome", ""))
    seed(k("cpf"), format_cpf(row.get("cpf")))
    seed(k("data_nascimento"), as_date(row.get("data_nascimento")))
    seed(k("data_admissao"), as_date(row.get("data_admissao")) or date.today())
    seed(k("sexo"), row.get("sexo") if row.get("sexo") in SEXOS else None)
    seed(k("estado_civil"), row.get("estado_civil") if row.get("estado_civil") in ESTADOS_CIVIS else None)
    seed(k("dependencia"), row.get("dependencia") if row.get("dependencia") in NIVEIS_DEPENDENCIA else None)
    seed(k("id_responsavel"), row.get("id_responsavel"))
    for field in ("naturalidade", "quarto", "plano_saude", "numero_carteirinha", "observacoes",
                  "responsavel_parentesco", "foto"):
        seed(k(field), row.get(field) or "")

    responsaveis = load_rows("responsaveis_opcoes", fetch_responsaveis)
    options = {r["id"]: f"{r['nome']} • {format_cpf(r.get('cpf'))}" for r in responsaveis}

    with st.form(f"{PREFIX}_form", border=False):
        c1, c2 = st.columns(2)
        with c1:
            st.text_input("Nome completo", key=k("nome"))
            field_error(errors, "nome")
            st.date_input("Data de nascimento", key=k("data_nascimento"), min_value=date(1900, 1, 1),
                          max_value=date.today(), format="DD/MM/YYYY")
            field_error(errors, "data_nascimento")
            st.selectbox("Sexo", SEXOS, index=None, placeholder="Selecione", key=k("sexo"))
            st.text_input("Naturalidade", key=k("naturalidade"))
            st.text_input("Quarto", key=k("quarto"))
            st.text_input("Plano de saúde", key=k("plano_saude"))
        with c2:
            st.text_input("CPF", key=k("cpf"), placeholder="000.000.000-00")
            field_error(errors, "cpf")
            st.date_input("Data de admissão", key=k("data_admissao"), format="DD/MM/YYYY")
            field_error(errors, "data_admissao")
            st.selectbox("Estado civil", ESTADOS_CIVIS, index=None, placeholder="Selecione", key=k("estado_civil"))
            st.selectbox("Grau de dependência", NIVEIS_DEPENDENCIA, index=None, placeholder="Selecione",
                         key=k("dependencia"))
            st.text_input("Número da carteirinha", key=k("numero_carteirinha"))
            st.text_input("URL da foto", key=k("foto"), placeholder="https://…")
            field_error(errors, "foto")

        c3, c4 = st.columns(2)
        with c3:
            select_id("Responsável", options, key=k("id_responsavel"), errors=errors, name="id_responsavel")
        with c4:
            st.text_input("Parentesco com o responsável", key=k("responsavel_parentesco"))

        foto = st.file_uploader("Foto de perfil (PNG/JPEG, até 5MB)", type=["png", "jpg", "jpeg"], key=k("upload"))
        st.text_area("Observações", key=k("observacoes"))

        submitted = st.form_submit_button("Salvar", type="primary", use_container_width=True)

    if not submitted:
        return

    values = {f: st.session_state.get(k(f)) for f in ResidenteSchema.model_fields}

    if foto is not None:
        problem = repository.check_image(foto.type, foto.size)
        if problem:
            st.error(problem)
            return
        try:
            values["foto"] = repository.upload_photo(get_settings().photo_bucket, foto.name, foto.getvalue(), foto.type)
        except RemoteError as e:
            st.error(e.message)
            return

    def save(model):
        record = to_record(model)
        if row.get("id"):
            repository.update_row("residente", row["id"], record)
        else:
            repository.insert_row("residente", {**record, "status": True})

    submit(FORM, ResidenteSchema, values, save,
           "Residente atualizado com sucesso!" if row.get("id") else "Residente cadastrado com sucesso!",
           ROWS, PREFIX)


# ============================================================
# Lista
# ============================================================

refresh, create = toolbar(ROWS, "👵 Residentes", "Novo residente")
show_flash()

if create:
    open_form(PREFIX, FORM)
    residente_dialog()

rows = load_rows(ROWS, fetch_residentes, force=refresh)
df = to_frame(rows)
if not df.empty:
    df["status_label"] = df["status"].map(bool_status)

with st.container(border=True):
    f1, f2, f3 = st.columns([2, 1, 1])
    with f1:
        termo = st.text_input("Buscar", placeholder="Nome, quarto ou responsável", key="res_busca")
    with f2:
        status = st.selectbox("Status", [TODOS, "ativo", "inativo"], key="res_status")
    with f3:
        dependencia = st.selectbox("Dependência", [TODOS] + distinct(df, "dependencia"), key="res_dep")

view = search(df, termo, ["nome", "quarto", "responsavel_nome"])
view = equals(view, "status_label", status)
view = equals(view, "dependencia", dependencia)
view = sort_rows(view, [("nome", False)])

page_df, page, pages = page_slice(view, ROWS, (termo, status, dependencia))

if view.empty:
    st.info("Nenhum residente encontrado.")

for r in page_df.to_dict("records"):
    with st.container(border=True):
        c_foto, c_info, c_resp, c_status, c_actions = st.columns([0.6, 2.2, 1.8, 1, 1.6], vertical_alignment="center")
        with c_foto:
            if isinstance(r.get("foto"), str) and r["foto"]:
                st.image(r["foto"], width=56)
            else:
                st.markdown("### 👤")
        with c_info:
            idade = calc_age(r.get("data_nascimento"))
            st.markdown(f"**{r['nome']}**")
            st.caption(
                f"{idade if idade is not None else '—'} anos • Quarto {r.get('quarto') or '—'} • "
                f"Admissão {format_date(r.get('data_admissao'))}"
            )
        with c_resp:
            st.caption("Responsável")
            st.write(r.get("responsavel_nome") or "—")
        with c_status:
            st.markdown(status_badge(r["status_label"]), unsafe_allow_html=True)
        with c_actions:
            a1, a2, a3, a4 = st.columns(4)
            with a1:
                if st.button("✏️", key=f"res_edit_{r['id']}", help="Editar"):
                    open_form(PREFIX, FORM)
                    residente_dialog(repository.find_in(rows, r["id"]))
            with a2:
                label = "⏸️" if r.get("status") else "▶️"
                if st.button(label, key=f"res_toggle_{r['id']}", help="Ativar/Desativar"):
                    novo = not bool(r.get("status"))
                    try:
                        repository.update_row("residente", r["id"], {"status": novo})
                    except RemoteError as e:
                        st.error(e.message)
                    else:
                        update_local(ROWS, r["id"], {"status": novo},
                                     f"Residente {'ativado' if novo else 'desativado'} com sucesso!")
                        st.rerun()
            with a3:
                if st.button("📋", key=f"res_record_{r['id']}", help="Prontuário"):
                    st.session_state["prontuario_residente"] = r["id"]
                    st.session_state["current_page"] = "Prontuário"
                    st.switch_page(PAGES["Prontuário"][0])
            with a4:
                delete_button(ROWS, "residente", r, r["nome"])

pagination(ROWS, page, pages, len(view))
