import pandas as pd
import streamlit as st

from src.auth import ROLE_RESPONSAVEL
from src.errors import RemoteError
from src.family import (
    CONSULTAS_FUTURAS, CONSULTAS_TODAS, filter_incidents, guardian_residents, load_family, load_record,
    record_consultas,
)
from src.formatters import calc_age, format_date
from src.helpers import bool_status, get_rows, init_state, require_role, set_rows, show_flash, status_badge
from src.profile import load_profile
from ui.crud import residente_options
from ui.sidebar import render_sidebar_menu, roles_for

st.set_page_config(page_title="Prontuário • ILPI", layout="wide")

init_state()
user = require_role(*roles_for("Prontuário"))

st.session_state["current_page"] = "Prontuário"
render_sidebar_menu()

st.title("📋 Prontuário")
show_flash()


def allowed_residents() -> dict:
    """{id: nome} que o usuário pode abrir: equipe vê todos, responsável só os seus."""
    if user["role"] != ROLE_RESPONSAVEL:
        return residente_options()
    if "perfil" not in st.session_state:
        st.session_state["perfil"] = load_profile(user["email"], user["role"])
    id_responsavel = ((st.session_state["perfil"] or {}).get("pessoa") or {}).get("id")
    if not id_responsavel:
        return {}
    if "rows_familia" not in st.session_state:
        set_rows("familia", load_family(id_responsavel))
    items = get_rows("familia")
    return {r["id"]: r["nome"] for r in guardian_residents(items)}


try:
    options = allowed_residents()
except RemoteError as e:
    st.error(e.message)
    st.stop()

if not options:
    st.info("Nenhum residente selecionado")
    st.stop()

selected = st.session_state.get("prontuario_residente")
if selected not in options:
    selected = None

id_residente = st.selectbox(
    "Residente",
    list(options),
    index=list(options).index(selected) if selected is not None else None,
    format_func=lambda i: options[i],
    placeholder="Selecione um residente",
)
if id_residente is None:
    st.info("Nenhum residente selecionado")
    st.stop()
st.session_state["prontuario_residente"] = id_residente

try:
    # recarrega ao trocar de residente
    if st.session_state.get("prontuario_carregado") != id_residente:
        st.session_state["prontuario"] = load_record(id_residente)
        st.session_state["prontuario_carregado"] = id_residente
    record = st.session_state["prontuario"]
except RemoteError as e:
    st.error(e.message)
    st.stop()

residente = record.get("residente") or {}
if not residente:
    st.warning("Residente não encontrado.")
    st.stop()


def hora(value) -> str:
    return (value or "")[:5]


def table(rows: list[dict], columns: dict, empty: str):
    """Tabela somente leitura com as colunas renomeadas."""
    if not rows:
        st.caption(empty)
        return
    df = pd.DataFrame(rows)
    cols = [c for c in columns if c in df.columns]
    st.dataframe(df[cols].rename(columns=columns), hide_index=True, use_container_width=True)


# ----------------------------
# Cabeçalho
# ----------------------------
with st.container(border=True):
    c_foto, c_info, c_status = st.columns([0.8, 4, 1], vertical_alignment="center")
    with c_foto:
        if residente.get("foto"):
            st.image(residente["foto"], width=90)
        else:
            st.markdown("## 👤")
    with c_info:
        st.markdown(f"### {residente.get('nome')}")
        idade = calc_age(residente.get("data_nascimento"))
        st.caption(
            f"{f'{idade} anos • ' if idade is not None else ''}Quarto {residente.get('quarto') or '—'} • "
            f"Dependência {residente.get('dependencia') or '—'}"
        )
    with c_status:
        st.markdown(status_badge(bool_status(residente.get("status"))), unsafe_allow_html=True)

saude, rotina, historico, pessoal = st.tabs(["Saúde", "Rotina", "Histórico", "Pessoal"])

with saude:
    st.subheader("Medicamentos")
    table(record.get("medicamentos") or [], {
        "nome": "Medicamento", "dosagem": "Dosagem", "dose": "Dose", "data_inicio": "Início",
        "data_fim": "Fim", "horario_inicio": "Horário", "intervalo_horas": "Intervalo (h)", "status": "Status",
    }, "Nenhum medicamento cadastrado.")

    h, m = st.columns([3, 2], vertical_alignment="bottom")
    with h:
        st.subheader("Consultas")
    with m:
        modo = st.radio(
            "Mostrar", [CONSULTAS_FUTURAS, CONSULTAS_TODAS], horizontal=True, key="pront_consultas",
            format_func=lambda v: "Futuras" if v == CONSULTAS_FUTURAS else "Todas",
        )
    consultas = record_consultas(record.get("consultas"), modo)
    for c in consultas:
        with st.container(border=True):
            st.markdown(f"🩺 **{format_date(c.get('data_consulta'))} {hora(c.get('horario'))}** • {c.get('medico') or ''}")
            if c.get("motivo"):
                st.caption(c["motivo"])
            if c.get("tratamento_indicado"):
                st.write(f"Tratamento: {c['tratamento_indicado']}")
    if not consultas:
        st.caption("Nenhuma consulta agendada." if modo == CONSULTAS_FUTURAS else "Nenhuma consulta registrada.")

    st.subheader("Exames")
    table(record.get("exames") or [], {
        "tipo": "Exame", "laboratorio": "Laboratório", "data_prevista": "Data", "horario_previsto": "Horário",
        "status": "Status",
    }, "Nenhum exame registrado.")

with rotina:
    st.subheader("Atividades")
    table(record.get("atividades") or [], {
        "nome": "Atividade", "categoria": "Categoria", "data": "Data", "horario_inicio": "Início",
        "horario_fim": "Fim", "local": "Local",
    }, "Nenhuma atividade registrada.")

    st.subheader("Preferências")
    prefs = record.get("preferencias") or []
    if not prefs:
        st.caption("Nenhuma preferência registrada.")
    for p in prefs:
        st.markdown(f"**{p.get('titulo')}** · {p.get('tipo_de_preferencia') or ''}")
        if p.get("descricao"):
            st.caption(p["descricao"])

with historico:
    st.subheader("Ocorrências")
    termo = st.text_input("Buscar", placeholder="Título ou descrição", key="pront_ocorrencias_busca")
    ocorrencias = filter_incidents(record.get("ocorrencias"), termo)
    if not ocorrencias:
        st.caption("Nenhuma ocorrência encontrada.")
    for o in ocorrencias:
        state = "resolvida" if (o.get("resolvido") or o.get("status")) else "pendente"
        with st.container(border=True):
            st.markdown(
                f"**{o.get('titulo') or o.get('categoria') or 'Ocorrência'}** {status_badge(state)}",
                unsafe_allow_html=True,
            )
            st.caption(f"{format_date(o.get('data'))} {hora(o.get('hora') or o.get('horario'))}")
            st.write(o.get("descricao") or "")

with pessoal:
    c1, c2 = st.columns(2)
    with c1:
        st.text_input("Data de nascimento", format_date(residente.get("data_nascimento")), disabled=True)
        st.text_input("Quarto", residente.get("quarto") or "", disabled=True)
        st.text_input("Dependência", residente.get("dependencia") or "", disabled=True)
    with c2:
        st.text_input("Plano de saúde", residente.get("plano_saude") or "", disabled=True)
        st.text_input("Carteirinha", residente.get("numero_carteirinha") or "", disabled=True)
    st.text_area("Observações", residente.get("observacoes") or "", disabled=True)
