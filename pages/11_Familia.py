import streamlit as st

from src.errors import RemoteError
from src.family import flatten, from_today, load_family, next_medication, step
from src.formatters import calc_age, format_date, format_date_long
from src.helpers import get_rows, init_state, require_role, set_rows, show_flash, status_badge
from src.profile import load_profile
from ui.sidebar import PAGES, render_sidebar_menu, roles_for

st.set_page_config(page_title="Meus familiares • ILPI", layout="wide")

init_state()
user = require_role(*roles_for("Meus familiares"))

st.session_state["current_page"] = "Meus familiares"
render_sidebar_menu()

st.title("👪 Meus familiares")
st.caption(format_date_long())
show_flash()

try:
    if "perfil" not in st.session_state:
        st.session_state["perfil"] = load_profile(user["email"], user["role"])
    id_responsavel = ((st.session_state["perfil"] or {}).get("pessoa") or {}).get("id")
    if not id_responsavel:
        st.warning("Nenhum residente vinculado.")
        st.stop()
    if "rows_familia" not in st.session_state:
        set_rows("familia", load_family(id_responsavel))
    items = get_rows("familia")
except RemoteError as e:
    st.error("Erro ao carregar dados.")
    st.caption(e.detail or e.message)
    st.stop()

if not items:
    st.info("Nenhum residente vinculado.")
    st.stop()


def hora(value) -> str:
    return (value or "")[:5]


def open_record(id_residente: int):
    st.session_state["prontuario_residente"] = id_residente
    st.session_state["current_page"] = "Prontuário"
    st.switch_page(PAGES["Prontuário"][0])


def schedule(consultas: list[dict], exames: list[dict], show_name: bool):
    st.subheader("Próximas consultas e exames")
    if not consultas and not exames:
        st.caption("Nada agendado a partir de hoje.")
    for c in consultas:
        who = f" • {c['nome_residente']}" if show_name else ""
        st.markdown(
            f"🩺 **{format_date(c.get('data_consulta'))} {hora(c.get('horario'))}** • "
            f"{c.get('medico') or 'Consulta'}{who}"
        )
        if c.get("motivo"):
            st.caption(c["motivo"])
    for e in exames:
        who = f" • {e['nome_residente']}" if show_name else ""
        st.markdown(
            f"🧪 **{format_date(e.get('data_prevista'))} {hora(e.get('horario_previsto'))}** • "
            f"{e.get('tipo') or 'Exame'}{who} {status_badge(e.get('status'))}",
            unsafe_allow_html=True,
        )


def incidents(rows: list[dict], show_name: bool):
    st.subheader("Ocorrências de hoje")
    if not rows:
        st.caption("Nenhuma ocorrência registrada hoje.")
    for o in rows:
        who = f" • {o['nome_residente']}" if show_name else ""
        state = "resolvida" if o.get("status") else "pendente"
        with st.container(border=True):
            st.markdown(f"**{o.get('titulo') or 'Ocorrência'}**{who} {status_badge(state)}", unsafe_allow_html=True)
            st.caption(f"{hora(o.get('horario'))} • {o.get('descricao') or ''}")
            if o.get("providencias"):
                st.write(f"Providências: {o['providencias']}")


def activities(rows: list[dict], show_name: bool):
    st.subheader("Atividades de hoje")
    if not rows:
        st.caption("Nenhuma atividade programada.")
    for a in rows:
        who = f" • {a['nome_residente']}" if show_name else ""
        st.markdown(f"🕒 **{hora(a.get('horario_inicio'))}** {a.get('nome') or a.get('titulo') or ''}{who}")


view = st.radio(
    "Visão", ["familiar", "casa"], horizontal=True, key="familia_visao",
    format_func=lambda v: "Por residente" if v == "familiar" else "Todos juntos",
)

# ============================================================
# Visão "casa": todos os residentes juntos
# ============================================================

if view == "casa":
    st.subheader("Próximos medicamentos")
    for item in items:
        proximo = next_medication(item)
        nome = item["residente"]["nome"]
        if proximo:
            st.markdown(f"💊 **{nome}**: {proximo['nome_medicamento']} às {hora(proximo['horario_previsto'])}")
        else:
            st.markdown(f"💊 **{nome}**: nenhuma dose pendente hoje")

    col_a, col_b = st.columns(2)
    with col_a:
        incidents(flatten(items, "ocorrencias_dia"), show_name=True)
    with col_b:
        activities(flatten(items, "atividades_dia"), show_name=True)
    schedule(
        from_today(flatten(items, "consultas_semana"), "data_consulta"),
        from_today(flatten(items, "exames_semana"), "data_prevista"),
        show_name=True,
    )
    st.stop()

# ============================================================
# Visão "familiar": um residente por vez
# ============================================================

index = min(st.session_state.get("familia_idx", 0), len(items) - 1)
item = items[index]
residente = item["residente"]

if len(items) > 1:
    prev, info, nxt = st.columns([1, 4, 1], vertical_alignment="center")
    with prev:
        if st.button("◀", key="familia_prev", use_container_width=True):
            st.session_state["familia_idx"] = step(items, index, -1)
            st.rerun()
    with info:
        st.caption(f"{index + 1} de {len(items)}")
    with nxt:
        if st.button("▶", key="familia_next", use_container_width=True):
            st.session_state["familia_idx"] = step(items, index, 1)
            st.rerun()

with st.container(border=True):
    c_foto, c_info, c_btn = st.columns([0.8, 4, 1.2], vertical_alignment="center")
    with c_foto:
        if residente.get("foto"):
            st.image(residente["foto"], width=80)
        else:
            st.markdown("## 👤")
    with c_info:
        st.markdown(f"### {residente['nome']}")
        idade = calc_age(residente.get("data_nascimento"))
        st.caption(
            f"{f'{idade} anos • ' if idade is not None else ''}Quarto {residente.get('quarto') or '—'} • "
            f"Dependência {residente.get('dependencia') or '—'} • Plano {residente.get('plano_saude') or '—'}"
        )
    with c_btn:
        if st.button("📋 Prontuário", key="familia_prontuario", use_container_width=True):
            open_record(residente["id"])

proximo = next_medication(item)
m1, m2, m3 = st.columns(3)
m1.metric("Medicamentos ativos", len(item.get("medicamentos_ativos") or []))
m2.metric("Próxima dose", hora(proximo["horario_previsto"]) if proximo else "—",
          proximo["nome_medicamento"] if proximo else None, delta_color="off")
m3.metric("Ocorrências hoje", len(item.get("ocorrencias_dia") or []))

st.subheader("Medicamentos de hoje")
administracoes = sorted(item.get("administracoes_dia") or [], key=lambda a: a.get("horario_previsto") or "")
if not administracoes:
    st.caption("Nenhuma dose prevista para hoje.")
for a in administracoes:
    st.markdown(
        f"**{hora(a.get('horario_previsto'))}** {a.get('nome_medicamento')} {status_badge(a.get('status'))}",
        unsafe_allow_html=True,
    )

col_a, col_b = st.columns(2)
with col_a:
    incidents(item.get("ocorrencias_dia") or [], show_name=False)
with col_b:
    activities(item.get("atividades_dia") or [], show_name=False)

schedule(
    from_today(item.get("consultas_semana"), "data_consulta"),
    from_today(item.get("exames_semana"), "data_prevista"),
    show_name=False,
)
