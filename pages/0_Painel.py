import streamlit as st
import pandas as pd
import plotly.express as px
import psycopg2

from src.auth import ROLE_ADMIN
from src.config import ConfigError
from src.dashboard import ALERT_GROUPS, load_alerts, load_counts, load_today_incidents
from src.db import ocorrencias_por_mes, residentes_por_dependencia
from src.errors import RemoteError
from src.formatters import format_date, format_date_long
from src.helpers import apply_plot_theme, init_state, require_role, show_flash
from ui.sidebar import render_sidebar_menu

st.set_page_config(page_title="Painel • ILPI", layout="wide")

init_state()
require_role(ROLE_ADMIN)

st.session_state["current_page"] = "Painel"
render_sidebar_menu()

st.title("📊 Painel administrativo")
st.caption(format_date_long())
show_flash()

# ----------------------------
# KPIs
# ----------------------------
try:
    counts = load_counts()
except RemoteError as e:
    st.error(e.message)
    counts = {"residentes": 0, "funcionarios": 0}

c1, c2 = st.columns(2)
c1.metric("Residentes", f"{counts['residentes']:,}")
c2.metric("Colaboradores", f"{counts['funcionarios']:,}")

st.divider()

# ----------------------------
# Alertas + ocorrências do dia
# ----------------------------
col_alertas, col_ocorrencias = st.columns(2)

with col_alertas:
    st.subheader("🔔 Alertas")
    try:
        alerts = load_alerts()
    except RemoteError as e:
        st.warning(e.message)
        alerts = None

    if alerts is not None:
        if not any(alerts["contagens"].values()):
            st.info("Nenhuma pendência no momento.")
        for group, label in ALERT_GROUPS.items():
            items = alerts[group]
            if not items:
                continue
            with st.expander(f"{label} ({alerts['contagens'][group]})"):
                st.dataframe(pd.DataFrame(items), use_container_width=True, hide_index=True)

with col_ocorrencias:
    st.subheader("📋 Ocorrências de hoje")
    try:
        incidents = load_today_incidents()
    except RemoteError as e:
        st.warning(e.message)
        incidents = []

    if not incidents:
        st.info("Nenhuma ocorrência registrada hoje.")
    for o in incidents:
        with st.container(border=True):
            residente = (o.get("residente") or {}).get("nome", "—")
            status = "✅ Resolvida" if o.get("resolvido") else "⏳ Pendente"
            st.markdown(f"**{o.get('titulo', '')}** • {o.get('categoria', '')} • {status}")
            st.caption(f"{residente} • {format_date(o.get('data'))} {o.get('hora') or ''}")
            if o.get("descricao"):
                st.write(o["descricao"])

st.divider()

# ----------------------------
# Gráficos (SQL direto no Postgres)
# ----------------------------
g1, g2 = st.columns(2)

try:
    df_mes = pd.DataFrame(ocorrencias_por_mes(6))
    df_dep = pd.DataFrame(residentes_por_dependencia())
except (psycopg2.Error, ConfigError) as e:
    st.warning("Não foi possível carregar os gráficos.")
    st.caption(str(e))
    st.stop()

with g1:
    if df_mes.empty:
        st.info("Sem ocorrências nos últimos 6 meses.")
    else:
        fig_mes = px.bar(df_mes, x="mes", y=["total", "resolvidas"], barmode="group", title="Ocorrências por mês")
        apply_plot_theme(fig_mes, height=320, x_title="Mês", y_title="Ocorrências")
        fig_mes.update_layout(showlegend=True)
        st.plotly_chart(fig_mes, use_container_width=True)

with g2:
    if df_dep.empty:
        st.info("Nenhum residente ativo.")
    else:
        fig_dep = px.bar(df_dep, x="dependencia", y="total", title="Residentes por grau de dependência")
        apply_plot_theme(fig_dep, height=320, x_title="Dependência", y_title="Residentes")
        st.plotly_chart(fig_dep, use_container_width=True)
