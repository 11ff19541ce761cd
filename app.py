import logging

import streamlit as st

from src.auth import sign_in
from src.config import ConfigError, get_settings
from src.errors import RemoteError
from src.helpers import current_user, init_state, set_user, show_flash
from src.logging_config import setup_logging
from ui.sidebar import home_page

st.set_page_config(page_title="ILPI • Login", layout="centered")

setup_logging(get_settings().log_level)
logger = logging.getLogger(__name__)

init_state()

user = current_user()
if user:
    st.switch_page(home_page(user["role"]))

# ============================================================
# Login
# ============================================================

st.title("🏡 ILPI • Console administrativo")
show_flash()

with st.container(border=True):
    with st.form("login_form"):
        email = st.text_input("Email", placeholder="seu@email.com")
        password = st.text_input("Senha", type="password")
        submitted = st.form_submit_button("Entrar", type="primary", use_container_width=True)

    if submitted:
        if not email.strip() or not password:
            st.warning("Informe email e senha.")
            st.stop()

        try:
            with st.spinner("Entrando…"):
                role = sign_in(email.strip().lower(), password)
        except ConfigError as e:
            logger.error("Configuração incompleta", extra={"detail": str(e)})
            st.error("O sistema não está configurado. Fale com o administrador.")
            st.stop()
        except RemoteError as e:
            st.error(e.message)
            st.stop()

        set_user(email.strip().lower(), role)
        st.switch_page(home_page(role))
