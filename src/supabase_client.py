import logging

import streamlit as st
from supabase import Client, create_client

from src.config import ConfigError, get_settings

logger = logging.getLogger(__name__)

_SESSION_KEY = "supabase_client"


def get_client() -> Client:
    """
    Cliente Supabase da sessão atual.

    Fica no session_state (e não em cache_resource) porque guarda o login do
    usuário: cada aba do navegador tem o seu.
    """
    client = st.session_state.get(_SESSION_KEY)
    if client is None:
        settings = get_settings()
        if not settings.supabase_url or not settings.supabase_anon_key:
            raise ConfigError("SUPABASE_URL e SUPABASE_ANON_KEY precisam estar definidos (.env ou secrets)")
        client = create_client(settings.supabase_url, settings.supabase_anon_key)
        st.session_state[_SESSION_KEY] = client
        logger.info("Cliente Supabase criado para a sessão")
    return client


def reset_client() -> None:
    st.session_state.pop(_SESSION_KEY, None)
