import os

import streamlit as st
from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


class ConfigError(RuntimeError):
    pass


class Settings(BaseModel):
    supabase_url: str = ""
    supabase_anon_key: str = ""
    database_url: str = ""
    photo_bucket: str = "idosos-fotos"
    cep_timeout: float = 5.0
    log_level: str = "INFO"


def _secret(section: str, key: str):
    """
    Lê um valor do st.secrets sem quebrar quando não existe secrets.toml.
    """
    try:
        return st.secrets[section][key]
    except (KeyError, FileNotFoundError):
        return None


@st.cache_resource
def get_settings() -> Settings:
    """
    Monta as configurações: .env / variáveis de ambiente primeiro,
    st.secrets (quando houver) por cima.
    """
    return Settings(
        supabase_url=_secret("supabase", "url") or os.getenv("SUPABASE_URL", ""),
        supabase_anon_key=_secret("supabase", "anon_key") or os.getenv("SUPABASE_ANON_KEY", ""),
        database_url=_secret("database", "url") or os.getenv("DATABASE_URL", ""),
        photo_bucket=os.getenv("PHOTO_BUCKET", "idosos-fotos"),
        cep_timeout=float(os.getenv("CEP_TIMEOUT", "5")),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )
