import logging

import streamlit as st
import psycopg2
from psycopg2.extras import RealDictCursor

from src.config import ConfigError, get_settings

logger = logging.getLogger(__name__)


@st.cache_resource
def get_conn():
    """
    Conexão persistente com o PostgreSQL (só leitura, para os gráficos do painel).
    cache_resource evita abrir conexão a cada rerun do Streamlit.
    """
    url = get_settings().database_url
    if not url:
        raise ConfigError("DATABASE_URL precisa estar definida (.env ou secrets)")

    conn = psycopg2.connect(url, cursor_factory=RealDictCursor)

    # muitas leituras e reruns: evita ficar preso em transação abortada
    conn.autocommit = True
    return conn


def fetch_df(sql: str, params=None):
    """
    Executa SELECT e retorna lista de dicts (bom para virar DataFrame).
    Se uma query falhar, faz rollback para não "quebrar" a conexão cacheada.
    """
    conn = get_conn()
    try:
        with conn.cursor() as cur:
            cur.execute(sql, params or {})
            return cur.fetchall()
    except psycopg2.Error:
        logger.exception("Falha na consulta do painel")
        if not conn.closed:
            conn.rollback()
        raise


# ============================================================
# Consultas do painel
# ============================================================

OCORRENCIAS_POR_MES_SQL = """
select
    to_char(date_trunc('month', data), 'YYYY-MM') as mes,
    count(*) as total,
    count(*) filter (where resolvido) as resolvidas
from public.ocorrencia
where data >= (current_date - make_interval(months => %(months)s))
group by 1
order by 1;
"""

RESIDENTES_POR_DEPENDENCIA_SQL = """
select
    coalesce(nullif(dependencia, ''), 'Não informado') as dependencia,
    count(*) as total
from public.residente
where status
group by 1
order by 1;
"""


def ocorrencias_por_mes(months: int = 6):
    return fetch_df(OCORRENCIAS_POR_MES_SQL, {"months": months})


def residentes_por_dependencia():
    return fetch_df(RESIDENTES_POR_DEPENDENCIA_SQL)
