"""
Dados do painel do administrador (contagens, alertas e ocorrências do dia).
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional

from src import repository
from src.formatters import format_date_numeric

ALERT_GROUPS = {
    "medicamentos": "Medicamentos",
    "atividades": "Atividades",
    "alimentacao": "Alimentação",
    "consultas": "Consultas",
}


def load_counts(client=None) -> dict:
    return {
        "residentes": repository.count_rows("residente", client=client),
        "funcionarios": repository.count_rows("funcionario", client=client),
    }


def load_alerts(client=None, now: Optional[datetime] = None) -> dict:
    """
    Pendências até daqui a 5 minutos (function get_alertas_dashboard).
    Sempre devolve os 4 grupos e as contagens, mesmo se a function omitir algum.
    """
    limit = (now or datetime.now()) + timedelta(minutes=5)
    data = repository.call_rpc("get_alertas_dashboard", {"data_limite": limit.isoformat()}, client=client) or {}
    if isinstance(data, list):
        data = data[0] if data else {}

    alerts = {group: data.get(group) or [] for group in ALERT_GROUPS}
    counts = data.get("contagens") or {}
    alerts["contagens"] = {group: counts.get(group, len(alerts[group])) for group in ALERT_GROUPS}
    return alerts


def load_today_incidents(client=None, today: Optional[date] = None) -> list[dict]:
    return repository.fetch_rows(
        "ocorrencia",
        "*, residente(id, nome)",
        eq={"data": format_date_numeric(today)},
        order_by=[("hora", True)],
        client=client,
    )
