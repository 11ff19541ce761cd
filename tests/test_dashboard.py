from datetime import date, datetime

from src.dashboard import ALERT_GROUPS, load_alerts, load_counts, load_today_incidents


def test_load_counts(client):
    client.respond("residente", [], count=18)
    client.respond("funcionario", [], count=6)
    assert load_counts(client) == {"residentes": 18, "funcionarios": 6}


def test_load_alerts_envia_limite_de_5_minutos(client):
    client.respond("get_alertas_dashboard", {"medicamentos": [{"id": 1}], "contagens": {"medicamentos": 1}})
    alerts = load_alerts(client, now=datetime(2025, 5, 1, 7, 58))

    assert client.rpc_calls == [("get_alertas_dashboard", {"data_limite": "2025-05-01T08:03:00"})]
    assert alerts["medicamentos"] == [{"id": 1}]
    assert alerts["consultas"] == []
    assert set(ALERT_GROUPS) <= set(alerts)
    assert alerts["contagens"] == {"medicamentos": 1, "atividades": 0, "alimentacao": 0, "consultas": 0}


def test_load_alerts_resposta_em_lista_ou_vazia(client):
    client.respond("get_alertas_dashboard", [{"consultas": [{"id": 9}, {"id": 10}]}])
    client.respond("get_alertas_dashboard", None)

    first = load_alerts(client, now=datetime(2025, 5, 1))
    assert first["contagens"]["consultas"] == 2

    empty = load_alerts(client, now=datetime(2025, 5, 1))
    assert all(empty[group] == [] for group in ALERT_GROUPS)


def test_load_today_incidents(client):
    client.respond("ocorrencia", [{"id": 1, "titulo": "Queda"}])
    rows = load_today_incidents(client, today=date(2025, 5, 1))

    assert rows == [{"id": 1, "titulo": "Queda"}]
    q = client.queries[-1]
    assert q.filters == [("data", "2025-05-01")]
    assert q.orders == [("hora", True)]
