import pytest

from src.errors import RemoteError
from src.records import (
    atividade_residentes,
    delete_atividade,
    incident_counts,
    incident_state,
    save_atividade,
)
from src.schemas import AtividadeSchema


def atividade(residentes):
    return AtividadeSchema(
        residentes=residentes, nome="Caminhada", categoria="Física", data="2025-04-01", status="agendada"
    )


def test_atividade_residentes():
    row = {"atividade_residente": [{"id_residente": 1}, {"id_residente": 4}]}
    assert atividade_residentes(row) == [1, 4]
    assert atividade_residentes({}) == []


def test_save_atividade_nova_grava_vinculos_sem_repetir(client):
    client.respond("atividade", [{"id": 30}])
    assert save_atividade(atividade([2, 5, 2]), client=client) == 30

    insert = client.queries_for("atividade", "insert")[0]
    assert "residentes" not in insert.payload
    assert insert.payload["data"] == "2025-04-01"

    links = client.queries_for("atividade_residente", "insert")[0]
    assert links.payload == [
        {"id_atividade": 30, "id_residente": 2},
        {"id_atividade": 30, "id_residente": 5},
    ]


def test_save_atividade_edicao_reescreve_vinculos(client):
    save_atividade(atividade([7]), 12, client=client)

    actions = [(q.table, q.action) for q in client.queries]
    assert actions == [
        ("atividade", "update"),
        ("atividade_residente", "delete"),
        ("atividade_residente", "insert"),
    ]
    assert client.queries[1].filters == [("id_atividade", 12)]


def test_save_atividade_sem_id_retornado(client):
    client.respond("atividade", [])
    with pytest.raises(RemoteError):
        save_atividade(atividade([1]), client=client)
    assert client.queries_for("atividade_residente") == []


def test_delete_atividade_remove_vinculos_primeiro(client):
    delete_atividade(3, client=client)
    assert [(q.table, q.action) for q in client.queries] == [
        ("atividade_residente", "delete"),
        ("atividade", "delete"),
    ]


def test_incident_counts():
    rows = [{"resolvido": True}, {"resolvido": False}, {"resolvido": None}]
    assert incident_counts(rows) == {"total": 3, "resolvidas": 1, "pendentes": 2}
    assert incident_counts([]) == {"total": 0, "resolvidas": 0, "pendentes": 0}


def test_incident_state():
    assert incident_state({"resolvido": True}) == "resolvida"
    assert incident_state({}) == "pendente"
