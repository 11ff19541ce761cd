from datetime import date

import pytest

from src.errors import RemoteError
from src.family import (
    CONSULTAS_TODAS,
    filter_incidents,
    flatten,
    from_today,
    guardian_residents,
    load_family,
    load_record,
    next_medication,
    record_consultas,
    step,
)

HOJE = date(2025, 3, 10)

FAMILIA = [
    {
        "residente": {"id": 1, "nome": "Maria"},
        "administracoes_dia": [
            {"id": 1, "horario_previsto": "08:00:00", "status": "concluído", "nome_medicamento": "Losartana"},
            {"id": 2, "horario_previsto": "20:00:00", "status": "pendente", "nome_medicamento": "Sinvastatina"},
            {"id": 3, "horario_previsto": "14:00:00", "status": "pendente", "nome_medicamento": "Dipirona"},
        ],
        "ocorrencias_dia": [{"id": 7, "titulo": "Queda"}],
    },
    {
        "residente": {"id": 2, "nome": "João"},
        "administracoes_dia": [],
        "ocorrencias_dia": [{"id": 8, "titulo": "Febre"}],
    },
]


def test_load_family_chama_rpc_com_data_de_referencia(client):
    client.respond("get_detalhes_residentes_por_responsavel", FAMILIA)
    assert load_family(4, HOJE, client=client) == FAMILIA
    assert client.rpc_calls == [
        ("get_detalhes_residentes_por_responsavel", {"p_id_responsavel": 4, "p_data_referencia": "2025-03-10"})
    ]


def test_load_family_sem_residentes(client):
    client.respond("get_detalhes_residentes_por_responsavel", None)
    assert load_family(4, HOJE, client=client) == []


def test_load_family_erro(client):
    client.fail("get_detalhes_residentes_por_responsavel")
    with pytest.raises(RemoteError):
        load_family(4, HOJE, client=client)


def test_next_medication_primeira_pendente_pelo_horario():
    assert next_medication(FAMILIA[0])["nome_medicamento"] == "Dipirona"
    assert next_medication(FAMILIA[1]) is None


def test_from_today_descarta_passado_e_ordena():
    rows = [
        {"id": 1, "data_consulta": "2025-03-12", "horario": "09:00"},
        {"id": 2, "data_consulta": "2025-03-09", "horario": "10:00"},
        {"id": 3, "data_consulta": "2025-03-10", "horario": "15:00"},
        {"id": 4, "data_consulta": None},
    ]
    assert [r["id"] for r in from_today(rows, "data_consulta", HOJE)] == [3, 1]


def test_flatten_marca_o_residente():
    rows = flatten(FAMILIA, "ocorrencias_dia")
    assert [(r["id"], r["nome_residente"]) for r in rows] == [(7, "Maria"), (8, "João")]


def test_step_da_a_volta():
    assert step(FAMILIA, 1, 1) == 0
    assert step(FAMILIA, 0, -1) == 1
    assert step([], 0, 1) == 0


def test_guardian_residents():
    assert [r["nome"] for r in guardian_residents(FAMILIA + [{"residente": None}])] == ["Maria", "João"]


def test_load_record(client):
    client.respond("get_dados_completos_residente", {"residente": {"id": 1, "nome": "Maria"}, "ocorrencias": []})
    record = load_record(1, client=client)
    assert record["residente"]["nome"] == "Maria"
    assert client.rpc_calls == [("get_dados_completos_residente", {"p_id_residente": 1})]


def test_load_record_desembrulha_lista_e_vazio(client):
    client.respond("get_dados_completos_residente", [{"residente": {"id": 1}}])
    client.respond("get_dados_completos_residente", None)
    assert load_record(1, client=client) == {"residente": {"id": 1}}
    assert load_record(99, client=client) == {}


def test_filter_incidents_por_titulo_ou_descricao():
    rows = [
        {"id": 1, "titulo": "Queda no banheiro", "descricao": ""},
        {"id": 2, "titulo": "Febre", "descricao": "Medicação após a QUEDA de pressão"},
        {"id": 3, "titulo": "Visita", "descricao": None},
    ]
    assert [r["id"] for r in filter_incidents(rows, "queda")] == [1, 2]
    assert [r["id"] for r in filter_incidents(rows, "medicacao")] == [2]
    assert len(filter_incidents(rows, "  ")) == 3


def test_record_consultas_futuras_ou_todas():
    rows = [
        {"id": 1, "data_consulta": "2025-03-01", "horario": "09:00"},
        {"id": 2, "data_consulta": "2025-03-20", "horario": "10:00"},
    ]
    assert [r["id"] for r in record_consultas(rows, today=HOJE)] == [2]
    assert [r["id"] for r in record_consultas(rows, CONSULTAS_TODAS, HOJE)] == [2, 1]
