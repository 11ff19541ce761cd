import pytest

from src.errors import RemoteError
from src.profile import load_profile, person_table, update_address, update_personal
from src.schemas import EnderecoSchema, UsuarioSchema


def test_person_table():
    assert person_table("Responsavel") == "responsavel"
    assert person_table("Cuidador") == "funcionario"


def test_load_profile_junta_usuario_pessoa_e_endereco(client):
    client.respond("usuario", [{"id": 2, "email": "ana@ilpi.com", "nome": "Ana", "papel": "Admin"}])
    client.respond("funcionario", [{"id": 5, "id_usuario": 2, "id_endereco": 9, "nome": "Ana"}])
    client.respond("endereco", [{"id": 9, "cep": "01310100"}])

    profile = load_profile("ana@ilpi.com", "Admin", client=client)

    assert profile["pessoa_tabela"] == "funcionario"
    assert profile["pessoa"]["id"] == 5
    assert profile["endereco"] == {"id": 9, "cep": "01310100"}
    assert client.queries_for("funcionario")[0].filters == [("id_usuario", 2)]


def test_load_profile_usuario_inexistente(client):
    client.respond("usuario", [])
    assert load_profile("x@ilpi.com", "Admin", client=client) is None


def test_load_profile_sem_endereco(client):
    client.respond("usuario", [{"id": 2}])
    client.respond("responsavel", [{"id": 3, "id_endereco": None}])
    profile = load_profile("r@ilpi.com", "Responsavel", client=client)
    assert profile["endereco"] == {}
    assert client.queries_for("endereco") == []


PROFILE = {"pessoa_tabela": "responsavel", "pessoa": {"id": 3}, "endereco": {}}


def test_update_personal_grava_telefones_sem_mascara(client):
    model = UsuarioSchema(
        nome="Rita",
        email="rita@ilpi.com",
        cpf="12345678901",
        data_nascimento="1960-02-02",
        telefone_principal="(11) 98888-7777",
        telefone_secundario="",
    )
    values = update_personal(PROFILE, model, client=client)

    assert values["telefone_principal"] == "11988887777"
    assert values["telefone_secundario"] is None
    q = client.queries[-1]
    assert (q.table, q.action, q.filters) == ("responsavel", "update", [("id", 3)])


def endereco():
    return EnderecoSchema(
        cep="01310-100", logradouro="Rua A", numero="10", bairro="Centro", cidade="Santos", estado="SP"
    )


def test_update_address_existente(client):
    update_address({**PROFILE, "endereco": {"id": 9}}, endereco(), client=client)
    q = client.queries[-1]
    assert (q.table, q.action, q.filters) == ("endereco", "update", [("id", 9)])
    assert q.payload["cep"] == "01310100"


def test_update_address_cria_e_vincula(client):
    client.respond("endereco", [{"id": 21}])
    update_address(PROFILE, endereco(), client=client)

    insert, link = client.queries
    assert (insert.table, insert.action) == ("endereco", "insert")
    assert (link.table, link.action, link.payload) == ("responsavel", "update", {"id_endereco": 21})


ADMIN_SEM_CADASTRO = {"pessoa_tabela": "funcionario", "pessoa": {}, "endereco": {}}


def test_update_personal_sem_cadastro_da_pessoa(client):
    model = UsuarioSchema(nome="Ana", email="ana@ilpi.com", cpf="12345678901", data_nascimento="1980-01-01",
                          telefone_principal="11988887777")
    with pytest.raises(RemoteError) as exc:
        update_personal(ADMIN_SEM_CADASTRO, model, client=client)
    assert exc.value.message == "Cadastro da pessoa não encontrado."
    assert client.queries == []


def test_update_address_sem_cadastro_da_pessoa(client):
    with pytest.raises(RemoteError) as exc:
        update_address(ADMIN_SEM_CADASTRO, endereco(), client=client)
    assert exc.value.message == "Cadastro da pessoa não encontrado."
    assert client.queries == []
