from datetime import date

from src.people import (
    delete_responsavel,
    funcionario_params,
    next_status,
    responsavel_params,
    save_funcionario,
    save_responsavel,
)
from src.schemas import FuncionarioSchema, ResponsavelSchema

ENDERECO = {
    "cep": "01310-100",
    "logradouro": "Av. Paulista",
    "numero": "1000",
    "bairro": "Bela Vista",
    "cidade": "São Paulo",
    "estado": "SP",
}


def responsavel():
    return ResponsavelSchema(
        nome="Maria Souza",
        cpf="111.222.333-44",
        email="maria@exemplo.com",
        telefone_principal="(11) 98888-7777",
        data_nascimento=date(1970, 1, 20),
        **ENDERECO,
    )


def funcionario(**kw):
    return FuncionarioSchema(
        vinculo="CLT",
        nome="Carlos Lima",
        cpf="22233344455",
        email="carlos@ilpi.com",
        data_nascimento=date(1985, 7, 1),
        cargo="Técnico de enfermagem",
        data_admissao=date(2024, 2, 1),
        telefone_principal="11 3333-4444",
        **ENDERECO,
        **kw,
    )


def test_responsavel_params():
    params = responsavel_params(responsavel())
    assert params["p_papel"] == "Responsavel"
    assert params["p_cpf"] == "11122233344"
    assert params["p_cep"] == "01310100"
    assert params["p_telefone_principal"] == "11988887777"
    assert params["p_telefone_secundario"] is None
    assert params["p_data_nascimento"] == "1970-01-20"


def test_save_responsavel_cadastra_ou_edita(client):
    save_responsavel(responsavel(), client=client)
    save_responsavel(responsavel(), 8, client=client)

    (novo, p_novo), (edicao, p_edicao) = client.rpc_calls
    assert novo == "cadastrar_responsavel_com_usuario"
    assert "p_id_responsavel" not in p_novo
    assert edicao == "editar_responsavel_com_usuario"
    assert p_edicao["p_id_responsavel"] == 8


def test_delete_responsavel_desvincula_residentes_antes(client):
    delete_responsavel(4, client=client)

    unlink, delete = client.queries
    assert (unlink.table, unlink.action) == ("residente", "update")
    assert unlink.payload == {"id_responsavel": None}
    assert unlink.filters == [("id_responsavel", 4)]
    assert (delete.table, delete.action, delete.filters) == ("responsavel", "delete", [("id", 4)])


def test_funcionario_params():
    params = funcionario_params(funcionario(papel="Enfermagem", registro_profissional="COREN 123"))
    assert params["p_papel"] == "Enfermagem"
    assert params["p_vinculo"] == "CLT"
    assert params["p_registro_profissional"] == "COREN 123"
    assert params["p_data_admissao"] == "2024-02-01"
    assert params["p_telefone_principal"] == "1133334444"


def test_save_funcionario_edicao(client):
    save_funcionario(funcionario(), 11, client=client)
    name, params = client.rpc_calls[0]
    assert name == "editar_funcionario_com_usuario"
    assert params["p_id_funcionario"] == 11
    assert params["p_papel"] == "Cuidador"


def test_next_status_cicla():
    assert next_status("ativo") == "licença"
    assert next_status("afastado") == "inativo"
    assert next_status("inativo") == "ativo"
    assert next_status(None) == "ativo"
    assert next_status("desligado") == "ativo"
