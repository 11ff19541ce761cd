from datetime import date

import pytest

from src.errors import RemoteError
from src.wizard import (
    build_rpc_params,
    empty_form,
    first_step_with_errors,
    next_step,
    prev_step,
    submit_registration,
    validate_all,
)


def filled_form(**overrides):
    data = empty_form()
    data.update({
        "resp_nome_completo": "Maria Souza",
        "resp_cpf": "111.222.333-44",
        "resp_telefone_principal": "(11) 98888-7777",
        "resp_email": "maria@exemplo.com",
        "resp_cep": "01310100",
        "resp_logradouro": "Av. Paulista",
        "resp_numero": "1000",
        "resp_bairro": "Bela Vista",
        "resp_cidade": "São Paulo",
        "resp_estado": "SP",
        "idoso_nome_completo": "José Souza",
        "idoso_data_nascimento": date(1940, 3, 2),
        "idoso_cpf": "55566677788",
        "idoso_estado_civil": "Viúvo(a)",
        "idoso_responsavel_parentesco": "Filha",
    })
    data.update(overrides)
    return data


def test_nao_avanca_com_etapa_invalida():
    step, errors = next_step(1, empty_form())
    assert step == 1
    assert errors["resp_nome_completo"] == "O nome do responsável é obrigatório"
    assert errors["resp_cep"] == "O CEP é obrigatório"


def test_avanca_e_volta():
    step, errors = next_step(1, filled_form())
    assert (step, errors) == (2, {})
    assert next_step(3, filled_form())[0] == 3
    assert prev_step(2) == 1
    assert prev_step(1) == 1


def test_responsavel_existente_precisa_de_id():
    step, errors = next_step(1, {**empty_form(), "tipo_responsavel": "existente"})
    assert step == 1
    assert errors == {"resp_existente_id": "É obrigatório selecionar um responsável"}


def test_validate_all_junta_erros_de_todas_as_etapas():
    cleaned, errors = validate_all(filled_form(idoso_cpf="", idoso_estado_civil=""))
    assert cleaned is None
    assert set(errors) == {"idoso_cpf", "idoso_estado_civil"}
    assert first_step_with_errors(errors, "novo") == 2


def test_build_rpc_params_responsavel_novo():
    cleaned, _ = validate_all(filled_form())
    params = build_rpc_params(cleaned, today=date(2025, 1, 15))

    assert params["p_nome_idoso"] == "José Souza"
    assert params["p_data_nascimento_idoso"] == "1940-03-02"
    assert params["p_data_admissao_idoso"] == "2025-01-15"
    assert params["p_cpf_responsavel"] == "11122233344"
    assert params["p_senha_responsavel"] == "11122233344"
    assert params["p_cep_responsavel"] == "01310100"
    assert params["p_id_responsavel_existente"] is None


def test_build_rpc_params_responsavel_existente():
    cleaned, _ = validate_all(filled_form(tipo_responsavel="existente", resp_existente_id=9))
    params = build_rpc_params(cleaned, today=date(2025, 1, 15))
    assert params["p_id_responsavel_existente"] == 9
    assert "p_nome_responsavel" not in params


def test_submit_registration_chama_uma_rpc(client):
    client.respond("cadastrar_idoso_completo", [{"id_idoso": 42}])
    id_idoso, errors = submit_registration(filled_form(), client=client, today=date(2025, 1, 15))

    assert (id_idoso, errors) == (42, {})
    assert [name for name, _ in client.rpc_calls] == ["cadastrar_idoso_completo"]


def test_submit_registration_invalido_nao_chama_rpc(client):
    id_idoso, errors = submit_registration(empty_form(), client=client)
    assert id_idoso is None
    assert errors
    assert client.rpc_calls == []


def test_submit_registration_sem_resultado(client):
    client.respond("cadastrar_idoso_completo", [])
    with pytest.raises(RemoteError):
        submit_registration(filled_form(), client=client)


def test_submit_registration_erro_remoto(client):
    client.fail("cadastrar_idoso_completo", "duplicate key value violates unique constraint")
    with pytest.raises(RemoteError) as exc:
        submit_registration(filled_form(), client=client)
    assert "duplicate key" in exc.value.detail
