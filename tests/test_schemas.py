from datetime import date, time

from src.schemas import (
    AtividadeSchema,
    ConsultaSchema,
    EnderecoSchema,
    MedicamentoSchema,
    SenhaSchema,
    UsuarioSchema,
    to_record,
    validate_form,
)

ENDERECO = {
    "cep": "01310100",
    "logradouro": "Av. Paulista",
    "numero": "1000",
    "complemento": "",
    "bairro": "Bela Vista",
    "cidade": "São Paulo",
    "estado": "SP",
}


def test_endereco_valido_formata_cep_e_limpa_vazios():
    model, errors = validate_form(EnderecoSchema, ENDERECO)
    assert errors == {}
    assert model.cep == "01310-100"
    assert model.complemento is None


def test_campos_obrigatorios_usam_mensagem_do_campo():
    _, errors = validate_form(EnderecoSchema, {**ENDERECO, "logradouro": "  ", "cidade": None})
    assert errors["logradouro"] == "Logradouro é obrigatório"
    assert errors["cidade"] == "Cidade é obrigatória"


def test_formatos_invalidos():
    _, errors = validate_form(UsuarioSchema, {
        "nome": "Ana",
        "email": "ana@",
        "cpf": "123",
        "data_nascimento": "ontem",
        "telefone_principal": "11999990000",
    })
    assert errors["email"] == "Email inválido"
    assert errors["cpf"] == "CPF inválido"
    assert errors["data_nascimento"] == "Data inválida"


def test_usuario_normaliza_cpf_e_email():
    model, errors = validate_form(UsuarioSchema, {
        "nome": "Ana",
        "email": "Ana@Exemplo.com",
        "cpf": "123.456.789-01",
        "data_nascimento": "1980-05-01",
        "telefone_principal": "(11) 99999-0000",
    })
    assert errors == {}
    assert model.cpf == "12345678901"
    assert model.email == "ana@exemplo.com"
    assert model.data_nascimento == date(1980, 5, 1)


def test_senha_nova_igual_a_atual():
    _, errors = validate_form(SenhaSchema, {"senha_atual": "abc", "nova_senha": "abc", "confirmar_senha": "abc"})
    assert errors["nova_senha"] == "A nova senha não pode ser igual à senha atual"


def test_senha_nova_reprovada_nao_acusa_confirmacao():
    _, errors = validate_form(SenhaSchema, {"senha_atual": "abc", "nova_senha": "abc", "confirmar_senha": "abd"})
    assert errors == {"nova_senha": "A nova senha não pode ser igual à senha atual"}


def test_senha_confirmacao_diferente():
    _, errors = validate_form(SenhaSchema, {"senha_atual": "abc", "nova_senha": "xyz", "confirmar_senha": "xy"})
    assert errors == {"confirmar_senha": "As senhas não conferem"}


def test_horario_aceita_time_do_widget():
    model, errors = validate_form(ConsultaSchema, {
        "id_residente": 3,
        "data_consulta": date(2025, 2, 1),
        "horario": time(8, 30),
        "medico": "Dr. Silva",
        "motivo_consulta": "Rotina",
    })
    assert errors == {}
    assert to_record(model)["horario"] == "08:30"
    assert to_record(model)["data_consulta"] == "2025-02-01"


def test_residente_nao_selecionado():
    _, errors = validate_form(ConsultaSchema, {"id_residente": None})
    assert errors["id_residente"] == "Residente é obrigatório"


def test_medicamento_intervalo_minimo():
    _, errors = validate_form(MedicamentoSchema, {
        "id_residente": 1,
        "nome": "Losartana",
        "dosagem": "50mg",
        "dose": "1 comprimido",
        "data_inicio": "2025-01-01",
        "horario_inicio": "08:00",
        "recorrencia": "horas",
        "intervalo": 0,
    })
    assert errors == {"intervalo": "Intervalo deve ser ao menos 1"}


def test_atividade_exige_residente():
    _, errors = validate_form(AtividadeSchema, {
        "residentes": [],
        "nome": "Caminhada",
        "categoria": "Física",
        "data": "2025-01-01",
        "status": "agendada",
    })
    assert errors == {"residentes": "Selecione ao menos um residente"}


def test_cep_e_horario_invalidos():
    _, errors = validate_form(EnderecoSchema, {**ENDERECO, "cep": "0131-01"})
    assert errors == {"cep": "CEP inválido"}

    _, errors = validate_form(ConsultaSchema, {
        "id_residente": 3,
        "data_consulta": "2025-02-01",
        "horario": "8h30",
        "medico": "Dr. Silva",
        "motivo_consulta": "Rotina",
    })
    assert errors == {"horario": "Formato HH:MM"}
