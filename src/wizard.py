"""
Cadastro de paciente em 3 etapas: Responsável -> Paciente -> Dados adicionais.

Cada etapa valida só os seus campos antes de avançar. O envio final valida
tudo de novo e faz UMA chamada à function `cadastrar_idoso_completo`, que
cria responsável (se novo) e idoso na mesma transação, no servidor.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from src import repository
from src.errors import RemoteError
from src.formatters import remove_formatting
from src.schemas import (
    DadosAdicionaisStep,
    PacienteStep,
    ResponsavelExistenteStep,
    ResponsavelNovoStep,
    validate_form,
)

logger = logging.getLogger(__name__)

STEPS = {
    1: "Responsável",
    2: "Paciente",
    3: "Dados Adicionais",
}
FIRST_STEP = 1
LAST_STEP = 3

RPC_NAME = "cadastrar_idoso_completo"


def empty_form() -> dict:
    return {
        "tipo_responsavel": "novo",
        "resp_existente_id": None,
        **{f: "" for f in ResponsavelNovoStep.model_fields},
        **{f: "" for f in PacienteStep.model_fields},
        **{f: "" for f in DadosAdicionaisStep.model_fields},
        "idoso_data_nascimento": None,
    }


def step_schema(step: int, tipo_responsavel: str):
    if step == 1:
        return ResponsavelExistenteStep if tipo_responsavel == "existente" else ResponsavelNovoStep
    if step == 2:
        return PacienteStep
    if step == 3:
        return DadosAdicionaisStep
    raise ValueError(f"Etapa inválida: {step}")


def validate_step(step: int, data: dict) -> dict[str, str]:
    schema = step_schema(step, data.get("tipo_responsavel", "novo"))
    _, errors = validate_form(schema, data)
    return errors


def next_step(step: int, data: dict) -> tuple[int, dict[str, str]]:
    """Avança só se a etapa atual for válida; senão fica e devolve os erros."""
    errors = validate_step(step, data)
    if errors:
        return step, errors
    return min(step + 1, LAST_STEP), {}


def prev_step(step: int) -> int:
    return max(step - 1, FIRST_STEP)


def validate_all(data: dict) -> tuple[Optional[dict], dict[str, str]]:
    """
    Valida as 3 etapas. Retorna (dados limpos, {}) ou (None, erros).
    """
    cleaned: dict = {"tipo_responsavel": data.get("tipo_responsavel", "novo")}
    errors: dict[str, str] = {}
    for step in STEPS:
        schema = step_schema(step, cleaned["tipo_responsavel"])
        model, step_errors = validate_form(schema, data)
        if step_errors:
            errors.update(step_errors)
        else:
            cleaned.update(model.model_dump(mode="json"))
    if errors:
        return None, errors
    return cleaned, {}


def first_step_with_errors(errors: dict[str, str], tipo_responsavel: str) -> int:
    for step in STEPS:
        if set(step_schema(step, tipo_responsavel).model_fields) & set(errors):
            return step
    return FIRST_STEP


def build_rpc_params(cleaned: dict, today: Optional[date] = None) -> dict:
    """Monta os parâmetros p_* da function a partir dos dados já validados."""
    today = today or date.today()
    params = {
        "p_nome_idoso": cleaned["idoso_nome_completo"],
        "p_data_nascimento_idoso": cleaned["idoso_data_nascimento"],
        "p_cpf_idoso": cleaned["idoso_cpf"],
        "p_sexo_idoso": cleaned.get("idoso_sexo"),
        "p_data_admissao_idoso": today.isoformat(),
        "p_nome_social_idoso": cleaned.get("idoso_nome_social"),
        "p_estado_civil_idoso": cleaned["idoso_estado_civil"],
        "p_naturalidade_idoso": cleaned.get("idoso_naturalidade"),
        "p_localizacao_quarto_idoso": cleaned.get("idoso_localizacao_quarto"),
        "p_nivel_dependencia_idoso": cleaned.get("idoso_nivel_dependencia"),
        "p_plano_saude_idoso": cleaned.get("idoso_plano_saude"),
        "p_numero_carteirinha_idoso": cleaned.get("idoso_numero_carteirinha"),
        "p_observacoes_idoso": cleaned.get("idoso_observacoes"),
        "p_foto_perfil_url_idoso": cleaned.get("idoso_foto_perfil_url"),
        "p_responsavel_parentesco": cleaned["idoso_responsavel_parentesco"],
        "p_id_responsavel_existente": None,
    }

    if cleaned["tipo_responsavel"] == "existente":
        params["p_id_responsavel_existente"] = cleaned["resp_existente_id"]
        return params

    params.update({
        "p_nome_responsavel": cleaned["resp_nome_completo"],
        "p_cpf_responsavel": cleaned["resp_cpf"],
        "p_telefone_principal_responsavel": cleaned["resp_telefone_principal"],
        "p_telefone_secundario_responsavel": cleaned.get("resp_telefone_secundario"),
        "p_email_responsavel": cleaned["resp_email"],
        # senha inicial do responsável = CPF
        "p_senha_responsavel": cleaned["resp_cpf"],
        "p_cep_responsavel": remove_formatting(cleaned["resp_cep"]),
        "p_logradouro_responsavel": cleaned["resp_logradouro"],
        "p_numero_responsavel": cleaned["resp_numero"],
        "p_complemento_responsavel": cleaned.get("resp_complemento"),
        "p_bairro_responsavel": cleaned["resp_bairro"],
        "p_cidade_responsavel": cleaned["resp_cidade"],
        "p_estado_responsavel": cleaned["resp_estado"],
    })
    return params


def submit_registration(data: dict, client=None, today: Optional[date] = None) -> tuple[Optional[int], dict[str, str]]:
    """
    Valida tudo e chama a function. Retorna (id_idoso, {}) ou (None, erros de
    validação). Erro remoto sobe como RemoteError.
    """
    cleaned, errors = validate_all(data)
    if errors:
        return None, errors

    result = repository.call_rpc(RPC_NAME, build_rpc_params(cleaned, today), client=client)

    if isinstance(result, dict):
        result = [result]
    if not result:
        raise RemoteError("Erro no cadastro", "Nenhum resultado retornado pela function")

    id_idoso = result[0].get("id_idoso")
    logger.info("Paciente cadastrado", extra={"id_idoso": id_idoso})
    return id_idoso, {}
