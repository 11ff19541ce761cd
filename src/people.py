"""
Responsáveis e funcionários: cada um tem endereço e usuário do sistema,
então cadastro e edição vão por function (tudo numa transação no servidor).
"""

from __future__ import annotations

import logging
from typing import Optional

from src import repository
from src.auth import ROLE_RESPONSAVEL
from src.formatters import remove_formatting
from src.schemas import STATUS_FUNCIONARIO, FuncionarioSchema, ResponsavelSchema

logger = logging.getLogger(__name__)


def _digits_or_none(value: Optional[str]) -> Optional[str]:
    return remove_formatting(value) or None


def _address_params(model) -> dict:
    return {
        "p_cep": remove_formatting(model.cep),
        "p_logradouro": model.logradouro,
        "p_numero": model.numero,
        "p_complemento": model.complemento,
        "p_bairro": model.bairro,
        "p_cidade": model.cidade,
        "p_estado": model.estado,
    }


# ============================================================
# Responsáveis
# ============================================================

def responsavel_params(model: ResponsavelSchema) -> dict:
    return {
        "p_email": model.email,
        "p_papel": ROLE_RESPONSAVEL,
        **_address_params(model),
        "p_nome": model.nome,
        "p_cpf": model.cpf,
        "p_telefone_principal": remove_formatting(model.telefone_principal),
        "p_telefone_secundario": _digits_or_none(model.telefone_secundario),
        "p_data_nascimento": model.data_nascimento.isoformat(),
        "p_contato_emergencia_nome": model.contato_emergencia_nome,
        "p_contato_emergencia_telefone": _digits_or_none(model.contato_emergencia_telefone),
        "p_observacoes": model.observacoes,
    }


def save_responsavel(model: ResponsavelSchema, id_responsavel: Optional[int] = None, client=None):
    params = responsavel_params(model)
    if id_responsavel:
        return repository.call_rpc(
            "editar_responsavel_com_usuario", {"p_id_responsavel": id_responsavel, **params}, client=client
        )
    return repository.call_rpc("cadastrar_responsavel_com_usuario", params, client=client)


def delete_responsavel(id_responsavel: int, client=None) -> None:
    """Desvincula os residentes do responsável e depois o exclui."""
    repository.update_where("residente", "id_responsavel", id_responsavel, {"id_responsavel": None}, client=client)
    repository.delete_row("responsavel", id_responsavel, client=client)
    logger.info("Responsável excluído", extra={"id": id_responsavel})


# ============================================================
# Funcionários
# ============================================================

def funcionario_params(model: FuncionarioSchema) -> dict:
    return {
        "p_email": model.email,
        "p_papel": model.papel,
        **_address_params(model),
        "p_vinculo": model.vinculo,
        "p_nome": model.nome,
        "p_cpf": model.cpf,
        "p_data_nascimento": model.data_nascimento.isoformat(),
        "p_cargo": model.cargo,
        "p_registro_profissional": model.registro_profissional,
        "p_data_admissao": model.data_admissao.isoformat(),
        "p_telefone_principal": remove_formatting(model.telefone_principal),
        "p_telefone_secundario": _digits_or_none(model.telefone_secundario),
        "p_contato_emergencia_nome": model.contato_emergencia_nome,
        "p_contato_emergencia_telefone": _digits_or_none(model.contato_emergencia_telefone),
    }


def save_funcionario(model: FuncionarioSchema, id_funcionario: Optional[int] = None, client=None):
    params = funcionario_params(model)
    if id_funcionario:
        return repository.call_rpc(
            "editar_funcionario_com_usuario", {"p_id_funcionario": id_funcionario, **params}, client=client
        )
    return repository.call_rpc("cadastrar_funcionario_com_usuario", params, client=client)


def next_status(status: Optional[str]) -> str:
    """ativo -> licença -> afastado -> inativo -> ativo. Desconhecido volta para ativo."""
    try:
        i = STATUS_FUNCIONARIO.index(status)
    except ValueError:
        return STATUS_FUNCIONARIO[0]
    return STATUS_FUNCIONARIO[(i + 1) % len(STATUS_FUNCIONARIO)]
