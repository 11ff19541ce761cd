"""
Perfil do usuário logado: dados pessoais, endereço e senha, cada um salvo
separadamente.
"""

from __future__ import annotations

import logging
from typing import Optional

from src import repository
from src.auth import ROLE_RESPONSAVEL
from src.errors import RemoteError
from src.formatters import remove_formatting
from src.schemas import EnderecoSchema, UsuarioSchema, to_record

logger = logging.getLogger(__name__)


def person_table(role: str) -> str:
    return "responsavel" if role == ROLE_RESPONSAVEL else "funcionario"


def load_profile(email: str, role: str, client=None) -> Optional[dict]:
    """
    Junta usuario + pessoa (funcionario ou responsavel) + endereco.
    Retorna None se o usuário não existir na tabela usuario.
    """
    users = repository.fetch_rows("usuario", "id, email, nome, papel", eq={"email": email}, client=client)
    if not users:
        return None
    usuario = users[0]

    table = person_table(role)
    people = repository.fetch_rows(table, "*", eq={"id_usuario": usuario["id"]}, client=client)
    pessoa = people[0] if people else {}

    endereco = {}
    if pessoa.get("id_endereco"):
        enderecos = repository.fetch_rows("endereco", "*", eq={"id": pessoa["id_endereco"]}, client=client)
        endereco = enderecos[0] if enderecos else {}

    return {
        "usuario": usuario,
        "pessoa": pessoa,
        "pessoa_tabela": table,
        "endereco": endereco,
    }


def _person_id(profile: dict):
    # admin sem linha em funcionario/responsavel: não há onde gravar
    id_pessoa = (profile.get("pessoa") or {}).get("id")
    if not id_pessoa:
        raise RemoteError("Cadastro da pessoa não encontrado.")
    return id_pessoa


def update_personal(profile: dict, model: UsuarioSchema, client=None) -> dict:
    """Grava os dados pessoais na tabela da pessoa. Retorna as colunas gravadas."""
    id_pessoa = _person_id(profile)
    values = to_record(model)
    for field in ("telefone_principal", "telefone_secundario", "contato_emergencia_telefone"):
        values[field] = remove_formatting(values.get(field)) or None

    repository.update_row(profile["pessoa_tabela"], id_pessoa, values, client=client)
    return values


def update_address(profile: dict, model: EnderecoSchema, client=None) -> dict:
    """
    Atualiza o endereço da pessoa; se ela ainda não tiver um, cria e vincula.
    """
    id_pessoa = _person_id(profile)
    values = to_record(model)
    values["cep"] = remove_formatting(values["cep"])

    id_endereco = (profile.get("endereco") or {}).get("id")
    if id_endereco:
        repository.update_row("endereco", id_endereco, values, client=client)
        return {**values, "id": id_endereco}

    created = repository.insert_row("endereco", values, client=client)
    if created.get("id"):
        repository.update_row(
            profile["pessoa_tabela"], id_pessoa, {"id_endereco": created["id"]}, client=client
        )
    logger.info("Endereço criado para o perfil", extra={"id_endereco": created.get("id")})
    return {**values, **created}
