"""
Login (Supabase Auth), papel do usuário e troca de senha.
"""

from __future__ import annotations

import hashlib
import logging

from supabase import AuthApiError, AuthError

from src import repository
from src.errors import RemoteError

logger = logging.getLogger(__name__)

ROLE_ADMIN = "Admin"
ROLE_RESPONSAVEL = "Responsavel"
ROLE_CUIDADOR = "Cuidador"
ROLE_ENFERMAGEM = "Enfermagem"

STAFF_ROLES = {ROLE_CUIDADOR, ROLE_ENFERMAGEM}
KNOWN_ROLES = {ROLE_ADMIN, ROLE_RESPONSAVEL} | STAFF_ROLES


def sign_in(email: str, password: str, client=None) -> str:
    """
    Autentica e devolve o papel do usuário (via function get_my_role).
    Sem papel ou papel desconhecido: desloga e levanta RemoteError.
    """
    c = repository.resolve_client(client)
    try:
        c.auth.sign_in_with_password({"email": email, "password": password})
    except AuthApiError as exc:
        logger.warning("Login recusado", extra={"email": email})
        raise RemoteError("Email ou senha inválidos. Por favor, tente novamente.", str(exc)) from exc
    except AuthError as exc:
        # rede fora, timeout ou resposta inesperada do Auth
        logger.error("Falha no serviço de autenticação", extra={"email": email, "detail": str(exc)})
        raise RemoteError("Não foi possível conectar ao serviço de login. Tente novamente.", str(exc)) from exc

    try:
        role = repository.call_rpc("get_my_role", client=c)
    except RemoteError as exc:
        sign_out(c)
        raise RemoteError("Perfil de utilizador não encontrado no sistema.") from exc

    if not role:
        sign_out(c)
        raise RemoteError("Perfil de utilizador não encontrado no sistema.")
    if role not in KNOWN_ROLES:
        sign_out(c)
        raise RemoteError("Perfil de usuário desconhecido.")

    logger.info("Login efetuado", extra={"email": email, "role": role})
    return role


def sign_out(client=None) -> None:
    c = repository.resolve_client(client)
    try:
        c.auth.sign_out()
    except AuthError as exc:
        # a sessão local é descartada de qualquer forma
        logger.warning("Falha ao deslogar no Supabase", extra={"detail": str(exc)})


def hash_password(password: str) -> str:
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


def change_password(id_usuario: int, senha_atual: str, nova_senha: str, client=None) -> None:
    """
    Confere a senha atual pelo hash em usuario.senha e grava a nova.
    """
    rows = repository.fetch_rows(
        "usuario",
        "id",
        eq={"id": id_usuario, "senha": hash_password(senha_atual)},
        client=client,
    )
    if not rows:
        raise RemoteError("A senha atual está incorreta.")

    repository.update_row("usuario", id_usuario, {"senha": hash_password(nova_senha)}, client=client)
    logger.info("Senha alterada", extra={"id_usuario": id_usuario})
