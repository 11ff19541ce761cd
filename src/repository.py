"""
Acesso às tabelas, RPCs e storage do Supabase.

Toda chamada remota passa por aqui: o erro do backend é logado uma vez e
relançado como RemoteError com uma mensagem pronta para a tela.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Iterable, Optional

from postgrest.exceptions import APIError

from src.errors import RemoteError

logger = logging.getLogger(__name__)


def resolve_client(client):
    if client is not None:
        return client
    # import tardio: os testes passam um cliente fake e não precisam de sessão
    from src.supabase_client import get_client
    return get_client()


def _execute(query, action: str, target: str):
    try:
        return query.execute()
    except APIError as exc:
        detail = getattr(exc, "message", None) or str(exc)
        logger.error("Falha na chamada remota", extra={"action": action, "target": target, "detail": detail})
        raise RemoteError(f"Erro ao {action} ({target})", detail) from exc


def fetch_rows(
    table: str,
    columns: str = "*",
    *,
    order_by: Optional[Iterable[tuple[str, bool]]] = None,
    eq: Optional[dict[str, Any]] = None,
    client=None,
) -> list[dict]:
    """
    SELECT simples. `order_by` é uma lista de (coluna, desc).
    """
    query = resolve_client(client).table(table).select(columns)
    for col, value in (eq or {}).items():
        query = query.eq(col, value)
    for col, desc in (order_by or []):
        query = query.order(col, desc=desc)
    res = _execute(query, "buscar registros", table)
    return res.data or []


def count_rows(table: str, client=None) -> int:
    query = resolve_client(client).table(table).select("id", count="exact").limit(1)
    res = _execute(query, "contar registros", table)
    return res.count or 0


def insert_row(table: str, values: dict | list[dict], client=None) -> dict:
    query = resolve_client(client).table(table).insert(values)
    res = _execute(query, "inserir registro", table)
    logger.info("Registro inserido", extra={"table": table})
    rows = res.data or []
    return rows[0] if rows else {}


def update_row(table: str, row_id: Any, values: dict, client=None) -> None:
    query = resolve_client(client).table(table).update(values).eq("id", row_id)
    _execute(query, "atualizar registro", table)
    logger.info("Registro atualizado", extra={"table": table, "id": row_id})


def update_where(table: str, column: str, value: Any, values: dict, client=None) -> None:
    query = resolve_client(client).table(table).update(values).eq(column, value)
    _execute(query, "atualizar registros", table)


def delete_row(table: str, row_id: Any, client=None) -> None:
    query = resolve_client(client).table(table).delete().eq("id", row_id)
    _execute(query, "excluir registro", table)
    logger.info("Registro excluído", extra={"table": table, "id": row_id})


def delete_where(table: str, column: str, value: Any, client=None) -> None:
    query = resolve_client(client).table(table).delete().eq(column, value)
    _execute(query, "excluir registros", table)


def call_rpc(name: str, params: Optional[dict] = None, client=None):
    """Chama uma function do Postgres; a atomicidade é garantida no servidor."""
    query = resolve_client(client).rpc(name, params or {})
    res = _execute(query, "executar operação", name)
    logger.info("RPC executada", extra={"rpc": name})
    return res.data


def remove_from(rows: list[dict], row_id: Any) -> list[dict]:
    """Tira a linha da lista local depois de um delete bem-sucedido."""
    return [r for r in rows if r.get("id") != row_id]


def replace_in(rows: list[dict], row_id: Any, changes: dict) -> list[dict]:
    return [{**r, **changes} if r.get("id") == row_id else r for r in rows]


def find_in(rows: list[dict], row_id: Any) -> dict:
    """Linha original (com as relações aninhadas) a partir do id."""
    return next((r for r in rows if r.get("id") == row_id), {})


# ============================================================
# Storage
# ============================================================

ALLOWED_IMAGE_TYPES = {"image/png", "image/jpg", "image/jpeg"}
MAX_IMAGE_BYTES = 5 * 1024 * 1024


def check_image(content_type: str | None, size: int) -> str | None:
    """Devolve a mensagem de erro da imagem, ou None se estiver ok."""
    if content_type not in ALLOWED_IMAGE_TYPES:
        return "Formato de arquivo inválido. Use .jpg, .png. ou .jpeg."
    if size > MAX_IMAGE_BYTES:
        return f"O arquivo é muito grande. O limite é de {MAX_IMAGE_BYTES // (1024 * 1024)}MB."
    return None


def upload_photo(
    bucket: str,
    filename: str,
    content: bytes,
    content_type: str,
    folder: str = "fotos-perfil",
    client=None,
) -> str:
    """
    Sobe a foto no bucket e devolve a URL pública.
    O nome do arquivo é aleatório para não sobrescrever fotos existentes.
    """
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else "jpg"
    path = f"{folder}/{uuid.uuid4().hex}.{ext}"
    storage = resolve_client(client).storage.from_(bucket)
    try:
        storage.upload(path=path, file=content, file_options={"content-type": content_type})
        url = storage.get_public_url(path)
    except Exception as exc:
        logger.error("Falha no upload", extra={"bucket": bucket, "path": path, "detail": str(exc)})
        raise RemoteError("Erro ao fazer upload da imagem. Tente novamente.", str(exc)) from exc
    logger.info("Foto enviada", extra={"bucket": bucket, "path": path})
    return url
