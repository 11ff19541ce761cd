"""
Registros do dia a dia que precisam de mais de uma escrita ou de contas
sobre a lista carregada (atividades com vários residentes, ocorrências).
"""

from __future__ import annotations

import logging
from typing import Optional

from src import repository
from src.errors import RemoteError
from src.schemas import AtividadeSchema, to_record

logger = logging.getLogger(__name__)


# ============================================================
# Atividades
# ============================================================

def atividade_residentes(row: dict) -> list[int]:
    """Ids dos residentes de uma atividade carregada com atividade_residente(id_residente)."""
    return [link["id_residente"] for link in (row.get("atividade_residente") or [])]


def save_atividade(model: AtividadeSchema, id_atividade: Optional[int] = None, client=None) -> int:
    """
    Grava a atividade e reescreve os vínculos em atividade_residente.
    Retorna o id da atividade.
    """
    record = to_record(model, exclude={"residentes"})

    if id_atividade:
        repository.update_row("atividade", id_atividade, record, client=client)
        repository.delete_where("atividade_residente", "id_atividade", id_atividade, client=client)
    else:
        id_atividade = repository.insert_row("atividade", record, client=client).get("id")
        if not id_atividade:
            raise RemoteError("Erro ao inserir registro (atividade)", "Nenhum id retornado")

    links = [{"id_atividade": id_atividade, "id_residente": rid} for rid in dict.fromkeys(model.residentes)]
    repository.insert_row("atividade_residente", links, client=client)
    logger.info("Atividade salva", extra={"id": id_atividade, "residentes": len(links)})
    return id_atividade


def delete_atividade(id_atividade: int, client=None) -> None:
    repository.delete_where("atividade_residente", "id_atividade", id_atividade, client=client)
    repository.delete_row("atividade", id_atividade, client=client)


# ============================================================
# Ocorrências
# ============================================================

def incident_counts(rows: list[dict]) -> dict:
    resolvidas = sum(1 for r in rows if r.get("resolvido"))
    return {"total": len(rows), "resolvidas": resolvidas, "pendentes": len(rows) - resolvidas}


def incident_state(row: dict) -> str:
    return "resolvida" if row.get("resolvido") else "pendente"
