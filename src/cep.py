import logging

import requests

from src.errors import RemoteError
from src.formatters import remove_formatting

logger = logging.getLogger(__name__)

VIACEP_URL = "https://viacep.com.br/ws/{cep}/json/"


def lookup_cep(cep: str, timeout: float = 5.0) -> dict:
    """
    Consulta o ViaCEP e devolve os campos de endereço já no formato dos
    formulários (logradouro, bairro, cidade, estado, complemento).
    """
    digits = remove_formatting(cep)
    if len(digits) != 8:
        raise ValueError("CEP deve ter 8 dígitos")

    try:
        r = requests.get(VIACEP_URL.format(cep=digits), timeout=timeout)
        r.raise_for_status()
        data = r.json()
    except (requests.RequestException, ValueError) as exc:
        logger.warning("Falha ao consultar CEP", extra={"cep": digits, "detail": str(exc)})
        raise RemoteError("Não foi possível consultar o CEP", str(exc)) from exc

    if data.get("erro"):
        raise RemoteError("CEP não encontrado")

    return {
        "logradouro": data.get("logradouro") or "",
        "complemento": data.get("complemento") or "",
        "bairro": data.get("bairro") or "",
        "cidade": data.get("localidade") or "",
        "estado": data.get("uf") or "",
    }
