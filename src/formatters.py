"""
Máscaras de CPF, CEP e telefone + formatação de datas em pt-BR.

Todas as funções são puras e aceitam entrada parcial (o usuário ainda
digitando), aplicando a máscara de forma progressiva.
"""

from __future__ import annotations

import re
from datetime import date, datetime

_NON_DIGITS = re.compile(r"\D")

WEEKDAYS_PT = [
    "segunda-feira", "terça-feira", "quarta-feira", "quinta-feira",
    "sexta-feira", "sábado", "domingo",
]
MONTHS_PT = [
    "janeiro", "fevereiro", "março", "abril", "maio", "junho",
    "julho", "agosto", "setembro", "outubro", "novembro", "dezembro",
]


def remove_formatting(value: str | None) -> str:
    """Mantém só os dígitos."""
    if not value:
        return ""
    return _NON_DIGITS.sub("", str(value))


def format_cpf(cpf: str | None) -> str:
    """'12345678901' -> '123.456.789-01' (máx. 11 dígitos)."""
    digits = remove_formatting(cpf)[:11]
    if len(digits) <= 3:
        return digits
    if len(digits) <= 6:
        return f"{digits[:3]}.{digits[3:]}"
    if len(digits) <= 9:
        return f"{digits[:3]}.{digits[3:6]}.{digits[6:]}"
    return f"{digits[:3]}.{digits[3:6]}.{digits[6:9]}-{digits[9:]}"


def format_cep(cep: str | None) -> str:
    """'01310100' -> '01310-100' (máx. 8 dígitos)."""
    digits = remove_formatting(cep)[:8]
    if len(digits) > 5:
        return f"{digits[:5]}-{digits[5:]}"
    return digits


def format_phone(phone: str | None) -> str:
    """
    Fixo (10 dígitos) -> '(11) 3333-4444'
    Celular (11 dígitos) -> '(11) 98888-7777'
    """
    digits = remove_formatting(phone)[:11]
    if len(digits) < 2:
        return digits
    ddd, rest = digits[:2], digits[2:]
    split = 4 if len(digits) <= 10 else 5
    if len(rest) <= split:
        return f"({ddd}) {rest}"
    return f"({ddd}) {rest[:split]}-{rest[split:]}"


def to_date(value: date | datetime | str | None) -> date:
    if value is None or value == "":
        return date.today()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00")).date()


def format_date(value: date | datetime | str | None) -> str:
    """ISO -> 'dd/mm/aaaa'. Vazio vira ''."""
    if value is None or value == "":
        return ""
    return to_date(value).strftime("%d/%m/%Y")


def format_date_long(value: date | datetime | str | None = None) -> str:
    """Data por extenso, ex.: 'Sexta-feira, 17 de outubro de 2025'."""
    d = to_date(value)
    text = f"{WEEKDAYS_PT[d.weekday()]}, {d.day} de {MONTHS_PT[d.month - 1]} de {d.year}"
    return text[0].upper() + text[1:]


def format_date_numeric(value: date | datetime | str | None = None) -> str:
    """Data no formato 'aaaa-mm-dd' (o que o banco espera)."""
    return to_date(value).isoformat()


def calc_age(birth: date | datetime | str | None, today: date | None = None) -> int | None:
    if birth is None or birth == "":
        return None
    b = to_date(birth)
    t = today or date.today()
    return t.year - b.year - ((t.month, t.day) < (b.month, b.day))
