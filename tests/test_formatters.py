from datetime import date, datetime

import pytest

from src.formatters import (
    calc_age,
    format_cep,
    format_cpf,
    format_date,
    format_date_long,
    format_date_numeric,
    format_phone,
    remove_formatting,
)


@pytest.mark.parametrize("raw, expected", [
    ("", ""),
    ("123", "123"),
    ("1234", "123.4"),
    ("1234567", "123.456.7"),
    ("12345678901", "123.456.789-01"),
    ("123.456.789-0199", "123.456.789-01"),
])
def test_format_cpf_progressivo(raw, expected):
    assert format_cpf(raw) == expected


def test_format_cep():
    assert format_cep("01310100") == "01310-100"
    assert format_cep("01310") == "01310"
    assert format_cep(None) == ""


@pytest.mark.parametrize("raw, expected", [
    ("1", "1"),
    ("11", "(11) "),
    ("113333", "(11) 3333"),
    ("1133334444", "(11) 3333-4444"),
    ("11988887777", "(11) 98888-7777"),
])
def test_format_phone(raw, expected):
    assert format_phone(raw) == expected


def test_remove_formatting():
    assert remove_formatting("(11) 98888-7777") == "11988887777"
    assert remove_formatting(None) == ""


def test_format_date_aceita_iso_e_date():
    assert format_date("2025-03-09") == "09/03/2025"
    assert format_date(date(2024, 12, 31)) == "31/12/2024"
    assert format_date("2025-03-09T10:00:00Z") == "09/03/2025"
    assert format_date(None) == ""


def test_format_date_long():
    # 17/10/2025 foi uma sexta-feira
    assert format_date_long(date(2025, 10, 17)) == "Sexta-feira, 17 de outubro de 2025"


def test_format_date_numeric():
    assert format_date_numeric(datetime(2025, 1, 2, 15, 30)) == "2025-01-02"


def test_calc_age_considera_aniversario():
    today = date(2025, 6, 10)
    assert calc_age("1940-06-10", today) == 85
    assert calc_age("1940-06-11", today) == 84
    assert calc_age(None, today) is None


@pytest.mark.parametrize("fmt, digits", [
    (format_cpf, "12345678901"),
    (format_cep, "01310100"),
    (format_phone, "1133334444"),
    (format_phone, "11988887777"),
])
def test_remover_mascara_devolve_os_digitos(fmt, digits):
    assert remove_formatting(fmt(digits)) == digits
