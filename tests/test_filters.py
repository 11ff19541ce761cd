import pandas as pd

from src.filters import TODOS, distinct, equals, norm_text, paginate, search, sort_rows, to_frame

ROWS = [
    {"id": 1, "nome": "José da Silva", "quarto": "101", "status": True, "responsavel": {"nome": "Maria"}},
    {"id": 2, "nome": "Ana Souza", "quarto": "102", "status": False, "responsavel": None},
    {"id": 3, "nome": "Antônio Lima", "quarto": None, "status": True, "responsavel": {"nome": "João"}},
]


def test_norm_text_ignora_acento_e_caixa():
    assert norm_text("  JOSÉ ") == "jose"
    assert norm_text(None) == ""
    assert norm_text(float("nan")) == ""


def test_to_frame_achata_relacoes_e_troca_nan_por_none():
    df = to_frame(ROWS)
    assert "responsavel_nome" in df.columns
    assert df.loc[1, "responsavel_nome"] is None
    assert df.loc[2, "quarto"] is None


def test_to_frame_vazio():
    assert to_frame([]).empty


def test_search_por_varias_colunas_sem_acento():
    df = to_frame(ROWS)
    assert search(df, "jose", ["nome"])["id"].tolist() == [1]
    assert search(df, "joao", ["nome", "responsavel_nome"])["id"].tolist() == [3]
    assert search(df, "", ["nome"]).equals(df)


def test_search_coluna_inexistente_nao_encontra_nada():
    df = to_frame(ROWS)
    assert search(df, "ana", ["cpf"]).empty


def test_equals_todos_nao_filtra():
    df = to_frame(ROWS)
    assert len(equals(df, "status", TODOS)) == 3
    assert equals(df, "status", True)["id"].tolist() == [1, 3]


def test_distinct():
    df = pd.DataFrame({"c": ["b", "a", None, "b", ""]})
    assert distinct(df, "c") == ["a", "b"]
    assert distinct(df, "x") == []


def test_paginate_limita_pagina():
    df = pd.DataFrame({"n": range(25)})
    page_df, page, pages = paginate(df, 9, 10)
    assert (page, pages) == (3, 3)
    assert page_df["n"].tolist() == list(range(20, 25))

    _, page, pages = paginate(df.iloc[0:0], 4, 10)
    assert (page, pages) == (1, 1)


def test_sort_rows_ignora_colunas_ausentes():
    df = to_frame(ROWS)
    out = sort_rows(df, [("nome", False), ("nao_existe", True)])
    assert out["id"].tolist() == [2, 3, 1]


def test_sort_rows_usa_desc_como_o_order_by_do_banco():
    # mesma tupla (coluna, desc) passada a repository.fetch_rows
    df = to_frame(ROWS)
    assert sort_rows(df, [("nome", True)])["id"].tolist() == [1, 3, 2]
    assert sort_rows(df, [("status", True), ("nome", False)])["id"].tolist() == [3, 1, 2]
