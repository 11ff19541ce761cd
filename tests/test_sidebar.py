from ui.sidebar import home_page, pages_for, roles_for


def test_admin_ve_todas_as_paginas():
    assert pages_for("Admin")[0] == "Painel"
    assert "Funcionários" in pages_for("Admin")


def test_equipe_nao_ve_paginas_do_admin():
    pages = pages_for("Cuidador")
    assert "Painel" not in pages
    assert "Responsáveis" not in pages
    assert "Residentes" in pages
    assert home_page("Enfermagem") == "pages/2_Residentes.py"


def test_responsavel_ve_familiares_prontuario_e_perfil():
    assert pages_for("Responsavel") == ["Meus familiares", "Prontuário", "Meu perfil"]
    assert home_page("Responsavel") == "pages/11_Familia.py"


def test_equipe_abre_o_prontuario_mas_nao_o_painel_da_familia():
    pages = pages_for("Cuidador")
    assert "Prontuário" in pages
    assert "Meus familiares" not in pages


def test_roles_for():
    assert roles_for("Painel") == ("Admin",)
