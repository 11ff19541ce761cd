import streamlit as st

from src.auth import ROLE_ADMIN, ROLE_CUIDADOR, ROLE_ENFERMAGEM, ROLE_RESPONSAVEL, sign_out
from src.helpers import clear_session, current_user
from src.supabase_client import reset_client

STAFF = (ROLE_ADMIN, ROLE_CUIDADOR, ROLE_ENFERMAGEM)
EVERYONE = STAFF + (ROLE_RESPONSAVEL,)

# rótulo -> (script, papéis com acesso)
PAGES = {
    "Painel": ("pages/0_Painel.py", (ROLE_ADMIN,)),
    "Cadastrar paciente": ("pages/1_Cadastro_Paciente.py", (ROLE_ADMIN,)),
    "Residentes": ("pages/2_Residentes.py", STAFF),
    "Responsáveis": ("pages/3_Responsaveis.py", (ROLE_ADMIN,)),
    "Funcionários": ("pages/4_Funcionarios.py", (ROLE_ADMIN,)),
    "Medicamentos": ("pages/5_Medicamentos.py", STAFF),
    "Consultas": ("pages/6_Consultas.py", STAFF),
    "Atividades": ("pages/7_Atividades.py", STAFF),
    "Ocorrências": ("pages/8_Ocorrencias.py", STAFF),
    "Preferências": ("pages/9_Preferencias.py", STAFF),
    "Meus familiares": ("pages/11_Familia.py", (ROLE_RESPONSAVEL,)),
    "Prontuário": ("pages/12_Prontuario.py", EVERYONE),
    "Meu perfil": ("pages/10_Perfil.py", EVERYONE),
}


def pages_for(role: str) -> list[str]:
    return [label for label, (_, roles) in PAGES.items() if role in roles]


def roles_for(label: str) -> tuple:
    return PAGES[label][1]


def home_page(role: str) -> str:
    """Primeira página que o papel pode ver (destino após o login)."""
    return PAGES[pages_for(role)[0]][0]


def render_sidebar_menu():
    user = current_user()
    if not user:
        return

    with st.sidebar:
        options = pages_for(user["role"])

        current = st.session_state.get("current_page", options[0])
        if current not in options:
            current = options[0]

        st.sidebar.title("📌 Navegação")
        st.caption(f"{user['email']} • {user['role']}")

        selected = st.radio(
            "Ir para:",
            options,
            index=options.index(current),
            key="nav_selected",
        )

        st.divider()
        if st.button("Sair", use_container_width=True, key="nav_logout"):
            sign_out()
            reset_client()
            clear_session()
            st.switch_page("app.py")

    if selected != current:
        st.session_state["current_page"] = selected
        st.switch_page(PAGES[selected][0])
