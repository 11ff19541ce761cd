from __future__ import annotations
import streamlit as st
import plotly.graph_objects as go
from typing import Callable, Optional, Dict, Any

from src.errors import RemoteError

# ============================================================
# Helpers: sessão + UI
# ============================================================

# === Cores dos status (badges das tabelas) ===
STATUS_COLORS = {
    # pessoas
    "ativo": "#2ECC71",
    "inativo": "#B0BEC5",
    "licença": "#FF9800",
    "afastado": "#E53935",

    # medicamentos
    "suspenso": "#FF9800",
    "finalizado": "#B0BEC5",

    # atividades
    "agendada": "#1E88E5",
    "concluida": "#2ECC71",
    "cancelada": "#B0BEC5",

    # ocorrências
    "pendente": "#FF9800",
    "resolvida": "#2ECC71",
}


def status_color(status: str | None, default: str = "#607d8b") -> str:
    return STATUS_COLORS.get((status or "").strip().lower(), default)


def status_badge(status: str | None) -> str:
    """Badge (cápsula) colorida para usar em st.markdown(unsafe_allow_html=True)."""
    label = status or "—"
    return (
        f"<span style='background:{status_color(status)};color:#fff;padding:2px 10px;"
        f"border-radius:999px;font-size:12px;font-weight:600;'>{label}</span>"
    )


def bool_status(active: Any) -> str:
    """Status booleano (residente / responsável) -> rótulo."""
    return "ativo" if active else "inativo"


def apply_plot_theme(
    fig: go.Figure,
    *,
    height: Optional[int] = None,
    margin: Optional[Dict[str, int]] = None,
    x_title: Optional[str] = None,
    y_title: Optional[str] = None,
) -> go.Figure:
    """
    Tema padrão dos gráficos do painel.
    """
    fig.update_layout(
        template="simple_white",
        margin=margin or dict(l=30, r=30, t=30, b=30),
        font=dict(family="Inter, system-ui, Arial", size=12, color="#223"),
        showlegend=False,
    )
    if height is not None:
        fig.update_layout(height=height)

    fig.update_xaxes(title_text=x_title, showgrid=False, ticks="outside")
    fig.update_yaxes(title_text=y_title, showgrid=True, gridcolor="rgba(0,0,0,0.06)", zeroline=False)
    return fig


# ============================================================
# Estado da sessão
# ============================================================

def init_state():
    st.session_state.setdefault("user", None)
    st.session_state.setdefault("flash", None)
    st.session_state.setdefault("form_errors", {})
    st.session_state.setdefault("editing", {})
    st.session_state.setdefault("pages", {})


def current_user() -> Optional[dict]:
    return st.session_state.get("user")


def set_user(email: str, role: str):
    st.session_state["user"] = {"email": email, "role": role}


def clear_session():
    """Logout: apaga tudo que é do usuário (inclusive linhas carregadas)."""
    for key in list(st.session_state.keys()):
        del st.session_state[key]
    init_state()


def require_role(*roles: str) -> dict:
    """
    Para a página se não houver login ou se o papel não tiver acesso.
    Sem `roles`, basta estar logado.
    """
    user = current_user()
    if not user:
        st.warning("Faça login para continuar.")
        st.page_link("app.py", label="Ir para o login", icon="🔑")
        st.stop()
    if roles and user["role"] not in roles:
        st.error("Você não tem permissão para acessar esta página.")
        st.stop()
    return user


# ============================================================
# Linhas carregadas ao abrir a tela
# ============================================================

def load_rows(key: str, loader: Callable[[], list], force: bool = False) -> list:
    """
    Busca as linhas uma vez por sessão (ao abrir a tela) e guarda no
    session_state. `force=True` é o botão "Atualizar".
    Em caso de erro remoto mostra a mensagem e devolve o que já havia.
    """
    rows_key = f"rows_{key}"
    if force or rows_key not in st.session_state:
        try:
            st.session_state[rows_key] = loader()
        except RemoteError as e:
            st.error(e.message)
            st.session_state.setdefault(rows_key, [])
    return st.session_state[rows_key]


def set_rows(key: str, rows: list):
    st.session_state[f"rows_{key}"] = rows


def get_rows(key: str) -> list:
    return st.session_state.get(f"rows_{key}", [])


# ============================================================
# Mensagens que sobrevivem ao st.rerun
# ============================================================

def flash(message: str, kind: str = "success"):
    st.session_state["flash"] = {"message": message, "kind": kind}


def show_flash():
    msg = st.session_state.pop("flash", None)
    if not msg:
        return
    show = {"success": st.success, "error": st.error, "warning": st.warning}.get(msg["kind"], st.info)
    show(msg["message"])


# ============================================================
# Erros por campo / modo edição
# ============================================================

def set_errors(form: str, errors: dict[str, str]):
    st.session_state["form_errors"][form] = errors


def get_errors(form: str) -> dict[str, str]:
    return st.session_state["form_errors"].get(form, {})


def clear_errors(form: str):
    st.session_state["form_errors"].pop(form, None)


def is_editing(section: str) -> bool:
    return st.session_state["editing"].get(section, False)


def set_editing(section: str, value: bool):
    st.session_state["editing"][section] = value
    if not value:
        clear_errors(section)


# ============================================================
# Paginação (página atual por tela)
# ============================================================

def get_page(key: str) -> int:
    return st.session_state["pages"].get(key, 1)


def set_page(key: str, page: int):
    st.session_state["pages"][key] = page


def render_pagination(key: str, page: int, pages: int, total: int):
    """Botões ◀ / ▶ embaixo da tabela."""
    p1, p2, p3 = st.columns([1, 2, 1])

    with p1:
        if st.button("⬅️ Anterior", use_container_width=True, disabled=(page <= 1), key=f"{key}_prev"):
            set_page(key, page - 1)
            st.rerun()

    with p2:
        st.markdown(
            f"<div style='text-align:center;'>Página <b>{page}</b> de <b>{pages}</b> • Total: <b>{total:,}</b></div>",
            unsafe_allow_html=True
        )

    with p3:
        if st.button("Próxima ➡️", use_container_width=True, disabled=(page >= pages), key=f"{key}_next"):
            set_page(key, page + 1)
            st.rerun()
