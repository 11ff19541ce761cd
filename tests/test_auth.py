import pytest

from src.auth import change_password, hash_password, sign_in
from src.errors import RemoteError


def test_sign_in_devolve_papel(client):
    client.respond("get_my_role", "Enfermagem")
    assert sign_in("ana@ilpi.com", "segredo", client=client) == "Enfermagem"
    assert client.auth.signed_in == [{"email": "ana@ilpi.com", "password": "segredo"}]


def test_sign_in_credenciais_invalidas(client):
    client.auth.reject_credentials()
    with pytest.raises(RemoteError) as exc:
        sign_in("ana@ilpi.com", "errada", client=client)
    assert exc.value.message == "Email ou senha inválidos. Por favor, tente novamente."
    assert client.rpc_calls == []


def test_sign_in_servico_fora_nao_culpa_a_senha(client):
    client.auth.go_offline()
    with pytest.raises(RemoteError) as exc:
        sign_in("ana@ilpi.com", "segredo", client=client)
    assert exc.value.message == "Não foi possível conectar ao serviço de login. Tente novamente."
    assert exc.value.detail == "Connection refused"
    assert client.rpc_calls == []


@pytest.mark.parametrize("role", [None, ""])
def test_sign_in_sem_papel_desloga(client, role):
    client.respond("get_my_role", role)
    with pytest.raises(RemoteError) as exc:
        sign_in("ana@ilpi.com", "segredo", client=client)
    assert exc.value.message == "Perfil de utilizador não encontrado no sistema."
    assert client.auth.signed_out == 1


def test_sign_in_papel_desconhecido(client):
    client.respond("get_my_role", "Visitante")
    with pytest.raises(RemoteError):
        sign_in("ana@ilpi.com", "segredo", client=client)
    assert client.auth.signed_out == 1


def test_sign_in_rpc_falha_desloga(client):
    client.fail("get_my_role")
    with pytest.raises(RemoteError):
        sign_in("ana@ilpi.com", "segredo", client=client)
    assert client.auth.signed_out == 1


def test_change_password_confere_hash_atual(client):
    client.respond("usuario", [{"id": 3}])
    change_password(3, "velha", "nova", client=client)

    check, update = client.queries
    assert check.filters == [("id", 3), ("senha", hash_password("velha"))]
    assert update.payload == {"senha": hash_password("nova")}
    assert update.filters == [("id", 3)]


def test_change_password_senha_atual_errada(client):
    client.respond("usuario", [])
    with pytest.raises(RemoteError) as exc:
        change_password(3, "errada", "nova", client=client)
    assert exc.value.message == "A senha atual está incorreta."
    assert client.queries_for("usuario", "update") == []
