import pytest

from src import repository
from src.errors import RemoteError


def test_fetch_rows_aplica_filtros_e_ordem(client):
    client.respond("residente", [{"id": 1}])
    rows = repository.fetch_rows(
        "residente", "id, nome", eq={"status": True}, order_by=[("nome", False)], client=client
    )
    assert rows == [{"id": 1}]
    q = client.queries[-1]
    assert (q.action, q.columns) == ("select", "id, nome")
    assert q.filters == [("status", True)]
    assert q.orders == [("nome", False)]


def test_fetch_rows_sem_dados(client):
    client.respond("residente", None)
    assert repository.fetch_rows("residente", client=client) == []


def test_count_rows(client):
    client.respond("funcionario", [{"id": 1}], count=12)
    assert repository.count_rows("funcionario", client=client) == 12
    assert client.queries[-1].count == "exact"


def test_insert_row_devolve_primeira_linha(client):
    client.respond("consulta", [{"id": 5, "medico": "Dr. A"}])
    assert repository.insert_row("consulta", {"medico": "Dr. A"}, client=client)["id"] == 5
    assert client.queries[-1].payload == {"medico": "Dr. A"}


def test_update_e_delete_filtram_por_id(client):
    repository.update_row("consulta", 7, {"medico": "Dr. B"}, client=client)
    repository.delete_row("consulta", 7, client=client)
    update, delete = client.queries
    assert (update.action, update.filters) == ("update", [("id", 7)])
    assert (delete.action, delete.filters) == ("delete", [("id", 7)])


def test_api_error_vira_remote_error(client):
    client.fail("consulta", "violates foreign key constraint")
    with pytest.raises(RemoteError) as exc:
        repository.delete_row("consulta", 1, client=client)
    assert exc.value.message == "Erro ao excluir registro (consulta)"
    assert exc.value.detail == "violates foreign key constraint"


def test_call_rpc(client):
    client.respond("get_my_role", "Admin")
    assert repository.call_rpc("get_my_role", client=client) == "Admin"
    assert client.rpc_calls == [("get_my_role", {})]


def test_operacoes_locais():
    rows = [{"id": 1, "status": True}, {"id": 2, "status": True}]
    assert repository.remove_from(rows, 1) == [{"id": 2, "status": True}]
    assert repository.replace_in(rows, 2, {"status": False})[1] == {"id": 2, "status": False}
    assert repository.find_in(rows, 2) == {"id": 2, "status": True}
    assert repository.find_in(rows, 99) == {}
    assert len(rows) == 2


@pytest.mark.parametrize("content_type, size, ok", [
    ("image/png", 1024, True),
    ("image/jpeg", 5 * 1024 * 1024, True),
    ("image/gif", 10, False),
    ("image/png", 5 * 1024 * 1024 + 1, False),
])
def test_check_image(content_type, size, ok):
    assert (repository.check_image(content_type, size) is None) == ok


def test_upload_photo_devolve_url_publica(client):
    url = repository.upload_photo("idosos-fotos", "eu.PNG", b"x", "image/png", client=client)
    bucket, path, _, options = client.storage.uploads[0]
    assert bucket == "idosos-fotos"
    assert path.startswith("fotos-perfil/") and path.endswith(".png")
    assert options == {"content-type": "image/png"}
    assert url == f"https://cdn.example/idosos-fotos/{path}"


def test_upload_photo_falha(client):
    client.storage.fail = True
    with pytest.raises(RemoteError):
        repository.upload_photo("idosos-fotos", "eu.png", b"x", "image/png", client=client)
