import pytest
from postgrest.exceptions import APIError
from supabase import AuthApiError, AuthError


class FakeResponse:
    def __init__(self, data=None, count=None):
        self.data = data
        self.count = count


class FakeQuery:
    """Encadeia table().select().eq()... e guarda tudo para as asserções."""

    def __init__(self, client, table):
        self.client = client
        self.table = table
        self.action = None
        self.payload = None
        self.columns = None
        self.count = None
        self.filters = []
        self.orders = []
        self.limit_value = None

    def select(self, columns="*", count=None):
        self.action, self.columns, self.count = "select", columns, count
        return self

    def insert(self, values):
        self.action, self.payload = "insert", values
        return self

    def update(self, values):
        self.action, self.payload = "update", values
        return self

    def delete(self):
        self.action = "delete"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self.orders.append((column, desc))
        return self

    def limit(self, n):
        self.limit_value = n
        return self

    def execute(self):
        self.client.queries.append(self)
        return self.client.next_response(self.table)


class FakeRpc:
    def __init__(self, client, name, params):
        self.client = client
        self.name = name
        self.params = params

    def execute(self):
        self.client.rpc_calls.append((self.name, self.params))
        return self.client.next_response(self.name)


def auth_error(cls, message, status=None, code=None):
    """Instancia os erros do Auth sem depender da assinatura do __init__."""
    exc = cls.__new__(cls)
    Exception.__init__(exc, message)
    exc.message, exc.status, exc.code = message, status, code
    return exc


class FakeAuth:
    def __init__(self):
        self.signed_in = []
        self.signed_out = 0
        self.error = None

    def reject_credentials(self):
        self.error = auth_error(AuthApiError, "Invalid login credentials", 400, "invalid_credentials")

    def go_offline(self):
        self.error = auth_error(AuthError, "Connection refused")

    def sign_in_with_password(self, credentials):
        if self.error is not None:
            raise self.error
        self.signed_in.append(credentials)

    def sign_out(self):
        self.signed_out += 1


class FakeBucket:
    def __init__(self, storage, name):
        self.storage = storage
        self.name = name

    def upload(self, path, file, file_options=None):
        if self.storage.fail:
            raise Exception("bucket not found")
        self.storage.uploads.append((self.name, path, file, file_options))

    def get_public_url(self, path):
        return f"https://cdn.example/{self.name}/{path}"


class FakeStorage:
    def __init__(self):
        self.uploads = []
        self.fail = False

    def from_(self, bucket):
        return FakeBucket(self, bucket)


class FakeClient:
    """
    Cliente Supabase em memória.

    `respond(alvo, data)` enfileira a resposta da próxima chamada à tabela
    ou RPC `alvo`; `fail(alvo)` faz a próxima chamada levantar APIError.
    """

    def __init__(self):
        self.queries = []
        self.rpc_calls = []
        self.auth = FakeAuth()
        self.storage = FakeStorage()
        self._responses = {}

    def table(self, name):
        return FakeQuery(self, name)

    def rpc(self, name, params=None):
        return FakeRpc(self, name, params)

    def respond(self, target, data=None, count=None):
        self._responses.setdefault(target, []).append(FakeResponse(data, count))

    def fail(self, target, message="permission denied"):
        self._responses.setdefault(target, []).append(APIError({"message": message, "code": "42501"}))

    def next_response(self, target):
        queue = self._responses.get(target) or []
        if not queue:
            return FakeResponse([])
        item = queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def queries_for(self, table, action=None):
        return [q for q in self.queries if q.table == table and (action is None or q.action == action)]


@pytest.fixture
def client():
    return FakeClient()
