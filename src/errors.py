class RemoteError(Exception):
    """
    Falha numa chamada remota (tabela, RPC, storage, auth ou serviço de CEP).

    `message` é o texto mostrado ao usuário; `detail` guarda a mensagem
    original do backend para o log.
    """

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(message)
        self.message = message
        self.detail = detail

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message}: {self.detail}"
        return self.message
