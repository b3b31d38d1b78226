"""Application-level exceptions translated to HTTP responses in main.py."""


class RemoteOperationError(Exception):
    """A storage, email or data-service call failed. Never retried automatically."""

    def __init__(self, operation: str, detail: str = ""):
        self.operation = operation
        self.detail = detail
        super().__init__(f"{operation} failed: {detail}" if detail else f"{operation} failed")


class InvalidOrExpiredLink(Exception):
    """Password setup link does not match an account or is past its expiry."""

    message = "Link inválido ou expirado. Entre em contato com o administrador."

    def __init__(self):
        super().__init__(self.message)
