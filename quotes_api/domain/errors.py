"""Error taxonomy shared by the service and storage layers."""


class QuoteError(Exception):
    """Base class for quote-service errors."""


class InvalidInput(QuoteError):
    """Raised when a caller supplies an empty author/text or a non-positive id."""

    def __init__(self, message: str = "invalid input") -> None:
        super().__init__(message)


class NotFound(QuoteError):
    """Raised when the targeted quote (or any quote at all) does not exist."""

    def __init__(self, message: str = "quote not found") -> None:
        super().__init__(message)


class StorageFailure(QuoteError):
    """Wraps an error raised by the database backend."""

    operation: str

    def __init__(
        self, operation: str, cause: BaseException | None = None, message: str | None = None
    ) -> None:
        super().__init__(message if message is not None else str(cause))
        self.operation = operation
        self.cause = cause


class Conflict(StorageFailure):
    """Raised when the allocated id was taken by a concurrent insert."""

    def __init__(self, quote_id: int, cause: BaseException | None = None) -> None:
        super().__init__("create", cause, message=f"ID {quote_id} already exists")
        self.quote_id = quote_id
