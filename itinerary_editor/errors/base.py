from enum import Enum

from httpx import codes

BASE_EXCEPTION = (
    OSError,
    MemoryError,
    RuntimeError,
    ConnectionError,
    TimeoutError,
)


class ErrorKind(Enum):
    """Closed set of failure categories reported to the presentation layer."""

    NOT_FOUND = "not_found"
    ACCESS_DENIED = "access_denied"
    AUTH_REQUIRED = "auth_required"
    QUOTA_EXCEEDED = "quota_exceeded"
    VALIDATION = "validation"
    NETWORK = "network"
    GENERIC = "generic"


class BaseAppError(Exception):
    """Base exception class for application errors."""

    kind: ErrorKind = ErrorKind.GENERIC

    def __init__(
        self,
        detail: str = "Internal Error",
        status_code: int = codes.INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code

    def __str__(self) -> str:
        return self.detail


def error_kind(exc: BaseException) -> ErrorKind:
    """
    Classify any exception into an ``ErrorKind``.

    Args:
        exc: The exception raised by a store or remote operation.

    Returns:
        The tag carried by application errors, ``NETWORK`` for bare
        connection problems, ``GENERIC`` otherwise.
    """
    if isinstance(exc, BaseAppError):
        return exc.kind
    if isinstance(exc, ConnectionError | TimeoutError):
        return ErrorKind.NETWORK
    return ErrorKind.GENERIC
