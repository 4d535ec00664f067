"""Typed errors raised by the Glue / Lake Formation adapters.

boto3 reports every service failure as a `ClientError` carrying an error
code string, plus a family of `BotoCoreError` subclasses for transport
problems. The adapters translate both into the small taxonomy below so the
core can decide between "abort", "skip with warning" and "record as failed"
without knowing about botocore.
"""

from __future__ import annotations

from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectionClosedError,
    ConnectTimeoutError,
    EndpointConnectionError,
    ReadTimeoutError,
)

NOT_FOUND_CODES = frozenset({"EntityNotFoundException", "ResourceNotFoundException"})
ACCESS_DENIED_CODES = frozenset(
    {"AccessDeniedException", "AccessDenied", "UnauthorizedOperation"}
)
TRANSIENT_CODES = frozenset(
    {
        "ThrottlingException",
        "Throttling",
        "TooManyRequestsException",
        "RequestLimitExceeded",
        "InternalServiceException",
        "InternalFailure",
        "ServiceUnavailable",
        "ServiceUnavailableException",
        "OperationTimeoutException",
        "ConcurrentModificationException",
    }
)
ALREADY_EXISTS_CODES = frozenset({"AlreadyExistsException"})


class CatalogApiError(RuntimeError):
    """Raised when a Glue or Lake Formation call fails."""

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.code = code

    @property
    def reason(self) -> str:
        """Short reason for summaries: the provider code, or the message."""
        return self.code or str(self)

    @property
    def detail(self) -> str:
        """Reason with the provider message, e.g. `InvalidInputException: ...`."""
        message = str(self)
        if not self.code:
            return message
        if not message or message == self.code:
            return self.code
        return f"{self.code}: {message}"


class NotFound(CatalogApiError):
    """The catalog, database or table does not exist."""


class AccessDenied(CatalogApiError):
    """The caller lacks permission for the requested operation."""


class TransientError(CatalogApiError):
    """Throttling, service-side or network failure that may succeed on rerun."""


def error_code(exc: ClientError) -> str:
    """Return the provider error code from a botocore ClientError."""
    return exc.response.get("Error", {}).get("Code", "") or ""


def is_already_exists(exc: ClientError) -> bool:
    """Return True if the provider reports the resource/grant as pre-existing."""
    return error_code(exc) in ALREADY_EXISTS_CODES


def translate_error(exc: Exception) -> CatalogApiError:
    """
    Map a botocore exception onto the adapter error taxonomy.

    Args:
        exc: A `ClientError` or `BotoCoreError` raised by a boto3 client.

    Returns:
        The matching `CatalogApiError` subclass instance. Unknown provider
        codes map to the `CatalogApiError` base class with the code kept.
    """
    if isinstance(exc, ClientError):
        code = error_code(exc)
        message = exc.response.get("Error", {}).get("Message") or str(exc)
        if code in NOT_FOUND_CODES:
            return NotFound(message, code=code)
        if code in ACCESS_DENIED_CODES:
            return AccessDenied(message, code=code)
        if code in TRANSIENT_CODES:
            return TransientError(message, code=code)
        return CatalogApiError(message, code=code or None)

    if isinstance(
        exc,
        (
            EndpointConnectionError,
            ConnectTimeoutError,
            ReadTimeoutError,
            ConnectionClosedError,
        ),
    ):
        return TransientError(str(exc), code=type(exc).__name__)
    if isinstance(exc, BotoCoreError):
        return CatalogApiError(str(exc), code=type(exc).__name__)
    return CatalogApiError(str(exc))
