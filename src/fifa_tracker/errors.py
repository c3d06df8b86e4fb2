"""Exception taxonomy for the data-access layer.

All errors raised to callers derive from ``DataAccessError``:

- ``DatabaseUnavailableError``: the connectivity probe reports offline.
- ``ValidationError``: a record failed field validation before any network call.
- ``RemoteError``: the remote service (or the transport to it) failed. The
  ``kind`` is assigned once by the client adapter and drives retry decisions.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence


class ErrorKind(Enum):
    TRANSIENT = "transient"
    AUTH = "auth"
    PERMISSION = "permission"
    NOT_FOUND = "not_found"
    CONSTRAINT = "constraint"
    BAD_REQUEST = "bad_request"


_RETRYABLE_KINDS = frozenset({ErrorKind.TRANSIENT})


class DataAccessError(Exception):
    """Base error for data-access failures."""


class DatabaseUnavailableError(DataAccessError):
    """Raised before any attempt when the database is known to be unreachable."""

    def __init__(self, message: str = "Keine Datenbankverbindung verfügbar. Bitte später versuchen.") -> None:
        super().__init__(message)


class ValidationError(DataAccessError):
    """Raised when a record violates its table's field rules.

    Attributes:
        errors: The individual field violations, in rule order.
    """

    def __init__(self, errors: Sequence[str]) -> None:
        self.errors = tuple(errors)
        super().__init__(f"Validierungsfehler: {', '.join(self.errors)}")


class MissingIdError(ValidationError):
    """Raised when an update or delete is issued without a row id."""

    def __init__(self, operation: str) -> None:
        super().__init__([f"ID ist erforderlich zum {operation}"])
        self.operation = operation


class RemoteError(DataAccessError):
    """A failure reported by (or on the way to) the remote database.

    Attributes:
        kind: Classification assigned by the client adapter.
        message: Human-readable description from the service.
        code: Service error code (PostgREST ``PGRST...`` or a Postgres SQLSTATE).
        status: HTTP status, or ``None`` for transport failures.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        code: str | None = None,
        status: int | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.code = code
        self.status = status

    @property
    def retryable(self) -> bool:
        return self.kind in _RETRYABLE_KINDS

    def __str__(self) -> str:
        if self.code:
            return f"{self.message} ({self.code})"
        return self.message

    def __repr__(self) -> str:
        return f"RemoteError(kind={self.kind.value!r}, message={self.message!r}, code={self.code!r}, status={self.status!r})"


def describe_error(error: BaseException) -> str:
    """Translate an error into the message shown to the user."""
    if isinstance(error, ValidationError | DatabaseUnavailableError):
        return str(error)

    message = str(error).lower()
    status = error.status if isinstance(error, RemoteError) else None
    kind = error.kind if isinstance(error, RemoteError) else None

    if "failed to fetch" in message or "network" in message or "connect" in message:
        return "Verbindungsfehler. Bitte prüfen Sie Ihre Internetverbindung."
    if "jwt expired" in message or "token" in message:
        return "Sitzung abgelaufen. Bitte melden Sie sich erneut an."
    if status == 401 or kind is ErrorKind.AUTH:
        return "Nicht autorisiert. Bitte melden Sie sich an."
    if status == 403 or kind is ErrorKind.PERMISSION:
        return "Keine Berechtigung für diese Aktion."
    if "duplicate key" in message or "unique constraint" in message or getattr(error, "code", None) == "23505":
        return "Eintrag existiert bereits."
    if "not found" in message or status == 404 or kind is ErrorKind.NOT_FOUND:
        return "Die angeforderten Daten wurden nicht gefunden."
    if "timeout" in message or "timed out" in message:
        return "Anfrage-Timeout. Bitte versuchen Sie es erneut."
    if "server" in message or (status is not None and status >= 500):
        return "Server temporär nicht verfügbar. Bitte versuchen Sie es später erneut."
    if "validation" in message or "validierung" in message:
        return str(error)
    return "Ein unerwarteter Fehler ist aufgetreten."
