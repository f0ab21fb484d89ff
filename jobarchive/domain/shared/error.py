"""Errors raised by jobarchive.

DomainError subclasses describe a request that was refused and surface as
4xx. InfrastructureError subclasses describe a backend failure and surface
as 503. See application/api/v1/errors.py.
"""

from typing import Any


class JobArchiveError(Exception):
    """Carries a human message and a machine-readable ``code``."""

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(message)


class DomainError(JobArchiveError):
    """The request cannot be honoured as asked."""


class NotFoundError(DomainError):
    pass


class RecordNotFoundError(NotFoundError):
    """The targeted record vanished or never existed."""

    def __init__(self, record_id: Any) -> None:
        super().__init__(f"Invalid job item ID {record_id}", code="record_not_found")
        self.record_id = record_id


class ValidationError(DomainError):
    """A request value is malformed; ``field`` names it when known."""

    def __init__(self, message: str, field: str | None = None, code: str | None = None) -> None:
        super().__init__(message, code=code or "VALIDATION_ERROR")
        self.field = field


class UnrecognizedOperationError(ValidationError):
    """The command surface received an operation name outside the known set."""

    def __init__(self, name: str) -> None:
        super().__init__(f'Invalid command "{name}"', field="act", code="unrecognized_operation")
        self.name = name


class InvalidStateError(DomainError):
    """The record is not in a state that allows the operation."""


class ConflictError(DomainError):
    """Concurrent writers disagreed about a record."""


class AuthorizationError(DomainError):
    """The principal is unknown or lacks the grant."""


class AuthorizationDeniedError(AuthorizationError):
    """Archive-scope denial for an operation on a record or archive."""

    def __init__(self, operation: str, target: Any, reason: str) -> None:
        super().__init__(
            f"Not enough permissions to {operation} target ID {target}: {reason}",
            code="access_denied",
        )
        self.operation = operation
        self.target = target
        self.reason = reason


class FieldPermissionError(AuthorizationError):
    """Field-level denial, raised after the record-level check has passed."""

    def __init__(self, kind: str, field: str, target: Any) -> None:
        super().__init__(
            f"Not enough permissions to change {kind}.{field} of item ID {target}",
            code="field_access_denied",
        )
        self.kind = kind
        self.field = field
        self.target = target


class InfrastructureError(JobArchiveError):
    """A backend failed; the request itself may be fine."""


class StorageUnavailableError(InfrastructureError):
    """The database could not be reached."""


class VersionStoreError(InfrastructureError):
    """A version snapshot could not be appended."""


class ConfigurationError(InfrastructureError):
    """The application is wired or configured wrongly."""
