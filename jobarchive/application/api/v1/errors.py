"""Translation of jobarchive errors into HTTP responses."""

from fastapi import HTTPException

from jobarchive.domain.shared.error import (
    AuthorizationError,
    ConflictError,
    DomainError,
    InfrastructureError,
    InvalidStateError,
    JobArchiveError,
    NotFoundError,
    UnrecognizedOperationError,
    ValidationError,
)

# Looked up along the error's MRO, so the most specific class wins.
STATUS_BY_ERROR: dict[type[DomainError], int] = {
    UnrecognizedOperationError: 400,
    AuthorizationError: 403,
    NotFoundError: 404,
    ConflictError: 409,
    InvalidStateError: 409,
    ValidationError: 422,
}

UNAUTHENTICATED_CODES = frozenset({"missing_token"})


def _status_for(error: JobArchiveError) -> int:
    if isinstance(error, InfrastructureError):
        return 503
    if not isinstance(error, DomainError):
        return 500
    if isinstance(error, AuthorizationError) and error.code in UNAUTHENTICATED_CODES:
        return 401
    return next((STATUS_BY_ERROR[cls] for cls in type(error).__mro__ if cls in STATUS_BY_ERROR), 400)


def map_error(error: JobArchiveError) -> HTTPException:
    """Build the HTTPException for ``error``.

    The detail always carries ``code`` and ``message``; validation errors add
    the offending ``field``. A 401 asks for a bearer token.
    """
    detail = {"code": error.code, "message": error.message}
    if isinstance(error, ValidationError) and error.field is not None:
        detail["field"] = error.field

    status_code = _status_for(error)
    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return HTTPException(status_code=status_code, detail=detail, headers=headers)
