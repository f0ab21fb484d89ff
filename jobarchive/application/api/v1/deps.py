"""FastAPI dependencies resolving the acting principal from a bearer token.

Token claims: ``sub`` (user id), ``admin`` (bool), ``archives`` (archive ids)
and ``fields`` (``"<kind>.<field>"`` grants).
"""

from typing import Annotated

import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from jobarchive.config import Config
from jobarchive.domain.auth.model.principal import Principal
from jobarchive.domain.job.model.value import ArchiveId

# a missing header is answered with our own 401 instead of FastAPI's 403
security = HTTPBearer(auto_error=False)


def get_config(request: Request) -> Config:
    return request.app.state.config


def _unauthorized(code: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"code": code, "message": message},
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_principal(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    config: Annotated[Config, Depends(get_config)],
) -> Principal:
    """Decode the bearer token into a Principal.

    Usage in routes:
        @router.post("/jobs/{job_id}/toggle")
        async def toggle(principal: Annotated[Principal, Depends(get_principal)]): ...
    """
    if credentials is None:
        raise _unauthorized("missing_token", "Authorization header required")

    try:
        payload = jwt.decode(
            credentials.credentials,
            config.auth.jwt.secret,
            algorithms=[config.auth.jwt.algorithm],
            audience=config.auth.jwt.audience,
        )
    except jwt.ExpiredSignatureError as e:
        raise _unauthorized("token_expired", "Token has expired") from e
    except jwt.InvalidTokenError as e:
        raise _unauthorized("invalid_token", "Invalid token") from e

    try:
        return Principal(
            user_id=str(payload["sub"]),
            is_admin=bool(payload.get("admin", False)),
            archive_ids=frozenset(ArchiveId(int(a)) for a in payload.get("archives") or ()),
            allowed_fields=frozenset(str(f) for f in payload.get("fields") or ()),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise _unauthorized("invalid_token", "Malformed token claims") from e


CurrentPrincipal = Annotated[Principal, Depends(get_principal)]
