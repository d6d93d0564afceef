from __future__ import annotations

# FastAPI & typing
from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from structlog import get_logger

# Project imports
from src.core.exceptions import InvalidTokenError
from src.domain.services.auth.token import TokenIssuer
from src.infrastructure.dependency_injection.auth_dependencies import get_token_issuer

__all__ = [
    "get_current_user_id",
    "CurrentUserId",
]

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Type-annotated dependency shortcuts
# ---------------------------------------------------------------------------


BearerCredentials = Annotated[
    Optional[HTTPAuthorizationCredentials], Depends(HTTPBearer(auto_error=False))
]
Issuer = Annotated[TokenIssuer, Depends(get_token_issuer)]


# ---------------------------------------------------------------------------
# Public dependencies
# ---------------------------------------------------------------------------


async def get_current_user_id(credentials: BearerCredentials, issuer: Issuer) -> str:  # noqa: D401
    """Return the user id proven by the request's bearer token.

    The function authenticates the token only; whether the id still resolves
    to a user is decided by the operation that uses it.

    Raises:
        InvalidTokenError: If the header is missing or the token does not verify.
    """
    if credentials is None or not credentials.credentials:
        logger.info("Bearer token missing")
        raise InvalidTokenError()
    claims = issuer.verify(credentials.credentials)
    return claims.subject


CurrentUserId = Annotated[str, Depends(get_current_user_id)]
