"""Access guard for protected routes.

Resolves the ``x-auth`` header to a user whose active-token set still holds
that exact token. Every failure looks the same to the caller: a missing user
and a revoked token are both just "not authenticated".
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyHeader

from api.dependencies import get_token_engine, get_user_repo
from domain.model.errors import InvalidTokenError, UnauthenticatedError
from domain.model.user import User
from port.user_repository import UserRepository
from services.auth_service import TokenEngine

logger = logging.getLogger(__name__)

AUTH_HEADER = "x-auth"

auth_header = APIKeyHeader(name=AUTH_HEADER, auto_error=False)


@dataclass(frozen=True)
class AuthContext:
    """Authenticated identity plus the exact token it was resolved from."""
    user: User
    token: str

    @property
    def user_id(self) -> str:
        return self.user.id


def resolve_identity(repo: UserRepository, engine: TokenEngine, token: Optional[str]) -> AuthContext:
    """Resolve a presented token to an active user.

    Raises:
        UnauthenticatedError: no token, bad token, unknown user, or revoked token
        StoreUnavailableError: user lookup failed
    """
    if not token:
        raise UnauthenticatedError("Not authenticated")

    try:
        user_id = engine.verify(token)
    except InvalidTokenError as e:
        raise UnauthenticatedError("Not authenticated") from e

    user = repo.get_by_token(user_id, token)
    if user is None:
        logger.debug("Token not active for subject", extra={"userId": user_id})
        raise UnauthenticatedError("Not authenticated")

    return AuthContext(user=user, token=token)


def get_current_user_required(
    token: Optional[str] = Depends(auth_header),
    user_repo: UserRepository = Depends(get_user_repo),
    engine: TokenEngine = Depends(get_token_engine),
) -> AuthContext:
    """Get current authenticated user (required). Raises 401 if not authenticated."""
    try:
        return resolve_identity(user_repo, engine, token)
    except UnauthenticatedError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": AUTH_HEADER},
        )
