"""Bearer token authentication dependency."""

import logging
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from api.dependencies import get_token_service, get_user_repo
from domain.model.errors import TokenExpiredError, TokenError
from domain.model.user import User
from port.user_repository import UserRepository
from services.token_service import ACCESS_TOKEN_TYPE, TokenService

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user_required(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    tokens: TokenService = Depends(get_token_service),
    user_repo: UserRepository = Depends(get_user_repo),
) -> User:
    """Get current authenticated user (required). Raises 401 if not authenticated."""
    if not credentials:
        raise _unauthorized("Not authenticated")

    try:
        user_id = tokens.verify(credentials.credentials, expected_type=ACCESS_TOKEN_TYPE)
    except TokenExpiredError:
        raise _unauthorized("Token expired")
    except TokenError:
        raise _unauthorized("Invalid token")

    user = user_repo.get_by_id(user_id)
    if not user:
        raise _unauthorized("User not found")

    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is deactivated")

    return user
