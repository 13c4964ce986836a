"""Authentication routes (signup, signin, refresh, social login).

Handlers that hash or verify passwords are plain `def` so FastAPI runs them
in its threadpool instead of on the event loop.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from api.dependencies import get_identity_providers, get_token_service, get_user_repo
from api.errors import http_error
from api.models import (
    AuthData,
    AuthResponse,
    MessageResponse,
    RefreshTokenRequest,
    SigninRequest,
    SignupRequest,
    SocialSigninRequest,
    TokenData,
    TokenResponse,
    UserResponse,
)
from domain.model.errors import DomainError
from domain.model.session import AuthResult
from port.identity_provider import IdentityProvider
from port.user_repository import UserRepository
from services import auth_service
from services.token_service import TokenService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_response(result: AuthResult, message: str) -> AuthResponse:
    return AuthResponse(
        message=message,
        data=AuthData(
            user=UserResponse.from_domain(result.user),
            token=result.access_token,
            refresh_token=result.refresh_token,
        ),
    )


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(
    request: SignupRequest,
    repo: UserRepository = Depends(get_user_repo),
    tokens: TokenService = Depends(get_token_service),
):
    """Register a new user.

    Raises:
        HTTPException: 409 Conflict if email already exists, 400 if the password is too weak
    """
    try:
        result = auth_service.signup(repo, tokens, request.name, request.email, request.password)
    except DomainError as e:
        raise http_error(e) from e

    return _auth_response(result, "User registered successfully")


@router.post("/signin", response_model=AuthResponse)
def signin(
    request: SigninRequest,
    repo: UserRepository = Depends(get_user_repo),
    tokens: TokenService = Depends(get_token_service),
):
    """Sign in with email and password.

    Raises:
        HTTPException: 401 if credentials are invalid, 403 if the account is deactivated
    """
    try:
        result = auth_service.signin(repo, tokens, request.email, request.password)
    except DomainError as e:
        raise http_error(e) from e

    return _auth_response(result, "Logged in successfully")


@router.post("/refresh-token", response_model=TokenResponse)
async def refresh_token(
    request: RefreshTokenRequest,
    tokens: TokenService = Depends(get_token_service),
):
    """Exchange a refresh token for a new access token."""
    if not request.refresh_token:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Refresh token is required")

    try:
        result = auth_service.refresh(tokens, request.refresh_token)
    except DomainError as e:
        raise http_error(e) from e

    return TokenResponse(data=TokenData(token=result.access_token))


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password():
    try:
        auth_service.forgot_password()
    except DomainError as e:
        raise http_error(e) from e
    return MessageResponse(message="Password reset email sent")


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password():
    try:
        auth_service.reset_password()
    except DomainError as e:
        raise http_error(e) from e
    return MessageResponse(message="Password has been reset")


@router.post("/signout", response_model=MessageResponse)
async def signout():
    """Sign out. Tokens are stateless, so the client just discards them."""
    auth_service.signout()
    return MessageResponse(message="Successfully logged out")


@router.post("/{provider}", response_model=AuthResponse)
async def social_signin(
    provider: str,
    request: SocialSigninRequest,
    repo: UserRepository = Depends(get_user_repo),
    tokens: TokenService = Depends(get_token_service),
    providers: dict[str, IdentityProvider] = Depends(get_identity_providers),
):
    """Sign in with a Google ID token or a Facebook access token.

    Creates the account on first use, or links the provider to an existing
    account with the same verified email.

    Raises:
        HTTPException: 404 unknown provider, 401 rejected token, 409 conflicting link
    """
    identity_provider = providers.get(provider)
    if identity_provider is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unknown identity provider")

    try:
        result = await auth_service.social_signin(repo, tokens, identity_provider, request.token)
    except DomainError as e:
        logger.info("Social sign-in failed", extra={"provider": provider, "error_type": type(e).__name__})
        raise http_error(e) from e

    return _auth_response(result, "Logged in successfully")
