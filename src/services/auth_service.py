"""Auth service: signup, signin, token refresh and social login.

Pure business logic with no HTTP dependencies.
Each operation is an independent transaction over the credential store,
identity reconciliation and the token service.
Raises domain errors that route handlers map to HTTP status codes.
"""

import logging

from domain.model.errors import (
    AuthenticationError,
    FeatureNotImplementedError,
    PermissionDeniedError,
    TokenError,
)
from domain.model.session import AuthResult
from domain.model.user import User
from port.identity_provider import IdentityProvider
from port.user_repository import UserRepository
from services import credential_service, identity_service
from services.token_service import REFRESH_TOKEN_TYPE, TokenService

logger = logging.getLogger(__name__)


def _issue_tokens(tokens: TokenService, user: User) -> AuthResult:
    return AuthResult(
        user=user,
        access_token=tokens.issue_access_token(user.id),
        refresh_token=tokens.issue_refresh_token(user.id),
    )


def _record_login(repo: UserRepository, user: User) -> User:
    repo.update_last_login(user.id)
    return repo.get_by_id(user.id) or user


def signup(
    repo: UserRepository, tokens: TokenService, name: str, email: str, password: str,
) -> AuthResult:
    """Register a new user and sign them in.

    Raises:
        DuplicateError: email already in use
        ValidationError: password does not meet strength requirements
    """
    user = credential_service.create_user(repo, name=name, email=email, password=password)
    logger.info("User registered", extra={"userId": user.id, "email": email})
    return _issue_tokens(tokens, user)


def signin(repo: UserRepository, tokens: TokenService, email: str, password: str) -> AuthResult:
    """Authenticate by email and password.

    Raises:
        AuthenticationError: unknown email or wrong password (deliberately vague)
        PermissionDeniedError: account is deactivated
    """
    user = credential_service.find_by_email(repo, email)
    if user is None:
        credential_service.verify_password(None, password)
        raise AuthenticationError("Invalid credentials")

    if not user.is_active:
        logger.info("Sign-in refused for deactivated account", extra={"userId": user.id})
        raise PermissionDeniedError("Account is deactivated")

    if not credential_service.verify_password(user, password):
        raise AuthenticationError("Invalid credentials")

    user = _record_login(repo, user)
    logger.info("User logged in", extra={"userId": user.id, "email": email})
    return _issue_tokens(tokens, user)


def refresh(tokens: TokenService, refresh_token: str) -> AuthResult:
    """Mint a new access token from a refresh token.

    The refresh token itself is not rotated. The returned AuthResult has no
    user record, only the new access token.

    Raises:
        PermissionDeniedError: refresh token is invalid or expired
    """
    try:
        user_id = tokens.verify(refresh_token, expected_type=REFRESH_TOKEN_TYPE)
    except TokenError as e:
        raise PermissionDeniedError("Invalid refresh token") from e

    return AuthResult(user=None, access_token=tokens.issue_access_token(user_id))


async def social_signin(
    repo: UserRepository,
    tokens: TokenService,
    provider: IdentityProvider,
    assertion: str,
) -> AuthResult:
    """Sign in (and sign up or link on first use) with an identity provider assertion.

    Raises:
        ExternalAuthError: provider rejected the assertion or was unreachable
        AccountLinkConflictError: email's account is linked to another subject
        PermissionDeniedError: account is deactivated
    """
    identity = await provider.verify(assertion)
    user = identity_service.reconcile(repo, identity)

    if not user.is_active:
        logger.info("Social sign-in refused for deactivated account", extra={"userId": user.id})
        raise PermissionDeniedError("Account is deactivated")

    user = _record_login(repo, user)
    logger.info("User logged in", extra={"userId": user.id, "provider": provider.name})
    return _issue_tokens(tokens, user)


def signout() -> None:
    """Tokens are stateless; the client discards them."""


def forgot_password() -> None:
    raise FeatureNotImplementedError("Forgot password functionality not implemented yet")


def reset_password() -> None:
    raise FeatureNotImplementedError("Reset password functionality not implemented yet")


# ── authenticated account operations ─────────────────────────


def get_profile(repo: UserRepository, user_id: str) -> User:
    return credential_service.get_user(repo, user_id)


def update_profile(
    repo: UserRepository, user_id: str, name: str | None = None, email: str | None = None,
) -> User:
    return credential_service.update_profile(repo, user_id, name=name, email=email)


def change_password(
    repo: UserRepository, user_id: str, current_password: str, new_password: str,
) -> None:
    credential_service.change_password(repo, user_id, current_password, new_password)


def delete_account(repo: UserRepository, user_id: str) -> None:
    credential_service.delete_user(repo, user_id)
