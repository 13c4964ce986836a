"""Process-wide collaborators, created once and injected into routes."""

import logging
from functools import lru_cache

from adapter.external.facebook import FacebookIdentityProvider
from adapter.external.google import GoogleIdentityProvider
from adapter.memory.user_repository import InMemoryUserRepository
from api.settings import AuthSettings, load_settings
from port.identity_provider import IdentityProvider
from port.user_repository import UserRepository
from services.token_service import TokenService

logger = logging.getLogger(__name__)

# The store starts empty with the process and is never torn down.
_user_repo = InMemoryUserRepository()


@lru_cache
def get_settings() -> AuthSettings:
    return load_settings()


def get_user_repo() -> UserRepository:
    return _user_repo


@lru_cache
def get_token_service() -> TokenService:
    settings = get_settings()
    return TokenService(
        secret_key=settings.jwt_secret_key,
        access_token_expires=settings.access_token_expires,
        refresh_token_expires=settings.refresh_token_expires,
    )


@lru_cache
def get_identity_providers() -> dict[str, IdentityProvider]:
    """Identity providers that have credentials configured, keyed by name."""
    settings = get_settings()
    providers: dict[str, IdentityProvider] = {}

    if settings.google_client_id:
        providers["google"] = GoogleIdentityProvider(settings.google_client_id)
    if settings.facebook_app_id and settings.facebook_app_secret:
        providers["facebook"] = FacebookIdentityProvider(
            settings.facebook_app_id, settings.facebook_app_secret,
        )

    logger.info("Identity providers configured", extra={"providers": sorted(providers)})
    return providers
