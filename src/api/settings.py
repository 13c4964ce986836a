"""Environment-driven settings for the auth API."""

import os
from dataclasses import dataclass
from datetime import timedelta

DEFAULT_ACCESS_TOKEN_EXPIRES_MINUTES = 7 * 24 * 60  # 7 days
DEFAULT_REFRESH_TOKEN_EXPIRES_DAYS = 30


@dataclass(frozen=True)
class AuthSettings:
    jwt_secret_key: str
    access_token_expires: timedelta
    refresh_token_expires: timedelta
    google_client_id: str | None = None
    facebook_app_id: str | None = None
    facebook_app_secret: str | None = None

    def __repr__(self) -> str:
        return (
            f"AuthSettings(access_token_expires={self.access_token_expires}, "
            f"refresh_token_expires={self.refresh_token_expires}, "
            f"google_client_id={self.google_client_id!r}, facebook_app_id={self.facebook_app_id!r})"
        )


def load_settings() -> AuthSettings:
    """Build settings from environment variables.

    Raises:
        ValueError: JWT_SECRET_KEY is missing or a numeric setting is malformed
    """
    secret = os.getenv("JWT_SECRET_KEY")
    if not secret:
        raise ValueError(
            "JWT_SECRET_KEY environment variable is required. "
            "Generate a secure key with: openssl rand -hex 32"
        )

    access_minutes = int(os.getenv("JWT_ACCESS_TOKEN_EXPIRES_MINUTES", DEFAULT_ACCESS_TOKEN_EXPIRES_MINUTES))
    refresh_days = int(os.getenv("JWT_REFRESH_TOKEN_EXPIRES_DAYS", DEFAULT_REFRESH_TOKEN_EXPIRES_DAYS))

    return AuthSettings(
        jwt_secret_key=secret,
        access_token_expires=timedelta(minutes=access_minutes),
        refresh_token_expires=timedelta(days=refresh_days),
        google_client_id=os.getenv("GOOGLE_CLIENT_ID") or None,
        facebook_app_id=os.getenv("FACEBOOK_APP_ID") or None,
        facebook_app_secret=os.getenv("FACEBOOK_APP_SECRET") or None,
    )
