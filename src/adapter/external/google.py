"""Google Sign-In adapter.

Implements IdentityProvider by validating a Google ID token against the
tokeninfo endpoint and checking that it was issued for our client id.

API Documentation: https://developers.google.com/identity/sign-in/web/backend-auth
"""

import logging
import time
from typing import Any

import httpx

from adapter.external.http_retry import API_TIMEOUT_SECONDS, get_with_retry
from domain.model.errors import ExternalAuthError
from domain.model.identity import ExternalIdentity

logger = logging.getLogger(__name__)

GOOGLE_TOKENINFO_URL = "https://oauth2.googleapis.com/tokeninfo"
GOOGLE_ISSUERS = ("accounts.google.com", "https://accounts.google.com")


class GoogleIdentityProvider:
    """Verifies Google ID tokens issued to `client_id`."""

    name = "google"

    def __init__(self, client_id: str, client: httpx.AsyncClient | None = None):
        if not client_id:
            raise ValueError("client_id is required")
        self.client_id = client_id
        self._client = client

    async def verify(self, assertion: str) -> ExternalIdentity:
        claims = await self._fetch_tokeninfo(assertion)

        if claims.get("aud") != self.client_id:
            logger.warning("Google token audience mismatch")
            raise ExternalAuthError("Google token was issued for another client")
        if claims.get("iss") not in GOOGLE_ISSUERS:
            raise ExternalAuthError("Google token has an unexpected issuer")
        if _int_claim(claims.get("exp")) <= time.time():
            raise ExternalAuthError("Google token has expired")

        subject_id = claims.get("sub")
        if not subject_id:
            raise ExternalAuthError("Google token has no subject")

        return ExternalIdentity(
            provider=self.name,
            subject_id=str(subject_id),
            email=claims.get("email"),
            name=claims.get("name"),
            avatar_url=claims.get("picture"),
            email_verified=str(claims.get("email_verified", "")).lower() == "true",
        )

    async def _fetch_tokeninfo(self, id_token: str) -> dict[str, Any]:
        try:
            if self._client is not None:
                response = await get_with_retry(self._client, GOOGLE_TOKENINFO_URL, {"id_token": id_token})
            else:
                async with httpx.AsyncClient(timeout=API_TIMEOUT_SECONDS) as client:
                    response = await get_with_retry(client, GOOGLE_TOKENINFO_URL, {"id_token": id_token})
        except httpx.RequestError as e:
            logger.warning("Google tokeninfo request error", extra={"error_type": type(e).__name__})
            raise ExternalAuthError("Google sign-in is unavailable") from e

        if response.status_code != 200:
            logger.info("Google rejected ID token", extra={"status_code": response.status_code})
            raise ExternalAuthError("Invalid Google token")

        data = response.json()
        if not isinstance(data, dict):
            raise ExternalAuthError("Invalid Google token")
        return data


def _int_claim(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0
