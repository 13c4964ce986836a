"""Facebook Login adapter.

Implements IdentityProvider for a user access token obtained by the client:
debug_token confirms the token is valid and belongs to our app, then the
Graph API profile supplies id, name, email and picture.

API Documentation: https://developers.facebook.com/docs/facebook-login/guides/access-tokens/debugging
"""

import logging
from typing import Any

import httpx

from adapter.external.http_retry import API_TIMEOUT_SECONDS, get_with_retry
from domain.model.errors import ExternalAuthError
from domain.model.identity import ExternalIdentity

logger = logging.getLogger(__name__)

FACEBOOK_GRAPH_URL = "https://graph.facebook.com/v19.0"
PROFILE_FIELDS = "id,name,email,picture"


class FacebookIdentityProvider:
    """Verifies Facebook user access tokens issued to `app_id`."""

    name = "facebook"

    def __init__(self, app_id: str, app_secret: str, client: httpx.AsyncClient | None = None):
        if not app_id or not app_secret:
            raise ValueError("app_id and app_secret are required")
        self.app_id = app_id
        self._app_secret = app_secret
        self._client = client

    async def verify(self, assertion: str) -> ExternalIdentity:
        if self._client is not None:
            return await self._verify(self._client, assertion)
        async with httpx.AsyncClient(timeout=API_TIMEOUT_SECONDS) as client:
            return await self._verify(client, assertion)

    async def _verify(self, client: httpx.AsyncClient, access_token: str) -> ExternalIdentity:
        debug = await self._get(client, "/debug_token", {
            "input_token": access_token,
            "access_token": f"{self.app_id}|{self._app_secret}",
        })
        token_data = debug.get("data") or {}
        if not token_data.get("is_valid"):
            raise ExternalAuthError("Invalid Facebook token")
        if str(token_data.get("app_id")) != self.app_id:
            logger.warning("Facebook token app mismatch")
            raise ExternalAuthError("Facebook token was issued for another app")

        profile = await self._get(client, "/me", {
            "fields": PROFILE_FIELDS,
            "access_token": access_token,
        })
        subject_id = profile.get("id")
        if not subject_id or str(subject_id) != str(token_data.get("user_id", subject_id)):
            raise ExternalAuthError("Facebook profile does not match token")

        picture = (profile.get("picture") or {}).get("data") or {}
        return ExternalIdentity(
            provider=self.name,
            subject_id=str(subject_id),
            email=profile.get("email"),
            name=profile.get("name"),
            avatar_url=picture.get("url"),
            # Graph only returns confirmed addresses
            email_verified=bool(profile.get("email")),
        )

    async def _get(self, client: httpx.AsyncClient, path: str, params: dict[str, str]) -> dict[str, Any]:
        try:
            response = await get_with_retry(client, f"{FACEBOOK_GRAPH_URL}{path}", params)
        except httpx.RequestError as e:
            logger.warning("Facebook Graph request error", extra={"path": path, "error_type": type(e).__name__})
            raise ExternalAuthError("Facebook sign-in is unavailable") from e

        if response.status_code != 200:
            logger.info("Facebook Graph rejected request", extra={"path": path, "status_code": response.status_code})
            raise ExternalAuthError("Invalid Facebook token")

        data = response.json()
        if not isinstance(data, dict):
            raise ExternalAuthError("Invalid Facebook token")
        return data
