"""JWT issuance and verification.

Tokens are stateless: verification depends only on the secret, the token
and the current time. There is no revocation list.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable

from jose import JWTError, jwt

from domain.model.errors import InvalidTokenError, TokenExpiredError

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"
ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"
DEFAULT_ACCESS_TOKEN_EXPIRES = timedelta(days=7)
DEFAULT_REFRESH_TOKEN_EXPIRES = timedelta(days=30)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """Issues and verifies signed access and refresh tokens."""

    def __init__(
        self,
        secret_key: str,
        access_token_expires: timedelta = DEFAULT_ACCESS_TOKEN_EXPIRES,
        refresh_token_expires: timedelta = DEFAULT_REFRESH_TOKEN_EXPIRES,
        algorithm: str = JWT_ALGORITHM,
        clock: Callable[[], datetime] = _utcnow,
    ):
        if not secret_key:
            raise ValueError("secret_key is required")
        self._secret_key = secret_key
        self.access_token_expires = access_token_expires
        self.refresh_token_expires = refresh_token_expires
        self._algorithm = algorithm
        self._clock = clock

    def issue_access_token(self, user_id: str) -> str:
        return self._issue(user_id, ACCESS_TOKEN_TYPE, self.access_token_expires)

    def issue_refresh_token(self, user_id: str) -> str:
        return self._issue(user_id, REFRESH_TOKEN_TYPE, self.refresh_token_expires)

    def verify(self, token: str, expected_type: str | None = None) -> str:
        """Verify a token and return the user id it was issued for.

        A token expiring at E is accepted strictly before E.

        Raises:
            TokenExpiredError: signature is valid but the token has expired
            InvalidTokenError: malformed, badly signed, missing subject or wrong type
        """
        try:
            # expiry is checked below against the injected clock
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"verify_exp": False},
            )
        except JWTError as e:
            logger.debug("JWT verification failed", extra={"error_type": type(e).__name__})
            raise InvalidTokenError("Invalid token") from e

        exp = payload.get("exp")
        if not isinstance(exp, (int, float)):
            raise InvalidTokenError("Invalid token")
        if self._clock().timestamp() >= exp:
            raise TokenExpiredError("Token expired")

        user_id = payload.get("sub")
        if not isinstance(user_id, str) or not user_id:
            raise InvalidTokenError("Invalid token")

        if expected_type is not None and payload.get("type") != expected_type:
            raise InvalidTokenError("Invalid token")

        return user_id

    def _issue(self, user_id: str, token_type: str, lifetime: timedelta) -> str:
        now = self._clock()
        payload = {
            "sub": user_id,
            "iat": int(now.timestamp()),
            "exp": int((now + lifetime).timestamp()),
            "type": token_type,
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
