from dataclasses import dataclass

from domain.model.user import User


@dataclass(frozen=True)
class AuthResult:
    """Outcome of a successful authentication: the user and freshly minted tokens.

    user is None for a token refresh, which only mints an access token.
    """
    user: User | None
    access_token: str
    refresh_token: str | None = None
