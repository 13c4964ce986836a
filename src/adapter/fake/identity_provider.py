"""In-memory implementation of IdentityProvider for testing."""

from domain.model.errors import ExternalAuthError
from domain.model.identity import ExternalIdentity


class FakeIdentityProvider:
    """Resolves assertions from a preconfigured table; unknown assertions are rejected."""

    def __init__(self, name: str = "google", identities: dict[str, ExternalIdentity] | None = None):
        self.name = name
        self.identities: dict[str, ExternalIdentity] = dict(identities or {})
        self.calls: list[str] = []

    def add(
        self,
        assertion: str,
        subject_id: str,
        email: str | None,
        name: str | None = None,
        avatar_url: str | None = None,
        email_verified: bool = True,
    ) -> ExternalIdentity:
        identity = ExternalIdentity(
            provider=self.name,
            subject_id=subject_id,
            email=email,
            name=name,
            avatar_url=avatar_url,
            email_verified=email_verified,
        )
        self.identities[assertion] = identity
        return identity

    async def verify(self, assertion: str) -> ExternalIdentity:
        self.calls.append(assertion)
        identity = self.identities.get(assertion)
        if identity is None:
            raise ExternalAuthError(f"Invalid {self.name} token")
        return identity
