"""Identity provider port: outbound interface for third-party sign-in."""

from typing import Protocol

from domain.model.identity import ExternalIdentity


class IdentityProvider(Protocol):
    """Port for verifying a provider-issued identity assertion.

    verify() raises ExternalAuthError when the assertion is invalid, expired,
    issued for another client, or the provider cannot be reached.
    """

    name: str

    async def verify(self, assertion: str) -> ExternalIdentity: ...
