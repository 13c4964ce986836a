"""External identity domain models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ExternalIdentity:
    """Normalized identity returned by an identity provider after verification.

    subject_id is the provider's stable user identifier (Google `sub`,
    Facebook user id). email may be None when the provider did not share it.
    """
    provider: str
    subject_id: str
    email: str | None
    name: str | None = None
    avatar_url: str | None = None
    email_verified: bool = False
