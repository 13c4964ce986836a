from dataclasses import dataclass, field
from datetime import datetime

DEFAULT_ROLE = 'user'


@dataclass
class User:
    """Domain model representing a user."""
    id: str
    name: str
    email: str
    created_at: datetime
    updated_at: datetime
    last_login: datetime | None = None
    password_hash: str | None = None
    external_ids: dict[str, str] = field(default_factory=dict)
    role: str = DEFAULT_ROLE
    is_active: bool = True
    email_verified: bool = False
    avatar_url: str | None = None

    @property
    def provider(self) -> str:
        """Primary sign-in method: 'email' for password accounts, else the first linked provider."""
        if self.password_hash:
            return 'email'
        return next(iter(self.external_ids), 'email')

    @property
    def has_password(self) -> bool:
        return self.password_hash is not None

    def external_id(self, provider: str) -> str | None:
        return self.external_ids.get(provider)
