from typing import Protocol
from domain.model.user import User


class UserRepository(Protocol):
    """Protocol defining the interface for user data access.

    Implementations enforce email uniqueness and (provider, subject) uniqueness
    atomically and raise DuplicateError when either would be violated.
    """
    def create(
        self,
        email: str,
        name: str,
        password_hash: str | None = None,
        external_ids: dict[str, str] | None = None,
        email_verified: bool = False,
        avatar_url: str | None = None,
    ) -> User:
        """Create a new user. Raise DuplicateError if the email is taken."""
        ...

    def get_by_email(self, email: str) -> User | None:
        """Find a user by email. Return User or None if not found."""
        ...

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        ...

    def get_by_external_id(self, provider: str, subject_id: str) -> User | None:
        """Find a user by a linked provider subject. Return User or None if not found."""
        ...

    def update_profile(
        self, user_id: str, name: str | None = None, email: str | None = None,
    ) -> User | None:
        """Update name and/or email. Return None if not found, raise DuplicateError on email clash."""
        ...

    def update_password_hash(self, user_id: str, password_hash: str, expected_hash: str) -> bool:
        """Replace the hash only if the stored one still equals expected_hash."""
        ...

    def update_last_login(self, user_id: str) -> bool:
        """Update the last login timestamp for a user. Return True if successful."""
        ...

    def link_external_id(
        self, user_id: str, provider: str, subject_id: str, avatar_url: str | None = None,
    ) -> User | None:
        """Attach a provider subject. Return None if not found.

        Raises AccountLinkConflictError if the user already holds a different
        subject for this provider, DuplicateError if the subject belongs to
        another user.
        """
        ...

    def set_active(self, user_id: str, is_active: bool) -> bool:
        """Activate or deactivate an account. Return True if successful."""
        ...

    def delete(self, user_id: str) -> bool:
        """Hard delete a user. Return True if a record was removed."""
        ...
