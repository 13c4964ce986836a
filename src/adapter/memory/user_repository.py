"""In-memory implementation of UserRepository.

Records live in a process-wide dict keyed by user id. Every mutation runs
under a single lock, including the uniqueness checks it depends on, and
callers only ever receive copies of stored records.
"""

import copy
import threading
import uuid
from datetime import datetime, timezone
from logging import getLogger

from domain.model.errors import AccountLinkConflictError, DuplicateError
from domain.model.user import User

logger = getLogger(__name__)


class InMemoryUserRepository:
    def __init__(self):
        self.store: dict[str, User] = {}
        self._lock = threading.RLock()

    # ── write operations ─────────────────────────────────────

    def create(
        self,
        email: str,
        name: str,
        password_hash: str | None = None,
        external_ids: dict[str, str] | None = None,
        email_verified: bool = False,
        avatar_url: str | None = None,
    ) -> User:
        external_ids = dict(external_ids or {})
        if not password_hash and not external_ids:
            raise ValueError("User needs a password hash or an external id")

        with self._lock:
            if self._find_by_email(email):
                raise DuplicateError("Email already in use")
            for provider, subject_id in external_ids.items():
                if self._find_by_external_id(provider, subject_id):
                    raise DuplicateError(f"{provider} identity already linked")

            user_id = uuid.uuid4().hex
            now = datetime.now(timezone.utc)
            user = User(
                id=user_id,
                name=name,
                email=email,
                created_at=now,
                updated_at=now,
                password_hash=password_hash,
                external_ids=external_ids,
                email_verified=email_verified,
                avatar_url=avatar_url,
            )
            self.store[user_id] = user

        logger.info("User created", extra={"userId": user_id, "provider": user.provider})
        return copy.deepcopy(user)

    def update_profile(
        self, user_id: str, name: str | None = None, email: str | None = None,
    ) -> User | None:
        with self._lock:
            user = self.store.get(user_id)
            if not user:
                return None

            if email is not None and email != user.email:
                other = self._find_by_email(email)
                if other and other.id != user_id:
                    raise DuplicateError("Email already in use")

            # both fields are applied together or not at all
            if name:
                user.name = name
            if email and email != user.email:
                user.email = email
                # verification belonged to the previous address
                user.email_verified = False
            user.updated_at = datetime.now(timezone.utc)
            return copy.deepcopy(user)

    def update_password_hash(self, user_id: str, password_hash: str, expected_hash: str) -> bool:
        with self._lock:
            user = self.store.get(user_id)
            if not user or user.password_hash != expected_hash:
                return False

            user.password_hash = password_hash
            user.updated_at = datetime.now(timezone.utc)
            return True

    def update_last_login(self, user_id: str) -> bool:
        with self._lock:
            user = self.store.get(user_id)
            if not user:
                return False

            now = datetime.now(timezone.utc)
            user.last_login = now
            user.updated_at = now
            return True

    def link_external_id(
        self, user_id: str, provider: str, subject_id: str, avatar_url: str | None = None,
    ) -> User | None:
        with self._lock:
            user = self.store.get(user_id)
            if not user:
                return None

            current = user.external_ids.get(provider)
            if current == subject_id:
                return copy.deepcopy(user)
            if current is not None:
                raise AccountLinkConflictError(provider)

            owner = self._find_by_external_id(provider, subject_id)
            if owner and owner.id != user_id:
                raise DuplicateError(f"{provider} identity already linked")

            user.external_ids[provider] = subject_id
            if avatar_url and not user.avatar_url:
                user.avatar_url = avatar_url
            user.updated_at = datetime.now(timezone.utc)

        logger.info("External identity linked", extra={"userId": user_id, "provider": provider})
        return copy.deepcopy(user)

    def set_active(self, user_id: str, is_active: bool) -> bool:
        with self._lock:
            user = self.store.get(user_id)
            if not user:
                return False

            user.is_active = is_active
            user.updated_at = datetime.now(timezone.utc)
            return True

    def delete(self, user_id: str) -> bool:
        with self._lock:
            return self.store.pop(user_id, None) is not None

    # ── read operations ──────────────────────────────────────

    def get_by_email(self, email: str) -> User | None:
        with self._lock:
            user = self._find_by_email(email)
            return copy.deepcopy(user) if user else None

    def get_by_id(self, user_id: str) -> User | None:
        with self._lock:
            user = self.store.get(user_id)
            return copy.deepcopy(user) if user else None

    def get_by_external_id(self, provider: str, subject_id: str) -> User | None:
        with self._lock:
            user = self._find_by_external_id(provider, subject_id)
            return copy.deepcopy(user) if user else None

    # ── helpers (caller holds the lock) ──────────────────────

    def _find_by_email(self, email: str) -> User | None:
        for user in self.store.values():
            if user.email == email:
                return user
        return None

    def _find_by_external_id(self, provider: str, subject_id: str) -> User | None:
        for user in self.store.values():
            if user.external_ids.get(provider) == subject_id:
                return user
        return None
