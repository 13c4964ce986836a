"""Credential service: user records, password hashing and password policy.

Pure business logic with no HTTP dependencies.
Raises domain errors that route handlers map to HTTP status codes.
"""

import logging
import re
import secrets

import bcrypt

from domain.model.errors import (
    DuplicateError,
    InvalidCredentialError,
    NotFoundError,
    ValidationError,
)
from domain.model.user import User
from port.user_repository import UserRepository

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 12
BCRYPT_MAX_BYTES = 72
MIN_PASSWORD_LENGTH = 8


def _password_bytes(password: str) -> bytes:
    # bcrypt ignores (newer releases reject) input past 72 bytes
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def _hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


# Compared against when there is no real hash, so a missing account costs
# the same bcrypt work as a wrong password.
_DUMMY_HASH = _hash_password(secrets.token_urlsafe(16))


def validate_password(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if not re.search(r"[A-Z]", password):
        raise ValidationError("Password must contain at least one uppercase letter")
    if not re.search(r"[a-z]", password):
        raise ValidationError("Password must contain at least one lowercase letter")
    if not re.search(r"[0-9]", password):
        raise ValidationError("Password must contain at least one number")
    if len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise ValidationError(f"Password must be at most {BCRYPT_MAX_BYTES} bytes")


def verify_password(user: User | None, password: str) -> bool:
    """Check a plaintext password against the user's stored hash.

    Runs a full bcrypt comparison even when the user is missing or has no
    password (provider-only account) and returns False in that case.
    """
    if user is None or not user.password_hash:
        bcrypt.checkpw(_password_bytes(password), _DUMMY_HASH.encode("utf-8"))
        return False
    return bcrypt.checkpw(_password_bytes(password), user.password_hash.encode("utf-8"))


def create_user(repo: UserRepository, name: str, email: str, password: str) -> User:
    """Create a password-authenticated user.

    Raises:
        DuplicateError: email already in use
        ValidationError: password does not meet strength requirements
    """
    if repo.get_by_email(email):
        raise DuplicateError("Email already in use")

    validate_password(password)
    password_hash = _hash_password(password)
    # the repository re-checks uniqueness under its lock
    return repo.create(email=email, name=name, password_hash=password_hash)


def find_by_email(repo: UserRepository, email: str) -> User | None:
    return repo.get_by_email(email)


def get_user(repo: UserRepository, user_id: str) -> User:
    user = repo.get_by_id(user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def update_profile(
    repo: UserRepository,
    user_id: str,
    name: str | None = None,
    email: str | None = None,
) -> User:
    """Update display name and/or email.

    Raises:
        NotFoundError: user does not exist
        DuplicateError: email belongs to another user (nothing is applied)
    """
    user = repo.update_profile(user_id, name=name, email=email)
    if not user:
        raise NotFoundError("User not found")

    logger.info("Profile updated", extra={"userId": user_id})
    return user


def change_password(
    repo: UserRepository,
    user_id: str,
    current_password: str,
    new_password: str,
) -> None:
    """Replace the password after verifying the current one.

    Raises:
        NotFoundError: user does not exist
        InvalidCredentialError: current password is wrong, or the account has none
        ValidationError: new password does not meet strength requirements
    """
    user = get_user(repo, user_id)
    if not verify_password(user, current_password):
        raise InvalidCredentialError("Current password is incorrect")

    validate_password(new_password)
    new_hash = _hash_password(new_password)

    if not repo.update_password_hash(user_id, new_hash, expected_hash=user.password_hash):
        # deleted or changed concurrently since we verified
        if not repo.get_by_id(user_id):
            raise NotFoundError("User not found")
        raise InvalidCredentialError("Current password is incorrect")

    logger.info("Password changed", extra={"userId": user_id})


def set_active(repo: UserRepository, user_id: str, is_active: bool) -> None:
    if not repo.set_active(user_id, is_active):
        raise NotFoundError("User not found")
    logger.info("Account activation changed", extra={"userId": user_id, "isActive": is_active})


def delete_user(repo: UserRepository, user_id: str) -> None:
    if not repo.delete(user_id):
        raise NotFoundError("User not found")
    logger.info("User deleted", extra={"userId": user_id})
