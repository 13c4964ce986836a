"""Identity reconciliation: map a verified provider identity to a local user.

Lookup order is provider subject first, then email, so a social login never
creates a duplicate of an existing password account with the same email.
"""

import logging

from domain.model.errors import DuplicateError, ExternalAuthError, PermissionDeniedError
from domain.model.identity import ExternalIdentity
from domain.model.user import User
from port.user_repository import UserRepository

logger = logging.getLogger(__name__)


def reconcile(repo: UserRepository, identity: ExternalIdentity) -> User:
    """Resolve, link or create the local user for a provider identity.

    Raises:
        ExternalAuthError: the identity is not linked yet and has no verified email
        AccountLinkConflictError: the email's account is already linked to a
            different subject of the same provider
        PermissionDeniedError: the email's account is deactivated (nothing is linked)
    """
    user = repo.get_by_external_id(identity.provider, identity.subject_id)
    if user:
        return user

    if not identity.email:
        raise ExternalAuthError(f"{identity.provider} did not provide an email address")
    if not identity.email_verified:
        raise ExternalAuthError(f"{identity.provider} email address is not verified")

    user = repo.get_by_email(identity.email)
    if user:
        return _link(repo, user, identity)

    try:
        user = repo.create(
            email=identity.email,
            name=identity.name or identity.email.split("@")[0],
            external_ids={identity.provider: identity.subject_id},
            email_verified=True,
            avatar_url=identity.avatar_url,
        )
    except DuplicateError:
        # lost a race with a concurrent signup or social login
        user = repo.get_by_external_id(identity.provider, identity.subject_id)
        if user:
            return user
        user = repo.get_by_email(identity.email)
        if not user:
            raise
        return _link(repo, user, identity)

    logger.info(
        "User created from external identity",
        extra={"userId": user.id, "provider": identity.provider},
    )
    return user


def _link(repo: UserRepository, user: User, identity: ExternalIdentity) -> User:
    # a refused login leaves the account untouched
    if not user.is_active:
        raise PermissionDeniedError("Account is deactivated")

    linked = repo.link_external_id(
        user.id, identity.provider, identity.subject_id, avatar_url=identity.avatar_url,
    )
    if not linked:
        raise ExternalAuthError("Account disappeared while linking")
    return linked
