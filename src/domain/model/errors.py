"""Domain-level exceptions.

Services raise these errors to express business rule violations.
Route handlers catch them and map to appropriate HTTP status codes.
"""


class DomainError(Exception):
    """Base class for all domain errors."""


class NotFoundError(DomainError):
    """Requested entity does not exist."""


class DuplicateError(DomainError):
    """Entity with the same unique key already exists."""


class AuthenticationError(DomainError):
    """Credentials are missing or wrong."""


class PermissionDeniedError(DomainError):
    """Caller lacks permission for the requested action."""


class InvalidCredentialError(DomainError):
    """Current password supplied for a password change is wrong."""


class ValidationError(DomainError):
    """Input violates a business validation rule."""


class TokenError(DomainError):
    """Bearer token could not be accepted."""


class TokenExpiredError(TokenError):
    """Token signature is valid but its expiry has passed."""


class InvalidTokenError(TokenError):
    """Token is malformed, badly signed or of the wrong type."""


class ExternalAuthError(DomainError):
    """Identity provider rejected the assertion or could not be reached."""


class AccountLinkConflictError(ExternalAuthError):
    """Account is already linked to a different subject of the same provider."""

    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(f"Account is already linked to another {provider} identity")


class FeatureNotImplementedError(DomainError):
    """Operation exists in the API surface but has no implementation yet."""
