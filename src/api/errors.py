"""Mapping from domain errors to HTTP errors."""

from fastapi import HTTPException, status

from domain.model.errors import (
    AccountLinkConflictError,
    AuthenticationError,
    DomainError,
    DuplicateError,
    ExternalAuthError,
    FeatureNotImplementedError,
    InvalidCredentialError,
    NotFoundError,
    PermissionDeniedError,
    TokenError,
    ValidationError,
)

# Checked in order; subclasses must precede their bases.
_STATUS_BY_ERROR: list[tuple[type[DomainError], int]] = [
    (DuplicateError, status.HTTP_409_CONFLICT),
    (AccountLinkConflictError, status.HTTP_409_CONFLICT),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (InvalidCredentialError, status.HTTP_401_UNAUTHORIZED),
    (TokenError, status.HTTP_401_UNAUTHORIZED),
    (ExternalAuthError, status.HTTP_401_UNAUTHORIZED),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (FeatureNotImplementedError, status.HTTP_501_NOT_IMPLEMENTED),
]


def http_error(error: DomainError) -> HTTPException:
    """Translate a domain error raised by a service into an HTTPException."""
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
            return HTTPException(status_code=status_code, detail=str(error), headers=headers)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")
