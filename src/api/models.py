"""Pydantic models for API request/response."""

from datetime import datetime
from typing import Annotated, Optional
from pydantic import AfterValidator, BaseModel, EmailStr, Field

from domain.model.errors import ValidationError as PasswordPolicyError
from domain.model.user import User
from services.credential_service import validate_password


def _check_password_policy(value: str) -> str:
    try:
        validate_password(value)
    except PasswordPolicyError as e:
        raise ValueError(str(e)) from e
    return value


def _check_name(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Name is required")
    return value


# the policy also caps the encoded length at bcrypt's 72 bytes
Password = Annotated[str, Field(max_length=72), AfterValidator(_check_password_policy)]
DisplayName = Annotated[str, Field(max_length=100), AfterValidator(_check_name)]


# ── requests ─────────────────────────────────────────────────


class SignupRequest(BaseModel):
    """Request model for user registration."""
    name: DisplayName
    email: EmailStr
    password: Password


class SigninRequest(BaseModel):
    """Request model for user login."""
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=72)


class RefreshTokenRequest(BaseModel):
    refresh_token: Optional[str] = None


class SocialSigninRequest(BaseModel):
    """Provider-issued assertion: a Google ID token or a Facebook user access token."""
    token: str = Field(..., min_length=1)


class UpdateProfileRequest(BaseModel):
    name: Optional[DisplayName] = None
    email: Optional[EmailStr] = None


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1, max_length=72)
    new_password: Password


# ── responses ────────────────────────────────────────────────


class UserResponse(BaseModel):
    """Public view of a user. Never carries the password hash."""
    id: str = Field(..., description="User ID")
    email: str = Field(..., description="User email")
    name: str = Field(..., description="Display name")
    role: str = Field("user", description="Account role (reserved)")
    is_active: bool = True
    email_verified: bool = False
    avatar_url: Optional[str] = None
    created_at: datetime = Field(..., description="Account creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")
    last_login: Optional[datetime] = Field(None, description="Last login timestamp")
    provider: str = Field("email", description="Primary authentication provider")
    has_password: bool = False
    linked_providers: list[str] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            role=user.role,
            is_active=user.is_active,
            email_verified=user.email_verified,
            avatar_url=user.avatar_url,
            created_at=user.created_at,
            updated_at=user.updated_at,
            last_login=user.last_login,
            provider=user.provider,
            has_password=user.has_password,
            linked_providers=sorted(user.external_ids),
        )


class AuthData(BaseModel):
    user: UserResponse
    token: str = Field(..., description="Access token")
    refresh_token: str


class AuthResponse(BaseModel):
    """Response model for signup / signin / social signin."""
    success: bool = True
    message: str
    data: AuthData


class TokenData(BaseModel):
    token: str = Field(..., description="New access token")


class TokenResponse(BaseModel):
    success: bool = True
    data: TokenData


class UserEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: UserResponse


class MessageResponse(BaseModel):
    success: bool = True
    message: str
