"""Routes for the authenticated user's own account."""

import logging

from fastapi import APIRouter, Depends

from api.dependencies import get_user_repo
from api.errors import http_error
from api.models import ChangePasswordRequest, MessageResponse, UpdateProfileRequest, UserEnvelope, UserResponse
from api.security import get_current_user_required
from domain.model.errors import DomainError
from domain.model.user import User
from port.user_repository import UserRepository
from services import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserEnvelope)
async def get_me(current_user: User = Depends(get_current_user_required)):
    """Get current authenticated user info (without password hash)."""
    return UserEnvelope(data=UserResponse.from_domain(current_user))


@router.put("/me", response_model=UserEnvelope)
async def update_me(
    request: UpdateProfileRequest,
    current_user: User = Depends(get_current_user_required),
    repo: UserRepository = Depends(get_user_repo),
):
    """Update name and/or email. 409 if the email belongs to another user."""
    try:
        user = auth_service.update_profile(repo, current_user.id, name=request.name, email=request.email)
    except DomainError as e:
        raise http_error(e) from e

    return UserEnvelope(message="Profile updated successfully", data=UserResponse.from_domain(user))


@router.delete("/me", response_model=MessageResponse)
async def delete_me(
    current_user: User = Depends(get_current_user_required),
    repo: UserRepository = Depends(get_user_repo),
):
    """Permanently delete the account. Issued tokens stay valid until they expire."""
    try:
        auth_service.delete_account(repo, current_user.id)
    except DomainError as e:
        raise http_error(e) from e

    return MessageResponse(message="Account deleted successfully")


@router.post("/change-password", response_model=MessageResponse)
def change_password(
    request: ChangePasswordRequest,
    current_user: User = Depends(get_current_user_required),
    repo: UserRepository = Depends(get_user_repo),
):
    """Change password. 401 if the current password is wrong."""
    try:
        auth_service.change_password(repo, current_user.id, request.current_password, request.new_password)
    except DomainError as e:
        raise http_error(e) from e

    return MessageResponse(message="Password changed successfully")
