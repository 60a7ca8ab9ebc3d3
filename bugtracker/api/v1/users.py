"""User management endpoints (admin) plus self-service password change."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from bugtracker.api.v1.auth import get_current_user, require_admin
from bugtracker.core.database import get_db
from bugtracker.schemas.common import Page, SuccessResponse
from bugtracker.schemas.user import (
    ChangePasswordRequest,
    ResetPasswordResponse,
    UserCreate,
    UserFilters,
    UserPublic,
    UserUpdate,
)
from bugtracker.services import users as user_service

router = APIRouter()


@router.get("", response_model=Page[UserPublic])
def list_users(
    filters: Annotated[UserFilters, Query()],
    _admin: Annotated[UserPublic, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> Page[UserPublic]:
    """List users with search, role and active filters (admin only)."""
    return user_service.list_users(db, filters)


@router.post("", response_model=UserPublic, status_code=status.HTTP_201_CREATED)
def create_user(
    body: UserCreate,
    _admin: Annotated[UserPublic, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UserPublic:
    return user_service.create_user(db, body)


@router.post("/me/password", response_model=SuccessResponse)
def change_my_password(
    body: ChangePasswordRequest,
    current_user: Annotated[UserPublic, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> SuccessResponse:
    """Change the caller's password; the current password must be supplied."""
    user_service.change_password(db, current_user.id, body)
    return SuccessResponse()


@router.get("/{user_id}", response_model=UserPublic)
def get_user(
    user_id: int,
    current_user: Annotated[UserPublic, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> UserPublic:
    """Admins may read anyone; other users only themselves."""
    if current_user.role != "admin" and current_user.id != user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return user_service.get_user(db, user_id)


@router.patch("/{user_id}", response_model=UserPublic)
def update_user(
    user_id: int,
    body: UserUpdate,
    admin: Annotated[UserPublic, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UserPublic:
    if admin.id == user_id:
        changes = body.model_dump(exclude_unset=True)
        if changes.get("is_active") is False:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="You cannot deactivate your own account")
        if "role" in changes and changes["role"] != "admin":
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="You cannot remove your own admin role")
    return user_service.update_user(db, user_id, body)


@router.delete("/{user_id}", response_model=SuccessResponse)
def delete_user(
    user_id: int,
    admin: Annotated[UserPublic, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> SuccessResponse:
    if admin.id == user_id:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="You cannot delete your own account")
    user_service.delete_user(db, user_id)
    return SuccessResponse()


@router.post("/{user_id}/toggle-status", response_model=UserPublic)
def toggle_user_status(
    user_id: int,
    admin: Annotated[UserPublic, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UserPublic:
    if admin.id == user_id:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="You cannot deactivate your own account")
    return user_service.toggle_user_status(db, user_id)


@router.post("/{user_id}/reset-password", response_model=ResetPasswordResponse)
def reset_password(
    user_id: int,
    _admin: Annotated[UserPublic, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> ResetPasswordResponse:
    """Replace the user's password with a generated one, returned once."""
    return user_service.reset_password(db, user_id)
