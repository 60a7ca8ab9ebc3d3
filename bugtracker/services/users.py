"""User management: create, update, password changes, activation and listing."""

import logging
import secrets

from sqlalchemy import or_
from sqlalchemy.orm import Session

from bugtracker.core.errors import Conflict, DependencyExists, InvalidCredentials, UserNotFound
from bugtracker.core.security import hash_password, verify_password
from bugtracker.models import Report, ReportComment, User
from bugtracker.schemas.common import Page
from bugtracker.schemas.user import (
    ChangePasswordRequest,
    ResetPasswordResponse,
    UserCreate,
    UserFilters,
    UserPublic,
    UserUpdate,
)
from bugtracker.services.pagination import paginate
from bugtracker.services.report_query import escape_like

logger = logging.getLogger(__name__)

# token_urlsafe(9) yields 12 characters, above the 8-character password minimum.
TEMPORARY_PASSWORD_BYTES = 9


def _get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise UserNotFound(f"User {user_id} not found")
    return user


def _ensure_unique(
    db: Session,
    username: str | None,
    email: str | None,
    exclude_id: int | None = None,
) -> None:
    if username is not None:
        q = db.query(User.id).filter(User.username == username)
        if exclude_id is not None:
            q = q.filter(User.id != exclude_id)
        if q.first() is not None:
            raise Conflict(f"Username '{username}' is already taken")
    if email is not None:
        q = db.query(User.id).filter(User.email == email)
        if exclude_id is not None:
            q = q.filter(User.id != exclude_id)
        if q.first() is not None:
            raise Conflict(f"Email '{email}' is already registered")


def create_user(db: Session, data: UserCreate) -> UserPublic:
    _ensure_unique(db, data.username, str(data.email))
    user = User(
        username=data.username,
        full_name=data.full_name,
        email=str(data.email),
        password_hash=hash_password(data.password),
        role=data.role,
        avatar_url=data.avatar_url,
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("User created", extra={"user_id": user.id, "role": user.role})
    return UserPublic.model_validate(user)


def get_user(db: Session, user_id: int) -> UserPublic:
    return UserPublic.model_validate(_get_user(db, user_id))


def update_user(db: Session, user_id: int, data: UserUpdate) -> UserPublic:
    """Apply only the fields present in ``data``; username and email stay unique."""
    user = _get_user(db, user_id)
    fields = data.model_dump(exclude_unset=True)
    for name in ("username", "full_name", "email", "role", "is_active"):
        if name in fields and fields[name] is None:
            fields.pop(name)
    if "email" in fields:
        fields["email"] = str(fields["email"])
    _ensure_unique(db, fields.get("username"), fields.get("email"), exclude_id=user.id)
    for name, value in fields.items():
        setattr(user, name, value)
    db.commit()
    db.refresh(user)
    return UserPublic.model_validate(user)


def change_password(db: Session, user_id: int, data: ChangePasswordRequest) -> None:
    """Replace the password after verifying the current one."""
    user = _get_user(db, user_id)
    if not verify_password(data.current_password, user.password_hash):
        raise InvalidCredentials("Current password is incorrect")
    user.password_hash = hash_password(data.new_password)
    db.commit()
    logger.info("Password changed", extra={"user_id": user.id})


def reset_password(db: Session, user_id: int) -> ResetPasswordResponse:
    """Set a generated temporary password and return it once."""
    user = _get_user(db, user_id)
    temporary = secrets.token_urlsafe(TEMPORARY_PASSWORD_BYTES)
    user.password_hash = hash_password(temporary)
    db.commit()
    logger.info("Password reset", extra={"user_id": user.id})
    return ResetPasswordResponse(success=True, temporary_password=temporary)


def toggle_user_status(db: Session, user_id: int) -> UserPublic:
    user = _get_user(db, user_id)
    user.is_active = not user.is_active
    db.commit()
    db.refresh(user)
    logger.info(
        "User status toggled",
        extra={"user_id": user.id, "is_active": user.is_active},
    )
    return UserPublic.model_validate(user)


def delete_user(db: Session, user_id: int) -> None:
    """
    Delete a user who owns no reports.

    Their comments are removed and reports assigned to them become unassigned.
    """
    user = _get_user(db, user_id)
    if db.query(Report.id).filter(Report.user_id == user.id).first() is not None:
        raise DependencyExists("Cannot delete user that has submitted reports")
    db.query(Report).filter(Report.assigned_to == user.id).update(
        {Report.assigned_to: None}, synchronize_session=False
    )
    db.query(ReportComment).filter(ReportComment.user_id == user.id).delete(
        synchronize_session=False
    )
    db.delete(user)
    db.commit()
    logger.info("User deleted", extra={"user_id": user_id})


def list_users(db: Session, filters: UserFilters) -> Page[UserPublic]:
    q = db.query(User)
    if filters.search and filters.search.strip():
        pattern = f"%{escape_like(filters.search.strip())}%"
        q = q.filter(
            or_(
                User.username.ilike(pattern, escape="\\"),
                User.full_name.ilike(pattern, escape="\\"),
                User.email.ilike(pattern, escape="\\"),
            )
        )
    if filters.role is not None:
        q = q.filter(User.role == filters.role)
    if filters.is_active is not None:
        q = q.filter(User.is_active == filters.is_active)
    rows, pagination = paginate(
        q,
        q.order_by(User.created_at.desc(), User.id.desc()),
        filters.page,
        filters.per_page,
    )
    return Page[UserPublic](
        data=[UserPublic.model_validate(u) for u in rows],
        pagination=pagination,
    )
