"""Login, logout and the auth dependencies (get_current_user, require_admin)."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from bugtracker.core.database import get_db
from bugtracker.core.errors import UserNotFound
from bugtracker.schemas.auth import AuthResponse, LoginRequest, LogoutResponse
from bugtracker.schemas.user import UserPublic
from bugtracker.services.auth import AuthService, get_auth_service

router = APIRouter()
security = HTTPBearer(auto_error=False)


def get_bearer_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> str:
    """Dependency: the raw bearer token. Raises 401 if the header is missing."""
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return credentials.credentials


def get_current_user(
    token: Annotated[str, Depends(get_bearer_token)],
    db: Annotated[Session, Depends(get_db)],
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> UserPublic:
    """Dependency: resolve the bearer token to an active user. Token errors become 401."""
    try:
        return auth.resolve_session(db, token)
    except UserNotFound:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )


def require_admin(
    current_user: Annotated[UserPublic, Depends(get_current_user)],
) -> UserPublic:
    """Dependency: require authenticated user with role 'admin'. Raises 403 for non-admin."""
    if current_user.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> AuthResponse:
    """
    Authenticate with username and password; returns the user and a session token.
    Include the token in the Authorization header as: Bearer <token>
    """
    return auth.login(db, body.username, body.password)


@router.get("/me", response_model=UserPublic)
def me(
    current_user: Annotated[UserPublic, Depends(get_current_user)],
) -> UserPublic:
    """Return the user the bearer token belongs to."""
    return current_user


@router.post("/logout", response_model=LogoutResponse)
def logout(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> LogoutResponse:
    """Invalidate the bearer token. Always succeeds, including for stale or missing tokens."""
    if credentials is None or not credentials.credentials:
        return LogoutResponse(success=True)
    return auth.logout(credentials.credentials)
