"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, Field

from bugtracker.schemas.user import UserPublic


class LoginRequest(BaseModel):
    """Credentials for login."""

    username: str = Field(..., min_length=1, max_length=50, description="Username")
    password: str = Field(..., min_length=1, max_length=128, description="Password")
    remember: bool | None = Field(default=None, description="Client-side hint; token lifetime is fixed.")


class AuthResponse(BaseModel):
    """Session token plus the authenticated user (no password hash)."""

    user: UserPublic
    token: str = Field(..., description="Signed session token")
    token_type: str = Field(default="bearer", description="Token type")


class LogoutResponse(BaseModel):
    """Logout always succeeds."""

    success: bool = True
