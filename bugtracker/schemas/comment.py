"""Request/response schemas for report comments."""

from datetime import datetime

from pydantic import BaseModel, Field

from bugtracker.schemas.user import UserRole


class CommentAuthor(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    username: str
    full_name: str
    avatar_url: str | None = None
    role: UserRole


class CommentOut(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    report_id: int
    user_id: int
    comment: str
    is_internal: bool
    created_at: datetime
    user: CommentAuthor


class CommentCreate(BaseModel):
    comment: str = Field(..., min_length=1, max_length=500)
    is_internal: bool = False


class CommentUpdate(BaseModel):
    comment: str = Field(..., min_length=1, max_length=500)
