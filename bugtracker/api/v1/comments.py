"""Edit and delete report comments (author or admin)."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bugtracker.api.v1.auth import get_current_user
from bugtracker.core.database import get_db
from bugtracker.schemas.comment import CommentOut, CommentUpdate
from bugtracker.schemas.common import SuccessResponse
from bugtracker.schemas.user import UserPublic
from bugtracker.services import comments as comment_service

router = APIRouter()


@router.patch("/{comment_id}", response_model=CommentOut)
def update_comment(
    comment_id: int,
    body: CommentUpdate,
    current_user: Annotated[UserPublic, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> CommentOut:
    return comment_service.update_comment(db, comment_id, current_user, body.comment)


@router.delete("/{comment_id}", response_model=SuccessResponse)
def delete_comment(
    comment_id: int,
    current_user: Annotated[UserPublic, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> SuccessResponse:
    comment_service.delete_comment(db, comment_id, current_user)
    return SuccessResponse()
