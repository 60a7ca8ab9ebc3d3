"""Report comments. Internal comments are hidden from non-admin readers."""

import logging

from sqlalchemy.orm import Session, joinedload

from bugtracker.core.errors import CommentNotFound, Forbidden, ReportNotFound
from bugtracker.models import Report, ReportComment
from bugtracker.schemas.comment import CommentCreate, CommentOut
from bugtracker.schemas.user import UserPublic
from bugtracker.services.access import can_access_report, can_see_internal, is_admin

logger = logging.getLogger(__name__)


def _accessible_report(db: Session, report_id: int, actor: UserPublic) -> Report:
    report = db.get(Report, report_id)
    if report is None:
        raise ReportNotFound(f"Report {report_id} not found")
    if not can_access_report(actor, report):
        raise Forbidden("You do not have access to this report")
    return report


def _owned_comment(db: Session, comment_id: int, actor: UserPublic) -> ReportComment:
    comment = db.get(ReportComment, comment_id)
    if comment is None:
        raise CommentNotFound(f"Comment {comment_id} not found")
    if comment.user_id != actor.id and not is_admin(actor.role):
        raise Forbidden("Only the author or an admin can modify this comment")
    return comment


def create_comment(
    db: Session,
    report_id: int,
    actor: UserPublic,
    data: CommentCreate,
) -> CommentOut:
    _accessible_report(db, report_id, actor)
    if data.is_internal and not can_see_internal(actor.role):
        raise Forbidden("Only admins can post internal comments")
    comment = ReportComment(
        report_id=report_id,
        user_id=actor.id,
        comment=data.comment,
        is_internal=data.is_internal,
    )
    db.add(comment)
    db.commit()
    db.refresh(comment)
    logger.info(
        "Comment created",
        extra={"comment_id": comment.id, "report_id": report_id, "is_internal": comment.is_internal},
    )
    return CommentOut.model_validate(comment)


def list_comments(db: Session, report_id: int, actor: UserPublic) -> list[CommentOut]:
    """Comments oldest first; internal ones only for admins."""
    _accessible_report(db, report_id, actor)
    q = (
        db.query(ReportComment)
        .options(joinedload(ReportComment.user))
        .filter(ReportComment.report_id == report_id)
    )
    if not can_see_internal(actor.role):
        q = q.filter(ReportComment.is_internal.is_(False))
    rows = q.order_by(ReportComment.created_at, ReportComment.id).all()
    return [CommentOut.model_validate(c) for c in rows]


def update_comment(db: Session, comment_id: int, actor: UserPublic, text: str) -> CommentOut:
    comment = _owned_comment(db, comment_id, actor)
    comment.comment = text
    db.commit()
    db.refresh(comment)
    return CommentOut.model_validate(comment)


def delete_comment(db: Session, comment_id: int, actor: UserPublic) -> None:
    comment = _owned_comment(db, comment_id, actor)
    db.delete(comment)
    db.commit()
    logger.info("Comment deleted", extra={"comment_id": comment_id, "actor_id": actor.id})
