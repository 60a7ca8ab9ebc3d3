"""Bug report endpoints: list, file, read, edit, delete, assign and bulk actions."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from bugtracker.api.v1.auth import get_current_user, require_admin
from bugtracker.core.database import get_db
from bugtracker.schemas.comment import CommentCreate, CommentOut
from bugtracker.schemas.common import Page, SuccessResponse
from bugtracker.schemas.report import (
    AssignRequest,
    BulkAssignRequest,
    BulkAssignResponse,
    BulkStatusRequest,
    BulkStatusResponse,
    ReportCreate,
    ReportDetail,
    ReportFilters,
    ReportUpdate,
)
from bugtracker.schemas.user import UserPublic
from bugtracker.services import comments as comment_service
from bugtracker.services import reports as report_service
from bugtracker.services.report_query import list_reports as query_reports

router = APIRouter()


@router.get("", response_model=Page[ReportDetail])
def list_reports(
    filters: Annotated[ReportFilters, Query()],
    current_user: Annotated[UserPublic, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> Page[ReportDetail]:
    """
    Filtered, paginated report list, newest first.
    Non-admins only see their own reports regardless of the user_id filter.
    """
    return query_reports(db, filters, current_user.role, current_user.id)


@router.post("", response_model=ReportDetail, status_code=status.HTTP_201_CREATED)
def create_report(
    body: ReportCreate,
    current_user: Annotated[UserPublic, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> ReportDetail:
    return report_service.create_report(db, current_user.id, body)


@router.get("/recent", response_model=list[ReportDetail])
def recent_reports(
    _admin: Annotated[UserPublic, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
    limit: Annotated[int, Query(ge=1, le=50)] = 5,
) -> list[ReportDetail]:
    return report_service.recent_reports(db, limit)


@router.post("/bulk/status", response_model=BulkStatusResponse)
def bulk_update_status(
    body: BulkStatusRequest,
    _admin: Annotated[UserPublic, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> BulkStatusResponse:
    """Best-effort: unknown ids and reports already in the status are skipped."""
    updated = report_service.bulk_update_status(db, body.report_ids, body.status)
    return BulkStatusResponse(updated_count=updated)


@router.post("/bulk/assign", response_model=BulkAssignResponse)
def bulk_assign(
    body: BulkAssignRequest,
    _admin: Annotated[UserPublic, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> BulkAssignResponse:
    assigned = report_service.bulk_assign(db, body.report_ids, body.assigned_to)
    return BulkAssignResponse(assigned_count=assigned)


@router.get("/{report_id}", response_model=ReportDetail)
def get_report(
    report_id: int,
    current_user: Annotated[UserPublic, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> ReportDetail:
    return report_service.get_report(db, report_id, current_user)


@router.patch("/{report_id}", response_model=ReportDetail)
def update_report(
    report_id: int,
    body: ReportUpdate,
    current_user: Annotated[UserPublic, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> ReportDetail:
    """
    Partial update. Omitted fields are left alone; assigned_to: null unassigns.
    Owners may edit name, description, screenshots and category until the report is closed.
    """
    return report_service.update_report(db, report_id, body, current_user)


@router.delete("/{report_id}", response_model=SuccessResponse)
def delete_report(
    report_id: int,
    current_user: Annotated[UserPublic, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> SuccessResponse:
    report_service.delete_report(db, report_id, current_user)
    return SuccessResponse()


@router.post("/{report_id}/assign", response_model=ReportDetail)
def assign_report(
    report_id: int,
    body: AssignRequest,
    _admin: Annotated[UserPublic, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> ReportDetail:
    return report_service.assign_report(db, report_id, body.assigned_to)


@router.get("/{report_id}/comments", response_model=list[CommentOut])
def list_comments(
    report_id: int,
    current_user: Annotated[UserPublic, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> list[CommentOut]:
    return comment_service.list_comments(db, report_id, current_user)


@router.post(
    "/{report_id}/comments",
    response_model=CommentOut,
    status_code=status.HTTP_201_CREATED,
)
def create_comment(
    report_id: int,
    body: CommentCreate,
    current_user: Annotated[UserPublic, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> CommentOut:
    return comment_service.create_comment(db, report_id, current_user, body)
