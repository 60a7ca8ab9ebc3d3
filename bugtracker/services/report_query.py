"""Filtered, paginated, role-scoped report listing."""

from sqlalchemy import or_
from sqlalchemy.orm import Query, Session, joinedload

from bugtracker.models import Report
from bugtracker.schemas.common import Page
from bugtracker.schemas.report import ReportDetail, ReportFilters
from bugtracker.services.access import scope_to_owner
from bugtracker.services.pagination import paginate


def escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def apply_report_filters(query: Query, filters: ReportFilters) -> Query:
    """Translate filters into WHERE clauses. Callers must scope filters first."""
    if filters.search and filters.search.strip():
        pattern = f"%{escape_like(filters.search.strip())}%"
        query = query.filter(
            or_(
                Report.name.ilike(pattern, escape="\\"),
                Report.description.ilike(pattern, escape="\\"),
            )
        )
    if filters.status is not None:
        query = query.filter(Report.status == filters.status)
    if filters.priority is not None:
        query = query.filter(Report.priority == filters.priority)
    if filters.user_id is not None:
        query = query.filter(Report.user_id == filters.user_id)
    if filters.menu_id is not None:
        query = query.filter(Report.menu_id == filters.menu_id)
    if filters.assigned_to is not None:
        query = query.filter(Report.assigned_to == filters.assigned_to)
    if filters.date_from is not None:
        query = query.filter(Report.created_at >= filters.date_from)
    if filters.date_to is not None:
        query = query.filter(Report.created_at <= filters.date_to)
    return query


def list_reports(
    db: Session,
    filters: ReportFilters,
    actor_role: str,
    actor_user_id: int | None = None,
) -> Page[ReportDetail]:
    """
    Return one page of reports, newest first, joined with owner, menu,
    sub-menu and assignee.

    Non-admin actors only ever see their own reports; any ``user_id`` they
    pass is replaced by their own id.
    """
    scoped = scope_to_owner(actor_role, actor_user_id, filters)
    base = apply_report_filters(db.query(Report), scoped)
    rows_query = base.options(
        joinedload(Report.user),
        joinedload(Report.menu),
        joinedload(Report.sub_menu),
        joinedload(Report.assigned_user),
    ).order_by(Report.created_at.desc(), Report.id.desc())
    rows, pagination = paginate(base, rows_query, scoped.page, scoped.per_page)
    return Page[ReportDetail](
        data=[ReportDetail.model_validate(r) for r in rows],
        pagination=pagination,
    )
