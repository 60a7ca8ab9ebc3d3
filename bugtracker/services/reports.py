"""Report lifecycle: creation, validated partial updates, status transitions and bulk actions.

Status moves freely between pending, progress, resolved and closed; the only
coupled field is ``resolved_at``:

* entering ``resolved`` stamps the current time,
* leaving ``resolved`` clears it,
* moving between two non-resolved statuses leaves it untouched (null).
"""

import logging
from datetime import UTC, datetime
from typing import Any

from sqlalchemy.orm import Session, joinedload

from bugtracker.core.errors import (
    CategoryMismatch,
    Forbidden,
    InvalidAssignee,
    InvalidMenu,
    InvalidSubMenu,
    ReportNotFound,
    ValidationFailed,
)
from bugtracker.models import Report, User
from bugtracker.schemas.report import (
    MAX_SCREENSHOTS,
    ReportCreate,
    ReportDetail,
    ReportStatus,
    ReportUpdate,
)
from bugtracker.schemas.user import UserPublic
from bugtracker.services.access import can_access_report, is_admin
from bugtracker.services.menus import ensure_category, find_active_menu, find_active_sub_menu

logger = logging.getLogger(__name__)

# Fields a non-admin owner may change, and only while the report is not closed.
OWNER_EDITABLE_FIELDS = frozenset({"name", "description", "screenshots", "menu_id", "sub_menu_id"})
SIMPLE_FIELDS = ("name", "description", "priority", "screenshots")


def _detail_query(db: Session):
    return db.query(Report).options(
        joinedload(Report.user),
        joinedload(Report.menu),
        joinedload(Report.sub_menu),
        joinedload(Report.assigned_user),
    )


def _load_report(db: Session, report_id: int) -> Report:
    report = db.get(Report, report_id)
    if report is None:
        raise ReportNotFound(f"Report {report_id} not found")
    return report


def _require_active_assignee(db: Session, user_id: int) -> User:
    user = (
        db.query(User)
        .filter(User.id == user_id, User.is_active.is_(True))
        .first()
    )
    if user is None:
        raise InvalidAssignee(f"User {user_id} does not exist or is inactive")
    return user


def _check_screenshots(screenshots: list[str]) -> list[str]:
    if len(screenshots) > MAX_SCREENSHOTS:
        raise ValidationFailed(f"At most {MAX_SCREENSHOTS} screenshots are allowed per report.")
    return list(screenshots)


def apply_status(report: Report, new_status: ReportStatus, now: datetime) -> None:
    """Set the status and keep resolved_at in step with it."""
    previous = report.status
    report.status = new_status
    if new_status == "resolved":
        report.resolved_at = now
    elif previous == "resolved":
        report.resolved_at = None


def to_detail(report: Report) -> ReportDetail:
    return ReportDetail.model_validate(report)


def get_report(db: Session, report_id: int, actor: UserPublic | None = None) -> ReportDetail:
    """Return one report with its joins. Non-admin actors may only read their own."""
    report = _detail_query(db).filter(Report.id == report_id).first()
    if report is None:
        raise ReportNotFound(f"Report {report_id} not found")
    if actor is not None and not can_access_report(actor, report):
        raise Forbidden("You can only view your own reports")
    return to_detail(report)


def create_report(db: Session, user_id: int, data: ReportCreate) -> ReportDetail:
    """File a new report; it always starts as pending with no resolved_at."""
    ensure_category(db, data.menu_id, data.sub_menu_id)
    report = Report(
        user_id=user_id,
        menu_id=data.menu_id,
        sub_menu_id=data.sub_menu_id,
        name=data.name,
        description=data.description,
        status="pending",
        priority=data.priority,
        assigned_to=None,
        screenshots=_check_screenshots(data.screenshots),
        resolved_at=None,
    )
    db.add(report)
    db.commit()
    logger.info(
        "Report created",
        extra={"report_id": report.id, "user_id": user_id, "menu_id": data.menu_id},
    )
    return get_report(db, report.id)


def _check_owner_update(actor: UserPublic, report: Report, fields: dict[str, Any]) -> None:
    if report.user_id != actor.id:
        raise Forbidden("You can only update your own reports")
    if report.status == "closed":
        raise Forbidden("Closed reports can no longer be edited")
    disallowed = sorted(set(fields) - OWNER_EDITABLE_FIELDS)
    if disallowed:
        raise Forbidden(f"Only admins can change: {', '.join(disallowed)}")


def update_report(
    db: Session,
    report_id: int,
    changes: ReportUpdate,
    actor: UserPublic | None = None,
) -> ReportDetail:
    """
    Validate and apply a partial update.

    Only fields present in ``changes`` are touched. Category, sub-menu and
    assignee references are checked against active rows; the sub-menu must
    belong to the effective menu (the incoming one if given, else the current
    one). ``assigned_to=None`` unassigns. Pass ``actor`` to enforce owner rules
    for non-admins; omit it for trusted (admin/system) callers.

    Raises ReportNotFound, Forbidden, InvalidMenu, InvalidSubMenu,
    CategoryMismatch, InvalidAssignee or ValidationFailed.
    """
    report = _load_report(db, report_id)
    fields = changes.model_dump(exclude_unset=True)

    if actor is not None and not is_admin(actor.role):
        _check_owner_update(actor, report, fields)

    effective_menu_id = fields.get("menu_id", report.menu_id)
    if "menu_id" in fields and find_active_menu(db, fields["menu_id"]) is None:
        raise InvalidMenu(f"Menu {fields['menu_id']} does not exist or is inactive")
    if "sub_menu_id" in fields:
        sub_menu = find_active_sub_menu(db, fields["sub_menu_id"])
        if sub_menu is None:
            raise InvalidSubMenu(
                f"Sub-menu {fields['sub_menu_id']} does not exist or is inactive"
            )
        if sub_menu.menu_id != effective_menu_id:
            raise CategoryMismatch(
                f"Sub-menu {sub_menu.id} does not belong to menu {effective_menu_id}"
            )
    elif effective_menu_id != report.menu_id:
        # Menu changed without a new sub-menu: the current one must still fit.
        if report.sub_menu is None or report.sub_menu.menu_id != effective_menu_id:
            raise CategoryMismatch(
                f"Sub-menu {report.sub_menu_id} does not belong to menu {effective_menu_id}; "
                "choose a sub-menu of the new menu"
            )

    if fields.get("assigned_to") is not None:
        _require_active_assignee(db, fields["assigned_to"])

    now = datetime.now(UTC)
    if "status" in fields:
        apply_status(report, fields["status"], now)

    if "menu_id" in fields:
        report.menu_id = fields["menu_id"]
    if "sub_menu_id" in fields:
        report.sub_menu_id = fields["sub_menu_id"]
    if "assigned_to" in fields:
        report.assigned_to = fields["assigned_to"]
    for name in SIMPLE_FIELDS:
        if name in fields:
            value = fields[name]
            setattr(report, name, _check_screenshots(value) if name == "screenshots" else value)

    report.updated_at = now
    db.commit()
    logger.info(
        "Report updated",
        extra={"report_id": report.id, "fields": sorted(fields), "status": report.status},
    )
    # Reload relationships so the response reflects the new foreign keys.
    db.expire(report)
    return get_report(db, report.id)


def assign_report(db: Session, report_id: int, assigned_to: int | None) -> ReportDetail:
    """Assign (or, with None, unassign) a report."""
    return update_report(db, report_id, ReportUpdate(assigned_to=assigned_to))


def delete_report(db: Session, report_id: int, actor: UserPublic) -> None:
    """
    Delete a report and its comments.

    Admins may delete any report; owners only their own while it is still pending.
    """
    report = _load_report(db, report_id)
    if not is_admin(actor.role):
        if report.user_id != actor.id:
            raise Forbidden("You can only delete your own reports")
        if report.status != "pending":
            raise Forbidden("Only pending reports can be deleted")
    db.delete(report)
    db.commit()
    logger.info("Report deleted", extra={"report_id": report_id, "actor_id": actor.id})


def bulk_update_status(db: Session, report_ids: list[int], status: ReportStatus) -> int:
    """
    Set ``status`` on every listed report whose status differs; best-effort.

    Unknown ids and reports already in ``status`` are skipped. Returns the
    number of reports actually changed.
    """
    reports = db.query(Report).filter(Report.id.in_(set(report_ids))).all()
    now = datetime.now(UTC)
    changed = 0
    for report in reports:
        if report.status == status:
            continue
        apply_status(report, status, now)
        report.updated_at = now
        changed += 1
    db.commit()
    logger.info(
        "Bulk status update",
        extra={"requested": len(report_ids), "updated": changed, "status": status},
    )
    return changed


def bulk_assign(db: Session, report_ids: list[int], assigned_to: int) -> int:
    """
    Assign every listed report to one user; best-effort.

    The assignee is validated once (InvalidAssignee). Unknown ids and reports
    already assigned to that user are skipped. Returns the number changed.
    """
    _require_active_assignee(db, assigned_to)
    reports = db.query(Report).filter(Report.id.in_(set(report_ids))).all()
    now = datetime.now(UTC)
    changed = 0
    for report in reports:
        if report.assigned_to == assigned_to:
            continue
        report.assigned_to = assigned_to
        report.updated_at = now
        changed += 1
    db.commit()
    logger.info(
        "Bulk assign",
        extra={"requested": len(report_ids), "assigned": changed, "assignee_id": assigned_to},
    )
    return changed


def recent_reports(db: Session, limit: int = 5) -> list[ReportDetail]:
    """Newest reports for the admin dashboard."""
    rows = (
        _detail_query(db)
        .order_by(Report.created_at.desc(), Report.id.desc())
        .limit(max(1, min(limit, 50)))
        .all()
    )
    return [to_detail(r) for r in rows]
