"""Admin analytics over reports and users."""

from collections import defaultdict
from datetime import UTC, date, datetime, timedelta

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from bugtracker.models import Menu, Report, User
from bugtracker.schemas.analytics import (
    ActiveUser,
    DailyCount,
    DashboardStats,
    DateRange,
    MenuCount,
    ResolutionRate,
    ResolutionTime,
    StatusCount,
)
from bugtracker.schemas.report import REPORT_STATUSES

# Length of the comparison window for dashboard "change" percentages.
DASHBOARD_PERIOD = timedelta(days=30)


def _as_utc(value: datetime) -> datetime:
    """Treat naive timestamps from the store as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _in_range(query: Query, column, date_range: DateRange | None) -> Query:
    if date_range is None:
        return query
    return query.filter(column >= date_range.start_date, column <= date_range.end_date)


def percent_change(current: int, previous: int) -> float:
    """Percent change from previous to current; 100 when growing from zero."""
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return round((current - previous) / previous * 100, 2)


def dashboard_stats(db: Session, now: datetime | None = None) -> DashboardStats:
    """
    Totals plus change percentages comparing the last 30 days with the 30 days
    before that (a true previous-period delta).
    """
    now = now or datetime.now(UTC)
    current_start = now - DASHBOARD_PERIOD
    previous_start = current_start - DASHBOARD_PERIOD

    def windowed(query: Query, column) -> tuple[int, int]:
        current = query.filter(column >= current_start, column < now).count()
        previous = query.filter(column >= previous_start, column < current_start).count()
        return current, previous

    reports = db.query(Report)
    pending = reports.filter(Report.status == "pending")
    resolved = reports.filter(Report.status == "resolved")
    active_users = db.query(User).filter(User.is_active.is_(True))

    reports_cur, reports_prev = windowed(reports, Report.created_at)
    pending_cur, pending_prev = windowed(pending, Report.created_at)
    resolved_cur, resolved_prev = windowed(resolved, Report.resolved_at)
    users_cur, users_prev = windowed(active_users, User.created_at)

    return DashboardStats(
        total_reports=reports.count(),
        pending_reports=pending.count(),
        resolved_reports=resolved.count(),
        active_users=active_users.count(),
        reports_change=percent_change(reports_cur, reports_prev),
        pending_change=percent_change(pending_cur, pending_prev),
        resolved_change=percent_change(resolved_cur, resolved_prev),
        users_change=percent_change(users_cur, users_prev),
    )


def reports_over_time(db: Session, date_range: DateRange) -> list[DailyCount]:
    """Reports created per day in the range, including zero days."""
    rows = _in_range(db.query(Report.created_at), Report.created_at, date_range).all()
    counts: dict[date, int] = defaultdict(int)
    for (created_at,) in rows:
        counts[_as_utc(created_at).date()] += 1
    start = _as_utc(date_range.start_date).date()
    end = _as_utc(date_range.end_date).date()
    days = (end - start).days
    return [
        DailyCount(day=start + timedelta(days=i), count=counts.get(start + timedelta(days=i), 0))
        for i in range(days + 1)
    ]


def status_distribution(db: Session, date_range: DateRange | None = None) -> list[StatusCount]:
    q = _in_range(
        db.query(Report.status, func.count(Report.id)),
        Report.created_at,
        date_range,
    ).group_by(Report.status)
    counts = dict(q.all())
    total = sum(counts.values())
    return [
        StatusCount(
            status=status,
            count=counts.get(status, 0),
            percentage=round(counts.get(status, 0) / total * 100, 2) if total else 0.0,
        )
        for status in REPORT_STATUSES
    ]


def top_menus(
    db: Session,
    limit: int = 10,
    date_range: DateRange | None = None,
) -> list[MenuCount]:
    report_count = func.count(Report.id).label("report_count")
    q = _in_range(
        db.query(Menu.id, Menu.name, report_count).join(Report, Report.menu_id == Menu.id),
        Report.created_at,
        date_range,
    )
    rows = (
        q.group_by(Menu.id, Menu.name)
        .order_by(report_count.desc(), Menu.id)
        .limit(limit)
        .all()
    )
    return [MenuCount(menu_id=mid, menu_name=name, count=count) for mid, name, count in rows]


def average_resolution_time(db: Session, date_range: DateRange | None = None) -> ResolutionTime:
    """Mean hours from creation to resolution over reports that have resolved_at."""
    q = _in_range(
        db.query(Report.created_at, Report.resolved_at).filter(Report.resolved_at.isnot(None)),
        Report.resolved_at,
        date_range,
    )
    durations = [
        (_as_utc(resolved_at) - _as_utc(created_at)).total_seconds() / 3600
        for created_at, resolved_at in q.all()
    ]
    if not durations:
        return ResolutionTime(average_hours=0.0, resolved_count=0)
    return ResolutionTime(
        average_hours=round(sum(durations) / len(durations), 2),
        resolved_count=len(durations),
    )


def resolution_rate(db: Session, date_range: DateRange | None = None) -> ResolutionRate:
    q = _in_range(db.query(Report), Report.created_at, date_range)
    total = q.count()
    resolved = q.filter(Report.status.in_(("resolved", "closed"))).count()
    return ResolutionRate(
        total=total,
        resolved=resolved,
        rate=round(resolved / total * 100, 2) if total else 0.0,
    )


def most_active_users(
    db: Session,
    limit: int = 10,
    date_range: DateRange | None = None,
) -> list[ActiveUser]:
    report_count = func.count(Report.id).label("report_count")
    q = _in_range(
        db.query(User.id, User.username, User.full_name, report_count).join(
            Report, Report.user_id == User.id
        ),
        Report.created_at,
        date_range,
    )
    rows = (
        q.group_by(User.id, User.username, User.full_name)
        .order_by(report_count.desc(), User.id)
        .limit(limit)
        .all()
    )
    return [
        ActiveUser(user_id=uid, username=username, full_name=full_name, report_count=count)
        for uid, username, full_name, count in rows
    ]
