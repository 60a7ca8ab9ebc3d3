"""Admin analytics endpoints backing the dashboard."""

from datetime import UTC, datetime, timedelta
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import ValidationError
from sqlalchemy.orm import Session

from bugtracker.api.v1.auth import require_admin
from bugtracker.core.database import get_db
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
from bugtracker.services import analytics as analytics_service

router = APIRouter(dependencies=[Depends(require_admin)])

DEFAULT_TREND_DAYS = 30


def date_range_params(
    start_date: datetime | None = None,
    end_date: datetime | None = None,
) -> DateRange | None:
    """Dependency: optional date window. Both bounds or neither."""
    if start_date is None and end_date is None:
        return None
    if start_date is None or end_date is None:
        raise HTTPException(status_code=422, detail="start_date and end_date must be given together.")
    try:
        return DateRange(start_date=start_date, end_date=end_date)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False)) from e


OptionalRange = Annotated[DateRange | None, Depends(date_range_params)]


@router.get("/dashboard", response_model=DashboardStats)
def dashboard(db: Annotated[Session, Depends(get_db)]) -> DashboardStats:
    """Totals plus change over the last 30 days versus the 30 days before."""
    return analytics_service.dashboard_stats(db)


@router.get("/reports-over-time", response_model=list[DailyCount])
def reports_over_time(
    db: Annotated[Session, Depends(get_db)],
    date_range: OptionalRange,
) -> list[DailyCount]:
    """Daily report counts; defaults to the last 30 days."""
    if date_range is None:
        now = datetime.now(UTC)
        date_range = DateRange(start_date=now - timedelta(days=DEFAULT_TREND_DAYS), end_date=now)
    return analytics_service.reports_over_time(db, date_range)


@router.get("/status-distribution", response_model=list[StatusCount])
def status_distribution(
    db: Annotated[Session, Depends(get_db)],
    date_range: OptionalRange,
) -> list[StatusCount]:
    return analytics_service.status_distribution(db, date_range)


@router.get("/top-menus", response_model=list[MenuCount])
def top_menus(
    db: Annotated[Session, Depends(get_db)],
    date_range: OptionalRange,
    limit: Annotated[int, Query(ge=1, le=50)] = 10,
) -> list[MenuCount]:
    return analytics_service.top_menus(db, limit, date_range)


@router.get("/resolution-time", response_model=ResolutionTime)
def resolution_time(
    db: Annotated[Session, Depends(get_db)],
    date_range: OptionalRange,
) -> ResolutionTime:
    return analytics_service.average_resolution_time(db, date_range)


@router.get("/resolution-rate", response_model=ResolutionRate)
def resolution_rate(
    db: Annotated[Session, Depends(get_db)],
    date_range: OptionalRange,
) -> ResolutionRate:
    return analytics_service.resolution_rate(db, date_range)


@router.get("/active-users", response_model=list[ActiveUser])
def active_users(
    db: Annotated[Session, Depends(get_db)],
    date_range: OptionalRange,
    limit: Annotated[int, Query(ge=1, le=50)] = 10,
) -> list[ActiveUser]:
    return analytics_service.most_active_users(db, limit, date_range)
