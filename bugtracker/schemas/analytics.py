"""Response schemas for admin analytics."""

from datetime import date, datetime

from pydantic import BaseModel, Field, model_validator

# Widest window analytics accept, in days.
MAX_RANGE_DAYS = 366


class DateRange(BaseModel):
    start_date: datetime
    end_date: datetime

    @model_validator(mode="after")
    def check_window(self) -> "DateRange":
        if self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        if (self.end_date - self.start_date).days > MAX_RANGE_DAYS:
            raise ValueError(f"date range must not exceed {MAX_RANGE_DAYS} days")
        return self


class DashboardStats(BaseModel):
    total_reports: int
    pending_reports: int
    resolved_reports: int
    active_users: int
    reports_change: float = Field(..., description="Percent change, last 30 days vs the 30 days before.")
    pending_change: float
    resolved_change: float
    users_change: float


class DailyCount(BaseModel):
    day: date
    count: int


class StatusCount(BaseModel):
    status: str
    count: int
    percentage: float


class MenuCount(BaseModel):
    menu_id: int
    menu_name: str
    count: int


class ResolutionTime(BaseModel):
    average_hours: float
    resolved_count: int


class ResolutionRate(BaseModel):
    total: int
    resolved: int
    rate: float = Field(..., description="Resolved (or closed) share of reports, in percent.")


class ActiveUser(BaseModel):
    user_id: int
    username: str
    full_name: str
    report_count: int
