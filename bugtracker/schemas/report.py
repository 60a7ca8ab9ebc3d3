"""Request/response schemas for bug reports, filters and bulk actions."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from bugtracker.schemas.menu import MenuOut, SubMenuOut
from bugtracker.schemas.user import UserPublic

ReportStatus = Literal["pending", "progress", "resolved", "closed"]
ReportPriority = Literal["low", "medium", "high", "critical"]

REPORT_STATUSES: tuple[ReportStatus, ...] = ("pending", "progress", "resolved", "closed")

MAX_SCREENSHOTS = 5


class ReportOut(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    user_id: int
    menu_id: int
    sub_menu_id: int
    name: str
    description: str
    status: ReportStatus
    priority: ReportPriority
    assigned_to: int | None = None
    screenshots: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
    resolved_at: datetime | None = None


class ReportDetail(ReportOut):
    """Report joined with its owner, category and assignee (no password hashes)."""

    user: UserPublic
    menu: MenuOut
    sub_menu: SubMenuOut
    assigned_user: UserPublic | None = None


class ReportCreate(BaseModel):
    menu_id: int
    sub_menu_id: int
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=1000)
    priority: ReportPriority = "medium"
    screenshots: list[str] = Field(default_factory=list, max_length=MAX_SCREENSHOTS)


class ReportUpdate(BaseModel):
    """
    Partial update. Only fields present in the request body are applied, so an
    explicit ``"assigned_to": null`` unassigns while an omitted field is left alone.
    Use ``model_fields_set`` / ``exclude_unset`` to tell the two apart.
    """

    menu_id: int | None = None
    sub_menu_id: int | None = None
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, min_length=1, max_length=1000)
    status: ReportStatus | None = None
    priority: ReportPriority | None = None
    assigned_to: int | None = None
    screenshots: list[str] | None = Field(default=None, max_length=MAX_SCREENSHOTS)

    @model_validator(mode="after")
    def reject_null_required_fields(self) -> "ReportUpdate":
        for name in ("menu_id", "sub_menu_id", "name", "description", "status", "priority", "screenshots"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class AssignRequest(BaseModel):
    assigned_to: int | None = Field(..., description="User id, or null to unassign.")


class ReportFilters(BaseModel):
    """Query filters for report lists. Non-admin callers are always scoped to their own reports."""

    search: str | None = Field(default=None, max_length=200, description="Matches name or description.")
    status: ReportStatus | None = None
    priority: ReportPriority | None = None
    user_id: int | None = None
    menu_id: int | None = None
    assigned_to: int | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None
    page: int = Field(default=1, ge=1)
    per_page: int = Field(default=10, ge=1, le=100)


class BulkStatusRequest(BaseModel):
    report_ids: list[int] = Field(..., min_length=1, max_length=1000)
    status: ReportStatus


class BulkAssignRequest(BaseModel):
    report_ids: list[int] = Field(..., min_length=1, max_length=1000)
    assigned_to: int


class BulkStatusResponse(BaseModel):
    success: bool = True
    updated_count: int = Field(..., ge=0, description="Reports whose status actually changed.")


class BulkAssignResponse(BaseModel):
    success: bool = True
    assigned_count: int = Field(..., ge=0, description="Reports whose assignee actually changed.")
