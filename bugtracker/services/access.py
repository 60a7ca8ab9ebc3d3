"""Role-based visibility rules, applied before any report or comment query."""

from typing import TYPE_CHECKING

from bugtracker.schemas.report import ReportFilters

if TYPE_CHECKING:
    from bugtracker.models import Report
    from bugtracker.schemas.user import UserPublic

ADMIN_ROLE = "admin"


def is_admin(actor_role: str | None) -> bool:
    return actor_role == ADMIN_ROLE


def can_see_internal(actor_role: str | None) -> bool:
    """Internal comments are visible to admins only."""
    return is_admin(actor_role)


def scope_to_owner(
    actor_role: str | None,
    actor_id: int | None,
    filters: ReportFilters,
) -> ReportFilters:
    """
    Return filters constrained to what the actor may see.

    Admins keep their filters as given. Everyone else is pinned to
    ``user_id == actor_id`` whatever ``user_id`` they asked for.
    """
    if is_admin(actor_role):
        return filters
    # -1 never matches a row; an anonymous non-admin sees nothing.
    owner_id = actor_id if actor_id is not None else -1
    return filters.model_copy(update={"user_id": owner_id})


def can_access_report(actor: "UserPublic", report: "Report") -> bool:
    """Owners and admins may read a report and its comments."""
    return is_admin(actor.role) or report.user_id == actor.id
