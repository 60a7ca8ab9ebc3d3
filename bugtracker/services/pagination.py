"""Offset pagination shared by list endpoints."""

import math
from typing import Any

from sqlalchemy.orm import Query

from bugtracker.core.config import get_settings
from bugtracker.schemas.common import Pagination


def clamp_page_size(per_page: int | None) -> int:
    """Default to DEFAULT_PAGE_SIZE, never exceed MAX_PAGE_SIZE."""
    settings = get_settings()
    if per_page is None or per_page < 1:
        return settings.DEFAULT_PAGE_SIZE
    return min(per_page, settings.MAX_PAGE_SIZE)


def build_pagination(total: int, page: int, per_page: int) -> Pagination:
    return Pagination(
        total=total,
        page=page,
        per_page=per_page,
        total_pages=math.ceil(total / per_page) if total else 0,
    )


def paginate(
    count_query: Query,
    rows_query: Query,
    page: int | None,
    per_page: int | None,
) -> tuple[list[Any], Pagination]:
    """
    Count with ``count_query`` and fetch one page from ``rows_query``.

    The two are separate so eager-load options and ordering stay off the count.
    """
    page = page if page and page >= 1 else 1
    size = clamp_page_size(per_page)
    total = count_query.count()
    rows = rows_query.offset((page - 1) * size).limit(size).all()
    return rows, build_pagination(total, page, size)
