"""Pydantic request/response schemas."""

from bugtracker.schemas.auth import AuthResponse, LoginRequest, LogoutResponse
from bugtracker.schemas.comment import CommentCreate, CommentOut, CommentUpdate
from bugtracker.schemas.common import Page, Pagination, SuccessResponse
from bugtracker.schemas.health import HealthResponse
from bugtracker.schemas.menu import (
    MenuCreate,
    MenuOut,
    MenuUpdate,
    MenuWithSubMenus,
    SubMenuCreate,
    SubMenuOut,
    SubMenuUpdate,
)
from bugtracker.schemas.report import (
    ReportCreate,
    ReportDetail,
    ReportFilters,
    ReportOut,
    ReportPriority,
    ReportStatus,
    ReportUpdate,
)
from bugtracker.schemas.upload import FileUpload, UploadResponse
from bugtracker.schemas.user import UserCreate, UserFilters, UserPublic, UserRole, UserUpdate

__all__ = [
    "AuthResponse",
    "CommentCreate",
    "CommentOut",
    "CommentUpdate",
    "FileUpload",
    "HealthResponse",
    "LoginRequest",
    "LogoutResponse",
    "MenuCreate",
    "MenuOut",
    "MenuUpdate",
    "MenuWithSubMenus",
    "Page",
    "Pagination",
    "ReportCreate",
    "ReportDetail",
    "ReportFilters",
    "ReportOut",
    "ReportPriority",
    "ReportStatus",
    "ReportUpdate",
    "SubMenuCreate",
    "SubMenuOut",
    "SubMenuUpdate",
    "SuccessResponse",
    "UploadResponse",
    "UserCreate",
    "UserFilters",
    "UserPublic",
    "UserRole",
    "UserUpdate",
]
