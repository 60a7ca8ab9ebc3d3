"""SQLAlchemy ORM models."""

from bugtracker.models.base import Base
from bugtracker.models.menu import Menu, SubMenu
from bugtracker.models.report import Report, ReportComment
from bugtracker.models.user import User

__all__ = ["Base", "Menu", "Report", "ReportComment", "SubMenu", "User"]
