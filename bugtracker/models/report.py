"""ORM models for bug reports and their comments."""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    false,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from bugtracker.models.base import Base

# JSONB on Postgres; plain JSON elsewhere (e.g. SQLite in tests).
ScreenshotList = JSON().with_variant(JSONB(), "postgresql")


class Report(Base):
    """
    A bug report filed by a user against a menu / sub-menu category.

    resolved_at is set while status == 'resolved' and null otherwise;
    services/reports.py is the only writer of status.
    """

    __tablename__ = "reports"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    menu_id = Column(
        Integer,
        ForeignKey("menus.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    sub_menu_id = Column(
        Integer,
        ForeignKey("sub_menus.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    status = Column(String(32), nullable=False, default="pending", server_default="pending", index=True)
    priority = Column(String(32), nullable=False, default="medium", server_default="medium", index=True)
    assigned_to = Column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    screenshots = Column(ScreenshotList, nullable=False, default=list)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        index=True,
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    resolved_at = Column(DateTime(timezone=True), nullable=True)

    user = relationship("User", foreign_keys=[user_id])
    assigned_user = relationship("User", foreign_keys=[assigned_to])
    menu = relationship("Menu")
    sub_menu = relationship("SubMenu")
    comments = relationship(
        "ReportComment",
        back_populates="report",
        cascade="all, delete-orphan",
        order_by="ReportComment.id",
    )


class ReportComment(Base):
    """Remark on a report. Internal comments are visible to admins only."""

    __tablename__ = "report_comments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    report_id = Column(
        Integer,
        ForeignKey("reports.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    comment = Column(Text, nullable=False)
    is_internal = Column(Boolean, nullable=False, default=False, server_default=false())
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    report = relationship("Report", back_populates="comments")
    user = relationship("User")
