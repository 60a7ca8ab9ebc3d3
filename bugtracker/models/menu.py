"""ORM models for the two-level report category taxonomy (menus and sub-menus)."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text, func, true
from sqlalchemy.orm import relationship

from bugtracker.models.base import Base


class Menu(Base):
    """Top-level category. Inactive menus cannot be chosen for new or updated reports."""

    __tablename__ = "menus"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, server_default=true())
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    sub_menus = relationship(
        "SubMenu",
        back_populates="menu",
        cascade="all, delete-orphan",
        order_by="SubMenu.id",
    )


class SubMenu(Base):
    """Second-level category; always owned by exactly one menu."""

    __tablename__ = "sub_menus"

    id = Column(Integer, primary_key=True, autoincrement=True)
    menu_id = Column(
        Integer,
        ForeignKey("menus.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, server_default=true())
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    menu = relationship("Menu", back_populates="sub_menus")
