"""Request/response schemas for menus and sub-menus."""

from datetime import datetime

from pydantic import BaseModel, Field


class MenuOut(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    name: str
    description: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class SubMenuOut(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    menu_id: int
    name: str
    description: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class MenuWithSubMenus(MenuOut):
    """Menu plus its active sub-menus."""

    sub_menus: list[SubMenuOut] = Field(default_factory=list)


class MenuCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    is_active: bool = True


class MenuUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None
    is_active: bool | None = None


class SubMenuCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    is_active: bool = True


class SubMenuUpdate(BaseModel):
    menu_id: int | None = None
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None
    is_active: bool | None = None
