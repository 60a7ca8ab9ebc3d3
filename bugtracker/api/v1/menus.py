"""Menu and sub-menu endpoints. Reads are open to any signed-in user; writes are admin only."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from bugtracker.api.v1.auth import get_current_user, require_admin
from bugtracker.core.database import get_db
from bugtracker.schemas.common import SuccessResponse
from bugtracker.schemas.menu import (
    MenuCreate,
    MenuOut,
    MenuUpdate,
    MenuWithSubMenus,
    SubMenuCreate,
    SubMenuOut,
    SubMenuUpdate,
)
from bugtracker.schemas.user import UserPublic
from bugtracker.services import menus as menu_service

router = APIRouter()
sub_menu_router = APIRouter()


@router.get("", response_model=list[MenuOut])
def list_menus(
    _user: Annotated[UserPublic, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> list[MenuOut]:
    """Active menus, for category selection."""
    return menu_service.list_menus(db)


@router.post("", response_model=MenuOut, status_code=status.HTTP_201_CREATED)
def create_menu(
    body: MenuCreate,
    _admin: Annotated[UserPublic, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> MenuOut:
    return menu_service.create_menu(db, body)


@router.get("/{menu_id}", response_model=MenuWithSubMenus)
def get_menu(
    menu_id: int,
    _user: Annotated[UserPublic, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> MenuWithSubMenus:
    return menu_service.get_menu_with_sub_menus(db, menu_id)


@router.patch("/{menu_id}", response_model=MenuOut)
def update_menu(
    menu_id: int,
    body: MenuUpdate,
    _admin: Annotated[UserPublic, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> MenuOut:
    return menu_service.update_menu(db, menu_id, body)


@router.delete("/{menu_id}", response_model=SuccessResponse)
def delete_menu(
    menu_id: int,
    _admin: Annotated[UserPublic, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> SuccessResponse:
    """Delete a menu. 409 while any report still references it."""
    menu_service.delete_menu(db, menu_id)
    return SuccessResponse()


@router.get("/{menu_id}/sub-menus", response_model=list[SubMenuOut])
def list_sub_menus(
    menu_id: int,
    _user: Annotated[UserPublic, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> list[SubMenuOut]:
    return menu_service.list_sub_menus(db, menu_id)


@router.post(
    "/{menu_id}/sub-menus",
    response_model=SubMenuOut,
    status_code=status.HTTP_201_CREATED,
)
def create_sub_menu(
    menu_id: int,
    body: SubMenuCreate,
    _admin: Annotated[UserPublic, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> SubMenuOut:
    return menu_service.create_sub_menu(db, menu_id, body)


@sub_menu_router.patch("/{sub_menu_id}", response_model=SubMenuOut)
def update_sub_menu(
    sub_menu_id: int,
    body: SubMenuUpdate,
    _admin: Annotated[UserPublic, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> SubMenuOut:
    return menu_service.update_sub_menu(db, sub_menu_id, body)


@sub_menu_router.delete("/{sub_menu_id}", response_model=SuccessResponse)
def delete_sub_menu(
    sub_menu_id: int,
    _admin: Annotated[UserPublic, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> SuccessResponse:
    """Delete a sub-menu. 409 while any report still references it."""
    menu_service.delete_sub_menu(db, sub_menu_id)
    return SuccessResponse()
