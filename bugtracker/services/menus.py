"""Menu / sub-menu CRUD and the active-category lookups used to validate reports."""

import logging

from sqlalchemy.orm import Session

from bugtracker.core.errors import (
    CategoryMismatch,
    DependencyExists,
    InvalidMenu,
    InvalidSubMenu,
    MenuNotFound,
    SubMenuNotFound,
)
from bugtracker.models import Menu, Report, SubMenu
from bugtracker.schemas.menu import (
    MenuCreate,
    MenuOut,
    MenuUpdate,
    MenuWithSubMenus,
    SubMenuCreate,
    SubMenuOut,
    SubMenuUpdate,
)

logger = logging.getLogger(__name__)


def find_active_menu(db: Session, menu_id: int) -> Menu | None:
    return (
        db.query(Menu)
        .filter(Menu.id == menu_id, Menu.is_active.is_(True))
        .first()
    )


def find_active_sub_menu(db: Session, sub_menu_id: int) -> SubMenu | None:
    return (
        db.query(SubMenu)
        .filter(SubMenu.id == sub_menu_id, SubMenu.is_active.is_(True))
        .first()
    )


def _get_menu(db: Session, menu_id: int) -> Menu:
    menu = db.get(Menu, menu_id)
    if menu is None:
        raise MenuNotFound(f"Menu {menu_id} not found")
    return menu


def _get_sub_menu(db: Session, sub_menu_id: int) -> SubMenu:
    sub_menu = db.get(SubMenu, sub_menu_id)
    if sub_menu is None:
        raise SubMenuNotFound(f"Sub-menu {sub_menu_id} not found")
    return sub_menu


def _apply(row: Menu | SubMenu, fields: dict) -> None:
    for name, value in fields.items():
        # Non-nullable columns: an explicit null leaves them unchanged.
        if value is None and name in ("name", "is_active", "menu_id"):
            continue
        setattr(row, name, value)


def create_menu(db: Session, data: MenuCreate) -> MenuOut:
    menu = Menu(name=data.name, description=data.description, is_active=data.is_active)
    db.add(menu)
    db.commit()
    db.refresh(menu)
    logger.info("Menu created", extra={"menu_id": menu.id})
    return MenuOut.model_validate(menu)


def update_menu(db: Session, menu_id: int, data: MenuUpdate) -> MenuOut:
    menu = _get_menu(db, menu_id)
    _apply(menu, data.model_dump(exclude_unset=True))
    db.commit()
    db.refresh(menu)
    return MenuOut.model_validate(menu)


def list_menus(db: Session) -> list[MenuOut]:
    """Active menus, for report category selection."""
    rows = db.query(Menu).filter(Menu.is_active.is_(True)).order_by(Menu.id).all()
    return [MenuOut.model_validate(m) for m in rows]


def get_menu_with_sub_menus(db: Session, menu_id: int) -> MenuWithSubMenus:
    menu = _get_menu(db, menu_id)
    out = MenuWithSubMenus.model_validate(menu)
    out.sub_menus = [SubMenuOut.model_validate(s) for s in menu.sub_menus if s.is_active]
    return out


def delete_menu(db: Session, menu_id: int) -> None:
    """Delete a menu and its sub-menus. Blocked while any report references the menu."""
    menu = _get_menu(db, menu_id)
    if db.query(Report.id).filter(Report.menu_id == menu.id).first() is not None:
        raise DependencyExists("Cannot delete menu that has associated reports")
    db.delete(menu)
    db.commit()
    logger.info("Menu deleted", extra={"menu_id": menu_id})


def create_sub_menu(db: Session, menu_id: int, data: SubMenuCreate) -> SubMenuOut:
    if db.get(Menu, menu_id) is None:
        raise InvalidMenu(f"Parent menu {menu_id} not found")
    sub_menu = SubMenu(
        menu_id=menu_id,
        name=data.name,
        description=data.description,
        is_active=data.is_active,
    )
    db.add(sub_menu)
    db.commit()
    db.refresh(sub_menu)
    logger.info("Sub-menu created", extra={"menu_id": menu_id, "sub_menu_id": sub_menu.id})
    return SubMenuOut.model_validate(sub_menu)


def update_sub_menu(db: Session, sub_menu_id: int, data: SubMenuUpdate) -> SubMenuOut:
    """
    Update a sub-menu. Moving it under another menu is refused while reports
    reference it, since those reports would no longer match their menu.
    """
    sub_menu = _get_sub_menu(db, sub_menu_id)
    fields = data.model_dump(exclude_unset=True)
    new_menu_id = fields.get("menu_id")
    if new_menu_id is not None and new_menu_id != sub_menu.menu_id:
        if db.get(Menu, new_menu_id) is None:
            raise InvalidMenu(f"Parent menu {new_menu_id} not found")
        if db.query(Report.id).filter(Report.sub_menu_id == sub_menu.id).first() is not None:
            raise DependencyExists("Cannot move sub-menu that has associated reports")
    _apply(sub_menu, fields)
    db.commit()
    db.refresh(sub_menu)
    return SubMenuOut.model_validate(sub_menu)


def list_sub_menus(db: Session, menu_id: int) -> list[SubMenuOut]:
    rows = (
        db.query(SubMenu)
        .filter(SubMenu.menu_id == menu_id, SubMenu.is_active.is_(True))
        .order_by(SubMenu.id)
        .all()
    )
    return [SubMenuOut.model_validate(s) for s in rows]


def delete_sub_menu(db: Session, sub_menu_id: int) -> None:
    sub_menu = _get_sub_menu(db, sub_menu_id)
    if db.query(Report.id).filter(Report.sub_menu_id == sub_menu.id).first() is not None:
        raise DependencyExists("Cannot delete sub-menu that has associated reports")
    db.delete(sub_menu)
    db.commit()
    logger.info("Sub-menu deleted", extra={"sub_menu_id": sub_menu_id})


def ensure_category(db: Session, menu_id: int, sub_menu_id: int) -> None:
    """Validate that both categories are active and the sub-menu belongs to the menu."""
    if find_active_menu(db, menu_id) is None:
        raise InvalidMenu(f"Menu {menu_id} does not exist or is inactive")
    sub_menu = find_active_sub_menu(db, sub_menu_id)
    if sub_menu is None:
        raise InvalidSubMenu(f"Sub-menu {sub_menu_id} does not exist or is inactive")
    if sub_menu.menu_id != menu_id:
        raise CategoryMismatch(
            f"Sub-menu {sub_menu_id} does not belong to menu {menu_id}"
        )
