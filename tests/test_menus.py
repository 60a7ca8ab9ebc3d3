"""Tests for bugtracker.services.menus: category CRUD and dependency checks."""

from bugtracker.core.errors import DependencyExists, InvalidMenu, MenuNotFound, SubMenuNotFound
from bugtracker.models import Menu, SubMenu
from bugtracker.schemas.menu import MenuCreate, MenuUpdate, SubMenuCreate, SubMenuUpdate
from bugtracker.services import menus as menu_service

from factories import DatabaseTestCase, make_menu, make_report, make_user


class TestMenus(DatabaseTestCase):
    def test_create_and_list_active_only(self) -> None:
        menu_service.create_menu(self.db, MenuCreate(name="Billing"))
        menu_service.create_menu(self.db, MenuCreate(name="Legacy", is_active=False))
        self.assertEqual([m.name for m in menu_service.list_menus(self.db)], ["Billing"])

    def test_partial_update(self) -> None:
        menu = make_menu(self.db, "Billing")
        out = menu_service.update_menu(self.db, menu.id, MenuUpdate(description="Payments and invoices"))
        self.assertEqual(out.name, "Billing")
        self.assertEqual(out.description, "Payments and invoices")

    def test_update_missing_menu(self) -> None:
        with self.assertRaises(MenuNotFound):
            menu_service.update_menu(self.db, 42, MenuUpdate(name="x"))

    def test_menu_with_active_sub_menus(self) -> None:
        menu = make_menu(self.db, "Billing", ("Invoices", "Refunds"))
        menu.sub_menus[1].is_active = False
        self.db.commit()
        out = menu_service.get_menu_with_sub_menus(self.db, menu.id)
        self.assertEqual([s.name for s in out.sub_menus], ["Invoices"])

    def test_delete_menu_with_reports_is_refused(self) -> None:
        user = make_user(self.db)
        menu = make_menu(self.db, "Billing")
        make_report(self.db, user, menu)
        with self.assertRaises(DependencyExists) as ctx:
            menu_service.delete_menu(self.db, menu.id)
        self.assertIn("associated reports", ctx.exception.message)
        self.assertIsNotNone(self.db.get(Menu, menu.id))

    def test_delete_menu_removes_sub_menus(self) -> None:
        menu = make_menu(self.db, "Billing", ("Invoices", "Refunds"))
        menu_id = menu.id
        menu_service.delete_menu(self.db, menu_id)
        self.assertIsNone(self.db.get(Menu, menu_id))
        self.assertEqual(self.db.query(SubMenu).filter(SubMenu.menu_id == menu_id).count(), 0)


class TestSubMenus(DatabaseTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.billing = make_menu(self.db, "Billing", ("Invoices",))
        self.search = make_menu(self.db, "Search", ())

    def test_create_under_missing_menu(self) -> None:
        with self.assertRaises(InvalidMenu):
            menu_service.create_sub_menu(self.db, 404, SubMenuCreate(name="Orphan"))

    def test_create_and_list(self) -> None:
        created = menu_service.create_sub_menu(self.db, self.search.id, SubMenuCreate(name="Filters"))
        self.assertEqual(created.menu_id, self.search.id)
        self.assertEqual([s.name for s in menu_service.list_sub_menus(self.db, self.search.id)], ["Filters"])

    def test_move_unused_sub_menu(self) -> None:
        sub_id = self.billing.sub_menus[0].id
        out = menu_service.update_sub_menu(self.db, sub_id, SubMenuUpdate(menu_id=self.search.id))
        self.assertEqual(out.menu_id, self.search.id)

    def test_move_referenced_sub_menu_is_refused(self) -> None:
        make_report(self.db, make_user(self.db), self.billing)
        with self.assertRaises(DependencyExists):
            menu_service.update_sub_menu(
                self.db, self.billing.sub_menus[0].id, SubMenuUpdate(menu_id=self.search.id)
            )

    def test_rename_referenced_sub_menu_is_fine(self) -> None:
        make_report(self.db, make_user(self.db), self.billing)
        out = menu_service.update_sub_menu(self.db, self.billing.sub_menus[0].id, SubMenuUpdate(name="Bills"))
        self.assertEqual(out.name, "Bills")

    def test_delete(self) -> None:
        sub_id = self.billing.sub_menus[0].id
        make_report(self.db, make_user(self.db), self.billing)
        with self.assertRaises(DependencyExists):
            menu_service.delete_sub_menu(self.db, sub_id)
        with self.assertRaises(SubMenuNotFound):
            menu_service.delete_sub_menu(self.db, 404)
