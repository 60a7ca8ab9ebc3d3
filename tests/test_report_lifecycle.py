"""Tests for bugtracker.services.reports: creation, validated updates, resolved_at and bulk actions."""

from bugtracker.core.errors import (
    CategoryMismatch,
    Forbidden,
    InvalidAssignee,
    InvalidMenu,
    InvalidSubMenu,
    ReportNotFound,
)
from bugtracker.models import Report
from bugtracker.schemas.report import ReportCreate, ReportUpdate
from bugtracker.services import reports as report_service

from factories import DatabaseTestCase, make_menu, make_report, make_user, public


class ReportTestCase(DatabaseTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.admin = make_user(self.db, "root", role="admin")
        self.owner = make_user(self.db, "alice")
        self.other = make_user(self.db, "bob")
        self.billing = make_menu(self.db, "Billing", ("Invoices", "Refunds"))
        self.search = make_menu(self.db, "Search", ("Filters",))
        self.invoices, self.refunds = self.billing.sub_menus
        self.filters = self.search.sub_menus[0]


class TestCreateReport(ReportTestCase):
    def _create(self, **overrides) -> ReportCreate:
        data = {
            "menu_id": self.billing.id,
            "sub_menu_id": self.invoices.id,
            "name": "Totals are wrong",
            "description": "Invoice total ignores discounts.",
        }
        data.update(overrides)
        return ReportCreate(**data)

    def test_new_report_is_pending_and_unresolved(self) -> None:
        detail = report_service.create_report(self.db, self.owner.id, self._create(priority="high"))
        self.assertEqual(detail.status, "pending")
        self.assertEqual(detail.priority, "high")
        self.assertIsNone(detail.resolved_at)
        self.assertIsNone(detail.assigned_to)
        self.assertEqual(detail.user.username, "alice")
        self.assertEqual(detail.menu.name, "Billing")
        self.assertEqual(detail.sub_menu.name, "Invoices")

    def test_sub_menu_from_other_menu(self) -> None:
        with self.assertRaises(CategoryMismatch):
            report_service.create_report(self.db, self.owner.id, self._create(sub_menu_id=self.filters.id))
        self.assertEqual(self.db.query(Report).count(), 0)

    def test_inactive_menu(self) -> None:
        self.billing.is_active = False
        self.db.commit()
        with self.assertRaises(InvalidMenu):
            report_service.create_report(self.db, self.owner.id, self._create())

    def test_unknown_sub_menu(self) -> None:
        with self.assertRaises(InvalidSubMenu):
            report_service.create_report(self.db, self.owner.id, self._create(sub_menu_id=404))


class TestResolvedAt(ReportTestCase):
    def test_create_resolve_reopen(self) -> None:
        report = make_report(self.db, self.owner, self.billing)

        resolved = report_service.update_report(self.db, report.id, ReportUpdate(status="resolved"))
        self.assertEqual(resolved.status, "resolved")
        self.assertIsNotNone(resolved.resolved_at)

        reopened = report_service.update_report(self.db, report.id, ReportUpdate(status="progress"))
        self.assertEqual(reopened.status, "progress")
        self.assertIsNone(reopened.resolved_at)

    def test_non_resolved_transitions_keep_it_null(self) -> None:
        report = make_report(self.db, self.owner, self.billing)
        for status in ("progress", "closed", "pending"):
            with self.subTest(status=status):
                detail = report_service.update_report(self.db, report.id, ReportUpdate(status=status))
                self.assertIsNone(detail.resolved_at)

    def test_resolving_again_restamps(self) -> None:
        report = make_report(self.db, self.owner, self.billing)
        first = report_service.update_report(self.db, report.id, ReportUpdate(status="resolved"))
        second = report_service.update_report(self.db, report.id, ReportUpdate(status="resolved"))
        self.assertIsNotNone(second.resolved_at)
        self.assertGreaterEqual(second.resolved_at, first.resolved_at)

    def test_other_fields_leave_resolved_at_alone(self) -> None:
        report = make_report(self.db, self.owner, self.billing)
        resolved = report_service.update_report(self.db, report.id, ReportUpdate(status="resolved"))
        renamed = report_service.update_report(self.db, report.id, ReportUpdate(name="Renamed"))
        self.assertEqual(renamed.name, "Renamed")
        self.assertEqual(renamed.resolved_at, resolved.resolved_at)


class TestUpdateValidation(ReportTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.report = make_report(self.db, self.owner, self.billing, self.invoices)

    def test_missing_report(self) -> None:
        with self.assertRaises(ReportNotFound):
            report_service.update_report(self.db, 999, ReportUpdate(name="x"))

    def test_sub_menu_checked_against_current_menu(self) -> None:
        with self.assertRaises(CategoryMismatch):
            report_service.update_report(self.db, self.report.id, ReportUpdate(sub_menu_id=self.filters.id))

    def test_sub_menu_checked_against_incoming_menu(self) -> None:
        with self.assertRaises(CategoryMismatch):
            report_service.update_report(
                self.db,
                self.report.id,
                ReportUpdate(menu_id=self.search.id, sub_menu_id=self.refunds.id),
            )

    def test_menu_change_needs_matching_sub_menu(self) -> None:
        with self.assertRaises(CategoryMismatch):
            report_service.update_report(self.db, self.report.id, ReportUpdate(menu_id=self.search.id))

    def test_move_to_other_category(self) -> None:
        detail = report_service.update_report(
            self.db,
            self.report.id,
            ReportUpdate(menu_id=self.search.id, sub_menu_id=self.filters.id),
        )
        self.assertEqual(detail.menu.name, "Search")
        self.assertEqual(detail.sub_menu.name, "Filters")

    def test_sibling_sub_menu(self) -> None:
        detail = report_service.update_report(self.db, self.report.id, ReportUpdate(sub_menu_id=self.refunds.id))
        self.assertEqual(detail.sub_menu_id, self.refunds.id)

    def test_inactive_menu_rejected(self) -> None:
        self.search.is_active = False
        self.db.commit()
        with self.assertRaises(InvalidMenu):
            report_service.update_report(
                self.db,
                self.report.id,
                ReportUpdate(menu_id=self.search.id, sub_menu_id=self.filters.id),
            )

    def test_inactive_sub_menu_rejected(self) -> None:
        self.refunds.is_active = False
        self.db.commit()
        with self.assertRaises(InvalidSubMenu):
            report_service.update_report(self.db, self.report.id, ReportUpdate(sub_menu_id=self.refunds.id))

    def test_failed_validation_changes_nothing(self) -> None:
        with self.assertRaises(InvalidSubMenu):
            report_service.update_report(
                self.db,
                self.report.id,
                ReportUpdate(status="resolved", sub_menu_id=404),
            )
        self.db.expire_all()
        report = self.db.get(Report, self.report.id)
        self.assertEqual(report.status, "pending")
        self.assertIsNone(report.resolved_at)


class TestAssignment(ReportTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.report = make_report(self.db, self.owner, self.billing)

    def test_assign_and_unassign(self) -> None:
        assigned = report_service.assign_report(self.db, self.report.id, self.admin.id)
        self.assertEqual(assigned.assigned_to, self.admin.id)
        self.assertEqual(assigned.assigned_user.username, "root")

        unassigned = report_service.update_report(self.db, self.report.id, ReportUpdate(assigned_to=None))
        self.assertIsNone(unassigned.assigned_to)
        self.assertIsNone(unassigned.assigned_user)

    def test_omitted_assignee_is_left_alone(self) -> None:
        report_service.assign_report(self.db, self.report.id, self.admin.id)
        detail = report_service.update_report(self.db, self.report.id, ReportUpdate(priority="critical"))
        self.assertEqual(detail.assigned_to, self.admin.id)

    def test_unknown_assignee(self) -> None:
        with self.assertRaises(InvalidAssignee):
            report_service.assign_report(self.db, self.report.id, 999)

    def test_inactive_assignee(self) -> None:
        idle = make_user(self.db, "idle", is_active=False)
        with self.assertRaises(InvalidAssignee):
            report_service.assign_report(self.db, self.report.id, idle.id)


class TestOwnerRules(ReportTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.report = make_report(self.db, self.owner, self.billing)

    def test_owner_can_edit_content(self) -> None:
        detail = report_service.update_report(
            self.db,
            self.report.id,
            ReportUpdate(name="Clearer title", screenshots=["/uploads/screenshots/a.png"]),
            public(self.owner),
        )
        self.assertEqual(detail.name, "Clearer title")
        self.assertEqual(detail.screenshots, ["/uploads/screenshots/a.png"])

    def test_owner_cannot_change_status(self) -> None:
        with self.assertRaises(Forbidden):
            report_service.update_report(self.db, self.report.id, ReportUpdate(status="resolved"), public(self.owner))

    def test_owner_cannot_edit_closed_report(self) -> None:
        report_service.update_report(self.db, self.report.id, ReportUpdate(status="closed"))
        with self.assertRaises(Forbidden):
            report_service.update_report(self.db, self.report.id, ReportUpdate(name="late"), public(self.owner))

    def test_other_user_cannot_edit_or_read(self) -> None:
        with self.assertRaises(Forbidden):
            report_service.update_report(self.db, self.report.id, ReportUpdate(name="mine now"), public(self.other))
        with self.assertRaises(Forbidden):
            report_service.get_report(self.db, self.report.id, public(self.other))

    def test_admin_can_change_anything(self) -> None:
        detail = report_service.update_report(
            self.db,
            self.report.id,
            ReportUpdate(status="progress", priority="low", assigned_to=self.admin.id),
            public(self.admin),
        )
        self.assertEqual((detail.status, detail.priority, detail.assigned_to), ("progress", "low", self.admin.id))

    def test_delete_rules(self) -> None:
        with self.assertRaises(Forbidden):
            report_service.delete_report(self.db, self.report.id, public(self.other))
        report_service.update_report(self.db, self.report.id, ReportUpdate(status="progress"))
        with self.assertRaises(Forbidden):
            report_service.delete_report(self.db, self.report.id, public(self.owner))
        report_service.delete_report(self.db, self.report.id, public(self.admin))
        self.assertIsNone(self.db.get(Report, self.report.id))

    def test_owner_deletes_pending_report(self) -> None:
        report_service.delete_report(self.db, self.report.id, public(self.owner))
        with self.assertRaises(ReportNotFound):
            report_service.get_report(self.db, self.report.id)


class TestBulkActions(ReportTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.reports = [make_report(self.db, self.owner, self.billing, name=f"bug {i}") for i in range(3)]
        self.ids = [r.id for r in self.reports]

    def test_bulk_status_counts_only_changed_rows(self) -> None:
        report_service.update_report(self.db, self.ids[0], ReportUpdate(status="resolved"))
        changed = report_service.bulk_update_status(self.db, self.ids + [999], "resolved")
        self.assertEqual(changed, 2)
        self.db.expire_all()
        for report_id in self.ids:
            report = self.db.get(Report, report_id)
            self.assertEqual(report.status, "resolved")
            self.assertIsNotNone(report.resolved_at)

    def test_bulk_status_clears_resolved_at_when_leaving_resolved(self) -> None:
        report_service.bulk_update_status(self.db, self.ids, "resolved")
        self.assertEqual(report_service.bulk_update_status(self.db, self.ids, "closed"), 3)
        self.db.expire_all()
        self.assertTrue(all(self.db.get(Report, i).resolved_at is None for i in self.ids))

    def test_bulk_assign(self) -> None:
        report_service.assign_report(self.db, self.ids[0], self.admin.id)
        self.assertEqual(report_service.bulk_assign(self.db, self.ids, self.admin.id), 2)

    def test_bulk_assign_validates_assignee_first(self) -> None:
        with self.assertRaises(InvalidAssignee):
            report_service.bulk_assign(self.db, self.ids, 999)
        self.db.expire_all()
        self.assertTrue(all(self.db.get(Report, i).assigned_to is None for i in self.ids))

    def test_recent_reports_newest_first(self) -> None:
        recent = report_service.recent_reports(self.db, limit=2)
        self.assertEqual([r.id for r in recent], [self.ids[2], self.ids[1]])
