"""Tests for bugtracker.services.comments: visibility of internal notes and author rules."""

from bugtracker.core.errors import CommentNotFound, Forbidden, ReportNotFound
from bugtracker.models import Report
from bugtracker.schemas.comment import CommentCreate
from bugtracker.services import comments as comment_service

from factories import DatabaseTestCase, make_menu, make_report, make_user, public


class CommentTestCase(DatabaseTestCase):
    def setUp(self) -> None:
        super().setUp()
        owner = make_user(self.db, "alice")
        self.report = make_report(self.db, owner, make_menu(self.db))
        self.owner = public(owner)
        self.admin = public(make_user(self.db, "root", role="admin"))
        self.stranger = public(make_user(self.db, "mallory"))


class TestCreateAndList(CommentTestCase):
    def test_owner_comment_round_trip(self) -> None:
        created = comment_service.create_comment(
            self.db, self.report.id, self.owner, CommentCreate(comment="Still happens on mobile")
        )
        self.assertFalse(created.is_internal)
        self.assertEqual(created.user.username, "alice")
        listed = comment_service.list_comments(self.db, self.report.id, self.owner)
        self.assertEqual([c.id for c in listed], [created.id])

    def test_internal_comments_hidden_from_non_admins(self) -> None:
        public_note = comment_service.create_comment(
            self.db, self.report.id, self.admin, CommentCreate(comment="Thanks, reproducing.")
        )
        internal = comment_service.create_comment(
            self.db, self.report.id, self.admin, CommentCreate(comment="Caused by cache TTL", is_internal=True)
        )
        owner_view = comment_service.list_comments(self.db, self.report.id, self.owner)
        admin_view = comment_service.list_comments(self.db, self.report.id, self.admin)
        self.assertEqual([c.id for c in owner_view], [public_note.id])
        self.assertEqual([c.id for c in admin_view], [public_note.id, internal.id])

    def test_only_admins_post_internal(self) -> None:
        with self.assertRaises(Forbidden):
            comment_service.create_comment(
                self.db, self.report.id, self.owner, CommentCreate(comment="psst", is_internal=True)
            )

    def test_stranger_cannot_read_or_comment(self) -> None:
        with self.assertRaises(Forbidden):
            comment_service.list_comments(self.db, self.report.id, self.stranger)
        with self.assertRaises(Forbidden):
            comment_service.create_comment(self.db, self.report.id, self.stranger, CommentCreate(comment="hi"))

    def test_missing_report(self) -> None:
        with self.assertRaises(ReportNotFound):
            comment_service.list_comments(self.db, 404, self.admin)


class TestEditAndDelete(CommentTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.comment = comment_service.create_comment(
            self.db, self.report.id, self.owner, CommentCreate(comment="First draft")
        )

    def test_author_edits(self) -> None:
        out = comment_service.update_comment(self.db, self.comment.id, self.owner, "Second draft")
        self.assertEqual(out.comment, "Second draft")

    def test_admin_may_delete_anyone_s_comment(self) -> None:
        comment_service.delete_comment(self.db, self.comment.id, self.admin)
        self.assertEqual(comment_service.list_comments(self.db, self.report.id, self.admin), [])

    def test_others_may_not_edit(self) -> None:
        with self.assertRaises(Forbidden):
            comment_service.update_comment(self.db, self.comment.id, self.stranger, "defaced")

    def test_missing_comment(self) -> None:
        with self.assertRaises(CommentNotFound):
            comment_service.delete_comment(self.db, 404, self.owner)

    def test_deleting_report_removes_comments(self) -> None:
        self.db.delete(self.db.get(Report, self.report.id))
        self.db.commit()
        with self.assertRaises(CommentNotFound):
            comment_service.update_comment(self.db, self.comment.id, self.owner, "ghost")
