"""Tests for FeedService."""

from __future__ import annotations

from unittest.mock import patch

from google.api_core import exceptions as google_exceptions
from mockfirestore import CollectionReference

from deskhive.errors import NotFoundError, ValidationError
from deskhive.feed.services import FeedService
from tests.helpers import ServiceTestCase, at, seed_community

MEMBER = {"uid": "u1", "email": "u1@corp.io", "role": "employee"}
ADMIN = {"uid": "admin", "email": "boss@corp.io", "role": "admin"}


class TestFeedService(ServiceTestCase):
    def setUp(self) -> None:
        super().setUp()
        seed_community(self.db, "c1", "Alpha", [("u1", "u1@corp.io")])

    def _feed(self):
        return self.db.collection("communities").document("c1").collection("feed")

    def test_post_message(self) -> None:
        message = FeedService.post_message(self.db, "c1", "  hello team  ", MEMBER)
        self.assertEqual(message["body"], "hello team")
        self.assertEqual(message["senderID"], "u1")
        self.assertFalse(message["isAdminPost"])

        admin_post = FeedService.post_message(self.db, "c1", "Welcome!", ADMIN)
        self.assertTrue(admin_post["isAdminPost"])
        self.assertEqual(admin_post["senderID"], "")
        self.assertEqual(admin_post["senderEmail"], "boss@corp.io")

        with self.assertRaises(ValidationError):
            FeedService.post_message(self.db, "c1", "   \n ", MEMBER)

    def test_list_messages_oldest_first_with_fallback(self) -> None:
        for minutes, msg_id in ((3, "m3"), (1, "m1"), (2, "m2")):
            self._feed().document(msg_id).set(
                {
                    "body": msg_id,
                    "senderEmail": "u1@corp.io",
                    "senderID": "u1",
                    "isAdminPost": False,
                    "createdAt": at(minutes),
                }
            )

        ordered = FeedService.list_messages(self.db, "c1")
        self.assertEqual([m["id"] for m in ordered], ["m1", "m2", "m3"])

        with patch.object(
            CollectionReference,
            "order_by",
            side_effect=google_exceptions.FailedPrecondition("index required"),
        ):
            self.assertEqual(FeedService.list_messages(self.db, "c1"), ordered)

    def test_delete_message(self) -> None:
        message = FeedService.post_message(self.db, "c1", "oops", MEMBER)
        FeedService.delete_message(self.db, "c1", message["id"])
        self.assertEqual(FeedService.list_messages(self.db, "c1"), [])
        with self.assertRaises(NotFoundError):
            FeedService.delete_message(self.db, "c1", message["id"])
