"""Shared fixtures for the DeskHive test suite."""

from __future__ import annotations

import datetime
import unittest
from typing import Any
from unittest.mock import MagicMock, patch

from mockfirestore import MockFirestore

from deskhive import create_app
from tests.conftest import patch_mockfirestore

# Every module that calls firestore.client() during a request.
FIRESTORE_MODULES = (
    "deskhive",
    "deskhive.auth.routes",
    "deskhive.directory.routes",
    "deskhive.community.routes",
    "deskhive.tasks.routes",
    "deskhive.issues.routes",
    "deskhive.announcements.routes",
    "deskhive.checkins.routes",
    "deskhive.feed.routes",
    "deskhive.awards.routes",
)

BASE_TIME = datetime.datetime(2026, 2, 10, 9, 0, tzinfo=datetime.timezone.utc)


def at(minutes: int) -> datetime.datetime:
    """Return a timestamp ``minutes`` after the base time."""
    return BASE_TIME + datetime.timedelta(minutes=minutes)


def seed_user(
    db: Any, uid: str, email: str, role: str = "employee", minutes: int = 0
) -> None:
    """Write a users row."""
    db.collection("users").document(uid).set(
        {"email": email, "role": role, "createdAt": at(minutes)}
    )


def seed_community(
    db: Any,
    community_id: str,
    name: str,
    members: list[tuple[str, str]],
    lead: tuple[str, str] | None = None,
    minutes: int = 0,
) -> None:
    """Write a communities row with the given (uid, email) members."""
    db.collection("communities").document(community_id).set(
        {
            "name": name,
            "description": "",
            "project": "",
            "members": [{"uid": uid, "email": email} for uid, email in members],
            "projectLeadID": lead[0] if lead else "",
            "projectLeadEmail": lead[1] if lead else "",
            "projectLeadTempPassword": "",
            "createdAt": at(minutes),
        }
    )


class ServiceTestCase(unittest.TestCase):
    """Base case for service tests running against MockFirestore."""

    def setUp(self) -> None:
        patch_mockfirestore()
        self.db = MockFirestore()


class ApiTestCase(ServiceTestCase):
    """Base case for route tests: a test client whose Firestore is a mock."""

    def setUp(self) -> None:
        super().setUp()
        self.mock_firestore = MagicMock()
        self.mock_firestore.client.return_value = self.db

        for module in FIRESTORE_MODULES:
            patcher = patch(f"{module}.firestore", new=self.mock_firestore)
            patcher.start()
            self.addCleanup(patcher.stop)

        self.app = create_app({"TESTING": True, "WTF_CSRF_ENABLED": False})
        self.client = self.app.test_client()
        self.app_context = self.app.app_context()
        self.app_context.push()
        self.addCleanup(self.app_context.pop)

    def login(self, uid: str) -> None:
        """Simulate a signed-in session for ``uid``."""
        with self.client.session_transaction() as sess:
            sess["user_id"] = uid
