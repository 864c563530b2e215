"""Tests for CommunityService."""

from __future__ import annotations

import re
from unittest.mock import patch

from google.api_core import exceptions as google_exceptions

from deskhive.announcements.services import AnnouncementService
from deskhive.community.services import CommunityService
from deskhive.core.workflow import STATUS_PARTIAL, STATUS_SUCCESS
from deskhive.directory.services import DirectoryService
from deskhive.errors import NotFoundError, PermissionDeniedError, ValidationError
from tests.helpers import ServiceTestCase, seed_community, seed_user

TEMP_PASSWORD_RE = re.compile(r"^Lead@[A-Za-z0-9]{6}$")


class TestCommunityService(ServiceTestCase):
    def setUp(self) -> None:
        super().setUp()
        seed_user(self.db, "admin", "boss@corp.io", role="admin")
        seed_user(self.db, "u1", "u1@corp.io")
        seed_user(self.db, "u2", "u2@corp.io")
        seed_user(self.db, "u3", "u3@corp.io")

    def _stored(self, community_id: str) -> dict:
        return self.db.collection("communities").document(community_id).get().to_dict()

    def test_generate_temp_password_format(self) -> None:
        for _ in range(20):
            self.assertRegex(CommunityService.generate_temp_password(), TEMP_PASSWORD_RE)

    def test_create_community_snapshots_member_emails(self) -> None:
        community = CommunityService.create_community(
            self.db, " Alpha ", "Design team", "Apollo", ["u1", "u2", "u1"]
        )

        self.assertEqual(community["name"], "Alpha")
        self.assertEqual(
            community["members"],
            [{"uid": "u1", "email": "u1@corp.io"}, {"uid": "u2", "email": "u2@corp.io"}],
        )
        self.assertEqual(community["projectLeadID"], "")
        self.assertEqual(self._stored(community["id"])["members"], community["members"])

    def test_create_community_rejects_empty_name_and_admin(self) -> None:
        with self.assertRaises(ValidationError):
            CommunityService.create_community(self.db, "   ")
        with self.assertRaises(ValidationError):
            CommunityService.create_community(self.db, "Alpha", member_uids=["admin"])
        with self.assertRaises(NotFoundError):
            CommunityService.create_community(self.db, "Alpha", member_uids=["ghost"])

    def test_add_and_remove_member(self) -> None:
        seed_community(self.db, "c1", "Alpha", [("u1", "u1@corp.io")])

        community = CommunityService.add_member(self.db, "c1", "u2")
        self.assertEqual([m["uid"] for m in community["members"]], ["u1", "u2"])
        # Adding twice is a no-op.
        CommunityService.add_member(self.db, "c1", "u2")
        self.assertEqual(len(self._stored("c1")["members"]), 2)

        community = CommunityService.remove_member(self.db, "c1", "u1")
        self.assertEqual(community["members"], [{"uid": "u2", "email": "u2@corp.io"}])
        with self.assertRaises(NotFoundError):
            CommunityService.remove_member(self.db, "c1", "u1")

    def test_cannot_remove_the_lead_as_member(self) -> None:
        seed_community(
            self.db, "c1", "Alpha", [("u1", "u1@corp.io")], lead=("u1", "u1@corp.io")
        )
        with self.assertRaises(ValidationError):
            CommunityService.remove_member(self.db, "c1", "u1")

    def test_set_project_lead(self) -> None:
        seed_community(self.db, "c1", "Alpha", [("u1", "u1@corp.io"), ("u2", "u2@corp.io")])

        result = CommunityService.set_project_lead(self.db, "c1", "u1")

        self.assertEqual(result.status, STATUS_SUCCESS)
        self.assertEqual(
            result.completed,
            ["assign_lead_slot", "promote_role", "store_temp_password", "notify_lead"],
        )
        stored = self._stored("c1")
        self.assertEqual(stored["projectLeadID"], "u1")
        self.assertEqual(stored["projectLeadEmail"], "u1@corp.io")
        self.assertRegex(stored["projectLeadTempPassword"], TEMP_PASSWORD_RE)
        self.assertEqual(DirectoryService.get_user(self.db, "u1")["role"], "projectLead")

        inbox = AnnouncementService.fetch_personal(self.db, "u1")
        self.assertEqual(len(inbox["promotions"]), 1)
        credentials = AnnouncementService.credentials_of(inbox["promotions"][0])
        self.assertEqual(
            credentials,
            {"email": "u1@corp.io", "tempPassword": stored["projectLeadTempPassword"]},
        )

    def test_set_project_lead_rules(self) -> None:
        seed_community(
            self.db,
            "c1",
            "Alpha",
            [("u1", "u1@corp.io"), ("u2", "u2@corp.io")],
            lead=("u1", "u1@corp.io"),
        )
        with self.assertRaises(ValidationError):
            CommunityService.set_project_lead(self.db, "c1", "u3")
        with self.assertRaises(PermissionDeniedError):
            CommunityService.set_project_lead(self.db, "c1", "admin")
        with self.assertRaisesRegex(ValidationError, "Remove the current project lead"):
            CommunityService.set_project_lead(self.db, "c1", "u2")

    def test_set_project_lead_reports_partial_when_notice_fails(self) -> None:
        seed_community(self.db, "c1", "Alpha", [("u1", "u1@corp.io")])

        with patch.object(
            AnnouncementService,
            "notify_promotion",
            side_effect=google_exceptions.ServiceUnavailable("down"),
        ):
            result = CommunityService.set_project_lead(self.db, "c1", "u1")

        self.assertEqual(result.status, STATUS_PARTIAL)
        self.assertEqual(result.failures[0].step, "notify_lead")
        self.assertIn("role promoted to Project Lead", result.message)
        self.assertIn("credentials sent failed", result.message)
        # The committed steps stay committed.
        self.assertEqual(self._stored("c1")["projectLeadID"], "u1")
        self.assertEqual(DirectoryService.get_user(self.db, "u1")["role"], "projectLead")

    def test_set_project_lead_stops_when_promotion_fails(self) -> None:
        seed_community(self.db, "c1", "Alpha", [("u1", "u1@corp.io")])

        with patch.object(
            DirectoryService,
            "set_role",
            side_effect=google_exceptions.ServiceUnavailable("down"),
        ):
            result = CommunityService.set_project_lead(self.db, "c1", "u1")

        self.assertEqual(result.status, STATUS_PARTIAL)
        self.assertEqual(result.completed, ["assign_lead_slot"])
        self.assertEqual([f.step for f in result.failures], ["promote_role"])
        self.assertIn("lead slot assigned", result.message)
        self.assertIn("role promoted to Project Lead failed", result.message)

        # The slot write stays; the later steps never ran.
        stored = self._stored("c1")
        self.assertEqual(stored["projectLeadID"], "u1")
        self.assertEqual(stored["projectLeadTempPassword"], "")
        self.assertEqual(DirectoryService.get_user(self.db, "u1")["role"], "employee")
        self.assertEqual(AnnouncementService.fetch_personal(self.db, "u1")["promotions"], [])

    def test_user_leads_at_most_one_community(self) -> None:
        seed_community(self.db, "c1", "Alpha", [("u1", "u1@corp.io")], minutes=1)
        seed_community(self.db, "c2", "Beta", [("u1", "u1@corp.io")], minutes=2)
        CommunityService.set_project_lead(self.db, "c1", "u1")

        with self.assertRaisesRegex(ValidationError, "already leads Alpha"):
            CommunityService.set_project_lead(self.db, "c2", "u1")
        self.assertEqual(self._stored("c2")["projectLeadID"], "")

        # Re-running on the community they lead is still allowed.
        result = CommunityService.set_project_lead(self.db, "c1", "u1")
        self.assertEqual(result.status, STATUS_SUCCESS)

        CommunityService.remove_project_lead(self.db, "c1")
        self.assertEqual(DirectoryService.get_user(self.db, "u1")["role"], "employee")
        CommunityService.set_project_lead(self.db, "c2", "u1")
        self.assertEqual(self._stored("c2")["projectLeadID"], "u1")

    def test_remove_project_lead(self) -> None:
        seed_community(self.db, "c1", "Alpha", [("u1", "u1@corp.io")])
        CommunityService.set_project_lead(self.db, "c1", "u1")

        result = CommunityService.remove_project_lead(self.db, "c1")

        self.assertEqual(result.status, STATUS_SUCCESS)
        stored = self._stored("c1")
        self.assertEqual(stored["projectLeadID"], "")
        self.assertEqual(stored["projectLeadEmail"], "")
        self.assertEqual(stored["projectLeadTempPassword"], "")
        self.assertEqual(DirectoryService.get_user(self.db, "u1")["role"], "employee")
        with self.assertRaises(ValidationError):
            CommunityService.remove_project_lead(self.db, "c1")

    def test_remove_project_lead_clears_slot_even_if_demotion_fails(self) -> None:
        seed_community(
            self.db, "c1", "Alpha", [("u1", "u1@corp.io")], lead=("u1", "u1@corp.io")
        )
        with patch.object(
            DirectoryService,
            "set_role",
            side_effect=google_exceptions.ServiceUnavailable("down"),
        ):
            result = CommunityService.remove_project_lead(self.db, "c1")

        self.assertEqual(result.status, STATUS_PARTIAL)
        self.assertEqual(result.completed, ["clear_lead_slot"])
        self.assertEqual(self._stored("c1")["projectLeadID"], "")

    def test_lead_is_always_a_member(self) -> None:
        seed_community(self.db, "c1", "Alpha", [("u1", "u1@corp.io"), ("u2", "u2@corp.io")])
        CommunityService.set_project_lead(self.db, "c1", "u2")
        CommunityService.add_member(self.db, "c1", "u3")
        with self.assertRaises(ValidationError):
            CommunityService.remove_member(self.db, "c1", "u2")
        CommunityService.remove_member(self.db, "c1", "u1")

        community = CommunityService.get_community(self.db, "c1")
        self.assertIn(community["projectLeadID"], [m["uid"] for m in community["members"]])

    def test_listing_helpers(self) -> None:
        seed_community(self.db, "c1", "Alpha", [("u1", "u1@corp.io")], minutes=1)
        seed_community(
            self.db,
            "c2",
            "Beta",
            [("u1", "u1@corp.io"), ("u2", "u2@corp.io")],
            lead=("u2", "u2@corp.io"),
            minutes=2,
        )

        self.assertEqual([c["id"] for c in CommunityService.list_communities(self.db)], ["c2", "c1"])
        self.assertEqual(
            [c["id"] for c in CommunityService.list_for_member(self.db, "u1")], ["c2", "c1"]
        )
        self.assertEqual(CommunityService.find_led_community(self.db, "u2")["id"], "c2")
        self.assertIsNone(CommunityService.find_led_community(self.db, "u1"))

    def test_delete_community(self) -> None:
        seed_community(self.db, "c1", "Alpha", [("u1", "u1@corp.io")])
        CommunityService.delete_community(self.db, "c1")
        self.assertFalse(self.db.collection("communities").document("c1").get().exists)
