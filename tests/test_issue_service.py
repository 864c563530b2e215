"""Tests for IssueService."""

from __future__ import annotations

import re
from unittest.mock import MagicMock, patch

from google.api_core import exceptions as google_exceptions
from mockfirestore import CollectionReference

from deskhive.errors import NotFoundError, TransientError, ValidationError
from deskhive.issues.services import IssueService
from tests.helpers import ServiceTestCase, at

CASE_ID_RE = re.compile(r"^ISS-[A-HJ-NP-Z2-9]{6}$")


class TestIssueService(ServiceTestCase):
    def test_case_id_format(self) -> None:
        for _ in range(50):
            case_id = IssueService.generate_case_id()
            self.assertRegex(case_id, CASE_ID_RE)
            self.assertFalse(set(case_id[4:]) & set("IO01"))

    def test_submit_issue_is_anonymous(self) -> None:
        report = IssueService.submit_issue(
            self.db, "safety", " Loose cable ", "Cable across the hallway."
        )

        self.assertRegex(report["id"], CASE_ID_RE)
        self.assertEqual(report["caseID"], report["id"])
        stored = self.db.collection("issues").document(report["id"]).get().to_dict()
        self.assertEqual(
            set(stored),
            {"caseID", "category", "title", "description", "status", "adminResponse", "createdAt"},
        )
        self.assertEqual(stored["status"], "open")
        self.assertEqual(stored["title"], "Loose cable")

    def test_submit_issue_validation(self) -> None:
        with self.assertRaises(ValidationError):
            IssueService.submit_issue(self.db, "safety", "", "desc")
        with self.assertRaises(ValidationError):
            IssueService.submit_issue(self.db, "gossip", "title", "desc")

    def test_lookup_is_case_insensitive_and_trimmed(self) -> None:
        report = IssueService.submit_issue(self.db, "technical", "VPN", "VPN drops.")
        found = IssueService.lookup_issue(self.db, f"  {report['id'].lower()}  ")
        self.assertEqual(found["id"], report["id"])

    def test_lookup_distinguishes_missing_from_failure(self) -> None:
        with self.assertRaisesRegex(ValidationError, "Please enter a Case ID."):
            IssueService.lookup_issue(self.db, "   ")
        with self.assertRaises(NotFoundError) as cm:
            IssueService.lookup_issue(self.db, "iss-zzzzzz")
        self.assertEqual(
            cm.exception.message,
            'No issue found with Case ID "ISS-ZZZZZZ". Please check and try again.',
        )

        db = MagicMock()
        db.collection.return_value.document.return_value.get.side_effect = (
            google_exceptions.ServiceUnavailable("offline")
        )
        with self.assertRaises(TransientError) as cm:
            IssueService.lookup_issue(db, "ISS-ABCDEF")
        self.assertEqual(cm.exception.message, "Lookup failed. Please check your connection.")

    def test_malformed_case_id_is_not_found_without_store_access(self) -> None:
        db = MagicMock()
        for case_id in (" iss-ab/cd ", "ISS-ABC", "ISS-ABCDEFG", "ISS-ABCDE1", "foo"):
            with self.subTest(case_id=case_id):
                with self.assertRaises(NotFoundError) as cm:
                    IssueService.lookup_issue(db, case_id)
                self.assertIn("No issue found with Case ID", cm.exception.message)
        db.collection.assert_not_called()

    def test_respond_to_issue_last_write_wins(self) -> None:
        report = IssueService.submit_issue(self.db, "workplace", "Noise", "Too loud.")
        IssueService.respond_to_issue(self.db, report["id"], "Looking into it", "inReview")
        updated = IssueService.respond_to_issue(
            self.db, report["id"], "Moved the printer", "resolved"
        )

        self.assertEqual(updated["status"], "resolved")
        found = IssueService.lookup_issue(self.db, report["id"])
        self.assertEqual(found["adminResponse"], "Moved the printer")
        with self.assertRaises(ValidationError):
            IssueService.respond_to_issue(self.db, report["id"], "x", "closed")

    def test_list_issues_fallback_matches_ordered(self) -> None:
        for minutes, case_id in ((1, "ISS-AAAAAA"), (3, "ISS-CCCCCC"), (2, "ISS-BBBBBB")):
            self.db.collection("issues").document(case_id).set(
                {
                    "caseID": case_id,
                    "category": "other",
                    "title": "t",
                    "description": "d",
                    "status": "open",
                    "adminResponse": "",
                    "createdAt": at(minutes),
                }
            )

        ordered = IssueService.list_issues(self.db)
        with patch.object(
            CollectionReference,
            "order_by",
            side_effect=google_exceptions.FailedPrecondition("index required"),
        ):
            fallback = IssueService.list_issues(self.db)

        self.assertEqual([r["id"] for r in ordered], ["ISS-CCCCCC", "ISS-BBBBBB", "ISS-AAAAAA"])
        self.assertEqual(ordered, fallback)
