"""Tests for AwardService."""

from __future__ import annotations

import datetime

from deskhive.awards.services import AwardService
from deskhive.errors import ValidationError
from tests.helpers import ServiceTestCase, seed_user

FEB = datetime.datetime(2026, 2, 14, 12, 0, tzinfo=datetime.timezone.utc)
MAR = datetime.datetime(2026, 3, 2, 12, 0, tzinfo=datetime.timezone.utc)


class TestAwardService(ServiceTestCase):
    def setUp(self) -> None:
        super().setUp()
        seed_user(self.db, "admin", "boss@corp.io", role="admin")
        seed_user(self.db, "u1", "u1@corp.io")
        seed_user(self.db, "u2", "u2@corp.io")

    def test_keys_and_labels(self) -> None:
        self.assertEqual(AwardService.award_key(FEB), "2026-02")
        self.assertEqual(AwardService.month_label(FEB), "February 2026")

    def test_save_and_replace_award(self) -> None:
        award = AwardService.save_award(self.db, "u1", "Great launch", "boss@corp.io", now=FEB)
        self.assertEqual(award["id"], "2026-02")
        self.assertEqual(award["month"], "February 2026")

        AwardService.save_award(self.db, "u2", "Even better", "boss@corp.io", now=FEB)
        current = AwardService.current_award(self.db, now=FEB)
        self.assertEqual(current["employeeID"], "u2")

    def test_save_award_requires_reason(self) -> None:
        with self.assertRaisesRegex(ValidationError, "Please add a reason for the award."):
            AwardService.save_award(self.db, "u1", "  ", "boss@corp.io", now=FEB)
        with self.assertRaises(ValidationError):
            AwardService.save_award(self.db, "admin", "Self", "boss@corp.io", now=FEB)

    def test_history_and_clear(self) -> None:
        AwardService.save_award(self.db, "u1", "Feb", "boss@corp.io", now=FEB)
        AwardService.save_award(self.db, "u2", "Mar", "boss@corp.io", now=MAR)

        history = AwardService.award_history(self.db)
        self.assertEqual([a["id"] for a in history], ["2026-03", "2026-02"])
        self.assertEqual(len(AwardService.award_history(self.db, limit=1)), 1)

        AwardService.clear_award(self.db, now=MAR)
        self.assertEqual([a["id"] for a in AwardService.award_history(self.db)], ["2026-02"])
        self.assertIsNone(AwardService.current_award(self.db, now=MAR))
