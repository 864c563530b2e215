"""Service layer for the employee-of-the-month award."""

from __future__ import annotations

import datetime
import logging
from typing import TYPE_CHECKING

from firebase_admin import firestore

from deskhive.constants import (
    AWARD_HISTORY_LIMIT,
    AWARD_KEY_FORMAT,
    AWARD_MONTH_LABEL_FORMAT,
    EMPLOYEE_OF_MONTH_COLLECTION,
    ROLE_ADMIN,
)
from deskhive.core.store import store_errors, with_fallback
from deskhive.directory.services import DirectoryService
from deskhive.errors import ValidationError
from deskhive.utils import sort_newest_first, utcnow

from .models import EmployeeOfMonth, award_from_snapshot

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

logger = logging.getLogger(__name__)


class AwardService:
    """One award per calendar month, chosen by the admin."""

    @staticmethod
    def award_key(date: datetime.date | None = None) -> str:
        """Return the document key for a month, e.g. ``2026-02``."""
        return (date or utcnow()).strftime(AWARD_KEY_FORMAT)

    @staticmethod
    def month_label(date: datetime.date | None = None) -> str:
        """Return the display label for a month, e.g. ``February 2026``."""
        return (date or utcnow()).strftime(AWARD_MONTH_LABEL_FORMAT)

    @staticmethod
    def save_award(
        db: Client,
        employee_uid: str,
        reason: str,
        admin_email: str,
        now: datetime.datetime | None = None,
    ) -> EmployeeOfMonth:
        """Name the employee of the month, replacing any earlier pick."""
        reason = (reason or "").strip()
        if not reason:
            raise ValidationError("Please add a reason for the award.")
        employee = DirectoryService.get_user(db, employee_uid)
        if employee["role"] == ROLE_ADMIN:
            raise ValidationError("The admin cannot be named employee of the month.")

        now = now or utcnow()
        key = AwardService.award_key(now)
        data = {
            "employeeID": employee["id"],
            "employeeEmail": employee["email"],
            "reason": reason,
            "month": AwardService.month_label(now),
            "awardedAt": now,
            "awardedByEmail": admin_email,
        }
        with store_errors("Failed to save award."):
            db.collection(EMPLOYEE_OF_MONTH_COLLECTION).document(key).set(data)
        logger.info(f"Employee of the month for {key} set to {employee['id']}")
        award: EmployeeOfMonth = {"id": key, **data}  # type: ignore[typeddict-item]
        return award

    @staticmethod
    def current_award(
        db: Client, now: datetime.datetime | None = None
    ) -> EmployeeOfMonth | None:
        """Return this month's award, or None if nobody has been named."""
        key = AwardService.award_key(now)
        with store_errors("Failed to load award."):
            doc = db.collection(EMPLOYEE_OF_MONTH_COLLECTION).document(key).get()
        return award_from_snapshot(doc) if doc.exists else None

    @staticmethod
    def award_history(db: Client, limit: int = AWARD_HISTORY_LIMIT) -> list[EmployeeOfMonth]:
        """Return the latest awards, newest first."""
        awards = db.collection(EMPLOYEE_OF_MONTH_COLLECTION)

        def parse(docs):
            return [a for a in map(award_from_snapshot, docs) if a is not None]

        def ordered() -> list[EmployeeOfMonth]:
            query = awards.order_by(
                "awardedAt", direction=firestore.Query.DESCENDING
            ).limit(limit)
            return parse(query.stream())

        def unordered() -> list[EmployeeOfMonth]:
            return sort_newest_first(parse(awards.stream()), key="awardedAt")[:limit]

        with store_errors("Failed to load history."):
            return with_fallback(ordered, unordered, "awards")

    @staticmethod
    def clear_award(db: Client, now: datetime.datetime | None = None) -> None:
        """Remove this month's award. Clearing an empty month does nothing."""
        key = AwardService.award_key(now)
        with store_errors("Failed to clear award."):
            db.collection(EMPLOYEE_OF_MONTH_COLLECTION).document(key).delete()
