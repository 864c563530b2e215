"""Service layer for daily mood check-ins."""

from __future__ import annotations

import datetime
import logging
from typing import TYPE_CHECKING

from firebase_admin import firestore

from deskhive.constants import (
    CHECK_INS_COLLECTION,
    DATE_KEY_FORMAT,
    RECENT_CHECK_INS_LIMIT,
)
from deskhive.core.store import STORE_ERRORS, store_errors, with_fallback
from deskhive.errors import DuplicateResourceError, TransientError, ValidationError
from deskhive.utils import sort_newest_first, utcnow

from .models import MOODS, DailyCheckIn, check_in_from_snapshot

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

logger = logging.getLogger(__name__)


class CheckInService:
    """Handles the per-user, per-day check-in log."""

    @staticmethod
    def today_key(now: datetime.datetime | None = None) -> str:
        """Return today's ``yyyy-MM-dd`` key in the server's local calendar."""
        return (now or datetime.datetime.now()).strftime(DATE_KEY_FORMAT)

    @staticmethod
    def validate_date_key(date_key: str | None) -> str:
        """Check a client-supplied date key, defaulting to today.

        The key is returned zero-padded, so ``2026-2-5`` and ``2026-02-05``
        name the same day.
        """
        if not date_key:
            return CheckInService.today_key()
        try:
            parsed = datetime.datetime.strptime(date_key.strip(), DATE_KEY_FORMAT)
        except ValueError as e:
            raise ValidationError("Date must be in yyyy-MM-dd format.") from e
        return parsed.strftime(DATE_KEY_FORMAT)

    @staticmethod
    def todays_check_in(db: Client, uid: str, date_key: str) -> DailyCheckIn | None:
        """Return the user's check-in for ``date_key``, if there is one."""
        query = (
            db.collection(CHECK_INS_COLLECTION)
            .where(filter=firestore.FieldFilter("uid", "==", uid))
            .where(filter=firestore.FieldFilter("dateKey", "==", date_key))
            .limit(1)
        )
        try:
            docs = list(query.stream())
        except STORE_ERRORS as e:
            logger.error(f"Check-in status lookup failed: {e}")
            raise TransientError("Could not load check-in status.") from e
        for doc in docs:
            check_in = check_in_from_snapshot(doc)
            if check_in is not None:
                return check_in
        return None

    @staticmethod
    def has_checked_in(db: Client, uid: str, date_key: str) -> bool:
        """Return True if the user already checked in on ``date_key``."""
        return CheckInService.todays_check_in(db, uid, date_key) is not None

    @staticmethod
    def submit_check_in(
        db: Client, uid: str, mood: str, note: str = "", date_key: str | None = None
    ) -> DailyCheckIn:
        """Record the user's mood for the day.

        The one-per-day rule is checked by reading before writing. Two
        submissions racing each other can both pass the check and leave two
        rows for the same day.
        """
        if mood not in MOODS:
            raise ValidationError("Please pick a mood.")
        date_key = CheckInService.validate_date_key(date_key)

        if CheckInService.has_checked_in(db, uid, date_key):
            raise DuplicateResourceError("You have already checked in today.")

        data = {
            "uid": uid,
            "mood": mood,
            "note": (note or "").strip(),
            "dateKey": date_key,
            "createdAt": utcnow(),
        }
        ref = db.collection(CHECK_INS_COLLECTION).document()
        with store_errors("Failed to submit check-in. Please try again."):
            ref.set(data)
        check_in: DailyCheckIn = {"id": ref.id, **data}  # type: ignore[typeddict-item]
        return check_in

    @staticmethod
    def recent_check_ins(
        db: Client, uid: str, limit: int = RECENT_CHECK_INS_LIMIT
    ) -> list[DailyCheckIn]:
        """Return the user's latest check-ins, newest first."""

        def by_user():
            return db.collection(CHECK_INS_COLLECTION).where(
                filter=firestore.FieldFilter("uid", "==", uid)
            )

        def parse(docs):
            return [c for c in map(check_in_from_snapshot, docs) if c is not None]

        def ordered() -> list[DailyCheckIn]:
            query = by_user().order_by(
                "createdAt", direction=firestore.Query.DESCENDING
            ).limit(limit)
            return parse(query.stream())

        def unordered() -> list[DailyCheckIn]:
            return sort_newest_first(parse(by_user().stream()))[:limit]

        with store_errors("Failed to load your check-ins."):
            return with_fallback(ordered, unordered, "check-ins")

    @staticmethod
    def mood_summary(db: Client, date_key: str) -> dict[str, int]:
        """Count the day's check-ins per mood. No user IDs leave this method."""
        date_key = CheckInService.validate_date_key(date_key)
        counts = dict.fromkeys(MOODS, 0)
        query = db.collection(CHECK_INS_COLLECTION).where(
            filter=firestore.FieldFilter("dateKey", "==", date_key)
        )
        with store_errors("Failed to load the mood summary."):
            for doc in query.stream():
                check_in = check_in_from_snapshot(doc)
                if check_in is not None:
                    counts[check_in["mood"]] += 1
        return counts
