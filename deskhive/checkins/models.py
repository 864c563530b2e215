"""Data models for the check-ins blueprint."""

from __future__ import annotations

from typing import Any

from deskhive.core.types import FirestoreDocument

MOOD_GREAT = "great"
MOOD_GOOD = "good"
MOOD_OKAY = "okay"
MOOD_LOW = "low"
MOOD_STRESSED = "stressed"
MOODS = (MOOD_GREAT, MOOD_GOOD, MOOD_OKAY, MOOD_LOW, MOOD_STRESSED)

MOOD_LABELS = {
    MOOD_GREAT: "Great",
    MOOD_GOOD: "Good",
    MOOD_OKAY: "Okay",
    MOOD_LOW: "Low",
    MOOD_STRESSED: "Stressed",
}


class DailyCheckIn(FirestoreDocument, total=False):
    """A daily mood check-in.

    ``uid`` is stored so a user can see their own history; it is never shown
    to the admin.
    """

    uid: str
    mood: str
    note: str
    dateKey: str


def check_in_from_snapshot(doc: Any) -> DailyCheckIn | None:
    """Build a check-in from a snapshot, or None if it is malformed."""
    raw = doc.to_dict() or {}
    if (
        not isinstance(raw.get("uid"), str)
        or raw.get("mood") not in MOODS
        or not isinstance(raw.get("dateKey"), str)
    ):
        return None
    return {
        "id": doc.id,
        "uid": raw["uid"],
        "mood": raw["mood"],
        "note": raw.get("note", ""),
        "dateKey": raw["dateKey"],
        "createdAt": raw.get("createdAt"),
    }
