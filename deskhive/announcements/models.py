"""Data models for the announcements blueprint."""

from __future__ import annotations

from typing import Any, TypedDict

from deskhive.core.types import FirestoreDocument

TYPE_BROADCAST = "broadcast"
TYPE_PROMOTION = "promotion"
TYPE_TASK = "task"
ANNOUNCEMENT_TYPES = (TYPE_BROADCAST, TYPE_PROMOTION, TYPE_TASK)

PRIORITY_INFO = "info"
PRIORITY_WARNING = "warning"
PRIORITY_URGENT = "urgent"
PRIORITIES = (PRIORITY_INFO, PRIORITY_WARNING, PRIORITY_URGENT)

# Task priority -> announcement priority
TASK_PRIORITY_MAP = {
    "high": PRIORITY_URGENT,
    "medium": PRIORITY_WARNING,
    "low": PRIORITY_INFO,
}


class Credentials(TypedDict):
    """Login details handed to a newly promoted project lead."""

    email: str
    tempPassword: str


class Announcement(FirestoreDocument, total=False):
    """An announcement document in Firestore.

    ``targetUID`` is empty for broadcasts and holds exactly one recipient
    otherwise. ``credentials`` only exists on promotion notices.
    """

    title: str
    body: str
    priority: str
    targetUID: str
    type: str
    credentials: Credentials
    taskID: str
    communityID: str


def announcement_from_snapshot(doc: Any) -> Announcement | None:
    """Build an announcement from a snapshot, filling the documented defaults."""
    raw = doc.to_dict() or {}
    if not isinstance(raw.get("title"), str) or not isinstance(raw.get("body"), str):
        return None
    ann: Announcement = {
        "id": doc.id,
        "title": raw["title"],
        "body": raw["body"],
        "priority": raw.get("priority") if raw.get("priority") in PRIORITIES else PRIORITY_INFO,
        "targetUID": raw.get("targetUID") or "",
        "type": raw.get("type") if raw.get("type") in ANNOUNCEMENT_TYPES else TYPE_BROADCAST,
        "createdAt": raw.get("createdAt"),
    }
    for key in ("credentials", "taskID", "communityID"):
        if raw.get(key):
            ann[key] = raw[key]
    return ann
