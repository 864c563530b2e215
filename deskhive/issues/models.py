"""Data models for the issues blueprint.

Issue reports are anonymous: nothing in a report identifies who filed it.
"""

from __future__ import annotations

from typing import Any

from deskhive.core.types import FirestoreDocument

ISSUE_CATEGORIES = ("workplace", "technical", "harassment", "safety", "other")

STATUS_OPEN = "open"
STATUS_IN_REVIEW = "inReview"
STATUS_RESOLVED = "resolved"
ISSUE_STATUSES = (STATUS_OPEN, STATUS_IN_REVIEW, STATUS_RESOLVED)


class IssueReport(FirestoreDocument, total=False):
    """An issue report; its document ID is the case ID."""

    caseID: str
    category: str
    title: str
    description: str
    status: str
    adminResponse: str


def issue_from_snapshot(doc: Any) -> IssueReport | None:
    """Build a report from a snapshot, or None if it is malformed."""
    raw = doc.to_dict() or {}
    if (
        raw.get("category") not in ISSUE_CATEGORIES
        or raw.get("status") not in ISSUE_STATUSES
        or not isinstance(raw.get("title"), str)
        or not isinstance(raw.get("description"), str)
    ):
        return None
    return {
        "id": doc.id,
        "caseID": doc.id,
        "category": raw["category"],
        "title": raw["title"],
        "description": raw["description"],
        "status": raw["status"],
        "adminResponse": raw.get("adminResponse", ""),
        "createdAt": raw.get("createdAt"),
    }
