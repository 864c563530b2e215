"""Data models for the feed blueprint."""

from __future__ import annotations

from typing import Any

from deskhive.core.types import FirestoreDocument


class FeedMessage(FirestoreDocument, total=False):
    """A message in a community's feed. ``senderID`` is empty for admin posts."""

    senderEmail: str
    senderID: str
    body: str
    isAdminPost: bool


def message_from_snapshot(doc: Any) -> FeedMessage | None:
    raw = doc.to_dict() or {}
    if not isinstance(raw.get("body"), str) or not raw["body"]:
        return None
    return {
        "id": doc.id,
        "senderEmail": raw.get("senderEmail") or "Unknown",
        "senderID": raw.get("senderID") or "",
        "body": raw["body"],
        "isAdminPost": bool(raw.get("isAdminPost", False)),
        "createdAt": raw.get("createdAt"),
    }
