"""Data models for the directory blueprint."""

from __future__ import annotations

from typing import Any

from deskhive.constants import ROLE_ADMIN, ROLE_EMPLOYEE, ROLE_PROJECT_LEAD
from deskhive.core.types import FirestoreDocument

ROLES = (ROLE_ADMIN, ROLE_EMPLOYEE, ROLE_PROJECT_LEAD)

ROLE_DISPLAY_NAMES = {
    ROLE_ADMIN: "Admin",
    ROLE_EMPLOYEE: "Employee",
    ROLE_PROJECT_LEAD: "Project Lead",
}


class User(FirestoreDocument, total=False):
    """A user document in Firestore."""

    email: str
    role: str


def user_from_snapshot(doc: Any) -> User | None:
    """Build a user from a snapshot, skipping rows with an unknown role."""
    raw = doc.to_dict() or {}
    if not raw.get("email") or raw.get("role") not in ROLES:
        return None
    return {
        "id": doc.id,
        "email": raw["email"],
        "role": raw["role"],
        "createdAt": raw.get("createdAt"),
    }
