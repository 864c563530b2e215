"""Data models for the community blueprint."""

from __future__ import annotations

from typing import Any, TypedDict

from deskhive.core.types import FirestoreDocument


class Member(TypedDict):
    """A member entry: the user ID and the email it had when added."""

    uid: str
    email: str


class Community(FirestoreDocument, total=False):
    """A microcommunity document in Firestore.

    An empty ``projectLeadID`` means the community has no lead. When it is
    set, the lead is one of ``members``.
    """

    name: str
    description: str
    project: str
    members: list[Member]
    projectLeadID: str
    projectLeadEmail: str
    projectLeadTempPassword: str


def community_from_snapshot(doc: Any) -> Community | None:
    """Build a community from a snapshot, ignoring anything but its own fields."""
    raw = doc.to_dict() or {}
    if not isinstance(raw.get("name"), str):
        return None
    members = [
        {"uid": m["uid"], "email": m.get("email", "")}
        for m in raw.get("members") or []
        if isinstance(m, dict) and m.get("uid")
    ]
    return {
        "id": doc.id,
        "name": raw["name"],
        "description": raw.get("description", ""),
        "project": raw.get("project", ""),
        "members": members,
        "projectLeadID": raw.get("projectLeadID", ""),
        "projectLeadEmail": raw.get("projectLeadEmail", ""),
        "projectLeadTempPassword": raw.get("projectLeadTempPassword", ""),
        "createdAt": raw.get("createdAt"),
    }


def member_ids(community: Community) -> list[str]:
    """Return the user IDs of a community's members, in order."""
    return [m["uid"] for m in community.get("members", [])]


def public_view(community: Community) -> dict[str, Any]:
    """Return the community without its one-time lead credential."""
    data = dict(community)
    data.pop("projectLeadTempPassword", None)
    return data
