"""Data models for the awards blueprint."""

from __future__ import annotations

from typing import Any, TypedDict


class EmployeeOfMonth(TypedDict):
    """An award document, keyed by ``yyyy-MM``."""

    id: str
    employeeID: str
    employeeEmail: str
    reason: str
    month: str
    awardedAt: Any
    awardedByEmail: str


def award_from_snapshot(doc: Any) -> EmployeeOfMonth | None:
    raw = doc.to_dict() or {}
    fields = ("employeeID", "employeeEmail", "reason", "month", "awardedByEmail")
    if not all(isinstance(raw.get(f), str) for f in fields):
        return None
    return {
        "id": doc.id,
        "employeeID": raw["employeeID"],
        "employeeEmail": raw["employeeEmail"],
        "reason": raw["reason"],
        "month": raw["month"],
        "awardedAt": raw.get("awardedAt"),
        "awardedByEmail": raw["awardedByEmail"],
    }
