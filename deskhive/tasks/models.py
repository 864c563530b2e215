"""Data models for the tasks blueprint."""

from __future__ import annotations

from typing import Any

from deskhive.core.types import FirestoreDocument

PRIORITY_LOW = "low"
PRIORITY_MEDIUM = "medium"
PRIORITY_HIGH = "high"
TASK_PRIORITIES = (PRIORITY_LOW, PRIORITY_MEDIUM, PRIORITY_HIGH)

STATUS_TODO = "todo"
STATUS_IN_PROGRESS = "inProgress"
STATUS_DONE = "done"
TASK_STATUSES = (STATUS_TODO, STATUS_IN_PROGRESS, STATUS_DONE)


class Task(FirestoreDocument, total=False):
    """A task document stored under ``communities/{id}/tasks``."""

    title: str
    description: str
    assignedToID: str
    assignedToEmail: str
    assignedByEmail: str
    priority: str
    status: str
    dueDate: Any
    completedAt: Any
    communityID: str
    communityName: str


def task_from_snapshot(doc: Any, community_id: str) -> Task | None:
    """Build a task from a snapshot; unknown priority/status fall back to defaults."""
    raw = doc.to_dict() or {}
    if not raw.get("title") or not raw.get("assignedToID"):
        return None
    task: Task = {
        "id": doc.id,
        "communityID": community_id,
        "communityName": raw.get("communityName", ""),
        "title": raw["title"],
        "description": raw.get("description", ""),
        "assignedToID": raw["assignedToID"],
        "assignedToEmail": raw.get("assignedToEmail", ""),
        "assignedByEmail": raw.get("assignedByEmail", ""),
        "priority": raw.get("priority") if raw.get("priority") in TASK_PRIORITIES else PRIORITY_MEDIUM,
        "status": raw.get("status") if raw.get("status") in TASK_STATUSES else STATUS_TODO,
        "createdAt": raw.get("createdAt"),
    }
    if raw.get("dueDate"):
        task["dueDate"] = raw["dueDate"]
    if raw.get("completedAt"):
        task["completedAt"] = raw["completedAt"]
    return task
