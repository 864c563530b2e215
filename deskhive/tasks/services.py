"""Service layer for the task board."""

from __future__ import annotations

import datetime
import logging
from typing import TYPE_CHECKING, Any, Iterable

from deskhive.announcements.services import AnnouncementService
from deskhive.community.models import member_ids
from deskhive.community.services import CommunityService
from deskhive.constants import COMMUNITIES_COLLECTION, TASKS_SUBCOLLECTION
from deskhive.core.store import store_errors
from deskhive.core.workflow import Saga, WorkflowResult
from deskhive.errors import NotFoundError, PermissionDeniedError, ValidationError
from deskhive.utils import email_handle, sort_newest_first, utcnow

from .models import (
    STATUS_DONE,
    STATUS_TODO,
    TASK_PRIORITIES,
    TASK_STATUSES,
    Task,
    task_from_snapshot,
)

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.collection import CollectionReference

logger = logging.getLogger(__name__)


def _as_timestamp(value: datetime.date | datetime.datetime | None) -> datetime.datetime | None:
    """Firestore stores datetimes only; a bare date becomes midnight UTC."""
    if value is None or isinstance(value, datetime.datetime):
        return value
    return datetime.datetime.combine(value, datetime.time(), tzinfo=datetime.timezone.utc)


class TaskService:
    """Handles tasks inside a community."""

    @staticmethod
    def _tasks(db: Client, community_id: str) -> CollectionReference:
        return (
            db.collection(COMMUNITIES_COLLECTION)
            .document(community_id)
            .collection(TASKS_SUBCOLLECTION)
        )

    @staticmethod
    def get_task(db: Client, community_id: str, task_id: str) -> Task:
        """Fetch a task, making sure its community still exists."""
        CommunityService.get_community(db, community_id)
        with store_errors("Failed to load task."):
            doc = TaskService._tasks(db, community_id).document(task_id).get()
        task = task_from_snapshot(doc, community_id) if doc.exists else None
        if task is None:
            raise NotFoundError("Task not found.")
        return task

    @staticmethod
    def create_task(
        db: Client,
        community_id: str,
        lead: dict[str, Any],
        assignee_uid: str,
        title: str,
        description: str = "",
        priority: str = "medium",
        due_date: datetime.date | datetime.datetime | None = None,
    ) -> WorkflowResult:
        """Assign a new task to a member and notify them.

        The task is written first. The notification is a second, separate
        write; if it fails the task stays and the result is partial.
        """
        title = (title or "").strip()
        if not title:
            raise ValidationError("Task title cannot be empty.")
        if priority not in TASK_PRIORITIES:
            raise ValidationError(f"Unknown priority '{priority}'.")

        community = CommunityService.get_community(db, community_id)
        if community["projectLeadID"] != lead["uid"]:
            raise PermissionDeniedError(
                "Only this community's project lead can assign tasks."
            )
        if assignee_uid not in member_ids(community):
            raise ValidationError("Tasks can only be assigned to community members.")
        assignee = next(m for m in community["members"] if m["uid"] == assignee_uid)

        data = {
            "title": title,
            "description": (description or "").strip(),
            "assignedToID": assignee["uid"],
            "assignedToEmail": assignee["email"],
            "assignedByEmail": lead["email"],
            "communityID": community_id,
            "communityName": community["name"],
            "priority": priority,
            "status": STATUS_TODO,
            "createdAt": utcnow(),
        }
        due = _as_timestamp(due_date)
        if due is not None:
            data["dueDate"] = due

        def write_task() -> Task:
            ref = TaskService._tasks(db, community_id).document()
            ref.set(data)
            task: Task = {"id": ref.id, **data}  # type: ignore[typeddict-item]
            return task

        saga = Saga("task assignment")
        task = saga.step("write_task", "task created", write_task)
        if task is not None:
            saga.step(
                "notify_assignee",
                "assignee notified",
                lambda: AnnouncementService.notify_task_assigned(db, task),
                required=False,
            )
        handle = email_handle(assignee["email"]) or assignee["email"]
        return saga.finish(f"Task assigned to {handle}!", task=task)

    @staticmethod
    def update_status(
        db: Client,
        community_id: str,
        task_id: str,
        new_status: str,
        actor_uid: str | None = None,
    ) -> Task:
        """Move a task to a new status.

        Moving to done stamps ``completedAt``. Any transition is accepted,
        including going back from done, and ``completedAt`` is then left as is.
        """
        if new_status not in TASK_STATUSES:
            raise ValidationError(f"Unknown status '{new_status}'.")

        task = TaskService.get_task(db, community_id, task_id)
        if actor_uid is not None and actor_uid != task["assignedToID"]:
            raise PermissionDeniedError("Only the assignee can update this task.")

        update: dict[str, Any] = {"status": new_status}
        if new_status == STATUS_DONE:
            update["completedAt"] = utcnow()

        with store_errors("Failed to update task."):
            TaskService._tasks(db, community_id).document(task_id).update(update)
        task.update(update)  # type: ignore[typeddict-item]
        return task

    @staticmethod
    def delete_task(
        db: Client, community_id: str, task_id: str, actor_uid: str | None = None
    ) -> None:
        """Delete a task. Only the community's lead may do so."""
        community = CommunityService.get_community(db, community_id)
        if actor_uid is not None and actor_uid != community["projectLeadID"]:
            raise PermissionDeniedError("Only the project lead can delete tasks.")
        TaskService.get_task(db, community_id, task_id)
        with store_errors("Failed to delete task."):
            TaskService._tasks(db, community_id).document(task_id).delete()

    @staticmethod
    def list_for_community(db: Client, community_id: str) -> list[Task]:
        """Return a community's tasks, newest first."""
        CommunityService.get_community(db, community_id)
        with store_errors("Failed to load tasks."):
            docs = list(TaskService._tasks(db, community_id).stream())
        return sort_newest_first(TaskService._parse(docs, community_id))

    @staticmethod
    def fetch_mine(db: Client, uid: str) -> list[Task]:
        """Return every task assigned to a user, across all communities.

        Each community's tasks are read in full and filtered here; there is no
        cross-community index.
        """
        mine: list[Task] = []
        with store_errors("Failed to load tasks."):
            for community_doc in db.collection(COMMUNITIES_COLLECTION).stream():
                docs = community_doc.reference.collection(TASKS_SUBCOLLECTION).stream()
                mine.extend(
                    task
                    for task in TaskService._parse(docs, community_doc.id)
                    if task["assignedToID"] == uid
                )
        return sort_newest_first(mine)

    @staticmethod
    def summarize(tasks: Iterable[Task]) -> dict[str, int]:
        """Count pending and completed tasks."""
        counts = {"pending": 0, "done": 0}
        for task in tasks:
            counts["done" if task["status"] == STATUS_DONE else "pending"] += 1
        return counts

    @staticmethod
    def _parse(docs: Iterable[Any], community_id: str) -> list[Task]:
        return [
            task
            for task in (task_from_snapshot(doc, community_id) for doc in docs)
            if task is not None
        ]
