"""Service layer for announcements and personal notifications."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Iterable

from firebase_admin import firestore

from deskhive.constants import ANNOUNCEMENTS_COLLECTION
from deskhive.core.store import STORE_ERRORS, store_errors, with_fallback
from deskhive.core.workflow import Saga, WorkflowResult
from deskhive.errors import NotFoundError, ValidationError
from deskhive.utils import email_handle, sort_newest_first, utcnow

from .models import (
    PRIORITIES,
    PRIORITY_URGENT,
    TASK_PRIORITY_MAP,
    TYPE_BROADCAST,
    TYPE_PROMOTION,
    TYPE_TASK,
    Announcement,
    Credentials,
    announcement_from_snapshot,
)

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

logger = logging.getLogger(__name__)


def _parse(docs: Iterable[Any]) -> list[Announcement]:
    return [ann for ann in map(announcement_from_snapshot, docs) if ann is not None]


def _broadcasts_only(anns: list[Announcement]) -> list[Announcement]:
    return [ann for ann in anns if not ann["targetUID"]]


class AnnouncementService:
    """Handles broadcast announcements and one-recipient notifications."""

    @staticmethod
    def _write(db: Client, data: dict[str, Any]) -> Announcement:
        """Write a new announcement and return it with its ID."""
        data.setdefault("createdAt", utcnow())
        ref = db.collection(ANNOUNCEMENTS_COLLECTION).document()
        ref.set(data)
        ann: Announcement = {"id": ref.id, **data}  # type: ignore[typeddict-item]
        return ann

    @staticmethod
    def post_broadcast(db: Client, title: str, body: str, priority: str) -> Announcement:
        """Post an announcement every employee sees."""
        title = (title or "").strip()
        body = (body or "").strip()
        if not title or not body:
            raise ValidationError("Title and body are required.")
        if priority not in PRIORITIES:
            raise ValidationError(f"Unknown priority '{priority}'.")

        with store_errors("Failed to post announcement."):
            return AnnouncementService._write(
                db,
                {
                    "title": title,
                    "body": body,
                    "priority": priority,
                    "targetUID": "",
                    "type": TYPE_BROADCAST,
                },
            )

    @staticmethod
    def list_broadcasts_ordered(db: Client) -> list[Announcement]:
        """Fetch broadcasts with the store doing the ordering."""
        query = db.collection(ANNOUNCEMENTS_COLLECTION).order_by(
            "createdAt", direction=firestore.Query.DESCENDING
        )
        return _broadcasts_only(_parse(query.stream()))

    @staticmethod
    def list_broadcasts_unordered(db: Client) -> list[Announcement]:
        """Fetch broadcasts without an ordered query and sort them here."""
        docs = db.collection(ANNOUNCEMENTS_COLLECTION).stream()
        return _broadcasts_only(sort_newest_first(_parse(docs)))

    @staticmethod
    def list_broadcasts(db: Client) -> list[Announcement]:
        """Return broadcast announcements, newest first."""
        with store_errors("Failed to load announcements."):
            return with_fallback(
                lambda: AnnouncementService.list_broadcasts_ordered(db),
                lambda: AnnouncementService.list_broadcasts_unordered(db),
                "announcements",
            )

    @staticmethod
    def watch_broadcasts(
        db: Client, callback: Callable[[list[Announcement]], None]
    ) -> Any:
        """Subscribe to broadcast announcements.

        The callback receives the full newest-first list on every change. If the
        listener cannot be registered, or its stream later ends with an error
        (a missing index surfaces this way), the callback gets one fallback
        fetch. None is returned instead of a watch handle when registration
        itself fails.
        """
        query = db.collection(ANNOUNCEMENTS_COLLECTION).order_by(
            "createdAt", direction=firestore.Query.DESCENDING
        )

        def on_snapshot(docs: list[Any], changes: Any, read_time: Any) -> None:
            callback(_broadcasts_only(_parse(docs)))

        def fall_back(error: Exception) -> None:
            logger.warning(
                f"Announcement listener failed, using one-shot fetch: {error}"
            )
            callback(AnnouncementService.list_broadcasts_unordered(db))

        try:
            watch = query.on_snapshot(on_snapshot)
        except STORE_ERRORS as e:
            fall_back(e)
            return None

        # The watch closes itself on a background thread when the RPC dies,
        # re-raising the termination reason from close().
        close = watch.close

        def close_with_fallback(reason: Any = None) -> None:
            try:
                close(reason=reason)
            except STORE_ERRORS as e:
                fall_back(e)

        watch.close = close_with_fallback
        return watch

    @staticmethod
    def fetch_personal(db: Client, uid: str) -> dict[str, list[Announcement]]:
        """Return a user's personal notices split into promotions and tasks."""
        query = db.collection(ANNOUNCEMENTS_COLLECTION).where(
            filter=firestore.FieldFilter("targetUID", "==", uid)
        )
        with store_errors("Failed to load your notifications."):
            anns = sort_newest_first(_parse(query.stream()))

        # Empty target means broadcast; never let one leak into a personal inbox.
        anns = [ann for ann in anns if uid and ann["targetUID"] == uid]
        return {
            "promotions": [ann for ann in anns if ann["type"] == TYPE_PROMOTION],
            "tasks": [ann for ann in anns if ann["type"] == TYPE_TASK],
        }

    @staticmethod
    def credentials_of(ann: Announcement) -> Credentials | None:
        """Return the login details carried by a promotion notice."""
        if ann.get("type") != TYPE_PROMOTION:
            return None
        return ann.get("credentials")

    @staticmethod
    def notify_promotion(
        db: Client,
        user: dict[str, Any],
        community: dict[str, Any],
        temp_password: str,
    ) -> Announcement:
        """Tell a user they lead a community and hand them their credentials."""
        project = community.get("project") or "No project tag"
        return AnnouncementService._write(
            db,
            {
                "title": "You've been promoted to Project Lead!",
                "body": (
                    f"Congratulations! You are now the Project Lead for "
                    f"\"{community['name']}\" ({project}).\n\n"
                    "Your Project Lead login credentials are attached to this notice. "
                    "Please log out and log back in using them, and change your "
                    "password after first login."
                ),
                "priority": PRIORITY_URGENT,
                "targetUID": user["id"],
                "type": TYPE_PROMOTION,
                "communityID": community["id"],
                "credentials": {"email": user["email"], "tempPassword": temp_password},
            },
        )

    @staticmethod
    def notify_task_assigned(db: Client, task: dict[str, Any]) -> Announcement:
        """Drop a task notice into the assignee's work inbox."""
        lead = email_handle(task.get("assignedByEmail", "")) or task.get(
            "assignedByEmail", ""
        )
        lines = [
            f"Your project lead {lead} has assigned you a task in {task['communityName']}.",
            "",
            f"- Priority: {task['priority'].capitalize()}",
        ]
        due = task.get("dueDate")
        if due:
            lines.append(f"- Due: {due.strftime('%b %d, %Y')}")
        if task.get("description"):
            lines.extend(["", task["description"]])

        return AnnouncementService._write(
            db,
            {
                "title": f"New Task Assigned: {task['title']}",
                "body": "\n".join(lines),
                "priority": TASK_PRIORITY_MAP[task["priority"]],
                "targetUID": task["assignedToID"],
                "type": TYPE_TASK,
                "taskID": task["id"],
                "communityID": task["communityID"],
            },
        )

    @staticmethod
    def post_to_community(
        db: Client,
        community: dict[str, Any],
        sender_email: str,
        title: str,
        body: str,
        priority: str,
    ) -> WorkflowResult:
        """Send a lead's notice to every member of their community.

        Each member gets their own task-typed notice so it lands in their work
        inbox. A failed delivery does not stop the others.
        """
        title = (title or "").strip()
        body = (body or "").strip()
        if not title or not body:
            raise ValidationError("Title and body are required.")
        if priority not in PRIORITIES:
            raise ValidationError(f"Unknown priority '{priority}'.")

        sender = email_handle(sender_email) or sender_email
        saga = Saga("community notice")
        for member in community.get("members", []):
            if member["uid"] == community.get("projectLeadID"):
                continue
            saga.step(
                f"notify:{member['uid']}",
                f"notice delivered to {member['email']}",
                lambda member=member: AnnouncementService._write(
                    db,
                    {
                        "title": title,
                        "body": f"From your Project Lead ({sender}):\n\n{body}",
                        "priority": priority,
                        "targetUID": member["uid"],
                        "type": TYPE_TASK,
                        "communityID": community["id"],
                    },
                ),
                required=False,
            )
        return saga.finish(
            f"Notice sent to {len(saga.result.completed)} member(s) of {community['name']}."
        )

    @staticmethod
    def delete_announcement(db: Client, announcement_id: str) -> None:
        """Delete an announcement."""
        ref = db.collection(ANNOUNCEMENTS_COLLECTION).document(announcement_id)
        with store_errors("Failed to delete."):
            if not ref.get().exists:
                raise NotFoundError("Announcement not found.")
            ref.delete()
