"""Service layer for community feeds."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from firebase_admin import firestore

from deskhive.constants import COMMUNITIES_COLLECTION, FEED_SUBCOLLECTION, ROLE_ADMIN
from deskhive.core.store import store_errors, with_fallback
from deskhive.errors import NotFoundError, ValidationError
from deskhive.utils import sort_oldest_first, utcnow

from .models import FeedMessage, message_from_snapshot

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.collection import CollectionReference

logger = logging.getLogger(__name__)


class FeedService:
    """Append, read and delete messages in a community's feed."""

    @staticmethod
    def _feed(db: Client, community_id: str) -> CollectionReference:
        return (
            db.collection(COMMUNITIES_COLLECTION)
            .document(community_id)
            .collection(FEED_SUBCOLLECTION)
        )

    @staticmethod
    def post_message(
        db: Client, community_id: str, body: str, sender: dict[str, Any]
    ) -> FeedMessage:
        """Append a message. Posts by the admin are flagged and carry no sender ID."""
        body = (body or "").strip()
        if not body:
            raise ValidationError("Message cannot be empty.")

        is_admin = sender.get("role") == ROLE_ADMIN
        data = {
            "body": body,
            "senderEmail": sender.get("email", ""),
            "senderID": "" if is_admin else sender["uid"],
            "isAdminPost": is_admin,
            "createdAt": utcnow(),
        }
        ref = FeedService._feed(db, community_id).document()
        with store_errors("Failed to send."):
            ref.set(data)
        message: FeedMessage = {"id": ref.id, **data}  # type: ignore[typeddict-item]
        return message

    @staticmethod
    def list_messages(db: Client, community_id: str) -> list[FeedMessage]:
        """Return a community's messages, oldest first."""
        feed = FeedService._feed(db, community_id)

        def parse(docs):
            return [m for m in map(message_from_snapshot, docs) if m is not None]

        def ordered() -> list[FeedMessage]:
            query = feed.order_by("createdAt", direction=firestore.Query.ASCENDING)
            return parse(query.stream())

        def unordered() -> list[FeedMessage]:
            return sort_oldest_first(parse(feed.stream()))

        with store_errors("Failed to load feed."):
            return with_fallback(ordered, unordered, "feed")

    @staticmethod
    def delete_message(db: Client, community_id: str, message_id: str) -> None:
        """Delete one message."""
        ref = FeedService._feed(db, community_id).document(message_id)
        with store_errors("Failed to delete."):
            if not ref.get().exists:
                raise NotFoundError("Message not found.")
            ref.delete()
        logger.info(f"Feed message {message_id} deleted from community {community_id}")
