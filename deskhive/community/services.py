"""Service layer for microcommunities."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, cast

from firebase_admin import firestore

from deskhive.announcements.services import AnnouncementService
from deskhive.constants import (
    COMMUNITIES_COLLECTION,
    ROLE_ADMIN,
    ROLE_EMPLOYEE,
    ROLE_PROJECT_LEAD,
    TEMP_PASSWORD_ALPHABET,
    TEMP_PASSWORD_LENGTH,
    TEMP_PASSWORD_PREFIX,
)
from deskhive.core.store import store_errors, with_fallback
from deskhive.core.workflow import Saga, WorkflowResult
from deskhive.directory.services import DirectoryService
from deskhive.errors import NotFoundError, PermissionDeniedError, ValidationError
from deskhive.utils import random_code, sort_newest_first, utcnow

from .models import Community, Member, community_from_snapshot, member_ids

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.document import DocumentReference

logger = logging.getLogger(__name__)


def _parse(docs: Any) -> list[Community]:
    return [c for c in map(community_from_snapshot, docs) if c is not None]


class CommunityService:
    """Handles communities, their members and their project lead."""

    @staticmethod
    def _ref(db: Client, community_id: str) -> DocumentReference:
        return db.collection(COMMUNITIES_COLLECTION).document(community_id)

    @staticmethod
    def generate_temp_password() -> str:
        """Return a readable one-time password such as ``Lead@X7k2mP``."""
        return TEMP_PASSWORD_PREFIX + random_code(
            TEMP_PASSWORD_ALPHABET, TEMP_PASSWORD_LENGTH
        )

    @staticmethod
    def get_community(db: Client, community_id: str) -> Community:
        """Fetch a community by ID."""
        with store_errors("Failed to load community."):
            doc = cast("DocumentSnapshot", CommunityService._ref(db, community_id).get())
        community = community_from_snapshot(doc) if doc.exists else None
        if community is None:
            raise NotFoundError("Community not found.")
        return community

    @staticmethod
    def list_communities(db: Client) -> list[Community]:
        """Return every community, newest first."""

        def ordered() -> list[Community]:
            query = db.collection(COMMUNITIES_COLLECTION).order_by(
                "createdAt", direction=firestore.Query.DESCENDING
            )
            return _parse(query.stream())

        def unordered() -> list[Community]:
            return sort_newest_first(_parse(db.collection(COMMUNITIES_COLLECTION).stream()))

        with store_errors("Failed to load communities."):
            return with_fallback(ordered, unordered, "communities")

    @staticmethod
    def list_for_member(db: Client, uid: str) -> list[Community]:
        """Return the communities a user belongs to."""
        return [
            c for c in CommunityService.list_communities(db) if uid in member_ids(c)
        ]

    @staticmethod
    def find_led_community(db: Client, uid: str) -> Community | None:
        """Return the community a user leads, if any."""
        for community in CommunityService.list_communities(db):
            if community["projectLeadID"] == uid:
                return community
        return None

    @staticmethod
    def _resolve_members(db: Client, uids: list[str]) -> list[Member]:
        members: list[Member] = []
        seen = set()
        for uid in uids:
            if uid in seen:
                continue
            seen.add(uid)
            user = DirectoryService.get_user(db, uid)
            if user["role"] == ROLE_ADMIN:
                raise ValidationError("The admin cannot be a community member.")
            members.append({"uid": user["id"], "email": user["email"]})
        return members

    @staticmethod
    def create_community(
        db: Client,
        name: str,
        description: str = "",
        project: str = "",
        member_uids: list[str] | None = None,
    ) -> Community:
        """Create a community, snapshotting the emails of its first members."""
        name = (name or "").strip()
        if not name:
            raise ValidationError("Community name cannot be empty.")

        members = CommunityService._resolve_members(db, member_uids or [])
        data = {
            "name": name,
            "description": (description or "").strip(),
            "project": (project or "").strip(),
            "members": members,
            "projectLeadID": "",
            "projectLeadEmail": "",
            "projectLeadTempPassword": "",
            "createdAt": utcnow(),
        }
        ref = db.collection(COMMUNITIES_COLLECTION).document()
        with store_errors("Failed to create community."):
            ref.set(data)
        logger.info(f"Community {ref.id} '{name}' created with {len(members)} member(s)")
        community: Community = {"id": ref.id, **data}  # type: ignore[typeddict-item]
        return community

    @staticmethod
    def add_member(db: Client, community_id: str, uid: str) -> Community:
        """Add a user to a community. Adding an existing member does nothing.

        The member list is read, changed and written back as one document
        update, so two admins editing the same community at once can overwrite
        each other's change.
        """
        community = CommunityService.get_community(db, community_id)
        if uid in member_ids(community):
            return community

        new_member = CommunityService._resolve_members(db, [uid])[0]
        members = community["members"] + [new_member]
        with store_errors("Failed to add member."):
            CommunityService._ref(db, community_id).update({"members": members})
        community["members"] = members
        return community

    @staticmethod
    def remove_member(db: Client, community_id: str, uid: str) -> Community:
        """Remove a user from a community."""
        community = CommunityService.get_community(db, community_id)
        if uid not in member_ids(community):
            raise NotFoundError("That user is not a member of this community.")
        if community["projectLeadID"] == uid:
            raise ValidationError(
                "Remove the project lead before removing them from the community."
            )

        members = [m for m in community["members"] if m["uid"] != uid]
        with store_errors("Failed to remove member."):
            CommunityService._ref(db, community_id).update({"members": members})
        community["members"] = members
        return community

    @staticmethod
    def set_project_lead(db: Client, community_id: str, uid: str) -> WorkflowResult:
        """Make a member the community's project lead.

        Steps, in order: write the lead slot, promote the user's role, store a
        one-time password on the community, and send the user a promotion
        notice carrying their credentials. Nothing is rolled back; a failure
        after the first step leaves a partial result naming what went through.

        A user leads at most one community, so removing a lead never strips
        the role from someone who still runs another community.
        """
        community = CommunityService.get_community(db, community_id)
        user = DirectoryService.get_user(db, uid)
        if user["role"] == ROLE_ADMIN:
            raise PermissionDeniedError("The admin cannot lead a community.")
        if uid not in member_ids(community):
            raise ValidationError(f"{user['email']} is not a member of this community.")
        current_lead = community["projectLeadID"]
        if current_lead and current_lead != uid:
            raise ValidationError("Remove the current project lead first.")
        led = CommunityService.find_led_community(db, uid)
        if led is not None and led["id"] != community_id:
            raise ValidationError(
                f"{user['email']} already leads {led['name']}. "
                "A user can lead only one community."
            )

        ref = CommunityService._ref(db, community_id)
        temp_password = CommunityService.generate_temp_password()

        saga = Saga("project lead assignment")
        saga.step(
            "assign_lead_slot",
            "lead slot assigned",
            lambda: ref.update(
                {"projectLeadID": user["id"], "projectLeadEmail": user["email"]}
            ),
        )
        saga.step(
            "promote_role",
            "role promoted to Project Lead",
            lambda: DirectoryService.set_role(db, uid, ROLE_PROJECT_LEAD),
        )
        saga.step(
            "store_temp_password",
            "temporary password stored",
            lambda: ref.update({"projectLeadTempPassword": temp_password}),
            required=False,
        )
        saga.step(
            "notify_lead",
            "credentials sent",
            lambda: AnnouncementService.notify_promotion(
                db, user, community, temp_password
            ),
            required=False,
        )
        return saga.finish(
            f"{user['email']} promoted to Project Lead. Credentials sent to their inbox.",
            community_id=community_id,
            lead_id=uid,
        )

    @staticmethod
    def remove_project_lead(db: Client, community_id: str) -> WorkflowResult:
        """Demote the community's lead and clear the lead slot.

        The demotion is best effort: the slot is cleared even when the role
        update fails.
        """
        community = CommunityService.get_community(db, community_id)
        lead_id = community["projectLeadID"]
        if not lead_id:
            raise ValidationError("This community has no project lead.")

        saga = Saga("project lead removal")
        saga.step(
            "demote_role",
            "role reverted to Employee",
            lambda: DirectoryService.set_role(db, lead_id, ROLE_EMPLOYEE),
            required=False,
        )
        saga.step(
            "clear_lead_slot",
            "lead slot cleared",
            lambda: CommunityService._ref(db, community_id).update(
                {
                    "projectLeadID": "",
                    "projectLeadEmail": "",
                    "projectLeadTempPassword": "",
                }
            ),
        )
        return saga.finish(
            f"{community['projectLeadEmail']} is no longer the Project Lead of "
            f"{community['name']}.",
            community_id=community_id,
        )

    @staticmethod
    def delete_community(db: Client, community_id: str) -> None:
        """Delete a community document.

        Tasks and feed messages under it are left in place.
        """
        ref = CommunityService._ref(db, community_id)
        with store_errors("Failed to delete community."):
            if not ref.get().exists:
                raise NotFoundError("Community not found.")
            ref.delete()
        logger.info(f"Community {community_id} deleted")
