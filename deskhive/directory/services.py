"""Service layer for the user directory."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any, cast

from firebase_admin import auth, firestore

from deskhive.constants import (
    ROLE_ADMIN,
    ROLE_EMPLOYEE,
    ROLE_PROJECT_LEAD,
    USERS_COLLECTION,
)
from deskhive.core.store import store_errors
from deskhive.errors import (
    DuplicateResourceError,
    NotFoundError,
    PermissionDeniedError,
    ProvisioningError,
    ValidationError,
)
from deskhive.utils import sort_newest_first, utcnow

from .models import ROLE_DISPLAY_NAMES, ROLES, User, user_from_snapshot
from .provisioning import AccountProvisioner

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[A-Z0-9a-z._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,64}$")
MIN_PASSWORD_LENGTH = 6


class DirectoryService:
    """Service class for user records and their roles."""

    @staticmethod
    def validate_email(email: str | None) -> str:
        """Return the trimmed email or raise before any remote call is made."""
        email = (email or "").strip()
        if not email:
            raise ValidationError("Please enter an email address.")
        if not EMAIL_PATTERN.match(email):
            raise ValidationError("Please enter a valid email address.")
        return email

    @staticmethod
    def get_user(db: Client, uid: str) -> User:
        """Fetch a user by ID."""
        with store_errors("Failed to load user."):
            doc = cast("DocumentSnapshot", db.collection(USERS_COLLECTION).document(uid).get())
        user = user_from_snapshot(doc) if doc.exists else None
        if user is None:
            raise NotFoundError("User not found.")
        return user

    @staticmethod
    def list_non_admin(db: Client) -> list[User]:
        """List every non-admin user, grouped by role and newest first within a role."""
        with store_errors("Failed to load employees."):
            docs = list(db.collection(USERS_COLLECTION).stream())

        users = [
            user
            for user in (user_from_snapshot(doc) for doc in docs)
            if user is not None and user["role"] != ROLE_ADMIN
        ]
        # Stable sort by role over a newest-first list.
        return sorted(sort_newest_first(users), key=lambda u: u["role"])

    @staticmethod
    def set_role(db: Client, uid: str, role: str) -> User:
        """Change a user's role.

        This is the only place a role is written after account creation. The
        admin account can neither be granted nor revoked here.
        """
        if role not in ROLES:
            raise ValidationError(f"Unknown role '{role}'.")
        if role == ROLE_ADMIN:
            raise PermissionDeniedError("The admin role cannot be granted.")

        user = DirectoryService.get_user(db, uid)
        if user["role"] == ROLE_ADMIN:
            raise PermissionDeniedError("The admin account's role cannot be changed.")
        if user["role"] == role:
            return user

        with store_errors("Failed to update role."):
            db.collection(USERS_COLLECTION).document(uid).update({"role": role})
        logger.info(f"User {uid} role changed from {user['role']} to {role}")
        user["role"] = role
        return user

    @staticmethod
    def toggle_role(db: Client, uid: str) -> User:
        """Flip a user between employee and project lead."""
        user = DirectoryService.get_user(db, uid)
        new_role = (
            ROLE_PROJECT_LEAD if user["role"] == ROLE_EMPLOYEE else ROLE_EMPLOYEE
        )
        return DirectoryService.set_role(db, uid, new_role)

    @staticmethod
    def describe_role(role: str) -> str:
        """Return the display name of a role."""
        return ROLE_DISPLAY_NAMES.get(role, role)

    @staticmethod
    def provision_member(
        db: Client,
        caller_uid: str,
        email: str,
        provisioner: AccountProvisioner | None = None,
    ) -> dict[str, Any]:
        """Create a member account through the provisioning function.

        Input is checked locally first. Errors reported by the provisioning
        function reach the caller with their message unchanged.
        """
        email = DirectoryService.validate_email(email)
        provisioner = provisioner or AccountProvisioner()
        result = provisioner.create_member(db, caller_uid, email)
        if not result.get("success"):
            raise ProvisioningError("Failed to create member. Please try again.")
        return result

    @staticmethod
    def admin_exists(db: Client) -> bool:
        """Return True if an admin account is on record."""
        query = (
            db.collection(USERS_COLLECTION)
            .where(filter=firestore.FieldFilter("role", "==", ROLE_ADMIN))
            .limit(1)
        )
        with store_errors("Could not check for an existing admin."):
            return bool(list(query.stream()))

    @staticmethod
    def register_admin(db: Client, email: str, password: str) -> User:
        """Create the one admin account.

        The check for an existing admin and the write are separate calls, so
        two simultaneous sign-ups can both pass the check.
        """
        email = DirectoryService.validate_email(email).lower()
        if not password or len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
            )
        if DirectoryService.admin_exists(db):
            raise DuplicateResourceError(
                "An admin account already exists. Please log in instead."
            )

        try:
            record = auth.create_user(email=email, password=password, email_verified=True)
        except auth.EmailAlreadyExistsError as e:
            raise DuplicateResourceError(
                "An account with this email address already exists."
            ) from e

        user: User = {
            "id": record.uid,
            "email": email,
            "role": ROLE_ADMIN,
            "createdAt": utcnow(),
        }
        with store_errors("Failed to save the admin account."):
            db.collection(USERS_COLLECTION).document(record.uid).set(
                {"email": email, "role": ROLE_ADMIN, "createdAt": user["createdAt"]}
            )
        logger.info(f"Admin account created for {email}")
        return user
