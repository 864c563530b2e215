"""Account provisioning for new members.

The directory treats this as a remote function: it takes ``{email}`` and
answers ``{"success": True, "uid": ...}`` or fails with a
:class:`~deskhive.errors.ProvisioningError` whose message is meant for the
end user as-is.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any

from firebase_admin import auth

from deskhive.constants import (
    MEMBER_PASSWORD_ALPHABET,
    MEMBER_PASSWORD_LENGTH,
    ROLE_ADMIN,
    ROLE_EMPLOYEE,
    USERS_COLLECTION,
)
from deskhive.errors import ProvisioningError
from deskhive.utils import EmailError, random_code, send_email, utcnow

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

logger = logging.getLogger(__name__)

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class AccountProvisioner:
    """Creates the auth identity and directory row for a new member."""

    def create_member(self, db: Client, caller_uid: str | None, email: str) -> dict[str, Any]:
        """Provision a member account and email them their credentials."""
        if not caller_uid:
            raise ProvisioningError(
                "You must be signed in to perform this action.", "unauthenticated"
            )

        caller = db.collection(USERS_COLLECTION).document(caller_uid).get()
        if not caller.exists or (caller.to_dict() or {}).get("role") != ROLE_ADMIN:
            raise ProvisioningError(
                "Only the admin can create member accounts.", "permission-denied"
            )

        email = (email or "").strip().lower()
        if not email or not _EMAIL_RE.match(email):
            raise ProvisioningError(
                "A valid email address is required.", "invalid-argument"
            )

        try:
            auth.get_user_by_email(email)
        except auth.UserNotFoundError:
            pass
        else:
            raise ProvisioningError(
                "An account with this email address already exists.", "already-exists"
            )

        password = random_code(MEMBER_PASSWORD_ALPHABET, MEMBER_PASSWORD_LENGTH)
        try:
            record = auth.create_user(email=email, password=password, email_verified=False)
        except auth.EmailAlreadyExistsError as e:
            raise ProvisioningError(
                "An account with this email address already exists.", "already-exists"
            ) from e
        except Exception as e:
            logger.error(f"Failed to create auth user for {email}: {e}")
            raise ProvisioningError(f"Failed to create account: {e}") from e

        # The password is only ever sent by email, never stored.
        db.collection(USERS_COLLECTION).document(record.uid).set(
            {"email": email, "role": ROLE_EMPLOYEE, "createdAt": utcnow()}
        )

        try:
            send_email(
                to=email,
                subject="Welcome to DeskHive - Your Account Details",
                template="email/welcome_member.html",
                email=email,
                password=password,
            )
        except EmailError as e:
            logger.error(f"Failed to send welcome email to {email}: {e}")

        return {"success": True, "uid": record.uid}
