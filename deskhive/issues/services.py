"""Service layer for anonymous issue reports."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from firebase_admin import firestore

from deskhive.constants import (
    CASE_ID_ALPHABET,
    CASE_ID_LENGTH,
    CASE_ID_PREFIX,
    ISSUES_COLLECTION,
)
from deskhive.core.store import STORE_ERRORS, store_errors, with_fallback
from deskhive.errors import NotFoundError, TransientError, ValidationError
from deskhive.utils import random_code, sort_newest_first, utcnow

from .models import (
    ISSUE_CATEGORIES,
    ISSUE_STATUSES,
    STATUS_OPEN,
    IssueReport,
    issue_from_snapshot,
)

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

logger = logging.getLogger(__name__)

_CASE_ID_RE = re.compile(
    re.escape(CASE_ID_PREFIX) + f"[{re.escape(CASE_ID_ALPHABET)}]{{{CASE_ID_LENGTH}}}"
)


class IssueService:
    """Handles the anonymous issue ledger."""

    @staticmethod
    def generate_case_id() -> str:
        """Return a case ID such as ``ISS-A3F9B2``."""
        return CASE_ID_PREFIX + random_code(CASE_ID_ALPHABET, CASE_ID_LENGTH)

    @staticmethod
    def normalize_case_id(case_id: str | None) -> str:
        """Trim and upper-case a case ID typed by a user."""
        return (case_id or "").strip().upper()

    @staticmethod
    def submit_issue(
        db: Client, category: str, title: str, description: str
    ) -> IssueReport:
        """File an anonymous report and return it with its case ID.

        The case ID is the document ID. It is not checked for collisions
        before the write; with 32**6 possible IDs a clash is treated as
        negligible, but one would replace the earlier report.
        """
        title = (title or "").strip()
        description = (description or "").strip()
        if not title or not description:
            raise ValidationError("Please fill in the title and description.")
        if category not in ISSUE_CATEGORIES:
            raise ValidationError(f"Unknown category '{category}'.")

        case_id = IssueService.generate_case_id()
        data = {
            "caseID": case_id,
            "category": category,
            "title": title,
            "description": description,
            "status": STATUS_OPEN,
            "adminResponse": "",
            "createdAt": utcnow(),
        }
        with store_errors("Failed to submit. Please try again."):
            db.collection(ISSUES_COLLECTION).document(case_id).set(data)
        logger.info(f"Issue {case_id} filed under {category}")
        report: IssueReport = {"id": case_id, **data}  # type: ignore[typeddict-item]
        return report

    @staticmethod
    def lookup_issue(db: Client, case_id: str) -> IssueReport:
        """Find a report by case ID, ignoring case and surrounding whitespace."""
        key = IssueService.normalize_case_id(case_id)
        if not key:
            raise ValidationError("Please enter a Case ID.")
        not_found = NotFoundError(
            f'No issue found with Case ID "{key}". Please check and try again.'
        )
        # Anything else could be an invalid document path such as "ISS-AB/CD".
        if not _CASE_ID_RE.fullmatch(key):
            raise not_found

        try:
            doc = db.collection(ISSUES_COLLECTION).document(key).get()
        except STORE_ERRORS as e:
            logger.error(f"Issue lookup for {key} failed: {e}")
            raise TransientError("Lookup failed. Please check your connection.") from e

        report = issue_from_snapshot(doc) if doc.exists else None
        if report is None:
            raise not_found
        return report

    @staticmethod
    def list_issues(db: Client) -> list[IssueReport]:
        """Return every report, newest first."""

        def parse(docs):
            return [r for r in map(issue_from_snapshot, docs) if r is not None]

        def ordered() -> list[IssueReport]:
            query = db.collection(ISSUES_COLLECTION).order_by(
                "createdAt", direction=firestore.Query.DESCENDING
            )
            return parse(query.stream())

        def unordered() -> list[IssueReport]:
            return sort_newest_first(parse(db.collection(ISSUES_COLLECTION).stream()))

        with store_errors("Failed to load issues."):
            return with_fallback(ordered, unordered, "issues")

    @staticmethod
    def respond_to_issue(
        db: Client, case_id: str, response: str, new_status: str
    ) -> IssueReport:
        """Record the admin's response and status. The latest response wins."""
        if new_status not in ISSUE_STATUSES:
            raise ValidationError(f"Unknown status '{new_status}'.")
        report = IssueService.lookup_issue(db, case_id)
        update = {"adminResponse": (response or "").strip(), "status": new_status}
        with store_errors("Failed to send response."):
            db.collection(ISSUES_COLLECTION).document(report["id"]).update(update)
        report.update(update)  # type: ignore[typeddict-item]
        return report
