"""Core data types for the DeskHive application."""

from typing import Any, TypedDict


class FirestoreDocument(TypedDict):
    """Generic Firestore document structure."""

    id: str
    createdAt: Any
