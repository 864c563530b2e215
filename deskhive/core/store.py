"""Helpers for talking to the document store."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, Iterator, TypeVar

from google.api_core import exceptions as google_exceptions

from deskhive.errors import TransientError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Errors raised by the Firestore client when the backend is unreachable,
# times out, or rejects a query (for example a missing composite index).
STORE_ERRORS = (google_exceptions.GoogleAPICallError, google_exceptions.RetryError)


@contextmanager
def store_errors(message: str) -> Iterator[None]:
    """Translate store failures inside the block into a retryable error."""
    try:
        yield
    except STORE_ERRORS as e:
        logger.error(f"{message} ({e})")
        raise TransientError(message) from e


def with_fallback(primary: Callable[[], T], fallback: Callable[[], T], label: str) -> T:
    """Run an ordered query, falling back to an unordered fetch on failure.

    Ordered queries can fail when the composite index they need has not been
    deployed. The fallback must return the same documents in the same order.
    """
    try:
        return primary()
    except STORE_ERRORS as e:
        logger.warning(f"Ordered query for {label} failed, using fallback: {e}")
        return fallback()
