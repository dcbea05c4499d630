"""Retry and locking helpers for concurrent ledger writes."""

import logging
import time
from typing import Callable, TypeVar

from tillbook.domain.errors import StorageError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def lock_for_update(query):
    """Apply row-level locking to a query.

    SQLite ignores SELECT ... FOR UPDATE and serialises writers instead;
    server databases honour it.
    """
    return query.with_for_update()


def run_with_retry(func: Callable[[], T], *, attempts: int = 3, backoff_base: float = 0.1) -> T:
    """Run a whole unit of work, retrying it on transient storage failures.

    Only a StorageError marked retryable (lock or connection failures) is
    retried. A failed unit of work leaves nothing behind, so each attempt
    starts from scratch. Domain errors and constraint violations propagate
    immediately.
    """
    attempts = max(1, attempts)
    for attempt in range(attempts):
        try:
            return func()
        except StorageError as exc:
            if not exc.retryable or attempt >= attempts - 1:
                raise
            delay = backoff_base * (2 ** attempt)
            logger.warning(
                "Storage failure on attempt %d/%d, retrying in %.2fs: %s",
                attempt + 1,
                attempts,
                delay,
                exc,
            )
            time.sleep(delay)
    raise AssertionError("unreachable")
