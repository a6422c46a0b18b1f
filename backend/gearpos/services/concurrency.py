# Overview: Retry helpers for snapshot writes.

from __future__ import annotations

import logging
import time

from sqlalchemy.exc import OperationalError

from ..extensions import db

logger = logging.getLogger(__name__)


def run_with_retry(func, *, attempts: int = 3, backoff_base: float = 0.1):
    """
    Execute a DB operation with retry on lock/busy failures.

    SQLite raises OperationalError ("database is locked") when another
    process holds the write lock; the session is rolled back and the
    operation retried with exponential backoff.
    """
    for attempt in range(attempts):
        try:
            return func()
        except OperationalError:
            db.session.rollback()
            if attempt >= attempts - 1:
                raise
            delay = backoff_base * (2 ** attempt)
            logger.warning("Snapshot write failed (attempt %d/%d); retrying in %.2fs", attempt + 1, attempts, delay)
            time.sleep(delay)

