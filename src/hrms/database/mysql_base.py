from __future__ import annotations

import functools
import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.constants import DEFAULT_CONFLICT_RETRIES
from ..core.exceptions import ConflictError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

TRANSIENT_ERRNOS = frozenset({errorcode.ER_LOCK_DEADLOCK, errorcode.ER_LOCK_WAIT_TIMEOUT})


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """One connection, one transaction: commit on success, roll back on any error."""
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def is_transient(exc: BaseException) -> bool:
    return isinstance(exc, mysql.connector.Error) and getattr(exc, "errno", None) in TRANSIENT_ERRNOS


def retry_on_conflict(method):
    """Re-run a repository transaction when MySQL reports a deadlock or lock timeout.

    The whole transaction is replayed, so every guard inside it is evaluated
    again. The attempt count comes from the repository's connection factory.
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        attempts = int(getattr(self._conn_factory, "conflict_retries", DEFAULT_CONFLICT_RETRIES))
        for attempt in range(1, attempts + 1):
            try:
                return method(self, *args, **kwargs)
            except mysql.connector.Error as exc:
                if not is_transient(exc):
                    raise
                if attempt == attempts:
                    logger.error("%s gave up after %d conflicting attempts", method.__qualname__, attempts)
                    raise ConflictError("The record is being modified concurrently, please retry") from exc
                logger.warning("%s hit %s (attempt %d/%d), retrying", method.__qualname__, exc.errno, attempt, attempts)

    return wrapper


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])
