# Overview: Service-layer helpers for write serialization, retry and atomic commit.

from __future__ import annotations

import threading
import time

from flask import current_app, has_app_context
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from ..extensions import db

"""
Write model (authoritative)

- Single writer: every mutating engine operation runs while holding
  _WRITE_LOCK, so two checkouts in this process can never interleave their
  stock checks.
- One operation == one DB transaction. The operation body stages rows and
  flushes; run_in_transaction commits once at the end or rolls back
  everything on any failure.
- Domain errors (ValidationError, NotFoundError, InsufficientStockError)
  propagate unchanged after the rollback.
- OperationalError / StaleDataError are retried with exponential backoff.
  When retries run out, or for any other SQLAlchemyError, StorageError is
  raised.
"""

_WRITE_LOCK = threading.RLock()


class StorageError(Exception):
    """Underlying datastore failure; the operation did not happen."""


def lock_for_update(query):
    """
    Apply row-level locking for critical operations.

    NOTE: SQLite ignores SELECT ... FOR UPDATE, but other DBs will honor it.
    """
    return query.with_for_update()


def _default_attempts() -> int:
    if has_app_context():
        return int(current_app.config.get("WRITE_RETRY_ATTEMPTS", 3))
    return 3


def run_in_transaction(func, *, attempts: int | None = None, backoff_base: float = 0.1):
    """
    Execute `func` as one serialized, all-or-nothing write transaction.

    `func` must not commit; it may flush. Returns whatever `func` returns.
    """
    if attempts is None:
        attempts = _default_attempts()

    with _WRITE_LOCK:
        for attempt in range(attempts):
            try:
                result = func()
                db.session.commit()
                return result
            except (OperationalError, StaleDataError) as exc:
                db.session.rollback()
                if attempt >= attempts - 1:
                    raise StorageError(f"write failed after {attempts} attempts") from exc
                time.sleep(backoff_base * (2 ** attempt))
            except SQLAlchemyError as exc:
                db.session.rollback()
                raise StorageError("write failed") from exc
            except Exception:
                db.session.rollback()
                raise


def run_read(func):
    """Execute a read-only query, surfacing datastore failures as StorageError."""
    try:
        return func()
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StorageError("read failed") from exc
