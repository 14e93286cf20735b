"""
Session Service: business-day lifecycle

WHY: Every sale and movement is booked against the business day that was
open when it happened. The open day is never held in process memory; it is
always the single `sessions` row with is_closed = false, so a restart
recovers it straight from the database.

DESIGN PRINCIPLES:
- Exactly one open session once the engine has been used
- Lazily opened on first access
- Closing always opens the successor in the same transaction
- Closed sessions are immutable (no transition back to OPEN)
"""

from __future__ import annotations

from ..extensions import db
from ..models import SalesSession
from ..time_utils import utcnow
from .concurrency import lock_for_update, run_in_transaction, run_read


def _find_open_session(*, lock: bool = False) -> SalesSession | None:
    query = db.session.query(SalesSession).filter_by(is_closed=False)
    if lock:
        query = lock_for_update(query)
    return query.order_by(SalesSession.id.desc()).first()


def ensure_open_session() -> SalesSession:
    """
    Return the open session, creating it if none exists.

    Core logic without locking or commit. Callers run it inside
    run_in_transaction so the session row and whatever they stamp with its
    id land in the same commit.
    """
    session = _find_open_session(lock=True)
    if session is not None:
        return session

    session = SalesSession(start_time=utcnow(), is_closed=False)
    db.session.add(session)
    db.session.flush()
    return session


def get_current_session() -> SalesSession:
    """Return the single open session, opening one if needed. Idempotent."""
    existing = run_read(_find_open_session)
    if existing is not None:
        return existing
    return run_in_transaction(ensure_open_session)


def close_session() -> dict:
    """
    Close the current session and open its successor atomically.

    Returns:
        {"closed_id": <id of the session just closed>, "new_id": <id of the new open session>}
    """
    def _op():
        current = ensure_open_session()

        current.is_closed = True
        current.end_time = utcnow()
        # The close must reach the DB before the insert or the
        # single-open-session index rejects the successor.
        db.session.flush()

        successor = SalesSession(start_time=utcnow(), is_closed=False)
        db.session.add(successor)
        db.session.flush()

        return {"closed_id": current.id, "new_id": successor.id}

    return run_in_transaction(_op)


def get_session(session_id: int) -> SalesSession | None:
    return run_read(lambda: db.session.get(SalesSession, session_id))


def list_closed_sessions(limit: int | None = None) -> list[SalesSession]:
    """Closed sessions, most recently closed first."""
    def _q():
        query = (
            db.session.query(SalesSession)
            .filter_by(is_closed=True)
            .order_by(SalesSession.end_time.desc(), SalesSession.id.desc())
        )
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    return run_read(_q)


def count_open_sessions() -> int:
    return run_read(lambda: db.session.query(SalesSession).filter_by(is_closed=False).count())
