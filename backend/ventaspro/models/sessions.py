from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z


class SalesSession(db.Model):
    """
    Business day ("jornada") that sales and movements are booked against.

    LIFECYCLE:
    - OPEN (is_closed=False): accepts sales and movements
    - CLOSED (is_closed=True): end_time set, never reopened

    At most one OPEN row exists; the partial unique index below enforces it
    at the database level as well.
    """
    __tablename__ = "sessions"
    __table_args__ = (
        db.Index(
            "uq_sessions_single_open",
            "is_closed",
            unique=True,
            sqlite_where=db.text("is_closed = 0"),
            postgresql_where=db.text("is_closed = false"),
        ),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    start_time = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    end_time = db.Column(db.DateTime(timezone=True), nullable=True, index=True)
    is_closed = db.Column(db.Boolean, nullable=False, default=False)

    @property
    def status(self) -> str:
        return "CLOSED" if self.is_closed else "OPEN"

    def __repr__(self) -> str:
        return f"<SalesSession id={self.id} status={self.status}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "start_time": to_utc_z(self.start_time),
            "end_time": to_utc_z(self.end_time) if self.end_time else None,
            "is_closed": self.is_closed,
            "status": self.status,
        }
