# booking_admin/models/blocked_date.py
"""
Blocked date model.

A BlockedDate marks a single calendar day as unavailable for booking. Rows are
created when an admin blocks a day (directly or through range expansion) and
hard-deleted when the day is unblocked; they are never updated in place.

Classes:
    BlockedDate: One unavailable calendar day
"""

from datetime import datetime, timezone
import logging

from sqlalchemy import Column, Date, DateTime, String, UniqueConstraint
from sqlalchemy.sql import func
import ulid

from ..database import Base

logger = logging.getLogger(__name__)


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


class BlockedDate(Base):
    """Calendar day that customers cannot book"""

    __tablename__ = "blocked_dates"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    date = Column(Date, nullable=False, index=True)
    reason = Column(String(255), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=_now_utc,
        server_default=func.now(),
    )

    # One row per calendar day; concurrent inserts for the same day race on this
    __table_args__ = (UniqueConstraint("date", name="uq_blocked_dates_date"),)

    def __repr__(self) -> str:
        return f"<BlockedDate {self.date} - {self.reason or 'No reason'}>"
