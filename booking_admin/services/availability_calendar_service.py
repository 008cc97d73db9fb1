# booking_admin/services/availability_calendar_service.py
"""
Availability Calendar Service

Maintains the set of calendar days that customers cannot book and lets admins
manage it one day at a time or by inclusive date range.

Every operation reads and writes through the blocked_dates store. There is no
in-process copy of the blocked set, so concurrent admins (and the customer
booking flow) always see the store's current state.

Range blocking is deliberately best-effort: each day is inserted and committed
on its own, days that are already blocked are skipped, and a failure partway
through leaves the earlier days blocked.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
import logging
from typing import Any, Literal, Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.exceptions import (
    DateAlreadyBlockedException,
    DuplicateDateError,
    NotFoundException,
    ValidationException,
)
from ..models.blocked_date import BlockedDate
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)

BlockRangeStatus = Literal["blocked", "noop"]


@dataclass(frozen=True)
class BlockRangeResult:
    """Outcome of a block_range call."""

    inserted: list[BlockedDate] = field(default_factory=list)
    skipped: list[date] = field(default_factory=list)
    requested: int = 0

    @property
    def count(self) -> int:
        return len(self.inserted)

    @property
    def inserted_dates(self) -> list[date]:
        return [record.date for record in self.inserted]

    @property
    def status(self) -> BlockRangeStatus:
        # Nothing new to block is a no-op, not a validation failure
        return "blocked" if self.inserted else "noop"


def expand_date_range(start: date, end: date) -> list[date]:
    """
    Enumerate the calendar days of [start, end], inclusive.

    An inverted range (start after end) enumerates nothing.
    """
    return [start + timedelta(days=offset) for offset in range(range_length(start, end))]


def range_length(start: date, end: date) -> int:
    """Number of days in [start, end]; zero for an inverted range."""
    return max(0, (end - start).days + 1)


def coerce_date(value: Any, field_name: str = "date") -> date:
    """Accept a date, datetime or ISO-8601 YYYY-MM-DD string."""
    if value is None or value == "":
        raise ValidationException(
            f"A {field_name} is required",
            code="DATE_REQUIRED",
            details={"field": field_name},
        )
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            pass
    raise ValidationException(
        f"Invalid {field_name}: expected YYYY-MM-DD",
        code="INVALID_DATE",
        details={"field": field_name, "value": str(value)},
    )


def normalize_reason(reason: Optional[str]) -> Optional[str]:
    """Trim the free-text reason; blank reasons are stored as NULL."""
    if reason is None:
        return None
    trimmed = reason.strip()
    return trimmed or None


def blocked_date_snapshot(record: Optional[BlockedDate]) -> dict[str, Any]:
    """Field map of a blocked date for audit before/after snapshots."""
    if record is None:
        return {}
    return {"date": record.date, "reason": record.reason}


class AvailabilityCalendarService(BaseService):
    """Block, unblock and query unavailable booking dates."""

    def __init__(self, db: Session, max_range_days: Optional[int] = None):
        super().__init__(db)
        self.repository = RepositoryFactory.create_blocked_date_repository(db)
        self.max_range_days = max_range_days or settings.blocked_range_max_days

    @BaseService.measure_operation("block_date")
    def block_date(self, blocked_on: Any, reason: Optional[str] = None) -> BlockedDate:
        """
        Block a single calendar day.

        Args:
            blocked_on: Day to block (date or YYYY-MM-DD)
            reason: Optional free-text reason

        Returns:
            The created blocked date

        Raises:
            ValidationException: No date, or an unparsable one
            DateAlreadyBlockedException: The day is already blocked
        """
        day = coerce_date(blocked_on)

        if self.repository.exists_on(day):
            raise DateAlreadyBlockedException(day)

        with self.transaction():
            try:
                record = self.repository.create(day, normalize_reason(reason))
            except DuplicateDateError:
                # Another admin blocked the same day between our check and insert
                raise DateAlreadyBlockedException(day)

        prometheus_metrics.record_blocked_dates_change("inserted")
        self.logger.info(f"Blocked date {day.isoformat()}")
        return record

    @BaseService.measure_operation("block_range")
    def block_range(
        self,
        start: Any,
        end: Any = None,
        reason: Optional[str] = None,
    ) -> BlockRangeResult:
        """
        Block every day of [start, end] that is not already blocked.

        Args:
            start: First day of the range
            end: Last day of the range (inclusive); defaults to start
            reason: Reason shared by every inserted day

        Returns:
            BlockRangeResult with the inserted rows and skipped days
        """
        start_day = coerce_date(start, "start")
        end_day = start_day if end is None else coerce_date(end, "end")
        shared_reason = normalize_reason(reason)

        requested = range_length(start_day, end_day)
        if requested > self.max_range_days:
            raise ValidationException(
                f"Date range too long: {requested} days (max {self.max_range_days})",
                code="RANGE_TOO_LONG",
                details={"days": requested, "max_days": self.max_range_days},
            )

        days = expand_date_range(start_day, end_day)
        if not days:
            # TODO: swap or reject inverted ranges once product decides which
            self.logger.warning(
                f"Inverted range {start_day.isoformat()}..{end_day.isoformat()} blocks nothing"
            )
            return BlockRangeResult()

        already_blocked = self.repository.dates_between(start_day, end_day)
        inserted: list[BlockedDate] = []
        skipped: list[date] = []

        for day in days:
            if day in already_blocked:
                skipped.append(day)
                continue
            try:
                with self.transaction():
                    record = self.repository.create(day, shared_reason)
            except DuplicateDateError:
                skipped.append(day)
                continue
            inserted.append(record)

        prometheus_metrics.record_blocked_dates_change("inserted", len(inserted))
        prometheus_metrics.record_blocked_dates_change("skipped", len(skipped))
        self.logger.info(
            f"Blocked {len(inserted)} of {len(days)} dates in "
            f"{start_day.isoformat()}..{end_day.isoformat()} ({len(skipped)} already blocked)"
        )
        return BlockRangeResult(inserted=inserted, skipped=skipped, requested=len(days))

    @BaseService.measure_operation("unblock_date")
    def unblock_date(self, blocked_date_id: str) -> BlockedDate:
        """
        Remove a blocked date by identifier.

        Returns:
            The removed record (detached), for callers that audit the change

        Raises:
            NotFoundException: No blocked date has this identifier
        """
        if not blocked_date_id:
            raise ValidationException("A blocked date id is required", code="ID_REQUIRED")

        with self.transaction():
            record = self.repository.get_by_id(blocked_date_id)
            if record is None or not self.repository.delete(blocked_date_id):
                raise NotFoundException(
                    "Blocked date not found",
                    code="BLOCKED_DATE_NOT_FOUND",
                    details={"id": blocked_date_id},
                )

        prometheus_metrics.record_blocked_dates_change("removed")
        self.logger.info(f"Unblocked date {record.date.isoformat()}")
        return record

    @BaseService.measure_operation("is_blocked")
    def is_blocked(self, day: Any) -> bool:
        """Return whether ``day`` is blocked."""
        return self.repository.exists_on(coerce_date(day))

    @BaseService.measure_operation("list_blocked")
    def list_blocked(self, start: Any = None, end: Any = None) -> list[BlockedDate]:
        """All blocked dates ascending by date, optionally limited to [start, end]."""
        start_day = coerce_date(start, "start") if start is not None else None
        end_day = coerce_date(end, "end") if end is not None else None
        return self.repository.list_between(start_day, end_day)
