# booking_admin/repositories/blocked_date_repository.py
"""
BlockedDateRepository - Calendar Store

Persists the set of blocked calendar days. Uniqueness per day is enforced by
the database constraint, not by this class; a losing concurrent insert
surfaces as DuplicateDateError.
"""

from datetime import date
import logging
from typing import List, Optional, Set, cast

from sqlalchemy import and_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import DuplicateDateError, RepositoryException
from ..models.blocked_date import BlockedDate

logger = logging.getLogger(__name__)


class BlockedDateRepository:
    """
    Repository for blocked date point/range queries and mutations.

    Every method reads or writes through the session; nothing is cached
    between calls.
    """

    def __init__(self, db: Session):
        """Initialize repository."""
        self.db = db
        self.logger = logging.getLogger(__name__)

    def get_by_id(self, blocked_date_id: str) -> Optional[BlockedDate]:
        try:
            return cast(
                Optional[BlockedDate],
                self.db.query(BlockedDate).filter(BlockedDate.id == blocked_date_id).first(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting blocked date {blocked_date_id}: {str(e)}")
            raise RepositoryException(f"Failed to get blocked date: {str(e)}")

    def get_by_date(self, day: date) -> Optional[BlockedDate]:
        try:
            return cast(
                Optional[BlockedDate],
                self.db.query(BlockedDate).filter(BlockedDate.date == day).first(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting blocked date for {day}: {str(e)}")
            raise RepositoryException(f"Failed to get blocked date: {str(e)}")

    def exists_on(self, day: date) -> bool:
        """Return True when ``day`` has a blocked_dates row."""
        try:
            return bool(
                self.db.query(BlockedDate.id).filter(BlockedDate.date == day).first() is not None
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error checking blocked date {day}: {str(e)}")
            raise RepositoryException(f"Failed to check blocked date: {str(e)}")

    def list_between(
        self, start: Optional[date] = None, end: Optional[date] = None
    ) -> List[BlockedDate]:
        """
        Get blocked dates ordered ascending by date.

        Args:
            start: Inclusive lower bound, or None for no bound
            end: Inclusive upper bound, or None for no bound

        Returns:
            List of blocked dates ordered by date
        """
        conditions = []
        if start is not None:
            conditions.append(BlockedDate.date >= start)
        if end is not None:
            conditions.append(BlockedDate.date <= end)

        try:
            query = self.db.query(BlockedDate)
            if conditions:
                query = query.filter(and_(*conditions))
            return cast(List[BlockedDate], query.order_by(BlockedDate.date).all())
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing blocked dates: {str(e)}")
            raise RepositoryException(f"Failed to list blocked dates: {str(e)}")

    def dates_between(self, start: date, end: date) -> Set[date]:
        """Return the set of blocked days within [start, end]."""
        try:
            rows = (
                self.db.query(BlockedDate.date)
                .filter(and_(BlockedDate.date >= start, BlockedDate.date <= end))
                .all()
            )
            return {row[0] for row in rows}
        except SQLAlchemyError as e:
            self.logger.error(f"Error reading blocked dates {start}..{end}: {str(e)}")
            raise RepositoryException(f"Failed to read blocked dates: {str(e)}")

    def create(self, day: date, reason: Optional[str] = None) -> BlockedDate:
        """
        Insert a blocked date.

        Args:
            day: The calendar day to block
            reason: Optional reason

        Returns:
            Created blocked date

        Raises:
            DuplicateDateError: If the day is already blocked
            RepositoryException: If creation fails for any other reason
        """
        try:
            blocked = BlockedDate(date=day, reason=reason)
            self.db.add(blocked)
            self.db.flush()
            return blocked

        except IntegrityError as e:
            self.logger.info(f"Blocked date {day} already exists: {str(e.orig)}")
            raise DuplicateDateError(f"Blocked date already exists: {day.isoformat()}")
        except SQLAlchemyError as e:
            self.logger.error(f"Error creating blocked date: {str(e)}")
            raise RepositoryException(f"Failed to create blocked date: {str(e)}")

    def delete(self, blocked_date_id: str) -> bool:
        """
        Delete a blocked date.

        Args:
            blocked_date_id: The blocked date ID

        Returns:
            True if deleted, False if not found
        """
        try:
            result = (
                self.db.query(BlockedDate).filter(BlockedDate.id == blocked_date_id).delete()
            )
            self.db.flush()
            return bool(result > 0)

        except SQLAlchemyError as e:
            self.logger.error(f"Error deleting blocked date: {str(e)}")
            raise RepositoryException(f"Failed to delete blocked date: {str(e)}")
