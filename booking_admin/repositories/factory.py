# booking_admin/repositories/factory.py
"""
Repository Factory

Provides centralized creation of repository instances,
ensuring consistent initialization and dependency injection.
"""

from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

# Avoid circular imports
if TYPE_CHECKING:
    from .audit_repository import AuditRepository
    from .blocked_date_repository import BlockedDateRepository


class RepositoryFactory:
    """
    Factory class for creating repository instances.

    Centralizes repository creation to ensure consistent initialization
    and makes it easy to swap implementations in tests.
    """

    @staticmethod
    def create_blocked_date_repository(db: Session) -> "BlockedDateRepository":
        """Create repository for the blocked dates calendar store."""
        from .blocked_date_repository import BlockedDateRepository

        return BlockedDateRepository(db)

    @staticmethod
    def create_audit_repository(db: Session) -> "AuditRepository":
        """Create repository for the audit_logs store."""
        from .audit_repository import AuditRepository

        return AuditRepository(db)
