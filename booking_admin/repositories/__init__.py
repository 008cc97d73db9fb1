"""
Repository layer for the admin integrity backend.

Repositories own all SQLAlchemy access for one table and translate driver
errors into RepositoryException.
"""

from .audit_repository import AuditRepository
from .blocked_date_repository import BlockedDateRepository
from .factory import RepositoryFactory

__all__ = [
    "AuditRepository",
    "BlockedDateRepository",
    "RepositoryFactory",
]
