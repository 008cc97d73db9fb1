"""
Database models for the admin integrity backend.

- BlockedDate: calendar days unavailable for booking
- AuditLog: append-only field-level diffs of privileged mutations
"""

from .audit_log import AuditLog
from .blocked_date import BlockedDate

__all__ = [
    "AuditLog",
    "BlockedDate",
]
