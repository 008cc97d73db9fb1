# booking_admin/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

This module provides factory functions that create service instances
with their required dependencies properly injected.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from ...services.audit_service import AuditService
from ...services.availability_calendar_service import AvailabilityCalendarService
from .database import get_db


def get_availability_calendar_service(
    db: Session = Depends(get_db),
) -> AvailabilityCalendarService:
    """Get the blocked-date calendar service bound to the request session."""
    return AvailabilityCalendarService(db)


def get_audit_service(db: Session = Depends(get_db)) -> AuditService:
    """Get the audit recorder bound to the request session."""
    return AuditService(db)
