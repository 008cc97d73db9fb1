"""FastAPI dependency providers."""

from .auth import get_current_actor_id, require_actor_id
from .database import get_db
from .services import get_audit_service, get_availability_calendar_service

__all__ = [
    "get_audit_service",
    "get_availability_calendar_service",
    "get_current_actor_id",
    "get_db",
    "require_actor_id",
]
