# booking_admin/schemas/audit.py
"""Pydantic schemas for admin audit log responses."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict


class AuditLogView(BaseModel):
    """Single audit log entry."""

    id: str
    user_id: str
    action: str
    table_name: str
    entity_type: str
    affected_entity_id: Optional[str] = None
    summary: Optional[str] = None
    old_values: Dict[str, Any]
    new_values: Dict[str, Any]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AuditLogListResponse(BaseModel):
    """Paginated audit log response."""

    items: list[AuditLogView]
    total: int
    limit: int
    offset: int


__all__ = ["AuditLogView", "AuditLogListResponse"]
