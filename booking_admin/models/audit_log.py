# booking_admin/models/audit_log.py
"""
Audit trail model for privileged admin mutations.

Each row records who changed what: the acting admin, a free-text action label,
the entity that changed and the before/after values of only the fields that
differ. Rows are append-only; nothing in the application updates or deletes
them.
"""

from __future__ import annotations

from datetime import datetime, timezone
import re
from typing import Any, Mapping

from sqlalchemy import Column, DateTime, Index, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func
from sqlalchemy.types import JSON
import ulid

from booking_admin.database import Base

_WHITESPACE_RE = re.compile(r"\s+")


def _now_utc() -> datetime:
    """Return timezone-aware UTC timestamp for defaults."""
    return datetime.now(timezone.utc)


def normalize_table_name(entity_type: str) -> str:
    """Lower-case an entity type and join its words with underscores."""
    return _WHITESPACE_RE.sub("_", entity_type.strip().lower())


class AuditLog(Base):
    """Persistence model for audit trail entries."""

    __tablename__ = "audit_logs"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    user_id = Column(String(64), nullable=False)
    action = Column(String(50), nullable=False)
    table_name = Column(String(80), nullable=False)
    entity_type = Column(String(80), nullable=False)
    affected_entity_id = Column(String(64), nullable=True)
    summary = Column(Text, nullable=True)
    old_values = Column(
        JSONB(astext_type=Text()).with_variant(JSON(), "sqlite"),
        nullable=False,
        default=dict,
    )
    new_values = Column(
        JSONB(astext_type=Text()).with_variant(JSON(), "sqlite"),
        nullable=False,
        default=dict,
    )
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=_now_utc,
        server_default=func.now(),
    )

    __table_args__ = (
        Index("ix_audit_logs_created_at", "created_at"),
        Index("ix_audit_logs_user_id", "user_id", "created_at"),
        Index("ix_audit_logs_table_name", "table_name", "created_at"),
    )

    @classmethod
    def from_change(
        cls,
        *,
        user_id: str,
        action: str,
        entity_type: str,
        entity_id: Any | None,
        old_values: Mapping[str, Any],
        new_values: Mapping[str, Any],
        summary: str | None = None,
    ) -> "AuditLog":
        """Build an AuditLog row from an already-computed, JSON-ready diff."""
        return cls(
            user_id=str(user_id),
            action=action,
            table_name=normalize_table_name(entity_type),
            entity_type=entity_type,
            affected_entity_id=str(entity_id) if entity_id is not None else None,
            summary=summary,
            old_values=dict(old_values),
            new_values=dict(new_values),
            created_at=_now_utc(),
        )

    def __repr__(self) -> str:
        return f"<AuditLog {self.action} {self.table_name}:{self.affected_entity_id}>"
