# booking_admin/repositories/audit_repository.py
"""
Repository helpers for audit_logs persistence and querying.

The repository is append-only: it can write and list rows but offers no
update or delete.
"""

from __future__ import annotations

from datetime import datetime
import logging
from typing import Any, Optional

from sqlalchemy import Select, and_, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from booking_admin.core.exceptions import RepositoryException
from booking_admin.models.audit_log import AuditLog, normalize_table_name
from booking_admin.monitoring.prometheus_metrics import prometheus_metrics

logger = logging.getLogger(__name__)


class AuditRepository:
    """Persist and query audit trail entries."""

    def __init__(self, db: Session):
        self.db = db

    def write(self, audit: AuditLog) -> None:
        """Persist a new audit row inside the active transaction."""
        try:
            self.db.add(audit)
            self.db.flush()
        except SQLAlchemyError as e:
            raise RepositoryException(f"Failed to write audit log: {str(e)}")
        try:
            prometheus_metrics.record_audit_write(audit.table_name, audit.action)
        except Exception:
            logger.debug("Audit write metric not recorded", exc_info=True)

    def list(
        self,
        *,
        entity_type: Optional[str] = None,
        entity_id: Optional[str] = None,
        action: Optional[str] = None,
        user_id: Optional[str] = None,
        search: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[AuditLog], int]:
        """Return audit rows matching supplied filters ordered descending by timestamp."""
        limit = max(0, limit)
        offset = max(0, offset)

        conditions = _build_filters(entity_type, entity_id, action, user_id, search)
        if start is not None:
            conditions.append(AuditLog.created_at >= start)
        if end is not None:
            conditions.append(AuditLog.created_at <= end)

        stmt: Select[Any] = select(AuditLog).order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
        count_stmt = select(func.count()).select_from(AuditLog)

        if conditions:
            stmt = stmt.where(and_(*conditions))
            count_stmt = count_stmt.where(and_(*conditions))

        stmt = stmt.offset(offset).limit(limit)

        try:
            rows = list(self.db.execute(stmt).scalars().all())
            total = self.db.execute(count_stmt).scalar_one()
        except SQLAlchemyError as e:
            logger.error(f"Error listing audit logs: {str(e)}")
            raise RepositoryException(f"Failed to list audit logs: {str(e)}")

        return rows, int(total)


def _build_filters(
    entity_type: Optional[str],
    entity_id: Optional[str],
    action: Optional[str],
    user_id: Optional[str],
    search: Optional[str],
) -> list[Any]:
    clauses: list[Any] = []
    if entity_type:
        # The viewer filters on either the normalized table name or the raw label
        clauses.append(
            or_(
                AuditLog.table_name == normalize_table_name(entity_type),
                AuditLog.entity_type == entity_type,
            )
        )
    if entity_id:
        clauses.append(AuditLog.affected_entity_id == entity_id)
    if action:
        clauses.append(AuditLog.action == action)
    if user_id:
        clauses.append(AuditLog.user_id == user_id)
    if search and search.strip():
        pattern = f"%{search.strip().lower()}%"
        clauses.append(
            or_(
                func.lower(AuditLog.action).like(pattern),
                func.lower(AuditLog.user_id).like(pattern),
                func.lower(AuditLog.summary).like(pattern),
            )
        )
    return clauses
