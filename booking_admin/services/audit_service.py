"""Service for recording field-level audit trail entries."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
import logging
from typing import Any, Literal, Mapping, Optional

from sqlalchemy.orm import Session

from booking_admin.core.config import settings
from booking_admin.core.exceptions import AuditWriteFailure
from booking_admin.core.request_context import get_request_id
from booking_admin.models.audit_log import AuditLog
from booking_admin.monitoring.prometheus_metrics import prometheus_metrics
from booking_admin.repositories.factory import RepositoryFactory
from booking_admin.services.audit_diff import (
    SnapshotDiff,
    diff_snapshots,
    generate_field_summary,
)
from booking_admin.services.base import BaseService
from booking_admin.services.identity import (
    IdentityProvider,
    get_current_actor_id,
    resolve_actor_id,
)

logger = logging.getLogger(__name__)

WriteStatus = Literal["recorded", "failed"]
FailureReason = Literal["no_actor", "persistence"]


@dataclass(frozen=True)
class AuditWriteResult:
    """What happened to one audit write. Never raised, only returned."""

    status: WriteStatus
    diff: SnapshotDiff
    record: Optional[AuditLog] = None
    reason: Optional[FailureReason] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == "recorded"


class AuditService(BaseService):
    """
    Append-only audit recorder.

    Callers invoke record_change after their own mutation has committed. A
    failed audit write is logged, counted and reported in the returned
    AuditWriteResult, but it is never raised: auditing must not block or undo
    the business operation that triggered it.
    """

    def __init__(self, db: Session, identity_provider: IdentityProvider | None = None):
        super().__init__(db)
        self.repository = RepositoryFactory.create_audit_repository(db)
        self.identity_provider = identity_provider or get_current_actor_id

    @BaseService.measure_operation("record_change")
    def record_change(
        self,
        actor: Any | None,
        action: str,
        entity_type: str,
        entity_id: Any | None = None,
        before: Mapping[str, Any] | None = None,
        after: Mapping[str, Any] | None = None,
        *,
        summary: str | None = None,
    ) -> AuditWriteResult:
        """
        Diff ``before`` against ``after`` and append one audit record.

        A record is written even when nothing changed; the action label alone
        can be the meaningful part (e.g. "create").

        Args:
            actor: Actor id, user-like object, or None to ask the identity provider
            action: Free-text label ("create", "update", "delete", ...)
            entity_type: Logical category of the changed resource
            entity_id: Identifier of the changed resource, if any
            before: Field map prior to the mutation
            after: Field map after the mutation
            summary: Human-readable summary; generated from the changed fields if omitted
        """
        diff = diff_snapshots(before, after)

        try:
            actor_id = self._resolve_actor(actor)
            if actor_id is None:
                raise AuditWriteFailure(
                    "No authenticated user for audit log",
                    code="AUDIT_NO_ACTOR",
                    details={"action": action, "entity_type": entity_type},
                )

            old_values, new_values = diff.to_payload()
            entry = AuditLog.from_change(
                user_id=actor_id,
                action=action,
                entity_type=entity_type,
                entity_id=entity_id,
                old_values=old_values,
                new_values=new_values,
                summary=(
                    summary
                    if summary is not None
                    else generate_field_summary(entity_type, diff.changed_fields)
                ),
            )
            with self.transaction():
                self.repository.write(entry)
        except AuditWriteFailure as failure:
            return self._failed(diff, "no_actor", failure)
        except Exception as exc:
            failure = AuditWriteFailure(
                f"Failed to log audit event: {exc}",
                code="AUDIT_PERSISTENCE_FAILED",
                details={"action": action, "entity_type": entity_type},
            )
            return self._failed(diff, "persistence", failure, exc_info=True)

        return AuditWriteResult(status="recorded", diff=diff, record=entry)

    def _resolve_actor(self, actor: Any | None) -> Optional[str]:
        if actor is not None:
            return resolve_actor_id(actor)
        return resolve_actor_id(self.identity_provider())

    def _failed(
        self,
        diff: SnapshotDiff,
        reason: FailureReason,
        failure: AuditWriteFailure,
        *,
        exc_info: bool = False,
    ) -> AuditWriteResult:
        self.logger.error(
            f"{failure.message} [request_id={get_request_id('none')}]",
            extra={"event": "audit_write_failed", "code": failure.code, **failure.details},
            exc_info=exc_info,
        )
        try:
            prometheus_metrics.record_audit_write_failure(reason)
        except Exception:
            logger.debug("Audit failure metric not recorded", exc_info=True)
        return AuditWriteResult(status="failed", diff=diff, reason=reason, error=failure.message)

    @BaseService.measure_operation("list_records")
    def list_records(
        self,
        *,
        entity_type: Optional[str] = None,
        entity_id: Optional[str] = None,
        action: Optional[str] = None,
        user_id: Optional[str] = None,
        search: Optional[str] = None,
        since_days: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: Optional[int] = None,
        offset: int = 0,
        now: Optional[datetime] = None,
    ) -> tuple[list[AuditLog], int]:
        """Newest-first page of audit records plus the total matching count."""
        page_size = limit if limit is not None else settings.audit_page_size
        page_size = max(1, min(page_size, settings.audit_max_page_size))

        if since_days is not None:
            cutoff = (now or datetime.now(timezone.utc)) - timedelta(days=since_days)
            start = max(start, cutoff) if start is not None else cutoff

        return self.repository.list(
            entity_type=entity_type,
            entity_id=entity_id,
            action=action,
            user_id=user_id,
            search=search,
            start=start,
            end=end,
            limit=page_size,
            offset=offset,
        )
