# booking_admin/routes/admin_audit.py
"""Admin audit log routes."""

from datetime import datetime
import logging
from time import monotonic
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query

from ..api.dependencies.auth import require_actor_id
from ..api.dependencies.services import get_audit_service
from ..core.exceptions import RepositoryException, raise_503_if_pool_exhaustion
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..schemas.audit import AuditLogListResponse, AuditLogView
from ..services.audit_service import AuditService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/audit-logs", tags=["admin-audit"])


@router.get("", response_model=AuditLogListResponse)
def list_audit_logs(
    entity_type: Annotated[str | None, Query(max_length=80)] = None,
    entity_id: Annotated[str | None, Query(max_length=64)] = None,
    action: Annotated[str | None, Query(max_length=50)] = None,
    user_id: Annotated[str | None, Query(max_length=64)] = None,
    search: Annotated[str | None, Query(max_length=100)] = None,
    since_days: Annotated[int | None, Query(ge=1, le=3650)] = None,
    start: Annotated[datetime | None, Query()] = None,
    end: Annotated[datetime | None, Query()] = None,
    limit: Annotated[int, Query(ge=1, le=200)] = 20,
    offset: Annotated[int, Query(ge=0)] = 0,
    _: str = Depends(require_actor_id),
    audit_service: AuditService = Depends(get_audit_service),
) -> AuditLogListResponse:
    """List audit log entries, newest first, with filtering and pagination."""
    start_time = monotonic()
    try:
        items, total = audit_service.list_records(
            entity_type=entity_type,
            entity_id=entity_id,
            action=action,
            user_id=user_id,
            search=search,
            since_days=since_days,
            start=start,
            end=end,
            limit=limit,
            offset=offset,
        )
    except RepositoryException as e:
        raise_503_if_pool_exhaustion(e)
        logger.error(f"Unexpected error listing audit logs: {str(e)}")
        raise HTTPException(status_code=500, detail="Internal server error")

    views = [AuditLogView.model_validate(item) for item in items]

    duration = monotonic() - start_time
    try:
        prometheus_metrics.record_audit_read(duration)
    except Exception:
        logger.debug("Audit read metric not recorded", exc_info=True)

    return AuditLogListResponse(items=views, total=total, limit=limit, offset=offset)
