# booking_admin/routes/admin_blocked_dates.py
"""
Blocked dates admin routes.

Endpoints:
    GET /api/admin/blocked-dates - List blocked dates (optional start/end window)
    GET /api/admin/blocked-dates/check - Is a single date blocked
    POST /api/admin/blocked-dates - Block one date
    POST /api/admin/blocked-dates/range - Block every free date of a range
    DELETE /api/admin/blocked-dates/{blocked_date_id} - Unblock a date

Mutations are audited after they commit. Audit failures are not reported to
the admin; AuditService logs and counts them.
"""

from datetime import date
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..api.dependencies.auth import require_actor_id
from ..api.dependencies.services import (
    get_audit_service,
    get_availability_calendar_service,
)
from ..core.exceptions import DomainException, RepositoryException, raise_503_if_pool_exhaustion
from ..schemas.blocked_dates import (
    BlockedDateCheckResponse,
    BlockedDateCreate,
    BlockedDateRangeCreate,
    BlockedDateRangeResponse,
    BlockedDateResponse,
    UnblockDateResponse,
)
from ..services.audit_service import AuditService
from ..services.availability_calendar_service import (
    AvailabilityCalendarService,
    blocked_date_snapshot,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/blocked-dates", tags=["admin-blocked-dates"])

AUDIT_ENTITY_TYPE = "Blocked Dates"


def _internal_error(action: str, exc: Exception) -> HTTPException:
    if isinstance(exc, RepositoryException):
        raise_503_if_pool_exhaustion(exc)
    logger.error(f"Unexpected error {action}: {str(exc)}")
    return HTTPException(status_code=500, detail="Internal server error")


@router.get("", response_model=List[BlockedDateResponse])
def list_blocked_dates(
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    calendar_service: AvailabilityCalendarService = Depends(get_availability_calendar_service),
) -> List[BlockedDateResponse]:
    """List blocked dates in ascending date order."""
    try:
        records = calendar_service.list_blocked(start=start, end=end)
        return [BlockedDateResponse.model_validate(record) for record in records]
    except DomainException as e:
        raise e.to_http_exception()
    except Exception as e:
        raise _internal_error("listing blocked dates", e)


@router.get("/check", response_model=BlockedDateCheckResponse)
def check_blocked_date(
    day: date = Query(..., alias="date"),
    calendar_service: AvailabilityCalendarService = Depends(get_availability_calendar_service),
) -> BlockedDateCheckResponse:
    """Report whether a single date is blocked."""
    try:
        return BlockedDateCheckResponse(date=day, blocked=calendar_service.is_blocked(day))
    except DomainException as e:
        raise e.to_http_exception()
    except Exception as e:
        raise _internal_error("checking blocked date", e)


@router.post("", response_model=BlockedDateResponse, status_code=status.HTTP_201_CREATED)
def block_date(
    payload: BlockedDateCreate,
    actor_id: str = Depends(require_actor_id),
    calendar_service: AvailabilityCalendarService = Depends(get_availability_calendar_service),
    audit_service: AuditService = Depends(get_audit_service),
) -> BlockedDateResponse:
    """Block a single date."""
    try:
        record = calendar_service.block_date(payload.date, payload.reason)
    except DomainException as e:
        raise e.to_http_exception()
    except Exception as e:
        raise _internal_error("blocking date", e)

    audit_service.record_change(
        actor_id,
        "create",
        AUDIT_ENTITY_TYPE,
        record.id,
        before={},
        after=blocked_date_snapshot(record),
        summary=f"Blocked {record.date.isoformat()}",
    )
    return BlockedDateResponse.model_validate(record)


@router.post("/range", response_model=BlockedDateRangeResponse)
def block_date_range(
    payload: BlockedDateRangeCreate,
    actor_id: str = Depends(require_actor_id),
    calendar_service: AvailabilityCalendarService = Depends(get_availability_calendar_service),
    audit_service: AuditService = Depends(get_audit_service),
) -> BlockedDateRangeResponse:
    """Block every date of an inclusive range that is not already blocked."""
    try:
        result = calendar_service.block_range(payload.start, payload.end, payload.reason)
    except DomainException as e:
        raise e.to_http_exception()
    except Exception as e:
        raise _internal_error("blocking date range", e)

    if result.status == "noop":
        message = "All selected dates are already blocked"
    else:
        message = f"{result.count} date(s) blocked successfully"
        audit_service.record_change(
            actor_id,
            "block_range",
            AUDIT_ENTITY_TYPE,
            None,
            before={},
            after={
                "dates": result.inserted_dates,
                "reason": result.inserted[0].reason,
            },
            summary=message,
        )

    return BlockedDateRangeResponse(
        status=result.status,
        count=result.count,
        requested=result.requested,
        blocked=[BlockedDateResponse.model_validate(record) for record in result.inserted],
        skipped=result.skipped,
        message=message,
    )


@router.delete("/{blocked_date_id}", response_model=UnblockDateResponse)
def unblock_date(
    blocked_date_id: str,
    actor_id: str = Depends(require_actor_id),
    calendar_service: AvailabilityCalendarService = Depends(get_availability_calendar_service),
    audit_service: AuditService = Depends(get_audit_service),
) -> UnblockDateResponse:
    """Unblock a date by id."""
    try:
        record = calendar_service.unblock_date(blocked_date_id)
    except DomainException as e:
        raise e.to_http_exception()
    except Exception as e:
        raise _internal_error("unblocking date", e)

    audit_service.record_change(
        actor_id,
        "delete",
        AUDIT_ENTITY_TYPE,
        blocked_date_id,
        before=blocked_date_snapshot(record),
        after={},
        summary=f"Unblocked {record.date.isoformat()}",
    )
    return UnblockDateResponse(id=blocked_date_id, date=record.date)
