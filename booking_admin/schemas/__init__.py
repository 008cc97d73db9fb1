"""Pydantic request/response schemas."""

from .audit import AuditLogListResponse, AuditLogView
from .blocked_dates import (
    BlockedDateCheckResponse,
    BlockedDateCreate,
    BlockedDateRangeCreate,
    BlockedDateRangeResponse,
    BlockedDateResponse,
    UnblockDateResponse,
)

__all__ = [
    "AuditLogListResponse",
    "AuditLogView",
    "BlockedDateCheckResponse",
    "BlockedDateCreate",
    "BlockedDateRangeCreate",
    "BlockedDateRangeResponse",
    "BlockedDateResponse",
    "UnblockDateResponse",
]
