# booking_admin/schemas/blocked_dates.py
"""Request and response schemas for the blocked dates admin API."""

from datetime import date as DateType, datetime as DateTimeType
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from ._strict_base import StrictRequestModel


class BlockedDateCreate(StrictRequestModel):
    """Schema for blocking a single date."""

    date: DateType
    reason: Optional[str] = Field(None, max_length=255)


class BlockedDateRangeCreate(StrictRequestModel):
    """Schema for blocking an inclusive date range. ``end`` defaults to ``start``."""

    start: DateType
    end: Optional[DateType] = None
    reason: Optional[str] = Field(None, max_length=255)


class BlockedDateResponse(BaseModel):
    """Response schema for blocked dates."""

    id: str
    date: DateType
    reason: Optional[str] = None
    created_at: DateTimeType

    model_config = ConfigDict(from_attributes=True)


class BlockedDateRangeResponse(BaseModel):
    """Outcome of a range block: new rows plus the days that were already blocked."""

    status: Literal["blocked", "noop"]
    count: int
    requested: int
    blocked: List[BlockedDateResponse]
    skipped: List[DateType]
    message: str


class BlockedDateCheckResponse(BaseModel):
    date: DateType
    blocked: bool


class UnblockDateResponse(BaseModel):
    id: str
    date: DateType
    message: str = "Date unblocked successfully"
