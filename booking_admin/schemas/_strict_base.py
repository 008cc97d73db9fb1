"""Strict request base for admin write payloads."""

from pydantic import BaseModel, ConfigDict


class StrictRequestModel(BaseModel):
    """Base for request bodies; unknown fields are rejected, assignments re-validated."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)
