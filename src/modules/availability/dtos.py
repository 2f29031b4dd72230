"""Availability DTOs.

Framework-agnostic, immutable (``frozen=True``) Pydantic v2 models
returned by the Availability Engine.  ``DateAvailability`` is derived on
every query and never persisted.
"""

from __future__ import annotations

import datetime

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from modules.availability.constants import DateStatus


class DateAvailability(BaseModel):
    """Admission status of a single delivery date.

    ``is_blocked`` is kept next to ``status`` so callers can tell a manual
    block from a date that filled up through volume.
    """

    model_config = ConfigDict(frozen=True)

    date: datetime.date
    status: DateStatus
    order_count: int
    is_blocked: bool

    @field_validator("order_count")
    @classmethod
    def order_count_not_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("order_count must not be negative.")
        return v

    @model_validator(mode="after")
    def blocked_flag_matches_status(self):
        if self.is_blocked != (self.status == DateStatus.BLOCKED):
            raise ValueError("status is 'blocked' if and only if is_blocked is set.")
        return self

    @property
    def is_available(self) -> bool:
        return self.status == DateStatus.AVAILABLE
