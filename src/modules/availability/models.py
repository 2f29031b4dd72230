"""BlockedDate and DeliverySlot models.

- ``BlockedDate``: one row per date an operator closed to new orders.
  Re-blocking overwrites the reason (``date`` is unique).
- ``DeliverySlot``: one row per delivery date used purely as a lock
  anchor.  Writers that can add an active order for a date lock this row
  (``SELECT FOR UPDATE``) and recount under the lock, which serialises
  concurrent admissions for the same date without serialising the rest.
"""

from __future__ import annotations

from django.db import models

from modules.core.models import CalendarDayModel


class BlockedDate(CalendarDayModel):
    reason = models.CharField(max_length=255, blank=True, default="")

    class Meta(CalendarDayModel.Meta):
        db_table = "blocked_dates"

    def __str__(self) -> str:
        return f"{self.date:%Y-%m-%d} blocked ({self.reason or 'no reason'})"


class DeliverySlot(CalendarDayModel):
    class Meta(CalendarDayModel.Meta):
        db_table = "delivery_slots"

    def __str__(self) -> str:
        return f"slot {self.date:%Y-%m-%d}"
