"""Abstract models shared by the bakery aggregates.

- ``BaseModel``: UUIDv7 primary key + ``created_at`` / ``updated_at``.
  UUIDv7 keys sort by creation time, so B-tree inserts stay append-only
  while identifiers remain opaque at the API boundary.
- ``CalendarDayModel``: one row per civil date (blocked dates, slot
  lock anchors).
"""

from __future__ import annotations

import uuid6
from django.db import models


class BaseModel(models.Model):
    id = models.UUIDField(
        primary_key=True,
        default=uuid6.uuid7,
        editable=False,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True

    def save(self, *args, **kwargs) -> None:
        # auto_now fields are skipped when update_fields omits them
        update_fields = kwargs.get("update_fields")
        if update_fields is not None:
            kwargs["update_fields"] = {*update_fields, "updated_at"}
        super().save(*args, **kwargs)


class CalendarDayModel(BaseModel):
    """A row keyed by a unique calendar date, listed in date order."""

    date = models.DateField(unique=True)

    class Meta:
        abstract = True
        ordering = ["date"]
