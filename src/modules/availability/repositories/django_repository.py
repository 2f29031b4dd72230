"""Django ORM implementation of the availability repositories.

Satisfies ``IBlockedDateRepository`` and ``IDeliverySlotRepository``
using Django's QuerySet API.  Store errors (``DatabaseError``) are not
caught here: the service decides whether a failure fails closed
(queries) or degrades to a ``False`` result (block/unblock).
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.availability.models import BlockedDate, DeliverySlot
from modules.availability.repositories.interfaces import (
    IBlockedDateRepository,
    IDeliverySlotRepository,
)

logger = structlog.get_logger(__name__)


class BlockedDateDjangoRepository(IBlockedDateRepository):
    """Concrete Blocked-Date Store backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[BlockedDate]:
        try:
            return BlockedDate.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[BlockedDate]:
        """List blocked dates ascending, with optional ORM look-ups.

        Example::

            {"date__gte": date(2025, 6, 1)}
        """
        queryset = BlockedDate.objects.all().order_by("date")
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @transaction.atomic
    def save(self, entity: BlockedDate) -> BlockedDate:
        entity.save()
        logger.info("blocked_date.saved", date=entity.date.isoformat())
        return entity

    def list_between(self, start: date, end: date) -> List[BlockedDate]:
        return list(
            BlockedDate.objects.filter(date__gte=start, date__lte=end).order_by("date")
        )

    def exists_on(self, day: date) -> bool:
        return BlockedDate.objects.filter(date=day).exists()

    @transaction.atomic
    def upsert(self, day: date, reason: str = "") -> BlockedDate:
        blocked, created = BlockedDate.objects.update_or_create(
            date=day, defaults={"reason": reason}
        )
        logger.info(
            "blocked_date.upserted", date=day.isoformat(), created=created
        )
        return blocked

    @transaction.atomic
    def delete_on(self, day: date) -> bool:
        deleted, _ = BlockedDate.objects.filter(date=day).delete()
        logger.info("blocked_date.deleted", date=day.isoformat(), deleted=deleted)
        return deleted > 0


class DeliverySlotDjangoRepository(IDeliverySlotRepository):
    """Row-lock anchor per delivery date."""

    def lock(self, day: date) -> DeliverySlot:
        # get_or_create retries the read on a unique-key race, so two
        # first-time writers for the same date end up on the same row.
        slot, _ = DeliverySlot.objects.get_or_create(date=day)
        return DeliverySlot.objects.select_for_update().get(pk=slot.pk)
