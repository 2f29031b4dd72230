"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.  Domain
events collected on an order are handed to the event bus through
``transaction.on_commit`` when the order is saved, so a rolled-back use
case never announces anything.

Concurrency control on status updates uses ``select_for_update()``;
concurrency control on capacity lives in the availability module's
``DeliverySlot`` lock.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Count

from modules.orders.models import Order, OrderStatusHistory
from modules.orders.repositories.interfaces import IOrderRepository, OrderSummary
from shared.infrastructure.bus import event_bus

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order Store backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    @transaction.atomic
    def create(self, data: Dict[str, Any]) -> Order:
        order = Order(**data)
        order.save()
        logger.info(
            "order.inserted",
            order_id=str(order.id),
            order_ref=order.order_ref,
            delivery_date=order.delivery_date.isoformat(),
            status=order.status,
        )
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with its status history prefetched.

        Returns ``None`` for non-existent or malformed IDs.
        """
        try:
            return (
                Order.objects.prefetch_related("status_history")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Order]:
        try:
            return Order.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_by_reference(self, order_ref: str, for_update: bool = False) -> Optional[Order]:
        queryset = Order.objects.all()
        if for_update:
            queryset = queryset.select_for_update()
        return queryset.filter(order_ref=order_ref).first()

    def get_by_idempotency_key(self, key: str) -> Optional[Order]:
        return (
            Order.objects.prefetch_related("status_history")
            .filter(idempotency_key=key)
            .first()
        )

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """List orders, newest first.

        ``filters`` are passed straight to ``QuerySet.filter``; e.g.
        ``{"status": "pending", "delivery_date__gte": date(2025, 6, 1)}``.
        """
        queryset = Order.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def list_delivery_summaries(
        self, start: date, end: date, statuses: Iterable[str]
    ) -> List[OrderSummary]:
        rows = Order.objects.filter(
            delivery_date__gte=start,
            delivery_date__lte=end,
            status__in=list(statuses),
        ).values_list("delivery_date", "status")
        return [OrderSummary(delivery_date=day, status=status) for day, status in rows]

    def count_active_on(self, day: date, statuses: Iterable[str]) -> int:
        return Order.objects.filter(delivery_date=day, status__in=list(statuses)).count()

    def status_counts(self) -> Dict[str, int]:
        rows = (
            Order.objects.order_by()
            .values("status")
            .annotate(total=Count("id"))
            .values_list("status", "total")
        )
        return dict(rows)

    # ------------------------------------------------------------------
    # Save (IRepository contract)
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        """Persist an order and schedule its pending events for after commit."""
        entity.save()

        events = entity.pull_domain_events()
        if events:
            transaction.on_commit(
                lambda: event_bus.publish_all(events), robust=True
            )

        logger.info("order.saved", order_id=str(entity.id), event_count=len(events))
        return entity

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    @transaction.atomic
    def add_history(
        self,
        order_id: UUID,
        status: str,
        notes: str = "",
        old_status: Optional[str] = None,
        user: Any = None,
    ) -> OrderStatusHistory:
        history = OrderStatusHistory(
            order_id=order_id,
            old_status=old_status,
            new_status=status,
            notes=notes,
            user=user if getattr(user, "is_authenticated", False) else None,
        )
        history.save()

        logger.info(
            "order.history_added",
            order_id=str(order_id),
            old_status=old_status,
            new_status=status,
        )
        return history
