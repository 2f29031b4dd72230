"""Event handlers for Orders domain events.

Handlers only emit structured log lines for now; email delivery and
payment follow-ups are owned by external services that tail these logs.
"""

from __future__ import annotations

from typing import Tuple, Type

import structlog

from modules.orders.events import OrderCancelled, OrderPlaced, OrderStatusChanged
from shared.domain.bus import IEventBus, IEventHandler
from shared.domain.events import DomainEvent

logger = structlog.get_logger(__name__)


class OrderPlacedHandler(IEventHandler[OrderPlaced]):
    def handle(self, event: OrderPlaced) -> None:
        logger.info("order.event.placed", **event.payload())


class OrderStatusChangedHandler(IEventHandler[OrderStatusChanged]):
    def handle(self, event: OrderStatusChanged) -> None:
        logger.info("order.event.status_changed", **event.payload())


class OrderCancelledHandler(IEventHandler[OrderCancelled]):
    """Announces the cancellation and the slot it gives back."""

    def handle(self, event: OrderCancelled) -> None:
        payload = event.payload()
        logger.info("order.event.cancelled", **payload)
        logger.info(
            "availability.slot_released",
            date=payload["delivery_date"],
            order_ref=event.order_ref,
        )


order_placed_handler = OrderPlacedHandler()
order_status_changed_handler = OrderStatusChangedHandler()
order_cancelled_handler = OrderCancelledHandler()

SUBSCRIPTIONS: Tuple[Tuple[Type[DomainEvent], IEventHandler], ...] = (
    (OrderPlaced, order_placed_handler),
    (OrderStatusChanged, order_status_changed_handler),
    (OrderCancelled, order_cancelled_handler),
)


def register(bus: IEventBus) -> None:
    """Subscribe every order handler; safe to call more than once."""
    for event_class, handler in SUBSCRIPTIONS:
        bus.subscribe(event_class, handler)
