"""Domain events for the Orders bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderPlaced(DomainEvent):
    """A customer order was accepted for a delivery date."""

    order_ref: str = ""
    delivery_date: Optional[date] = None
    status: str = ""


@dataclass(frozen=True)
class OrderStatusChanged(DomainEvent):
    old_status: str = ""
    new_status: str = ""


@dataclass(frozen=True)
class OrderCancelled(DomainEvent):
    """An order was cancelled; its delivery date frees up on the next read."""

    order_ref: str = ""
    delivery_date: Optional[date] = None
    by_customer: bool = False
