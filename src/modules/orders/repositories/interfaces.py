"""Order repository interface.

Extends ``IRepository[Order]`` with the Order Store contract the
Availability Engine and the order use cases consume: range queries over
active orders, insert, status updates with history, and idempotency-key
look-up.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional
from uuid import UUID

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.models import Order, OrderStatusHistory


@dataclass(frozen=True)
class OrderSummary:
    """The scheduling-relevant slice of an order."""

    delivery_date: date
    status: str


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root."""

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Order:
        """Insert a new order.

        ``data`` carries the model fields (``customer_name``,
        ``customer_email``, ``delivery_date``, ``status``...).  Capacity is
        not checked here; callers run the admission gate first, inside
        the same transaction.
        """

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order with a row-level lock."""

    @abstractmethod
    def get_by_reference(self, order_ref: str, for_update: bool = False) -> Optional[Order]:
        """Retrieve an order by its human-readable reference."""

    @abstractmethod
    def get_by_idempotency_key(self, key: str) -> Optional[Order]:
        """Retrieve an order by its idempotency key."""

    @abstractmethod
    def add_history(
        self,
        order_id: UUID,
        status: str,
        notes: str = "",
        old_status: Optional[str] = None,
        user: Any = None,
    ) -> OrderStatusHistory:
        """Record a status change in the order's audit trail."""

    @abstractmethod
    def list_delivery_summaries(
        self, start: date, end: date, statuses: Iterable[str]
    ) -> List[OrderSummary]:
        """Orders delivering within ``[start, end]`` whose status is in *statuses*."""

    @abstractmethod
    def count_active_on(self, day: date, statuses: Iterable[str]) -> int:
        """Number of orders delivering on *day* whose status is in *statuses*."""

    @abstractmethod
    def status_counts(self) -> Dict[str, int]:
        """Order count per status (statuses without orders are omitted)."""
