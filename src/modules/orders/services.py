"""Order service layer (Use Cases).

Orchestrates order placement, status management and cancellation.  All
write operations are atomic: the service defines the unit-of-work
boundary and the availability admission gate runs inside it.

Business rules enforced:
- A new order's delivery date must lie in the booking window
  (tomorrow .. today + booking_window_days).
- At most ``capacity_per_day`` active orders per delivery date, checked
  under the date's slot lock immediately before the insert.
- Blocked dates accept no new active orders.
- Status transitions validated against the state machine.
- Entering the active set (``pending_payment -> pending``) re-runs the
  admission gate.
- History recorded on every status change.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional
from uuid import UUID

import structlog
from django.db import transaction

from modules.orders.constants import OrderStatus
from modules.orders.dtos import StatusSummaryDTO
from modules.orders.events import OrderCancelled, OrderPlaced, OrderStatusChanged
from modules.orders.exceptions import (
    DeliveryDateOutOfWindow,
    InvalidOrderStatus,
    OrderNotFound,
)

if TYPE_CHECKING:
    from modules.availability.services import AvailabilityService
    from modules.orders.dtos import CancelByReferenceDTO, PlaceOrderDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Receives the order repository and the availability service via
    constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        availability_service: AvailabilityService,
    ) -> None:
        self._order_repo = order_repository
        self._availability = availability_service

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def place_order(self, dto: PlaceOrderDTO) -> Order:
        """Accept a customer order for ``dto.delivery_date``.

        Steps:
        1. Return the existing order when the idempotency key was seen.
        2. Reject dates outside the booking window.
        3. For an active initial status, lock the date and recount
           (``AvailabilityService.reserve_capacity``).
        4. Insert the order, record history, queue ``OrderPlaced``.

        Raises:
            DeliveryDateOutOfWindow: today, past, or beyond the window.
            DeliveryDateBlocked: the date was blocked.
            CapacityExceeded: the date is full.
        """
        log = logger.bind(delivery_date=dto.delivery_date.isoformat())
        log.info("order.placement_started")

        if dto.idempotency_key:
            existing = self._order_repo.get_by_idempotency_key(dto.idempotency_key)
            if existing:
                log.info(
                    "order.idempotency_hit",
                    order_id=str(existing.id),
                    key=dto.idempotency_key,
                )
                return existing

        if not self._availability.is_bookable(dto.delivery_date):
            log.warning("order.out_of_window")
            raise DeliveryDateOutOfWindow(
                f"Delivery date {dto.delivery_date.isoformat()} is outside the "
                f"booking window."
            )

        status = dto.initial_status
        if self._availability.policy.counts_toward_capacity(status):
            self._availability.reserve_capacity(dto.delivery_date)

        order = self._order_repo.create(
            {
                "customer_name": dto.customer_name,
                "customer_email": dto.customer_email,
                "customer_phone": dto.customer_phone,
                "occasion": dto.occasion,
                "product_type": dto.product_type,
                "package_name": dto.package_name,
                "package_price": dto.package_price,
                "description": dto.description,
                "cake_text": dto.cake_text,
                "quantity": dto.quantity,
                "delivery_date": dto.delivery_date,
                "status": status,
                "idempotency_key": dto.idempotency_key,
            }
        )

        order.add_domain_event(
            OrderPlaced(
                aggregate_id=order.id,
                order_ref=order.order_ref,
                delivery_date=order.delivery_date,
                status=order.status,
            )
        )
        self._order_repo.save(order)

        self._order_repo.add_history(
            order_id=order.id,
            status=status,
            notes="Order placed",
        )

        log.info("order.placed", order_id=str(order.id), status=status)
        return self._order_repo.get_by_id(str(order.id)) or order

    @transaction.atomic
    def update_status(
        self,
        order_id: UUID,
        new_status: str,
        notes: str = "",
        user: Any = None,
    ) -> Order:
        """Transition an order to a new status.

        Acquires a row-level lock on the order before validating the
        transition.  When the new status occupies capacity and the old one
        did not, the admission gate runs for the order's delivery date.

        Raises:
            OrderNotFound: order does not exist.
            InvalidOrderStatus: transition is not allowed.
            CapacityExceeded / DeliveryDateBlocked: activation refused.
        """
        order = self._order_repo.get_for_update(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return self._transition(order, new_status, notes=notes, user=user)

    @transaction.atomic
    def cancel_order(self, order_id: UUID, notes: str = "", user: Any = None) -> Order:
        """Admin cancellation.  The delivery date is kept on the order.

        Raises:
            OrderNotFound: order does not exist.
            InvalidOrderStatus: order is already completed or cancelled.
        """
        order = self._order_repo.get_for_update(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return self._cancel(order, notes=notes or "Order cancelled", user=user)

    @transaction.atomic
    def cancel_by_reference(self, dto: CancelByReferenceDTO) -> Order:
        """Customer self-cancellation with identity proof.

        Unknown references and email mismatches both raise
        ``OrderNotFound`` so that references cannot be probed.

        Raises:
            OrderNotFound: no order with that reference and email.
            InvalidOrderStatus: order is already completed or cancelled.
        """
        order = self._order_repo.get_by_reference(dto.order_ref, for_update=True)
        if not order or order.customer_email.lower() != dto.email:
            logger.warning("order.self_cancel_rejected", order_ref=dto.order_ref)
            raise OrderNotFound(f"Order {dto.order_ref} not found.")
        return self._cancel(
            order,
            notes=dto.notes or "Cancelled by customer",
            by_customer=True,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: str) -> Order:
        """Retrieve a single order by ID.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def get_by_idempotency_key(self, key: str) -> Optional[Order]:
        return self._order_repo.get_by_idempotency_key(key)

    def list_orders(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        return self._order_repo.list(filters)

    def status_summary(self) -> StatusSummaryDTO:
        """Order count per status, every status present, plus the total."""
        stored = self._order_repo.status_counts()
        counts = {status.value: stored.get(status.value, 0) for status in OrderStatus}
        return StatusSummaryDTO(counts=counts, total=sum(counts.values()))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _transition(
        self,
        order: Order,
        new_status: str,
        notes: str = "",
        user: Any = None,
    ) -> Order:
        log = logger.bind(
            order_id=str(order.id),
            current_status=order.status,
            new_status=new_status,
        )

        if not order.can_transition_to(new_status):
            log.warning("order.invalid_transition")
            raise InvalidOrderStatus(
                f"Cannot transition from {order.status} to {new_status}."
            )

        policy = self._availability.policy
        if policy.counts_toward_capacity(new_status) and not policy.counts_toward_capacity(
            order.status
        ):
            self._availability.reserve_capacity(order.delivery_date)

        old_status = order.status
        order.status = new_status
        order.add_domain_event(
            OrderStatusChanged(
                aggregate_id=order.id, old_status=old_status, new_status=new_status
            )
        )
        self._order_repo.save(order)

        self._order_repo.add_history(
            order_id=order.id,
            status=new_status,
            notes=notes,
            old_status=old_status,
            user=user,
        )

        log.info("order.status_updated")
        return self._order_repo.get_by_id(str(order.id)) or order

    def _cancel(
        self,
        order: Order,
        notes: str,
        user: Any = None,
        by_customer: bool = False,
    ) -> Order:
        log = logger.bind(order_id=str(order.id), current_status=order.status)

        if not order.can_transition_to(OrderStatus.CANCELLED):
            log.warning("order.cancel_not_allowed")
            raise InvalidOrderStatus(f"Cannot cancel order in status {order.status}.")

        old_status = order.status
        order.status = OrderStatus.CANCELLED
        order.add_domain_event(
            OrderCancelled(
                aggregate_id=order.id,
                order_ref=order.order_ref,
                delivery_date=order.delivery_date,
                by_customer=by_customer,
            )
        )
        self._order_repo.save(order)

        self._order_repo.add_history(
            order_id=order.id,
            status=OrderStatus.CANCELLED,
            notes=notes,
            old_status=old_status,
            user=user,
        )

        log.info("order.cancelled", by_customer=by_customer)
        return self._order_repo.get_by_id(str(order.id)) or order
