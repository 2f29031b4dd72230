"""Order and OrderStatusHistory models.

Business rules implemented:
- Invalid status transitions rejected (enforced at service layer).
- Each status change generates a history record.
- History contains old/new status, timestamp, user, and notes.
- ``delivery_date`` is fixed at creation; cancellation does not clear it.
- Idempotency via ``idempotency_key`` unique constraint.
- Order reference auto-generated as human-readable identifier.
"""

from __future__ import annotations

import secrets
from typing import Any

import structlog
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from modules.core.models import BaseModel
from modules.orders.constants import (
    ORDER_REF_ALPHABET,
    ORDER_REF_MAX_RETRIES,
    ORDER_REF_PREFIX,
    ORDER_REF_SUFFIX_LENGTH,
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    OrderStatus,
)
from modules.orders.exceptions import ImmutableDeliveryDate
from shared.domain.events import DomainEventMixin

logger = structlog.get_logger(__name__)


class Order(DomainEventMixin, BaseModel):
    """Order aggregate root.

    ``order_ref`` is a human-readable identifier auto-generated on first
    save (format: ``AB-YYMMDD-XXXX``).  Customers quote it, together with
    their email, to cancel an order.  The UUIDv7 ``id`` is used for all
    internal references and admin API lookups.

    ``idempotency_key`` is nullable: only orders submitted with an
    ``Idempotency-Key`` header carry one.
    """

    order_ref: models.CharField = models.CharField(
        max_length=20, unique=True, editable=False
    )
    customer_name: models.CharField = models.CharField(max_length=200)
    customer_email: models.EmailField = models.EmailField()
    customer_phone: models.CharField = models.CharField(
        max_length=40, blank=True, default=""
    )
    occasion: models.CharField = models.CharField(
        max_length=100, blank=True, default=""
    )
    product_type: models.CharField = models.CharField(
        max_length=100, blank=True, default=""
    )
    package_name: models.CharField = models.CharField(
        max_length=200, blank=True, default=""
    )
    package_price: models.DecimalField = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
    )
    description: models.TextField = models.TextField(blank=True, default="")
    cake_text: models.CharField = models.CharField(
        max_length=200, blank=True, default=""
    )
    quantity: models.PositiveIntegerField = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
    )
    delivery_date: models.DateField = models.DateField()
    status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )
    idempotency_key: models.CharField = models.CharField(
        max_length=255,
        unique=True,
        null=True,
        blank=True,
    )

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["delivery_date", "status"],
                name="orders_delivery_status_idx",
            ),
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
        ]

    # ------------------------------------------------------------------
    # State Machine helpers
    # ------------------------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        """Return ``True`` if the order is in a terminal state."""
        return self.status in TERMINAL_STATES

    def can_transition_to(self, new_status: str) -> bool:
        """Check whether transitioning to *new_status* is valid."""
        allowed = VALID_TRANSITIONS.get(self.status, set())
        return new_status in allowed

    # ------------------------------------------------------------------
    # Order reference generation
    # ------------------------------------------------------------------

    @staticmethod
    def generate_order_ref() -> str:
        """Generate a human-readable reference: ``AB-YYMMDD-XXXX``."""
        today = timezone.localdate()
        suffix = "".join(
            secrets.choice(ORDER_REF_ALPHABET) for _ in range(ORDER_REF_SUFFIX_LENGTH)
        )
        return f"{ORDER_REF_PREFIX}-{today:%y%m%d}-{suffix}"

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    @classmethod
    def from_db(cls, db, field_names, values):
        instance = super().from_db(db, field_names, values)
        instance._loaded_delivery_date = instance.__dict__.get("delivery_date")
        return instance

    def save(self, *args: Any, **kwargs: Any) -> None:
        loaded = getattr(self, "_loaded_delivery_date", None)
        if loaded is not None and self.delivery_date != loaded:
            raise ImmutableDeliveryDate(
                f"Order {self.order_ref} delivery date is fixed at {loaded:%Y-%m-%d}."
            )
        if not self.order_ref:
            for attempt in range(ORDER_REF_MAX_RETRIES):
                candidate = self.generate_order_ref()
                if not Order.objects.filter(order_ref=candidate).exists():
                    self.order_ref = candidate
                    break
                logger.warning("order.ref_collision", attempt=attempt + 1)
            else:
                raise RuntimeError(
                    f"Failed to generate unique order_ref after "
                    f"{ORDER_REF_MAX_RETRIES} attempts"
                )
        super().save(*args, **kwargs)
        self._loaded_delivery_date = self.delivery_date

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.order_ref} ({self.status}, {self.delivery_date})"


class OrderStatusHistory(BaseModel):
    """Append-only audit trail for order status transitions.

    Each record captures a single status change with the responsible user
    and optional notes (e.g. cancellation reason).  ``user`` is nullable:
    ``None`` means the change came from the customer or the system.
    """

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="status_history",
    )
    old_status: models.CharField = models.CharField(  # noqa: DJ01
        max_length=20,
        choices=OrderStatus.choices,
        null=True,
        blank=True,
    )
    new_status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
    )
    user: models.ForeignKey = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
    )
    notes: models.TextField = models.TextField(blank=True, default="")

    class Meta:
        db_table = "order_status_history"
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["order", "-created_at"],
                name="osh_order_created_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.order} : {self.old_status} -> {self.new_status}"
