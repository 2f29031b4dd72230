"""Order domain constants.

Defines status choices, the order state machine and which statuses
occupy delivery-date capacity.
"""

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING_PAYMENT = "pending_payment", "Awaiting payment"
    PENDING = "pending", "New"
    CONFIRMED = "confirmed", "Confirmed"
    COMPLETED = "completed", "Completed"
    CANCELLED = "cancelled", "Cancelled"


VALID_TRANSITIONS: dict[str, set[str]] = {
    OrderStatus.PENDING_PAYMENT: {OrderStatus.PENDING, OrderStatus.CANCELLED},
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.COMPLETED, OrderStatus.CANCELLED},
    OrderStatus.COMPLETED: set(),
    OrderStatus.CANCELLED: set(),
}

TERMINAL_STATES: set[str] = {OrderStatus.COMPLETED, OrderStatus.CANCELLED}

# Unpaid checkouts and cancellations never hold a delivery slot.
CAPACITY_COUNTED_STATES: frozenset[str] = frozenset(
    {OrderStatus.PENDING, OrderStatus.CONFIRMED, OrderStatus.COMPLETED}
)

# Human-readable reference: AB-YYMMDD-XXXX, no I/O/0/1 to avoid misreading
ORDER_REF_PREFIX = "AB"
ORDER_REF_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
ORDER_REF_SUFFIX_LENGTH = 4
ORDER_REF_MAX_RETRIES = 5
