"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``PlaceOrderDTO``: input for a customer order submission.
- ``CancelByReferenceDTO``: input for customer self-cancellation.
- ``StatusSummaryDTO``: output for the admin dashboard counters.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from modules.orders.constants import OrderStatus

# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class PlaceOrderDTO(BaseModel):
    """Immutable DTO for order submissions.

    ``requires_payment`` selects the checkout path: ``True`` creates the
    order as ``pending_payment`` (it does not occupy capacity until the
    payment is confirmed), ``False`` creates it as ``pending``.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    customer_name: str
    customer_email: str
    customer_phone: str = ""
    occasion: str = ""
    product_type: str = ""
    package_name: str = ""
    package_price: Optional[Decimal] = None
    description: str = ""
    cake_text: str = ""
    quantity: int = 1
    delivery_date: date
    requires_payment: bool = False
    idempotency_key: Optional[str] = None

    @field_validator("customer_name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        if not v:
            raise ValueError("Customer name is required.")
        return v

    @field_validator("customer_email")
    @classmethod
    def normalise_email(cls, v: str) -> str:
        if "@" not in v:
            raise ValueError("A valid email address is required.")
        return v.lower()

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        return v

    @field_validator("package_price")
    @classmethod
    def price_not_negative(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is not None and v < 0:
            raise ValueError("Package price must not be negative.")
        return v

    @field_validator("idempotency_key")
    @classmethod
    def blank_key_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None

    @property
    def initial_status(self) -> OrderStatus:
        if self.requires_payment:
            return OrderStatus.PENDING_PAYMENT
        return OrderStatus.PENDING


class CancelByReferenceDTO(BaseModel):
    """Customer self-cancellation request: reference plus identity proof."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    order_ref: str
    email: str
    notes: str = ""

    @field_validator("order_ref")
    @classmethod
    def normalise_ref(cls, v: str) -> str:
        return v.upper()

    @field_validator("email")
    @classmethod
    def normalise_email(cls, v: str) -> str:
        return v.lower()


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


class StatusSummaryDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    counts: Dict[str, int]
    total: int
