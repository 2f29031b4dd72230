"""Unit tests for order DTOs.

Covers:
- PlaceOrderDTO normalisation and validation.
- Initial status derived from ``requires_payment``.
- CancelByReferenceDTO normalisation.
- Immutability (frozen=True).
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from modules.orders.constants import OrderStatus
from modules.orders.dtos import CancelByReferenceDTO, PlaceOrderDTO, StatusSummaryDTO

pytestmark = pytest.mark.unit


def _place(**overrides) -> PlaceOrderDTO:
    data = {
        "customer_name": "Ola Nordmann",
        "customer_email": "ola@example.com",
        "delivery_date": date(2025, 6, 1),
    }
    data.update(overrides)
    return PlaceOrderDTO(**data)


class TestPlaceOrderDTO:
    def test_defaults(self):
        dto = _place()
        assert dto.quantity == 1
        assert dto.package_price is None
        assert dto.requires_payment is False
        assert dto.idempotency_key is None

    def test_strips_and_lowercases_email(self):
        dto = _place(customer_name="  Ola  ", customer_email=" Ola@Example.COM ")
        assert dto.customer_name == "Ola"
        assert dto.customer_email == "ola@example.com"

    def test_parses_iso_date(self):
        assert _place(delivery_date="2025-06-01").delivery_date == date(2025, 6, 1)

    @pytest.mark.parametrize(
        "field, value",
        [
            ("customer_name", "   "),
            ("customer_email", "not-an-email"),
            ("quantity", 0),
            ("package_price", Decimal("-1")),
            ("delivery_date", "01/06/2025"),
        ],
    )
    def test_rejects_invalid(self, field, value):
        with pytest.raises(ValidationError):
            _place(**{field: value})

    def test_blank_idempotency_key_becomes_none(self):
        assert _place(idempotency_key="  ").idempotency_key is None

    def test_initial_status(self):
        assert _place().initial_status == OrderStatus.PENDING
        assert _place(requires_payment=True).initial_status == (
            OrderStatus.PENDING_PAYMENT
        )

    def test_frozen(self):
        dto = _place()
        with pytest.raises(ValidationError):
            dto.quantity = 2


class TestCancelByReferenceDTO:
    def test_normalises_reference_and_email(self):
        dto = CancelByReferenceDTO(order_ref=" ab-250520-k7qx ", email="Kari@Example.com")
        assert dto.order_ref == "AB-250520-K7QX"
        assert dto.email == "kari@example.com"
        assert dto.notes == ""


class TestStatusSummaryDTO:
    def test_dump(self):
        dto = StatusSummaryDTO(counts={"pending": 2}, total=2)
        assert dto.model_dump() == {"counts": {"pending": 2}, "total": 2}
