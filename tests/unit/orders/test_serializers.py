"""Unit tests for order DRF serializers.

Covers:
- PlaceOrderSerializer: required fields, date format, defaults.
- CancelByReferenceSerializer and UpdateStatusSerializer validation.
- OrderSerializer / OrderConfirmationSerializer output shape.
"""

from __future__ import annotations

from datetime import date

import pytest

from modules.orders.constants import OrderStatus
from modules.orders.models import OrderStatusHistory
from modules.orders.serializers import (
    CancelByReferenceSerializer,
    OrderConfirmationSerializer,
    OrderListSerializer,
    OrderSerializer,
    PlaceOrderSerializer,
    UpdateStatusSerializer,
)

pytestmark = pytest.mark.unit


class TestPlaceOrderSerializer:
    def test_minimal_payload(self):
        serializer = PlaceOrderSerializer(
            data={
                "customer_name": "Ola",
                "customer_email": "ola@example.com",
                "delivery_date": "2025-06-01",
            }
        )
        assert serializer.is_valid(), serializer.errors
        data = serializer.validated_data
        assert data["delivery_date"] == date(2025, 6, 1)
        assert data["quantity"] == 1
        assert data["requires_payment"] is False
        assert data["package_price"] is None

    @pytest.mark.parametrize(
        "field", ["customer_name", "customer_email", "delivery_date"]
    )
    def test_required_fields(self, field):
        payload = {
            "customer_name": "Ola",
            "customer_email": "ola@example.com",
            "delivery_date": "2025-06-01",
        }
        payload.pop(field)
        serializer = PlaceOrderSerializer(data=payload)
        assert not serializer.is_valid()
        assert field in serializer.errors

    @pytest.mark.parametrize("value", ["01.06.2025", "June 1st", "2025-02-30"])
    def test_rejects_bad_dates(self, value):
        serializer = PlaceOrderSerializer(
            data={
                "customer_name": "Ola",
                "customer_email": "ola@example.com",
                "delivery_date": value,
            }
        )
        assert not serializer.is_valid()
        assert "delivery_date" in serializer.errors

    def test_rejects_zero_quantity(self):
        serializer = PlaceOrderSerializer(
            data={
                "customer_name": "Ola",
                "customer_email": "ola@example.com",
                "delivery_date": "2025-06-01",
                "quantity": 0,
            }
        )
        assert not serializer.is_valid()
        assert "quantity" in serializer.errors


class TestCommandSerializers:
    def test_cancel_by_reference_requires_email(self):
        serializer = CancelByReferenceSerializer(data={"order_ref": "AB-250520-K7QX"})
        assert not serializer.is_valid()
        assert "email" in serializer.errors

    def test_update_status_rejects_unknown_status(self):
        serializer = UpdateStatusSerializer(data={"status": "shipped"})
        assert not serializer.is_valid()
        assert "status" in serializer.errors

    def test_update_status_valid(self):
        serializer = UpdateStatusSerializer(data={"status": "confirmed"})
        assert serializer.is_valid(), serializer.errors
        assert serializer.validated_data["notes"] == ""


class TestOutputSerializers:
    def test_order_serializer_includes_history(self, make_order):
        order = make_order(date(2025, 6, 1), status=OrderStatus.PENDING)
        OrderStatusHistory.objects.create(order=order, new_status=OrderStatus.PENDING)

        data = OrderSerializer(order).data

        assert data["order_ref"] == order.order_ref
        assert data["delivery_date"] == "2025-06-01"
        assert len(data["status_history"]) == 1
        assert data["status_history"][0]["user"] is None

    def test_list_serializer_omits_history(self, make_order):
        data = OrderListSerializer(make_order(date(2025, 6, 1))).data
        assert "status_history" not in data
        assert data["status"] == "confirmed"

    def test_confirmation_fields(self, make_order):
        data = OrderConfirmationSerializer(make_order(date(2025, 6, 1))).data
        assert set(data) == {"order_ref", "delivery_date", "status", "created_at"}
