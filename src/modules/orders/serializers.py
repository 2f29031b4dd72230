"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.availability.constants import DATE_FORMAT
from modules.orders.constants import OrderStatus
from modules.orders.models import Order, OrderStatusHistory

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class PlaceOrderSerializer(serializers.Serializer):
    """Validates a storefront order submission."""

    customer_name = serializers.CharField(max_length=200)
    customer_email = serializers.EmailField()
    customer_phone = serializers.CharField(
        max_length=40, required=False, default="", allow_blank=True
    )
    occasion = serializers.CharField(
        max_length=100, required=False, default="", allow_blank=True
    )
    product_type = serializers.CharField(
        max_length=100, required=False, default="", allow_blank=True
    )
    package_name = serializers.CharField(
        max_length=200, required=False, default="", allow_blank=True
    )
    package_price = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=0,
        required=False,
        allow_null=True,
        default=None,
    )
    description = serializers.CharField(required=False, default="", allow_blank=True)
    cake_text = serializers.CharField(
        max_length=200, required=False, default="", allow_blank=True
    )
    quantity = serializers.IntegerField(min_value=1, required=False, default=1)
    delivery_date = serializers.DateField(input_formats=[DATE_FORMAT])
    requires_payment = serializers.BooleanField(required=False, default=False)


class CancelByReferenceSerializer(serializers.Serializer):
    order_ref = serializers.CharField(max_length=20)
    email = serializers.EmailField()
    notes = serializers.CharField(required=False, default="", allow_blank=True)


class UpdateStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)
    notes = serializers.CharField(required=False, default="", allow_blank=True)


class CancelOrderSerializer(serializers.Serializer):
    notes = serializers.CharField(required=False, default="", allow_blank=True)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class StatusHistorySerializer(serializers.ModelSerializer):
    """Read serializer for order status history records."""

    user = serializers.StringRelatedField()

    class Meta:
        model = OrderStatusHistory
        fields = [
            "id",
            "old_status",
            "new_status",
            "user",
            "notes",
            "created_at",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for orders with their status history."""

    delivery_date = serializers.DateField(format=DATE_FORMAT, read_only=True)
    status_history = StatusHistorySerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_ref",
            "customer_name",
            "customer_email",
            "customer_phone",
            "occasion",
            "product_type",
            "package_name",
            "package_price",
            "description",
            "cake_text",
            "quantity",
            "delivery_date",
            "status",
            "created_at",
            "updated_at",
            "status_history",
        ]
        read_only_fields = fields


class OrderListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for the admin order table."""

    delivery_date = serializers.DateField(format=DATE_FORMAT, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_ref",
            "customer_name",
            "customer_email",
            "package_name",
            "quantity",
            "delivery_date",
            "status",
            "created_at",
        ]
        read_only_fields = fields


class OrderConfirmationSerializer(serializers.ModelSerializer):
    """What the customer sees after placing or cancelling an order."""

    delivery_date = serializers.DateField(format=DATE_FORMAT, read_only=True)

    class Meta:
        model = Order
        fields = ["order_ref", "delivery_date", "status", "created_at"]
        read_only_fields = fields


class StatusSummarySerializer(serializers.Serializer):
    counts = serializers.DictField(child=serializers.IntegerField())
    total = serializers.IntegerField()
