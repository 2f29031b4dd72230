"""Availability DRF serializers.

Output field names follow the storefront's camelCase contract
(``orderCount``, ``isBlocked``); dates are ``YYYY-MM-DD`` strings.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.availability.constants import DATE_FORMAT, DateStatus
from modules.availability.models import BlockedDate


class DateAvailabilitySerializer(serializers.Serializer):
    date = serializers.DateField(format=DATE_FORMAT)
    status = serializers.ChoiceField(choices=DateStatus.choices)
    orderCount = serializers.IntegerField(source="order_count")
    isBlocked = serializers.BooleanField(source="is_blocked")


class AdmissibilitySerializer(serializers.Serializer):
    date = serializers.DateField(format=DATE_FORMAT)
    admissible = serializers.BooleanField()


class BlockDateSerializer(serializers.Serializer):
    reason = serializers.CharField(
        required=False, default="", allow_blank=True, max_length=255
    )


class BlockedDateSerializer(serializers.ModelSerializer):
    date = serializers.DateField(format=DATE_FORMAT, read_only=True)

    class Meta:
        model = BlockedDate
        fields = ["date", "reason", "created_at", "updated_at"]
        read_only_fields = fields


class CommandResultSerializer(serializers.Serializer):
    success = serializers.BooleanField()
