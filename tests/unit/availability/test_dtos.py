from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from modules.availability.constants import DateStatus
from modules.availability.dtos import DateAvailability

pytestmark = pytest.mark.unit


class TestDateAvailability:
    def test_valid_record(self):
        record = DateAvailability(
            date=date(2025, 6, 1),
            status=DateStatus.AVAILABLE,
            order_count=1,
            is_blocked=False,
        )
        assert record.is_available

    def test_is_frozen(self):
        record = DateAvailability(
            date=date(2025, 6, 1), status="full", order_count=3, is_blocked=False
        )
        with pytest.raises(ValidationError):
            record.order_count = 0

    def test_negative_count_rejected(self):
        with pytest.raises(ValidationError):
            DateAvailability(
                date=date(2025, 6, 1), status="available", order_count=-1, is_blocked=False
            )

    def test_blocked_flag_without_blocked_status_rejected(self):
        with pytest.raises(ValidationError):
            DateAvailability(
                date=date(2025, 6, 1), status="full", order_count=3, is_blocked=True
            )

    def test_blocked_status_without_flag_rejected(self):
        with pytest.raises(ValidationError):
            DateAvailability(
                date=date(2025, 6, 1), status="blocked", order_count=0, is_blocked=False
            )
