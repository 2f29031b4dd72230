from __future__ import annotations

from datetime import date, datetime, timezone as dt_timezone

import pytest
from freezegun import freeze_time

from modules.availability.dates import iter_days, to_calendar_date, today
from modules.availability.exceptions import InvalidAvailabilityQuery

pytestmark = pytest.mark.unit


class TestToCalendarDate:
    def test_accepts_date(self):
        assert to_calendar_date(date(2025, 6, 1)) == date(2025, 6, 1)

    def test_accepts_iso_string(self):
        assert to_calendar_date("2025-06-01") == date(2025, 6, 1)

    def test_strips_whitespace(self):
        assert to_calendar_date(" 2025-06-01 ") == date(2025, 6, 1)

    def test_naive_datetime_drops_time(self):
        assert to_calendar_date(datetime(2025, 6, 1, 23, 59)) == date(2025, 6, 1)

    def test_aware_datetime_uses_bakery_calendar(self):
        # 22:30 UTC on 1 June is already 2 June in Oslo (UTC+2 in summer)
        value = datetime(2025, 6, 1, 22, 30, tzinfo=dt_timezone.utc)
        assert to_calendar_date(value) == date(2025, 6, 2)

    @pytest.mark.parametrize(
        "value",
        ["2025-6-1", "01/06/2025", "2025-02-30", "2025-13-01", "", "tomorrow"],
    )
    def test_rejects_malformed_strings(self, value):
        with pytest.raises(InvalidAvailabilityQuery):
            to_calendar_date(value)

    @pytest.mark.parametrize("value", [None, 20250601, 1.5, ["2025-06-01"]])
    def test_rejects_other_types(self, value):
        with pytest.raises(InvalidAvailabilityQuery):
            to_calendar_date(value)


class TestIterDays:
    def test_inclusive_range(self):
        days = list(iter_days(date(2025, 2, 27), date(2025, 3, 1)))
        assert days == [date(2025, 2, 27), date(2025, 2, 28), date(2025, 3, 1)]

    def test_empty_when_end_before_start(self):
        assert list(iter_days(date(2025, 3, 2), date(2025, 3, 1))) == []

    def test_stops_at_last_representable_day(self):
        assert list(iter_days(date(9999, 12, 30), date.max)) == [
            date(9999, 12, 30),
            date.max,
        ]


class TestToday:
    @freeze_time("2025-05-20 22:30:00")
    def test_today_follows_bakery_timezone_not_utc(self):
        # Still 20 May in UTC, already 21 May in Oslo
        assert today() == date(2025, 5, 21)
