"""Stateless availability projection.

Pure functions that turn "which active orders fall on which date" and
"which dates are blocked" into one ``DateAvailability`` per calendar day.
The service gathers the inputs; nothing here touches the database, so a
counter-backed implementation can replace the recount without changing
callers.
"""

from __future__ import annotations

from collections import Counter
from datetime import date
from typing import Iterable, List, Mapping

from modules.availability.constants import DateStatus
from modules.availability.dates import iter_days
from modules.availability.dtos import DateAvailability


def derive_status(order_count: int, is_blocked: bool, capacity: int) -> DateStatus:
    """Blocking wins over volume; otherwise full at or above capacity."""
    if is_blocked:
        return DateStatus.BLOCKED
    if order_count >= capacity:
        return DateStatus.FULL
    return DateStatus.AVAILABLE


def count_by_date(delivery_dates: Iterable[date]) -> Mapping[date, int]:
    return Counter(delivery_dates)


def project_window(
    start: date,
    end: date,
    order_counts: Mapping[date, int],
    blocked_dates: Iterable[date],
    capacity: int,
) -> List[DateAvailability]:
    """Emit one record per day in ``[start, end]``, ascending, without gaps.

    Days missing from *order_counts* get ``order_count = 0``.
    """
    blocked = set(blocked_dates)
    window: List[DateAvailability] = []
    for day in iter_days(start, end):
        count = order_counts.get(day, 0)
        is_blocked = day in blocked
        window.append(
            DateAvailability(
                date=day,
                status=derive_status(count, is_blocked, capacity),
                order_count=count,
                is_blocked=is_blocked,
            )
        )
    return window
