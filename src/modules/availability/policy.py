"""Booking window policy.

A small value object holding the operational knobs of the engine: how
many active orders one delivery date may hold, how far ahead customers
may book, and which order statuses occupy capacity.  Every admission
decision (window display, single-date check, write-time guard) reads
the same instance, so the rules cannot drift apart.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import FrozenSet, Tuple

from django.conf import settings

from modules.availability.constants import (
    DEFAULT_BOOKING_WINDOW_DAYS,
    DEFAULT_CAPACITY_PER_DAY,
    DEFAULT_MAX_WINDOW_DAYS,
)
from modules.orders.constants import CAPACITY_COUNTED_STATES


@dataclass(frozen=True)
class BookingPolicy:
    capacity_per_day: int = DEFAULT_CAPACITY_PER_DAY
    booking_window_days: int = DEFAULT_BOOKING_WINDOW_DAYS
    counted_statuses: FrozenSet[str] = field(
        default_factory=lambda: frozenset(CAPACITY_COUNTED_STATES)
    )
    max_window_days: int = DEFAULT_MAX_WINDOW_DAYS

    def __post_init__(self) -> None:
        if self.capacity_per_day < 0:
            raise ValueError("capacity_per_day must not be negative.")
        if self.booking_window_days < 0:
            raise ValueError("booking_window_days must not be negative.")
        # The default window (today .. today+N) must itself be queryable
        if self.max_window_days <= self.booking_window_days:
            raise ValueError("max_window_days must exceed booking_window_days.")
        object.__setattr__(
            self, "counted_statuses", frozenset(str(s) for s in self.counted_statuses)
        )

    @classmethod
    def from_settings(cls) -> BookingPolicy:
        """Build the policy from ``BAKERY_*`` Django settings."""
        return cls(
            capacity_per_day=getattr(
                settings, "BAKERY_CAPACITY_PER_DAY", DEFAULT_CAPACITY_PER_DAY
            ),
            booking_window_days=getattr(
                settings, "BAKERY_BOOKING_WINDOW_DAYS", DEFAULT_BOOKING_WINDOW_DAYS
            ),
            max_window_days=getattr(
                settings, "BAKERY_MAX_WINDOW_DAYS", DEFAULT_MAX_WINDOW_DAYS
            ),
        )

    def counts_toward_capacity(self, status: str) -> bool:
        return str(status) in self.counted_statuses

    def default_window(self, today: date) -> Tuple[date, date]:
        """Window shown when the caller gives no bounds: today .. today+N.

        The end is clamped to ``date.max``.
        """
        span = min(self.booking_window_days, (date.max - today).days)
        return today, today + timedelta(days=span)

    def window_too_long(self, start: date, end: date) -> bool:
        """Whether ``[start, end]`` spans more than ``max_window_days`` days."""
        return (end - start).days + 1 > self.max_window_days

    def is_bookable(self, day: date, today: date) -> bool:
        """Whether a new order may target *day*.

        Today itself is not bookable; the last bookable day is
        ``today + booking_window_days``.
        """
        return today < day and (day - today).days <= self.booking_window_days
