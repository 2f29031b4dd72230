"""Availability domain exceptions.

Raised by the Availability Engine.  Views translate them into HTTP
responses; the Order service lets admission errors propagate so the
customer can be offered another date.
"""

from __future__ import annotations

from modules.availability.constants import UNAVAILABLE_MESSAGE


class InvalidAvailabilityQuery(Exception):
    """A date or date range failed validation before any store call."""


class AvailabilityUnavailable(Exception):
    """A store read failed; availability is unknown and must not be guessed."""


class DateUnavailable(Exception):
    """Base class for admission failures at write time."""

    code = "date_unavailable"

    def __init__(self, message: str = UNAVAILABLE_MESSAGE) -> None:
        super().__init__(message)


class CapacityExceeded(DateUnavailable):
    """The delivery date already holds the maximum number of active orders."""

    code = "capacity_exceeded"


class DeliveryDateBlocked(DateUnavailable):
    """The delivery date was closed to new orders by an operator."""

    code = "date_blocked"
