"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.  Admission failures (full or blocked
delivery date) are raised by the Availability Engine and live in
``modules.availability.exceptions``.
"""

from __future__ import annotations


class OrderNotFound(Exception):
    """The requested order does not exist (or the identity proof did not match)."""


class InvalidOrderStatus(Exception):
    """An invalid status transition was attempted."""


class DeliveryDateOutOfWindow(Exception):
    """The delivery date is today, in the past, or beyond the booking window."""


class ImmutableDeliveryDate(Exception):
    """An attempt was made to move an existing order to another date."""
