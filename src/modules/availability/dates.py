"""Calendar-date helpers for the availability boundary.

All comparisons are date-only.  Datetimes are normalised to the bakery's
civil date (``settings.TIME_ZONE``) before they reach the engine.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from typing import Any, Iterator

from django.utils import timezone

from modules.availability.constants import DATE_PATTERN
from modules.availability.exceptions import InvalidAvailabilityQuery

_ISO_DATE = re.compile(rf"^{DATE_PATTERN}$")


def to_calendar_date(value: Any) -> date:
    """Coerce *value* into a ``date``.

    Accepts ``date``, ``datetime`` (aware values are converted to local
    time first) and ``YYYY-MM-DD`` strings.

    Raises:
        InvalidAvailabilityQuery: for any other type or a malformed string.
    """
    if isinstance(value, datetime):
        if timezone.is_aware(value):
            return timezone.localdate(value)
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not _ISO_DATE.match(text):
            raise InvalidAvailabilityQuery(
                f"Invalid date {value!r}: expected YYYY-MM-DD."
            )
        try:
            return date.fromisoformat(text)
        except ValueError as exc:
            raise InvalidAvailabilityQuery(f"Invalid date {value!r}: {exc}.") from exc
    raise InvalidAvailabilityQuery(f"Unsupported date value {value!r}.")


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day in ``[start, end]`` in ascending order."""
    current = start
    while current <= end:
        yield current
        if current == end:
            return
        current += timedelta(days=1)


def today() -> date:
    """Current date in the bakery's civil calendar."""
    return timezone.localdate()
