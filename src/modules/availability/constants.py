"""Availability domain constants.

Defines the per-date admission status and the default booking policy
values (overridable through Django settings).
"""

from django.db import models


class DateStatus(models.TextChoices):
    AVAILABLE = "available", "Available"
    FULL = "full", "Full"
    BLOCKED = "blocked", "Blocked"


DEFAULT_CAPACITY_PER_DAY = 3
DEFAULT_BOOKING_WINDOW_DAYS = 60
# Longest calendar span (in days, both ends included) one query may request
DEFAULT_MAX_WINDOW_DAYS = 366

# Boundary format for calendar dates (timezone-naive civil date)
DATE_FORMAT = "%Y-%m-%d"
DATE_PATTERN = r"\d{4}-\d{2}-\d{2}"

UNAVAILABLE_MESSAGE = "This date just became unavailable, please pick another."
