"""Availability service layer (the Availability Engine).

Answers "what is the admission status of each date in a window" and "is
this specific date currently admissible", applies and removes manual
blocks, and provides the write-time admission gate used by order
placement.

Every entry point reads capacity and the counted statuses from the same
``BookingPolicy`` instance, so the calendar, the single-date check and
the hard guard cannot disagree.

Failure policy:
- Invalid input raises ``InvalidAvailabilityQuery`` before any store call.
- Store read failures raise ``AvailabilityUnavailable``; availability is
  never reported from partial data.
- ``block_date`` / ``unblock_date`` report store failures as ``False``.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Any, List, Optional, Tuple

import structlog
from django.db import DatabaseError, transaction

from modules.availability.dates import to_calendar_date, today
from modules.availability.dtos import DateAvailability
from modules.availability.exceptions import (
    AvailabilityUnavailable,
    CapacityExceeded,
    DeliveryDateBlocked,
    InvalidAvailabilityQuery,
)
from modules.availability.policy import BookingPolicy
from modules.availability.projection import count_by_date, project_window

if TYPE_CHECKING:
    from modules.availability.models import BlockedDate
    from modules.availability.repositories.interfaces import (
        IBlockedDateRepository,
        IDeliverySlotRepository,
    )
    from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class AvailabilityService:
    """Application service for delivery-date availability.

    Receives repositories and the booking policy via constructor
    injection (DIP).  Holds no state of its own: every query recomputes
    from the Order Store and the Blocked-Date Store.
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        blocked_date_repository: IBlockedDateRepository,
        slot_repository: IDeliverySlotRepository,
        policy: Optional[BookingPolicy] = None,
    ) -> None:
        self._order_repo = order_repository
        self._blocked_repo = blocked_date_repository
        self._slot_repo = slot_repository
        self._policy = policy or BookingPolicy.from_settings()

    @property
    def policy(self) -> BookingPolicy:
        return self._policy

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def compute_window_availability(self, start: Any, end: Any) -> List[DateAvailability]:
        """One ``DateAvailability`` per day in ``[start, end]``, ascending.

        Raises:
            InvalidAvailabilityQuery: malformed bounds, ``end < start`` or a
                span longer than ``policy.max_window_days``.
            AvailabilityUnavailable: either store read failed.
        """
        window_start, window_end = self._validate_window(start, end)
        log = logger.bind(
            window_start=window_start.isoformat(), window_end=window_end.isoformat()
        )

        try:
            summaries = self._order_repo.list_delivery_summaries(
                window_start, window_end, self._policy.counted_statuses
            )
            blocked = self._blocked_repo.list_between(window_start, window_end)
        except DatabaseError as exc:
            log.error("availability.store_failure", operation="window", error=str(exc))
            raise AvailabilityUnavailable("Could not load availability.") from exc

        counts = count_by_date(
            s.delivery_date
            for s in summaries
            if self._policy.counts_toward_capacity(s.status)
        )
        window = project_window(
            window_start,
            window_end,
            counts,
            (b.date for b in blocked),
            self._policy.capacity_per_day,
        )
        log.info(
            "availability.window_computed",
            days=len(window),
            active_orders=sum(counts.values()),
            blocked_days=len(blocked),
        )
        return window

    def get_window_availability(
        self, start: Any = None, end: Any = None
    ) -> List[DateAvailability]:
        """Like ``compute_window_availability`` with optional bounds.

        A missing ``start`` defaults to today; a missing ``end`` defaults
        to ``start + booking_window_days``.
        """
        if start is None:
            start = today()
        window_start = to_calendar_date(start)
        if end is None:
            _, end = self._policy.default_window(window_start)
        return self.compute_window_availability(window_start, end)

    def is_date_admissible(self, day: Any) -> bool:
        """Blocked first (short-circuit), then active count below capacity.

        Does not apply the booking window, so it agrees with the status
        reported by ``compute_window_availability`` for any date.

        Raises:
            InvalidAvailabilityQuery: malformed date.
            AvailabilityUnavailable: a store read failed.
        """
        target = to_calendar_date(day)
        try:
            if self._blocked_repo.exists_on(target):
                return False
            count = self._order_repo.count_active_on(
                target, self._policy.counted_statuses
            )
        except DatabaseError as exc:
            logger.error(
                "availability.store_failure",
                operation="admissible",
                date=target.isoformat(),
                error=str(exc),
            )
            raise AvailabilityUnavailable("Could not load availability.") from exc
        return count < self._policy.capacity_per_day

    def list_blocked_dates(self) -> List[BlockedDate]:
        """Every blocked date, ascending.

        Raises:
            AvailabilityUnavailable: the store read failed.
        """
        try:
            return self._blocked_repo.list()
        except DatabaseError as exc:
            logger.error(
                "availability.store_failure", operation="list_blocked", error=str(exc)
            )
            raise AvailabilityUnavailable("Could not load blocked dates.") from exc

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def block_date(self, day: Any, reason: Optional[str] = "") -> bool:
        """Close *day* to new orders.  Re-blocking replaces the reason.

        Existing bookings on *day* are left untouched.  Returns ``False``
        when the store write fails.
        """
        target = to_calendar_date(day)
        reason = (reason or "").strip()
        try:
            with transaction.atomic():
                self._slot_repo.lock(target)
                self._blocked_repo.upsert(target, reason)
        except DatabaseError as exc:
            logger.error(
                "availability.block_failed", date=target.isoformat(), error=str(exc)
            )
            return False
        logger.info("availability.date_blocked", date=target.isoformat(), reason=reason)
        return True

    def unblock_date(self, day: Any) -> bool:
        """Reopen *day*.  Unblocking a date that is not blocked is a no-op.

        Returns ``False`` when the store write fails.
        """
        target = to_calendar_date(day)
        try:
            with transaction.atomic():
                self._slot_repo.lock(target)
                removed = self._blocked_repo.delete_on(target)
        except DatabaseError as exc:
            logger.error(
                "availability.unblock_failed", date=target.isoformat(), error=str(exc)
            )
            return False
        logger.info(
            "availability.date_unblocked", date=target.isoformat(), removed=removed
        )
        return True

    @transaction.atomic
    def reserve_capacity(self, day: Any) -> None:
        """Admission gate for writes that add an active order on *day*.

        Locks the date's slot row, then re-reads the blocked flag and
        recounts active orders under the lock.  The caller must insert (or
        activate) the order inside the same outer transaction; the lock
        is held until that transaction ends.

        Raises:
            DeliveryDateBlocked: *day* is blocked.
            CapacityExceeded: *day* already holds ``capacity_per_day`` orders.
        """
        target = to_calendar_date(day)
        log = logger.bind(date=target.isoformat())

        self._slot_repo.lock(target)

        if self._blocked_repo.exists_on(target):
            log.warning("order.date_blocked")
            raise DeliveryDateBlocked()

        count = self._order_repo.count_active_on(target, self._policy.counted_statuses)
        if count >= self._policy.capacity_per_day:
            log.warning(
                "order.capacity_exceeded",
                order_count=count,
                capacity=self._policy.capacity_per_day,
            )
            raise CapacityExceeded()

        log.info("availability.slot_reserved", order_count=count + 1)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def is_bookable(self, day: Any) -> bool:
        """Whether *day* falls inside the customer booking window."""
        return self._policy.is_bookable(to_calendar_date(day), today())

    def _validate_window(self, start: Any, end: Any) -> Tuple[date, date]:
        window_start = to_calendar_date(start)
        window_end = to_calendar_date(end)
        if window_end < window_start:
            raise InvalidAvailabilityQuery(
                f"Window end {window_end.isoformat()} is before start "
                f"{window_start.isoformat()}."
            )
        if self._policy.window_too_long(window_start, window_end):
            raise InvalidAvailabilityQuery(
                f"Window may span at most {self._policy.max_window_days} days."
            )
        return window_start, window_end
