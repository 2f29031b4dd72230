"""Availability repository interfaces.

``IBlockedDateRepository`` is the Blocked-Date Store contract consumed by
the Availability Engine.  ``IDeliverySlotRepository`` exposes the per-date
row lock used to make "recount then insert" atomic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import TYPE_CHECKING, List

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.availability.models import BlockedDate, DeliverySlot


class IBlockedDateRepository(IRepository["BlockedDate"]):
    """Repository contract for manually blocked dates."""

    @abstractmethod
    def list_between(self, start: date, end: date) -> List[BlockedDate]:
        """Blocked dates within ``[start, end]``, ascending."""

    @abstractmethod
    def exists_on(self, day: date) -> bool:
        """Whether *day* is blocked."""

    @abstractmethod
    def upsert(self, day: date, reason: str = "") -> BlockedDate:
        """Block *day*, replacing the reason if it is already blocked."""

    @abstractmethod
    def delete_on(self, day: date) -> bool:
        """Unblock *day*.  Returns ``False`` when nothing was blocked."""


class IDeliverySlotRepository(ABC):
    """Contract for the per-date admission lock."""

    @abstractmethod
    def lock(self, day: date) -> DeliverySlot:
        """Create (if needed) and lock the slot row for *day*.

        Must be called inside a transaction; the lock is held until the
        outermost transaction commits or rolls back.
        """
