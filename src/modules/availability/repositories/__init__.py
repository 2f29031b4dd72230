"""Availability repositories package."""

from modules.availability.repositories.django_repository import (
    BlockedDateDjangoRepository,
    DeliverySlotDjangoRepository,
)
from modules.availability.repositories.interfaces import (
    IBlockedDateRepository,
    IDeliverySlotRepository,
)

__all__ = [
    "BlockedDateDjangoRepository",
    "DeliverySlotDjangoRepository",
    "IBlockedDateRepository",
    "IDeliverySlotRepository",
]
