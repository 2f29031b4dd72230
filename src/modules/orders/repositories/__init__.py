"""Order repositories package."""

from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.repositories.interfaces import IOrderRepository, OrderSummary

__all__ = ["IOrderRepository", "OrderDjangoRepository", "OrderSummary"]
