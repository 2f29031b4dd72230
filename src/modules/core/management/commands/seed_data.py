from __future__ import annotations

import random
from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from modules.availability.dates import today
from modules.availability.exceptions import DateUnavailable
from modules.availability.views import build_availability_service
from modules.orders.constants import OrderStatus
from modules.orders.dtos import PlaceOrderDTO
from modules.orders.exceptions import DeliveryDateOutOfWindow
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService

CUSTOMERS = [
    ("Ingrid Hansen", "ingrid@example.com"),
    ("Ola Nordmann", "ola@example.com"),
    ("Kari Berg", "kari@example.com"),
    ("Lars Johansen", "lars@example.com"),
    ("Sofie Olsen", "sofie@example.com"),
    ("Emil Larsen", "emil@example.com"),
]

PACKAGES = [
    ("Birthday", "Layer cake", "Small celebration", Decimal("450.00")),
    ("Wedding", "Tiered cake", "Three tiers", Decimal("2400.00")),
    ("Baptism", "Sheet cake", "Family pack", Decimal("650.00")),
    ("Anniversary", "Cupcakes", "Box of twelve", Decimal("380.00")),
]


class Command(BaseCommand):
    help = "Seed database with realistic development data."

    def add_arguments(self, parser):
        parser.add_argument("--orders", type=int, default=40)
        parser.add_argument("--seed", type=int, default=42)

    def handle(self, *args, **options):
        random.seed(options["seed"])
        self.stdout.write("Seeding development data...")

        availability = build_availability_service()
        service = OrderService(
            order_repository=OrderDjangoRepository(),
            availability_service=availability,
        )

        users_created = self._seed_users()
        blocked = self._seed_blocked_dates(availability)
        placed, refused = self._seed_orders(service, availability, options["orders"])

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={users_created}, "
                f"blocked_dates={blocked}, "
                f"orders={placed}, "
                f"refused={refused}"
            )
        )

    def _seed_users(self) -> int:
        User = get_user_model()
        created = 0
        if not User.objects.filter(username="admin").exists():
            User.objects.create_superuser("admin", password="admin123")
            created += 1
        if not User.objects.filter(username="baker").exists():
            User.objects.create_user("baker", password="baker123", is_staff=True)
            created += 1
        return created

    def _seed_blocked_dates(self, availability) -> int:
        self.stdout.write("Blocking dates...")
        start = today()
        blocked = 0
        for offset, reason in ((7, "Staff holiday"), (14, "Oven maintenance")):
            if availability.block_date(start + timedelta(days=offset), reason):
                blocked += 1
        self.stdout.write(self.style.SUCCESS("Blocking dates... Done!"))
        return blocked

    def _seed_orders(self, service: OrderService, availability, count: int):
        self.stdout.write("Creating orders...")
        window = availability.policy.booking_window_days
        placed = refused = 0

        for _ in range(count):
            name, email = random.choice(CUSTOMERS)
            occasion, product_type, package, price = random.choice(PACKAGES)
            dto = PlaceOrderDTO(
                customer_name=name,
                customer_email=email,
                occasion=occasion,
                product_type=product_type,
                package_name=package,
                package_price=price,
                quantity=random.randint(1, 2),
                delivery_date=today() + timedelta(days=random.randint(1, min(window, 21))),
                requires_payment=random.random() < 0.2,
            )
            try:
                order = service.place_order(dto)
            except (DateUnavailable, DeliveryDateOutOfWindow):
                refused += 1
                continue
            placed += 1

            roll = random.random()
            if order.status == OrderStatus.PENDING and roll < 0.3:
                service.update_status(order.id, OrderStatus.CONFIRMED, "Seeded")
            elif order.status == OrderStatus.PENDING and roll < 0.4:
                service.cancel_order(order.id, "Seeded cancellation")

        self.stdout.write(self.style.SUCCESS("Creating orders... Done!"))
        return placed, refused
