from datetime import date

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from freezegun import freeze_time
from rest_framework.test import APIClient

# Importing the URLconf loads every view and DRF throttling. It must happen
# before any test freezes time: SimpleRateThrottle.timer binds time.time at
# import, and a frozen clock captured there outlives the freeze.
import config.urls  # noqa: F401
from modules.availability.policy import BookingPolicy
from modules.availability.repositories.django_repository import (
    BlockedDateDjangoRepository,
    DeliverySlotDjangoRepository,
)
from modules.availability.services import AvailabilityService
from modules.orders.constants import OrderStatus
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService

# Civil "today" for every frozen test: 10:00 UTC is 12:00 in Oslo
FROZEN_NOW = "2025-05-20 10:00:00"
FROZEN_TODAY = date(2025, 5, 20)


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _clear_cache():
    """Throttle counters live in the cache; start every test from zero."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture()
def frozen_today():
    with freeze_time(FROZEN_NOW):
        yield FROZEN_TODAY


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def staff_user():
    return get_user_model().objects.create_user(
        username="baker", password="baker-pass-123", is_staff=True
    )


@pytest.fixture()
def admin_client(staff_user):
    client = APIClient()
    client.force_authenticate(user=staff_user)
    return client


@pytest.fixture()
def customer_client():
    """Authenticated but not staff: must not reach the admin console."""
    client = APIClient()
    user = get_user_model().objects.create_user(
        username="customer", password="customer-pass-123"
    )
    client.force_authenticate(user=user)
    return client


@pytest.fixture()
def policy():
    return BookingPolicy(capacity_per_day=3, booking_window_days=60)


@pytest.fixture()
def availability_service(policy):
    return AvailabilityService(
        order_repository=OrderDjangoRepository(),
        blocked_date_repository=BlockedDateDjangoRepository(),
        slot_repository=DeliverySlotDjangoRepository(),
        policy=policy,
    )


@pytest.fixture()
def order_service(availability_service):
    return OrderService(
        order_repository=OrderDjangoRepository(),
        availability_service=availability_service,
    )


@pytest.fixture()
def make_order():
    """Insert an order directly, bypassing admission, to arrange a date's load."""

    def _make(delivery_date, status=OrderStatus.CONFIRMED, **fields):
        defaults = {
            "customer_name": "Kari Berg",
            "customer_email": "kari@example.com",
            "package_name": "Layer cake",
        }
        defaults.update(fields)
        return Order.objects.create(
            delivery_date=delivery_date, status=status, **defaults
        )

    return _make
