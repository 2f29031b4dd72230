"""Integration tests for the ``seed_data`` management command."""

from __future__ import annotations

from io import StringIO

import pytest
from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.db.models import Count

from modules.availability.models import BlockedDate
from modules.orders.constants import CAPACITY_COUNTED_STATES
from modules.orders.models import Order, OrderStatusHistory

pytestmark = pytest.mark.integration


def _seed(**options) -> str:
    out = StringIO()
    call_command("seed_data", stdout=out, **options)
    return out.getvalue()


def test_seed_creates_staff_and_blocked_dates(frozen_today):
    output = _seed(orders=5, seed=7)

    users = get_user_model().objects
    assert users.get(username="admin").is_superuser
    assert users.get(username="baker").is_staff
    assert BlockedDate.objects.count() == 2
    assert "Seed completed" in output


def test_seed_respects_capacity_and_blocks(frozen_today):
    output = _seed(orders=40, seed=42)

    per_day = (
        Order.objects.filter(status__in=CAPACITY_COUNTED_STATES)
        .values("delivery_date")
        .annotate(total=Count("id"))
    )
    assert all(row["total"] <= 3 for row in per_day)

    blocked = set(BlockedDate.objects.values_list("date", flat=True))
    assert not Order.objects.filter(
        delivery_date__in=blocked, status__in=CAPACITY_COUNTED_STATES
    ).exists()

    placed = Order.objects.count()
    assert f"orders={placed}," in output
    assert OrderStatusHistory.objects.filter(notes="Order placed").count() == placed


def test_seed_is_rerunnable(frozen_today):
    _seed(orders=3, seed=1)
    output = _seed(orders=3, seed=1)

    assert get_user_model().objects.filter(username="admin").count() == 1
    assert BlockedDate.objects.count() == 2
    assert "users=0" in output
