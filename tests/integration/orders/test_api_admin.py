"""Integration tests for the admin order console.

Covers:
- Staff-only access (401 anonymous, 403 non-staff).
- Paginated list with status, delivery-range and search filters.
- Detail with status history.
- PATCH status transitions, including activation on a full date.
- Dedicated cancel action.
- Status summary counters.
"""

from __future__ import annotations

from datetime import date

import pytest

from modules.orders.constants import OrderStatus
from modules.orders.models import OrderStatusHistory

pytestmark = pytest.mark.integration

URL = "/api/v1/orders/"
DAY = date(2025, 6, 10)
MISSING_ID = "01900000-0000-7000-8000-000000000000"


class TestAccess:
    @pytest.mark.parametrize(
        "path", [URL, f"{URL}summary/", f"{URL}{MISSING_ID}/"]
    )
    def test_anonymous_rejected(self, api_client, path):
        assert api_client.get(path).status_code == 401

    def test_non_staff_forbidden(self, customer_client):
        assert customer_client.get(URL).status_code == 403

    def test_non_staff_cannot_change_status(self, customer_client, make_order):
        order = make_order(DAY, status=OrderStatus.PENDING)
        response = customer_client.patch(
            f"{URL}{order.id}/", {"status": "confirmed"}, format="json"
        )
        assert response.status_code == 403


class TestList:
    def test_paginated(self, admin_client, make_order):
        for _ in range(3):
            make_order(DAY)

        response = admin_client.get(URL, {"page_size": 2})

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 3
        assert len(body["results"]) == 2
        assert body["next"] is not None

    def test_filter_by_status(self, admin_client, make_order):
        make_order(DAY)
        make_order(DAY, status=OrderStatus.CANCELLED)

        response = admin_client.get(URL, {"status": "cancelled"})

        results = response.json()["results"]
        assert [r["status"] for r in results] == ["cancelled"]

    def test_filter_by_delivery_range(self, admin_client, make_order):
        make_order(date(2025, 6, 1))
        make_order(date(2025, 6, 10))
        make_order(date(2025, 6, 20))

        response = admin_client.get(
            URL, {"delivery_from": "2025-06-05", "delivery_to": "2025-06-15"}
        )

        results = response.json()["results"]
        assert [r["delivery_date"] for r in results] == ["2025-06-10"]

    def test_search_by_reference(self, admin_client, make_order):
        wanted = make_order(DAY)
        make_order(DAY)

        response = admin_client.get(URL, {"search": wanted.order_ref})

        results = response.json()["results"]
        assert [r["order_ref"] for r in results] == [wanted.order_ref]

    def test_ordering_by_delivery_date(self, admin_client, make_order):
        make_order(date(2025, 6, 20))
        make_order(date(2025, 6, 1))

        response = admin_client.get(URL, {"ordering": "delivery_date"})

        dates = [r["delivery_date"] for r in response.json()["results"]]
        assert dates == ["2025-06-01", "2025-06-20"]


class TestRetrieve:
    def test_detail_with_history(self, admin_client, order_service, make_order):
        order = make_order(DAY, status=OrderStatus.PENDING)
        order_service.update_status(order.id, OrderStatus.CONFIRMED, "Deposit paid")

        response = admin_client.get(f"{URL}{order.id}/")

        assert response.status_code == 200
        body = response.json()
        assert body["order_ref"] == order.order_ref
        assert body["status_history"][0]["notes"] == "Deposit paid"

    @pytest.mark.parametrize("pk", [MISSING_ID, "not-a-uuid"])
    def test_not_found(self, admin_client, pk):
        assert admin_client.get(f"{URL}{pk}/").status_code == 404


class TestStatusUpdate:
    def test_confirm(self, admin_client, make_order, staff_user):
        order = make_order(DAY, status=OrderStatus.PENDING)

        response = admin_client.patch(
            f"{URL}{order.id}/",
            {"status": "confirmed", "notes": "Called customer"},
            format="json",
        )

        assert response.status_code == 200
        assert response.json()["status"] == "confirmed"
        history = OrderStatusHistory.objects.get(order=order)
        assert history.user == staff_user

    def test_invalid_transition(self, admin_client, make_order):
        order = make_order(DAY, status=OrderStatus.PENDING)
        response = admin_client.patch(
            f"{URL}{order.id}/", {"status": "completed"}, format="json"
        )
        assert response.status_code == 400

    def test_cancel_via_patch_refused(self, admin_client, make_order):
        order = make_order(DAY, status=OrderStatus.PENDING)
        response = admin_client.patch(
            f"{URL}{order.id}/", {"status": "cancelled"}, format="json"
        )
        assert response.status_code == 400
        assert "/cancel/" in response.json()["detail"]

    def test_unknown_status(self, admin_client, make_order):
        order = make_order(DAY, status=OrderStatus.PENDING)
        response = admin_client.patch(
            f"{URL}{order.id}/", {"status": "shipped"}, format="json"
        )
        assert response.status_code == 400

    def test_missing_order(self, admin_client):
        response = admin_client.patch(
            f"{URL}{MISSING_ID}/", {"status": "confirmed"}, format="json"
        )
        assert response.status_code == 404

    def test_malformed_id(self, admin_client):
        response = admin_client.patch(
            f"{URL}not-a-uuid/", {"status": "confirmed"}, format="json"
        )
        assert response.status_code == 400

    def test_activation_on_full_date_conflicts(self, admin_client, make_order):
        unpaid = make_order(DAY, status=OrderStatus.PENDING_PAYMENT)
        for _ in range(3):
            make_order(DAY)

        response = admin_client.patch(
            f"{URL}{unpaid.id}/", {"status": "pending"}, format="json"
        )

        assert response.status_code == 409
        assert response.json()["code"] == "capacity_exceeded"


class TestCancel:
    def test_cancel(self, admin_client, make_order):
        order = make_order(DAY)

        response = admin_client.post(
            f"{URL}{order.id}/cancel/", {"notes": "Customer called"}, format="json"
        )

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "cancelled"
        assert body["delivery_date"] == "2025-06-10"

    def test_cancel_completed_refused(self, admin_client, make_order):
        order = make_order(DAY, status=OrderStatus.COMPLETED)
        response = admin_client.post(f"{URL}{order.id}/cancel/", {}, format="json")
        assert response.status_code == 400

    def test_cancel_missing(self, admin_client):
        response = admin_client.post(f"{URL}{MISSING_ID}/cancel/", {}, format="json")
        assert response.status_code == 404


class TestSummary:
    def test_counts_every_status(self, admin_client, make_order):
        make_order(DAY)
        make_order(DAY, status=OrderStatus.PENDING_PAYMENT)

        response = admin_client.get(f"{URL}summary/")

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 2
        assert body["counts"] == {
            "pending_payment": 1,
            "pending": 0,
            "confirmed": 1,
            "completed": 0,
            "cancelled": 0,
        }
