from unittest.mock import patch

from freezegun import freeze_time


class TestHealthCheck:
    def test_health_check_returns_200(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "timestamp" in data
        assert "services" in data

    def test_health_check_reports_database_status(self, client):
        data = client.get("/health").json()
        assert data["services"]["database"]["status"] == "up"
        assert "response_time_ms" in data["services"]["database"]

    def test_health_check_reports_cache_status(self, client):
        data = client.get("/health").json()
        assert data["services"]["cache"]["status"] == "up"
        assert "response_time_ms" in data["services"]["cache"]

    def test_civil_date_follows_bakery_timezone(self, client):
        # 23:30 UTC on the 19th is already the 20th in Oslo
        with freeze_time("2025-05-19 23:30:00"):
            data = client.get("/health").json()
        assert data["civil_date"] == "2025-05-20"

    def test_reports_booking_policy(self, client):
        data = client.get("/health").json()
        assert data["time_zone"] == "Europe/Oslo"
        assert data["booking_policy"] == {
            "capacity_per_day": 3,
            "booking_window_days": 60,
        }

    def test_cache_failure_reports_unhealthy(self, client):
        with patch(
            "modules.core.views.cache.get", side_effect=ConnectionError("refused")
        ):
            response = client.get("/health")
        assert response.status_code == 503
        data = response.json()
        assert data["status"] == "unhealthy"
        assert data["services"]["cache"] == {"status": "down"}
        assert data["services"]["database"]["status"] == "up"


class TestMe:
    def test_requires_token(self, api_client):
        assert api_client.get("/api/v1/me").status_code == 401

    def test_reports_staff_flag(self, admin_client):
        data = admin_client.get("/api/v1/me").json()
        assert data == {"user": "baker", "is_staff": True}

    def test_obtained_token_is_accepted(self, api_client, staff_user):
        token = api_client.post(
            "/api/v1/auth/token/",
            {"username": "baker", "password": "baker-pass-123"},
            format="json",
        ).json()["access"]

        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        assert api_client.get("/api/v1/me").json()["is_staff"] is True
