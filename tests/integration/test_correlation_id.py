import logging
import uuid

import pytest

pytestmark = pytest.mark.integration


class TestCorrelationIdMiddleware:
    def test_returns_provided_request_id(self, client):
        custom_id = "my-custom-request-id-123"
        response = client.get("/health", HTTP_X_REQUEST_ID=custom_id)
        assert response["X-Request-ID"] == custom_id

    def test_generates_uuid7_when_no_request_id(self, client):
        response = client.get("/health")
        request_id = response["X-Request-ID"]
        parsed = uuid.UUID(request_id)
        assert parsed.version == 7
        assert str(parsed) == request_id

    @pytest.mark.parametrize("bad_id", ["has spaces", "x" * 200, "<script>"])
    def test_replaces_unsafe_request_id(self, client, bad_id):
        response = client.get("/health", HTTP_X_REQUEST_ID=bad_id)
        assert response["X-Request-ID"] != bad_id
        assert uuid.UUID(response["X-Request-ID"]).version == 7

    def test_api_responses_carry_request_id(self, api_client_with_correlation):
        client, cid = api_client_with_correlation
        response = client.get("/api/v1/availability/")
        assert response["X-Request-ID"] == cid

    def test_correlation_id_in_logs(self, client, caplog):
        custom_id = "log-test-correlation-456"
        with caplog.at_level(logging.INFO):
            client.get("/health", HTTP_X_REQUEST_ID=custom_id)
        found = any(custom_id in record.getMessage() for record in caplog.records)
        assert found, (
            f"correlation_id '{custom_id}' not found in log records: "
            f"{[r.getMessage() for r in caplog.records]}"
        )

    def test_request_line_logged(self, client, caplog):
        with caplog.at_level(logging.INFO):
            client.get("/health")
        messages = [r.getMessage() for r in caplog.records]
        assert any("http.request" in m and "/health" in m for m in messages)
