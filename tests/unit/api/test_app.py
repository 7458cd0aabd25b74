"""Unit tests for the assembled application: health, metrics, correlation."""

import pytest
from fastapi.testclient import TestClient

from reunite.api.main import app
from reunite.api.middleware.logging_middleware import CORRELATION_HEADER
from reunite.bootstrap.metrics import get_workflow_metrics, reset_metrics


@pytest.fixture
def app_client():
    reset_metrics()
    yield TestClient(app)
    reset_metrics()


class TestHealth:
    def test_healthy(self, app_client: TestClient) -> None:
        response = app_client.get("/v1/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


class TestMetricsEndpoint:
    def test_exposes_workflow_counters(self, app_client: TestClient) -> None:
        get_workflow_metrics().record_rejection("not_found")

        response = app_client.get("/v1/metrics")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert 'code="not_found"' in response.text
        assert "verification_rejected_requests_total" in response.text
        assert response.headers["cache-control"] == "no-store"


class TestCorrelationHeader:
    def test_echoes_incoming_id(self, app_client: TestClient) -> None:
        response = app_client.get(
            "/v1/health", headers={CORRELATION_HEADER: "trace-abc"}
        )
        assert response.headers[CORRELATION_HEADER] == "trace-abc"

    def test_generates_id_when_missing(self, app_client: TestClient) -> None:
        first = app_client.get("/v1/health").headers[CORRELATION_HEADER]
        second = app_client.get("/v1/health").headers[CORRELATION_HEADER]
        assert first
        assert first != second

    def test_error_responses_carry_id(self, app_client: TestClient) -> None:
        response = app_client.get(
            "/v1/verifications", headers={CORRELATION_HEADER: "trace-401"}
        )
        assert response.status_code == 401
        assert response.headers[CORRELATION_HEADER] == "trace-401"


class TestOpenApi:
    def test_verification_paths_documented(self, app_client: TestClient) -> None:
        paths = app_client.get("/openapi.json").json()["paths"]
        assert "/v1/verifications" in paths
        assert "/v1/verifications/{case_id}/dispute/ruling" in paths
        assert "/v1/verifications/{case_id}/messages" in paths


class TestOversizedCorrelationId:
    def test_replaced_with_generated_id(self, app_client: TestClient) -> None:
        oversized = "t" * 500
        response = app_client.get("/v1/health", headers={CORRELATION_HEADER: oversized})
        echoed = response.headers[CORRELATION_HEADER]
        assert echoed
        assert echoed != oversized
