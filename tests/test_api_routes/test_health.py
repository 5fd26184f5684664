"""
Tests for health, metrics and app-wide behavior.
"""
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from storefront.app import create_app
from storefront.storage import MemoryStorage


class TestHealth:
    def test_health_ok(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["backend"] == "memory"
        assert body["components"]["storage"]["status"] == "healthy"

    def test_health_unhealthy_storage_returns_503(self, settings):
        storage = MagicMock(wraps=MemoryStorage())
        storage.backend_name = "memory"
        storage.health_check.return_value = {"status": "unhealthy", "error": "gone"}

        with TestClient(create_app(settings, storage=storage)) as test_client:
            response = test_client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"


class TestMetrics:
    def test_metrics_count_requests(self, client):
        client.get("/api/products")

        response = client.get("/metrics")

        assert response.status_code == 200
        assert "text/plain" in response.headers["content-type"]
        assert 'endpoint="/api/products"' in response.text


class TestRequestTracing:
    def test_responses_carry_request_id(self, client):
        response = client.get("/api/products")

        assert len(response.headers["X-Request-ID"]) == 8

    def test_error_responses_carry_request_id(self, client):
        response = client.get("/api/products/missing")

        assert response.status_code == 404
        assert response.json()["request_id"] == response.headers["X-Request-ID"]


class TestStorageFailure:
    def test_storage_error_returns_500(self, settings):
        """Test that a failing backend gives a 500 with a generic message."""
        from storefront.exceptions import StorageError

        storage = MemoryStorage()
        app = create_app(settings, storage=storage)
        with TestClient(app, raise_server_exceptions=False) as test_client:
            storage.products.collection.find = MagicMock(side_effect=StorageError("socket closed"))
            response = test_client.get("/api/products")

        assert response.status_code == 500
        assert response.json()["error"] == "Database error"
        assert "socket closed" not in response.text

    def test_storage_closed_on_shutdown(self, settings):
        storage = MagicMock(wraps=MemoryStorage())
        storage.backend_name = "memory"

        with TestClient(create_app(settings, storage=storage)):
            pass

        storage.close.assert_called_once_with()
