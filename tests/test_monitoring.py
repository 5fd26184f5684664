"""
Tests for metrics, request IDs, health information and log formatting.
"""
import logging
from unittest.mock import MagicMock

import pytest

from storefront.middleware.logging_setup import RequestIDFilter, SafeFormatter, LOG_FORMAT
from storefront.monitoring import (
    MetricsMiddleware,
    _format_uptime,
    get_health_info,
    get_metrics,
    get_request_id,
    set_request_id,
)
from storefront.storage import MemoryStorage


class TestEndpointPath:
    @pytest.mark.parametrize("path,expected", [
        ("/api/products", "/api/products"),
        ("/api/products/0123456789abcdef0123456789abcdef", "/api/products/{id}"),
        ("/api/orders/0123456789abcdef0123456789abcdef/status", "/api/orders/{id}/status"),
        ("/uploads/5f2b.stl", "/uploads/{name}"),
    ])
    def test_ids_collapse(self, path, expected):
        """Test that record ids and upload names do not explode metric labels."""
        assert MetricsMiddleware._get_endpoint_path(path) == expected

    def test_long_paths_truncated(self):
        assert len(MetricsMiddleware._get_endpoint_path("/" + "a" * 300)) == 100


class TestHealthInfo:
    def test_healthy_with_storage(self):
        info = get_health_info(MemoryStorage())

        assert info["status"] == "healthy"
        assert info["service"] == "storefront"
        assert info["backend"] == "memory"
        assert info["components"]["storage"]["status"] == "healthy"
        assert "response_time_ms" in info["components"]["storage"]

    def test_unhealthy_without_storage(self):
        info = get_health_info(None)

        assert info["status"] == "unhealthy"
        assert info["components"]["storage"]["error"] == "Storage not initialized"

    def test_unhealthy_storage_propagates(self):
        storage = MagicMock()
        storage.backend_name = "sqlite"
        storage.health_check.return_value = {"status": "unhealthy", "error": "disk full"}

        info = get_health_info(storage)

        assert info["status"] == "unhealthy"
        assert info["components"]["storage"]["error"] == "disk full"

    @pytest.mark.parametrize("seconds,expected", [
        (5, "5s"),
        (65, "1m 5s"),
        (3725, "1h 2m 5s"),
        (90061, "1d 1h 1m 1s"),
    ])
    def test_format_uptime(self, seconds, expected):
        assert _format_uptime(seconds) == expected


class TestMetrics:
    def test_metrics_exposition(self):
        output = get_metrics()
        assert b"storefront_http_requests_total" in output
        assert b"storefront_uptime_seconds" in output


class TestLogging:
    def test_filter_stamps_request_id(self):
        """Test that records carry the current request id, or '-' outside a request."""
        log_filter = RequestIDFilter()
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "hello", None, None)

        set_request_id("")
        log_filter.filter(record)
        assert record.request_id == "-"

        set_request_id("abcd1234")
        other = logging.LogRecord("x", logging.INFO, __file__, 1, "hello", None, None)
        log_filter.filter(other)
        assert other.request_id == "abcd1234"
        assert get_request_id() == "abcd1234"
        set_request_id("")

    def test_formatter_tolerates_missing_request_id(self):
        record = logging.LogRecord("storefront", logging.INFO, __file__, 1, "hello", None, None)
        output = SafeFormatter(LOG_FORMAT).format(record)
        assert "[-] - hello" in output
