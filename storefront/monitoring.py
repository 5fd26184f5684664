"""
Request metrics, request IDs and health reporting.

Every request gets a short ID that is stamped on log records and returned in
the ``X-Request-ID`` header. Request counts, latencies and error counts are
exported for Prometheus under the ``storefront_`` prefix, with record ids and
upload names collapsed out of the endpoint label.
"""
import logging
import re
import time
import uuid
from contextvars import ContextVar
from typing import Any, Dict, Optional

from prometheus_client import Counter, Gauge, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from storefront import __version__

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

request_id_var: ContextVar[str] = ContextVar('request_id', default='')

_LABELS = ('method', 'endpoint', 'status_code')

http_requests_total = Counter(
    'storefront_http_requests_total',
    'Requests served, by route and status',
    _LABELS,
)
http_request_duration_seconds = Histogram(
    'storefront_http_request_duration_seconds',
    'Time to produce a response',
    _LABELS,
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)
http_errors_total = Counter(
    'storefront_http_errors_total',
    'Responses with status >= 400 and requests that raised',
    _LABELS + ('error_type',),
)
service_uptime_seconds = Gauge(
    'storefront_uptime_seconds',
    'Seconds since the process started',
)

service_start_time = time.time()

_RECORD_ID = re.compile(r'/[0-9a-f]{32}(?=/|$)', re.IGNORECASE)
_UPLOAD_NAME = re.compile(r'^/uploads/.+$')
MAX_ENDPOINT_LABEL = 100


def get_request_id() -> str:
    """ID of the request being handled, or '' outside a request."""
    return request_id_var.get('')


def set_request_id(request_id: str) -> None:
    request_id_var.set(request_id)


def _error_type(status_code: int) -> Optional[str]:
    if status_code >= 500:
        return "server_error"
    if status_code >= 400:
        return "client_error"
    return None


def _observe(method: str, endpoint: str, status_code: int, duration: float, error_type: Optional[str]) -> None:
    labels = {"method": method, "endpoint": endpoint, "status_code": status_code}
    http_requests_total.labels(**labels).inc()
    http_request_duration_seconds.labels(**labels).observe(duration)
    if error_type:
        http_errors_total.labels(error_type=error_type, **labels).inc()


class MetricsMiddleware(BaseHTTPMiddleware):
    """Assigns the request ID, logs each request and records its metrics."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = uuid.uuid4().hex[:8]
        set_request_id(request_id)
        service_uptime_seconds.set(time.time() - service_start_time)

        method = request.method
        endpoint = self._get_endpoint_path(request.url.path)
        logger.info(
            f"{method} {request.url.path} started",
            extra={"endpoint": endpoint, "client_ip": request.client.host if request.client else None},
        )

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            duration = time.perf_counter() - started
            logger.error(
                f"{method} {request.url.path} raised {type(e).__name__} after {duration:.4f}s",
                exc_info=True,
                extra={"endpoint": endpoint},
            )
            _observe(method, endpoint, 500, duration, "exception")
            # The app's exception handlers build the 500 response
            raise

        duration = time.perf_counter() - started
        status_code = response.status_code
        _observe(method, endpoint, status_code, duration, _error_type(status_code))
        logger.info(
            f"{method} {request.url.path} -> {status_code} in {duration:.4f}s",
            extra={"endpoint": endpoint, "status_code": status_code},
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    @staticmethod
    def _get_endpoint_path(path: str) -> str:
        """Metric label for ``path``: ids and upload names collapse to placeholders."""
        if _UPLOAD_NAME.match(path):
            return "/uploads/{name}"
        return _RECORD_ID.sub('/{id}', path)[:MAX_ENDPOINT_LABEL]


def get_metrics() -> bytes:
    """Prometheus text exposition of every registered metric."""
    return generate_latest()


def check_storage_health(storage) -> Dict[str, Any]:
    """Run the backend's own health check and time it."""
    started = time.perf_counter()
    health = dict(storage.health_check())
    health["response_time_ms"] = round((time.perf_counter() - started) * 1000, 2)
    if health.get("status") != "healthy":
        logger.warning(
            f"Storage health check failed on {storage.backend_name}: {health.get('error')}"
        )
    return health


def get_health_info(storage: Optional[Any] = None) -> Dict[str, Any]:
    """
    Health report for the service and its storage backend.

    Args:
        storage: Storage backend to check; None means it was never initialized

    Returns:
        Overall status ('healthy' only if every component is), backend name,
        uptime and per-component detail
    """
    uptime = time.time() - service_start_time

    if storage is None:
        storage_health: Dict[str, Any] = {"status": "unhealthy", "error": "Storage not initialized"}
    else:
        storage_health = check_storage_health(storage)

    components = {
        "service": {"status": "healthy", "version": __version__, "uptime_seconds": uptime},
        "storage": storage_health,
    }
    healthy = all(c.get("status") == "healthy" for c in components.values())

    return {
        "status": "healthy" if healthy else "unhealthy",
        "service": "storefront",
        "backend": storage.backend_name if storage is not None else None,
        "timestamp": time.time(),
        "uptime_seconds": uptime,
        "uptime_formatted": _format_uptime(uptime),
        "components": components,
    }


_UPTIME_UNITS = (("d", 86400), ("h", 3600), ("m", 60))


def _format_uptime(seconds: float) -> str:
    """'1d 2h 3m 4s' style, starting at the largest non-zero unit."""
    remaining = int(seconds)
    parts = []
    for suffix, size in _UPTIME_UNITS:
        value, remaining = divmod(remaining, size)
        if value or parts:
            parts.append(f"{value}{suffix}")
    parts.append(f"{remaining}s")
    return " ".join(parts)
