"""
Health and metrics API routes.
"""
from prometheus_client import CONTENT_TYPE_LATEST

from storefront.adapters.http_framework import HTTPFrameworkAdapter
from storefront.monitoring import get_health_info, get_metrics

# Initialize adapter
http_adapter = HTTPFrameworkAdapter()
Request = http_adapter.Request
Response = http_adapter.Response
JSONResponse = http_adapter.JSONResponse

router_adapter = http_adapter.create_router(tags=["health"])
router = router_adapter.router


@router.get("/health")
def health_check(request: Request):
    """Comprehensive health check endpoint with component status (storage, service)."""
    services = getattr(request.app.state, "services", None)
    health_info = get_health_info(services.storage if services is not None else None)

    # Return appropriate HTTP status based on overall health
    if health_info.get("status") == "unhealthy":
        return JSONResponse(content=health_info, status_code=503)
    return health_info


@router.get("/metrics")
def metrics():
    """Prometheus metrics endpoint."""
    return Response(content=get_metrics(), media_type=CONTENT_TYPE_LATEST)
