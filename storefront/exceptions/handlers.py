"""
Exception handlers for the application.
"""
import logging

from storefront.adapters.http_framework import HTTPFrameworkAdapter
from storefront.exceptions.errors import StorefrontError, ValidationFailed
from storefront.monitoring import get_request_id

# Initialize adapter
http_adapter = HTTPFrameworkAdapter()
Request = http_adapter.Request
JSONResponse = http_adapter.JSONResponse
RequestValidationError = http_adapter.RequestValidationError

logger = logging.getLogger(__name__)


def _error_response(request: Request, status_code: int, content: dict) -> JSONResponse:
    """Build an error response carrying the request context and ID headers."""
    request_id = get_request_id() or '-'
    content.update({
        "path": request.url.path,
        "method": request.method,
        "request_id": request_id,
    })
    response = JSONResponse(status_code=status_code, content=content)
    if request_id != '-':
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Trace-ID"] = request_id
    return response


async def storefront_exception_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    """
    Map service-level errors onto HTTP responses.

    Client errors are logged at WARNING, storage failures at ERROR with the
    traceback.
    """
    log_extra = {
        "request_id": get_request_id() or '-',
        "method": request.method,
        "path": request.url.path,
        "exception_type": type(exc).__name__,
    }
    if exc.status_code >= 500:
        logger.error(
            f"{exc.error} in {request.method} {request.url.path}: {exc.detail}",
            exc_info=exc,
            extra=log_extra,
        )
        detail = "A storage operation failed. Please try again or contact support if the issue persists."
    else:
        logger.warning(
            f"{exc.error} in {request.method} {request.url.path}: {exc.detail}",
            extra=log_extra,
        )
        detail = exc.detail

    content = {"error": exc.error, "detail": detail}
    if isinstance(exc, ValidationFailed) and exc.errors:
        content["errors"] = exc.errors
    return _error_response(request, exc.status_code, content)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handle request validation errors with clear messages.
    """
    errors = []
    for error in exc.errors():
        field = " -> ".join(str(loc) for loc in error["loc"])
        errors.append(f"{field}: {error['msg']}")

    logger.warning(
        f"Validation error in {request.method} {request.url.path}: {', '.join(errors)}",
        extra={
            "request_id": get_request_id() or '-',
            "method": request.method,
            "path": request.url.path,
            "errors": errors,
        }
    )
    return _error_response(request, 422, {
        "error": "Validation error",
        "detail": "One or more fields failed validation",
        "errors": errors,
    })


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler for unhandled exceptions.
    """
    logger.error(
        f"Unhandled exception in {request.method} {request.url.path}: {str(exc)}",
        exc_info=exc,
        extra={
            "request_id": get_request_id() or '-',
            "method": request.method,
            "path": request.url.path,
            "exception_type": type(exc).__name__,
        }
    )
    return _error_response(request, 500, {
        "error": "Internal server error",
        "detail": "An unexpected error occurred. Please try again or contact support if the issue persists.",
    })


def setup_exception_handlers(app):
    """
    Register exception handlers with the FastAPI app.
    """
    app.add_exception_handler(StorefrontError, storefront_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
