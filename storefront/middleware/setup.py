"""
Middleware setup and configuration.
"""
from fastapi.middleware.cors import CORSMiddleware

from storefront.monitoring import MetricsMiddleware


def setup_middleware(app):
    """Set up all middleware for the FastAPI application."""
    # Browser clients are served from another origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    # Added last so it wraps everything and sees every response
    app.add_middleware(MetricsMiddleware)
