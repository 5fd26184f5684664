"""
Distributed tracing for the storefront service using OpenTelemetry.

Storage operations always open spans through ``trace_span``; without a
configured provider those spans are no-ops. ``setup_tracing`` installs a
provider with an OTLP exporter when tracing is enabled in settings.
"""
import logging
from contextlib import contextmanager
from typing import Any, Dict, Optional

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from storefront import __version__

logger = logging.getLogger(__name__)

_provider: Optional[TracerProvider] = None


def setup_tracing(settings) -> bool:
    """Initialize OpenTelemetry tracing. Returns True if a provider was installed."""
    global _provider

    if not settings.tracing_enabled:
        logger.info("Tracing disabled")
        return False
    if _provider is not None:
        logger.warning("Tracing already initialized")
        return True

    resource = Resource.create({
        "service.name": settings.otel_service_name,
        "service.version": __version__,
    })
    provider = TracerProvider(resource=resource)
    try:
        exporter = OTLPSpanExporter(endpoint=settings.otel_exporter_endpoint, insecure=True)
        provider.add_span_processor(BatchSpanProcessor(exporter))
        logger.info("OTLP exporter configured", extra={"endpoint": settings.otel_exporter_endpoint})
    except Exception:
        logger.warning("Failed to configure OTLP exporter", exc_info=True)

    trace.set_tracer_provider(provider)
    _provider = provider
    logger.info("OpenTelemetry tracing initialized successfully")
    return True


def instrument_fastapi(app) -> None:
    """Instrument FastAPI application with OpenTelemetry."""
    try:
        FastAPIInstrumentor.instrument_app(app)
        logger.info("FastAPI instrumentation enabled")
    except Exception:
        logger.error("Failed to instrument FastAPI", exc_info=True)


def shutdown_tracing() -> None:
    """Flush and drop the provider installed by ``setup_tracing``."""
    global _provider
    if _provider is not None:
        _provider.shutdown()
        _provider = None


@contextmanager
def trace_span(name: str, attributes: Optional[Dict[str, Any]] = None, kind=trace.SpanKind.INTERNAL):
    """Open a span around a block, recording exceptions raised inside it."""
    tracer = trace.get_tracer(__name__)
    with tracer.start_as_current_span(name, kind=kind) as span:
        for key, value in (attributes or {}).items():
            if value is not None:
                span.set_attribute(key, value)
        yield span
