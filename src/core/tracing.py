"""OpenTelemetry tracing for DeckSmith."""

import logging
import os

from opentelemetry import trace as otel_trace

logger = logging.getLogger(__name__)
_tracing_initialized = False

TRACER_NAME = "decksmith"


def setup_tracing() -> bool:
    global _tracing_initialized
    if _tracing_initialized:
        return True

    from src.core.config import get_settings
    settings = get_settings()

    if not settings.tracing_enabled:
        logger.info("Tracing is disabled (set TRACING_ENABLED=true to enable)")
        return False

    if not settings.applicationinsights_connection_string:
        logger.info("No Application Insights connection string configured")
        return False

    from azure.core.settings import settings as azure_settings
    azure_settings.tracing_implementation = "opentelemetry"
    os.environ.setdefault("OTEL_SERVICE_NAME", settings.tracing_service_name)

    from azure.monitor.opentelemetry import configure_azure_monitor
    from opentelemetry.sdk.resources import Resource

    configure_azure_monitor(
        connection_string=settings.applicationinsights_connection_string,
        resource=Resource.create({"service.name": settings.tracing_service_name}),
    )

    logger.info("Using Azure Application Insights for tracing")
    _tracing_initialized = True
    logger.info(f"OpenTelemetry tracing enabled for service: {settings.tracing_service_name}")
    return True


def is_tracing_enabled() -> bool:
    return _tracing_initialized


def get_tracer() -> otel_trace.Tracer:
    """Tracer for pipeline spans. A no-op tracer until setup_tracing succeeds."""
    return otel_trace.get_tracer(TRACER_NAME)
