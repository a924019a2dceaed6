"""
OpenTelemetry Observability Module.
Provides distributed tracing for the API.
"""
import logging

from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from backend.app.core.config import get_settings

logger = logging.getLogger(__name__)


def setup_tracing(app=None) -> bool:
    """Initializes OpenTelemetry tracing when enabled in settings."""
    settings = get_settings()
    if not settings.tracing_enabled:
        logger.info("Tracing disabled (TRACING_ENABLED=false).")
        return False

    # Spans go to the console for now; swap the exporter for OTLP in production
    provider = TracerProvider()
    provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
    trace.set_tracer_provider(provider)

    if app:
        FastAPIInstrumentor.instrument_app(app)
        logger.info("OpenTelemetry FastAPI instrumentation enabled.")
    return True


def get_tracer(name: str):
    """Returns a tracer instance."""
    return trace.get_tracer(name)
