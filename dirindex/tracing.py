"""
OpenTelemetry Tracing Setup
===========================
Configures tracing for directory index operations.

Spans are exported over OTLP/HTTP when ``DIRINDEX_TRACING`` is enabled;
otherwise the global no-op tracer is used and spans cost next to nothing.
"""

import atexit
from typing import Any, Mapping, Optional

from loguru import logger
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource, SERVICE_NAME

from dirindex.config import TRACING

# Use centralized config
SERVICE_NAME_VALUE = TRACING.SERVICE_NAME
OTLP_ENDPOINT = TRACING.OTLP_ENDPOINT
ENABLE_TRACING = TRACING.ENABLED

# Track provider for cleanup
_provider: Optional[TracerProvider] = None


def _cleanup_tracing() -> None:
    """Shutdown the tracer provider to flush pending spans."""
    global _provider
    if _provider is not None:
        try:
            _provider.shutdown()
        except Exception as e:
            logger.debug(f"Tracer provider shutdown failed: {e}")


def setup_tracing(service_name: str = SERVICE_NAME_VALUE) -> trace.Tracer:
    """
    Initialize OpenTelemetry tracing with OTLP export.

    Args:
        service_name: Name of the service for trace identification

    Returns:
        Configured tracer instance
    """
    global _provider

    resource = Resource.create({
        SERVICE_NAME: service_name,
    })

    _provider = TracerProvider(resource=resource)

    otlp_exporter = OTLPSpanExporter(
        endpoint=OTLP_ENDPOINT,
    )
    _provider.add_span_processor(BatchSpanProcessor(otlp_exporter))

    trace.set_tracer_provider(_provider)

    # Register cleanup on exit to flush pending spans
    atexit.register(_cleanup_tracing)

    logger.info(f"Tracing enabled for {service_name} -> {OTLP_ENDPOINT}")
    return trace.get_tracer(service_name)


def get_tracer(name: str = SERVICE_NAME_VALUE) -> trace.Tracer:
    """
    Get a tracer instance for creating spans.

    Args:
        name: Tracer name (usually module or component name)

    Returns:
        Tracer instance
    """
    return trace.get_tracer(name)


_tracer = None


def init_tracing() -> trace.Tracer:
    """
    Initialize tracing if not already done.

    Returns:
        The global tracer instance (or NoOp tracer if disabled)
    """
    global _tracer
    if _tracer is None:
        if ENABLE_TRACING:
            _tracer = setup_tracing()
        else:
            _tracer = trace.get_tracer(SERVICE_NAME_VALUE)
    return _tracer


def safe_set_current_span_attributes(attributes: Mapping[str, Any]) -> None:
    """Attach attributes to the active span.

    ``None`` values are dropped and non-primitive values are stringified.
    Tracing problems are logged, never raised into the caller.
    """
    try:
        span = trace.get_current_span()
        if not span.is_recording():
            return
        for key, value in attributes.items():
            if value is None:
                continue
            if not isinstance(value, (str, bool, int, float)):
                value = str(value)
            span.set_attribute(key, value)
    except Exception as e:
        logger.debug(f"Could not set span attributes: {e}")
