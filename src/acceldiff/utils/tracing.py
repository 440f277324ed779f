"""
OpenTelemetry tracing for comparison runs.

Spans are created through the OpenTelemetry API. Until initialize_tracing()
installs an SDK TracerProvider with at least one exporter, the API's no-op
tracer is used and spans cost next to nothing.
"""

import logging
from contextlib import contextmanager

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

logger = logging.getLogger(__name__)

TRACER_NAME = "acceldiff"

_provider: TracerProvider | None = None


def initialize_tracing(
    service_name: str = TRACER_NAME,
    otlp_endpoint: str | None = None,
    console_export: bool = False,
) -> bool:
    """
    Install an SDK tracer provider with the requested exporters.

    Args:
        service_name: Name of the service for identification
        otlp_endpoint: OTLP collector endpoint (e.g., "localhost:4317")
        console_export: Also export spans to the console

    Returns:
        True if a provider was installed, False if no exporter was requested
        or tracing was already initialized
    """
    global _provider

    if _provider is not None:
        logger.warning("Tracing already initialized")
        return False

    if not otlp_endpoint and not console_export:
        logger.debug("No trace exporters requested, tracing stays a no-op")
        return False

    provider = TracerProvider(resource=Resource(attributes={SERVICE_NAME: service_name}))
    exporters = []

    if otlp_endpoint:
        provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint, insecure=True))
        )
        exporters.append("OTLP")

    if console_export:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
        exporters.append("Console")

    trace.set_tracer_provider(provider)
    _provider = provider

    logger.info(f"Tracing initialized: {service_name} (exporters: {', '.join(exporters)})")
    return True


def get_tracer() -> trace.Tracer:
    """Tracer for this package; a no-op tracer unless tracing was initialized."""
    return trace.get_tracer(TRACER_NAME)


def shutdown_tracing() -> None:
    """Flush pending spans and shut down the provider installed by initialize_tracing()."""
    global _provider

    if _provider is None:
        return

    try:
        _provider.shutdown()
        logger.debug("Tracing shutdown complete")
    except Exception as e:
        logger.error(f"Error during tracing shutdown: {e}")
    finally:
        _provider = None


@contextmanager
def trace_operation(
    operation_name: str,
    kind: trace.SpanKind = trace.SpanKind.INTERNAL,
    **attributes,
):
    """
    Context manager for tracing operations.

    Args:
        operation_name: Name of the operation being traced
        kind: Span kind (INTERNAL, CLIENT, SERVER, etc.)
        **attributes: Custom attributes to add to the span

    Yields:
        Span instance for adding custom attributes

    Example:
        >>> with trace_operation("diff_compare", budget=100) as span:
        ...     report = engine.compare(left, right, 100)
        ...     span.set_attribute("differences", report.difference_count)
    """
    with get_tracer().start_as_current_span(operation_name, kind=kind) as span:
        for key, value in attributes.items():
            span.set_attribute(key, str(value))

        try:
            yield span
        except Exception as e:
            span.set_attribute("error", True)
            span.set_attribute("error.type", type(e).__name__)
            span.record_exception(e)
            raise
