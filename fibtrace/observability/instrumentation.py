"""
OpenTelemetry Tracing Setup

Builds the tracer provider the interactive loop reports into. The exporter is
chosen by settings:

- file:    JSON spans appended to a local file (traces.txt by default)
- console: JSON spans on stderr, next to the logs
- otlp:    gRPC export to an OTel Collector (which forwards to Jaeger)
- none:    spans are created and dropped

The application itself never touches the global provider: it receives the
Tracer returned by setup_tracing() and passes trace contexts explicitly.
"""

import logging
import sys
from typing import Optional, Tuple

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import (
    DEPLOYMENT_ENVIRONMENT,
    SERVICE_NAME,
    SERVICE_VERSION,
    Resource,
)
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter, SpanExporter

from fibtrace.config import Settings
from fibtrace.errors import ConfigurationError

logger = logging.getLogger(__name__)

TRACER_NAME = "fib"


def create_resource(
    service_name: str = "fib",
    service_version: str = "v0.1.0",
    environment: str = "demo",
) -> Resource:
    """
    Creates an OpenTelemetry Resource with service metadata.

    Resource attributes are attached to every span this process exports,
    which is how a trace backend tells this demo apart from other services.

    Args:
        service_name: Unique identifier for this service (e.g., "fib")
        service_version: Version string (e.g., "v0.1.0")
        environment: Deployment environment label (e.g., "demo")

    Returns:
        OpenTelemetry Resource object
    """
    return Resource.create({
        SERVICE_NAME: service_name,
        SERVICE_VERSION: service_version,
        DEPLOYMENT_ENVIRONMENT: environment,
    })


class FileSpanExporter(ConsoleSpanExporter):
    """ConsoleSpanExporter that owns its output file and closes it on shutdown."""

    def __init__(self, path: str, service_name: Optional[str] = None):
        # Truncate: each process run starts a fresh trace file
        self._file = open(path, "w", encoding="utf-8")
        self.path = path
        super().__init__(service_name=service_name, out=self._file)

    def shutdown(self) -> None:
        super().shutdown()
        if not self._file.closed:
            self._file.close()


def create_span_exporter(settings: Settings) -> Optional[SpanExporter]:
    """
    Build the span exporter selected by settings.trace_exporter.

    Returns:
        The exporter, or None for the "none" exporter

    Raises:
        ConfigurationError: unknown exporter name, or the traces file can't be opened
    """
    kind = settings.trace_exporter

    if kind == "none":
        return None

    if kind == "file":
        try:
            return FileSpanExporter(settings.traces_file, service_name=settings.service_name)
        except OSError as e:
            raise ConfigurationError(f"cannot open traces file {settings.traces_file!r}: {e}") from e

    if kind == "console":
        return ConsoleSpanExporter(service_name=settings.service_name, out=sys.stderr)

    if kind == "otlp":
        return OTLPSpanExporter(endpoint=settings.otlp_endpoint, insecure=True)

    raise ConfigurationError(f"unknown trace exporter {kind!r}")


def setup_tracing(settings: Settings) -> Tuple[TracerProvider, trace.Tracer]:
    """
    Initializes tracing for the interactive loop.

    BatchSpanProcessor buffers finished spans and exports them from a
    background thread, so the prompt loop never blocks on the exporter.
    Call shutdown_tracing() before exiting or buffered spans are lost.

    Args:
        settings: Effective settings (exporter, service identity)

    Returns:
        (provider, tracer) tuple; the tracer comes from this provider
    """
    resource = create_resource(
        settings.service_name,
        settings.service_version,
        settings.environment,
    )
    provider = TracerProvider(resource=resource)

    exporter = create_span_exporter(settings)
    if exporter is not None:
        provider.add_span_processor(BatchSpanProcessor(exporter))
        logger.info(f"Tracing initialized: {settings.service_name} -> {settings.trace_exporter}")
    else:
        logger.warning("Tracing exporter disabled, spans will be discarded")

    trace.set_tracer_provider(provider)

    return provider, provider.get_tracer(TRACER_NAME, settings.service_version)


def shutdown_tracing(provider: TracerProvider) -> None:
    """Flush buffered spans and release the exporter."""
    if not provider.force_flush():
        logger.warning("Timed out flushing spans, some traces may be missing")
    provider.shutdown()
    logger.info("Tracing shut down")


def get_trace_context() -> dict:
    """
    Extract current trace ID and span ID for correlation.

    Example:
        logger.error("Parse failed", extra=get_trace_context())

    Returns:
        Dict with trace_id and span_id (or empty if no active trace)
    """
    span = trace.get_current_span()
    ctx = span.get_span_context()

    if ctx.is_valid:
        return {
            "trace_id": format(ctx.trace_id, "032x"),
            "span_id": format(ctx.span_id, "016x"),
        }
    return {}
