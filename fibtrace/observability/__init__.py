"""
Observability Package

Traces (OpenTelemetry), structured logs correlated with the active span
(python-json-logger) and Prometheus counters for the Fibonacci loop.
"""

from fibtrace.observability.instrumentation import (
    TRACER_NAME,
    create_resource,
    create_span_exporter,
    get_trace_context,
    setup_tracing,
    shutdown_tracing,
)
from fibtrace.observability.logging_config import get_logger, setup_logging
from fibtrace.observability.metrics import FibonacciMetrics

__all__ = [
    "TRACER_NAME",
    "FibonacciMetrics",
    "create_resource",
    "create_span_exporter",
    "get_logger",
    "get_trace_context",
    "setup_logging",
    "setup_tracing",
    "shutdown_tracing",
]
