"""
Pytest configuration and fixtures for fibtrace tests.
"""

import io
import logging

import pytest
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from fibtrace.app import App
from fibtrace.observability.metrics import FibonacciMetrics

ENV_VARS = [
    "FIB_SERVICE_NAME",
    "FIB_SERVICE_VERSION",
    "ENVIRONMENT",
    "FIB_TRACE_EXPORTER",
    "FIB_TRACES_FILE",
    "OTLP_ENDPOINT",
    "LOG_LEVEL",
    "LOG_FORMAT",
    "FIB_METRICS_FILE",
]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep developer shell settings out of the tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by setup_logging so streams from one test don't leak."""
    yield
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if getattr(handler, "_fibtrace", False):
            root_logger.removeHandler(handler)


@pytest.fixture
def span_exporter():
    """In-memory exporter collecting finished spans."""
    return InMemorySpanExporter()


@pytest.fixture
def tracer(span_exporter):
    """Tracer from a local provider (the global provider is never touched)."""
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(span_exporter))
    yield provider.get_tracer("fib-tests")
    provider.shutdown()


@pytest.fixture
def metrics():
    """Metrics on a private registry."""
    return FibonacciMetrics()


@pytest.fixture
def make_app(tracer, metrics):
    """Build an App over an in-memory input; returns (app, output buffer)."""

    def _make(text: str):
        output = io.StringIO()
        return App(io.StringIO(text), output, tracer=tracer, metrics=metrics), output

    return _make


def spans_by_name(span_exporter, name):
    return [span for span in span_exporter.get_finished_spans() if span.name == name]
