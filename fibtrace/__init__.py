"""fibtrace - interactive Fibonacci demo instrumented with OpenTelemetry."""

__version__ = "0.1.0"

from fibtrace.app import App, format_result
from fibtrace.engine import MAX_FIBONACCI_INDEX, UINT64_MAX, fibonacci
from fibtrace.errors import (
    ConfigurationError,
    EndOfInput,
    FibonacciOverflowError,
    FibTraceError,
    InputError,
    ParseError,
)
from fibtrace.reader import parse_request, read_request

__all__ = [
    "App",
    "ConfigurationError",
    "EndOfInput",
    "FibonacciOverflowError",
    "FibTraceError",
    "InputError",
    "MAX_FIBONACCI_INDEX",
    "ParseError",
    "UINT64_MAX",
    "fibonacci",
    "format_result",
    "parse_request",
    "read_request",
]
