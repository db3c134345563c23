"""
Interactive Fibonacci loop with tracing.

Every request gets its own root span, and the trace context is threaded
through explicitly:

    Run
    ├── Poll
    └── Write
        └── Fibonacci

Spans are opened with context managers so they end on every exit path,
including the read failure that terminates the loop.
"""

import logging
import time
from typing import Optional, TextIO

from opentelemetry import trace
from opentelemetry.context import Context
from opentelemetry.trace import Status, StatusCode

from fibtrace.engine import fibonacci
from fibtrace.errors import EndOfInput, FibonacciOverflowError, InputError
from fibtrace.observability.instrumentation import TRACER_NAME, get_trace_context
from fibtrace.observability.logging_config import get_logger
from fibtrace.observability.metrics import FibonacciMetrics
from fibtrace.reader import read_request

logger = logging.getLogger(__name__)

PROMPT = "What Fibonacci number would you like to know: "


def format_result(n: int, value: Optional[int] = None, error: Optional[Exception] = None) -> str:
    """Render one outcome line, either the value or the error."""
    if error is not None:
        return f"Fibonacci({n}): {error}"
    return f"Fibonacci({n}) = {value}"


def _fail_span(span: trace.Span, error: Exception) -> None:
    span.record_exception(error)
    span.set_status(Status(StatusCode.ERROR, str(error)))


class App:
    """Polls a reader for Fibonacci requests and writes results to a writer."""

    def __init__(
        self,
        reader: TextIO,
        writer: TextIO,
        tracer: Optional[trace.Tracer] = None,
        metrics: Optional[FibonacciMetrics] = None,
    ):
        self.reader = reader
        self.writer = writer
        self.tracer = tracer or trace.get_tracer(TRACER_NAME)
        self.metrics = metrics or FibonacciMetrics()

    def run(self, ctx: Optional[Context] = None) -> None:
        """
        Serve requests until reading fails.

        Args:
            ctx: Parent trace context; defaults to an empty context so every
                 Run span is a trace root

        Raises:
            EndOfInput: the reader is exhausted (normal termination)
            ParseError: a line was not an unsigned integer
        """
        parent = ctx if ctx is not None else Context()

        while True:
            # A read failure ends the loop but is not a failure of the Run span
            with self.tracer.start_as_current_span(
                "Run",
                context=parent,
                record_exception=False,
                set_status_on_exception=False,
            ) as span:
                run_ctx = trace.set_span_in_context(span, parent)
                n = self.poll(run_ctx)
                self.write(run_ctx, n)

    def poll(self, ctx: Context) -> int:
        """Prompt for and read the next request."""
        with self.tracer.start_as_current_span(
            "Poll",
            context=ctx,
            record_exception=False,
            set_status_on_exception=False,
        ) as span:
            self.writer.write(PROMPT)
            self.writer.flush()

            try:
                n = read_request(self.reader)
            except InputError as e:
                _fail_span(span, e)
                if isinstance(e, EndOfInput):
                    self.metrics.poll_failures_total.labels(reason="end_of_input").inc()
                    logger.debug("Input exhausted")
                else:
                    self.metrics.poll_failures_total.labels(reason="parse_error").inc()
                    logger.error(f"Rejected input: {e}", extra=get_trace_context())
                raise

            # String form: the value has no upper bound and would not fit an int64 attribute
            span.set_attribute("request.n", str(n))
            logger.debug(f"Received request n={n}")
            return n

    def write(self, ctx: Context, n: int) -> Optional[int]:
        """
        Compute fib(n) and write the outcome.

        Overflow is reported to the user and does not propagate.

        Returns:
            The computed value, or None if n was out of range
        """
        request_logger = get_logger(__name__, n=n)

        with self.tracer.start_as_current_span("Write", context=ctx) as span:
            write_ctx = trace.set_span_in_context(span, ctx)

            try:
                value = self.compute(write_ctx, n)
            except FibonacciOverflowError as e:
                self.metrics.requests_total.labels(outcome="overflow").inc()
                request_logger.warning(f"Request out of range: {e}")
                self._emit(format_result(n, error=e))
                return None

            self.metrics.requests_total.labels(outcome="ok").inc()
            request_logger.debug(f"Writing fib({n}) = {value}")
            self._emit(format_result(n, value))
            return value

    def compute(self, ctx: Context, n: int) -> int:
        """Run the engine inside a Fibonacci span."""
        with self.tracer.start_as_current_span(
            "Fibonacci",
            context=ctx,
            record_exception=False,
            set_status_on_exception=False,
        ) as span:
            start = time.perf_counter()
            try:
                value = fibonacci(n)
            except FibonacciOverflowError as e:
                _fail_span(span, e)
                raise
            finally:
                self.metrics.compute_seconds.observe(time.perf_counter() - start)

            logger.debug(f"Computed fib({n}) = {value}")
            return value

    def _emit(self, line: str) -> None:
        self.writer.write(line + "\n")
        self.writer.flush()
