"""
Structured Logging Configuration

Logs go to stderr so they never interleave with the prompt/result stream the
user reads on stdout. In JSON mode every record carries the trace_id and
span_id of the active span, which links a log line to the Run/Poll/Write
spans in traces.txt or Jaeger.
"""

import logging
import sys
from typing import Any, Dict, Optional, TextIO

from opentelemetry import trace
from pythonjsonlogger import jsonlogger

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class CorrelationJsonFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter that injects trace_id and span_id into every log.

    Output:
        {"msg": "Computed value", "n": 10, "trace_id": "abc...", "span_id": "...", ...}
    """

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        """
        Inject custom fields into every log record.

        Args:
            log_record: The dict that will be serialized to JSON
            record: Python LogRecord object
            message_dict: Extra fields from logger.info("msg", extra={...})
        """
        super().add_fields(log_record, record, message_dict)

        # Add trace context (if exists)
        span = trace.get_current_span()
        ctx = span.get_span_context()
        if ctx.is_valid:
            log_record['trace_id'] = format(ctx.trace_id, '032x')
            log_record['span_id'] = format(ctx.span_id, '016x')

        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['timestamp'] = self.formatTime(record, self.datefmt)


def setup_logging(
    level: str = "WARNING",
    service_name: str = "fib",
    fmt: str = "json",
    stream: Optional[TextIO] = None,
) -> logging.Handler:
    """
    Configure application logging on the root logger.

    Calling it again replaces the handler installed by the previous call
    instead of stacking a second one.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        service_name: Service name to include in logs
        fmt: "json" for structured output, "text" for human-readable lines
        stream: Destination stream (defaults to sys.stderr)

    Returns:
        The installed handler
    """
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler._fibtrace = True

    if fmt == "json":
        formatter = CorrelationJsonFormatter(
            fmt='%(timestamp)s %(level)s %(logger)s %(message)s',
            rename_fields={'message': 'msg'},
            static_fields={'service': service_name},
        )
    else:
        formatter = logging.Formatter(TEXT_FORMAT)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    for existing in list(root_logger.handlers):
        if getattr(existing, "_fibtrace", False):
            root_logger.removeHandler(existing)
    root_logger.setLevel(level.upper())
    root_logger.addHandler(handler)

    # Exporter retry chatter is not interesting at INFO
    logging.getLogger("opentelemetry").setLevel(logging.WARNING)

    root_logger.debug(f"Logging initialized for {service_name}")
    return handler


def get_logger(name: str, **context) -> logging.LoggerAdapter:
    """
    Create a logger with pre-bound context.

        request_logger = get_logger(__name__, n=10)
        request_logger.debug("Computing")  # includes n=10

    Args:
        name: Logger name (usually __name__)
        **context: Key-value pairs to include in every log from this logger

    Returns:
        LoggerAdapter with pre-bound context
    """
    logger = logging.getLogger(name)
    return logging.LoggerAdapter(logger, extra=context)
