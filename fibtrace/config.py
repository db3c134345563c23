"""
Configuration management for fibtrace.
Handles environment variables, tracing exporter selection and logging settings.
"""

import logging
import os
from dataclasses import dataclass, field, fields, replace
from typing import Optional

from dotenv import load_dotenv

from fibtrace.errors import ConfigurationError

# Load environment variables
load_dotenv()

TRACE_EXPORTERS = ("file", "console", "otlp", "none")
LOG_FORMATS = ("json", "text")


def _env(name: str, default: Optional[str] = None):
    # Read at instantiation time so each Settings() sees the current environment
    return field(default_factory=lambda: os.getenv(name, default))


@dataclass
class Settings:
    """Runtime settings for the Fibonacci demo"""
    # Service identity (OpenTelemetry resource attributes)
    service_name: str = _env("FIB_SERVICE_NAME", "fib")
    service_version: str = _env("FIB_SERVICE_VERSION", "v0.1.0")
    environment: str = _env("ENVIRONMENT", "demo")

    # Tracing
    trace_exporter: str = _env("FIB_TRACE_EXPORTER", "file")
    traces_file: str = _env("FIB_TRACES_FILE", "traces.txt")
    otlp_endpoint: str = _env("OTLP_ENDPOINT", "http://localhost:4317")

    # Logging
    log_level: str = _env("LOG_LEVEL", "WARNING")
    log_format: str = _env("LOG_FORMAT", "json")

    # Metrics (Prometheus textfile, written on exit)
    metrics_file: Optional[str] = _env("FIB_METRICS_FILE")

    def validate(self) -> list[str]:
        """Validate settings and return list of warnings/errors"""
        issues = []

        if self.trace_exporter not in TRACE_EXPORTERS:
            issues.append(
                f"ERROR: trace_exporter must be one of {', '.join(TRACE_EXPORTERS)}, "
                f"got {self.trace_exporter!r}"
            )

        if self.trace_exporter == "file" and not self.traces_file:
            issues.append("ERROR: traces_file must be set when trace_exporter is 'file'")

        if self.trace_exporter == "otlp" and not self.otlp_endpoint:
            issues.append("ERROR: otlp_endpoint must be set when trace_exporter is 'otlp'")

        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            issues.append(f"ERROR: unknown log_level {self.log_level!r}")

        if self.log_format not in LOG_FORMATS:
            issues.append(f"ERROR: log_format must be 'json' or 'text', got {self.log_format!r}")

        if not self.service_name:
            issues.append("WARNING: service_name is empty, traces will be hard to find")

        if self.trace_exporter == "none":
            issues.append("WARNING: trace_exporter is 'none', spans will be discarded")

        return issues

    def summary(self) -> dict:
        """Return the effective settings for display/logging."""
        return {f.name: getattr(self, f.name) for f in fields(self)}


def load_settings(**overrides) -> Settings:
    """
    Build settings from the environment, apply non-None overrides and validate.

    Raises:
        ConfigurationError: if any validation issue is an ERROR
    """
    settings = replace(Settings(), **{k: v for k, v in overrides.items() if v is not None})

    errors = [issue for issue in settings.validate() if issue.startswith("ERROR")]
    if errors:
        raise ConfigurationError("; ".join(errors))

    return settings
