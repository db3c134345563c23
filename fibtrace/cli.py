"""CLI for fibtrace.

Runs the interactive Fibonacci loop with tracing, computes single values and
shows the effective configuration.
"""

import logging
import sys
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from fibtrace.app import App, format_result
from fibtrace.config import Settings, load_settings
from fibtrace.engine import fibonacci
from fibtrace.errors import ConfigurationError, EndOfInput, FibonacciOverflowError, ParseError
from fibtrace.observability import (
    FibonacciMetrics,
    setup_logging,
    setup_tracing,
    shutdown_tracing,
)
from fibtrace.reader import parse_request

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="fibtrace",
    help="Interactive Fibonacci calculator instrumented with OpenTelemetry",
    add_completion=False,
)

err_console = Console(stderr=True)


@app.command()
def run(
    exporter: Optional[str] = typer.Option(
        None,
        "--exporter",
        "-e",
        help="Span exporter: file, console, otlp or none",
    ),
    traces_file: Optional[str] = typer.Option(
        None,
        "--traces-file",
        help="Where the file exporter writes spans",
    ),
    otlp_endpoint: Optional[str] = typer.Option(
        None,
        "--otlp-endpoint",
        help="OTel Collector gRPC endpoint for the otlp exporter",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Log level for stderr logs",
    ),
    metrics_file: Optional[str] = typer.Option(
        None,
        "--metrics-file",
        help="Write Prometheus metrics to this file on exit",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
) -> None:
    """Prompt for Fibonacci requests on stdin until input ends."""
    try:
        settings = load_settings(
            trace_exporter=exporter,
            traces_file=traces_file,
            otlp_endpoint=otlp_endpoint,
            log_level="DEBUG" if verbose else log_level,
            metrics_file=metrics_file,
        )
    except ConfigurationError as e:
        err_console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        raise typer.Exit(2)

    setup_logging(settings.log_level, settings.service_name, settings.log_format)

    try:
        provider, tracer = setup_tracing(settings)
    except ConfigurationError as e:
        err_console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        raise typer.Exit(2)

    metrics = FibonacciMetrics()
    fib_app = App(sys.stdin, sys.stdout, tracer=tracer, metrics=metrics)
    exit_code = 0

    logger.info(f"Starting {settings.service_name} {settings.service_version}")
    try:
        fib_app.run()
    except EndOfInput:
        logger.info("Input closed, stopping")
    except ParseError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        exit_code = 1
    except KeyboardInterrupt:
        sys.stdout.write("\ngoodbye\n")
        sys.stdout.flush()
    finally:
        shutdown_tracing(provider)
        if settings.metrics_file:
            metrics.write_textfile(settings.metrics_file)
            logger.info(f"Metrics written to {settings.metrics_file}")

    if exit_code:
        raise typer.Exit(exit_code)


@app.command()
def compute(
    n: str = typer.Argument(..., help="Index into the Fibonacci sequence"),
) -> None:
    """Compute a single Fibonacci number without tracing."""
    try:
        index = parse_request(n)
    except ParseError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    try:
        value = fibonacci(index)
    except FibonacciOverflowError as e:
        typer.echo(format_result(index, error=e))
        raise typer.Exit(1)

    typer.echo(format_result(index, value))


@app.command()
def config() -> None:
    """Show current configuration and validation issues."""
    settings = Settings()

    table = Table(title="fibtrace Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    for name, value in settings.summary().items():
        table.add_row(name, "" if value is None else str(value))

    console = Console()
    console.print(table)

    issues = settings.validate()
    for issue in issues:
        style = "red" if issue.startswith("ERROR") else "yellow"
        console.print(f"[{style}]{issue}[/{style}]")

    if any(issue.startswith("ERROR") for issue in issues):
        raise typer.Exit(2)


def _show_version(value: bool) -> None:
    if value:
        from fibtrace import __version__
        typer.echo(f"fibtrace v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_show_version,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """fibtrace - Fibonacci numbers with OpenTelemetry traces."""


if __name__ == "__main__":
    app()
