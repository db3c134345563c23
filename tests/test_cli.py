"""Tests for the fibtrace command line."""

import pytest
from typer.testing import CliRunner

from fibtrace import __version__
from fibtrace.app import App
from fibtrace.cli import app

runner = CliRunner()


def test_run_end_to_end():
    result = runner.invoke(app, ["run", "--exporter", "none"], input="5\n3\n")

    assert result.exit_code == 0
    assert result.stdout.index("Fibonacci(5) = 5") < result.stdout.index("Fibonacci(3) = 2")


def test_run_reports_overflow_and_continues():
    result = runner.invoke(app, ["run", "--exporter", "none"], input="94\n10\n")

    assert result.exit_code == 0
    assert "Fibonacci(94): unsupported fibonacci number 94: too large" in result.stdout
    assert "Fibonacci(10) = 55" in result.stdout


def test_run_exits_nonzero_on_parse_error():
    result = runner.invoke(app, ["run", "--exporter", "none"], input="12\nabc\n3\n")

    assert result.exit_code == 1
    assert "Fibonacci(12) = 144" in result.stdout
    assert "Fibonacci(3)" not in result.stdout
    assert "invalid input 'abc'" in result.output
    assert result.exception is None or isinstance(result.exception, SystemExit)


@pytest.mark.parametrize(
    "stdin",
    ["9" * 5000 + "\n", b"\xff\n"],
    ids=["too-many-digits", "invalid-utf8"],
)
def test_run_handles_unreadable_input(stdin):
    result = runner.invoke(app, ["run", "--exporter", "none"], input=stdin)

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "invalid input" in result.output


def test_compute_rejects_over_long_number():
    result = runner.invoke(app, ["compute", "9" * 5000])

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "number too long" in result.output


def test_run_writes_traces_and_metrics(tmp_path):
    traces = tmp_path / "traces.txt"
    metrics = tmp_path / "fib.prom"

    result = runner.invoke(
        app,
        ["run", "--exporter", "file", "--traces-file", str(traces), "--metrics-file", str(metrics)],
        input="1\n2\n",
    )

    assert result.exit_code == 0
    content = traces.read_text()
    for name in ("Run", "Poll", "Write", "Fibonacci"):
        assert f'"name": "{name}"' in content
    assert 'fib_requests_total{outcome="ok"} 2.0' in metrics.read_text()


def test_run_rejects_unknown_exporter():
    result = runner.invoke(app, ["run", "--exporter", "zipkin"], input="1\n")

    assert result.exit_code == 2
    assert "Configuration error" in result.output


def test_interrupt_says_goodbye(monkeypatch):
    def interrupted(self, ctx=None):
        raise KeyboardInterrupt

    monkeypatch.setattr(App, "run", interrupted)

    result = runner.invoke(app, ["run", "--exporter", "none"])

    assert result.exit_code == 0
    assert "goodbye" in result.stdout


@pytest.mark.parametrize("n, expected", [("0", "Fibonacci(0) = 0"), ("10", "Fibonacci(10) = 55")])
def test_compute(n, expected):
    result = runner.invoke(app, ["compute", n])

    assert result.exit_code == 0
    assert result.stdout.strip() == expected


def test_compute_overflow():
    result = runner.invoke(app, ["compute", "94"])

    assert result.exit_code == 1
    assert "too large" in result.stdout


def test_compute_rejects_garbage():
    result = runner.invoke(app, ["compute", "ten"])

    assert result.exit_code == 1
    assert "invalid input" in result.output


def test_config_shows_settings():
    result = runner.invoke(app, ["config"])

    assert result.exit_code == 0
    assert "trace_exporter" in result.stdout


def test_config_flags_invalid_settings(monkeypatch):
    monkeypatch.setenv("FIB_TRACE_EXPORTER", "zipkin")

    result = runner.invoke(app, ["config"])

    assert result.exit_code == 2
    assert "ERROR" in result.stdout


def test_version():
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.stdout
