"""
Error taxonomy for fibtrace.

Only FibonacciOverflowError is recoverable: the loop reports it and keeps
prompting. Every InputError ends the loop.
"""

from typing import Optional


class FibTraceError(Exception):
    """Base class for all fibtrace errors."""


class ConfigurationError(FibTraceError):
    """Invalid settings (unknown exporter, bad log level, ...)."""


class InputError(FibTraceError):
    """Reading the next request failed."""


class ParseError(InputError, ValueError):
    """The input token is not a base-10 unsigned integer."""

    def __init__(self, token: str, reason: Optional[str] = None):
        self.token = token
        self.reason = reason or "expected a non-negative base-10 integer"
        shown = token if len(token) <= 40 else f"{token[:20]}...({len(token)} chars)"
        super().__init__(f"invalid input {shown!r}: {self.reason}")


class EndOfInput(InputError, EOFError):
    """The input stream is exhausted."""

    def __init__(self, message: str = "end of input"):
        super().__init__(message)


class FibonacciOverflowError(FibTraceError, OverflowError):
    """The requested index has no unsigned 64-bit Fibonacci value."""

    def __init__(self, n: int, max_index: int):
        self.n = n
        self.max_index = max_index
        super().__init__(f"unsupported fibonacci number {n}: too large")
