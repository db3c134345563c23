"""Reading and parsing Fibonacci requests from a text stream."""

import re
from typing import TextIO

from fibtrace.errors import EndOfInput, ParseError

_UNSIGNED = re.compile(r"[0-9]+")
_NEGATIVE = re.compile(r"-[0-9]+")


def parse_request(token: str) -> int:
    """
    Parse a base-10 unsigned integer.

    Only ASCII digits are accepted: no sign, no underscores, no blanks inside.
    There is no upper bound here; the engine enforces its own domain.

    Raises:
        ParseError: token is empty, negative, too long or not a number
    """
    token = token.strip()
    if _UNSIGNED.fullmatch(token):
        try:
            return int(token)
        except ValueError as e:
            # CPython caps int() at sys.get_int_max_str_digits() digits
            raise ParseError(token, "number too long") from e
    if not token:
        raise ParseError(token, "empty input")
    if _NEGATIVE.fullmatch(token):
        raise ParseError(token, "negative numbers are not allowed")
    raise ParseError(token)


def read_request(stream: TextIO) -> int:
    """
    Read one line from stream and parse it as a request.

    A final line without a trailing newline is still a request; only a read
    that returns nothing at all is end of input.

    Raises:
        EndOfInput: the stream is exhausted
        ParseError: the line is not an unsigned integer or cannot be decoded
    """
    try:
        line = stream.readline()
    except UnicodeDecodeError as e:
        raise ParseError(repr(e.object[e.start:e.end]), "input is not valid UTF-8") from e
    if line == "":
        raise EndOfInput()
    return parse_request(line)
