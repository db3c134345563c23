"""
Fibonacci engine.

Values are bounded to what an unsigned 64-bit integer can hold. Python ints
never wrap, so the bound is enforced up front against the largest valid
index rather than by detecting wraparound.
"""

from fibtrace.errors import FibonacciOverflowError

UINT64_MAX = 2**64 - 1

# fib(93) = 12200160415121876738 is the last value <= UINT64_MAX
MAX_FIBONACCI_INDEX = 93


def fibonacci(n: int) -> int:
    """
    Return the n-th Fibonacci number (fib(0) = 0, fib(1) = 1).

    Iterative, O(n) time and O(1) space.

    Args:
        n: Index into the sequence, 0 <= n <= MAX_FIBONACCI_INDEX

    Returns:
        fib(n), guaranteed to fit in an unsigned 64-bit integer

    Raises:
        FibonacciOverflowError: n > MAX_FIBONACCI_INDEX
        ValueError: n is negative
        TypeError: n is not an int
    """
    if isinstance(n, bool) or not isinstance(n, int):
        raise TypeError(f"fibonacci index must be an int, got {type(n).__name__}")
    if n < 0:
        raise ValueError(f"fibonacci index must be non-negative, got {n}")
    if n > MAX_FIBONACCI_INDEX:
        raise FibonacciOverflowError(n, MAX_FIBONACCI_INDEX)

    if n < 2:
        return n

    # Stops at fib(n); fib(n + 1) is never formed, so no step exceeds UINT64_MAX
    previous, current = 0, 1
    for _ in range(2, n + 1):
        previous, current = current, previous + current
    return current
