"""
Prometheus metrics for the Fibonacci loop.

The demo runs no HTTP server, so metrics are written once on exit in the
text exposition format (node-exporter textfile collector picks them up).
Each FibonacciMetrics owns a private registry; nothing is registered on the
global REGISTRY.
"""

from typing import Optional

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest, write_to_textfile


class FibonacciMetrics:
    """
    Request counters and compute latency for one process run.

    Labels are low-cardinality on purpose: the requested index is never a
    label (it is a span attribute instead).
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or CollectorRegistry()

        self.requests_total = Counter(
            'fib_requests_total',
            'Fibonacci requests handled',
            ['outcome'],  # ok / overflow
            registry=self.registry,
        )

        self.poll_failures_total = Counter(
            'fib_poll_failures_total',
            'Input reads that ended the loop',
            ['reason'],  # parse_error / end_of_input
            registry=self.registry,
        )

        self.compute_seconds = Histogram(
            'fib_compute_seconds',
            'Time spent in the Fibonacci engine',
            buckets=[0.000001, 0.00001, 0.0001, 0.001, 0.01],
            registry=self.registry,
        )

    def value(self, name: str, **labels) -> float:
        """Current sample value, 0.0 if the series has not been observed."""
        sample = self.registry.get_sample_value(name, labels)
        return sample if sample is not None else 0.0

    def render(self) -> str:
        """Registry contents in the Prometheus text exposition format."""
        return generate_latest(self.registry).decode("utf-8")

    def write_textfile(self, path: str) -> None:
        """Atomically write render() output to path."""
        write_to_textfile(path, self.registry)
