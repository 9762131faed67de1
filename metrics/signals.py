"""Golden signals recorded for every request served by the application"""
import time
from contextlib import contextmanager
from typing import Callable, Iterator

from .registry import MetricRegistry


REQUEST_COUNT = "request_count"
ERROR_COUNT = "error_count"
RESPONSE_LATENCY = "response_latency"


class Outcome:
    """Handle yielded by GoldenSignals.track() to flag a failure that raised nothing"""

    def __init__(self):
        self.failed = False

    def fail(self) -> None:
        self.failed = True


class GoldenSignals:
    """Request, error and latency instruments for one origin

    Failed requests are counted as errors and never contribute a latency
    sample; successful requests overwrite the latency gauge in milliseconds.
    """

    def __init__(self, registry: MetricRegistry, origin: str, clock: Callable[[], float] = time.monotonic):
        self.registry = registry
        self.origin = origin
        self.clock = clock

        self.request_count = registry.define_counter(
            REQUEST_COUNT, "Total requests received", ["origin"]
        )
        self.error_count = registry.define_counter(
            ERROR_COUNT, "Total requests that failed", ["origin"]
        )
        self.response_latency = registry.define_gauge(
            RESPONSE_LATENCY, "Latency of the last successful request in milliseconds", ["origin"]
        )

        self._requests = self.request_count.labels(origin=origin)
        self._errors = self.error_count.labels(origin=origin)
        self._latency = self.response_latency.labels(origin=origin)

    def record_request(self) -> None:
        self._requests.add(1)

    def record_error(self) -> None:
        self._errors.add(1)

    def record_latency(self, elapsed_ms: float) -> None:
        self._latency.set(elapsed_ms)

    @contextmanager
    def track(self) -> Iterator[Outcome]:
        """Count a unit of work and record its outcome

        Raising inside the block, or calling fail() on the yielded Outcome,
        counts an error; otherwise the elapsed time becomes the latency.
        """
        self.record_request()
        start = self.clock()
        outcome = Outcome()
        try:
            yield outcome
        except Exception:
            self.record_error()
            raise
        if outcome.failed:
            self.record_error()
        else:
            self.record_latency((self.clock() - start) * 1000)
