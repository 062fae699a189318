"""MetricsCollector: the one object request handlers talk to.

It owns the process-wide metric state:

  app_http_requests_total            counter   (endpoint, status)
  sms_app_requests_total             counter   (status): predict only
  app_active_requests                gauge
  app_http_request_duration_seconds  histogram

plus an optional "variant" label (the deployed app version, e.g. v1/v2)
that is appended to every series so two releases running side by side
can be compared on the same dashboard.

ONE INSTANCE, PASSED AROUND
-----------------------------
frontend.main builds exactly one collector at startup and stores it on
app.state.metrics.  The middleware and the routes read it from there
instead of importing a module-level global, so tests can swap in a
fresh collector per test.  Each collector registers its metrics in its
own prometheus_client CollectorRegistry rather than the default global
one, so two collectors never collide on metric names.

ACTIVE REQUESTS MUST BALANCE
------------------------------
Every record_request_start() needs a matching record_request_end(), or
the gauge drifts upward forever.  Use track_request() as a context
manager; its exit runs on every path out of the block:

  with metrics.track_request():
      response = await call_next(request)
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from prometheus_client import CollectorRegistry

from frontend.metrics.counter import CounterRegistry
from frontend.metrics.exposition import (
    ACTIVE_REQUESTS,
    ACTIVE_REQUESTS_HELP,
    PREDICT_REQUESTS_HELP,
    REQUEST_DURATION,
    REQUEST_DURATION_HELP,
    REQUESTS_HELP,
    MetricsSnapshot,
    render_exposition,
)
from frontend.metrics.gauge import Gauge
from frontend.metrics.histogram import Histogram

logger = logging.getLogger(__name__)


class MetricsCollector:
    def __init__(self, variant_label: str | None = None) -> None:
        # Private registry: one collector never sees another collector's series.
        self.registry = CollectorRegistry()
        self.requests = CounterRegistry(
            "app_http_requests", REQUESTS_HELP, ["endpoint", "status"], self.registry
        )
        self.predictions = CounterRegistry(
            "sms_app_requests", PREDICT_REQUESTS_HELP, ["status"], self.registry
        )
        self.active_requests = Gauge(ACTIVE_REQUESTS, ACTIVE_REQUESTS_HELP, self.registry)
        self.duration = Histogram(
            REQUEST_DURATION, REQUEST_DURATION_HELP, registry=self.registry
        )
        self._variant_label: str | None = None
        self.set_variant_label(variant_label)

    @property
    def variant_label(self) -> str | None:
        return self._variant_label

    def set_variant_label(self, variant_label: str | None) -> None:
        """Set the variant label; None or blank values are ignored."""
        if variant_label is not None and variant_label.strip():
            self._variant_label = variant_label.strip()
            logger.debug("Metrics variant label set to %r", self._variant_label)

    # ---- gauge ----

    def record_request_start(self) -> None:
        self.active_requests.increment()

    def record_request_end(self) -> None:
        self.active_requests.decrement()

    @contextmanager
    def track_request(self) -> Iterator[None]:
        """Hold the active-requests gauge up for the duration of the block."""
        self.record_request_start()
        try:
            yield
        finally:
            self.record_request_end()

    # ---- counters ----

    def record_request(self, endpoint: str, status_code: int) -> None:
        self.requests.increment(endpoint, str(int(status_code)))

    def record_predict(self, status_code: int) -> None:
        self.predictions.increment(str(int(status_code)))

    # ---- histogram ----

    def record_duration(self, duration_millis: int) -> None:
        """Record a request duration given in milliseconds."""
        if duration_millis < 0:
            raise ValueError(f"duration_millis must be non-negative (got {duration_millis!r})")
        self.duration.record(duration_millis / 1000.0)

    # ---- exposition ----

    def snapshot(self) -> MetricsSnapshot:
        """Read each metric once.  Not atomic across metrics."""
        return MetricsSnapshot(
            requests=self.requests.snapshot(),
            predictions=self.predictions.snapshot(),
            active_requests=self.active_requests.value,
            duration=self.duration.snapshot(),
            variant_label=self._variant_label,
        )

    def render_exposition(self) -> str:
        return render_exposition(self.snapshot())
