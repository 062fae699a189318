from __future__ import annotations

from prometheus_client import CollectorRegistry
from prometheus_client import Gauge as _PromGauge


class Gauge:
    """A single signed integer that goes up and down.

    Only ever read for rendering, so there is no compare-and-set.
    """

    def __init__(
        self,
        name: str,
        documentation: str,
        registry: CollectorRegistry | None = None,
    ) -> None:
        if registry is None:
            registry = CollectorRegistry()
        self._gauge = _PromGauge(name, documentation, registry=registry)

    def increment(self) -> None:
        self._gauge.inc()

    def decrement(self) -> None:
        self._gauge.dec()

    @property
    def value(self) -> int:
        for metric in self._gauge.collect():
            for sample in metric.samples:
                return int(sample.value)
        return 0
