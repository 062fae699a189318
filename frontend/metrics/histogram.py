"""Latency histogram with fixed, cumulative buckets.

HOW CUMULATIVE BUCKETS WORK
-----------------------------
Each bucket is labelled with an upper bound ("le" = less than or equal)
and counts every observation at or below that bound, including the ones
already counted by smaller buckets.  Recording 0.06s with our default
bounds bumps 0.1, 0.25, 0.5, 1.0, 2.5, 5.0 and +Inf, but not 0.05:

  le=0.05   ████            (unchanged)
  le=0.1    █████           (+1)
  le=0.25   ██████          (+1)
  ...
  le=+Inf   ████████        (+1, always equals the total count)

Two consequences the tests rely on:
  - bucket counts never decrease as the bound grows
  - the +Inf bucket always equals `count`

Comparison is inclusive: recording exactly 0.005 lands in the 0.005
bucket.

Storage is a prometheus_client.Histogram; this wrapper adds input
validation and a plain snapshot for the renderer.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from prometheus_client import CollectorRegistry
from prometheus_client import Histogram as _PromHistogram

# Typical API latencies: 5ms cache hits up to 5s for a stuck upstream.
DEFAULT_BUCKETS: tuple[float, ...] = (
    0.005,
    0.01,
    0.025,
    0.05,
    0.1,
    0.25,
    0.5,
    1.0,
    2.5,
    5.0,
    math.inf,
)


@dataclass(frozen=True, slots=True)
class HistogramSnapshot:
    """Point-in-time copy of a histogram.

    `buckets` holds (upper_bound, cumulative_count) pairs in ascending
    order with +Inf last.
    """

    buckets: tuple[tuple[float, int], ...]
    sum: float
    count: int


class Histogram:
    def __init__(
        self,
        name: str,
        documentation: str,
        buckets: Sequence[float] = DEFAULT_BUCKETS,
        registry: CollectorRegistry | None = None,
    ) -> None:
        bounds = [float(b) for b in buckets]
        if not bounds or bounds[-1] != math.inf:
            bounds.append(math.inf)
        if any(lower >= upper for lower, upper in zip(bounds, bounds[1:])):
            raise ValueError(f"Histogram buckets must be strictly ascending (got {bounds!r})")

        if registry is None:
            registry = CollectorRegistry()
        self._bounds: tuple[float, ...] = tuple(bounds)
        self._histogram = _PromHistogram(
            name, documentation, buckets=self._bounds, registry=registry
        )

    @property
    def bounds(self) -> tuple[float, ...]:
        return self._bounds

    def record(self, duration_seconds: float) -> None:
        """Observe one duration in seconds.

        Raises ValueError for negative or NaN durations.
        """
        if math.isnan(duration_seconds) or duration_seconds < 0:
            raise ValueError(
                f"duration_seconds must be non-negative (got {duration_seconds!r})"
            )
        self._histogram.observe(duration_seconds)

    def snapshot(self) -> HistogramSnapshot:
        """Cumulative counts as collected; `_bucket` samples come in bound order."""
        counts: list[int] = []
        total = 0.0
        count = 0
        for metric in self._histogram.collect():
            for sample in metric.samples:
                if sample.name.endswith("_bucket"):
                    counts.append(int(sample.value))
                elif sample.name.endswith("_sum"):
                    total = sample.value
                elif sample.name.endswith("_count"):
                    count = int(sample.value)
        return HistogramSnapshot(
            buckets=tuple(zip(self._bounds, counts)),
            sum=total,
            count=count,
        )
