"""Counter registry: one monotonically increasing counter per label set.

Backed by a labelled prometheus_client.Counter.  `.labels(...)` is the
insert-if-absent step: the first call for a given set of label values
creates the child counter under the parent's lock, every later call
returns that same child.  Increments on a child are atomic.

Children are never removed.  A series lives as long as the process does.

The snapshot is keyed by the rendered label string
(endpoint="/sms/",status="200"), in the order series were first seen.
"""

from __future__ import annotations

from collections.abc import Sequence

from prometheus_client import CollectorRegistry, Counter

from frontend.metrics.labels import render_labels


class CounterRegistry:
    def __init__(
        self,
        name: str,
        documentation: str,
        labelnames: Sequence[str],
        registry: CollectorRegistry | None = None,
    ) -> None:
        if registry is None:
            registry = CollectorRegistry()
        self.labelnames = tuple(labelnames)
        self._counter = Counter(name, documentation, self.labelnames, registry=registry)

    def child(self, *label_values: str) -> Counter:
        """The child counter for ``label_values``, created at 0 if needed."""
        return self._counter.labels(*label_values)

    def increment(self, *label_values: str) -> None:
        self.child(*label_values).inc()

    def snapshot(self) -> dict[str, int]:
        """Current values in first-seen order.

        Not atomic across keys: increments landing while we read may or
        may not be included.
        """
        values: dict[str, int] = {}
        for metric in self._counter.collect():
            for sample in metric.samples:
                if sample.name.endswith("_total"):
                    values[render_labels(sample.labels.items())] = int(sample.value)
        return values

    def __len__(self) -> int:
        return len(self.snapshot())
