"""Label key builder for the in-process metrics registry.

A Prometheus series is identified by its metric name plus a set of
labels.  Inside the exposition text the labels look like this:

  app_http_requests_total{endpoint="/sms/predict",status="200"} 12

The part between the braces is what this module produces.  The same
rendered string doubles as the dictionary key in the CounterRegistry,
so two calls with the same pairs in the same order always hit the same
counter.

ORDERING
---------
Pairs are rendered in the order the caller passes them.  We do NOT sort:
("endpoint", "status") and ("status", "endpoint") are two different
keys and would become two different series.  Every call site in this
project builds its pairs in one fixed order, so this never splits a
series in practice.

ESCAPING
---------
The exposition format reserves three characters inside label values:
backslash, double quote and newline.  An endpoint path never contains
them today, but a request path is user input, so each one is escaped
the way the format defines: a backslash is put in front of it (and the
newline itself becomes the letter "n").
"""

from __future__ import annotations

from collections.abc import Iterable

LabelPairs = Iterable[tuple[str, str]]


def escape_label_value(value: str) -> str:
    """Escape a label value for the text exposition format."""
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def render_labels(pairs: LabelPairs) -> str:
    """Render ``(name, value)`` pairs as ``name="value"`` joined by commas.

    Example: render_labels([("endpoint", "/sms/"), ("status", "200")])
    → 'endpoint="/sms/",status="200"'
    """
    return ",".join(f'{name}="{escape_label_value(value)}"' for name, value in pairs)


def join_labels(*parts: str) -> str:
    """Join already-rendered label fragments, skipping empty ones."""
    return ",".join(part for part in parts if part)
