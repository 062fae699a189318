"""Prometheus text exposition format renderer.

Prometheus scrapes GET /sms/metrics and expects plain text like:

  # HELP app_active_requests Current number of requests being processed
  # TYPE app_active_requests gauge
  app_active_requests{variant="v1"} 3

Every metric family is a block of:
  1. a `# HELP <name> <description>` line
  2. a `# TYPE <name> <counter|gauge|histogram>` line
  3. one line per series: `<name>{labels} <value>`

Blocks are separated by a blank line.  Prometheus ignores blank lines;
they are only there for humans reading the endpoint with curl.

PLACEHOLDER SERIES
-------------------
A counter family with no series yet would only show HELP/TYPE lines and
Prometheus would not create the time series until the first request.
Dashboards and alerts that reference the metric then show "no data"
instead of 0.  We emit a single zero-valued placeholder series
(endpoint="none",status="0") until the first real one appears.

PURE FUNCTION
--------------
render_exposition() only formats a MetricsSnapshot.  Reading the live
counters/gauge/histogram happens in MetricsCollector.snapshot().
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass

from frontend.metrics.histogram import HistogramSnapshot
from frontend.metrics.labels import join_labels, render_labels

CONTENT_TYPE = "text/plain; version=0.0.4; charset=utf-8"

REQUESTS_TOTAL = "app_http_requests_total"
PREDICT_REQUESTS_TOTAL = "sms_app_requests_total"
ACTIVE_REQUESTS = "app_active_requests"
REQUEST_DURATION = "app_http_request_duration_seconds"

REQUESTS_HELP = "Total number of HTTP requests by endpoint and status code"
PREDICT_REQUESTS_HELP = "Total number of SMS predict requests by status code"
ACTIVE_REQUESTS_HELP = "Current number of requests being processed"
REQUEST_DURATION_HELP = "HTTP request latency in seconds"


@dataclass(frozen=True, slots=True)
class MetricsSnapshot:
    """Everything the renderer needs, read once from the live collector.

    Counter mappings are keyed by the rendered label string
    (see frontend.metrics.labels.render_labels).
    """

    requests: Mapping[str, int]
    predictions: Mapping[str, int]
    active_requests: int
    duration: HistogramSnapshot
    variant_label: str | None = None


def format_bound(bound: float) -> str:
    """Render a bucket upper bound for the `le` label (+Inf → "inf")."""
    return "inf" if math.isinf(bound) else repr(float(bound))


def _series(name: str, labels: str, value: str) -> str:
    if labels:
        return f"{name}{{{labels}}} {value}"
    return f"{name} {value}"


def _header(name: str, help_text: str, metric_type: str) -> list[str]:
    return [f"# HELP {name} {help_text}", f"# TYPE {name} {metric_type}"]


def _counter_block(
    name: str,
    help_text: str,
    values: Mapping[str, int],
    placeholder: str,
    variant: str,
) -> list[str]:
    lines = _header(name, help_text, "counter")
    if not values:
        lines.append(_series(name, join_labels(placeholder, variant), "0"))
        return lines
    for key, value in values.items():
        lines.append(_series(name, join_labels(key, variant), str(value)))
    return lines


def render_exposition(snapshot: MetricsSnapshot) -> str:
    """Format a snapshot as Prometheus text exposition (version 0.0.4)."""
    variant = (
        render_labels([("variant", snapshot.variant_label)])
        if snapshot.variant_label
        else ""
    )

    blocks: list[list[str]] = []

    blocks.append(
        _counter_block(
            REQUESTS_TOTAL,
            REQUESTS_HELP,
            snapshot.requests,
            render_labels([("endpoint", "none"), ("status", "0")]),
            variant,
        )
    )

    blocks.append(
        _counter_block(
            PREDICT_REQUESTS_TOTAL,
            PREDICT_REQUESTS_HELP,
            snapshot.predictions,
            render_labels([("status", "0")]),
            variant,
        )
    )

    gauge = _header(ACTIVE_REQUESTS, ACTIVE_REQUESTS_HELP, "gauge")
    gauge.append(_series(ACTIVE_REQUESTS, variant, str(snapshot.active_requests)))
    blocks.append(gauge)

    histogram = _header(REQUEST_DURATION, REQUEST_DURATION_HELP, "histogram")
    for bound, count in snapshot.duration.buckets:
        le = render_labels([("le", format_bound(bound))])
        histogram.append(
            _series(f"{REQUEST_DURATION}_bucket", join_labels(le, variant), str(count))
        )
    histogram.append(
        _series(f"{REQUEST_DURATION}_sum", variant, f"{snapshot.duration.sum:.3f}")
    )
    histogram.append(
        _series(f"{REQUEST_DURATION}_count", variant, str(snapshot.duration.count))
    )
    blocks.append(histogram)

    return "\n\n".join("\n".join(block) for block in blocks) + "\n"
