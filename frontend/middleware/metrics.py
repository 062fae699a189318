"""Metrics middleware: instruments every proxied HTTP request.

For each request this middleware:
  1. Raises app_active_requests for as long as the request is in flight
  2. Times the request
  3. On completion: increments app_http_requests_total by
     endpoint/status and records the duration in
     app_http_request_duration_seconds

One middleware instead of a try/finally in every route: a route added
later is instrumented without anyone remembering to do it.

WHAT IS NOT INSTRUMENTED
--------------------------
/health and /ready are hit by the orchestrator every few seconds.
Counting them would drown the real traffic in probe noise.  The
exposition endpoint itself IS counted, so scrapes show up as
endpoint="/sms/metrics".

ENDPOINT LABEL
----------------
The label is the URL path, except for the predict POST: the browser
posts to "/sms" or "/sms/" (same handler), and both are reported as
"/sms/predict" so dashboards keep one series for the proxied call.

METRICS NEVER BREAK A REQUEST
-------------------------------
The gauge decrement always runs (track_request).  Recording the counter
and the duration is wrapped: a failure there is logged and swallowed,
the client still gets its response (or its original exception).
"""

from __future__ import annotations

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from frontend.metrics.collector import MetricsCollector

logger = logging.getLogger(__name__)

UNINSTRUMENTED_PATHS = frozenset({"/health", "/ready"})

_ENDPOINT_ALIASES = {
    ("POST", "/sms"): "/sms/predict",
    ("POST", "/sms/"): "/sms/predict",
}


def endpoint_label(method: str, path: str) -> str:
    return _ENDPOINT_ALIASES.get((method, path), path)


class MetricsMiddleware(BaseHTTPMiddleware):
    """Record request count, duration and in-flight gauge for every request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in UNINSTRUMENTED_PATHS:
            return await call_next(request)

        metrics: MetricsCollector = request.app.state.metrics
        endpoint = endpoint_label(request.method, request.url.path)
        status_code = 500
        start = time.monotonic()

        with metrics.track_request():
            try:
                response = await call_next(request)
                status_code = response.status_code
            finally:
                # An unhandled exception becomes a 500; record it and let it propagate.
                duration_ms = round((time.monotonic() - start) * 1000)
                _record(metrics, endpoint, status_code, duration_ms)

        return response


def _record(
    metrics: MetricsCollector, endpoint: str, status_code: int, duration_ms: int
) -> None:
    try:
        metrics.record_request(endpoint, status_code)
        metrics.record_duration(duration_ms)
    except Exception:
        logger.exception(
            "Failed to record metrics for %s (status=%d)", endpoint, status_code
        )
