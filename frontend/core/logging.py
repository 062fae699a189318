"""Logging configuration for the SMS frontend.

Everything goes to stdout; the container runtime collects it.  Metrics
(frontend.metrics) say how many predictions failed, logs say which
ones and what the model service answered.

Every line is stamped with the service name and the deployed version
(APP_VERSION), so output from v1 and v2 running side by side can be
told apart without looking at the container name.

LINE FORMAT (default)
-----------------------
  2026-03-01T14:02:11.482+00:00 WARNING  app-service/v1 [3f2a..] frontend.api.sms: Model call failed  (sms.py:61)

  The bracketed field is the X-Request-ID of the request being served,
  or "-" outside a request.  WARNING and above end with the source
  location; exc_info adds the traceback on the following lines.

JSON (LOG_JSON=true)
----------------------
  One object per line.  service and version are always present; the
  request fields attached by RequestContextMiddleware (request_id,
  method, path, status_code, duration_ms) are lifted to top-level keys
  when set.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

from frontend.core.config import SERVICE_NAME

_REQUEST_FIELDS = ("request_id", "method", "path", "status_code", "duration_ms")

# httpx logs every upstream call at INFO; uvicorn duplicates our access line.
_NOISY_LOGGERS = ("uvicorn", "uvicorn.access", "uvicorn.error", "httpcore", "httpx")


def _timestamp(record: logging.LogRecord) -> str:
    created = datetime.fromtimestamp(record.created, tz=timezone.utc)
    return created.isoformat(timespec="milliseconds")


def _request_id(record: logging.LogRecord) -> str:
    return str(getattr(record, "request_id", None) or "-")


class _TextFormatter(logging.Formatter):
    def __init__(self, service: str, version: str) -> None:
        super().__init__()
        self.origin = f"{service}/{version}"

    def format(self, record: logging.LogRecord) -> str:
        line = (
            f"{_timestamp(record)} {record.levelname:<8} {self.origin} "
            f"[{_request_id(record)}] {record.name}: {record.getMessage()}"
        )
        if record.levelno >= logging.WARNING:
            line += f"  ({record.filename}:{record.lineno})"
        if record.exc_info and record.exc_info[0] is not None:
            line += "\n" + self.formatException(record.exc_info)
        return line


class _JsonFormatter(logging.Formatter):
    def __init__(self, service: str, version: str) -> None:
        super().__init__()
        self.service = service
        self.version = version

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "timestamp": _timestamp(record),
            "level": record.levelname,
            "service": self.service,
            "version": self.version,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key in _REQUEST_FIELDS:
            value = getattr(record, key, None)
            # "-" is the request_id placeholder outside of a request
            if value is not None and value != "-":
                entry[key] = value

        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def setup_logging(
    level_name: str,
    *,
    json_format: bool = False,
    version: str = "unknown",
    service: str = SERVICE_NAME,
) -> None:
    """Route all logging to stdout with the frontend's line format.

    Args:
        level_name: debug/info/warning/error; anything else means info.
        json_format: emit JSON lines instead of text.
        version: deployed app version stamped on every line.
        service: service name stamped on every line.
    """
    level = getattr(logging, level_name.upper(), logging.INFO)

    formatter_cls = _JsonFormatter if json_format else _TextFormatter
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter_cls(service, version))

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
