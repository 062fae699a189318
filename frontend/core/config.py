from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Literal

AppEnv = Literal["dev", "test", "prod"]
LogLevel = Literal["debug", "info", "warning", "error"]

_TRUE_WORDS = ("1", "true", "yes", "on")
_FALSE_WORDS = ("0", "false", "no", "off")

SERVICE_NAME = "app-service"


def _getenv(name: str, default: str) -> str:
    # Centralize env access so it's easy to extend later (type casting, required vars)
    return os.environ.get(name, default).strip()


@dataclass(frozen=True)
class Settings:
    app_env: AppEnv
    log_level: LogLevel
    log_json: bool
    port: int
    model_host: str
    app_version: str
    model_timeout_seconds: float

    @property
    def is_dev(self) -> bool:
        return self.app_env == "dev"

    @property
    def is_test(self) -> bool:
        return self.app_env == "test"

    @property
    def is_prod(self) -> bool:
        return self.app_env == "prod"


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.lower()
    if value in _TRUE_WORDS:
        return True
    if value in _FALSE_WORDS:
        return False
    raise ValueError(f"{name} must be true|false (got {raw!r})")


def _parse_model_host(raw: str) -> str:
    if not raw:
        raise ValueError("MODEL_HOST is required (e.g. http://model-service:8081)")
    if "://" not in raw:
        raise ValueError(
            f'MODEL_HOST is missing protocol, like "http://..." (got {raw!r})'
        )
    return raw.rstrip("/")


def load_settings() -> Settings:
    app_env_raw = _getenv("APP_ENV", "dev").lower()
    log_level_raw = _getenv("LOG_LEVEL", "info").lower()
    port_raw = _getenv("PORT", "8080")
    timeout_raw = _getenv("MODEL_TIMEOUT_SECONDS", "10")

    if app_env_raw not in ("dev", "test", "prod"):
        raise ValueError(f"APP_ENV must be dev|test|prod (got {app_env_raw!r})")

    if log_level_raw not in ("debug", "info", "warning", "error"):
        raise ValueError(
            f"LOG_LEVEL must be debug|info|warning|error (got {log_level_raw!r})"
        )

    try:
        port = int(port_raw)
    except ValueError:
        raise ValueError(f"PORT must be an integer (got {port_raw!r})") from None

    try:
        model_timeout_seconds = float(timeout_raw)
    except ValueError:
        raise ValueError(
            f"MODEL_TIMEOUT_SECONDS must be a number (got {timeout_raw!r})"
        ) from None
    if model_timeout_seconds <= 0:
        raise ValueError(
            f"MODEL_TIMEOUT_SECONDS must be positive (got {timeout_raw!r})"
        )

    return Settings(  # type: ignore[arg-type]
        app_env=app_env_raw,
        log_level=log_level_raw,
        log_json=_parse_bool("LOG_JSON", _getenv("LOG_JSON", "false")),
        port=port,
        model_host=_parse_model_host(_getenv("MODEL_HOST", "")),
        app_version=_getenv("APP_VERSION", "v1") or "v1",
        model_timeout_seconds=model_timeout_seconds,
    )


# Module-level singleton so imports are cheap
SETTINGS = load_settings()
