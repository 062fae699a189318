from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from frontend.api.health import router as health_router
from frontend.api.sms import router as sms_router
from frontend.core.config import SETTINGS
from frontend.core.logging import setup_logging
from frontend.metrics.collector import MetricsCollector
from frontend.middleware.metrics import MetricsMiddleware
from frontend.middleware.request_context import (
    RequestContextMiddleware,
    install_request_context_filter,
)
from frontend.services.model_client import ModelClient

# Configure logging before anything else runs.
setup_logging(
    SETTINGS.log_level,
    json_format=SETTINGS.log_json,
    version=SETTINGS.app_version,
)
install_request_context_filter()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # One pooled upstream client for the whole process; closed on shutdown.
    async with httpx.AsyncClient(timeout=SETTINGS.model_timeout_seconds) as http:
        app.state.model_client = ModelClient(http, SETTINGS.model_host)
        logger.info('Working with MODEL_HOST="%s"', SETTINGS.model_host)
        yield
    app.state.model_client = None


app = FastAPI(
    title="sms-frontend",
    lifespan=lifespan,
    docs_url="/docs" if SETTINGS.is_dev else None,
    redoc_url="/redoc" if SETTINGS.is_dev else None,
)

# The single metrics aggregator for this process.
app.state.metrics = MetricsCollector(variant_label=SETTINGS.app_version)

# Middleware execution order: last-added runs first (outermost layer).
# RequestContext (outermost) → Metrics → route handler
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestContextMiddleware)

app.include_router(sms_router)
app.include_router(health_router)

logger.info(
    "sms-frontend started  env=%s log_level=%s port=%d variant=%s",
    SETTINGS.app_env,
    SETTINGS.log_level,
    SETTINGS.port,
    SETTINGS.app_version,
)
