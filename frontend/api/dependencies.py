from __future__ import annotations

from fastapi import Request

from frontend.metrics.collector import MetricsCollector
from frontend.services.model_client import ModelClient


def get_metrics(request: Request) -> MetricsCollector:
    """The process-wide collector built in frontend.main."""
    return request.app.state.metrics


def get_model_client(request: Request) -> ModelClient:
    """The shared upstream client, created by the application lifespan.

    Tests that do not enter the lifespan override this dependency.
    """
    client: ModelClient | None = getattr(request.app.state, "model_client", None)
    if client is None:
        raise RuntimeError("ModelClient is not initialised; is the lifespan running?")
    return client
