"""Liveness and readiness probes.

  /health: "is the process alive?"  Always 200 while we can answer.
            A failing liveness probe makes Kubernetes restart the pod.

  /ready:  "should traffic be routed here?"  200 only when the model
            service answers its own /health with 2xx.  A failing
            readiness probe only takes the pod out of rotation, which
            is enough while the model service is still
            starting up.

Neither probe is counted in the request metrics (see MetricsMiddleware).
"""

from __future__ import annotations

import logging
from typing import Annotated

import httpx
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from frontend.api.dependencies import get_model_client
from frontend.core.config import SERVICE_NAME
from frontend.services.model_client import ModelClient

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "UP", "service": SERVICE_NAME}


@router.get("/ready")
async def ready(
    model: Annotated[ModelClient, Depends(get_model_client)],
) -> JSONResponse:
    body = {"service": SERVICE_NAME, "modelHost": model.model_host}

    try:
        resp = await model.health()
    except httpx.HTTPError as e:
        logger.warning("Model service unreachable at %s: %s", model.model_host, e)
        body.update(
            status="NOT_READY",
            modelService="unreachable",
            error=f"{type(e).__name__}: {e}",
        )
        return JSONResponse(body, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)

    if resp.is_success:
        body.update(status="READY", modelService="reachable")
        return JSONResponse(body)

    body.update(
        status="NOT_READY",
        modelService="unhealthy",
        modelStatus=str(resp.status_code),
    )
    return JSONResponse(body, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
