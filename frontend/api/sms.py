"""SMS frontend routes: the landing page, the predict proxy and /sms/metrics."""

from __future__ import annotations

import html
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from frontend.api.dependencies import get_metrics, get_model_client
from frontend.core.config import SETTINGS
from frontend.metrics.collector import MetricsCollector
from frontend.metrics.exposition import CONTENT_TYPE
from frontend.models.sms import Sms
from frontend.services.model_client import ModelClient, ModelServiceError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sms", tags=["sms"])

_INDEX_HTML = """\
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>SMS Checker</title>
</head>
<body>
  <h1>SMS Checker</h1>
  <form id="sms-form">
    <textarea name="sms" rows="4" cols="60" placeholder="Paste an SMS..."></textarea>
    <button type="submit">Check</button>
  </form>
  <p id="result"></p>
  <footer>model: {model_host} · version: {app_version}</footer>
  <script>
    document.getElementById("sms-form").addEventListener("submit", async (e) => {{
      e.preventDefault();
      const sms = e.target.sms.value;
      const resp = await fetch("./", {{
        method: "POST",
        headers: {{"Content-Type": "application/json"}},
        body: JSON.stringify({{sms}}),
      }});
      const body = await resp.json();
      document.getElementById("result").textContent =
        resp.ok ? body.result : "Error: " + body.detail;
    }});
  </script>
</body>
</html>
"""


@router.get("", include_in_schema=False)
async def redirect_to_slash() -> RedirectResponse:
    # Relative fetch() calls in the page resolve against /sms/, not /sms.
    return RedirectResponse(url="/sms/")


@router.get("/", response_class=HTMLResponse)
async def index() -> HTMLResponse:
    logger.debug("Rendering index  app_version=%s", SETTINGS.app_version)
    page = _INDEX_HTML.format(
        model_host=html.escape(SETTINGS.model_host),
        app_version=html.escape(SETTINGS.app_version),
    )
    return HTMLResponse(page)


@router.post("")
@router.post("/")
async def predict(
    sms: Sms,
    metrics: Annotated[MetricsCollector, Depends(get_metrics)],
    model: Annotated[ModelClient, Depends(get_model_client)],
) -> Sms:
    """Forward the SMS to the model service and return it with the verdict."""
    status_code = status.HTTP_200_OK
    try:
        logger.info('Requesting prediction for "%s" ...', sms.sms)
        result = await model.predict(sms)
        logger.info("Prediction: %s", result)
        return Sms(sms=sms.sms, result=result)
    except ModelServiceError as e:
        status_code = status.HTTP_502_BAD_GATEWAY
        logger.error("Prediction failed: %s", e)
        raise HTTPException(
            status_code=status_code, detail="Model service unavailable"
        ) from e
    except Exception:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        raise
    finally:
        metrics.record_predict(status_code)


@router.get("/metrics", include_in_schema=False)
async def exposition(
    metrics: Annotated[MetricsCollector, Depends(get_metrics)],
) -> Response:
    """Prometheus text exposition of the in-process metrics.  No auth."""
    return Response(content=metrics.render_exposition(), media_type=CONTENT_TYPE)
