"""HTTP client for the upstream model service.

The model service exposes two endpoints we use:

  POST {MODEL_HOST}/predict   body {"sms": "..."} → {"sms": "...", "result": "spam"}
  GET  {MODEL_HOST}/health    2xx when it can serve predictions

One httpx.AsyncClient is created in the application lifespan and shared
by all requests, so connections to the model service are pooled instead
of re-opened for every prediction.
"""

from __future__ import annotations

import logging

import httpx

from frontend.models.sms import Sms

logger = logging.getLogger(__name__)


class ModelServiceError(Exception):
    """The model service could not produce a prediction."""


class ModelClient:
    def __init__(self, http: httpx.AsyncClient, model_host: str) -> None:
        self._http = http
        self.model_host = model_host

    async def predict(self, sms: Sms) -> str:
        """Return the stripped prediction label for ``sms``.

        Raises ModelServiceError on transport errors, non-2xx answers and
        payloads without a string "result".
        """
        url = f"{self.model_host}/predict"
        try:
            resp = await self._http.post(url, json={"sms": sms.sms})
            resp.raise_for_status()
            payload = resp.json()
        except httpx.HTTPError as e:
            raise ModelServiceError(f"POST {url} failed: {e}") from e
        except ValueError as e:
            raise ModelServiceError(f"POST {url} returned invalid JSON") from e

        result = payload.get("result") if isinstance(payload, dict) else None
        if not isinstance(result, str):
            raise ModelServiceError(f"POST {url} returned no result: {payload!r}")
        return result.strip()

    async def health(self) -> httpx.Response:
        """GET {MODEL_HOST}/health.  Transport errors propagate to the caller."""
        return await self._http.get(f"{self.model_host}/health")
