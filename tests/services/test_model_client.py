from __future__ import annotations

import asyncio
from collections.abc import Callable

import httpx
import pytest

from frontend.models.sms import Sms
from frontend.services.model_client import ModelClient, ModelServiceError

Handler = Callable[[httpx.Request], httpx.Response]


async def _predict(handler: Handler, text: str = "hello") -> str:
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        return await ModelClient(http, "http://model").predict(Sms(sms=text))


async def _health(handler: Handler) -> httpx.Response:
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        return await ModelClient(http, "http://model").health()


def test_predict_returns_stripped_result() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url == httpx.URL("http://model/predict")
        return httpx.Response(200, json={"sms": "hello", "result": "  ham\n"})

    assert asyncio.run(_predict(handler)) == "ham"


def test_predict_raises_on_http_error_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="overloaded")

    with pytest.raises(ModelServiceError, match="POST http://model/predict failed"):
        asyncio.run(_predict(handler))


def test_predict_raises_on_invalid_json() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>oops</html>")

    with pytest.raises(ModelServiceError, match="invalid JSON"):
        asyncio.run(_predict(handler))


def test_predict_raises_when_result_missing() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"sms": "hello"})

    with pytest.raises(ModelServiceError, match="no result"):
        asyncio.run(_predict(handler))


def test_predict_wraps_transport_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out")

    with pytest.raises(ModelServiceError) as exc_info:
        asyncio.run(_predict(handler))
    assert isinstance(exc_info.value.__cause__, httpx.ConnectTimeout)


def test_health_returns_upstream_response() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url == httpx.URL("http://model/health")
        return httpx.Response(204)

    assert asyncio.run(_health(handler)).status_code == 204
