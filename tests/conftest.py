from __future__ import annotations

import os
import sys
from collections.abc import Iterator
from pathlib import Path

# Settings are loaded at import time and MODEL_HOST is required.
os.environ.setdefault("MODEL_HOST", "http://model.test")
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("APP_VERSION", "v1")

# Ensure repo root is on sys.path so `import frontend` works under pytest.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import httpx  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from frontend.api.dependencies import get_model_client  # noqa: E402
from frontend.main import app  # noqa: E402
from frontend.metrics.collector import MetricsCollector  # noqa: E402
from frontend.services.model_client import ModelClient  # noqa: E402

MODEL_HOST = "http://model.test"


class ModelServiceStub:
    """Scriptable stand-in for the model service, served via httpx.MockTransport."""

    def __init__(self) -> None:
        self.result: object = "spam\n"
        self.predict_status = 200
        self.health_status = 200
        self.fail_with: Exception | None = None
        self.requests: list[httpx.Request] = []

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with is not None:
            raise self.fail_with
        if request.url.path == "/predict":
            return httpx.Response(self.predict_status, json={"result": self.result})
        if request.url.path == "/health":
            return httpx.Response(self.health_status, text="ok")
        return httpx.Response(404)

    def client(self) -> ModelClient:
        http = httpx.AsyncClient(transport=httpx.MockTransport(self.handle))
        return ModelClient(http, MODEL_HOST)


@pytest.fixture(autouse=True)
def metrics() -> MetricsCollector:
    """Fresh collector per test so counters don't bleed between tests."""
    collector = MetricsCollector(variant_label="v1")
    app.state.metrics = collector
    return collector


@pytest.fixture
def model_stub() -> Iterator[ModelServiceStub]:
    stub = ModelServiceStub()
    model_client = stub.client()
    app.dependency_overrides[get_model_client] = lambda: model_client
    yield stub
    app.dependency_overrides.pop(get_model_client, None)


@pytest.fixture
def client(model_stub: ModelServiceStub) -> TestClient:
    return TestClient(app)
