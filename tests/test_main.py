from __future__ import annotations

from fastapi.testclient import TestClient

from frontend.main import app
from frontend.metrics.collector import MetricsCollector
from frontend.services.model_client import ModelClient


def test_routes_registered() -> None:
    paths = {getattr(route, "path", None) for route in app.routes}
    assert {"/sms", "/sms/", "/sms/metrics", "/health", "/ready"} <= paths


def test_docs_disabled_outside_dev() -> None:
    # conftest sets APP_ENV=test
    assert app.docs_url is None


def test_single_collector_on_app_state(metrics: MetricsCollector) -> None:
    assert app.state.metrics is metrics


def test_lifespan_creates_and_releases_model_client() -> None:
    with TestClient(app) as tc:
        model = app.state.model_client
        assert isinstance(model, ModelClient)
        assert model.model_host == "http://model.test"
        assert tc.get("/health").status_code == 200
    assert app.state.model_client is None


def test_predict_without_lifespan_or_override_is_a_server_error() -> None:
    app.state.model_client = None
    tc = TestClient(app, raise_server_exceptions=False)
    resp = tc.post("/sms/", json={"sms": "hi"})
    assert resp.status_code == 500
