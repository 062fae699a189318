from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

from prometheus_client import CollectorRegistry

from frontend.metrics.gauge import Gauge


def _gauge() -> Gauge:
    return Gauge("app_active_requests", "test")


def test_gauge_starts_at_zero() -> None:
    assert _gauge().value == 0


def test_gauge_increment_and_decrement() -> None:
    g = _gauge()
    g.increment()
    g.increment()
    g.decrement()
    assert g.value == 1


def test_gauge_can_go_negative() -> None:
    # Unbalanced decrements are a caller bug, but the gauge reports them as-is.
    g = _gauge()
    g.decrement()
    assert g.value == -1


def test_gauge_registered_in_given_registry() -> None:
    prom = CollectorRegistry()
    g = Gauge("app_active_requests", "test", prom)
    g.increment()
    assert prom.get_sample_value("app_active_requests") == 1.0


def test_balanced_concurrent_updates_return_to_zero() -> None:
    g = _gauge()

    def worker(_: int) -> None:
        for _ in range(1000):
            g.increment()
            g.decrement()

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(worker, range(8)))

    assert g.value == 0
