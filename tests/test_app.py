from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from typing import Any, Iterator, List

import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from services.engine import TelemetryEngine
from services.errors import HttpStatus


class StubSource:
    def __init__(self, result: Any) -> None:
        self.result = result
        self.calls = 0
        self.closed = False

    async def fetch(self) -> List[Any]:
        self.calls += 1
        if isinstance(self.result, BaseException):
            raise self.result
        return self.result

    async def aclose(self) -> None:
        self.closed = True


def _payload() -> list[dict[str, Any]]:
    now = datetime.now(timezone.utc)
    return [
        {
            "timestamp": (now - timedelta(minutes=minutes)).isoformat(),
            "temperature": temperature,
            "humidity": "40.0",
            "gasVoltage": gas,
        }
        for minutes, temperature, gas in [
            (1, "21.5", "0.3"),
            (10, "21.0", "1.2"),
            (180, "20.0", "0.7"),
            (60 * 24 * 3, "18.0", "0.1"),
        ]
    ]


@contextmanager
def _client(source: StubSource) -> Iterator[TestClient]:
    engine = TelemetryEngine(source=source, poll_interval_ms=60_000)
    with TestClient(create_app(engine=engine)) as client:
        yield client


@pytest.fixture()
def source() -> StubSource:
    return StubSource(_payload())


@pytest.fixture()
def api_client(source: StubSource) -> Iterator[TestClient]:
    with _client(source) as client:
        yield client


def test_readings_default_to_last_hour(api_client: TestClient) -> None:
    api_client.post("/refresh")

    response = api_client.get("/readings")

    assert response.status_code == 200
    body = response.json()
    assert body["range"] == "hour"
    assert body["order"] == "newest"
    assert body["count"] == 2
    assert [item["temperature"] for item in body["readings"]] == [21.5, 21.0]
    assert [item["status"] for item in body["readings"]] == ["safe", "danger"]
    assert body["readings"][0]["gasVoltage"] == 0.3


def test_readings_window_and_order(api_client: TestClient) -> None:
    api_client.post("/refresh")

    day = api_client.get("/readings", params={"range": "day", "order": "oldest"}).json()
    everything = api_client.get("/readings", params={"range": "all"}).json()

    assert [item["temperature"] for item in day["readings"]] == [20.0, 21.0, 21.5]
    assert day["readings"][0]["status"] == "warning"
    assert everything["count"] == 4


def test_readings_rejects_unknown_range(api_client: TestClient) -> None:
    response = api_client.get("/readings", params={"range": "week"})

    assert response.status_code == 422


def test_latest_reading(api_client: TestClient) -> None:
    api_client.post("/refresh")

    response = api_client.get("/readings/latest")

    assert response.status_code == 200
    body = response.json()
    assert body["temperature"] == 21.5
    assert body["status"] == "safe"


def test_status_and_refresh(api_client: TestClient, source: StubSource) -> None:
    refreshed = api_client.post("/refresh")

    assert refreshed.status_code == 200
    body = refreshed.json()
    assert body["error"] is None
    assert body["loading"] is False
    assert body["running"] is True
    assert body["reading_count"] == 4
    assert source.calls >= 1

    status_body = api_client.get("/status").json()
    assert status_body["cycle_count"] >= 1


def test_fetch_failure_is_reported() -> None:
    with _client(StubSource(HttpStatus(500))) as client:
        client.post("/refresh")

        latest = client.get("/readings/latest")
        status_body = client.get("/status").json()

        assert latest.status_code == 404
        assert latest.json()["detail"] == "No readings available yet."
        assert status_body["error"] == "Error fetching sensor data: HTTP error! Status: 500"
        assert status_body["reading_count"] == 0


def test_shutdown_stops_engine_and_closes_source(source: StubSource) -> None:
    engine = TelemetryEngine(source=source, poll_interval_ms=60_000)
    with TestClient(create_app(engine=engine)) as client:
        assert client.get("/health").json() == {"status": "ok"}

    assert source.closed is True
    assert engine.running is False


def test_root_endpoint(api_client: TestClient) -> None:
    response = api_client.get("/")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
