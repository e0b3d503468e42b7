import asyncio
import time

import pytest
from fastapi.testclient import TestClient

from api.app import create_app
from api.circuit_breaker import CircuitBreaker
from api.dependencies import get_circuit_breaker


def test_health_endpoint_response_shape() -> None:
    client = TestClient(create_app())
    response = client.get("/healthz")
    body = response.json()

    assert response.status_code == 200
    assert body["success"] is True
    assert body["data"]["status"] == "ok"
    assert body["meta"]["checked_at"].endswith("+08:00")


def test_ready_endpoint_response_shape() -> None:
    client = TestClient(create_app())
    response = client.get("/readyz")
    body = response.json()

    assert response.status_code == 200
    assert body["success"] is True
    assert body["data"]["status"] == "ready"
    assert body["data"]["courier_circuit"] == "closed"


def test_unknown_route_is_not_found() -> None:
    client = TestClient(create_app())
    response = client.get("/v1/facilities")

    assert response.status_code == 404


def test_ready_endpoint_reports_open_courier_circuit() -> None:
    app = create_app()
    breaker = CircuitBreaker("courier", failure_threshold=1, recovery_timeout_seconds=3600)

    async def fail_call() -> None:
        raise RuntimeError("courier down")

    with pytest.raises(RuntimeError):
        asyncio.run(breaker.call(fail_call, now_seconds=time.time()))
    app.dependency_overrides[get_circuit_breaker] = lambda: breaker
    client = TestClient(app)

    response = client.get("/readyz")

    assert response.status_code == 200
    assert response.json()["data"]["courier_circuit"] == "open"
