from __future__ import annotations

import time

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from devkit.timezone import now_local_iso

from api.circuit_breaker import CircuitBreaker
from api.dependencies import get_circuit_breaker, get_settings
from api.errors import VALIDATION_ERROR, ApiError
from api.middleware import ObservabilityMiddleware
from api.observability import (
    CompositeApiMetricsCollector,
    InMemoryApiMetricsCollector,
    PrometheusApiMetricsCollector,
)
from api.response import error_response, success_response
from api.routers.delivery import router as delivery_router
from api.telemetry import configure_telemetry


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title="Delivery Fee API", version="0.1.0")
    configure_telemetry(settings)
    app.state.api_metrics = InMemoryApiMetricsCollector()
    app.state.prom_metrics = PrometheusApiMetricsCollector()
    app.state.composite_metrics = CompositeApiMetricsCollector(
        [app.state.api_metrics, app.state.prom_metrics]
    )
    app.add_middleware(ObservabilityMiddleware, collector=app.state.composite_metrics)
    app.include_router(delivery_router)

    @app.get("/healthz")
    async def healthz() -> dict:
        return success_response({"status": "ok"}, meta={"checked_at": now_local_iso()})

    @app.get("/readyz")
    async def readyz(circuit_breaker: CircuitBreaker = Depends(get_circuit_breaker)) -> dict:
        courier_circuit = circuit_breaker.state(time.time()).value
        return success_response({"status": "ready", "courier_circuit": courier_circuit}, meta={})

    @app.get("/metrics")
    async def metrics() -> Response:
        payload = app.state.prom_metrics.render()
        return Response(content=payload, media_type="text/plain; version=0.0.4")

    @app.exception_handler(ApiError)
    async def handle_api_error(_: Request, exc: ApiError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=error_response(exc.code, exc.message))

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
        message = "; ".join(err["msg"] for err in exc.errors())
        return JSONResponse(
            status_code=422,
            content=error_response(VALIDATION_ERROR, message),
        )

    return app


app = create_app()
