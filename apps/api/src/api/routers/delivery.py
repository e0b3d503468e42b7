from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request

from api.dependencies import get_delivery_service
from api.errors import ApiError
from api.response import success_response
from api.schemas.delivery import EstimateFeeRequest
from api.services.delivery_service import DeliveryService

router = APIRouter(prefix="/v1/delivery", tags=["delivery"])


@router.post("/estimate-fee")
async def estimate_fee(
    request: Request,
    payload: EstimateFeeRequest,
    service: DeliveryService = Depends(get_delivery_service),
) -> dict:
    result = await service.estimate_fee(payload.delivery_address)
    metrics = getattr(request.app.state, "composite_metrics", None)
    if metrics is not None:
        metrics.observe_estimate(result.source, result.is_estimate)
    return result.to_payload()


@router.get("/plus-code/validate")
async def validate_plus_code(
    code: str = Query(min_length=1, max_length=64),
    service: DeliveryService = Depends(get_delivery_service),
) -> dict:
    if not code.strip():
        raise ApiError.validation("code must not be blank")
    result = service.validate_plus_code(code)
    return success_response(result.model_dump(), meta={})


@router.get("/pricing")
async def pricing(service: DeliveryService = Depends(get_delivery_service)) -> dict:
    return success_response(service.pricing_info().model_dump(), meta={})
