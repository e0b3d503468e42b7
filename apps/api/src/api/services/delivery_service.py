from __future__ import annotations

import logging
import time
from collections.abc import Callable

from geo_engine.plus_code import PlusCodeTable, extract_plus_code, is_valid_plus_code, normalize_plus_code

from delivery_pricing.estimator import DeliveryFeeEstimator
from delivery_pricing.models import EstimateSource

from api.cache import EstimateCache
from api.schemas.delivery import DeliveryFeeResponse, PlusCodeValidationResult, PricingInfo

logger = logging.getLogger(__name__)

# low-confidence and courier-issued results must be recomputed on every request
_UNCACHED_SOURCES = {EstimateSource.DEFAULT.value, EstimateSource.COURIER_QUOTE.value}


class DeliveryService:
    def __init__(
        self,
        estimator: DeliveryFeeEstimator,
        plus_codes: PlusCodeTable,
        cache: EstimateCache | None = None,
        courier_quotation_enabled: bool = False,
        clock_ms: Callable[[], int] | None = None,
    ) -> None:
        self._estimator = estimator
        self._plus_codes = plus_codes
        self._cache = cache
        self._courier_quotation_enabled = courier_quotation_enabled
        self._clock_ms = clock_ms or (lambda: int(time.time() * 1000))

    async def estimate_fee(self, delivery_address: str) -> DeliveryFeeResponse:
        cached = await self._cache_get(delivery_address)
        if cached is not None:
            # synthetic ids are per request; the cached payload carries none
            quotation_id = f"est_{cached['source']}_{self._clock_ms()}"
            return DeliveryFeeResponse.model_validate({**cached, "quotationId": quotation_id})

        estimate = await self._estimator.estimate(delivery_address)
        response = DeliveryFeeResponse.from_estimate(estimate)
        if response.source not in _UNCACHED_SOURCES:
            payload = response.to_payload()
            payload.pop("quotationId", None)
            await self._cache_set(delivery_address, payload)
        return response

    def validate_plus_code(self, code: str) -> PlusCodeValidationResult:
        candidate = extract_plus_code(code) or normalize_plus_code(code)
        valid = is_valid_plus_code(candidate)
        resolvable = valid and self._plus_codes.resolve(candidate) is not None
        return PlusCodeValidationResult(valid=valid, normalized=candidate, resolvable=resolvable)

    def pricing_info(self) -> PricingInfo:
        schedule = self._estimator.fee_schedule
        return PricingInfo(
            pickup_address=self._estimator.pickup.address,
            base_fee=schedule.base_fee,
            first_tier_limit_km=schedule.first_tier_limit_km,
            first_tier_rate=schedule.first_tier_rate,
            second_tier_rate=schedule.second_tier_rate,
            currency=schedule.currency,
            courier_quotation_enabled=self._courier_quotation_enabled,
        )

    async def _cache_get(self, delivery_address: str) -> dict | None:
        if self._cache is None:
            return None
        try:
            return await self._cache.get(delivery_address)
        except Exception:
            logger.warning("estimate_cache_read_failed", extra={"component": "api"}, exc_info=True)
            return None

    async def _cache_set(self, delivery_address: str, payload: dict) -> None:
        if self._cache is None:
            return
        try:
            await self._cache.set(delivery_address, payload)
        except Exception:
            logger.warning("estimate_cache_write_failed", extra={"component": "api"}, exc_info=True)
