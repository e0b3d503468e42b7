from __future__ import annotations

import time
from collections.abc import Callable

from geo_engine.models import GeoPoint, PickupLocation

from delivery_pricing.estimator import CourierQuoter
from delivery_pricing.models import CourierQuote

from api.circuit_breaker import CircuitBreaker


class GuardedCourierQuoter:
    """Routes courier quotation calls through a circuit breaker.

    An open circuit raises ``CircuitOpenError``, which the estimator treats
    like any other failed quotation.
    """

    def __init__(
        self,
        quoter: CourierQuoter,
        circuit_breaker: CircuitBreaker,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._quoter = quoter
        self._circuit_breaker = circuit_breaker
        self._clock = clock

    async def quote(self, pickup: PickupLocation, dropoff: GeoPoint, dropoff_address: str) -> CourierQuote:
        return await self._circuit_breaker.call(
            lambda: self._quoter.quote(pickup, dropoff, dropoff_address),
            now_seconds=self._clock(),
        )
