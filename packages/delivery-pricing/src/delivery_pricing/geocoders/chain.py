from __future__ import annotations

import logging
from collections.abc import Sequence

from delivery_pricing.exceptions import GeocoderTransientError, ProviderRequestError
from delivery_pricing.geocoders.base import Geocoder
from delivery_pricing.models import GeocodeResult
from delivery_pricing.retry import with_exponential_backoff

logger = logging.getLogger(__name__)

NO_PROVIDER = "none"


def _is_transient(exc: Exception) -> bool:
    return isinstance(exc, GeocoderTransientError)


class GeocoderChain:
    """Tries geocoders in priority order; the first coordinate pair wins.

    Transient failures are retried up to ``retries`` more times on the same
    provider before moving on. Nothing is raised to the caller.
    """

    def __init__(
        self,
        geocoders: Sequence[Geocoder],
        retries: int = 2,
        base_delay_seconds: float = 0.5,
    ) -> None:
        if retries < 0:
            raise ValueError("retries must be >= 0")
        self._geocoders = tuple(geocoders)
        self._retries = retries
        self._base_delay_seconds = base_delay_seconds

    @property
    def providers(self) -> list[str]:
        return [geocoder.name for geocoder in self._geocoders]

    async def geocode(self, address: str) -> GeocodeResult:
        for geocoder in self._geocoders:
            result = await self._try_provider(geocoder, address)
            if result.success:
                return result
        return GeocodeResult.failed(NO_PROVIDER)

    async def _try_provider(self, geocoder: Geocoder, address: str) -> GeocodeResult:
        def on_retry(attempt: int, delay: float) -> None:
            logger.warning(
                "geocoder_retry",
                extra={"component": "delivery_pricing", "provider": geocoder.name, "attempt": attempt, "delay": delay},
            )

        try:
            result = await with_exponential_backoff(
                lambda: geocoder.geocode(address),
                retries=self._retries + 1,
                base_delay_seconds=self._base_delay_seconds,
                on_retry=on_retry,
                should_retry=_is_transient,
            )
        except ProviderRequestError as exc:
            logger.warning(
                "geocoder_failed",
                extra={"component": "delivery_pricing", "provider": geocoder.name, "error": str(exc)},
            )
            return GeocodeResult.failed(geocoder.name)
        if not result.success:
            logger.info("geocoder_no_result", extra={"component": "delivery_pricing", "provider": geocoder.name})
        return result
