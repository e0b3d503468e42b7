from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, Protocol

import httpx

from geo_engine.models import GeoPoint

from delivery_pricing.exceptions import GeocoderError, GeocoderResponseError, GeocoderTransientError
from delivery_pricing.models import GeocodeResult

DEFAULT_USER_AGENT = "delivery-fee-estimator/0.1"


class Geocoder(Protocol):
    name: str

    async def geocode(self, address: str) -> GeocodeResult: ...


class HttpGeocoder(ABC):
    """Free-text search geocoder over HTTP.

    Timeouts and connection failures (DNS lookups included) raise
    ``GeocoderTransientError`` so callers can retry them; non-2xx answers
    raise ``GeocoderResponseError``. An empty or unparseable result set is
    not an error and comes back as a failed ``GeocodeResult``.
    """

    name: str
    search_path: str

    def __init__(
        self,
        base_url: str,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout_seconds: float = 5.0,
        client_factory: Callable[[], httpx.AsyncClient] | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._user_agent = user_agent
        self._timeout_seconds = timeout_seconds
        self._client_factory = client_factory

    @abstractmethod
    def build_params(self, query: str) -> dict[str, Any]:
        raise NotImplementedError

    @abstractmethod
    def parse_point(self, payload: Any) -> GeoPoint | None:
        raise NotImplementedError

    async def geocode(self, address: str) -> GeocodeResult:
        query = address.strip()
        if not query:
            return GeocodeResult.failed(self.name)
        payload = await self._get_json(self.build_params(query))
        point = self.parse_point(payload)
        if point is None:
            return GeocodeResult.failed(self.name)
        return GeocodeResult(lat=point.lat, lng=point.lng, success=True, provider=self.name)

    async def _get_json(self, params: dict[str, Any]) -> Any:
        headers = {"User-Agent": self._user_agent, "Accept-Language": "en"}
        try:
            factory = self._client_factory or (lambda: httpx.AsyncClient(timeout=self._timeout_seconds))
            async with factory() as client:
                response = await client.get(f"{self._base_url}{self.search_path}", params=params, headers=headers)
                response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise GeocoderTransientError(f"{self.name} timed out") from exc
        except httpx.ConnectError as exc:
            raise GeocoderTransientError(f"{self.name} host not found or unreachable") from exc
        except httpx.HTTPStatusError as exc:
            raise GeocoderResponseError(f"{self.name} returned HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise GeocoderError(f"{self.name} request failed") from exc

        try:
            return response.json()
        except ValueError:
            return None


def to_float_pair(lat: Any, lng: Any) -> GeoPoint | None:
    try:
        return GeoPoint(lat=float(lat), lng=float(lng))
    except (TypeError, ValueError):
        return None
