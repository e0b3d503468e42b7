"""Client for the optional paid courier quotation API (Lalamove v3 style).

Requests are signed with HMAC-SHA256 over the timestamp, method, path and
body. Only used when both an API key and secret are configured.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import time
import uuid
from collections.abc import Callable
from typing import Any

import httpx

from geo_engine.models import GeoPoint, PickupLocation

from delivery_pricing.exceptions import QuotationError
from delivery_pricing.models import CourierQuote

QUOTATIONS_PATH = "/v3/quotations"
LALAMOVE_SANDBOX_URL = "https://rest.sandbox.lalamove.com"


def build_request_signature(secret: str, timestamp_ms: str, method: str, path: str, body: str) -> str:
    if not secret:
        raise ValueError("secret required")
    message = f"{timestamp_ms}\r\n{method.upper()}\r\n{path}\r\n\r\n{body}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


class CourierQuotationClient:
    def __init__(
        self,
        api_key: str,
        api_secret: str,
        base_url: str = LALAMOVE_SANDBOX_URL,
        market: str = "PH",
        service_type: str = "MOTORCYCLE",
        language: str = "en_PH",
        timeout_seconds: float = 5.0,
        client_factory: Callable[[], httpx.AsyncClient] | None = None,
        clock_ms: Callable[[], int] | None = None,
    ) -> None:
        if not api_key or not api_secret:
            raise ValueError("api_key and api_secret are required")
        self._api_key = api_key
        self._api_secret = api_secret
        self._base_url = base_url.rstrip("/")
        self._market = market
        self._service_type = service_type
        self._language = language
        self._timeout_seconds = timeout_seconds
        self._client_factory = client_factory
        self._clock_ms = clock_ms or (lambda: int(time.time() * 1000))

    def build_body(self, pickup: PickupLocation, dropoff: GeoPoint, dropoff_address: str) -> dict[str, Any]:
        return {
            "data": {
                "serviceType": self._service_type,
                "language": self._language,
                "stops": [
                    {
                        "coordinates": {"lat": str(pickup.lat), "lng": str(pickup.lng)},
                        "address": pickup.address,
                    },
                    {
                        "coordinates": {"lat": str(dropoff.lat), "lng": str(dropoff.lng)},
                        "address": dropoff_address,
                    },
                ],
            }
        }

    def build_headers(self, body: str) -> dict[str, str]:
        timestamp_ms = str(self._clock_ms())
        signature = build_request_signature(self._api_secret, timestamp_ms, "POST", QUOTATIONS_PATH, body)
        return {
            "Authorization": f"hmac {self._api_key}:{timestamp_ms}:{signature}",
            "Market": self._market,
            "Request-ID": str(uuid.uuid4()),
            "Content-Type": "application/json",
        }

    async def quote(self, pickup: PickupLocation, dropoff: GeoPoint, dropoff_address: str) -> CourierQuote:
        body = json.dumps(self.build_body(pickup, dropoff, dropoff_address), separators=(",", ":"))
        try:
            factory = self._client_factory or (lambda: httpx.AsyncClient(timeout=self._timeout_seconds))
            async with factory() as client:
                response = await client.post(
                    f"{self._base_url}{QUOTATIONS_PATH}",
                    content=body,
                    headers=self.build_headers(body),
                )
                response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise QuotationError("courier quotation timed out") from exc
        except httpx.HTTPStatusError as exc:
            raise QuotationError(f"courier quotation returned HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise QuotationError("courier quotation request failed") from exc

        try:
            return self.parse_quote(response.json())
        except ValueError as exc:
            raise QuotationError("invalid courier quotation response") from exc

    @staticmethod
    def parse_quote(payload: Any) -> CourierQuote:
        try:
            data = payload["data"]
            breakdown = data["priceBreakdown"]
            distance = data.get("distance") or {}
            distance_value = float(distance.get("value", 0))
            if distance.get("unit", "m") == "m":
                distance_value /= 1000.0
            quote = CourierQuote(
                quotation_id=str(data["quotationId"]),
                base_fee=float(breakdown["base"]),
                total_fee=float(breakdown["total"]),
                distance_km=round(distance_value, 1),
                currency=str(breakdown.get("currency", "PHP")),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError("missing quotation fields") from exc
        if quote.distance_km < 0 or quote.total_fee < 0:
            raise ValueError("quotation distance and fee must be >= 0")
        return quote
