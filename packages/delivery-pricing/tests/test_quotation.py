from __future__ import annotations

import hashlib
import hmac
import json

import httpx
import pytest

from geo_engine.models import GeoPoint, PickupLocation

from delivery_pricing.exceptions import QuotationError
from delivery_pricing.quotation import CourierQuotationClient, build_request_signature

PICKUP = PickupLocation(lat=15.12, lng=120.615, address="Angeles City, Pampanga")
DROPOFF = GeoPoint(lat=15.0535, lng=120.6996)


def build_client(handler) -> CourierQuotationClient:
    transport = httpx.MockTransport(handler)
    return CourierQuotationClient(
        api_key="pk_test",
        api_secret="sk_test",
        base_url="https://courier.example.com",
        client_factory=lambda: httpx.AsyncClient(transport=transport, timeout=5.0),
        clock_ms=lambda: 1700000000000,
    )


def test_request_signature_matches_hmac_sha256() -> None:
    expected = hmac.new(
        b"secret",
        b"1700000000000\r\nPOST\r\n/v3/quotations\r\n\r\n{}",
        hashlib.sha256,
    ).hexdigest()
    assert build_request_signature("secret", "1700000000000", "post", "/v3/quotations", "{}") == expected


def test_request_signature_requires_secret() -> None:
    with pytest.raises(ValueError):
        build_request_signature("", "1", "POST", "/v3/quotations", "{}")


def test_client_requires_credentials() -> None:
    with pytest.raises(ValueError):
        CourierQuotationClient(api_key="pk_test", api_secret="")


@pytest.mark.asyncio
async def test_quote_signs_request_and_parses_response() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v3/quotations"
        assert request.headers["market"] == "PH"
        body = request.content.decode("utf-8")
        signature = build_request_signature("sk_test", "1700000000000", "POST", "/v3/quotations", body)
        assert request.headers["authorization"] == f"hmac pk_test:1700000000000:{signature}"
        stops = json.loads(body)["data"]["stops"]
        assert stops[0]["address"] == "Angeles City, Pampanga"
        assert stops[1]["coordinates"] == {"lat": "15.0535", "lng": "120.6996"}
        return httpx.Response(
            201,
            json={
                "data": {
                    "quotationId": "1514140994227007571",
                    "priceBreakdown": {"base": "49", "total": "151", "currency": "PHP"},
                    "distance": {"value": "12960", "unit": "m"},
                }
            },
        )

    quote = await build_client(handler).quote(PICKUP, DROPOFF, "SM City Pampanga")

    assert quote.quotation_id == "1514140994227007571"
    assert quote.base_fee == 49.0
    assert quote.total_fee == 151.0
    assert quote.distance_km == 13.0
    assert quote.currency == "PHP"


@pytest.mark.asyncio
async def test_quote_maps_http_error() -> None:
    client = build_client(lambda _: httpx.Response(401, json={"message": "Unauthorized"}))
    with pytest.raises(QuotationError):
        await client.quote(PICKUP, DROPOFF, "SM City Pampanga")


@pytest.mark.asyncio
async def test_quote_maps_timeout() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    with pytest.raises(QuotationError):
        await build_client(handler).quote(PICKUP, DROPOFF, "SM City Pampanga")


@pytest.mark.asyncio
async def test_quote_rejects_malformed_payload() -> None:
    client = build_client(lambda _: httpx.Response(200, json={"data": {"quotationId": "x"}}))
    with pytest.raises(QuotationError):
        await client.quote(PICKUP, DROPOFF, "SM City Pampanga")


@pytest.mark.asyncio
async def test_quote_rejects_negative_distance() -> None:
    payload = {
        "data": {
            "quotationId": "q-neg",
            "priceBreakdown": {"base": "49", "total": "120", "currency": "PHP"},
            "distance": {"value": "-100", "unit": "m"},
        }
    }
    client = build_client(lambda _: httpx.Response(200, json=payload))
    with pytest.raises(QuotationError):
        await client.quote(PICKUP, DROPOFF, "SM City Pampanga")
