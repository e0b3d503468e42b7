from fastapi.testclient import TestClient

from geo_engine.models import GeoPoint

from delivery_pricing.estimator import DeliveryFeeEstimator
from delivery_pricing.models import GeocodeResult
from delivery_pricing.rules import load_area_keywords, load_known_addresses, load_plus_codes

from api.app import create_app
from api.cache import EstimateCache, InMemoryCacheStore
from api.dependencies import get_delivery_service
from api.services.delivery_service import DeliveryService

NOW_MS = 1700000000000
SM_PAMPANGA = GeoPoint(lat=15.0535, lng=120.6996)


class StubGeocoder:
    name = "Nominatim"

    def __init__(self, point: GeoPoint | None = None) -> None:
        self._point = point
        self.calls: list[str] = []

    async def geocode(self, address: str) -> GeocodeResult:
        self.calls.append(address)
        if self._point is None:
            return GeocodeResult.failed(self.name)
        return GeocodeResult(lat=self._point.lat, lng=self._point.lng, success=True, provider=self.name)


def _client(geocoder: StubGeocoder, cache: EstimateCache | None = None, service_clock_ms=None):
    plus_codes = load_plus_codes()
    estimator = DeliveryFeeEstimator(
        geocoder=geocoder,
        known_addresses=load_known_addresses(),
        area_keywords=load_area_keywords(),
        plus_codes=plus_codes,
        clock_ms=lambda: NOW_MS,
    )
    service = DeliveryService(estimator=estimator, plus_codes=plus_codes, cache=cache, clock_ms=service_clock_ms)
    app = create_app()
    app.dependency_overrides[get_delivery_service] = lambda: service
    return app, TestClient(app)


def test_known_address_estimate_response_shape() -> None:
    geocoder = StubGeocoder(SM_PAMPANGA)
    _, client = _client(geocoder)

    response = client.post(
        "/v1/delivery/estimate-fee",
        json={"deliveryAddress": "Unit 4B Florida Residences, Angeles City"},
    )
    body = response.json()

    assert response.status_code == 200
    assert body["deliveryFee"] == 71.0
    assert body["distance"] == 2.2
    assert body["currency"] == "PHP"
    assert body["isEstimate"] is True
    assert body["source"] == "known_address"
    assert body["quotationId"] == f"est_known_address_{NOW_MS}"
    assert body["priceBreakdown"] == {
        "baseFee": 49.0,
        "distanceFee": 22.0,
        "firstTierDistance": 2.2,
        "secondTierDistance": 0.0,
        "firstTierRate": 10.0,
        "secondTierRate": 8.0,
        "totalFee": 71.0,
    }
    assert "success" not in body
    assert geocoder.calls == []


def test_geocoded_estimate_is_cached_per_normalized_address() -> None:
    geocoder = StubGeocoder(SM_PAMPANGA)
    _, client = _client(
        geocoder, EstimateCache(store=InMemoryCacheStore(), ttl_seconds=60), service_clock_ms=lambda: NOW_MS + 500
    )

    first = client.post("/v1/delivery/estimate-fee", json={"deliveryAddress": "Jose Abad Santos Ave"})
    second = client.post("/v1/delivery/estimate-fee", json={"deliveryAddress": "  jose abad   SANTOS ave "})

    assert first.status_code == 200
    assert first.json()["source"] == "geocoded"
    assert first.json()["quotationId"] == f"est_geocoded_{NOW_MS}"
    assert second.json()["quotationId"] == f"est_geocoded_{NOW_MS + 500}"
    assert {**second.json(), "quotationId": None} == {**first.json(), "quotationId": None}
    assert len(geocoder.calls) == 1


def test_default_estimate_is_not_cached() -> None:
    geocoder = StubGeocoder(None)
    _, client = _client(geocoder, EstimateCache(store=InMemoryCacheStore(), ttl_seconds=60))

    first = client.post("/v1/delivery/estimate-fee", json={"deliveryAddress": "Nowhere Lane 99"})
    client.post("/v1/delivery/estimate-fee", json={"deliveryAddress": "Nowhere Lane 99"})
    body = first.json()

    assert body["source"] == "default"
    assert body["distance"] == 8.0
    assert body["deliveryFee"] == 123.0
    assert body["isEstimate"] is True
    assert "message" in body
    assert len(geocoder.calls) == 2


def test_estimate_rejects_overlong_address() -> None:
    _, client = _client(StubGeocoder(SM_PAMPANGA))

    response = client.post("/v1/delivery/estimate-fee", json={"deliveryAddress": "x" * 501})

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_estimate_requires_delivery_address() -> None:
    _, client = _client(StubGeocoder(SM_PAMPANGA))

    response = client.post("/v1/delivery/estimate-fee", json={})

    assert response.status_code == 422
    assert response.json()["success"] is False


def test_estimate_counter_is_exposed_on_metrics() -> None:
    _, client = _client(StubGeocoder(SM_PAMPANGA))

    client.post("/v1/delivery/estimate-fee", json={"deliveryAddress": "Marquee Mall"})
    body = client.get("/metrics").text

    assert "delivery_estimates_total" in body
    assert 'source="known_address"' in body


def test_plus_code_validation_resolves_verified_code() -> None:
    _, client = _client(StubGeocoder())

    response = client.get("/v1/delivery/plus-code/validate", params={"code": "7q724hwq+2f"})
    body = response.json()

    assert response.status_code == 200
    assert body["success"] is True
    assert body["data"] == {"valid": True, "normalized": "7Q724HWQ+2F", "resolvable": True}


def test_plus_code_validation_extracts_code_from_address() -> None:
    _, client = _client(StubGeocoder())

    response = client.get("/v1/delivery/plus-code/validate", params={"code": "4HWQ+2F Angeles"})

    assert response.json()["data"] == {"valid": True, "normalized": "4HWQ+2F", "resolvable": True}


def test_plus_code_validation_flags_invalid_code() -> None:
    _, client = _client(StubGeocoder())

    response = client.get("/v1/delivery/plus-code/validate", params={"code": "hello"})

    assert response.status_code == 200
    assert response.json()["data"] == {"valid": False, "normalized": "HELLO", "resolvable": False}


def test_plus_code_validation_rejects_blank_code() -> None:
    _, client = _client(StubGeocoder())

    response = client.get("/v1/delivery/plus-code/validate", params={"code": "   "})

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_pricing_endpoint_exposes_fee_schedule() -> None:
    _, client = _client(StubGeocoder())

    response = client.get("/v1/delivery/pricing")
    data = response.json()["data"]

    assert response.status_code == 200
    assert data["pickup_address"] == "Angeles City, Pampanga, Philippines"
    assert data["base_fee"] == 49.0
    assert data["first_tier_limit_km"] == 5.0
    assert data["courier_quotation_enabled"] is False


def test_estimates_are_tallied_by_source() -> None:
    app, client = _client(StubGeocoder(None))

    client.post("/v1/delivery/estimate-fee", json={"deliveryAddress": "Marquee Mall"})
    client.post("/v1/delivery/estimate-fee", json={"deliveryAddress": "Balibago"})
    client.post("/v1/delivery/estimate-fee", json={"deliveryAddress": "Nowhere Lane 99"})

    assert app.state.api_metrics.estimate_counts() == {
        "known_address": 1,
        "keyword_fallback": 1,
        "default": 1,
    }
