from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from geo_engine.distance import haversine_distance_km
from geo_engine.geofence import is_point_inside_box
from geo_engine.models import PHILIPPINES_BOUNDING_BOX, BoundingBox, GeoPoint, PickupLocation
from geo_engine.plus_code import PlusCodeTable, extract_plus_code
from geo_engine.road_distance import estimate_road_distance_km

from delivery_pricing.geocoders.base import Geocoder
from delivery_pricing.models import CourierQuote, DeliveryEstimate, EstimateSource, FeeSchedule
from delivery_pricing.pricing import breakdown_from_courier_quote, calculate_fee
from delivery_pricing.rules import DistanceRuleTable

logger = logging.getLogger(__name__)

PLUS_CODE_PROVIDER = "PlusCode"
DEFAULT_DISTANCE_KM = 8.0
MAX_STRAIGHT_LINE_KM = 200.0

ANGELES_PICKUP = PickupLocation(lat=15.1200, lng=120.6150, address="Angeles City, Pampanga, Philippines")


class CourierQuoter(Protocol):
    async def quote(self, pickup: PickupLocation, dropoff: GeoPoint, dropoff_address: str) -> CourierQuote: ...


@dataclass(frozen=True)
class _Resolution:
    distance_km: float
    source: EstimateSource
    point: GeoPoint | None = None
    detail: str = ""


class DeliveryFeeEstimator:
    """Turns a free-text delivery address into a distance and a tiered fee.

    Resolution order, first hit wins: verified Plus Code, verified address
    override, geocoding (bounded to the service country and to a plausible
    straight-line distance), area keyword fallback, default distance.
    A configured courier quotation replaces the heuristic fee whenever the
    dropoff has coordinates; override and keyword hits have none, so they
    always keep the heuristic fee. A quote that fails or cannot be priced
    falls back to the heuristic. ``estimate`` never raises.
    """

    def __init__(
        self,
        geocoder: Geocoder,
        known_addresses: DistanceRuleTable,
        area_keywords: DistanceRuleTable,
        plus_codes: PlusCodeTable,
        pickup: PickupLocation = ANGELES_PICKUP,
        fee_schedule: FeeSchedule | None = None,
        bounding_box: BoundingBox = PHILIPPINES_BOUNDING_BOX,
        max_straight_line_km: float = MAX_STRAIGHT_LINE_KM,
        default_distance_km: float = DEFAULT_DISTANCE_KM,
        courier: CourierQuoter | None = None,
        clock_ms: Callable[[], int] | None = None,
    ) -> None:
        if default_distance_km < 0:
            raise ValueError("default_distance_km must be >= 0")
        self._geocoder = geocoder
        self._known_addresses = known_addresses
        self._area_keywords = area_keywords
        self._plus_codes = plus_codes
        self._pickup = pickup
        self._fee_schedule = fee_schedule or FeeSchedule()
        self._bounding_box = bounding_box
        self._max_straight_line_km = max_straight_line_km
        self._default_distance_km = default_distance_km
        self._courier = courier
        self._clock_ms = clock_ms or (lambda: int(time.time() * 1000))

    @property
    def pickup(self) -> PickupLocation:
        return self._pickup

    @property
    def fee_schedule(self) -> FeeSchedule:
        return self._fee_schedule

    async def estimate(self, delivery_address: str) -> DeliveryEstimate:
        address = (delivery_address or "").strip()
        try:
            resolution = await self._resolve(address)
        except Exception:
            logger.exception("delivery_resolution_failed", extra={"component": "delivery_pricing"})
            resolution = self._default_resolution()

        if self._courier is not None and resolution.point is not None:
            quoted = await self._courier_estimate(self._courier, resolution.point, address)
            if quoted is not None:
                return quoted

        estimate = self._heuristic_estimate(resolution)
        logger.info(
            "delivery_estimate_completed",
            extra={
                "component": "delivery_pricing",
                "source": estimate.source.value,
                "distance_km": estimate.distance_km,
                "delivery_fee": estimate.delivery_fee,
            },
        )
        return estimate

    async def _resolve(self, address: str) -> _Resolution:
        if not address:
            return self._default_resolution()

        plus_code = extract_plus_code(address)
        if plus_code:
            point = self._plus_codes.resolve(plus_code)
            if point is None:
                logger.info("plus_code_unresolved", extra={"component": "delivery_pricing", "plus_code": plus_code})
            else:
                distance_km = self._road_distance_from_pickup(point, PLUS_CODE_PROVIDER)
                if distance_km is not None:
                    logger.info("plus_code_resolved", extra={"component": "delivery_pricing", "plus_code": plus_code})
                    return _Resolution(distance_km, EstimateSource.PLUS_CODE, point, PLUS_CODE_PROVIDER)

        rule = self._known_addresses.match(address)
        if rule is not None:
            logger.info("known_address_matched", extra={"component": "delivery_pricing", "pattern": rule.pattern})
            return _Resolution(rule.distance_km, EstimateSource.KNOWN_ADDRESS, None, rule.label or rule.pattern)

        geocoded = await self._geocoder.geocode(address)
        point = geocoded.point
        if point is not None:
            if not is_point_inside_box(self._bounding_box, point):
                logger.warning(
                    "geocode_rejected_out_of_bounds",
                    extra={"component": "delivery_pricing", "provider": geocoded.provider, "lat": point.lat, "lng": point.lng},
                )
            else:
                distance_km = self._road_distance_from_pickup(point, geocoded.provider)
                if distance_km is not None:
                    return _Resolution(distance_km, EstimateSource.GEOCODED, point, geocoded.provider)

        return self._fallback_resolution(address)

    def _road_distance_from_pickup(self, point: GeoPoint, provider: str) -> float | None:
        straight_km = haversine_distance_km(self._pickup.point, point)
        if straight_km > self._max_straight_line_km:
            logger.warning(
                "geocode_rejected_implausible_distance",
                extra={"component": "delivery_pricing", "provider": provider, "straight_km": round(straight_km, 1)},
            )
            return None
        return estimate_road_distance_km(straight_km)

    def _fallback_resolution(self, address: str) -> _Resolution:
        rule = self._area_keywords.match(address)
        if rule is not None:
            logger.info("area_keyword_matched", extra={"component": "delivery_pricing", "pattern": rule.pattern})
            return _Resolution(rule.distance_km, EstimateSource.KEYWORD_FALLBACK, None, rule.label or rule.pattern)
        return self._default_resolution()

    def _default_resolution(self) -> _Resolution:
        logger.warning("delivery_default_distance_used", extra={"component": "delivery_pricing"})
        return _Resolution(self._default_distance_km, EstimateSource.DEFAULT)

    async def _courier_estimate(
        self, courier: CourierQuoter, dropoff: GeoPoint, address: str
    ) -> DeliveryEstimate | None:
        try:
            quote = await courier.quote(self._pickup, dropoff, address)
            breakdown = breakdown_from_courier_quote(quote, self._fee_schedule)
        except Exception as exc:
            logger.warning(
                "courier_quote_failed",
                extra={"component": "delivery_pricing", "error_type": type(exc).__name__, "error": str(exc)},
            )
            return None
        logger.info(
            "courier_quote_used",
            extra={"component": "delivery_pricing", "quotation_id": quote.quotation_id, "total_fee": quote.total_fee},
        )
        return DeliveryEstimate(
            delivery_fee=breakdown.total_fee,
            distance_km=quote.distance_km,
            breakdown=breakdown,
            quotation_id=quote.quotation_id,
            currency=quote.currency,
            is_estimate=False,
            source=EstimateSource.COURIER_QUOTE,
        )

    def _heuristic_estimate(self, resolution: _Resolution) -> DeliveryEstimate:
        distance_km = round(max(resolution.distance_km, 0.0), 1)
        breakdown = calculate_fee(distance_km, self._fee_schedule)
        return DeliveryEstimate(
            delivery_fee=breakdown.total_fee,
            distance_km=distance_km,
            breakdown=breakdown,
            quotation_id=f"est_{resolution.source.value}_{self._clock_ms()}",
            currency=self._fee_schedule.currency,
            is_estimate=True,
            source=resolution.source,
            message=_estimate_message(resolution),
        )


def _estimate_message(resolution: _Resolution) -> str:
    source = resolution.source
    if source is EstimateSource.PLUS_CODE:
        return "Estimated from your Plus Code location."
    if source is EstimateSource.KNOWN_ADDRESS:
        return f"Estimated from a verified distance for {resolution.detail}."
    if source is EstimateSource.GEOCODED:
        return f"Estimated from your address location ({resolution.detail})."
    if source is EstimateSource.KEYWORD_FALLBACK:
        return f"Address could not be located precisely; estimated from area ({resolution.detail})."
    return "Unable to locate the address; using a standard delivery distance estimate."
