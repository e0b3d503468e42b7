from __future__ import annotations

import logging

from geo_engine.models import PHILIPPINES_BOUNDING_BOX, PickupLocation
from geo_engine.plus_code import PlusCodeTable

from delivery_pricing.estimator import DeliveryFeeEstimator
from delivery_pricing.geocoders import GeocoderChain, NominatimGeocoder, PhotonGeocoder
from delivery_pricing.models import FeeSchedule
from delivery_pricing.quotation import CourierQuotationClient
from delivery_pricing.rules import load_area_keywords, load_known_addresses, load_plus_codes
from devkit.config import DeliverySettings, load_settings

from api.cache import EstimateCache, InMemoryCacheStore, RedisCacheStore
from api.circuit_breaker import CircuitBreaker
from api.clients.guarded_courier import GuardedCourierQuoter
from api.services.delivery_service import DeliveryService

logger = logging.getLogger(__name__)


def build_geocoder(settings: DeliverySettings) -> GeocoderChain:
    common = {
        "user_agent": settings.GEOCODER_USER_AGENT,
        "timeout_seconds": settings.GEOCODE_TIMEOUT_SECONDS,
    }
    return GeocoderChain(
        [
            NominatimGeocoder(settings.NOMINATIM_BASE_URL, **common),
            PhotonGeocoder(settings.PHOTON_BASE_URL, bounding_box=PHILIPPINES_BOUNDING_BOX, **common),
        ],
        retries=settings.GEOCODE_RETRIES,
        base_delay_seconds=settings.GEOCODE_BACKOFF_SECONDS,
    )


def build_estimator(
    settings: DeliverySettings,
    circuit_breaker: CircuitBreaker,
    plus_codes: PlusCodeTable,
) -> DeliveryFeeEstimator:
    courier = None
    if settings.courier_quotation_enabled:
        courier = GuardedCourierQuoter(
            CourierQuotationClient(
                api_key=settings.LALAMOVE_API_KEY,
                api_secret=settings.LALAMOVE_API_SECRET,
                base_url=settings.LALAMOVE_BASE_URL,
                market=settings.LALAMOVE_MARKET,
            ),
            circuit_breaker,
        )
    return DeliveryFeeEstimator(
        geocoder=build_geocoder(settings),
        known_addresses=load_known_addresses(settings.KNOWN_ADDRESSES_PATH),
        area_keywords=load_area_keywords(settings.AREA_KEYWORDS_PATH),
        plus_codes=plus_codes,
        pickup=PickupLocation(lat=settings.PICKUP_LAT, lng=settings.PICKUP_LNG, address=settings.PICKUP_ADDRESS),
        fee_schedule=FeeSchedule(
            base_fee=settings.BASE_FEE,
            first_tier_limit_km=settings.FIRST_TIER_LIMIT_KM,
            first_tier_rate=settings.FIRST_TIER_RATE,
            second_tier_rate=settings.SECOND_TIER_RATE,
            currency=settings.CURRENCY,
        ),
        max_straight_line_km=settings.MAX_STRAIGHT_LINE_KM,
        default_distance_km=settings.DEFAULT_DISTANCE_KM,
        courier=courier,
    )


def build_estimate_cache(settings: DeliverySettings) -> EstimateCache:
    if settings.REDIS_URL:
        try:
            import redis.asyncio as redis

            redis_client = redis.from_url(settings.REDIS_URL, encoding="utf-8", decode_responses=True)
            store = RedisCacheStore(redis_client)
        except Exception:
            logger.warning("estimate_cache_redis_unavailable", extra={"component": "api"}, exc_info=True)
            store = InMemoryCacheStore()
    else:
        store = InMemoryCacheStore()
    return EstimateCache(store=store, ttl_seconds=settings.ESTIMATE_CACHE_TTL_SECONDS)


_settings = load_settings("delivery-api")
_circuit_breaker = CircuitBreaker("courier", failure_threshold=3, recovery_timeout_seconds=30)
_plus_codes = load_plus_codes(_settings.PLUS_CODES_PATH)
_estimator = build_estimator(_settings, _circuit_breaker, _plus_codes)
_delivery_service = DeliveryService(
    estimator=_estimator,
    plus_codes=_plus_codes,
    cache=build_estimate_cache(_settings),
    courier_quotation_enabled=_settings.courier_quotation_enabled,
)


def get_settings() -> DeliverySettings:
    return _settings


def get_circuit_breaker() -> CircuitBreaker:
    return _circuit_breaker


def get_delivery_service() -> DeliveryService:
    return _delivery_service
