from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from geo_engine.models import GeoPoint


class EstimateSource(str, Enum):
    PLUS_CODE = "plus_code"
    KNOWN_ADDRESS = "known_address"
    GEOCODED = "geocoded"
    KEYWORD_FALLBACK = "keyword_fallback"
    DEFAULT = "default"
    COURIER_QUOTE = "courier_quote"


@dataclass(frozen=True)
class GeocodeResult:
    lat: float | None
    lng: float | None
    success: bool
    provider: str

    @classmethod
    def failed(cls, provider: str) -> GeocodeResult:
        return cls(lat=None, lng=None, success=False, provider=provider)

    @property
    def point(self) -> GeoPoint | None:
        if not self.success or self.lat is None or self.lng is None:
            return None
        return GeoPoint(lat=self.lat, lng=self.lng)


@dataclass(frozen=True)
class FeeSchedule:
    base_fee: float = 49.0
    first_tier_limit_km: float = 5.0
    first_tier_rate: float = 10.0
    second_tier_rate: float = 8.0
    currency: str = "PHP"


@dataclass(frozen=True)
class FeeBreakdown:
    base_fee: float
    distance_fee: float
    first_tier_distance: float
    second_tier_distance: float
    first_tier_rate: float | None
    second_tier_rate: float | None
    total_fee: float


@dataclass(frozen=True)
class DistanceRule:
    pattern: str
    distance_km: float
    label: str = ""


@dataclass(frozen=True)
class CourierQuote:
    quotation_id: str
    base_fee: float
    total_fee: float
    distance_km: float
    currency: str


@dataclass(frozen=True)
class DeliveryEstimate:
    delivery_fee: float
    distance_km: float
    breakdown: FeeBreakdown
    quotation_id: str
    currency: str
    is_estimate: bool
    source: EstimateSource
    message: str | None = None
