from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from delivery_pricing.models import DeliveryEstimate, FeeBreakdown


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EstimateFeeRequest(_CamelModel):
    delivery_address: str = Field(max_length=500)


class PriceBreakdown(_CamelModel):
    base_fee: float
    distance_fee: float
    first_tier_distance: float
    second_tier_distance: float
    first_tier_rate: float | None = None
    second_tier_rate: float | None = None
    total_fee: float

    @classmethod
    def from_breakdown(cls, breakdown: FeeBreakdown) -> PriceBreakdown:
        return cls(
            base_fee=breakdown.base_fee,
            distance_fee=breakdown.distance_fee,
            first_tier_distance=breakdown.first_tier_distance,
            second_tier_distance=breakdown.second_tier_distance,
            first_tier_rate=breakdown.first_tier_rate,
            second_tier_rate=breakdown.second_tier_rate,
            total_fee=breakdown.total_fee,
        )


class DeliveryFeeResponse(_CamelModel):
    delivery_fee: float
    distance: float
    price_breakdown: PriceBreakdown
    quotation_id: str
    currency: str = "PHP"
    is_estimate: bool
    message: str | None = None
    source: str

    @classmethod
    def from_estimate(cls, estimate: DeliveryEstimate) -> DeliveryFeeResponse:
        return cls(
            delivery_fee=estimate.delivery_fee,
            distance=estimate.distance_km,
            price_breakdown=PriceBreakdown.from_breakdown(estimate.breakdown),
            quotation_id=estimate.quotation_id,
            currency=estimate.currency,
            is_estimate=estimate.is_estimate,
            message=estimate.message,
            source=estimate.source.value,
        )

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class PlusCodeValidationResult(BaseModel):
    valid: bool
    normalized: str
    resolvable: bool


class PricingInfo(BaseModel):
    pickup_address: str
    base_fee: float
    first_tier_limit_km: float
    first_tier_rate: float
    second_tier_rate: float
    currency: str
    courier_quotation_enabled: bool
