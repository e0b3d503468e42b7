from __future__ import annotations

from delivery_pricing.models import CourierQuote, FeeBreakdown, FeeSchedule


def split_tiers(distance_km: float, first_tier_limit_km: float) -> tuple[float, float]:
    if distance_km < 0:
        raise ValueError("distance_km must be >= 0")
    first_tier = min(distance_km, first_tier_limit_km)
    second_tier = round(max(distance_km - first_tier_limit_km, 0.0), 2)
    return first_tier, second_tier


def calculate_fee(distance_km: float, schedule: FeeSchedule) -> FeeBreakdown:
    """Tiered fee: a base amount plus a per-km rate that drops after the first tier."""
    first_tier, second_tier = split_tiers(distance_km, schedule.first_tier_limit_km)
    distance_fee = round(first_tier * schedule.first_tier_rate + second_tier * schedule.second_tier_rate, 2)
    return FeeBreakdown(
        base_fee=schedule.base_fee,
        distance_fee=distance_fee,
        first_tier_distance=first_tier,
        second_tier_distance=second_tier,
        first_tier_rate=schedule.first_tier_rate,
        second_tier_rate=schedule.second_tier_rate,
        total_fee=schedule.base_fee + distance_fee,
    )


def breakdown_from_courier_quote(quote: CourierQuote, schedule: FeeSchedule) -> FeeBreakdown:
    # courier prices are opaque, so per-km rates are not reported
    first_tier, second_tier = split_tiers(quote.distance_km, schedule.first_tier_limit_km)
    distance_fee = round(quote.total_fee - quote.base_fee, 2)
    return FeeBreakdown(
        base_fee=quote.base_fee,
        distance_fee=distance_fee,
        first_tier_distance=first_tier,
        second_tier_distance=second_tier,
        first_tier_rate=None,
        second_tier_rate=None,
        total_fee=quote.base_fee + distance_fee,
    )
