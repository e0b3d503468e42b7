"""Delivery fee estimation: rules, geocoding, pricing and courier quotes."""

from delivery_pricing.estimator import ANGELES_PICKUP, CourierQuoter, DeliveryFeeEstimator
from delivery_pricing.exceptions import (
    DeliveryPricingError,
    GeocoderError,
    GeocoderResponseError,
    GeocoderTransientError,
    ProviderRequestError,
    QuotationError,
    RuleConfigurationError,
)
from delivery_pricing.models import (
    CourierQuote,
    DeliveryEstimate,
    DistanceRule,
    EstimateSource,
    FeeBreakdown,
    FeeSchedule,
    GeocodeResult,
)
from delivery_pricing.pricing import calculate_fee
from delivery_pricing.rules import DistanceRuleTable, load_area_keywords, load_known_addresses, load_plus_codes

__all__ = [
    "ANGELES_PICKUP",
    "CourierQuote",
    "CourierQuoter",
    "DeliveryEstimate",
    "DeliveryFeeEstimator",
    "DeliveryPricingError",
    "DistanceRule",
    "DistanceRuleTable",
    "EstimateSource",
    "FeeBreakdown",
    "FeeSchedule",
    "GeocodeResult",
    "GeocoderError",
    "GeocoderResponseError",
    "GeocoderTransientError",
    "ProviderRequestError",
    "QuotationError",
    "RuleConfigurationError",
    "calculate_fee",
    "load_area_keywords",
    "load_known_addresses",
    "load_plus_codes",
]
