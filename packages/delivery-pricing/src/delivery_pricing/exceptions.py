class DeliveryPricingError(Exception):
    """Base delivery pricing exception."""


class ProviderRequestError(DeliveryPricingError):
    """Raised when a provider request failed after retries."""


class GeocoderError(DeliveryPricingError):
    """Raised when a geocoding provider call fails."""


class GeocoderTransientError(GeocoderError):
    """Raised when a geocoding call can be retried (timeout, DNS, connection)."""


class GeocoderResponseError(GeocoderError):
    """Raised when a geocoding provider answers with a non-2xx status."""


class QuotationError(DeliveryPricingError):
    """Raised when the courier quotation API cannot produce a quote."""


class RuleConfigurationError(DeliveryPricingError):
    """Raised when a distance rule or plus code table is malformed."""
