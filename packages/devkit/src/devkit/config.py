from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict

from devkit.timezone import configure_service_timezone


class DeliverySettings(BaseSettings):
    model_config = SettingsConfigDict(extra="ignore")

    SERVICE_NAME: str = "service"
    LOG_LEVEL: str = "INFO"
    REDIS_URL: str | None = None
    ESTIMATE_CACHE_TTL_SECONDS: int = 300

    PICKUP_LAT: float = 15.1200
    PICKUP_LNG: float = 120.6150
    PICKUP_ADDRESS: str = "Angeles City, Pampanga, Philippines"

    GEOCODER_USER_AGENT: str = "delivery-fee-estimator/0.1"
    NOMINATIM_BASE_URL: str = "https://nominatim.openstreetmap.org"
    PHOTON_BASE_URL: str = "https://photon.komoot.io"
    GEOCODE_TIMEOUT_SECONDS: float = 5.0
    GEOCODE_RETRIES: int = 2
    GEOCODE_BACKOFF_SECONDS: float = 0.5

    KNOWN_ADDRESSES_PATH: str | None = None
    AREA_KEYWORDS_PATH: str | None = None
    PLUS_CODES_PATH: str | None = None

    DEFAULT_DISTANCE_KM: float = 8.0
    MAX_STRAIGHT_LINE_KM: float = 200.0
    BASE_FEE: float = 49.0
    FIRST_TIER_LIMIT_KM: float = 5.0
    FIRST_TIER_RATE: float = 10.0
    SECOND_TIER_RATE: float = 8.0
    CURRENCY: str = "PHP"

    LALAMOVE_API_KEY: str = ""
    LALAMOVE_API_SECRET: str = ""
    LALAMOVE_BASE_URL: str = "https://rest.sandbox.lalamove.com"
    LALAMOVE_MARKET: str = "PH"

    @property
    def courier_quotation_enabled(self) -> bool:
        return bool(self.LALAMOVE_API_KEY and self.LALAMOVE_API_SECRET)


def load_settings(service_name: str) -> DeliverySettings:
    configure_service_timezone()
    return DeliverySettings(SERVICE_NAME=service_name)
