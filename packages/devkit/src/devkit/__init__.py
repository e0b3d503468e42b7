"""Common runtime devkit for service infrastructure concerns."""

from devkit.config import DeliverySettings, load_settings
from devkit.observability import configure_logging, configure_otel, configure_health_check_access_log_filter
from devkit.timezone import configure_service_timezone, now_local, now_local_iso

__all__ = [
    "DeliverySettings",
    "configure_logging",
    "configure_otel",
    "configure_health_check_access_log_filter",
    "configure_service_timezone",
    "load_settings",
    "now_local",
    "now_local_iso",
]
