from __future__ import annotations

from devkit.config import DeliverySettings
from devkit.observability import configure_logging, configure_otel, configure_health_check_access_log_filter


def configure_telemetry(settings: DeliverySettings) -> None:
    """Process-wide logging, tracing and access-log setup; safe to call per app instance."""
    configure_logging(settings.LOG_LEVEL)
    configure_otel(service_name=settings.SERVICE_NAME)
    configure_health_check_access_log_filter()
