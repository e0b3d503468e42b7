from __future__ import annotations

import logging

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider

HEALTH_CHECK_PATHS = ("/healthz", "/readyz", "/metrics")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

_configured = False
_health_check_filter_configured = False
_logging_configured = False


def _strip_path(path: str) -> str:
    path = path.partition("?")[0]
    if len(path) > 1:
        path = path.rstrip("/")
    return path


class _HealthCheckAccessLogFilter(logging.Filter):
    """Drops uvicorn access lines for successful health check and scrape requests.

    uvicorn logs access lines with args ``(client, method, path, http_version, status)``.
    Records with any other shape are passed through untouched.
    """

    def __init__(self, ignored_paths: tuple[str, ...] = HEALTH_CHECK_PATHS) -> None:
        super().__init__()
        self._ignored_paths = frozenset(_strip_path(path) for path in ignored_paths)

    def filter(self, record: logging.LogRecord) -> bool:
        args = record.args
        if not isinstance(args, tuple) or len(args) < 5:
            return True
        path, status = args[2], args[4]
        if not isinstance(path, str):
            return True
        try:
            succeeded = int(status) == 200
        except (TypeError, ValueError):
            return True
        return not (succeeded and _strip_path(path) in self._ignored_paths)


def configure_otel(service_name: str) -> None:
    global _configured
    if _configured:
        return
    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
    trace.set_tracer_provider(provider)
    _configured = True


def configure_health_check_access_log_filter(ignored_paths: tuple[str, ...] = HEALTH_CHECK_PATHS) -> None:
    global _health_check_filter_configured
    if _health_check_filter_configured:
        return
    logging.getLogger("uvicorn.access").addFilter(_HealthCheckAccessLogFilter(ignored_paths=ignored_paths))
    _health_check_filter_configured = True


def configure_logging(level: str = "INFO") -> None:
    global _logging_configured
    if _logging_configured:
        return
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    _logging_configured = True
