from __future__ import annotations

from collections import Counter as TallyCounter
from contextvars import ContextVar
from dataclasses import asdict, dataclass
from typing import Protocol

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest

_trace_id_ctx: ContextVar[str] = ContextVar("trace_id", default="")

LATENCY_BUCKETS_MS = (5, 10, 25, 50, 100, 250, 500, 1000, 3000, 10000)


def set_trace_id(trace_id: str) -> None:
    _trace_id_ctx.set(trace_id)


def get_trace_id() -> str:
    return _trace_id_ctx.get()


@dataclass(frozen=True)
class ApiRequestMetric:
    method: str
    path: str
    status_code: int
    duration_ms: float
    trace_id: str


class ApiMetricCollector(Protocol):
    def observe(self, metric: ApiRequestMetric) -> None: ...

    def observe_estimate(self, source: str, is_estimate: bool) -> None: ...


class InMemoryApiMetricsCollector:
    """Keeps raw observations in process; used by tests and the dev server."""

    def __init__(self) -> None:
        self._metrics: list[ApiRequestMetric] = []
        self._estimates: TallyCounter[tuple[str, bool]] = TallyCounter()

    def observe(self, metric: ApiRequestMetric) -> None:
        self._metrics.append(metric)

    def observe_estimate(self, source: str, is_estimate: bool) -> None:
        self._estimates[(source, is_estimate)] += 1

    def snapshot(self) -> list[dict]:
        return [asdict(item) for item in self._metrics]

    def estimate_counts(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for (source, _), count in self._estimates.items():
            counts[source] = counts.get(source, 0) + count
        return counts


class PrometheusApiMetricsCollector:
    def __init__(self) -> None:
        self._registry = CollectorRegistry()
        self._request_counter = Counter(
            "api_http_requests_total",
            "Total API HTTP requests",
            labelnames=("method", "path", "status_code"),
            registry=self._registry,
        )
        self._latency_histogram = Histogram(
            "api_http_request_duration_ms",
            "API HTTP request latency in milliseconds",
            labelnames=("method", "path"),
            buckets=LATENCY_BUCKETS_MS,
            registry=self._registry,
        )
        self._estimate_counter = Counter(
            "delivery_estimates_total",
            "Delivery fee estimates by distance source",
            labelnames=("source", "is_estimate"),
            registry=self._registry,
        )

    def observe(self, metric: ApiRequestMetric) -> None:
        self._request_counter.labels(metric.method, metric.path, str(metric.status_code)).inc()
        self._latency_histogram.labels(metric.method, metric.path).observe(metric.duration_ms)

    def observe_estimate(self, source: str, is_estimate: bool) -> None:
        self._estimate_counter.labels(source, "true" if is_estimate else "false").inc()

    def render(self) -> str:
        return generate_latest(self._registry).decode("utf-8")


class CompositeApiMetricsCollector:
    def __init__(self, collectors: list[ApiMetricCollector]) -> None:
        self._collectors = collectors

    def observe(self, metric: ApiRequestMetric) -> None:
        for collector in self._collectors:
            collector.observe(metric)

    def observe_estimate(self, source: str, is_estimate: bool) -> None:
        for collector in self._collectors:
            collector.observe_estimate(source, is_estimate)
