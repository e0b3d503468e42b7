from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, TypeVar

T = TypeVar("T")
logger = logging.getLogger(__name__)


class CircuitOpenError(Exception):
    """Raised when calls are blocked by an open circuit."""


class CircuitState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


@dataclass
class _CircuitCounters:
    failures: int = 0
    opened_at_seconds: float | None = None
    trial_in_flight: bool = False


class CircuitBreaker:
    """Consecutive-failure breaker for one upstream.

    After ``failure_threshold`` failures in a row the circuit opens and calls
    fail fast. Once ``recovery_timeout_seconds`` have passed a single trial
    call is let through: success closes the circuit, failure reopens it.
    """

    def __init__(
        self,
        name: str = "upstream",
        failure_threshold: int = 3,
        recovery_timeout_seconds: int = 30,
    ) -> None:
        if failure_threshold < 1:
            raise ValueError("failure_threshold must be >= 1")
        self._name = name
        self._failure_threshold = failure_threshold
        self._recovery_timeout_seconds = recovery_timeout_seconds
        self._counters = _CircuitCounters()

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_open(self) -> bool:
        return self._counters.opened_at_seconds is not None

    def state(self, now_seconds: float) -> CircuitState:
        opened_at = self._counters.opened_at_seconds
        if opened_at is None:
            return CircuitState.CLOSED
        if now_seconds - opened_at >= self._recovery_timeout_seconds:
            return CircuitState.HALF_OPEN
        return CircuitState.OPEN

    async def call(
        self,
        operation: Callable[[], Awaitable[T]],
        now_seconds: float,
    ) -> T:
        state = self.state(now_seconds)
        if state is CircuitState.OPEN or (state is CircuitState.HALF_OPEN and self._counters.trial_in_flight):
            logger.warning("circuit_open", extra={"component": "api", "circuit": self._name, "now_seconds": now_seconds})
            raise CircuitOpenError(f"circuit '{self._name}' is open")

        trial = state is CircuitState.HALF_OPEN
        if trial:
            self._counters.trial_in_flight = True
            logger.info("circuit_half_open", extra={"component": "api", "circuit": self._name})
        try:
            result = await operation()
        except Exception:
            self._on_failure(now_seconds, trial)
            raise
        self._on_success()
        return result

    def _on_failure(self, now_seconds: float, trial: bool) -> None:
        self._counters.trial_in_flight = False
        self._counters.failures += 1
        if trial or self._counters.failures >= self._failure_threshold:
            self._counters.opened_at_seconds = now_seconds
            logger.error(
                "circuit_opened",
                extra={
                    "component": "api",
                    "circuit": self._name,
                    "failure_count": self._counters.failures,
                    "opened_at_seconds": now_seconds,
                },
            )

    def _on_success(self) -> None:
        if self.is_open:
            logger.info("circuit_closed", extra={"component": "api", "circuit": self._name})
        self._counters = _CircuitCounters()
