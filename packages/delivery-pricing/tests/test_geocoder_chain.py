from __future__ import annotations

import pytest

from delivery_pricing.exceptions import GeocoderResponseError, GeocoderTransientError
from delivery_pricing.geocoders import GeocoderChain
from delivery_pricing.models import GeocodeResult


class ScriptedGeocoder:
    def __init__(self, name: str, outcomes: list[object]) -> None:
        self.name = name
        self._outcomes = list(outcomes)
        self.calls = 0

    async def geocode(self, address: str) -> GeocodeResult:
        self.calls += 1
        outcome = self._outcomes.pop(0) if self._outcomes else GeocodeResult.failed(self.name)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome  # type: ignore[return-value]


def _hit(name: str) -> GeocodeResult:
    return GeocodeResult(lat=15.16, lng=120.59, success=True, provider=name)


@pytest.mark.asyncio
async def test_primary_provider_wins_when_it_answers() -> None:
    primary = ScriptedGeocoder("primary", [_hit("primary")])
    secondary = ScriptedGeocoder("secondary", [_hit("secondary")])
    chain = GeocoderChain([primary, secondary], retries=2, base_delay_seconds=0.0)

    result = await chain.geocode("Balibago")

    assert result.provider == "primary"
    assert secondary.calls == 0


@pytest.mark.asyncio
async def test_transient_errors_are_retried_on_same_provider() -> None:
    primary = ScriptedGeocoder(
        "primary",
        [GeocoderTransientError("timed out"), GeocoderTransientError("timed out"), _hit("primary")],
    )
    secondary = ScriptedGeocoder("secondary", [_hit("secondary")])
    chain = GeocoderChain([primary, secondary], retries=2, base_delay_seconds=0.0)

    result = await chain.geocode("Balibago")

    assert result.provider == "primary"
    assert primary.calls == 3
    assert secondary.calls == 0


@pytest.mark.asyncio
async def test_exhausted_retries_fall_over_to_next_provider() -> None:
    primary = ScriptedGeocoder("primary", [GeocoderTransientError("not found")] * 5)
    secondary = ScriptedGeocoder("secondary", [_hit("secondary")])
    chain = GeocoderChain([primary, secondary], retries=2, base_delay_seconds=0.0)

    result = await chain.geocode("Balibago")

    assert result.provider == "secondary"
    assert primary.calls == 3


@pytest.mark.asyncio
async def test_http_errors_move_on_without_retry() -> None:
    primary = ScriptedGeocoder("primary", [GeocoderResponseError("HTTP 500")])
    secondary = ScriptedGeocoder("secondary", [GeocodeResult.failed("secondary")])
    chain = GeocoderChain([primary, secondary], retries=2, base_delay_seconds=0.0)

    result = await chain.geocode("Balibago")

    assert result.success is False
    assert result.provider == "none"
    assert primary.calls == 1
    assert secondary.calls == 1


def test_negative_retries_rejected() -> None:
    with pytest.raises(ValueError):
        GeocoderChain([], retries=-1)
