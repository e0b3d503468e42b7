"""Ordered distance rules keyed on address substrings.

Two tables share this format: verified overrides checked before any
geocoding, and broader area keywords used once geocoding has failed.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from importlib import resources
from pathlib import Path
from typing import Any

from geo_engine.plus_code import PlusCodeTable

from delivery_pricing.exceptions import RuleConfigurationError
from delivery_pricing.models import DistanceRule

KNOWN_ADDRESSES_RESOURCE = "known_addresses.json"
AREA_KEYWORDS_RESOURCE = "area_keywords.json"
PLUS_CODES_RESOURCE = "plus_codes.json"


class DistanceRuleTable:
    def __init__(self, rules: Iterable[DistanceRule]) -> None:
        self._rules = tuple(rules)

    def __len__(self) -> int:
        return len(self._rules)

    @property
    def rules(self) -> tuple[DistanceRule, ...]:
        return self._rules

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> DistanceRuleTable:
        rules: list[DistanceRule] = []
        for index, record in enumerate(records):
            try:
                pattern = str(record["pattern"]).strip().lower()
                distance_km = float(record["distance_km"])
            except (KeyError, TypeError, ValueError) as exc:
                raise RuleConfigurationError(f"rule #{index} is malformed: {record!r}") from exc
            if not pattern:
                raise RuleConfigurationError(f"rule #{index} has an empty pattern")
            if distance_km < 0:
                raise RuleConfigurationError(f"rule #{index} has a negative distance")
            rules.append(DistanceRule(pattern=pattern, distance_km=distance_km, label=str(record.get("label", ""))))
        return cls(rules)

    def match(self, address: str) -> DistanceRule | None:
        needle = address.lower()
        for rule in self._rules:
            if rule.pattern in needle:
                return rule
        return None


def _read_records(path: str | None, default_resource: str) -> list[dict[str, Any]]:
    try:
        if path:
            raw = Path(path).read_text(encoding="utf-8")
        else:
            raw = resources.files("delivery_pricing").joinpath("data").joinpath(default_resource).read_text(encoding="utf-8")
        records = json.loads(raw)
    except (OSError, json.JSONDecodeError) as exc:
        raise RuleConfigurationError(f"cannot load {path or default_resource}: {exc}") from exc
    if not isinstance(records, list):
        raise RuleConfigurationError(f"{path or default_resource} must contain a JSON list")
    return records


def load_known_addresses(path: str | None = None) -> DistanceRuleTable:
    return DistanceRuleTable.from_records(_read_records(path, KNOWN_ADDRESSES_RESOURCE))


def load_area_keywords(path: str | None = None) -> DistanceRuleTable:
    return DistanceRuleTable.from_records(_read_records(path, AREA_KEYWORDS_RESOURCE))


def load_plus_codes(path: str | None = None) -> PlusCodeTable:
    records = _read_records(path, PLUS_CODES_RESOURCE)
    try:
        return PlusCodeTable.from_records(records)
    except (KeyError, TypeError, ValueError) as exc:
        raise RuleConfigurationError(f"plus code table is malformed: {exc}") from exc
