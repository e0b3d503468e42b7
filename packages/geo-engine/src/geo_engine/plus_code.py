"""Plus Code (Open Location Code) helpers.

Resolution is a lookup against a table of codes that were verified on the
ground for the delivery area. Codes that are not in the table stay unresolved
even when they are syntactically valid; there is no general decoder here.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from geo_engine.models import GeoPoint

OLC_ALPHABET = "23456789CFGHJMPQRVWX"
OLC_SEPARATOR = "+"
OLC_SEPARATOR_POSITION = 8
MIN_EMBEDDED_CODE_LENGTH = 6

_CHARS = f"[{OLC_ALPHABET}]"
_EMBEDDED_CODE = re.compile(
    rf"(?<![0-9A-Z]){_CHARS}{{4,8}}\+{_CHARS}{{0,3}}(?![0-9A-Z])",
    re.IGNORECASE,
)
_STRICT_CODE = re.compile(rf"^{_CHARS}{{4,8}}\+{_CHARS}{{2,3}}$", re.IGNORECASE)


def normalize_plus_code(code: str) -> str:
    return code.strip().upper()


def extract_plus_code(text: str) -> str | None:
    for match in _EMBEDDED_CODE.finditer(text or ""):
        candidate = match.group(0)
        if len(candidate) >= MIN_EMBEDDED_CODE_LENGTH:
            return normalize_plus_code(candidate)
    return None


def is_valid_plus_code(code: str) -> bool:
    return bool(_STRICT_CODE.match(code.strip()))


def encode_plus_code(point: GeoPoint, code_length: int = 10) -> str:
    if code_length not in (8, 10):
        raise ValueError("code_length must be 8 or 10")
    lat = min(max(point.lat, -90.0), 90.0)
    lng = ((point.lng + 180.0) % 360.0) - 180.0
    lat_value = lat + 90.0
    lng_value = lng + 180.0
    resolution = 20.0
    digits: list[str] = []
    for _ in range(code_length // 2):
        lat_digit = min(int(lat_value // resolution), len(OLC_ALPHABET) - 1)
        lng_digit = min(int(lng_value // resolution), len(OLC_ALPHABET) - 1)
        digits.append(OLC_ALPHABET[lat_digit])
        digits.append(OLC_ALPHABET[lng_digit])
        lat_value -= lat_digit * resolution
        lng_value -= lng_digit * resolution
        resolution /= 20.0
    code = "".join(digits)
    return f"{code[:OLC_SEPARATOR_POSITION]}{OLC_SEPARATOR}{code[OLC_SEPARATOR_POSITION:]}"


class PlusCodeTable:
    """Read-only map of verified Plus Codes to coordinates."""

    def __init__(self, entries: Mapping[str, GeoPoint]) -> None:
        self._entries = MappingProxyType(
            {normalize_plus_code(code): point for code, point in entries.items()}
        )

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, object]]) -> PlusCodeTable:
        entries: dict[str, GeoPoint] = {}
        for record in records:
            code = str(record["code"])
            if not is_valid_plus_code(code):
                raise ValueError(f"invalid plus code in table: {code!r}")
            entries[code] = GeoPoint(lat=float(record["lat"]), lng=float(record["lng"]))  # type: ignore[arg-type]
        return cls(entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and self.resolve(code) is not None

    def resolve(self, code: str) -> GeoPoint | None:
        normalized = normalize_plus_code(code)
        exact = self._entries.get(normalized)
        if exact is not None:
            return exact
        if OLC_SEPARATOR not in normalized or normalized.index(OLC_SEPARATOR) >= OLC_SEPARATOR_POSITION:
            return None
        # short codes drop leading area digits; match against the tail of full codes
        matches = [point for full_code, point in self._entries.items() if full_code.endswith(normalized)]
        if len(matches) == 1:
            return matches[0]
        return None
