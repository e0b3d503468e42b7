from __future__ import annotations

from typing import Any

from geo_engine.models import GeoPoint

from delivery_pricing.geocoders.base import HttpGeocoder, to_float_pair

NOMINATIM_BASE_URL = "https://nominatim.openstreetmap.org"


class NominatimGeocoder(HttpGeocoder):
    name = "Nominatim"
    search_path = "/search"

    def __init__(self, *args: Any, country_codes: str = "ph", **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._country_codes = country_codes

    def build_params(self, query: str) -> dict[str, Any]:
        params: dict[str, Any] = {"q": query, "format": "jsonv2", "limit": 1, "addressdetails": 0}
        if self._country_codes:
            params["countrycodes"] = self._country_codes
        return params

    def parse_point(self, payload: Any) -> GeoPoint | None:
        if not isinstance(payload, list) or not payload:
            return None
        item = payload[0]
        if not isinstance(item, dict):
            return None
        return to_float_pair(item.get("lat"), item.get("lon"))
