from __future__ import annotations

from typing import Any

from geo_engine.models import BoundingBox, GeoPoint

from delivery_pricing.geocoders.base import HttpGeocoder, to_float_pair

PHOTON_BASE_URL = "https://photon.komoot.io"


class PhotonGeocoder(HttpGeocoder):
    """Photon search; answers with GeoJSON point features ([lon, lat] order)."""

    name = "Photon"
    search_path = "/api"

    def __init__(self, *args: Any, bounding_box: BoundingBox | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._bounding_box = bounding_box

    def build_params(self, query: str) -> dict[str, Any]:
        params: dict[str, Any] = {"q": query, "limit": 1}
        box = self._bounding_box
        if box is not None:
            params["bbox"] = f"{box.min_lng},{box.min_lat},{box.max_lng},{box.max_lat}"
        return params

    def parse_point(self, payload: Any) -> GeoPoint | None:
        if not isinstance(payload, dict):
            return None
        features = payload.get("features") or []
        if not features:
            return None
        geometry = features[0].get("geometry") or {}
        coordinates = geometry.get("coordinates")
        if geometry.get("type") != "Point" or not isinstance(coordinates, list) or len(coordinates) < 2:
            return None
        return to_float_pair(coordinates[1], coordinates[0])
