"""Geo engine core package."""

from geo_engine.distance import EARTH_RADIUS_KM, haversine_distance_km, haversine_distance_meters
from geo_engine.geofence import is_point_inside_box
from geo_engine.models import PHILIPPINES_BOUNDING_BOX, BoundingBox, GeoPoint, PickupLocation
from geo_engine.plus_code import (
    PlusCodeTable,
    encode_plus_code,
    extract_plus_code,
    is_valid_plus_code,
)
from geo_engine.road_distance import estimate_road_distance_km, road_distance_factor

__all__ = [
    "EARTH_RADIUS_KM",
    "BoundingBox",
    "GeoPoint",
    "PHILIPPINES_BOUNDING_BOX",
    "PickupLocation",
    "PlusCodeTable",
    "encode_plus_code",
    "estimate_road_distance_km",
    "extract_plus_code",
    "haversine_distance_km",
    "haversine_distance_meters",
    "is_point_inside_box",
    "is_valid_plus_code",
    "road_distance_factor",
]
