import pytest

from geo_engine.geofence import is_point_inside_box
from geo_engine.models import PHILIPPINES_BOUNDING_BOX, BoundingBox, GeoPoint


def test_point_inside_country_box() -> None:
    assert is_point_inside_box(PHILIPPINES_BOUNDING_BOX, GeoPoint(lat=15.1450, lng=120.5887))


def test_point_outside_country_box() -> None:
    paris = GeoPoint(lat=48.8566, lng=2.3522)
    assert not is_point_inside_box(PHILIPPINES_BOUNDING_BOX, paris)


def test_box_edges_are_inclusive() -> None:
    box = BoundingBox(min_lat=10.0, max_lat=20.0, min_lng=100.0, max_lng=110.0)
    assert is_point_inside_box(box, GeoPoint(lat=10.0, lng=110.0))
    assert not is_point_inside_box(box, GeoPoint(lat=9.9999, lng=105.0))


def test_inverted_box_raises() -> None:
    box = BoundingBox(min_lat=20.0, max_lat=10.0, min_lng=100.0, max_lng=110.0)
    with pytest.raises(ValueError):
        is_point_inside_box(box, GeoPoint(lat=15.0, lng=105.0))
