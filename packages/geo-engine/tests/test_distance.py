import pytest

from geo_engine.distance import haversine_distance_km, haversine_distance_meters
from geo_engine.models import GeoPoint

PICKUP = GeoPoint(lat=15.1200, lng=120.6150)
SM_PAMPANGA = GeoPoint(lat=15.0535, lng=120.6996)


def test_haversine_distance_is_zero_for_same_point() -> None:
    assert haversine_distance_km(PICKUP, PICKUP) == 0.0
    assert haversine_distance_meters(PICKUP, PICKUP) == 0.0


def test_haversine_distance_is_symmetric() -> None:
    points = [PICKUP, SM_PAMPANGA, GeoPoint(lat=14.5995, lng=120.9842), GeoPoint(lat=-33.86, lng=151.21)]
    for start in points:
        for end in points:
            assert haversine_distance_km(start, end) == pytest.approx(haversine_distance_km(end, start))


def test_haversine_distance_km_matches_known_span() -> None:
    distance = haversine_distance_km(PICKUP, SM_PAMPANGA)
    assert 11.0 < distance < 12.5


def test_haversine_meters_and_km_agree() -> None:
    assert haversine_distance_meters(PICKUP, SM_PAMPANGA) == pytest.approx(
        haversine_distance_km(PICKUP, SM_PAMPANGA) * 1000
    )


def test_one_degree_of_latitude_is_about_111_km() -> None:
    distance = haversine_distance_km(GeoPoint(lat=0.0, lng=0.0), GeoPoint(lat=1.0, lng=0.0))
    assert distance == pytest.approx(111.19, abs=0.01)
