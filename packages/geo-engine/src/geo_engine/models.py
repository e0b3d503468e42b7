from dataclasses import dataclass


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lng: float


@dataclass(frozen=True)
class BoundingBox:
    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float

    def contains(self, point: GeoPoint) -> bool:
        return self.min_lat <= point.lat <= self.max_lat and self.min_lng <= point.lng <= self.max_lng


@dataclass(frozen=True)
class PickupLocation:
    lat: float
    lng: float
    address: str

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(lat=self.lat, lng=self.lng)


PHILIPPINES_BOUNDING_BOX = BoundingBox(min_lat=4.5, max_lat=21.5, min_lng=116.0, max_lng=127.0)
