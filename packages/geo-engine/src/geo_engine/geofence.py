from geo_engine.models import BoundingBox, GeoPoint


def is_point_inside_box(box: BoundingBox, point: GeoPoint) -> bool:
    if box.min_lat > box.max_lat or box.min_lng > box.max_lng:
        raise ValueError("bounding box minimum must not exceed maximum")
    return box.contains(point)
