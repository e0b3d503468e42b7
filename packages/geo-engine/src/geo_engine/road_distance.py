"""Straight-line to road distance conversion.

Longer trips mostly run on highways and track the straight line closely;
short trips pay for local street detours.
"""

# (exclusive lower bound in km, multiplier), checked top to bottom
ROAD_FACTOR_BANDS: tuple[tuple[float, float], ...] = (
    (15.0, 1.0),
    (8.0, 1.1),
    (3.0, 1.2),
    (1.0, 1.15),
)
SHORT_TRIP_FACTOR = 1.1


def road_distance_factor(straight_line_km: float) -> float:
    if straight_line_km < 0:
        raise ValueError("straight_line_km must be >= 0")
    for lower_bound_km, factor in ROAD_FACTOR_BANDS:
        if straight_line_km > lower_bound_km:
            return factor
    return SHORT_TRIP_FACTOR


def estimate_road_distance_km(straight_line_km: float) -> float:
    return round(straight_line_km * road_distance_factor(straight_line_km), 1)
