# utils/geofence.py

from math import asin, cos, isfinite, radians, sin, sqrt
from typing import Tuple

from core.errors import InvalidCoordinates, ValidationError

# Mean earth radius in meters
EARTH_RADIUS_M = 6371000

# (longitude, latitude) in degrees
Point = Tuple[float, float]


def validate_coordinates(longitude: float, latitude: float) -> None:
    """Raise InvalidCoordinates unless lon is in [-180, 180] and lat in [-90, 90]."""
    if longitude is None or latitude is None:
        raise InvalidCoordinates("Longitude and latitude are both required.")
    if not (isfinite(longitude) and isfinite(latitude)):
        raise InvalidCoordinates(f"Coordinates must be finite numbers: ({longitude},{latitude})")
    if not -180.0 <= longitude <= 180.0:
        raise InvalidCoordinates(f"Longitude {longitude} is outside [-180, 180].")
    if not -90.0 <= latitude <= 90.0:
        raise InvalidCoordinates(f"Latitude {latitude} is outside [-90, 90].")


def haversine_distance(point_a: Point, point_b: Point) -> float:
    """Great-circle distance in meters between two (lon, lat) points."""
    lng1, lat1 = point_a
    lng2, lat2 = point_b
    validate_coordinates(lng1, lat1)
    validate_coordinates(lng2, lat2)

    φ1, φ2 = radians(lat1), radians(lat2)
    Δφ = radians(lat2 - lat1)
    Δλ = radians(lng2 - lng1)

    a = sin(Δφ / 2) ** 2 + cos(φ1) * cos(φ2) * sin(Δλ / 2) ** 2
    # Rounding can push a just past 1 for antipodal points
    a = min(1.0, max(0.0, a))
    return 2 * EARTH_RADIUS_M * asin(sqrt(a))


def is_within_radius(point_a: Point, point_b: Point, radius_meters: float) -> bool:
    """True iff the two points are at most radius_meters apart (boundary inclusive)."""
    if radius_meters is None or not radius_meters > 0:
        raise ValidationError("Radius must be a positive number of meters.")

    return haversine_distance(point_a, point_b) <= radius_meters
