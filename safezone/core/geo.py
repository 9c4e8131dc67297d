"""Geographic calculations - Pure functions.

This module provides great-circle distance and radius checks for report
and subscription locations. All functions are pure with no side effects.
"""

import math
from dataclasses import dataclass


# Earth's mean radius in meters (spherical model)
EARTH_RADIUS_M = 6371000.0


@dataclass(frozen=True)
class Coordinate:
    """Immutable latitude/longitude pair in decimal degrees.

    Attributes:
        latitude: Latitude in [-90, 90]
        longitude: Longitude in [-180, 180]
    """
    latitude: float
    longitude: float


def calculate_distance(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
) -> float:
    """Calculate distance between two points using Haversine formula.

    Pure function. Inputs are not validated; out-of-range values yield a
    numerically defined but geometrically meaningless result.

    Args:
        lat1: Latitude of first point
        lon1: Longitude of first point
        lat2: Latitude of second point
        lon2: Longitude of second point

    Returns:
        Distance in meters
    """
    # Convert to radians
    lat1_rad = lat1 * math.pi / 180
    lat2_rad = lat2 * math.pi / 180
    delta_lat = (lat2 - lat1) * math.pi / 180
    delta_lon = (lon2 - lon1) * math.pi / 180

    # Haversine formula
    a = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_M * c


def distance_between(a: Coordinate, b: Coordinate) -> float:
    """Distance in meters between two coordinates.

    Pure function.
    """
    return calculate_distance(a.latitude, a.longitude, b.latitude, b.longitude)


def is_within_radius(
    point: Coordinate,
    center: Coordinate,
    radius_m: float,
) -> bool:
    """Check if a point lies inside a circle around a center.

    Pure function. The boundary is inclusive.

    Args:
        point: Point to check
        center: Circle center
        radius_m: Circle radius in meters

    Returns:
        True if the point is within radius_m of center
    """
    return distance_between(center, point) <= radius_m
