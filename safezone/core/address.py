"""Reverse-geocoded address models - Pure functions.

Parses Nominatim reverse-geocoding responses into AddressInfo and builds
coordinate-based fallbacks. The HTTP call lives in the shell.
"""

from dataclasses import dataclass
from typing import Any


UNKNOWN_STREET = "Unknown street"

# Address keys tried in order for the street name
STREET_KEYS = (
    "road",
    "pedestrian",
    "footway",
    "path",
    "residential",
    "suburb",
    "neighbourhood",
)


@dataclass(frozen=True)
class AddressInfo:
    """Human-readable location of a point.

    Attributes:
        street_name: Best street-level name available
        full_address: Full display address
        city: City, town or village, if known
        district: Suburb, neighbourhood or quarter, if known
    """
    street_name: str
    full_address: str
    city: str | None = None
    district: str | None = None


def format_coordinates(lat: float, lng: float) -> str:
    """Format coordinates with 4 decimal places."""
    return f"{lat:.4f}, {lng:.4f}"


def cache_key(lat: float, lng: float) -> str:
    """Cache key for a coordinate, rounded to about 11 meters."""
    return f"{lat:.4f},{lng:.4f}"


def parse_nominatim_address(
    data: dict[str, Any] | None,
    lat: float,
    lng: float,
) -> AddressInfo | None:
    """Parse a Nominatim reverse-geocoding response.

    Pure function.

    Args:
        data: Decoded JSON response
        lat: Queried latitude (used when display_name is missing)
        lng: Queried longitude

    Returns:
        AddressInfo, or None if the response has no address
    """
    if not isinstance(data, dict) or not isinstance(data.get("address"), dict):
        return None

    address = data["address"]

    street_name = next(
        (address[key] for key in STREET_KEYS if address.get(key)),
        UNKNOWN_STREET,
    )

    return AddressInfo(
        street_name=street_name,
        full_address=data.get("display_name") or format_coordinates(lat, lng),
        city=address.get("city") or address.get("town") or address.get("village"),
        district=(
            address.get("suburb")
            or address.get("neighbourhood")
            or address.get("quarter")
        ),
    )


def fallback_address(lat: float, lng: float) -> AddressInfo:
    """Coordinate-only address used when geocoding is unavailable.

    Pure function.
    """
    coords = format_coordinates(lat, lng)
    return AddressInfo(
        street_name=f"Location {coords}",
        full_address=coords,
    )
