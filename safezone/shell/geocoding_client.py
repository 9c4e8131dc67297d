"""Nominatim Reverse-Geocoding Client - Imperative Shell.

This module turns coordinates into street names using the OpenStreetMap
Nominatim API. All I/O is contained here; response parsing is in the
core module.
"""

import logging

import requests

from safezone.core.address import (
    AddressInfo,
    cache_key,
    fallback_address,
    parse_nominatim_address,
)
from safezone.core.config import DEFAULT_NOMINATIM_URL, DEFAULT_USER_AGENT


logger = logging.getLogger(__name__)


# Default timeout for API requests (seconds)
DEFAULT_TIMEOUT = 5


class NominatimClient:
    """Client for reverse geocoding via Nominatim.

    This is part of the imperative shell - it handles HTTP I/O.
    Results are cached per instance by coordinates rounded to 4 decimals.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_NOMINATIM_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: int = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize Nominatim client.

        Args:
            base_url: Nominatim reverse endpoint
            user_agent: User-Agent header (required by Nominatim usage policy)
            timeout: Request timeout in seconds
        """
        self.base_url = base_url
        self.user_agent = user_agent
        self.timeout = timeout
        self._cache: dict[str, AddressInfo] = {}

    def reverse(self, lat: float, lng: float) -> AddressInfo | None:
        """Look up the address of a coordinate.

        This method performs HTTP I/O.

        Args:
            lat: Latitude
            lng: Longitude

        Returns:
            AddressInfo, or None if the lookup failed or found no address
        """
        key = cache_key(lat, lng)
        if key in self._cache:
            return self._cache[key]

        params = {
            "format": "json",
            "lat": str(lat),
            "lon": str(lng),
            "zoom": "18",
            "addressdetails": "1",
        }

        try:
            response = requests.get(
                self.base_url,
                params=params,
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning("Nominatim request failed: %s", str(e))
            return None

        if response.status_code != 200:
            logger.warning("Nominatim geocoding failed with status %d", response.status_code)
            return None

        try:
            data = response.json()
        except ValueError:
            logger.warning("Nominatim returned invalid JSON")
            return None

        address = parse_nominatim_address(data, lat, lng)
        if address is not None:
            self._cache[key] = address

        return address

    def get_address_info(self, lat: float, lng: float) -> AddressInfo:
        """Look up an address, falling back to formatted coordinates.

        Args:
            lat: Latitude
            lng: Longitude

        Returns:
            AddressInfo (never None)
        """
        address = self.reverse(lat, lng)
        if address is None:
            return fallback_address(lat, lng)
        return address
