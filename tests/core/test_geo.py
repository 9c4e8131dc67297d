"""Unit tests for geographic calculations.

Pure function tests - no mocks needed, fast execution.
"""

import pytest

from safezone.core.geo import (
    EARTH_RADIUS_M,
    Coordinate,
    calculate_distance,
    distance_between,
    is_within_radius,
)


JAKARTA = Coordinate(latitude=-6.2088, longitude=106.8456)
BANDUNG = Coordinate(latitude=-6.9175, longitude=107.6191)


class TestCalculateDistance:
    """Tests for calculate_distance() Haversine implementation."""

    def test_same_point_returns_exactly_zero(self):
        """Distance from point to itself should be exactly zero."""
        assert calculate_distance(-6.2088, 106.8456, -6.2088, 106.8456) == 0

    def test_origin_to_itself_is_zero(self):
        """Distance from (0, 0) to (0, 0) is zero."""
        assert calculate_distance(0, 0, 0, 0) == 0

    @pytest.mark.parametrize("lat,lon", [
        (90.0, 0.0),
        (-90.0, 180.0),
        (37.7749, -122.4194),
        (0.0, -180.0),
    ])
    def test_same_point_zero_everywhere(self, lat, lon):
        """Zero distance holds at poles and the antimeridian too."""
        assert calculate_distance(lat, lon, lat, lon) == 0

    def test_across_equator(self):
        """Two degrees of latitude are about 2 x 111.32 km."""
        distance = calculate_distance(1.0, 0.0, -1.0, 0.0)
        assert distance == pytest.approx(2 * 111320, rel=0.01)

    def test_jakarta_to_bandung(self):
        """Jakarta to Bandung is about 116 km in a straight line."""
        distance = calculate_distance(
            JAKARTA.latitude, JAKARTA.longitude,
            BANDUNG.latitude, BANDUNG.longitude,
        )
        assert 100_000 < distance < 150_000
        assert distance == pytest.approx(116_200, rel=0.01)

    def test_known_distance_sf_to_la(self):
        """SF to LA should be approximately 559 km."""
        distance = calculate_distance(37.7749, -122.4194, 34.0522, -118.2437)
        assert distance == pytest.approx(559_000, rel=0.02)

    def test_symmetric(self):
        """Distance should be identical in both directions."""
        d1 = calculate_distance(37.7749, -122.4194, 34.0522, -118.2437)
        d2 = calculate_distance(34.0522, -118.2437, 37.7749, -122.4194)
        assert d1 == d2

    def test_antipodal_points_half_circumference(self):
        """Opposite points on the sphere are pi * R apart."""
        distance = calculate_distance(0.0, 0.0, 0.0, 180.0)
        assert distance == pytest.approx(3.141592653589793 * EARTH_RADIUS_M)

    def test_result_is_non_negative(self):
        """Distance is never negative."""
        assert calculate_distance(10.0, 20.0, -30.0, -40.0) > 0

    def test_out_of_range_input_does_not_raise(self):
        """Invalid coordinates still produce a finite number."""
        distance = calculate_distance(200.0, 400.0, -100.0, -500.0)
        assert distance >= 0


class TestCoordinate:
    """Tests for the Coordinate value type."""

    def test_equal_by_value(self):
        """Coordinates with the same values are equal."""
        assert Coordinate(1.0, 2.0) == Coordinate(1.0, 2.0)

    def test_immutable(self):
        """Coordinates cannot be modified."""
        coord = Coordinate(1.0, 2.0)
        with pytest.raises(AttributeError):
            coord.latitude = 5.0


class TestDistanceBetween:
    """Tests for distance_between()."""

    def test_matches_calculate_distance(self):
        """Wraps calculate_distance for Coordinate values."""
        expected = calculate_distance(
            JAKARTA.latitude, JAKARTA.longitude,
            BANDUNG.latitude, BANDUNG.longitude,
        )
        assert distance_between(JAKARTA, BANDUNG) == expected

    def test_symmetric(self):
        """Order of arguments does not matter."""
        assert distance_between(JAKARTA, BANDUNG) == distance_between(BANDUNG, JAKARTA)


class TestIsWithinRadius:
    """Tests for is_within_radius()."""

    def test_point_within_radius(self):
        """Bandung is within 150 km of Jakarta."""
        assert is_within_radius(BANDUNG, JAKARTA, 150_000) is True

    def test_point_outside_radius(self):
        """Bandung is not within 50 km of Jakarta."""
        assert is_within_radius(BANDUNG, JAKARTA, 50_000) is False

    def test_boundary_is_inclusive(self):
        """A point exactly radius away is inside."""
        radius = distance_between(JAKARTA, BANDUNG)
        assert is_within_radius(BANDUNG, JAKARTA, radius) is True

    def test_one_meter_short_is_outside(self):
        """A radius one meter short excludes the point."""
        radius = distance_between(JAKARTA, BANDUNG) - 1
        assert is_within_radius(BANDUNG, JAKARTA, radius) is False

    def test_zero_radius_contains_center(self):
        """The center itself is inside a zero radius."""
        assert is_within_radius(JAKARTA, JAKARTA, 0) is True
