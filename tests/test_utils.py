"""
Unit tests for geographic and formatting helpers.
"""

import pytest

from fleetsim import config
from fleetsim.utils import (
    calculate_travel_time_minutes,
    distance_between,
    format_distance,
    format_time_duration,
    haversine_distance,
    is_within_region,
    normalize_heading,
)


class TestHaversine:
    """Tests for great-circle distance."""

    def test_same_point_is_zero(self):
        assert haversine_distance(35.68, 139.76, 35.68, 139.76) == 0.0

    def test_one_degree_of_latitude(self):
        """One degree along a meridian is ~111.2 km."""
        assert haversine_distance(35.0, 139.0, 36.0, 139.0) == pytest.approx(111.19, abs=0.05)

    def test_symmetric(self):
        a = haversine_distance(35.6812, 139.7671, 35.6717, 139.7657)
        b = haversine_distance(35.6717, 139.7657, 35.6812, 139.7671)
        assert a == pytest.approx(b)

    def test_tuple_wrapper(self):
        assert distance_between((35.6812, 139.7671), (35.6717, 139.7657)) == pytest.approx(
            haversine_distance(35.6812, 139.7671, 35.6717, 139.7657)
        )


class TestTravelTime:

    def test_thirty_kmh(self):
        assert calculate_travel_time_minutes(5.0, 30.0) == pytest.approx(10.0)

    def test_zero_speed_is_infinite(self):
        assert calculate_travel_time_minutes(1.0, 0.0) == float('inf')


class TestHeading:

    @pytest.mark.parametrize("raw,expected", [
        (0.0, 0.0),
        (359.5, 359.5),
        (360.0, 0.0),
        (370.0, 10.0),
        (-10.0, 350.0),
        (-1e-18, 0.0),
    ])
    def test_normalize(self, raw, expected):
        result = normalize_heading(raw)
        assert result == pytest.approx(expected)
        assert 0.0 <= result < 360.0


class TestRegion:

    def test_center_is_inside(self):
        assert is_within_region(config.CENTER_LAT, config.CENTER_LNG)

    def test_edge_is_inside(self):
        assert is_within_region(config.CENTER_LAT + config.REGION_SPAN_DEG - 1e-9, config.CENTER_LNG)

    def test_outside_span(self):
        assert not is_within_region(config.CENTER_LAT, config.CENTER_LNG + config.REGION_SPAN_DEG + 0.01)

    def test_custom_span(self):
        assert not is_within_region(config.CENTER_LAT + 0.02, config.CENTER_LNG, span=0.01)


class TestFormatting:

    def test_distance_below_one_km(self):
        assert format_distance(0.85) == "850 m"

    def test_distance_km(self):
        assert format_distance(2.44) == "2.4 km"

    def test_duration_minutes(self):
        assert format_time_duration(45) == "45m"

    def test_duration_hours(self):
        assert format_time_duration(83) == "1h 23m"
