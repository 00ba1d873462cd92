# fleet-dispatch-sim/fleetsim/utils.py
"""
Utility functions for the Fleet Dispatch Simulation.

Provides geographic calculations and formatting helpers shared by the
simulation core, the CLI and the dashboard.
"""

from __future__ import annotations

import math
import logging
from typing import Tuple

from . import config

logger = logging.getLogger(__name__)


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate the great-circle distance between two points on Earth.

    Uses the Haversine formula to compute the distance between two GPS coordinates.

    Args:
        lat1: Latitude of point 1 in decimal degrees
        lon1: Longitude of point 1 in decimal degrees
        lat2: Latitude of point 2 in decimal degrees
        lon2: Longitude of point 2 in decimal degrees

    Returns:
        Distance in kilometers between the two points

    Example:
        >>> haversine_distance(35.6812, 139.7671, 35.6717, 139.7657)
        1.063  # Tokyo Station to Ginza, ~1 km
    """
    lon1, lat1, lon2, lat2 = map(math.radians, [lon1, lat1, lon2, lat2])

    dlon = lon2 - lon1
    dlat = lat2 - lat1
    a = math.sin(dlat / 2)**2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2)**2
    c = 2 * math.asin(math.sqrt(a))

    # Radius of Earth in kilometers
    r = 6371
    return c * r


def distance_between(a: Tuple[float, float], b: Tuple[float, float]) -> float:
    """Haversine distance in km between two (lat, lng) tuples."""
    return haversine_distance(a[0], a[1], b[0], b[1])


def calculate_travel_time_minutes(distance_km: float, speed_kmh: float) -> float:
    """
    Calculate estimated travel time for a given distance.

    Args:
        distance_km: Distance in kilometers
        speed_kmh: Average speed in km/h

    Returns:
        Estimated travel time in minutes

    Example:
        >>> calculate_travel_time_minutes(5.0, 30.0)
        10.0
    """
    if speed_kmh <= 0:
        return float('inf')
    return (distance_km / speed_kmh) * 60


def normalize_heading(heading: float) -> float:
    """Wrap a heading in degrees into [0, 360)."""
    result = heading % 360.0
    # -1e-18 % 360 rounds to 360.0
    return 0.0 if result >= 360.0 else result


def is_within_region(lat: float, lng: float, span: float = None) -> bool:
    """
    Check whether a point lies inside the square service area.

    Args:
        lat: Latitude in decimal degrees
        lng: Longitude in decimal degrees
        span: Half-width of the area in degrees (default from config)
    """
    if span is None:
        span = config.REGION_SPAN_DEG
    return abs(lat - config.CENTER_LAT) <= span and abs(lng - config.CENTER_LNG) <= span


def format_time_duration(minutes: float) -> str:
    """
    Format a duration in minutes as a human-readable string.

    Args:
        minutes: Duration in minutes

    Returns:
        Formatted string like "1h 23m" or "45m"
    """
    if minutes < 60:
        return f"{minutes:.0f}m"
    hours = int(minutes // 60)
    mins = int(minutes % 60)
    return f"{hours}h {mins}m"


def format_distance(distance_km: float) -> str:
    """Format a distance as "850 m" below one kilometer, "2.4 km" above."""
    if distance_km < 1.0:
        return f"{distance_km * 1000:.0f} m"
    return f"{distance_km:.1f} km"
