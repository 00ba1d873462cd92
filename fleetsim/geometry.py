# fleet-dispatch-sim/fleetsim/geometry.py
"""
Route geometry for the Fleet Dispatch Simulation.

Turns three key points (driver position, pickup, dropoff) into a polyline
that renders like a street path, and measures it. There is no road network:
legs are straight-line interpolations with a small random wobble.
"""

from __future__ import annotations

import random
from typing import List, Tuple, Optional, Sequence

from . import config, utils
from .models import Driver, Delivery, DeliveryRoute, Waypoint, WaypointType, VehicleType

LatLng = Tuple[float, float]


def _interpolate_leg(
    start: LatLng,
    end: LatLng,
    segments: int,
    rng: random.Random,
    jitter_deg: float,
    include_start: bool,
) -> List[LatLng]:
    """Linear interpolation from start to end, every point nudged by up to +/- jitter."""
    points: List[LatLng] = []
    first = 0 if include_start else 1
    for i in range(first, segments + 1):
        t = i / segments
        lat = start[0] + (end[0] - start[0]) * t + rng.uniform(-jitter_deg, jitter_deg)
        lng = start[1] + (end[1] - start[1]) * t + rng.uniform(-jitter_deg, jitter_deg)
        points.append((lat, lng))
    return points


def build_polyline(
    start: LatLng,
    via: LatLng,
    end: LatLng,
    rng: Optional[random.Random] = None,
    segments: int = None,
    jitter_deg: float = None,
) -> List[LatLng]:
    """
    Build a polyline of ``2 * segments + 1`` points: start -> via -> end.

    Args:
        start: Driver position
        via: Pickup location
        end: Dropoff location
        rng: Random source for the visual wobble (seed it for reproducible output)
        segments: Interpolation segments per leg (default from config)
        jitter_deg: Maximum offset per point in degrees (default from config)

    Returns:
        Ordered list of (lat, lng) points
    """
    if rng is None:
        rng = random.Random()
    if segments is None:
        segments = config.ROUTE_SEGMENTS
    if jitter_deg is None:
        jitter_deg = config.POLYLINE_JITTER_DEG

    points = _interpolate_leg(start, via, segments, rng, jitter_deg, include_start=True)
    points.extend(_interpolate_leg(via, end, segments, rng, jitter_deg, include_start=False))
    return points


def polyline_distance_km(points: Sequence[LatLng]) -> float:
    """Sum of great-circle distances between consecutive points, in km."""
    total = 0.0
    for a, b in zip(points, points[1:]):
        total += utils.distance_between(a, b)
    return total


def estimate_duration_minutes(distance_km: float, vehicle_type: VehicleType) -> float:
    """Travel time along a route at the vehicle's nominal speed."""
    return utils.calculate_travel_time_minutes(distance_km, vehicle_type.speed_kmh)


def build_waypoints(route_id: str, driver: Driver, delivery: Delivery) -> List[Waypoint]:
    """Current position, pickup and dropoff, in that order."""
    return [
        Waypoint(
            waypoint_id=f"{route_id}-W0",
            location=driver.current_loc,
            label="Current location",
            waypoint_type=WaypointType.WAREHOUSE,
            order=0,
        ),
        Waypoint(
            waypoint_id=f"{route_id}-W1",
            location=delivery.pickup_loc,
            label=delivery.pickup_address,
            waypoint_type=WaypointType.PICKUP,
            order=1,
        ),
        Waypoint(
            waypoint_id=f"{route_id}-W2",
            location=delivery.dropoff_loc,
            label=delivery.dropoff_address,
            waypoint_type=WaypointType.DROPOFF,
            order=2,
        ),
    ]


def build_route(
    route_id: str,
    driver: Driver,
    delivery: Delivery,
    rng: Optional[random.Random] = None,
) -> DeliveryRoute:
    """
    Generate a fresh route for a driver carrying a delivery.

    Args:
        route_id: Identifier for the new route
        driver: The driver; its current position is the route origin
        delivery: The delivery being carried
        rng: Random source for the polyline wobble

    Returns:
        A new, unoptimized DeliveryRoute
    """
    polyline = build_polyline(driver.current_loc, delivery.pickup_loc, delivery.dropoff_loc, rng)
    distance = polyline_distance_km(polyline)
    return DeliveryRoute(
        route_id=route_id,
        driver_id=driver.driver_id,
        waypoints=build_waypoints(route_id, driver, delivery),
        polyline=polyline,
        total_distance_km=distance,
        estimated_duration_min=estimate_duration_minutes(distance, driver.vehicle_type),
        is_optimized=False,
    )
