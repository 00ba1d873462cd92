# fleet-dispatch-sim/fleetsim/optimizer.py
"""
Route optimizer for the Fleet Dispatch Simulation.

A deliberately cheap heuristic: the origin and the final destination stay
where they are, and every stop in between is sorted by its straight-line
distance from the origin. This is not a nearest-neighbor chain and not an
optimal tour. The duration gain is a fixed factor, not a measurement.
"""

from __future__ import annotations

import dataclasses
import logging
import random
from typing import List, Optional

from . import config, utils
from .geometry import build_polyline, polyline_distance_km
from .models import DeliveryRoute, Waypoint

logger = logging.getLogger(__name__)


def reorder_waypoints(waypoints: List[Waypoint]) -> List[Waypoint]:
    """
    Sort the interior waypoints by distance from the first one.

    The first and last waypoints are never moved. Ties keep their previous
    relative order (stable sort). ``order`` is renumbered 0..n-1 so it always
    matches the list position.

    Returns:
        A new list of new Waypoint records
    """
    if len(waypoints) <= 2:
        return [dataclasses.replace(wp, order=i) for i, wp in enumerate(waypoints)]

    first, interior, last = waypoints[0], list(waypoints[1:-1]), waypoints[-1]
    interior.sort(key=lambda wp: utils.distance_between(first.location, wp.location))

    ordered = [first] + interior + [last]
    return [dataclasses.replace(wp, order=i) for i, wp in enumerate(ordered)]


def optimize_route(route: DeliveryRoute, rng: Optional[random.Random] = None) -> DeliveryRoute:
    """
    Return an optimized copy of a route.

    With at least three waypoints the polyline is rebuilt through the first
    three reordered points, the distance is remeasured and the duration is
    scaled by ``config.OPTIMIZED_DURATION_FACTOR``. Shorter routes only get
    the flag.

    Args:
        route: The route to optimize (left untouched)
        rng: Random source for the polyline wobble

    Returns:
        A new DeliveryRoute with ``is_optimized`` set
    """
    waypoints = reorder_waypoints(route.waypoints)
    optimized = dataclasses.replace(route, waypoints=waypoints, is_optimized=True)

    if len(waypoints) >= 3:
        polyline = build_polyline(
            waypoints[0].location,
            waypoints[1].location,
            waypoints[2].location,
            rng,
        )
        optimized.polyline = polyline
        optimized.total_distance_km = polyline_distance_km(polyline)
        optimized.estimated_duration_min = route.estimated_duration_min * config.OPTIMIZED_DURATION_FACTOR

    logger.debug(
        "Optimized route %s: %.2f km -> %.2f km",
        route.route_id, route.total_distance_km, optimized.total_distance_km,
    )
    return optimized
