"""
Unit tests for the route optimizer heuristic.
"""

import pytest

from fleetsim import config
from fleetsim.models import DeliveryRoute, Waypoint, WaypointType
from fleetsim.optimizer import optimize_route, reorder_waypoints

ORIGIN = (35.6800, 139.7600)
FAR_A = (35.7000, 139.7800)
NEAR_B = (35.6810, 139.7610)
DESTINATION = (35.6600, 139.7400)


def _waypoint(label, location, waypoint_type, order):
    return Waypoint(
        waypoint_id=f"W-{label}",
        location=location,
        label=label,
        waypoint_type=waypoint_type,
        order=order,
    )


@pytest.fixture
def four_stop_route() -> DeliveryRoute:
    """origin, A (far), B (near), destination."""
    waypoints = [
        _waypoint("origin", ORIGIN, WaypointType.WAREHOUSE, 0),
        _waypoint("A", FAR_A, WaypointType.PICKUP, 1),
        _waypoint("B", NEAR_B, WaypointType.PICKUP, 2),
        _waypoint("destination", DESTINATION, WaypointType.DROPOFF, 3),
    ]
    return DeliveryRoute(
        route_id="RT-TEST",
        driver_id="DRV-001",
        waypoints=waypoints,
        polyline=[ORIGIN, FAR_A, NEAR_B, DESTINATION],
        total_distance_km=9.9,
        estimated_duration_min=20.0,
    )


class TestReorderWaypoints:
    """Tests for the nearest-to-origin interior sort."""

    def test_interior_sorted_by_distance_from_origin(self, four_stop_route):
        result = reorder_waypoints(four_stop_route.waypoints)
        assert [wp.label for wp in result] == ["origin", "B", "A", "destination"]

    def test_orders_renumbered(self, four_stop_route):
        result = reorder_waypoints(four_stop_route.waypoints)
        assert [wp.order for wp in result] == [0, 1, 2, 3]

    def test_endpoints_fixed(self, four_stop_route):
        result = reorder_waypoints(four_stop_route.waypoints)
        assert result[0].waypoint_id == "W-origin"
        assert result[-1].waypoint_id == "W-destination"

    def test_input_not_mutated(self, four_stop_route):
        before = [(wp.label, wp.order) for wp in four_stop_route.waypoints]
        reorder_waypoints(four_stop_route.waypoints)
        assert [(wp.label, wp.order) for wp in four_stop_route.waypoints] == before

    def test_short_lists_unchanged(self):
        two = [
            _waypoint("origin", ORIGIN, WaypointType.WAREHOUSE, 0),
            _waypoint("destination", DESTINATION, WaypointType.DROPOFF, 1),
        ]
        assert [wp.label for wp in reorder_waypoints(two)] == ["origin", "destination"]
        assert reorder_waypoints([]) == []

    def test_ties_keep_previous_order(self):
        waypoints = [
            _waypoint("origin", ORIGIN, WaypointType.WAREHOUSE, 0),
            _waypoint("X", NEAR_B, WaypointType.PICKUP, 1),
            _waypoint("Y", NEAR_B, WaypointType.PICKUP, 2),
            _waypoint("destination", DESTINATION, WaypointType.DROPOFF, 3),
        ]
        assert [wp.label for wp in reorder_waypoints(waypoints)] == ["origin", "X", "Y", "destination"]


class TestOptimizeRoute:

    def test_four_stop_scenario(self, rng, four_stop_route):
        optimized = optimize_route(four_stop_route, rng)

        assert [wp.label for wp in optimized.waypoints] == ["origin", "B", "A", "destination"]
        assert optimized.is_optimized
        assert optimized.estimated_duration_min == pytest.approx(20.0 * config.OPTIMIZED_DURATION_FACTOR)

    def test_polyline_rebuilt_through_first_three(self, rng, four_stop_route):
        optimized = optimize_route(four_stop_route, rng)
        segments = config.ROUTE_SEGMENTS
        jitter = config.POLYLINE_JITTER_DEG

        assert len(optimized.polyline) == 2 * segments + 1
        assert optimized.polyline[segments][0] == pytest.approx(NEAR_B[0], abs=jitter)
        assert optimized.polyline[-1][0] == pytest.approx(FAR_A[0], abs=jitter)
        assert optimized.total_distance_km != pytest.approx(9.9)

    def test_original_route_untouched(self, rng, four_stop_route):
        optimize_route(four_stop_route, rng)
        assert not four_stop_route.is_optimized
        assert four_stop_route.estimated_duration_min == 20.0
        assert four_stop_route.waypoints[1].label == "A"

    def test_twice_keeps_endpoints(self, rng, four_stop_route):
        once = optimize_route(four_stop_route, rng)
        twice = optimize_route(once, rng)
        assert twice.waypoints[0].label == "origin"
        assert twice.waypoints[-1].label == "destination"
        assert twice.estimated_duration_min == pytest.approx(20.0 * config.OPTIMIZED_DURATION_FACTOR ** 2)

    def test_two_stop_route_only_flagged(self, rng, four_stop_route):
        short = DeliveryRoute(
            route_id="RT-SHORT",
            driver_id="DRV-001",
            waypoints=[four_stop_route.waypoints[0], four_stop_route.waypoints[-1]],
            polyline=[ORIGIN, DESTINATION],
            total_distance_km=3.0,
            estimated_duration_min=6.0,
        )
        optimized = optimize_route(short, rng)
        assert optimized.is_optimized
        assert optimized.estimated_duration_min == 6.0
        assert optimized.polyline == [ORIGIN, DESTINATION]
