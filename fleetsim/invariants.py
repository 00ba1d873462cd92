# fleet-dispatch-sim/fleetsim/invariants.py
"""
Consistency checks over the simulation state.

Used by the CLI's ``--strict`` mode and by the test-suite. Each check
returns human-readable violation messages; an empty list means the state
is consistent.
"""

from __future__ import annotations

from typing import Dict, List

from .models import Driver, Delivery, DeliveryRoute, DashboardStats


def check_delivery_bindings(drivers: List[Driver], deliveries: List[Delivery]) -> List[str]:
    """An assigned driver that is still carrying must point back at the delivery."""
    problems: List[str] = []
    by_id: Dict[str, Driver] = {d.driver_id: d for d in drivers}

    for delivery in deliveries:
        if delivery.assigned_driver_id is None:
            continue
        if delivery.assigned_driver_id not in by_id:
            problems.append(f"{delivery.order_number}: unknown driver {delivery.assigned_driver_id}")

    for driver in drivers:
        if driver.current_delivery_id is None:
            continue
        delivery = next((d for d in deliveries if d.delivery_id == driver.current_delivery_id), None)
        if delivery is None:
            problems.append(f"{driver.driver_id}: unknown delivery {driver.current_delivery_id}")
        elif delivery.assigned_driver_id != driver.driver_id:
            problems.append(
                f"{driver.driver_id}: carries {delivery.order_number} "
                f"assigned to {delivery.assigned_driver_id}"
            )
        elif not driver.status.has_route:
            problems.append(f"{driver.driver_id}: {driver.status.value} driver holds a delivery")
    return problems


def check_routes(drivers: List[Driver], routes: List[DeliveryRoute]) -> List[str]:
    """Routes exist exactly for EN_ROUTE/DELIVERING drivers, one each, with ordered waypoints."""
    problems: List[str] = []
    by_id: Dict[str, Driver] = {d.driver_id: d for d in drivers}
    seen: Dict[str, int] = {}

    for route in routes:
        seen[route.driver_id] = seen.get(route.driver_id, 0) + 1
        driver = by_id.get(route.driver_id)
        if driver is None:
            problems.append(f"route {route.route_id}: unknown driver {route.driver_id}")
        elif not driver.status.has_route:
            problems.append(f"route {route.route_id}: driver {driver.driver_id} is {driver.status.value}")

        orders = [wp.order for wp in route.waypoints]
        if orders != list(range(len(orders))):
            problems.append(f"route {route.route_id}: waypoint orders {orders}")

    for driver_id, count in seen.items():
        if count > 1:
            problems.append(f"{driver_id}: {count} routes")

    for driver in drivers:
        if driver.status.has_route and driver.driver_id not in seen:
            problems.append(f"{driver.driver_id}: {driver.status.value} without a route")
    return problems


def check_stats(drivers: List[Driver], stats: DashboardStats) -> List[str]:
    if stats.active_drivers + stats.idle_drivers != len(drivers):
        return [
            f"stats: active {stats.active_drivers} + idle {stats.idle_drivers} "
            f"!= {len(drivers)} drivers"
        ]
    return []


def find_violations(
    drivers: List[Driver],
    deliveries: List[Delivery],
    routes: List[DeliveryRoute],
    stats: DashboardStats,
) -> List[str]:
    """Run every check and collect all violations."""
    return (
        check_delivery_bindings(drivers, deliveries)
        + check_routes(drivers, routes)
        + check_stats(drivers, stats)
    )
