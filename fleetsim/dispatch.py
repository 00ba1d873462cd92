# fleet-dispatch-sim/fleetsim/dispatch.py
"""
Dispatch Engine for the Fleet Dispatch Simulation.

This module implements the driver status cycle:

    IDLE -> EN_ROUTE -> DELIVERING -> RETURNING -> IDLE

1. **IDLE**: Picks up the first pending delivery, if there is one.
   Both records are bound to each other and the delivery goes IN_TRANSIT.

2. **EN_ROUTE**: Arrives. Arrival is instantaneous on the transition.

3. **DELIVERING**: Hands the parcel over. The delivery becomes DELIVERED,
   the driver's completed count goes up and the driver is unbound. The
   delivery keeps its assigned driver as the historical record.

4. **RETURNING**: Back to IDLE.

Only one driver advances per eligible tick, chosen uniformly at random, so
fleet-wide churn is gradual enough to watch.
"""

from __future__ import annotations

import logging
import random
from typing import List, Optional

from .models import Driver, Delivery, DriverStatus, DeliveryStatus, StatusChange

logger = logging.getLogger(__name__)


def find_pending_delivery(deliveries: List[Delivery]) -> Optional[Delivery]:
    """First pending delivery in collection order, or None."""
    return next((d for d in deliveries if d.status == DeliveryStatus.PENDING), None)


def find_delivery(deliveries: List[Delivery], delivery_id: Optional[str]) -> Optional[Delivery]:
    if delivery_id is None:
        return None
    return next((d for d in deliveries if d.delivery_id == delivery_id), None)


def advance_driver_status(
    driver: Driver,
    deliveries: List[Delivery],
    tick: int = 0,
) -> Optional[StatusChange]:
    """
    Apply one state machine transition to a driver.

    Args:
        driver: The driver to advance (mutated in place)
        deliveries: All deliveries; the bound one is mutated in place
        tick: Tick ordinal, recorded on the returned change

    Returns:
        The applied StatusChange, or None if the driver was IDLE and no
        pending delivery exists
    """
    previous = driver.status
    delivery_id: Optional[str] = driver.current_delivery_id

    if previous == DriverStatus.IDLE:
        pending = find_pending_delivery(deliveries)
        if pending is None:
            return None
        driver.status = DriverStatus.EN_ROUTE
        driver.current_delivery_id = pending.delivery_id
        pending.status = DeliveryStatus.IN_TRANSIT
        pending.assigned_driver_id = driver.driver_id
        delivery_id = pending.delivery_id

    elif previous == DriverStatus.EN_ROUTE:
        driver.status = DriverStatus.DELIVERING

    elif previous == DriverStatus.DELIVERING:
        driver.status = DriverStatus.RETURNING
        driver.completed_count += 1
        delivery = find_delivery(deliveries, driver.current_delivery_id)
        if delivery is not None:
            delivery.status = DeliveryStatus.DELIVERED
        driver.current_delivery_id = None

    elif previous == DriverStatus.RETURNING:
        driver.status = DriverStatus.IDLE

    change = StatusChange(
        tick=tick,
        driver_id=driver.driver_id,
        previous=previous,
        current=driver.status,
        delivery_id=delivery_id,
    )
    logger.info(
        "[tick %d] %s: %s -> %s (delivery=%s)",
        tick, driver.driver_id, previous.value, driver.status.value, delivery_id,
    )
    return change


class DispatchEngine:
    """
    Advances exactly one randomly chosen driver per eligible tick.

    The random source is injected so a seeded engine always picks the same
    sequence of drivers.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng: random.Random = rng if rng is not None else random.Random()

    def pick_driver_index(self, drivers: List[Driver]) -> Optional[int]:
        """Uniformly random index into the fleet, or None for an empty fleet."""
        if not drivers:
            return None
        return self.rng.randrange(len(drivers))

    def run_eligible_tick(
        self,
        drivers: List[Driver],
        deliveries: List[Delivery],
        tick: int = 0,
    ) -> Optional[StatusChange]:
        """
        Pick one driver and advance its status.

        Returns:
            The applied StatusChange, or None if nothing changed
        """
        index = self.pick_driver_index(drivers)
        if index is None:
            return None
        return advance_driver_status(drivers[index], deliveries, tick)
