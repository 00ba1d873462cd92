# fleet-dispatch-sim/fleetsim/movement.py
"""
Courier movement for the Fleet Dispatch Simulation.

Every tick, drivers that are EN_ROUTE or RETURNING take one step along their
heading. The step size comes from the vehicle type. Headings wander a little
each tick, and drivers that would leave the service area bounce instead.
"""

from __future__ import annotations

import math
import logging
import random
from typing import List

from . import config, utils
from .models import Driver

logger = logging.getLogger(__name__)


def advance_driver(driver: Driver, rng: random.Random) -> bool:
    """
    Move a single driver by one tick.

    Position update is a flat-earth approximation:
    ``lat += step * cos(heading)``, ``lng += step * sin(heading)``.
    If the new position falls outside the service area, the move is dropped
    and the heading is re-randomized. A heading jitter of up to
    ``config.HEADING_JITTER_DEG`` is applied afterwards.

    Args:
        driver: The driver to move (mutated in place)
        rng: Random source for jitter and bounces

    Returns:
        True if the driver's coordinate changed
    """
    if not driver.status.is_moving:
        return False

    step = driver.vehicle_type.step_deg
    heading_rad = math.radians(driver.heading)
    new_lat = driver.current_lat + step * math.cos(heading_rad)
    new_lng = driver.current_lng + step * math.sin(heading_rad)

    moved = True
    if not utils.is_within_region(new_lat, new_lng):
        # Bounce: stay put and pick a new direction
        driver.heading = utils.normalize_heading(rng.uniform(0.0, 360.0))
        new_lat, new_lng = driver.current_lat, driver.current_lng
        moved = False

    jitter = config.HEADING_JITTER_DEG
    driver.heading = utils.normalize_heading(driver.heading + rng.uniform(-jitter, jitter))
    driver.current_lat = new_lat
    driver.current_lng = new_lng
    return moved


def advance_positions(drivers: List[Driver], rng: random.Random) -> int:
    """
    Advance every moving driver by one tick.

    Returns:
        Number of drivers whose coordinate changed
    """
    moved = 0
    for driver in drivers:
        if advance_driver(driver, rng):
            moved += 1
    logger.debug("Movement tick: %d/%d drivers moved", moved, len(drivers))
    return moved
