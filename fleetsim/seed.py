# fleet-dispatch-sim/fleetsim/seed.py
"""
Scenario seeding for the Fleet Dispatch Simulation.

A hard-coded Tokyo scenario: eight couriers around Tokyo Station and six
store-to-store deliveries. Larger fleets or order books are padded with
synthetic entries scattered around the service area center.

Binding rule: delivery ``i`` is carried by driver ``i`` for every index both
collections share. Remaining deliveries start PENDING and remaining drivers
start IDLE.
"""

from __future__ import annotations

import random
from datetime import datetime, timedelta
from typing import List, Tuple, Optional

from . import config, utils
from .models import Driver, Delivery, DriverStatus, DeliveryStatus, VehicleType

# (name, lat, lng, vehicle)
DRIVER_SEED: List[Tuple[str, float, float, VehicleType]] = [
    ("Taro Tanaka", 35.6835, 139.7710, VehicleType.CAR),
    ("Hanako Sato", 35.6790, 139.7630, VehicleType.BIKE),
    ("Ichiro Suzuki", 35.6850, 139.7580, VehicleType.CAR),
    ("Misaki Takahashi", 35.6770, 139.7720, VehicleType.BICYCLE),
    ("Kenta Ito", 35.6810, 139.7650, VehicleType.CAR),
    ("Sakura Watanabe", 35.6860, 139.7690, VehicleType.BIKE),
    ("Daisuke Yamamoto", 35.6780, 139.7600, VehicleType.CAR),
    ("Yumi Nakamura", 35.6840, 139.7750, VehicleType.BICYCLE),
]

# (pickup address, lat, lng, dropoff address, lat, lng)
DELIVERY_SEED: List[Tuple[str, float, float, str, float, float]] = [
    ("Marunouchi Building", 35.6823, 139.7637, "Nihonbashi Mitsukoshi", 35.6860, 139.7740),
    ("Tokyo Midtown", 35.6654, 139.7310, "Roppongi Hills", 35.6605, 139.7292),
    ("Ginza Matsuya", 35.6717, 139.7657, "Yurakucho Mullion", 35.6743, 139.7630),
    ("Akihabara UDX", 35.7006, 139.7726, "Ueno Matsuzakaya", 35.7087, 139.7740),
    ("Shinjuku Takashimaya", 35.6870, 139.7024, "Shibuya Hikarie", 35.6590, 139.7038),
    ("Shinagawa Intercity", 35.6189, 139.7408, "Osaki Gate City", 35.6195, 139.7280),
]

# Status of a carrying driver at setup, cycled by index
CARRYING_STATUSES: List[DriverStatus] = [
    DriverStatus.EN_ROUTE,
    DriverStatus.EN_ROUTE,
    DriverStatus.EN_ROUTE,
    DriverStatus.DELIVERING,
    DriverStatus.EN_ROUTE,
    DriverStatus.DELIVERING,
]

_VEHICLE_CYCLE: List[VehicleType] = [VehicleType.CAR, VehicleType.BIKE, VehicleType.BICYCLE]


def driver_id_for(index: int) -> str:
    return f"DRV-{index + 1:03d}"


def delivery_id_for(index: int) -> str:
    return f"DEL-{index + 1:03d}"


def _scatter(rng: random.Random, spread: float) -> Tuple[float, float]:
    """Random point within +/- spread degrees of the service area center."""
    return (
        config.CENTER_LAT + rng.uniform(-spread, spread),
        config.CENTER_LNG + rng.uniform(-spread, spread),
    )


def make_driver(index: int, rng: random.Random) -> Driver:
    """Driver ``index`` from the seed table, or a synthetic one past its end."""
    if index < len(DRIVER_SEED):
        name, lat, lng, vehicle = DRIVER_SEED[index]
    else:
        lat, lng = _scatter(rng, config.REGION_SPAN_DEG / 2)
        name = f"Courier {index + 1}"
        vehicle = _VEHICLE_CYCLE[index % len(_VEHICLE_CYCLE)]

    return Driver(
        driver_id=driver_id_for(index),
        name=name,
        current_lat=lat,
        current_lng=lng,
        heading=utils.normalize_heading(rng.uniform(0.0, 360.0)),
        vehicle_type=vehicle,
        completed_count=rng.randint(3, 15),
    )


def make_delivery(index: int, rng: random.Random, now: Optional[datetime] = None) -> Delivery:
    """Pending delivery ``index`` from the seed table, or a synthetic one past its end."""
    if now is None:
        now = datetime.now()
    if index < len(DELIVERY_SEED):
        pickup_address, pickup_lat, pickup_lng, dropoff_address, dropoff_lat, dropoff_lng = DELIVERY_SEED[index]
    else:
        spread = config.REGION_SPAN_DEG * 0.8
        pickup_lat, pickup_lng = _scatter(rng, spread)
        dropoff_lat, dropoff_lng = _scatter(rng, spread)
        pickup_address = f"Store #{index + 1}"
        dropoff_address = f"Customer #{index + 1}"

    return Delivery(
        delivery_id=delivery_id_for(index),
        order_number=f"ORD-{config.ORDER_NUMBER_BASE + index}",
        pickup_lat=pickup_lat,
        pickup_lng=pickup_lng,
        pickup_address=pickup_address,
        dropoff_lat=dropoff_lat,
        dropoff_lng=dropoff_lng,
        dropoff_address=dropoff_address,
        status=DeliveryStatus.PENDING,
        estimated_arrival=now + timedelta(seconds=rng.uniform(config.ETA_MIN_SECONDS, config.ETA_MAX_SECONDS)),
        created_at=now - timedelta(
            seconds=rng.uniform(config.CREATED_MIN_AGE_SECONDS, config.CREATED_MAX_AGE_SECONDS)
        ),
    )


def generate_scenario(
    num_drivers: int = None,
    num_deliveries: int = None,
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
) -> Tuple[List[Driver], List[Delivery]]:
    """
    Build the initial fleet and order book.

    Args:
        num_drivers: Fleet size (default from config)
        num_deliveries: Number of deliveries (default from config)
        rng: Random source for headings, counters and synthetic entries
        now: Reference time for delivery timestamps

    Returns:
        Tuple of (drivers, deliveries) lists

    Raises:
        ValueError: If a count is negative
    """
    if num_drivers is None:
        num_drivers = config.DEFAULT_NUM_DRIVERS
    if num_deliveries is None:
        num_deliveries = config.DEFAULT_NUM_DELIVERIES
    if num_drivers < 0 or num_deliveries < 0:
        raise ValueError(f"Fleet sizes must be non-negative, got {num_drivers} drivers / {num_deliveries} deliveries")
    if rng is None:
        rng = random.Random()
    if now is None:
        now = datetime.now()

    drivers = [make_driver(i, rng) for i in range(num_drivers)]
    deliveries = [make_delivery(i, rng, now) for i in range(num_deliveries)]

    for i in range(min(num_drivers, num_deliveries)):
        driver, delivery = drivers[i], deliveries[i]
        driver.status = CARRYING_STATUSES[i % len(CARRYING_STATUSES)]
        driver.current_delivery_id = delivery.delivery_id
        delivery.status = DeliveryStatus.IN_TRANSIT
        delivery.assigned_driver_id = driver.driver_id

    return drivers, deliveries
