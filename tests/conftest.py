"""Shared fixtures for the fleet simulation tests."""

import random
from typing import Optional

import pytest

from fleetsim import config
from fleetsim.models import Delivery, DeliveryStatus, Driver, DriverStatus, VehicleType


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source so trajectories and picks are reproducible."""
    return random.Random(42)


@pytest.fixture
def make_driver():
    """Factory for drivers parked at the service area center by default."""

    def _make(
        driver_id: str = "DRV-001",
        status: DriverStatus = DriverStatus.IDLE,
        vehicle_type: VehicleType = VehicleType.CAR,
        lat: float = config.CENTER_LAT,
        lng: float = config.CENTER_LNG,
        heading: float = 45.0,
        current_delivery_id: Optional[str] = None,
        completed_count: int = 0,
    ) -> Driver:
        return Driver(
            driver_id=driver_id,
            name=f"Test {driver_id}",
            current_lat=lat,
            current_lng=lng,
            heading=heading,
            vehicle_type=vehicle_type,
            status=status,
            current_delivery_id=current_delivery_id,
            completed_count=completed_count,
        )

    return _make


@pytest.fixture
def make_delivery():
    """Factory for deliveries a few hundred meters around the center."""

    def _make(
        delivery_id: str = "DEL-001",
        status: DeliveryStatus = DeliveryStatus.PENDING,
        assigned_driver_id: Optional[str] = None,
    ) -> Delivery:
        return Delivery(
            delivery_id=delivery_id,
            order_number=f"ORD-{delivery_id}",
            pickup_lat=config.CENTER_LAT + 0.004,
            pickup_lng=config.CENTER_LNG - 0.003,
            pickup_address="Marunouchi Building",
            dropoff_lat=config.CENTER_LAT - 0.006,
            dropoff_lng=config.CENTER_LNG + 0.005,
            dropoff_address="Ginza Matsuya",
            status=status,
            assigned_driver_id=assigned_driver_id,
        )

    return _make
