"""
Tests for scenario seeding.
"""

import random
from datetime import datetime, timedelta

import pytest

from fleetsim import config
from fleetsim.models import DeliveryStatus, DriverStatus
from fleetsim.seed import DELIVERY_SEED, DRIVER_SEED, generate_scenario, make_delivery, make_driver
from fleetsim.utils import is_within_region


class _UpperBoundRandom(random.Random):
    """uniform(a, b) always returns b."""

    def uniform(self, a, b):
        return b


class TestGenerateScenario:
    """Tests for the initial fleet and order book."""

    def test_default_sizes(self, rng):
        drivers, deliveries = generate_scenario(rng=rng)
        assert len(drivers) == config.DEFAULT_NUM_DRIVERS
        assert len(deliveries) == config.DEFAULT_NUM_DELIVERIES

    def test_pairs_bound_by_index(self, rng):
        drivers, deliveries = generate_scenario(8, 6, rng=rng)

        for i in range(6):
            assert drivers[i].current_delivery_id == deliveries[i].delivery_id
            assert deliveries[i].assigned_driver_id == drivers[i].driver_id
            assert deliveries[i].status == DeliveryStatus.IN_TRANSIT
            assert drivers[i].status in (DriverStatus.EN_ROUTE, DriverStatus.DELIVERING)

        for driver in drivers[6:]:
            assert driver.status == DriverStatus.IDLE
            assert driver.current_delivery_id is None

        assert not any(d.status == DeliveryStatus.DELIVERED for d in deliveries)

    def test_more_deliveries_than_drivers(self, rng):
        drivers, deliveries = generate_scenario(2, 5, rng=rng)
        assert [d.status for d in deliveries[2:]] == [DeliveryStatus.PENDING] * 3
        assert all(d.assigned_driver_id is None for d in deliveries[2:])

    def test_ids_are_unique_and_formatted(self, rng):
        drivers, deliveries = generate_scenario(12, 9, rng=rng)
        assert drivers[0].driver_id == "DRV-001"
        assert deliveries[8].delivery_id == "DEL-009"
        assert len({d.driver_id for d in drivers}) == 12
        assert len({d.delivery_id for d in deliveries}) == 9

    def test_empty(self, rng):
        assert generate_scenario(0, 0, rng=rng) == ([], [])

    @pytest.mark.parametrize("drivers,deliveries", [(-1, 6), (8, -3)])
    def test_negative_counts_rejected(self, drivers, deliveries):
        with pytest.raises(ValueError):
            generate_scenario(drivers, deliveries)

    def test_seeded_runs_match(self):
        now = datetime(2024, 5, 1, 12, 0)
        a = generate_scenario(10, 10, rng=random.Random(9), now=now)
        b = generate_scenario(10, 10, rng=random.Random(9), now=now)
        assert a == b


class TestSeedRecords:

    def test_table_entries_used_first(self, rng):
        driver = make_driver(0, rng)
        assert driver.name == DRIVER_SEED[0][0]
        delivery = make_delivery(0, rng)
        assert delivery.pickup_address == DELIVERY_SEED[0][0]
        assert delivery.order_number == f"ORD-{config.ORDER_NUMBER_BASE}"

    def test_synthetic_entries_inside_region(self, rng):
        for index in range(len(DRIVER_SEED), len(DRIVER_SEED) + 20):
            driver = make_driver(index, rng)
            assert driver.name == f"Courier {index + 1}"
            assert is_within_region(driver.current_lat, driver.current_lng)
        delivery = make_delivery(50, rng)
        assert delivery.pickup_address == "Store #51"
        assert is_within_region(delivery.dropoff_lat, delivery.dropoff_lng)

    def test_heading_upper_bound_wraps(self):
        assert make_driver(0, _UpperBoundRandom(1)).heading == 0.0

    def test_driver_fields(self, rng):
        driver = make_driver(3, rng)
        assert driver.status == DriverStatus.IDLE
        assert 0.0 <= driver.heading < 360.0
        assert 3 <= driver.completed_count <= 15

    def test_delivery_timestamps(self, rng):
        now = datetime(2024, 5, 1, 12, 0)
        delivery = make_delivery(1, rng, now)
        assert now + timedelta(seconds=config.ETA_MIN_SECONDS) <= delivery.estimated_arrival
        assert delivery.estimated_arrival <= now + timedelta(seconds=config.ETA_MAX_SECONDS)
        assert now - timedelta(seconds=config.CREATED_MAX_AGE_SECONDS) <= delivery.created_at
        assert delivery.created_at <= now - timedelta(seconds=config.CREATED_MIN_AGE_SECONDS)
