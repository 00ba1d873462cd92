# fleet-dispatch-sim/fleetsim/stats.py
"""Fleet-wide dashboard counters."""

from __future__ import annotations

from typing import List

from . import config
from .models import Driver, Delivery, DashboardStats, DriverStatus, DeliveryStatus


def compute_stats(drivers: List[Driver], deliveries: List[Delivery]) -> DashboardStats:
    """
    Recompute dashboard stats from the current collections.

    The two timing metrics are placeholders from config; the simulation does
    not record per-delivery timings.
    """
    completed = sum(1 for d in deliveries if d.status == DeliveryStatus.DELIVERED)
    active = sum(1 for d in drivers if d.status != DriverStatus.IDLE)

    return DashboardStats(
        total_deliveries=len(deliveries),
        completed_deliveries=completed,
        active_drivers=active,
        idle_drivers=len(drivers) - active,
        average_delivery_time_min=config.AVERAGE_DELIVERY_TIME_MIN,
        on_time_rate=config.ON_TIME_RATE,
    )
