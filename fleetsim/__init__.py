# fleet-dispatch-sim/fleetsim/__init__.py

from .models import (
    Driver,
    Delivery,
    Waypoint,
    DeliveryRoute,
    DashboardStats,
    StatusChange,
    FleetSnapshot,
    DriverStatus,
    DeliveryStatus,
    VehicleType,
    WaypointType,
)
from .config import (
    TICK_INTERVAL_SECONDS,
    DISPATCH_EVERY_N_TICKS,
    CENTER_LAT,
    CENTER_LNG,
    REGION_SPAN_DEG,
)
from .simulation import FleetSimulation
from .clock import SimulationClock
from .dispatch import DispatchEngine, advance_driver_status
from .geometry import build_polyline, build_route, polyline_distance_km
from .optimizer import optimize_route, reorder_waypoints
from .movement import advance_driver, advance_positions
from .stats import compute_stats

__version__ = "1.0.0"

__all__ = [
    # Models
    "Driver",
    "Delivery",
    "Waypoint",
    "DeliveryRoute",
    "DashboardStats",
    "StatusChange",
    "FleetSnapshot",
    "DriverStatus",
    "DeliveryStatus",
    "VehicleType",
    "WaypointType",
    # Core
    "FleetSimulation",
    "SimulationClock",
    "DispatchEngine",
    # Functions
    "advance_driver_status",
    "build_polyline",
    "build_route",
    "polyline_distance_km",
    "optimize_route",
    "reorder_waypoints",
    "advance_driver",
    "advance_positions",
    "compute_stats",
    # Config
    "TICK_INTERVAL_SECONDS",
    "DISPATCH_EVERY_N_TICKS",
    "CENTER_LAT",
    "CENTER_LNG",
    "REGION_SPAN_DEG",
]
