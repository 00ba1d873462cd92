# fleet-dispatch-sim/fleetsim/models.py
"""
Core domain models for the Fleet Dispatch Simulation.

This module defines the fundamental data structures used throughout the simulation:
- Driver: A courier with a vehicle, a position and a dispatch status
- Delivery: A pickup-to-dropoff order handled by at most one driver
- Waypoint / DeliveryRoute: The path a busy driver is expected to follow
- DashboardStats: Fleet-wide counters derived from the collections above
- StatusChange / FleetSnapshot: What consumers observe after every tick
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Tuple, Optional, Dict, Any

from . import config


class DriverStatus(Enum):
    """
    Dispatch states for a driver.

    The driver state machine is a single one-way cycle:
    - IDLE: Waiting for a pending delivery
    - EN_ROUTE: Bound to a delivery, heading to pickup/dropoff
    - DELIVERING: Arrived at the dropoff, handing over
    - RETURNING: Delivery done, heading back
    """
    IDLE = "IDLE"
    EN_ROUTE = "EN_ROUTE"
    DELIVERING = "DELIVERING"
    RETURNING = "RETURNING"

    @property
    def is_moving(self) -> bool:
        """True for statuses that advance the driver's position each tick."""
        return self in (DriverStatus.EN_ROUTE, DriverStatus.RETURNING)

    @property
    def has_route(self) -> bool:
        """True for statuses that carry a delivery and therefore own a route."""
        return self in (DriverStatus.EN_ROUTE, DriverStatus.DELIVERING)

    @property
    def label(self) -> str:
        return _DRIVER_STATUS_LABELS[self]

    @property
    def color(self) -> str:
        return _DRIVER_STATUS_COLORS[self]


_DRIVER_STATUS_LABELS: Dict[DriverStatus, str] = {
    DriverStatus.IDLE: "Idle",
    DriverStatus.EN_ROUTE: "En route",
    DriverStatus.DELIVERING: "At dropoff",
    DriverStatus.RETURNING: "Returning",
}

_DRIVER_STATUS_COLORS: Dict[DriverStatus, str] = {
    DriverStatus.IDLE: "gray",
    DriverStatus.EN_ROUTE: "blue",
    DriverStatus.DELIVERING: "orange",
    DriverStatus.RETURNING: "green",
}


class VehicleType(Enum):
    """Vehicle types in the fleet. Each has a fixed per-tick step size."""
    CAR = "car"
    BIKE = "bike"
    BICYCLE = "bicycle"

    @property
    def step_deg(self) -> float:
        """Per-tick movement in degrees of latitude/longitude."""
        steps = {
            VehicleType.CAR: config.STEP_CAR_DEG,
            VehicleType.BIKE: config.STEP_BIKE_DEG,
            VehicleType.BICYCLE: config.STEP_BICYCLE_DEG,
        }
        return steps[self]

    @property
    def speed_kmh(self) -> float:
        """Nominal speed used for duration estimates."""
        speeds = {
            VehicleType.CAR: config.SPEED_CAR_KMH,
            VehicleType.BIKE: config.SPEED_BIKE_KMH,
            VehicleType.BICYCLE: config.SPEED_BICYCLE_KMH,
        }
        return speeds[self]


class DeliveryStatus(Enum):
    """Lifecycle states for a delivery order."""
    PENDING = "PENDING"          # Created, awaiting a driver
    ASSIGNED = "ASSIGNED"        # Bound to a driver, not yet moving
    PICKED_UP = "PICKED_UP"      # Driver has collected the parcel
    IN_TRANSIT = "IN_TRANSIT"    # Driver is on the way
    DELIVERED = "DELIVERED"      # Handed over to the customer
    FAILED = "FAILED"            # Delivery could not be completed

    @property
    def color(self) -> str:
        return _DELIVERY_STATUS_COLORS[self]


_DELIVERY_STATUS_COLORS: Dict[DeliveryStatus, str] = {
    DeliveryStatus.PENDING: "gray",
    DeliveryStatus.ASSIGNED: "blue",
    DeliveryStatus.PICKED_UP: "indigo",
    DeliveryStatus.IN_TRANSIT: "orange",
    DeliveryStatus.DELIVERED: "green",
    DeliveryStatus.FAILED: "red",
}


class WaypointType(Enum):
    WAREHOUSE = "WAREHOUSE"
    PICKUP = "PICKUP"
    DROPOFF = "DROPOFF"


@dataclass
class Driver:
    """
    Represents a courier in the delivery fleet.

    Attributes:
        driver_id: Unique identifier, stable for the whole session
        name: Display name
        current_lat/lng: Current position (updated every tick while moving)
        heading: Direction of travel in degrees, [0, 360)
        status: Current dispatch state
        vehicle_type: Determines the per-tick step size
        current_delivery_id: Delivery being carried, if any
        completed_count: Number of deliveries completed (never decreases)
    """
    driver_id: str
    name: str
    current_lat: float
    current_lng: float
    heading: float
    vehicle_type: VehicleType
    status: DriverStatus = DriverStatus.IDLE
    current_delivery_id: Optional[str] = None
    completed_count: int = 0

    @property
    def current_loc(self) -> Tuple[float, float]:
        """Returns the current location as a (lat, lng) tuple."""
        return (self.current_lat, self.current_lng)

    def __repr__(self) -> str:
        return f"Driver({self.driver_id}, {self.status.value}, delivery={self.current_delivery_id})"


@dataclass
class Delivery:
    """
    Represents a delivery order from a pickup address to a dropoff address.

    The assigned driver is kept after completion as the historical record.
    """
    delivery_id: str
    order_number: str
    pickup_lat: float
    pickup_lng: float
    pickup_address: str
    dropoff_lat: float
    dropoff_lng: float
    dropoff_address: str
    status: DeliveryStatus = DeliveryStatus.PENDING
    assigned_driver_id: Optional[str] = None
    estimated_arrival: Optional[datetime] = None
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def pickup_loc(self) -> Tuple[float, float]:
        """Returns the pickup location as a (lat, lng) tuple."""
        return (self.pickup_lat, self.pickup_lng)

    @property
    def dropoff_loc(self) -> Tuple[float, float]:
        """Returns the dropoff location as a (lat, lng) tuple."""
        return (self.dropoff_lat, self.dropoff_lng)

    def __repr__(self) -> str:
        return f"Delivery({self.order_number}, {self.status.value})"


@dataclass
class Waypoint:
    """
    A labeled point on a route.

    Attributes:
        waypoint_id: Unique within the route
        location: (latitude, longitude)
        label: Address or "Current location"
        waypoint_type: WAREHOUSE, PICKUP or DROPOFF
        order: Zero-based position in the route
    """
    waypoint_id: str
    location: Tuple[float, float]
    label: str
    waypoint_type: WaypointType
    order: int

    def __repr__(self) -> str:
        return f"Waypoint({self.order}:{self.waypoint_type.value}:{self.label})"


@dataclass
class DeliveryRoute:
    """
    The planned path of one busy driver.

    Routes are replaced wholesale when the owning driver changes status or
    the optimizer runs; they are never patched in place.
    """
    route_id: str
    driver_id: str
    waypoints: List[Waypoint]
    polyline: List[Tuple[float, float]]
    total_distance_km: float
    estimated_duration_min: float
    is_optimized: bool = False

    def __repr__(self) -> str:
        return (f"DeliveryRoute({self.driver_id}, stops={len(self.waypoints)}, "
                f"dist={self.total_distance_km:.2f}km, optimized={self.is_optimized})")


@dataclass
class DashboardStats:
    """Fleet-wide counters, recomputed from scratch after every tick."""
    total_deliveries: int = 0
    completed_deliveries: int = 0
    active_drivers: int = 0
    idle_drivers: int = 0
    average_delivery_time_min: float = 0.0
    on_time_rate: float = 0.0

    @property
    def completion_rate(self) -> float:
        """Share of deliveries completed (0.0 - 1.0)."""
        if self.total_deliveries <= 0:
            return 0.0
        return self.completed_deliveries / self.total_deliveries

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for display."""
        return {
            "Total Deliveries": self.total_deliveries,
            "Completed": self.completed_deliveries,
            "Completion Rate": f"{self.completion_rate * 100:.1f}%",
            "Active Drivers": self.active_drivers,
            "Idle Drivers": self.idle_drivers,
            "Avg Delivery Time": f"{self.average_delivery_time_min:.1f} min",
            "On-Time Rate": f"{self.on_time_rate * 100:.0f}%",
        }


@dataclass
class StatusChange:
    """One transition applied by the dispatch state machine."""
    tick: int
    driver_id: str
    previous: DriverStatus
    current: DriverStatus
    delivery_id: Optional[str] = None

    def __repr__(self) -> str:
        return f"StatusChange(t={self.tick}, {self.driver_id}: {self.previous.value}->{self.current.value})"


@dataclass(frozen=True)
class FleetSnapshot:
    """
    Read-only view of the simulation state, handed to consumers.

    All records are deep copies; mutating them has no effect on the simulation.
    """
    tick: int
    drivers: Tuple[Driver, ...]
    deliveries: Tuple[Delivery, ...]
    routes: Tuple[DeliveryRoute, ...]
    stats: DashboardStats
    selected_driver_id: Optional[str] = None
    selected_delivery_id: Optional[str] = None
    dispatch_evaluations: int = 0

    def route_for(self, driver_id: str) -> Optional[DeliveryRoute]:
        return next((r for r in self.routes if r.driver_id == driver_id), None)

    def carried_delivery(self, driver_id: str) -> Optional[Delivery]:
        """The delivery the driver is carrying right now, or None."""
        driver = next((d for d in self.drivers if d.driver_id == driver_id), None)
        if driver is None or driver.current_delivery_id is None:
            return None
        return next((d for d in self.deliveries if d.delivery_id == driver.current_delivery_id), None)
