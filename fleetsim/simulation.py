# fleet-dispatch-sim/fleetsim/simulation.py
"""
Simulation Engine for the Fleet Dispatch Simulation.

This module owns the fleet state and advances it one tick at a time.
Key responsibilities:
- Tick orchestration (movement, dispatch, route regeneration, stats)
- Serializing every mutating entry point through a single lock
- Publishing read-only snapshots to consumers (CLI, dashboard)
- The two consumer actions: driver selection and route optimization

Every tick runs these phases in order:
1. Move every driver that is EN_ROUTE or RETURNING
2. On every Nth tick, advance exactly one random driver's status
3. Regenerate (or drop) the route of the driver that changed
4. Optionally feed a new pending delivery
5. Recompute dashboard stats and notify subscribers
"""

from __future__ import annotations

import copy
import logging
import random
import threading
from collections import deque
from datetime import datetime, timedelta
from typing import Callable, Deque, Dict, List, Optional, Tuple

from . import config, seed
from .clock import SimulationClock
from .dispatch import DispatchEngine, find_delivery
from .geometry import build_route
from .models import (
    DashboardStats,
    Delivery,
    DeliveryRoute,
    DeliveryStatus,
    Driver,
    DriverStatus,
    FleetSnapshot,
    StatusChange,
)
from .movement import advance_positions
from .optimizer import optimize_route
from .stats import compute_stats

logger = logging.getLogger(__name__)

Subscriber = Callable[[FleetSnapshot], None]


class FleetSimulation:
    """
    State holder for the live fleet simulation.

    Consumers never see the internal collections. Properties and
    ``snapshot()`` return deep copies, and the only mutations available from
    outside are ``tick``, ``select_driver``, ``optimize_route`` and
    ``add_delivery``, all serialized through one re-entrant lock.

    Attributes:
        tick_count: Ticks executed so far
        dispatch_evaluations: Eligible ticks on which the state machine ran
        dispatch_every: Dispatch cadence N (state machine runs on every Nth tick)
        spawn_every: Synthetic order feed cadence (0 = disabled)
    """

    def __init__(
        self,
        drivers: List[Driver],
        deliveries: List[Delivery],
        rng: Optional[random.Random] = None,
        dispatch_every: int = None,
        tick_interval_seconds: float = None,
        spawn_every: int = None,
    ) -> None:
        """
        Initialize the simulation with a fleet and an order book.

        Args:
            drivers: The fleet (copied; later changes to these objects are not seen)
            deliveries: All known deliveries (copied the same way)
            rng: Random source for movement, dispatch and route geometry
            dispatch_every: Dispatch cadence (default from config)
            tick_interval_seconds: Clock interval (default from config)
            spawn_every: Synthetic order feed cadence (default from config)

        Raises:
            ValueError: If a cadence is out of range
        """
        if dispatch_every is None:
            dispatch_every = config.DISPATCH_EVERY_N_TICKS
        if spawn_every is None:
            spawn_every = config.SPAWN_EVERY_N_TICKS
        if dispatch_every <= 0:
            raise ValueError(f"Dispatch interval must be positive, got {dispatch_every}")
        if spawn_every < 0:
            raise ValueError(f"Spawn interval must be non-negative, got {spawn_every}")

        self.dispatch_every: int = dispatch_every
        self.spawn_every: int = spawn_every
        self.tick_count: int = 0
        self.dispatch_evaluations: int = 0

        self._lock = threading.RLock()
        self._rng: random.Random = rng if rng is not None else random.Random()
        self._drivers: List[Driver] = copy.deepcopy(list(drivers))
        self._deliveries: List[Delivery] = copy.deepcopy(list(deliveries))
        # One route per driver, keyed by driver_id
        self._routes: Dict[str, DeliveryRoute] = {}
        self._route_counter: int = 0
        self._history: Deque[StatusChange] = deque(maxlen=config.STATUS_HISTORY_SIZE)
        self._selected_driver_id: Optional[str] = None
        self._selected_delivery_id: Optional[str] = None
        self._subscribers: List[Subscriber] = []

        self.dispatch_engine = DispatchEngine(self._rng)
        self._clock = SimulationClock(self.tick, tick_interval_seconds)

        for driver in self._drivers:
            self._refresh_route(driver)
        self._stats: DashboardStats = compute_stats(self._drivers, self._deliveries)

    @classmethod
    def create(
        cls,
        num_drivers: int = None,
        num_deliveries: int = None,
        seed_value: Optional[int] = None,
        **kwargs,
    ) -> "FleetSimulation":
        """
        Build a simulation from the seeded Tokyo scenario.

        Args:
            num_drivers: Fleet size (default from config)
            num_deliveries: Number of deliveries (default from config)
            seed_value: Seed for the shared random source; None for a random run
            **kwargs: Forwarded to the constructor

        Returns:
            A ready-to-tick FleetSimulation
        """
        rng = random.Random(seed_value)
        drivers, deliveries = seed.generate_scenario(num_drivers, num_deliveries, rng=rng)
        return cls(drivers, deliveries, rng=rng, **kwargs)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    @property
    def tick_interval_seconds(self) -> float:
        return self._clock.interval_seconds

    @property
    def is_running(self) -> bool:
        return self._clock.is_running

    def start(self) -> None:
        """Begin ticking on the simulation clock."""
        self._clock.start()

    def stop(self) -> None:
        """Halt ticking. Safe to call repeatedly."""
        self._clock.stop()

    def __enter__(self) -> "FleetSimulation":
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()

    # -------------------------------------------------------------------------
    # Tick
    # -------------------------------------------------------------------------

    def tick(self) -> None:
        """Execute a single simulation tick."""
        with self._lock:
            self.tick_count += 1
            advance_positions(self._drivers, self._rng)

            if self.tick_count % self.dispatch_every == 0:
                self._run_dispatch()

            if self.spawn_every and self.tick_count % self.spawn_every == 0:
                self._spawn_delivery()

            self._stats = compute_stats(self._drivers, self._deliveries)
            snapshot = self._snapshot_locked() if self._subscribers else None

        if snapshot is not None:
            self._notify(snapshot)

    def run(self, ticks: int) -> DashboardStats:
        """
        Run a number of ticks synchronously, without the clock.

        Returns:
            The stats after the last tick
        """
        for _ in range(ticks):
            self.tick()
        return self.stats

    def _run_dispatch(self) -> Optional[StatusChange]:
        self.dispatch_evaluations += 1
        change = self.dispatch_engine.run_eligible_tick(self._drivers, self._deliveries, self.tick_count)
        if change is None:
            logger.debug("[tick %d] Dispatch: no pending delivery for idle driver", self.tick_count)
            return None

        self._history.append(change)
        driver = next(d for d in self._drivers if d.driver_id == change.driver_id)
        route = self._refresh_route(driver)

        if change.previous == DriverStatus.IDLE and route is not None:
            delivery = find_delivery(self._deliveries, driver.current_delivery_id)
            if delivery is not None:
                delivery.estimated_arrival = datetime.now() + timedelta(minutes=route.estimated_duration_min)
        return change

    def _refresh_route(self, driver: Driver) -> Optional[DeliveryRoute]:
        """Replace the driver's route, or drop it if the driver no longer carries anything."""
        delivery = find_delivery(self._deliveries, driver.current_delivery_id)
        if not driver.status.has_route or delivery is None:
            self._routes.pop(driver.driver_id, None)
            return None

        self._route_counter += 1
        route = build_route(f"RT-{self._route_counter:05d}", driver, delivery, self._rng)
        self._routes[driver.driver_id] = route
        return route

    def _spawn_delivery(self) -> Delivery:
        delivery = seed.make_delivery(self._next_delivery_index(), self._rng)
        self._deliveries.append(delivery)
        logger.info("[tick %d] New order %s (%s -> %s)",
                    self.tick_count, delivery.order_number, delivery.pickup_address, delivery.dropoff_address)
        return delivery

    def _next_delivery_index(self) -> int:
        taken = {d.delivery_id for d in self._deliveries}
        index = len(self._deliveries)
        while seed.delivery_id_for(index) in taken:
            index += 1
        return index

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    def select_driver(self, driver_id: Optional[str]) -> None:
        """
        Mark a driver (and the delivery it carries) as selected.

        ``None`` or an unknown id clears the selection. Has no effect on the
        simulation itself.
        """
        with self._lock:
            driver = self._find_driver(driver_id)
            if driver is None:
                self._selected_driver_id = None
                self._selected_delivery_id = None
            else:
                self._selected_driver_id = driver.driver_id
                self._selected_delivery_id = driver.current_delivery_id
            snapshot = self._snapshot_locked() if self._subscribers else None

        if snapshot is not None:
            self._notify(snapshot)

    def optimize_route(self, driver_id: str) -> bool:
        """
        Reorder and rebuild the route of a driver.

        Returns:
            True if the driver had a route, False (no-op) otherwise
        """
        with self._lock:
            route = self._routes.get(driver_id)
            if route is None:
                logger.debug("optimize_route: no route for driver %s", driver_id)
                return False
            optimized = optimize_route(route, self._rng)
            self._routes[driver_id] = optimized
            logger.info(
                "Optimized route for %s: %.2f km, %.1f min",
                driver_id, optimized.total_distance_km, optimized.estimated_duration_min,
            )
            snapshot = self._snapshot_locked() if self._subscribers else None

        if snapshot is not None:
            self._notify(snapshot)
        return True

    def add_delivery(
        self,
        pickup: Tuple[float, float],
        pickup_address: str,
        dropoff: Tuple[float, float],
        dropoff_address: str,
        estimated_arrival: Optional[datetime] = None,
    ) -> Delivery:
        """
        Register a new pending delivery. Idle drivers pick it up on later eligible ticks.

        Returns:
            A copy of the created delivery
        """
        with self._lock:
            index = self._next_delivery_index()
            delivery = Delivery(
                delivery_id=seed.delivery_id_for(index),
                order_number=f"ORD-{config.ORDER_NUMBER_BASE + index}",
                pickup_lat=pickup[0],
                pickup_lng=pickup[1],
                pickup_address=pickup_address,
                dropoff_lat=dropoff[0],
                dropoff_lng=dropoff[1],
                dropoff_address=dropoff_address,
                status=DeliveryStatus.PENDING,
                estimated_arrival=estimated_arrival,
            )
            self._deliveries.append(delivery)
            self._stats = compute_stats(self._drivers, self._deliveries)
            result = copy.deepcopy(delivery)
            snapshot = self._snapshot_locked() if self._subscribers else None

        if snapshot is not None:
            self._notify(snapshot)
        return result

    # -------------------------------------------------------------------------
    # Read-only views
    # -------------------------------------------------------------------------

    @property
    def drivers(self) -> List[Driver]:
        with self._lock:
            return copy.deepcopy(self._drivers)

    @property
    def deliveries(self) -> List[Delivery]:
        with self._lock:
            return copy.deepcopy(self._deliveries)

    @property
    def routes(self) -> List[DeliveryRoute]:
        with self._lock:
            return copy.deepcopy(list(self._routes.values()))

    @property
    def stats(self) -> DashboardStats:
        with self._lock:
            return copy.deepcopy(self._stats)

    @property
    def history(self) -> List[StatusChange]:
        """Most recent status transitions, oldest first."""
        with self._lock:
            return copy.deepcopy(list(self._history))

    @property
    def selected_driver_id(self) -> Optional[str]:
        return self._selected_driver_id

    @property
    def selected_delivery_id(self) -> Optional[str]:
        return self._selected_delivery_id

    def get_driver(self, driver_id: str) -> Optional[Driver]:
        with self._lock:
            driver = self._find_driver(driver_id)
            return copy.deepcopy(driver) if driver is not None else None

    def get_delivery(self, delivery_id: str) -> Optional[Delivery]:
        with self._lock:
            delivery = find_delivery(self._deliveries, delivery_id)
            return copy.deepcopy(delivery) if delivery is not None else None

    def get_route(self, driver_id: str) -> Optional[DeliveryRoute]:
        with self._lock:
            route = self._routes.get(driver_id)
            return copy.deepcopy(route) if route is not None else None

    def snapshot(self) -> FleetSnapshot:
        """Consistent copy of the whole state, taken between ticks."""
        with self._lock:
            return self._snapshot_locked()

    def _snapshot_locked(self) -> FleetSnapshot:
        return FleetSnapshot(
            tick=self.tick_count,
            drivers=tuple(copy.deepcopy(self._drivers)),
            deliveries=tuple(copy.deepcopy(self._deliveries)),
            routes=tuple(copy.deepcopy(list(self._routes.values()))),
            stats=copy.deepcopy(self._stats),
            selected_driver_id=self._selected_driver_id,
            selected_delivery_id=self._selected_delivery_id,
            dispatch_evaluations=self.dispatch_evaluations,
        )

    def _find_driver(self, driver_id: Optional[str]) -> Optional[Driver]:
        if driver_id is None:
            return None
        return next((d for d in self._drivers if d.driver_id == driver_id), None)

    # -------------------------------------------------------------------------
    # Subscriptions
    # -------------------------------------------------------------------------

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register a callback that receives a FleetSnapshot after every tick or action.

        Callbacks run on the thread that made the change (the clock thread
        for ticks), after the state lock has been released. A callback that
        raises is logged and skipped; the tick and the other subscribers are
        unaffected.

        Returns:
            A function that removes the subscription
        """
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self, snapshot: FleetSnapshot) -> None:
        with self._lock:
            subscribers = list(self._subscribers)
        for callback in subscribers:
            try:
                callback(snapshot)
            except Exception:
                logger.exception("Subscriber %r failed", callback)
