# fleet-dispatch-sim/fleetsim/config.py
"""
Configuration parameters for the Fleet Dispatch Simulation.

This module centralizes all tunable parameters, making it easy to:
- Adjust the simulation clock and dispatch cadence
- Tune courier movement and route geometry
- Configure the seeded scenario and the synthetic order feed

Values are read at call time (``config.X``), so dashboards can override
them at runtime the same way they tweak any other module attribute.
"""

from typing import Final

# =============================================================================
# SIMULATION CLOCK
# =============================================================================

TICK_INTERVAL_SECONDS: float = 2.0
"""Wall-clock seconds between two ticks when the clock is running."""

DISPATCH_EVERY_N_TICKS: int = 5
"""
The dispatch state machine runs only on ticks whose ordinal is a multiple
of this value. Exactly one driver advances per eligible tick, so status
churn across the fleet stays gradual.
"""

STATUS_HISTORY_SIZE: int = 200
"""Maximum number of status transitions kept for consumers."""

# =============================================================================
# SERVICE AREA
# =============================================================================

CENTER_LAT: Final[float] = 35.6812
"""Latitude of the service area center (Tokyo Station)."""

CENTER_LNG: Final[float] = 139.7671
"""Longitude of the service area center (Tokyo Station)."""

REGION_SPAN_DEG: float = 0.05
"""
Half-width of the square service area in degrees.
Drivers that would step outside it bounce back with a new heading.
"""

# =============================================================================
# MOVEMENT
# =============================================================================
# Per-tick step sizes in degrees of latitude/longitude. This is a flat-earth
# approximation that is good enough at city scale.

STEP_CAR_DEG: float = 0.0008
"""Per-tick step for cars (~90 m)."""

STEP_BIKE_DEG: float = 0.0005
"""Per-tick step for motorbikes."""

STEP_BICYCLE_DEG: float = 0.0003
"""Per-tick step for bicycles."""

HEADING_JITTER_DEG: float = 15.0
"""Maximum random heading change applied to a moving driver every tick."""

# =============================================================================
# ROUTE GEOMETRY
# =============================================================================

ROUTE_SEGMENTS: int = 8
"""Interpolation segments per route leg. A route polyline has 2*N+1 points."""

POLYLINE_JITTER_DEG: float = 0.001
"""
Maximum random offset added to every interpolated polyline point.
Purely visual, so routes do not render as perfectly straight lines.
"""

SPEED_CAR_KMH: float = 30.0
"""Nominal car speed used for route duration estimates."""

SPEED_BIKE_KMH: float = 25.0
"""Nominal motorbike speed used for route duration estimates."""

SPEED_BICYCLE_KMH: float = 15.0
"""Nominal bicycle speed used for route duration estimates."""

# =============================================================================
# ROUTE OPTIMIZER
# =============================================================================

OPTIMIZED_DURATION_FACTOR: float = 0.85
"""
Duration multiplier applied after a route is optimized.
A fixed heuristic (15% assumed gain), not a measured improvement.
"""

# =============================================================================
# DASHBOARD STATS
# =============================================================================
# The simulation does not track per-delivery timings, so these two figures
# are fixed placeholders shown next to the derived counters.

AVERAGE_DELIVERY_TIME_MIN: float = 21.0
"""Placeholder average delivery time in minutes."""

ON_TIME_RATE: float = 0.92
"""Placeholder on-time delivery rate (0.0 - 1.0)."""

# =============================================================================
# SCENARIO SEEDING
# =============================================================================

DEFAULT_NUM_DRIVERS: int = 8
"""Fleet size used when no explicit size is requested."""

DEFAULT_NUM_DELIVERIES: int = 6
"""Number of seeded deliveries used when no explicit count is requested."""

ETA_MIN_SECONDS: float = 300.0
"""Lower bound for a seeded delivery's estimated arrival offset."""

ETA_MAX_SECONDS: float = 1800.0
"""Upper bound for a seeded delivery's estimated arrival offset."""

CREATED_MIN_AGE_SECONDS: float = 600.0
"""Minimum age of a seeded delivery at setup."""

CREATED_MAX_AGE_SECONDS: float = 3600.0
"""Maximum age of a seeded delivery at setup."""

ORDER_NUMBER_BASE: int = 2024000
"""Order numbers are rendered as ORD-<base + index>."""

SPAWN_EVERY_N_TICKS: int = 0
"""
Synthetic order feed: add one pending delivery every N ticks.
0 disables the feed, which keeps the seeded scenario closed.
"""
