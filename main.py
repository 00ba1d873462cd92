#!/usr/bin/env python3
# fleet-dispatch-sim/main.py
"""
Command-Line Interface for the Fleet Dispatch Simulation.

Runs the live fleet simulation headless and prints what happened: every
status transition as it occurs, then the fleet and dashboard tables.

Usage:
    python main.py                           # 60 ticks, default Tokyo scenario
    python main.py --ticks 200 --seed 7      # Reproducible longer run
    python main.py --spawn-every 10          # Feed a new order every 10 ticks
    python main.py --realtime --interval 0.5 # Tick on the wall clock
    python main.py --strict                  # Check state consistency every tick

Exit Codes:
    0: Success
    1: Invalid arguments
    2: Simulation error
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
import threading
from typing import List, Optional

# Ensure the fleetsim package is importable when run from a checkout
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from fleetsim import config, utils
from fleetsim.invariants import find_violations
from fleetsim.models import FleetSnapshot
from fleetsim.simulation import FleetSimulation


def print_header() -> None:
    """Print the CLI header."""
    print("\n" + "=" * 60)
    print("  FLEET DISPATCH - Live Delivery Simulation")
    print("  Courier movement, dispatch cycle and route optimization")
    print("=" * 60 + "\n")


def print_fleet_table(snapshot: FleetSnapshot) -> None:
    """Print one row per driver with status, position and route summary."""
    print("\n" + "=" * 60)
    print(f"  FLEET AFTER {snapshot.tick} TICKS")
    print("=" * 60 + "\n")

    header = f"| {'Driver':<8} | {'Name':<18} | {'Vehicle':<7} | {'Status':<10} | {'Done':>4} | {'Route':<16} |"
    print(header)
    print("|" + "-" * (len(header) - 2) + "|")

    for driver in snapshot.drivers:
        route = snapshot.route_for(driver.driver_id)
        if route is None:
            route_text = "-"
        else:
            route_text = (f"{utils.format_distance(route.total_distance_km)} / "
                          f"{utils.format_time_duration(route.estimated_duration_min)}")
            if route.is_optimized:
                route_text += " *"
        print(f"| {driver.driver_id:<8} | {driver.name[:18]:<18} | {driver.vehicle_type.value:<7} | "
              f"{driver.status.label:<10} | {driver.completed_count:>4} | {route_text:<16} |")


def print_stats_table(snapshot: FleetSnapshot) -> None:
    """Print the dashboard counters."""
    print("\n" + "=" * 60)
    print("  DASHBOARD")
    print("=" * 60 + "\n")
    for label, value in snapshot.stats.to_dict().items():
        print(f"  {label:<20} {value}")
    print(f"  {'Dispatch Rounds':<20} {snapshot.dispatch_evaluations}")
    print("\n" + "=" * 60 + "\n")


def build_simulation(args: argparse.Namespace) -> Optional[FleetSimulation]:
    """
    Create the simulation from CLI arguments.

    Returns:
        The simulation, or None if the arguments are invalid
    """
    try:
        return FleetSimulation.create(
            num_drivers=args.drivers,
            num_deliveries=args.deliveries,
            seed_value=args.seed,
            dispatch_every=args.dispatch_every,
            tick_interval_seconds=args.interval,
            spawn_every=args.spawn_every,
        )
    except ValueError as e:
        print(f"ERROR: {e}")
        return None


def run_stepped(sim: FleetSimulation, ticks: int, strict: bool) -> List[str]:
    """Advance the simulation tick by tick on the calling thread."""
    for _ in range(ticks):
        sim.tick()
        if strict:
            snap = sim.snapshot()
            problems = find_violations(list(snap.drivers), list(snap.deliveries), list(snap.routes), snap.stats)
            if problems:
                return [f"tick {snap.tick}: {p}" for p in problems]
    return []


def run_realtime(sim: FleetSimulation, ticks: int, strict: bool) -> List[str]:
    """Let the simulation clock drive the run until enough ticks have fired."""
    if ticks <= 0:
        return []
    done = threading.Event()
    problems: List[str] = []

    def on_tick(snap: FleetSnapshot) -> None:
        if strict:
            found = find_violations(list(snap.drivers), list(snap.deliveries), list(snap.routes), snap.stats)
            problems.extend(f"tick {snap.tick}: {p}" for p in found)
        if snap.tick >= ticks or problems:
            done.set()

    unsubscribe = sim.subscribe(on_tick)
    sim.start()
    try:
        while not done.wait(timeout=0.5):
            if not sim.is_running:
                problems.append("simulation clock stopped unexpectedly")
                break
    finally:
        sim.stop()
        unsubscribe()
    return problems


def print_transitions(sim: FleetSimulation) -> None:
    for change in sim.history:
        print(f"[tick {change.tick:>4}] {change.driver_id}: "
              f"{change.previous.label} -> {change.current.label}"
              + (f" ({change.delivery_id})" if change.delivery_id else ""))


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = argparse.ArgumentParser(
        description="Fleet Dispatch Simulation CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                              # Default scenario, 60 ticks
  python main.py --drivers 20 --deliveries 30 # Bigger fleet and order book
  python main.py --optimize DRV-001           # Optimize a route after the run
        """
    )

    parser.add_argument("--ticks", "-t", type=int, default=60,
                        help="Number of ticks to run (default: 60)")
    parser.add_argument("--drivers", type=int, default=config.DEFAULT_NUM_DRIVERS,
                        help=f"Fleet size (default: {config.DEFAULT_NUM_DRIVERS})")
    parser.add_argument("--deliveries", type=int, default=config.DEFAULT_NUM_DELIVERIES,
                        help=f"Seeded deliveries (default: {config.DEFAULT_NUM_DELIVERIES})")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed for a reproducible run")
    parser.add_argument("--dispatch-every", type=int, default=config.DISPATCH_EVERY_N_TICKS,
                        help=f"Run the dispatch cycle every N ticks (default: {config.DISPATCH_EVERY_N_TICKS})")
    parser.add_argument("--spawn-every", type=int, default=config.SPAWN_EVERY_N_TICKS,
                        help="Add a new pending order every N ticks (default: off)")
    parser.add_argument("--realtime", action="store_true",
                        help="Drive ticks with the wall-clock timer instead of stepping")
    parser.add_argument("--interval", type=float, default=config.TICK_INTERVAL_SECONDS,
                        help=f"Seconds between ticks in realtime mode (default: {config.TICK_INTERVAL_SECONDS})")
    parser.add_argument("--optimize", nargs="*", metavar="DRIVER_ID", default=None,
                        help="Optimize routes after the run (all routes if no id is given)")
    parser.add_argument("--strict", action="store_true",
                        help="Verify state consistency after every tick")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Show detailed simulation logging")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.ticks < 0:
        print(f"ERROR: --ticks must be non-negative, got {args.ticks}")
        return 1

    print_header()

    sim = build_simulation(args)
    if sim is None:
        return 1

    print(f"Fleet: {len(sim.drivers)} drivers, {len(sim.deliveries)} deliveries "
          f"(dispatch every {sim.dispatch_every} ticks)")
    print("-" * 40)

    try:
        if args.realtime:
            problems = run_realtime(sim, args.ticks, args.strict)
        else:
            problems = run_stepped(sim, args.ticks, args.strict)
    except Exception as e:
        print(f"ERROR: Simulation failed: {e}")
        import traceback
        traceback.print_exc()
        return 2

    print_transitions(sim)

    if problems:
        for problem in problems:
            print(f"ERROR: {problem}")
        return 2

    if args.optimize is not None:
        targets = args.optimize or [route.driver_id for route in sim.routes]
        for driver_id in targets:
            if sim.optimize_route(driver_id):
                print(f"Optimized route for {driver_id}")
            else:
                print(f"WARN: No active route for '{driver_id}'")

    snapshot = sim.snapshot()
    print_fleet_table(snapshot)
    print_stats_table(snapshot)

    return 0


if __name__ == "__main__":
    sys.exit(main())
