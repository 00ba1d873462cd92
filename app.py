"""
Fleet Dispatch - Live Dashboard
===============================

Streamlit dashboard on top of the live fleet simulation.

Features:
- KPI cards for deliveries and fleet activity
- pydeck map with drivers, open orders and active routes
- Driver detail panel with route optimization
- Driver and delivery tables

Run:
    streamlit run app.py
"""

import os
import sys
from typing import Dict, Any, List, Optional

import pandas as pd
import pydeck as pdk
import streamlit as st

# Ensure fleetsim is importable
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from fleetsim import config, utils
from fleetsim.models import DeliveryStatus, DriverStatus, FleetSnapshot
from fleetsim.simulation import FleetSimulation

# =============================================================================
# PAGE CONFIG
# =============================================================================

st.set_page_config(
    page_title="Fleet Dispatch",
    page_icon="🚚",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.markdown("""
<style>
    .kpi-card {
        background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
        border-radius: 16px;
        padding: 1.25rem;
        color: white;
        text-align: center;
        box-shadow: 0 10px 40px rgba(102, 126, 234, 0.3);
    }

    .kpi-card.green {
        background: linear-gradient(135deg, #11998e 0%, #38ef7d 100%);
        box-shadow: 0 10px 40px rgba(17, 153, 142, 0.3);
    }

    .kpi-card.orange {
        background: linear-gradient(135deg, #f093fb 0%, #f5576c 100%);
        box-shadow: 0 10px 40px rgba(245, 87, 108, 0.3);
    }

    .kpi-value {
        font-size: 2.2rem;
        font-weight: 800;
        margin: 0.4rem 0;
    }

    .kpi-label {
        font-size: 0.85rem;
        opacity: 0.9;
        text-transform: uppercase;
        letter-spacing: 1px;
    }

    .section-header {
        font-size: 1.4rem;
        font-weight: 700;
        color: #1a1a2e;
        margin: 1.5rem 0 1rem 0;
        padding-bottom: 0.5rem;
        border-bottom: 3px solid #667eea;
    }

    #MainMenu {visibility: hidden;}
    footer {visibility: hidden;}
</style>
""", unsafe_allow_html=True)

# RGB colors for the map, keyed by status
DRIVER_COLORS: Dict[DriverStatus, List[int]] = {
    DriverStatus.IDLE: [100, 116, 139],
    DriverStatus.EN_ROUTE: [59, 130, 246],
    DriverStatus.DELIVERING: [249, 115, 22],
    DriverStatus.RETURNING: [16, 185, 129],
}

DELIVERY_COLORS: Dict[DeliveryStatus, List[int]] = {
    DeliveryStatus.PENDING: [148, 163, 184],
    DeliveryStatus.ASSIGNED: [59, 130, 246],
    DeliveryStatus.PICKED_UP: [99, 102, 241],
    DeliveryStatus.IN_TRANSIT: [249, 115, 22],
    DeliveryStatus.DELIVERED: [16, 185, 129],
    DeliveryStatus.FAILED: [239, 68, 68],
}


# =============================================================================
# SIMULATION STATE
# =============================================================================

def get_simulation() -> FleetSimulation:
    """Return the session's simulation, creating it on first use."""
    if "simulation" not in st.session_state:
        st.session_state["simulation"] = FleetSimulation.create()
    return st.session_state["simulation"]


def reset_simulation(num_drivers: int, num_deliveries: int, seed: Optional[int],
                     dispatch_every: int, spawn_every: int) -> None:
    """Stop the current simulation and replace it with a fresh one."""
    old = st.session_state.get("simulation")
    if old is not None:
        old.stop()
    st.session_state["simulation"] = FleetSimulation.create(
        num_drivers=num_drivers,
        num_deliveries=num_deliveries,
        seed_value=seed,
        dispatch_every=dispatch_every,
        spawn_every=spawn_every,
    )


# =============================================================================
# SIDEBAR
# =============================================================================

def render_sidebar(sim: FleetSimulation) -> bool:
    """
    Render the control panel.

    Returns:
        True if the dashboard should auto-refresh (clock running)
    """
    st.sidebar.markdown("## 🎛️ Simulation")
    st.sidebar.markdown("---")

    live = st.sidebar.toggle("Live clock", value=sim.is_running,
                             help=f"Tick every {config.TICK_INTERVAL_SECONDS:.0f}s in the background")
    if live and not sim.is_running:
        sim.start()
    elif not live and sim.is_running:
        sim.stop()

    col1, col2 = st.sidebar.columns(2)
    with col1:
        if st.button("Step", use_container_width=True, disabled=live):
            sim.tick()
    with col2:
        if st.button("Step ×10", use_container_width=True, disabled=live):
            sim.run(10)

    st.sidebar.markdown("---")
    st.sidebar.markdown("### ⚙️ Scenario")

    num_drivers = st.sidebar.slider("Drivers", 1, 40, config.DEFAULT_NUM_DRIVERS)
    num_deliveries = st.sidebar.slider("Deliveries", 0, 60, config.DEFAULT_NUM_DELIVERIES)
    dispatch_every = st.sidebar.slider("Dispatch every N ticks", 1, 20, config.DISPATCH_EVERY_N_TICKS)
    spawn_every = st.sidebar.slider("New order every N ticks (0 = off)", 0, 50, config.SPAWN_EVERY_N_TICKS)
    seed_text = st.sidebar.text_input("Seed (blank = random)", value="")

    if st.sidebar.button("🔄 Reset Simulation", use_container_width=True):
        try:
            seed = int(seed_text) if seed_text.strip() else None
        except ValueError:
            st.sidebar.error(f"Seed must be an integer, got '{seed_text}'")
        else:
            reset_simulation(num_drivers, num_deliveries, seed, dispatch_every, spawn_every)
            st.rerun()

    return live


# =============================================================================
# KPI DISPLAY
# =============================================================================

def render_kpi_row(snapshot: FleetSnapshot) -> None:
    """Render the top KPI cards."""
    stats = snapshot.stats
    col1, col2, col3, col4 = st.columns(4)

    with col1:
        st.markdown(f"""
        <div class="kpi-card">
            <div class="kpi-label">Deliveries</div>
            <div class="kpi-value">{stats.total_deliveries}</div>
        </div>
        """, unsafe_allow_html=True)

    with col2:
        st.markdown(f"""
        <div class="kpi-card green">
            <div class="kpi-label">Completed</div>
            <div class="kpi-value">{stats.completed_deliveries}</div>
            <div>{stats.completion_rate * 100:.0f}% of all orders</div>
        </div>
        """, unsafe_allow_html=True)

    with col3:
        st.markdown(f"""
        <div class="kpi-card orange">
            <div class="kpi-label">Active Drivers</div>
            <div class="kpi-value">{stats.active_drivers}</div>
            <div>{stats.idle_drivers} idle</div>
        </div>
        """, unsafe_allow_html=True)

    with col4:
        st.markdown(f"""
        <div class="kpi-card">
            <div class="kpi-label">On-Time Rate</div>
            <div class="kpi-value">{stats.on_time_rate * 100:.0f}%</div>
            <div>avg {utils.format_time_duration(stats.average_delivery_time_min)}</div>
        </div>
        """, unsafe_allow_html=True)


# =============================================================================
# MAP
# =============================================================================

def build_map_layers(snapshot: FleetSnapshot) -> List[pdk.Layer]:
    """Route paths, open order markers and driver markers, bottom to top."""
    route_data = [
        {
            "path": [[lng, lat] for lat, lng in route.polyline],
            "color": [34, 197, 94] if route.is_optimized else [59, 130, 246],
            "width": 6 if route.driver_id == snapshot.selected_driver_id else 3,
            "label": f"{route.driver_id} · {utils.format_distance(route.total_distance_km)}",
        }
        for route in snapshot.routes
    ]

    order_data = []
    for delivery in snapshot.deliveries:
        if delivery.status == DeliveryStatus.DELIVERED:
            continue
        color = DELIVERY_COLORS[delivery.status]
        order_data.append({"position": [delivery.pickup_lng, delivery.pickup_lat], "color": color,
                           "label": f"{delivery.order_number} pickup: {delivery.pickup_address}"})
        order_data.append({"position": [delivery.dropoff_lng, delivery.dropoff_lat], "color": color,
                           "label": f"{delivery.order_number} dropoff: {delivery.dropoff_address}"})

    driver_data = [
        {
            "position": [d.current_lng, d.current_lat],
            "color": DRIVER_COLORS[d.status],
            "radius": 140 if d.driver_id == snapshot.selected_driver_id else 80,
            "label": f"{d.name} ({d.status.label})",
        }
        for d in snapshot.drivers
    ]

    return [
        pdk.Layer(
            "PathLayer",
            route_data,
            get_path="path",
            get_color="color",
            get_width="width",
            width_units="pixels",
            pickable=True,
        ),
        pdk.Layer(
            "ScatterplotLayer",
            order_data,
            get_position="position",
            get_fill_color="color",
            get_radius=60,
            opacity=0.6,
            pickable=True,
        ),
        pdk.Layer(
            "ScatterplotLayer",
            driver_data,
            get_position="position",
            get_fill_color="color",
            get_radius="radius",
            pickable=True,
            stroked=True,
            filled=True,
            line_width_min_pixels=1,
        ),
    ]


def render_map(snapshot: FleetSnapshot) -> None:
    st.markdown('<div class="section-header">🗺️ Live Map</div>', unsafe_allow_html=True)
    view_state = pdk.ViewState(latitude=config.CENTER_LAT, longitude=config.CENTER_LNG, zoom=12)
    st.pydeck_chart(pdk.Deck(
        layers=build_map_layers(snapshot),
        initial_view_state=view_state,
        tooltip={"text": "{label}"},
    ))


# =============================================================================
# DRIVER DETAIL
# =============================================================================

def render_driver_detail(sim: FleetSimulation, snapshot: FleetSnapshot) -> None:
    """Driver picker, carried delivery and route panel with the optimize action."""
    st.markdown('<div class="section-header">🚚 Driver Detail</div>', unsafe_allow_html=True)

    options = [None] + [d.driver_id for d in snapshot.drivers]
    names = {d.driver_id: f"{d.driver_id} · {d.name}" for d in snapshot.drivers}
    current = snapshot.selected_driver_id if snapshot.selected_driver_id in names else None
    chosen = st.selectbox(
        "Driver",
        options=options,
        index=options.index(current),
        format_func=lambda x: "— none —" if x is None else names[x],
    )
    if chosen != snapshot.selected_driver_id:
        sim.select_driver(chosen)
        snapshot = sim.snapshot()

    if snapshot.selected_driver_id is None:
        st.info("Select a driver to see its delivery and route.")
        return

    driver = next(d for d in snapshot.drivers if d.driver_id == snapshot.selected_driver_id)
    delivery = snapshot.carried_delivery(driver.driver_id)
    route = snapshot.route_for(driver.driver_id)

    col1, col2 = st.columns(2)
    with col1:
        st.markdown(f"**{driver.name}** · {driver.vehicle_type.value} · {driver.status.label}")
        st.markdown(f"Completed deliveries: **{driver.completed_count}**")
        if delivery is not None:
            eta = delivery.estimated_arrival.strftime("%H:%M") if delivery.estimated_arrival else "—"
            st.markdown(f"Carrying **{delivery.order_number}**: "
                        f"{delivery.pickup_address} → {delivery.dropoff_address} (ETA {eta})")
        else:
            st.markdown("Not carrying a delivery.")

    with col2:
        if route is None:
            st.markdown("No active route.")
            return
        st.markdown(f"Route: **{utils.format_distance(route.total_distance_km)}**, "
                    f"**{utils.format_time_duration(route.estimated_duration_min)}**, "
                    f"{len(route.waypoints)} stops"
                    + (" ✅ optimized" if route.is_optimized else ""))
        for wp in route.waypoints:
            st.markdown(f"{wp.order + 1}. {wp.label} ({wp.waypoint_type.value.lower()})")
        if not route.is_optimized and st.button("✨ Optimize Route"):
            sim.optimize_route(driver.driver_id)
            st.rerun()


# =============================================================================
# TABLES
# =============================================================================

def render_tables(snapshot: FleetSnapshot) -> None:
    st.markdown('<div class="section-header">📊 Fleet & Orders</div>', unsafe_allow_html=True)
    col1, col2 = st.columns(2)

    with col1:
        drivers_df = pd.DataFrame([
            {
                "Driver": d.driver_id,
                "Name": d.name,
                "Vehicle": d.vehicle_type.value,
                "Status": d.status.label,
                "Delivery": d.current_delivery_id or "—",
                "Done": d.completed_count,
            }
            for d in snapshot.drivers
        ])
        st.dataframe(drivers_df, use_container_width=True, hide_index=True)

    with col2:
        deliveries_df = pd.DataFrame([
            {
                "Order": d.order_number,
                "Pickup": d.pickup_address,
                "Dropoff": d.dropoff_address,
                "Status": d.status.value.replace("_", " ").title(),
                "Driver": d.assigned_driver_id or "—",
            }
            for d in snapshot.deliveries
        ])
        st.dataframe(deliveries_df, use_container_width=True, hide_index=True)


def render_dashboard(sim: FleetSimulation) -> None:
    snapshot = sim.snapshot()
    st.caption(f"Tick {snapshot.tick} · {snapshot.dispatch_evaluations} dispatch rounds")
    render_kpi_row(snapshot)
    render_map(snapshot)
    render_driver_detail(sim, snapshot)
    render_tables(snapshot)


# =============================================================================
# MAIN APPLICATION
# =============================================================================

def main():
    """Main application entry point."""
    st.markdown("""
    <div style="text-align: center; padding: 1rem 0 1.5rem 0;">
        <h1 style="font-size: 2.6rem; font-weight: 800; margin-bottom: 0.5rem;">Fleet Dispatch</h1>
        <p style="font-size: 1.1rem; color: #666;">Live courier simulation around Tokyo Station</p>
    </div>
    """, unsafe_allow_html=True)

    sim = get_simulation()
    live = render_sidebar(sim)

    # Re-render on the clock's cadence while it runs in the background
    refresh = config.TICK_INTERVAL_SECONDS if live else None
    st.fragment(run_every=refresh)(render_dashboard)(sim)


if __name__ == "__main__":
    main()
