"""
Smart-Office Digital Twin - Streamlit Dashboard

Operator dashboard for the running simulation: building summary,
per-room HVAC state, manual ON / OFF / AUTO controls and the
validation report.

Features:
- Live building and room view (polls /api/dashboard)
- Temperature history collected while the page is open
- Manual HVAC overrides per room
- Constraint validation report

Run with: streamlit run app/dashboard.py
"""

import os
import time
from typing import Any, Dict, List, Optional

import pandas as pd
import requests
import streamlit as st

from components.charts import (
    create_room_power_chart,
    create_room_temperature_chart,
    create_temperature_history_chart,
)
from components.status import render_hvac_indicator, render_validation_banner


# =========================================
# Configuration
# =========================================

API_URL = os.getenv("API_URL", "http://localhost:8080")
SETPOINT = float(os.getenv("TWIN_SETPOINT", "24"))
TOLERANCE = float(os.getenv("TWIN_TOLERANCE", "1"))
HISTORY_LIMIT = 500  # rows kept in session state

st.set_page_config(
    page_title="Smart-Office Digital Twin",
    page_icon="🏭",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.markdown("""
<style>
    .main .block-container {
        padding-top: 2rem;
        padding-bottom: 2rem;
    }
    [data-testid="stMetric"] {
        background: rgba(31, 41, 55, 0.6);
        border-radius: 10px;
        padding: 15px;
        border: 1px solid #374151;
    }
    #MainMenu {visibility: hidden;}
    footer {visibility: hidden;}
</style>
""", unsafe_allow_html=True)


# =========================================
# API Helper Functions
# =========================================

def fetch_api(endpoint: str) -> Optional[Dict[str, Any]]:
    """GET a JSON endpoint."""
    try:
        response = requests.get(f"{API_URL}{endpoint}", timeout=10)
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        st.error(f"API Error: {e}")
        return None


def fetch_text(endpoint: str) -> Optional[str]:
    """GET a plain-text endpoint."""
    try:
        response = requests.get(f"{API_URL}{endpoint}", timeout=10)
        response.raise_for_status()
        return response.text
    except requests.exceptions.RequestException as e:
        st.error(f"API Error: {e}")
        return None


def send_control(room_id: str, action: str) -> Optional[str]:
    """POST a manual HVAC command."""
    try:
        response = requests.post(
            f"{API_URL}/api/control",
            params={"roomId": room_id, "action": action},
            timeout=10
        )
        response.raise_for_status()
        return response.text
    except requests.exceptions.RequestException as e:
        st.error(f"Failed to send command: {e}")
        return None


def check_api_health() -> bool:
    """Check if API is available."""
    try:
        response = requests.get(f"{API_URL}/api/hello", timeout=5)
        return response.status_code == 200
    except requests.exceptions.RequestException:
        return False


def record_history(data: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Append the rooms of a new simulation step to the session history."""
    history = st.session_state.setdefault("history", [])
    if history and history[-1]["timestamp"] == data["timestamp"]:
        return history

    for room in data.get("rooms", []):
        history.append({"timestamp": data["timestamp"], "room": room["id"], "temp": room["temp"]})

    del history[:-HISTORY_LIMIT]
    return history


# =========================================
# Sidebar
# =========================================

def render_sidebar() -> Dict[str, Any]:
    """Render the sidebar with connection state and refresh controls."""
    with st.sidebar:
        st.title("🏭 Digital Twin")
        st.markdown("---")

        if check_api_health():
            st.success("🟢 API Connected")
        else:
            st.error("🔴 API Disconnected")
            st.info(f"API URL: {API_URL}")

        st.markdown("---")
        page = st.radio("View", ["Live Building", "Validation", "Raw Status"])

        st.markdown("---")
        st.subheader("🔄 Auto Refresh")
        auto_refresh = st.checkbox("Enable Auto Refresh", value=True)
        refresh_rate = st.slider("Refresh Rate (seconds)", 2, 30, 5) if auto_refresh else None

        if st.button("Clear History", use_container_width=True):
            st.session_state["history"] = []

    return {"page": page, "refresh_rate": refresh_rate}


# =========================================
# Pages
# =========================================

def render_room_controls(room: Dict[str, Any]) -> None:
    """Selected-room panel with ON / OFF / AUTO buttons."""
    st.subheader(f"{room['name']} ({room['id']})")
    render_hvac_indicator(room["hvac"], room.get("mode", "AUTO"), size="large")

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Temperature", f"{room['temp']:.1f} °C")
    with col2:
        st.metric("HVAC Power", f"{room['power']:.0f} W")
    with col3:
        st.metric("Energy", f"{room['energy'] / 1000:.2f} kWh")

    col1, col2, col3 = st.columns(3)
    for column, action, label in (
        (col1, "ON", "🟢 Force ON"),
        (col2, "OFF", "🔴 Force OFF"),
        (col3, "AUTO", "🔄 Auto Mode"),
    ):
        with column:
            if st.button(label, key=f"{room['id']}-{action}", use_container_width=True):
                result = send_control(room["id"], action)
                if result:
                    st.success(result)


def render_live_page() -> None:
    data = fetch_api("/api/dashboard")
    if data is None:
        return
    if "error" in data:
        st.error(f"Engine error: {data['error']}")
        return

    st.title("Smart-Office Live View")
    st.caption(f"🕒 {data['timestamp']} · step {data['step']}")

    cols = st.columns(4)
    with cols[0]:
        st.metric("Metered Power", f"{data['power']['real']:.1f} kW")
    with cols[1]:
        st.metric("HVAC Power", f"{data['power']['simulated']:.1f} kW")
    with cols[2]:
        st.metric("Average Temp", f"{data['comfort']['avgTemp']:.1f} °C",
                  delta=f"{data['comfort']['avgTemp'] - SETPOINT:+.1f} vs setpoint", delta_color="inverse")
    with cols[3]:
        st.metric("Active HVACs", f"{data['comfort']['activeHvacs']}/{len(data['rooms'])}")

    st.caption(f"🌡️ Outdoor {data['weather']['outdoorTemp']:.1f} °C · 👥 {data['occupancy']} people")

    history = record_history(data)

    col1, col2 = st.columns([3, 2])
    with col1:
        st.plotly_chart(
            create_room_temperature_chart(data["rooms"], SETPOINT, TOLERANCE),
            use_container_width=True
        )
    with col2:
        st.plotly_chart(create_room_power_chart(data["rooms"]), use_container_width=True)

    st.plotly_chart(create_temperature_history_chart(history), use_container_width=True)

    st.markdown("---")
    room_ids = [r["id"] for r in data["rooms"]]
    selected = st.selectbox(
        "Select Room",
        options=room_ids,
        format_func=lambda rid: next(f"{r['name']} ({r['id']})" for r in data["rooms"] if r["id"] == rid),
    )
    room = next(r for r in data["rooms"] if r["id"] == selected)
    render_room_controls(room)

    with st.expander("All rooms"):
        st.dataframe(pd.DataFrame(data["rooms"]), use_container_width=True, hide_index=True)


def render_validation_page() -> None:
    st.title("Model Validation")

    report = fetch_api("/api/validation/issues")
    if report is not None:
        render_validation_banner(report["passed"], report["issue_count"])
        if report["issues"]:
            st.dataframe(pd.DataFrame(report["issues"]), use_container_width=True, hide_index=True)

    text = fetch_text("/api/validation")
    if text:
        st.code(text, language=None)


def render_status_page() -> None:
    st.title("Raw Status")
    text = fetch_text("/api/status")
    if text:
        st.code(text, language=None)

    simulation = fetch_api("/api/simulation")
    if simulation:
        st.json(simulation)


# =========================================
# Main
# =========================================

def main():
    options = render_sidebar()

    pages = {
        "Live Building": render_live_page,
        "Validation": render_validation_page,
        "Raw Status": render_status_page,
    }
    pages[options["page"]]()

    if options["refresh_rate"]:
        time.sleep(options["refresh_rate"])
        st.rerun()


if __name__ == "__main__":
    main()
