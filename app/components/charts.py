"""
Chart Components for Dashboard

This module provides Plotly-based chart components for visualizing
room temperatures, HVAC power and the building's recent history.

All charts are designed to be:
- Responsive and interactive
- Consistent in styling
- Color-coded for quick interpretation (HVAC ON / OFF)
"""

import plotly.graph_objects as go
import plotly.express as px
import pandas as pd
from typing import List, Dict, Any


# =========================================
# Color Schemes
# =========================================

COLORS = {
    "on": "#10B981",         # Green
    "off": "#EF4444",        # Red
    "manual": "#FBBF24",     # Yellow
    "primary": "#3B82F6",    # Blue
    "secondary": "#6B7280",  # Gray
    "background": "#1F2937", # Dark gray
    "text": "#F9FAFB",       # Light text
    "grid": "#374151",       # Grid lines
}


def get_hvac_color(hvac: str) -> str:
    """Bar color for an HVAC state."""
    return COLORS["on"] if hvac == "ON" else COLORS["off"]


# =========================================
# Chart Layout Defaults
# =========================================

def get_default_layout(title: str = "", height: int = 400) -> dict:
    """Get default chart layout settings."""
    return {
        "title": {
            "text": title,
            "font": {"size": 16, "color": COLORS["text"]},
            "x": 0.5,
            "xanchor": "center"
        },
        "paper_bgcolor": "rgba(0,0,0,0)",
        "plot_bgcolor": "rgba(0,0,0,0)",
        "height": height,
        "margin": {"l": 60, "r": 40, "t": 60, "b": 60},
        "font": {"color": COLORS["text"], "size": 12},
        "xaxis": {
            "gridcolor": COLORS["grid"],
            "showgrid": True,
            "zeroline": False,
        },
        "yaxis": {
            "gridcolor": COLORS["grid"],
            "showgrid": True,
            "zeroline": False,
        },
        "legend": {
            "bgcolor": "rgba(0,0,0,0.5)",
            "bordercolor": COLORS["grid"],
            "font": {"color": COLORS["text"]}
        },
    }


# =========================================
# Room Charts
# =========================================

def create_room_temperature_chart(
    rooms: List[Dict[str, Any]],
    setpoint: float = 24.0,
    tolerance: float = 1.0,
    height: int = 380
) -> go.Figure:
    """
    Bar chart of room temperatures with the comfort band shaded.

    Args:
        rooms: Room entries from the dashboard payload
        setpoint: Comfort setpoint (°C)
        tolerance: Half-width of the comfort band (°C)
        height: Chart height in pixels

    Returns:
        Plotly Figure object
    """
    fig = go.Figure()

    fig.add_hrect(
        y0=setpoint - tolerance,
        y1=setpoint + tolerance,
        fillcolor=COLORS["on"],
        opacity=0.1,
        line_width=0,
        annotation_text="Comfort band",
        annotation_position="top left",
    )

    fig.add_trace(go.Bar(
        x=[f"{r['id']} · {r['name']}" for r in rooms],
        y=[r["temp"] for r in rooms],
        marker_color=[get_hvac_color(r["hvac"]) for r in rooms],
        marker_line_color=[COLORS["manual"] if r.get("mode") == "MANUAL" else "rgba(0,0,0,0)" for r in rooms],
        marker_line_width=3,
        text=[f"{r['temp']:.1f}°C" for r in rooms],
        textposition="outside",
        hovertemplate="%{x}<br>%{y:.1f}°C<extra></extra>",
    ))

    layout = get_default_layout("Room Temperatures", height)
    layout["yaxis"]["title"] = "°C"
    fig.update_layout(**layout)
    return fig


def create_room_power_chart(rooms: List[Dict[str, Any]], height: int = 380) -> go.Figure:
    """
    Horizontal bar chart of HVAC power draw per room.

    Returns:
        Plotly Figure object
    """
    fig = go.Figure(go.Bar(
        y=[r["id"] for r in rooms],
        x=[r["power"] for r in rooms],
        orientation="h",
        marker_color=[get_hvac_color(r["hvac"]) for r in rooms],
        text=[f"{r['power']:.0f} W" for r in rooms],
        textposition="auto",
    ))

    layout = get_default_layout("HVAC Power Draw", height)
    layout["xaxis"]["title"] = "W"
    fig.update_layout(**layout)
    return fig


# =========================================
# History Chart
# =========================================

def create_temperature_history_chart(history: List[Dict[str, Any]], height: int = 400) -> go.Figure:
    """
    Line chart of room temperatures over the polled history.

    Args:
        history: Rows of {"timestamp", "room", "temp"} collected by the dashboard

    Returns:
        Plotly Figure object (empty with a note when there is no history)
    """
    if not history:
        fig = go.Figure()
        fig.add_annotation(
            text="Waiting for simulation data...",
            showarrow=False,
            font={"color": COLORS["secondary"], "size": 14},
        )
        fig.update_layout(**get_default_layout("Temperature History", height))
        return fig

    df = pd.DataFrame(history)
    fig = px.line(df, x="timestamp", y="temp", color="room", markers=True)

    layout = get_default_layout("Temperature History", height)
    layout["yaxis"]["title"] = "°C"
    layout["xaxis"]["title"] = ""
    layout["hovermode"] = "x unified"
    fig.update_layout(**layout)
    return fig
