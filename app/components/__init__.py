"""
Dashboard Components Module

Reusable UI components for the Streamlit dashboard.

Components:
- charts: Plotly-based room and history charts
- status: HVAC state badges and validation banner
"""

from .charts import (
    create_room_temperature_chart,
    create_room_power_chart,
    create_temperature_history_chart,
)
from .status import (
    render_hvac_indicator,
    render_validation_banner,
)

__all__ = [
    # Charts
    "create_room_temperature_chart",
    "create_room_power_chart",
    "create_temperature_history_chart",

    # Status
    "render_hvac_indicator",
    "render_validation_banner",
]
