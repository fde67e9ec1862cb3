"""
Status Components

Small HTML badges and banners for HVAC state and validation results.
"""

import streamlit as st


def render_hvac_indicator(hvac: str, mode: str = "AUTO", size: str = "medium") -> None:
    """
    Render an HVAC state badge.

    Args:
        hvac: "ON" or "OFF"
        mode: "AUTO" or "MANUAL"
        size: "small", "medium", or "large"
    """
    config = {
        "ON": {"color": "#10B981", "emoji": "🟢"},
        "OFF": {"color": "#EF4444", "emoji": "🔴"},
    }.get(hvac, {"color": "#6B7280", "emoji": "⚪"})

    sizes = {
        "small": {"font": "0.75rem", "padding": "2px 6px"},
        "medium": {"font": "0.875rem", "padding": "4px 10px"},
        "large": {"font": "1rem", "padding": "6px 14px"},
    }
    size_config = sizes.get(size, sizes["medium"])
    label = f"HVAC {hvac}" + (" · manual" if mode == "MANUAL" else "")

    st.markdown(f"""
    <div style="
        display: inline-flex;
        align-items: center;
        gap: 6px;
        font-size: {size_config['font']};
        color: {config['color']};
        background: {config['color']}20;
        padding: {size_config['padding']};
        border-radius: 6px;
        border: 1px solid {config['color']}40;
    ">
        <span>{config['emoji']}</span>
        <span>{label}</span>
    </div>
    """, unsafe_allow_html=True)


def render_validation_banner(passed: bool, issue_count: int = 0) -> None:
    """Banner summarizing the latest validation run."""
    if passed:
        color, icon, text = "#10B981", "✔", "Validation PASSED. System is healthy."
    else:
        color, icon, text = "#EF4444", "✖", f"Validation FAILED. Found {issue_count} issues."

    st.markdown(f"""
    <div style="
        background: {color}20;
        border-left: 4px solid {color};
        padding: 12px 16px;
        border-radius: 0 8px 8px 0;
        margin: 10px 0;
        color: {color};
        font-weight: 600;
    ">{icon} {text}</div>
    """, unsafe_allow_html=True)
