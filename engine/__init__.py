"""
Engine Module - Synthetic Telemetry Generation

This module provides synthetic dataset generation for demos and tests
of the smart-office digital twin.

Key Components:
- TelemetryGenerator: Generates realistic building telemetry rows
- WeatherProfile: Outdoor conditions for a generated period
- BuildingBaseline: Electrical and occupancy baseline

Usage:
    from engine import TelemetryGenerator

    generator = TelemetryGenerator(profile="heatwave", random_seed=1)
    generator.generate_to_csv(
        start_time=datetime(2024, 7, 15),
        duration_days=2,
        filepath="data/heatwave.csv"
    )
"""

from .generator import (
    BuildingBaseline,
    PROFILES,
    TelemetryGenerator,
    WeatherProfile,
    generate_dataset,
)

__all__ = [
    "BuildingBaseline",
    "PROFILES",
    "TelemetryGenerator",
    "WeatherProfile",
    "generate_dataset",
]

__version__ = "0.1.0"
