"""
Digital Twin Configuration Settings

All runtime knobs are read from environment variables so the same
image can run the demo dataset or a real building export. Defaults
match the smart-office demo shipped in ``data/``.
"""

import os
from dataclasses import dataclass

from .exceptions import ConfigurationError


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw.lower() in ("1", "true", "yes", "on")


@dataclass
class TwinSettings:
    """Configuration for the simulation engine and its schedule."""

    model_path: str = "data/smart_office.json"
    dataset_path: str = "data/cleandata.csv"
    tick_seconds: float = 5.0
    time_step_hours: float = 0.25  # 15 minutes of simulated time per tick

    # Automatic control policy
    setpoint: float = 24.0  # °C comfort setpoint
    tolerance: float = 1.0  # ±°C band around the setpoint

    # Thermal model
    conditioning_rate: float = 2.0  # °C per hour while HVAC is ON
    drift_coefficient: float = 0.1  # fraction of indoor/outdoor gap per hour
    standby_power: float = 0.0  # W drawn while HVAC is OFF

    # Validation thresholds
    temp_ceiling: float = 35.0
    temp_floor: float = 10.0

    autostart: bool = True

    def __post_init__(self):
        if self.tick_seconds <= 0:
            raise ConfigurationError("tick_seconds must be positive")
        if self.time_step_hours <= 0:
            raise ConfigurationError("time_step_hours must be positive")
        if self.tolerance < 0:
            raise ConfigurationError("tolerance cannot be negative")
        if self.temp_floor >= self.temp_ceiling:
            raise ConfigurationError("temp_floor must be below temp_ceiling")

    @classmethod
    def from_env(cls) -> "TwinSettings":
        """Build settings from ``TWIN_*`` environment variables."""
        defaults = cls()
        return cls(
            model_path=os.getenv("TWIN_MODEL_PATH", defaults.model_path),
            dataset_path=os.getenv("TWIN_DATASET_PATH", defaults.dataset_path),
            tick_seconds=_env_float("TWIN_TICK_SECONDS", defaults.tick_seconds),
            time_step_hours=_env_float("TWIN_TIME_STEP_HOURS", defaults.time_step_hours),
            setpoint=_env_float("TWIN_SETPOINT", defaults.setpoint),
            tolerance=_env_float("TWIN_TOLERANCE", defaults.tolerance),
            conditioning_rate=_env_float("TWIN_CONDITIONING_RATE", defaults.conditioning_rate),
            drift_coefficient=_env_float("TWIN_DRIFT_COEFFICIENT", defaults.drift_coefficient),
            standby_power=_env_float("TWIN_STANDBY_POWER", defaults.standby_power),
            temp_ceiling=_env_float("TWIN_TEMP_CEILING", defaults.temp_ceiling),
            temp_floor=_env_float("TWIN_TEMP_FLOOR", defaults.temp_floor),
            autostart=_env_bool("TWIN_AUTOSTART", defaults.autostart),
        )
