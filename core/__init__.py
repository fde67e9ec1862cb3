"""
Core Module - Smart-Office HVAC Digital Twin

This module contains the simulation and validation logic:
- Model store (rooms) and telemetry replay
- Manual override table
- HVAC physics rules and tick scheduler
- Constraint validation and status reporting

These components are framework-agnostic and are used by both
the API and the tests.
"""

from .exceptions import (
    TwinError,
    ConfigurationError,
    InitializationError,
    ModelLoadError,
    DatasetError,
)
from .model import HvacState, Room, ModelStore, load_model
from .telemetry import TelemetrySample, TelemetryCursor, load_dataset
from .overrides import OverrideDirective, OverrideTable, directive_from_action
from .physics import (
    HvacConstants,
    DecisionSource,
    ControlPolicy,
    ThermalModel,
    ComfortBandPolicy,
    SetpointThermalModel,
    PhysicsRuleEngine,
    TickResult,
)
from .validators import (
    Constraint,
    ValidationIssue,
    ValidationReport,
    ValidationEngine,
    default_constraints,
)
from .reporting import StatusReporter, StatusSnapshot, TwinCapture
from .scheduler import SchedulerState, TickScheduler
from .settings import TwinSettings
from .twin import DigitalTwin

__all__ = [
    # Errors
    "TwinError",
    "ConfigurationError",
    "InitializationError",
    "ModelLoadError",
    "DatasetError",

    # Model and telemetry
    "HvacState",
    "Room",
    "ModelStore",
    "load_model",
    "TelemetrySample",
    "TelemetryCursor",
    "load_dataset",

    # Overrides
    "OverrideDirective",
    "OverrideTable",
    "directive_from_action",

    # Physics
    "HvacConstants",
    "DecisionSource",
    "ControlPolicy",
    "ThermalModel",
    "ComfortBandPolicy",
    "SetpointThermalModel",
    "PhysicsRuleEngine",
    "TickResult",

    # Validation
    "Constraint",
    "ValidationIssue",
    "ValidationReport",
    "ValidationEngine",
    "default_constraints",

    # Reporting and scheduling
    "StatusReporter",
    "StatusSnapshot",
    "TwinCapture",
    "SchedulerState",
    "TickScheduler",

    # Engine
    "TwinSettings",
    "DigitalTwin",
]

__version__ = "0.1.0"
