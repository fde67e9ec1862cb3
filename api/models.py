"""
Pydantic Models for API Request/Response Validation

This module defines the data models used by the API for:
- Response serialization
- Documentation generation (OpenAPI/Swagger)

Text endpoints (status, validation report, control) return plain text
and have no model; the dashboard returns the engine's JSON as-is.

All models use Pydantic v2 syntax for validation and serialization.
"""

from datetime import datetime
from typing import Optional, List, Dict
from pydantic import BaseModel, Field


# =========================================
# Validation Models
# =========================================

class ValidationIssue(BaseModel):
    """A single unsatisfied constraint instance."""
    constraint: str = Field(..., description="Name of the violated constraint")
    element: str = Field(..., description="Offending model element")
    message: str = Field(..., description="Human-readable description")


class ValidationReportResponse(BaseModel):
    """Structured validation report."""
    status: str = Field(..., description="PASS or FAIL")
    passed: bool = Field(..., description="True when no constraint is violated")
    issue_count: int = Field(default=0, description="Number of issues")
    constraints_checked: int = Field(default=0, description="Constraints evaluated")
    elements_checked: int = Field(default=0, description="Rooms evaluated")
    issues: List[ValidationIssue] = Field(
        default_factory=list,
        description="Issues in constraint-registration order"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "status": "FAIL",
                "passed": False,
                "issue_count": 1,
                "constraints_checked": 6,
                "elements_checked": 5,
                "issues": [
                    {
                        "constraint": "TemperatureSafetyCeiling",
                        "element": "Room R3 (Server Room)",
                        "message": "Room R3 temperature 36.2°C exceeds safety ceiling of 35.0°C"
                    }
                ]
            }
        }
    }


# =========================================
# Override Models
# =========================================

class OverrideListResponse(BaseModel):
    """Manual overrides currently in force."""
    count: int
    overrides: Dict[str, str] = Field(
        default_factory=dict,
        description="Room id to FORCE_ON / FORCE_OFF"
    )


# =========================================
# Simulation Status Models
# =========================================

class SimulationStatusResponse(BaseModel):
    """Scheduler and cursor state."""
    initialized: bool
    scheduler_state: str = Field(..., description="IDLE or TICKING")
    scheduler_running: bool
    tick_seconds: float
    time_step_hours: float
    completed_ticks: int
    dropped_fires: int
    failed_ticks: int
    dataset_rows: int
    cursor_index: int
    dataset_restarts: int
    last_step: Optional[int] = None
    last_date: Optional[str] = None


# =========================================
# System Status Models
# =========================================

class SystemHealth(BaseModel):
    """System health check response."""
    status: str = Field(..., description="ok, degraded, or error")
    version: str = Field(..., description="API version")
    timestamp: datetime = Field(..., description="Current server time")
    engine: str = Field(..., description="Simulation engine status")
    components: Dict[str, str] = Field(
        default_factory=dict,
        description="Status of system components"
    )


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: bool = True
    message: str
    detail: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.utcnow)
