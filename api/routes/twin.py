"""
Digital Twin Endpoints

Endpoints used by the browser client and by operators:
- Live status (plain text) and dashboard data (JSON)
- Validation report (plain text) and raw issue list (JSON)
- Manual HVAC control and the current override table
- Scheduler / dataset state

Status, dashboard and validation never fail with a 500: the engine
turns internal errors into well-formed text or ``{"error": ...}``.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import PlainTextResponse, Response

from api.dependencies import get_twin
from api.models import (
    ErrorResponse,
    OverrideListResponse,
    SimulationStatusResponse,
    ValidationIssue,
    ValidationReportResponse,
)
from core.exceptions import TwinError
from core.twin import DigitalTwin

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Digital Twin"])


# =========================================
# Live Data Endpoints
# =========================================

@router.get(
    "/hello",
    response_class=PlainTextResponse,
    summary="Connectivity check"
)
async def say_hello():
    return "Digital Twin Server is Online!"


@router.get(
    "/status",
    response_class=PlainTextResponse,
    summary="Live status",
    description="Human-readable snapshot of the most recently completed simulation step."
)
def get_status(twin: DigitalTwin = Depends(get_twin)):
    return twin.status()


@router.get(
    "/dashboard",
    summary="Dashboard data",
    description="""
    Machine-readable snapshot for the web client:
    timestamp, building power, comfort summary and per-room state.

    On internal failure the body is `{"error": "<message>"}`.
    """
)
def get_dashboard(twin: DigitalTwin = Depends(get_twin)):
    return Response(content=twin.dashboard(), media_type="application/json")


# =========================================
# Validation Endpoints
# =========================================

@router.get(
    "/validation",
    response_class=PlainTextResponse,
    summary="Validation report",
    description="Fixed-format text report of every constraint checked against the live model."
)
def get_validation(twin: DigitalTwin = Depends(get_twin)):
    return twin.validation_report()


@router.get(
    "/validation/issues",
    response_model=ValidationReportResponse,
    responses={503: {"model": ErrorResponse}},
    summary="Validation issues (JSON)"
)
def get_validation_issues(twin: DigitalTwin = Depends(get_twin)):
    try:
        report = twin.validate()
    except TwinError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e)
        )

    data = report.to_dict()
    return ValidationReportResponse(
        status=data["status"],
        passed=data["passed"],
        issue_count=data["issue_count"],
        constraints_checked=data["constraints_checked"],
        elements_checked=data["elements_checked"],
        issues=[ValidationIssue(**issue) for issue in data["issues"]],
    )


# =========================================
# Control Endpoints
# =========================================

@router.post(
    "/control",
    response_class=PlainTextResponse,
    summary="Manual HVAC control",
    description="""
    Force a room's HVAC on or off, or return it to automatic control.

    Example: `POST /api/control?roomId=R1&action=OFF`

    - **ON**: force the HVAC on
    - **OFF**: force the HVAC off
    - **AUTO**: clear the override

    The change applies from the next simulation step. Unknown room ids
    are accepted and take effect if the room appears in the model.
    """
)
def control_hvac(
    room_id: str = Query(..., alias="roomId", min_length=1, description="Room identifier"),
    action: str = Query(..., description="ON, OFF or AUTO"),
    twin: DigitalTwin = Depends(get_twin)
):
    twin.set_override(room_id, action)
    return f"Command sent: {room_id} -> {action}"


@router.get(
    "/overrides",
    response_model=OverrideListResponse,
    summary="Active manual overrides"
)
def list_overrides(twin: DigitalTwin = Depends(get_twin)):
    overrides = twin.overrides.snapshot()
    return OverrideListResponse(
        count=len(overrides),
        overrides={room_id: directive.value for room_id, directive in overrides.items()}
    )


# =========================================
# Simulation Endpoints
# =========================================

@router.get(
    "/simulation",
    response_model=SimulationStatusResponse,
    summary="Scheduler and dataset state"
)
def get_simulation(twin: DigitalTwin = Depends(get_twin)):
    cursor = twin.cursor
    last_tick = twin.last_tick
    return SimulationStatusResponse(
        initialized=twin.is_initialized,
        scheduler_state=twin.scheduler.state.value,
        scheduler_running=twin.scheduler.is_running,
        tick_seconds=twin.settings.tick_seconds,
        time_step_hours=twin.settings.time_step_hours,
        completed_ticks=twin.scheduler.completed_ticks,
        dropped_fires=twin.scheduler.dropped_fires,
        failed_ticks=twin.failed_ticks,
        dataset_rows=len(cursor) if cursor is not None else 0,
        cursor_index=cursor.index if cursor is not None else 0,
        dataset_restarts=cursor.restart_count if cursor is not None else 0,
        last_step=last_tick.step if last_tick else None,
        last_date=last_tick.date if last_tick else None,
    )
