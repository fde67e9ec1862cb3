"""
Model Validation Layer

Checks the live building model against an ordered set of constraints.
Every constraint is a named predicate over a single room plus a message
template. Constraints are registered once, at startup, and the report
lists violations in registration order, then room-id order.

Philosophy:
- Validation is read-only: it runs on a deep copy of the model
- A predicate that raises counts as an unsatisfied instance, it never
  aborts the run
- Identical model state always gives an identical, identically ordered
  report
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional

from .model import HvacState, ModelStore, Room

logger = logging.getLogger(__name__)

REPORT_RULE = "-" * 64
ISSUE_RULE = "  " + "-" * 60


@dataclass(frozen=True)
class Constraint:
    """
    A named invariant over rooms.

    Attributes:
        name: Identifier shown in reports
        check: Predicate that returns True when the room satisfies the constraint
        message: Template rendered with ``str.format(room=room)`` on violation
    """
    name: str
    check: Callable[[Room], bool]
    message: str

    def render(self, room: Room) -> str:
        return self.message.format(room=room)


@dataclass
class ValidationIssue:
    """
    A single unsatisfied constraint instance.

    Attributes:
        constraint: Name of the violated constraint
        element: Reference of the offending room
        message: Rendered message
    """
    constraint: str
    element: str
    message: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "constraint": self.constraint,
            "element": self.element,
            "message": self.message,
        }


@dataclass
class ValidationReport:
    """
    Result of one validation run.

    Attributes:
        issues: Unsatisfied instances in registration order
        constraints_checked: Number of constraints evaluated
        elements_checked: Number of rooms evaluated
    """
    issues: List[ValidationIssue] = field(default_factory=list)
    constraints_checked: int = 0
    elements_checked: int = 0

    @property
    def passed(self) -> bool:
        return not self.issues

    @property
    def status(self) -> str:
        return "PASS" if self.passed else "FAIL"

    def render(self, source_name: str) -> str:
        """Fixed-format text report."""
        lines = [
            REPORT_RULE,
            f" VALIDATION REPORT ({source_name})",
            REPORT_RULE,
        ]
        if self.passed:
            lines.append("✔ Validation PASSED. System is healthy.")
        else:
            lines.append(f"✖ Validation FAILED. Found {len(self.issues)} issues:")
            lines.append("")
            for issue in self.issues:
                lines.append(f"  [CONSTRAINT] {issue.constraint}")
                lines.append(f"  [ELEMENT]    {issue.element}")
                lines.append(f"  [MESSAGE]    {issue.message}")
                lines.append(ISSUE_RULE)
        return "\n".join(lines) + "\n"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API response."""
        return {
            "status": self.status,
            "passed": self.passed,
            "issue_count": len(self.issues),
            "constraints_checked": self.constraints_checked,
            "elements_checked": self.elements_checked,
            "issues": [issue.to_dict() for issue in self.issues],
        }


class ValidationEngine:
    """
    Evaluates registered constraints against the model store.

    Example:
        engine = ValidationEngine(default_constraints())
        report = engine.validate(store)
        print(report.render("smart_office.json"))
    """

    def __init__(self, constraints: Optional[Iterable[Constraint]] = None):
        self._constraints: List[Constraint] = []
        for constraint in constraints or ():
            self.register(constraint)

    @property
    def constraints(self) -> List[Constraint]:
        return list(self._constraints)

    def register(self, constraint: Constraint) -> None:
        """Add a constraint. Names must be unique."""
        if any(c.name == constraint.name for c in self._constraints):
            raise ValueError(f"Constraint already registered: {constraint.name}")
        self._constraints.append(constraint)

    def validate(self, store: ModelStore) -> ValidationReport:
        """Validate the current contents of a store."""
        return self.validate_rooms(store.snapshot())

    def validate_rooms(self, rooms: List[Room]) -> ValidationReport:
        """
        Validate an already-captured list of rooms.

        Args:
            rooms: Room copies, in id order

        Returns:
            ValidationReport with issues in constraint-registration order
        """
        issues: List[ValidationIssue] = []

        for constraint in self._constraints:
            for room in rooms:
                try:
                    satisfied = bool(constraint.check(room))
                    message = None if satisfied else constraint.render(room)
                except Exception as e:
                    logger.warning(
                        f"Constraint {constraint.name} raised on {room.reference}: {e}"
                    )
                    satisfied = False
                    message = f"Constraint check raised {type(e).__name__}: {e}"

                if not satisfied:
                    issues.append(ValidationIssue(
                        constraint=constraint.name,
                        element=room.reference,
                        message=message,
                    ))

        return ValidationReport(
            issues=issues,
            constraints_checked=len(self._constraints),
            elements_checked=len(rooms),
        )


def default_constraints(
    temp_ceiling: float = 35.0,
    temp_floor: float = 10.0,
    standby_power: float = 0.0,
) -> List[Constraint]:
    """
    Built-in constraint set, in reporting order.

    Args:
        temp_ceiling: Safety ceiling for indoor temperature (°C)
        temp_floor: Safety floor for indoor temperature (°C)
        standby_power: Maximum draw allowed while HVAC is OFF (W)
    """
    return [
        Constraint(
            name="TemperatureSafetyCeiling",
            check=lambda room: room.temperature <= temp_ceiling,
            message=(
                "Room {room.id} temperature {room.temperature:.1f}°C exceeds "
                f"safety ceiling of {temp_ceiling:.1f}°C"
            ),
        ),
        Constraint(
            name="TemperatureSafetyFloor",
            check=lambda room: room.temperature >= temp_floor,
            message=(
                "Room {room.id} temperature {room.temperature:.1f}°C is below "
                f"safety floor of {temp_floor:.1f}°C"
            ),
        ),
        Constraint(
            name="NonNegativePowerDraw",
            check=lambda room: room.power_draw >= 0,
            message="Room {room.id} reports negative power draw ({room.power_draw:.1f} W)",
        ),
        Constraint(
            name="NonNegativeEnergy",
            check=lambda room: room.energy_consumed >= 0,
            message="Room {room.id} reports negative energy ({room.energy_consumed:.1f} Wh)",
        ),
        Constraint(
            name="NonNegativeOccupancy",
            check=lambda room: room.occupancy >= 0,
            message="Room {room.id} reports negative occupancy ({room.occupancy})",
        ),
        Constraint(
            name="NoDrawWhenHvacOff",
            check=lambda room: room.hvac is HvacState.ON or room.power_draw <= standby_power,
            message=(
                "Room {room.id} HVAC is OFF but draws {room.power_draw:.1f} W "
                f"(standby limit {standby_power:.1f} W)"
            ),
        ),
    ]
