"""
Tests for Model Validation

These tests verify the built-in constraints, report ordering and the
fixed text report format.

Run with: pytest tests/test_validators.py -v
"""

import pytest

from core.model import HvacState, ModelStore, Room
from core.validators import (
    Constraint,
    ValidationEngine,
    ValidationReport,
    default_constraints,
)


def healthy_store():
    return ModelStore([
        Room(id="R1", name="Meeting Room", temperature=24.0),
        Room(id="R2", name="Open Office", temperature=25.0),
        Room(id="R3", name="Server Room", temperature=22.0),
    ])


class TestDefaultConstraints:
    """Tests for the built-in constraint set."""

    def setup_method(self):
        """Set up test fixtures."""
        self.engine = ValidationEngine(default_constraints())

    def test_registration_order(self):
        """Test the default constraints are registered in report order."""
        assert [c.name for c in self.engine.constraints] == [
            "TemperatureSafetyCeiling",
            "TemperatureSafetyFloor",
            "NonNegativePowerDraw",
            "NonNegativeEnergy",
            "NonNegativeOccupancy",
            "NoDrawWhenHvacOff",
        ]

    def test_healthy_model_passes(self):
        """Test a model inside every limit passes."""
        report = self.engine.validate(healthy_store())

        assert report.passed
        assert report.status == "PASS"
        assert report.constraints_checked == 6
        assert report.elements_checked == 3

    def test_ceiling_violation(self):
        """Test one room over the ceiling yields exactly one issue."""
        store = healthy_store()
        with store.mutation() as rooms:
            rooms[0].temperature = 36.0

        report = self.engine.validate(store)

        assert len(report.issues) == 1
        issue = report.issues[0]
        assert issue.constraint == "TemperatureSafetyCeiling"
        assert issue.element == "Room R1 (Meeting Room)"
        assert issue.message == "Room R1 temperature 36.0°C exceeds safety ceiling of 35.0°C"

    def test_floor_violation(self):
        """Test a room under the floor is reported."""
        store = ModelStore([Room(id="R1", name="A", temperature=9.0)])

        report = self.engine.validate(store)

        assert [i.constraint for i in report.issues] == ["TemperatureSafetyFloor"]

    def test_draw_while_off(self):
        """Test an OFF room drawing power is flagged."""
        store = ModelStore([Room(id="R1", name="A", temperature=24.0, power_draw=500.0, hvac=HvacState.OFF)])

        report = self.engine.validate(store)

        assert [i.constraint for i in report.issues] == ["NoDrawWhenHvacOff"]

    def test_draw_while_on_is_fine(self):
        """Test an ON room may draw its rated power."""
        store = ModelStore([Room(id="R1", name="A", temperature=24.0, power_draw=1500.0, hvac=HvacState.ON)])

        assert self.engine.validate(store).passed

    def test_negative_values(self):
        """Test negative power, energy and occupancy each raise an issue."""
        store = ModelStore([Room(
            id="R1", name="A", temperature=24.0,
            power_draw=-1.0, energy_consumed=-5.0, occupancy=-2, hvac=HvacState.ON,
        )])

        report = self.engine.validate(store)

        assert [i.constraint for i in report.issues] == [
            "NonNegativePowerDraw",
            "NonNegativeEnergy",
            "NonNegativeOccupancy",
        ]

    def test_custom_limits(self):
        """Test thresholds come from the arguments."""
        engine = ValidationEngine(default_constraints(temp_ceiling=30.0))
        store = ModelStore([Room(id="R1", name="A", temperature=31.0)])

        report = engine.validate(store)

        assert "safety ceiling of 30.0°C" in report.issues[0].message


class TestValidationEngine:
    """Tests for ordering, determinism and error isolation."""

    def test_issue_order(self):
        """Test issues follow constraint order, then room id order."""
        store = ModelStore([
            Room(id="R2", name="B", temperature=40.0),
            Room(id="R1", name="A", temperature=5.0),
            Room(id="R3", name="C", temperature=38.0),
        ])

        report = ValidationEngine(default_constraints()).validate(store)

        assert [(i.constraint, i.element) for i in report.issues] == [
            ("TemperatureSafetyCeiling", "Room R2 (B)"),
            ("TemperatureSafetyCeiling", "Room R3 (C)"),
            ("TemperatureSafetyFloor", "Room R1 (A)"),
        ]

    def test_deterministic(self):
        """Test identical state gives an identical report."""
        store = ModelStore([Room(id="R1", name="A", temperature=36.0)])
        engine = ValidationEngine(default_constraints())

        assert engine.validate(store).render("x") == engine.validate(store).render("x")

    def test_validation_does_not_mutate(self):
        """Test predicates run on copies."""
        store = healthy_store()
        engine = ValidationEngine([
            Constraint("Mutator", lambda room: setattr(room, "temperature", 99.0) or True, "never"),
        ])

        engine.validate(store)

        assert store.get("R1").temperature == 24.0

    def test_raising_predicate_becomes_issue(self):
        """Test a predicate error is reported and other constraints still run."""
        def broken(room):
            raise ZeroDivisionError("division by zero")

        engine = ValidationEngine([
            Constraint("Broken", broken, "unused"),
            *default_constraints(),
        ])
        store = ModelStore([Room(id="R1", name="A", temperature=40.0)])

        report = engine.validate(store)

        assert [i.constraint for i in report.issues] == ["Broken", "TemperatureSafetyCeiling"]
        assert report.issues[0].message == "Constraint check raised ZeroDivisionError: division by zero"

    def test_duplicate_registration_rejected(self):
        """Test constraint names must be unique."""
        engine = ValidationEngine(default_constraints())

        with pytest.raises(ValueError):
            engine.register(Constraint("TemperatureSafetyCeiling", lambda room: True, ""))

    def test_no_constraints(self):
        """Test an empty engine always passes."""
        assert ValidationEngine().validate(healthy_store()).passed


class TestReportRendering:
    """Tests for the fixed text format."""

    def test_pass_format(self):
        """Test the PASS report text."""
        text = ValidationReport().render("room_constraints")

        assert text == (
            "----------------------------------------------------------------\n"
            " VALIDATION REPORT (room_constraints)\n"
            "----------------------------------------------------------------\n"
            "✔ Validation PASSED. System is healthy.\n"
        )

    def test_fail_format(self):
        """Test the FAIL report text."""
        store = ModelStore([Room(id="R1", name="Meeting Room", temperature=36.0)])
        report = ValidationEngine(default_constraints()).validate(store)

        assert report.render("room_constraints") == (
            "----------------------------------------------------------------\n"
            " VALIDATION REPORT (room_constraints)\n"
            "----------------------------------------------------------------\n"
            "✖ Validation FAILED. Found 1 issues:\n"
            "\n"
            "  [CONSTRAINT] TemperatureSafetyCeiling\n"
            "  [ELEMENT]    Room R1 (Meeting Room)\n"
            "  [MESSAGE]    Room R1 temperature 36.0°C exceeds safety ceiling of 35.0°C\n"
            "  ------------------------------------------------------------\n"
        )

    def test_to_dict(self):
        """Test JSON serialization of a report."""
        store = ModelStore([Room(id="R1", name="A", temperature=36.0)])
        d = ValidationEngine(default_constraints()).validate(store).to_dict()

        assert d["status"] == "FAIL"
        assert d["passed"] is False
        assert d["issue_count"] == 1
        assert d["issues"][0]["constraint"] == "TemperatureSafetyCeiling"
