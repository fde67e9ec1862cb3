"""
Tests for the HVAC Physics Rules

These tests verify the automatic comfort policy, the thermal model,
override precedence and the full tick pass over a model store.

Run with: pytest tests/test_physics.py -v
"""

import pytest

from core.model import HvacState, ModelStore, Room
from core.overrides import OverrideDirective, OverrideTable
from core.physics import (
    ComfortBandPolicy,
    DecisionSource,
    HvacConstants,
    PhysicsRuleEngine,
    SetpointThermalModel,
)
from core.settings import TwinSettings
from core.telemetry import TelemetryCursor, TelemetrySample


def sample(outdoor=32.0, occupancy=10, date="2024-07-15 12:00", power=40.0):
    return TelemetrySample(
        date=date,
        power_consumption=power,
        outdoor_temperature=outdoor,
        occupancy=occupancy,
    )


def three_rooms(temperature=28.0):
    return ModelStore([
        Room(id="R1", name="Meeting Room", temperature=temperature, rated_power=1800.0),
        Room(id="R2", name="Open Office", temperature=temperature, rated_power=3500.0),
        Room(id="R3", name="Server Room", temperature=temperature, rated_power=2500.0),
    ])


class TestHvacConstants:
    """Test default constants are reasonable."""

    def test_defaults(self):
        """Verify the demo defaults."""
        constants = HvacConstants()

        assert constants.TIME_STEP_HOURS == 0.25
        assert constants.COMFORT_SETPOINT == 24.0
        assert constants.TOLERANCE == 1.0
        assert constants.STANDBY_POWER == 0.0

    def test_from_settings(self):
        """Test constants follow the engine settings."""
        settings = TwinSettings(setpoint=22.0, tolerance=0.5, time_step_hours=0.5, standby_power=20.0)

        constants = HvacConstants.from_settings(settings)

        assert constants.COMFORT_SETPOINT == 22.0
        assert constants.TOLERANCE == 0.5
        assert constants.TIME_STEP_HOURS == 0.5
        assert constants.STANDBY_POWER == 20.0


class TestComfortBandPolicy:
    """Tests for the automatic control decision."""

    def setup_method(self):
        """Set up test fixtures."""
        self.policy = ComfortBandPolicy(setpoint=24.0, tolerance=1.0)

    def test_hot_room_turns_on(self):
        """Test a room above the band is cooled even when empty."""
        room = Room(id="R1", name="A", temperature=26.0)

        assert self.policy.decide(room, sample(occupancy=0)) is HvacState.ON

    def test_room_in_band_stays_off(self):
        """Test a room inside the band is left alone."""
        room = Room(id="R1", name="A", temperature=24.8)

        assert self.policy.decide(room, sample(occupancy=20)) is HvacState.OFF

    def test_band_edge_stays_off(self):
        """Test exactly setpoint + tolerance is still inside the band."""
        room = Room(id="R1", name="A", temperature=25.0)

        assert self.policy.decide(room, sample(occupancy=20)) is HvacState.OFF

    def test_cold_occupied_room_turns_on(self):
        """Test an occupied room below the band is conditioned."""
        room = Room(id="R1", name="A", temperature=21.0)

        assert self.policy.decide(room, sample(occupancy=5)) is HvacState.ON

    def test_cold_empty_room_stays_off(self):
        """Test an empty room below the band is not conditioned."""
        room = Room(id="R1", name="A", temperature=21.0)

        assert self.policy.decide(room, sample(occupancy=0)) is HvacState.OFF


class TestSetpointThermalModel:
    """Tests for the temperature change model."""

    def setup_method(self):
        """Set up test fixtures."""
        self.model = SetpointThermalModel(setpoint=24.0, conditioning_rate=2.0, drift_coefficient=0.1)

    def test_conditioning_moves_toward_setpoint(self):
        """Test ON cools a warm room by rate × hours."""
        assert self.model.conditioning_delta(28.0, 0.25) == pytest.approx(-0.5)

    def test_conditioning_heats_cold_room(self):
        """Test ON warms a cold room toward the setpoint."""
        assert self.model.conditioning_delta(20.0, 0.25) == pytest.approx(0.5)

    def test_conditioning_never_overshoots(self):
        """Test ON stops at the setpoint."""
        assert self.model.conditioning_delta(24.2, 0.25) == pytest.approx(-0.2)
        assert self.model.conditioning_delta(24.0, 0.25) == 0.0

    def test_drift_toward_outdoor(self):
        """Test OFF drifts toward the outdoor temperature."""
        # (32 - 28) × 0.1 × 0.25
        assert self.model.drift_delta(28.0, 32.0, 0.25) == pytest.approx(0.1)
        assert self.model.drift_delta(28.0, 20.0, 0.25) == pytest.approx(-0.2)


class TestStepRoom:
    """Tests for a single room update."""

    def setup_method(self):
        """Set up test fixtures."""
        self.engine = PhysicsRuleEngine()

    def test_auto_on_updates_room(self):
        """Test temperature, power, energy and occupancy after an ON step."""
        room = Room(id="R1", name="A", temperature=28.0, rated_power=2000.0)

        decision = self.engine.step_room(room, sample(occupancy=7))

        assert decision.hvac is HvacState.ON
        assert decision.source is DecisionSource.AUTO
        assert room.temperature == pytest.approx(27.5)
        assert room.power_draw == 2000.0
        assert room.energy_consumed == pytest.approx(500.0)
        assert room.occupancy == 7
        assert room.hvac is HvacState.ON
        assert room.mode == "AUTO"

    def test_energy_accumulates(self):
        """Test energy is cumulative over steps."""
        room = Room(id="R1", name="A", temperature=30.0, rated_power=1000.0)

        for _ in range(4):
            self.engine.step_room(room, sample())

        assert room.energy_consumed == pytest.approx(1000.0)

    def test_force_off_wins_over_policy(self):
        """Test FORCE_OFF keeps a hot room off."""
        room = Room(id="R1", name="A", temperature=28.0, rated_power=2000.0)

        decision = self.engine.step_room(room, sample(outdoor=32.0), OverrideDirective.FORCE_OFF)

        assert decision.hvac is HvacState.OFF
        assert decision.source is DecisionSource.OVERRIDE
        assert room.power_draw == 0.0
        assert room.mode == "MANUAL"
        assert room.temperature == pytest.approx(28.1)

    def test_force_on_wins_over_policy(self):
        """Test FORCE_ON runs the HVAC inside the comfort band."""
        room = Room(id="R1", name="A", temperature=24.5, rated_power=1200.0)

        decision = self.engine.step_room(room, sample(), OverrideDirective.FORCE_ON)

        assert decision.hvac is HvacState.ON
        assert room.power_draw == 1200.0

    def test_standby_power_when_off(self):
        """Test OFF draws the configured standby power."""
        engine = PhysicsRuleEngine(HvacConstants(STANDBY_POWER=15.0))
        room = Room(id="R1", name="A", temperature=24.0)

        engine.step_room(room, sample(occupancy=0))

        assert room.power_draw == 15.0


class TestRunTick:
    """Tests for the full tick over a store."""

    def setup_method(self):
        """Set up test fixtures."""
        self.engine = PhysicsRuleEngine()
        self.overrides = OverrideTable()

    def test_hot_day_all_rooms_cooled(self):
        """Test three warm rooms on a 32°C day all run and cool by 0.5°C."""
        store = three_rooms(28.0)
        cursor = TelemetryCursor([sample(outdoor=32.0)])

        result = self.engine.run_tick(store, cursor, self.overrides)

        rooms = store.snapshot()
        assert [r.hvac for r in rooms] == [HvacState.ON] * 3
        assert [r.temperature for r in rooms] == pytest.approx([27.5, 27.5, 27.5])
        assert [d.room_id for d in result.decisions] == ["R1", "R2", "R3"]

    def test_forced_off_room_warms(self):
        """Test a forced-off room drifts up while the others cool."""
        store = three_rooms(28.0)
        cursor = TelemetryCursor([sample(outdoor=32.0)] * 2)
        self.overrides.apply("R2", "OFF")

        result = self.engine.run_tick(store, cursor, self.overrides)

        r2 = store.get("R2")
        assert r2.hvac is HvacState.OFF
        assert r2.power_draw == 0.0
        assert r2.temperature > 28.0
        assert result.decision_for("R2").source is DecisionSource.OVERRIDE
        assert store.get("R1").temperature == pytest.approx(27.5)

    def test_auto_restores_policy(self):
        """Test clearing the override hands the room back to the policy."""
        store = three_rooms(28.0)
        cursor = TelemetryCursor([sample(outdoor=32.0)] * 3)
        self.overrides.apply("R2", "OFF")
        self.engine.run_tick(store, cursor, self.overrides)

        self.overrides.apply("R2", "AUTO")
        result = self.engine.run_tick(store, cursor, self.overrides)

        assert store.get("R2").hvac is HvacState.ON
        assert result.decision_for("R2").source is DecisionSource.AUTO

    def test_override_for_unknown_room_ignored(self):
        """Test an override naming no room does not affect the tick."""
        store = three_rooms(28.0)
        cursor = TelemetryCursor([sample()])
        self.overrides.apply("R99", "OFF")

        result = self.engine.run_tick(store, cursor, self.overrides)

        assert all(d.hvac is HvacState.ON for d in result.decisions)

    def test_cursor_advances_once_per_tick(self):
        """Test each tick consumes exactly one row."""
        store = three_rooms()
        cursor = TelemetryCursor([sample(date="a"), sample(date="b")])

        first = self.engine.run_tick(store, cursor, self.overrides)
        second = self.engine.run_tick(store, cursor, self.overrides)
        third = self.engine.run_tick(store, cursor, self.overrides)

        assert (first.date, second.date, third.date) == ("a", "b", "a")
        assert (first.wrapped, second.wrapped, third.wrapped) == (False, True, False)
        assert cursor.restart_count == 1

    def test_empty_store(self):
        """Test a store with no rooms still advances the cursor."""
        cursor = TelemetryCursor([sample(), sample()])

        result = self.engine.run_tick(ModelStore(), cursor, self.overrides)

        assert result.decisions == []
        assert cursor.index == 1

    def test_result_serializes(self):
        """Test TickResult.to_dict shape."""
        store = three_rooms()
        cursor = TelemetryCursor([sample()])

        data = self.engine.run_tick(store, cursor, self.overrides).to_dict()

        assert data["step"] == 0
        assert data["wrapped"] is True
        assert data["decisions"][0]["hvac"] == "ON"
        assert data["decisions"][0]["source"] == "AUTO"
