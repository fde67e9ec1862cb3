"""
HVAC Physics Rules for the Smart-Office Twin

This module advances every room by one simulated time step. It is the
only code that mutates the model store.

Per tick, for each room in id order:
1. Resolve the effective HVAC state: a manual override always wins,
   otherwise the automatic control policy decides
2. Apply the thermal model's temperature change
3. Update power draw and accumulate energy
4. Copy the building occupancy onto the room

Both the control policy and the thermal model are strategy objects, so
a different comfort policy or a calibrated RC model can be plugged in
without touching the tick itself.
"""

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .model import HvacState, ModelStore, Room
from .overrides import OverrideDirective, OverrideTable
from .telemetry import TelemetryCursor, TelemetrySample

logger = logging.getLogger(__name__)


@dataclass
class HvacConstants:
    """
    Constants used by the default policy and thermal model.

    Values describe a typical split-unit office room and can be
    overridden from settings.
    """

    # Simulation step
    TIME_STEP_HOURS: float = 0.25          # 15 minutes per tick

    # Comfort band
    COMFORT_SETPOINT: float = 24.0         # °C
    TOLERANCE: float = 1.0                 # ±°C before the HVAC reacts

    # Thermal behaviour
    CONDITIONING_RATE: float = 2.0         # °C/h toward setpoint while ON
    DRIFT_COEFFICIENT: float = 0.1         # share of indoor/outdoor gap closed per hour while OFF

    # Electrical
    STANDBY_POWER: float = 0.0             # W while OFF

    @classmethod
    def from_settings(cls, settings) -> "HvacConstants":
        return cls(
            TIME_STEP_HOURS=settings.time_step_hours,
            COMFORT_SETPOINT=settings.setpoint,
            TOLERANCE=settings.tolerance,
            CONDITIONING_RATE=settings.conditioning_rate,
            DRIFT_COEFFICIENT=settings.drift_coefficient,
            STANDBY_POWER=settings.standby_power,
        )


class DecisionSource(str, Enum):
    """Where a room's effective HVAC state came from."""
    OVERRIDE = "MANUAL"
    AUTO = "AUTO"


# =========================================
# Strategies
# =========================================

class ControlPolicy(ABC):
    """Automatic (non-override) HVAC decision."""

    @abstractmethod
    def decide(self, room: Room, sample: TelemetrySample) -> HvacState:
        pass


class ThermalModel(ABC):
    """Temperature change of a room over one step."""

    @abstractmethod
    def temperature_delta(
        self,
        room: Room,
        sample: TelemetrySample,
        state: HvacState,
        hours: float,
    ) -> float:
        pass


class ComfortBandPolicy(ControlPolicy):
    """
    Keep rooms inside a comfort band around a setpoint.

    The HVAC turns ON when the room is warmer than the band, or when the
    building is occupied and the room is outside the band in either
    direction. Otherwise it stays OFF.

    Example:
        policy = ComfortBandPolicy(setpoint=24.0, tolerance=1.0)
        policy.decide(room_at_26c, empty_sample)  # HvacState.ON
    """

    def __init__(self, setpoint: float = 24.0, tolerance: float = 1.0):
        self.setpoint = setpoint
        self.tolerance = tolerance

    def decide(self, room: Room, sample: TelemetrySample) -> HvacState:
        deviation = room.temperature - self.setpoint
        if deviation > self.tolerance:
            return HvacState.ON
        if sample.occupancy > 0 and abs(deviation) > self.tolerance:
            return HvacState.ON
        return HvacState.OFF


class SetpointThermalModel(ThermalModel):
    """
    First-order room model.

    ON:  the room is conditioned toward the setpoint at a fixed rate,
         never overshooting it.
    OFF: the room drifts toward the outdoor temperature:

        ΔT = (T_outdoor - T_room) × k_drift × hours
    """

    def __init__(
        self,
        setpoint: float = 24.0,
        conditioning_rate: float = 2.0,
        drift_coefficient: float = 0.1,
    ):
        self.setpoint = setpoint
        self.conditioning_rate = conditioning_rate
        self.drift_coefficient = drift_coefficient

    def conditioning_delta(self, temperature: float, hours: float) -> float:
        gap = temperature - self.setpoint
        if gap == 0:
            return 0.0
        return -math.copysign(min(self.conditioning_rate * hours, abs(gap)), gap)

    def drift_delta(self, temperature: float, outdoor: float, hours: float) -> float:
        return (outdoor - temperature) * self.drift_coefficient * hours

    def temperature_delta(
        self,
        room: Room,
        sample: TelemetrySample,
        state: HvacState,
        hours: float,
    ) -> float:
        if state is HvacState.ON:
            return self.conditioning_delta(room.temperature, hours)
        return self.drift_delta(room.temperature, sample.outdoor_temperature, hours)


# =========================================
# Tick results
# =========================================

@dataclass
class RoomDecision:
    """Outcome of one room's step."""
    room_id: str
    hvac: HvacState
    source: DecisionSource
    temperature_before: float
    temperature_after: float
    power_draw: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "room_id": self.room_id,
            "hvac": self.hvac.value,
            "source": self.source.value,
            "temperature_before": round(self.temperature_before, 3),
            "temperature_after": round(self.temperature_after, 3),
            "power_draw": round(self.power_draw, 1),
        }


@dataclass
class TickResult:
    """Summary of a completed tick."""
    step: int
    date: str
    wrapped: bool
    decisions: List[RoomDecision] = field(default_factory=list)

    def decision_for(self, room_id: str) -> Optional[RoomDecision]:
        for decision in self.decisions:
            if decision.room_id == room_id:
                return decision
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "step": self.step,
            "date": self.date,
            "wrapped": self.wrapped,
            "decisions": [d.to_dict() for d in self.decisions],
        }


# =========================================
# Rule engine
# =========================================

class PhysicsRuleEngine:
    """
    Applies one simulation step to every room.

    Example:
        engine = PhysicsRuleEngine()
        result = engine.run_tick(store, cursor, overrides)
        print(result.decision_for("R1").hvac)
    """

    def __init__(
        self,
        constants: Optional[HvacConstants] = None,
        policy: Optional[ControlPolicy] = None,
        thermal_model: Optional[ThermalModel] = None,
    ):
        """
        Initialize the rule engine.

        Args:
            constants: Step size, comfort band and power constants.
                If None, uses defaults.
            policy: Automatic control policy. Defaults to a comfort band
                built from ``constants``.
            thermal_model: Temperature model. Defaults to a setpoint
                model built from ``constants``.
        """
        self.constants = constants or HvacConstants()
        self.policy = policy or ComfortBandPolicy(
            setpoint=self.constants.COMFORT_SETPOINT,
            tolerance=self.constants.TOLERANCE,
        )
        self.thermal_model = thermal_model or SetpointThermalModel(
            setpoint=self.constants.COMFORT_SETPOINT,
            conditioning_rate=self.constants.CONDITIONING_RATE,
            drift_coefficient=self.constants.DRIFT_COEFFICIENT,
        )

    def resolve_state(
        self,
        room: Room,
        sample: TelemetrySample,
        directive: OverrideDirective,
    ) -> Tuple[HvacState, DecisionSource]:
        """
        Effective HVAC state for a room.

        Returns:
            (HvacState, DecisionSource). Override directives always win
            over the automatic policy.
        """
        if directive is OverrideDirective.FORCE_ON:
            return HvacState.ON, DecisionSource.OVERRIDE
        if directive is OverrideDirective.FORCE_OFF:
            return HvacState.OFF, DecisionSource.OVERRIDE
        return self.policy.decide(room, sample), DecisionSource.AUTO

    def calculate_power_draw(self, room: Room, state: HvacState) -> float:
        """HVAC draw in W for the given state."""
        if state is HvacState.ON:
            return room.rated_power
        return self.constants.STANDBY_POWER

    def step_room(
        self,
        room: Room,
        sample: TelemetrySample,
        directive: OverrideDirective = OverrideDirective.AUTO,
        hours: Optional[float] = None,
    ) -> RoomDecision:
        """Advance a single room in place by one step."""
        if hours is None:
            hours = self.constants.TIME_STEP_HOURS

        state, source = self.resolve_state(room, sample, directive)
        temperature_before = room.temperature

        room.temperature += self.thermal_model.temperature_delta(room, sample, state, hours)

        room.power_draw = self.calculate_power_draw(room, state)
        room.energy_consumed += room.power_draw * hours

        room.occupancy = sample.occupancy
        room.hvac = state
        room.mode = source.value

        return RoomDecision(
            room_id=room.id,
            hvac=state,
            source=source,
            temperature_before=temperature_before,
            temperature_after=room.temperature,
            power_draw=room.power_draw,
        )

    def run_tick(
        self,
        store: ModelStore,
        cursor: TelemetryCursor,
        overrides: OverrideTable,
    ) -> TickResult:
        """
        Run one full mutation pass and advance the cursor once.

        The override table is snapshotted before the pass, so writes made
        while the tick runs apply from the next tick on.
        """
        directives: Mapping[str, OverrideDirective] = overrides.snapshot()

        with store.mutation() as rooms:
            sample = cursor.current()
            step = cursor.index
            logger.debug(f">> Simulating step {step} | Date: {sample.date}")

            decisions = [
                self.step_room(
                    room,
                    sample,
                    directives.get(room.id, OverrideDirective.AUTO),
                )
                for room in rooms
            ]
            wrapped = cursor.advance()

        return TickResult(step=step, date=sample.date, wrapped=wrapped, decisions=decisions)
