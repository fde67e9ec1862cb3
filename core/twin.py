"""
Digital Twin Engine Context

One object that owns the whole running simulation: the model store,
the telemetry cursor, the override table, the physics rules, the
validation constraints and the scheduler that drives the tick.

Error boundaries:
- Startup: loader errors propagate (``from_settings`` raises), so a
  broken model or dataset never reaches the scheduler
- Tick: any exception is logged and the tick is abandoned; the next
  scheduled tick runs normally
- Query: status, dashboard and validation never raise; they return a
  well-formed error response instead
"""

import json
import logging
from typing import Any, Dict, List, Optional, Sequence

from .exceptions import TwinError
from .model import ModelStore, load_model
from .overrides import OverrideDirective, OverrideTable
from .physics import HvacConstants, PhysicsRuleEngine, TickResult
from .reporting import StatusReporter, StatusSnapshot, TwinCapture
from .scheduler import TickScheduler
from .settings import TwinSettings
from .telemetry import TelemetryCursor, TelemetrySample, load_dataset
from .validators import ValidationEngine, ValidationReport, default_constraints

logger = logging.getLogger(__name__)

DEFAULT_VALIDATION_SOURCE = "room_constraints"


class DigitalTwin:
    """
    The running smart-office simulation.

    Example:
        twin = DigitalTwin.from_settings(TwinSettings.from_env())
        twin.start()
        print(twin.status())
        twin.set_override("R1", "OFF")
        print(twin.validation_report())
    """

    def __init__(
        self,
        store: Optional[ModelStore],
        samples: Optional[Sequence[TelemetrySample]],
        settings: Optional[TwinSettings] = None,
        rules: Optional[PhysicsRuleEngine] = None,
        validator: Optional[ValidationEngine] = None,
        validation_source: str = DEFAULT_VALIDATION_SOURCE,
    ):
        self.settings = settings or TwinSettings()
        self.store = store
        self.cursor = TelemetryCursor(samples) if samples is not None else None
        self.overrides = OverrideTable()
        self.rules = rules or PhysicsRuleEngine(HvacConstants.from_settings(self.settings))
        self.validator = validator or ValidationEngine(default_constraints(
            temp_ceiling=self.settings.temp_ceiling,
            temp_floor=self.settings.temp_floor,
            standby_power=self.settings.standby_power,
        ))
        self.validation_source = validation_source
        self.reporter = StatusReporter()
        self.scheduler = TickScheduler(self.tick, period=self.settings.tick_seconds)

        self.last_tick: Optional[TickResult] = None
        self.failed_ticks = 0

    @classmethod
    def from_settings(cls, settings: TwinSettings) -> "DigitalTwin":
        """
        Load the model and dataset named in settings.

        Raises:
            InitializationError: If either file cannot be loaded
        """
        logger.info("⚙️ Initializing Digital Twin Engine...")
        store = load_model(settings.model_path)
        samples = load_dataset(settings.dataset_path)
        twin = cls(store, samples, settings=settings)
        logger.info(
            f"✔ Engine ready. {len(store)} rooms, {len(samples)} rows of data"
        )
        return twin

    @property
    def is_initialized(self) -> bool:
        return self.store is not None and self.cursor is not None and len(self.cursor) > 0

    # =========================================
    # Simulation
    # =========================================

    def tick(self) -> Optional[TickResult]:
        """
        Advance the simulation by one step.

        Returns:
            TickResult, or None if the engine is not initialized or the
            step failed
        """
        if not self.is_initialized:
            logger.warning("Engine not initialized, skipping simulation step")
            return None

        try:
            result = self.rules.run_tick(self.store, self.cursor, self.overrides)
        except Exception as e:
            self.failed_ticks += 1
            logger.error(f"Error in simulation step: {e}", exc_info=True)
            return None

        self.last_tick = result
        return result

    def start(self) -> None:
        self.scheduler.start()

    def stop(self) -> None:
        self.scheduler.stop()

    def set_override(self, room_id: str, action: str) -> OverrideDirective:
        """Control interface: "ON", "OFF" or "AUTO" for a room."""
        return self.overrides.apply(room_id, action)

    # =========================================
    # Queries
    # =========================================

    def capture(self) -> TwinCapture:
        """
        Consistent copy of everything the readers need.

        Raises:
            TwinError: If the engine is not initialized
        """
        if not self.is_initialized:
            raise TwinError("Engine not initialized")

        with self.store.lock:
            return TwinCapture(
                model_name=self.store.name,
                rooms=self.store.snapshot(),
                sample=self.cursor.last_consumed(),
                step=self.cursor.last_consumed_index,
                started=self.cursor.has_started,
            )

    def snapshot(self) -> StatusSnapshot:
        """Text and dashboard views built from one capture."""
        return self.reporter.snapshot(self.capture())

    def status(self) -> str:
        """Human-readable status of the most recently completed tick."""
        try:
            return self.reporter.render_text(self.capture())
        except Exception as e:
            return f"Error retrieving status: {e}"

    def dashboard_data(self) -> Dict[str, Any]:
        try:
            return self.reporter.build_dashboard(self.capture())
        except Exception as e:
            return {"error": str(e)}

    def dashboard(self) -> str:
        """Dashboard JSON; ``{"error": ...}`` on failure."""
        return json.dumps(self.dashboard_data())

    def validate(self) -> ValidationReport:
        """
        Run every constraint against the current model.

        Raises:
            TwinError: If the engine is not initialized
        """
        if self.store is None:
            raise TwinError("Engine not initialized")
        return self.validator.validate(self.store)

    def validation_report(self) -> str:
        """Fixed-format validation report."""
        try:
            return self.validate().render(self.validation_source)
        except Exception as e:
            return f"Validation Error: {e}"

    def validation_issues(self) -> List[Dict[str, Any]]:
        """Raw issue list for programmatic consumers."""
        return [issue.to_dict() for issue in self.validate().issues]
