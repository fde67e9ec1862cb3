"""
Live Status Reporting

Builds the operator-facing views of the twin from a consistent capture
of the model: a plain-text status block and the dashboard JSON consumed
by the web client. Nothing here mutates state, and no wall-clock values
are included, so the same capture always renders the same output.
"""

from dataclasses import dataclass
from typing import Any, Dict, List

from .model import HvacState, Room
from .telemetry import TelemetrySample


@dataclass(frozen=True)
class TwinCapture:
    """Everything a reader needs, copied under the store lock."""
    model_name: str
    rooms: List[Room]
    sample: TelemetrySample
    step: int
    started: bool


@dataclass(frozen=True)
class StatusSnapshot:
    text: str
    data: Dict[str, Any]


class StatusReporter:
    """Renders status text and dashboard data from a TwinCapture."""

    def snapshot(self, capture: TwinCapture) -> StatusSnapshot:
        return StatusSnapshot(text=self.render_text(capture), data=self.build_dashboard(capture))

    def build_dashboard(self, capture: TwinCapture) -> Dict[str, Any]:
        """Dashboard payload in the shape the web client expects."""
        rooms = capture.rooms
        avg_temp = sum(r.temperature for r in rooms) / len(rooms) if rooms else 0.0
        active = sum(1 for r in rooms if r.hvac is HvacState.ON)
        hvac_kw = sum(r.power_draw for r in rooms) / 1000.0

        return {
            "model": capture.model_name,
            "timestamp": capture.sample.date,
            "step": capture.step,
            "started": capture.started,
            "power": {
                "real": round(capture.sample.power_consumption, 2),
                "simulated": round(hvac_kw, 2),
            },
            "weather": {"outdoorTemp": round(capture.sample.outdoor_temperature, 1)},
            "occupancy": capture.sample.occupancy,
            "comfort": {
                "avgTemp": round(avg_temp, 1),
                "activeHvacs": active,
            },
            "rooms": [
                {
                    "id": r.id,
                    "name": r.name,
                    "temp": round(r.temperature, 1),
                    "hvac": r.hvac.value,
                    "mode": r.mode,
                    "power": round(r.power_draw, 1),
                    "energy": round(r.energy_consumed, 1),
                    "occupancy": r.occupancy,
                }
                for r in rooms
            ],
        }

    def render_text(self, capture: TwinCapture) -> str:
        """Human-readable status block."""
        sample = capture.sample
        data = self.build_dashboard(capture)
        header = "no step simulated yet" if not capture.started else f"Step {capture.step}"

        lines = [
            f"=== {capture.model_name} LIVE STATUS ===",
            f"Date: {sample.date} | {header}",
            (
                f"Outdoor: {sample.outdoor_temperature:.1f}°C | "
                f"Occupancy: {sample.occupancy} | "
                f"Metered power: {sample.power_consumption:.2f} kW | "
                f"HVAC power: {data['power']['simulated']:.2f} kW"
            ),
            (
                f"Average temperature: {data['comfort']['avgTemp']:.1f}°C | "
                f"Active HVACs: {data['comfort']['activeHvacs']}/{len(capture.rooms)}"
            ),
            "-" * 48,
        ]
        for room in capture.rooms:
            lines.append(
                f"{room.id:<6} {room.name:<20} {room.temperature:6.1f}°C  "
                f"HVAC {room.hvac.value:<3} ({room.mode})  "
                f"{room.power_draw:7.1f} W  {room.energy_consumed:9.1f} Wh"
            )
        return "\n".join(lines) + "\n"
