"""
Building Model Store

The live graph of rooms that the simulation mutates every tick. This is
the single source of truth for simulated state; the reporting and
validation layers only ever see deep copies taken under the store lock.

The model file is a small JSON document:

    {
        "name": "SmartOffice",
        "rooms": [
            {"id": "R1", "name": "Meeting Room", "temperature": 26.5,
             "ratedPower": 1500}
        ]
    }

It is validated with Pydantic before any Room is created, so a malformed
model fails startup instead of producing a half-built store.
"""

import copy
import json
import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ModelLoadError

logger = logging.getLogger(__name__)


class HvacState(str, Enum):
    """Effective HVAC state of a room after a tick."""
    ON = "ON"
    OFF = "OFF"


@dataclass
class Room:
    """
    A single conditioned room.

    Attributes:
        id: Stable identifier (e.g. "R1"), used by overrides and reports
        name: Display name
        temperature: Current indoor temperature (°C)
        power_draw: Instantaneous HVAC power draw (W)
        energy_consumed: Cumulative HVAC energy (Wh)
        occupancy: Latest occupancy count applied to this room
        hvac: Effective HVAC state from the most recent tick
        mode: "AUTO" or "MANUAL", who decided the HVAC state on the most recent tick
        rated_power: HVAC draw when running (W)
    """
    id: str
    name: str
    temperature: float
    power_draw: float = 0.0
    energy_consumed: float = 0.0
    occupancy: int = 0
    hvac: HvacState = HvacState.OFF
    mode: str = "AUTO"
    rated_power: float = 1500.0

    @property
    def reference(self) -> str:
        """Element reference used in validation reports."""
        return f"Room {self.id} ({self.name})"


# =========================================
# Model file schema
# =========================================

class RoomSpec(BaseModel):
    """One room entry of the model file."""
    id: str = Field(..., min_length=1, max_length=50)
    name: Optional[str] = None
    temperature: float = Field(..., ge=-50, le=80)
    rated_power: float = Field(default=1500.0, ge=0, alias="ratedPower")
    occupancy: int = Field(default=0, ge=0)
    hvac: HvacState = HvacState.OFF

    model_config = {"populate_by_name": True}

    def to_room(self) -> Room:
        return Room(
            id=self.id,
            name=self.name or self.id,
            temperature=self.temperature,
            occupancy=self.occupancy,
            hvac=self.hvac,
            rated_power=self.rated_power,
        )


class BuildingSpec(BaseModel):
    """Top-level model document."""
    name: str = "SmartOffice"
    rooms: List[RoomSpec] = Field(..., min_length=1)

    @field_validator("rooms")
    @classmethod
    def unique_room_ids(cls, rooms: List[RoomSpec]) -> List[RoomSpec]:
        seen = set()
        for room in rooms:
            if room.id in seen:
                raise ValueError(f"duplicate room id: {room.id}")
            seen.add(room.id)
        return rooms


# =========================================
# Store
# =========================================

class ModelStore:
    """
    Thread-safe container for the live rooms.

    The tick holds ``mutation()`` for its whole pass, so readers using
    ``snapshot()`` always see every room either fully before or fully
    after a tick.

    Example:
        store = ModelStore([Room(id="R1", name="Lab", temperature=25.0)])
        with store.mutation() as rooms:
            rooms[0].temperature -= 0.5
        print(store.snapshot()[0].temperature)  # 24.5
    """

    def __init__(self, rooms: Iterable[Room] = (), name: str = "SmartOffice"):
        self.name = name
        self._rooms: Dict[str, Room] = {}
        self._lock = threading.RLock()
        for room in rooms:
            self.add_room(room)

    def add_room(self, room: Room) -> None:
        """Register a new room. Room ids must be unique."""
        with self._lock:
            if room.id in self._rooms:
                raise ValueError(f"Room already exists: {room.id}")
            self._rooms[room.id] = room

    @contextmanager
    def mutation(self) -> Iterator[List[Room]]:
        """
        Exclusive access to the live rooms, ordered by id.

        Yields the actual Room objects; changes are visible to readers
        only once the context exits.
        """
        with self._lock:
            yield [self._rooms[room_id] for room_id in sorted(self._rooms)]

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def snapshot(self) -> List[Room]:
        """Deep copy of all rooms, ordered by id."""
        with self._lock:
            return [copy.deepcopy(self._rooms[room_id]) for room_id in sorted(self._rooms)]

    def get(self, room_id: str) -> Optional[Room]:
        """Copy of a single room, or None if it does not exist."""
        with self._lock:
            room = self._rooms.get(room_id)
            return copy.deepcopy(room) if room is not None else None

    def room_ids(self) -> List[str]:
        with self._lock:
            return sorted(self._rooms)

    def __contains__(self, room_id: object) -> bool:
        with self._lock:
            return room_id in self._rooms

    def __len__(self) -> int:
        with self._lock:
            return len(self._rooms)


def load_model(path) -> ModelStore:
    """
    Load the building model from a JSON file.

    Args:
        path: Path to the model document

    Returns:
        A populated ModelStore

    Raises:
        ModelLoadError: If the file is missing, not JSON, or fails schema validation
    """
    model_path = Path(path)
    if not model_path.is_file():
        raise ModelLoadError(f"Model file not found: {model_path}")

    try:
        document = json.loads(model_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ModelLoadError(f"Could not read model file {model_path}: {e}") from e

    try:
        spec = BuildingSpec.model_validate(document)
    except ValidationError as e:
        raise ModelLoadError(f"Invalid model file {model_path}: {e}") from e

    store = ModelStore((room.to_room() for room in spec.rooms), name=spec.name)
    logger.info(f"Model '{store.name}' loaded with {len(store)} rooms")
    return store
