"""
Manual Override Table

Operators can force a room's HVAC on or off from the control interface.
An override stays in force for every tick until it is cleared (set back
to AUTO) or the process restarts.

Writes are guarded by a lock and never wait on a tick. The tick reads a
``snapshot()`` taken when it starts, so a write that lands while a tick
is running becomes visible on the following tick.
"""

import logging
import threading
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping

logger = logging.getLogger(__name__)


class OverrideDirective(str, Enum):
    """HVAC directive for a room. AUTO means no entry in the table."""
    FORCE_ON = "FORCE_ON"
    FORCE_OFF = "FORCE_OFF"
    AUTO = "AUTO"


def directive_from_action(action: str) -> OverrideDirective:
    """
    Map a control-interface action string to a directive.

    "AUTO" clears the override and "ON" forces the HVAC on; any other
    value forces it off.
    """
    normalized = (action or "").strip().upper()
    if normalized == "AUTO":
        return OverrideDirective.AUTO
    if normalized == "ON":
        return OverrideDirective.FORCE_ON
    return OverrideDirective.FORCE_OFF


class OverrideTable:
    """
    Room id to forced directive.

    Room ids are not checked against the model: an override for an
    unknown room is stored and simply has no effect until such a room
    exists.
    """

    def __init__(self):
        self._overrides: Dict[str, OverrideDirective] = {}
        self._lock = threading.Lock()

    def set(self, room_id: str, directive: OverrideDirective) -> None:
        """Force a directive for a room. AUTO is treated as ``clear``."""
        directive = OverrideDirective(directive)
        if directive is OverrideDirective.AUTO:
            self.clear(room_id)
            return

        with self._lock:
            self._overrides[room_id] = directive
        logger.info(f"Override set: {room_id} -> {directive.value}")

    def clear(self, room_id: str) -> bool:
        """
        Return a room to automatic control.

        Returns:
            True if an override was removed
        """
        with self._lock:
            removed = self._overrides.pop(room_id, None) is not None
        if removed:
            logger.info(f"Override cleared: {room_id} -> AUTO")
        return removed

    def apply(self, room_id: str, action: str) -> OverrideDirective:
        """Apply a control-interface action ("ON", "OFF" or "AUTO")."""
        directive = directive_from_action(action)
        logger.info(f"Command received: set {room_id} to {action}")
        self.set(room_id, directive)
        return directive

    def resolve(self, room_id: str) -> OverrideDirective:
        """Stored directive for a room, or AUTO if none."""
        with self._lock:
            return self._overrides.get(room_id, OverrideDirective.AUTO)

    def snapshot(self) -> Mapping[str, OverrideDirective]:
        """Read-only copy of the current table."""
        with self._lock:
            return MappingProxyType(dict(self._overrides))

    def __len__(self) -> int:
        with self._lock:
            return len(self._overrides)
