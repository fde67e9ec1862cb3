"""
Telemetry Dataset and Cursor

The historical dataset is replayed one row per tick. Rows are parsed
once at startup into immutable samples; the cursor is the only moving
part and it loops forever, restarting at row 0 after the last row.

Dataset format (CSV with header row, columns by position):
    date, power consumption, outdoor temperature, occupancy
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Tuple

import pandas as pd

from .exceptions import DatasetError

logger = logging.getLogger(__name__)

DATASET_COLUMNS = ("date", "power_consumption", "outdoor_temperature", "occupancy")


@dataclass(frozen=True)
class TelemetrySample:
    """
    One historical reading for the whole building.

    Attributes:
        date: Timestamp label exactly as it appears in the dataset
        power_consumption: Metered building power (kW)
        outdoor_temperature: Outdoor air temperature (°C)
        occupancy: People in the building
    """
    date: str
    power_consumption: float
    outdoor_temperature: float
    occupancy: int

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "power_consumption": self.power_consumption,
            "outdoor_temperature": self.outdoor_temperature,
            "occupancy": self.occupancy,
        }


def load_dataset(path) -> Tuple[TelemetrySample, ...]:
    """
    Parse the telemetry CSV into an ordered tuple of samples.

    Args:
        path: Path to the CSV file

    Returns:
        Non-empty tuple of TelemetrySample in file order

    Raises:
        DatasetError: If the file is missing, empty, too narrow, or has
            non-numeric / missing values
    """
    csv_path = Path(path)
    if not csv_path.is_file():
        raise DatasetError(f"Dataset file not found: {csv_path}")

    try:
        frame = pd.read_csv(csv_path, skipinitialspace=True)
    except pd.errors.EmptyDataError as e:
        raise DatasetError(f"Dataset file is empty: {csv_path}") from e
    except (OSError, pd.errors.ParserError) as e:
        raise DatasetError(f"Could not parse dataset {csv_path}: {e}") from e

    if frame.shape[1] < len(DATASET_COLUMNS):
        raise DatasetError(
            f"Dataset needs {len(DATASET_COLUMNS)} columns "
            f"{list(DATASET_COLUMNS)}, found {frame.shape[1]}"
        )
    if frame.empty:
        raise DatasetError(f"Dataset has no rows: {csv_path}")

    frame = frame.iloc[:, : len(DATASET_COLUMNS)].copy()
    frame.columns = list(DATASET_COLUMNS)

    try:
        for column in ("power_consumption", "outdoor_temperature", "occupancy"):
            frame[column] = pd.to_numeric(frame[column], errors="raise")
    except (ValueError, TypeError) as e:
        raise DatasetError(f"Non-numeric value in dataset {csv_path}: {e}") from e

    if frame.isna().any().any():
        bad_row = int(frame[frame.isna().any(axis=1)].index[0])
        # +2: header line plus 1-based numbering
        raise DatasetError(f"Missing value in dataset {csv_path} at line {bad_row + 2}")

    if (frame["occupancy"] % 1 != 0).any() or (frame["occupancy"] < 0).any():
        raise DatasetError(f"Occupancy must be a non-negative integer in {csv_path}")

    samples = tuple(
        TelemetrySample(
            date=str(row.date).strip(),
            power_consumption=float(row.power_consumption),
            outdoor_temperature=float(row.outdoor_temperature),
            occupancy=int(row.occupancy),
        )
        for row in frame.itertuples(index=False)
    )
    logger.info(f"Dataset loaded with {len(samples)} rows from {csv_path}")
    return samples


class TelemetryCursor:
    """
    Cyclic read-only pointer into the dataset.

    ``advance()`` wraps back to row 0 after the last row; the wrap is
    logged and counted but is not an error.

    Example:
        cursor = TelemetryCursor(samples)
        sample = cursor.current()
        wrapped = cursor.advance()
    """

    def __init__(self, samples: Sequence[TelemetrySample]):
        self._samples: Tuple[TelemetrySample, ...] = tuple(samples)
        self._index = 0
        self._last_consumed: Optional[int] = None
        self.restart_count = 0

    @property
    def index(self) -> int:
        """Row the next tick will consume."""
        return self._index

    @property
    def last_consumed_index(self) -> int:
        """Row consumed by the most recent tick, 0 before the first tick."""
        return self._last_consumed if self._last_consumed is not None else 0

    @property
    def has_started(self) -> bool:
        return self._last_consumed is not None

    def __len__(self) -> int:
        return len(self._samples)

    def current(self) -> TelemetrySample:
        """Sample at the cursor position."""
        if not self._samples:
            raise DatasetError("Telemetry dataset is empty")
        return self._samples[self._index]

    def last_consumed(self) -> TelemetrySample:
        """Sample most recently consumed by a tick (row 0 if none yet)."""
        if not self._samples:
            raise DatasetError("Telemetry dataset is empty")
        return self._samples[self.last_consumed_index]

    def advance(self) -> bool:
        """
        Move to the next row.

        Returns:
            True if this call wrapped the cursor back to row 0
        """
        if not self._samples:
            raise DatasetError("Telemetry dataset is empty")

        self._last_consumed = self._index
        self._index += 1
        if self._index >= len(self._samples):
            self._index = 0
            self.restart_count += 1
            logger.info(
                f"--- End of dataset reached after {len(self._samples)} rows, "
                f"dataset restarted (restart #{self.restart_count}) ---"
            )
            return True
        return False
