"""
Synthetic Telemetry Generator for the Smart Office

Generates a realistic building telemetry series in the dataset format
the twin replays, for demos and tests when no historical export is
available.

Features:
- Diurnal outdoor temperature curve with noise
- Office-hours occupancy profile (weekdays only)
- Building power correlated with occupancy and cooling demand
- Weather profiles (mild, heatwave, cold snap)
- Export to CSV or as Python lists

Run with: python -m engine.generator data/cleandata.csv --days 7
"""

import argparse
import csv
import logging
import math
import random
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, Generator, List, Optional

logger = logging.getLogger(__name__)

CSV_HEADER = ["Date", "Power Consumption", "Outdoor Temperature", "Occupancy"]
DATE_FORMAT = "%Y-%m-%d %H:%M"


@dataclass
class WeatherProfile:
    """
    Outdoor conditions for a generated period.

    Attributes:
        name: Profile identifier
        mean_temp: Daily mean outdoor temperature (°C)
        daily_swing: Peak-to-mean amplitude of the daily curve (°C)
        noise: Uniform noise added to each reading (±°C)
    """
    name: str = "mild"
    mean_temp: float = 24.0
    daily_swing: float = 5.0
    noise: float = 0.5


PROFILES: Dict[str, WeatherProfile] = {
    "mild": WeatherProfile("mild", mean_temp=24.0, daily_swing=5.0),
    "heatwave": WeatherProfile("heatwave", mean_temp=33.0, daily_swing=6.0),
    "cold_snap": WeatherProfile("cold_snap", mean_temp=6.0, daily_swing=4.0),
}


@dataclass
class BuildingBaseline:
    """
    Electrical and occupancy baseline for a small office building.

    All values can be customized for different buildings.
    """
    base_load_kw: float = 35.0          # Lighting, IT, always-on loads
    kw_per_person: float = 1.1          # Plug loads per occupant
    cooling_kw_per_degree: float = 3.2  # Extra chiller load per °C above balance point
    heating_kw_per_degree: float = 2.0  # Extra heating load per °C below balance point
    balance_point: float = 20.0         # °C outdoor with no heating or cooling demand
    peak_occupancy: int = 40
    office_open_hour: int = 8
    office_close_hour: int = 18


class TelemetryGenerator:
    """
    Generator for synthetic building telemetry.

    Example:
        gen = TelemetryGenerator(profile="heatwave", random_seed=7)
        gen.generate_to_csv(
            start_time=datetime(2024, 7, 15),
            duration_days=3,
            filepath="data/heatwave.csv"
        )
    """

    def __init__(
        self,
        profile: str = "mild",
        baseline: Optional[BuildingBaseline] = None,
        random_seed: Optional[int] = None
    ):
        """
        Initialize the generator.

        Args:
            profile: Weather profile name (see PROFILES)
            baseline: Building baseline (uses defaults if None)
            random_seed: Seed for reproducible generation

        Raises:
            ValueError: If the profile name is unknown
        """
        if profile not in PROFILES:
            raise ValueError(f"Unknown weather profile: {profile}. Choose from {sorted(PROFILES)}")
        self.profile = PROFILES[profile]
        self.baseline = baseline or BuildingBaseline()
        self._random = random.Random(random_seed)

    def outdoor_temperature(self, timestamp: datetime) -> float:
        """
        Outdoor temperature following a daily sine curve.

        The minimum falls around 03:00 and the maximum around 15:00.
        """
        hour = timestamp.hour + timestamp.minute / 60.0
        curve = math.sin((hour - 9.0) * math.pi / 12.0)
        noise = self._random.uniform(-self.profile.noise, self.profile.noise)
        return self.profile.mean_temp + self.profile.daily_swing * curve + noise

    def occupancy(self, timestamp: datetime) -> int:
        """
        People in the building.

        Zero outside office hours and at weekends; a half-sine peak
        during the working day.
        """
        b = self.baseline
        hour = timestamp.hour + timestamp.minute / 60.0
        if timestamp.weekday() >= 5 or not (b.office_open_hour <= hour < b.office_close_hour):
            return 0

        span = b.office_close_hour - b.office_open_hour
        shape = math.sin((hour - b.office_open_hour) * math.pi / span)
        jitter = self._random.uniform(-0.1, 0.1)
        return max(0, int(round(b.peak_occupancy * (0.4 + 0.6 * shape + jitter))))

    def building_power(self, outdoor_temp: float, occupancy: int) -> float:
        """Metered building power in kW."""
        b = self.baseline
        power = b.base_load_kw + occupancy * b.kw_per_person
        if outdoor_temp > b.balance_point:
            power += (outdoor_temp - b.balance_point) * b.cooling_kw_per_degree
        else:
            power += (b.balance_point - outdoor_temp) * b.heating_kw_per_degree
        return power + self._random.uniform(0, 2.0)

    def generate_reading(self, timestamp: datetime) -> Dict[str, Any]:
        """
        Generate a single telemetry row.

        Args:
            timestamp: Timestamp for the reading

        Returns:
            Dictionary keyed by the dataset CSV header
        """
        outdoor = self.outdoor_temperature(timestamp)
        people = self.occupancy(timestamp)
        return {
            "Date": timestamp.strftime(DATE_FORMAT),
            "Power Consumption": round(self.building_power(outdoor, people), 2),
            "Outdoor Temperature": round(outdoor, 1),
            "Occupancy": people,
        }

    def generate_batch(
        self,
        start_time: datetime,
        duration_days: int,
        interval_minutes: int = 15
    ) -> Generator[Dict[str, Any], None, None]:
        """
        Generate readings over a time period.

        Args:
            start_time: Start timestamp
            duration_days: Number of days to generate
            interval_minutes: Minutes between readings (default 15, one tick)

        Yields:
            Telemetry row dictionaries
        """
        if duration_days <= 0:
            raise ValueError("duration_days must be positive")
        if interval_minutes <= 0:
            raise ValueError("interval_minutes must be positive")

        current_time = start_time
        end_time = start_time + timedelta(days=duration_days)
        while current_time < end_time:
            yield self.generate_reading(current_time)
            current_time += timedelta(minutes=interval_minutes)

    def generate_to_list(
        self,
        start_time: datetime,
        duration_days: int,
        interval_minutes: int = 15
    ) -> List[Dict[str, Any]]:
        return list(self.generate_batch(start_time, duration_days, interval_minutes))

    def generate_to_csv(
        self,
        start_time: datetime,
        duration_days: int,
        interval_minutes: int = 15,
        filepath: str = "data/cleandata.csv"
    ) -> str:
        """
        Generate readings and save them in the dataset CSV format.

        Returns:
            Filepath of saved CSV
        """
        readings = self.generate_to_list(start_time, duration_days, interval_minutes)

        with open(filepath, 'w', newline='') as f:
            writer = csv.DictWriter(f, fieldnames=CSV_HEADER)
            writer.writeheader()
            writer.writerows(readings)

        logger.info(f"Wrote {len(readings)} rows ({self.profile.name}) to {filepath}")
        return filepath


def generate_dataset(
    filepath: str,
    duration_days: int = 7,
    profile: str = "mild",
    start_time: Optional[datetime] = None,
    random_seed: Optional[int] = None
) -> str:
    """
    Convenience function to write a demo dataset.

    Example:
        generate_dataset("data/cleandata.csv", duration_days=2, profile="heatwave")
    """
    generator = TelemetryGenerator(profile=profile, random_seed=random_seed)
    start = start_time or datetime(2024, 7, 15)
    return generator.generate_to_csv(start, duration_days, filepath=filepath)


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Generate a synthetic smart-office telemetry dataset")
    parser.add_argument("filepath", help="Output CSV path")
    parser.add_argument("--days", type=int, default=7, help="Number of days to generate")
    parser.add_argument("--profile", choices=sorted(PROFILES), default="mild")
    parser.add_argument("--start", default="2024-07-15", help="Start date (YYYY-MM-DD)")
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    generate_dataset(
        args.filepath,
        duration_days=args.days,
        profile=args.profile,
        start_time=datetime.strptime(args.start, "%Y-%m-%d"),
        random_seed=args.seed,
    )


if __name__ == "__main__":
    main()
