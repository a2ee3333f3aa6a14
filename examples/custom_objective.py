"""Custom objective-function example for heatwalk.

Registers an objective that scores a departure time by the air temperature
at that time only, read from an hourly weather table, and uses it for the
example walk.

Run:
    python examples/custom_objective.py
"""

from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Optional

import pandas as pd

import heatwalk as hw

DATA = Path(__file__).parent / "data"


@hw.register_objective_function("air_temperature")
class AirTemperatureObjective:
    """Temperature at departure, interpolated from a time series."""

    def __init__(self, temperatures: pd.Series):
        self.temperatures = temperatures.sort_index()

    def value(self, time: Any, start, place, limits, min_walking_time) -> Optional[float]:
        if not limits.contains(time):
            return None
        series = self.temperatures
        if time < series.index[0] or time > series.index[-1]:
            return None
        merged = series.reindex(series.index.union([pd.Timestamp(time)])).interpolate("time")
        return float(merged.loc[pd.Timestamp(time)])


def main() -> None:  # pragma: no cover – example script
    table = pd.read_csv(DATA / "routes.csv", parse_dates=["departure"])
    temperatures = table.set_index("departure")["temperature"]

    objective = hw.create_objective_function("air_temperature", temperatures=temperatures)
    router = hw.TabularRouter.from_csv(DATA / "routes.csv")
    recommendation = hw.find_departure_time(
        router,
        hw.Point(49.4840, 8.4756),
        hw.Point(49.4861, 8.4920),
        now=datetime(2026, 7, 1, 8, 0),
        latest=datetime(2026, 7, 1, 12, 0),
        step=timedelta(minutes=10),
        objective_function=objective,
    )
    print(recommendation)


if __name__ == "__main__":
    main()
