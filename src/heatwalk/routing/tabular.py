"""
tabular.py

Table-driven routing collaborator. A CSV lists, for one start/destination
pair, the walk found when departing at a given time: its duration, its
distance and its route weight under each weighting (one column per weighting
name, e.g. ``heatindex``). Lookups use the latest row at or before the
requested time.

Example::

    departure,duration_min,distance_m,shortest,heatindex
    2026-07-01T08:00,14.5,1180,1180,4.2
    2026-07-01T08:15,14.5,1180,1180,3.9
"""

from datetime import timedelta
from pathlib import Path
from typing import Any, Optional

import pandas as pd

from heatwalk.core_types import Point, WalkPath, WeightingType
from heatwalk.exceptions import MissingDataError
from heatwalk.utils.logging import HeatwalkLogger

logger = HeatwalkLogger.get_logger(__name__)

REQUIRED_COLUMNS = ("departure", "duration_min")


class TabularRouter:
    """Path finder and route-cost evaluator backed by a ``DataFrame``."""

    def __init__(self, table: pd.DataFrame):
        table = table.copy()
        table.columns = [str(c).strip().lower() for c in table.columns]
        missing = [c for c in REQUIRED_COLUMNS if c not in table.columns]
        if missing:
            raise ValueError(f"Route table is missing required columns: {missing}")
        if table.empty:
            raise ValueError("Route table is empty")

        table["departure"] = pd.to_datetime(table["departure"])
        if "distance_m" not in table.columns:
            table["distance_m"] = 0.0
        self.table = table.sort_values("departure").set_index("departure")

    @classmethod
    def from_csv(cls, path: str | Path) -> "TabularRouter":
        csv_path = Path(path)
        if not csv_path.exists():
            raise FileNotFoundError(csv_path)
        table = pd.read_csv(csv_path)
        logger.debug(f"Loaded {len(table)} route rows from {csv_path}")
        return cls(table)

    @property
    def weightings(self) -> list[WeightingType]:
        return [w for w in WeightingType if w.value in self.table.columns]

    def _row(self, time: Any) -> Optional[pd.Series]:
        idx = self.table.index.searchsorted(pd.Timestamp(time), side="right") - 1
        if idx < 0:
            return None
        return self.table.iloc[idx]

    def find_path(
        self, start: Point, place: Point, departure: Any, weighting: WeightingType
    ) -> Optional[WalkPath]:
        row = self._row(departure)
        if row is None or pd.isna(row["duration_min"]):
            return None
        return WalkPath(
            start=start,
            place=place,
            departure=departure,
            walking_time=timedelta(minutes=float(row["duration_min"])),
            distance=float(row["distance_m"]) if not pd.isna(row["distance_m"]) else 0.0,
            weighting=weighting,
        )

    def route_cost(self, path: WalkPath, time: Any, weighting: WeightingType) -> float:
        column = str(weighting)
        if column not in self.table.columns:
            raise KeyError(f"Route table has no cost column for weighting '{column}'")
        row = self._row(time)
        if row is None:
            raise MissingDataError(f"No route data at {time}")
        cost = row[column]
        if pd.isna(cost):
            raise MissingDataError(f"No '{column}' cost at {time}")
        return float(cost)
