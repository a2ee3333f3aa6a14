from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from heatwalk.utils.time_range import TimeRange


@dataclass(frozen=True)
class Point:
    """Geographic coordinate (WGS84)."""
    latitude: float
    longitude: float

    def __getitem__(self, key: str) -> float:
        if key == 'latitude':
            return self.latitude
        elif key == 'longitude':
            return self.longitude
        else:
            raise KeyError(f"Invalid key for Point: {key}")

    def as_tuple(self) -> Tuple[float, float]:
        return (self.latitude, self.longitude)

    def to_dict(self) -> Dict[str, float]:
        return {'latitude': self.latitude, 'longitude': self.longitude}

    def __str__(self) -> str:
        return f"({self.latitude:.6f}, {self.longitude:.6f})"


class WeightingType(Enum):
    """Cost model a route is weighted with."""
    SHORTEST = "shortest"
    TEMPERATURE = "temperature"
    HEAT_INDEX = "heatindex"
    HEAT_INDEX_WEIGHTED = "heatindexweighted"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, text: str) -> Optional['WeightingType']:
        """Case-insensitive lookup by string form; ``None`` if unknown."""
        if text is None:
            return None
        text = text.strip().lower()
        for member in cls:
            if member.value == text:
                return member
        return None


class OptimizationDirection(Enum):
    """Whether the finder looks for the smallest or the largest value."""
    MINIMIZE = "minimize"
    MAXIMIZE = "maximize"

    def better(self, candidate: float, incumbent: float) -> bool:
        """Strictly better; equal values are not an improvement."""
        if self is OptimizationDirection.MINIMIZE:
            return candidate < incumbent
        return candidate > incumbent


@dataclass(frozen=True)
class WalkPath:
    """A walking route as produced by a path finder.

    Opaque to the search; only ``walking_time`` is inspected.
    """
    start: Point
    place: Point
    departure: Any
    walking_time: timedelta
    distance: float = 0.0  # meters
    weighting: Optional[WeightingType] = None
    geometry: Tuple[Point, ...] = ()
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ObjectiveValue:
    """Objective value together with the walking time it was computed for.

    ``value is None`` means the candidate is infeasible. ``walking_time`` is
    ``None`` when no path could be computed at all.
    """
    value: Optional[float]
    walking_time: Optional[timedelta] = None

    @property
    def feasible(self) -> bool:
        return self.value is not None


@dataclass(frozen=True)
class CandidateEvaluation:
    """Result of scoring one sampled departure time."""
    time: Any
    value: Optional[float]
    walking_time: Optional[timedelta] = None

    @property
    def feasible(self) -> bool:
        return self.value is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'Time': self.time,
            'Value': self.value,
            'Walking_Time_Min': (
                self.walking_time.total_seconds() / 60
                if isinstance(self.walking_time, timedelta) else self.walking_time
            ),
            'Feasible': self.feasible,
        }

    @staticmethod
    def to_dataframe(evaluations: List['CandidateEvaluation']) -> pd.DataFrame:
        if len(evaluations) == 0:
            return pd.DataFrame(columns=['Time', 'Value', 'Walking_Time_Min', 'Feasible'])
        return pd.DataFrame([e.to_dict() for e in evaluations])


@dataclass(frozen=True)
class OptimalTime:
    """The extremal feasible candidate of one search."""
    time: Any
    value: float
    walking_time: Optional[timedelta] = None

    def as_tuple(self) -> Tuple[Any, float]:
        return (self.time, self.value)


@dataclass(frozen=True)
class DepartureRecommendation:
    """Best departure time across all search windows for one trip."""
    time: datetime
    value: float
    walking_time: Optional[timedelta]
    distance: Optional[float]
    window: TimeRange

    @property
    def arrival(self) -> Optional[datetime]:
        if self.walking_time is None:
            return None
        return self.time + self.walking_time

    def to_dict(self) -> Dict[str, Any]:
        return {
            'Departure': self.time.isoformat(),
            'Arrival': self.arrival.isoformat() if self.arrival else None,
            'Value': self.value,
            'Walking_Time_Min': (
                self.walking_time.total_seconds() / 60 if self.walking_time else None
            ),
            'Distance_M': self.distance,
            'Window_Start': self.window.lower.isoformat(),
            'Window_End': self.window.upper.isoformat(),
        }
