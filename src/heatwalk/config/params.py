"""Parameter container dataclasses for heatwalk.

Problem definition, search settings and I/O options live in separate
immutable dataclasses. A small mutable ``RuntimeParams`` bucket captures
flags that are never read from YAML but can be toggled programmatically.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional, Tuple

from heatwalk.core_types import OptimizationDirection, Point, WeightingType
from heatwalk.exceptions import ConfigurationError
from heatwalk.finder.window import DEFAULT_TIME_BUFFER
from heatwalk.utils.time_range import TimeRange

__all__ = [
    "ProblemParams",
    "SearchParams",
    "IOParams",
    "RuntimeParams",
    "HeatwalkParams",
]


# ---------------------------------------------------------------------------
# Problem definition parameters
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ProblemParams:
    """The trip: where from, where to and when the walker may leave."""

    start: Point
    place: Point
    latest: datetime
    earliest: Optional[datetime] = None
    # None: estimated from the shortest route at search time
    min_walking_time: Optional[timedelta] = None
    opening_hours: Tuple[TimeRange, ...] = ()

    def __post_init__(self):  # type: ignore[override]
        if self.earliest is not None and self.earliest > self.latest:
            raise ConfigurationError(
                f"ProblemParams.earliest ({self.earliest}) is after latest ({self.latest})."
            )
        if self.min_walking_time is not None and self.min_walking_time < timedelta(0):
            raise ConfigurationError("ProblemParams.min_walking_time must be non-negative.")
        for opening in self.opening_hours:
            if not isinstance(opening, TimeRange):
                raise ConfigurationError(
                    f"ProblemParams.opening_hours must contain TimeRange objects, got {opening!r}"
                )


# ---------------------------------------------------------------------------
# Search parameters – things that influence the scan
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SearchParams:
    """Sampling and selection settings."""

    step: timedelta = timedelta(minutes=15)
    direction: OptimizationDirection = OptimizationDirection.MINIMIZE
    weighting: WeightingType = WeightingType.HEAT_INDEX_WEIGHTED
    n_jobs: int = 1
    time_buffer: timedelta = DEFAULT_TIME_BUFFER
    check_arrival: bool = False
    # "routing" or "fixed_path"
    objective: str = "routing"

    def __post_init__(self):  # type: ignore[override]
        if self.step <= timedelta(0):
            raise ConfigurationError("SearchParams.step must be positive.")
        if self.time_buffer < timedelta(0):
            raise ConfigurationError("SearchParams.time_buffer must be non-negative.")
        if self.n_jobs == 0:
            raise ConfigurationError("SearchParams.n_jobs must not be 0 (use -1 for all cores).")
        if not isinstance(self.weighting, WeightingType):
            raise ConfigurationError(f"SearchParams.weighting is not a weighting type: {self.weighting!r}")
        if not isinstance(self.direction, OptimizationDirection):
            raise ConfigurationError(f"SearchParams.direction is invalid: {self.direction!r}")
        if self.objective not in ("routing", "fixed_path"):
            raise ConfigurationError(
                f"SearchParams.objective must be 'routing' or 'fixed_path', got {self.objective!r}"
            )


# ---------------------------------------------------------------------------
# IO parameters
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class IOParams:
    """Where the route table comes from."""

    routes_file: Path

    def __post_init__(self):  # type: ignore[override]
        # Ensure routes_file is absolute
        if not self.routes_file.is_absolute():
            object.__setattr__(
                self, "routes_file", (Path.cwd() / self.routes_file).resolve()
            )


# ---------------------------------------------------------------------------
# Runtime parameters – toggles that are never read from yaml
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class RuntimeParams:
    verbose: bool = False
    debug: bool = False


# ---------------------------------------------------------------------------
# Aggregate container
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class HeatwalkParams:
    """Aggregate parameter object passed to the API and the CLI."""

    problem: ProblemParams
    search: SearchParams
    io: IOParams
    runtime: RuntimeParams = field(default_factory=RuntimeParams)
