"""Protocol definitions for pluggable components in heatwalk."""

from datetime import timedelta
from typing import Any, Optional, Protocol

from heatwalk.core_types import Point, WalkPath, WeightingType
from heatwalk.utils.time_range import TimeRange


class PathFinder(Protocol):
    """Computes the walking path taken when departing at a given time."""

    def find_path(
        self,
        start: Point,
        place: Point,
        departure: Any,
        weighting: WeightingType,
    ) -> Optional[WalkPath]:
        """Return the path, or ``None`` (or raise ``PathNotFoundError``) if there is none."""
        ...


class RoutingHelper(Protocol):
    """Computes the cost of an existing path at a point in time."""

    def route_cost(self, path: WalkPath, time: Any, weighting: WeightingType) -> float:
        """Route weight of ``path`` at ``time``; may raise ``MissingDataError``."""
        ...


class ThermalComfort(Protocol):
    """Opaque thermal-comfort model, e.g. a heat index over weather records."""

    def value(self, time: Any) -> Optional[float]:
        """Stress index at ``time``, ``None`` if there is no data."""
        ...


class ObjectiveFunctionPath(Protocol):
    """Scores an already computed path at a given time."""

    def value(
        self, time: Any, path: WalkPath, weighting: Optional[WeightingType]
    ) -> Optional[float]:
        """Return the cost, or ``None`` if the combination cannot be scored."""
        ...


class ObjectiveFunction(Protocol):
    """Scores a departure time for a walk from ``start`` to ``place``.

    ``value`` is the only required operation. Implementations may also
    provide ``get_weighting_type()``, ``get_last_walking_time()`` and
    ``evaluate()`` (same arguments as ``value``, returning an
    ``ObjectiveValue``); the finder uses them when they exist.
    """

    def value(
        self,
        time: Any,
        start: Point,
        place: Point,
        limits: TimeRange,
        min_walking_time: timedelta,
    ) -> Optional[float]:
        """Return the value if the candidate is feasible and ``None`` otherwise."""
        ...
