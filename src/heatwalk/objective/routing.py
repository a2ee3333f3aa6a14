"""Objective function that routes the walk for every candidate time."""

from datetime import timedelta
from typing import Any, Optional

from heatwalk.core_types import ObjectiveValue, Point, WeightingType
from heatwalk.exceptions import ConfigurationError, InfeasibleError
from heatwalk.interfaces import ObjectiveFunctionPath, PathFinder, RoutingHelper
from heatwalk.registry import register_objective_function
from heatwalk.utils.logging import HeatwalkLogger
from heatwalk.utils.time_range import TimeRange

from .path import ObjectiveFunctionPathImpl

logger = HeatwalkLogger.get_logger(__name__)


@register_objective_function("routing")
class RoutingObjectiveFunction:
    """Scores a departure time by the cost of the route walked at that time.

    For each candidate the path from ``start`` to ``place`` is computed with
    ``weighting_type`` and handed to an ``ObjectiveFunctionPath``. Without an
    explicit ``objective_path`` the route weight from ``routing_helper`` (or
    from ``path_finder`` when it can also price routes) is used.

    A candidate is infeasible when it lies outside ``limits``, when no path
    exists, or when the walk takes less than ``min_walking_time``. With
    ``check_arrival`` the walker must also arrive by ``limits.upper``.
    """

    def __init__(
        self,
        path_finder: PathFinder,
        weighting_type: WeightingType,
        objective_path: Optional[ObjectiveFunctionPath] = None,
        routing_helper: Optional[RoutingHelper] = None,
        check_arrival: bool = False,
    ):
        if path_finder is None:
            raise ConfigurationError("RoutingObjectiveFunction requires a path finder")
        if not isinstance(weighting_type, WeightingType):
            raise ConfigurationError(
                f"RoutingObjectiveFunction requires a weighting type, got {weighting_type!r}"
            )
        if objective_path is None:
            objective_path = ObjectiveFunctionPathImpl(
                weighting_type, routing_helper if routing_helper is not None else path_finder
            )

        self.path_finder = path_finder
        self.weighting_type = weighting_type
        self.objective_path = objective_path
        self.check_arrival = check_arrival
        self._last_walking_time: Optional[timedelta] = None

    def evaluate(
        self,
        time: Any,
        start: Point,
        place: Point,
        limits: TimeRange,
        min_walking_time: Optional[timedelta],
    ) -> ObjectiveValue:
        """Like ``value`` but returns the walking time too and keeps no state."""
        if not limits.contains(time):
            return ObjectiveValue(None)

        try:
            path = self.path_finder.find_path(start, place, time, self.weighting_type)
        except InfeasibleError as exc:
            logger.debug(f"No path from {start} to {place} at {time}: {exc}")
            path = None
        if path is None:
            return ObjectiveValue(None)

        walking_time = path.walking_time
        if min_walking_time is not None and walking_time < min_walking_time:
            return ObjectiveValue(None, walking_time)
        if self.check_arrival and time + walking_time > limits.upper:
            return ObjectiveValue(None, walking_time)

        return ObjectiveValue(
            self.objective_path.value(time, path, self.weighting_type), walking_time
        )

    def value(
        self,
        time: Any,
        start: Point,
        place: Point,
        limits: TimeRange,
        min_walking_time: Optional[timedelta],
    ) -> Optional[float]:
        self._last_walking_time = None
        result = self.evaluate(time, start, place, limits, min_walking_time)
        self._last_walking_time = result.walking_time
        return result.value

    def get_weighting_type(self) -> Optional[WeightingType]:
        return self.weighting_type

    def get_last_walking_time(self) -> Optional[timedelta]:
        return self._last_walking_time

    def __repr__(self) -> str:
        return (
            f"RoutingObjectiveFunction(weighting_type={self.weighting_type}, "
            f"check_arrival={self.check_arrival})"
        )
