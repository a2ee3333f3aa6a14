"""Objective function that routes once and prices the same path over time."""

import threading
from datetime import timedelta
from typing import Any, Dict, Optional, Tuple

from heatwalk.core_types import ObjectiveValue, Point, WalkPath, WeightingType
from heatwalk.exceptions import ConfigurationError, InfeasibleError
from heatwalk.interfaces import ObjectiveFunctionPath, PathFinder, RoutingHelper
from heatwalk.registry import register_objective_function
from heatwalk.utils.logging import HeatwalkLogger
from heatwalk.utils.time_range import TimeRange

from .path import ObjectiveFunctionPathImpl

logger = HeatwalkLogger.get_logger(__name__)


@register_objective_function("fixed_path")
class FixedPathObjectiveFunction:
    """Scores every candidate time on one reference path.

    The path is routed once per start/destination pair with ``route_weighting``
    (the shortest route by default) at the first candidate time it is asked
    for, then priced at each candidate with an ``ObjectiveFunctionPath`` under
    ``weighting_type``. This costs one routing call per trip instead of one
    per candidate; the route actually walked at the optimum is computed
    afterwards by the caller.
    """

    def __init__(
        self,
        path_finder: PathFinder,
        weighting_type: WeightingType = WeightingType.HEAT_INDEX_WEIGHTED,
        objective_path: Optional[ObjectiveFunctionPath] = None,
        routing_helper: Optional[RoutingHelper] = None,
        route_weighting: WeightingType = WeightingType.SHORTEST,
    ):
        if path_finder is None:
            raise ConfigurationError("FixedPathObjectiveFunction requires a path finder")
        for name, weighting in (("weighting_type", weighting_type), ("route_weighting", route_weighting)):
            if not isinstance(weighting, WeightingType):
                raise ConfigurationError(
                    f"FixedPathObjectiveFunction.{name} is not a weighting type: {weighting!r}"
                )
        if objective_path is None:
            objective_path = ObjectiveFunctionPathImpl(
                weighting_type, routing_helper if routing_helper is not None else path_finder
            )

        self.path_finder = path_finder
        self.weighting_type = weighting_type
        self.route_weighting = route_weighting
        self.objective_path = objective_path
        self._paths: Dict[Tuple[Point, Point], Optional[WalkPath]] = {}
        self._lock = threading.Lock()
        self._last_walking_time: Optional[timedelta] = None

    def reference_path(self, start: Point, place: Point, time: Any) -> Optional[WalkPath]:
        """The cached path for ``start`` to ``place``, routed at ``time`` on first use."""
        key = (start, place)
        with self._lock:
            if key not in self._paths:
                try:
                    path = self.path_finder.find_path(start, place, time, self.route_weighting)
                except InfeasibleError as exc:
                    logger.debug(f"No reference path from {start} to {place}: {exc}")
                    path = None
                self._paths[key] = path
            return self._paths[key]

    def evaluate(
        self,
        time: Any,
        start: Point,
        place: Point,
        limits: TimeRange,
        min_walking_time: Optional[timedelta],
    ) -> ObjectiveValue:
        if not limits.contains(time):
            return ObjectiveValue(None)

        path = self.reference_path(start, place, time)
        if path is None:
            return ObjectiveValue(None)

        walking_time = path.walking_time
        if min_walking_time is not None and walking_time < min_walking_time:
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
            f"FixedPathObjectiveFunction(weighting_type={self.weighting_type}, "
            f"route_weighting={self.route_weighting})"
        )
