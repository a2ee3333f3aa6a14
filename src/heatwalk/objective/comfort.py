"""Objective function based on the thermal-comfort model alone."""

from datetime import timedelta
from typing import Any, Optional

from heatwalk.core_types import Point, WeightingType
from heatwalk.exceptions import ConfigurationError, MissingDataError
from heatwalk.interfaces import ThermalComfort
from heatwalk.registry import register_objective_function
from heatwalk.utils.time_range import TimeRange


@register_objective_function("thermal_comfort")
class ThermalComfortObjectiveFunction:
    """Scores a time by the stress index only, ignoring the route."""

    def __init__(self, thermal_comfort: ThermalComfort):
        if thermal_comfort is None:
            raise ConfigurationError("ThermalComfortObjectiveFunction requires a comfort model")
        self.thermal_comfort = thermal_comfort

    def value(
        self,
        time: Any,
        start: Point,
        place: Point,
        limits: TimeRange,
        min_walking_time: Optional[timedelta],
    ) -> Optional[float]:
        if not limits.contains(time):
            return None
        try:
            return self.thermal_comfort.value(time)
        except MissingDataError:
            return None

    def get_weighting_type(self) -> Optional[WeightingType]:
        return WeightingType.SHORTEST
