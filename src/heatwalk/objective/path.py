"""Default path-level objective: the route weight reported by the router."""

from typing import Any, Optional

from heatwalk.core_types import WalkPath, WeightingType
from heatwalk.exceptions import ConfigurationError, InfeasibleError
from heatwalk.interfaces import RoutingHelper
from heatwalk.utils.logging import HeatwalkLogger

logger = HeatwalkLogger.get_logger(__name__)


class ObjectiveFunctionPathImpl:
    """Scores a path with ``routing_helper.route_cost`` under a fixed weighting.

    The ``weighting`` passed to ``value`` is only validated; the weighting
    configured at construction is always the one used.
    """

    def __init__(self, weighting_type: WeightingType, routing_helper: RoutingHelper):
        if weighting_type is None:
            raise ConfigurationError("ObjectiveFunctionPathImpl requires a weighting type")
        if not isinstance(weighting_type, WeightingType):
            raise ConfigurationError(f"Not a weighting type: {weighting_type!r}")
        if routing_helper is None:
            raise ConfigurationError("ObjectiveFunctionPathImpl requires a routing helper")
        self.weighting_type = weighting_type
        self.routing_helper = routing_helper

    def value(
        self, time: Any, path: WalkPath, weighting: Optional[WeightingType] = None
    ) -> Optional[float]:
        if weighting is not None and not isinstance(weighting, WeightingType):
            raise ConfigurationError(f"Not a weighting type: {weighting!r}")
        try:
            cost = self.routing_helper.route_cost(path, time, self.weighting_type)
        except InfeasibleError as exc:
            logger.debug(f"No route cost at {time}: {exc}")
            return None
        return None if cost is None else float(cost)

    def __repr__(self) -> str:
        return f"ObjectiveFunctionPathImpl(weighting_type={self.weighting_type})"
