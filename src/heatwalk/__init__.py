"""heatwalk: optimal departure times for heat-stress-aware walking."""

__version__ = "0.1.0"

# Main API
from .api import find_departure_time, recommend, scan

# Core types
from .config.params import HeatwalkParams
from .core_types import (
    CandidateEvaluation,
    DepartureRecommendation,
    ObjectiveValue,
    OptimalTime,
    OptimizationDirection,
    Point,
    WalkPath,
    WeightingType,
)
from .exceptions import (
    CollaboratorError,
    ConfigurationError,
    InfeasibleError,
    InvalidRangeError,
    MissingDataError,
    OptimalTimeFinderError,
    PathNotFoundError,
)
from .finder import OptimalTimeFinder, search_windows
from .interfaces import (
    ObjectiveFunction,
    ObjectiveFunctionPath,
    PathFinder,
    RoutingHelper,
    ThermalComfort,
)
from .objective import (
    FixedPathObjectiveFunction,
    ObjectiveFunctionPathImpl,
    RoutingObjectiveFunction,
    ThermalComfortObjectiveFunction,
)

# Extension system
from .registry import create_objective_function, register_objective_function
from .routing import TabularRouter
from .utils.time_range import TimeRange

__all__ = [
    # Version
    "__version__",
    # Main API
    "find_departure_time",
    "recommend",
    "scan",
    "OptimalTimeFinder",
    "search_windows",
    # Types
    "HeatwalkParams",
    "TimeRange",
    "Point",
    "WeightingType",
    "OptimizationDirection",
    "WalkPath",
    "ObjectiveValue",
    "CandidateEvaluation",
    "OptimalTime",
    "DepartureRecommendation",
    # Errors
    "OptimalTimeFinderError",
    "ConfigurationError",
    "InvalidRangeError",
    "CollaboratorError",
    "InfeasibleError",
    "PathNotFoundError",
    "MissingDataError",
    # Objective functions
    "ObjectiveFunctionPathImpl",
    "FixedPathObjectiveFunction",
    "RoutingObjectiveFunction",
    "ThermalComfortObjectiveFunction",
    "TabularRouter",
    # Extensions
    "register_objective_function",
    "create_objective_function",
    "ObjectiveFunction",
    "ObjectiveFunctionPath",
    "PathFinder",
    "RoutingHelper",
    "ThermalComfort",
]
