"""Objective functions scoring candidate departure times."""

from .comfort import ThermalComfortObjectiveFunction
from .fixed_path import FixedPathObjectiveFunction
from .path import ObjectiveFunctionPathImpl
from .routing import RoutingObjectiveFunction

__all__ = [
    "FixedPathObjectiveFunction",
    "ObjectiveFunctionPathImpl",
    "RoutingObjectiveFunction",
    "ThermalComfortObjectiveFunction",
]
