"""Configuration module for heatwalk parameters."""

from .loader import load_yaml as load_heatwalk_params
from .params import (
    HeatwalkParams,
    IOParams,
    ProblemParams,
    RuntimeParams,
    SearchParams,
)

__all__ = [
    "ProblemParams",
    "SearchParams",
    "IOParams",
    "RuntimeParams",
    "HeatwalkParams",
    "load_heatwalk_params",
]
