"""Utility helpers shared across heatwalk."""

from .time_range import TimeRange

__all__ = ["TimeRange"]
