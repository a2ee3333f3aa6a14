"""Time-domain search for the optimal departure time."""

from .core import OptimalTimeFinder, generate_candidate_times, select_best
from .window import DEFAULT_TIME_BUFFER, search_window, search_windows

__all__ = [
    "OptimalTimeFinder",
    "generate_candidate_times",
    "select_best",
    "DEFAULT_TIME_BUFFER",
    "search_window",
    "search_windows",
]
