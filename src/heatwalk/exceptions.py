"""Error taxonomy for the optimal-time search.

Infeasibility is not an error for callers of the finder: it is an absent
objective value. The ``InfeasibleError`` family only exists so routing and
comfort collaborators can signal it; those exceptions are absorbed at the
objective-function boundary. Everything deriving from
``OptimalTimeFinderError`` aborts the current search.
"""

__all__ = [
    "OptimalTimeFinderError",
    "ConfigurationError",
    "InvalidRangeError",
    "CollaboratorError",
    "InfeasibleError",
    "PathNotFoundError",
    "MissingDataError",
]


class OptimalTimeFinderError(RuntimeError):
    """Root of all faults that abort a search."""


class ConfigurationError(OptimalTimeFinderError, ValueError):
    """The search or one of its parameters is misconfigured."""


class InvalidRangeError(ConfigurationError):
    """A time range was built with ``lower > upper``."""

    def __init__(self, lower, upper):
        super().__init__(f"Invalid time range: lower bound {lower} is after upper bound {upper}")
        self.lower = lower
        self.upper = upper


class CollaboratorError(OptimalTimeFinderError):
    """A routing or cost collaborator failed unexpectedly."""


class InfeasibleError(Exception):
    """Raised by collaborators when a candidate simply cannot be scored."""


class PathNotFoundError(InfeasibleError):
    """No walking path exists between the requested points."""


class MissingDataError(InfeasibleError):
    """The cost model has no data for the requested time."""
