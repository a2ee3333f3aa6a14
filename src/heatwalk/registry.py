"""Registry for pluggable objective-function strategies."""

from typing import Any

from heatwalk.utils.logging import HeatwalkLogger

from .exceptions import ConfigurationError
from .interfaces import ObjectiveFunction

logger = HeatwalkLogger.get_logger(__name__)

OBJECTIVE_FUNCTION_REGISTRY: dict[str, type[ObjectiveFunction]] = {}

__all__ = [
    "register_objective_function",
    "create_objective_function",
    # Expose registry for advanced users who need direct access
    "OBJECTIVE_FUNCTION_REGISTRY",
]


def register_objective_function(name: str):
    """Decorator to register an objective function implementation."""

    def decorator(cls: type[ObjectiveFunction]):
        if name in OBJECTIVE_FUNCTION_REGISTRY:
            raise ValueError(f"Objective function '{name}' is already registered")
        OBJECTIVE_FUNCTION_REGISTRY[name] = cls
        return cls

    return decorator


def create_objective_function(name: str, **kwargs: Any) -> ObjectiveFunction:
    """Instantiate the objective function registered under ``name``."""
    try:
        cls = OBJECTIVE_FUNCTION_REGISTRY[name]
    except KeyError as exc:
        available = ", ".join(sorted(OBJECTIVE_FUNCTION_REGISTRY)) or "none"
        raise ConfigurationError(
            f"Unknown objective function '{name}' (available: {available})"
        ) from exc
    logger.debug(f"Creating objective function '{name}' ({cls.__name__})")
    return cls(**kwargs)
