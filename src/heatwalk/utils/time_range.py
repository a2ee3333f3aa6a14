"""Closed interval over any totally ordered time type."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from heatwalk.exceptions import ConfigurationError, InvalidRangeError

T = TypeVar("T")

__all__ = ["TimeRange"]


@dataclass(frozen=True, slots=True)
class TimeRange(Generic[T]):
    """Immutable interval ``[lower, upper]``.

    Works for ``datetime``, ``time``, plain numbers or anything else that
    supports ordering; no time granularity is assumed. ``duration()`` needs
    the type to support subtraction as well.
    """

    lower: T
    upper: T

    def __post_init__(self):
        for bound in (self.lower, self.upper):
            # NaN and NaT are the only values unequal to themselves
            if bound is None or bound != bound:
                raise ConfigurationError(f"Time range bound is undefined: {bound!r}")
        try:
            reversed_bounds = self.lower > self.upper
        except TypeError as exc:
            raise ConfigurationError(
                f"Time range bounds are not comparable: {self.lower!r}, {self.upper!r}"
            ) from exc
        if reversed_bounds:
            raise InvalidRangeError(self.lower, self.upper)

    def contains(self, t: T) -> bool:
        """True if ``lower <= t <= upper``."""
        return t is not None and self.lower <= t <= self.upper

    def contains_exclusive(self, t: T) -> bool:
        """True if ``lower <= t < upper``."""
        return t is not None and self.lower <= t < self.upper

    def clamp(self, t: T) -> T:
        if t < self.lower:
            return self.lower
        if t > self.upper:
            return self.upper
        return t

    def duration(self) -> Any:
        return self.upper - self.lower

    def is_degenerate(self) -> bool:
        return self.lower == self.upper

    def as_tuple(self) -> tuple[T, T]:
        return (self.lower, self.upper)

    def __str__(self) -> str:
        return f"TimeRange: {self.lower} - {self.upper}"
