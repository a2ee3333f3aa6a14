"""Derive search windows from opening hours and the caller's time bounds."""

from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from heatwalk.utils.logging import HeatwalkLogger
from heatwalk.utils.time_range import TimeRange

logger = HeatwalkLogger.get_logger(__name__)

DEFAULT_TIME_BUFFER = timedelta(minutes=15)


def search_window(
    opening: TimeRange,
    now: datetime,
    min_walking_time: timedelta,
    time_buffer: timedelta = DEFAULT_TIME_BUFFER,
    earliest: Optional[datetime] = None,
    latest: Optional[datetime] = None,
) -> Optional[TimeRange]:
    """Departure window for one opening interval of the destination.

    The walker may not leave before the place opens, before ``now`` or before
    ``earliest``, and must leave early enough to arrive ``time_buffer`` before
    closing. Returns ``None`` when no departure time is left.
    """
    lower = max(t for t in (opening.lower, now, earliest) if t is not None)
    upper = min(
        t
        for t in (opening.upper - time_buffer - min_walking_time, latest)
        if t is not None
    )
    logger.debug(f"Window for {opening}: lower = {lower}, upper = {upper}, now = {now}")
    if lower < upper and now <= upper:
        return TimeRange(lower, upper)
    return None


def search_windows(
    opening_hours: Iterable[TimeRange],
    now: datetime,
    min_walking_time: timedelta,
    time_buffer: timedelta = DEFAULT_TIME_BUFFER,
    earliest: Optional[datetime] = None,
    latest: Optional[datetime] = None,
) -> List[TimeRange]:
    """All non-empty windows, one per opening interval.

    Without any opening interval the destination is treated as always open
    and the window is ``[max(earliest, now), latest]``.
    """
    opening_hours = list(opening_hours)
    if not opening_hours:
        if latest is None:
            return []
        lower = max(t for t in (earliest, now) if t is not None)
        if lower > latest:
            return []
        return [TimeRange(lower, latest)]

    windows = []
    for opening in opening_hours:
        window = search_window(opening, now, min_walking_time, time_buffer, earliest, latest)
        if window is not None:
            windows.append(window)
    return windows
