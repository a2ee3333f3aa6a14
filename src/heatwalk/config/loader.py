"""Load heatwalk configuration YAML files into the parameter dataclasses.

Expected layout::

    start: {latitude: 49.4875, longitude: 8.4660}
    place: {latitude: 49.4930, longitude: 8.4750}
    earliest: 2026-07-01T08:00:00
    latest: 2026-07-01T12:00:00
    min_walking_minutes: 10          # optional
    opening_hours:                   # optional
      - {open: 2026-07-01T09:00:00, close: 2026-07-01T18:00:00}
    search:
      step_minutes: 15
      direction: minimize
      weighting: heatindexweighted
      n_jobs: 1
      time_buffer_minutes: 15
      check_arrival: false
      objective: routing              # or fixed_path
    routes_file: routes.csv          # relative to the YAML file
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any, Dict

import yaml

from heatwalk.core_types import OptimizationDirection, Point, WeightingType
from heatwalk.exceptions import ConfigurationError
from heatwalk.utils.logging import HeatwalkLogger
from heatwalk.utils.time_range import TimeRange

from .params import HeatwalkParams, IOParams, ProblemParams, SearchParams

logger = HeatwalkLogger.get_logger(__name__)

# ---------------------------------------------------------------------------
# Helper parsing routines
# ---------------------------------------------------------------------------


def _parse_datetime(value: Any, key: str) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        raise ConfigurationError(f"'{key}' needs a time of day, got a date: {value}")
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError as exc:
            raise ConfigurationError(f"'{key}' is not an ISO datetime: {value!r}") from exc
    raise ConfigurationError(f"'{key}' is not a datetime: {value!r}")


def _parse_point(raw: Any, key: str) -> Point:
    if not isinstance(raw, dict):
        raise ConfigurationError(f"'{key}' must be a mapping with latitude and longitude.")
    try:
        return Point(latitude=float(raw["latitude"]), longitude=float(raw["longitude"]))
    except (KeyError, TypeError, ValueError) as exc:
        raise ConfigurationError(f"'{key}' needs numeric latitude and longitude.") from exc


def _parse_minutes(value: Any, key: str) -> timedelta:
    try:
        return timedelta(minutes=float(value))
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"'{key}' must be a number of minutes, got {value!r}") from exc


def _parse_opening_hours(raw: Any) -> tuple[TimeRange, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise ConfigurationError("'opening_hours' must be a list of intervals.")

    intervals = []
    for i, item in enumerate(raw):
        key = f"opening_hours[{i}]"
        if isinstance(item, dict):
            if "open" not in item or "close" not in item:
                raise ConfigurationError(f"'{key}' needs 'open' and 'close'.")
            lower, upper = item["open"], item["close"]
        elif isinstance(item, (list, tuple)) and len(item) == 2:
            lower, upper = item
        else:
            raise ConfigurationError(f"'{key}' must be {{open, close}} or a pair.")
        intervals.append(
            TimeRange(_parse_datetime(lower, key), _parse_datetime(upper, key))
        )
    return tuple(intervals)


def _parse_search(raw: Dict[str, Any]) -> SearchParams:
    raw = dict(raw or {})
    kwargs: Dict[str, Any] = {}

    if "step_minutes" in raw:
        kwargs["step"] = _parse_minutes(raw.pop("step_minutes"), "search.step_minutes")
    if "time_buffer_minutes" in raw:
        kwargs["time_buffer"] = _parse_minutes(
            raw.pop("time_buffer_minutes"), "search.time_buffer_minutes"
        )
    if "direction" in raw:
        direction = str(raw.pop("direction")).strip().lower()
        try:
            kwargs["direction"] = OptimizationDirection(direction)
        except ValueError as exc:
            raise ConfigurationError(
                f"'search.direction' must be 'minimize' or 'maximize', got {direction!r}"
            ) from exc
    if "weighting" in raw:
        text = raw.pop("weighting")
        weighting = WeightingType.parse(str(text))
        if weighting is None:
            valid = ", ".join(w.value for w in WeightingType)
            raise ConfigurationError(f"Unknown weighting {text!r} (valid: {valid})")
        kwargs["weighting"] = weighting
    if "n_jobs" in raw:
        n_jobs = raw.pop("n_jobs")
        try:
            kwargs["n_jobs"] = int(n_jobs)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"'search.n_jobs' must be an integer, got {n_jobs!r}") from exc
    if "check_arrival" in raw:
        kwargs["check_arrival"] = bool(raw.pop("check_arrival"))
    if "objective" in raw:
        kwargs["objective"] = str(raw.pop("objective")).strip().lower()

    if raw:
        unknown_keys = ", ".join(sorted(raw.keys()))
        raise ConfigurationError(f"Unknown keys in 'search' section: {unknown_keys}")
    return SearchParams(**kwargs)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_yaml(path: str | Path) -> HeatwalkParams:
    """Load a YAML configuration file into ``HeatwalkParams``."""

    cfg_path = Path(path)
    if not cfg_path.exists():
        raise FileNotFoundError(cfg_path)

    try:
        with cfg_path.open() as f:
            data: Dict[str, Any] = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(
            f"Error parsing YAML configuration {cfg_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration {cfg_path} must be a mapping.")

    # ---------------------------------------------------------------------
    # Problem definition
    # ---------------------------------------------------------------------

    for key in ("start", "place", "latest"):
        if key not in data:
            raise ConfigurationError(f"YAML missing required key '{key}'.")

    start = _parse_point(data.pop("start"), "start")
    place = _parse_point(data.pop("place"), "place")
    latest = _parse_datetime(data.pop("latest"), "latest")
    earliest_raw = data.pop("earliest", None)
    earliest = _parse_datetime(earliest_raw, "earliest") if earliest_raw is not None else None
    min_walking_raw = data.pop("min_walking_minutes", None)
    min_walking_time = (
        _parse_minutes(min_walking_raw, "min_walking_minutes")
        if min_walking_raw is not None
        else None
    )

    problem = ProblemParams(
        start=start,
        place=place,
        latest=latest,
        earliest=earliest,
        min_walking_time=min_walking_time,
        opening_hours=_parse_opening_hours(data.pop("opening_hours", None)),
    )

    # ---------------------------------------------------------------------
    # Search parameters
    # ---------------------------------------------------------------------

    search = _parse_search(data.pop("search", {}))

    # ---------------------------------------------------------------------
    # IO parameters
    # ---------------------------------------------------------------------

    routes_file = data.pop("routes_file", None)
    if routes_file is None:
        raise ConfigurationError("YAML missing required key 'routes_file'.")
    routes_path = Path(routes_file)
    if not routes_path.is_absolute():
        routes_path = (cfg_path.parent / routes_path).resolve()
    io_params = IOParams(routes_file=routes_path)

    # Any remaining unknown keys will raise an error to avoid silent mistakes.
    if data:
        unknown_keys = ", ".join(sorted(data.keys()))
        raise ConfigurationError(
            f"Unknown top-level configuration keys in YAML: {unknown_keys}"
        )

    logger.debug(
        "Loaded configuration - problem: %s search: %s io: %s",
        problem,
        search,
        io_params,
    )

    return HeatwalkParams(problem=problem, search=search, io=io_params)
