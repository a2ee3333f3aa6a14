"""
API facade for heatwalk - provides a single entry point for programmatic usage.
"""

import dataclasses
import threading
import time as _time
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Iterable, List, Optional, Tuple

from heatwalk.config import load_heatwalk_params
from heatwalk.config.params import HeatwalkParams, RuntimeParams
from heatwalk.core_types import (
    CandidateEvaluation,
    DepartureRecommendation,
    OptimalTime,
    OptimizationDirection,
    Point,
    WeightingType,
)
from heatwalk.exceptions import ConfigurationError, PathNotFoundError
from heatwalk.finder import DEFAULT_TIME_BUFFER, OptimalTimeFinder, search_windows
from heatwalk.interfaces import ObjectiveFunction
from heatwalk.objective import (  # noqa: F401  registers the router objectives
    FixedPathObjectiveFunction,
    RoutingObjectiveFunction,
)
from heatwalk.registry import create_objective_function
from heatwalk.routing import TabularRouter
from heatwalk.utils.logging import HeatwalkLogger, LogLevel, log_warning, setup_logging
from heatwalk.utils.time_range import TimeRange

logger = HeatwalkLogger.get_logger("heatwalk.api")


def estimate_min_walking_time(
    router: Any, start: Point, place: Point, now: datetime
) -> Optional[timedelta]:
    """Walking time of the shortest route when leaving ``now``, ``None`` if unreachable."""
    try:
        path = router.find_path(start, place, now, WeightingType.SHORTEST)
    except PathNotFoundError:
        path = None
    if path is None:
        return None
    return path.walking_time


ROUTER_OBJECTIVES = ("routing", "fixed_path")


def _routing_objective(
    name: str, router: Any, weighting: WeightingType, check_arrival: bool
) -> ObjectiveFunction:
    if name not in ROUTER_OBJECTIVES:
        raise ConfigurationError(
            f"Unknown router objective '{name}' (expected one of {', '.join(ROUTER_OBJECTIVES)})"
        )
    kwargs = {"path_finder": router, "weighting_type": weighting}
    if name == "routing":
        kwargs["check_arrival"] = check_arrival
    return create_objective_function(name, **kwargs)


def find_departure_time(
    router: Any,
    start: Point,
    place: Point,
    now: datetime,
    latest: Optional[datetime] = None,
    earliest: Optional[datetime] = None,
    opening_hours: Iterable[TimeRange] = (),
    min_walking_time: Optional[timedelta] = None,
    step: timedelta = timedelta(minutes=15),
    direction: OptimizationDirection = OptimizationDirection.MINIMIZE,
    weighting: WeightingType = WeightingType.HEAT_INDEX_WEIGHTED,
    time_buffer: timedelta = DEFAULT_TIME_BUFFER,
    objective_function: Optional[ObjectiveFunction] = None,
    check_arrival: bool = False,
    objective: str = "routing",
    n_jobs: Optional[int] = 1,
    cancel_event: Optional[threading.Event] = None,
    timeout: Optional[float] = None,
) -> Optional[DepartureRecommendation]:
    """
    Recommend when to leave ``start`` to walk to ``place`` with the least heat stress.

    Args:
        router: Routing collaborator providing ``find_path`` (and ``route_cost``
            unless ``objective_function`` is given).
        start, place: Trip end points.
        now: Current time; departures before it are not considered.
        latest, earliest: Outer bounds on the departure time.
        opening_hours: Opening intervals of the destination. Without any,
            the window is ``[max(earliest, now), latest]``.
        min_walking_time: Walks shorter than this are infeasible. ``None``
            estimates it from the shortest route at ``now``.
        step: Sampling step of the scan.
        direction: Minimize (default) or maximize the objective.
        weighting: Weighting used for routing and scoring.
        time_buffer: Arrival margin before the destination closes.
        objective_function: Replaces the default routing objective.
        check_arrival: Require arrival before the end of the window.
        objective: Registered router-based objective used when
            ``objective_function`` is not given: ``"routing"`` routes every
            candidate, ``"fixed_path"`` prices one shortest route over time.
        n_jobs: Concurrent evaluations per window.
        cancel_event, timeout: Stop the search early and keep the best so far.

    Returns:
        The best recommendation across all windows, or ``None`` if no time is
        feasible.

    Raises:
        ConfigurationError: If the search is misconfigured.
        CollaboratorError: If the router fails unexpectedly.

    Example:
        >>> router = TabularRouter.from_csv("routes.csv")
        >>> rec = find_departure_time(router, start, place, now, latest=now + timedelta(hours=4))
        >>> print(rec.time if rec else "no feasible time")
    """
    if min_walking_time is None:
        min_walking_time = estimate_min_walking_time(router, start, place, now)
        if min_walking_time is None:
            log_warning(f"No route from {start} to {place}; nothing to recommend")
            return None
        logger.info(f"Estimated minimum walking time: {min_walking_time}")

    windows = search_windows(
        opening_hours, now, min_walking_time, time_buffer, earliest, latest
    )
    if not windows:
        logger.info("No departure window left")
        return None

    if objective_function is None:
        objective_function = _routing_objective(objective, router, weighting, check_arrival)

    # One deadline for the whole search, shared by all windows.
    deadline = _time.monotonic() + timeout if timeout is not None else None

    best: Optional[Tuple[OptimalTime, TimeRange]] = None
    for window in windows:
        if cancel_event is not None and cancel_event.is_set():
            break
        remaining = None
        if deadline is not None:
            remaining = deadline - _time.monotonic()
            if remaining <= 0:
                logger.info(f"Search timed out before window {window}")
                break
        finder = OptimalTimeFinder(
            objective_function=objective_function,
            limits=window,
            step=step,
            start=start,
            place=place,
            min_walking_time=min_walking_time,
            direction=direction,
            n_jobs=n_jobs,
        )
        optimum = finder.find_optimal_time(cancel_event=cancel_event, timeout=remaining)
        if optimum is None:
            continue
        if (
            best is None
            or direction.better(optimum.value, best[0].value)
            or (optimum.value == best[0].value and optimum.time < best[0].time)
        ):
            best = (optimum, window)

    if best is None:
        return None

    optimum, window = best
    # Route once more at the optimum to report the walk itself.
    try:
        path = router.find_path(start, place, optimum.time, weighting)
    except PathNotFoundError:
        path = None
    return DepartureRecommendation(
        time=optimum.time,
        value=optimum.value,
        walking_time=path.walking_time if path is not None else optimum.walking_time,
        distance=path.distance if path is not None else None,
        window=window,
    )


def _resolve_params(config: str | Path | HeatwalkParams) -> HeatwalkParams:
    if isinstance(config, HeatwalkParams):
        return config
    config_path = Path(config)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path}\n"
            f"Please check the file path and ensure it exists."
        )
    return load_heatwalk_params(config_path)


def _apply_overrides(
    params: HeatwalkParams,
    step: Optional[timedelta],
    direction: Optional[OptimizationDirection],
    n_jobs: Optional[int],
) -> HeatwalkParams:
    overrides = {}
    if step is not None:
        overrides["step"] = step
    if direction is not None:
        overrides["direction"] = direction
    if n_jobs is not None:
        overrides["n_jobs"] = n_jobs
    if not overrides:
        return params
    return dataclasses.replace(params, search=dataclasses.replace(params.search, **overrides))


def recommend(
    config: str | Path | HeatwalkParams,
    now: Optional[datetime] = None,
    routes: str | Path | None = None,
    step: Optional[timedelta] = None,
    direction: Optional[OptimizationDirection] = None,
    n_jobs: Optional[int] = None,
    timeout: Optional[float] = None,
    verbose: bool = False,
) -> Optional[DepartureRecommendation]:
    """
    Run ``find_departure_time`` for a YAML configuration and a CSV route table.

    ``now`` defaults to the configured ``earliest`` time (or the current time
    if there is none); ``routes`` overrides the configured route table.
    ``verbose`` (or the runtime flags of a ``HeatwalkParams``) raises the log level.
    """
    params = _apply_overrides(_resolve_params(config), step, direction, n_jobs)
    if verbose:
        params = dataclasses.replace(
            params, runtime=RuntimeParams(verbose=True, debug=params.runtime.debug)
        )
    if params.runtime.debug:
        setup_logging(LogLevel.DEBUG)
    elif params.runtime.verbose:
        setup_logging(LogLevel.VERBOSE)
    problem, search = params.problem, params.search

    routes_file = Path(routes) if routes is not None else params.io.routes_file
    router = TabularRouter.from_csv(routes_file)
    if now is None:
        now = problem.earliest if problem.earliest is not None else datetime.now()

    return find_departure_time(
        router,
        problem.start,
        problem.place,
        now,
        latest=problem.latest,
        earliest=problem.earliest,
        opening_hours=problem.opening_hours,
        min_walking_time=problem.min_walking_time,
        step=search.step,
        direction=search.direction,
        weighting=search.weighting,
        time_buffer=search.time_buffer,
        check_arrival=search.check_arrival,
        objective=search.objective,
        n_jobs=search.n_jobs,
        timeout=timeout,
    )


def scan(
    config: str | Path | HeatwalkParams,
    now: Optional[datetime] = None,
    routes: str | Path | None = None,
    step: Optional[timedelta] = None,
) -> List[Tuple[TimeRange, List[CandidateEvaluation]]]:
    """Every candidate evaluation, grouped by search window."""
    params = _apply_overrides(_resolve_params(config), step, None, None)
    problem, search = params.problem, params.search

    routes_file = Path(routes) if routes is not None else params.io.routes_file
    router = TabularRouter.from_csv(routes_file)
    if now is None:
        now = problem.earliest if problem.earliest is not None else datetime.now()

    min_walking_time = problem.min_walking_time
    if min_walking_time is None:
        min_walking_time = estimate_min_walking_time(router, problem.start, problem.place, now)
        if min_walking_time is None:
            return []

    objective = _routing_objective(
        search.objective, router, search.weighting, search.check_arrival
    )
    results = []
    for window in search_windows(
        problem.opening_hours,
        now,
        min_walking_time,
        search.time_buffer,
        problem.earliest,
        problem.latest,
    ):
        finder = OptimalTimeFinder(
            objective_function=objective,
            limits=window,
            step=search.step,
            start=problem.start,
            place=problem.place,
            min_walking_time=min_walking_time,
            direction=search.direction,
            n_jobs=search.n_jobs,
        )
        results.append((window, finder.evaluate_candidates()))
    return results
