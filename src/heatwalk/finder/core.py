"""
core.py

Sampled scan over a departure-time window. Every candidate time from
``limits.lower`` in steps of ``step`` is scored by the objective function;
``limits.upper`` is always scored as a final candidate even when it is not
on a step. Infeasible candidates (absent values) are dropped and the best
remaining value wins, ties going to the earliest time.
"""

import math
import os
import threading
import time as _time
from datetime import timedelta
from typing import Any, Callable, Iterator, List, Optional

from joblib import Parallel, delayed, effective_n_jobs

from heatwalk.core_types import (
    CandidateEvaluation,
    OptimalTime,
    OptimizationDirection,
    Point,
    WeightingType,
)
from heatwalk.exceptions import (
    CollaboratorError,
    ConfigurationError,
    InfeasibleError,
    OptimalTimeFinderError,
)
from heatwalk.interfaces import ObjectiveFunction
from heatwalk.utils.logging import HeatwalkLogger
from heatwalk.utils.time_range import TimeRange

logger = HeatwalkLogger.get_logger(__name__)


def generate_candidate_times(limits: TimeRange, step: Any) -> List[Any]:
    """Sample ``limits`` at ``step``, always ending with ``limits.upper``.

    A degenerate range yields a single candidate; the upper bound is never
    listed twice.
    """
    _validate_step(step)
    times = []
    t = limits.lower
    while t <= limits.upper:
        times.append(t)
        nxt = t + step
        if not nxt > t:
            raise ConfigurationError(f"Sampling step {step!r} does not advance past {t!r}")
        t = nxt
    if times[-1] != limits.upper:
        times.append(limits.upper)
    return times


def select_best(
    evaluations: List[CandidateEvaluation],
    direction: OptimizationDirection = OptimizationDirection.MINIMIZE,
) -> Optional[OptimalTime]:
    """Pick the extremal feasible evaluation, earliest time on ties.

    Computed from the whole collection, so the order in which evaluations
    finished does not matter.
    """
    best: Optional[CandidateEvaluation] = None
    for evaluation in evaluations:
        if not evaluation.feasible:
            continue
        if (
            best is None
            or direction.better(evaluation.value, best.value)
            or (evaluation.value == best.value and evaluation.time < best.time)
        ):
            best = evaluation
    if best is None:
        return None
    return OptimalTime(time=best.time, value=best.value, walking_time=best.walking_time)


def _validate_step(step: Any) -> None:
    try:
        # zero of the step's own type (timedelta(0), 0, 0.0, ...)
        positive = step > step - step
    except TypeError as exc:
        raise ConfigurationError(f"Invalid sampling step: {step!r}") from exc
    if not positive:
        raise ConfigurationError(f"Sampling step must be positive, got {step!r}")


def _batches(items: List[Any], size: int) -> Iterator[List[Any]]:
    for i in range(0, len(items), size):
        yield items[i:i + size]


class OptimalTimeFinder:
    """Finds the departure time with the best objective value.

    Args:
        objective_function: Strategy scoring a single departure time.
        limits: Search window; also passed on to the objective function.
        step: Sampling step, e.g. ``timedelta(minutes=15)``.
        start: Start point of the walk.
        place: Destination of the walk.
        min_walking_time: Walks shorter than this are infeasible.
        direction: Minimize (default) or maximize the objective.
        n_jobs: Number of concurrent evaluations; ``-1`` uses all cores.
            ``None`` reads ``HEATWALK_N_JOBS`` and defaults to 1.
    """

    def __init__(
        self,
        objective_function: ObjectiveFunction,
        limits: TimeRange,
        step: Any,
        start: Point,
        place: Point,
        min_walking_time: Optional[timedelta] = None,
        direction: OptimizationDirection = OptimizationDirection.MINIMIZE,
        n_jobs: Optional[int] = 1,
    ):
        if objective_function is None or not callable(getattr(objective_function, "value", None)):
            raise ConfigurationError("An objective function with a value() method is required")
        if not isinstance(limits, TimeRange):
            raise ConfigurationError(f"limits must be a TimeRange, got {type(limits).__name__}")
        _validate_step(step)
        if isinstance(direction, str):
            try:
                direction = OptimizationDirection(direction.lower())
            except ValueError as exc:
                raise ConfigurationError(f"Unknown optimization direction: {direction!r}") from exc
        if not isinstance(direction, OptimizationDirection):
            raise ConfigurationError(f"Unknown optimization direction: {direction!r}")

        if n_jobs is None:
            n_jobs_env = os.getenv("HEATWALK_N_JOBS")
            try:
                n_jobs = int(n_jobs_env) if n_jobs_env is not None else 1
            except ValueError:
                n_jobs = 1
        if n_jobs == 0:
            raise ConfigurationError("n_jobs must not be 0")

        self.objective_function = objective_function
        self._limits = limits
        self._step = step
        self.start = start
        self.place = place
        self.min_walking_time = min_walking_time
        self._direction = direction
        self.n_jobs = n_jobs

    @property
    def limits(self) -> TimeRange:
        return self._limits

    @property
    def step(self) -> Any:
        return self._step

    @property
    def direction(self) -> OptimizationDirection:
        return self._direction

    @property
    def weighting_type(self) -> Optional[WeightingType]:
        getter = getattr(self.objective_function, "get_weighting_type", None)
        return getter() if getter is not None else None

    def candidate_times(self) -> List[Any]:
        return generate_candidate_times(self._limits, self._step)

    def evaluate_candidates(
        self,
        cancel_event: Optional[threading.Event] = None,
        timeout: Optional[float] = None,
    ) -> List[CandidateEvaluation]:
        """Score every candidate time, in time order.

        Stops issuing new evaluations once ``cancel_event`` is set or
        ``timeout`` seconds have passed and returns what was collected.
        """
        times = self.candidate_times()
        deadline = _time.monotonic() + timeout if timeout is not None else None

        def cancelled() -> bool:
            if cancel_event is not None and cancel_event.is_set():
                return True
            return deadline is not None and _time.monotonic() >= deadline

        logger.debug(
            f"Scanning {len(times)} candidates in {self._limits} "
            f"(step={self._step}, direction={self._direction.value}, "
            f"weighting={self.weighting_type}, n_jobs={self.n_jobs})"
        )

        if self.n_jobs == 1:
            evaluations = self._evaluate_sequential(times, cancelled)
        else:
            evaluations = self._evaluate_parallel(times, cancelled)

        if len(evaluations) < len(times):
            logger.info(
                f"Search cancelled after {len(evaluations)} of {len(times)} candidates"
            )
        return evaluations

    def find_optimal_time(
        self,
        cancel_event: Optional[threading.Event] = None,
        timeout: Optional[float] = None,
    ) -> Optional[OptimalTime]:
        """Return the best feasible candidate, or ``None`` if none is feasible."""
        evaluations = self.evaluate_candidates(cancel_event=cancel_event, timeout=timeout)
        best = select_best(evaluations, self._direction)
        if best is None:
            logger.info(f"No feasible departure time in {self._limits}")
        else:
            logger.info(f"Optimal departure time {best.time} with value {best.value:.4f}")
        return best

    def _evaluate_sequential(
        self, times: List[Any], cancelled: Callable[[], bool]
    ) -> List[CandidateEvaluation]:
        evaluations = []
        for t in times:
            if cancelled():
                break
            evaluations.append(self._evaluate(t, read_last_walking_time=True))
        return evaluations

    def _evaluate_parallel(
        self, times: List[Any], cancelled: Callable[[], bool]
    ) -> List[CandidateEvaluation]:
        batch_size = max(1, effective_n_jobs(self.n_jobs))
        evaluations = []
        with Parallel(n_jobs=self.n_jobs, backend="threading") as parallel:
            for batch in _batches(times, batch_size):
                if cancelled():
                    break
                # The shared last-walking-time state is not read here.
                evaluations.extend(
                    parallel(delayed(self._evaluate)(t, False) for t in batch)
                )
        return evaluations

    def _evaluate(self, t: Any, read_last_walking_time: bool) -> CandidateEvaluation:
        objective = self.objective_function
        args = (t, self.start, self.place, self._limits, self.min_walking_time)
        try:
            evaluate = getattr(objective, "evaluate", None)
            if evaluate is not None:
                result = evaluate(*args)
                value, walking_time = result.value, result.walking_time
            else:
                value = objective.value(*args)
                walking_time = None
                getter = getattr(objective, "get_last_walking_time", None)
                if read_last_walking_time and getter is not None:
                    walking_time = getter()
        except OptimalTimeFinderError:
            raise
        except InfeasibleError as exc:
            logger.debug(f"Candidate {t} infeasible: {exc}")
            return CandidateEvaluation(t, None)
        except Exception as exc:
            raise CollaboratorError(f"Objective evaluation failed at {t}: {exc}") from exc

        if value is not None and math.isnan(value):
            value = None
        if value is None:
            logger.debug(
                f"Constraints violated (time = {t}, limits = {self._limits}, "
                f"walking time = {walking_time}, start = {self.start}, place = {self.place})"
            )
        return CandidateEvaluation(t, value, walking_time)

    def __repr__(self) -> str:
        return (
            f"OptimalTimeFinder(limits={self._limits}, step={self._step}, "
            f"direction={self._direction.value}, n_jobs={self.n_jobs})"
        )
