"""Tests for the sampled optimal-time search."""

import threading
from datetime import timedelta
from unittest.mock import MagicMock

import hypothesis.strategies as st
import pytest
from hypothesis import given, settings

from heatwalk.core_types import (
    CandidateEvaluation,
    ObjectiveValue,
    OptimalTime,
    OptimizationDirection,
    WeightingType,
)
from heatwalk.exceptions import (
    CollaboratorError,
    ConfigurationError,
    InvalidRangeError,
    PathNotFoundError,
)
from heatwalk.finder import OptimalTimeFinder, generate_candidate_times, select_best
from heatwalk.objective import RoutingObjectiveFunction
from heatwalk.utils.time_range import TimeRange
from tests.stubs import PLACE, START, FakeRouter, TableObjective, at

STEP = timedelta(minutes=15)
TEN_MIN = timedelta(minutes=10)


def make_finder(objective, limits, step=STEP, **kwargs):
    return OptimalTimeFinder(
        objective_function=objective,
        limits=limits,
        step=step,
        start=START,
        place=PLACE,
        min_walking_time=TEN_MIN,
        **kwargs,
    )


# ---------------------------------------------------------------------------
# Candidate generation
# ---------------------------------------------------------------------------


def test_candidates_on_even_steps(morning):
    assert generate_candidate_times(morning, STEP) == [
        at(8, 0), at(8, 15), at(8, 30), at(8, 45), at(9, 0)
    ]


def test_off_step_upper_bound_is_added_as_final_candidate():
    limits = TimeRange(at(8), at(8, 40))
    assert generate_candidate_times(limits, STEP) == [at(8, 0), at(8, 15), at(8, 30), at(8, 40)]


def test_degenerate_range_yields_one_candidate():
    limits = TimeRange(at(8), at(8))
    assert generate_candidate_times(limits, STEP) == [at(8)]


def test_step_wider_than_range_yields_both_bounds():
    limits = TimeRange(at(8), at(8, 5))
    assert generate_candidate_times(limits, timedelta(hours=1)) == [at(8), at(8, 5)]


def test_numeric_time_axis():
    assert generate_candidate_times(TimeRange(0, 10), 4) == [0, 4, 8, 10]
    assert generate_candidate_times(TimeRange(0.0, 1.0), 0.5) == [0.0, 0.5, 1.0]


@settings(max_examples=50)
@given(
    lower=st.integers(min_value=0, max_value=1000),
    width=st.integers(min_value=0, max_value=1000),
    step=st.integers(min_value=1, max_value=200),
)
def test_bounds_are_always_candidates(lower, width, step):
    limits = TimeRange(lower, lower + width)
    times = generate_candidate_times(limits, step)
    assert times[0] == limits.lower
    assert times[-1] == limits.upper
    assert times == sorted(set(times))
    assert all(limits.contains(t) for t in times)


@pytest.mark.parametrize("step", [timedelta(0), timedelta(minutes=-5), 0, -1, "15"])
def test_invalid_step_is_a_configuration_fault(morning, step):
    with pytest.raises(ConfigurationError):
        make_finder(TableObjective({}), morning, step=step)


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------


def test_documented_scenario_returns_earliest_of_tied_minima(morning, morning_router):
    objective = RoutingObjectiveFunction(morning_router, WeightingType.HEAT_INDEX_WEIGHTED)
    best = make_finder(objective, morning).find_optimal_time()

    assert best == OptimalTime(at(8, 15), 3.9, timedelta(minutes=15))
    assert [t for t, _ in morning_router.find_path_calls] == [
        at(8, 0), at(8, 15), at(8, 30), at(8, 45), at(9, 0)
    ]


def test_minimize_prefers_smallest_then_earliest(morning):
    values = {at(8): 5.0, at(8, 15): 3.0, at(8, 30): 3.0}
    best = make_finder(TableObjective(values), morning).find_optimal_time()
    assert best.as_tuple() == (at(8, 15), 3.0)


def test_maximize_prefers_largest(morning):
    values = {at(8): 5.0, at(8, 15): 3.0, at(8, 30): 3.0}
    finder = make_finder(
        TableObjective(values), morning, direction=OptimizationDirection.MAXIMIZE
    )
    assert finder.find_optimal_time().as_tuple() == (at(8), 5.0)


def test_direction_accepts_strings(morning):
    finder = make_finder(TableObjective({}), morning, direction="maximize")
    assert finder.direction is OptimizationDirection.MAXIMIZE
    with pytest.raises(ConfigurationError):
        make_finder(TableObjective({}), morning, direction="sideways")


@pytest.mark.parametrize("direction", list(OptimizationDirection))
def test_single_feasible_candidate_wins_in_both_directions(morning, direction):
    finder = make_finder(TableObjective({at(8, 30): 42.0}), morning, direction=direction)
    assert finder.find_optimal_time().as_tuple() == (at(8, 30), 42.0)


def test_all_infeasible_returns_none(morning):
    objective = TableObjective({})
    assert make_finder(objective, morning).find_optimal_time() is None
    assert len(objective.calls) == 5


def test_zero_is_a_feasible_value_not_an_absence(morning):
    values = {at(8): 0.0, at(8, 15): 1.0}
    assert make_finder(TableObjective(values), morning).find_optimal_time().value == 0.0


def test_nan_is_treated_as_infeasible(morning):
    values = {at(8): float("nan"), at(8, 15): 2.0}
    assert make_finder(TableObjective(values), morning).find_optimal_time().as_tuple() == (
        at(8, 15),
        2.0,
    )


def test_degenerate_window_is_evaluated(morning_router):
    limits = TimeRange(at(8, 45), at(8, 45))
    objective = RoutingObjectiveFunction(morning_router, WeightingType.HEAT_INDEX_WEIGHTED)
    assert make_finder(objective, limits).find_optimal_time().as_tuple() == (at(8, 45), 3.9)


def test_select_best_ignores_input_order():
    evaluations = [
        CandidateEvaluation(at(8, 45), 3.9),
        CandidateEvaluation(at(8, 30), None),
        CandidateEvaluation(at(8, 15), 3.9),
        CandidateEvaluation(at(8, 0), 4.2),
    ]
    assert select_best(evaluations).time == at(8, 15)
    assert select_best(evaluations, OptimizationDirection.MAXIMIZE).time == at(8, 0)
    assert select_best([]) is None


def test_too_short_walks_are_never_selected(morning):
    router = FakeRouter(
        durations={at(8, 15): timedelta(minutes=5)},
        costs={at(8): 4.0, at(8, 15): 1.0, at(8, 30): 4.5, at(8, 45): 6.0, at(9): 5.0},
    )
    objective = RoutingObjectiveFunction(router, WeightingType.HEAT_INDEX)
    assert make_finder(objective, morning).find_optimal_time().as_tuple() == (at(8), 4.0)


# ---------------------------------------------------------------------------
# Evaluation trace and walking times
# ---------------------------------------------------------------------------


def test_evaluate_candidates_reports_walking_times(morning):
    router = FakeRouter(
        durations={at(8, 30): timedelta(minutes=5)},
        costs={at(8): 1.0, at(8, 15): 2.0, at(8, 30): 3.0, at(8, 45): 4.0, at(9): 5.0},
    )
    objective = RoutingObjectiveFunction(router, WeightingType.HEAT_INDEX)
    evaluations = make_finder(objective, morning).evaluate_candidates()

    assert [e.time for e in evaluations] == [at(8), at(8, 15), at(8, 30), at(8, 45), at(9)]
    rejected = evaluations[2]
    assert not rejected.feasible
    assert rejected.walking_time == timedelta(minutes=5)
    assert evaluations[0].walking_time == timedelta(minutes=15)


def test_value_only_objectives_report_last_walking_time(morning):
    objective = MagicMock(spec=["value", "get_last_walking_time"])
    objective.value.return_value = 1.0
    objective.get_last_walking_time.return_value = timedelta(minutes=20)

    evaluations = make_finder(objective, morning).evaluate_candidates()
    assert all(e.walking_time == timedelta(minutes=20) for e in evaluations)


def test_weighting_type_accessor(morning, morning_router):
    objective = RoutingObjectiveFunction(morning_router, WeightingType.TEMPERATURE)
    finder = make_finder(objective, morning)
    assert finder.weighting_type is WeightingType.TEMPERATURE
    assert make_finder(TableObjective({}), morning).weighting_type is None


def test_read_accessors(morning):
    finder = make_finder(TableObjective({}), morning)
    assert finder.limits is morning
    assert finder.step == STEP
    assert finder.direction is OptimizationDirection.MINIMIZE


# ---------------------------------------------------------------------------
# Faults
# ---------------------------------------------------------------------------


def test_collaborator_fault_aborts_the_search(morning):
    objective = MagicMock(spec=["value"])
    objective.value.side_effect = [1.0, RuntimeError("corrupt graph"), 0.5]

    with pytest.raises(CollaboratorError) as exc_info:
        make_finder(objective, morning).find_optimal_time()
    assert isinstance(exc_info.value.__cause__, RuntimeError)
    assert objective.value.call_count == 2


def test_route_cost_fault_is_wrapped(morning):
    router = FakeRouter()
    router.route_cost = MagicMock(side_effect=KeyError("no such weighting"))
    objective = RoutingObjectiveFunction(router, WeightingType.HEAT_INDEX)
    with pytest.raises(CollaboratorError):
        make_finder(objective, morning).find_optimal_time()


def test_configuration_faults_are_not_wrapped(morning):
    objective = MagicMock(spec=["value"])
    objective.value.side_effect = ConfigurationError("weighting missing")
    with pytest.raises(ConfigurationError):
        make_finder(objective, morning).find_optimal_time()


def test_leaked_infeasibility_is_absorbed(morning):
    objective = MagicMock(spec=["value"])
    objective.value.side_effect = [PathNotFoundError("gone"), 2.0, 3.0, 4.0, 5.0]
    assert make_finder(objective, morning).find_optimal_time().as_tuple() == (at(8, 15), 2.0)


def test_limits_must_be_a_time_range():
    with pytest.raises(ConfigurationError):
        make_finder(TableObjective({}), (at(8), at(9)))


def test_inverted_limits_fail_before_search():
    with pytest.raises(InvalidRangeError):
        make_finder(TableObjective({}), TimeRange(at(9), at(8)))


def test_objective_function_is_required(morning):
    with pytest.raises(ConfigurationError):
        make_finder(None, morning)


def test_n_jobs_zero_is_rejected(morning):
    with pytest.raises(ConfigurationError):
        make_finder(TableObjective({}), morning, n_jobs=0)


def test_n_jobs_from_environment(morning, monkeypatch):
    monkeypatch.setenv("HEATWALK_N_JOBS", "3")
    assert make_finder(TableObjective({}), morning, n_jobs=None).n_jobs == 3
    monkeypatch.setenv("HEATWALK_N_JOBS", "many")
    assert make_finder(TableObjective({}), morning, n_jobs=None).n_jobs == 1


# ---------------------------------------------------------------------------
# Cancellation and concurrency
# ---------------------------------------------------------------------------


def test_preset_cancel_event_returns_empty_result(morning):
    objective = TableObjective({at(8): 1.0})
    cancel = threading.Event()
    cancel.set()
    assert make_finder(objective, morning).find_optimal_time(cancel_event=cancel) is None
    assert objective.calls == []


def test_cancellation_keeps_best_so_far(morning):
    cancel = threading.Event()
    values = {at(8): 4.0, at(8, 15): 2.0, at(8, 30): 1.0, at(8, 45): 0.5, at(9): 0.1}

    class CancellingObjective(TableObjective):
        def value(self, time, *args):
            result = super().value(time, *args)
            if time == at(8, 15):
                cancel.set()
            return result

    objective = CancellingObjective(values)
    best = make_finder(objective, morning).find_optimal_time(cancel_event=cancel)
    assert best.as_tuple() == (at(8, 15), 2.0)
    assert objective.calls == [at(8), at(8, 15)]


def test_zero_timeout_stops_immediately(morning):
    objective = TableObjective({at(8): 1.0})
    assert make_finder(objective, morning).find_optimal_time(timeout=0) is None


@pytest.mark.parametrize("n_jobs", [2, 4, -1])
def test_parallel_search_matches_sequential(morning, morning_router, n_jobs):
    objective = RoutingObjectiveFunction(morning_router, WeightingType.HEAT_INDEX_WEIGHTED)
    sequential = make_finder(objective, morning).evaluate_candidates()
    parallel = make_finder(objective, morning, n_jobs=n_jobs).evaluate_candidates()

    assert parallel == sequential
    assert make_finder(objective, morning, n_jobs=n_jobs).find_optimal_time() == OptimalTime(
        at(8, 15), 3.9, timedelta(minutes=15)
    )


def test_parallel_search_does_not_read_shared_walking_time(morning):
    objective = MagicMock(spec=["value", "get_last_walking_time"])
    objective.value.return_value = 1.0
    objective.get_last_walking_time.return_value = timedelta(minutes=20)

    evaluations = make_finder(objective, morning, n_jobs=2).evaluate_candidates()
    assert all(e.walking_time is None for e in evaluations)
    objective.get_last_walking_time.assert_not_called()


def test_parallel_cancellation_between_batches(morning):
    cancel = threading.Event()

    class Objective:
        def evaluate(self, time, *args):
            if time == at(8):
                cancel.set()
            return ObjectiveValue(1.0 if time == at(8, 15) else 2.0)

        def value(self, *args):
            return self.evaluate(*args).value

    evaluations = make_finder(Objective(), morning, n_jobs=2).evaluate_candidates(
        cancel_event=cancel
    )
    assert [e.time for e in evaluations] == [at(8), at(8, 15)]
