"""Component tests for loading YAML configurations into HeatwalkParams."""

from datetime import datetime, timedelta
from pathlib import Path

import pytest
import yaml

from heatwalk.config import HeatwalkParams, load_heatwalk_params
from heatwalk.core_types import OptimizationDirection, Point, WeightingType
from heatwalk.exceptions import ConfigurationError
from heatwalk.utils.time_range import TimeRange

ASSETS = Path(__file__).parent.parent / "_assets"


def base_config():
    with open(ASSETS / "morning_walk.yaml") as f:
        return yaml.safe_load(f)


def write_config(tmp_path, data):
    path = tmp_path / "config.yaml"
    with open(path, "w") as f:
        yaml.safe_dump(data, f)
    return path


def test_load_example_config():
    params = load_heatwalk_params(ASSETS / "morning_walk.yaml")

    assert isinstance(params, HeatwalkParams)
    assert params.problem.start == Point(49.4840, 8.4756)
    assert params.problem.place == Point(49.4861, 8.4920)
    assert params.problem.earliest == datetime(2026, 7, 1, 8)
    assert params.problem.latest == datetime(2026, 7, 1, 12)
    assert params.problem.min_walking_time == timedelta(minutes=10)
    assert params.problem.opening_hours == (
        TimeRange(datetime(2026, 7, 1, 8), datetime(2026, 7, 1, 20)),
    )
    assert params.search.step == timedelta(minutes=15)
    assert params.search.direction is OptimizationDirection.MINIMIZE
    assert params.search.weighting is WeightingType.HEAT_INDEX_WEIGHTED
    assert params.search.n_jobs == 1
    assert params.search.time_buffer == timedelta(minutes=15)
    assert params.search.check_arrival is False


def test_routes_file_is_resolved_relative_to_config(tmp_path):
    data = base_config()
    data["routes_file"] = "data/routes.csv"
    path = write_config(tmp_path, data)

    params = load_heatwalk_params(path)
    assert params.io.routes_file == (tmp_path / "data" / "routes.csv").resolve()


def test_search_section_is_optional(tmp_path):
    data = base_config()
    del data["search"]
    params = load_heatwalk_params(write_config(tmp_path, data))
    assert params.search.step == timedelta(minutes=15)
    assert params.search.weighting is WeightingType.HEAT_INDEX_WEIGHTED


def test_opening_hours_as_pairs(tmp_path):
    data = base_config()
    data["opening_hours"] = [
        ["2026-07-01T09:00:00", "2026-07-01T12:00:00"],
        ["2026-07-01T14:00:00", "2026-07-01T18:00:00"],
    ]
    params = load_heatwalk_params(write_config(tmp_path, data))
    assert [o.lower.hour for o in params.problem.opening_hours] == [9, 14]
    assert [o.upper.hour for o in params.problem.opening_hours] == [12, 18]


def test_missing_file_raises():
    with pytest.raises(FileNotFoundError):
        load_heatwalk_params("does/not/exist.yaml")


@pytest.mark.parametrize("key", ["start", "place", "latest", "routes_file"])
def test_missing_required_key(tmp_path, key):
    data = base_config()
    del data[key]
    with pytest.raises(ConfigurationError, match=key):
        load_heatwalk_params(write_config(tmp_path, data))


def test_unknown_top_level_key(tmp_path):
    data = base_config()
    data["vehicles"] = {}
    with pytest.raises(ConfigurationError, match="vehicles"):
        load_heatwalk_params(write_config(tmp_path, data))


def test_unknown_search_key(tmp_path):
    data = base_config()
    data["search"]["solver"] = "cbc"
    with pytest.raises(ConfigurationError, match="solver"):
        load_heatwalk_params(write_config(tmp_path, data))


@pytest.mark.parametrize(
    "search, message",
    [
        ({"weighting": "humidity"}, "humidity"),
        ({"direction": "sideways"}, "direction"),
        ({"step_minutes": "often"}, "step_minutes"),
        ({"step_minutes": 0}, "step"),
        ({"n_jobs": "many"}, "n_jobs"),
        ({"objective": "brent"}, "objective"),
    ],
)
def test_invalid_search_values(tmp_path, search, message):
    data = base_config()
    data["search"] = search
    with pytest.raises(ConfigurationError, match=message):
        load_heatwalk_params(write_config(tmp_path, data))


def test_earliest_after_latest(tmp_path):
    data = base_config()
    data["earliest"] = "2026-07-01T13:00:00"
    with pytest.raises(ConfigurationError, match="earliest"):
        load_heatwalk_params(write_config(tmp_path, data))


def test_reversed_opening_hours_are_a_configuration_fault(tmp_path):
    data = base_config()
    data["opening_hours"] = [{"open": "2026-07-01T18:00:00", "close": "2026-07-01T09:00:00"}]
    with pytest.raises(ConfigurationError):
        load_heatwalk_params(write_config(tmp_path, data))


def test_invalid_yaml(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("start: [unclosed")
    with pytest.raises(ConfigurationError, match="YAML"):
        load_heatwalk_params(path)


def test_fixed_path_objective_key(tmp_path):
    data = base_config()
    data["search"]["objective"] = "Fixed_Path"
    params = load_heatwalk_params(write_config(tmp_path, data))
    assert params.search.objective == "fixed_path"
    assert load_heatwalk_params(ASSETS / "morning_walk.yaml").search.objective == "routing"
