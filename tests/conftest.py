"""Shared fixtures: the 08:00-09:00 walk."""

import pytest

from heatwalk.utils.time_range import TimeRange
from tests.stubs import PLACE, START, FakeRouter, at


@pytest.fixture
def start():
    return START


@pytest.fixture
def place():
    return PLACE


@pytest.fixture
def morning():
    """Search window 08:00 - 09:00."""
    return TimeRange(at(8), at(9))


@pytest.fixture
def morning_router():
    """Costs [4.2, 3.9, 4.5, 3.9, 5.0] every 15 minutes, all walks 15 minutes."""
    costs = {
        at(8, 0): 4.2,
        at(8, 15): 3.9,
        at(8, 30): 4.5,
        at(8, 45): 3.9,
        at(9, 0): 5.0,
    }
    return FakeRouter(costs=costs)
