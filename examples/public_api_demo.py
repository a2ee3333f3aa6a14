"""Public API demo for heatwalk.

Finds the coolest departure time for the example walk in
``examples/data/morning_walk.yaml``, first through the YAML facade and then
by wiring the finder by hand.

Run:
    python examples/public_api_demo.py
"""

from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path

import heatwalk as hw

DATA = Path(__file__).parent / "data"


def main() -> None:  # pragma: no cover – example script
    # 1. One call from a configuration file
    recommendation = hw.recommend(DATA / "morning_walk.yaml")
    if recommendation is None:
        print("No feasible departure time")
    else:
        print(f"Leave at {recommendation.time:%H:%M} (value {recommendation.value:.2f})")

    # 2. The same search assembled from its parts
    router = hw.TabularRouter.from_csv(DATA / "routes.csv")
    start = hw.Point(49.4840, 8.4756)
    place = hw.Point(49.4861, 8.4920)
    objective = hw.RoutingObjectiveFunction(router, hw.WeightingType.HEAT_INDEX)
    finder = hw.OptimalTimeFinder(
        objective_function=objective,
        limits=hw.TimeRange(datetime(2026, 7, 1, 8, 0), datetime(2026, 7, 1, 9, 0)),
        step=timedelta(minutes=15),
        start=start,
        place=place,
        min_walking_time=timedelta(minutes=10),
    )
    for evaluation in finder.evaluate_candidates():
        print(evaluation.time, evaluation.value, evaluation.walking_time)
    print("Best:", finder.find_optimal_time())


if __name__ == "__main__":
    main()
