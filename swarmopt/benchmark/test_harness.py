# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import sys
import itertools
import subprocess
from concurrent import futures
import pytest
import numpy as np
from swarmopt import functions
from swarmopt.common import errors
from swarmopt.common import testing
from swarmopt.optimization.bats import Bats
from swarmopt.optimization.butterflies import Butterflies
from .execution import SequentialExecutor
from .stats import BatchStatistic
from . import harness


class _FailingFunction:
    """Raises after a given number of calls"""

    def __init__(self, num_calls: int) -> None:
        self.num_calls = num_calls

    def __call__(self, x: np.ndarray) -> float:
        self.num_calls -= 1
        if self.num_calls < 0:
            raise ValueError("Too many calls")
        return float(x.dot(x))


def test_seed_generator() -> None:
    first = list(itertools.islice(harness.create_seed_generator(12), 5))
    second = list(itertools.islice(harness.create_seed_generator(12), 5))
    assert first == second
    assert len(set(first)) == 5
    assert all(isinstance(s, int) and 0 <= s < 2 ** 32 for s in first)


@testing.parametrized(
    rounded=(10, 4, [3, 3, 3, 3]),
    exact=(8, 4, [2, 2, 2, 2]),
    more_lanes=(3, 8, [1] * 8),
    single_lane=(5, 1, [5]),
)
def test_plan(num_trials: int, num_lanes: int, expected: list) -> None:
    assert harness.BatchRunHarness.plan(num_trials, num_lanes) == expected


def test_plan_errors() -> None:
    with pytest.raises(errors.ConfigurationError):
        harness.BatchRunHarness.plan(0, 4)
    with pytest.raises(errors.ConfigurationError):
        harness.BatchRunHarness.plan(10, 0)
    with pytest.raises(errors.ConfigurationError):
        harness.BatchRunHarness(Bats()(functions.lookup("sphere"), 2), -1)


def test_run_lane() -> None:
    population = Bats(count=10)(functions.lookup("sphere"), 2, random_state=12)
    stat = harness.run_lane(population, 10, 4, seed=24)
    assert stat.count == 4
    assert 0 <= stat.minimum <= stat.mean <= stat.maximum
    other = harness.run_lane(Bats(count=10)(functions.lookup("sphere"), 2, random_state=0), 10, 4, seed=24)
    assert stat.isclose(other), "Lanes must only depend on their seed"


@testing.parametrized(
    sequential=(SequentialExecutor,),
    threads=(futures.ThreadPoolExecutor,),
)
def test_batch_run(executor_cls: type) -> None:
    population = Butterflies(count=10)(functions.lookup("sphere"), 2, bounds=(-5, 5), random_state=12)
    if executor_cls is SequentialExecutor:
        stat = harness.BatchRunHarness(population, 20, executor=executor_cls(), seed=12).run(10, num_lanes=4)
    else:
        with executor_cls(max_workers=4) as executor:
            stat = harness.BatchRunHarness(population, 20, executor=executor, seed=12).run(10, num_lanes=4)
    assert stat.count == 12
    assert 0 <= stat.minimum <= stat.mean <= stat.maximum
    assert population.num_iterations == 0, "Configured population must not be modified"


def test_batch_run_lane_statistics_and_reproducibility() -> None:
    population = Bats(count=10)(functions.lookup("rastrigin"), 3, random_state=12)
    runner = harness.BatchRunHarness(population, 10, executor=SequentialExecutor(), seed=12)
    stat = runner.run(10, num_lanes=4)
    assert len(runner.lane_statistics) == 4
    assert stat.count == sum(s.count for s in runner.lane_statistics)
    assert stat.isclose(sum(runner.lane_statistics, BatchStatistic()))
    with futures.ThreadPoolExecutor(max_workers=2) as executor:
        other = harness.BatchRunHarness(population, 10, executor=executor, seed=12).run(10, num_lanes=4)
    assert stat.isclose(other)


def test_batch_run_processes() -> None:
    population = Bats(count=5)(functions.lookup("sphere"), 2, random_state=12)
    stat = harness.BatchRunHarness(population, 5, seed=12).run(4, num_lanes=2)
    assert stat.count == 4
    single = harness.BatchRunHarness(population, 5, seed=12).run(3, num_lanes=1)
    assert single.count == 3


def test_lane_failure() -> None:
    func = functions.ObjectiveFunction("failing", _FailingFunction(100), (-1.0, 1.0))
    population = Bats(count=10)(func, 2, random_state=12)
    runner = harness.BatchRunHarness(population, 20, executor=SequentialExecutor(), seed=12)
    with pytest.raises(errors.LaneFailureError):
        runner.run(4, num_lanes=2)


def test_run_once() -> None:
    population = Bats(count=10)(functions.lookup("sphere"), 2, random_state=12)
    runner = harness.BatchRunHarness(population, 15, seed=12)
    output = runner.run_once().result()
    assert output is not population
    assert output.num_iterations == 15
    assert population.num_iterations == 0
    np.testing.assert_almost_equal(functions.lookup("sphere")(output.best_position), output.best_value)


def test_harness_import_does_not_need_pandas() -> None:
    code = "import sys; import swarmopt.benchmark.harness; assert 'pandas' not in sys.modules, sorted(sys.modules)"
    subprocess.run([sys.executable, "-c", code], check=True)
