# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import warnings
import pytest
import numpy as np
from swarmopt import functions
from swarmopt.common import errors
from swarmopt.common import testing
from .vector import FixedVector
from .callbacks import ProgressRecorder
from . import butterflies as bf


def _zero(x: np.ndarray) -> float:
    return 0.0


def _linear(x: np.ndarray) -> float:
    return float(x[0])


def _minus_epsilon(x: np.ndarray) -> float:
    return -bf.EPSILON


def test_fragrance() -> None:
    assert bf.fragrance(0.0, 0.0) == 0.0
    np.testing.assert_almost_equal(bf.fragrance(3.0, 3.0), 1.0)
    np.testing.assert_almost_equal(bf.fragrance(1.0, 4.0), 0.25)


def test_fragrance_cancelled_denominator() -> None:
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        assert bf.fragrance(-bf.EPSILON, -bf.EPSILON) == float("-inf")
        assert np.isnan(bf.fragrance(0.0, -bf.EPSILON))
        func = functions.ObjectiveFunction("minus_epsilon", _minus_epsilon, (0.0, 1.0))
        agent = bf.ButterflyAgent(func.bounds, func, 0.5, 1, np.random.RandomState(0))
    assert agent.fitness == -bf.EPSILON
    assert agent.fragrance == float("-inf")
    population = bf.ButterflyPopulation(func, 2, count=5, random_state=12)
    population.run_for(3)
    assert population.best_value == -bf.EPSILON


@testing.parametrized(
    truncated_start=("truncated", 0, 0.1),
    truncated_end=("truncated", 99, 0.1),
    linear_start=("linear", 0, 0.1),
    linear_middle=("linear", 50, 0.2),
)
def test_fragrance_exponent(schedule: str, iteration: int, expected: float) -> None:
    population = bf.ButterflyPopulation(
        functions.lookup("sphere"), 2, count=3, random_state=12, exponent_schedule=schedule
    )
    np.testing.assert_almost_equal(population.fragrance_exponent(iteration, 100), expected)


def test_global_search() -> None:
    sphere = functions.lookup("sphere")
    agent = bf.ButterflyAgent(sphere.bounds, sphere, 0.5, 2, np.random.RandomState(12))
    agent.position = FixedVector([1.0, 2.0])
    agent.fragrance = 2.5
    best = FixedVector([0.5, -0.5])
    agent.global_search(best, 0.1, 2.0, np.random.RandomState(24))
    r = np.random.RandomState(24).rand()
    attraction = 0.5 * 2.5 ** 0.1
    expected = np.array([1.0, 2.0]) + (np.array([0.5, -0.5]) * r ** 2 - np.array([1.0, 2.0])) * attraction
    np.testing.assert_almost_equal(agent.position.tolist(), expected)
    np.testing.assert_almost_equal(agent.fitness, sphere(expected))
    np.testing.assert_almost_equal(agent.fragrance, sphere(expected) / 2.0)


def test_local_search_uses_both_positions() -> None:
    sphere = functions.lookup("sphere")
    agent = bf.ButterflyAgent(sphere.bounds, sphere, 1.0, 2, np.random.RandomState(12))
    agent.position = FixedVector([0.0, 0.0])
    agent.fragrance = 1.0
    agent.local_search(FixedVector([2.0, 2.0]), FixedVector([1.0, -1.0]), 0.2, 1.0, np.random.RandomState(24))
    r = np.random.RandomState(24).rand()
    expected = np.array([2.0, 2.0]) * r ** 2 - np.array([1.0, -1.0])
    np.testing.assert_almost_equal(agent.position.tolist(), expected)


def test_snapshot() -> None:
    sphere = functions.lookup("sphere")
    population = bf.ButterflyPopulation(sphere, 3, count=8, random_state=12)
    snapshot = bf.Snapshot(population.agents)
    assert len(snapshot) == 8
    assert snapshot.best_fitness == population.best_value
    assert snapshot.best_position == population.best_position
    # snapshot is frozen
    population.agents[0].position += 1
    assert snapshot.positions[0] != population.agents[0].position
    rng = np.random.RandomState(12)
    assert all(snapshot.sample(rng) in snapshot.positions for _ in range(10))


def test_zero_fitness_does_not_move() -> None:
    func = functions.ObjectiveFunction("zero", _zero, (-2.0, 2.0))
    population = bf.ButterflyPopulation(func, 2, count=5, random_state=12)
    positions = [agent.position.copy() for agent in population.agents]
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        population.run_for(10)
    assert population.best_value == 0.0
    assert [agent.position for agent in population.agents] == positions


def test_negative_fragrance_gives_nan_silently() -> None:
    sphere = functions.lookup("sphere")
    agent = bf.ButterflyAgent(sphere.bounds, sphere, 0.5, 2, np.random.RandomState(12))
    agent.fragrance = -0.5
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        assert np.isnan(agent._attraction(0.1))  # pylint: disable=protected-access


def test_mixed_sign_fitness_keeps_finite_best() -> None:
    func = functions.ObjectiveFunction("linear", _linear, (-2.0, 2.0))
    population = bf.ButterflyPopulation(func, 2, count=20, random_state=12)
    recorder = ProgressRecorder()
    population.register_callback("iterate", recorder)
    population.run_for(10)
    assert np.isfinite(population.best_value)
    testing.assert_non_increasing(recorder.best_values)
    assert population.best_value >= -2.0


@testing.parametrized(
    truncated=("truncated", 0.5),
    linear=("linear", 0.5),
    always_local=("linear", 1.0),
    always_global=("truncated", 0.0),
)
def test_butterflies_on_rastrigin(schedule: str, chance: float) -> None:
    rastrigin = functions.lookup("rastrigin")
    config = bf.Butterflies(count=15, local_search_chance=chance, exponent_schedule=schedule)
    population = config(rastrigin, 4, random_state=12)
    recorder = ProgressRecorder()
    population.register_callback("iterate", recorder)
    population.run_for(100)
    testing.assert_non_increasing(recorder.best_values)
    assert 0 <= population.best_value <= recorder.best_values[0]
    lower, upper = rastrigin.bounds
    assert all(lower <= x <= upper for agent in population.agents for x in agent.position)
    population.reset()
    assert population.num_iterations == 0
    assert population.best_value == min(agent.fitness for agent in population.agents)


def test_butterflies_reproducibility() -> None:
    sphere = functions.lookup("sphere")
    values = [bf.Butterflies()(sphere, 5, random_state=12).run_for(50) for _ in range(2)]
    assert values[0] == values[1]


def test_butterflies_configuration_errors() -> None:
    sphere = functions.lookup("sphere")
    with pytest.raises(errors.ConfigurationError):
        bf.ButterflyPopulation(sphere, 2, exponent_schedule="quadratic")
    with pytest.raises(errors.ConfigurationError):
        bf.ButterflyPopulation(sphere, 2, fragrance_exponent_bounds=(0.3, 0.1))
    # equal exponent bounds are accepted
    population = bf.ButterflyPopulation(sphere, 2, fragrance_exponent_bounds=(0.2, 0.2), random_state=12)
    assert population.fragrance_exponent(50, 100) == 0.2
    with pytest.warns(errors.IllDefinedParameterWarning):
        bf.ButterflyPopulation(sphere, 2, local_search_chance=-0.1)
