# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import math
import numpy as np
import swarmopt.common.typing as tp
from swarmopt.functions import ObjectiveFunction
from .vector import FixedVector
from . import base


class BatAgent(base.Agent):  # pylint: disable=too-many-instance-attributes
    """Bat of the Bat Algorithm: it flies toward the global best with a random
    frequency, and performs random walks whose radius (loudness) shrinks
    each time the bat improves, while the chance of such walks (pulse rate)
    rises toward its original value.

    Note
    ----
    Velocity components are drawn in [0, 1) whatever the bounds of the domain.
    """

    # pylint: disable=too-many-arguments
    def __init__(
        self,
        bounds: tp.Bounds,
        frequency_bounds: tp.Bounds,
        pulse_rate: float,
        pulse_rate_factor: float,
        loudness: float,
        loudness_cooling_factor: float,
        dimension: int,
        random_state: np.random.RandomState,
    ) -> None:
        super().__init__(bounds, FixedVector.uniform(bounds, dimension, random_state))
        self.velocity = FixedVector(random_state.rand(dimension))
        self.frequency_bounds = frequency_bounds
        self.original_pulse_rate = pulse_rate
        self.current_pulse_rate = pulse_rate
        self.pulse_rate_factor = pulse_rate_factor
        self.loudness = loudness
        self.loudness_cooling_factor = loudness_cooling_factor

    def move(self, global_best: FixedVector, average_loudness: float, random_state: np.random.RandomState) -> None:
        frequency = random_state.uniform(*self.frequency_bounds)
        self.velocity += (global_best - self.position) * frequency
        # velocity is added, subtracting it makes bats diverge
        self.position += self.velocity
        if random_state.rand() < self.current_pulse_rate:
            self.position += random_state.uniform(-1.0, 1.0) * average_loudness
        self.position.clamp_in_place(*self.bounds)

    def on_improvement(self, iteration: int) -> None:
        self.loudness *= self.loudness_cooling_factor
        self.current_pulse_rate = self.original_pulse_rate * (1.0 - math.exp(-self.pulse_rate_factor * iteration))

    def reset(self, bounds: tp.Bounds, pulse_rate: float, loudness: float, random_state: np.random.RandomState) -> None:
        self.bounds = bounds
        self.position = FixedVector.uniform(bounds, self.position.dimension, random_state)
        self.velocity = FixedVector(random_state.rand(self.position.dimension))
        self.best_fitness_seen = float("inf")
        self.original_pulse_rate = pulse_rate
        self.current_pulse_rate = pulse_rate
        self.loudness = loudness


class BatPopulation(base.Population[BatAgent]):
    """Population of the Bat Algorithm.

    Parameters
    ----------
    function: ObjectiveFunction
        the function to minimize
    dimension: int
        dimension of the search space
    count: int
        number of bats
    bounds: tuple of floats or None
        domain of every component (defaults to the bounds of the function)
    random_state: RandomState, int or None
        source of randomness of the population
    frequency_bounds: tuple of floats
        range of the frequencies sampled at each move (lower < upper)
    pulse_rate: float
        initial and asymptotic chance of a random walk at each move (in [0, 1])
    pulse_rate_factor: float
        speed at which the pulse rate goes back to its initial value after improvements
    loudness: float
        initial radius of the random walk
    loudness_cooling_factor: float
        multiplicative decay of the loudness after each improvement
    """

    # pylint: disable=too-many-arguments
    def __init__(
        self,
        function: ObjectiveFunction,
        dimension: int,
        count: int = 20,
        bounds: tp.Optional[tp.Sequence[float]] = None,
        random_state: tp.RandomLike = None,
        frequency_bounds: tp.Sequence[float] = (0.0, 1.0),
        pulse_rate: float = 0.7,
        pulse_rate_factor: float = 0.5,
        loudness: float = 1.4,
        loudness_cooling_factor: float = 0.5,
    ) -> None:
        self.frequency_bounds = base.check_bounds("frequency_bounds", frequency_bounds)
        self.initial_pulse_rate = base.check_probability("pulse_rate", pulse_rate)
        self.pulse_rate_factor = float(pulse_rate_factor)
        self.initial_loudness = float(loudness)
        self.loudness_cooling_factor = float(loudness_cooling_factor)
        super().__init__(function, dimension, count, bounds=bounds, random_state=random_state)

    def _spawn_agent(self) -> BatAgent:
        return BatAgent(
            self.bounds,
            self.frequency_bounds,
            self.initial_pulse_rate,
            self.pulse_rate_factor,
            self.initial_loudness,
            self.loudness_cooling_factor,
            self.dimension,
            self.random_state,
        )

    def _reset_agent(self, agent: BatAgent) -> None:
        agent.reset(self.bounds, self.initial_pulse_rate, self.initial_loudness, self.random_state)

    def _evaluate_agent(self, agent: BatAgent) -> float:
        return self.function(agent.position)

    @property
    def average_loudness(self) -> float:
        return float(np.mean([agent.loudness for agent in self._agents]))

    def _iterate(self, iteration: int, num_iterations: int) -> None:
        # all bats move toward the same best position, with the same average loudness
        average_loudness = self.average_loudness
        global_best = self.best_position
        for agent in self._agents:
            agent.move(global_best, average_loudness, self.random_state)
        for agent in self._agents:
            value = self._evaluate_agent(agent)
            self._update_best(agent.position, value)
            agent.tell(value, iteration)


class Bats(base.ConfiguredPopulation):
    """`Bat Algorithm <https://en.wikipedia.org/wiki/Bat_algorithm>`_ configuration.
    Bats are attracted by the global best with a random frequency and perform
    random walks around their position, with decaying amplitude.

    Parameters
    ----------
    count: int
        number of bats
    frequency_bounds: tuple of floats
        range of the frequencies sampled at each move
    pulse_rate: float
        initial and asymptotic chance of random walk (in [0, 1])
    pulse_rate_factor: float
        speed at which the pulse rate recovers after improvements
    loudness: float
        initial radius of the random walks
    loudness_cooling_factor: float
        multiplicative decay of the loudness at each improvement

    Note
    ----
    - Reference: X.-S. Yang, A New Metaheuristic Bat-Inspired Algorithm, 2010.
    - Positions are updated by adding the velocity.
    """

    # pylint: disable=unused-argument,too-many-arguments
    def __init__(
        self,
        count: int = 20,
        frequency_bounds: tp.Tuple[float, float] = (0.0, 1.0),
        pulse_rate: float = 0.7,
        pulse_rate_factor: float = 0.5,
        loudness: float = 1.4,
        loudness_cooling_factor: float = 0.5,
    ) -> None:
        super().__init__(BatPopulation, locals())
        self.count = count
        self.frequency_bounds = frequency_bounds
        self.pulse_rate = pulse_rate
        self.pulse_rate_factor = pulse_rate_factor
        self.loudness = loudness
        self.loudness_cooling_factor = loudness_cooling_factor


Bats().set_name("Bats", register=True)
