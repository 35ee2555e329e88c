# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import numpy as np
import swarmopt.common.typing as tp
from swarmopt.common import errors
from swarmopt.functions import ObjectiveFunction
from .vector import FixedVector
from . import base


EPSILON = float(np.finfo(float).eps)


def fragrance(fitness: float, reference: float) -> float:
    """Fitness normalized by a reference fitness, guarded against division by 0.
    A denominator which still cancels out gives inf or nan.
    """
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.float64(fitness) / (reference + EPSILON))


# progress in the run, as a function of the iteration index and the number of iterations
_EXPONENT_SCHEDULES: tp.Dict[str, tp.Callable[[int, int], float]] = {
    "truncated": lambda iteration, num_iterations: float(iteration // num_iterations),
    "linear": lambda iteration, num_iterations: iteration / num_iterations,
}


class ButterflyAgent(base.Agent):
    """Butterfly of the Butterfly Optimization Algorithm, attracted either by the
    best butterfly (global search) or by random butterflies (local search), with
    a strength depending on its fragrance.
    """

    # pylint: disable=too-many-arguments
    def __init__(
        self,
        bounds: tp.Bounds,
        function: ObjectiveFunction,
        fragrance_multiplier: float,
        dimension: int,
        random_state: np.random.RandomState,
    ) -> None:
        super().__init__(bounds, FixedVector.uniform(bounds, dimension, random_state))
        self.function = function
        self.fragrance_multiplier = fragrance_multiplier
        self.fitness = function(self.position)
        self.fragrance = fragrance(self.fitness, self.fitness)

    def _attraction(self, exponent: float) -> float:
        # negative fragrances lead to nan, which propagates silently
        with np.errstate(invalid="ignore", divide="ignore", over="ignore"):
            return self.fragrance_multiplier * float(np.power(self.fragrance, exponent))

    def _fly(
        self,
        attractor: FixedVector,
        origin: FixedVector,
        exponent: float,
        best_fitness: float,
        random_state: np.random.RandomState,
    ) -> None:
        r = random_state.rand()
        self.position += (attractor * r ** 2 - origin) * self._attraction(exponent)
        self.position.clamp_in_place(*self.bounds)
        self.fitness = self.function(self.position)
        self.fragrance = fragrance(self.fitness, best_fitness)

    def global_search(
        self, best_position: FixedVector, exponent: float, best_fitness: float, random_state: np.random.RandomState
    ) -> None:
        """Flies toward the best position of the previous generation"""
        self._fly(best_position, self.position, exponent, best_fitness, random_state)

    # pylint: disable=too-many-arguments
    def local_search(
        self,
        first: FixedVector,
        second: FixedVector,
        exponent: float,
        best_fitness: float,
        random_state: np.random.RandomState,
    ) -> None:
        """Moves according to two positions of the previous generation"""
        self._fly(first, second, exponent, best_fitness, random_state)

    def reset(self, random_state: np.random.RandomState) -> None:
        self.position = FixedVector.uniform(self.bounds, self.position.dimension, random_state)
        self.best_fitness_seen = float("inf")
        self.fitness = self.function(self.position)
        self.fragrance = fragrance(self.fitness, self.fitness)


class Snapshot:
    """Frozen copy of the positions and fitnesses of a generation"""

    def __init__(self, agents: tp.Iterable[ButterflyAgent]) -> None:
        agents = list(agents)
        self.positions: tp.Tuple[FixedVector, ...] = tuple(agent.position.copy() for agent in agents)
        self.fitnesses: tp.Tuple[float, ...] = tuple(agent.fitness for agent in agents)
        self.best_index = int(np.argmin(self.fitnesses))

    @property
    def best_position(self) -> FixedVector:
        return self.positions[self.best_index]

    @property
    def best_fitness(self) -> float:
        return self.fitnesses[self.best_index]

    def sample(self, random_state: np.random.RandomState) -> FixedVector:
        """Position of a random agent (with replacement)"""
        return self.positions[random_state.randint(len(self.positions))]

    def __len__(self) -> int:
        return len(self.positions)


class ButterflyPopulation(base.Population[ButterflyAgent]):
    """Population of the Butterfly Optimization Algorithm

    Parameters
    ----------
    function: ObjectiveFunction
        the function to minimize
    dimension: int
        dimension of the search space
    count: int
        number of butterflies
    bounds: tuple of floats or None
        domain of every component (defaults to the bounds of the function)
    random_state: RandomState, int or None
        source of randomness of the population
    fragrance_multiplier: float
        scale of the moves
    fragrance_exponent_bounds: tuple of floats
        (lower, upper) values of the fragrance exponent during the run (lower <= upper)
    local_search_chance: float
        probability for each butterfly to perform a local search instead of a global one
    exponent_schedule: str
        "truncated" to progress from lower to upper bound with the integer ratio of
        iteration over number of iterations (the exponent then stays at its lower bound)
        or "linear" for a linear progression
    """

    # pylint: disable=too-many-arguments
    def __init__(
        self,
        function: ObjectiveFunction,
        dimension: int,
        count: int = 20,
        bounds: tp.Optional[tp.Sequence[float]] = None,
        random_state: tp.RandomLike = None,
        fragrance_multiplier: float = 0.5,
        fragrance_exponent_bounds: tp.Sequence[float] = (0.1, 0.3),
        local_search_chance: float = 0.5,
        exponent_schedule: str = "truncated",
    ) -> None:
        self.fragrance_exponent_bounds = base.check_bounds(
            "fragrance_exponent_bounds", fragrance_exponent_bounds, strict=False
        )
        self.local_search_chance = base.check_probability("local_search_chance", local_search_chance)
        if exponent_schedule not in _EXPONENT_SCHEDULES:
            raise errors.ConfigurationError(
                f'Unknown exponent schedule "{exponent_schedule}", choose among {sorted(_EXPONENT_SCHEDULES)}'
            )
        self.exponent_schedule = exponent_schedule
        self.fragrance_multiplier = float(fragrance_multiplier)
        super().__init__(function, dimension, count, bounds=bounds, random_state=random_state)

    def _spawn_agent(self) -> ButterflyAgent:
        return ButterflyAgent(self.bounds, self.function, self.fragrance_multiplier, self.dimension, self.random_state)

    def _reset_agent(self, agent: ButterflyAgent) -> None:
        agent.reset(self.random_state)

    def _evaluate_agent(self, agent: ButterflyAgent) -> float:
        return agent.fitness

    def fragrance_exponent(self, iteration: int, num_iterations: int) -> float:
        lower, upper = self.fragrance_exponent_bounds
        return lower + (upper - lower) * _EXPONENT_SCHEDULES[self.exponent_schedule](iteration, num_iterations)

    def _iterate(self, iteration: int, num_iterations: int) -> None:
        previous = Snapshot(self._agents)
        exponent = self.fragrance_exponent(iteration, num_iterations)
        rng = self.random_state
        for agent in self._agents:
            if rng.rand() < self.local_search_chance:
                first = previous.sample(rng)
                second = previous.sample(rng)
                agent.local_search(first, second, exponent, previous.best_fitness, rng)
            else:
                agent.global_search(previous.best_position, exponent, previous.best_fitness, rng)
            self._update_best(agent.position, agent.fitness)
            agent.tell(agent.fitness, iteration)


class Butterflies(base.ConfiguredPopulation):
    """Butterfly Optimization Algorithm configuration.
    Butterflies fly toward the best butterfly, or randomly within the population,
    proportionally to their fragrance (their fitness normalized by the best fitness).

    Parameters
    ----------
    count: int
        number of butterflies
    fragrance_multiplier: float
        scale of the moves
    fragrance_exponent_bounds: tuple of floats
        (lower, upper) values of the fragrance exponent during the run
    local_search_chance: float
        probability of a local search (in [0, 1])
    exponent_schedule: str
        "truncated" (the exponent stays at its lower bound) or "linear"

    Note
    ----
    Reference: S. Arora, S. Singh, Butterfly optimization algorithm: a novel approach
    for global optimization, 2019.
    """

    # pylint: disable=unused-argument,too-many-arguments
    def __init__(
        self,
        count: int = 20,
        fragrance_multiplier: float = 0.5,
        fragrance_exponent_bounds: tp.Tuple[float, float] = (0.1, 0.3),
        local_search_chance: float = 0.5,
        exponent_schedule: str = "truncated",
    ) -> None:
        super().__init__(ButterflyPopulation, locals())
        self.count = count
        self.fragrance_multiplier = fragrance_multiplier
        self.fragrance_exponent_bounds = fragrance_exponent_bounds
        self.local_search_chance = local_search_chance
        self.exponent_schedule = exponent_schedule


Butterflies().set_name("Butterflies", register=True)
