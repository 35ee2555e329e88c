# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import logging
import warnings
import numpy as np
import swarmopt.common.typing as tp
from swarmopt.common import errors
from swarmopt.common import tools
from swarmopt.common.decorators import Registry
from swarmopt.functions import ObjectiveFunction
from .vector import FixedVector


logger = logging.getLogger(__name__)
registry: Registry["ConfiguredPopulation"] = Registry(kind="algorithm")
A = tp.TypeVar("A", bound="Agent")
_IterateCallBack = tp.Callable[["Population[tp.Any]", int], None]


def check_bounds(name: str, bounds: tp.Sequence[float], strict: bool = True) -> tp.Bounds:
    """Returns the bounds as a tuple of floats, or raises a ConfigurationError
    if they are not ordered (lower < upper if strict, lower <= upper otherwise)
    """
    if len(bounds) != 2:
        raise errors.ConfigurationError(f"{name} must be a (lower, upper) pair, got {bounds}")
    lower, upper = float(bounds[0]), float(bounds[1])
    valid = lower < upper if strict else lower <= upper
    if not valid:
        raise errors.ConfigurationError(f"Incorrect order of {name} or zero size: {(lower, upper)}")
    return lower, upper


def check_probability(name: str, value: float) -> float:
    """Probabilities outside of [0, 1] are accepted, with a warning"""
    value = float(value)
    if not 0 <= value <= 1:
        warnings.warn(f"{name}={value} is not in [0, 1], behavior is ill-defined", errors.IllDefinedParameterWarning)
    return value


def as_random_state(random_state: tp.RandomLike) -> np.random.RandomState:
    """Converts a seed (or None for a fresh seed) to a RandomState"""
    if isinstance(random_state, np.random.RandomState):
        return random_state
    return np.random.RandomState(random_state)


class Agent:
    """One candidate solution, with its own position in the domain.

    Parameters
    ----------
    bounds: tuple of floats
        domain (lower, upper) for every component of the position
    position: FixedVector
        initial position
    """

    def __init__(self, bounds: tp.Bounds, position: FixedVector) -> None:
        self.bounds = bounds
        self.position = position
        self.best_fitness_seen = float("inf")

    def tell(self, value: float, iteration: int) -> bool:
        """Records a fresh evaluation of the agent, and adapts its parameters
        if it strictly improves its own best fitness.
        Returns True in this case.
        """
        if value < self.best_fitness_seen:
            self.best_fitness_seen = value
            self.on_improvement(iteration)
            return True
        return False

    def on_improvement(self, iteration: int) -> None:
        """Parameter adaptation after an improvement (nothing by default)"""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}<position={self.position.tolist()}, best={self.best_fitness_seen}>"


class Population(tp.Generic[A]):  # pylint: disable=too-many-instance-attributes
    """Set of agents searching for the minimum of a function, with the
    global best found since the last reset.

    Variants need to implement 4 methods:

    - :code:`_spawn_agent()` to create a randomized agent,
    - :code:`_reset_agent(agent)` to re-randomize an agent with the initial parameters,
    - :code:`_evaluate_agent(agent)` to provide the fitness of an agent at its current position,
    - :code:`_iterate(iteration, num_iterations)` to run one generation.

    Parameters
    ----------
    function: ObjectiveFunction
        the function to minimize
    dimension: int
        dimension of the search space
    count: int
        number of agents
    bounds: tuple of floats or None
        domain of every component (defaults to the bounds of the function)
    random_state: RandomState, int or None
        source of randomness of the whole population (or a seed for it). It is
        the only source of randomness used, and it is passed explicitly to the agents.

    Note
    ----
    Settings are validated before any agent is created, and raise a ConfigurationError
    if they are not valid.
    """

    def __init__(
        self,
        function: ObjectiveFunction,
        dimension: int,
        count: int,
        bounds: tp.Optional[tp.Sequence[float]] = None,
        random_state: tp.RandomLike = None,
    ) -> None:
        self._bounds = check_bounds("bounds", function.bounds if bounds is None else bounds)
        if dimension < 1:
            raise errors.ConfigurationError(f"Dimension must be strictly positive, got {dimension}")
        if count < 1:
            raise errors.ConfigurationError(f"Population needs at least one agent, got count={count}")
        self._function = function
        self._dimension = int(dimension)
        self._random_state = as_random_state(random_state)
        self._callbacks: tp.Dict[str, tp.List[_IterateCallBack]] = {}
        self.num_iterations = 0
        self._best_position = FixedVector.zeros(self._dimension)
        self._best_value = float("inf")
        self._agents: tp.List[A] = [self._spawn_agent() for _ in range(count)]
        self._recompute_best()

    @property
    def function(self) -> ObjectiveFunction:
        return self._function

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def bounds(self) -> tp.Bounds:
        return self._bounds

    @property
    def agents(self) -> tp.Tuple[A, ...]:
        return tuple(self._agents)

    @property
    def best_position(self) -> FixedVector:
        """Best position found since the last reset (copy)"""
        return self._best_position.copy()

    @property
    def best_value(self) -> float:
        """Minimum fitness observed since the last reset"""
        return self._best_value

    @property
    def random_state(self) -> np.random.RandomState:
        """Random state the population and its agents pull from.
        It can be replaced, eg to provide an independent stream to a copy.
        """
        return self._random_state

    @random_state.setter
    def random_state(self, random_state: tp.RandomLike) -> None:
        self._random_state = as_random_state(random_state)

    def register_callback(self, name: str, callback: _IterateCallBack) -> None:
        """Add a callback method called after each generation.

        Parameters
        ----------
        name: str
            name of the method to register the callback for (only "iterate" for now)
        callback: callable
            a callable taking the population and the index of the iteration as parameters
        """
        if name not in ["iterate"]:
            raise ValueError(f'Unknown callback name "{name}"')
        self._callbacks.setdefault(name, []).append(callback)

    def remove_all_callbacks(self) -> None:
        self._callbacks = {}

    def _update_best(self, position: FixedVector, value: float) -> bool:
        if value < self._best_value:
            self._best_value = value
            self._best_position = position.copy()
            return True
        return False

    def _recompute_best(self) -> None:
        self._best_position = FixedVector.zeros(self._dimension)
        self._best_value = float("inf")
        for agent in self._agents:
            self._update_best(agent.position, self._evaluate_agent(agent))

    def iterate(self, iteration: int, num_iterations: int) -> None:
        """Runs one generation

        Parameters
        ----------
        iteration: int
            index of the generation in the run
        num_iterations: int
            total number of generations of the run
        """
        self._iterate(iteration, num_iterations)
        self.num_iterations += 1
        for callback in self._callbacks.get("iterate", []):
            callback(self, iteration)

    def run_for(self, num_iterations: int) -> float:
        """Runs exactly num_iterations generations and returns the best value"""
        for iteration in range(num_iterations):
            self.iterate(iteration, num_iterations)
        return self._best_value

    def reset(self) -> None:
        """Re-randomizes all agents with the initially configured parameters,
        and forgets the global best.
        """
        for agent in self._agents:
            self._reset_agent(agent)
        self.num_iterations = 0
        self._recompute_best()
        logger.debug("Reset %s, new best value is %s", self, self._best_value)

    # to be implemented by the variants

    def _spawn_agent(self) -> A:
        raise NotImplementedError

    def _reset_agent(self, agent: A) -> None:
        raise NotImplementedError

    def _evaluate_agent(self, agent: A) -> float:
        raise NotImplementedError

    def _iterate(self, iteration: int, num_iterations: int) -> None:
        raise NotImplementedError

    def __repr__(self) -> str:
        return (f"{self.__class__.__name__}<function={self._function.name}, dimension={self._dimension}, "
                f"count={len(self._agents)}, best_value={self._best_value}>")


class ConfiguredPopulation:
    """Creates populations with a given configuration.

    Parameters
    ----------
    PopulationClass: type
        class of the population to configure
    config: dict
        dictionnary of all the configurations

    Note
    ----
    - This provides a default repr which can be bypassed through set_name
    - The configuration is checked at initialization by creating a small population
    """

    def __init__(self, PopulationClass: tp.Type[Population[tp.Any]], config: tp.Dict[str, tp.Any]) -> None:
        self._PopulationClass = PopulationClass
        config.pop("self", None)  # self comes from "locals()"
        config.pop("__class__", None)  # self comes from "locals()"
        self._config = config
        diff = tools.different_from_defaults(instance=self, instance_dict=config, check_mismatches=True)
        params = ", ".join(f"{x}={y!r}" for x, y in sorted(diff.items()))
        self.name = f"{self.__class__.__name__}({params})"
        # try instantiating for init checks
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", errors.IllDefinedParameterWarning)
            self(_CHECK_FUNCTION, dimension=1, random_state=0)

    def config(self) -> tp.Dict[str, tp.Any]:
        return dict(self._config)

    def __call__(
        self,
        function: ObjectiveFunction,
        dimension: int,
        bounds: tp.Optional[tp.Sequence[float]] = None,
        random_state: tp.RandomLike = None,
    ) -> Population[tp.Any]:
        """Creates a population for the function

        Parameters
        ----------
        function: ObjectiveFunction
            the function to minimize
        dimension: int
            dimension of the search space
        bounds: tuple of floats or None
            domain of the search (defaults to the bounds of the function)
        random_state: RandomState, int or None
            source of randomness of the population
        """
        return self._PopulationClass(function, dimension, bounds=bounds, random_state=random_state, **self._config)

    def __repr__(self) -> str:
        return self.name

    def set_name(self, name: str, register: bool = False) -> "ConfiguredPopulation":
        """Set a new representation for the instance"""
        self.name = name
        if register:
            registry.register_name(name, self)
        return self

    def __eq__(self, other: tp.Any) -> tp.Any:
        if self.__class__ == other.__class__:
            return self._config == other._config
        return False


def _check_sphere(x: np.ndarray) -> float:
    return float(x.dot(x))


_CHECK_FUNCTION = ObjectiveFunction("check", _check_sphere, (-1.0, 1.0))
