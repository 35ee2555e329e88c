# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import swarmopt.common.typing as tp
from swarmopt import functions
from swarmopt.optimization import base as obase
from .harness import BatchRunHarness


class Experiment:
    """Specifies an experiment: one algorithm configuration on one function,
    run several times for statistics.

    Parameters
    ----------
    function: str or ObjectiveFunction
        the function to minimize, or its name in the function registry
        (it is looked up at instantiation, so that unknown names fail early)
    config: str or ConfiguredPopulation
        the algorithm configuration, or its name in the algorithm registry
    dimension: int
        dimension of the search space
    num_iterations: int
        number of iterations of each run
    """

    def __init__(
        self,
        function: tp.Union[str, functions.ObjectiveFunction],
        config: tp.Union[str, obase.ConfiguredPopulation],
        dimension: int = 20,
        num_iterations: int = 1000,
    ) -> None:
        self.function = functions.lookup(function) if isinstance(function, str) else function
        self.config = obase.registry[config] if isinstance(config, str) else config
        self.dimension = dimension
        self.num_iterations = num_iterations

    def harness(self, executor: tp.Optional[tp.ExecutorLike] = None, seed: tp.Optional[int] = None) -> BatchRunHarness:
        population = self.config(self.function, self.dimension, random_state=seed)
        return BatchRunHarness(population, self.num_iterations, executor=executor, seed=seed)

    def run(
        self,
        num_trials: int,
        num_lanes: tp.Optional[int] = None,
        executor: tp.Optional[tp.ExecutorLike] = None,
        seed: tp.Optional[int] = None,
    ) -> tp.Dict[str, tp.Any]:
        """Runs the batch and returns its description, with the statistics"""
        stat = self.harness(executor=executor, seed=seed).run(num_trials, num_lanes=num_lanes)
        summary = self.get_description()
        summary.update(stat.as_dict())
        return summary

    def get_description(self) -> tp.Dict[str, tp.Any]:
        """Returns a dictionary describing the experiment settings"""
        descr: tp.Dict[str, tp.Any] = {
            "function": self.function.name,
            "algorithm": self.config.__class__.__name__,
            "dimension": self.dimension,
            "num_iterations": self.num_iterations,
        }
        descr.update({x: str(y) if isinstance(y, tuple) else y for x, y in self.config.config().items()})
        return descr

    def __repr__(self) -> str:
        return f"Experiment: {self.config} on {self.function.name}<dimension={self.dimension}, num_iterations={self.num_iterations}>"

    def __eq__(self, other: tp.Any) -> bool:
        if not isinstance(other, Experiment):
            return False
        return self.get_description() == other.get_description()
