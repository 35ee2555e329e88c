# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import copy
import logging
import operator
import functools
from concurrent import futures
import numpy as np
import swarmopt.common.typing as tp
from swarmopt.common import errors
from swarmopt.common import tools
from swarmopt.optimization.base import Population
from .execution import SequentialExecutor
from .stats import BatchStatistic


logger = logging.getLogger(__name__)


def create_seed_generator(seed: tp.Optional[int]) -> tp.Iterator[int]:
    """Create a stream of seeds, independent from the standard random stream.
    This is designed to provide independent random streams to lanes, reproducibly if seeded.

    Parameter
    ---------
    seed: int or None
        the initial seed (None for a seed drawn from the system entropy)

    Yields
    ------
    int
        new seeds
    """
    generator = np.random.RandomState(seed=seed)
    while True:
        yield int(generator.randint(2 ** 32, dtype=np.uint64))


def run_lane(population: Population[tp.Any], num_iterations: int, num_trials: int, seed: int) -> BatchStatistic:
    """Runs num_trials optimizations of num_iterations iterations with the population, and
    returns the statistics of the best values.
    The population is reseeded and reset first, then all trials pull from this single stream.
    """
    population.random_state = np.random.RandomState(seed)
    population.reset()
    stat = BatchStatistic()
    for _ in range(num_trials):
        population.run_for(num_iterations)
        stat.add(population.best_value)
        population.reset()
    return stat


def run_single(population: Population[tp.Any], num_iterations: int, seed: int) -> Population[tp.Any]:
    """Runs one optimization of num_iterations iterations with the reseeded and reset population,
    and returns it
    """
    population.random_state = np.random.RandomState(seed)
    population.reset()
    population.run_for(num_iterations)
    return population


class BatchRunHarness:
    """Runs many independent optimizations of a population on parallel lanes,
    and aggregates the best values into a BatchStatistic.

    Parameters
    ----------
    population: Population
        the configured population, which is copied for each lane (it is never modified)
    num_iterations: int
        number of iterations of each optimization
    executor: Executor-like object or None
        an object such as concurrent.futures.ProcessPoolExecutor for running lanes in parallel.
        If None, a process pool is created for each batch (or no pool at all with only 1 lane).
    seed: int or None
        seed of the generator of lane seeds, for reproducibility

    Note
    ----
    - Lanes do not share any state: each one gets its own copy of the population and its own seed.
    - Process-based executors require the population to be picklable (objective functions defined
      at module level).
    - The failure of any lane aborts the whole batch with a LaneFailureError.
    """

    def __init__(
        self,
        population: Population[tp.Any],
        num_iterations: int,
        executor: tp.Optional[tp.ExecutorLike] = None,
        seed: tp.Optional[int] = None,
    ) -> None:
        if num_iterations < 0:
            raise errors.ConfigurationError(f"Number of iterations must be positive, got {num_iterations}")
        self.population = population
        self.num_iterations = int(num_iterations)
        self.executor = executor
        self._seeds = create_seed_generator(seed)
        self.lane_statistics: tp.List[BatchStatistic] = []  # filled by the last batch

    @staticmethod
    def plan(num_trials: int, num_lanes: tp.Optional[int] = None) -> tp.List[int]:
        """Number of trials for each lane: every lane runs ceil(num_trials / num_lanes) trials,
        so that at least num_trials are run (and at most num_lanes - 1 more).
        """
        num_lanes = tools.default_num_lanes() if num_lanes is None else num_lanes
        if num_trials < 1 or num_lanes < 1:
            raise errors.ConfigurationError(
                f"Number of trials and lanes must be strictly positive (got {num_trials} and {num_lanes})"
            )
        return [tools.ceil_div(num_trials, num_lanes)] * num_lanes

    def run(self, num_trials: int, num_lanes: tp.Optional[int] = None) -> BatchStatistic:
        """Runs at least num_trials optimizations on num_lanes lanes
        (defaults to the number of CPUs) and returns the merged statistics
        """
        plan = self.plan(num_trials, num_lanes)
        if self.executor is not None:
            return self._run(plan, self.executor)
        if len(plan) == 1:
            return self._run(plan, SequentialExecutor())
        with futures.ProcessPoolExecutor(max_workers=len(plan)) as executor:
            return self._run(plan, executor)

    def _run(self, plan: tp.List[int], executor: tp.ExecutorLike) -> BatchStatistic:
        logger.info("Starting %s trials of %s on %s lanes", sum(plan), self.population, len(plan))
        jobs: tp.List[tp.JobLike[BatchStatistic]] = [
            executor.submit(run_lane, copy.deepcopy(self.population), self.num_iterations, num_trials, next(self._seeds))
            for num_trials in plan
        ]
        try:
            stats = [job.result() for job in jobs]
        except Exception as e:  # pylint: disable=broad-except
            for job in jobs:
                cancel = getattr(job, "cancel", None)
                if cancel is not None:
                    cancel()
            raise errors.LaneFailureError(f"A lane failed, aborting the batch: {e!r}") from e
        self.lane_statistics = stats
        result = functools.reduce(operator.add, stats, BatchStatistic())
        logger.info("Finished %s trials of %s: %s", result.count, self.population, result)
        return result

    def run_once(self, executor: tp.Optional[tp.ExecutorLike] = None) -> tp.JobLike[Population[tp.Any]]:
        """Submits a single optimization on a copy of the population, the job returns this copy"""
        executor = SequentialExecutor() if executor is None else executor
        return executor.submit(run_single, copy.deepcopy(self.population), self.num_iterations, next(self._seeds))
