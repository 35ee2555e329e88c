# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import logging
import argparse
import contextlib
from concurrent import futures
import pandas as pd
import swarmopt.common.typing as tp
from swarmopt import functions
from swarmopt.common import errors
from swarmopt.common import tools
from swarmopt.optimization import base as obase
from swarmopt.optimization.bats import Bats
from swarmopt.optimization.butterflies import Butterflies
from .execution import SequentialExecutor
from .xpbase import Experiment
from . import core


DIMENSION = 20
_VERBOSITY = {0: logging.WARNING, 1: logging.INFO, 2: logging.DEBUG}


def make_config(args: argparse.Namespace) -> tp.Tuple[obase.ConfiguredPopulation, int]:
    """Returns the configured population and the number of iterations requested by the command"""
    if args.algorithm == "bats":
        config: obase.ConfiguredPopulation = Bats(
            count=args.bat_count,
            frequency_bounds=(args.frequency_left_bound, args.frequency_right_bound),
            pulse_rate=args.initial_pulse_rate,
            pulse_rate_factor=args.pulse_rate_factor,
            loudness=args.initial_loudness,
            loudness_cooling_factor=args.loudness_cooling_rate,
        )
        return config, args.bat_num_iters
    config = Butterflies(
        count=args.butterfly_count,
        fragrance_multiplier=args.fragrance_multiplier,
        fragrance_exponent_bounds=(args.fragrance_exponent_left_bound, args.fragrance_exponent_right_bound),
        local_search_chance=args.local_search_chance,
        exponent_schedule=args.exponent_schedule,
    )
    return config, args.butterfly_num_iters


def make_executor(name: str, num_workers: int) -> tp.ContextManager[tp.ExecutorLike]:
    if name == "process":
        return futures.ProcessPoolExecutor(max_workers=num_workers)
    if name == "thread":
        return futures.ThreadPoolExecutor(max_workers=num_workers)
    return contextlib.nullcontext(SequentialExecutor())


# pylint: disable=too-many-arguments,too-many-locals
def launch(
    function_names: tp.List[str],
    config: obase.ConfiguredPopulation,
    num_iterations: int,
    dimension: int = DIMENSION,
    try_count: tp.Optional[int] = None,
    num_lanes: tp.Optional[int] = None,
    executor: str = "process",
    seed: tp.Optional[int] = None,
    output: tp.Optional[tp.PathLike] = None,
) -> pd.DataFrame:
    """Optimizes each function, either once or try_count times for statistics,
    prints the results and returns them as a dataframe
    """
    if not function_names:
        raise errors.ConfigurationError("No functions given")
    experiments = [Experiment(f, config, dimension, num_iterations) for f in functions.lookup_all(function_names)]
    num_lanes = tools.default_num_lanes() if num_lanes is None else num_lanes
    summaries: tp.List[tp.Dict[str, tp.Any]] = []
    with make_executor(executor, num_lanes) as pool:
        if try_count is not None:
            for xp in experiments:
                summary = xp.run(try_count, num_lanes=num_lanes, executor=pool, seed=seed)
                print(f"{xp.function.name}: Finished {summary['count']} runs. Max solution is {summary['max']}. "
                      f"Average solution is {summary['mean']}. Min solution is {summary['min']}.")
                summaries.append(summary)
        else:
            jobs = [xp.harness(seed=seed).run_once(pool) for xp in experiments]
            for xp, job in zip(experiments, jobs):
                population = job.result()
                print(f"{xp.function.name}: Found optimum at {population.best_position.tolist()} = {population.best_value}")
                summary = xp.get_description()
                summary.update({"count": 1, "min": population.best_value, "mean": population.best_value,
                                "max": population.best_value})
                summaries.append(summary)
    df = pd.DataFrame(summaries)
    if output is not None:
        core.save_or_append_to_csv(df, output)
        print(f"Saved data to {output}")
    return df


def get_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Minimize benchmark functions with swarm algorithms.")
    parser.add_argument(
        "--functions", type=lambda s: [x for x in s.split(",") if x], required=True,
        help=f"Comma-separated list of functions, among {sorted(functions.registry)}",
    )
    parser.add_argument("--try-count", type=int, default=None,
                        help="Number of runs for each function, to compute statistics (single run if not provided)")
    parser.add_argument("--dimension", type=int, default=DIMENSION, help="Dimension of the search space")
    parser.add_argument("--num-lanes", type=int, default=None,
                        help="Number of parallel lanes (defaults to the number of CPUs)")
    parser.add_argument("--executor", choices=["process", "thread", "sequential"], default="process",
                        help="How the lanes are run")
    parser.add_argument("--seed", type=int, default=None, help="Use a seed for reproducibility")
    parser.add_argument("--output", type=str, default=None,
                        help="Path of a CSV file where results are saved (existing files are appended)")
    parser.add_argument("--verbosity", type=int, choices=sorted(_VERBOSITY), default=0, help="Logging verbosity")
    subparsers = parser.add_subparsers(dest="algorithm", required=True)
    bats = subparsers.add_parser("bats", help="Bat algorithm")
    bats.add_argument("--bat-num-iters", type=int, required=True)
    bats.add_argument("--bat-count", type=int, required=True)
    bats.add_argument("--frequency-left-bound", type=float, required=True)
    bats.add_argument("--frequency-right-bound", type=float, required=True)
    bats.add_argument("--initial-pulse-rate", type=float, required=True)
    bats.add_argument("--pulse-rate-factor", type=float, required=True)
    bats.add_argument("--initial-loudness", type=float, required=True)
    bats.add_argument("--loudness-cooling-rate", type=float, required=True)
    butterflies = subparsers.add_parser("butterflies", help="Butterfly optimization algorithm")
    butterflies.add_argument("--butterfly-num-iters", type=int, required=True)
    butterflies.add_argument("--butterfly-count", type=int, required=True)
    butterflies.add_argument("--fragrance-multiplier", type=float, required=True)
    butterflies.add_argument("--fragrance-exponent-left-bound", type=float, required=True)
    butterflies.add_argument("--fragrance-exponent-right-bound", type=float, required=True)
    butterflies.add_argument("--local-search-chance", type=float, required=True)
    butterflies.add_argument("--exponent-schedule", choices=["truncated", "linear"], default="truncated")
    return parser


def main(argv: tp.Optional[tp.List[str]] = None) -> pd.DataFrame:
    parser = get_parser()
    args = parser.parse_args(argv)
    if not args.functions:
        parser.error("No functions given")
    logging.basicConfig(level=_VERBOSITY[args.verbosity], format="%(asctime)s %(name)s %(levelname)s: %(message)s")
    config, num_iterations = make_config(args)
    return launch(
        args.functions,
        config,
        num_iterations,
        dimension=args.dimension,
        try_count=args.try_count,
        num_lanes=args.num_lanes,
        executor=args.executor,
        seed=args.seed,
        output=args.output,
    )


if __name__ == "__main__":
    main()
