# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import logging
import itertools
from pathlib import Path
import pandas as pd
import swarmopt.common.typing as tp
from .harness import create_seed_generator
from .experiments import registry as registry


logger = logging.getLogger(__name__)


def save_or_append_to_csv(df: pd.DataFrame, path: tp.PathLike) -> None:
    """Saves a dataframe to a file in append mode
    """
    path = Path(path)
    if path.exists():
        logger.info("Appending to existing file %s", path)
        predf = pd.read_csv(str(path))
        df = pd.concat([predf, df], sort=False)
    df.to_csv(path, index=False)


# pylint: disable=too-many-arguments
def compute(
    experiment_name: str,
    num_trials: int = 1,
    num_lanes: tp.Optional[int] = None,
    executor: tp.Optional[tp.ExecutorLike] = None,
    seed: tp.Optional[int] = None,
    cap_index: tp.Optional[int] = None,
) -> pd.DataFrame:
    """Runs all experiments of a plan

    Parameters
    ----------
    experiment_name: str
        name of the experiment plan (must be registered in experiments.registry)
    num_trials: int
        minimum number of runs of each experiment
    num_lanes: int or None
        number of lanes onto which the runs of each experiment are distributed
        (defaults to the number of CPUs)
    executor: Executor-like object
        an object such as concurrent.futures.ProcessPoolExecutor for running lanes in parallel
    seed: int
        a seed for the experiment plan
    cap_index: int
        index at which the experiment plan must be stopped (convenient for testing if the experiment
        plan holds many experiments, we can select the first cap_index=2 for instance)

    Returns
    -------
    pd.DataFrame
        The dataframe summarizing all the experiments (each experiment is a line)
    """
    maker = registry[experiment_name]
    seeds = create_seed_generator(seed)
    summaries = []
    for index, xp in enumerate(itertools.islice(maker(), 0, cap_index)):
        logger.info("Starting %s: %s", index, xp)
        summaries.append(xp.run(num_trials, num_lanes=num_lanes, executor=executor, seed=next(seeds)))
        logger.info("Finished %s", index)
    return pd.DataFrame(summaries)
