# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import time
import logging
import swarmopt.common.typing as tp
from . import base

global_logger = logging.getLogger(__name__)


class IterationLogger:
    """Logger to register as "iterate" callback in a population, for logging
    the best value regularly.

    Parameters
    ----------
    logger:
        given logger that callback will use to log
    log_level:
        log level that logger will write to
    log_interval_iterations: int
        max number of iterations before performing another log
    log_interval_seconds:
        max number of seconds before performing another log
    """

    def __init__(
        self,
        *,
        logger: logging.Logger = global_logger,
        log_level: int = logging.INFO,
        log_interval_iterations: int = 1,
        log_interval_seconds: float = 60.0,
    ) -> None:
        assert log_interval_iterations > 0
        assert log_interval_seconds > 0
        self._logger = logger
        self._log_level = log_level
        self._log_interval_iterations = int(log_interval_iterations)
        self._log_interval_seconds = log_interval_seconds
        self._next_iteration = self._log_interval_iterations
        self._next_time = time.time() + log_interval_seconds

    def __call__(self, population: base.Population[tp.Any], iteration: int) -> None:
        done = population.num_iterations
        if time.time() >= self._next_time or done >= self._next_iteration:
            self._next_time = time.time() + self._log_interval_seconds
            self._next_iteration = done + self._log_interval_iterations
            self._logger.log(
                self._log_level, "After iteration %s, best value is %s at %s",
                iteration, population.best_value, population.best_position.tolist(),
            )


class ProgressRecorder:
    """Records the best value after each iteration, as a convergence trace

    Usage
    -----
    recorder = ProgressRecorder()
    population.register_callback("iterate", recorder)
    population.run_for(100)
    recorder.best_values  # list of 100 non-increasing values
    """

    def __init__(self) -> None:
        self.iterations: tp.List[int] = []
        self.best_values: tp.List[float] = []

    def __call__(self, population: base.Population[tp.Any], iteration: int) -> None:
        self.iterations.append(iteration)
        self.best_values.append(population.best_value)

    def clear(self) -> None:
        self.iterations.clear()
        self.best_values.clear()

    def __len__(self) -> int:
        return len(self.best_values)
