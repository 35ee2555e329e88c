# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import itertools
import swarmopt.common.typing as tp
from swarmopt.common import decorators
from swarmopt.optimization.bats import Bats
from swarmopt.optimization.butterflies import Butterflies
from .xpbase import Experiment


registry: decorators.Registry[tp.Callable[..., tp.Iterator[Experiment]]] = decorators.Registry(kind="experiment")

FUNCTIONS = ["ackley", "schwefel", "brown", "rastrigin", "schwefel2", "solomon"]
FACTORS = [0.1, 0.3, 0.5, 0.7, 0.9]


@registry.register
def basic() -> tp.Iterator[Experiment]:
    """Small plan for testing"""
    for config in [Bats(count=10), Butterflies(count=10)]:
        yield Experiment("sphere", config, dimension=2, num_iterations=20)


@registry.register
def bats_sweep() -> tp.Iterator[Experiment]:
    """Bats on all classical functions, for a grid of pulse rate factors and loudness cooling factors"""
    for pulse_rate_factor, cooling in itertools.product(FACTORS, FACTORS):
        config = Bats(
            count=20,
            frequency_bounds=(0.0, 1.0),
            pulse_rate=0.7,
            pulse_rate_factor=pulse_rate_factor,
            loudness=1.4,
            loudness_cooling_factor=cooling,
        )
        for name in FUNCTIONS:
            yield Experiment(name, config, dimension=20, num_iterations=1000)


@registry.register
def butterflies_sweep() -> tp.Iterator[Experiment]:
    """Butterflies on all classical functions, for a grid of fragrance multipliers and local search chances"""
    for multiplier, chance in itertools.product(FACTORS, FACTORS):
        config = Butterflies(
            count=20,
            fragrance_multiplier=multiplier,
            fragrance_exponent_bounds=(0.1, 0.3),
            local_search_chance=chance,
        )
        for name in FUNCTIONS:
            yield Experiment(name, config, dimension=20, num_iterations=1000)
