# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

from .common import typing as typing
from .functions import ObjectiveFunction as ObjectiveFunction
from .optimization import FixedVector as FixedVector
from .optimization import Population as Population
from .optimization import ConfiguredPopulation as ConfiguredPopulation
from .optimization import registry as algorithms
from .optimization import callbacks as callbacks
from . import functions as functions


__all__ = ["ObjectiveFunction", "FixedVector", "Population", "ConfiguredPopulation", "algorithms", "callbacks", "functions", "typing"]


__version__ = "0.1.0"
