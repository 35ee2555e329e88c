# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import numpy as np
import swarmopt.common.typing as tp
from swarmopt.common import errors
from . import corefuncs


class ObjectiveFunction:
    """Black-box function to minimize, with its valid input domain.

    Parameters
    ----------
    name: str
        name of the function (used for reporting)
    function: callable
        pure function taking a 1d numpy array and returning a float
    bounds: tuple of floats
        (lower, upper) domain of every component

    Note
    ----
    Instances are picklable as long as the underlying function is defined
    at module level, which is required for process-based batch runs.
    """

    def __init__(self, name: str, function: tp.Callable[[np.ndarray], float], bounds: tp.Bounds) -> None:
        self.name = name
        self.function = function
        self.bounds = (float(bounds[0]), float(bounds[1]))

    def __call__(self, x: tp.ArrayLike) -> float:
        data = np.asarray(x, dtype=float)  # vectors convert through __array__
        return float(self.function(data))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name}, bounds={self.bounds})"


def lookup(name: str) -> ObjectiveFunction:
    """Returns the registered function with this name

    Raises
    ------
    UnknownFunctionError
        if the name is not registered
    """
    func = corefuncs.registry[name]
    bounds = corefuncs.registry.get_info(name).get("bounds")
    if bounds is None:
        raise errors.ConfigurationError(f'Function "{name}" is registered without bounds')
    return ObjectiveFunction(name, func, bounds)


def lookup_all(names: tp.Iterable[str]) -> tp.List[ObjectiveFunction]:
    """Looks up all names at once, so that a typo fails before any computation"""
    return [lookup(name) for name in names]
