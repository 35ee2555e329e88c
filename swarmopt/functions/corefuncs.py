# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

from math import exp, sqrt
import numpy as np
import swarmopt.common.typing as tp
from swarmopt.common import errors
from swarmopt.common.decorators import Registry


# each function is registered with its valid domain as "bounds" info
registry: Registry[tp.Callable[[np.ndarray], float]] = Registry(kind="function", error=errors.UnknownFunctionError)


@registry.register_with_info(bounds=(-5.12, 5.12))
def sphere(x: np.ndarray) -> float:
    """The most classical continuous optimization testbed.

    If you do not solve that one then you have a bug."""
    assert x.ndim == 1
    return float(x.dot(x))


@registry.register_with_info(bounds=(-32.0, 32.0))
def ackley(x: np.ndarray) -> float:
    dim = x.size
    sum_cos = np.sum(np.cos(2 * np.pi * x))
    return -20.0 * exp(-0.2 * sqrt(sphere(x) / dim)) - exp(sum_cos / dim) + 20 + exp(1)


@registry.register_with_info(bounds=(-10.0, 10.0))
def schwefel(x: np.ndarray) -> float:
    """Schwefel 2.22: sum of squared absolute values plus their product."""
    absolutes = np.abs(x)
    return float(np.sum(absolutes ** 2) + np.prod(absolutes))


@registry.register_with_info(bounds=(-1.0, 4.0))
def brown(x: np.ndarray) -> float:
    """Sum over consecutive pairs of squared components a, b of a^(b+1) + b^(a+1)."""
    x2 = x ** 2
    first, second = x2[:-1], x2[1:]
    return float(np.sum(first ** (second + 1) + second ** (first + 1)))


@registry.register_with_info(bounds=(-5.12, 5.12))
def rastrigin(x: np.ndarray) -> float:
    """Classical multimodal function."""
    cosi = float(np.sum(np.cos(2 * np.pi * x)))
    return float(10 * (len(x) - cosi) + sphere(x))


@registry.register_with_info(bounds=(-100.0, 100.0))
def schwefel2(x: np.ndarray) -> float:
    """Sum of absolute values of x sin(sqrt(|x|)), with many local minima."""
    return float(np.sum(np.abs(x * np.sin(np.sqrt(np.abs(x))))))


@registry.register_with_info(bounds=(-100.0, 100.0))
def solomon(x: np.ndarray) -> float:
    """Salomon function: rotationally invariant, with concentric ripples."""
    norm = sqrt(sphere(x))
    return float(1 - np.cos(2 * np.pi * norm) + 0.1 * norm)
