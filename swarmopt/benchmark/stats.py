# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import math
import swarmopt.common.typing as tp


class BatchStatistic:
    """Running statistics (minimum, maximum, mean, count) over the
    results of optimization trials.

    An empty statistic is the identity for merging, and merging is
    associative and commutative, so that statistics from several lanes
    can be merged in any order.

    Parameters
    ----------
    values: iterable of floats
        observations to add right away
    """

    def __init__(self, values: tp.Iterable[float] = ()) -> None:
        self.minimum = float("inf")
        self.maximum = float("-inf")
        self.mean = float("nan")  # undefined until first observation
        self.count = 0
        for value in values:
            self.add(value)

    def add(self, value: float) -> "BatchStatistic":
        """Adds an observation (in place)"""
        value = float(value)
        self.minimum = min(self.minimum, value)
        self.maximum = max(self.maximum, value)
        self.mean = value if not self.count else (self.mean * self.count + value) / (self.count + 1)
        self.count += 1
        return self

    def copy(self) -> "BatchStatistic":
        stat = BatchStatistic()
        stat.__dict__.update(self.__dict__)
        return stat

    def __add__(self, other: "BatchStatistic") -> "BatchStatistic":
        if not isinstance(other, BatchStatistic):
            return NotImplemented
        if not other.count:
            return self.copy()
        if not self.count:
            return other.copy()
        stat = BatchStatistic()
        stat.count = self.count + other.count
        stat.mean = (self.mean * self.count + other.mean * other.count) / stat.count
        stat.minimum = min(self.minimum, other.minimum)
        stat.maximum = max(self.maximum, other.maximum)
        return stat

    def isclose(self, other: "BatchStatistic", rel_tol: float = 1e-9, abs_tol: float = 1e-12) -> bool:
        """Equality, with a tolerance on the mean"""
        if (self.count, self.minimum, self.maximum) != (other.count, other.minimum, other.maximum):
            return False
        if not self.count:
            return True
        return math.isclose(self.mean, other.mean, rel_tol=rel_tol, abs_tol=abs_tol)

    def as_dict(self) -> tp.Dict[str, tp.Any]:
        return {"count": self.count, "min": self.minimum, "mean": self.mean, "max": self.maximum}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}<count={self.count}, min={self.minimum}, mean={self.mean}, max={self.maximum}>"


def merge(first: BatchStatistic, second: BatchStatistic) -> BatchStatistic:
    """Pure merge of two statistics"""
    return first + second
