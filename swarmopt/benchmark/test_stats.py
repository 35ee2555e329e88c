# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import math
import functools
import operator
import numpy as np
from swarmopt.common import testing
from .stats import BatchStatistic
from . import stats


def test_empty_statistic() -> None:
    stat = BatchStatistic()
    assert stat.count == 0
    assert math.isnan(stat.mean)
    assert stat.minimum == float("inf")
    assert stat.maximum == float("-inf")


def test_add() -> None:
    stat = BatchStatistic([3.0, 1.0])
    output = stat.add(5.0)
    assert output is stat
    assert stat.as_dict() == {"count": 3, "min": 1.0, "mean": 3.0, "max": 5.0}
    assert "count=3" in repr(stat)


@testing.parametrized(
    both_filled=([1.0, 2.0, 3.0], [10.0, -4.0]),
    first_empty=([], [2.0, 7.0]),
    second_empty=([2.0, 7.0], []),
    both_empty=([], []),
)
def test_merge_matches_single_fold(first: list, second: list) -> None:
    merged = stats.merge(BatchStatistic(first), BatchStatistic(second))
    assert merged.isclose(BatchStatistic(first + second))
    assert merged.isclose(BatchStatistic(second) + BatchStatistic(first))


def test_merge_does_not_modify_operands() -> None:
    first, second = BatchStatistic([1.0]), BatchStatistic([3.0])
    merged = first + second
    assert merged.count == 2
    assert first.count == 1 and second.count == 1
    empty = BatchStatistic()
    assert (empty + first) is not first


def test_merge_is_associative() -> None:
    rng = np.random.RandomState(12)
    parts = [BatchStatistic(rng.normal(size=k).tolist()) for k in [3, 0, 5, 1, 8]]
    left = functools.reduce(operator.add, parts, BatchStatistic())
    right = parts[0] + (parts[1] + (parts[2] + (parts[3] + parts[4])))
    shuffled = functools.reduce(operator.add, [parts[k] for k in [4, 2, 0, 3, 1]])
    assert left.isclose(right)
    assert left.isclose(shuffled)
    assert left.count == 17


def test_isclose() -> None:
    assert not BatchStatistic([1.0]).isclose(BatchStatistic([1.0, 1.0]))
    assert not BatchStatistic([1.0, 3.0]).isclose(BatchStatistic([1.0, 2.0, 3.0, 3.0]))
    assert BatchStatistic().isclose(BatchStatistic())


def test_single_observation() -> None:
    stat = BatchStatistic() + BatchStatistic([2.5])
    assert stat.as_dict() == {"count": 1, "min": 2.5, "mean": 2.5, "max": 2.5}
