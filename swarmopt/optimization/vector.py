# Copyright (c) Facebook, Inc. and its affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import numpy as np
import swarmopt.common.typing as tp


Operand = tp.Union["FixedVector", float]


class FixedVector:
    """Real vector with a dimension fixed at creation.

    Arithmetic operators return new vectors and never modify their operands,
    except for the in-place accumulation (:code:`+=`) and :code:`clamp_in_place`,
    which agents use in their move steps.

    Parameters
    ----------
    values: array-like
        the N components of the vector (copied)

    Note
    ----
    Combining vectors of different dimensions is a programming error,
    it is only checked through assertions.
    """

    __slots__ = ("_data",)

    def __init__(self, values: tp.ArrayLike) -> None:
        data = np.array(values, dtype=float)  # always a copy
        assert data.ndim == 1, f"Expected a 1d vector but got shape {data.shape}"
        self._data = data

    @classmethod
    def zeros(cls, dimension: int) -> "FixedVector":
        return cls(np.zeros(dimension))

    @classmethod
    def uniform(cls, bounds: tp.Bounds, dimension: int, random_state: np.random.RandomState) -> "FixedVector":
        """Vector with components independently drawn in [lower, upper)"""
        return cls(random_state.uniform(bounds[0], bounds[1], size=dimension))

    @property
    def dimension(self) -> int:
        return self._data.size

    @property
    def value(self) -> np.ndarray:
        """Read-only view of the components"""
        view = self._data.view()
        view.flags.writeable = False
        return view

    def __array__(self, dtype: tp.Any = None, copy: tp.Optional[bool] = None) -> np.ndarray:
        # pylint: disable=unused-argument
        return np.array(self._data, dtype=dtype)

    def copy(self) -> "FixedVector":
        return FixedVector(self._data)

    def _operand(self, other: Operand) -> tp.Union[np.ndarray, float]:
        if isinstance(other, FixedVector):
            assert other.dimension == self.dimension, f"Dimension mismatch: {self.dimension} vs {other.dimension}"
            return other._data
        return float(other)

    def __add__(self, other: Operand) -> "FixedVector":
        return FixedVector(self._data + self._operand(other))

    __radd__ = __add__

    def __sub__(self, other: Operand) -> "FixedVector":
        return FixedVector(self._data - self._operand(other))

    def __mul__(self, scalar: float) -> "FixedVector":
        return FixedVector(self._data * float(scalar))

    __rmul__ = __mul__

    def __iadd__(self, other: Operand) -> "FixedVector":
        self._data += self._operand(other)
        return self

    def clamp_in_place(self, lower: float, upper: float) -> "FixedVector":
        """Sets every component to min(max(component, lower), upper)"""
        np.clip(self._data, lower, upper, out=self._data)
        return self

    def __eq__(self, other: tp.Any) -> bool:
        if not isinstance(other, FixedVector):
            return NotImplemented
        return self.dimension == other.dimension and bool(np.array_equal(self._data, other._data))

    def __ne__(self, other: tp.Any) -> bool:
        equal = self.__eq__(other)
        return equal if equal is NotImplemented else not equal

    __hash__ = None  # type: ignore

    def __len__(self) -> int:
        return self.dimension

    def __iter__(self) -> tp.Iterator[float]:
        return iter(self._data.tolist())

    def __getitem__(self, index: int) -> float:
        return float(self._data[index])

    def tolist(self) -> tp.List[float]:
        return self._data.tolist()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._data.tolist()})"
