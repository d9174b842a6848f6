# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import numpy as np

from .errors import IndexOutOfBounds, InvalidArgument, ShapeMismatch
from .scalars import ScalarAlgebra


class LinearStorage:
    """
    Resizable flat sequence of algebra elements, indexed 0..size-1.

    The backing array has shape ``(size,) + algebra.element_shape``. Values
    are copied on the way in (``set``, ``assign_from``, ``load``) and on the
    way out (``get``), so two storages never share memory.

    Parameters
    ----------
    algebra : ScalarAlgebra
        Element operations and dtype.
    size : int
        Initial number of elements, all zero.
    """

    def __init__(self, algebra: ScalarAlgebra, size: int = 0):
        if not isinstance(algebra, ScalarAlgebra):
            raise TypeError(f"expected a ScalarAlgebra, got {type(algebra).__name__}")
        self.algebra = algebra
        # callers may mark a storage as owned by one thread; nothing here
        # spawns threads or locks
        self.single_threaded = False
        self._data = algebra.zeros_like_shape((self._check_size(size),) + algebra.element_shape)

    @staticmethod
    def _check_size(n) -> int:
        n = int(n)
        if n < 0:
            raise InvalidArgument(f"storage size must be non-negative, got {n}")
        return n

    def __len__(self) -> int:
        return self._data.shape[0]

    @property
    def size(self) -> int:
        return self._data.shape[0]

    @property
    def raw(self) -> np.ndarray:
        """The backing array (not a copy)."""
        return self._data

    def resize(self, n: int) -> None:
        """Reallocate to n zero elements if the size changes."""
        n = self._check_size(n)
        if n != self.size:
            self._data = self.algebra.zeros_like_shape((n,) + self.algebra.element_shape)

    def _check_index(self, i) -> int:
        i = int(i)
        if not 0 <= i < self.size:
            raise IndexOutOfBounds(f"storage index {i} outside 0..{self.size - 1}")
        return i

    def get(self, i: int):
        return np.array(self._data[self._check_index(i)], dtype=self._data.dtype)[()]

    def set(self, i: int, value) -> None:
        # element() unwraps 0-d object arrays; storing one in an object
        # slot would keep the array rather than the number
        self._data[self._check_index(i)] = self.algebra.element(value)

    def fill(self, value) -> None:
        self._data[...] = self.algebra.element(value)

    def load(self, values) -> None:
        """Replace the contents with `values`, resizing to fit."""
        arr = self.algebra.coerce(values)
        expected = len(self.algebra.element_shape) + 1
        if arr.ndim != expected:
            arr = arr.reshape((-1,) + self.algebra.element_shape)
        self._data = np.array(arr, dtype=self._data.dtype)

    def duplicate(self) -> "LinearStorage":
        out = LinearStorage(self.algebra)
        out._data = self._data.copy()
        out.single_threaded = self.single_threaded
        return out

    def assign_from(self, other: "LinearStorage") -> None:
        if other.algebra is not self.algebra:
            raise TypeError(f"cannot assign {other.algebra.name} storage to {self.algebra.name} storage")
        self._data = other._data.copy()

    def check_same_size(self, other: "LinearStorage", op: str = "operation") -> None:
        if self.size != other.size:
            raise ShapeMismatch(f"{op}: storage lengths {self.size} and {other.size} differ")

    def __repr__(self) -> str:
        return f"LinearStorage({self.algebra.name}, size={self.size})"
