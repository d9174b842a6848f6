# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Common base for the vector, matrix and tensor handles.

A handle pairs a shape (``dims``) with a ``LinearStorage`` laid out in
row-major order. Handles own their storage outright: ``get`` returns a copy,
``set`` copies in, and ``duplicate`` deep-copies.
"""

from typing import Sequence, Tuple

import numpy as np

from .errors import ShapeMismatch
from .notation import format_elements, parse_elements
from .scalars import ScalarAlgebra
from .shapes import ShapeDescriptor, num_elements
from .storage import LinearStorage


class Structure:
    def __init__(self, algebra: ScalarAlgebra):
        if not isinstance(algebra, ScalarAlgebra):
            raise TypeError(f"expected a ScalarAlgebra, got {type(algebra).__name__}")
        self.algebra = algebra
        self.storage = LinearStorage(algebra, 0)

    # subclasses keep their own shape attributes and expose them as dims
    @property
    def dims(self) -> Tuple[int, ...]:
        raise NotImplementedError

    def _set_dims(self, dims: Sequence[int]) -> None:
        """Validate and adopt `dims`, resizing storage (zeros on change)."""
        raise NotImplementedError

    def _adopt_like(self, other: "Structure") -> None:
        self._set_dims(other.dims)

    @property
    def shape(self) -> ShapeDescriptor:
        return ShapeDescriptor(self.dims)

    @property
    def size(self) -> int:
        return self.storage.size

    # -----------------------------------------------------------------
    # element access
    # -----------------------------------------------------------------
    def _offset(self, index: Sequence[int]) -> int:
        return self.shape.offset(index)

    def _get(self, index: Sequence[int]):
        return self.storage.get(self._offset(index))

    def _set(self, index: Sequence[int], value) -> None:
        self.storage.set(self._offset(index), value)

    def as_array(self) -> np.ndarray:
        """Copy of the contents shaped ``dims + algebra.element_shape``."""
        return self.storage.raw.reshape(self.dims + self.algebra.element_shape).copy()

    def load(self, values) -> None:
        """Replace shape and contents from a nested array-like."""
        arr = self.algebra.coerce(values)
        lead = arr.shape[: arr.ndim - len(self.algebra.element_shape)]
        self._set_dims(lead)
        if num_elements(lead) != num_elements(self.dims):
            raise ShapeMismatch(f"values of shape {lead} do not fit {self.dims}")
        self.storage.load(arr.reshape((-1,) + self.algebra.element_shape))

    def duplicate(self):
        out = self.__class__.__new__(self.__class__)
        out.__dict__.update(self.__dict__)
        out.storage = self.storage.duplicate()
        return out

    # -----------------------------------------------------------------
    # text
    # -----------------------------------------------------------------
    @classmethod
    def from_string(cls, algebra: ScalarAlgebra, text: str):
        dims, values = parse_elements(algebra, text)
        out = cls(algebra)
        out._set_dims(dims)
        if values:
            out.storage.load(algebra.coerce(values))
        return out

    def __str__(self) -> str:
        return format_elements(self.algebra, self.dims, self.storage.raw)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.algebra.name}, dims={self.dims})"


def check_same_kind(*handles: Structure) -> ScalarAlgebra:
    """All handles must be the same class over the same algebra."""
    first = handles[0]
    for h in handles:
        if not isinstance(h, Structure):
            raise TypeError(f"expected a structure handle, got {type(h).__name__}")
        if type(h) is not type(first):
            raise TypeError(f"cannot mix {type(first).__name__} and {type(h).__name__}")
        if h.algebra is not first.algebra:
            raise TypeError(f"cannot mix {first.algebra.name} and {h.algebra.name} elements")
    return first.algebra
