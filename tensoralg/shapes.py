# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Index arithmetic for flat storages.

Offsets are row-major: the last axis varies fastest, the same order NumPy
uses for C-contiguous arrays. A storage of ``prod(dims)`` elements can
therefore always be viewed as an array of shape ``dims``.
"""

from dataclasses import dataclass, field
from typing import Sequence, Tuple

from .errors import IndexOutOfBounds, InvalidArgument, ShapeMismatch


def _as_dims(dims: Sequence[int]) -> Tuple[int, ...]:
    dims = tuple(int(d) for d in dims)
    if any(d < 0 for d in dims):
        raise InvalidArgument(f"dimension sizes must be non-negative, got {dims}")
    return dims


def num_elements(dims: Sequence[int]) -> int:
    n = 1
    for d in dims:
        n *= int(d)
    return n


def multipliers(dims: Sequence[int]) -> Tuple[int, ...]:
    """
    Per-axis strides such that ``offset = sum(index[k] * mult[k])``.

    >>> multipliers((2, 3, 4))
    (12, 4, 1)
    """
    dims = _as_dims(dims)
    mult = [1] * len(dims)
    for k in range(len(dims) - 2, -1, -1):
        mult[k] = mult[k + 1] * dims[k + 1]
    return tuple(mult)


def shapes_match(a: Sequence[int], b: Sequence[int]) -> bool:
    return len(a) == len(b) and all(int(x) == int(y) for x, y in zip(a, b))


def check_shapes_match(a: Sequence[int], b: Sequence[int], op: str = "operation") -> None:
    if not shapes_match(a, b):
        raise ShapeMismatch(f"{op}: shapes {tuple(a)} and {tuple(b)} do not match")


def index_to_linear(dims: Sequence[int], index: Sequence[int]) -> int:
    dims = _as_dims(dims)
    if len(index) != len(dims):
        raise IndexOutOfBounds(f"index {tuple(index)} has {len(index)} components, expected {len(dims)}")
    offset = 0
    for k, (i, d, m) in enumerate(zip(index, dims, multipliers(dims))):
        i = int(i)
        if not 0 <= i < d:
            raise IndexOutOfBounds(f"index component {k} = {i} outside 0..{d - 1}")
        offset += i * m
    return offset


def linear_to_index(dims: Sequence[int], offset: int) -> Tuple[int, ...]:
    dims = _as_dims(dims)
    offset = int(offset)
    if not 0 <= offset < num_elements(dims):
        raise IndexOutOfBounds(f"offset {offset} outside 0..{num_elements(dims) - 1}")
    index = []
    for m in multipliers(dims):
        q, offset = divmod(offset, m)
        index.append(q)
    return tuple(index)


@dataclass(frozen=True)
class ShapeDescriptor:
    """Dimension sizes plus their row-major multipliers."""

    dims: Tuple[int, ...]
    mult: Tuple[int, ...] = field(init=False)

    def __post_init__(self):
        dims = _as_dims(self.dims)
        object.__setattr__(self, "dims", dims)
        object.__setattr__(self, "mult", multipliers(dims))

    @classmethod
    def cartesian(cls, rank: int, dimension: int) -> "ShapeDescriptor":
        if rank < 0:
            raise InvalidArgument(f"rank must be non-negative, got {rank}")
        return cls((dimension,) * rank)

    @property
    def rank(self) -> int:
        return len(self.dims)

    @property
    def size(self) -> int:
        return num_elements(self.dims)

    def offset(self, index: Sequence[int]) -> int:
        return index_to_linear(self.dims, index)

    def index(self, offset: int) -> Tuple[int, ...]:
        return linear_to_index(self.dims, offset)

    def matches(self, other: "ShapeDescriptor") -> bool:
        return shapes_match(self.dims, other.dims)
