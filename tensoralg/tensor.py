# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Cartesian tensors
=================

A Cartesian tensor has ``rank`` axes that all share one ``dimension``.
There is no metric, so every index is lower and lowering is a copy.

Kernel functions write into a caller supplied output tensor, reshaping it
first. Products and contractions are computed on the element array viewed
as ``(dimension,) * rank + element_shape`` and go through the scalar
algebra for every multiply and add.
"""

import logging
from typing import Sequence

import numpy as np

from .elementwise import (  # noqa: F401  (re-exported tensor operations)
    add,
    add_scalar,
    assign,
    conjugate,
    divide_by_scalar,
    divide_elements,
    infinite,
    is_equal,
    is_infinite,
    is_nan,
    is_not_equal,
    is_zero,
    multiply_by_scalar,
    multiply_elements,
    nan,
    negate,
    norm,
    round,
    scale,
    scale_by_double,
    scale_by_high_prec,
    scale_by_one_half,
    scale_by_rational,
    scale_by_two,
    subtract,
    subtract_scalar,
    within,
    zero,
)
from .errors import IndexOutOfBounds, InvalidArgument, ShapeMismatch
from .scalars import ScalarAlgebra
from .structure import Structure, check_same_kind

logger = logging.getLogger(__name__)


class CartesianTensor(Structure):
    """
    Parameters
    ----------
    algebra : ScalarAlgebra
        Element type.
    rank : int
        Number of axes; 0 is a single element.
    dimension : int
        Common length of every axis.
    values : array-like, optional
        Nested values; when given they fix rank and dimension.
    """

    def __init__(self, algebra: ScalarAlgebra, rank: int = 0, dimension: int = 1, values=None):
        super().__init__(algebra)
        self.rank = 0
        self.dimension = 0
        self.reshape(rank, dimension)
        if values is not None:
            self.load(values)

    @property
    def dims(self):
        return (self.dimension,) * self.rank

    @property
    def index_kinds(self):
        return ("lower",) * self.rank

    def reshape(self, rank: int, dimension: int) -> None:
        """Set rank and dimension; storage is zeroed when its size changes."""
        rank, dimension = int(rank), int(dimension)
        if rank < 0 or dimension < 0:
            raise InvalidArgument(f"rank and dimension must be non-negative, got {rank}, {dimension}")
        self.rank = rank
        self.dimension = dimension
        self.storage.resize(dimension**rank)

    def _set_dims(self, dims) -> None:
        dims = tuple(int(d) for d in dims)
        if len(set(dims)) > 1:
            raise ShapeMismatch(f"Cartesian tensor axes must share one dimension, got {dims}")
        self.reshape(len(dims), dims[0] if dims else self.dimension)

    def _adopt_like(self, other: "CartesianTensor") -> None:
        self.reshape(other.rank, other.dimension)

    def get(self, index: Sequence[int]):
        return self._get(tuple(index))

    def set(self, index: Sequence[int], value) -> None:
        self._set(tuple(index), value)

    def _view(self) -> np.ndarray:
        return self.storage.raw.reshape(self.dims + self.algebra.element_shape)


def _store(result: np.ndarray, rank: int, dimension: int, out: CartesianTensor) -> None:
    out.reshape(rank, dimension)
    out.storage.raw[...] = result.reshape((-1,) + out.algebra.element_shape)


def _check_axis(axis: int, rank: int, what: str) -> int:
    axis = int(axis)
    if not 0 <= axis < rank:
        raise IndexOutOfBounds(f"{what}: axis {axis} outside 0..{rank - 1}")
    return axis


# ---------------------------------------------------------------------
# products and contractions
# ---------------------------------------------------------------------
def outer_product(a: CartesianTensor, b: CartesianTensor, c: CartesianTensor) -> None:
    """
    c[i..., j...] = a[i...] * b[j...]

    The result has rank ``a.rank + b.rank``; a's axes come first. Both
    operands must share their dimension unless one of them is rank 0.
    """
    alg = check_same_kind(a, b, c)
    if a.rank > 0 and b.rank > 0 and a.dimension != b.dimension:
        raise ShapeMismatch(f"outer_product: dimensions {a.dimension} and {b.dimension} differ")
    dimension = a.dimension if a.rank > 0 else b.dimension
    es = alg.element_shape
    av = a.storage.raw.reshape(a.dims + (1,) * b.rank + es)
    bv = b.storage.raw.reshape((1,) * a.rank + b.dims + es)
    result = np.asarray(alg.multiply(av, bv), dtype=alg.dtype)
    _store(result, a.rank + b.rank, dimension, c)


multiply = outer_product


def contract(i: int, j: int, a: CartesianTensor, b: CartesianTensor) -> None:
    """Sum a over the diagonal ``index[i] == index[j]``; b has rank ``a.rank - 2``."""
    alg = check_same_kind(a, b)
    i = _check_axis(i, a.rank, "contract")
    j = _check_axis(j, a.rank, "contract")
    if i == j:
        raise InvalidArgument(f"contract: cannot contract axis {i} with itself")
    d = a.dimension
    moved = np.moveaxis(a._view(), (i, j), (0, 1))
    diag = moved[np.arange(d), np.arange(d)]
    result = np.asarray(alg.sum(diag, axis=0), dtype=alg.dtype)
    _store(result, a.rank - 2, d, b)


def inner_product(i: int, j: int, a: CartesianTensor, b: CartesianTensor, c: CartesianTensor) -> None:
    """``contract(i, a.rank + j, outer_product(a, b))``"""
    check_same_kind(a, b, c)
    _check_axis(i, a.rank, "inner_product")
    _check_axis(j, b.rank, "inner_product")
    tmp = CartesianTensor(a.algebra)
    outer_product(a, b, tmp)
    contract(i, a.rank + j, tmp, c)


def raise_index(i: int, a: CartesianTensor, b: CartesianTensor) -> None:
    raise InvalidArgument("cannot raise an index of a Cartesian tensor")


def lower_index(i: int, a: CartesianTensor, b: CartesianTensor) -> None:
    _check_axis(i, a.rank, "lower_index")
    assign(a, b)


def power(n: int, a: CartesianTensor, b: CartesianTensor) -> None:
    """b = a ⊗ a ⊗ ... (n factors); n = 0 gives unity shaped like a."""
    check_same_kind(a, b)
    n = int(n)
    if n < 0:
        raise InvalidArgument(f"tensor power must be non-negative, got {n}")
    if n == 0:
        b.reshape(a.rank, a.dimension)
        unity(b)
        return
    base = a.duplicate()
    acc = a.duplicate()
    for _ in range(n - 1):
        outer_product(acc, base, acc)
    assign(acc, b)


# ---------------------------------------------------------------------
# unity
# ---------------------------------------------------------------------
def unity(a: CartesianTensor) -> None:
    """Ones where every index is equal, zeros elsewhere."""
    alg = a.algebra
    zero(a)
    view = a._view()
    if a.rank == 0:
        view[...] = alg.unity()
        return
    for k in range(a.dimension):
        view[(k,) * a.rank] = alg.unity()


def is_unity(a: CartesianTensor) -> bool:
    u = CartesianTensor(a.algebra, a.rank, a.dimension)
    unity(u)
    return is_equal(a, u)


# ---------------------------------------------------------------------
# derivatives
# ---------------------------------------------------------------------
def comma_derivative(axis: int, a: CartesianTensor, b: CartesianTensor) -> None:
    """
    Finite-difference derivative along one axis with unit spacing.

    Central differences inside, one-sided differences at both ends. Axes of
    length below 2 give zeros.
    """
    alg = check_same_kind(a, b)
    axis = _check_axis(axis, a.rank, "comma_derivative")
    d = a.dimension
    src = np.moveaxis(a._view(), axis, 0)
    out = alg.zeros_like_shape(src.shape)
    if d >= 2:
        out[0] = alg.subtract(src[1], src[0])
        out[-1] = alg.subtract(src[-1], src[-2])
        if d > 2:
            out[1:-1] = alg.scale_rational(alg.subtract(src[2:], src[:-2]), 1, 2)
    else:
        logger.debug("comma_derivative: axis of length %d has no neighbours", d)
    _store(np.moveaxis(out, 0, axis), a.rank, d, b)


# no connection coefficients on a Cartesian tensor
semicolon_derivative = comma_derivative
