# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Vector operations over any scalar algebra
"""

import functools
import itertools

import numpy as np

from . import tensor
from .elementwise import (  # noqa: F401  (re-exported vector operations)
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
from .errors import InvalidArgument, ShapeMismatch
from .matrix import Matrix
from .scalars import ScalarAlgebra
from .structure import Structure, check_same_kind
from .tensor import CartesianTensor
from .utils import permutation_sign


class Vector(Structure):
    def __init__(self, algebra: ScalarAlgebra, length: int = 0, values=None):
        super().__init__(algebra)
        self.length = 0
        self.alloc(length)
        if values is not None:
            self.load(values)

    @property
    def dims(self):
        return (self.length,)

    def alloc(self, length: int) -> None:
        length = int(length)
        if length < 0:
            raise InvalidArgument(f"vector length must be non-negative, got {length}")
        self.length = length
        self.storage.resize(length)

    def _set_dims(self, dims) -> None:
        dims = tuple(dims)
        if len(dims) != 1:
            raise ShapeMismatch(f"a vector needs one dimension, got {dims}")
        self.alloc(dims[0])

    def get(self, i: int):
        return self._get((i,))

    def set(self, i: int, value) -> None:
        self._set((i,), value)

    def as_tensor(self) -> CartesianTensor:
        """Copy as a rank-1 Cartesian tensor."""
        t = CartesianTensor(self.algebra, 1, self.length)
        t.storage.assign_from(self.storage)
        return t


@functools.cache
def _permutation_symbol(algebra: ScalarAlgebra) -> CartesianTensor:
    eps = CartesianTensor(algebra, 3, 3)
    one = algebra.unity()
    for perm in itertools.permutations(range(3)):
        value = one if permutation_sign(list(perm)) > 0 else algebra.negate(one)
        eps.set(perm, value)
    return eps


def levi_civita(algebra: ScalarAlgebra) -> CartesianTensor:
    """The rank-3 permutation symbol over `algebra`, built once per algebra."""
    return _permutation_symbol(algebra).duplicate()


def _from_tensor(t: CartesianTensor, out: Vector) -> None:
    out.alloc(t.storage.size)
    out.storage.assign_from(t.storage)


def dot_product(a: Vector, b: Vector):
    """
    sum_i conj(a_i) * b_i

    The conjugate makes the product conjugate-linear in `a`, so that
    ``dot_product(a, a)`` is real for complex and hypercomplex vectors.
    Computed as the tensor inner product of the two rank-1 tensors.
    """
    alg = check_same_kind(a, b)
    if a.length != b.length:
        raise ShapeMismatch(f"dot_product: lengths {a.length} and {b.length} differ")
    if a.length == 0:
        return alg.zero()
    ca = a.as_tensor()
    tensor.conjugate(ca, ca)
    c = CartesianTensor(alg)
    tensor.inner_product(0, 0, ca, b.as_tensor(), c)
    return c.get(())


def cross_product(a: Vector, b: Vector, c: Vector) -> None:
    """
    c_i = eps_ijk a_j b_k, as two outer products with the Levi-Civita
    symbol followed by two contractions.
    """
    alg = check_same_kind(a, b, c)
    if a.length != 3 or b.length != 3:
        raise ShapeMismatch(f"cross_product needs length-3 vectors, got {a.length} and {b.length}")
    t = CartesianTensor(alg)
    tensor.outer_product(levi_civita(alg), a.as_tensor(), t)  # [i, j, k, l]
    tensor.contract(1, 3, t, t)  # [i, k]
    tensor.outer_product(t, b.as_tensor(), t)  # [i, k, m]
    tensor.contract(1, 2, t, t)  # [i]
    _from_tensor(t, c)


def perp_dot_product(a: Vector, b: Vector):
    """a_0 b_1 - a_1 b_0 for length-2 vectors."""
    alg = check_same_kind(a, b)
    if a.length != 2 or b.length != 2:
        raise ShapeMismatch(f"perp_dot_product needs length-2 vectors, got {a.length} and {b.length}")
    x, y = a.storage.raw, b.storage.raw
    return alg.subtract(alg.multiply(x[0], y[1]), alg.multiply(x[1], y[0]))


def scalar_triple_product(a: Vector, b: Vector, c: Vector):
    """a . (b x c)"""
    bc = Vector(a.algebra)
    cross_product(b, c, bc)
    return dot_product(a, bc)


def vector_triple_product(a: Vector, b: Vector, c: Vector, d: Vector) -> None:
    """d = a x (b x c)"""
    bc = Vector(a.algebra)
    cross_product(b, c, bc)
    cross_product(a, bc, d)


triple_product = scalar_triple_product


def direct_product(a: Vector, b: Vector, m: Matrix) -> None:
    """m[i, j] = a_i * b_j"""
    alg = check_same_kind(a, b)
    if not isinstance(m, Matrix) or m.algebra is not alg:
        raise TypeError(f"direct_product writes into a {alg.name} Matrix")
    prods = alg.multiply(np.expand_dims(a.storage.raw, 1), np.expand_dims(b.storage.raw, 0))
    m.alloc(a.length, b.length)
    m.storage.raw[...] = np.asarray(prods, dtype=alg.dtype).reshape((-1,) + alg.element_shape)
