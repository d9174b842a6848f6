# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Element-wise operations shared by vectors, matrices and tensors.

Argument order follows one rule: parameters (scalars, tolerances, counts)
first, then inputs, then the output handle. The output is reshaped to match
the input before it is written and may be the same object as an input.
"""

from fractions import Fraction

import numpy as np

from . import transforms
from .scalars import RoundMode
from .shapes import check_shapes_match, shapes_match
from .structure import Structure, check_same_kind


def _unary(op, a: Structure, b: Structure) -> None:
    check_same_kind(a, b)
    transforms.transform2(op, a.storage, b.storage)
    b._adopt_like(a)


def _binary(op, a: Structure, b: Structure, c: Structure, name: str) -> None:
    check_same_kind(a, b, c)
    check_shapes_match(a.dims, b.dims, name)
    transforms.transform3(op, a.storage, b.storage, c.storage)
    c._adopt_like(a)


def _with_constant(op, constant, a: Structure, b: Structure) -> None:
    check_same_kind(a, b)
    transforms.fixed_transform(op, constant, a.storage, b.storage)
    b._adopt_like(a)


def assign(a: Structure, b: Structure) -> None:
    """b := copy of a"""
    check_same_kind(a, b)
    if a is b:
        return
    b._adopt_like(a)
    b.storage.assign_from(a.storage)


def zero(a: Structure) -> None:
    a.storage.fill(a.algebra.zero())


def negate(a: Structure, b: Structure) -> None:
    _unary(a.algebra.negate, a, b)


def conjugate(a: Structure, b: Structure) -> None:
    _unary(a.algebra.conjugate, a, b)


def add(a: Structure, b: Structure, c: Structure) -> None:
    _binary(a.algebra.add, a, b, c, "add")


def subtract(a: Structure, b: Structure, c: Structure) -> None:
    _binary(a.algebra.subtract, a, b, c, "subtract")


def multiply_elements(a: Structure, b: Structure, c: Structure) -> None:
    _binary(a.algebra.multiply, a, b, c, "multiply_elements")


def divide_elements(a: Structure, b: Structure, c: Structure) -> None:
    _binary(a.algebra.divide, a, b, c, "divide_elements")


# ---------------------------------------------------------------------
# scalar broadcast
# ---------------------------------------------------------------------
def scale(scalar, a: Structure, b: Structure) -> None:
    _with_constant(a.algebra.multiply, scalar, a, b)


multiply_by_scalar = scale


def divide_by_scalar(scalar, a: Structure, b: Structure) -> None:
    _with_constant(a.algebra.divide, scalar, a, b)


def add_scalar(scalar, a: Structure, b: Structure) -> None:
    _with_constant(a.algebra.add, scalar, a, b)


def subtract_scalar(scalar, a: Structure, b: Structure) -> None:
    alg = a.algebra
    add_scalar(alg.negate(alg.element(scalar)), a, b)


def scale_by_double(factor: float, a: Structure, b: Structure) -> None:
    check_same_kind(a, b)
    transforms.scale_by_real(float(factor), a.storage, b.storage)
    b._adopt_like(a)


def scale_by_rational(factor, a: Structure, b: Structure) -> None:
    factor = Fraction(factor)
    alg = a.algebra
    _unary(lambda x: alg.scale_rational(x, factor.numerator, factor.denominator), a, b)


def scale_by_high_prec(factor, a: Structure, b: Structure) -> None:
    check_same_kind(a, b)
    # object algebras keep every digit, numpy ones take the nearest float
    if a.algebra.dtype != np.dtype(object):
        factor = float(factor)
    transforms.scale_by_real(factor, a.storage, b.storage)
    b._adopt_like(a)


def scale_by_two(times: int, a: Structure, b: Structure) -> None:
    check_same_kind(a, b)
    transforms.scale_helper(2, times, a.storage, b.storage)
    b._adopt_like(a)


def scale_by_one_half(times: int, a: Structure, b: Structure) -> None:
    check_same_kind(a, b)
    transforms.scale_helper(0.5, times, a.storage, b.storage)
    b._adopt_like(a)


def round(mode: RoundMode, delta, a: Structure, b: Structure) -> None:
    check_same_kind(a, b)
    transforms.round_sequence(mode, delta, a.storage, b.storage)
    b._adopt_like(a)


# ---------------------------------------------------------------------
# fills and predicates
# ---------------------------------------------------------------------
def nan(a: Structure) -> None:
    transforms.fill_nan(a.storage)


def infinite(a: Structure) -> None:
    transforms.fill_infinite(a.storage)


def is_zero(a: Structure) -> bool:
    return transforms.sequence_is_zero(a.storage)


def is_nan(a: Structure) -> bool:
    return transforms.sequence_is_nan(a.storage)


def is_infinite(a: Structure) -> bool:
    return transforms.sequence_is_inf(a.storage)


def is_equal(a: Structure, b: Structure) -> bool:
    check_same_kind(a, b)
    return shapes_match(a.dims, b.dims) and transforms.sequences_equal(a.storage, b.storage)


def is_not_equal(a: Structure, b: Structure) -> bool:
    return not is_equal(a, b)


def within(tol, a: Structure, b: Structure) -> bool:
    check_same_kind(a, b)
    return shapes_match(a.dims, b.dims) and transforms.sequences_similar(tol, a.storage, b.storage)


def norm(a: Structure):
    """Euclidean norm over all elements, scaled by the largest magnitude."""
    return a.algebra.sequence_norm(a.storage.raw)
