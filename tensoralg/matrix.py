# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Matrix handles and the operations defined on them.

Every operation takes its inputs first and an output ``Matrix`` last,
reshapes the output and writes the result into it. Outputs may alias
inputs; results are computed before anything is written.
"""

import logging
from typing import Optional

import numpy as np

from . import eigen, elimination, matrix_functions
from .elementwise import (  # noqa: F401  (re-exported matrix operations)
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
from .scalars import ScalarAlgebra
from .structure import Structure, check_same_kind
from .utils import SPECTRAL_NORM_ITERATIONS

logger = logging.getLogger(__name__)


class Matrix(Structure):
    """
    Parameters
    ----------
    algebra : ScalarAlgebra
        Element type.
    rows, cols : int
        Initial size; the matrix starts out zero.
    values : array-like, optional
        Nested rows of values; when given they fix the size.
    """

    def __init__(self, algebra: ScalarAlgebra, rows: int = 0, cols: int = 0, values=None):
        super().__init__(algebra)
        self.rows = 0
        self.cols = 0
        self.alloc(rows, cols)
        if values is not None:
            self.load(values)

    @property
    def dims(self):
        return (self.rows, self.cols)

    def alloc(self, rows: int, cols: int) -> None:
        rows, cols = int(rows), int(cols)
        if rows < 0 or cols < 0:
            raise InvalidArgument(f"matrix dimensions must be non-negative, got {rows}x{cols}")
        self.rows = rows
        self.cols = cols
        self.storage.resize(rows * cols)

    def _set_dims(self, dims) -> None:
        dims = tuple(int(d) for d in dims)
        if dims == (0,):
            dims = (0, 0)
        if len(dims) != 2:
            raise ShapeMismatch(f"a matrix needs two dimensions, got {dims}")
        self.alloc(*dims)

    def get(self, r: int, c: int):
        return self._get((r, c))

    def set(self, r: int, c: int, value) -> None:
        self._set((r, c), value)

    @property
    def is_square(self) -> bool:
        return self.rows == self.cols

    def _view(self) -> np.ndarray:
        return self.storage.raw.reshape(self.dims + self.algebra.element_shape)


def _store(result, out: Matrix) -> None:
    result = np.asarray(result, dtype=out.algebra.dtype)
    out.alloc(result.shape[0], result.shape[1])
    out.storage.raw[...] = result.reshape((-1,) + out.algebra.element_shape)


def _require_square(a: Matrix, what: str) -> None:
    if not a.is_square:
        raise InvalidArgument(f"{what} needs a square matrix, got {a.rows}x{a.cols}")


# ---------------------------------------------------------------------
# products
# ---------------------------------------------------------------------
def multiply(a: Matrix, b: Matrix, c: Matrix) -> None:
    """c = a b"""
    alg = check_same_kind(a, b, c)
    if a.cols != b.rows:
        raise ShapeMismatch(f"multiply: {a.rows}x{a.cols} times {b.rows}x{b.cols}")
    _store(matrix_functions.matmul(a._view(), b._view(), alg), c)


def power(n: int, a: Matrix, b: Matrix) -> None:
    """b = a^n; n = 0 gives the identity, negative n inverts first."""
    alg = check_same_kind(a, b)
    _require_square(a, "power")
    if n < 0:
        logger.debug("power: inverting %dx%d matrix before raising to %d", a.rows, a.cols, -n)
    _store(matrix_functions.matrix_power(n, a._view(), alg), b)


def direct_product(a: Matrix, b: Matrix, c: Matrix) -> None:
    """Kronecker product: c[i*p + k, j*q + l] = a[i, j] * b[k, l]"""
    alg = check_same_kind(a, b, c)
    es = alg.element_shape
    av = a._view().reshape((a.rows, 1, a.cols, 1) + es)
    bv = b._view().reshape((1, b.rows, 1, b.cols) + es)
    prod = np.asarray(alg.multiply(av, bv), dtype=alg.dtype)
    _store(prod.reshape((a.rows * b.rows, a.cols * b.cols) + es), c)


# ---------------------------------------------------------------------
# inversion and friends
# ---------------------------------------------------------------------
def determinant(a: Matrix):
    """Determinant by elimination; 0x0 gives 1."""
    _require_square(a, "determinant")
    return matrix_functions.det(a._view(), a.algebra)


def invert(a: Matrix, b: Matrix) -> None:
    """b = a^-1; raises Singular when no nonzero pivot exists."""
    alg = check_same_kind(a, b)
    _require_square(a, "invert")
    _store(elimination.gauss_jordan_inverse(a._view(), alg), b)


def divide(a: Matrix, b: Matrix, c: Matrix) -> None:
    """c = a b^-1"""
    alg = check_same_kind(a, b, c)
    _require_square(b, "divide")
    if a.cols != b.rows:
        raise ShapeMismatch(f"divide: {a.rows}x{a.cols} by {b.rows}x{b.cols}")
    inv = elimination.gauss_jordan_inverse(b._view(), alg)
    _store(matrix_functions.matmul(a._view(), inv, alg), c)


def adjugate(a: Matrix, b: Matrix) -> None:
    alg = check_same_kind(a, b)
    _require_square(a, "adjugate")
    _store(matrix_functions.adj(a._view(), alg), b)


def rank(a: Matrix) -> int:
    return elimination.rank_elimination(a._view(), a.algebra)


def solve(a: Matrix, b: Matrix, x: Matrix) -> None:
    """Solve a x = b column by column."""
    alg = check_same_kind(a, b, x)
    if a.rows != b.rows:
        raise ShapeMismatch(f"solve: {a.rows}x{a.cols} system with {b.rows} right-hand rows")
    sol = np.asarray(elimination.gaussian_solve(a._view(), b._view(), alg), dtype=alg.dtype)
    _store(sol.reshape((a.cols, b.cols) + alg.element_shape), x)


# ---------------------------------------------------------------------
# norms
# ---------------------------------------------------------------------
def spectral_norm(a: Matrix, max_iter: int = SPECTRAL_NORM_ITERATIONS, tol: Optional[float] = None):
    return eigen.spectral_norm(a._view(), a.algebra, max_iter=max_iter, tol=tol)


def norm(a: Matrix, max_iter: int = SPECTRAL_NORM_ITERATIONS, tol: Optional[float] = None):
    """The matrix norm is the spectral norm (largest singular value)."""
    return spectral_norm(a, max_iter=max_iter, tol=tol)


def max_abs_row_sum_norm(a: Matrix):
    alg = a.algebra
    if a.rows == 0 or a.cols == 0:
        return alg.real(0)
    return max(np.asarray(alg.norm(a._view())).sum(axis=1))


def max_abs_col_sum_norm(a: Matrix):
    alg = a.algebra
    if a.rows == 0 or a.cols == 0:
        return alg.real(0)
    return max(np.asarray(alg.norm(a._view())).sum(axis=0))


# ---------------------------------------------------------------------
# structural
# ---------------------------------------------------------------------
def transpose(a: Matrix, b: Matrix) -> None:
    check_same_kind(a, b)
    _store(np.swapaxes(a._view(), 0, 1).copy(), b)


def conjugate_transpose(a: Matrix, b: Matrix) -> None:
    alg = check_same_kind(a, b)
    _store(eigen.conjugate_transpose(a._view(), alg), b)


def trace(a: Matrix):
    _require_square(a, "trace")
    idx = np.arange(a.rows)
    return a.algebra.sum(a._view()[idx, idx], axis=0)


def unity(a: Matrix) -> None:
    """Identity in place (ones on the main diagonal of a possibly non-square a)."""
    constant_diagonal(a.algebra.unity(), a)


def is_unity(a: Matrix) -> bool:
    u = Matrix(a.algebra, a.rows, a.cols)
    unity(u)
    return is_equal(a, u)


def constant_diagonal(value, a: Matrix) -> None:
    """Zero a, then put `value` on the main diagonal."""
    alg = a.algebra
    zero(a)
    k = np.arange(min(a.rows, a.cols))
    a._view()[k, k] = alg.element(value)


def pi(a: Matrix) -> None:
    constant_diagonal(a.algebra.constant("PI"), a)


def e(a: Matrix) -> None:
    constant_diagonal(a.algebra.constant("E"), a)


def phi(a: Matrix) -> None:
    constant_diagonal(a.algebra.constant("PHI"), a)


def gamma(a: Matrix) -> None:
    constant_diagonal(a.algebra.constant("GAMMA"), a)


# ---------------------------------------------------------------------
# transcendental functions (fixed-order Taylor series)
# ---------------------------------------------------------------------
def _apply(fn, a: Matrix, b: Matrix, terms: Optional[int]) -> None:
    alg = check_same_kind(a, b)
    _require_square(a, fn.__name__)
    _store(fn(a._view(), alg, terms), b)


def exp(a: Matrix, b: Matrix, terms: Optional[int] = None) -> None:
    _apply(matrix_functions.expm, a, b, terms)


def log(a: Matrix, b: Matrix, terms: Optional[int] = None) -> None:
    _apply(matrix_functions.logm, a, b, terms)


def sin(a: Matrix, b: Matrix, terms: Optional[int] = None) -> None:
    _apply(matrix_functions.sinm, a, b, terms)


def cos(a: Matrix, b: Matrix, terms: Optional[int] = None) -> None:
    _apply(matrix_functions.cosm, a, b, terms)


def tan(a: Matrix, b: Matrix, terms: Optional[int] = None) -> None:
    _apply(matrix_functions.tanm, a, b, terms)


def sinh(a: Matrix, b: Matrix, terms: Optional[int] = None) -> None:
    _apply(matrix_functions.sinhm, a, b, terms)


def cosh(a: Matrix, b: Matrix, terms: Optional[int] = None) -> None:
    _apply(matrix_functions.coshm, a, b, terms)


def tanh(a: Matrix, b: Matrix, terms: Optional[int] = None) -> None:
    _apply(matrix_functions.tanhm, a, b, terms)


def sin_and_cos(a: Matrix, s: Matrix, c: Matrix, terms: Optional[int] = None) -> None:
    check_same_kind(a, s, c)
    src = a.duplicate()
    sin(src, s, terms)
    cos(src, c, terms)


def sinh_and_cosh(a: Matrix, s: Matrix, c: Matrix, terms: Optional[int] = None) -> None:
    check_same_kind(a, s, c)
    src = a.duplicate()
    sinh(src, s, terms)
    cosh(src, c, terms)


def sinc(a: Matrix, b: Matrix, terms: Optional[int] = None) -> None:
    _apply(matrix_functions.sincm, a, b, terms)


def sinch(a: Matrix, b: Matrix, terms: Optional[int] = None) -> None:
    _apply(matrix_functions.sinchm, a, b, terms)


def sincpi(a: Matrix, b: Matrix, terms: Optional[int] = None) -> None:
    _apply(matrix_functions.sincpim, a, b, terms)


def sinchpi(a: Matrix, b: Matrix, terms: Optional[int] = None) -> None:
    _apply(matrix_functions.sinchpim, a, b, terms)
