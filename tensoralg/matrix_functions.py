# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Whole-matrix functions on element arrays.

The transcendental functions sum a fixed number of Taylor terms of matrix
powers; no eigendecomposition is involved. Accuracy therefore depends on the
term count and on the spectral radius of the argument. Nothing is raised for
slowly converging inputs, the result is simply less accurate.
"""

import logging
from typing import Optional, Tuple

import numpy as np

from .algebras import FLOAT64
from .elimination import forward_eliminate, gauss_jordan_inverse, identity
from .errors import InvalidArgument
from .scalars import ScalarAlgebra
from .utils import TAYLOR_TERMS, permutation_sign

logger = logging.getLogger(__name__)


def _square(A, algebra: ScalarAlgebra, what: str) -> Tuple[np.ndarray, int]:
    A = np.asarray(algebra.coerce(A), dtype=algebra.dtype)
    if A.ndim != 2 + len(algebra.element_shape):
        raise InvalidArgument(f"{what}: expected a matrix, got shape {A.shape}")
    m, n = A.shape[:2]
    if m != n:
        raise InvalidArgument(f"{what} is undefined for a non-square {m}x{n} matrix")
    return A, n


def matmul(A, B, algebra: ScalarAlgebra = FLOAT64) -> np.ndarray:
    """C[i, j] = sum_k A[i, k] * B[k, j] using the algebra's multiply and add."""
    A = np.asarray(A, dtype=algebra.dtype)
    B = np.asarray(B, dtype=algebra.dtype)
    prods = algebra.multiply(np.expand_dims(A, 2), np.expand_dims(B, 0))
    return np.asarray(algebra.sum(prods, axis=1), dtype=algebra.dtype).reshape(
        (A.shape[0], B.shape[1]) + algebra.element_shape
    )


def det(A, algebra: ScalarAlgebra = FLOAT64):
    """
    Calculate the determinant of n-by-n matrix A using elimination
    """
    A, n = _square(A, algebra, "The determinant")
    if n == 0:
        return algebra.unity()
    U, _c, pivots, _free, perm = forward_eliminate(A, algebra=algebra, tol=0)
    if len(pivots) < n:
        return algebra.zero()
    prod = U[0, 0]
    for i in range(1, n):
        prod = algebra.multiply(prod, U[i, i])
    return algebra.negate(prod) if permutation_sign(perm) < 0 else prod


def adj(A, algebra: ScalarAlgebra = FLOAT64):
    """
    Adjugate (classical adjoint) of a square matrix A.

    Fast path (det ≠ 0): adj(A) = det(A) · A^{-1}
    Slow path (det = 0): cofactor expansion (one determinant per entry)
    """
    A, n = _square(A, algebra, "The adjugate")
    if n == 0:
        return A.copy()

    d = det(A, algebra)
    if algebra.is_zero(d):
        logger.warning("adj(): singular matrix, falling back to cofactor expansion")
        C = algebra.zeros_like_shape(A.shape)
        if n == 1:
            C[0, 0] = algebra.unity()
            return C
        keep = np.arange(n)
        for i in range(n):
            for j in range(n):
                minor = A[keep != i][:, keep != j]
                cof = det(minor, algebra)
                C[j, i] = algebra.negate(cof) if (i + j) % 2 else cof
        return C

    return np.asarray(algebra.multiply(d, gauss_jordan_inverse(A, algebra)), dtype=algebra.dtype)


def matrix_power(n: int, A, algebra: ScalarAlgebra = FLOAT64) -> np.ndarray:
    """
    A^n by repeated squaring. n = 0 is the identity; negative n inverts A
    first (raises Singular when A has no inverse).
    """
    A, size = _square(A, algebra, "A matrix power")
    n = int(n)
    if n < 0:
        A = gauss_jordan_inverse(A, algebra)
        n = -n
    result = identity(algebra, size)
    base = A
    while n:
        if n & 1:
            result = matmul(result, base, algebra)
        n >>= 1
        if n:
            base = matmul(base, base, algebra)
    return result


# ---------------------------------------------------------------------
# Taylor series
# ---------------------------------------------------------------------
def _series(
    A,
    algebra: ScalarAlgebra,
    terms: int,
    first_power: int,
    step: int,
    alternate: bool,
    factorial: bool,
) -> np.ndarray:
    """
    sum_{k < terms} s_k * A^(first_power + step*k) / d_k

    s_k alternates in sign when `alternate` is set; d_k is
    (first_power + step*k)! when `factorial` is set and the exponent itself
    otherwise.
    """
    A, n = _square(A, algebra, "A matrix series")
    if terms < 1:
        raise InvalidArgument(f"terms must be positive, got {terms}")
    step_power = matrix_power(step, A, algebra)
    power = matrix_power(first_power, A, algebra)
    exponent = first_power
    denom = 1
    for e in range(2, exponent + 1):
        denom *= e
    total = algebra.zeros_like_shape(A.shape)
    for k in range(terms):
        if not factorial:
            denom = exponent
        sign = -1 if alternate and k % 2 else 1
        total = algebra.add(total, algebra.scale_rational(power, sign, denom))
        power = matmul(power, step_power, algebra)
        for e in range(exponent + 1, exponent + step + 1):
            denom *= e
        exponent += step
    logger.debug("matrix series truncated after %d terms (last power %d)", terms, exponent - step)
    return np.asarray(total, dtype=algebra.dtype)


def _terms(terms: Optional[int], name: str) -> int:
    return TAYLOR_TERMS[name] if terms is None else int(terms)


def expm(A, algebra: ScalarAlgebra = FLOAT64, terms: Optional[int] = None) -> np.ndarray:
    return _series(A, algebra, _terms(terms, "exp"), 0, 1, False, True)


def logm(A, algebra: ScalarAlgebra = FLOAT64, terms: Optional[int] = None) -> np.ndarray:
    """log(A) as the series of log(I + X) with X = A - I; only close to I is accurate."""
    A, n = _square(A, algebra, "The matrix logarithm")
    X = np.asarray(algebra.subtract(A, identity(algebra, n)), dtype=algebra.dtype)
    return _series(X, algebra, _terms(terms, "log"), 1, 1, True, False)


def sinm(A, algebra: ScalarAlgebra = FLOAT64, terms: Optional[int] = None) -> np.ndarray:
    return _series(A, algebra, _terms(terms, "sin"), 1, 2, True, True)


def cosm(A, algebra: ScalarAlgebra = FLOAT64, terms: Optional[int] = None) -> np.ndarray:
    return _series(A, algebra, _terms(terms, "cos"), 0, 2, True, True)


def sinhm(A, algebra: ScalarAlgebra = FLOAT64, terms: Optional[int] = None) -> np.ndarray:
    return _series(A, algebra, _terms(terms, "sinh"), 1, 2, False, True)


def coshm(A, algebra: ScalarAlgebra = FLOAT64, terms: Optional[int] = None) -> np.ndarray:
    return _series(A, algebra, _terms(terms, "cosh"), 0, 2, False, True)


def tanm(A, algebra: ScalarAlgebra = FLOAT64, terms: Optional[int] = None) -> np.ndarray:
    """sin(A) cos(A)^-1"""
    return matmul(sinm(A, algebra, terms), gauss_jordan_inverse(cosm(A, algebra, terms), algebra), algebra)


def tanhm(A, algebra: ScalarAlgebra = FLOAT64, terms: Optional[int] = None) -> np.ndarray:
    """sinh(A) cosh(A)^-1"""
    return matmul(sinhm(A, algebra, terms), gauss_jordan_inverse(coshm(A, algebra, terms), algebra), algebra)


def _over_argument(F, A, algebra: ScalarAlgebra) -> np.ndarray:
    """F A^-1, or the identity when A is the zero matrix."""
    A, n = _square(A, algebra, "sinc")
    if np.all(algebra.is_zero(A)):
        return identity(algebra, n)
    return matmul(F, gauss_jordan_inverse(A, algebra), algebra)


def sincm(A, algebra: ScalarAlgebra = FLOAT64, terms: Optional[int] = None) -> np.ndarray:
    return _over_argument(sinm(A, algebra, terms), A, algebra)


def sinchm(A, algebra: ScalarAlgebra = FLOAT64, terms: Optional[int] = None) -> np.ndarray:
    return _over_argument(sinhm(A, algebra, terms), A, algebra)


def _times_pi(A, algebra: ScalarAlgebra) -> np.ndarray:
    return np.asarray(algebra.multiply(A, algebra.constant("PI")), dtype=algebra.dtype)


def sincpim(A, algebra: ScalarAlgebra = FLOAT64, terms: Optional[int] = None) -> np.ndarray:
    """sinc(pi A)"""
    return sincm(_times_pi(A, algebra), algebra, terms)


def sinchpim(A, algebra: ScalarAlgebra = FLOAT64, terms: Optional[int] = None) -> np.ndarray:
    """sinch(pi A)"""
    return sinchm(_times_pi(A, algebra), algebra, terms)
