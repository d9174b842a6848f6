# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Gaussian elimination over any scalar algebra.

Matrices are element arrays of shape ``(m, n) + algebra.element_shape``.
Row operations multiply by the inverse pivot from the left, so the same
code serves non-commutative algebras (quaternions, octonions).
"""

import logging
from typing import List, Optional, Tuple

import numpy as np

from .algebras import FLOAT64
from .errors import InvalidArgument, Singular
from .scalars import ScalarAlgebra
from .utils import scale_tol

logger = logging.getLogger(__name__)


def _as_matrix(A, algebra: ScalarAlgebra) -> np.ndarray:
    U = np.array(algebra.coerce(A), dtype=algebra.dtype, copy=True)
    if U.ndim != 2 + len(algebra.element_shape):
        raise InvalidArgument(f"expected a matrix of {algebra.name} elements, got shape {U.shape}")
    return U


def _argmax(mags) -> int:
    mags = np.asarray(mags)
    if mags.dtype == object:
        return max(range(len(mags)), key=mags.__getitem__)
    return int(np.argmax(mags))


def pivot_tolerance(U: np.ndarray, algebra: ScalarAlgebra):
    """Zero for exact algebras, otherwise EPS scaled to the matrix norm."""
    if algebra.is_exact or U.size == 0:
        return 0
    return scale_tol(np.asarray(algebra.norm(U), dtype=float))


def identity(algebra: ScalarAlgebra, n: int) -> np.ndarray:
    eye = algebra.zeros_like_shape((n, n) + algebra.element_shape)
    idx = np.arange(n)
    eye[idx, idx] = algebra.unity()
    return eye


def forward_eliminate(
    A,
    b=None,
    algebra: ScalarAlgebra = FLOAT64,
    pivot: bool = True,
    tol=None,
) -> Tuple[np.ndarray, Optional[np.ndarray], List[int], List[int], List[int]]:
    """
    Row-echelon reduction with partial pivoting on an m by n matrix A.

    Parameters
    ----------
    A : array-like               (m, n) + element_shape
        Coefficient matrix.
    b : array-like | None        (m,) or (m, k), plus element_shape
        Optional right-hand side; same row swaps & updates applied.
    algebra : ScalarAlgebra
        Element operations. Defaults to float64.
    pivot : bool
        If False, no row swaps are performed (rarely useful).
    tol : optional
        Pivot magnitudes at or below this count as zero. Defaults to
        ``pivot_tolerance``; pass 0 to accept any nonzero pivot.

    Returns
    -------
    U      : ndarray             (m, n) + element_shape
        Row-echelon form of A (upper-trapezoidal, not reduced).
    c      : ndarray | None
        b after identical row ops, always 2-D in its leading axes.
    pivots : list[int]
        Column indices where pivots were placed; len = rank(A).
    free : list[int]
        Column indices where free variables were placed
    perm   : list[int]
        Final row order: row i of U comes from original row perm[i].
    """
    alg = algebra
    U = _as_matrix(A, alg)
    m, n = U.shape[:2]

    c = None
    if b is not None:
        c = np.array(alg.coerce(b), dtype=alg.dtype, copy=True)
        if c.ndim == 1 + len(alg.element_shape):
            c = c[:, None]
        if c.shape[0] != m:
            raise InvalidArgument(f"right-hand side has {c.shape[0]} rows, matrix has {m}")

    pivot_tol = pivot_tolerance(U, alg) if tol is None else tol

    perm = list(range(m))
    pivots: List[int] = []
    free: List[int] = []

    row = 0
    for col in range(n):
        if row == m:
            free.extend(range(col, n))
            break
        # largest magnitude at or below the current row is the most stable
        # pivot for the column
        col_mags = np.asarray(alg.norm(U[row:, col]))
        max_idx = _argmax(col_mags) if pivot else 0
        max_val = col_mags[max_idx]

        if max_val <= pivot_tol or alg.is_zero(U[row + max_idx, col]):
            free.append(col)
            continue

        pivot_row = row + max_idx
        if pivot_row != row:
            U[[row, pivot_row]] = U[[pivot_row, row]]
            if c is not None:
                c[[row, pivot_row]] = c[[pivot_row, row]]
            perm[row], perm[pivot_row] = perm[pivot_row], perm[row]
            logger.debug("forward_eliminate: swapped rows %d and %d at column %d", row, pivot_row, col)

        pivots.append(col)

        # row_r -= (U[r, col] * pivot^-1) * row_pivot for every row below
        factors = alg.multiply(U[row + 1 :, col], alg.invert(U[row, col]))
        factors = np.expand_dims(np.asarray(factors, dtype=alg.dtype), 1)
        U[row + 1 :, col:] = alg.subtract(
            U[row + 1 :, col:], alg.multiply(factors, U[row, col:][None])
        )
        if c is not None:
            c[row + 1 :] = alg.subtract(c[row + 1 :], alg.multiply(factors, c[row][None]))

        row += 1

    return U, c, pivots, free, perm


def back_substitute(U, c, algebra: ScalarAlgebra = FLOAT64, tol=None) -> np.ndarray:
    """
    Parameters
    ----------
    U : (m, n) element array, m >= n
        Upper-triangular matrix (output of forward_eliminate).
    c : (m,) or (m, k) element array
        RHS after identical row operations.
    Returns
    -------
    x : (n,) or (n, k) element array
        Solution(s) of Ux = c.
    Raises
    ------
    ValueError : if the system is inconsistent or rank-deficient.
    """
    alg = algebra
    U = _as_matrix(U, alg)
    c = np.array(alg.coerce(c), dtype=alg.dtype, copy=True)
    es = alg.element_shape
    if c.ndim == 1 + len(es):
        c = c[:, None]
    m, n = U.shape[:2]
    k = c.shape[1]
    tol = pivot_tolerance(U, alg) if tol is None else tol

    if m > n and np.any(np.asarray(alg.norm(c[n:])) > tol):
        raise ValueError("inconsistent system (no solution)")

    x = alg.zeros_like_shape((n, k) + es)
    for i in reversed(range(n)):
        p = U[i, i] if i < m else alg.zero()
        if alg.norm(p) <= tol or alg.is_zero(p):
            if i < m and np.any(np.asarray(alg.norm(c[i])) > tol):
                raise ValueError("inconsistent system (no solution)")
            raise ValueError("rank deficient (infinitely many solutions)")

        s = c[i]
        if i + 1 < n:
            prods = alg.multiply(np.expand_dims(U[i, i + 1 :], 1), x[i + 1 :])
            s = alg.subtract(s, alg.sum(prods, axis=0))
        x[i] = alg.multiply(alg.invert(p), s)

    # flatten if k == 1, regardless of ndim
    return x[:, 0] if k == 1 else x


def gaussian_solve(A, b, algebra: ScalarAlgebra = FLOAT64, pivot=True):
    """Solve A x = b. Consistent rank-deficient float systems fall back to least squares."""
    try:
        U, c, pivots, free, perm = forward_eliminate(A, b, algebra=algebra, pivot=pivot)
        x = back_substitute(U, c, algebra=algebra)
    except ValueError as e:
        if "inconsistent" in str(e) or not _lstsq_capable(algebra):
            raise
        logger.debug(
            f"{e}; Matrix is rank deficient but consistent, falling back to least squares..."
        )
        return np.linalg.lstsq(np.asarray(A, dtype=algebra.dtype), np.asarray(b, dtype=algebra.dtype), rcond=None)[0]
    return x


def _lstsq_capable(algebra: ScalarAlgebra) -> bool:
    # np.linalg.lstsq only handles commutative fields in native float dtypes
    return algebra.is_field and algebra.dtype.kind in "fc" and algebra.dtype.itemsize >= 4


def rank_elimination(A, algebra: ScalarAlgebra = FLOAT64) -> int:
    """Matrix rank is the number of pivot columns"""
    pivots = forward_eliminate(A, algebra=algebra)[2]
    return len(pivots)


def gauss_jordan_inverse(A, algebra: ScalarAlgebra = FLOAT64) -> np.ndarray:
    """
    Inverse by Gauss-Jordan elimination with row exchanges.

    Any nonzero pivot is accepted; Singular is raised only when a column
    has no nonzero entry at or below the diagonal.
    """
    alg = algebra
    M = _as_matrix(A, alg)
    m, n = M.shape[:2]
    if m != n:
        raise InvalidArgument(f"cannot invert a non-square {m}x{n} matrix")
    inv = identity(alg, n)
    rows = np.arange(n)

    for col in range(n):
        mags = np.asarray(alg.norm(M[col:, col]))
        pivot_row = col + _argmax(mags)
        if alg.is_zero(M[pivot_row, col]):
            logger.debug("gauss_jordan_inverse: no pivot in column %d", col)
            raise Singular(f"matrix is singular (column {col} has no nonzero pivot)")
        if pivot_row != col:
            M[[col, pivot_row]] = M[[pivot_row, col]]
            inv[[col, pivot_row]] = inv[[pivot_row, col]]

        p_inv = alg.invert(M[col, col])
        M[col] = alg.multiply(p_inv, M[col])
        inv[col] = alg.multiply(p_inv, inv[col])

        others = rows != col
        f = np.expand_dims(np.asarray(M[others, col], dtype=alg.dtype), 1)
        M[others] = alg.subtract(M[others], alg.multiply(f, M[col][None]))
        inv[others] = alg.subtract(inv[others], alg.multiply(f, inv[col][None]))

    return inv
