# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging
from typing import Optional

import numpy as np

from .algebras import FLOAT64
from .errors import InvalidArgument
from .matrix_functions import matmul
from .scalars import ScalarAlgebra
from .utils import SPECTRAL_NORM_ITERATIONS

logger = logging.getLogger(__name__)


def conjugate_transpose(A, algebra: ScalarAlgebra = FLOAT64) -> np.ndarray:
    A = np.asarray(A, dtype=algebra.dtype)
    return np.asarray(algebra.conjugate(np.swapaxes(A, 0, 1)), dtype=algebra.dtype)


def spectral_norm(
    A,
    algebra: ScalarAlgebra = FLOAT64,
    max_iter: int = SPECTRAL_NORM_ITERATIONS,
    tol: Optional[float] = None,
    return_history: bool = False,
):
    """
    Estimate the largest singular value of A by power iteration on A^H A.

    Runs for `max_iter` iterations, or fewer when `tol` is given and two
    successive estimates differ by less than it. This is an approximation:
    nothing checks that the iteration has converged.

    Parameters
    ----------
    A : (m,n) element array
        Any matrix over `algebra`.
    max_iter : int
        Iteration budget.
    tol : float | None
        Optional early-stop tolerance on the change of the estimate.
    return_history : bool
        If True, also return (num_iters, estimate_history).

    Returns
    -------
    sigma : real
        ||A v|| for the final unit iterate v.
    (iters, hist) : optional
        Iteration count and estimate array if return_history=True.
    """
    alg = algebra
    A = np.asarray(alg.coerce(A), dtype=alg.dtype)
    if A.ndim != 2 + len(alg.element_shape):
        raise InvalidArgument(f"spectral_norm: expected a matrix, got shape {A.shape}")
    m, n = A.shape[:2]
    zero = alg.real(0)
    if m == 0 or n == 0:
        return (zero, 0, np.array([])) if return_history else zero

    AhA = matmul(conjugate_transpose(A, alg), A, alg)

    # deterministic start so repeated calls agree
    rng = np.random.default_rng(0)
    v = alg.scale_real(alg.unity(n), alg.real(rng.standard_normal(n) + 2.0))
    v = np.asarray(v, dtype=alg.dtype)[:, None]
    v = _unit(v, alg)

    sigma = zero
    hist = []
    iters = 0
    for iters in range(1, max_iter + 1):
        w = matmul(AhA, v, alg)
        if alg.sequence_norm(w) == 0:
            logger.debug("spectral_norm: A^H A maps the iterate to zero")
            v = w
            break
        v = _unit(w, alg)
        sigma_new = alg.sequence_norm(matmul(A, v, alg))
        hist.append(sigma_new)
        converged = tol is not None and abs(sigma_new - sigma) <= tol
        sigma = sigma_new
        if converged:
            break

    sigma = alg.sequence_norm(matmul(A, v, alg))
    return (sigma, iters, np.array(hist)) if return_history else sigma


def _unit(v, algebra: ScalarAlgebra):
    """v / ||v||"""
    norm = algebra.sequence_norm(v)
    return np.asarray(algebra.scale_real(v, 1 / norm), dtype=algebra.dtype)
