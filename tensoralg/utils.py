# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import numpy as np

EPS: float = 1e-12

# Number of series terms used by the matrix transcendental functions.
TAYLOR_TERMS: dict = {
    "exp": 35,
    "log": 8,
    "sin": 18,
    "cos": 18,
    "sinh": 18,
    "cosh": 18,
}

SPECTRAL_NORM_ITERATIONS: int = 100

HIGH_PRECISION_DIGITS: int = 50

# Decimal expansions used to build each algebra's constants table.
CONSTANT_DIGITS: dict = {
    "PI": "3.14159265358979323846264338327950288419716939937510582097494459",
    "E": "2.71828182845904523536028747135266249775724709369995957496696763",
    "PHI": "1.61803398874989484820458683436563811772030917980576286213544862",
    "GAMMA": "0.57721566490153286060651209008240243104215933593992359880576723",
}


def permutation_sign(perm: list[int]) -> int:
    """Return +1 or –1 depending on permutation parity."""
    visited = [False] * len(perm)
    cycles = 0
    for i in range(len(perm)):
        if not visited[i]:
            cycles += 1
            j = i
            while not visited[j]:
                visited[j] = True
                j = perm[j]
    swaps = len(perm) - cycles  # n − #cycles
    return -1 if swaps & 1 else 1


def random_nonsingular_upper(n, low=-100, high=100, seed=None, min_pivot=1.0) -> np.ndarray:
    """
    Random upper-triangular float64 matrix whose diagonal entries are at
    least ``min_pivot`` in magnitude, so back substitution never divides
    by (near) zero.
    """
    rng = np.random.default_rng(seed)
    U = np.triu(rng.uniform(low, high, size=(n, n)))
    mags = rng.uniform(min_pivot, max(abs(low), abs(high), min_pivot + 1.0), size=n)
    np.fill_diagonal(U, rng.choice((-1.0, 1.0), size=n) * mags)
    return U


def scale_tol(mags: np.ndarray) -> float:
    """
    Absolute tolerance scaled to the infinity norm of a matrix, given the
    element magnitudes of that matrix.
    """
    mags = np.asarray(mags, dtype=float)
    if mags.size == 0:
        return EPS
    return EPS * max(1.0, float(np.max(np.sum(mags, axis=1))))
