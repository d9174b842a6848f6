# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

from fractions import Fraction

import numpy as np
import pytest

from tensoralg.algebras import COMPLEX128, QUATERNION, RATIONAL
from tensoralg.eigen import conjugate_transpose, spectral_norm
from tensoralg.errors import InvalidArgument


def _with_singular_values(rng, m, n, sigmas):
    U, _ = np.linalg.qr(rng.normal(size=(m, m)))
    V, _ = np.linalg.qr(rng.normal(size=(n, n)))
    S = np.zeros((m, n))
    S[np.arange(len(sigmas)), np.arange(len(sigmas))] = sigmas
    return U @ S @ V.T


def test_spectral_norm_matches_numpy():
    rng = np.random.default_rng(0)
    for _ in range(10):
        A = _with_singular_values(rng, 6, 4, [5.0, 2.0, 1.0, 0.5])
        np.testing.assert_allclose(spectral_norm(A), np.linalg.norm(A, 2), rtol=1e-10)


def test_spectral_norm_diagonal():
    A = np.diag([5.0, 2.0, -1.0])
    assert np.isclose(spectral_norm(A), 5.0, atol=1e-9)


def test_spectral_norm_scaling():
    rng = np.random.default_rng(1)
    A = _with_singular_values(rng, 5, 5, [3.0, 1.0, 1.0, 0.5, 0.1])
    alpha = 7.3
    assert np.isclose(spectral_norm(alpha * A), alpha * spectral_norm(A), rtol=1e-8)


def test_spectral_norm_is_deterministic():
    rng = np.random.default_rng(2)
    A = rng.normal(size=(8, 8))
    assert spectral_norm(A, max_iter=5) == spectral_norm(A, max_iter=5)


def test_spectral_norm_history_and_early_stop():
    A = np.diag([4.0, 1.0])
    sigma, iters, hist = spectral_norm(A, tol=1e-14, return_history=True)
    assert np.isclose(sigma, 4.0)
    assert iters < 100
    assert len(hist) == iters


def test_spectral_norm_zero_and_empty():
    assert spectral_norm(np.zeros((3, 3))) == 0.0
    assert spectral_norm(np.zeros((0, 4))) == 0.0
    with pytest.raises(InvalidArgument):
        spectral_norm(np.zeros(3))


def test_spectral_norm_complex():
    A = np.diag([3.0, 1.0j])
    assert np.isclose(spectral_norm(A, COMPLEX128), 3.0)


def test_spectral_norm_quaternion_diagonal():
    A = np.zeros((2, 2, 4))
    A[0, 0] = [0.0, 2.0, 0.0, 0.0]
    A[1, 1] = [0.5, 0.0, 0.5, 0.0]
    assert np.isclose(spectral_norm(A, QUATERNION), 2.0)


def test_spectral_norm_rational_returns_fraction():
    A = [[Fraction(3), Fraction(0)], [Fraction(0), Fraction(1)]]
    sigma = spectral_norm(A, RATIONAL, max_iter=20)
    assert isinstance(sigma, Fraction)
    assert abs(float(sigma) - 3.0) < 1e-6


def test_conjugate_transpose():
    A = np.array([[1 + 2j, 3j], [4.0, 5 - 1j]])
    np.testing.assert_array_equal(conjugate_transpose(A, COMPLEX128), A.conj().T)
