# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging
from fractions import Fraction

import numpy as np
import pytest

from tensoralg.algebras import QUATERNION, RATIONAL
from tensoralg.elimination import (
    back_substitute,
    forward_eliminate,
    gauss_jordan_inverse,
    gaussian_solve,
    rank_elimination,
)
from tensoralg.errors import InvalidArgument, Singular
from tensoralg.matrix_functions import matmul
from tensoralg.utils import EPS, random_nonsingular_upper

TEST_ITERATIONS = 50
logger = logging.getLogger(__name__)


def test_forward_eliminate_basic_n_by_n():
    n = 200
    rng = np.random.default_rng(0)
    A = rng.standard_normal((n, n))
    x0 = rng.standard_normal(n)
    b = A @ x0

    U, c, pivots, free, perm = forward_eliminate(A, b)
    x = back_substitute(U, c)
    assert len(pivots) == n and not free
    assert sorted(perm) == list(range(n))
    assert np.allclose(x, x0, rtol=1e-8, atol=1e-10)


def test_elimination_random_nonsingular_upper_triangular():
    n = TEST_ITERATIONS

    for i in range(n):
        logger.debug("==============================")
        A = random_nonsingular_upper(n, seed=i)
        logger.debug(f"\nRunning Test\nRandom Nonsingular Upper:\n{A}\n")

        # Generate a random vector x (the true solution)
        x_true = np.random.default_rng(i).random(n)

        # Calculate b using the equation Ax = b
        b = np.dot(A, x_true)

        u_calculated = gaussian_solve(A, b)
        logger.debug(f"\n==== Results ====\nOurs:\n{u_calculated}\nTrue:\n{x_true}")

        # Compare the residual (r = b - Ax) against the size of b, which
        # judges correctness independently of conditioning
        res_lu = np.linalg.norm(A @ u_calculated - b, ord=np.inf)
        assert res_lu <= 1e-10 * np.linalg.norm(b, ord=np.inf)
        logger.debug("==============================")


def test_elimination_random_dense():
    n = TEST_ITERATIONS
    rng = np.random.default_rng(1)

    for i in range(10):
        logger.debug("==============================")
        A = rng.standard_normal((n, n))
        logger.debug(f"\nRunning Test\n{A}\n")

        x_true = rng.random(n)
        b = np.dot(A, x_true)

        x_calculated = np.linalg.solve(A, b)
        u_calculated = gaussian_solve(A, b)

        logger.debug(f"\n==== Results ====\nOurs:\n{u_calculated}\nNumpy:\n{x_calculated}")
        np.testing.assert_allclose(
            x_calculated,
            u_calculated,
            rtol=5e-8,  # relative tolerance
            atol=1e-9,  # absolute tolerance
            verbose=True,
        )
        logger.debug("==============================")


def test_multiple_right_hand_sides():
    rng = np.random.default_rng(2)
    A = rng.standard_normal((6, 6))
    X = rng.standard_normal((6, 3))
    x = gaussian_solve(A, A @ X)
    assert x.shape == (6, 3)
    np.testing.assert_allclose(x, X, rtol=1e-8, atol=1e-10)


def test_inconsistent_system_raises():
    A = np.array([[1.0, 2.0], [2.0, 4.0]])
    b = np.array([1.0, 3.0])
    with pytest.raises(ValueError, match="inconsistent"):
        gaussian_solve(A, b)


def test_rank_deficient_consistent_falls_back_to_least_squares():
    A = np.array([[1.0, 2.0], [2.0, 4.0]])
    b = np.array([1.0, 2.0])
    x = gaussian_solve(A, b)
    np.testing.assert_allclose(A @ x, b, atol=1e-10)


def test_rank_agreement():
    rng = np.random.default_rng(3)
    for _ in range(100):
        A = rng.standard_normal((8, 6))
        assert rank_elimination(A) == np.linalg.matrix_rank(A, tol=EPS)


def test_rank_of_dependent_rows():
    A = np.array([[1.0, 2.0, 3.0], [2.0, 4.0, 6.0], [1.0, 0.0, 1.0]])
    assert rank_elimination(A) == 2


def test_rational_elimination_is_exact():
    A = [[Fraction(1), Fraction(1, 2)], [Fraction(1, 2), Fraction(1, 3)]]
    b = [Fraction(1), Fraction(0)]
    x = gaussian_solve(A, b, algebra=RATIONAL)
    # inverse of the 2x2 Hilbert matrix is [[4, -6], [-6, 12]]
    assert list(x) == [Fraction(4), Fraction(-6)]


def test_gauss_jordan_inverse_matches_numpy():
    rng = np.random.default_rng(4)
    A = rng.standard_normal((12, 12))
    np.testing.assert_allclose(gauss_jordan_inverse(A), np.linalg.inv(A), rtol=1e-8, atol=1e-10)


def test_gauss_jordan_inverse_accepts_tiny_pivots():
    A = np.diag([1e-200, 1.0])
    inv = gauss_jordan_inverse(A)
    np.testing.assert_allclose(inv, np.diag([1e200, 1.0]))


def test_gauss_jordan_inverse_singular_and_non_square():
    with pytest.raises(Singular):
        gauss_jordan_inverse(np.array([[1.0, 2.0], [2.0, 4.0]]))
    with pytest.raises(InvalidArgument):
        gauss_jordan_inverse(np.ones((2, 3)))


def test_quaternion_left_inverse():
    rng = np.random.default_rng(5)
    A = rng.standard_normal((3, 3, 4))
    inv = gauss_jordan_inverse(A, algebra=QUATERNION)
    eye = np.zeros((3, 3, 4))
    eye[np.arange(3), np.arange(3), 0] = 1.0
    np.testing.assert_allclose(matmul(inv, A, QUATERNION), eye, atol=1e-10)
    np.testing.assert_allclose(matmul(A, inv, QUATERNION), eye, atol=1e-10)


def test_quaternion_solve():
    rng = np.random.default_rng(6)
    A = rng.standard_normal((4, 4, 4))
    x_true = rng.standard_normal((4, 1, 4))
    b = matmul(A, x_true, QUATERNION)
    x = gaussian_solve(A, b, algebra=QUATERNION)
    np.testing.assert_allclose(x, x_true[:, 0], rtol=1e-8, atol=1e-10)


def test_quaternion_rank_deficient_system_has_no_least_squares_fallback():
    assert not QUATERNION.is_field
    A = np.zeros((2, 2, 4))
    A[..., 0] = [[1.0, 2.0], [2.0, 4.0]]
    b = np.zeros((2, 1, 4))
    b[:, 0, 0] = [1.0, 2.0]
    with pytest.raises(ValueError, match="rank deficient"):
        gaussian_solve(A, b, algebra=QUATERNION)
