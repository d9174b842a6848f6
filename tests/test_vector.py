# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import math
from decimal import Decimal
from fractions import Fraction

import numpy as np
import pytest

from tensoralg import vector
from tensoralg.algebras import COMPLEX128, FLOAT64, HIGHPREC, QUATERNION, RATIONAL
from tensoralg.errors import InvalidArgument, ShapeMismatch
from tensoralg.matrix import Matrix
from tensoralg.shapes import shapes_match
from tensoralg.vector import Vector

TEST_ITERATIONS = 20


def _random(rng, n=3):
    return Vector(FLOAT64, values=rng.standard_normal(n))


def test_cross_product_of_basis_vectors():
    a = Vector.from_string(FLOAT64, "[1,0,0]")
    b = Vector.from_string(FLOAT64, "[0,1,0]")
    c = Vector(FLOAT64)
    vector.cross_product(a, b, c)
    np.testing.assert_array_equal(c.as_array(), [0.0, 0.0, 1.0])


def test_cross_product_matches_numpy():
    rng = np.random.default_rng(0)
    for _ in range(TEST_ITERATIONS):
        a, b = _random(rng), _random(rng)
        c = Vector(FLOAT64)
        vector.cross_product(a, b, c)
        np.testing.assert_allclose(c.as_array(), np.cross(a.as_array(), b.as_array()), rtol=1e-12, atol=1e-14)


def test_cross_product_needs_three_components():
    a = Vector(FLOAT64, 2)
    with pytest.raises(ShapeMismatch):
        vector.cross_product(a, a, Vector(FLOAT64))


def test_cross_product_output_may_alias_input():
    a = Vector(FLOAT64, values=[1.0, 0.0, 0.0])
    b = Vector(FLOAT64, values=[0.0, 1.0, 0.0])
    vector.cross_product(a, b, a)
    np.testing.assert_array_equal(a.as_array(), [0.0, 0.0, 1.0])


def test_dot_product_conjugates_first_argument():
    rng = np.random.default_rng(1)
    a, b = _random(rng, 5), _random(rng, 5)
    assert math.isclose(vector.dot_product(a, b), a.as_array() @ b.as_array(), rel_tol=1e-12, abs_tol=1e-14)

    z = Vector(COMPLEX128, values=[1j, 2.0 + 1j])
    w = Vector(COMPLEX128, values=[1j, 1.0])
    assert vector.dot_product(z, w) == np.vdot(z.as_array(), w.as_array())
    assert vector.dot_product(z, z) == 6.0

    with pytest.raises(ShapeMismatch):
        vector.dot_product(a, Vector(FLOAT64, 3))
    assert vector.dot_product(Vector(FLOAT64), Vector(FLOAT64)) == 0.0


def test_quaternion_dot_product_is_real_on_the_diagonal():
    rng = np.random.default_rng(2)
    q = Vector(QUATERNION, values=rng.standard_normal((3, 4)))
    d = vector.dot_product(q, q)
    np.testing.assert_allclose(d, [np.sum(q.as_array() ** 2), 0.0, 0.0, 0.0], atol=1e-12)


def test_perp_dot_product():
    a = Vector(FLOAT64, values=[1.0, 0.0])
    b = Vector(FLOAT64, values=[0.0, 1.0])
    assert vector.perp_dot_product(a, b) == 1.0
    assert vector.perp_dot_product(b, a) == -1.0
    with pytest.raises(ShapeMismatch):
        vector.perp_dot_product(a, Vector(FLOAT64, 3))


def test_triple_products():
    rng = np.random.default_rng(3)
    for _ in range(TEST_ITERATIONS):
        a, b, c = _random(rng), _random(rng), _random(rng)
        m = np.array([a.as_array(), b.as_array(), c.as_array()])
        assert math.isclose(vector.scalar_triple_product(a, b, c), np.linalg.det(m), rel_tol=1e-9, abs_tol=1e-12)
        assert vector.triple_product(a, b, c) == vector.scalar_triple_product(a, b, c)

        d = Vector(FLOAT64)
        vector.vector_triple_product(a, b, c, d)
        expected = np.cross(a.as_array(), np.cross(b.as_array(), c.as_array()))
        np.testing.assert_allclose(d.as_array(), expected, rtol=1e-10, atol=1e-12)


def test_direct_product_fills_a_matrix():
    a = Vector(FLOAT64, values=[1.0, 2.0])
    b = Vector(FLOAT64, values=[3.0, 4.0, 5.0])
    m = Matrix(FLOAT64)
    vector.direct_product(a, b, m)
    assert m.dims == (2, 3)
    np.testing.assert_array_equal(m.as_array(), np.outer([1.0, 2.0], [3.0, 4.0, 5.0]))
    with pytest.raises(TypeError):
        vector.direct_product(a, b, Vector(FLOAT64))


def test_norm_is_scaled():
    assert vector.norm(Vector(FLOAT64, values=[3.0, 4.0])) == 5.0
    big = Vector(FLOAT64, values=[1e300, 1e300])
    assert math.isclose(vector.norm(big), math.sqrt(2) * 1e300)


def test_elementwise_surface_and_text():
    v = Vector.from_string(QUATERNION, "[{1,2,3,4},5]")
    assert v.length == 2
    np.testing.assert_array_equal(v.get(1), [5.0, 0.0, 0.0, 0.0])
    assert str(v) == "[{1.0,2.0,3.0,4.0},{5.0,0.0,0.0,0.0}]"

    w = Vector(QUATERNION)
    vector.conjugate(v, w)
    np.testing.assert_array_equal(w.get(0), [1.0, -2.0, -3.0, -4.0])
    vector.add(v, w, w)
    np.testing.assert_array_equal(w.get(0), [2.0, 0.0, 0.0, 0.0])

    with pytest.raises(ShapeMismatch):
        Vector.from_string(FLOAT64, "[[1,2],[3,4]]")


def test_negative_length_is_invalid():
    with pytest.raises(InvalidArgument):
        Vector(FLOAT64, -1)


@pytest.mark.parametrize("alg, cast", [(HIGHPREC, Decimal), (RATIONAL, Fraction)])
def test_exact_vectors_filled_elementwise(alg, cast):
    a = Vector(alg, 3)
    b = Vector(alg, 3)
    for i, (x, y) in enumerate([("1", "4"), ("2", "5"), ("3", "6")]):
        a.set(i, cast(x) / 2)
        b.set(i, cast(y))
    assert type(a.storage.raw[0]) is cast

    assert vector.dot_product(a, b) == 16
    c = Vector(alg)
    vector.cross_product(a, b, c)
    assert [c.get(i) for i in range(3)] == [cast(-3) / 2, 3, cast(-3) / 2]


@pytest.mark.parametrize("alg", [FLOAT64, COMPLEX128, QUATERNION, RATIONAL])
def test_outputs_take_the_result_shape(alg):
    a = Vector(alg, 3)
    c = Vector(alg, 7)
    vector.add(a, a, c)
    assert shapes_match(c.dims, a.dims)
    vector.cross_product(a, a, c)
    assert c.length == 3
    m = Matrix(alg, 1, 1)
    vector.direct_product(a, Vector(alg, 2), m)
    assert m.dims == (3, 2)


def test_levi_civita_copies_are_independent():
    eps = vector.levi_civita(FLOAT64)
    assert eps.get((0, 1, 2)) == 1.0 and eps.get((1, 0, 2)) == -1.0
    eps.set((0, 1, 2), 5.0)
    assert vector.levi_civita(FLOAT64).get((0, 1, 2)) == 1.0
