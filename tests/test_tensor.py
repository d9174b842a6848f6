# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging
from decimal import Decimal
from fractions import Fraction

import numpy as np
import pytest

from tensoralg import tensor
from tensoralg.algebras import COMPLEX128, FLOAT32, FLOAT64, HIGHPREC, QUATERNION, RATIONAL
from tensoralg.errors import IndexOutOfBounds, InvalidArgument, ShapeMismatch
from tensoralg.shapes import shapes_match
from tensoralg.tensor import CartesianTensor

TEST_ITERATIONS = 20
logger = logging.getLogger(__name__)


def _random(rng, rank, dim):
    return CartesianTensor(FLOAT64, values=rng.standard_normal((dim,) * rank))


def test_shape_invariants():
    t = CartesianTensor(FLOAT64, 3, 4)
    assert t.dims == (4, 4, 4)
    assert t.size == 64
    assert t.index_kinds == ("lower", "lower", "lower")
    assert t.shape.rank == 3

    s = CartesianTensor(FLOAT64)
    assert s.rank == 0 and s.size == 1

    with pytest.raises(ShapeMismatch):
        CartesianTensor(FLOAT64, values=np.zeros((2, 3)))
    with pytest.raises(InvalidArgument):
        CartesianTensor(FLOAT64, -1, 2)


def test_get_set_and_bounds():
    t = CartesianTensor(FLOAT64, 2, 3)
    t.set((1, 2), 7.0)
    assert t.get((1, 2)) == 7.0
    assert t.storage.get(5) == 7.0
    with pytest.raises(IndexOutOfBounds):
        t.get((3, 0))


def test_outer_product_rank_law():
    rng = np.random.default_rng(0)
    for rank_a, rank_b in [(0, 2), (1, 1), (2, 1), (1, 3)]:
        a = _random(rng, rank_a, 3)
        b = _random(rng, rank_b, 3)
        c = CartesianTensor(FLOAT64)
        tensor.outer_product(a, b, c)
        assert c.rank == rank_a + rank_b
        assert c.dimension == 3
        np.testing.assert_allclose(c.as_array(), np.multiply.outer(a.as_array(), b.as_array()))


def test_outer_product_dimension_mismatch():
    a = CartesianTensor(FLOAT64, 1, 2)
    b = CartesianTensor(FLOAT64, 1, 3)
    with pytest.raises(ShapeMismatch):
        tensor.outer_product(a, b, CartesianTensor(FLOAT64))
    with pytest.raises(TypeError):
        tensor.outer_product(a, CartesianTensor(FLOAT32, 1, 2), CartesianTensor(FLOAT64))


def test_outer_product_output_may_alias_input():
    a = CartesianTensor(FLOAT64, values=[1.0, 2.0])
    b = CartesianTensor(FLOAT64, values=[3.0, 4.0])
    tensor.outer_product(a, b, a)
    np.testing.assert_array_equal(a.as_array(), [[3.0, 4.0], [6.0, 8.0]])


def test_contraction_rank_law():
    rng = np.random.default_rng(1)
    for _ in range(TEST_ITERATIONS):
        a = _random(rng, 3, 4)
        b = CartesianTensor(FLOAT64)
        tensor.contract(0, 2, a, b)
        assert b.rank == 1
        np.testing.assert_allclose(b.as_array(), np.einsum("iji->j", a.as_array()))
        tensor.contract(2, 1, a, b)
        np.testing.assert_allclose(b.as_array(), np.einsum("jii->j", a.as_array()))


def test_contraction_trace_example():
    t = CartesianTensor.from_string(FLOAT64, "[[1,2],[3,4]]")
    s = CartesianTensor(FLOAT64)
    tensor.contract(0, 1, t, s)
    assert s.rank == 0
    assert s.get(()) == 5.0


def test_contraction_errors():
    t = CartesianTensor(FLOAT64, 2, 2)
    with pytest.raises(InvalidArgument):
        tensor.contract(1, 1, t, CartesianTensor(FLOAT64))
    with pytest.raises(IndexOutOfBounds):
        tensor.contract(0, 2, t, CartesianTensor(FLOAT64))


def test_inner_product_rank_one_is_dot():
    rng = np.random.default_rng(2)
    a = _random(rng, 1, 5)
    b = _random(rng, 1, 5)
    c = CartesianTensor(FLOAT64)
    tensor.inner_product(0, 0, a, b, c)
    assert np.isclose(c.get(()), a.as_array() @ b.as_array())


def test_inner_product_rank_two_is_matrix_product():
    rng = np.random.default_rng(3)
    for _ in range(TEST_ITERATIONS):
        a = _random(rng, 2, 4)
        b = _random(rng, 2, 4)
        c = CartesianTensor(FLOAT64)
        tensor.inner_product(1, 0, a, b, c)
        np.testing.assert_allclose(c.as_array(), a.as_array() @ b.as_array(), rtol=1e-12, atol=1e-12)
        tensor.inner_product(0, 0, a, b, c)
        np.testing.assert_allclose(c.as_array(), a.as_array().T @ b.as_array(), rtol=1e-12, atol=1e-12)


def test_quaternion_outer_product_keeps_operand_order():
    i = [0.0, 1.0, 0.0, 0.0]
    j = [0.0, 0.0, 1.0, 0.0]
    a = CartesianTensor(QUATERNION, values=[i])
    b = CartesianTensor(QUATERNION, values=[j])
    ab = CartesianTensor(QUATERNION)
    ba = CartesianTensor(QUATERNION)
    tensor.outer_product(a, b, ab)
    tensor.outer_product(b, a, ba)
    np.testing.assert_array_equal(ab.get((0, 0)), [0.0, 0.0, 0.0, 1.0])
    np.testing.assert_array_equal(ba.get((0, 0)), [0.0, 0.0, 0.0, -1.0])


def test_power_and_unity():
    a = CartesianTensor(FLOAT64, values=[1.0, 2.0])
    b = CartesianTensor(FLOAT64)
    tensor.power(2, a, b)
    aa = CartesianTensor(FLOAT64)
    tensor.outer_product(a, a, aa)
    assert tensor.is_equal(b, aa)

    tensor.power(3, a, b)
    assert b.rank == 3
    assert b.get((1, 1, 1)) == 8.0

    tensor.power(0, a, b)
    assert b.rank == 1
    assert tensor.is_unity(b)
    with pytest.raises(InvalidArgument):
        tensor.power(-1, a, b)


def test_unity_of_rank_three():
    t = CartesianTensor(FLOAT64, 3, 2)
    tensor.unity(t)
    assert t.get((1, 1, 1)) == 1.0
    assert t.get((1, 0, 1)) == 0.0
    assert tensor.is_unity(t)


def test_index_raising_and_lowering():
    t = CartesianTensor(FLOAT64, values=[[1.0, 2.0], [3.0, 4.0]])
    with pytest.raises(InvalidArgument):
        tensor.raise_index(0, t, CartesianTensor(FLOAT64))
    low = CartesianTensor(FLOAT64)
    tensor.lower_index(1, t, low)
    assert tensor.is_equal(low, t)
    with pytest.raises(IndexOutOfBounds):
        tensor.lower_index(2, t, low)


def test_comma_derivative():
    t = CartesianTensor(FLOAT64, values=[0.0, 1.0, 4.0, 9.0, 16.0])
    d = CartesianTensor(FLOAT64)
    tensor.comma_derivative(0, t, d)
    np.testing.assert_array_equal(d.as_array(), [1.0, 2.0, 4.0, 6.0, 7.0])

    grid = CartesianTensor(FLOAT64, values=np.add.outer(np.arange(3.0), 10 * np.arange(3.0)))
    tensor.semicolon_derivative(1, grid, d)
    np.testing.assert_array_equal(d.as_array(), np.full((3, 3), 10.0))

    single = CartesianTensor(FLOAT64, values=[5.0])
    tensor.comma_derivative(0, single, d)
    np.testing.assert_array_equal(d.as_array(), [0.0])


def test_elementwise_surface():
    a = CartesianTensor(FLOAT64, values=[[1.0, -2.0], [3.0, 0.5]])
    b = CartesianTensor(FLOAT64)
    tensor.scale_by_two(2, a, b)
    np.testing.assert_array_equal(b.as_array(), [[4.0, -8.0], [12.0, 2.0]])
    tensor.scale_by_one_half(2, b, b)
    assert tensor.is_equal(a, b)
    tensor.add_scalar(1.0, a, b)
    assert b.get((0, 1)) == -1.0
    tensor.subtract(b, a, b)
    assert tensor.within(1e-15, b, CartesianTensor(FLOAT64, values=np.ones((2, 2))))
    with pytest.raises(ShapeMismatch):
        tensor.add(a, CartesianTensor(FLOAT64, 2, 3), b)


def test_rational_tensor_text_round_trip():
    t = CartesianTensor.from_string(RATIONAL, "[[1/2,1/3],[1/4,1/5]]")
    assert t.get((0, 1)) == Fraction(1, 3)
    assert str(t) == "[[1/2,1/3],[1/4,1/5]]"
    s = CartesianTensor.from_string(RATIONAL, "7/3")
    assert s.rank == 0 and s.get(()) == Fraction(7, 3)


def test_inner_product_is_contracted_outer_product():
    rng = np.random.default_rng(4)
    for _ in range(TEST_ITERATIONS):
        rank_a, rank_b = (int(r) for r in rng.integers(1, 3, size=2))
        a = _random(rng, rank_a, 3)
        b = _random(rng, rank_b, 3)
        i = int(rng.integers(0, rank_a))
        j = int(rng.integers(0, rank_b))

        c = CartesianTensor(FLOAT64)
        tensor.inner_product(i, j, a, b, c)

        ab = CartesianTensor(FLOAT64)
        expected = CartesianTensor(FLOAT64)
        tensor.outer_product(a, b, ab)
        tensor.contract(i, a.rank + j, ab, expected)
        logger.debug(f"inner_product({i}, {j}) ranks {a.rank},{b.rank} -> {c.rank}")

        assert c.rank == rank_a + rank_b - 2
        assert tensor.is_equal(c, expected)


@pytest.mark.parametrize("alg", [FLOAT64, COMPLEX128, QUATERNION, RATIONAL])
def test_outputs_take_the_result_shape(alg):
    a = CartesianTensor(alg, 2, 3)
    b = CartesianTensor(alg, 1, 3)
    c = CartesianTensor(alg, 4, 2)
    tensor.add(a, a, c)
    assert shapes_match(c.dims, a.dims)
    tensor.multiply(a, b, c)
    assert c.dims == (3, 3, 3)
    assert c.storage.size == 27
    tensor.contract(0, 2, c, c)
    assert shapes_match(c.dims, b.dims)


@pytest.mark.parametrize(
    "alg, value, squared",
    [
        (HIGHPREC, Decimal("1.5"), Decimal("2.25")),
        (RATIONAL, Fraction(3, 2), Fraction(9, 4)),
    ],
)
def test_exact_tensor_filled_elementwise(alg, value, squared):
    t = CartesianTensor(alg, 2, 2)
    t.set((0, 1), value)
    assert type(t.storage.raw[1]) is type(value)

    p = CartesianTensor(alg)
    tensor.power(2, t, p)
    assert p.get((0, 1, 0, 1)) == squared
    assert p.get((0, 0, 0, 1)) == 0

    u = CartesianTensor(alg, 2, 2)
    tensor.unity(u)
    assert type(u.storage.raw[0]) is type(value)
    tensor.power(2, u, p)
    assert p.get((1, 1, 1, 1)) == 1
    assert p.get((1, 1, 0, 0)) == 1
    assert p.get((1, 0, 0, 0)) == 0

    s = CartesianTensor(alg)
    tensor.inner_product(1, 0, t, u, s)
    assert s.get((0, 1)) == value
