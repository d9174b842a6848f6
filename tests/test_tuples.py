# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

from fractions import Fraction

import numpy as np
import pytest

from tensoralg.algebras import FLOAT64, QUATERNION, RATIONAL
from tensoralg.errors import ParseError, ShapeMismatch
from tensoralg.tuples import TupleAlgebra, split_colons


@pytest.fixture
def triple():
    return TupleAlgebra([FLOAT64, RATIONAL, QUATERNION])


def test_split_colons_respects_braces():
    assert split_colons("1:2/3:{1,2:3}") == ["1", "2/3", "{1,2:3}"]
    with pytest.raises(ParseError):
        split_colons("{1:2")


def test_text_round_trip(triple):
    value = triple.from_string("1.5:1/3:{1,2,3,4}")
    assert value[0] == 1.5
    assert value[1] == Fraction(1, 3)
    np.testing.assert_array_equal(value[2], [1.0, 2.0, 3.0, 4.0])
    assert triple.to_string(value) == "1.5:1/3:{1.0,2.0,3.0,4.0}"
    assert triple.name == "float64:rational:quaternion64"


def test_slotwise_arithmetic(triple):
    a = triple.from_string("2:1/2:{0,1,0,0}")
    b = triple.from_string("3:1/3:{0,0,1,0}")
    total = triple.add(a, b)
    assert total[0] == 5.0 and total[1] == Fraction(5, 6)
    prod = triple.multiply(a, b)
    np.testing.assert_array_equal(prod[2], [0.0, 0.0, 0.0, 1.0])
    assert triple.is_zero(triple.subtract(a, a))
    assert triple.is_equal(triple.negate(triple.negate(a)), a)
    assert triple.is_not_equal(a, b)
    assert triple.is_zero(triple.zero())


def test_assign_copies(triple):
    a = triple.from_string("2:1/2:{0,1,0,0}")
    c = triple.assign(a)
    c[2][0] = 9.0
    assert a[2][0] == 0.0


def test_errors(triple):
    with pytest.raises(ParseError):
        triple.from_string("1:2")
    with pytest.raises(ParseError):
        triple.from_string("1:x:{0}")
    with pytest.raises(ShapeMismatch):
        triple.add((1.0, Fraction(1)), (1.0, Fraction(1)))
    with pytest.raises(ShapeMismatch):
        TupleAlgebra([])
    with pytest.raises(TypeError):
        TupleAlgebra([FLOAT64, "rational"])
