# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Rational and high-precision decimal algebras.

Both keep their elements in ``dtype=object`` arrays. Rationals are exact and
have no NaN or infinity: dividing by zero raises ZeroDivisionError. Decimals
run in a private context with no traps enabled, so they follow the same
NaN/Infinity conventions as the float algebras.
"""

import decimal
import math
import operator
from decimal import Decimal
from fractions import Fraction
from functools import reduce

import numpy as np

from .errors import InvalidArgument
from .scalars import RoundMode, ScalarAlgebra, round_exact
from .utils import CONSTANT_DIGITS, HIGH_PRECISION_DIGITS


def _as_bool(x):
    return np.asarray(x, dtype=bool)[()]


def _as_objects(x):
    return np.asarray(x, dtype=object)[()]


class _ObjectAlgebra(ScalarAlgebra):
    dtype = np.dtype(object)

    def _convert(self, value):
        raise NotImplementedError

    def _fill(self, shape, value) -> np.ndarray:
        return np.full(shape, self._convert(value), dtype=object)

    def coerce(self, values) -> np.ndarray:
        convert = np.frompyfunc(self._convert, 1, 1)
        return np.asarray(convert(np.asarray(values, dtype=object)), dtype=object)

    def real(self, value):
        return _as_objects(self.coerce(value))

    def sequence_norm(self, xs):
        mags = np.asarray(self.norm(xs), dtype=object).ravel()
        squares = [self.multiply(m, m) for m in mags]
        return self.real_sqrt(reduce(self.add, squares, self.zero()))


class RationalAlgebra(_ObjectAlgebra):
    """Exact fractions (``fractions.Fraction``)."""

    name = "rational"
    is_exact = True

    def __init__(self, sqrt_digits: int = HIGH_PRECISION_DIGITS):
        self._sqrt_context = decimal.Context(prec=sqrt_digits)

    def _convert(self, value):
        if isinstance(value, Fraction):
            return value
        if isinstance(value, str):
            return Fraction(value.strip())
        return Fraction(value)

    def from_string(self, text: str):
        return Fraction(text.strip())

    def constant(self, name: str):
        raise InvalidArgument(f"{name} is irrational and has no exact rational value")

    def add(self, a, b):
        return _as_objects(np.add(a, b))

    def subtract(self, a, b):
        return _as_objects(np.subtract(a, b))

    def multiply(self, a, b):
        return _as_objects(np.multiply(a, b))

    def divide(self, a, b):
        return _as_objects(np.true_divide(a, b))

    def negate(self, a):
        return _as_objects(np.negative(a))

    def scale_real(self, x, r):
        return self.multiply(x, self.real(r))

    def scale_rational(self, x, numerator: int, denominator: int):
        return self.multiply(x, Fraction(numerator, denominator))

    def is_zero(self, x):
        return _as_bool(np.equal(x, 0))

    def is_equal(self, a, b):
        return _as_bool(np.equal(a, b))

    def within(self, tol, a, b):
        return _as_bool(np.less_equal(np.abs(np.subtract(a, b)), self.real(tol)))

    def norm(self, x):
        return _as_objects(np.abs(x))

    def real_sqrt(self, r):
        ctx = self._sqrt_context

        def _sqrt(f):
            root = ctx.sqrt(ctx.divide(Decimal(f.numerator), Decimal(f.denominator)))
            return Fraction(root)

        return _as_objects(np.frompyfunc(_sqrt, 1, 1)(self.coerce(r)))

    def round(self, mode: RoundMode, delta, x):
        delta = self._convert(delta)
        fn = np.frompyfunc(lambda v: round_exact(mode, delta, v), 1, 1)
        return _as_objects(fn(x))


class HighPrecisionAlgebra(_ObjectAlgebra):
    """
    ``decimal.Decimal`` numbers carried at a fixed number of significant
    digits (HIGH_PRECISION_DIGITS by default).
    """

    name = "highprec"

    def __init__(self, digits: int = HIGH_PRECISION_DIGITS):
        self.context = decimal.Context(prec=digits, traps=[])
        ctx = self.context
        self._add = np.frompyfunc(ctx.add, 2, 1)
        self._subtract = np.frompyfunc(ctx.subtract, 2, 1)
        self._multiply = np.frompyfunc(ctx.multiply, 2, 1)
        self._divide = np.frompyfunc(ctx.divide, 2, 1)
        self._negate = np.frompyfunc(ctx.minus, 1, 1)
        self._abs = np.frompyfunc(ctx.abs, 1, 1)
        self._sqrt = np.frompyfunc(ctx.sqrt, 1, 1)
        self._exp = np.frompyfunc(ctx.exp, 1, 1)
        self._ln = np.frompyfunc(ctx.ln, 1, 1)
        self._sin = np.frompyfunc(self._sin_scalar, 1, 1)
        self._cos = np.frompyfunc(self._cos_scalar, 1, 1)

    def _convert(self, value):
        ctx = self.context
        if isinstance(value, Decimal):
            return ctx.plus(value)
        if isinstance(value, Fraction):
            return ctx.divide(Decimal(value.numerator), Decimal(value.denominator))
        if isinstance(value, float):
            return ctx.create_decimal_from_float(value)
        if isinstance(value, str):
            return self.from_string(value)
        return ctx.create_decimal(value)

    def from_string(self, text: str):
        try:
            return self.context.plus(Decimal(text.strip()))
        except decimal.InvalidOperation:
            raise ValueError(f"not a decimal number: {text!r}") from None

    def constant(self, name: str):
        try:
            digits = CONSTANT_DIGITS[name.upper()]
        except KeyError:
            raise InvalidArgument(f"unknown constant {name!r}") from None
        return self.context.create_decimal(digits)

    def add(self, a, b):
        return _as_objects(self._add(a, b))

    def subtract(self, a, b):
        return _as_objects(self._subtract(a, b))

    def multiply(self, a, b):
        return _as_objects(self._multiply(a, b))

    def divide(self, a, b):
        return _as_objects(self._divide(a, b))

    def negate(self, a):
        return _as_objects(self._negate(a))

    def scale_real(self, x, r):
        return self.multiply(x, self.real(r))

    def scale_rational(self, x, numerator: int, denominator: int):
        return self.divide(self.multiply(x, numerator), denominator)

    def power(self, n: int, x):
        # the context signals 0^0 as an invalid operation, which yields NaN
        ctx = self.context
        return _as_objects(np.frompyfunc(lambda v: ctx.power(v, int(n)), 1, 1)(x))

    def is_zero(self, x):
        return _as_bool(np.frompyfunc(lambda v: v.is_zero(), 1, 1)(x))

    def is_equal(self, a, b):
        return _as_bool(np.frompyfunc(operator.eq, 2, 1)(a, b))

    def within(self, tol, a, b):
        ctx = self.context
        tol = self._convert(tol)

        def _close(u, v):
            if u.is_nan() or v.is_nan():
                return False
            if u == v:
                return True
            return ctx.compare(ctx.abs(ctx.subtract(u, v)), tol) <= 0

        return _as_bool(np.frompyfunc(_close, 2, 1)(a, b))

    def is_nan(self, x):
        return _as_bool(np.frompyfunc(lambda v: v.is_nan(), 1, 1)(x))

    def is_infinite(self, x):
        return _as_bool(np.frompyfunc(lambda v: v.is_infinite(), 1, 1)(x))

    def nan(self, n=None):
        return self._fill(self._shape(n), Decimal("NaN"))[()]

    def infinite(self, n=None):
        return self._fill(self._shape(n), Decimal("Infinity"))[()]

    def norm(self, x):
        return _as_objects(self._abs(x))

    def real_sqrt(self, r):
        return _as_objects(self._sqrt(r))

    def round(self, mode: RoundMode, delta, x):
        ctx = self.context
        delta = self._convert(delta)

        def _round(v):
            if not v.is_finite() or mode in (RoundMode.NONE, RoundMode.EXACT):
                return round_exact(mode, delta, v)
            q = ctx.divide(v, delta)
            return ctx.multiply(Decimal(_whole(mode, q)), delta)

        return _as_objects(np.frompyfunc(_round, 1, 1)(x))

    # -----------------------------------------------------------------
    # transcendental functions
    # -----------------------------------------------------------------
    def _work_context(self) -> decimal.Context:
        return decimal.Context(prec=self.context.prec + 4, traps=[])

    def _reduce_angle(self, x, work):
        two_pi = work.multiply(2, work.create_decimal(CONSTANT_DIGITS["PI"]))
        return work.remainder_near(x, two_pi)

    def _sin_scalar(self, x):
        if not x.is_finite():
            return Decimal("NaN")
        work = self._work_context()
        x = self._reduce_angle(x, work)
        i, last, s, fact, num, sign = 1, 0, x, 1, x, 1
        while s != last:
            last = s
            i += 2
            fact *= i * (i - 1)
            num = work.multiply(num, work.multiply(x, x))
            sign *= -1
            s = work.add(s, work.multiply(sign, work.divide(num, fact)))
        return self.context.plus(s)

    def _cos_scalar(self, x):
        if not x.is_finite():
            return Decimal("NaN")
        work = self._work_context()
        x = self._reduce_angle(x, work)
        i, last, s, fact, num, sign = 0, 0, Decimal(1), 1, Decimal(1), 1
        while s != last:
            last = s
            i += 2
            fact *= i * (i - 1)
            num = work.multiply(num, work.multiply(x, x))
            sign *= -1
            s = work.add(s, work.multiply(sign, work.divide(num, fact)))
        return self.context.plus(s)

    def exp(self, x):
        return _as_objects(self._exp(x))

    def log(self, x):
        return _as_objects(self._ln(x))

    def sqrt(self, x):
        return _as_objects(self._sqrt(x))

    def sin(self, x):
        return _as_objects(self._sin(x))

    def cos(self, x):
        return _as_objects(self._cos(x))

    def tan(self, x):
        return self.divide(self.sin(x), self.cos(x))

    def sinh(self, x):
        ex = self.exp(x)
        return self.scale_rational(self.subtract(ex, self.invert(ex)), 1, 2)

    def cosh(self, x):
        ex = self.exp(x)
        return self.scale_rational(self.add(ex, self.invert(ex)), 1, 2)

    def tanh(self, x):
        return self.divide(self.sinh(x), self.cosh(x))


def _whole(mode: RoundMode, q: Decimal) -> int:
    """Integer multiple of delta chosen by `mode` for a finite quotient q."""
    half = Decimal("0.5")
    sign = -1 if q.is_signed() else 1
    mag = abs(q)
    if mode is RoundMode.NEGATIVE:
        return math.floor(q)
    if mode is RoundMode.POSITIVE:
        return math.ceil(q)
    if mode is RoundMode.TOWARDS_ORIGIN:
        return sign * math.floor(mag)
    if mode is RoundMode.AWAY_FROM_ORIGIN:
        return sign * math.ceil(mag)
    if mode is RoundMode.HALF_UP:
        return sign * math.floor(mag + half)
    if mode is RoundMode.HALF_DOWN:
        return sign * math.ceil(mag - half)
    f = math.floor(q)
    frac = q - f
    if frac != half:
        return f if frac < half else f + 1
    if mode is RoundMode.HALF_EVEN:
        return f if f % 2 == 0 else f + 1
    if mode is RoundMode.HALF_ODD:
        return f if f % 2 == 1 else f + 1
    raise InvalidArgument(f"unsupported round mode {mode!r}")
