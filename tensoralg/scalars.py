# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Scalar algebras
===============

A scalar algebra is a stateless bundle of element operations for one numeric
type. The tensor, matrix and vector kernels never touch numbers directly; they
call ``algebra.add``, ``algebra.multiply`` and friends, so the same kernel
code runs over floats, complex numbers, octonions, rationals or decimals.

Every operation accepts either a single element or an ndarray of elements
(leading axes index elements, trailing axes are ``element_shape``) and
broadcasts like the matching NumPy ufunc. Results are returned, never
written into an argument.
"""

import enum
import math
from abc import ABC, abstractmethod
from functools import reduce
from typing import Tuple

import numpy as np

from .errors import InexactRounding, InvalidArgument
from .utils import CONSTANT_DIGITS


class RoundMode(enum.Enum):
    NONE = "none"
    EXACT = "exact"
    NEGATIVE = "negative"
    POSITIVE = "positive"
    TOWARDS_ORIGIN = "towards_origin"
    AWAY_FROM_ORIGIN = "away_from_origin"
    HALF_UP = "half_up"
    HALF_DOWN = "half_down"
    HALF_EVEN = "half_even"
    HALF_ODD = "half_odd"


# ---------------------------------------------------------------------
# Rounding helpers shared by every algebra
# ---------------------------------------------------------------------
def _round_quotient(mode: RoundMode, q: np.ndarray) -> np.ndarray:
    """Round q (a float array, in units of delta) to an integer value."""
    if mode is RoundMode.NEGATIVE:
        return np.floor(q)
    if mode is RoundMode.POSITIVE:
        return np.ceil(q)
    if mode is RoundMode.TOWARDS_ORIGIN:
        return np.trunc(q)
    if mode is RoundMode.AWAY_FROM_ORIGIN:
        return np.sign(q) * np.ceil(np.abs(q))
    if mode is RoundMode.HALF_UP:
        return np.sign(q) * np.floor(np.abs(q) + 0.5)
    if mode is RoundMode.HALF_DOWN:
        return np.sign(q) * np.ceil(np.abs(q) - 0.5)
    if mode is RoundMode.HALF_EVEN:
        return np.rint(q)
    if mode is RoundMode.HALF_ODD:
        f = np.floor(q)
        frac = q - f
        floor_is_odd = np.mod(f, 2) == 1
        tie = np.where(floor_is_odd, f, f + 1)
        return np.where(frac < 0.5, f, np.where(frac > 0.5, f + 1, tie))
    raise InvalidArgument(f"unsupported round mode {mode!r}")


def _round_exact_quotient(mode: RoundMode, q):
    """Scalar version of _round_quotient for Fraction and Decimal values."""
    half = type(q)(1) / 2
    sign = -1 if q < 0 else 1
    if mode is RoundMode.NEGATIVE:
        return math.floor(q)
    if mode is RoundMode.POSITIVE:
        return math.ceil(q)
    if mode is RoundMode.TOWARDS_ORIGIN:
        return sign * math.floor(abs(q))
    if mode is RoundMode.AWAY_FROM_ORIGIN:
        return sign * math.ceil(abs(q))
    if mode is RoundMode.HALF_UP:
        return sign * math.floor(abs(q) + half)
    if mode is RoundMode.HALF_DOWN:
        return sign * math.ceil(abs(q) - half)
    f = math.floor(q)
    frac = q - f
    if frac < half:
        return f
    if frac > half:
        return f + 1
    if mode is RoundMode.HALF_EVEN:
        return f if f % 2 == 0 else f + 1
    if mode is RoundMode.HALF_ODD:
        return f if f % 2 == 1 else f + 1
    raise InvalidArgument(f"unsupported round mode {mode!r}")


@np.errstate(all="ignore")
def round_real(mode: RoundMode, delta, x):
    """Round float value(s) x to a multiple of delta."""
    x = np.asarray(x)
    if mode is RoundMode.NONE:
        return x.copy()
    q = x / delta
    if mode is RoundMode.EXACT:
        if np.any((q != np.floor(q)) & np.isfinite(q)):
            raise InexactRounding(f"value is not a multiple of {delta}")
        return x.copy()
    return (_round_quotient(mode, q) * delta).astype(x.dtype)


def round_exact(mode: RoundMode, delta, x):
    """Round one Fraction or Decimal value to a multiple of delta."""
    if mode is RoundMode.NONE:
        return x
    is_finite = getattr(x, "is_finite", None)
    if is_finite is not None and not is_finite():
        return x
    q = x / delta
    if mode is RoundMode.EXACT:
        if q != math.floor(q):
            raise InexactRounding(f"{x} is not a multiple of {delta}")
        return x
    return _round_exact_quotient(mode, q) * delta


@np.errstate(all="ignore")
def scaled_norm(mags):
    """
    Euclidean length of a sequence of magnitudes, divided through by the
    largest magnitude first so that squaring cannot overflow.
    """
    mags = np.asarray(mags).ravel()
    if mags.size == 0:
        return mags.dtype.type(0)
    m = np.max(mags)
    if m == 0 or not np.isfinite(m):
        return m
    return m * np.sqrt(np.sum((mags / m) ** 2))


class ScalarAlgebra(ABC):
    """
    Capability bundle over one element type.

    Subclasses set ``name``, ``dtype`` and ``element_shape`` and implement
    the abstract arithmetic. Operations that make no sense for a type
    (``exp`` of a rational, ``nan`` of an exact type) raise InvalidArgument.
    """

    name: str = "abstract"
    dtype: np.dtype = np.dtype(np.float64)
    element_shape: Tuple[int, ...] = ()
    is_field: bool = True
    is_commutative: bool = True
    is_associative: bool = True
    is_exact: bool = False

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name!r})"

    # -----------------------------------------------------------------
    # construction
    # -----------------------------------------------------------------
    def _fill(self, shape, value) -> np.ndarray:
        return np.full(shape, value, dtype=self.dtype)

    def _shape(self, n):
        return self.element_shape if n is None else (n,) + self.element_shape

    def zero(self, n=None):
        """One zero element, or an array of n zeros."""
        return self._fill(self._shape(n), 0)[()]

    def unity(self, n=None):
        """One multiplicative identity, or an array of n of them."""
        return self._fill(self._shape(n), 1)[()]

    def zeros_like_shape(self, shape) -> np.ndarray:
        """Zero array whose full shape (element axes included) is `shape`."""
        return self._fill(tuple(shape), 0)

    @abstractmethod
    def coerce(self, values) -> np.ndarray:
        """Convert numbers (or nested lists of them) to an element array."""

    def element(self, value):
        return self.coerce(value)[()]

    @abstractmethod
    def real(self, value):
        """Convert to the real component type (float, Fraction, Decimal)."""

    @abstractmethod
    def from_string(self, text: str):
        ...

    def to_string(self, x) -> str:
        return str(x)

    def constant(self, name: str):
        """PI, E, PHI or GAMMA as an element of this algebra."""
        try:
            digits = CONSTANT_DIGITS[name.upper()]
        except KeyError:
            raise InvalidArgument(f"unknown constant {name!r}") from None
        return self.element(float(digits))

    # -----------------------------------------------------------------
    # arithmetic
    # -----------------------------------------------------------------
    @abstractmethod
    def add(self, a, b):
        ...

    @abstractmethod
    def subtract(self, a, b):
        ...

    @abstractmethod
    def multiply(self, a, b):
        ...

    @abstractmethod
    def divide(self, a, b):
        ...

    @abstractmethod
    def negate(self, a):
        ...

    def invert(self, a):
        return self.divide(self.unity(), a)

    def conjugate(self, a):
        return np.array(a, dtype=self.dtype)[()]

    @abstractmethod
    def scale_real(self, x, r):
        """Multiply element(s) x by real value(s) r."""

    def scale_rational(self, x, numerator: int, denominator: int):
        return self.scale_real(x, numerator / denominator)

    def power(self, n: int, x):
        """
        Integer power by repeated squaring. 0^0 is NaN by convention.
        """
        n = int(n)
        if n == 0:
            x = np.asarray(x, dtype=self.dtype)
            lead = x.shape[: x.ndim - len(self.element_shape)]
            ones = self.zeros_like_shape(lead + self.element_shape)
            ones[...] = self.unity()
            zero_zero = np.asarray(self.is_zero(x), dtype=bool)
            if zero_zero.any():
                ones[zero_zero] = self.nan()
            return ones[()]
        if n < 0:
            return self.power(-n, self.invert(x))
        result = None
        base = x
        while n:
            if n & 1:
                result = base if result is None else self.multiply(result, base)
            n >>= 1
            if n:
                base = self.multiply(base, base)
        return result

    # -----------------------------------------------------------------
    # predicates, fill values
    # -----------------------------------------------------------------
    @abstractmethod
    def is_zero(self, x):
        ...

    @abstractmethod
    def is_equal(self, a, b):
        ...

    @abstractmethod
    def within(self, tol, a, b):
        ...

    def is_nan(self, x):
        return np.zeros(np.shape(x)[: np.ndim(x) - len(self.element_shape)], dtype=bool)[()]

    def is_infinite(self, x):
        return self.is_nan(x)

    def nan(self, n=None):
        raise InvalidArgument(f"{self.name} cannot represent NaN")

    def infinite(self, n=None):
        raise InvalidArgument(f"{self.name} cannot represent infinity")

    # -----------------------------------------------------------------
    # norms and reductions
    # -----------------------------------------------------------------
    @abstractmethod
    def norm(self, x):
        """Magnitude of element(s) x as a real value."""

    @abstractmethod
    def real_sqrt(self, r):
        ...

    def sequence_norm(self, xs):
        return scaled_norm(self.norm(xs))

    def sum(self, xs, axis: int = 0):
        """Fold `add` along one element axis."""
        moved = np.moveaxis(np.asarray(xs), axis, 0)
        if moved.shape[0] == 0:
            return self.zeros_like_shape(moved.shape[1:])[()]
        return reduce(self.add, moved)

    @abstractmethod
    def round(self, mode: RoundMode, delta, x):
        ...

    # -----------------------------------------------------------------
    # transcendental functions; algebras that support them override
    # -----------------------------------------------------------------
    def _unsupported(self, what):
        raise InvalidArgument(f"{self.name} algebra does not support {what}")

    def exp(self, x):
        self._unsupported("exp")

    def log(self, x):
        self._unsupported("log")

    def sqrt(self, x):
        self._unsupported("sqrt")

    def sin(self, x):
        self._unsupported("sin")

    def cos(self, x):
        self._unsupported("cos")

    def tan(self, x):
        self._unsupported("tan")

    def sinh(self, x):
        self._unsupported("sinh")

    def cosh(self, x):
        self._unsupported("cosh")

    def tanh(self, x):
        self._unsupported("tanh")


class RealAlgebra(ScalarAlgebra):
    """IEEE-754 reals of one NumPy width (float16, float32, float64)."""

    def __init__(self, dtype):
        self.dtype = np.dtype(dtype)
        self.name = self.dtype.name

    def _cast(self, x):
        return np.asarray(x, dtype=self.dtype)[()]

    def coerce(self, values) -> np.ndarray:
        return np.asarray(values, dtype=self.dtype)

    def real(self, value):
        return self._cast(value)

    def from_string(self, text: str):
        return self._cast(float(text.strip()))

    def to_string(self, x) -> str:
        return str(self._cast(x))

    def add(self, a, b):
        return self._cast(np.add(a, b))

    def subtract(self, a, b):
        return self._cast(np.subtract(a, b))

    @np.errstate(all="ignore")
    def multiply(self, a, b):
        return self._cast(np.multiply(a, b))

    @np.errstate(all="ignore")
    def divide(self, a, b):
        return self._cast(np.divide(a, b))

    def negate(self, a):
        return self._cast(np.negative(a))

    @np.errstate(all="ignore")
    def scale_real(self, x, r):
        return self._cast(np.multiply(x, r))

    @np.errstate(all="ignore")
    def power(self, n: int, x):
        x = np.asarray(x, dtype=self.dtype)
        return self._cast(np.where((n == 0) & (x == 0), np.nan, np.power(x, float(n))))

    def is_zero(self, x):
        return np.asarray(np.equal(x, 0))[()]

    def is_equal(self, a, b):
        return np.asarray(np.equal(a, b))[()]

    @np.errstate(all="ignore")
    def within(self, tol, a, b):
        return np.asarray(np.equal(a, b) | (np.abs(np.subtract(a, b)) <= tol))[()]

    def is_nan(self, x):
        return np.asarray(np.isnan(x))[()]

    def is_infinite(self, x):
        return np.asarray(np.isinf(x))[()]

    def nan(self, n=None):
        return self._fill(self._shape(n), np.nan)[()]

    def infinite(self, n=None):
        return self._fill(self._shape(n), np.inf)[()]

    def norm(self, x):
        return self._cast(np.abs(x))

    @np.errstate(all="ignore")
    def real_sqrt(self, r):
        return self._cast(np.sqrt(r))

    def sum(self, xs, axis: int = 0):
        return self._cast(np.sum(np.asarray(xs, dtype=self.dtype), axis=axis))

    def round(self, mode: RoundMode, delta, x):
        return self._cast(round_real(mode, delta, np.asarray(x, dtype=self.dtype)))

    @np.errstate(all="ignore")
    def exp(self, x):
        return self._cast(np.exp(x))

    @np.errstate(all="ignore")
    def log(self, x):
        return self._cast(np.log(x))

    @np.errstate(all="ignore")
    def sqrt(self, x):
        return self._cast(np.sqrt(x))

    @np.errstate(all="ignore")
    def sin(self, x):
        return self._cast(np.sin(x))

    @np.errstate(all="ignore")
    def cos(self, x):
        return self._cast(np.cos(x))

    @np.errstate(all="ignore")
    def tan(self, x):
        return self._cast(np.tan(x))

    @np.errstate(all="ignore")
    def sinh(self, x):
        return self._cast(np.sinh(x))

    @np.errstate(all="ignore")
    def cosh(self, x):
        return self._cast(np.cosh(x))

    @np.errstate(all="ignore")
    def tanh(self, x):
        return self._cast(np.tanh(x))


def _max_component(z: np.ndarray) -> np.ndarray:
    return np.maximum(np.abs(z.real), np.abs(z.imag))


def _safe_scale(s: np.ndarray) -> np.ndarray:
    return np.where(s == 0, 1, s)


def make_complex(re, im, dtype) -> np.ndarray:
    """Assemble a complex array component-wise (avoids inf*0 cross terms)."""
    re, im = np.broadcast_arrays(np.asarray(re), np.asarray(im))
    out = np.empty(re.shape, dtype=dtype)
    out.real = re
    out.imag = im
    return out


class ComplexAlgebra(ScalarAlgebra):
    """
    Complex numbers of one NumPy width (complex64, complex128).

    Multiply and divide scale each operand by its largest component before
    the product and rescale afterwards, so intermediate squares do not
    overflow for operands near the top of the float range.
    """

    def __init__(self, dtype):
        self.dtype = np.dtype(dtype)
        self.name = self.dtype.name
        self.real_dtype = np.finfo(self.dtype).dtype

    def _cast(self, x):
        return np.asarray(x, dtype=self.dtype)[()]

    def coerce(self, values) -> np.ndarray:
        return np.asarray(values, dtype=self.dtype)

    def real(self, value):
        return np.asarray(value, dtype=self.real_dtype)[()]

    def from_string(self, text: str):
        text = text.strip()
        if text.startswith("{") and text.endswith("}"):
            parts = [p.strip() for p in text[1:-1].split(",")]
            if len(parts) != 2:
                raise ValueError(f"expected {{re,im}}, got {text!r}")
            return self._cast(complex(float(parts[0]), float(parts[1])))
        return self._cast(complex(text.replace(" ", "")))

    def to_string(self, x) -> str:
        x = self._cast(x)
        return "{" + f"{x.real},{x.imag}" + "}"

    def add(self, a, b):
        return self._cast(np.add(a, b))

    def subtract(self, a, b):
        return self._cast(np.subtract(a, b))

    def negate(self, a):
        return self._cast(np.negative(a))

    @np.errstate(all="ignore")
    def multiply(self, a, b):
        a = np.asarray(a, dtype=self.dtype)
        b = np.asarray(b, dtype=self.dtype)
        sa = _max_component(a)
        sb = _max_component(b)
        prod = (a / _safe_scale(sa)) * (b / _safe_scale(sb))
        scale = sa * sb
        return make_complex(prod.real * scale, prod.imag * scale, self.dtype)[()]

    @np.errstate(all="ignore")
    def divide(self, a, b):
        a = np.asarray(a, dtype=self.dtype)
        b = np.asarray(b, dtype=self.dtype)
        sa = _max_component(a)
        sb = _max_component(b)
        ua = a / _safe_scale(sa)
        ub = b / _safe_scale(sb)
        mod2 = ub.real * ub.real + ub.imag * ub.imag
        re = (ua.real * ub.real + ua.imag * ub.imag) / mod2
        im = (ua.imag * ub.real - ua.real * ub.imag) / mod2
        scale = sa / sb
        return make_complex(re * scale, im * scale, self.dtype)[()]

    def conjugate(self, a):
        return self._cast(np.conj(a))

    @np.errstate(all="ignore")
    def scale_real(self, x, r):
        x = np.asarray(x, dtype=self.dtype)
        return make_complex(x.real * r, x.imag * r, self.dtype)[()]

    @np.errstate(all="ignore")
    def power(self, n: int, x):
        x = np.asarray(x, dtype=self.dtype)
        nan = complex(np.nan, np.nan)
        return self._cast(np.where((n == 0) & (x == 0), nan, np.power(x, n)))

    def is_zero(self, x):
        return np.asarray(np.equal(x, 0))[()]

    def is_equal(self, a, b):
        return np.asarray(np.equal(a, b))[()]

    @np.errstate(all="ignore")
    def within(self, tol, a, b):
        d = np.subtract(a, b)
        close = (np.abs(d.real) <= tol) & (np.abs(d.imag) <= tol)
        return np.asarray(np.equal(a, b) | close)[()]

    def is_nan(self, x):
        return np.asarray(np.isnan(x))[()]

    def is_infinite(self, x):
        return np.asarray(np.isinf(x) & ~np.isnan(x))[()]

    def nan(self, n=None):
        return self._fill(self._shape(n), complex(np.nan, np.nan))[()]

    def infinite(self, n=None):
        return self._fill(self._shape(n), complex(np.inf, np.inf))[()]

    def norm(self, x):
        return np.asarray(np.abs(x), dtype=self.real_dtype)[()]

    @np.errstate(all="ignore")
    def real_sqrt(self, r):
        return np.asarray(np.sqrt(r), dtype=self.real_dtype)[()]

    def sum(self, xs, axis: int = 0):
        return self._cast(np.sum(np.asarray(xs, dtype=self.dtype), axis=axis))

    def round(self, mode: RoundMode, delta, x):
        x = np.asarray(x, dtype=self.dtype)
        re = round_real(mode, delta, x.real)
        im = round_real(mode, delta, x.imag)
        return make_complex(re, im, self.dtype)[()]

    @np.errstate(all="ignore")
    def exp(self, x):
        return self._cast(np.exp(x))

    @np.errstate(all="ignore")
    def log(self, x):
        return self._cast(np.log(x))

    @np.errstate(all="ignore")
    def sqrt(self, x):
        return self._cast(np.sqrt(x))

    @np.errstate(all="ignore")
    def sin(self, x):
        return self._cast(np.sin(x))

    @np.errstate(all="ignore")
    def cos(self, x):
        return self._cast(np.cos(x))

    @np.errstate(all="ignore")
    def tan(self, x):
        return self._cast(np.tan(x))

    @np.errstate(all="ignore")
    def sinh(self, x):
        return self._cast(np.sinh(x))

    @np.errstate(all="ignore")
    def cosh(self, x):
        return self._cast(np.cosh(x))

    @np.errstate(all="ignore")
    def tanh(self, x):
        return self._cast(np.tanh(x))
