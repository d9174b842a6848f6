# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Quaternions and octonions built by the Cayley-Dickson doubling.

Elements are float64 arrays whose last axis holds the components
(e0 is the real part). Products go through a precomputed multiplication
table, so one einsum handles any number of elements at once.
"""

import functools
import logging
from typing import Callable

import numpy as np

from .errors import InvalidArgument, ShapeMismatch
from .scalars import RoundMode, ScalarAlgebra, round_real

logger = logging.getLogger(__name__)


def _cd_conjugate(x: np.ndarray) -> np.ndarray:
    out = -x
    out[..., 0] = x[..., 0]
    return out


def _cd_product(x: np.ndarray, y: np.ndarray) -> np.ndarray:
    """(a, b)(c, d) = (ac - d*b, da + bc*) on 1-D component vectors."""
    n = len(x)
    if n == 1:
        return x * y
    h = n // 2
    a, b = x[:h], x[h:]
    c, d = y[:h], y[h:]
    return np.concatenate(
        [
            _cd_product(a, c) - _cd_product(_cd_conjugate(d), b),
            _cd_product(d, a) + _cd_product(b, _cd_conjugate(c)),
        ]
    )


@functools.cache
def cayley_table(dim: int) -> np.ndarray:
    """
    Return T with T[i, j, k] = ±1 when e_i * e_j = ±e_k, else 0.

    Tables are cached per dimension and returned read-only.
    """
    basis = np.eye(dim)
    table = np.zeros((dim, dim, dim))
    for i in range(dim):
        for j in range(dim):
            p = _cd_product(basis[i], basis[j])
            k = int(np.argmax(np.abs(p)))
            table[i, j, k] = p[k]
    table.setflags(write=False)
    logger.debug("built Cayley-Dickson table for dimension %d", dim)
    return table


def _safe(s: np.ndarray) -> np.ndarray:
    return np.where(s == 0, 1.0, s)


class CayleyDicksonAlgebra(ScalarAlgebra):
    """
    Hypercomplex numbers of dimension 4 (quaternions) or 8 (octonions).

    Quaternion multiplication is not commutative; octonion multiplication is
    not associative either. Division is right division, a * b^-1.
    """

    dtype = np.dtype(np.float64)

    def __init__(self, dim: int, name: str):
        if dim not in (4, 8):
            raise InvalidArgument(f"Cayley-Dickson dimension must be 4 or 8, got {dim}")
        self.dim = dim
        self.name = name
        self.element_shape = (dim,)
        # division algebras, but not fields
        self.is_field = False
        self.is_commutative = False
        self.is_associative = dim == 4
        self.table = cayley_table(dim)

    # -----------------------------------------------------------------
    # construction
    # -----------------------------------------------------------------
    def _embed(self, reals) -> np.ndarray:
        reals = np.asarray(reals, dtype=self.dtype)
        out = np.zeros(reals.shape + self.element_shape, dtype=self.dtype)
        out[..., 0] = reals
        return out

    def unity(self, n=None):
        out = self.zeros_like_shape(self._shape(n))
        out[..., 0] = 1.0
        return out

    def coerce(self, values) -> np.ndarray:
        arr = np.asarray(values, dtype=self.dtype)
        if arr.ndim == 0:
            return self._embed(arr)
        if arr.shape[-1] != self.dim:
            raise ShapeMismatch(
                f"{self.name} elements need a trailing axis of {self.dim}, got {arr.shape}"
            )
        return arr

    def real(self, value):
        return np.asarray(value, dtype=self.dtype)[()]

    def from_string(self, text: str):
        text = text.strip()
        if text.startswith("{") and text.endswith("}"):
            parts = [p for p in text[1:-1].split(",")]
            if len(parts) > self.dim:
                raise ValueError(f"too many components for {self.name}: {text!r}")
            out = np.zeros(self.dim)
            out[: len(parts)] = [float(p) for p in parts]
            return out
        return self._embed(float(text))

    def to_string(self, x) -> str:
        return "{" + ",".join(str(float(v)) for v in np.asarray(x)) + "}"

    # -----------------------------------------------------------------
    # arithmetic
    # -----------------------------------------------------------------
    def add(self, a, b):
        return np.add(a, b)

    def subtract(self, a, b):
        return np.subtract(a, b)

    def negate(self, a):
        return np.negative(a)

    def conjugate(self, a):
        return _cd_conjugate(np.asarray(a, dtype=self.dtype))

    def _raw_multiply(self, a, b):
        return np.einsum("...i,...j,ijk->...k", a, b, self.table)

    @np.errstate(all="ignore")
    def multiply(self, a, b):
        a = np.asarray(a, dtype=self.dtype)
        b = np.asarray(b, dtype=self.dtype)
        sa = np.max(np.abs(a), axis=-1)
        sb = np.max(np.abs(b), axis=-1)
        prod = self._raw_multiply(a / _safe(sa)[..., None], b / _safe(sb)[..., None])
        return prod * (sa * sb)[..., None]

    @np.errstate(all="ignore")
    def invert(self, a):
        a = np.asarray(a, dtype=self.dtype)
        s = np.max(np.abs(a), axis=-1)
        u = a / _safe(s)[..., None]
        norm2 = np.sum(u * u, axis=-1)
        return _cd_conjugate(u) / (norm2 * _safe(s))[..., None]

    def divide(self, a, b):
        return self.multiply(a, self.invert(b))

    @np.errstate(all="ignore")
    def scale_real(self, x, r):
        return np.multiply(x, np.asarray(r, dtype=self.dtype)[..., None])

    # -----------------------------------------------------------------
    # predicates
    # -----------------------------------------------------------------
    def is_zero(self, x):
        return np.all(np.equal(x, 0), axis=-1)[()]

    def is_equal(self, a, b):
        return np.all(np.equal(a, b), axis=-1)[()]

    @np.errstate(all="ignore")
    def within(self, tol, a, b):
        close = np.equal(a, b) | (np.abs(np.subtract(a, b)) <= tol)
        return np.all(close, axis=-1)[()]

    def is_nan(self, x):
        return np.any(np.isnan(x), axis=-1)[()]

    def is_infinite(self, x):
        return (np.any(np.isinf(x), axis=-1) & ~np.any(np.isnan(x), axis=-1))[()]

    def nan(self, n=None):
        return self._fill(self._shape(n), np.nan)

    def infinite(self, n=None):
        return self._fill(self._shape(n), np.inf)

    # -----------------------------------------------------------------
    # norms, rounding
    # -----------------------------------------------------------------
    @np.errstate(all="ignore")
    def norm(self, x):
        x = np.asarray(x, dtype=self.dtype)
        s = np.max(np.abs(x), axis=-1)
        u = x / _safe(s)[..., None]
        return (s * np.sqrt(np.sum(u * u, axis=-1)))[()]

    @np.errstate(all="ignore")
    def real_sqrt(self, r):
        return np.sqrt(np.asarray(r, dtype=self.dtype))[()]

    def sum(self, xs, axis: int = 0):
        return np.sum(np.asarray(xs, dtype=self.dtype), axis=axis)

    def round(self, mode: RoundMode, delta, x):
        return round_real(mode, delta, np.asarray(x, dtype=self.dtype))

    # -----------------------------------------------------------------
    # transcendental functions
    # -----------------------------------------------------------------
    @np.errstate(all="ignore")
    def _via_complex(self, x, fn: Callable) -> np.ndarray:
        """
        Evaluate fn on x = a + v by mapping the subalgebra spanned by 1 and
        v/|v| onto the complex plane: x -> a + |v| i, then back.
        """
        x = np.asarray(x, dtype=self.dtype)
        v = x.copy()
        v[..., 0] = 0.0
        vn = self.norm(v)
        w = fn(x[..., 0] + 1j * np.asarray(vn))
        e1 = np.zeros(self.dim)
        e1[1] = 1.0
        unit = np.where(
            (np.asarray(vn) == 0)[..., None], e1, v / _safe(np.asarray(vn))[..., None]
        )
        out = unit * np.asarray(w.imag)[..., None]
        out[..., 0] = w.real
        return out

    def exp(self, x):
        return self._via_complex(x, np.exp)

    def log(self, x):
        return self._via_complex(x, np.log)

    def sqrt(self, x):
        return self._via_complex(x, np.sqrt)

    def sin(self, x):
        return self._via_complex(x, np.sin)

    def cos(self, x):
        return self._via_complex(x, np.cos)

    def tan(self, x):
        return self._via_complex(x, np.tan)

    def sinh(self, x):
        return self._via_complex(x, np.sinh)

    def cosh(self, x):
        return self._via_complex(x, np.cosh)

    def tanh(self, x):
        return self._via_complex(x, np.tanh)
