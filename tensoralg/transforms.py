# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Element-wise transform engine.

Everything here works on flat ``LinearStorage`` objects and knows nothing
about shape. Vectors, matrices and tensors route their element-wise
arithmetic through these functions after checking shapes themselves.

Ops are algebra methods (or any callable with the same broadcasting
contract); each is called once on the whole backing array. Sources are
never written to. The destination is resized to the source length before
the result is stored, so it may be the same object as a source.
"""

from typing import Callable

import numpy as np

from .scalars import RoundMode
from .storage import LinearStorage


def _same_algebra(*storages: LinearStorage) -> None:
    first = storages[0].algebra
    for s in storages[1:]:
        if s.algebra is not first:
            raise TypeError(f"cannot mix {first.name} and {s.algebra.name} storages")


def _store(dst: LinearStorage, result, n: int) -> None:
    result = np.asarray(result, dtype=dst.raw.dtype)
    dst.resize(n)
    dst.raw[...] = result


def transform2(op: Callable, src: LinearStorage, dst: LinearStorage) -> None:
    """dst[i] = op(src[i])"""
    _same_algebra(src, dst)
    _store(dst, op(src.raw), src.size)


def transform3(op: Callable, a: LinearStorage, b: LinearStorage, dst: LinearStorage) -> None:
    """dst[i] = op(a[i], b[i]); a and b must have the same length."""
    _same_algebra(a, b, dst)
    a.check_same_size(b, getattr(op, "__name__", "transform"))
    _store(dst, op(a.raw, b.raw), a.size)


def fixed_transform(
    op: Callable,
    constant,
    src: LinearStorage,
    dst: LinearStorage,
    constant_first: bool = False,
) -> None:
    """
    dst[i] = op(src[i], constant), or op(constant, src[i]) when
    `constant_first` is set.
    """
    _same_algebra(src, dst)
    alg = src.algebra
    c = alg.element(constant)
    # lift c so its element axes line up with the storage's trailing axes
    c = np.asarray(c, dtype=src.raw.dtype)[np.newaxis, ...]
    result = op(c, src.raw) if constant_first else op(src.raw, c)
    _store(dst, result, src.size)


# ---------------------------------------------------------------------
# Sequence helpers
# ---------------------------------------------------------------------
def scale(factor, src: LinearStorage, dst: LinearStorage) -> None:
    """Multiply every element by one algebra element (factor on the right)."""
    fixed_transform(src.algebra.multiply, factor, src, dst)


def scale_by_real(factor, src: LinearStorage, dst: LinearStorage) -> None:
    alg = src.algebra
    _same_algebra(src, dst)
    _store(dst, alg.scale_real(src.raw, alg.real(factor)), src.size)


def scale_helper(factor, times: int, src: LinearStorage, dst: LinearStorage) -> None:
    """Apply ``scale_by_real(factor)`` `times` times (``times <= 0`` copies)."""
    _same_algebra(src, dst)
    alg = src.algebra
    factor = alg.real(factor)
    data = src.raw
    for _ in range(int(times)):
        data = alg.scale_real(data, factor)
    _store(dst, data, src.size)


def round_sequence(mode: RoundMode, delta, src: LinearStorage, dst: LinearStorage) -> None:
    alg = src.algebra
    transform2(lambda x: alg.round(mode, delta, x), src, dst)


def fill_nan(dst: LinearStorage) -> None:
    dst.raw[...] = dst.algebra.nan()


def fill_infinite(dst: LinearStorage) -> None:
    dst.raw[...] = dst.algebra.infinite()


def sequence_is_zero(src: LinearStorage) -> bool:
    return bool(np.all(src.algebra.is_zero(src.raw)))


def sequence_is_nan(src: LinearStorage) -> bool:
    return bool(np.any(src.algebra.is_nan(src.raw)))


def sequence_is_inf(src: LinearStorage) -> bool:
    return bool(np.any(src.algebra.is_infinite(src.raw)))


def sequences_equal(a: LinearStorage, b: LinearStorage) -> bool:
    _same_algebra(a, b)
    if a.size != b.size:
        return False
    return bool(np.all(a.algebra.is_equal(a.raw, b.raw)))


def sequences_similar(tol, a: LinearStorage, b: LinearStorage) -> bool:
    _same_algebra(a, b)
    if a.size != b.size:
        return False
    return bool(np.all(a.algebra.within(tol, a.raw, b.raw)))
