# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Fixed-length heterogeneous tuples, one scalar algebra per slot.

Values are plain Python tuples. Text form joins the slots with colons,
``"1:2.5:{1,0,0,0}"``; colons inside ``{...}`` do not split.
"""

from typing import List, Sequence, Tuple

import numpy as np

from .errors import ParseError, ShapeMismatch
from .scalars import ScalarAlgebra


def split_colons(text: str) -> List[str]:
    parts, depth, start = [], 0, 0
    for pos, ch in enumerate(text):
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
        elif ch == ":" and depth == 0:
            parts.append(text[start:pos])
            start = pos + 1
    if depth:
        raise ParseError(f"unbalanced braces in {text!r}")
    parts.append(text[start:])
    return [p.strip() for p in parts]


class TupleAlgebra:
    """
    Slot-wise operations over tuples whose i-th component belongs to
    ``algebras[i]``.
    """

    def __init__(self, algebras: Sequence[ScalarAlgebra]):
        if not algebras:
            raise ShapeMismatch("a tuple needs at least one slot")
        for alg in algebras:
            if not isinstance(alg, ScalarAlgebra):
                raise TypeError(f"expected a ScalarAlgebra, got {type(alg).__name__}")
        self.algebras = tuple(algebras)
        self.name = ":".join(alg.name for alg in self.algebras)

    def __len__(self) -> int:
        return len(self.algebras)

    def __repr__(self) -> str:
        return f"TupleAlgebra({self.name!r})"

    def _check(self, *values) -> None:
        for v in values:
            if len(v) != len(self.algebras):
                raise ShapeMismatch(f"expected a {len(self.algebras)}-tuple, got {len(v)} components")

    def _map(self, fn, *values) -> Tuple:
        self._check(*values)
        return tuple(fn(alg, *parts) for alg, *parts in zip(self.algebras, *values))

    def element(self, values) -> Tuple:
        return self._map(lambda alg, v: alg.element(v), values)

    def zero(self) -> Tuple:
        return tuple(alg.zero() for alg in self.algebras)

    def assign(self, value) -> Tuple:
        """An independent copy of value."""
        return self._map(lambda alg, v: np.array(v, dtype=alg.dtype)[()], value)

    def add(self, a, b) -> Tuple:
        return self._map(lambda alg, x, y: alg.add(x, y), a, b)

    def subtract(self, a, b) -> Tuple:
        return self._map(lambda alg, x, y: alg.subtract(x, y), a, b)

    def multiply(self, a, b) -> Tuple:
        return self._map(lambda alg, x, y: alg.multiply(x, y), a, b)

    def negate(self, a) -> Tuple:
        return self._map(lambda alg, x: alg.negate(x), a)

    def is_equal(self, a, b) -> bool:
        return all(self._map(lambda alg, x, y: bool(alg.is_equal(x, y)), a, b))

    def is_not_equal(self, a, b) -> bool:
        return not self.is_equal(a, b)

    def is_zero(self, a) -> bool:
        return all(self._map(lambda alg, x: bool(alg.is_zero(x)), a))

    def from_string(self, text: str) -> Tuple:
        parts = split_colons(text.strip())
        if len(parts) != len(self.algebras):
            raise ParseError(f"expected {len(self.algebras)} colon-separated values, got {text!r}")
        out = []
        for alg, part in zip(self.algebras, parts):
            try:
                out.append(alg.from_string(part))
            except (ValueError, ZeroDivisionError) as exc:
                raise ParseError(f"bad {alg.name} component {part!r}: {exc}") from exc
        return tuple(out)

    def to_string(self, value) -> str:
        self._check(value)
        return ":".join(alg.to_string(v) for alg, v in zip(self.algebras, value))
