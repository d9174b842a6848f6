# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Bracket notation for vectors, matrices and tensors.

``"[[1,2],[3,4]]"`` is a 2x2 structure, ``"[5]"`` a length-1 vector and a
bare ``"5"`` a single element. Elements are left as strings here; each
algebra's ``from_string`` turns them into numbers. Commas inside ``{...}``
belong to a hypercomplex element, not to the enclosing list.
"""

from typing import Callable, List, Tuple, Union

from .errors import ParseError

Nested = Union[str, List["Nested"]]


class _Parser:
    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def _skip_ws(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def _peek(self) -> str:
        self._skip_ws()
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def _expect(self, ch: str) -> None:
        if self._peek() != ch:
            found = self._peek() or "end of input"
            raise ParseError(f"expected {ch!r} at position {self.pos}, found {found!r}")
        self.pos += 1

    def value(self) -> Nested:
        if self._peek() == "[":
            return self.list()
        return self.element()

    def list(self) -> List[Nested]:
        self._expect("[")
        items: List[Nested] = []
        if self._peek() == "]":
            self.pos += 1
            return items
        while True:
            items.append(self.value())
            ch = self._peek()
            if ch == ",":
                self.pos += 1
            elif ch == "]":
                self.pos += 1
                return items
            else:
                raise ParseError(f"expected ',' or ']' at position {self.pos} in {self.text!r}")

    def element(self) -> str:
        self._skip_ws()
        start = self.pos
        depth = 0
        while self.pos < len(self.text):
            ch = self.text[self.pos]
            if ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth < 0:
                    raise ParseError(f"unbalanced '}}' at position {self.pos}")
            elif depth == 0 and ch in ",]":
                break
            elif ch == "[":
                raise ParseError(f"unexpected '[' at position {self.pos}")
            self.pos += 1
        if depth:
            raise ParseError(f"unclosed '{{' in {self.text!r}")
        token = self.text[start : self.pos].strip()
        if not token:
            raise ParseError(f"empty element at position {start} in {self.text!r}")
        return token


def parse_nested(text: str) -> Nested:
    """Split bracket notation into nested lists of element strings."""
    parser = _Parser(text)
    result = parser.value()
    if parser._peek():
        raise ParseError(f"trailing characters at position {parser.pos} in {text!r}")
    nested_shape(result)
    return result


def nested_shape(nested: Nested) -> Tuple[int, ...]:
    """Dimensions of a rectangular nesting; ParseError when ragged."""
    if isinstance(nested, str):
        return ()
    if not nested:
        return (0,)
    inner = [nested_shape(item) for item in nested]
    if any(s != inner[0] for s in inner[1:]):
        raise ParseError(f"ragged nesting: sub-shapes {sorted(set(inner))}")
    return (len(nested),) + inner[0]


def format_nested(nested, fmt: Callable = str) -> str:
    """Inverse of parse_nested; `fmt` renders one element."""
    if isinstance(nested, (list, tuple)):
        return "[" + ",".join(format_nested(item, fmt) for item in nested) + "]"
    return fmt(nested)


def flatten(nested: Nested) -> List[str]:
    if isinstance(nested, str):
        return [nested]
    out: List[str] = []
    for item in nested:
        out.extend(flatten(item))
    return out


def parse_elements(algebra, text: str):
    """
    Parse bracket notation into ``(dims, flat_values)`` using the algebra's
    element parser.
    """
    nested = parse_nested(text)
    dims = nested_shape(nested)
    values = []
    for token in flatten(nested):
        try:
            values.append(algebra.from_string(token))
        except (ValueError, ZeroDivisionError) as exc:
            raise ParseError(f"bad {algebra.name} element {token!r}: {exc}") from exc
    return dims, values


def format_elements(algebra, dims: Tuple[int, ...], data) -> str:
    """Render a flat element array of the given dims in bracket notation."""
    strings = [algebra.to_string(x) for x in data]
    if not dims:
        return strings[0]

    def build(level: int, start: int) -> str:
        if level == len(dims) - 1:
            return "[" + ",".join(strings[start : start + dims[level]]) + "]"
        step = 1
        for d in dims[level + 1 :]:
            step *= d
        parts = [build(level + 1, start + k * step) for k in range(dims[level])]
        return "[" + ",".join(parts) + "]"

    return build(0, 0)
