# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Exception types raised by the kernel layer.

Each class derives from the builtin a caller would naturally catch, so
``except ValueError`` keeps working for shape and argument problems.
"""

import numpy as np


class ShapeMismatch(ValueError):
    """Operand shapes or lengths are incompatible for the operation."""


class IndexOutOfBounds(IndexError):
    """An axis number or multi-index component is outside the valid range."""


class InvalidArgument(ValueError):
    """A structural precondition specific to one operation was violated."""


class Singular(np.linalg.LinAlgError):
    """Matrix inversion found no nonzero pivot."""


class InexactRounding(ArithmeticError):
    """RoundMode.EXACT was requested for a value that needs rounding."""


class ParseError(ValueError):
    """Text notation could not be parsed."""
