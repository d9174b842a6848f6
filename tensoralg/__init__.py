# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
tensoralg
=========

Vectors, matrices and Cartesian tensors over interchangeable scalar
algebras: IEEE floats of three widths, complex numbers, quaternions,
octonions, exact rationals and high-precision decimals.

The kernels are written once against the ``ScalarAlgebra`` interface and
take the algebra as a parameter; there is no per-type class.

Public API
~~~~~~~~~~
- Scalar algebras
    - `get_algebra`, `FLOAT16` ... `HIGHPREC`, `RoundMode`
- Structures
    - `Vector`, `Matrix`, `CartesianTensor`, `TupleAlgebra`
- Operation modules
    - `tensoralg.vector`, `tensoralg.matrix`, `tensoralg.tensor`
- Array-level matrix routines
    - `det`, `adj`, `gaussian_solve`, `forward_eliminate`,
      `back_substitute`, `rank_elimination`, `spectral_norm`
- Errors
    - `ShapeMismatch`, `IndexOutOfBounds`, `InvalidArgument`,
      `Singular`, `InexactRounding`, `ParseError`

Example
-------
>>> import tensoralg as ta
>>> from tensoralg import tensor
>>> t = ta.CartesianTensor(ta.FLOAT64, values=[[1.0, 2.0], [3.0, 4.0]])
>>> s = ta.CartesianTensor(ta.FLOAT64)
>>> tensor.contract(0, 1, t, s)
>>> float(s.get(()))
5.0
"""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

from . import matrix, tensor, vector
from .algebras import (
    ALGEBRAS,
    COMPLEX64,
    COMPLEX128,
    FLOAT16,
    FLOAT32,
    FLOAT64,
    HIGHPREC,
    OCTONION,
    QUATERNION,
    RATIONAL,
    get_algebra,
)
from .eigen import spectral_norm
from .elimination import (
    back_substitute,
    forward_eliminate,
    gauss_jordan_inverse,
    gaussian_solve,
    rank_elimination,
)
from .errors import (
    IndexOutOfBounds,
    InexactRounding,
    InvalidArgument,
    ParseError,
    ShapeMismatch,
    Singular,
)
from .exact import HighPrecisionAlgebra, RationalAlgebra
from .hypercomplex import CayleyDicksonAlgebra
from .matrix import Matrix
from .matrix_functions import adj, det
from .notation import format_nested, parse_nested
from .scalars import ComplexAlgebra, RealAlgebra, RoundMode, ScalarAlgebra
from .shapes import ShapeDescriptor
from .storage import LinearStorage
from .tensor import CartesianTensor
from .tuples import TupleAlgebra
from .utils import permutation_sign
from .vector import Vector

__all__ = [
    "ALGEBRAS",
    "FLOAT16",
    "FLOAT32",
    "FLOAT64",
    "COMPLEX64",
    "COMPLEX128",
    "QUATERNION",
    "OCTONION",
    "RATIONAL",
    "HIGHPREC",
    "get_algebra",
    "ScalarAlgebra",
    "RealAlgebra",
    "ComplexAlgebra",
    "CayleyDicksonAlgebra",
    "RationalAlgebra",
    "HighPrecisionAlgebra",
    "RoundMode",
    "ShapeDescriptor",
    "LinearStorage",
    "Vector",
    "Matrix",
    "CartesianTensor",
    "TupleAlgebra",
    "vector",
    "matrix",
    "tensor",
    "forward_eliminate",
    "back_substitute",
    "gaussian_solve",
    "gauss_jordan_inverse",
    "rank_elimination",
    "det",
    "adj",
    "spectral_norm",
    "permutation_sign",
    "parse_nested",
    "format_nested",
    "ShapeMismatch",
    "IndexOutOfBounds",
    "InvalidArgument",
    "Singular",
    "InexactRounding",
    "ParseError",
]

# ---------------------------------------------------------------------
# Version string (helps “pip show tensoralg”, Sphinx, etc.)
# ---------------------------------------------------------------------
try:  # installed via pip / build backend
    __version__ = _pkg_version(__name__)
except PackageNotFoundError:  # running from a checkout
    __version__ = "0.0.0.dev0"

# ---------------------------------------------------------------------
# Optional: lightweight default logging config so users see warnings
# only if they deliberately enable them.
# ---------------------------------------------------------------------
import logging as _logging

_logging.getLogger(__name__).addHandler(_logging.NullHandler())
