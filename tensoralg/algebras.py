# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""Ready-made algebra instances and lookup by name."""

from typing import Dict

import numpy as np

from .errors import InvalidArgument
from .exact import HighPrecisionAlgebra, RationalAlgebra
from .hypercomplex import CayleyDicksonAlgebra
from .scalars import ComplexAlgebra, RealAlgebra, ScalarAlgebra

FLOAT16 = RealAlgebra(np.float16)
FLOAT32 = RealAlgebra(np.float32)
FLOAT64 = RealAlgebra(np.float64)
COMPLEX64 = ComplexAlgebra(np.complex64)
COMPLEX128 = ComplexAlgebra(np.complex128)
QUATERNION = CayleyDicksonAlgebra(4, "quaternion64")
OCTONION = CayleyDicksonAlgebra(8, "octonion64")
RATIONAL = RationalAlgebra()
HIGHPREC = HighPrecisionAlgebra()

ALGEBRAS: Dict[str, ScalarAlgebra] = {
    alg.name: alg
    for alg in (
        FLOAT16,
        FLOAT32,
        FLOAT64,
        COMPLEX64,
        COMPLEX128,
        QUATERNION,
        OCTONION,
        RATIONAL,
        HIGHPREC,
    )
}


def get_algebra(name: str) -> ScalarAlgebra:
    try:
        return ALGEBRAS[name.lower()]
    except KeyError:
        known = ", ".join(sorted(ALGEBRAS))
        raise InvalidArgument(f"unknown algebra {name!r}; expected one of {known}") from None
