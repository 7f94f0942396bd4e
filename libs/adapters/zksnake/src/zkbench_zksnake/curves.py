
from __future__ import annotations

from zksnake.constant import BLS12_381_SCALAR_FIELD, BN254_SCALAR_FIELD

from zkbench.curves import CurveID, CurveRegistry

# Names are the curve identifiers zksnake accepts.
BN254 = CurveID("BN254", BN254_SCALAR_FIELD)
BLS12_381 = CurveID("BLS12_381", BLS12_381_SCALAR_FIELD)


def default_curves() -> CurveRegistry:
    return CurveRegistry((BN254, BLS12_381))
