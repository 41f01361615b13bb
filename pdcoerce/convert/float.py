"""This module contains cast rules for double-precision floating point data."""
# pylint: disable=unused-argument
import numpy as np
import pandas as pd

from pdcoerce import types
from pdcoerce.protocol import CastResult, reconstruct, register_kind
from pdcoerce.registry import register_cast, register_coercion
from pdcoerce.vector import Vector

from .boolean import finer_numeric, to_logical


register_kind(types.DoubleType, self_cast=reconstruct)


register_coercion("double", "double", finer_numeric)


@register_cast("double", "logical")
def double_to_logical(
    vector: Vector,
    target: types.LogicalType
) -> CastResult:
    """Convert float data to logical, flagging values other than 0 or 1."""
    return to_logical(vector.data, target)


@register_cast("double", "integer")
def double_to_integer(
    vector: Vector,
    target: types.IntegerType
) -> CastResult:
    """Convert float data to integers, truncating toward zero.

    Fractional values are truncated and flagged.  Infinities and values
    outside the 64-bit integer range are flagged and become missing.
    """
    values = vector.data.to_numpy(dtype=np.float64)
    missing = np.isnan(values)

    # NOTE: float(2**63) is not a valid int64, so the upper bound is exclusive
    with np.errstate(invalid="ignore"):
        valid = (values >= target.min) & (values < float(2**63))
    valid &= ~missing

    truncated = np.trunc(np.where(valid, values, 0))
    lossy = ~missing & (~valid | (truncated != values))

    data = pd.Series(
        pd.arrays.IntegerArray(truncated.astype(np.int64), ~valid),
        dtype=target.dtype
    )
    positions = frozenset(int(i) for i in np.flatnonzero(lossy))
    return CastResult(Vector(data, target), positions)
