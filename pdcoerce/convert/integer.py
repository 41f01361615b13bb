"""This module contains coercion and cast rules for integer data."""
# pylint: disable=unused-argument
import numpy as np

from pdcoerce import types
from pdcoerce.protocol import CastResult, reconstruct, register_kind
from pdcoerce.registry import register_cast, register_coercion
from pdcoerce.vector import Vector

from .boolean import finer_numeric, to_logical


register_kind(types.IntegerType, self_cast=reconstruct)


register_coercion("integer", "integer", finer_numeric)
register_coercion("integer", "double", finer_numeric)


@register_cast("integer", "logical")
def integer_to_logical(
    vector: Vector,
    target: types.LogicalType
) -> CastResult:
    """Convert integer data to logical, flagging values other than 0 or 1."""
    return to_logical(vector.data, target)


@register_cast("integer", "double")
def integer_to_double(
    vector: Vector,
    target: types.DoubleType
) -> CastResult:
    """Convert integer data to floats, flagging values whose magnitude exceeds
    the range over which doubles can represent every integer.
    """
    values = vector.data
    data = values.astype(target.dtype)

    # NOTE: every integer in [-2**53, 2**53] has an exact double equivalent
    big = (values > target.max) | (values < target.min)
    big = big.fillna(False).astype(bool)
    lossy = frozenset(
        int(idx) for idx in big[big].index
        if int(np.float64(data[idx])) != int(values[idx])
    )
    return CastResult(Vector(data, target), lossy)
