"""This module contains coercion and cast rules for logical data, along with
the shared rule for the numeric hierarchy.
"""
# pylint: disable=unused-argument
import pandas as pd

from pdcoerce import types
from pdcoerce.protocol import CastResult, reconstruct, register_kind
from pdcoerce.registry import register_cast, register_coercion
from pdcoerce.vector import Vector


register_kind(types.LogicalType, self_cast=reconstruct)


def finer_numeric(
    x: types.NumericType,
    y: types.NumericType,
    strict: bool
) -> types.NumericType:
    """Numeric types resolve to whichever of the two is finer."""
    return x if x.finer_than(y) else y


register_coercion("logical", "logical", finer_numeric)
register_coercion("logical", "integer", finer_numeric)
register_coercion("logical", "double", finer_numeric)


@register_cast("logical", "integer")
def logical_to_integer(
    vector: Vector,
    target: types.IntegerType
) -> CastResult:
    """Convert logical data to integers.  This is always exact."""
    data = vector.data.astype(target.dtype)
    return CastResult(Vector(data, target), frozenset())


@register_cast("logical", "double")
def logical_to_double(
    vector: Vector,
    target: types.DoubleType
) -> CastResult:
    """Convert logical data to floats.  This is always exact."""
    data = vector.data.astype(target.dtype)
    return CastResult(Vector(data, target), frozenset())


#######################
####    PRIVATE    ####
#######################


def to_logical(values: pd.Series, target: types.LogicalType) -> CastResult:
    """Convert a numeric series with missing values to logical, flagging
    anything other than 0 or 1.

    ``values`` can be either nullable integers or numpy floats.
    """
    missing = values.isna()
    lossy = ~missing & ~values.isin([0, 1]).fillna(False).astype(bool)
    data = (values != 0).astype(target.dtype)
    data[missing] = pd.NA
    positions = frozenset(int(i) for i in lossy[lossy].index)
    return CastResult(Vector(data, target), positions)
