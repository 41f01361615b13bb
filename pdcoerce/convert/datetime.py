"""This module contains coercion and cast rules for dates and datetimes.

Naive datetimes are interpreted as UTC whenever they meet an aware
representation.  Dates are calendar days, and convert to midnight in the
target's time zone.
"""
# pylint: disable=unused-argument
import pandas as pd

from pdcoerce import types
from pdcoerce.protocol import (
    CastResult, reconstruct, register_kind, same_type
)
from pdcoerce.registry import register_cast, register_coercion
from pdcoerce.types.datetime import localize
from pdcoerce.vector import Vector


#########################
####    COERCIONS    ####
#########################


register_coercion("date", "date", same_type)


@register_coercion("date", "datetime")
def date_datetime(
    x: types.DateType,
    y: types.DatetimeType,
    strict: bool
) -> types.DatetimeType:
    """Dates unify with datetimes by adopting the datetime's time zone."""
    return y


@register_coercion("datetime", "datetime")
def datetime_datetime(
    x: types.DatetimeType,
    y: types.DatetimeType,
    strict: bool
) -> types.DatetimeType:
    """Two datetimes share a time zone if they are equal.  Otherwise, a naive
    datetime yields to an aware one, and two different zones meet at UTC.
    """
    if x.tz == y.tz:
        return x
    if x.tz is None:
        return y
    if y.tz is None:
        return x
    return types.DatetimeType("UTC")


#####################
####    CASTS    ####
#####################


def datetime_to_datetime(
    vector: Vector,
    target: types.DatetimeType
) -> CastResult:
    """Convert between time zones.  This preserves the instant each value
    refers to, and is always exact.
    """
    data = localize(vector.data, target.tz).astype(target.dtype)
    return CastResult(Vector(data, target), frozenset())


register_kind(types.DateType, self_cast=reconstruct)
register_kind(types.DatetimeType, self_cast=datetime_to_datetime)


@register_cast("date", "datetime")
def date_to_datetime(
    vector: Vector,
    target: types.DatetimeType
) -> CastResult:
    """Convert dates to midnight in the target's time zone.

    Midnights that are ambiguous in the target zone become missing, and
    midnights that do not exist are shifted forward to the first valid wall
    time.  Both are flagged.
    """
    data = vector.data.dt.to_timestamp()
    if target.tz is None:
        return CastResult(Vector(data.astype(target.dtype), target))

    localized = data.dt.tz_localize(
        target.tz,
        ambiguous="NaT",
        nonexistent="shift_forward"
    )
    # NaT never compares equal, so dropped midnights are caught here too
    lossy = data.notna() & (localized.dt.tz_localize(None) != data)
    positions = frozenset(int(i) for i in lossy[lossy].index)
    result = localized.astype(target.dtype)
    return CastResult(Vector(result, target), positions)


@register_cast("datetime", "date")
def datetime_to_date(
    vector: Vector,
    target: types.DateType
) -> CastResult:
    """Convert datetimes to the calendar day of their wall time.  Values with
    a nonzero time of day are flagged.
    """
    data = vector.data
    if data.dt.tz is not None:
        data = data.dt.tz_localize(None)  # wall time

    lossy = data.notna() & (data != data.dt.normalize())
    positions = frozenset(int(i) for i in lossy[lossy].index)
    result = pd.Series(data.dt.to_period("D"), dtype=target.dtype)
    return CastResult(Vector(result, target), positions)
