"""This module contains the ``date`` and ``datetime`` types."""
from __future__ import annotations
import datetime
from typing import Any

import numpy as np
import pandas as pd

from pdcoerce.util import time

from .base import VectorType, is_missing, register


@register
class DateType(VectorType):
    """Calendar date type, stored as daily periods."""

    kind = "date"
    aliases = {"day", datetime.date, pd.PeriodDtype}
    dtype = pd.PeriodDtype("D")
    missing = pd.NaT

    @classmethod
    def from_dtype(cls, dtype: pd.PeriodDtype) -> DateType:
        if dtype != cls.dtype:
            raise TypeError(f"only daily periods are dates, not {dtype}")
        return cls()

    def construct(self, data: Any) -> pd.Series:
        if isinstance(data, pd.Series):
            if data.dtype == self.dtype:
                return data.reset_index(drop=True)
            data = data.astype(object).tolist()

        values = [
            pd.NaT if is_missing(x) else pd.Period(x, freq="D") for x in data
        ]
        return pd.Series(values, dtype=self.dtype)

    def finer_than(self, other: VectorType) -> bool:
        return isinstance(other, DateType)


@register
class DatetimeType(VectorType):
    """Datetime type with an optional time zone.

    Parameters
    ----------
    tz : str | datetime.tzinfo | None, default None
        The time zone to localize values to.  Naive datetimes (``tz=None``)
        are interpreted as UTC wall time whenever they are converted to or
        from an aware representation.
    """

    kind = "datetime"
    aliases = {
        "timestamp", "datetime64", "M8", datetime.datetime, pd.Timestamp,
        np.datetime64, pd.DatetimeTZDtype
    }
    missing = pd.NaT

    def __init__(self, tz: str | datetime.tzinfo | None = None):
        super().__init__(tz=time.tz(tz))

    @property
    def tz(self) -> str | datetime.tzinfo | None:
        """The normalized time zone of this type, or ``None`` if naive.  This
        is an IANA name, or a fixed-offset tzinfo for offsets that are not a
        whole number of hours.
        """
        return self.params["tz"]

    @property
    def dtype(self) -> np.dtype | pd.DatetimeTZDtype:
        """The equivalent numpy/pandas dtype."""
        if self.tz is None:
            return np.dtype("M8[ns]")
        return pd.DatetimeTZDtype(unit="ns", tz=self.tz)

    @classmethod
    def from_string(cls, tz: str | None = None) -> DatetimeType:
        return cls(tz)

    @classmethod
    def from_dtype(cls, dtype: np.dtype | pd.DatetimeTZDtype) -> DatetimeType:
        return cls(getattr(dtype, "tz", None))

    def construct(self, data: Any) -> pd.Series:
        if isinstance(data, pd.Series):
            series = data.reset_index(drop=True)
        else:
            series = pd.Series(list(data), dtype=object)
        series = pd.to_datetime(series)
        return localize(series, self.tz).astype(self.dtype)

    def finer_than(self, other: VectorType) -> bool:
        return isinstance(other, (DateType, DatetimeType))

    def __str__(self) -> str:
        if self.tz is None:
            return self.kind
        return f"{self.kind}[{time.tz_name(self.tz)}]"


#######################
####    PRIVATE    ####
#######################


def localize(
    series: pd.Series,
    tz: str | datetime.tzinfo | None
) -> pd.Series:
    """Convert a datetime series to the given zone, preserving instants.

    Naive inputs are treated as UTC wall time.
    """
    current = series.dt.tz
    if current is None:
        if tz is None:
            return series
        return series.dt.tz_localize("UTC").dt.tz_convert(tz)

    if tz is None:
        return series.dt.tz_convert("UTC").dt.tz_localize(None)
    return series.dt.tz_convert(tz)
