"""This module describes the ``Vector`` object, which pairs a
:class:`pandas.Series` with an explicit type descriptor, as well as the
:func:`detect_type` and :func:`as_vector` helpers used to build them from
arbitrary data.
"""
from __future__ import annotations
import datetime
import numbers
from typing import Any, Iterator

import numpy as np
import pandas as pd

from pdcoerce import types
from pdcoerce.util.error import shorten_list
from pdcoerce.util.type_hints import type_specifier


######################
####    PUBLIC    ####
######################


class Vector:
    """A sequence of values of a single :class:`VectorType`.

    Parameters
    ----------
    data : pandas.Series
        The stored values.  These must already be in the storage
        representation of ``type``; use :func:`as_vector` to convert raw
        data.
    type : VectorType
        The descriptor for ``data``.

    Notes
    -----
    The descriptor is carried alongside the data rather than introspected
    from it, so that parametric information (levels, time zones, bin
    boundaries) survives even when the storage dtype cannot express it.
    Vectors are never mutated by ``pdcoerce`` operations, which always
    produce new instances.
    """

    __slots__ = ("_data", "_type")

    def __init__(self, data: pd.Series, type: types.VectorType):
        # pylint: disable=redefined-builtin
        if not isinstance(type, types.VectorType):
            raise TypeError(f"type must be a VectorType, not {repr(type)}")
        if not isinstance(data, pd.Series):
            raise TypeError(f"data must be a pandas.Series, not {repr(data)}")
        self._data = data.reset_index(drop=True)
        self._type = type

    @property
    def type(self) -> types.VectorType:
        """The descriptor for this vector."""
        return self._type

    @property
    def data(self) -> pd.Series:
        """The underlying :class:`pandas.Series`."""
        return self._data

    def empty(self) -> Vector:
        """A zero-length vector of the same type."""
        return self._type.empty()

    def to_list(self) -> list:
        """Convert the vector into a list of Python scalars."""
        return self._data.astype(object).tolist()

    def equals(self, other: Vector) -> bool:
        """Check whether two vectors have the same type and values.  Missing
        values in the same position are considered equal.
        """
        if not isinstance(other, Vector) or self._type != other.type:
            return False
        if len(self) != len(other):
            return False
        return self._data.astype(object).equals(other.data.astype(object))

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.to_list())

    def __repr__(self) -> str:
        return f"Vector<{self._type}>({shorten_list(self.to_list(), 10)})"


def as_vector(data: Any, type: type_specifier | None = None) -> Vector:
    """Convert arbitrary data into a :class:`Vector`.

    Parameters
    ----------
    data : Any
        A :class:`Vector`, :class:`pandas.Series`, list-like, scalar, or
        ``None``.
    type : type specifier, optional
        The type to construct.  If omitted, it is inferred using
        :func:`detect_type`.

    Returns
    -------
    Vector
        A vector holding ``data``.  If ``data`` is already a vector with the
        requested type, it is returned as-is.

    Examples
    --------
    .. doctest::

        >>> as_vector([1, 2, 3])
        Vector<integer>([1, 2, 3])
        >>> as_vector([1, 2, 3], "double")
        Vector<double>([1.0, 2.0, 3.0])
    """
    # pylint: disable=redefined-builtin
    if type is None:
        if isinstance(data, Vector):
            return data
        data = as_series(data)
        detected = detect_type(data)
        return Vector(detected.construct(data), detected)

    target = types.resolve_type(type)
    if isinstance(data, Vector):
        if data.type == target:
            return data
        data = data.data
    return Vector(target.construct(as_series(data)), target)


def detect_type(data: Any) -> types.VectorType:
    """Infer the type of arbitrary data.

    Parameters
    ----------
    data : Any
        A :class:`Vector`, :class:`pandas.Series`, list-like, scalar, or
        ``None``.

    Returns
    -------
    VectorType
        The inferred type.  ``None`` and empty inputs are ``null``, inputs
        with only missing values are ``unspecified``.

    Raises
    ------
    TypeError
        If the data contains elements from more than one type family, or
        elements that do not belong to any family.
    """
    if isinstance(data, Vector):
        return data.type

    series = as_series(data)
    dtype = series.dtype
    if not (isinstance(dtype, np.dtype) and dtype.kind == "O"):
        return types.resolve_dtype(dtype)
    return detect_elements(series)


#######################
####    PRIVATE    ####
#######################


def as_series(data: Any) -> pd.Series:
    """Wrap arbitrary data in a :class:`pandas.Series` without inferring a
    dtype for Python objects.
    """
    if isinstance(data, Vector):
        return data.data
    if isinstance(data, pd.Series):
        return data.reset_index(drop=True)
    if data is None:
        return pd.Series([], dtype=object)
    arrays = (np.ndarray, pd.Index, pd.api.extensions.ExtensionArray)
    if isinstance(data, arrays):
        return pd.Series(data)
    if isinstance(data, (list, tuple)):
        result = np.empty(len(data), dtype=object)
        for idx, value in enumerate(data):
            result[idx] = value
        return pd.Series(result, dtype=object)
    return pd.Series([data], dtype=object)  # scalar


def detect_elements(series: pd.Series) -> types.VectorType:
    """Infer a type from the elements of an object series."""
    observed = [x for x in series if not types.is_missing(x)]
    if not observed:
        if len(series):
            return types.UnspecifiedType()
        return types.NullType()

    families = {family(x) for x in observed}

    # integers mixed with floats are promoted to double
    if families == {"integer", "double"}:
        return types.DoubleType()

    if len(families) > 1:
        raise TypeError(
            f"could not detect a single type for mixed data: "
            f"{shorten_list(sorted(families))}"
        )

    kind = families.pop()
    if kind == "datetime":
        zones = {
            types.DatetimeType(getattr(x, "tzinfo", None)).tz
            for x in observed
        }
        if len(zones) > 1:
            raise TypeError(
                f"could not detect a single time zone: "
                f"{shorten_list(sorted(str(z) for z in zones))}"
            )
        return types.DatetimeType(zones.pop())
    return types.registry[kind]()


def family(value: Any) -> str:
    """Get the kind of a single Python scalar."""
    # NOTE: order matters.  bool is a subclass of int, and datetime is a
    # subclass of date.
    if isinstance(value, (bool, np.bool_)):
        return "logical"
    if isinstance(value, (numbers.Integral, np.integer)):
        return "integer"
    if isinstance(value, (numbers.Real, np.floating)):
        return "double"
    if isinstance(value, (str, np.str_)):
        return "character"
    if isinstance(value, (list, tuple, np.ndarray)):
        return "list"
    if isinstance(value, (pd.Timestamp, datetime.datetime, np.datetime64)):
        return "datetime"
    if isinstance(value, datetime.date):
        return "date"
    if isinstance(value, pd.Period) and value.freqstr == "D":
        return "date"
    raise TypeError(f"could not detect type of element: {repr(value)}")
