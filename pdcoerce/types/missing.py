"""This module describes the ``null`` and ``unspecified`` types, which act
as identity elements during coercion.
"""
from __future__ import annotations
from typing import Any

import numpy as np
import pandas as pd

from .base import VectorType, register


@register
class NullType(VectorType):
    """The empty-type marker.

    Null vectors always have length zero.  Resolving any type against
    ``null`` returns that type unchanged, and casting a null vector to any
    type produces that type's empty vector.
    """

    kind = "null"
    aliases = {"NULL", "none", "None", type(None)}
    dtype = np.dtype(object)

    def construct(self, data: Any) -> pd.Series:
        if data is None:
            data = []
        result = super().construct(data)
        if len(result):
            raise ValueError(
                f"null vectors must be empty, not length {len(result)}"
            )
        return result

    def finer_than(self, other: VectorType) -> bool:
        return isinstance(other, NullType)


@register
class UnspecifiedType(VectorType):
    """A vector consisting only of missing values, with no type of its own.

    These are produced by :func:`detect_type` for inputs like
    ``[None, None]``, and can be combined with vectors of any type.
    """

    kind = "unspecified"
    aliases = {"NA"}
    dtype = np.dtype(object)
    missing = None

    def construct(self, data: Any) -> pd.Series:
        result = super().construct(data)
        if not result.isna().all():
            raise ValueError("unspecified vectors must be entirely missing")
        return pd.Series([None] * len(result), dtype=object)

    def finer_than(self, other: VectorType) -> bool:
        return isinstance(other, (NullType, UnspecifiedType))
