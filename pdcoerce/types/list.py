"""This module contains the ``list`` type, which doubles as the canonical
decomposed form used for fallback casts.
"""
from __future__ import annotations
from typing import Any

import numpy as np
import pandas as pd

from .base import VectorType, register


@register
class ListType(VectorType):
    """A vector whose elements are Python lists (or ``None`` if missing).

    Every kind that supports the canonical decomposed form can be cast to a
    list vector in which each position holds a one-element list, and back.
    """

    kind = "list"
    aliases = {"object_list", list}
    dtype = np.dtype(object)
    missing = None

    def construct(self, data: Any) -> pd.Series:
        if isinstance(data, pd.Series):
            data = data.tolist()

        values = []
        for element in data:
            if element is None:
                values.append(None)
            elif isinstance(element, (list, tuple, np.ndarray, pd.Series)):
                values.append(list(element))
            elif pd.isna(element):
                values.append(None)
            else:
                raise TypeError(
                    f"list elements must be list-like or None, not "
                    f"{repr(element)}"
                )

        # NOTE: filling an empty object array avoids numpy expanding nested
        # lists of equal length into a second dimension
        result = np.empty(len(values), dtype=object)
        for idx, value in enumerate(values):
            result[idx] = value
        return pd.Series(result, dtype=object)
