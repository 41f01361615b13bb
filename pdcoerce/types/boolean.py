"""This module contains the ``logical`` type, along with the abstract base
class for the ordered numeric kinds.
"""
from __future__ import annotations

import numpy as np
import pandas as pd

from .base import VectorType, register


class NumericType(VectorType):
    """Abstract base for the numeric kinds.

    These form a fixed total order, ``logical < integer < double``, where
    each type can represent every value of the types below it.
    """

    rank: int = None

    def finer_than(self, other: VectorType) -> bool:
        if not isinstance(other, NumericType):
            return False
        return self.rank >= other.rank


@register
class LogicalType(NumericType):
    """Nullable boolean type."""

    kind = "logical"
    aliases = {"bool", "boolean", "b1", "?", bool, np.bool_, pd.BooleanDtype}
    rank = 0
    dtype = pd.BooleanDtype()
