"""This module contains the ``double`` type."""
import numpy as np
import pandas as pd

from .base import register
from .boolean import NumericType


@register
class DoubleType(NumericType):
    """64-bit floating point type.  Missing values are stored as ``NaN``."""

    kind = "double"
    aliases = {
        "float", "float64", "f8", "d", "numeric", float, np.floating,
        np.float64, pd.Float32Dtype, pd.Float64Dtype
    }
    rank = 2
    dtype = np.dtype(np.float64)
    missing = np.nan

    # integers are exactly representable within the significand
    max = 2**53
    min = -2**53
