"""This module contains the ``integer`` type."""
import numpy as np
import pandas as pd

from .base import register
from .boolean import NumericType


@register
class IntegerType(NumericType):
    """Nullable 64-bit signed integer type."""

    kind = "integer"
    aliases = {
        "int", "int64", "i8", "signed", int, np.integer, np.int64,
        pd.Int8Dtype, pd.Int16Dtype, pd.Int32Dtype, pd.Int64Dtype,
        pd.UInt8Dtype, pd.UInt16Dtype, pd.UInt32Dtype, pd.UInt64Dtype,
    }
    rank = 1
    dtype = pd.Int64Dtype()
    max = 2**63 - 1
    min = -2**63
