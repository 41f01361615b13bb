"""This module contains the ``character`` type."""
from __future__ import annotations

import numpy as np
import pandas as pd

from .base import VectorType, register


@register
class CharacterType(VectorType):
    """Nullable string type.

    For the purposes of coercion, ``character`` behaves like a categorical
    with the universal level set, which makes it finer than every
    categorical type.
    """

    kind = "character"
    aliases = {"string", "str", "unicode", "U", str, np.str_, pd.StringDtype}
    dtype = pd.StringDtype("python")

    def finer_than(self, other: VectorType) -> bool:
        from .categorical import CategoricalType
        return isinstance(other, (CharacterType, CategoricalType))
