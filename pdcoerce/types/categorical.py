"""This module describes a ``CategoricalType`` object, which keeps track of
the levels that a categorical vector can take.
"""
from __future__ import annotations
from typing import Any, Iterable

import pandas as pd

from pdcoerce.util.error import shorten_list

from .base import VectorType, fill_missing, register


@register
class CategoricalType(VectorType):
    """Categorical type with an ordered set of distinct levels.

    Parameters
    ----------
    levels : Iterable[Any]
        The labels that values of this type can take.  These must be distinct
        and non-missing.  Their order is preserved for storage, but does not
        affect equality: two categoricals are equal if they have the same
        *set* of levels.

    Notes
    -----
    Categoricals are partially ordered by containment.  ``A`` is finer than
    ``B`` if every level of ``B`` is also a level of ``A``.
    """

    kind = "categorical"
    aliases = {"category", "factor", pd.CategoricalDtype}

    def __init__(self, levels: Iterable[Any] = ()):
        levels = tuple(levels)
        if any(pd.isna(x) for x in levels):
            raise ValueError("categorical levels cannot be missing")
        if len(set(levels)) != len(levels):
            duplicated = sorted(
                {str(x) for x in levels if levels.count(x) > 1}
            )
            raise ValueError(
                f"categorical levels must be unique: "
                f"{shorten_list(duplicated)}"
            )
        super().__init__(levels=levels)

    @property
    def levels(self) -> tuple:
        """The levels of this categorical, in storage order."""
        return self.params["levels"]

    @property
    def level_set(self) -> frozenset:
        """The levels of this categorical as an unordered set."""
        return frozenset(self.levels)

    @property
    def key(self) -> tuple:
        return (self.kind, self.level_set)

    @property
    def dtype(self) -> pd.CategoricalDtype:
        """The equivalent pandas dtype."""
        return pd.CategoricalDtype(list(self.levels))

    @classmethod
    def from_string(cls, *levels: str) -> CategoricalType:
        return cls(levels)

    @classmethod
    def from_dtype(cls, dtype: pd.CategoricalDtype) -> CategoricalType:
        if dtype.categories is None:
            return cls()
        return cls(dtype.categories.tolist())

    def construct(self, data: Any) -> pd.Series:
        if isinstance(data, pd.Series):
            data = data.astype(object)
        data = fill_missing(pd.Series(list(data), dtype=object))
        values = pd.Categorical(data.tolist(), categories=list(self.levels))
        return pd.Series(values)

    def concat(self, series: Iterable[pd.Series]) -> pd.Series:
        # NOTE: recoding through object avoids level-order mismatches between
        # inputs that share the same level set
        values = []
        for s in series:
            values.extend(s.astype(object).tolist())
        return self.construct(values)

    def finer_than(self, other: VectorType) -> bool:
        if not isinstance(other, CategoricalType):
            return False
        return other.level_set <= self.level_set

    def union(self, other: CategoricalType) -> CategoricalType:
        """Combine the levels of two categoricals, preserving first-seen
        order.
        """
        extra = [x for x in other.levels if x not in self.level_set]
        return CategoricalType(self.levels + tuple(extra))

    def __str__(self) -> str:
        return f"{self.kind}[{', '.join(str(x) for x in self.levels)}]"
