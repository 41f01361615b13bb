"""This module contains the conversions to and from the canonical decomposed
form, in which every element of a vector is wrapped in a one-element list.

Any kind that registers :func:`any_to_list` and :func:`list_to_any` can be
cast to every kind that its elements can reach, even if no direct conversion
exists.
"""
# pylint: disable=unused-argument
import numpy as np
import pandas as pd

from pdcoerce import types
from pdcoerce.errors import IncompatibleCast
from pdcoerce.protocol import CastResult, reconstruct, register_kind, same_type
from pdcoerce.registry import register_coercion
from pdcoerce.vector import Vector, as_vector, detect_type

from .base import cast_to


register_kind(types.ListType, self_cast=reconstruct, decomposable=False)


register_coercion("list", "list", same_type)


######################
####    PUBLIC    ####
######################


def any_to_list(vector: Vector, target: types.ListType) -> CastResult:
    """Decompose a vector into one-element lists.  Missing values become
    ``None``.  This is always exact.
    """
    values = vector.data.astype(object)
    result = np.empty(len(values), dtype=object)
    for idx, value in enumerate(values):
        result[idx] = None if types.is_missing(value) else [value]
    data = target.construct(pd.Series(result, dtype=object))
    return CastResult(Vector(data, target), frozenset())


def list_to_any(vector: Vector, target: types.VectorType) -> CastResult:
    """Reassemble a vector from one-element lists.

    Lists of any other length are flagged and become missing.  The unwrapped
    elements are passed through :func:`detect_type() <pdcoerce.detect_type>`
    and then cast to the target using a direct conversion.
    """
    lossy = set()
    result = np.empty(len(vector), dtype=object)
    for idx, value in enumerate(vector.data):
        if value is None:
            result[idx] = None
        elif len(value) == 1:
            result[idx] = value[0]
        else:
            result[idx] = None
            lossy.add(idx)

    elements = pd.Series(result, dtype=object)
    try:
        inner = as_vector(elements, detect_type(elements))
    except TypeError as err:
        raise IncompatibleCast(vector.type, target, detail=str(err)) from err

    # NOTE: a decomposed fallback here would recurse without bound
    try:
        converted = cast_to(inner, target, decompose=False)
    except IncompatibleCast as err:
        raise IncompatibleCast(vector.type, target, detail=str(err)) from err
    return CastResult(converted.value, frozenset(lossy) | converted.lossy)
