"""This module provides PEP 484-style type hints for ``pdcoerce`` constructs.
"""
from typing import Any, Callable, List, Tuple, Union

import numpy as np
import numpy.typing
import pandas as pd


#######################
####    SCALARS    ####
#######################


dtype_like = Union[
    np.dtype,
    pd.api.extensions.ExtensionDtype
]


type_specifier = Union[
    type,
    str,
    np.dtype,
    pd.api.extensions.ExtensionDtype
]


kind_like = Union[str, type, Any]  # kind tag, VectorType class or instance


#########################
####    ITERABLES    ####
#########################


array_like = numpy.typing.ArrayLike


list_like = Union[
    List,
    Tuple,
    array_like
]


#########################
####    CALLABLES    ####
#########################


# (x, y, strict) -> VectorType
resolver = Callable[[Any, Any, bool], Any]


# (vector, target) -> CastResult | tuple[Vector, frozenset[int]]
caster = Callable[[Any, Any], Any]
