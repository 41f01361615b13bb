"""This package defines the structure and contents of the ``pdcoerce`` type
system.

Base Classes
------------
VectorType
    Immutable, data-free description of a vector's kind and parametric
    payload.

TypeRegistry
    A global table that maps aliases to their types for
    :func:`resolve_type`.

Decorators
----------
register
    Add a subclass of ``VectorType`` to the alias table.
"""
from .base import (
    TypeRegistry, VectorType, is_missing, register, registry, resolve_dtype,
    resolve_type
)
from .missing import NullType, UnspecifiedType
from .boolean import LogicalType, NumericType
from .integer import IntegerType
from .float import DoubleType
from .string import CharacterType
from .list import ListType
from .categorical import CategoricalType
from .datetime import DateType, DatetimeType
