"""This package implements the cast executor, along with the coercion and cast
rules for every built-in kind.  Importing it populates the global
:class:`DispatchRegistry <pdcoerce.DispatchRegistry>`.

Functions
---------
cast()
    Convert a vector to a target type, warning if any values are lost.

cast_to()
    Convert a vector to a target type, returning the lossy positions
    alongside the result.

any_to_list()
    Decompose a vector into the canonical one-element-list form.

list_to_any()
    Reassemble a vector from the canonical decomposed form.
"""
# pylint: disable=redefined-builtin
from .base import cast, cast_to
from .list import any_to_list, list_to_any

# rules for built-in kinds
from . import missing
from . import boolean
from . import integer
from . import float
from . import string
from . import categorical
from . import datetime
