"""This module defines the cast executor, which converts a vector into a
target type while tracking the positions whose values were not preserved.
"""
from __future__ import annotations
import logging
from typing import Any
import warnings

from pdcoerce.decorators import extension_func
from pdcoerce.errors import IncompatibleCast, LossyCastWarning
from pdcoerce.protocol import CastResult, as_result
from pdcoerce.registry import ANY, UNHANDLED, registry
from pdcoerce.types import ListType, NullType, UnspecifiedType, resolve_type
from pdcoerce.util.type_hints import type_specifier
from pdcoerce.vector import Vector, as_vector


logger = logging.getLogger(__name__)


# rules for the `lossy` argument of cast() and combine()
valid_lossy = ("warn", "ignore")


# built-in conversions
# +=============+===+===+===+===+===+===+===+===+
# |             | l | i | d | c | f | t | T | L |
# +=============+===+===+===+===+===+===+===+===+
# | logical     | x | x | x |   |   |   |   | x |
# +-------------+---+---+---+---+---+---+---+---+
# | integer     | x | x | x |   |   |   |   | x |
# +-------------+---+---+---+---+---+---+---+---+
# | double      | x | x | x |   |   |   |   | x |
# +-------------+---+---+---+---+---+---+---+---+
# | character   |   |   |   | x | x |   |   | x |
# +-------------+---+---+---+---+---+---+---+---+
# | categorical |   |   |   | x | x |   |   | x |
# +-------------+---+---+---+---+---+---+---+---+
# | date        |   |   |   |   |   | x | x | x |
# +-------------+---+---+---+---+---+---+---+---+
# | datetime    |   |   |   |   |   | x | x | x |
# +-------------+---+---+---+---+---+---+---+---+
# | list        | x | x | x | x | x | x | x | x |
# +-------------+---+---+---+---+---+---+---+---+
#
# Any other pair is attempted by decomposing through ``list``.


######################
####    PUBLIC    ####
######################


def cast_to(
    value: Any,
    target: type_specifier,
    decompose: bool = True
) -> CastResult:
    """Convert a vector to the target type, reporting lossy positions.

    Parameters
    ----------
    value : Any
        The vector to convert.  Raw data is first passed through
        :func:`as_vector() <pdcoerce.as_vector>`.
    target : type specifier
        The type to convert to, in any format recognized by
        :func:`resolve_type() <pdcoerce.resolve_type>`.
    decompose : bool, default True
        Whether to fall back to the canonical decomposed form if no direct
        conversion is registered.

    Returns
    -------
    CastResult
        A named tuple containing the converted vector and a frozenset of
        0-based positions whose values were not preserved.

    Raises
    ------
    IncompatibleCast
        If no registered or derivable conversion exists.

    Notes
    -----
    The search order is:

        #.  If ``value`` already has the target type, return a copy of it.
        #.  ``null`` sources produce an empty vector of the target type, and
            ``unspecified`` sources produce a vector of missing values.
        #.  The ``(source, target)`` entry of the cast table.
        #.  ``(source, list)`` followed by ``(list, target)``.
        #.  The ``(source, ANY)`` fallback.

    Examples
    --------
    .. doctest::

        >>> cast_to([1, 2, 10.5], "integer")
        CastResult(value=Vector<integer>([1, 2, 10]), lossy=frozenset({2}))
    """
    vector = as_vector(value)
    target = resolve_type(target)
    source = vector.type

    # identity
    if source == target:
        data = vector.data.copy()
        if source.params != target.params:  # e.g. reordered levels
            data = target.construct(data)
        return CastResult(Vector(data, target), frozenset())

    if isinstance(target, NullType):
        if len(vector):
            raise IncompatibleCast(source, target, "null vectors are empty")
        return CastResult(target.empty(), frozenset())

    # null/unspecified sources carry no values
    if isinstance(source, NullType):
        return CastResult(target.empty(), frozenset())
    if isinstance(source, UnspecifiedType):
        return CastResult(target.na(len(vector)), frozenset())

    # direct entry
    func = registry.lookup_cast(source, target)
    if func is not UNHANDLED:
        return as_result(func(vector, target), vector, target)

    # canonical decomposed form
    if decompose and "list" not in (source.kind, target.kind):
        result = through_list(vector, target)
        if result is not None:
            return result

    # owner-supplied fallback
    func = registry.lookup_cast(source, ANY)
    if func is not UNHANDLED:
        return as_result(func(vector, target), vector, target)

    raise IncompatibleCast(source, target)


@extension_func
def cast(value: Any, target: type_specifier, lossy: str = "warn") -> Vector:
    """Convert a vector to the target type.

    Parameters
    ----------
    value : Any
        The vector to convert.
    target : type specifier
        The type to convert to.
    lossy : str, default "warn"
        What to do if some values were not preserved: ``"warn"`` emits a
        :class:`LossyCastWarning <pdcoerce.LossyCastWarning>`, ``"ignore"``
        returns the best-effort result silently.  This is a managed argument:
        its default can be changed by assigning to ``cast.lossy``.

    Returns
    -------
    Vector
        The converted vector.

    Raises
    ------
    IncompatibleCast
        If no registered or derivable conversion exists.

    Examples
    --------
    .. doctest::

        >>> cast([1.0, 2.0, 3.0], "integer")
        Vector<integer>([1, 2, 3])
        >>> cast([1.0, 2.5], "integer", lossy="ignore")
        Vector<integer>([1, 2])
    """
    result = cast_to(value, target)
    if result.lossy and lossy == "warn":
        warnings.warn(
            LossyCastWarning({0: result.lossy}, result.value.type),
            stacklevel=2
        )
    return result.value


@cast.argument
def lossy(val: str, context: dict) -> str:
    """The rule to apply when values are not preserved by a conversion.

    Parameters
    ----------
    val : str
        One of ``"warn"`` or ``"ignore"``.

    Returns
    -------
    str
        The validated rule.

    Raises
    ------
    ValueError
        If ``val`` is not a recognized rule.
    """
    if val not in valid_lossy:
        raise ValueError(
            f"`lossy` must be one of {valid_lossy}, not {repr(val)}"
        )
    return val


#######################
####    PRIVATE    ####
#######################


def through_list(vector: Vector, target) -> CastResult | None:
    """Attempt a cast through the canonical decomposed form, returning None
    if either half is not registered.
    """
    to_list = registry.lookup_cast(vector.type, "list")
    from_list = registry.lookup_cast("list", target)
    if to_list is UNHANDLED or from_list is UNHANDLED:
        return None

    logger.debug(
        "casting '%s' to '%s' through decomposed form",
        vector.type,
        target
    )
    decomposed = as_result(to_list(vector, ListType()), vector, ListType())
    try:
        result = as_result(
            from_list(decomposed.value, target),
            decomposed.value,
            target
        )
    except IncompatibleCast as err:
        raise IncompatibleCast(vector.type, target, detail=str(err)) from err

    return CastResult(result.value, decomposed.lossy | result.lossy)
