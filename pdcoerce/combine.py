"""This module describes the ``combine()`` function, which joins any number of
vectors into one by resolving their common type and casting each of them to
it.
"""
from __future__ import annotations
from typing import Any
import warnings

from pdcoerce.coerce import common_type, resolve_common_type
from pdcoerce.convert.base import cast_to, valid_lossy
from pdcoerce.decorators import extension_func
from pdcoerce.errors import IncompatibleType, LossyCastWarning
from pdcoerce.types import (
    LogicalType, UnspecifiedType, VectorType, resolve_type
)
from pdcoerce.util.type_hints import type_specifier
from pdcoerce.vector import Vector, as_vector


######################
####    PUBLIC    ####
######################


@extension_func
def combine(
    *values: Any,
    target: type_specifier | None = None,
    strict: bool = True,
    lossy: str = "warn"
) -> Vector:
    """Concatenate vectors of possibly different types.

    Parameters
    ----------
    *values : Any
        The vectors to combine, in order.  Raw data is first passed through
        :func:`as_vector() <pdcoerce.as_vector>`.
    target : type specifier, optional
        A fixed type to combine into.  If given, every input must resolve
        against it, and the result always has exactly this type.  Otherwise,
        the result type is the common type of all the inputs.
    strict : bool, default True
        Passed to every coercion step.  This is a managed argument: its
        default can be changed by assigning to ``combine.strict``.
    lossy : str, default "warn"
        What to do if some values were not preserved: ``"warn"`` or
        ``"ignore"``.  This is a managed argument.

    Returns
    -------
    Vector
        A vector whose length is the total length of the inputs, containing
        their values in order.  If no inputs are given, this is an empty
        ``null`` vector (or an empty vector of ``target``).

    Raises
    ------
    IncompatibleType
        At the first input that cannot be unified with the types before it
        (or with ``target``).  Its ``index`` attribute gives the position of
        that input.
    IncompatibleCast
        If an input cannot be cast to the resolved type.

    Warns
    -----
    LossyCastWarning
        If any values were not preserved.  A single warning is emitted for
        the whole call, mapping each affected input's index to its lossy
        positions.

    Notes
    -----
    A vector consisting only of missing values contributes no type
    information.  If every input is like this, the result is logical.

    Examples
    --------
    .. doctest::

        >>> combine([True, False], [1, 2], [3.5])
        Vector<double>([1.0, 0.0, 1.0, 2.0, 3.5])
        >>> combine([1, 2], ["a"])
        Traceback (most recent call last):
            ...
        pdcoerce.errors.IncompatibleType: no common type for 'integer' and 'character' (input 1)
        >>> combine([1, 2], [3.5], target="integer", lossy="ignore")
        Vector<integer>([1, 2, 3])
    """
    vectors = [as_vector(value) for value in values]

    if target is None:
        resolved = common_type(*(v.type for v in vectors), strict=strict)
        if isinstance(resolved, UnspecifiedType):
            resolved = LogicalType()
    else:
        resolved = resolve_type(target)
        for index, vector in enumerate(vectors):
            check_target(vector.type, resolved, strict, index)

    # cast each input, recording lossy positions by input index
    results = []
    lost = {}
    for index, vector in enumerate(vectors):
        result = cast_to(vector, resolved)
        results.append(result.value.data)
        if result.lossy:
            lost[index] = result.lossy

    if lost and lossy == "warn":
        warnings.warn(LossyCastWarning(lost, resolved), stacklevel=2)

    if not results:
        return resolved.empty()
    return Vector(resolved.concat(results), resolved)


@combine.argument
def strict(val: Any, context: dict) -> bool:
    """Indicates whether parametric payloads must be compatible as-is.  See
    :func:`common_type() <pdcoerce.common_type>`.
    """
    return bool(val)


@combine.argument
def lossy(val: str, context: dict) -> str:
    """The rule to apply when values are not preserved: ``"warn"`` or
    ``"ignore"``.
    """
    if val not in valid_lossy:
        raise ValueError(
            f"`lossy` must be one of {valid_lossy}, not {repr(val)}"
        )
    return val


#######################
####    PRIVATE    ####
#######################


def check_target(
    typ: VectorType,
    target: VectorType,
    strict: bool,
    index: int
) -> None:
    """Ensure that an input type can be unified with a fixed target."""
    try:
        resolve_common_type(typ, target, strict=strict)
    except IncompatibleType as err:
        raise IncompatibleType(
            typ,
            target,
            detail=err.detail,
            index=index
        ) from err
