"""This module describes the coercion resolver, which finds the common type of
two or more type descriptors.

Resolution is driven entirely by the coercion table of the
:class:`DispatchRegistry <pdcoerce.DispatchRegistry>`.  The only rule that is
built into the resolver itself is that ``null`` is absorbing: it unifies with
anything, yielding the other type unchanged.
"""
from __future__ import annotations
from typing import Any

from pdcoerce.decorators import extension_func
from pdcoerce.errors import IncompatibleType
from pdcoerce.registry import ANY, UNHANDLED, registry
from pdcoerce.types import NullType, VectorType, resolve_type
from pdcoerce.util.type_hints import type_specifier


######################
####    PUBLIC    ####
######################


def resolve_common_type(
    x: type_specifier | VectorType,
    y: type_specifier | VectorType,
    strict: bool = True
) -> VectorType:
    """Find the common type of two type descriptors.

    Parameters
    ----------
    x, y : type specifier
        The types to unify.  These can be in any format recognized by
        :func:`resolve_type() <pdcoerce.resolve_type>`.
    strict : bool, default True
        Passed through to the registered resolver.  Kinds with a parametric
        payload use this to decide whether incompatible payloads can be
        merged (e.g. the union of two categoricals' levels) or should fail.

    Returns
    -------
    VectorType
        A type that can represent every value of both ``x`` and ``y``.

    Raises
    ------
    IncompatibleType
        If no common type exists.  The error always names ``x`` and ``y`` in
        the order they were given.

    Notes
    -----
    The search order is:

        #.  If either type is ``null``, return the other.
        #.  The ``(x, y)`` entry of the coercion table.
        #.  The ``(y, x)`` entry, called with its arguments swapped.
        #.  The ``(x, ANY)`` then ``(y, ANY)`` fallbacks, if present.

    Examples
    --------
    .. doctest::

        >>> resolve_common_type("integer", "double")
        DoubleType()
        >>> resolve_common_type("categorical[a]", "categorical[a, b]")
        CategoricalType(levels=('a', 'b'))
        >>> resolve_common_type("categorical[a]", "categorical[b]")
        Traceback (most recent call last):
            ...
        pdcoerce.errors.IncompatibleType: no common type for 'categorical[a]' and 'categorical[b]': ...
    """
    x = resolve_type(x)
    y = resolve_type(y)

    # null is absorbing
    if isinstance(x, NullType):
        return y
    if isinstance(y, NullType):
        return x

    try:
        result = dispatch(x, y, strict)
    except IncompatibleType as err:
        if (err.x, err.y) == (x, y):
            raise
        raise IncompatibleType(x, y, detail=err.detail) from err

    if not isinstance(result, VectorType):
        raise TypeError(
            f"resolver for ({repr(x.kind)}, {repr(y.kind)}) must return a "
            f"VectorType, not {repr(result)}"
        )
    return result


@extension_func
def common_type(
    *types: type_specifier | VectorType,
    strict: bool = True
) -> VectorType:
    """Find the common type of an arbitrary number of type descriptors.

    Parameters
    ----------
    *types : type specifier
        The types to unify, in order.
    strict : bool, default True
        Passed to each pairwise resolution.  This is a managed argument: its
        default can be changed by assigning to ``common_type.strict``.

    Returns
    -------
    VectorType
        The result of folding :func:`resolve_common_type` over ``types`` from
        left to right, starting from ``null``.  If no types are given, this is
        ``null``.

    Raises
    ------
    IncompatibleType
        At the first pair that cannot be unified.  The error names the type
        accumulated so far and the offending type, and its ``index`` attribute
        holds the offending type's position in ``types``.

    Examples
    --------
    .. doctest::

        >>> common_type("logical", "integer", "double")
        DoubleType()
        >>> common_type("integer", "character", "double")
        Traceback (most recent call last):
            ...
        pdcoerce.errors.IncompatibleType: no common type for 'integer' and 'character' (input 1)
    """
    result = NullType()
    for index, typ in enumerate(types):
        typ = resolve_type(typ)
        try:
            result = resolve_common_type(result, typ, strict=strict)
        except IncompatibleType as err:
            raise IncompatibleType(
                result,
                typ,
                detail=err.detail,
                index=index
            ) from err
    return result


@common_type.argument
def strict(val: Any, context: dict) -> bool:
    """Indicates whether parametric payloads must be compatible as-is
    (``True``) or may be merged into a new payload (``False``).

    Parameters
    ----------
    val : bool
        A boolean (or boolean-like) value.  Defaults to ``True``.

    Returns
    -------
    bool
        The boolean equivalent of the input.

    Examples
    --------
    .. doctest::

        >>> common_type("categorical[a]", "categorical[b]", strict=False)
        CategoricalType(levels=('a', 'b'))
    """
    return bool(val)


#######################
####    PRIVATE    ####
#######################


def dispatch(x: VectorType, y: VectorType, strict: bool) -> VectorType:
    """Search the coercion table for a resolver that handles ``x`` and ``y``.
    """
    func = registry.lookup_coercion(x, y)
    if func is not UNHANDLED:
        return func(x, y, strict)

    func = registry.lookup_coercion(y, x)
    if func is not UNHANDLED:
        return func(y, x, strict)

    # owner-supplied fallbacks
    for owner, other in ((x, y), (y, x)):
        func = registry.lookup_coercion(owner, ANY)
        if func is not UNHANDLED:
            return func(owner, other, strict)

    raise IncompatibleType(x, y)
