"""This module describes the extension protocol through which kinds are
admitted into the ``pdcoerce`` engine.

A kind's owner is responsible for registering every entry that its kind
participates in.  Built-in kinds use the exact same protocol as third-party
ones: there is no privileged path.  In order, an owner registers:

    #.  a ``(K, null)`` coercion that returns ``K`` unchanged.
    #.  a ``(K, ANY)`` coercion fallback that fails with
        :class:`IncompatibleType <pdcoerce.IncompatibleType>`.
    #.  real coercion pairs with any kind that ``K`` should unify with.  These
        must be commutative: ``(K, X)`` and ``(X, K)`` must agree.
    #.  a ``(K, K)`` self-cast.
    #.  a ``(K, ANY)`` cast fallback that fails with
        :class:`IncompatibleCast <pdcoerce.IncompatibleCast>`.
    #.  ``(K, list)`` and ``(list, K)`` casts, which convert to and from the
        canonical decomposed form.  These let ``K`` reach any kind its elements
        can be cast to.

:func:`register_kind` performs every step except (3), which is inherently
kind-specific.  :func:`check_kind() <pdcoerce.testing.check_kind>` can be used
in a test suite to verify that the results obey the coercion laws.
"""
from __future__ import annotations
from typing import Any, Iterable, NamedTuple

from pdcoerce.errors import IncompatibleCast, IncompatibleType
from pdcoerce.registry import ANY, DispatchRegistry
from pdcoerce.registry import registry as global_registry
from pdcoerce.types import VectorType, is_missing
from pdcoerce.util.type_hints import caster, kind_like
from pdcoerce.vector import Vector


######################
####    PUBLIC    ####
######################


class CastResult(NamedTuple):
    """The output of a caster.

    Attributes
    ----------
    value : Vector
        The converted vector.  This always has the requested target type and
        the same length as the input.
    lossy : frozenset[int]
        The 0-based positions whose values were not preserved exactly.  An
        empty set means the cast was lossless.
    """

    value: Vector
    lossy: frozenset = frozenset()


def lossy_positions(
    original: Iterable[Any],
    restored: Iterable[Any]
) -> frozenset:
    """Compare two sequences element-wise, returning the positions where a
    non-missing original value was not preserved.

    Parameters
    ----------
    original : Iterable[Any]
        The values before conversion.
    restored : Iterable[Any]
        The values after conversion, mapped back into a form that can be
        compared with ``original`` using ``==``.

    Returns
    -------
    frozenset[int]
        The positions where ``original`` is not missing, and ``restored`` is
        either missing or unequal to it.

    Examples
    --------
    .. doctest::

        >>> lossy_positions([1, 2, 10.5], [1, 2, 10])
        frozenset({2})
        >>> lossy_positions([1, None, 3], [1, None, None])
        frozenset({2})
    """
    result = set()
    for idx, (old, new) in enumerate(zip(original, restored)):
        if is_missing(old):
            continue
        if is_missing(new) or not bool(old == new):
            result.add(idx)
    return frozenset(result)


def identity(x: VectorType, y: VectorType, strict: bool) -> VectorType:
    """A resolver that always returns its first argument."""
    return x


def no_common_type(x: VectorType, y: VectorType, strict: bool) -> VectorType:
    """A resolver that always fails.  This is used as a ``(K, ANY)``
    fallback.
    """
    raise IncompatibleType(x, y)


def same_type(x: VectorType, y: VectorType, strict: bool) -> VectorType:
    """A resolver for a kind paired with itself, which succeeds only if the
    two descriptors are equal.
    """
    if x != y:
        raise IncompatibleType(x, y, detail="payloads differ")
    return x


def reconstruct(vector: Vector, target: VectorType) -> CastResult:
    """A self-cast that rebuilds the vector's storage under the target
    descriptor.

    Any position that was not missing before, but is missing afterwards, is
    reported as lossy.  Owners whose payloads can reject values without
    producing missing values should supply their own self-cast instead.
    """
    data = target.construct(vector.data)
    lossy = frozenset(
        idx for idx, (old, new) in enumerate(
            zip(vector.data.astype(object), data.astype(object))
        )
        if not is_missing(old) and is_missing(new)
    )
    return CastResult(Vector(data, target), lossy)


def no_cast(vector: Vector, target: VectorType) -> CastResult:
    """A caster that always fails.  This is used as a ``(K, ANY)`` fallback.
    """
    raise IncompatibleCast(vector.type, target)


def register_kind(
    kind: kind_like,
    *,
    self_cast: caster,
    decomposable: bool = True,
    registry: DispatchRegistry | None = None
) -> None:
    """Register the standard entries for a new kind.

    Parameters
    ----------
    kind : str | VectorType
        The kind to register, as a tag, :class:`VectorType` subclass, or
        instance.
    self_cast : Callable
        The caster to use when converting between two descriptors of this
        kind.  This must be given explicitly, since only the kind's owner
        knows whether a change of payload can lose information.
        :func:`reconstruct` is a reasonable choice for kinds that turn
        unrepresentable values into missing ones.
    decomposable : bool, default True
        Whether to register ``(K, list)`` and ``(list, K)`` casts for the
        canonical decomposed form.
    registry : DispatchRegistry, optional
        The registry to populate.  Defaults to the global registry.

    Raises
    ------
    RegistrationConflict
        If any of the entries have already been registered.

    Notes
    -----
    This also registers a ``(K, unspecified)`` coercion returning ``K``, so
    that vectors of missing values unify with the new kind.  The owner is
    still responsible for registering real coercion pairs.
    """
    if registry is None:
        registry = global_registry

    registry.register_coercion(kind, "null", identity)
    registry.register_coercion(kind, "unspecified", identity)
    registry.register_coercion(kind, ANY, no_common_type)
    registry.register_cast(kind, kind, self_cast)
    registry.register_cast(kind, ANY, no_cast)

    if decomposable:
        from pdcoerce.convert.list import any_to_list, list_to_any

        registry.register_cast(kind, "list", any_to_list)
        registry.register_cast("list", kind, list_to_any)


def as_result(output: Any, source: Vector, target: VectorType) -> CastResult:
    """Normalize and check the output of a caster."""
    if isinstance(output, CastResult):
        result = output
    elif isinstance(output, tuple) and len(output) == 2:
        result = CastResult(output[0], frozenset(output[1]))
    else:
        raise TypeError(
            f"caster for ({repr(source.type.kind)}, {repr(target.kind)}) must "
            f"return a CastResult, not {repr(output)}"
        )

    if not isinstance(result.value, Vector) or result.value.type != target:
        raise TypeError(
            f"caster for ({repr(source.type.kind)}, {repr(target.kind)}) "
            f"returned a value of the wrong type: {repr(result.value)}"
        )
    if len(result.value) != len(source):
        raise TypeError(
            f"caster for ({repr(source.type.kind)}, {repr(target.kind)}) "
            f"changed the length of its input: {len(source)} -> "
            f"{len(result.value)}"
        )
    return CastResult(result.value, frozenset(result.lossy))

