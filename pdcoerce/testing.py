"""This module contains law checks for kinds that are admitted through the
extension protocol.

The engine never verifies these at runtime.  Instead, owners are expected to
call :func:`check_kind` from their own test suites.
"""
from __future__ import annotations
from typing import Any, Iterable

from pdcoerce.coerce import resolve_common_type
from pdcoerce.convert.base import cast_to
from pdcoerce.errors import CoercionError
from pdcoerce.registry import UNHANDLED, registry
from pdcoerce.types import ListType, NullType, VectorType, resolve_type
from pdcoerce.util.type_hints import type_specifier
from pdcoerce.vector import Vector, as_vector


######################
####    PUBLIC    ####
######################


def check_kind(
    samples: Iterable[Any],
    partners: Iterable[type_specifier] = ()
) -> None:
    """Verify that a kind's registrations obey the coercion laws.

    Parameters
    ----------
    samples : Iterable[Any]
        Example vectors of the kind under test, ideally with several
        different payloads.  Raw data is passed through
        :func:`as_vector() <pdcoerce.as_vector>`.
    partners : Iterable[type specifier], default ()
        Other types to check commutativity against.

    Raises
    ------
    AssertionError
        If any law is violated.  The message lists every violation that was
        found, not just the first.

    Notes
    -----
    The following laws are checked:

        #.  **Commutativity**: ``resolve_common_type(x, y)`` and
            ``resolve_common_type(y, x)`` either both fail or both return
            equal types, in both strict and non-strict modes.  This is checked
            for every pair of samples, and every sample against every partner.
        #.  **Identity**: ``null`` unifies with every sample's type to give
            that type, from either side.
        #.  **Self-cast**: casting a sample to its own type returns an equal
            vector with no lossy positions.
        #.  **Empty probe**: every sample's type produces an empty vector of
            the same type.
        #.  **Round trip**: if the kind supports the canonical decomposed
            form, casting to ``list`` and back returns an equal vector with
            no lossy positions.

    Examples
    --------
    .. doctest::

        >>> check_kind([[1, 2, None], [3]], partners=["logical", "double"])
    """
    vectors = [as_vector(sample) for sample in samples]
    types = [v.type for v in vectors]
    others = [resolve_type(p) for p in partners]

    violations = []
    for idx, x in enumerate(types):
        for y in types[idx:] + others:
            violations.extend(check_commutative(x, y))
        violations.extend(check_identity(x))

    for vector in vectors:
        violations.extend(check_self_cast(vector))
        violations.extend(check_empty(vector.type))
        violations.extend(check_round_trip(vector))

    if violations:
        lines = "\n".join(f"    - {v}" for v in violations)
        raise AssertionError(
            f"{len(violations)} law violation(s) found:\n{lines}"
        )


#######################
####    PRIVATE    ####
#######################


def check_commutative(x: VectorType, y: VectorType) -> list[str]:
    """Check that resolving x with y agrees with resolving y with x."""
    result = []
    for strict in (True, False):
        forward = attempt(resolve_common_type, x, y, strict)
        backward = attempt(resolve_common_type, y, x, strict)
        if forward != backward:
            result.append(
                f"not commutative (strict={strict}): '{x}' + '{y}' -> "
                f"{describe(forward)}, but '{y}' + '{x}' -> "
                f"{describe(backward)}"
            )
    return result


def check_identity(x: VectorType) -> list[str]:
    """Check that null is an identity element for x."""
    result = []
    for left, right in ((x, NullType()), (NullType(), x)):
        found = attempt(resolve_common_type, left, right, True)
        if found != x:
            result.append(
                f"null is not an identity: '{left}' + '{right}' -> "
                f"{describe(found)}"
            )
    return result


def check_self_cast(vector: Vector) -> list[str]:
    """Check that casting a vector to its own type changes nothing."""
    try:
        result = cast_to(vector, vector.type)
    except CoercionError as err:
        return [f"self-cast of '{vector.type}' failed: {err}"]

    if result.lossy or not result.value.equals(vector):
        return [f"self-cast of '{vector.type}' did not preserve {vector}"]
    return []


def check_empty(typ: VectorType) -> list[str]:
    """Check that a type's empty probe is empty and has the same type."""
    empty = typ.empty()
    if len(empty) or empty.type != typ:
        return [f"empty probe for '{typ}' is invalid: {empty}"]
    return []


def check_round_trip(vector: Vector) -> list[str]:
    """Check that a vector survives the canonical decomposed form."""
    if registry.lookup_cast(vector.type, "list") is UNHANDLED:
        return []

    try:
        decomposed = cast_to(vector, ListType())
        restored = cast_to(decomposed.value, vector.type)
    except CoercionError as err:
        return [f"round trip of '{vector.type}' through list failed: {err}"]

    lossy = decomposed.lossy | restored.lossy
    if lossy or not restored.value.equals(vector):
        return [
            f"round trip of '{vector.type}' through list did not preserve "
            f"{vector} (got {restored.value})"
        ]
    return []


def attempt(func, *args) -> Any:
    """Call a function, returning the exception type instead of raising."""
    try:
        return func(*args)
    except CoercionError as err:
        return type(err)


def describe(result: Any) -> str:
    """Format the output of :func:`attempt`."""
    if isinstance(result, type):
        return result.__name__
    return f"'{result}'"
