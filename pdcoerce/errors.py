"""This module describes the exceptions and warnings raised by ``pdcoerce``.

Type-level failures are raised as exceptions.  Value-level precision loss is
never an error: it is reported as a :class:`LossyCastWarning` attached to an
otherwise successful result.
"""
from __future__ import annotations
from typing import Any, Mapping

from pdcoerce.util.error import shorten_positions


######################
####    ERRORS    ####
######################


class CoercionError(TypeError):
    """Base class for type-level failures within the ``pdcoerce`` engine."""


class IncompatibleType(CoercionError):
    """No common type exists for a pair of types.

    Parameters
    ----------
    x, y : VectorType
        The two types that could not be unified, in the order the caller
        supplied them.
    detail : str, optional
        An explanation supplied by the kind owner, such as the levels that
        prevented a strict categorical union.
    index : int, optional
        The position of the offending input when raised from a fold over
        several inputs.
    """

    def __init__(
        self,
        x: Any,
        y: Any,
        detail: str | None = None,
        index: int | None = None
    ):
        self.x = x
        self.y = y
        self.detail = detail
        self.index = index
        super().__init__(self._message())

    def _message(self) -> str:
        msg = f"no common type for {x_str(self.x)} and {x_str(self.y)}"
        if self.index is not None:
            msg += f" (input {self.index})"
        if self.detail:
            msg += f": {self.detail}"
        return msg


class IncompatibleCast(CoercionError):
    """No registered or derivable conversion exists between two types.

    Parameters
    ----------
    source : VectorType
        The type of the value being cast.
    target : VectorType
        The requested destination type.
    detail : str, optional
        An explanation supplied by the kind owner.
    """

    def __init__(self, source: Any, target: Any, detail: str | None = None):
        self.source = source
        self.target = target
        self.detail = detail
        msg = f"cannot cast {x_str(source)} to {x_str(target)}"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class RegistrationError(RuntimeError):
    """Base class for programmer errors during registry population."""


class RegistrationConflict(RegistrationError):
    """An ordered kind pair was registered twice in the same table."""

    def __init__(self, kind_a: str, kind_b: str, table: str):
        self.kind_a = kind_a
        self.kind_b = kind_b
        self.table = table
        super().__init__(
            f"{table} for ({repr(kind_a)}, {repr(kind_b)}) is already "
            f"registered"
        )


class RegistryFrozen(RegistrationError):
    """Registration was attempted after the registry was frozen."""


########################
####    WARNINGS    ####
########################


class LossyCastWarning(UserWarning):
    """One or more values were not preserved by a cast.

    Parameters
    ----------
    lossy : Mapping[int, frozenset[int]]
        A map from input index to the 0-based positions within that input
        whose values could not be represented exactly.  :func:`cast` always
        reports a single input at index ``0``.
    target : VectorType
        The destination type of the cast.
    """

    def __init__(self, lossy: Mapping[int, frozenset[int]], target: Any):
        self.lossy = dict(lossy)
        self.target = target
        parts = [
            f"input {idx} at {shorten_positions(positions)}"
            for idx, positions in sorted(self.lossy.items())
        ]
        super().__init__(
            f"lossy cast to {x_str(target)}: {'; '.join(parts)}"
        )


#######################
####    PRIVATE    ####
#######################


def x_str(typ: Any) -> str:
    """Render a type for an error message."""
    return f"'{typ}'"
