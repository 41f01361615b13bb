"""This module describes the ``DispatchRegistry``, which holds the coercion
and cast tables that drive the ``pdcoerce`` engine.

Each table is keyed by an *ordered* pair of kind tags.  Entries are supplied
once by a kind's owner, usually at import time, and are never replaced.  The
resolver and executor perform exact lookups only: there is no inheritance or
specificity search, so the only fallbacks are the ``(kind, ANY)`` entries that
each owner registers for itself.
"""
from __future__ import annotations
import logging
import threading
from types import MappingProxyType
from typing import Any, Callable, Mapping

from pdcoerce.errors import RegistrationConflict, RegistryFrozen
from pdcoerce.types import VectorType
from pdcoerce.util.type_hints import caster, kind_like, resolver


logger = logging.getLogger(__name__)


# wildcard second key for owner-supplied fallbacks
ANY = "*"


class _Unhandled:
    """Sentinel returned by lookups that miss."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNHANDLED"


UNHANDLED = _Unhandled()


######################
####    PUBLIC    ####
######################


class DispatchRegistry:
    """A pair of dispatch tables connecting ordered kind pairs to their
    resolver and caster functions.

    Notes
    -----
    The registry is append-only.  Writes are serialized by an internal lock,
    while reads go straight to the underlying dictionaries, which is safe
    because entries are never replaced or removed.  Once population is
    complete, :meth:`freeze` can be called to reject any further
    registrations.

    Examples
    --------
    .. doctest::

        >>> registry = DispatchRegistry()
        >>> @registry.register_coercion("integer", "double")
        ... def integer_double(x, y, strict):
        ...     return y

        >>> registry.lookup_coercion("integer", "double")
        <function integer_double at ...>
        >>> registry.lookup_coercion("double", "integer")
        UNHANDLED
    """

    def __init__(self):
        self._coercions: dict[tuple[str, str], resolver] = {}
        self._casts: dict[tuple[str, str], caster] = {}
        self._lock = threading.RLock()
        self._frozen = False

    ##########################
    ####    PROPERTIES    ####
    ##########################

    @property
    def coercions(self) -> Mapping[tuple[str, str], resolver]:
        """A read-only view of the coercion table."""
        return MappingProxyType(self._coercions)

    @property
    def casts(self) -> Mapping[tuple[str, str], caster]:
        """A read-only view of the cast table."""
        return MappingProxyType(self._casts)

    @property
    def frozen(self) -> bool:
        """Indicates whether :meth:`freeze` has been called."""
        return self._frozen

    ############################
    ####    REGISTRATION    ####
    ############################

    def register_coercion(
        self,
        kind_a: kind_like,
        kind_b: kind_like,
        func: resolver | None = None
    ) -> resolver | Callable[[resolver], resolver]:
        """Add an entry to the coercion table.

        Parameters
        ----------
        kind_a, kind_b : str | VectorType
            The ordered pair of kinds to register under.  These can be given
            as kind tags, :class:`VectorType` subclasses, or instances.
            ``kind_b`` may also be :data:`ANY` to register a fallback.
        func : Callable, optional
            A resolver with signature ``(x, y, strict) -> VectorType``.  If
            omitted, this method returns a decorator.

        Returns
        -------
        Callable
            ``func`` unchanged, or a decorator that registers and returns its
            argument.

        Raises
        ------
        RegistrationConflict
            If the ordered pair is already present in the coercion table.
        RegistryFrozen
            If the registry has been frozen.
        """
        return self._register(
            self._coercions, "coercion", kind_a, kind_b, func
        )

    def register_cast(
        self,
        kind_a: kind_like,
        kind_b: kind_like,
        func: caster | None = None
    ) -> caster | Callable[[caster], caster]:
        """Add an entry to the cast table.

        Parameters
        ----------
        kind_a, kind_b : str | VectorType
            The source and target kinds.  ``kind_b`` may be :data:`ANY` to
            register a fallback for ``kind_a``.
        func : Callable, optional
            A caster with signature ``(vector, target) -> CastResult``.  If
            omitted, this method returns a decorator.

        Returns
        -------
        Callable
            ``func`` unchanged, or a decorator that registers and returns its
            argument.

        Raises
        ------
        RegistrationConflict
            If the ordered pair is already present in the cast table.
        RegistryFrozen
            If the registry has been frozen.
        """
        return self._register(self._casts, "cast", kind_a, kind_b, func)

    def freeze(self) -> None:
        """End the population phase.  Further registrations will raise a
        :class:`RegistryFrozen` error.
        """
        with self._lock:
            self._frozen = True
        logger.debug(
            "registry frozen with %d coercions and %d casts",
            len(self._coercions),
            len(self._casts)
        )

    ######################
    ####    LOOKUP    ####
    ######################

    def lookup_coercion(self, kind_a: kind_like, kind_b: kind_like) -> Any:
        """Get the resolver for an ordered pair of kinds, or
        :data:`UNHANDLED` if none is registered.
        """
        key = (kind_of(kind_a), kind_of(kind_b))
        return self._coercions.get(key, UNHANDLED)

    def lookup_cast(self, kind_a: kind_like, kind_b: kind_like) -> Any:
        """Get the caster for an ordered pair of kinds, or :data:`UNHANDLED`
        if none is registered.
        """
        key = (kind_of(kind_a), kind_of(kind_b))
        return self._casts.get(key, UNHANDLED)

    ###############################
    ####    SPECIAL METHODS    ####
    ###############################

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(coercions={len(self._coercions)}, "
            f"casts={len(self._casts)}, frozen={self._frozen})"
        )

    #######################
    ####    PRIVATE    ####
    #######################

    def _register(
        self,
        table: dict,
        name: str,
        kind_a: kind_like,
        kind_b: kind_like,
        func: Callable | None
    ) -> Callable:
        """Insert an entry into one of the dispatch tables."""
        key = (kind_of(kind_a), kind_of(kind_b))

        def decorator(func: Callable) -> Callable:
            if not callable(func):
                raise TypeError(f"{name} must be callable: {repr(func)}")

            with self._lock:
                if self._frozen:
                    raise RegistryFrozen(
                        f"cannot register {name} for {key}: registry is frozen"
                    )
                if key in table:
                    raise RegistrationConflict(key[0], key[1], name)
                table[key] = func

            logger.debug(
                "registered %s %s -> %s", name, key, func.__qualname__
            )
            return func

        if func is None:
            return decorator
        return decorator(func)


def kind_of(kind: kind_like) -> str:
    """Get the kind tag for a string, :class:`VectorType` subclass, or
    instance.
    """
    if isinstance(kind, str):
        return kind
    if isinstance(kind, VectorType):
        return kind.kind
    if isinstance(kind, type) and issubclass(kind, VectorType):
        return kind.kind
    raise TypeError(f"could not interpret kind: {repr(kind)}")


# process-wide instance
registry = DispatchRegistry()


def register_coercion(
    kind_a: kind_like,
    kind_b: kind_like,
    func: resolver | None = None
) -> resolver | Callable[[resolver], resolver]:
    """Add an entry to the global coercion table.  See
    :meth:`DispatchRegistry.register_coercion`.
    """
    return registry.register_coercion(kind_a, kind_b, func)


def register_cast(
    kind_a: kind_like,
    kind_b: kind_like,
    func: caster | None = None
) -> caster | Callable[[caster], caster]:
    """Add an entry to the global cast table.  See
    :meth:`DispatchRegistry.register_cast`.
    """
    return registry.register_cast(kind_a, kind_b, func)


def lookup_coercion(kind_a: kind_like, kind_b: kind_like) -> Any:
    """Search the global coercion table."""
    return registry.lookup_coercion(kind_a, kind_b)


def lookup_cast(kind_a: kind_like, kind_b: kind_like) -> Any:
    """Search the global cast table."""
    return registry.lookup_cast(kind_a, kind_b)


def freeze() -> None:
    """Freeze the global registry."""
    registry.freeze()
