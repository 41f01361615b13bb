"""This module contains the base class for all ``pdcoerce`` type descriptors,
along with the alias table used to look them up.

A descriptor is an immutable, data-free description of a vector's *shape*: a
kind tag plus an optional parametric payload, such as the levels of a
categorical or the time zone of a datetime.  Descriptors are hashable and
compare by value, so they can be used freely as dictionary keys.
"""
from __future__ import annotations
import re
from types import MappingProxyType
from typing import Any, Iterable, Mapping

import numpy as np
import pandas as pd

from pdcoerce.util.type_hints import dtype_like, type_specifier


# matches ``name`` or ``name[arg, arg, ...]`` in the type specifier
# mini-language
SPECIFIER = re.compile(r"^\s*(?P<name>[^\[\]]+?)\s*(\[(?P<args>.*)\])?\s*$")


# splits arguments on commas that are not enclosed in quotes
TOKEN = re.compile(r"""'[^']*'|"[^"]*"|[^,]+""")


######################
####    PUBLIC    ####
######################


class VectorType:
    """Base class for all type descriptors.

    Subclasses must define a ``kind`` tag, which is used as the dispatch key
    in the :class:`DispatchRegistry <pdcoerce.DispatchRegistry>`, and a
    ``dtype`` describing how values are stored.  Parametrized types pass
    their payload to ``__init__`` as keyword arguments, where they are frozen
    into :attr:`params`.

    Notes
    -----
    Every type carries a collection of aliases which are used to identify it
    during :func:`resolve_type` calls:

        #.  Strings (e.g. ``"int"``).  Optional arguments can be provided in
            square brackets after the alias, and are passed to the type's
            :meth:`from_string` method.
        #.  Python types (e.g. ``int``).
        #.  numpy/pandas dtype objects or dtype classes, which are passed to
            :meth:`from_dtype`.

    Aliases are collected by the :func:`register` decorator.
    """

    kind: str = None
    aliases: set = set()
    dtype: dtype_like = np.dtype(object)
    missing: Any = pd.NA

    def __init__(self, **params):
        object.__setattr__(self, "_params", MappingProxyType(params))
        object.__setattr__(self, "_hash", None)

    ##########################
    ####    PROPERTIES    ####
    ##########################

    @property
    def params(self) -> Mapping[str, Any]:
        """A read-only mapping of this type's parametric payload."""
        return self._params

    @property
    def key(self) -> tuple:
        """The value used for equality comparisons and hashing."""
        return (self.kind,) + tuple(self.params.values())

    ############################
    ####    CONSTRUCTORS    ####
    ############################

    @classmethod
    def from_string(cls, *args: str) -> VectorType:
        """Build a type from arguments parsed out of the type specifier
        mini-language.
        """
        if args:
            raise TypeError(f"'{cls.kind}' does not accept arguments: {args}")
        return cls()

    @classmethod
    def from_dtype(cls, dtype: dtype_like) -> VectorType:
        """Build a type from a numpy/pandas dtype."""
        return cls()

    #######################
    ####    STORAGE    ####
    #######################

    def construct(self, data: Any) -> pd.Series:
        """Coerce raw data into this type's storage representation.

        Parameters
        ----------
        data : Any
            A list-like of scalar values or a :class:`pandas.Series`.

        Returns
        -------
        pandas.Series
            A new series with a fresh ``RangeIndex`` and this type's
            :attr:`dtype`.
        """
        if isinstance(data, pd.Series):
            series = data.reset_index(drop=True)
        else:
            series = pd.Series(list(data), dtype=object)
        if series.dtype == object:
            series = fill_missing(series)
        return series.astype(self.dtype)

    def concat(self, series: Iterable[pd.Series]) -> pd.Series:
        """Join already-cast storage in order."""
        series = [s.astype(self.dtype, copy=False) for s in series]
        if not series:
            return self.construct([])
        result = pd.concat(series, ignore_index=True)
        return result.astype(self.dtype, copy=False)

    def empty(self):
        """Construct the zero-length identity probe for this type."""
        from pdcoerce.vector import Vector
        return Vector(self.construct([]), self)

    def na(self, n: int):
        """Construct a vector of ``n`` missing values of this type."""
        from pdcoerce.vector import Vector
        return Vector(self.construct([None] * n), self)

    ########################
    ####    ORDERING    ####
    ########################

    def finer_than(self, other: VectorType) -> bool:
        """Check whether this type can represent every value of ``other``.

        This is a reflexive partial order.  Types with no defined relation are
        incomparable, meaning that this method returns ``False`` in both
        directions.  It is the resolver, not the descriptor, that decides
        what to do about that.
        """
        return self == other

    ###############################
    ####    SPECIAL METHODS    ####
    ###############################

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} objects are immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} objects are immutable")

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, VectorType):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        if self._hash is None:
            object.__setattr__(self, "_hash", hash(self.key))
        return self._hash

    def __repr__(self) -> str:
        params = ", ".join(f"{k}={repr(v)}" for k, v in self.params.items())
        return f"{type(self).__name__}({params})"

    def __str__(self) -> str:
        if not self.params:
            return self.kind
        args = ", ".join(str(v) for v in self.params.values())
        return f"{self.kind}[{args}]"


class TypeRegistry:
    """A global table connecting aliases to their types.

    This is populated by the :func:`register` decorator and queried by
    :func:`resolve_type`.  It does not hold any dispatch information, which
    lives in the :class:`DispatchRegistry <pdcoerce.DispatchRegistry>`.
    """

    def __init__(self):
        self.aliases: dict[Any, type] = {}
        self.kinds: dict[str, type] = {}

    def add(self, cls: type) -> None:
        """Add a type and its aliases to the registry."""
        if not (isinstance(cls, type) and issubclass(cls, VectorType)):
            raise TypeError(f"can only register VectorType subclasses: {cls}")
        if not isinstance(cls.kind, str) or not cls.kind:
            raise TypeError(f"{cls.__name__} must define a string 'kind'")
        if cls.kind in self.kinds:
            raise ValueError(f"kind '{cls.kind}' is already registered")

        # a type's kind is always one of its aliases
        aliases = set(cls.aliases) | {cls.kind}
        conflicts = [a for a in aliases if a in self.aliases]
        if conflicts:
            raise ValueError(f"aliases are already registered: {conflicts}")

        self.kinds[cls.kind] = cls
        for alias in aliases:
            self.aliases[alias] = cls

    def __contains__(self, kind: str) -> bool:
        return kind in self.kinds

    def __getitem__(self, kind: str) -> type:
        return self.kinds[kind]


registry = TypeRegistry()


def register(cls: type) -> type:
    """Class decorator that adds a :class:`VectorType` to the alias table."""
    registry.add(cls)
    return cls


def resolve_type(typespec: type_specifier | VectorType) -> VectorType:
    """Interpret a type specifier as a :class:`VectorType`.

    Parameters
    ----------
    typespec : type specifier
        A :class:`VectorType` instance or subclass, a string in the
        type specifier mini-language (e.g. ``"int"``,
        ``"categorical[a, b]"``), a Python type, or a numpy/pandas dtype.

    Returns
    -------
    VectorType
        The resolved type.

    Raises
    ------
    TypeError
        If the specifier could not be interpreted.

    Examples
    --------
    .. doctest::

        >>> resolve_type("double")
        DoubleType()
        >>> resolve_type("categorical[a, b]")
        CategoricalType(levels=('a', 'b'))
    """
    if isinstance(typespec, VectorType):
        return typespec

    if isinstance(typespec, type) and issubclass(typespec, VectorType):
        return typespec()

    if isinstance(typespec, str):
        return resolve_string(typespec)

    if isinstance(typespec, (np.dtype, pd.api.extensions.ExtensionDtype)):
        return resolve_dtype(typespec)

    if isinstance(typespec, type) and typespec in registry.aliases:
        return registry.aliases[typespec]()

    raise TypeError(f"could not interpret type specifier: {repr(typespec)}")


def resolve_string(typespec: str) -> VectorType:
    """Parse a string in the type specifier mini-language."""
    match = SPECIFIER.match(typespec)
    if match is None:
        raise TypeError(f"invalid type specifier: {repr(typespec)}")

    name = match.group("name")
    cls = registry.aliases.get(name)
    if cls is None:
        raise TypeError(f"unrecognized type alias: {repr(name)}")

    args = match.group("args")
    if args is None:
        return cls.from_string()

    tokens = [t.group().strip() for t in TOKEN.finditer(args)]
    return cls.from_string(*(strip_quotes(t) for t in tokens if t))


def resolve_dtype(dtype: dtype_like) -> VectorType:
    """Interpret a numpy/pandas dtype as a :class:`VectorType`."""
    # NOTE: numpy dtypes compare equal to strings, so only dtype classes are
    # used as keys (e.g. pd.CategoricalDtype)
    cls = registry.aliases.get(type(dtype), None)
    if cls is not None:
        return cls.from_dtype(dtype)

    # fall back to numpy's character codes
    if isinstance(dtype, np.dtype):
        fallback = {
            "b": "logical",
            "i": "integer",
            "u": "integer",
            "f": "double",
            "U": "character",
            "S": "character",
            "M": "datetime",
        }
        if dtype.kind in fallback:
            return registry[fallback[dtype.kind]].from_dtype(dtype)

    raise TypeError(f"no type corresponds to dtype: {repr(dtype)}")


#######################
####    PRIVATE    ####
#######################


def strip_quotes(token: str) -> str:
    """Remove matching quotes from a parsed argument."""
    if len(token) >= 2 and token[0] == token[-1] and token[0] in "'\"":
        return token[1:-1]
    return token


def fill_missing(series: pd.Series) -> pd.Series:
    """Replace every missing value in an object series with ``None``, which
    all pandas dtypes accept.
    """
    values = series.to_numpy(dtype=object, copy=True)
    mask = np.fromiter((is_missing(x) for x in values), bool, len(values))
    values[mask] = None
    return pd.Series(values, dtype=object)


def is_missing(value: Any) -> bool:
    """Check whether a scalar is a missing value.  List-like values are never
    considered missing.
    """
    if value is None:
        return True
    if isinstance(value, (list, tuple, dict, set, np.ndarray, pd.Series)):
        return False
    return bool(pd.isna(value))
