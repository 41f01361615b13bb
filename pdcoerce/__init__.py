"""Common-type resolution and lossy-aware casting for pandas vectors.

Subpackages
-----------
convert
    The cast executor, along with coercion and cast rules for every built-in
    kind.

decorators
    Managed arguments for ``pdcoerce`` functions, whose defaults can be
    changed at runtime.

types
    Defines the type descriptors and the mini-language used to refer to them.

util
    Utilities for ``pdcoerce``-related functionality.

Modules
-------
coerce
    Resolution of the common type of two or more descriptors.

combine
    Concatenation of vectors with different types.

errors
    Exceptions and warnings raised by the engine.

protocol
    The extension protocol through which new kinds are admitted.

registry
    The dispatch tables that connect pairs of kinds to their rules.

testing
    Law checks for kinds registered through the extension protocol.

vector
    The ``Vector`` value, along with type detection for arbitrary data.
"""
from .types import (
    VectorType, NullType, UnspecifiedType, LogicalType, IntegerType,
    DoubleType, CharacterType, ListType, CategoricalType, DateType,
    DatetimeType, register, resolve_type
)
from .errors import (
    CoercionError, IncompatibleType, IncompatibleCast, RegistrationError,
    RegistrationConflict, RegistryFrozen, LossyCastWarning
)
from .registry import (
    ANY, UNHANDLED, DispatchRegistry, register_cast, register_coercion
)
from .vector import Vector, as_vector, detect_type
from .decorators.extension import extension_func, ExtensionFunc
from .protocol import (
    CastResult, identity, lossy_positions, no_cast, no_common_type,
    reconstruct, register_kind, same_type
)
from .coerce import common_type, resolve_common_type
from .convert import cast, cast_to
from .combine import combine
