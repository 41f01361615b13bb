"""This module contains coercion and cast rules for categorical data.

Categoricals are ordered by containment of their level sets.  Two
categoricals unify to the finer of the two if one contains the other.
Otherwise, they can only be unified by taking the union of their levels,
which is only allowed in non-strict mode.
"""
# pylint: disable=unused-argument
from pdcoerce import types
from pdcoerce.errors import IncompatibleType
from pdcoerce.protocol import CastResult, register_kind
from pdcoerce.registry import register_cast, register_coercion
from pdcoerce.util.error import shorten_list
from pdcoerce.vector import Vector


@register_coercion("categorical", "categorical")
def categorical_categorical(
    x: types.CategoricalType,
    y: types.CategoricalType,
    strict: bool
) -> types.CategoricalType:
    """Unify two categoricals by level-set containment, or by union in
    non-strict mode.
    """
    if x.finer_than(y):
        return x
    if y.finer_than(x):
        return y
    if not strict:
        return x.union(y)

    missing = sorted(str(level) for level in y.level_set - x.level_set)
    raise IncompatibleType(
        x,
        y,
        detail=f"levels {shorten_list(missing)} are not present in '{x}'"
    )


def recode(vector: Vector, target: types.CategoricalType) -> CastResult:
    """Reassign categorical values to the target levels.  Values that are
    not levels of the target become missing and are flagged.
    """
    data = target.construct(vector.data)
    lossy = vector.data.notna() & data.isna()
    positions = frozenset(int(i) for i in lossy[lossy].index)
    return CastResult(Vector(data, target), positions)


register_kind(types.CategoricalType, self_cast=recode)


@register_cast("categorical", "character")
def categorical_to_character(
    vector: Vector,
    target: types.CharacterType
) -> CastResult:
    """Convert categorical data to strings.  This is always exact."""
    data = vector.data.astype(object).map(str, na_action="ignore")
    return CastResult(Vector(target.construct(data), target), frozenset())
