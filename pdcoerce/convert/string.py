"""This module contains coercion and cast rules for character data."""
# pylint: disable=unused-argument
from pdcoerce import types
from pdcoerce.protocol import CastResult, reconstruct, register_kind, same_type
from pdcoerce.registry import register_cast, register_coercion
from pdcoerce.vector import Vector


register_kind(types.CharacterType, self_cast=reconstruct)


register_coercion("character", "character", same_type)


@register_coercion("character", "categorical")
def character_categorical(
    x: types.CharacterType,
    y: types.CategoricalType,
    strict: bool
) -> types.CharacterType:
    """Character data can hold any categorical level."""
    return x


@register_cast("character", "categorical")
def character_to_categorical(
    vector: Vector,
    target: types.CategoricalType
) -> CastResult:
    """Convert strings to categorical data.  Values that are not levels of the
    target become missing and are flagged.
    """
    data = target.construct(vector.data)
    lossy = vector.data.notna() & data.isna()
    positions = frozenset(int(i) for i in lossy[lossy].index)
    return CastResult(Vector(data, target), positions)
