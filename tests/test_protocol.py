from __future__ import annotations

import pytest

from tests.scheme import Raises

from pdcoerce import (
    ANY, UNHANDLED, CategoricalType, DispatchRegistry, IncompatibleCast,
    IncompatibleType, IntegerType, RegistrationConflict, as_vector,
    identity, lossy_positions, no_cast, no_common_type, reconstruct,
    register_kind, same_type
)
from pdcoerce.convert import any_to_list, list_to_any


#####################
####    TESTS    ####
#####################


@pytest.mark.parametrize("original, restored, expected", [
    ([1, 2, 10.5], [1, 2, 10], {2}),
    ([1, None, 3], [1, None, None], {2}),
    (["a", "b"], ["a", "b"], set()),
    ([None, None], [1, 2], set()),
    ([], [], set()),
])
def test_lossy_positions_compares_non_missing_values(
    original,
    restored,
    expected
):
    assert lossy_positions(original, restored) == frozenset(expected)


def test_resolver_building_blocks():
    x = CategoricalType(["a"])
    y = CategoricalType(["b"])

    assert identity(x, y, True) is x
    assert same_type(x, CategoricalType(["a"]), True) is x
    with Raises(IncompatibleType, "payloads differ"):
        same_type(x, y, True)
    msg = r"'categorical\[a\]' and 'categorical\[b\]'"
    with Raises(IncompatibleType, msg):
        no_common_type(x, y, False)


def test_caster_building_blocks():
    vector = as_vector(["a", "b", None], "categorical[a, b]")
    target = CategoricalType(["a"])

    result = reconstruct(vector, target)
    assert result.value.type == target
    assert result.lossy == frozenset({1})

    with Raises(IncompatibleCast, r"cannot cast 'categorical\[a, b\]'"):
        no_cast(vector, IntegerType())


def test_register_kind_populates_standard_entries():
    registry = DispatchRegistry()
    register_kind("widget", self_cast=reconstruct, registry=registry)

    assert registry.lookup_coercion("widget", "null") is identity
    assert registry.lookup_coercion("widget", "unspecified") is identity
    assert registry.lookup_coercion("widget", ANY) is no_common_type
    assert registry.lookup_cast("widget", "widget") is reconstruct
    assert registry.lookup_cast("widget", ANY) is no_cast
    assert registry.lookup_cast("widget", "list") is any_to_list
    assert registry.lookup_cast("list", "widget") is list_to_any

    # real coercion pairs are left to the owner
    assert registry.lookup_coercion("widget", "widget") is UNHANDLED


def test_register_kind_can_skip_decomposed_form():
    registry = DispatchRegistry()
    register_kind(
        "gadget",
        self_cast=reconstruct,
        decomposable=False,
        registry=registry
    )
    assert registry.lookup_cast("gadget", "list") is UNHANDLED
    assert registry.lookup_cast("list", "gadget") is UNHANDLED


def test_register_kind_twice_is_a_conflict():
    registry = DispatchRegistry()
    register_kind("widget", self_cast=reconstruct, registry=registry)
    with Raises(RegistrationConflict, "already registered"):
        register_kind("widget", self_cast=reconstruct, registry=registry)


def test_register_kind_requires_explicit_self_cast():
    registry = DispatchRegistry()
    with pytest.raises(TypeError):
        register_kind("widget", registry=registry)
