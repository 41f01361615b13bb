from __future__ import annotations
from itertools import product

import pytest

from tests.scheme import Case, Raises, parametrize

from pdcoerce import (
    CategoricalType, CharacterType, DateType, DatetimeType, DoubleType,
    IncompatibleType, IntegerType, ListType, LogicalType, NullType,
    UnspecifiedType, common_type, resolve_common_type
)


####################
####    DATA    ####
####################


# every built-in type, with a few payload variations
ALL_TYPES = [
    NullType(),
    UnspecifiedType(),
    LogicalType(),
    IntegerType(),
    DoubleType(),
    CharacterType(),
    ListType(),
    CategoricalType(["a"]),
    CategoricalType(["a", "b"]),
    CategoricalType(["c"]),
    DateType(),
    DatetimeType(),
    DatetimeType("UTC"),
    DatetimeType("US/Pacific"),
]


def resolve_common_type_data():
    case = lambda x, y, expected, strict=True: Case(
        {"strict": strict},
        (x, y),
        expected
    )

    return [
        # numeric hierarchy
        case("logical", "logical", LogicalType()),
        case("logical", "integer", IntegerType()),
        case("integer", "logical", IntegerType()),
        case("logical", "double", DoubleType()),
        case("integer", "double", DoubleType()),
        case("double", "integer", DoubleType()),

        # missing values
        case("null", "character", CharacterType()),
        case("date", "null", DateType()),
        case("null", "null", NullType()),
        case("unspecified", "integer", IntegerType()),
        case("list", "unspecified", ListType()),
        case("unspecified", "unspecified", LogicalType()),

        # character/categorical
        case("character", "character", CharacterType()),
        case("character", "categorical[a]", CharacterType()),
        case("categorical[a]", "character", CharacterType()),
        case("categorical[a, b]", "categorical[b]", CategoricalType("ab")),
        case("categorical[b]", "categorical[a, b]", CategoricalType("ab")),
        case("categorical[a, b]", "categorical[b, a]", CategoricalType("ab")),
        case("categorical[a]", "categorical[b]", CategoricalType("ab"), False),

        # dates and times
        case("date", "date", DateType()),
        case("date", "datetime[UTC]", DatetimeType("UTC")),
        case("datetime", "date", DatetimeType()),
        case("datetime", "datetime[UTC]", DatetimeType("UTC")),
        case("datetime[UTC]", "datetime", DatetimeType("UTC")),
        case(
            "datetime[US/Pacific]",
            "datetime[US/Pacific]",
            DatetimeType("US/Pacific")
        ),
        case(
            "datetime[US/Pacific]",
            "datetime[Europe/Berlin]",
            DatetimeType("UTC")
        ),

        # invalid
        case(
            "integer",
            "character",
            Raises(IncompatibleType, "'integer' and 'character'")
        ),
        case(
            "character",
            "integer",
            Raises(IncompatibleType, "'character' and 'integer'")
        ),
        case(
            "categorical[a]",
            "categorical[b]",
            Raises(IncompatibleType, r"levels \['b'\] are not present")
        ),
        case("date", "double", Raises(IncompatibleType, "'date'")),
        case("list", "integer", Raises(IncompatibleType, "'list'")),
        case("unspecified", "ANY", Raises(TypeError, "unrecognized")),
    ]


#####################
####    TESTS    ####
#####################


@parametrize(*resolve_common_type_data())
def test_resolve_common_type_follows_built_in_rules(case: Case):
    x, y = case.input

    # valid
    if case.is_valid:
        result = resolve_common_type(x, y, **case.kwargs)
        assert result == case.output, (
            f"resolve_common_type({repr(x)}, {repr(y)}, "
            f"{case.signature()}) failed:\n"
            f"expected: {repr(case.output)}\n"
            f"received: {repr(result)}"
        )

    # invalid
    else:
        with case.output:
            resolve_common_type(x, y, **case.kwargs)


@pytest.mark.parametrize("strict", [True, False])
@pytest.mark.parametrize("x, y", list(product(ALL_TYPES, ALL_TYPES)))
def test_resolve_common_type_is_commutative(x, y, strict):
    def attempt(a, b):
        try:
            return resolve_common_type(a, b, strict=strict)
        except IncompatibleType:
            return IncompatibleType

    assert attempt(x, y) == attempt(y, x)


@pytest.mark.parametrize("x", ALL_TYPES)
def test_null_is_an_identity_for_every_type(x):
    assert resolve_common_type(x, NullType()) == x
    assert resolve_common_type(NullType(), x) == x


@pytest.mark.parametrize("x", ALL_TYPES)
def test_resolve_common_type_is_idempotent(x):
    expected = LogicalType() if isinstance(x, UnspecifiedType) else x
    assert resolve_common_type(x, x) == expected


def test_incompatible_type_names_arguments_in_caller_order():
    with pytest.raises(IncompatibleType) as exc_info:
        resolve_common_type("character", "integer")

    assert exc_info.value.x == CharacterType()
    assert exc_info.value.y == IntegerType()
    assert exc_info.value.index is None


def test_categorical_error_detail_survives_swapped_dispatch():
    with pytest.raises(IncompatibleType) as exc_info:
        resolve_common_type("categorical[c]", "categorical[a, b]")

    assert exc_info.value.x == CategoricalType(["c"])
    assert exc_info.value.y == CategoricalType(["a", "b"])
    assert exc_info.value.detail


def test_categorical_union_in_non_strict_mode_keeps_first_seen_order():
    result = resolve_common_type(
        "categorical[b, a]",
        "categorical[c, a]",
        strict=False
    )
    assert result.levels == ("b", "a", "c")


def test_common_type_folds_from_left_to_right():
    assert common_type() == NullType()
    assert common_type("integer") == IntegerType()
    assert common_type("logical", "integer", "double") == DoubleType()
    assert common_type("null", "unspecified", "integer") == IntegerType()


def test_common_type_reports_index_of_first_incompatible_type():
    with pytest.raises(IncompatibleType) as exc_info:
        common_type("integer", "character", "double")

    err = exc_info.value
    assert err.index == 1
    assert err.x == IntegerType()
    assert err.y == CharacterType()
    assert "(input 1)" in str(err)


def test_common_type_reports_accumulated_type():
    with pytest.raises(IncompatibleType) as exc_info:
        common_type("logical", "double", "null", "date")

    err = exc_info.value
    assert err.index == 3
    assert err.x == DoubleType()
    assert err.y == DateType()


def test_common_type_passes_strict_to_each_step():
    types = ("categorical[a]", "categorical[b]", "categorical[c]")
    with Raises(IncompatibleType):
        common_type(*types)

    result = common_type(*types, strict=False)
    assert result == CategoricalType(["a", "b", "c"])
