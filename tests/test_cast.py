from __future__ import annotations
import datetime
import warnings

import numpy as np
import pandas as pd
import pytest

from tests.scheme import Case, Raises, assert_vector, parametrize

from pdcoerce import (
    CastResult, CategoricalType, DatetimeType, IncompatibleCast, IntegerType,
    ListType, LossyCastWarning, Vector, as_vector, cast, cast_to, resolve_type
)
from pdcoerce.protocol import as_result
from pdcoerce.types import is_missing


####################
####    DATA    ####
####################


NA = None  # placeholder for a missing value in expected outputs


def cast_data():
    case = lambda data, target, expected, lossy=frozenset(): Case(
        {"target": target},
        data,
        (expected, frozenset(lossy))
    )

    return [
        # logical
        case(as_vector([True, False, None]), "integer", [1, 0, NA]),
        case(as_vector([True, False, None]), "double", [1.0, 0.0, NA]),

        # integer
        case([0, 1, 2, None], "logical", [False, True, True, NA], {2}),
        case([1, -5, None], "double", [1.0, -5.0, NA]),
        case([2**53, -2**53, 2**60], "double", [2.0**53, -2.0**53, 2.0**60]),
        case([2**53 + 1], "double", [2.0**53], {0}),

        # double
        case([1, 2, 10.5], "integer", [1, 2, 10], {2}),
        case([1.0, 2.0, 10.0], "integer", [1, 2, 10]),
        case([-1.5, None, 3.0], "integer", [-1, NA, 3], {0}),
        case([np.inf, -np.inf, 1e20], "integer", [NA, NA, NA], {0, 1, 2}),
        case([1.0, 0.0, 0.5, None], "logical", [True, False, True, NA], {2}),

        # character/categorical
        case(
            ["a", "b", "z", None],
            "categorical[a, b]",
            ["a", "b", NA, NA],
            {2}
        ),
        case(as_vector(["a", None], "categorical[a]"), "character", ["a", NA]),
        case(
            as_vector(["a", "b", None], "categorical[a, b]"),
            "categorical[b, c]",
            [NA, "b", NA],
            {0}
        ),
        case(
            as_vector(["a", "b"], "categorical[a, b]"),
            "categorical[b, a]",
            ["a", "b"]
        ),

        # dates and times
        case(
            [datetime.date(2020, 1, 1), None],
            "datetime[UTC]",
            [pd.Timestamp("2020-01-01", tz="UTC"), NA]
        ),
        case(
            [datetime.date(2020, 1, 1)],
            "datetime[US/Pacific]",
            [pd.Timestamp("2020-01-01", tz="US/Pacific")]
        ),
        case(
            [datetime.date(2023, 11, 5), datetime.date(2023, 11, 6)],
            "datetime[America/Havana]",
            [NA, pd.Timestamp("2023-11-06", tz="America/Havana")],
            {0}
        ),
        case(
            [datetime.date(2023, 3, 12)],
            "datetime[America/Havana]",
            [pd.Timestamp("2023-03-12 01:00", tz="America/Havana")],
            {0}
        ),
        case(
            [datetime.datetime(2020, 1, 1), datetime.datetime(2020, 1, 2, 12)],
            "date",
            [pd.Period("2020-01-01", "D"), pd.Period("2020-01-02", "D")],
            {1}
        ),
        case(
            [pd.Timestamp("2020-01-01 23:00", tz="US/Pacific")],
            "date",
            [pd.Period("2020-01-01", "D")],
            {0}
        ),
        case(
            [pd.Timestamp("2020-01-01", tz="UTC")],
            "datetime[US/Pacific]",
            [pd.Timestamp("2019-12-31 16:00", tz="US/Pacific")]
        ),
        case(
            [datetime.datetime(2020, 1, 1)],
            "datetime[UTC]",
            [pd.Timestamp("2020-01-01", tz="UTC")]
        ),
        case(
            [pd.Timestamp("2020-01-01", tz="UTC")],
            "datetime",
            [pd.Timestamp("2020-01-01")]
        ),

        # missing values
        case([None, None], "integer", [NA, NA]),
        case([None, None], "categorical[a]", [NA, NA]),
        case([], "datetime[UTC]", []),
        case(None, "character", []),

        # decomposition through list
        case(
            as_vector([1, 2, None], CategoricalType([1, 2])),
            "double",
            [1.0, 2.0, NA]
        ),
        case(
            as_vector([[1], [2, 3], None], "list"),
            "integer",
            [1, NA, NA],
            {1}
        ),
        case(as_vector([[1.5], [2.0]], "list"), "integer", [1, 2], {0}),

        # invalid
        case([True], "character", Raises(IncompatibleCast, "'logical'"), ()),
        case([1, 2], "date", Raises(IncompatibleCast, "'integer'"), ()),
        case(["a"], "double", Raises(IncompatibleCast, "'character'"), ()),
        case([1], "null", Raises(IncompatibleCast, "null vectors"), ()),
        case(
            as_vector([["a"]], "list"),
            "integer",
            Raises(IncompatibleCast, "'list' to 'integer'"),
            ()
        ),
    ]


#####################
####    TESTS    ####
#####################


@parametrize(*cast_data())
def test_cast_to_follows_built_in_rules(case: Case):
    target = case.kwargs["target"]

    # invalid
    if isinstance(case.output[0], Raises):
        with case.output[0]:
            cast_to(case.input, target)
        return

    # valid
    expected, lossy = case.output
    result = cast_to(case.input, target)

    assert result.value.type == resolve_type(target)
    assert len(result.value) == len(expected)
    for idx, (observed, value) in enumerate(zip(result.value, expected)):
        if value is NA:
            assert is_missing(observed), (
                f"cast_to({repr(case.input)}, {repr(target)}) did not "
                f"produce a missing value at index {idx}: {result.value}"
            )
        else:
            assert observed == value, (
                f"cast_to({repr(case.input)}, {repr(target)}) failed at "
                f"index {idx}:\n"
                f"expected: {repr(value)}\n"
                f"received: {repr(observed)}"
            )

    assert result.lossy == lossy, (
        f"cast_to({repr(case.input)}, {repr(target)}) reported the wrong "
        f"lossy positions:\n"
        f"expected: {sorted(lossy)}\n"
        f"received: {sorted(result.lossy)}"
    )


@pytest.mark.parametrize("data, spec", [
    ([True, None], "logical"),
    ([1, None, 3], "integer"),
    ([1.5, None], "double"),
    (["a", None], "character"),
    ([["a", "b"], None], "list"),
    (["a", None], "categorical[a, b]"),
    ([datetime.date(2020, 1, 1), None], "date"),
    ([datetime.datetime(2020, 1, 1)], "datetime[US/Pacific]"),
])
def test_cast_to_own_type_returns_equal_copy(data, spec):
    vector = as_vector(data, spec)
    result = cast_to(vector, vector.type)

    assert result.lossy == frozenset()
    assert_vector(result.value, vector, f"cast_to({vector}, '{spec}')")
    assert result.value.data is not vector.data


def test_cast_to_reordered_levels_rebuilds_storage():
    vector = as_vector(["a", None, "b"], "categorical[a, b]")
    target = CategoricalType(["b", "a"])
    result = cast_to(vector, target)

    assert result.lossy == frozenset()
    assert result.value.type.levels == ("b", "a")
    assert list(result.value.data.cat.categories) == ["b", "a"]
    assert result.value.to_list()[::2] == ["a", "b"]


@pytest.mark.parametrize("data, spec", [
    ([True, None], "logical"),
    ([1, None, 3], "integer"),
    ([1.5, None], "double"),
    (["a", None], "character"),
    (["a", None], "categorical[a, b]"),
    ([datetime.date(2020, 1, 1), None], "date"),
    ([pd.Timestamp("2020-01-01 12:00", tz="UTC"), None], "datetime[UTC]"),
])
def test_decomposed_form_round_trips_exactly(data, spec):
    vector = as_vector(data, spec)
    decomposed = cast_to(vector, ListType())

    assert decomposed.value.to_list()[0] == [vector.to_list()[0]]
    assert decomposed.value.to_list()[1] is None

    restored = cast_to(decomposed.value, vector.type)
    assert restored.lossy == frozenset()
    assert_vector(restored.value, vector, f"round trip of '{spec}'")


def test_cast_to_null_source_produces_empty_target():
    result = cast_to(as_vector([]), "categorical[a]")
    assert len(result.value) == 0
    assert result.value.type == CategoricalType(["a"])


def test_cast_to_does_not_mutate_input():
    vector = as_vector([1.5, 2.5])
    before = vector.to_list()
    cast_to(vector, "integer")
    assert vector.to_list() == before
    assert vector.data.dtype == np.float64


def test_cast_emits_lossy_cast_warning_by_default():
    with pytest.warns(LossyCastWarning, match=r"input 0 at \[1\]") as record:
        result = cast([1, 2.5], "integer")

    assert result.to_list() == [1, 2]
    warning = record[0].message
    assert warning.lossy == {0: frozenset({1})}
    assert warning.target == IntegerType()


def test_cast_lossy_ignore_suppresses_warning():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        result = cast([1, 2.5], "integer", lossy="ignore")

    assert result.to_list() == [1, 2]


def test_cast_lossless_never_warns():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        result = cast([1.0, 2.0], "integer")

    assert result.type == IntegerType()


def test_cast_rejects_invalid_lossy_rule():
    with Raises(ValueError, "`lossy` must be one of"):
        cast([1.0], "integer", lossy="raise")


def test_incompatible_cast_records_source_and_target():
    with pytest.raises(IncompatibleCast) as exc_info:
        cast_to([1, 2], "date")

    assert exc_info.value.source == IntegerType()
    assert str(exc_info.value.target) == "date"


def test_as_result_rejects_malformed_caster_output():
    source = as_vector([1, 2])
    target = IntegerType()

    with Raises(TypeError, "must return a CastResult"):
        as_result("bad", source, target)
    with Raises(TypeError, "wrong type"):
        as_result(CastResult(as_vector([1.0, 2.0])), source, target)
    with Raises(TypeError, "changed the length"):
        as_result(CastResult(as_vector([1])), source, target)

    # plain tuples are accepted
    result = as_result((source, [0]), source, target)
    assert result.lossy == frozenset({0})


def test_datetime_cast_preserves_instants():
    instant = pd.Timestamp("2021-06-01 08:30", tz="Europe/Berlin")
    result = cast_to([instant], DatetimeType("Asia/Tokyo"))

    assert result.value.to_list()[0] == instant
    assert result.value.to_list()[0].tz is not None
    assert isinstance(result.value, Vector)
