from __future__ import annotations

import numpy as np
import pytest

from tests.binned import BinnedType

from pdcoerce import (
    DoubleType, IncompatibleType, IntegerType, as_vector, cast_to, combine,
    resolve_common_type, resolve_type
)
from pdcoerce.testing import check_kind
from pdcoerce.types import is_missing


####################
####    DATA    ####
####################


COARSE = BinnedType([0, 2.5, 5, 7.5, 10])
FINE = BinnedType([0, 0.25, 0.5, 0.75, 1])


#####################
####    TESTS    ####
#####################


def test_binned_type_is_resolvable_by_alias():
    assert resolve_type("bins[0, 2.5, 5]") == BinnedType([0, 2.5, 5])
    assert resolve_type("binned[5, 0, 2.5, 0]") == BinnedType([0, 2.5, 5])
    assert str(BinnedType([1, 0])) == "binned[0.0, 1.0]"


def test_binned_combined_with_double_gives_double():
    result = combine(as_vector([2.5, 7.5], COARSE), [0.5])
    assert result.type == DoubleType()
    assert result.to_list() == [2.5, 7.5, 0.5]


def test_binned_combined_with_binned_takes_union_of_boundaries():
    x = as_vector([0.5], FINE)
    y = as_vector([5.0], BinnedType([0, 2.5, 5, 7.5]))
    result = combine(x, y)

    assert result.type.boundaries == (0, 0.25, 0.5, 0.75, 1, 2.5, 5, 7.5)
    assert result.to_list() == [0.5, 5.0]


def test_binned_coercion_is_commutative():
    forward = resolve_common_type(COARSE, FINE)
    assert forward == resolve_common_type(FINE, COARSE)
    assert resolve_common_type("double", COARSE) == DoubleType()
    with pytest.raises(IncompatibleType):
        resolve_common_type(COARSE, "character")
    with pytest.raises(IncompatibleType):
        resolve_common_type("integer", COARSE)


def test_binned_rebinning_flags_values_outside_boundaries():
    vector = as_vector([0.5, 5.0, None], COARSE)
    result = cast_to(vector, BinnedType([0, 1]))

    assert result.lossy == frozenset({1})
    values = result.value.to_list()
    assert values[0] == 0.5
    assert is_missing(values[1])
    assert is_missing(values[2])


def test_double_cast_to_binned_flags_values_outside_boundaries():
    result = cast_to([-1.0, 5.0, 11.0], COARSE)
    assert result.lossy == frozenset({0, 2})
    assert result.value.type == COARSE
    assert np.isnan(result.value.data.iloc[0])


def test_binned_reaches_integer_through_decomposed_form():
    result = cast_to(as_vector([2.5, 7.0], COARSE), "integer")
    assert result.value.type == IntegerType()
    assert result.value.to_list() == [2, 7]
    assert result.lossy == frozenset({0})


def test_binned_obeys_coercion_laws():
    check_kind(
        [
            as_vector([0.5, None], FINE),
            as_vector([5.0], COARSE),
            as_vector([], BinnedType([1, 2])),
        ],
        partners=["double", "integer", "character", "logical"]
    )
