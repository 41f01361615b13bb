"""This module contains coercion rules for vectors of missing values.

``null`` needs no entries at all, since the resolver treats it as absorbing and
the executor maps it to an empty vector of any target.  ``unspecified``
vectors are likewise cast by the executor itself, but need a rule for pairing
with one another.  Every other kind admits ``unspecified`` through
:func:`register_kind() <pdcoerce.protocol.register_kind>`.
"""
# pylint: disable=unused-argument
from pdcoerce import types
from pdcoerce.protocol import no_common_type
from pdcoerce.registry import ANY, register_coercion


@register_coercion("unspecified", "unspecified")
def unspecified_to_unspecified(
    x: types.UnspecifiedType,
    y: types.UnspecifiedType,
    strict: bool
) -> types.LogicalType:
    """Missing values with no other information default to logical."""
    return types.LogicalType()


register_coercion("unspecified", ANY, no_common_type)
