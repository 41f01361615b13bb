"""This package contains various utilities related to ``pdcoerce``
functionality.

Modules
-------
error
    Utilities for formatting errors raised by ``pdcoerce`` functions and
    methods.

time
    Time zone normalization for datetime types.

type_hints
    Type hints for mypy and other static type checkers.
"""
