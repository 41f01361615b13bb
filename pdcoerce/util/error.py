"""This module contains utility functions to help format errors raised by
`pdcoerce` internals.
"""
from .type_hints import list_like


def shorten_list(seq: list_like, max_length: int = 5) -> str:
    """Converts a list-like into an abridged string for use in error messages.
    """
    seq = list(seq)
    if len(seq) <= max_length:
        return str(seq)
    shortened = ", ".join(str(i) for i in seq[:max_length])
    return f"[{shortened}, ...] ({len(seq)})"


def shorten_positions(positions: frozenset[int], max_length: int = 5) -> str:
    """Format a set of lossy positions in ascending order."""
    return shorten_list(sorted(positions), max_length=max_length)
