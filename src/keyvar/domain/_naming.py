"""
Hierarchical variable naming.

Fully-qualified variable names are path segments joined by a reserved
separator, followed by the leaf name. Neither segments nor leaf names may
contain the separator, otherwise two different paths could map onto the same
key.
"""

from __future__ import annotations

from typing import Sequence

from ._errors import InvalidNameError

SEP = "|"


def validate_name(name: str, what: str = "variable name") -> str:
    """
    Check that `name` does not contain the separator.

    Parameters
    ----------
    name : str
        Segment or variable name to check.
    what : str, optional
        Label used in the error message.

    Returns
    -------
    str
        `name`, unchanged.

    Raises
    ------
    InvalidNameError
        If `name` contains `SEP`.
    """
    if SEP in name:
        raise InvalidNameError(name, what, SEP)
    return name


def join_name(segments: Sequence[str], name: str) -> str:
    """
    Build the fully-qualified name of `name` under `segments`.

    The root path (no segments) yields the leaf name alone.
    """
    validate_name(name)
    if not segments:
        return name
    return f"{SEP.join(segments)}{SEP}{name}"


def disambiguate(name: str, count: int) -> str:
    """Suffix used when `name` is already taken in a map of `count` entries."""
    return f"{name}__{count}"
