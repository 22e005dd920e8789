"""
Declarative initialization specifications.

A variable-creation call describes *how* its initial value should be drawn
with one of these small value objects; the infrastructure initialization
bridge turns the description into a concrete tensor.

Supported kinds
---------------
- `Const`: every element set to a fixed value
- `Randn`: normal distribution with given mean and standard deviation
- `Uniform`: uniform distribution over ``[lo, up)``
- `KaimingUniform`: He uniform initialization, bounds derived from fan-in
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Const:
    """Fill with a constant value."""

    value: float


@dataclass(frozen=True)
class Randn:
    """
    Normal distribution ``N(mean, stdev^2)``.

    Raises
    ------
    ValueError
        If `stdev` is negative.
    """

    mean: float = 0.0
    stdev: float = 1.0

    def __post_init__(self) -> None:
        if self.stdev < 0:
            raise ValueError(f"stdev must be non-negative, got {self.stdev}")


@dataclass(frozen=True)
class Uniform:
    """
    Uniform distribution over ``[lo, up)``.

    Raises
    ------
    ValueError
        If `lo` is greater than `up`.
    """

    lo: float
    up: float

    def __post_init__(self) -> None:
        if self.lo > self.up:
            raise ValueError(f"Uniform bounds out of order: lo={self.lo} up={self.up}")


@dataclass(frozen=True)
class KaimingUniform:
    """He uniform initialization; bounds are computed from the shape."""


Init = Union[Const, Randn, Uniform, KaimingUniform]
