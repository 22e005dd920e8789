"""
Structural device contract.

`DeviceLike` lets the domain layer type against "anything that looks like a
device descriptor" without importing the concrete `Device` class, so stores,
paths and tensors can be checked with `isinstance` without class-identity
coupling.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class DeviceLike(Protocol):
    """
    Duck-typed device contract.

    Any object exposing these members can describe the placement of a store
    or a tensor.
    """

    type: object
    index: Optional[int]

    def is_cpu(self) -> bool: ...
    def is_cuda(self) -> bool: ...
    def __str__(self) -> str: ...
