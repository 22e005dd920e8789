"""
Tensor interface definitions.

This module defines the domain-level interface for the tensor handles a
variable store hands out. The protocol only covers what the store needs from
a tensor: placement, shape, gradient-tracking control, reference-sharing
copies and in-place value copies.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from typing_extensions import Self

from .device._device_protocol import DeviceLike


@runtime_checkable
class ITensor(Protocol):
    """
    Tensor handle interface.

    Notes
    -----
    - Several handles may refer to the same underlying buffer (see
      `shallow_clone`); mutating the buffer through one is visible through
      all of them.
    - `requires_grad` is a property of the buffer, not of the handle.
    """

    @property
    def shape(self) -> tuple[int, ...]:
        """Return the shape of the tensor."""
        ...

    @property
    def device(self) -> DeviceLike:
        """Return the device on which the tensor's storage resides."""
        ...

    @property
    def dtype(self) -> Any:
        """Return the element dtype."""
        ...

    @property
    def requires_grad(self) -> bool:
        """Whether gradients are tracked for this tensor."""
        ...

    @requires_grad.setter
    def requires_grad(self, value: bool) -> None: ...

    def set_requires_grad(self, value: bool) -> Self:
        """Toggle gradient tracking in place and return this handle."""
        ...

    def numel(self) -> int:
        """Return the total number of elements."""
        ...

    def shallow_clone(self) -> Self:
        """Return a new handle sharing storage and autograd state."""
        ...

    def copy_from(self, other: "ITensor") -> None:
        """Copy the values of `other` into this tensor in place."""
        ...

    def to_numpy(self) -> Any:
        """Return the host array backing this tensor."""
        ...
