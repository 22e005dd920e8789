"""
Device descriptors for variable placement.

Every variable store is pinned to exactly one device, and every tensor it
owns must live there. This module provides the value object used for that
pinning:

- `DeviceType`: the category of a device (CPU or CUDA)
- `Device`: a normalized, hashable descriptor parsed from strings such as
  ``"cpu"`` or ``"cuda:0"``

Descriptors are plain values. They never allocate memory or probe hardware;
whether a backend can actually store data on a device is decided by the
tensor implementation.
"""

from __future__ import annotations

from enum import Enum
import re
from typing import Optional, Union


class DeviceType(Enum):
    """
    Kind of memory a device descriptor points at.

    Attributes
    ----------
    CPU : DeviceType
        Host memory.
    CUDA : DeviceType
        NVIDIA GPU memory.
    """

    CPU = "cpu"
    CUDA = "cuda"


class Device:
    """
    Normalized device descriptor.

    Parameters
    ----------
    device : str | Device
        ``"cpu"``, ``"cuda:<index>"`` with a non-negative integer index, or
        an existing `Device` (copied).

    Raises
    ------
    ValueError
        If a string is in neither accepted form.

    Notes
    -----
    Equality and hashing use ``(type, index)``, so descriptors parsed from
    the same string are interchangeable as dictionary keys.
    """

    __slots__ = ("type", "index")

    _SPEC = re.compile(r"^(?:(?P<cpu>cpu)|cuda:(?P<index>\d+))$")

    def __init__(self, device: Union[str, "Device"]) -> None:
        if isinstance(device, Device):
            self.type, self.index = device._key
            return

        m = self._SPEC.match(str(device))
        if m is None:
            raise ValueError(
                f"Invalid device '{device}'. Expected 'cpu' or 'cuda:<index>'"
            )
        if m.group("cpu"):
            self.type, self.index = DeviceType.CPU, None
        else:
            self.type, self.index = DeviceType.CUDA, int(m.group("index"))

    @property
    def _key(self) -> tuple[DeviceType, Optional[int]]:
        return self.type, self.index

    def __str__(self) -> str:
        if self.index is None:
            return self.type.value
        return f"{self.type.value}:{self.index}"

    def __repr__(self) -> str:
        return f"Device({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Device) and self._key == other._key

    def __hash__(self) -> int:
        return hash(self._key)

    def is_cpu(self) -> bool:
        """Return True if this descriptor names host memory."""
        return self.type == DeviceType.CPU

    def is_cuda(self) -> bool:
        """Return True if this descriptor names a CUDA GPU."""
        return self.type == DeviceType.CUDA


DeviceSpec = Union[str, Device]


def as_device(device: DeviceSpec) -> Device:
    """
    Normalize a device string or descriptor into a `Device`.

    Parameters
    ----------
    device : str | Device
        Value to normalize.

    Returns
    -------
    Device
        `device` itself if it already is a `Device`, otherwise a parsed one.
    """
    return device if isinstance(device, Device) else Device(device)
