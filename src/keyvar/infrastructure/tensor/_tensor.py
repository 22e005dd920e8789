"""
Concrete Tensor implementation (NumPy backend).

This module provides the numeric buffer handles that variable stores own and
hand out. CPU tensors are backed by NumPy arrays; CUDA descriptors are
accepted for placement metadata but allocating storage on them raises
`DeviceNotSupportedError`.

Design notes
------------
- A `Tensor` is a *handle* onto a shared `_TensorImpl` holding the array and
  the gradient-tracking flag `requires_grad`. `shallow_clone()` makes
  another handle onto the same impl, so a store and its callers observe the
  same values and the same gradient-tracking flag.
- In-place writes (`copy_from`, `copy_from_numpy`, `fill`) into a tensor
  that requires gradients are refused while gradient mode is enabled; wrap
  them in `no_grad()`.
"""

from __future__ import annotations

from typing import Any, Sequence, Union

import numpy as np

from ...domain._tensor import ITensor
from ...domain._errors import DeviceMismatchError, DeviceNotSupportedError
from ...domain.device._device import Device, DeviceSpec, as_device
from ._grad_mode import is_grad_enabled

Number = Union[int, float]

DEFAULT_DTYPE = np.float32


class _TensorImpl:
    """Storage and gradient-tracking flag shared by all handles of a tensor."""

    __slots__ = ("data", "device", "requires_grad")

    def __init__(self, data: np.ndarray, device: Device, requires_grad: bool) -> None:
        self.data = data
        self.device = device
        self.requires_grad = bool(requires_grad)


def _normalize_shape(shape: Sequence[int]) -> tuple[int, ...]:
    if isinstance(shape, (int, np.integer)):
        return (int(shape),)
    out = tuple(int(d) for d in shape)
    for d in out:
        if d < 0:
            raise ValueError(f"Invalid shape {out}: dimensions must be non-negative")
    return out


class Tensor(ITensor):
    """
    Concrete tensor handle (NumPy CPU backend).

    Parameters
    ----------
    shape : Sequence[int]
        Tensor shape.
    device : Device | str
        Device placement.
    requires_grad : bool, optional
        Whether gradients should be tracked. Defaults to False.
    dtype : np.dtype, optional
        Element dtype. Defaults to float32.

    Raises
    ------
    DeviceNotSupportedError
        If `device` is not a CPU device.

    Notes
    -----
    Storage is zero-initialized.
    """

    __slots__ = ("_impl",)

    def __init__(
        self,
        shape: Sequence[int],
        device: DeviceSpec,
        *,
        requires_grad: bool = False,
        dtype: Any = DEFAULT_DTYPE,
    ) -> None:
        dev = as_device(device)
        if not dev.is_cpu():
            raise DeviceNotSupportedError("allocate", str(dev))
        data = np.zeros(_normalize_shape(shape), dtype=np.dtype(dtype))
        self._impl = _TensorImpl(data, dev, requires_grad)

    @classmethod
    def _from_impl(cls, impl: _TensorImpl) -> "Tensor":
        obj = cls.__new__(cls)  # bypass __init__
        obj._impl = impl
        return obj

    def __repr__(self) -> str:
        return (
            f"Tensor(shape={self.shape}, device={self.device}, dtype={self.dtype}, "
            f"requires_grad={self.requires_grad})"
        )

    # ----------------------------
    # Placement and metadata
    # ----------------------------
    @property
    def shape(self) -> tuple[int, ...]:
        """Return the tensor shape."""
        return tuple(self._impl.data.shape)

    @property
    def device(self) -> Device:
        """Return the device on which this tensor resides."""
        return self._impl.device

    @property
    def dtype(self) -> np.dtype:
        """Return the element dtype of this tensor."""
        return self._impl.data.dtype

    @property
    def data(self) -> np.ndarray:
        """
        Return the underlying storage.

        Notes
        -----
        The array is shared with every handle of this tensor; writing into it
        bypasses the in-place checks of `copy_from`.
        """
        return self._impl.data

    def numel(self) -> int:
        """Return the total number of elements (1 for scalars)."""
        return int(self._impl.data.size)

    def size(self) -> list[int]:
        """Return the shape as a list of ints."""
        return [int(d) for d in self._impl.data.shape]

    def is_same_storage(self, other: "Tensor") -> bool:
        """Return True if `other` is a handle onto the same storage."""
        return isinstance(other, Tensor) and other._impl is self._impl

    # ----------------------------
    # Autograd leaf state
    # ----------------------------
    @property
    def requires_grad(self) -> bool:
        """Whether gradients are tracked for this tensor."""
        return self._impl.requires_grad

    @requires_grad.setter
    def requires_grad(self, value: bool) -> None:
        self._impl.requires_grad = bool(value)

    def set_requires_grad(self, value: bool) -> "Tensor":
        """
        Toggle gradient tracking in place.

        The flag lives on the shared storage, so every handle observes the
        change.

        Returns
        -------
        Tensor
            This handle, for chaining.
        """
        self._impl.requires_grad = bool(value)
        return self

    # ----------------------------
    # Factories
    # ----------------------------
    @staticmethod
    def zeros(
        *,
        shape: Sequence[int],
        device: DeviceSpec,
        requires_grad: bool = False,
        dtype: Any = DEFAULT_DTYPE,
    ) -> "Tensor":
        """Create a tensor filled with zeros."""
        return Tensor(shape, device, requires_grad=requires_grad, dtype=dtype)

    @staticmethod
    def ones(
        *,
        shape: Sequence[int],
        device: DeviceSpec,
        requires_grad: bool = False,
        dtype: Any = DEFAULT_DTYPE,
    ) -> "Tensor":
        """Create a tensor filled with ones."""
        return Tensor.full(
            shape, 1.0, device=device, requires_grad=requires_grad, dtype=dtype
        )

    @staticmethod
    def full(
        shape: Sequence[int],
        fill_value: Number,
        *,
        device: DeviceSpec,
        requires_grad: bool = False,
        dtype: Any = DEFAULT_DTYPE,
    ) -> "Tensor":
        """Create a tensor with every element set to `fill_value`."""
        out = Tensor(shape, device, requires_grad=False, dtype=dtype)
        out._impl.data.fill(fill_value)
        out._impl.requires_grad = bool(requires_grad)
        return out

    @staticmethod
    def from_numpy(
        arr: Any, *, device: DeviceSpec = "cpu", requires_grad: bool = False
    ) -> "Tensor":
        """
        Create a tensor holding a copy of `arr`.

        The array's dtype is kept; Python scalars and lists follow NumPy's
        default conversion.
        """
        a = np.array(arr, copy=True, order="C")
        out = Tensor(a.shape, device, requires_grad=False, dtype=a.dtype)
        out._impl.data[...] = a
        out._impl.requires_grad = bool(requires_grad)
        return out

    # ----------------------------
    # Copies
    # ----------------------------
    def shallow_clone(self) -> "Tensor":
        """
        Return a new handle onto the same storage.

        No data is copied. Values and `requires_grad` are shared.
        """
        return Tensor._from_impl(self._impl)

    def clone(self) -> "Tensor":
        """
        Deep copy into new storage.

        The result does not require gradients.
        """
        return Tensor.from_numpy(self._impl.data, device=self.device)

    def to_numpy(self) -> np.ndarray:
        """
        Return the backing NumPy array.

        Notes
        -----
        CPU tensors return their storage directly (no copy).
        """
        return self._impl.data

    def _check_inplace(self, op: str) -> None:
        if self._impl.requires_grad and is_grad_enabled():
            raise RuntimeError(
                f"{op}: a leaf tensor that requires grad cannot be modified "
                "in place while gradient tracking is enabled; use no_grad()"
            )

    def copy_from(self, other: "Tensor") -> None:
        """
        Copy the values of another tensor into this tensor (in place).

        Parameters
        ----------
        other : Tensor
            Source tensor. Shape and device must match; values are cast to
            this tensor's dtype.

        Raises
        ------
        TypeError
            If `other` is not a Tensor.
        ValueError
            If the shapes differ.
        DeviceMismatchError
            If the tensors live on different devices.
        RuntimeError
            If this tensor requires grad and gradient mode is enabled.
        """
        if not isinstance(other, Tensor):
            raise TypeError(f"copy_from expects a Tensor, got {type(other)!r}")

        if self.shape != other.shape:
            raise ValueError(f"Shape mismatch: {self.shape} vs {other.shape}")

        if self.device != other.device:
            raise DeviceMismatchError(str(self.device), str(other.device))

        self._check_inplace("copy_from")
        self._impl.data[...] = other._impl.data

    def copy_from_numpy(self, arr: Any) -> None:
        """
        Copy an array-like (or scalar) into this tensor, casting to its dtype.

        Raises
        ------
        ValueError
            If the array shape differs from the tensor shape.
        RuntimeError
            If this tensor requires grad and gradient mode is enabled.
        """
        arr_nd = np.asarray(arr, dtype=self.dtype)
        if arr_nd.shape != self.shape:
            raise ValueError(f"Shape mismatch: tensor {self.shape} vs array {arr_nd.shape}")

        self._check_inplace("copy_from_numpy")
        self._impl.data[...] = arr_nd

    def fill(self, value: Number) -> None:
        """Set every element to `value` in place."""
        self._check_inplace("fill")
        self._impl.data.fill(value)
