"""
Exceptions raised by KeyVar.

Device errors
-------------
- `DeviceNotSupportedError`: storage was requested on a device that has no
  backend (only CPU tensors are materialized).
- `DeviceMismatchError`: two tensors on different devices were combined.

Store errors
------------
- `InvalidNameError`: a path segment or variable name contains the reserved
  separator. This signals a caller bug and is raised before any store
  mutation happens.
- `VariableNotFoundError`: a store variable has no counterpart in the source
  being loaded or copied from.
- `VariableCopyError`: the in-place value copy into a named variable failed
  (shape or device mismatch). The underlying error is chained.

Codec errors
------------
- `BundleFormatError`: a file is not a valid named-tensor bundle.
"""

from __future__ import annotations

from typing import Any


class DeviceNotSupportedError(RuntimeError):
    """
    Raised when a tensor operation is requested on a device backend that is
    not implemented.

    Attributes
    ----------
    op : str
        The operation that was attempted (e.g. "allocate", "copy_from").
    device : str
        String form of the device the operation was attempted on.
    """

    def __init__(self, op: str, device: str) -> None:
        super().__init__(f"{op} is not implemented for device '{device}'.")
        self.op = op
        self.device = device


class DeviceMismatchError(RuntimeError):
    """
    Raised when an operation combines tensors living on different devices.
    """

    def __init__(self, device_a: str, device_b: str) -> None:
        super().__init__(f"Device mismatch: '{device_a}' vs '{device_b}'.")
        self.device_a = device_a
        self.device_b = device_b


class InvalidNameError(ValueError):
    """
    Raised when a path segment or variable name contains the separator.

    Attributes
    ----------
    name : str
        The offending name.
    what : str
        Which kind of name was rejected ("sub name" or "variable name").
    """

    def __init__(self, name: str, what: str, separator: str) -> None:
        super().__init__(f"{what} cannot contain {separator} {name}")
        self.name = name
        self.what = what


class VariableNotFoundError(KeyError):
    """
    Raised when a variable of the store is missing from a load/copy source.

    Attributes
    ----------
    name : str
        Fully-qualified name of the missing variable.
    source : Any
        The file path or store that was searched.
    """

    def __init__(self, name: str, source: Any) -> None:
        super().__init__(name)
        self.name = name
        self.source = source

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the key; keep the message readable.
        return f"cannot find {self.name} in {self.source!r}"


class VariableCopyError(RuntimeError):
    """
    Raised when copying values into an existing variable fails.

    Attributes
    ----------
    name : str
        Fully-qualified name of the variable being written.
    """

    def __init__(self, name: str, cause: BaseException) -> None:
        super().__init__(f"{name}: {cause}")
        self.name = name


class BundleFormatError(ValueError):
    """
    Raised when a named-tensor bundle cannot be decoded.
    """
