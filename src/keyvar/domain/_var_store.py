"""
Variable store and path interface definitions.

Layers declare their parameters against these protocols instead of the
concrete infrastructure classes:

- `IVarStore`: device-scoped, thread-safe registry of named variables
- `IPath`: namespace cursor bound to a store, used to create variables under
  hierarchical names
"""

from __future__ import annotations

from os import PathLike
from typing import Protocol, Sequence, Union, runtime_checkable

from ._init import Init
from ._tensor import ITensor
from .device._device_protocol import DeviceLike

StrPath = Union[str, PathLike]
Shape = Sequence[int]


@runtime_checkable
class IPath(Protocol):
    """
    Namespace cursor interface.

    A path is immutable: `sub` returns a new path and leaves the receiver
    untouched.
    """

    @property
    def device(self) -> DeviceLike: ...

    def sub(self, name: str) -> "IPath": ...

    def __truediv__(self, name: str) -> "IPath": ...

    def add(self, name: str, tensor: ITensor, trainable: bool) -> ITensor: ...

    def zeros_no_train(self, name: str, shape: Shape) -> ITensor: ...

    def ones_no_train(self, name: str, shape: Shape) -> ITensor: ...

    def var(self, name: str, shape: Shape, init: Init) -> ITensor: ...

    def zeros(self, name: str, shape: Shape) -> ITensor: ...

    def ones(self, name: str, shape: Shape) -> ITensor: ...

    def randn_standard(self, name: str, shape: Shape) -> ITensor: ...

    def randn(self, name: str, shape: Shape, mean: float, stdev: float) -> ITensor: ...

    def uniform(self, name: str, shape: Shape, lo: float, up: float) -> ITensor: ...

    def kaiming_uniform(self, name: str, shape: Shape) -> ITensor: ...

    def var_copy(self, name: str, src: ITensor) -> ITensor: ...


@runtime_checkable
class IVarStore(Protocol):
    """
    Variable store interface.

    Every operation that reads or writes the variable map is serialized by a
    single lock held by the store.
    """

    @property
    def device(self) -> DeviceLike: ...

    def root(self) -> IPath: ...

    def trainable_variables(self) -> list[ITensor]: ...

    def variables(self) -> dict[str, ITensor]: ...

    def save(self, path: StrPath) -> None: ...

    def load(self, path: StrPath) -> None: ...

    def freeze(self) -> None: ...

    def unfreeze(self) -> None: ...

    def __len__(self) -> int: ...
