"""
Shape conventions for weight initialization.

Weights follow the ``(out, in, *kernel)`` layout: a 2-D weight is
``(out_features, in_features)`` and a convolution weight is
``(out_channels, in_channels, k1, k2, ...)``. Scalars count as one
input; vectors (biases, scales) use their length.

`_WeightInitializer` is the dispatcher contract implemented by the registry
in the infrastructure layer.
"""

from abc import ABC, abstractmethod
from math import prod
from typing import Any

from .._tensor import ITensor


class _WeightInitializer(ABC):
    """
    Callable applying a named initializer to a tensor in place.

    Implementations resolve the name at construction time and return the
    tensor they were given.
    """

    name: str

    @abstractmethod
    def __call__(self, tensor: ITensor, *args: Any, **kwargs: Any) -> ITensor: ...


def _calculate_fan_in(shape: tuple[int, ...]) -> int:
    """
    Number of inputs feeding one output unit of a weight shaped `shape`.

    Examples
    --------
    >>> _calculate_fan_in((4, 3))
    3
    >>> _calculate_fan_in((8, 3, 2, 2))
    12
    """
    rank = len(shape)
    if rank == 0:
        return 1
    if rank == 1:
        return int(shape[0])
    return int(shape[1]) * int(prod(int(d) for d in shape[2:]))
