"""
He (Kaiming) uniform initializer, scaled by fan-in for ReLU-style layers.

``kaiming_uniform`` draws from ``U(-b, b)`` with ``b = sqrt(6 / fan_in)``;
it backs `KaimingUniform` specifications and `Path.kaiming_uniform`.

Fan-in comes from the weight layout ``(out, in, *kernel)`` and is floored at
1, so degenerate shapes (``(0, n)``, ``()``) still produce a finite bound.
"""

import math

import numpy as np

from ._base import WeightInitializer
from ...tensor._tensor import Tensor
from ....domain.utils._weight_initialization import _calculate_fan_in


def kaiming_uniform_bound(shape: tuple[int, ...]) -> float:
    """Half-width of the ``kaiming_uniform`` interval for a weight of `shape`."""
    fan_in = max(1, _calculate_fan_in(tuple(shape)))
    return math.sqrt(6.0 / fan_in)


@WeightInitializer.register_initializer("kaiming_uniform")
def kaiming_uniform(tensor: Tensor) -> Tensor:
    """
    Fill `tensor` with ``U(-b, b)``, ``b = sqrt(6 / fan_in)``.

    Returns
    -------
    Tensor
        `tensor`, filled in place.
    """
    b = kaiming_uniform_bound(tensor.shape)
    tensor.copy_from_numpy(np.random.uniform(-b, b, size=tensor.shape))
    return tensor
