"""
Constant weight initializer.

``const`` sets every element to one value. It backs `Const` specifications
and therefore the ``zeros``/``ones`` variable helpers of `Path`.
"""

from ._base import WeightInitializer
from ...tensor._tensor import Tensor


@WeightInitializer.register_initializer("const")
def const(tensor: Tensor, value: float) -> Tensor:
    """
    Fill a tensor with `value`.

    Parameters
    ----------
    tensor : Tensor
        The tensor to initialize in-place.
    value : float
        Fill value, cast to the tensor's dtype.

    Returns
    -------
    Tensor
        The initialized tensor (same object).
    """
    tensor.fill(value)
    return tensor
