"""
Initialization bridge.

`init` turns a declarative `Init` specification into a freshly allocated
tensor. It is the only place where specifications are mapped onto registry
initializers, so variable-creation code never touches NumPy directly.
"""

from __future__ import annotations

from typing import Sequence

from ....domain._init import Const, Init, KaimingUniform, Randn, Uniform
from ....domain.device._device import DeviceSpec
from ...tensor._tensor import DEFAULT_DTYPE, Tensor
from ._base import WeightInitializer


def init(spec: Init, shape: Sequence[int], device: DeviceSpec) -> Tensor:
    """
    Allocate a tensor of `shape` on `device` and populate it per `spec`.

    Parameters
    ----------
    spec : Init
        One of `Const`, `Randn`, `Uniform` or `KaimingUniform`.
    shape : Sequence[int]
        Shape of the new tensor.
    device : Device | str
        Placement of the new tensor.

    Returns
    -------
    Tensor
        A new float32 tensor that does not require gradients.

    Raises
    ------
    TypeError
        If `spec` is not a known initialization specification.
    """
    tensor = Tensor(shape, device, requires_grad=False, dtype=DEFAULT_DTYPE)

    if isinstance(spec, Const):
        return WeightInitializer("const")(tensor, spec.value)
    if isinstance(spec, Randn):
        return WeightInitializer("randn")(tensor, spec.mean, spec.stdev)
    if isinstance(spec, Uniform):
        return WeightInitializer("uniform")(tensor, spec.lo, spec.up)
    if isinstance(spec, KaimingUniform):
        return WeightInitializer("kaiming_uniform")(tensor)

    raise TypeError(f"Unsupported initialization spec: {spec!r}")
