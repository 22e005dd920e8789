"""
Distribution-based weight initializers.

Provided initializers
---------------------
- ``randn``:
    Normal samples ``N(mean, stdev^2)``; defaults to the standard normal.
- ``uniform``:
    Uniform samples over ``[lo, up)``.

Samples are drawn from NumPy's global random state; seeding is the caller's
responsibility (``np.random.seed``).
"""

import numpy as np

from ._base import WeightInitializer
from ...tensor._tensor import Tensor


@WeightInitializer.register_initializer("randn")
def randn(tensor: Tensor, mean: float = 0.0, stdev: float = 1.0) -> Tensor:
    """
    Fill a tensor with normal samples.

    Parameters
    ----------
    tensor:
        The tensor to initialize in-place.
    mean:
        Mean of the distribution.
    stdev:
        Standard deviation of the distribution.

    Returns
    -------
    Tensor
        The initialized tensor (same object).
    """
    dt = np.dtype(tensor.dtype)
    w = np.random.normal(float(mean), float(stdev), size=tensor.shape)
    tensor.copy_from_numpy(w.astype(dt, copy=False))
    return tensor


@WeightInitializer.register_initializer("uniform")
def uniform(tensor: Tensor, lo: float, up: float) -> Tensor:
    """
    Fill a tensor with uniform samples over ``[lo, up)``.

    Returns
    -------
    Tensor
        The initialized tensor (same object).
    """
    dt = np.dtype(tensor.dtype)
    w = np.random.uniform(float(lo), float(up), size=tensor.shape)
    tensor.copy_from_numpy(w.astype(dt, copy=False))
    return tensor
