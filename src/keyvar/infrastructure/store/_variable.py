from __future__ import annotations

from dataclasses import dataclass

from ..tensor._tensor import Tensor


@dataclass(frozen=True)
class Variable:
    """
    A store map entry: a tensor handle plus its trainable classification.

    Attributes
    ----------
    tensor : Tensor
        Handle sharing storage with the tensor returned to the caller that
        created the variable.
    trainable : bool
        Whether the variable participates in optimization. Fixed for the
        lifetime of the entry; freezing only toggles `tensor.requires_grad`.
    """

    tensor: Tensor
    trainable: bool
