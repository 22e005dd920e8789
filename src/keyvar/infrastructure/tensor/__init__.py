from ._tensor import Tensor, DEFAULT_DTYPE
from ._grad_mode import no_grad, set_grad_enabled, is_grad_enabled

__all__ = [
    Tensor.__name__,
    "DEFAULT_DTYPE",
    no_grad.__name__,
    set_grad_enabled.__name__,
    is_grad_enabled.__name__,
]
