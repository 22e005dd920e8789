"""
Gradient-mode control.

Gradient tracking can be suspended for a block of code with `no_grad()`.
While suspended, in-place writes into leaf tensors that require gradients are
permitted (this is how stored weights get loaded or copied without being
recorded as a differentiable operation).

The mode is thread-local: suspending it in one thread does not affect other
threads building or loading variables concurrently.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator

_state = threading.local()


def is_grad_enabled() -> bool:
    """Return whether gradient tracking is enabled in the current thread."""
    return getattr(_state, "enabled", True)


@contextmanager
def set_grad_enabled(enabled: bool) -> Iterator[None]:
    """
    Set the gradient mode for the duration of a block.

    The previous mode is restored on exit, including when the block raises.
    """
    previous = is_grad_enabled()
    _state.enabled = bool(enabled)
    try:
        yield
    finally:
        _state.enabled = previous


def no_grad():
    """
    Suspend gradient tracking for a block.

    Usage
    -----
        with no_grad():
            weight.copy_from(saved)

    The returned context manager may also decorate a function.
    """
    return set_grad_enabled(False)
