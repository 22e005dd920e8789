"""
Name-keyed registry of weight initializers.

An initializer is a plain function taking a freshly allocated `Tensor`,
filling it in place and returning it. Distribution parameters travel as
extra arguments:

    @WeightInitializer.register_initializer("uniform")
    def uniform(tensor: Tensor, lo: float, up: float) -> Tensor:
        ...

    WeightInitializer("uniform")(tensor, -0.1, 0.1)

Registration happens at import time of the modules in this package.
"""

from __future__ import annotations

from typing import Any, Callable, ClassVar, Dict, TypeVar

from ....domain.utils._weight_initialization import _WeightInitializer
from ...tensor._tensor import Tensor

InitFn = Callable[..., Tensor]
F = TypeVar("F", bound=InitFn)


class WeightInitializer(_WeightInitializer):
    """
    Dispatcher bound to one registered initializer.

    Parameters
    ----------
    initializer_name : str
        Registry key, e.g. ``"kaiming_uniform"``.

    Raises
    ------
    ValueError
        If no initializer is registered under `initializer_name`.
    """

    INITIALIZERS: ClassVar[Dict[str, InitFn]] = {}

    def __init__(self, initializer_name: str) -> None:
        fn = self.INITIALIZERS.get(initializer_name)
        if fn is None:
            known = ", ".join(self.available()) or "<none>"
            raise ValueError(
                f"Unsupported initializer name: {initializer_name!r}. Available: {known}"
            )
        self.name = initializer_name
        self._fn = fn

    def __repr__(self) -> str:
        return f"WeightInitializer({self.name!r})"

    def __call__(self, tensor: Tensor, *args: Any, **kwargs: Any) -> Tensor:
        return self._fn(tensor, *args, **kwargs)

    @classmethod
    def register_initializer(
        cls, name: str, *, overwrite: bool = False
    ) -> Callable[[F], F]:
        """
        Decorator adding a function to the registry under `name`.

        Re-registering a taken name raises `ValueError` unless `overwrite`
        is set.
        """
        if not isinstance(name, str) or not name:
            raise ValueError("Initializer name must be a non-empty string")

        def decorator(fn: F) -> F:
            if name in cls.INITIALIZERS and not overwrite:
                raise ValueError(f"Initializer already registered: {name!r}")
            cls.INITIALIZERS[name] = fn
            return fn

        return decorator

    @classmethod
    def available(cls) -> tuple[str, ...]:
        return tuple(sorted(cls.INITIALIZERS))

    @classmethod
    def get(cls, name: str) -> InitFn:
        """Return the raw function registered under `name` (KeyError if absent)."""
        return cls.INITIALIZERS[name]
