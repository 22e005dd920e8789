"""
Namespace cursors for variable creation.

A `Path` pairs a sequence of name segments with the `VarStore` it belongs
to. Paths are immutable and cheap: `sub` (or the ``/`` operator) returns a
new path one segment deeper, and creating a path never copies or snapshots
the store's variables.

Every variable-creation helper funnels into `Path.add`, which computes the
fully-qualified name (segments and leaf joined by ``|``) and inserts the
tensor into the store under its lock.

Example
-------
    vs = VarStore("cpu")
    layer = vs.root() / "encoder" / "layer0"
    w = layer.kaiming_uniform("weight", (64, 32))  # "encoder|layer0|weight"
    b = layer.zeros("bias", (64,))                 # "encoder|layer0|bias"
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from ...domain._errors import VariableCopyError
from ...domain._init import Const, Init, KaimingUniform, Randn, Uniform
from ...domain._naming import SEP, join_name, validate_name
from ...domain._var_store import IPath
from ...domain.device._device import Device
from ..tensor._grad_mode import no_grad
from ..tensor._tensor import DEFAULT_DTYPE, Tensor
from ..utils.weight_initializer import init as init_tensor

if TYPE_CHECKING:
    from ._var_store import VarStore


class Path(IPath):
    """
    Immutable namespace cursor bound to a `VarStore`.

    Parameters
    ----------
    var_store : VarStore
        Store that receives the variables created through this path.
    segments : Sequence[str], optional
        Namespace segments; empty for the root path.

    Notes
    -----
    Paths hold a reference to their store; they are meaningless without it.
    """

    __slots__ = ("_var_store", "_segments")

    def __init__(self, var_store: "VarStore", segments: Sequence[str] = ()) -> None:
        self._var_store = var_store
        self._segments: tuple[str, ...] = tuple(
            validate_name(s, "sub name") for s in segments
        )

    def __repr__(self) -> str:
        return f"Path({self.name!r}, device={self.device})"

    @property
    def segments(self) -> tuple[str, ...]:
        return self._segments

    @property
    def name(self) -> str:
        """Segments joined by the separator ("" at the root)."""
        return SEP.join(self._segments)

    @property
    def var_store(self) -> "VarStore":
        return self._var_store

    @property
    def device(self) -> Device:
        """Device of the bound store."""
        return self._var_store.device

    def sub(self, name: str) -> "Path":
        """
        Return a new path one segment deeper.

        Raises
        ------
        InvalidNameError
            If `name` contains the separator.
        """
        validate_name(name, "sub name")
        return Path(self._var_store, self._segments + (name,))

    def __truediv__(self, name: str) -> "Path":
        return self.sub(name)

    def name_of(self, name: str) -> str:
        """
        Return the fully-qualified name `name` would get under this path.

        The name actually stored may differ when it collides (see `add`).
        """
        return join_name(self._segments, name)

    def add(self, name: str, tensor: Tensor, trainable: bool) -> Tensor:
        """
        Register `tensor` in the store under this path.

        Parameters
        ----------
        name : str
            Leaf name of the variable.
        tensor : Tensor
            Value to register. It is stored by reference, not copied.
        trainable : bool
            Whether the variable is trainable. Trainable tensors get
            `requires_grad` enabled before they are stored.

        Returns
        -------
        Tensor
            A handle sharing storage with the stored entry.

        Raises
        ------
        InvalidNameError
            If `name` contains the separator; the store is left untouched.

        Notes
        -----
        If the fully-qualified name is already taken, the variable is stored
        under ``<name>__<number of variables>``. That suffix is not checked
        again, so it can overwrite an earlier suffixed entry.
        """
        self._add(name, tensor, trainable)
        return tensor

    def _add(self, name: str, tensor: Tensor, trainable: bool) -> str:
        # Returns the key actually stored, which differs from name_of(name)
        # after a collision.
        return self._var_store._insert(self.name_of(name), tensor, trainable)

    # ------------------------------------------------------------------
    # Non-trainable helpers
    # ------------------------------------------------------------------
    def zeros_no_train(self, name: str, shape: Sequence[int]) -> Tensor:
        """Create a non-trainable variable filled with zeros."""
        z = Tensor.zeros(shape=shape, device=self.device, dtype=DEFAULT_DTYPE)
        return self.add(name, z, False)

    def ones_no_train(self, name: str, shape: Sequence[int]) -> Tensor:
        """Create a non-trainable variable filled with ones."""
        o = Tensor.ones(shape=shape, device=self.device, dtype=DEFAULT_DTYPE)
        return self.add(name, o, False)

    # ------------------------------------------------------------------
    # Trainable helpers
    # ------------------------------------------------------------------
    def var(self, name: str, shape: Sequence[int], init: Init) -> Tensor:
        """
        Create a trainable variable initialized according to `init`.

        Parameters
        ----------
        name : str
            Leaf name of the variable.
        shape : Sequence[int]
            Shape of the variable.
        init : Init
            `Const`, `Randn`, `Uniform` or `KaimingUniform`.
        """
        validate_name(name)
        v = init_tensor(init, shape, self.device)
        return self.add(name, v, True)

    def zeros(self, name: str, shape: Sequence[int]) -> Tensor:
        return self.var(name, shape, Const(0.0))

    def ones(self, name: str, shape: Sequence[int]) -> Tensor:
        return self.var(name, shape, Const(1.0))

    def randn_standard(self, name: str, shape: Sequence[int]) -> Tensor:
        """Trainable variable drawn from the standard normal distribution."""
        return self.var(name, shape, Randn(mean=0.0, stdev=1.0))

    def randn(
        self, name: str, shape: Sequence[int], mean: float, stdev: float
    ) -> Tensor:
        """Trainable variable drawn from ``N(mean, stdev^2)``."""
        return self.var(name, shape, Randn(mean=mean, stdev=stdev))

    def uniform(self, name: str, shape: Sequence[int], lo: float, up: float) -> Tensor:
        """Trainable variable drawn uniformly from ``[lo, up)``."""
        return self.var(name, shape, Uniform(lo=lo, up=up))

    def kaiming_uniform(self, name: str, shape: Sequence[int]) -> Tensor:
        """Trainable variable with Kaiming uniform initialization."""
        return self.var(name, shape, KaimingUniform())

    def var_copy(self, name: str, src: Tensor) -> Tensor:
        """
        Register a copy of `src` as a trainable variable.

        A zero-initialized trainable variable of `src`'s shape is created,
        then `src`'s values are copied into it with gradient tracking
        suspended.

        Raises
        ------
        VariableCopyError
            If the values cannot be copied (e.g. `src` is on another device).
            The zero-initialized variable stays registered and the error
            carries the key it was stored under.
        """
        validate_name(name)
        v = init_tensor(Const(0.0), src.size(), self.device)
        key = self._add(name, v, True)
        with no_grad():
            try:
                v.copy_from(src)
            except (TypeError, ValueError, RuntimeError) as e:
                raise VariableCopyError(key, e) from e
        return v
