"""
Variable store.

`VarStore` is a device-scoped registry mapping fully-qualified names to
`Variable` entries. Layers never insert into it directly; they obtain the
root `Path`, derive sub-paths per submodule and create variables through
them. The store is the single source of truth for:

- enumerating trainable parameters (`trainable_variables`)
- persisting and restoring values (`save`, `load`, `copy`)
- freezing and unfreezing gradient tracking (`freeze`, `unfreeze`)

Concurrency
-----------
One `threading.Lock` guards the whole map. Every operation that reads or
writes it holds the lock for its full critical section; there is no
reader/writer distinction. The lock is not re-entrant, so nothing called
while it is held calls back into the store.

Tensors handed out share storage with the store's entries. The lock protects
map membership, not concurrent writes into a single tensor's values.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, Optional

from ...domain._errors import VariableCopyError, VariableNotFoundError
from ...domain._naming import disambiguate
from ...domain._var_store import IVarStore, StrPath
from ...domain.device._device import Device, DeviceSpec, as_device
from ..serialization._bundle import load_multi, save_multi
from ..tensor._grad_mode import no_grad
from ..tensor._tensor import Tensor
from ._path import Path
from ._variable import Variable

logger = logging.getLogger(__name__)


def _copy_into(name: str, dst: Tensor, src: Tensor) -> None:
    # Caller holds no_grad(); wrap copy failures with the variable name.
    try:
        dst.copy_from(src)
    except (TypeError, ValueError, RuntimeError) as e:
        raise VariableCopyError(name, e) from e


class VarStore(IVarStore):
    """
    Thread-safe registry of named variables living on one device.

    Parameters
    ----------
    device : Device | str
        Device every variable of this store is allocated on.

    Notes
    -----
    - Keys are unique. A name collision on insertion is resolved by suffixing
      ``__<map size>`` (see `Path.add`).
    - `trainable` is fixed per variable; `freeze`/`unfreeze` only toggle
      gradient tracking on the trainable variables' tensors.
    """

    def __init__(self, device: DeviceSpec) -> None:
        self._device: Device = as_device(device)
        self._variables: Dict[str, Variable] = {}
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"VarStore(device={self._device}, variables={len(self)})"

    @property
    def device(self) -> Device:
        """Return the device all variables of this store live on."""
        return self._device

    def root(self) -> Path:
        """Return the root path (no segments) bound to this store."""
        return Path(self)

    def __len__(self) -> int:
        with self._lock:
            return len(self._variables)

    def is_empty(self) -> bool:
        """Return True if no variable has been created yet."""
        return len(self) == 0

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._variables

    # ------------------------------------------------------------------
    # Enumeration
    # ------------------------------------------------------------------
    def trainable_variables(self) -> list[Tensor]:
        """
        Return handles to every trainable variable.

        Returns
        -------
        list[Tensor]
            Shallow clones sharing storage with the stored tensors, in map
            iteration order. Callers must not rely on that order.
        """
        with self._lock:
            return [
                v.tensor.shallow_clone() for v in self._variables.values() if v.trainable
            ]

    def variables(self) -> dict[str, Tensor]:
        """
        Return a snapshot mapping every fully-qualified name to a handle.

        The mapping is a copy; the tensors share storage with the store.
        """
        with self._lock:
            return {
                name: v.tensor.shallow_clone() for name, v in self._variables.items()
            }

    # ------------------------------------------------------------------
    # Insertion (used by Path.add)
    # ------------------------------------------------------------------
    def _insert(self, name: str, tensor: Tensor, trainable: bool) -> str:
        """
        Insert a variable under `name`, disambiguating on collision.

        Returns
        -------
        str
            The key the variable was stored under.
        """
        with self._lock:
            key = name
            if key in self._variables:
                # May itself collide with an earlier suffixed key; kept as is.
                key = disambiguate(name, len(self._variables))
                logger.debug("variable name %r taken, storing as %r", name, key)
            if trainable:
                tensor.set_requires_grad(True)
            self._variables[key] = Variable(tensor.shallow_clone(), trainable)

        logger.debug(
            "registered variable %r shape=%s trainable=%s", key, tensor.shape, trainable
        )
        return key

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def save(self, path: StrPath) -> None:
        """
        Save the values of every variable to `path`.

        Raises
        ------
        OSError
            If the bundle cannot be written. The store is unchanged.
        """
        with self._lock:
            named = [(name, v.tensor) for name, v in self._variables.items()]
            save_multi(named, path)

        logger.debug("saved %d variables to %s", len(named), path)

    def load(self, path: StrPath) -> None:
        """
        Load variable values from a bundle written by `save`.

        Values are copied into the existing tensors in place, with gradient
        tracking suspended; entries and trainable flags are kept. Names in the
        file that the store does not have are ignored.

        Raises
        ------
        VariableNotFoundError
            If a variable of the store is absent from the file.
        VariableCopyError
            If a stored value cannot be copied (e.g. shape mismatch).
        BundleFormatError, OSError
            If the file cannot be read or decoded.

        Notes
        -----
        Loading is not transactional: when an error is raised, variables
        visited earlier have already been overwritten.
        """
        named_tensors = dict(load_multi(path, device=self._device))

        with self._lock, no_grad():
            for name, var in self._variables.items():
                src = named_tensors.get(name)
                if src is None:
                    raise VariableNotFoundError(name, path)
                _copy_into(name, var.tensor, src)
            count = len(self._variables)

        logger.debug("loaded %d variables from %s", count, path)

    def copy(self, src: "VarStore") -> None:
        """
        Copy variable values from another store, matched by name.

        Every variable of this store must exist in `src`; extra variables in
        `src` are ignored. Like `load`, the copy is not transactional.

        Raises
        ------
        VariableNotFoundError
            If a variable of this store is missing from `src`.
        VariableCopyError
            If a value cannot be copied (shape or device mismatch).
        """
        # Snapshot first so the two stores' locks are never held together.
        src_tensors = src.variables()

        with self._lock, no_grad():
            for name, var in self._variables.items():
                other: Optional[Tensor] = src_tensors.get(name)
                if other is None:
                    raise VariableNotFoundError(name, src)
                _copy_into(name, var.tensor, other)

    # ------------------------------------------------------------------
    # Gradient tracking
    # ------------------------------------------------------------------
    def _set_trainable_requires_grad(self, flag: bool) -> None:
        with self._lock:
            for variable in self._variables.values():
                if variable.trainable:
                    variable.tensor.set_requires_grad(flag)

    def freeze(self) -> None:
        """Disable gradient tracking on every trainable variable."""
        self._set_trainable_requires_grad(False)
        logger.debug("froze %s", self)

    def unfreeze(self) -> None:
        """Re-enable gradient tracking on every trainable variable."""
        self._set_trainable_requires_grad(True)
        logger.debug("unfroze %s", self)
