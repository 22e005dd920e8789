"""
Named-tensor bundle codec.

A bundle is an ordered collection of ``(name, tensor)`` pairs stored in a
single JSON document:

    {
      "format": "keyvar.json.tensors.v1",
      "tensors": [
        {"name": "encoder|layer0|w", "b64": "...", "dtype": "<f4",
         "shape": [2, 2], "order": "C"},
        ...
      ]
    }

Tensor bytes are base64 encoded, which avoids pickle and any binary
container dependency at the cost of ~33% size overhead.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Iterable, Union

from ...domain._errors import BundleFormatError
from ...domain.device._device import DeviceSpec
from ..encoding._b64 import ndarray_to_payload, payload_to_ndarray
from ..tensor._tensor import Tensor

BUNDLE_FORMAT = "keyvar.json.tensors.v1"

StrPath = Union[str, os.PathLike]


def save_multi(pairs: Iterable[tuple[str, Tensor]], path: StrPath) -> None:
    """
    Write `(name, tensor)` pairs to `path` as a named-tensor bundle.

    Parameters
    ----------
    pairs : Iterable[tuple[str, Tensor]]
        Names and tensors to store, in order.
    path : str | PathLike
        Destination file. Parent directories are created.

    Raises
    ------
    OSError
        If the file cannot be written. An existing file at `path` is left
        intact because the document is written to a sibling temporary file
        and renamed into place.
    """
    entries: list[dict[str, Any]] = []
    for name, tensor in pairs:
        entry = {"name": str(name)}
        entry.update(ndarray_to_payload(tensor.to_numpy()))
        entries.append(entry)

    document = {"format": BUNDLE_FORMAT, "tensors": entries}

    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    # Unique per call so concurrent saves to one destination never share it.
    fd, tmp = tempfile.mkstemp(prefix=f".{p.name}.", suffix=".tmp", dir=p.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(document, fh, indent=2)
        os.replace(tmp, p)
    finally:
        if os.path.exists(tmp):
            os.remove(tmp)


def load_multi(path: StrPath, *, device: DeviceSpec = "cpu") -> list[tuple[str, Tensor]]:
    """
    Read a named-tensor bundle.

    Parameters
    ----------
    path : str | PathLike
        Bundle file written by `save_multi`.
    device : Device | str, optional
        Placement of the returned tensors. Defaults to CPU.

    Returns
    -------
    list[tuple[str, Tensor]]
        Pairs in file order. Tensors keep the stored dtype and do not
        require gradients.

    Raises
    ------
    OSError
        If the file cannot be read.
    BundleFormatError
        If the file is not a bundle of the supported format.
    """
    p = Path(path)
    try:
        document = json.loads(p.read_text(encoding="utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise BundleFormatError(f"{p} is not a JSON tensor bundle: {e}") from e

    fmt = document.get("format") if isinstance(document, dict) else None
    if fmt != BUNDLE_FORMAT:
        raise BundleFormatError(f"Unsupported bundle format: {fmt!r}")

    entries = document.get("tensors")
    if not isinstance(entries, list):
        raise BundleFormatError(f"{p}: 'tensors' must be a list")

    out: list[tuple[str, Tensor]] = []
    for entry in entries:
        if not isinstance(entry, dict) or "name" not in entry:
            raise BundleFormatError(f"{p}: tensor entry without a name")
        arr = payload_to_ndarray(entry)
        out.append((str(entry["name"]), Tensor.from_numpy(arr, device=device)))
    return out
