"""
Base64 ndarray payloads.

A payload is a small JSON-safe dict describing one C-contiguous array:
``{"b64": ..., "dtype": "<f4", "shape": [2, 3], "order": "C"}``. The dtype
string keeps the byte order explicit so files stay portable.
"""

from __future__ import annotations

import base64
from typing import Any, Dict

import numpy as np

from ...domain._errors import BundleFormatError

_PAYLOAD_KEYS = ("b64", "dtype", "shape")


def bytes_to_b64_str(b: bytes) -> str:
    """Return `b` as base64 text."""
    return base64.b64encode(b).decode("ascii")


def b64_str_to_bytes(s: str) -> bytes:
    """Inverse of `bytes_to_b64_str`; rejects non-alphabet characters."""
    return base64.b64decode(s.encode("ascii"), validate=True)


def ndarray_to_payload(arr: np.ndarray) -> Dict[str, Any]:
    """Describe `arr` as a payload (copies into C order when needed)."""
    a = np.ascontiguousarray(arr)
    return {
        "b64": bytes_to_b64_str(a.tobytes(order="C")),
        "dtype": a.dtype.str,
        "shape": [int(d) for d in a.shape],
        "order": "C",
    }


def payload_to_ndarray(payload: Dict[str, Any]) -> np.ndarray:
    """
    Deserialize a JSON payload back into an owning NumPy ndarray.

    Raises
    ------
    BundleFormatError
        If a key is missing or the bytes do not decode to the declared
        dtype and shape.
    """
    missing = [k for k in _PAYLOAD_KEYS if k not in payload]
    if missing:
        raise BundleFormatError(f"Tensor payload is missing keys: {missing}")

    try:
        b = b64_str_to_bytes(str(payload["b64"]))
        dtype = np.dtype(str(payload["dtype"]))
        shape = tuple(int(x) for x in payload["shape"])
        arr = np.frombuffer(b, dtype=dtype).reshape(shape)
    except (ValueError, TypeError) as e:
        raise BundleFormatError(f"Malformed tensor payload: {e}") from e

    # frombuffer gives a read-only view on `b`; hand out an owning copy
    return np.array(arr, copy=True, order="C")
