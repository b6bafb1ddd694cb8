"""JSON encoding of one namespace blob."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from keyed_state.exceptions import DecodeError, EncodeError

# Compact form, byte-for-byte what JSON.stringify produces on the host side.
_SEPARATORS = (",", ":")


def encode_value(storage_key: str, value: Any) -> str:
    """Serialize a single value, raising :class:`EncodeError` if it is not JSON-safe."""
    try:
        return json.dumps(value, separators=_SEPARATORS, ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise EncodeError(storage_key, str(exc)) from exc


def encode_namespace(storage_key: str, mapping: Mapping[str, Any]) -> str:
    """Serialize a namespace mapping.  Key order of *mapping* is preserved."""
    if not isinstance(mapping, Mapping):
        raise EncodeError(storage_key, f"expected an object, got {type(mapping).__name__}")
    return encode_value(storage_key, dict(mapping))


def _reject_constant(token: str) -> Any:
    # json accepts NaN/Infinity; JSON.parse on the host does not.
    raise ValueError(f"{token} is not valid JSON")


def decode_namespace(storage_key: str, raw: Any) -> dict[str, Any]:
    """Parse a persisted namespace blob into a dict.

    Raises:
        DecodeError: if *raw* is not a string, is not valid JSON, or does
                     not decode to a JSON object.
    """
    if not isinstance(raw, str):
        raise DecodeError(
            storage_key, f"expected a serialized object string, got {type(raw).__name__}"
        )
    try:
        result = json.loads(raw, parse_constant=_reject_constant)
    except json.JSONDecodeError as exc:
        raise DecodeError(storage_key, exc.msg) from exc
    except ValueError as exc:
        raise DecodeError(storage_key, str(exc)) from exc
    if not isinstance(result, dict):
        raise DecodeError(storage_key, f"decoded to {type(result).__name__}, not an object")
    return result
