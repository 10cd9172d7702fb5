"""
Module 01 - Schemas & Canonicalization
File: canonical.py

Purpose: One byte-exact JSON rendering per proof, so proof files and
wire bodies can be compared and hashed.

Rendering rules:
- keys sorted, separators "," and ":" with no whitespace
- None-valued keys omitted
- enums as their value, bytes as 0x-prefixed hex
- pydantic models via model_dump(mode="json")
- NaN/Infinity and any other type rejected
"""

import json
import math
from enum import Enum
from typing import Any

from pydantic import BaseModel

from .errors import CanonicalizationException

CANONICAL_JSON_SEPARATORS: tuple[str, str] = (",", ":")

_SCALARS = (str, int, bool, type(None))


def canonicalize_value(value: Any, path: str = "") -> Any:
    """
    Reduce a value to plain JSON types following the rendering rules.

    Raises:
        CanonicalizationException: With the offending path in details
    """
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, _SCALARS):
        return value
    if isinstance(value, float):
        if math.isfinite(value):
            return value
        raise CanonicalizationException(
            message=f"Non-finite float at {path or '<root>'}",
            details={"path": path, "value": str(value)},
        )
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    if isinstance(value, BaseModel):
        return canonicalize_value(value.model_dump(mode="json", exclude_none=True), path)
    if isinstance(value, dict):
        return {
            str(key): canonicalize_value(item, f"{path}.{key}" if path else str(key))
            for key, item in value.items()
            if item is not None
        }
    if isinstance(value, (list, tuple)):
        return [canonicalize_value(item, f"{path}[{i}]") for i, item in enumerate(value)]

    raise CanonicalizationException(
        message=f"Cannot canonicalize {type(value).__name__} at {path or '<root>'}",
        details={"path": path, "type": type(value).__name__},
    )


def dumps_canonical(obj: Any) -> str:
    """
    Render an object as canonical JSON text.

    Example:
        >>> dumps_canonical({"b": 2, "a": b"\\x01"})
        '{"a":"0x01","b":2}'
    """
    return json.dumps(
        canonicalize_value(obj),
        sort_keys=True,
        separators=CANONICAL_JSON_SEPARATORS,
        ensure_ascii=False,
        allow_nan=False,
    )


def loads_canonical(json_str: str) -> Any:
    return json.loads(json_str)


__all__ = [
    "CANONICAL_JSON_SEPARATORS",
    "canonicalize_value",
    "dumps_canonical",
    "loads_canonical",
]
