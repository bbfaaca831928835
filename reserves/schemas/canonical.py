"""
Schemas & Canonicalization
File: canonical.py

Purpose: Deterministic serialization of client entries for leaf hashing.

CRITICAL: All outputs from this module MUST be deterministic across runs
and processes. Dict keys are sorted, so insertion order never matters.
"""

import json
import math
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel

from .errors import SerializationError

# Canonical JSON separators - no whitespace
CANONICAL_JSON_SEPARATORS: tuple[str, str] = (",", ":")


def _validate_float(value: float, path: str = "") -> None:
    """
    Validate that a float is finite (not NaN or Infinity).

    Raises:
        SerializationError: If the float is NaN or Infinity.
    """
    if not math.isfinite(value):
        raise SerializationError(
            message=f"Non-finite float value encountered: {value}",
            details={"path": path, "value": str(value)},
        )


def _canonicalize_decimal(value: Decimal, path: str = "") -> str:
    """
    Represent an arbitrary-precision amount as a plain decimal string.

    The value is normalized first, so equal amounts written differently
    (1E-18, 0.000000000000000001, 1.000E-18) encode identically.
    """
    if not value.is_finite():
        raise SerializationError(
            message=f"Non-finite decimal value encountered: {value}",
            details={"path": path, "value": str(value)},
        )
    if value.is_zero():
        return "0"
    return format(value.normalize(), "f")


def ensure_acyclic(value: Any, path: str = "", _active: set[int] | None = None) -> None:
    """
    Walk nested mappings and sequences and reject reference cycles.

    Raises:
        SerializationError: If a container contains itself.
    """
    if not isinstance(value, (dict, list, tuple)):
        return
    active = _active if _active is not None else set()
    marker = id(value)
    if marker in active:
        raise SerializationError(
            message="Circular reference detected",
            details={"path": path or "$", "type": type(value).__name__},
        )
    active.add(marker)
    try:
        if isinstance(value, dict):
            for k, v in value.items():
                ensure_acyclic(v, f"{path}.{k}" if path else str(k), active)
        else:
            for i, item in enumerate(value):
                ensure_acyclic(item, f"{path}[{i}]", active)
    finally:
        active.discard(marker)


def canonicalize_value(value: Any, path: str = "", _active: set[int] | None = None) -> Any:
    """
    Recursively canonicalize a value for deterministic JSON serialization.

    Args:
        value: Any Python value to canonicalize.
        path: Current path for error reporting.

    Returns:
        A JSON-serializable canonical representation.

    Raises:
        SerializationError: If the value cannot be canonicalized
            (reference cycles, NaN/Infinity, unsupported types).
    """
    if value is None:
        return None

    if isinstance(value, bool):
        # Must check bool before int since bool is subclass of int
        return value

    if isinstance(value, int):
        return value

    if isinstance(value, float):
        _validate_float(value, path)
        return value

    if isinstance(value, Decimal):
        return _canonicalize_decimal(value, path)

    if isinstance(value, str):
        return value

    if isinstance(value, Enum):
        return canonicalize_value(value.value, path, _active)

    if isinstance(value, BaseModel):
        dumped = value.model_dump(mode="python", by_alias=True)
        return canonicalize_value(dumped, path, _active)

    if isinstance(value, (dict, list, tuple)):
        active = _active if _active is not None else set()
        marker = id(value)
        if marker in active:
            raise SerializationError(
                message="Circular reference detected",
                details={"path": path or "$", "type": type(value).__name__},
            )
        active.add(marker)
        try:
            if isinstance(value, dict):
                result: Any = {}
                for k, v in value.items():
                    if not isinstance(k, str):
                        raise SerializationError(
                            message=f"Mapping keys must be strings, got {type(k).__name__}",
                            details={"path": path, "key": repr(k)},
                        )
                    result[k] = canonicalize_value(v, f"{path}.{k}" if path else k, active)
            else:
                result = [
                    canonicalize_value(item, f"{path}[{i}]", active)
                    for i, item in enumerate(value)
                ]
        finally:
            active.discard(marker)
        return result

    raise SerializationError(
        message=f"Cannot canonicalize value of type {type(value).__name__}",
        details={"path": path, "type": type(value).__name__},
    )


def dumps_canonical(obj: Any) -> str:
    """
    Serialize an object to a canonical JSON string.

    Returns:
        A canonical JSON string with:
            - Sorted keys
            - No extra whitespace
            - Tuples encoded as arrays
            - Decimals as their exact string form
            - No NaN/Infinity numbers

    Raises:
        SerializationError: If serialization fails.

    Example:
        >>> dumps_canonical({"Client 1": [("Token 1", 5)]})
        '{"Client 1":[["Token 1",5]]}'
    """
    canonicalized = canonicalize_value(obj)
    try:
        return json.dumps(
            canonicalized,
            sort_keys=True,
            separators=CANONICAL_JSON_SEPARATORS,
            ensure_ascii=False,
            allow_nan=False,
        )
    except (TypeError, ValueError) as e:
        raise SerializationError(
            message=f"Failed to serialize to canonical JSON: {e}",
            details={"type": type(obj).__name__, "error": str(e)},
        ) from e


def encode_canonical(obj: Any) -> bytes:
    """UTF-8 bytes of the canonical JSON form; this is what leaves hash."""
    return dumps_canonical(obj).encode("utf-8")


def canonical_equals(obj1: Any, obj2: Any) -> bool:
    """
    Check if two objects are canonically equal.

    Returns:
        True if the canonical representations are identical.
    """
    try:
        return dumps_canonical(obj1) == dumps_canonical(obj2)
    except SerializationError:
        return False
