# liveref/core/codec/coercion.py
"""
Tolerant coercion between markup attribute strings and typed values.

Attribute values live in the persisted document as plain strings. Parsing
is deliberately forgiving: documents written by older editor versions must
keep loading, so a malformed value is reported as a :class:`CoercionError`
and the caller substitutes the declared default.
"""
from __future__ import annotations

import logging
import math
import re
from typing import Any

logger = logging.getLogger(__name__)

# Leading numeric prefix, the way browsers' parseFloat reads "12.5px" as 12.5
NUMBER_PREFIX_PATTERN = re.compile(r"^\s*([-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?)")


class CoercionError(ValueError):
    """Raised when a value cannot be coerced to the expected type."""

    def __init__(self, param: str, value: str, expected_type: str, reason: str = ""):
        self.param = param
        self.value = value
        self.expected_type = expected_type
        msg = f"Cannot coerce attribute '{param}' value '{value}' to {expected_type}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


def parse_number(value: str | None) -> float | None:
    """Parse the leading number of ``value``.

    Returns ``None`` (never NaN) for empty, malformed or non-finite input.
    """
    if value is None:
        return None
    match = NUMBER_PREFIX_PATTERN.match(value)
    if not match:
        return None
    try:
        number = float(match.group(1))
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number


def parse_bool(value: str | None) -> bool:
    """Only the exact string ``"true"`` is true."""
    return value == "true"


def coerce_value(value: str, schema: dict[str, Any]) -> Any:
    """
    Coerce a markup attribute string to the type declared in ``schema``.

    Supports:
        - string: returned as-is; ``enum`` restricts the accepted values
        - number: tolerant leading-number parse
        - boolean: exact ``"true"`` comparison

    Args:
        value: Raw attribute string from the markup
        schema: JSON-Schema-like dict with a ``type`` field and optional ``enum``

    Returns:
        Coerced value

    Raises:
        CoercionError: If the value is unusable for the declared type
    """
    schema_type = schema.get("type", "string")

    if schema_type == "string":
        allowed = schema.get("enum")
        if allowed is not None and value not in allowed:
            raise CoercionError("", value, "string", f"expected one of {list(allowed)}")
        return value

    elif schema_type == "number":
        number = parse_number(value)
        if number is None:
            raise CoercionError("", value, "number", "not a finite number")
        return number

    elif schema_type == "boolean":
        return parse_bool(value)

    else:
        logger.warning("Unknown schema type '%s', returning value as string", schema_type)
        return value


def stringify_value(value: Any) -> str:
    """Render a typed value as a markup attribute string without loss."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        # repr() is the shortest string that parses back to the same float
        return repr(value)
    return str(value)
