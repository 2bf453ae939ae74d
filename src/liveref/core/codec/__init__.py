"""Attribute codec: typed node attributes <-> persisted markup attributes."""
from liveref.core.codec.attributes import (
    ENTITY_REFERENCE_CODEC,
    FIELD_PROJECTION_CODEC,
    AttributeCodec,
    AttributeSpec,
)
from liveref.core.codec.coercion import CoercionError, coerce_value, parse_bool, parse_number

__all__ = [
    "ENTITY_REFERENCE_CODEC", "FIELD_PROJECTION_CODEC",
    "AttributeCodec", "AttributeSpec",
    "CoercionError", "coerce_value", "parse_bool", "parse_number",
]
