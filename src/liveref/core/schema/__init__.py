"""Reference node kinds, markup (de)serialization and document commands."""
from liveref.core.schema.document import Document, find_reference_elements
from liveref.core.schema.nodes import (
    ENTITY_REFERENCE,
    FIELD_PROJECTION,
    NODE_SPECS,
    NodeSpec,
    ReferenceNode,
    ValidationError,
    build_entity_reference,
    build_field_projection,
    parse_element,
    render_element,
)

__all__ = [
    "Document", "find_reference_elements",
    "ENTITY_REFERENCE", "FIELD_PROJECTION", "NODE_SPECS",
    "NodeSpec", "ReferenceNode", "ValidationError",
    "build_entity_reference", "build_field_projection",
    "parse_element", "render_element",
]
