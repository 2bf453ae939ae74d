"""Field registry and HTML renderers for reference nodes."""
from liveref.core.presentation.fields import (
    BUILTIN_FIELDS,
    CATEGORIES,
    FieldDefinition,
    FieldRegistry,
    default_field_registry,
    load_field_extensions,
)
from liveref.core.presentation.renderers import (
    ABSENT_TEXT,
    ENTITY_RENDERERS,
    FAILED_TEXT,
    LOADING_TEXT,
    format_field_value,
    render_entity_reference,
    render_field_projection,
    render_skeleton,
    render_unavailable,
)

__all__ = [
    "BUILTIN_FIELDS", "CATEGORIES", "FieldDefinition", "FieldRegistry",
    "default_field_registry", "load_field_extensions",
    "ABSENT_TEXT", "ENTITY_RENDERERS", "FAILED_TEXT", "LOADING_TEXT",
    "format_field_value", "render_entity_reference", "render_field_projection",
    "render_skeleton", "render_unavailable",
]
