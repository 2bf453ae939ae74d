# liveref/core/schema/nodes.py
"""
Reference node kinds and their markup representation.

Both kinds are atomic inline units: no editable children, never split,
dragged as a whole. In markup each node is a single ``<span>`` carrying a
node-type discriminator plus the attribute bag produced by the node kind's
codec.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from typing import Any, Mapping, Union

from bs4 import BeautifulSoup, Tag

from liveref.contracts.attributes import EntityReferenceAttrs, FieldProjectionAttrs
from liveref.core.codec.attributes import (
    ENTITY_REFERENCE_CODEC,
    FIELD_PROJECTION_CODEC,
    AttributeCodec,
)

logger = logging.getLogger(__name__)

NodeAttrs = Union[EntityReferenceAttrs, FieldProjectionAttrs]


class ValidationError(ValueError):
    """Raised when a node cannot be created or updated with the given attributes."""

    def __init__(self, message: str, errors: list[str] | None = None):
        self.message = message
        self.errors = errors or []
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "validation_error",
            "message": self.message,
            "errors": self.errors,
        }

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class NodeSpec:
    """Structural declaration of a reference node kind."""

    name: str
    tag: str
    discriminator_key: str
    discriminator_value: str
    codec: AttributeCodec[Any]
    group: str = "inline"
    inline: bool = True
    atom: bool = True
    draggable: bool = True
    selectable: bool = True
    content: str | None = None

    def matches(self, attrs: Mapping[str, Any]) -> bool:
        return attrs.get(self.discriminator_key) == self.discriminator_value

    def describe(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "selector": f'{self.tag}[{self.discriminator_key}="{self.discriminator_value}"]',
            "group": self.group,
            "inline": self.inline,
            "atom": self.atom,
            "draggable": self.draggable,
            "attributes": self.codec.names,
        }


ENTITY_REFERENCE = NodeSpec(
    name="entityReference",
    tag="span",
    discriminator_key="data-node-type",
    discriminator_value="product",
    codec=ENTITY_REFERENCE_CODEC,
)

FIELD_PROJECTION = NodeSpec(
    name="fieldProjection",
    tag="span",
    discriminator_key="data-type",
    discriminator_value="product-metadata",
    codec=FIELD_PROJECTION_CODEC,
)

NODE_SPECS: tuple[NodeSpec, ...] = (ENTITY_REFERENCE, FIELD_PROJECTION)


@dataclass(frozen=True)
class ReferenceNode:
    """One reference node instance inside a document."""

    spec: NodeSpec
    attrs: NodeAttrs

    @property
    def identifier(self) -> str:
        if isinstance(self.attrs, EntityReferenceAttrs):
            return self.attrs.id
        return self.attrs.entity_id

    @property
    def is_valid(self) -> bool:
        try:
            _validate(self.spec, self.attrs)
        except ValidationError:
            return False
        return True

    def with_attrs(self, patch: Mapping[str, Any]) -> ReferenceNode:
        """Return a copy with ``patch`` applied through the attribute allow-list.

        Raises:
            ValidationError: If the patched node would be invalid.
        """
        allowed = {f.name for f in fields(self.attrs)}
        known = {k: v for k, v in patch.items() if k in allowed}
        unknown = sorted(set(patch) - allowed)
        if unknown:
            logger.debug("Ignoring unknown %s attributes in patch: %s", self.spec.name, unknown)
        attrs = replace(self.attrs, **known)
        _validate(self.spec, attrs)
        return ReferenceNode(spec=self.spec, attrs=attrs)

    def to_markup(self) -> str:
        return render_element(self)


def _validate(spec: NodeSpec, attrs: NodeAttrs) -> None:
    errors = []
    missing = set()
    for s in spec.codec.specs:
        if not s.required:
            continue
        value = getattr(attrs, s.name)
        if not isinstance(value, str) or not value.strip():
            missing.add(s.name)
            errors.append(f"'{s.name}' is required and must be a non-empty string")
    errors.extend(m for name, m in spec.codec.validate(attrs).items() if name not in missing)
    if errors:
        raise ValidationError(f"Invalid {spec.name}: {'; '.join(errors)}", errors=errors)


def build_entity_reference(partial: Mapping[str, Any]) -> ReferenceNode:
    """Create an entity reference from a partial attribute mapping.

    Unknown keys are dropped, omitted keys get their declared default.

    Raises:
        ValidationError: If ``id`` is missing or blank, or a value does not
            fit its declared type (``price="cheap"``, ``alignment="diagonal"``).
    """
    attrs = ENTITY_REFERENCE_CODEC.normalize(partial)
    _validate(ENTITY_REFERENCE, attrs)
    return ReferenceNode(spec=ENTITY_REFERENCE, attrs=attrs)


def build_field_projection(entity_id: str, field_id: str) -> ReferenceNode:
    """Create a field projection.

    ``field_id`` is deliberately not checked against the field registry:
    registry membership is a render-time concern.

    Raises:
        ValidationError: If either identifier is missing or blank.
    """
    attrs = FIELD_PROJECTION_CODEC.normalize({"entity_id": entity_id, "field_id": field_id})
    _validate(FIELD_PROJECTION, attrs)
    return ReferenceNode(spec=FIELD_PROJECTION, attrs=attrs)


def node_spec_for(attrs: Mapping[str, Any]) -> NodeSpec | None:
    """Return the node kind whose discriminator is present in ``attrs``."""
    for spec in NODE_SPECS:
        if spec.matches(attrs):
            return spec
    return None


def parse_element(tag: Tag) -> ReferenceNode | None:
    """Build a node from a markup element, or ``None`` for ordinary markup.

    The returned node may be invalid (empty identifier); callers decide how
    to present it.
    """
    spec = node_spec_for(tag.attrs)
    if spec is None:
        return None
    return ReferenceNode(spec=spec, attrs=spec.codec.decode(tag.attrs))


def render_element(node: ReferenceNode) -> str:
    """Serialize a node to its persisted markup element."""
    attrs = {node.spec.discriminator_key: node.spec.discriminator_value}
    attrs.update(node.spec.codec.encode(node.attrs))
    tag = BeautifulSoup("", "html.parser").new_tag(node.spec.tag, attrs=attrs)
    return str(tag)
