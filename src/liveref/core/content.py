# liveref/core/content.py
"""
Server-side rendering of stored documents.

Every reference element in the stored markup is replaced by its rendered
fragment; everything else passes through untouched.
"""
from __future__ import annotations

import asyncio
import logging

from liveref.contracts.attributes import EntityReferenceAttrs, FieldProjectionAttrs
from liveref.core.presentation.fields import FieldRegistry
from liveref.core.presentation.renderers import render_entity_reference, render_field_projection
from liveref.core.resolution.cache import ResolutionCache, ResolveResult
from liveref.core.schema.document import Document
from liveref.core.schema.nodes import ReferenceNode

logger = logging.getLogger(__name__)

MISSING_ID_HTML = '<span class="liveref-missing">Product ID missing</span>'
INCOMPLETE_PROJECTION_HTML = '<span class="liveref-missing">[Metadata information incomplete]</span>'


async def render_content(
    html: str,
    cache: ResolutionCache,
    registry: FieldRegistry,
    *,
    snapshot_fallback: bool = False,
) -> str:
    """Render ``html`` with all reference nodes resolved.

    Distinct identifiers are resolved concurrently, once each.
    """
    document = Document.from_html(html)

    identifiers = list(dict.fromkeys(
        node.identifier for _, node in document.references() if node.is_valid
    ))
    results = await asyncio.gather(*(cache.resolve(i) for i in identifiers))
    resolved = dict(zip(identifiers, results))

    logger.debug(
        "Rendering content: %d segment(s), %d distinct reference(s)",
        len(document),
        len(identifiers),
    )

    parts: list[str] = []
    for segment in document.content:
        if isinstance(segment, ReferenceNode):
            parts.append(_render_node(segment, resolved, registry, snapshot_fallback))
        else:
            parts.append(segment)
    return "".join(parts)


def _render_node(
    node: ReferenceNode,
    resolved: dict[str, ResolveResult],
    registry: FieldRegistry,
    snapshot_fallback: bool,
) -> str:
    attrs = node.attrs
    if isinstance(attrs, EntityReferenceAttrs):
        if not node.is_valid:
            return MISSING_ID_HTML
        return render_entity_reference(
            resolved[attrs.id],
            attrs.display_style,
            identifier=attrs.id,
            alignment=attrs.alignment,
            snapshot=attrs if snapshot_fallback else None,
        )

    assert isinstance(attrs, FieldProjectionAttrs)
    if not node.is_valid:
        return INCOMPLETE_PROJECTION_HTML
    return render_field_projection(
        resolved[attrs.entity_id],
        attrs.field_id,
        registry,
        entity_id=attrs.entity_id,
    )
