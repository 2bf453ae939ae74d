# liveref/core/presentation/renderers.py
"""
HTML rendering for reference nodes.

Every function here returns markup and never raises: loading, failure and
missing data each degrade to their own stable fragment so one bad reference
cannot break the rest of a document.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from jinja2 import DictLoader, Environment
from markupsafe import Markup

from liveref.contracts.attributes import (
    ALIGNMENTS,
    DEFAULT_ALIGNMENT,
    DEFAULT_DISPLAY_STYLE,
    EntityReferenceAttrs,
)
from liveref.contracts.entity import ResolvedEntity
from liveref.contracts.resolution import Loading, ResolutionError, ResolutionState
from liveref.core.presentation.fields import (
    FieldRegistry,
    format_price,
    plain_number,
    raw_value,
)

logger = logging.getLogger(__name__)

LOADING_TEXT = "Loading..."
FAILED_TEXT = "Failed to load"
ABSENT_TEXT = "No data available"

TEMPLATES: dict[str, str] = {
    "parts.html": """
{%- macro price_block(e) -%}
{%- if e.price is not none %}<span class="liveref-entity__price">{{ e.price|price }}</span>{% endif -%}
{%- if e.original_price is not none and (e.price is none or e.original_price > e.price) %}<s class="liveref-entity__original-price">{{ e.original_price|price }}</s>{% endif -%}
{%- endmacro -%}
{%- macro badges(e) -%}
{%- if e.discount_percent %}<span class="liveref-badge liveref-badge--discount">-{{ e.discount_percent|number }}%</span>{% endif -%}
{%- if e.is_prime %}<span class="liveref-badge liveref-badge--prime">Prime</span>{% endif -%}
{%- if e.is_free_shipping %}<span class="liveref-badge liveref-badge--shipping">Free Shipping</span>{% endif -%}
{%- endmacro -%}
{%- macro coupon(e) -%}
{%- if e.coupon_type and e.coupon_value %}<span class="liveref-entity__coupon">
{%- if e.coupon_type == "percentage" %}{{ e.coupon_value|number }}% off coupon{% else %}{{ e.coupon_value|price }} off coupon{% endif -%}
{%- if e.coupon_expiry %} (expires {{ e.coupon_expiry }}){% endif -%}
</span>{% endif -%}
{%- endmacro -%}
{%- macro image(e, css) -%}
{%- if e.image %}<a href="{{ e.detail_url }}" class="{{ css }}"><img src="{{ e.image }}" alt="{{ e.title or '' }}" loading="lazy"></a>{% endif -%}
{%- endmacro -%}
{%- macro deal_link(e, label) -%}
{%- if e.link %}<a href="{{ e.link }}" class="liveref-entity__deal" rel="nofollow sponsored noopener" target="_blank">{{ label }}</a>{% endif -%}
{%- endmacro -%}
""",
    "simple.html": """
{%- import "parts.html" as p -%}
<span class="liveref-entity liveref-entity--simple">
{{- p.image(e, "liveref-entity__thumb") -}}
<span class="liveref-entity__body"><a href="{{ e.detail_url }}" class="liveref-entity__title">{{ e.title or e.id }}</a>
<span class="liveref-entity__meta">{{ p.price_block(e) }}{% if e.code %}<span class="liveref-entity__code">ASIN: {{ e.code }}</span>{% endif %}</span></span>
{{- p.deal_link(e, "View deal") -}}
</span>
""",
    "card.html": """
{%- import "parts.html" as p -%}
<span class="liveref-entity liveref-entity--card">
<span class="liveref-entity__media">{{ p.image(e, "liveref-entity__image") }}{{ p.badges(e) }}</span>
<span class="liveref-entity__body">
{%- if e.brand %}<span class="liveref-entity__brand">{{ e.brand }}</span>{% endif -%}
<a href="{{ e.detail_url }}" class="liveref-entity__title">{{ e.title or e.id }}</a>
<span class="liveref-entity__pricing">{{ p.price_block(e) }}</span>
{{- p.coupon(e) -}}
{{- p.deal_link(e, "Buy now") -}}
</span>
</span>
""",
    "horizontal.html": """
{%- import "parts.html" as p -%}
<span class="liveref-entity liveref-entity--horizontal">
{{- p.image(e, "liveref-entity__image") -}}
<span class="liveref-entity__body">
<a href="{{ e.detail_url }}" class="liveref-entity__title">{{ e.title or e.id }}</a>
{%- if e.brand %}<span class="liveref-entity__brand">{{ e.brand }}</span>{% endif -%}
<span class="liveref-entity__pricing">{{ p.price_block(e) }}{{ p.badges(e) }}</span>
{{- p.coupon(e) -}}
</span>
{{- p.deal_link(e, "View deal") -}}
</span>
""",
    "mini.html": """
{%- import "parts.html" as p -%}
<span class="liveref-entity liveref-entity--mini">
{{- p.image(e, "liveref-entity__thumb") -}}
<a href="{{ e.link or e.detail_url }}" class="liveref-entity__title">{{ e.title or e.id }}</a>
{%- if e.price is not none %}<span class="liveref-entity__price">{{ e.price|price }}</span>{% endif -%}
</span>
""",
    "wrapper.html": (
        '<span class="liveref-align liveref-align--{{ alignment }}" data-entity-id="{{ identifier }}"'
        '{% if snapshot %} data-snapshot="true"{% endif %}>{{ body }}</span>'
    ),
    "skeleton.html": (
        '<span class="liveref-align liveref-align--{{ alignment }}" data-entity-id="{{ identifier }}">'
        '<span class="liveref-skeleton liveref-skeleton--{{ style }}" aria-busy="true"></span></span>'
    ),
    "unavailable.html": (
        '<span class="liveref-unavailable" data-entity-id="{{ identifier }}"'
        '{% if reason %} data-reason="{{ reason }}"{% endif %}>'
        "Product unavailable ({{ identifier }})</span>"
    ),
    "field.html": (
        '<span class="liveref-field" data-entity-id="{{ entity_id }}" data-field-id="{{ field_id }}"'
        ' data-state="{{ state }}">{{ text }}</span>'
    ),
}


_env = Environment(loader=DictLoader(TEMPLATES), autoescape=True)
_env.filters["price"] = format_price
_env.filters["number"] = plain_number


def _view_model(source: ResolvedEntity | EntityReferenceAttrs) -> dict[str, Any]:
    """Flatten a live entity or a snapshot bag into the renderer context."""
    if isinstance(source, ResolvedEntity):
        link = source.link_url
    else:
        link = source.alt_url or source.url or ""
    return {
        "id": source.id,
        "code": source.code,
        "title": source.title,
        "brand": source.brand,
        "image": source.image,
        "price": source.price,
        "original_price": source.original_price,
        "discount_percent": source.discount_percent,
        "coupon_type": source.coupon_type,
        "coupon_value": source.coupon_value,
        "coupon_expiry": source.coupon_expiry,
        "is_prime": bool(source.is_prime),
        "is_free_shipping": bool(source.is_free_shipping),
        "link": link,
        "detail_url": f"/product/{source.id}",
    }


def _template_renderer(name: str) -> Callable[[Mapping[str, Any]], str]:
    template = _env.get_template(name)

    def render(e: Mapping[str, Any]) -> str:
        return template.render(e=e)

    return render


ENTITY_RENDERERS: dict[str, Callable[[Mapping[str, Any]], str]] = {
    "simple": _template_renderer("simple.html"),
    "card": _template_renderer("card.html"),
    "horizontal": _template_renderer("horizontal.html"),
    "mini": _template_renderer("mini.html"),
}


def _style(display_style: str | None) -> str:
    return display_style if display_style in ENTITY_RENDERERS else DEFAULT_DISPLAY_STYLE


def _alignment(alignment: str | None) -> str:
    return alignment if alignment in ALIGNMENTS else DEFAULT_ALIGNMENT


def render_skeleton(display_style: str | None, *, identifier: str, alignment: str | None = None) -> str:
    return _env.get_template("skeleton.html").render(
        style=_style(display_style),
        identifier=identifier,
        alignment=_alignment(alignment),
    )


def render_unavailable(identifier: str, reason: str | None = None) -> str:
    return _env.get_template("unavailable.html").render(identifier=identifier, reason=reason)


def render_entity_reference(
    state: ResolutionState,
    display_style: str | None,
    *,
    identifier: str,
    alignment: str | None = None,
    snapshot: EntityReferenceAttrs | None = None,
) -> str:
    """Render one entity reference for its current resolution state.

    ``snapshot`` is only consulted when resolution failed and the caller
    opted into snapshot fallback by passing it.
    """
    if isinstance(state, Loading):
        return render_skeleton(display_style, identifier=identifier, alignment=alignment)

    from_snapshot = False
    if isinstance(state, ResolutionError):
        if snapshot is None or not snapshot.has_snapshot:
            return render_unavailable(identifier, state.reason)
        logger.info("Rendering snapshot for %s after %s", identifier, state.reason)
        source: ResolvedEntity | EntityReferenceAttrs = snapshot
        from_snapshot = True
    else:
        source = state

    style = _style(display_style)
    try:
        body = ENTITY_RENDERERS[style](_view_model(source))
    except Exception as exc:
        logger.warning("Renderer '%s' failed for %s: %s", style, identifier, exc)
        return render_unavailable(identifier, "render_error")

    return _env.get_template("wrapper.html").render(
        body=Markup(body),
        identifier=identifier,
        alignment=_alignment(alignment),
        snapshot=from_snapshot,
    )


def format_field_value(state: ResolutionState, field_id: str, registry: FieldRegistry) -> str:
    """Display text of one projected field.

    Loading, failure and "field absent" produce distinct fixed strings. A
    formatter that raises falls back to the raw value for this field only.
    """
    if isinstance(state, Loading):
        return LOADING_TEXT
    if isinstance(state, ResolutionError):
        return FAILED_TEXT

    definition = registry.get(field_id) if registry.has(field_id) else None
    value = state.value_of(definition.source if definition else field_id)
    if value is None:
        return ABSENT_TEXT

    if definition is None:
        return raw_value(value)

    try:
        return definition.formatter(value)
    except Exception as exc:
        logger.warning("Formatter for field '%s' failed on %r: %s", field_id, value, exc)
        return raw_value(value)


def render_field_projection(
    state: ResolutionState,
    field_id: str,
    registry: FieldRegistry,
    *,
    entity_id: str,
) -> str:
    if isinstance(state, Loading):
        marker = "loading"
    elif isinstance(state, ResolutionError):
        marker = "error"
    else:
        marker = "ready"
    return _env.get_template("field.html").render(
        entity_id=entity_id,
        field_id=field_id,
        state=marker,
        text=format_field_value(state, field_id, registry),
    )
