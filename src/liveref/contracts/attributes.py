# liveref/contracts/attributes.py
"""
Attribute contracts for the two reference node kinds.

An entity reference stands in for one catalog product; a field projection
stands in for exactly one derived field of one product. Both are atomic,
inline document nodes whose attributes are persisted through
:mod:`liveref.core.codec.attributes`.
"""
from __future__ import annotations

from dataclasses import dataclass

DISPLAY_STYLES: tuple[str, ...] = ("simple", "card", "horizontal", "mini")
ALIGNMENTS: tuple[str, ...] = ("left", "center", "right")
COUPON_TYPES: tuple[str, ...] = ("percentage", "fixed")

DEFAULT_DISPLAY_STYLE = "simple"
DEFAULT_ALIGNMENT = "left"


@dataclass(frozen=True)
class EntityReferenceAttrs:
    """Attributes of an entity reference node.

    Attributes:
        id: Internal id or external catalog code of the referenced entity.
        display_style: Renderer selector (``simple``, ``card``,
            ``horizontal``, ``mini``). Unknown styles are kept as-is and
            rendered as ``simple``.
        alignment: ``left``, ``center`` or ``right``.

    Every other attribute belongs to the snapshot bag captured at insertion
    time. Snapshot values are a last-resort fallback and never override a
    live resolution.
    """

    id: str
    display_style: str = DEFAULT_DISPLAY_STYLE
    alignment: str = DEFAULT_ALIGNMENT

    # snapshot bag
    code: str | None = None
    title: str | None = None
    price: float | None = None
    image: str | None = None
    url: str | None = None
    alt_url: str | None = None
    brand: str | None = None
    original_price: float | None = None
    discount_percent: float | None = None
    coupon_type: str | None = None
    coupon_value: float | None = None
    coupon_expiry: str | None = None
    is_prime: bool = False
    is_free_shipping: bool = False

    @property
    def has_snapshot(self) -> bool:
        return bool(self.title)


@dataclass(frozen=True)
class FieldProjectionAttrs:
    """Attributes of a field projection node."""

    entity_id: str
    field_id: str
