# liveref/core/resolution/normalize.py
"""
Catalog payload normalization.

The catalog backend has answered in several shapes over time: response
envelopes (``{"data": ...}``, ``{"data": {"data": ...}}``, ``{"items": [...]}``),
single objects or lists, and per-field name variants (``title``/``name``,
``main_image``/``image_url``/``image``/``images[0]``, pricing on the item or
on its first offer, ...). :func:`normalize_payload` is the one place that
knows about these variants.
"""
from __future__ import annotations

import logging
import math
from typing import Any, Mapping

from liveref.contracts.attributes import COUPON_TYPES
from liveref.contracts.entity import ResolvedEntity
from liveref.core.codec.coercion import parse_number

logger = logging.getLogger(__name__)

ENVELOPE_KEYS = ("data", "items", "products")

# Payload keys folded into canonical fields; everything else lands in ``extra``
_CONSUMED_KEYS = frozenset({
    "id", "_id", "asin", "sku", "title", "name", "description",
    "price", "current_price", "original_price", "originalPrice", "list_price",
    "discount", "discount_percentage", "discount_rate",
    "main_image", "image_url", "image", "images",
    "brand", "manufacturer", "product_group", "binding", "categories", "category",
    "url", "cj_url", "cjUrl", "alt_url",
    "coupon_type", "couponType", "coupon_value", "couponValue",
    "coupon_expiration_date", "couponExpirationDate", "coupon_expiry",
    "is_prime", "isPrime", "is_free_shipping", "isFreeShipping",
    "availability", "rating", "reviews", "rating_count", "offers",
})


class MalformedPayloadError(ValueError):
    """Raised when a payload cannot be turned into a :class:`ResolvedEntity`.

    ``reason`` is ``not_found`` for empty results and ``malformed_payload``
    for anything unusable.
    """

    def __init__(self, message: str, reason: str = "malformed_payload"):
        self.reason = reason
        super().__init__(message)


def _first(item: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = item.get(key)
        if value is not None and value != "":
            return value
    return None


def _number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    if isinstance(value, str):
        return parse_number(value)
    return None


def _either(preferred: Any, fallback: Any) -> Any:
    """``preferred`` unless it is missing; falsy values such as ``0`` are kept."""
    return preferred if preferred is not None else fallback


def _text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _flag(value: Any) -> bool | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)


def _unwrap(payload: Any) -> Mapping[str, Any]:
    current = payload
    while True:
        if current is None:
            raise MalformedPayloadError("Empty payload", reason="not_found")

        if isinstance(current, list):
            if not current:
                raise MalformedPayloadError("Empty result list", reason="not_found")
            current = current[0]
            continue

        if not isinstance(current, Mapping):
            raise MalformedPayloadError(
                f"Expected object or list payload, got {type(current).__name__}"
            )

        envelope = next(
            (k for k in ENVELOPE_KEYS if isinstance(current.get(k), (Mapping, list))),
            None,
        )
        if envelope is None:
            return current
        current = current[envelope]


def normalize_payload(payload: Any) -> ResolvedEntity:
    """Fold any known catalog payload shape into a :class:`ResolvedEntity`.

    Raises:
        MalformedPayloadError: On empty or unusable payloads.
    """
    item = _unwrap(payload)

    offers = item.get("offers")
    offer: Mapping[str, Any] = {}
    if isinstance(offers, list) and offers and isinstance(offers[0], Mapping):
        offer = offers[0]

    entity_id = _text(_first(item, "id", "_id", "asin", "sku"))
    if entity_id is None:
        raise MalformedPayloadError("Payload carries no identifier")

    price = _number(_first(offer, "price"))
    if price is None:
        price = _number(_first(item, "price", "current_price"))

    # Pricing: offer savings first, then explicit discount, then explicit original price
    original_price: float | None = None
    discount: float | None = None

    savings = _number(offer.get("savings"))
    savings_pct = _number(offer.get("savings_percentage"))
    if price is not None and savings:
        original_price = price + savings
        discount = savings_pct or float(round(savings / original_price * 100))
    elif price is not None and savings_pct:
        discount = savings_pct
        if 0 < savings_pct < 100:
            original_price = round(price / (1 - savings_pct / 100), 2)

    explicit_discount = _number(_first(item, "discount", "discount_percentage", "discount_rate"))
    if discount is None and explicit_discount:
        discount = explicit_discount
        if original_price is None and price is not None and 0 < discount < 100:
            original_price = round(price / (1 - discount / 100), 2)

    explicit_original = _number(_first(item, "original_price", "originalPrice", "list_price"))
    if original_price is None and explicit_original is not None:
        original_price = explicit_original
        if discount is None and price is not None and explicit_original > price > 0:
            discount = float(round((explicit_original - price) / explicit_original * 100))

    image = _text(_first(item, "main_image", "image_url", "image"))
    images = item.get("images")
    if image is None and isinstance(images, list) and images:
        image = _text(images[0])

    categories = item.get("categories")
    category = _text(_first(item, "product_group", "binding", "category"))
    if category is None and isinstance(categories, list) and categories:
        category = _text(categories[0])

    coupon_type = _text(_first(offer, "coupon_type") or _first(item, "coupon_type", "couponType"))
    if coupon_type is not None:
        coupon_type = coupon_type.lower()
        if coupon_type not in COUPON_TYPES:
            logger.debug("Unknown coupon type '%s' for entity %s", coupon_type, entity_id)
            coupon_type = None

    reviews = _number(_first(item, "reviews", "rating_count"))

    entity = ResolvedEntity(
        id=entity_id,
        code=_text(_first(item, "asin", "sku")),
        title=_text(_first(item, "title", "name")),
        description=_text(item.get("description")),
        price=price,
        original_price=original_price,
        discount_percent=discount,
        image=image,
        url=_text(item.get("url")),
        alt_url=_text(_first(item, "cj_url", "cjUrl", "alt_url")),
        brand=_text(_first(item, "brand", "manufacturer")),
        category=category,
        availability=_text(_first(offer, "availability") or item.get("availability")),
        rating=_number(item.get("rating")),
        reviews=int(reviews) if reviews is not None else None,
        coupon_type=coupon_type,
        coupon_value=_either(
            _number(_first(offer, "coupon_value")),
            _number(_first(item, "coupon_value", "couponValue")),
        ),
        coupon_expiry=_text(_first(item, "coupon_expiration_date", "couponExpirationDate", "coupon_expiry")),
        is_prime=_flag(_either(_first(offer, "is_prime"), _first(item, "is_prime", "isPrime"))),
        is_free_shipping=_flag(
            _either(
                _first(offer, "is_free_shipping_eligible"),
                _first(item, "is_free_shipping", "isFreeShipping"),
            )
        ),
        extra={k: v for k, v in item.items() if k not in _CONSUMED_KEYS},
    )
    return entity
