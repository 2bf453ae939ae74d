# liveref/core/codec/attributes.py
"""
Attribute codecs: typed node attributes <-> persisted markup attribute bag.

Each node kind declares its attributes once, as a list of
:class:`AttributeSpec`. From that declaration the codec derives:

* ``encode`` - defaults and ``None`` are omitted, everything else is
  stringified losslessly;
* ``decode`` - canonical keys first, then legacy aliases; unusable values
  fall back to the declared default and never raise;
* ``normalize`` - an allow-listed merge of a partial mapping with the
  declared defaults;
* ``validate`` - type and enum errors of an in-memory attribute set, so that
  nothing is written to markup that ``decode`` would discard.

For every valid attribute set ``a``: ``decode(encode(a)) == normalize(a)``.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, fields, is_dataclass
from typing import Any, Generic, Mapping, Sequence, TypeVar

from liveref.contracts.attributes import (
    ALIGNMENTS,
    COUPON_TYPES,
    DEFAULT_ALIGNMENT,
    DEFAULT_DISPLAY_STYLE,
    EntityReferenceAttrs,
    FieldProjectionAttrs,
)
from liveref.core.codec.coercion import CoercionError, coerce_value, stringify_value

logger = logging.getLogger(__name__)

T = TypeVar("T")

STRING: dict[str, Any] = {"type": "string"}
NUMBER: dict[str, Any] = {"type": "number"}
BOOLEAN: dict[str, Any] = {"type": "boolean"}


@dataclass(frozen=True)
class AttributeSpec:
    """Declaration of one node attribute.

    Attributes:
        name: Attribute name on the in-memory dataclass.
        key: Canonical markup attribute key.
        schema: JSON-Schema-like type declaration (``type`` and optional ``enum``).
        default: Declared default; values equal to it are not persisted.
        aliases: Legacy markup keys accepted on decode, in priority order.
        required: Required attributes are always persisted.
    """

    name: str
    key: str
    schema: dict[str, Any] = field(default_factory=lambda: dict(STRING))
    default: Any = None
    aliases: tuple[str, ...] = ()
    required: bool = False

    @property
    def keys(self) -> tuple[str, ...]:
        return (self.key, *self.aliases)


class AttributeCodec(Generic[T]):
    """Bidirectional mapping for one node kind."""

    def __init__(self, model: type[T], specs: Sequence[AttributeSpec]) -> None:
        if not is_dataclass(model):
            raise TypeError(f"Expected dataclass model, got {model!r}")

        model_fields = {f.name for f in fields(model)}
        names = [s.name for s in specs]
        if set(names) != model_fields or len(names) != len(model_fields):
            raise ValueError(
                f"Attribute specs {names} do not match fields of {model.__name__}: "
                f"{sorted(model_fields)}"
            )

        seen: set[str] = set()
        for spec in specs:
            for key in spec.keys:
                if key in seen:
                    raise ValueError(f"Markup key '{key}' declared twice")
                seen.add(key)

        self._model = model
        self._specs = tuple(specs)

    @property
    def model(self) -> type[T]:
        return self._model

    @property
    def specs(self) -> tuple[AttributeSpec, ...]:
        return self._specs

    @property
    def names(self) -> list[str]:
        return [s.name for s in self._specs]

    @property
    def markup_keys(self) -> list[str]:
        return [k for s in self._specs for k in s.keys]

    def spec(self, name: str) -> AttributeSpec:
        for s in self._specs:
            if s.name == name:
                return s
        raise KeyError(f"Attribute '{name}' not declared. Available: {self.names}")

    def defaults(self) -> dict[str, Any]:
        return {s.name: s.default for s in self._specs}

    def normalize(self, attrs: Mapping[str, Any] | T) -> T:
        """Fill declared defaults; keys outside the allow-list are dropped."""
        if isinstance(attrs, self._model):
            return attrs

        values: dict[str, Any] = {}
        for s in self._specs:
            value = attrs.get(s.name)  # type: ignore[union-attr]
            if value is None:
                value = "" if s.required else s.default
            values[s.name] = value

        dropped = set(attrs) - set(values)  # type: ignore[arg-type]
        if dropped:
            logger.debug("Dropping unrecognized %s attributes: %s", self._model.__name__, sorted(dropped))

        return self._model(**values)

    def validate(self, attrs: T) -> dict[str, str]:
        """Map each attribute whose value does not fit its schema to a message.

        ``None`` is always accepted; required-ness is checked by the caller.
        """
        errors: dict[str, str] = {}
        for s in self._specs:
            value = getattr(attrs, s.name)
            if value is None:
                continue
            schema_type = s.schema.get("type", "string")
            if schema_type == "number":
                if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
                    errors[s.name] = f"'{s.name}' must be a finite number, got {value!r}"
                continue
            if schema_type == "boolean":
                if not isinstance(value, bool):
                    errors[s.name] = f"'{s.name}' must be a boolean, got {value!r}"
                continue
            if not isinstance(value, str):
                errors[s.name] = f"'{s.name}' must be a string, got {value!r}"
                continue
            try:
                coerce_value(value, s.schema)
            except CoercionError:
                errors[s.name] = f"'{s.name}' must be one of {s.schema['enum']}, got {value!r}"
        return errors

    def encode(self, attrs: Mapping[str, Any] | T) -> dict[str, str]:
        """Return the markup attribute bag for ``attrs``."""
        model = self.normalize(attrs)
        bag: dict[str, str] = {}
        for s in self._specs:
            value = getattr(model, s.name)
            if value is None:
                continue
            if not s.required and value == s.default:
                continue
            bag[s.key] = stringify_value(value)
        return bag

    def decode(self, bag: Mapping[str, Any]) -> T:
        """Read typed attributes from a markup attribute bag. Never raises."""
        values: dict[str, Any] = {}
        for s in self._specs:
            raw = self._first_present(bag, s.keys)
            if raw is None:
                values[s.name] = "" if s.required else s.default
                continue
            try:
                values[s.name] = coerce_value(raw, s.schema)
            except CoercionError as exc:
                exc.param = s.key
                logger.debug("Attribute fallback to default: %s", exc)
                values[s.name] = "" if s.required else s.default
        return self._model(**values)

    @staticmethod
    def _first_present(bag: Mapping[str, Any], keys: Sequence[str]) -> str | None:
        for key in keys:
            raw = bag.get(key)
            if raw is None:
                continue
            if isinstance(raw, (list, tuple)):
                # multi-valued attributes as returned by some HTML parsers
                raw = " ".join(str(r) for r in raw)
            return str(raw)
        return None


ENTITY_REFERENCE_SPECS: tuple[AttributeSpec, ...] = (
    AttributeSpec("id", "data-product-id", aliases=("data-id",), required=True),
    AttributeSpec(
        "display_style", "data-style",
        default=DEFAULT_DISPLAY_STYLE, aliases=("data-display-style",),
    ),
    AttributeSpec(
        "alignment", "data-alignment",
        schema={"type": "string", "enum": list(ALIGNMENTS)},
        default=DEFAULT_ALIGNMENT, aliases=("data-align",),
    ),
    AttributeSpec("code", "data-asin", aliases=("data-code",)),
    AttributeSpec("title", "data-title", aliases=("data-name",)),
    AttributeSpec("price", "data-price", NUMBER, aliases=("data-current-price",)),
    AttributeSpec(
        "image", "data-image",
        aliases=("data-image-url", "data-image_url", "data-main-image"),
    ),
    AttributeSpec("url", "data-url"),
    AttributeSpec("alt_url", "data-alt-url", aliases=("data-cj-url",)),
    AttributeSpec("brand", "data-brand", aliases=("data-manufacturer",)),
    AttributeSpec("original_price", "data-original-price", NUMBER, aliases=("data-list-price",)),
    AttributeSpec("discount_percent", "data-discount", NUMBER, aliases=("data-discount-percentage",)),
    AttributeSpec(
        "coupon_type", "data-coupon-type",
        schema={"type": "string", "enum": list(COUPON_TYPES)},
    ),
    AttributeSpec("coupon_value", "data-coupon-value", NUMBER),
    AttributeSpec("coupon_expiry", "data-coupon-expiry", aliases=("data-coupon-expiration-date",)),
    AttributeSpec("is_prime", "data-is-prime", BOOLEAN, default=False),
    AttributeSpec("is_free_shipping", "data-is-free-shipping", BOOLEAN, default=False),
)

FIELD_PROJECTION_SPECS: tuple[AttributeSpec, ...] = (
    AttributeSpec("entity_id", "data-product-id", aliases=("data-entity-id",), required=True),
    AttributeSpec("field_id", "data-field-id", aliases=("data-field",), required=True),
)

ENTITY_REFERENCE_CODEC: AttributeCodec[EntityReferenceAttrs] = AttributeCodec(
    EntityReferenceAttrs, ENTITY_REFERENCE_SPECS
)
FIELD_PROJECTION_CODEC: AttributeCodec[FieldProjectionAttrs] = AttributeCodec(
    FieldProjectionAttrs, FIELD_PROJECTION_SPECS
)
