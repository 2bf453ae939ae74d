# liveref/core/presentation/fields.py
"""
Field registry for inline field projections.

A projection node names an entity and a ``field_id``; the registry maps that
id to a display name, a category and a formatter. The built-in set is fixed;
hosts may add fields at startup from YAML, never rename or replace them.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Iterable

import jsonschema

from liveref.core.codec.coercion import stringify_value
from liveref.core.loader import import_attr, load_yaml_files, substitute_env_vars

logger = logging.getLogger(__name__)

Formatter = Callable[[Any], str]

CATEGORIES = ("basic", "price", "shipping", "coupon")


def plain_number(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_text(value: Any) -> str:
    return str(value)


def format_price(value: Any) -> str:
    """``1234.5`` -> ``$1,234.50``."""
    return f"${float(value):,.2f}"


def format_percent(value: Any) -> str:
    return f"{plain_number(value)}%"


def format_yes_no(value: Any) -> str:
    return "Yes" if value else "No"


def format_date(value: Any) -> str:
    """ISO date or timestamp -> ``M/D/YYYY``. Raises ValueError on anything else."""
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    return f"{parsed.month}/{parsed.day}/{parsed.year}"


@dataclass(frozen=True)
class FieldDefinition:
    """One projectable field.

    ``attribute`` is the key looked up on the resolved entity; it defaults to
    ``field_id``.
    """

    field_id: str
    display_name: str
    category: str
    formatter: Formatter = format_text
    attribute: str | None = None

    @property
    def source(self) -> str:
        return self.attribute or self.field_id

    def describe(self) -> dict[str, Any]:
        return {
            "id": self.field_id,
            "name": self.display_name,
            "category": self.category,
            "attribute": self.source,
        }


class FieldRegistry:
    """In-memory registry of projectable fields, unique by ``field_id``."""

    def __init__(self) -> None:
        self._fields: dict[str, FieldDefinition] = {}

    def register(self, definition: FieldDefinition) -> None:
        if definition.field_id in self._fields:
            raise ValueError(f"Field '{definition.field_id}' already registered")
        if definition.category not in CATEGORIES:
            raise ValueError(
                f"Unknown category '{definition.category}' for field "
                f"'{definition.field_id}'. Expected one of {list(CATEGORIES)}"
            )
        self._fields[definition.field_id] = definition
        logger.debug("Registered field: %s (%s)", definition.field_id, definition.category)

    def get(self, field_id: str) -> FieldDefinition:
        try:
            return self._fields[field_id]
        except KeyError:
            raise KeyError(
                f"Field '{field_id}' not found. Available: {list(self._fields)}"
            )

    def has(self, field_id: str) -> bool:
        return field_id in self._fields

    def categories(self) -> dict[str, list[FieldDefinition]]:
        """Fields grouped by category, in declaration order."""
        grouped: dict[str, list[FieldDefinition]] = {c: [] for c in CATEGORIES}
        for definition in self._fields.values():
            grouped[definition.category].append(definition)
        return grouped

    def list_all(self) -> list[dict[str, Any]]:
        return [d.describe() for d in self._fields.values()]

    def describe(self, field_id: str) -> dict[str, Any]:
        return self.get(field_id).describe()

    def __len__(self) -> int:
        return len(self._fields)


BUILTIN_FIELDS: tuple[FieldDefinition, ...] = (
    FieldDefinition("title", "Title", "basic"),
    FieldDefinition("brand", "Brand", "basic"),
    FieldDefinition("description", "Description", "basic"),
    FieldDefinition("price", "Current Price", "price", format_price),
    FieldDefinition("originalPrice", "Original Price", "price", format_price),
    FieldDefinition("discount", "Discount Rate", "price", format_percent),
    FieldDefinition("isPrime", "Prime Status", "shipping", format_yes_no),
    FieldDefinition("isFreeShipping", "Free Shipping", "shipping", format_yes_no),
    FieldDefinition("couponType", "Coupon Type", "coupon"),
    FieldDefinition("couponValue", "Coupon Value", "coupon", format_price),
    FieldDefinition("couponExpirationDate", "Expiration Date", "coupon", format_date),
)


def default_field_registry() -> FieldRegistry:
    """A fresh registry holding the built-in fields."""
    registry = FieldRegistry()
    for definition in BUILTIN_FIELDS:
        registry.register(definition)
    return registry


def raw_value(value: Any) -> str:
    """String form used when no formatter applies."""
    return stringify_value(value)


FIELD_ENTRY_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["name", "category"],
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "category": {"type": "string", "enum": list(CATEGORIES)},
        "formatter": {"type": "string", "pattern": "^[^:]+:[^:]+$"},
        "attribute": {"type": "string", "minLength": 1},
    },
    "additionalProperties": False,
}


def load_field_extensions(
    *,
    patterns: Iterable[str],
    registry: FieldRegistry,
) -> int:
    """Register extra fields declared in YAML. Returns how many were added.

    Expected YAML::

        fields:
          rating:
            name: Rating
            category: basic
            formatter: mypackage.formatters:stars
            attribute: rating

    A field id that already exists raises ``ValueError``.
    """
    yamls = load_yaml_files(patterns)
    added = 0

    for data in yamls:
        for field_id, raw in (data.get("fields") or {}).items():
            spec = substitute_env_vars(raw or {})
            try:
                jsonschema.validate(spec, FIELD_ENTRY_SCHEMA)
            except jsonschema.ValidationError as exc:
                logger.error("Invalid field definition '%s': %s", field_id, exc.message)
                raise ValueError(f"Invalid field definition '{field_id}': {exc.message}") from exc

            formatter = import_attr(spec["formatter"]) if spec.get("formatter") else format_text
            if not callable(formatter):
                raise ValueError(f"Formatter for field '{field_id}' is not callable")

            registry.register(
                FieldDefinition(
                    field_id=str(field_id),
                    display_name=spec["name"],
                    category=spec["category"],
                    formatter=formatter,
                    attribute=spec.get("attribute"),
                )
            )
            added += 1

    if added:
        logger.info("Registered %d extension field(s)", added)
    return added
