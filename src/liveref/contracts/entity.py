# liveref/contracts/entity.py
"""
Canonical live snapshot of a catalog entity.

Backend payloads come in several legacy shapes; they are folded into this
single model by :func:`liveref.core.resolution.normalize.normalize_payload`
before anything else sees them.
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ResolvedEntity(BaseModel):
    """Current entity data fetched for one identifier.

    Instances are shared by reference between every node that requested the
    same identifier, hence frozen.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    id: str
    code: str | None = None
    title: str | None = None
    description: str | None = None
    price: float | None = None
    original_price: float | None = None
    discount_percent: float | None = Field(default=None, alias="discount")
    image: str | None = None
    url: str | None = None
    alt_url: str | None = Field(default=None, alias="cjUrl")
    brand: str | None = None
    category: str | None = None
    availability: str | None = None
    rating: float | None = None
    reviews: int | None = None
    coupon_type: str | None = None
    coupon_value: float | None = None
    coupon_expiry: str | None = Field(default=None, alias="couponExpirationDate")
    is_prime: bool | None = None
    is_free_shipping: bool | None = None
    extra: dict[str, Any] = Field(default_factory=dict)

    @property
    def link_url(self) -> str:
        """Preferred outbound link: the alternate affiliate url wins."""
        return self.alt_url or self.url or ""

    def value_of(self, field_id: str) -> Any:
        """Look up a field by alias (``originalPrice``) or name (``original_price``).

        Unmapped payload keys are reachable through ``extra``. Returns
        ``None`` when the entity does not carry the field.
        """
        fields = type(self).model_fields
        for name, info in fields.items():
            if field_id == name or field_id == info.alias:
                return getattr(self, name)
        return self.extra.get(field_id)
