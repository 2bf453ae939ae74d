# tests/core/presentation/test_renderers.py
from __future__ import annotations

import pytest
from bs4 import BeautifulSoup

from liveref.contracts.attributes import EntityReferenceAttrs
from liveref.contracts.resolution import LOADING, ResolutionError
from liveref.core.presentation.fields import FieldDefinition, FieldRegistry
from liveref.core.presentation.renderers import (
    ABSENT_TEXT,
    ENTITY_RENDERERS,
    FAILED_TEXT,
    LOADING_TEXT,
    format_field_value,
    render_entity_reference,
    render_field_projection,
)
from liveref.core.resolution.normalize import normalize_payload
from tests.helpers.catalog import CODE, CODE_PAYLOAD, ID_PAYLOAD

ENTITY = normalize_payload(CODE_PAYLOAD)
NO_BRAND = normalize_payload(ID_PAYLOAD)
ERROR = ResolutionError(identifier=CODE, reason="backend_error", message="boom")


def _root(html: str):
    return BeautifulSoup(html, "html.parser").find()


class TestEntityReference:
    @pytest.mark.parametrize("style", ["simple", "card", "horizontal", "mini"])
    def test_each_style_has_its_own_skeleton(self, style):
        html = render_entity_reference(LOADING, style, identifier=CODE)
        assert f"liveref-skeleton--{style}" in html
        assert 'aria-busy="true"' in html

    def test_unknown_style_skeleton_falls_back(self):
        html = render_entity_reference(LOADING, "featured", identifier=CODE)
        assert "liveref-skeleton--simple" in html

    @pytest.mark.parametrize("style", ["simple", "card", "horizontal", "mini"])
    def test_each_style_has_its_own_renderer(self, style):
        html = render_entity_reference(ENTITY, style, identifier=CODE)
        assert f"liveref-entity--{style}" in html
        assert "Echo Dot (4th Gen)" in html
        assert "$49.99" in html

    def test_unknown_style_renders_simple(self):
        html = render_entity_reference(ENTITY, "featured", identifier=CODE)
        assert "liveref-entity--simple" in html

    def test_alignment_wrapper(self):
        root = _root(render_entity_reference(ENTITY, "card", identifier=CODE, alignment="center"))
        assert "liveref-align--center" in root["class"]
        assert root["data-entity-id"] == CODE

    def test_invalid_alignment_defaults_left(self):
        root = _root(render_entity_reference(ENTITY, "card", identifier=CODE, alignment="justify"))
        assert "liveref-align--left" in root["class"]

    def test_card_details(self):
        html = render_entity_reference(ENTITY, "card", identifier=CODE)
        assert "Amazon" in html
        assert "-17%" in html
        assert "Prime" in html
        assert 'href="https://aff.example.com/echo"' in html

    def test_coupon(self):
        html = render_entity_reference(NO_BRAND, "card", identifier=NO_BRAND.id)
        assert "10% off coupon" in html
        assert "Free Shipping" in html
        assert "liveref-entity__brand" not in html

    def test_error_renders_unavailable(self):
        root = _root(render_entity_reference(ERROR, "card", identifier=CODE))
        assert root["class"] == ["liveref-unavailable"]
        assert root["data-entity-id"] == CODE
        assert CODE in root.get_text()

    def test_loading_error_and_success_are_distinct(self):
        outputs = {
            render_entity_reference(state, "simple", identifier=CODE)
            for state in (LOADING, ERROR, ENTITY)
        }
        assert len(outputs) == 3

    def test_markup_is_escaped(self):
        nasty = ENTITY.model_copy(update={"title": "<script>alert(1)</script>"})
        html = render_entity_reference(nasty, "simple", identifier=CODE)
        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_snapshot_fallback(self):
        snapshot = EntityReferenceAttrs(id=CODE, title="Saved title", price=39.0)
        root = _root(render_entity_reference(ERROR, "mini", identifier=CODE, snapshot=snapshot))
        assert root["data-snapshot"] == "true"
        assert "Saved title" in root.get_text()

    def test_snapshot_without_title_is_unavailable(self):
        snapshot = EntityReferenceAttrs(id=CODE)
        html = render_entity_reference(ERROR, "mini", identifier=CODE, snapshot=snapshot)
        assert "liveref-unavailable" in html

    def test_snapshot_ignored_on_success(self):
        snapshot = EntityReferenceAttrs(id=CODE, title="Saved title")
        html = render_entity_reference(ENTITY, "simple", identifier=CODE, snapshot=snapshot)
        assert "Saved title" not in html
        assert "data-snapshot" not in html

    def test_renderer_failure_is_contained(self, monkeypatch):
        def broken(_):
            raise RuntimeError("template exploded")

        monkeypatch.setitem(ENTITY_RENDERERS, "card", broken)
        html = render_entity_reference(ENTITY, "card", identifier=CODE)
        assert "liveref-unavailable" in html


class TestFieldValue:
    def test_states(self, registry: FieldRegistry):
        assert format_field_value(LOADING, "price", registry) == LOADING_TEXT
        assert format_field_value(ERROR, "price", registry) == FAILED_TEXT
        assert format_field_value(ENTITY, "price", registry) == "$49.99"
        assert len({LOADING_TEXT, FAILED_TEXT, ABSENT_TEXT}) == 3

    def test_absent_field(self, registry: FieldRegistry):
        assert format_field_value(NO_BRAND, "brand", registry) == ABSENT_TEXT

    def test_formatters(self, registry: FieldRegistry):
        assert format_field_value(NO_BRAND, "originalPrice", registry) == "$35.00"
        assert format_field_value(NO_BRAND, "discount", registry) == "30%"
        assert format_field_value(NO_BRAND, "isFreeShipping", registry) == "Yes"
        assert format_field_value(NO_BRAND, "couponExpirationDate", registry) == "3/7/2025"

    def test_unregistered_field_uses_raw_value(self, registry: FieldRegistry):
        entity = ENTITY.model_copy(update={"extra": {"color": "red"}})
        assert format_field_value(entity, "color", registry) == "red"
        assert format_field_value(ENTITY, "isPrime", FieldRegistry()) == "true"

    def test_formatter_exception_is_contained(self, registry: FieldRegistry):
        broken = NO_BRAND.model_copy(update={"coupon_expiry": "soon"})
        assert format_field_value(broken, "couponExpirationDate", registry) == "soon"
        assert format_field_value(broken, "couponValue", registry) == "$10.00"

    def test_custom_formatter_failure(self):
        def explode(value):
            raise ZeroDivisionError("nope")

        registry = FieldRegistry()
        registry.register(FieldDefinition("price", "Price", "price", explode))
        assert format_field_value(ENTITY, "price", registry) == "49.99"


class TestFieldProjection:
    def test_wrapped_in_span(self, registry: FieldRegistry):
        root = _root(render_field_projection(ENTITY, "brand", registry, entity_id=CODE))
        assert root.name == "span"
        assert root["data-state"] == "ready"
        assert root["data-field-id"] == "brand"
        assert root.get_text() == "Amazon"

    def test_loading_and_error(self, registry: FieldRegistry):
        loading = _root(render_field_projection(LOADING, "brand", registry, entity_id=CODE))
        failed = _root(render_field_projection(ERROR, "brand", registry, entity_id=CODE))
        assert (loading["data-state"], loading.get_text()) == ("loading", LOADING_TEXT)
        assert (failed["data-state"], failed.get_text()) == ("error", FAILED_TEXT)
