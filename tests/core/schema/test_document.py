# tests/core/schema/test_document.py
from __future__ import annotations

from liveref.core.schema.document import Document
from liveref.core.schema.nodes import ReferenceNode

STORED = (
    '<p>Try <span data-node-type="product" data-product-id="B08N5WRWNW" data-style="card"></span>'
    ' for <span data-type="product-metadata" data-product-id="B08N5WRWNW" data-field-id="price"></span>.</p>'
)


class TestParsing:
    def test_from_html_lifts_references(self):
        doc = Document.from_html(STORED)
        refs = list(doc.references())
        assert len(refs) == 2
        assert refs[0][1].attrs.display_style == "card"
        assert refs[1][1].attrs.field_id == "price"

    def test_surrounding_markup_kept(self):
        html = Document.from_html(STORED).to_html()
        assert html.startswith("<p>Try ")
        assert html.endswith(".</p>")
        assert 'data-field-id="price"' in html

    def test_plain_markup(self):
        doc = Document.from_html("<p>No references</p>")
        assert list(doc.references()) == []
        assert doc.to_html() == "<p>No references</p>"


class TestInsertion:
    def test_insert_entity_reference_at_cursor(self):
        doc = Document(["<p>a</p>", "<p>b</p>"])
        doc.move_cursor(1)
        assert doc.insert_entity_reference({"id": "B08N5WRWNW"}) is True
        assert isinstance(doc.content[1], ReferenceNode)
        assert doc.cursor == 2
        assert len(doc) == 3

    def test_insert_without_id_is_rejected(self):
        doc = Document(["<p>a</p>"])
        before = doc.content
        assert doc.insert_entity_reference({"title": "No id"}) is False
        assert doc.insert_entity_reference({"id": ""}) is False
        assert doc.content == before
        assert doc.cursor == 1

    def test_insert_with_mistyped_values_is_rejected(self):
        doc = Document(["<p>a</p>"])
        assert doc.insert_entity_reference({"id": "X", "alignment": "diagonal"}) is False
        assert doc.insert_entity_reference({"id": "X", "price": "cheap"}) is False
        assert doc.to_html() == "<p>a</p>"

    def test_insert_field_projection(self):
        doc = Document()
        assert doc.insert_field_projection("B08N5WRWNW", "brand") is True
        assert doc.insert_field_projection("", "brand") is False
        assert len(doc) == 1

    def test_insert_shifts_selection(self):
        doc = Document()
        doc.insert_entity_reference({"id": "A"})
        assert doc.select(0)
        doc.move_cursor(0)
        doc.insert_entity_reference({"id": "B"})
        assert doc.selection == 1
        assert doc.selected_node.identifier == "A"


class TestUpdateAttributes:
    def test_update_selected_node(self):
        doc = Document()
        doc.insert_entity_reference({"id": "X"})
        doc.select(0)
        assert doc.update_attributes({"display_style": "horizontal", "alignment": "right"})
        assert doc.selected_node.attrs.display_style == "horizontal"
        assert 'data-alignment="right"' in doc.to_html()

    def test_update_rejects_blank_id(self):
        doc = Document()
        doc.insert_entity_reference({"id": "X"})
        assert doc.update_attributes({"id": " "}, position=0) is False
        assert doc.content[0].identifier == "X"

    def test_update_rejects_mistyped_values(self):
        doc = Document()
        doc.insert_entity_reference({"id": "B08N5WRWNW", "alignment": "center"})
        before = doc.to_html()

        assert doc.update_attributes({"alignment": "diagonal", "price": "cheap"}, position=0) is False
        assert doc.to_html() == before
        assert doc.content[0].attrs.alignment == "center"
        assert doc.content[0].attrs.price is None

    def test_update_without_node(self):
        doc = Document(["<p>text</p>"])
        assert doc.update_attributes({"display_style": "card"}) is False
        assert doc.select(0) is False
