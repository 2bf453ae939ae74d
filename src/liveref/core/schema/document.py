# liveref/core/schema/document.py
"""
Minimal host document holding reference nodes between markup segments.

The document is a flat sequence of segments: raw markup strings and
:class:`ReferenceNode` instances. The cursor is a segment index; inserting
puts the new node at the cursor and moves the cursor past it. Reference
elements may sit anywhere in the markup tree (inside paragraphs, list
items, ...); the surrounding markup is kept verbatim.
"""
from __future__ import annotations

import logging
import re
from typing import Any, Iterable, Iterator, Mapping, Union

from bs4 import BeautifulSoup, Tag

from liveref.core.schema.nodes import (
    NODE_SPECS,
    ReferenceNode,
    ValidationError,
    build_entity_reference,
    build_field_projection,
    parse_element,
)

logger = logging.getLogger(__name__)

Segment = Union[str, ReferenceNode]

# U+FFFC OBJECT REPLACEMENT CHARACTER marks where a node was lifted out of the markup
_MARKER = "\ufffc"
_MARKER_PATTERN = re.compile(f"{_MARKER}(\\d+){_MARKER}")


def find_reference_elements(soup: BeautifulSoup) -> list[Tag]:
    """Return every element carrying a reference node discriminator."""
    found: list[Tag] = []
    for spec in NODE_SPECS:
        found.extend(soup.find_all(attrs={spec.discriminator_key: spec.discriminator_value}))
    return found


class Document:
    """Ordered inline content with a cursor and an optional node selection."""

    def __init__(self, content: Iterable[Segment] = ()) -> None:
        self._content: list[Segment] = list(content)
        self._cursor = len(self._content)
        self._selection: int | None = None

    # -- Parsing / serialization -------------------------------------------

    @classmethod
    def from_html(cls, html: str) -> Document:
        soup = BeautifulSoup(html.replace(_MARKER, ""), "html.parser")

        nodes: list[ReferenceNode] = []
        for element in find_reference_elements(soup):
            node = parse_element(element)
            if node is None:
                continue
            element.replace_with(f"{_MARKER}{len(nodes)}{_MARKER}")
            nodes.append(node)

        content: list[Segment] = []
        pos = 0
        text = str(soup)
        for match in _MARKER_PATTERN.finditer(text):
            if match.start() > pos:
                content.append(text[pos:match.start()])
            content.append(nodes[int(match.group(1))])
            pos = match.end()
        if pos < len(text):
            content.append(text[pos:])

        logger.debug("Parsed document: %d segment(s), %d reference(s)", len(content), len(nodes))
        return cls(content)

    def to_html(self) -> str:
        return "".join(
            seg.to_markup() if isinstance(seg, ReferenceNode) else seg
            for seg in self._content
        )

    # -- Cursor and selection ------------------------------------------------

    @property
    def cursor(self) -> int:
        return self._cursor

    def move_cursor(self, position: int) -> None:
        if not 0 <= position <= len(self._content):
            raise IndexError(f"Cursor position {position} out of range 0..{len(self._content)}")
        self._cursor = position

    @property
    def selection(self) -> int | None:
        return self._selection

    def select(self, position: int) -> bool:
        """Select the reference node at ``position``."""
        if not self._is_node_at(position):
            return False
        self._selection = position
        return True

    @property
    def selected_node(self) -> ReferenceNode | None:
        if self._selection is None:
            return None
        seg = self._content[self._selection]
        return seg if isinstance(seg, ReferenceNode) else None

    # -- Commands ------------------------------------------------------------

    def insert_entity_reference(self, partial: Mapping[str, Any]) -> bool:
        """Insert an entity reference at the cursor.

        Returns ``False`` and leaves the document untouched when ``id`` is
        missing or blank, or when a value does not fit its attribute type.
        """
        try:
            node = build_entity_reference(partial)
        except ValidationError as exc:
            logger.warning("Entity reference not inserted: %s", exc)
            return False
        self._insert(node)
        return True

    def insert_field_projection(self, entity_id: str, field_id: str) -> bool:
        """Insert a field projection at the cursor; ``False`` on blank ids."""
        try:
            node = build_field_projection(entity_id, field_id)
        except ValidationError as exc:
            logger.warning("Field projection not inserted: %s", exc)
            return False
        self._insert(node)
        return True

    def update_attributes(self, patch: Mapping[str, Any], position: int | None = None) -> bool:
        """Patch the attributes of the selected node (or the node at ``position``)."""
        target = self._selection if position is None else position
        if target is None or not self._is_node_at(target):
            logger.warning("Attribute update ignored: no reference node at %s", target)
            return False

        node = self._content[target]
        assert isinstance(node, ReferenceNode)
        try:
            self._content[target] = node.with_attrs(patch)
        except ValidationError as exc:
            logger.warning("Attribute update rejected: %s", exc)
            return False
        return True

    # -- Inspection ----------------------------------------------------------

    def references(self) -> Iterator[tuple[int, ReferenceNode]]:
        for i, seg in enumerate(self._content):
            if isinstance(seg, ReferenceNode):
                yield i, seg

    @property
    def content(self) -> tuple[Segment, ...]:
        return tuple(self._content)

    def __len__(self) -> int:
        return len(self._content)

    def _is_node_at(self, position: int) -> bool:
        return 0 <= position < len(self._content) and isinstance(
            self._content[position], ReferenceNode
        )

    def _insert(self, node: ReferenceNode) -> None:
        self._content.insert(self._cursor, node)
        if self._selection is not None and self._selection >= self._cursor:
            self._selection += 1
        self._cursor += 1
        logger.debug("Inserted %s for '%s'", node.spec.name, node.identifier)
