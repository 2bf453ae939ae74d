# liveref/core/resolution/identifiers.py
"""
Identifier classification.

Two disjoint identifier spaces are accepted:

* external catalog codes: exactly 10 ASCII letters/digits, case-insensitive
  (``B08N5WRWNW``), normalized to upper case;
* internal ids: anything else. Hex object ids and canonical UUIDs are
  normalized to lower case, other shapes (``prod-42``, numeric ids, slugs)
  are passed to the backend as written.

Routing is a pure function of the identifier's shape. Only a blank
identifier is rejected locally.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

CODE_PATTERN = re.compile(r"^[A-Z0-9]{10}$")
OBJECT_ID_PATTERN = re.compile(r"^[0-9a-f]{24}$")
UUID_PATTERN = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$")


class IdentifierKind(str, Enum):
    CODE = "code"
    INTERNAL = "id"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ClassifiedIdentifier:
    kind: IdentifierKind
    value: str

    @property
    def cache_key(self) -> str:
        return f"{self.kind.value}:{self.value}"


def classify_identifier(identifier: str) -> ClassifiedIdentifier:
    candidate = (identifier or "").strip()
    if not candidate:
        return ClassifiedIdentifier(IdentifierKind.UNKNOWN, "")

    if CODE_PATTERN.match(candidate.upper()):
        return ClassifiedIdentifier(IdentifierKind.CODE, candidate.upper())

    lowered = candidate.lower()
    if OBJECT_ID_PATTERN.match(lowered) or UUID_PATTERN.match(lowered):
        return ClassifiedIdentifier(IdentifierKind.INTERNAL, lowered)

    return ClassifiedIdentifier(IdentifierKind.INTERNAL, candidate)
