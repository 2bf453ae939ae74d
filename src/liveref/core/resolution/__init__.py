"""Identifier routing, catalog access, payload normalization and caching."""
from liveref.core.resolution.backend import CatalogApiClient
from liveref.core.resolution.cache import CacheEntry, ResolutionCache, ResolveResult
from liveref.core.resolution.identifiers import (
    ClassifiedIdentifier,
    IdentifierKind,
    classify_identifier,
)
from liveref.core.resolution.normalize import MalformedPayloadError, normalize_payload

__all__ = [
    "CatalogApiClient",
    "CacheEntry", "ResolutionCache", "ResolveResult",
    "ClassifiedIdentifier", "IdentifierKind", "classify_identifier",
    "MalformedPayloadError", "normalize_payload",
]
