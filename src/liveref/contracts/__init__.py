"""Public contracts for the live reference subsystem."""
from liveref.contracts.attributes import (
    ALIGNMENTS,
    COUPON_TYPES,
    DISPLAY_STYLES,
    EntityReferenceAttrs,
    FieldProjectionAttrs,
)
from liveref.contracts.catalog import CatalogBackend
from liveref.contracts.entity import ResolvedEntity
from liveref.contracts.infrastructure import Infrastructure
from liveref.contracts.resolution import (
    LOADING,
    Loading,
    ResolutionError,
    ResolutionState,
)

__all__ = [
    "ALIGNMENTS", "COUPON_TYPES", "DISPLAY_STYLES",
    "EntityReferenceAttrs", "FieldProjectionAttrs",
    "CatalogBackend",
    "ResolvedEntity",
    "Infrastructure",
    "LOADING", "Loading", "ResolutionError", "ResolutionState",
]
