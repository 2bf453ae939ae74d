# liveref/contracts/infrastructure.py
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from liveref.contracts.catalog import CatalogBackend

if TYPE_CHECKING:
    from liveref.core.presentation.fields import FieldRegistry
    from liveref.core.resolution.cache import ResolutionCache


@dataclass
class Infrastructure:
    """Long-lived services shared by every request."""

    backend: CatalogBackend
    cache: ResolutionCache
    field_registry: FieldRegistry
    snapshot_fallback: bool = False
