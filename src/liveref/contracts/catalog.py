# liveref/contracts/catalog.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class CatalogBackend(ABC):
    """Transport to the catalog service.

    Both operations return the raw, heterogeneous payload; normalization is
    the resolution layer's job.
    """

    @abstractmethod
    async def fetch_by_id(self, entity_id: str) -> Any:
        """Fetch one entity by internal id."""
        ...

    @abstractmethod
    async def query_by_code(self, code: str) -> Any:
        """Query entities by external catalog code."""
        ...
