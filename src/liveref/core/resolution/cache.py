# liveref/core/resolution/cache.py
"""
ResolutionCache - the single owner of resolved entity state.

Every reference on a page resolves through :meth:`ResolutionCache.resolve`.
Concurrent calls for the same identifier join one in-flight fetch, settled
values are kept for a fixed TTL, failures are never cached. The entry map is
private; it is mutated only by the methods of this class.
"""
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, Union

from liveref.contracts.catalog import CatalogBackend
from liveref.contracts.entity import ResolvedEntity
from liveref.contracts.resolution import ResolutionError
from liveref.core.resolution.identifiers import (
    ClassifiedIdentifier,
    IdentifierKind,
    classify_identifier,
)
from liveref.core.resolution.normalize import MalformedPayloadError, normalize_payload

logger = logging.getLogger(__name__)

ResolveResult = Union[ResolvedEntity, ResolutionError]

DEFAULT_TTL_SECONDS = 60.0


@dataclass
class CacheEntry:
    """One cache slot: an in-flight fetch task or a settled entity.

    ``fetched_at`` is ``None`` while the fetch is pending.
    """

    key: str
    value: asyncio.Task[ResolveResult] | ResolvedEntity
    fetched_at: float | None = None

    @property
    def pending(self) -> bool:
        return self.fetched_at is None


class ResolutionCache:
    """Deduplicating, TTL-bound resolver for catalog identifiers."""

    def __init__(
        self,
        backend: CatalogBackend,
        *,
        ttl: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._backend = backend
        self._ttl = ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._holders: dict[str, int] = {}

    @property
    def ttl(self) -> float:
        return self._ttl

    async def resolve(self, identifier: str) -> ResolveResult:
        """Return the current entity for ``identifier``, or a ResolutionError.

        Never raises, except for the caller's own cancellation. Cancelling a
        caller does not cancel the shared fetch.
        """
        classified = classify_identifier(identifier)
        if classified.kind is IdentifierKind.UNKNOWN:
            logger.warning("Blank identifier: %r", identifier)
            return ResolutionError(
                identifier=identifier,
                reason="invalid_identifier",
                message="Identifier is blank",
            )

        key = classified.cache_key
        entry = self._live_entry(key)

        if entry is None:
            task = asyncio.create_task(self._fetch(classified, identifier))
            entry = CacheEntry(key=key, value=task)
            self._entries[key] = entry
            logger.debug("Cache miss: %s", key)
        elif entry.pending:
            logger.debug("Joining in-flight fetch: %s", key)
        else:
            logger.debug("Cache hit: %s", key)

        if not entry.pending:
            assert isinstance(entry.value, ResolvedEntity)
            return entry.value

        assert isinstance(entry.value, asyncio.Task)
        return await asyncio.shield(entry.value)

    def peek(self, identifier: str) -> ResolvedEntity | None:
        """Return a settled, non-expired entity without fetching."""
        classified = classify_identifier(identifier)
        if classified.kind is IdentifierKind.UNKNOWN:
            return None
        entry = self._live_entry(classified.cache_key)
        if entry is None or entry.pending:
            return None
        assert isinstance(entry.value, ResolvedEntity)
        return entry.value

    def invalidate(self, identifier: str | None = None) -> int:
        """Drop one entry (or all of them). Returns the number of entries dropped.

        Callers already waiting on a dropped in-flight fetch still receive its
        result; the result is just not stored.
        """
        if identifier is None:
            count = len(self._entries)
            self._entries.clear()
            logger.info("Invalidated %d cache entr%s", count, "y" if count == 1 else "ies")
            return count

        classified = classify_identifier(identifier)
        if self._entries.pop(classified.cache_key, None) is None:
            return 0
        logger.info("Invalidated cache entry: %s", classified.cache_key)
        return 1

    def prune(self) -> int:
        """Drop every settled entry whose TTL has elapsed."""
        expired = [k for k, e in self._entries.items() if not e.pending and self._expired(e)]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("Pruned %d expired entr%s", len(expired), "y" if len(expired) == 1 else "ies")
        return len(expired)

    def attach(self, identifier: str) -> None:
        """Register a mounted view interested in ``identifier``."""
        classified = classify_identifier(identifier)
        if classified.kind is IdentifierKind.UNKNOWN:
            return
        key = classified.cache_key
        self._holders[key] = self._holders.get(key, 0) + 1

    def detach(self, identifier: str) -> None:
        """Unregister a view; the last detach evicts a settled entry."""
        classified = classify_identifier(identifier)
        key = classified.cache_key
        count = self._holders.get(key, 0) - 1
        if count > 0:
            self._holders[key] = count
            return

        self._holders.pop(key, None)
        entry = self._entries.get(key)
        if entry is not None and not entry.pending:
            del self._entries[key]
            logger.debug("Evicted unreferenced entry: %s", key)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, identifier: str) -> bool:
        return classify_identifier(identifier).cache_key in self._entries

    # -- Internals -------------------------------------------------------------

    def _expired(self, entry: CacheEntry) -> bool:
        assert entry.fetched_at is not None
        return self._clock() - entry.fetched_at >= self._ttl

    def _live_entry(self, key: str) -> CacheEntry | None:
        entry = self._entries.get(key)
        if entry is not None and not entry.pending and self._expired(entry):
            del self._entries[key]
            logger.debug("Entry expired: %s", key)
            return None
        return entry

    async def _fetch(self, classified: ClassifiedIdentifier, identifier: str) -> ResolveResult:
        result: ResolveResult
        try:
            if classified.kind is IdentifierKind.CODE:
                payload = await self._backend.query_by_code(classified.value)
            else:
                payload = await self._backend.fetch_by_id(classified.value)
            result = normalize_payload(payload)
        except MalformedPayloadError as exc:
            logger.warning("Unusable payload for %s: %s", classified.cache_key, exc)
            result = ResolutionError(identifier=identifier, reason=exc.reason, message=str(exc))
        except Exception as exc:
            logger.warning("Backend call failed for %s: %s", classified.cache_key, exc)
            result = ResolutionError(
                identifier=identifier,
                reason="backend_error",
                message=f"{type(exc).__name__}: {exc}",
            )

        # Only the fetch that still owns the slot may settle it
        key = classified.cache_key
        entry = self._entries.get(key)
        if entry is not None and entry.value is asyncio.current_task():
            if isinstance(result, ResolvedEntity):
                self._entries[key] = CacheEntry(key=key, value=result, fetched_at=self._clock())
            else:
                del self._entries[key]
        return result
