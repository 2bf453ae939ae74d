# liveref/core/views.py
"""
Mounted views of reference nodes.

A view is the live counterpart of one node in a rendered document. Mounting
attaches it to the resolution cache and starts resolving; unmounting cancels
only this view's wait, so the shared fetch keeps serving other views.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Callable

from liveref.contracts.attributes import EntityReferenceAttrs, FieldProjectionAttrs
from liveref.contracts.resolution import LOADING, Loading, ResolutionState
from liveref.core.presentation.fields import FieldRegistry
from liveref.core.presentation.renderers import render_entity_reference, render_field_projection
from liveref.core.resolution.cache import ResolutionCache
from liveref.core.schema.nodes import ENTITY_REFERENCE, FIELD_PROJECTION, ReferenceNode

logger = logging.getLogger(__name__)

ChangeListener = Callable[[ResolutionState], None]


class NodeView:
    """Resolution lifecycle shared by both node kinds."""

    def __init__(
        self,
        cache: ResolutionCache,
        identifier: str,
        *,
        on_change: ChangeListener | None = None,
    ) -> None:
        self._cache = cache
        self._identifier = identifier
        self._on_change = on_change
        self._mounted = False
        self._task: asyncio.Task[None] | None = None
        self._state: ResolutionState = cache.peek(identifier) or LOADING

    @property
    def identifier(self) -> str:
        return self._identifier

    @property
    def state(self) -> ResolutionState:
        return self._state

    @property
    def mounted(self) -> bool:
        return self._mounted

    def mount(self) -> None:
        """Attach to the cache and start resolving. Needs a running event loop."""
        if self._mounted:
            return
        self._mounted = True
        self._cache.attach(self._identifier)
        if isinstance(self._state, Loading):
            self._task = asyncio.create_task(self._resolve())

    def unmount(self) -> None:
        if not self._mounted:
            return
        self._mounted = False
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
        self._cache.detach(self._identifier)

    async def wait(self) -> ResolutionState:
        """Wait for the pending resolution, if any, and return the state."""
        task = self._task
        if task is not None:
            try:
                await asyncio.shield(task)
            except asyncio.CancelledError:
                # only an unmount-cancelled resolution is expected here
                if not task.cancelled():
                    raise
        return self._state

    async def _resolve(self) -> None:
        result = await self._cache.resolve(self._identifier)
        if not self._mounted:
            return
        self._state = result
        if self._on_change is not None:
            try:
                self._on_change(result)
            except Exception:
                logger.exception("Change listener failed for %s", self._identifier)

    def render(self) -> str:
        raise NotImplementedError


class ReferenceView(NodeView):
    """View of an entity reference node."""

    def __init__(
        self,
        node: ReferenceNode,
        cache: ResolutionCache,
        *,
        snapshot_fallback: bool = False,
        on_change: ChangeListener | None = None,
    ) -> None:
        if node.spec is not ENTITY_REFERENCE:
            raise ValueError(f"Expected an entity reference node, got '{node.spec.name}'")
        assert isinstance(node.attrs, EntityReferenceAttrs)
        super().__init__(cache, node.attrs.id, on_change=on_change)
        self._attrs = node.attrs
        self._snapshot_fallback = snapshot_fallback

    @property
    def attrs(self) -> EntityReferenceAttrs:
        return self._attrs

    def render(self) -> str:
        return render_entity_reference(
            self._state,
            self._attrs.display_style,
            identifier=self._attrs.id,
            alignment=self._attrs.alignment,
            snapshot=self._attrs if self._snapshot_fallback else None,
        )


class FieldProjectionView(NodeView):
    """View of a field projection node."""

    def __init__(
        self,
        node: ReferenceNode,
        cache: ResolutionCache,
        registry: FieldRegistry,
        *,
        on_change: ChangeListener | None = None,
    ) -> None:
        if node.spec is not FIELD_PROJECTION:
            raise ValueError(f"Expected a field projection node, got '{node.spec.name}'")
        assert isinstance(node.attrs, FieldProjectionAttrs)
        super().__init__(cache, node.attrs.entity_id, on_change=on_change)
        self._attrs = node.attrs
        self._registry = registry

    @property
    def attrs(self) -> FieldProjectionAttrs:
        return self._attrs

    def render(self) -> str:
        return render_field_projection(
            self._state,
            self._attrs.field_id,
            self._registry,
            entity_id=self._attrs.entity_id,
        )
