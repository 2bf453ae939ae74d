# tests/core/test_views.py
from __future__ import annotations

import asyncio

import pytest

from liveref.contracts.entity import ResolvedEntity
from liveref.contracts.resolution import LOADING, ResolutionError
from liveref.core.schema.nodes import build_entity_reference, build_field_projection
from liveref.core.views import FieldProjectionView, ReferenceView
from tests.helpers.catalog import CODE, OBJECT_ID


@pytest.mark.asyncio
async def test_reference_view_lifecycle(cache, backend):
    seen = []
    view = ReferenceView(
        build_entity_reference({"id": CODE, "display_style": "card"}),
        cache,
        on_change=seen.append,
    )
    assert view.state is LOADING
    assert "liveref-skeleton--card" in view.render()

    view.mount()
    state = await view.wait()

    assert isinstance(state, ResolvedEntity)
    assert seen == [state]
    assert "liveref-entity--card" in view.render()

    view.unmount()
    assert CODE not in cache


@pytest.mark.asyncio
async def test_views_share_one_fetch(cache, backend, registry):
    backend.gate = asyncio.Event()
    views = [
        ReferenceView(build_entity_reference({"id": CODE}), cache),
        ReferenceView(build_entity_reference({"id": CODE, "display_style": "mini"}), cache),
        FieldProjectionView(build_field_projection(CODE, "price"), cache, registry),
    ]
    for view in views:
        view.mount()
    await asyncio.sleep(0)
    backend.gate.set()

    states = [await view.wait() for view in views]

    assert backend.calls == [("code", CODE)]
    assert states[0] is states[1] is states[2]


@pytest.mark.asyncio
async def test_unmount_cancels_only_own_wait(cache, backend):
    backend.gate = asyncio.Event()
    leaving = ReferenceView(build_entity_reference({"id": CODE}), cache)
    staying = ReferenceView(build_entity_reference({"id": CODE}), cache)
    leaving.mount()
    staying.mount()
    await asyncio.sleep(0)

    leaving.unmount()
    backend.gate.set()

    assert isinstance(await staying.wait(), ResolvedEntity)
    assert await leaving.wait() is LOADING
    assert leaving.state is LOADING
    assert backend.calls == [("code", CODE)]


@pytest.mark.asyncio
async def test_mount_with_warm_cache_skips_fetch(cache, backend):
    entity = await cache.resolve(OBJECT_ID)
    view = ReferenceView(build_entity_reference({"id": OBJECT_ID}), cache)

    assert view.state is entity
    view.mount()
    assert await view.wait() is entity
    assert len(backend.calls) == 1


@pytest.mark.asyncio
async def test_field_projection_view(cache, registry):
    view = FieldProjectionView(build_field_projection(CODE, "price"), cache, registry)
    assert "Loading..." in view.render()

    view.mount()
    await view.wait()
    assert "$49.99" in view.render()
    view.unmount()


@pytest.mark.asyncio
async def test_failed_view_renders_unavailable(cache, backend):
    backend.error = RuntimeError("down")
    view = ReferenceView(build_entity_reference({"id": CODE, "title": "Saved"}), cache)
    view.mount()

    assert isinstance(await view.wait(), ResolutionError)
    assert "liveref-unavailable" in view.render()


@pytest.mark.asyncio
async def test_snapshot_fallback_view(cache, backend):
    backend.error = RuntimeError("down")
    view = ReferenceView(
        build_entity_reference({"id": CODE, "title": "Saved"}),
        cache,
        snapshot_fallback=True,
    )
    view.mount()
    await view.wait()

    assert 'data-snapshot="true"' in view.render()


def test_wrong_node_kind(cache, registry):
    with pytest.raises(ValueError, match="entity reference"):
        ReferenceView(build_field_projection(CODE, "price"), cache)
    with pytest.raises(ValueError, match="field projection"):
        FieldProjectionView(build_entity_reference({"id": CODE}), cache, registry)


@pytest.mark.asyncio
async def test_mount_schedules_one_resolution_task(cache, backend):
    backend.gate = asyncio.Event()
    before = asyncio.all_tasks()

    view = ReferenceView(build_entity_reference({"id": CODE}), cache)
    view.mount()
    assert len(asyncio.all_tasks() - before) == 1

    backend.gate.set()
    await view.wait()
    assert asyncio.all_tasks() - before == set()
    view.unmount()
