# tests/conftest.py
from __future__ import annotations

import pytest

from liveref.core.presentation.fields import FieldRegistry, default_field_registry
from liveref.core.resolution.cache import ResolutionCache
from tests.helpers.catalog import (
    CODE,
    CODE_PAYLOAD,
    ID_PAYLOAD,
    OBJECT_ID,
    FakeCatalogBackend,
    FakeClock,
)


@pytest.fixture
def backend() -> FakeCatalogBackend:
    return FakeCatalogBackend({CODE: CODE_PAYLOAD, OBJECT_ID: ID_PAYLOAD})


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(backend: FakeCatalogBackend, clock: FakeClock) -> ResolutionCache:
    return ResolutionCache(backend, ttl=60.0, clock=clock)


@pytest.fixture
def registry() -> FieldRegistry:
    return default_field_registry()
