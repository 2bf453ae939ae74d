# liveref/main.py
"""
Application factory for the live reference service.

Wires the catalog client, the resolution cache and the field registry into
a FastAPI application. Extension fields are loaded at startup in the
lifespan; the cache is emptied on shutdown.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import cast

from fastapi import FastAPI

from liveref import __version__
from liveref.api.discovery import router as discovery_router
from liveref.api.routes import router as routes_router
from liveref.contracts.catalog import CatalogBackend
from liveref.contracts.infrastructure import Infrastructure
from liveref.core.config import Settings, settings as default_settings
from liveref.core.logging import configure_logging
from liveref.core.presentation.fields import default_field_registry, load_field_extensions
from liveref.core.resolution.backend import CatalogApiClient
from liveref.core.resolution.cache import ResolutionCache

logger = logging.getLogger(__name__)


def _fields_patterns(app: FastAPI) -> list[str]:
    return list(getattr(app.state, "fields_config_paths", []))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load extension fields, then clear the cache on shutdown."""
    infra = cast(Infrastructure, app.state.infra)

    try:
        load_field_extensions(
            patterns=_fields_patterns(app),
            registry=infra.field_registry,
        )
    except Exception:
        logger.exception("Failed to load extension fields")
        raise

    logger.info("Field registry ready: %d field(s)", len(infra.field_registry))

    yield

    dropped = infra.cache.invalidate()
    logger.info("Shutdown: dropped %d cached entit%s", dropped, "y" if dropped == 1 else "ies")


def create_app(
    config: Settings | None = None,
    *,
    backend: CatalogBackend | None = None,
) -> FastAPI:
    """Build and wire the FastAPI application.

    ``backend`` replaces the HTTP catalog client, mainly for tests.
    """
    cfg = config or default_settings
    configure_logging(cfg.log_level, json_format=cfg.log_json, app_env=cfg.app_env)
    logger.info("Creating application (env=%s)", cfg.app_env)

    if backend is None:
        backend = CatalogApiClient(
            base_url=cfg.catalog_api_url,
            timeout=cfg.catalog_timeout,
            api_key=cfg.catalog_api_key or None,
        )

    infra = Infrastructure(
        backend=backend,
        cache=ResolutionCache(backend, ttl=cfg.resolution_ttl_seconds),
        field_registry=default_field_registry(),
        snapshot_fallback=cfg.snapshot_fallback,
    )

    app = FastAPI(
        title="Live Reference Service",
        version=__version__,
        description="Resolves catalog references embedded in rich-text documents",
        lifespan=lifespan,
    )

    app.state.infra = infra
    app.state.fields_config_paths = cfg.fields_config_paths

    app.include_router(discovery_router)
    app.include_router(routes_router)

    logger.info(
        "Application ready: backend=%s ttl=%.1fs snapshot_fallback=%s",
        type(backend).__name__,
        cfg.resolution_ttl_seconds,
        cfg.snapshot_fallback,
    )
    return app
