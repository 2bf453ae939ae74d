# liveref/api/routes.py
"""
Field discovery, entity resolution and content rendering endpoints.
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from liveref.api.dependencies import get_infra
from liveref.api.schemas import (
    FieldDescriptorSchema,
    InvalidationSchema,
    RenderRequestSchema,
    RenderResponseSchema,
)
from liveref.contracts.entity import ResolvedEntity
from liveref.contracts.infrastructure import Infrastructure
from liveref.contracts.resolution import ResolutionError
from liveref.core.content import render_content

logger = logging.getLogger(__name__)

router = APIRouter()

# Failures the caller can fix vs. failures of the upstream catalog
_NOT_FOUND_REASONS = frozenset({"not_found", "invalid_identifier"})


@router.get(
    "/fields",
    response_model=list[FieldDescriptorSchema],
    operation_id="list_fields",
)
async def list_fields(infra: Infrastructure = Depends(get_infra)) -> list[FieldDescriptorSchema]:
    return [FieldDescriptorSchema(**d) for d in infra.field_registry.list_all()]


@router.get(
    "/entities/{identifier}",
    response_model=ResolvedEntity,
    operation_id="resolve_entity",
)
async def resolve_entity(
    identifier: str,
    infra: Infrastructure = Depends(get_infra),
) -> ResolvedEntity:
    result = await infra.cache.resolve(identifier)
    if isinstance(result, ResolutionError):
        status = 404 if result.reason in _NOT_FOUND_REASONS else 502
        raise HTTPException(status, result.to_dict())
    return result


@router.delete(
    "/entities/{identifier}/cache",
    response_model=InvalidationSchema,
    operation_id="invalidate_entity",
)
async def invalidate_entity(
    identifier: str,
    infra: Infrastructure = Depends(get_infra),
) -> InvalidationSchema:
    return InvalidationSchema(
        identifier=identifier,
        invalidated=infra.cache.invalidate(identifier),
    )


@router.post(
    "/render",
    response_model=RenderResponseSchema,
    operation_id="render_content",
)
async def render(
    body: RenderRequestSchema,
    infra: Infrastructure = Depends(get_infra),
) -> RenderResponseSchema:
    html = await render_content(
        body.content,
        infra.cache,
        infra.field_registry,
        snapshot_fallback=infra.snapshot_fallback,
    )
    return RenderResponseSchema(content=html)
