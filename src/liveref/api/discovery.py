# liveref/api/discovery.py
"""
Health endpoint.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from liveref.api.dependencies import get_infra
from liveref.contracts.infrastructure import Infrastructure

router = APIRouter()


@router.get("/health")
async def health(infra: Infrastructure = Depends(get_infra)) -> dict:
    return {
        "status": "healthy",
        "cached_entities": len(infra.cache),
        "fields": len(infra.field_registry),
    }
