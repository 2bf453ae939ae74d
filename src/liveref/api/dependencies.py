# liveref/api/dependencies.py
"""
FastAPI dependencies for request-scoped access to shared services.
"""
from __future__ import annotations

from fastapi import Request

from liveref.contracts.infrastructure import Infrastructure


def get_infra(request: Request) -> Infrastructure:
    infra = getattr(request.app.state, "infra", None)
    if infra is None:
        raise RuntimeError("Application infrastructure not initialized")
    return infra
