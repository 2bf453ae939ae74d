# liveref/api/schemas.py
from __future__ import annotations

from pydantic import BaseModel, Field


class FieldDescriptorSchema(BaseModel):
    id: str = Field(..., description="Field id used by projection nodes.")
    name: str = Field(..., description="Display name.")
    category: str = Field(..., description="One of basic, price, shipping, coupon.")
    attribute: str = Field(..., description="Entity attribute the field reads.")


class ResolutionErrorSchema(BaseModel):
    error: str = "resolution_error"
    identifier: str
    reason: str
    message: str = ""


class InvalidationSchema(BaseModel):
    identifier: str
    invalidated: int = Field(..., description="Number of cache entries dropped.")


class RenderRequestSchema(BaseModel):
    content: str = Field(..., description="Stored document markup.")


class RenderResponseSchema(BaseModel):
    content: str = Field(..., description="Markup with every reference rendered.")
