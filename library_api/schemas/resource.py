"""
Resource request / response schemas.

POST /api/resources        → ResourceCreate → ResourceOut
PUT  /api/resources/{id}   → ResourceUpdate → ResourceOut
GET  /api/resources        → list[ResourceOut]
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field


class ResourceCreate(BaseModel):
    """A new resource. `payload` is validated against the type's descriptor."""
    type: str = Field(
        description="Type key of a registered descriptor (case-insensitive).",
        examples=["book"],
    )
    owner_id: Optional[str] = Field(
        default=None,
        max_length=128,
        description="Opaque id of the owning user or system.",
        examples=["user-42"],
    )
    metadata: Optional[Any] = Field(
        default=None,
        description="Free-form JSON stored alongside the payload. Not validated.",
        examples=[{"tags": ["scifi"]}],
    )
    payload: Any = Field(
        description="Type-specific JSON object.",
        examples=[{"title": "Dune", "author": "Frank Herbert", "pages": 412}],
    )


class ResourceUpdate(BaseModel):
    """Replacement payload and metadata. The resource type cannot change."""
    metadata: Optional[Any] = Field(default=None)
    payload: Any = Field(description="Type-specific JSON object.")


class ResourceOut(BaseModel):
    id: str
    type: str
    owner_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    metadata: Optional[Any] = None
    payload: Any
