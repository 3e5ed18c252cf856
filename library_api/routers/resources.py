"""
Resources router.

POST   /api/resources        — Create a resource (payload validated against its type)
GET    /api/resources        — List / filter / page resources
GET    /api/resources/{id}   — Single resource by id
PUT    /api/resources/{id}   — Replace payload and metadata
DELETE /api/resources/{id}   — Delete (no-op when missing)
"""
from __future__ import annotations

import json
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.orm import Session

from library_api.core.errors import ResourceNotFoundError
from library_api.db.base import get_db
from library_api.descriptors.registry import TypeDescriptorRegistry
from library_api.models.resource import Resource
from library_api.schemas.common import ErrorResponse
from library_api.schemas.resource import ResourceCreate, ResourceOut, ResourceUpdate
from library_api.services.query import ResourceQuery, compile_criteria
from library_api.services.validation import INT32_MAX, INT32_MIN
from library_api.services.resources import (
    create_resource,
    delete_resource,
    get_resource,
    query_resources,
    update_resource,
)

router = APIRouter(prefix="/api/resources", tags=["resources"])


def get_registry(request: Request) -> TypeDescriptorRegistry:
    """The registry loaded once at startup (see main.lifespan)."""
    return request.app.state.type_registry


# ---------------------------------------------------------------------------
# Serialization helper
# ---------------------------------------------------------------------------

def _to_out(resource: Resource) -> ResourceOut:
    return ResourceOut(
        id=resource.id,
        type=resource.type,
        owner_id=resource.owner_id,
        created_at=resource.created_at,
        updated_at=resource.updated_at,
        metadata=json.loads(resource.metadata_json) if resource.metadata_json else None,
        payload=json.loads(resource.payload_json),
    )


# ---------------------------------------------------------------------------
# POST /api/resources
# ---------------------------------------------------------------------------

@router.post(
    "",
    response_model=ResourceOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create a resource",
    responses={
        400: {"model": ErrorResponse, "description": "Payload failed descriptor validation."},
        422: {"model": ErrorResponse, "description": "Malformed request body."},
    },
)
def create(
    body: ResourceCreate,
    response: Response,
    db: Session = Depends(get_db),
    registry: TypeDescriptorRegistry = Depends(get_registry),
):
    """
    Validate `payload` against the descriptor for `type` and store it.

    On failure the response lists **every** field error found, not just the
    first: `details.errors` is `[{field, code, message}, ...]` with codes
    `Required`, `TypeMismatch`, `MaxLength`, `Pattern`, `UnknownType`,
    `InvalidPayloadShape`.
    """
    resource = create_resource(
        db=db,
        registry=registry,
        type_key=body.type,
        payload=body.payload,
        owner_id=body.owner_id,
        metadata=body.metadata,
    )
    response.headers["Location"] = f"{router.prefix}/{resource.id}"
    return _to_out(resource)


# ---------------------------------------------------------------------------
# GET /api/resources
# ---------------------------------------------------------------------------

@router.get(
    "",
    response_model=list[ResourceOut],
    summary="List resources (filtered, paginated, oldest first)",
)
def list_resources(
    type: Optional[str] = Query(default=None, description="Exact resource type."),
    owner_id: Optional[str] = Query(default=None, description="Exact owner id."),
    created_after: Optional[datetime] = Query(default=None, description="Inclusive lower bound on created_at."),
    created_before: Optional[datetime] = Query(default=None, description="Inclusive upper bound on created_at."),
    page_number: Optional[int] = Query(default=None, ge=INT32_MIN, le=INT32_MAX, description="1-based page. Values < 1 mean page 1."),
    page_size: Optional[int] = Query(default=None, ge=INT32_MIN, le=INT32_MAX, description="Page size. Values <= 0 mean 50."),
    sort_by: Optional[str] = Query(default=None, description="Accepted, not yet applied."),
    sort_direction: Optional[str] = Query(default=None, description='"asc" or "desc". Accepted, not yet applied.'),
    search_text: Optional[str] = Query(default=None, description="Case-insensitive substring of the search text."),
    db: Session = Depends(get_db),
):
    criteria = compile_criteria(ResourceQuery(
        type=type,
        owner_id=owner_id,
        created_after=created_after,
        created_before=created_before,
        page_number=page_number,
        page_size=page_size,
        sort_by=sort_by,
        sort_direction=sort_direction,
        search_text=search_text,
    ))
    return [_to_out(r) for r in query_resources(db, criteria)]


# ---------------------------------------------------------------------------
# GET /api/resources/{resource_id}
# ---------------------------------------------------------------------------

@router.get(
    "/{resource_id}",
    response_model=ResourceOut,
    summary="Retrieve a single resource by id",
    responses={404: {"model": ErrorResponse, "description": "Resource not found."}},
)
def get_one(resource_id: str, db: Session = Depends(get_db)):
    resource = get_resource(db, resource_id)
    if resource is None:
        raise ResourceNotFoundError(resource_id)
    return _to_out(resource)


# ---------------------------------------------------------------------------
# PUT /api/resources/{resource_id}
# ---------------------------------------------------------------------------

@router.put(
    "/{resource_id}",
    response_model=ResourceOut,
    summary="Replace a resource's payload and metadata",
    responses={
        400: {"model": ErrorResponse, "description": "Payload failed descriptor validation."},
        404: {"model": ErrorResponse, "description": "Resource not found."},
    },
)
def update(
    resource_id: str,
    body: ResourceUpdate,
    db: Session = Depends(get_db),
    registry: TypeDescriptorRegistry = Depends(get_registry),
):
    """The new payload is validated against the resource's existing type."""
    resource = update_resource(
        db=db,
        registry=registry,
        resource_id=resource_id,
        payload=body.payload,
        metadata=body.metadata,
    )
    if resource is None:
        raise ResourceNotFoundError(resource_id)
    return _to_out(resource)


# ---------------------------------------------------------------------------
# DELETE /api/resources/{resource_id}
# ---------------------------------------------------------------------------

@router.delete(
    "/{resource_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a resource",
)
def delete(resource_id: str, db: Session = Depends(get_db)):
    delete_resource(db, resource_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
