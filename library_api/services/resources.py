"""
Resource service: validation, search-text derivation and persistence.

Public API
----------
create_resource(db, registry, type_key, payload, owner_id, metadata) -> Resource
get_resource(db, resource_id)                                         -> Resource | None
update_resource(db, registry, resource_id, payload, metadata)         -> Resource | None
delete_resource(db, resource_id)                                      -> bool
query_resources(db, criteria)                                         -> list[Resource]

db.commit() only in the mutating public functions.
"""
from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from library_api.core.errors import InvalidResourceTypeError, ResourceValidationError
from library_api.descriptors.registry import TypeDescriptorRegistry
from library_api.models.resource import Resource
from library_api.services.query import ResourceCriteria
from library_api.services.search_text import build_search_text
from library_api.services.validation import validate_payload

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _jdump(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


def _jdump_or_none(value: Any) -> Optional[str]:
    return None if value is None else _jdump(value)


def _validate_or_raise(registry: TypeDescriptorRegistry, type_key: str, payload: Any) -> None:
    result = validate_payload(registry, type_key, payload)
    if not result.is_valid:
        logger.warning(
            "Validation failed for resource type '%s' with %d errors",
            type_key,
            len(result.errors),
        )
        raise ResourceValidationError(type_key, result.errors)


def apply_criteria(stmt: Select, criteria: ResourceCriteria) -> Select:
    """Translate compiled criteria into WHERE / ORDER BY / OFFSET / LIMIT.

    Empty-string type and owner filters mean "no filter" at this layer.
    Date bounds are inclusive. Search is a case-insensitive substring match.
    """
    if criteria.type:
        stmt = stmt.where(Resource.type == criteria.type)
    if criteria.owner_id:
        stmt = stmt.where(Resource.owner_id == criteria.owner_id)
    if criteria.created_after is not None:
        stmt = stmt.where(Resource.created_at >= _as_utc(criteria.created_after))
    if criteria.created_before is not None:
        stmt = stmt.where(Resource.created_at <= _as_utc(criteria.created_before))
    if criteria.search_text and criteria.search_text.strip():
        needle = criteria.search_text.strip().lower()
        stmt = stmt.where(
            Resource.search_text.is_not(None),
            func.lower(Resource.search_text).contains(needle, autoescape=True),
        )

    # TODO: honour criteria.sort_by once sortable payload fields are projected into columns.
    return stmt.order_by(Resource.created_at.asc()).offset(criteria.skip).limit(criteria.take)


# ---------------------------------------------------------------------------
# Public
# ---------------------------------------------------------------------------

def create_resource(
    db: Session,
    registry: TypeDescriptorRegistry,
    type_key: str,
    payload: Any,
    owner_id: Optional[str] = None,
    metadata: Any = None,
) -> Resource:
    """Validate, stamp, derive search text, persist and commit a new resource."""
    if not type_key or not type_key.strip():
        raise InvalidResourceTypeError()

    _validate_or_raise(registry, type_key, payload)

    now = _now()
    resource = Resource(
        id=str(uuid.uuid4()),
        type=type_key,
        owner_id=owner_id,
        metadata_json=_jdump_or_none(metadata),
        payload_json=_jdump(payload),
        search_text=build_search_text(registry, type_key, payload, metadata),
        created_at=now,
        updated_at=now,
    )
    db.add(resource)
    db.commit()
    db.refresh(resource)

    logger.info("Created resource %s of type '%s'", resource.id, resource.type)
    return resource


def get_resource(db: Session, resource_id: str) -> Optional[Resource]:
    resource = db.get(Resource, resource_id)
    if resource is None:
        logger.debug("Resource %s not found", resource_id)
    return resource


def update_resource(
    db: Session,
    registry: TypeDescriptorRegistry,
    resource_id: str,
    payload: Any,
    metadata: Any = None,
) -> Optional[Resource]:
    """
    Replace payload and metadata of an existing resource.
    The type is immutable: the new payload is validated against the stored type.
    Returns None when the resource does not exist.
    """
    resource = db.get(Resource, resource_id)
    if resource is None:
        logger.debug("Resource %s not found for update", resource_id)
        return None

    _validate_or_raise(registry, resource.type, payload)

    resource.payload_json = _jdump(payload)
    resource.metadata_json = _jdump_or_none(metadata)
    resource.search_text = build_search_text(registry, resource.type, payload, metadata)
    resource.updated_at = _now()
    db.commit()
    db.refresh(resource)

    logger.info("Updated resource %s of type '%s'", resource.id, resource.type)
    return resource


def delete_resource(db: Session, resource_id: str) -> bool:
    """Delete a resource. Missing ids are a no-op; returns whether a row was removed."""
    resource = db.get(Resource, resource_id)
    if resource is None:
        logger.debug("Resource %s not found for delete", resource_id)
        return False

    db.delete(resource)
    db.commit()
    logger.info("Deleted resource %s", resource_id)
    return True


def query_resources(db: Session, criteria: ResourceCriteria) -> list[Resource]:
    resources = list(db.scalars(apply_criteria(select(Resource), criteria)))
    logger.debug(
        "Query returned %d resources for type '%s'",
        len(resources),
        criteria.type or "(all)",
    )
    return resources
