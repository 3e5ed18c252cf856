"""
Load type descriptors from a JSON configuration document.

Accepted shapes:

    {"TypeDescriptors": {"book": {...}, "article": {...}}}   # config-section style
    {"book": {...}, "article": {...}}                        # same, unwrapped
    [{"typeKey": "book", ...}, ...]                          # plain list

In the keyed shapes, an entry without `typeKey` takes the entry key.
`displayName` defaults to the type key; `schemaVersion` 0 / missing is 1.
"""
from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from library_api.core.errors import DescriptorConfigurationError
from library_api.descriptors.models import TypeDescriptor
from library_api.descriptors.registry import TypeDescriptorRegistry

logger = logging.getLogger(__name__)

BUNDLED_DESCRIPTORS_PATH = Path(__file__).with_name("type_descriptors.json")

_SECTION_KEYS = ("TypeDescriptors", "typeDescriptors", "type_descriptors")


def _unwrap(document: Any) -> Any:
    if isinstance(document, dict):
        for key in _SECTION_KEYS:
            if key in document:
                return document[key]
    return document


def _bind(record: Any, config_key: Optional[str]) -> TypeDescriptor:
    if not isinstance(record, dict):
        raise DescriptorConfigurationError(
            f"Type descriptor '{config_key}' must be a JSON object, got {type(record).__name__}."
        )

    data = dict(record)
    type_key = data.get("typeKey", data.get("type_key"))
    if type_key is None and config_key is not None:
        type_key = config_key
    data["typeKey"] = type_key or ""
    data.pop("type_key", None)
    if not (data.get("displayName") or data.get("display_name")):
        data["displayName"] = data["typeKey"]

    try:
        return TypeDescriptor.model_validate(data)
    except PydanticValidationError as exc:
        raise DescriptorConfigurationError(
            f"Type descriptor '{type_key or config_key}' is invalid: {exc}"
        ) from exc


def _warn_on_bad_patterns(descriptor: TypeDescriptor) -> None:
    # Malformed patterns are tolerated; validation skips them per field.
    for f in descriptor.fields:
        if not f.pattern:
            continue
        try:
            re.compile(f.pattern)
        except re.error as exc:
            logger.warning(
                "Type '%s' field '%s' has an invalid pattern %r (%s); "
                "pattern checks will be skipped for this field",
                descriptor.type_key, f.name, f.pattern, exc,
            )


def parse_descriptors(document: Any) -> list[TypeDescriptor]:
    """Bind an already-parsed JSON document to a list of TypeDescriptors."""
    section = _unwrap(document)

    if isinstance(section, dict):
        descriptors = [_bind(record, str(key)) for key, record in section.items()]
    elif isinstance(section, list):
        descriptors = [_bind(record, None) for record in section]
    else:
        raise DescriptorConfigurationError(
            "Type descriptor configuration must be a JSON object or array."
        )

    for descriptor in descriptors:
        _warn_on_bad_patterns(descriptor)
    return descriptors


def load_registry(path: Union[str, Path, None] = None) -> TypeDescriptorRegistry:
    """Read a descriptor file and build the registry. Fails fast on any problem."""
    source = Path(path) if path else BUNDLED_DESCRIPTORS_PATH
    try:
        document = json.loads(source.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise DescriptorConfigurationError(f"Type descriptor file not found: {source}") from exc
    except ValueError as exc:
        raise DescriptorConfigurationError(f"Type descriptor file {source} is not valid JSON: {exc}") from exc

    registry = TypeDescriptorRegistry(parse_descriptors(document))
    logger.info("Loaded %d type descriptors from %s: %s", len(registry), source, ", ".join(registry.type_keys()))
    return registry
