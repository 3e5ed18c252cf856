"""
Read-only, case-insensitive lookup of type descriptors.

Built once at startup and passed to every consumer. There is no mutation
API: a schema change means building a new registry and swapping it in.
"""
from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Iterable, Iterator, Optional

from library_api.core.errors import DescriptorConfigurationError, TypeDescriptorNotFoundError
from library_api.descriptors.models import TypeDescriptor

logger = logging.getLogger(__name__)


def normalize_type_key(type_key: Optional[str]) -> str:
    return (type_key or "").lower()


class TypeDescriptorRegistry:
    """Immutable map from normalized type key to TypeDescriptor.

    Construction fails fast on a blank type key or on two descriptors whose
    keys collide after case-folding.
    """

    def __init__(self, descriptors: Iterable[TypeDescriptor]):
        by_key: dict[str, TypeDescriptor] = {}
        for position, descriptor in enumerate(descriptors):
            key = normalize_type_key(descriptor.type_key)
            if not key.strip():
                raise DescriptorConfigurationError(
                    f"Type descriptor at position {position} has an empty typeKey."
                )
            if key in by_key:
                raise DescriptorConfigurationError(
                    f"Duplicate type descriptor key '{descriptor.type_key}'."
                )
            by_key[key] = descriptor

        self._descriptors = MappingProxyType(by_key)
        logger.debug("Type descriptor registry built with %d types", len(by_key))

    def get(self, type_key: Optional[str]) -> Optional[TypeDescriptor]:
        """Return the descriptor for `type_key`, or None. Blank keys are never found."""
        key = normalize_type_key(type_key)
        if not key.strip():
            return None
        return self._descriptors.get(key)

    def require(self, type_key: Optional[str]) -> TypeDescriptor:
        descriptor = self.get(type_key)
        if descriptor is None:
            raise TypeDescriptorNotFoundError(type_key)
        return descriptor

    def type_keys(self) -> list[str]:
        return [d.type_key for d in self._descriptors.values()]

    def __contains__(self, type_key: object) -> bool:
        return isinstance(type_key, str) and self.get(type_key) is not None

    def __iter__(self) -> Iterator[TypeDescriptor]:
        return iter(self._descriptors.values())

    def __len__(self) -> int:
        return len(self._descriptors)

    def __repr__(self) -> str:
        return f"TypeDescriptorRegistry({sorted(self._descriptors)!r})"
