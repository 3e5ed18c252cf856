"""
Denormalized search text for a resource.

With a descriptor: the UI-hint title field, then each indexing.fullTextFields
entry, in that order. Without one: every top-level string property of the
payload. Values are trimmed, blanks dropped, duplicates removed
case-insensitively (first occurrence wins) and the rest joined by spaces.

Best effort: never raises. No terms -> None, not "".
"""
from __future__ import annotations

from typing import Any, Iterable, Optional

from library_api.descriptors.models import TypeDescriptor
from library_api.descriptors.registry import TypeDescriptorRegistry


def _string_property(payload: Any, name: Optional[str]) -> Optional[str]:
    if not name or not isinstance(payload, dict):
        return None
    value = payload.get(name)
    return value if isinstance(value, str) else None


def _descriptor_terms(descriptor: TypeDescriptor, payload: Any) -> list[Optional[str]]:
    terms: list[Optional[str]] = []
    if descriptor.ui_hints is not None:
        terms.append(_string_property(payload, descriptor.ui_hints.title_field))
    if descriptor.indexing is not None:
        for name in descriptor.indexing.full_text_fields:
            terms.append(_string_property(payload, name))
    return terms


def _fallback_terms(payload: Any) -> list[Optional[str]]:
    if not isinstance(payload, dict):
        return []
    return [v for v in payload.values() if isinstance(v, str)]


def _join_distinct(terms: Iterable[Optional[str]]) -> Optional[str]:
    seen: set[str] = set()
    kept: list[str] = []
    for term in terms:
        if term is None:
            continue
        term = term.strip()
        if not term:
            continue
        folded = term.casefold()
        if folded in seen:
            continue
        seen.add(folded)
        kept.append(term)
    return " ".join(kept) if kept else None


def build_search_text(
    registry: TypeDescriptorRegistry,
    type_key: Optional[str],
    payload: Any,
    metadata: Any = None,
) -> Optional[str]:
    """Derive the search string stored alongside a resource.

    `metadata` is accepted for callers that have it; it is not indexed.
    """
    descriptor = registry.get(type_key)
    if descriptor is None:
        return _join_distinct(_fallback_terms(payload))
    return _join_distinct(_descriptor_terms(descriptor, payload))
