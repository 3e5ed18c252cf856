"""
Payload validation against type descriptors.

Public API
----------
validate_payload(registry, type_key, payload) -> ValidationResult

`payload` is an already-parsed JSON tree (what json.loads returns).
For parsed JSON input, failures are returned as data, never raised:

- unknown type           -> one UnknownType error, nothing else checked
- payload not an object  -> one InvalidPayloadShape error, nothing else checked
- otherwise every declared field is checked and all errors are collected,
  in descriptor field order. Undeclared payload keys are ignored.
"""
from __future__ import annotations

import enum
import math
import re
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from library_api.descriptors.models import FieldDataType, FieldDefinition
from library_api.descriptors.registry import TypeDescriptorRegistry

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

class ValidationErrorCode(str, enum.Enum):
    required = "Required"
    type_mismatch = "TypeMismatch"
    max_length = "MaxLength"
    pattern = "Pattern"
    unknown_type = "UnknownType"
    invalid_payload_shape = "InvalidPayloadShape"


@dataclass(frozen=True)
class ValidationError:
    """One problem with a payload. field_name is "" for payload-level errors."""
    field_name: str
    error_code: ValidationErrorCode
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field_name, "code": self.error_code.value, "message": self.message}

    @classmethod
    def required(cls, field_name: str) -> "ValidationError":
        return cls(field_name, ValidationErrorCode.required, f"Field '{field_name}' is required.")

    @classmethod
    def type_mismatch(cls, field_name: str, expected: FieldDataType) -> "ValidationError":
        return cls(
            field_name,
            ValidationErrorCode.type_mismatch,
            f"Field '{field_name}' must be of type '{expected.value}'.",
        )

    @classmethod
    def max_length_exceeded(cls, field_name: str, max_length: int) -> "ValidationError":
        return cls(
            field_name,
            ValidationErrorCode.max_length,
            f"Field '{field_name}' exceeds maximum length of {max_length}.",
        )

    @classmethod
    def pattern_mismatch(cls, field_name: str) -> "ValidationError":
        return cls(
            field_name,
            ValidationErrorCode.pattern,
            f"Field '{field_name}' does not match the required pattern.",
        )

    @classmethod
    def unknown_type(cls, type_key: Optional[str]) -> "ValidationError":
        return cls("type", ValidationErrorCode.unknown_type, f"Unknown resource type '{type_key}'.")

    @classmethod
    def invalid_payload_shape(cls) -> "ValidationError":
        return cls("", ValidationErrorCode.invalid_payload_shape, "Payload must be a JSON object.")


@dataclass(frozen=True)
class ValidationResult:
    errors: tuple[ValidationError, ...] = field(default_factory=tuple)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @classmethod
    def success(cls) -> "ValidationResult":
        return cls()

    @classmethod
    def failure(cls, *errors: ValidationError) -> "ValidationResult":
        return cls(errors=tuple(errors))



# ---------------------------------------------------------------------------
# JSON value kinds
# ---------------------------------------------------------------------------

class JsonKind(str, enum.Enum):
    null = "null"
    bool = "bool"
    number = "number"
    string = "string"
    array = "array"
    object = "object"


def json_kind(value: Any) -> JsonKind:
    """Classify a parsed JSON value. bool is checked before number (bool is an int).

    Raises TypeError for objects json.loads never produces.
    """
    if value is None:
        return JsonKind.null
    if isinstance(value, bool):
        return JsonKind.bool
    if isinstance(value, (int, float, Decimal)):
        return JsonKind.number
    if isinstance(value, str):
        return JsonKind.string
    if isinstance(value, (list, tuple)):
        return JsonKind.array
    if isinstance(value, dict):
        return JsonKind.object
    raise TypeError(f"Not a JSON value: {type(value).__name__}")


def _is_int32(value: Any) -> bool:
    # Only integer literals count; 12.0 and 1e2 parse to float and are rejected.
    return isinstance(value, int) and INT32_MIN <= value <= INT32_MAX


def _is_finite(value: Any) -> bool:
    if isinstance(value, int):
        return True
    if isinstance(value, Decimal):
        return value.is_finite()
    return math.isfinite(value)


def _is_iso_datetime(value: str) -> bool:
    try:
        datetime.fromisoformat(value)
    except ValueError:
        return False
    return True


def _matches_type(data_type: FieldDataType, value: Any, kind: JsonKind) -> bool:
    if data_type is FieldDataType.string:
        return kind is JsonKind.string
    if data_type is FieldDataType.int:
        return kind is JsonKind.number and _is_int32(value)
    if data_type is FieldDataType.bool:
        return kind is JsonKind.bool
    if data_type is FieldDataType.decimal:
        return kind is JsonKind.number and _is_finite(value)
    if data_type is FieldDataType.datetime:
        return kind is JsonKind.string and _is_iso_datetime(value)
    raise ValueError(f"Unhandled data type: {data_type!r}")


# ---------------------------------------------------------------------------
# Field checks
# ---------------------------------------------------------------------------

def _check_string_constraints(definition: FieldDefinition, value: str) -> list[ValidationError]:
    errors: list[ValidationError] = []

    if definition.max_length is not None and len(value) > definition.max_length:
        errors.append(ValidationError.max_length_exceeded(definition.name, definition.max_length))

    if definition.pattern:
        try:
            if re.search(definition.pattern, value) is None:
                errors.append(ValidationError.pattern_mismatch(definition.name))
        except re.error:
            # Bad pattern in the descriptor: skip the check for this field
            pass

    return errors


def _check_field(definition: FieldDefinition, payload: dict[str, Any]) -> list[ValidationError]:
    value = payload.get(definition.name)
    kind = json_kind(value) if definition.name in payload else JsonKind.null

    if kind is JsonKind.null:
        if definition.is_required:
            return [ValidationError.required(definition.name)]
        return []

    if not _matches_type(definition.data_type, value, kind):
        return [ValidationError.type_mismatch(definition.name, definition.data_type)]

    if definition.data_type is FieldDataType.string:
        return _check_string_constraints(definition, value)
    return []


# ---------------------------------------------------------------------------
# Public
# ---------------------------------------------------------------------------

def validate_payload(
    registry: TypeDescriptorRegistry,
    type_key: Optional[str],
    payload: Any,
) -> ValidationResult:
    """Validate `payload` against the descriptor registered for `type_key`."""
    descriptor = registry.get(type_key)
    if descriptor is None:
        return ValidationResult.failure(ValidationError.unknown_type(type_key))

    if not isinstance(payload, dict):
        return ValidationResult.failure(ValidationError.invalid_payload_shape())

    errors: list[ValidationError] = []
    for definition in descriptor.fields:
        errors.extend(_check_field(definition, payload))

    return ValidationResult(errors=tuple(errors))
