"""
Type descriptor schema model.

A TypeDescriptor declares, for one resource type, which payload fields
exist, their data types and constraints, and which fields feed search and
list views. Instances are frozen: once loaded they are shared read-only
across requests.

Configuration records use camelCase keys (typeKey, isRequired, ...);
snake_case names are accepted too.
"""
from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class FieldDataType(str, enum.Enum):
    string = "String"
    int = "Int"
    bool = "Bool"
    datetime = "DateTime"
    decimal = "Decimal"

    @classmethod
    def parse(cls, value: Any) -> "FieldDataType":
        """Case-insensitive lookup by value. Unknown names fall back to String."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            wanted = value.strip().lower()
            for member in cls:
                if member.value.lower() == wanted:
                    return member
        return cls.string


class _DescriptorModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )


class FieldDefinition(_DescriptorModel):
    """One schema rule. max_length and pattern only apply to String fields."""

    name: str = ""
    data_type: FieldDataType = FieldDataType.string
    is_required: bool = False
    max_length: Optional[int] = Field(default=None, gt=0)
    pattern: Optional[str] = None

    @field_validator("data_type", mode="before")
    @classmethod
    def parse_data_type(cls, v: Any) -> FieldDataType:
        return FieldDataType.parse(v)


class IndexingDefinition(_DescriptorModel):
    filterable_fields: tuple[str, ...] = ()
    sortable_fields: tuple[str, ...] = ()
    full_text_fields: tuple[str, ...] = ()


class PolicyDefinition(_DescriptorModel):
    """Allowed roles per operation. Carried with the descriptor, not enforced here."""

    allowed_create_roles: tuple[str, ...] = ()
    allowed_read_roles: tuple[str, ...] = ()
    allowed_update_roles: tuple[str, ...] = ()
    allowed_delete_roles: tuple[str, ...] = ()


class UiHints(_DescriptorModel):
    title_field: Optional[str] = None
    list_fields: tuple[str, ...] = ()


class TypeDescriptor(_DescriptorModel):
    type_key: str = ""
    display_name: str = ""
    schema_version: int = Field(default=1, ge=1)
    fields: tuple[FieldDefinition, ...] = ()
    indexing: Optional[IndexingDefinition] = None
    policy: Optional[PolicyDefinition] = None
    ui_hints: Optional[UiHints] = None

    @field_validator("schema_version", mode="before")
    @classmethod
    def default_schema_version(cls, v: Any) -> Any:
        # 0 / missing in configuration means "first version"
        if v is None or v == 0:
            return 1
        return v

    def field(self, name: str) -> Optional[FieldDefinition]:
        for f in self.fields:
            if f.name == name:
                return f
        return None
