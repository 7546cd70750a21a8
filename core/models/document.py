# ============================================================================
# DECLARATIVE SCHEMA DOCUMENT
# ============================================================================
# STATUS: Core model - JSON Schema output/input shape
# PURPOSE: Typed document built by the schema emitter, read by the reverse one
# CREATED: 10 OCT 2026
# EXPORTS: PropertySchema, TableSchema, SchemaDocument
# DEPENDENCIES: pydantic
# ============================================================================
"""
Declarative Schema Document

A JSON Schema (draft 2020-12) document whose top-level properties are
tables. Keys beginning with "$" that JSON Schema does not define carry the
relational structure a validator ignores:

    $primaryKey   true on a single-column primary key
    $index        true, or "unique", for single-column indexes
    $default      computed default, as PostgreSQL text
    $onDelete     non-default referential action
    $onUpdate     non-default referential action

Python field names are snake_case; the JSON keys are aliases. Dump with
to_json_dict() so aliases are used and unset keys are left out.
"""

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field


class PropertySchema(BaseModel):
    """One column (or the items of an array column)."""
    ref: Optional[str] = Field(default=None, alias="$ref")
    type: Optional[Union[str, List[str]]] = None
    format: Optional[str] = None
    items: Optional["PropertySchema"] = None
    enum: Optional[List[Any]] = None
    minimum: Optional[Union[int, float]] = None
    maximum: Optional[Union[int, float]] = None
    exclusive_minimum: Optional[Union[int, float]] = Field(default=None, alias="exclusiveMinimum")
    exclusive_maximum: Optional[Union[int, float]] = Field(default=None, alias="exclusiveMaximum")
    pattern: Optional[str] = None
    max_length: Optional[int] = Field(default=None, alias="maxLength")
    multiple_of: Optional[float] = Field(default=None, alias="multipleOf")
    default: Optional[Any] = None
    computed_default: Optional[str] = Field(default=None, alias="$default")
    primary_key: Optional[bool] = Field(default=None, alias="$primaryKey")
    index: Optional[Union[bool, Literal["unique"]]] = Field(default=None, alias="$index")
    on_delete: Optional[str] = Field(default=None, alias="$onDelete")
    on_update: Optional[str] = Field(default=None, alias="$onUpdate")

    model_config = {"populate_by_name": True}

    @property
    def scalar_type(self) -> Optional[str]:
        """First non-null entry of "type"."""
        if isinstance(self.type, list):
            return next((t for t in self.type if t != "null"), None)
        return self.type


class TableSchema(BaseModel):
    """One table: an object whose properties are its columns."""
    type: Literal["object"] = "object"
    additional_properties: bool = Field(default=False, alias="additionalProperties")
    properties: Dict[str, PropertySchema] = Field(default_factory=dict)
    required: List[str] = Field(default_factory=list)

    model_config = {"populate_by_name": True}


class SchemaDocument(BaseModel):
    """The whole document."""
    schema_uri: Optional[str] = Field(default=None, alias="$schema")
    type: Literal["object"] = "object"
    defs: Optional[Dict[str, PropertySchema]] = Field(default=None, alias="$defs")
    properties: Dict[str, TableSchema]

    model_config = {"populate_by_name": True}

    def to_json_dict(self) -> Dict[str, Any]:
        """JSON-compatible dict with "$" keys and no empty optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


PropertySchema.model_rebuild()

__all__ = ["PropertySchema", "TableSchema", "SchemaDocument"]
