# ============================================================================
# CANONICAL TABLE MODEL
# ============================================================================
# STATUS: Core model - Dialect-independent intermediate representation
# PURPOSE: Tables, columns, keys, indexes built from the PostgreSQL AST
# CREATED: 07 OCT 2026
# EXPORTS: TypeModifiers, CheckConstraint, Column, TableConstraint, Table,
#          Index, UnsupportedStatement, CanonicalModel
# DEPENDENCIES: pydantic
# ============================================================================
"""
Canonical Table Model

The canonical model is built once per translation call by
core.schema.model_builder.ModelBuilder and handed to exactly one emitter.
All models are frozen and all sequences are tuples; emitters read, never
write.

Ordering:
    Column order inside a table, table order, and index order follow the
    source document. Every emitted collection is derived from these tuples.
"""

from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, Field

from core.contracts import TableConstraintKind, TypeFamily
from core.models.defaults import DefaultSpec
from core.models.enum_type import EnumRegistry
from core.models.foreign_key import ForeignKeyRef
from core.models.markers import TranslationMarker
from core.models.validation import ValidationRuleSet


class TypeModifiers(BaseModel):
    """Length, precision/scale and array nesting of a column type."""
    length: Optional[int] = None
    precision: Optional[int] = None
    scale: Optional[int] = None
    array_depth: int = Field(default=0, ge=0)

    model_config = {"frozen": True}


class CheckConstraint(BaseModel):
    """
    A CHECK constraint preserved verbatim.

    expression is the normalised PostgreSQL text; node is the original AST
    so the DDL emitter can render it in the target dialect.
    """
    name: Optional[str] = None
    expression: str
    columns: Tuple[str, ...] = Field(default_factory=tuple)
    classified: bool = False
    node: Dict[str, Any] = Field(default_factory=dict, exclude=True, repr=False)

    model_config = {"frozen": True}


class Column(BaseModel):
    """One column of a table."""
    name: str = Field(..., min_length=1)
    source_type: str
    type_family: TypeFamily
    enum_name: Optional[str] = None
    type_modifiers: TypeModifiers = Field(default_factory=TypeModifiers)
    is_primary_key: bool = False
    is_required: bool = False
    is_unique: bool = False
    is_auto_increment_eligible: bool = False
    default: Optional[DefaultSpec] = Field(default=None, discriminator="variant")
    validation: ValidationRuleSet = Field(default_factory=ValidationRuleSet)
    foreign_key: Optional[ForeignKeyRef] = None
    checks: Tuple[CheckConstraint, ...] = Field(default_factory=tuple)

    model_config = {"frozen": True}

    @property
    def is_array(self) -> bool:
        return self.type_modifiers.array_depth > 0


class TableConstraint(BaseModel):
    """Primary key or unique constraint spanning several columns."""
    kind: TableConstraintKind
    columns: Tuple[str, ...]
    name: Optional[str] = None

    model_config = {"frozen": True}


class Table(BaseModel):
    """One CREATE TABLE statement, with the markers raised while building it."""
    name: str = Field(..., min_length=1)
    position: int = Field(..., ge=0, description="Statement index in the source")
    columns: Tuple[Column, ...] = Field(default_factory=tuple)
    constraints: Tuple[TableConstraint, ...] = Field(default_factory=tuple)
    checks: Tuple[CheckConstraint, ...] = Field(default_factory=tuple)
    markers: Tuple[TranslationMarker, ...] = Field(default_factory=tuple)

    model_config = {"frozen": True}

    def get_column(self, name: str) -> Optional[Column]:
        for column in self.columns:
            if column.name == name:
                return column
        return None

    @property
    def primary_key_columns(self) -> Tuple[str, ...]:
        """Primary key column names, column-level or table-level."""
        for constraint in self.constraints:
            if constraint.kind == TableConstraintKind.PRIMARY_KEY:
                return constraint.columns
        return tuple(c.name for c in self.columns if c.is_primary_key)


class Index(BaseModel):
    """One CREATE INDEX statement over plain columns."""
    name: str
    table: str
    columns: Tuple[str, ...]
    unique: bool = False
    position: int = Field(..., ge=0)

    model_config = {"frozen": True}


class UnsupportedStatement(BaseModel):
    """A top-level statement with no representation in any target."""
    kind: str = Field(..., description="Human-readable construct, e.g. SEQUENCE")
    name: Optional[str] = None
    position: int = Field(..., ge=0)

    model_config = {"frozen": True}

    @property
    def label(self) -> str:
        return f"{self.kind} {self.name}" if self.name else self.kind


class CanonicalModel(BaseModel):
    """Everything the emitters need, plus markers recorded while building."""
    enums: EnumRegistry = Field(default_factory=EnumRegistry)
    tables: Tuple[Table, ...] = Field(default_factory=tuple)
    indexes: Tuple[Index, ...] = Field(default_factory=tuple)
    unsupported: Tuple[UnsupportedStatement, ...] = Field(default_factory=tuple)
    markers: Tuple[TranslationMarker, ...] = Field(default_factory=tuple)

    model_config = {"frozen": True}

    def get_table(self, name: str) -> Optional[Table]:
        for table in self.tables:
            if table.name == name:
                return table
        return None

    def get_column(self, table: str, column: str) -> Optional[Column]:
        found = self.get_table(table)
        return found.get_column(column) if found else None


__all__ = [
    "TypeModifiers",
    "CheckConstraint",
    "Column",
    "TableConstraint",
    "Table",
    "Index",
    "UnsupportedStatement",
    "CanonicalModel",
]
