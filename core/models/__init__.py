# ============================================================================
# MODELS MODULE
# ============================================================================
# STATUS: Model exports
# PURPOSE: Central export point for the canonical model
# CREATED: 07 OCT 2026
# ============================================================================
"""
Models Module - Central Export Point

Pydantic models for the dialect-independent canonical model that sits
between the PostgreSQL AST and every emitter.
"""

from core.models.enum_type import EnumType, EnumRegistry
from core.models.validation import ValidationRuleSet, LiteralValue
from core.models.defaults import LiteralDefault, ComputedDefault, DefaultSpec
from core.models.foreign_key import ForeignKeyRef
from core.models.markers import TranslationMarker, TranslationResult
from core.models.table import (
    TypeModifiers,
    CheckConstraint,
    Column,
    TableConstraint,
    Table,
    Index,
    UnsupportedStatement,
    CanonicalModel,
)
from core.models.document import PropertySchema, TableSchema, SchemaDocument

__all__ = [
    # Enums
    "EnumType",
    "EnumRegistry",
    # Validation
    "ValidationRuleSet",
    "LiteralValue",
    # Defaults
    "LiteralDefault",
    "ComputedDefault",
    "DefaultSpec",
    # Keys
    "ForeignKeyRef",
    # Tables
    "TypeModifiers",
    "CheckConstraint",
    "Column",
    "TableConstraint",
    "Table",
    "Index",
    "UnsupportedStatement",
    "CanonicalModel",
    # Markers
    "TranslationMarker",
    "TranslationResult",
    # Declarative schema
    "PropertySchema",
    "TableSchema",
    "SchemaDocument",
]
