# ============================================================================
# CORE MODULE
# ============================================================================
# STATUS: Core module initialization
# PURPOSE: Export contracts, errors and the canonical model
# CREATED: 06 OCT 2026
# ============================================================================
"""
Core Module

Builders and emitters are imported by module path
(core.schema.model_builder, core.schema.ddl_emitter, ...) so importing
core stays cheap.
"""

from core.contracts import TypeFamily, FkAction, DefaultKind, MarkerKind, TableConstraintKind
from core.errors import (
    TranslationError,
    StructuralError,
    CyclicReferenceError,
    UnsupportedConstructError,
    UnrenderableExpressionError,
)
from core.models import (
    CanonicalModel,
    Table,
    Column,
    ValidationRuleSet,
    TranslationMarker,
    TranslationResult,
)

__all__ = [
    # Enums
    "TypeFamily",
    "FkAction",
    "DefaultKind",
    "MarkerKind",
    "TableConstraintKind",
    # Errors
    "TranslationError",
    "StructuralError",
    "CyclicReferenceError",
    "UnsupportedConstructError",
    "UnrenderableExpressionError",
    # Models
    "CanonicalModel",
    "Table",
    "Column",
    "ValidationRuleSet",
    "TranslationMarker",
    "TranslationResult",
]
