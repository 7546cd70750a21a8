# ============================================================================
# BASE CONTRACTS & ENUMS
# ============================================================================
# STATUS: Foundation - Core enums shared by the translation pipeline
# PURPOSE: Closed vocabularies for type families, FK actions, defaults, markers
# CREATED: 06 OCT 2026
# EXPORTS: TypeFamily, FkAction, DefaultKind, MarkerKind, TableConstraintKind
# DEPENDENCIES: enum
# ============================================================================
"""
Base contracts for the DDL translation system.

These enums cross every boundary of the pipeline:
- AST (PostgreSQL parse tree, produced externally)
- Canonical model (dialect independent)
- Emitters (SQLite DDL, declarative schema document)

All values are plain strings so they serialize without adapters.
"""

from enum import Enum


# ============================================================================
# TYPE FAMILIES
# ============================================================================

class TypeFamily(str, Enum):
    """
    Scalar family of a source column type.

    The family decides which validation CHECKs are synthesized and whether
    a column belongs to the integer domain.
    """
    INTEGER = "integer"
    SERIAL = "serial"            # Auto-incrementing integer family
    FLOAT = "float"
    DECIMAL = "decimal"          # Fixed point, precision/scale aware
    TEXT = "text"
    CHAR = "char"                # Length-bounded character types
    BOOLEAN = "boolean"
    TIMESTAMP = "timestamp"
    DATE = "date"
    TIME = "time"
    INTERVAL = "interval"
    UUID = "uuid"
    BINARY = "binary"
    JSON = "json"
    ENUM = "enum"                # User-declared enumeration
    OTHER = "other"              # Known type stored as text
    UNKNOWN = "unknown"

    def is_integer_domain(self) -> bool:
        """Check if values of this family are whole numbers."""
        return self in (TypeFamily.INTEGER, TypeFamily.SERIAL)


# ============================================================================
# FOREIGN KEY ACTIONS
# ============================================================================

class FkAction(str, Enum):
    """Referential action for ON DELETE / ON UPDATE."""
    NO_ACTION = "no action"
    CASCADE = "cascade"
    SET_NULL = "set null"
    SET_DEFAULT = "set default"
    RESTRICT = "restrict"

    def is_default(self) -> bool:
        """NO ACTION is the implicit behaviour and is never rendered."""
        return self is FkAction.NO_ACTION

    def to_sql(self) -> str:
        return self.value.upper()


# ============================================================================
# DEFAULT VALUES
# ============================================================================

class DefaultKind(str, Enum):
    """How a computed default was expressed in the source."""
    FUNCTION_CALL = "function_call"      # now(), gen_random_uuid()
    VALUE_FUNCTION = "value_function"    # CURRENT_TIMESTAMP, CURRENT_USER
    TYPE_CAST = "type_cast"              # '{}'::jsonb
    EXPRESSION = "expression"            # anything else


# ============================================================================
# TABLE CONSTRAINTS
# ============================================================================

class TableConstraintKind(str, Enum):
    """Multi-column constraints kept at table granularity."""
    PRIMARY_KEY = "primary_key"
    UNIQUE = "unique"


# ============================================================================
# FIDELITY MARKERS
# ============================================================================

class MarkerKind(str, Enum):
    """
    Categories of fidelity loss recorded alongside successful output.

    Structural violations are not markers: they raise StructuralError.
    """
    UNSUPPORTED_CONSTRUCT = "unsupported_construct"
    CLASSIFICATION_MISS = "classification_miss"
    UNRESOLVED_REFERENCE = "unresolved_reference"


__all__ = [
    "TypeFamily",
    "FkAction",
    "DefaultKind",
    "TableConstraintKind",
    "MarkerKind",
]
