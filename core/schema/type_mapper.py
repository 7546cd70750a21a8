# ============================================================================
# TYPE MAPPER
# ============================================================================
# STATUS: Core - PostgreSQL type names to target types
# PURPOSE: One lookup per column type feeding both DDL and schema emitters
# CREATED: 08 OCT 2026
# EXPORTS: TargetType, map_type, map_type_name, extract_type_name,
#          extract_modifiers, column_target
# DEPENDENCIES: core.ast, core.models, core.schema.lookups
# ============================================================================
"""
Type Mapper.

map_type() never fails: an unrecognised name maps to the permissive STRICT
type ANY in DDL and to a property with no "type" in the declarative schema.

    map_type("varchar", TypeModifiers(length=20))
    # ddl_type='TEXT', json_type='string', validation.max_length=20

    map_type("numeric", TypeModifiers(precision=10, scale=2))
    # ddl_type='REAL', json_type='number', validation.multiple_of=0.01

    map_type("int4", TypeModifiers(array_depth=2))
    # ddl_type='TEXT', validation: array -> array -> {}
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional, Tuple

from core.ast.nodes import Node, int_value, string_list
from core.contracts import TypeFamily
from core.errors import StructuralError
from core.models import Column, EnumRegistry, TypeModifiers, ValidationRuleSet
from core.schema.lookups import (
    ARRAY_DDL_TYPE,
    BUILTIN_SCHEMA,
    ENUM_TYPE,
    TYPE_TABLE,
    UNKNOWN_TYPE,
    TypeSpec,
)


@dataclass(frozen=True)
class TargetType:
    """Resolved column type for every target."""
    source_name: str
    family: TypeFamily
    ddl_type: str
    json_type: Optional[str] = None
    json_format: Optional[str] = None
    modifiers: TypeModifiers = field(default_factory=TypeModifiers)
    enum_name: Optional[str] = None
    validation: ValidationRuleSet = field(default_factory=ValidationRuleSet)

    @property
    def is_known(self) -> bool:
        return self.family != TypeFamily.UNKNOWN

    @property
    def is_array(self) -> bool:
        return self.modifiers.array_depth > 0


def _scalar_rules(spec: TypeSpec, modifiers: TypeModifiers, enum_values: Tuple[str, ...]) -> ValidationRuleSet:
    rules = {}
    if spec.family == TypeFamily.CHAR and modifiers.length and modifiers.length > 0:
        rules["max_length"] = modifiers.length
    if spec.family == TypeFamily.DECIMAL and modifiers.scale and modifiers.scale > 0:
        rules["multiple_of"] = float(Decimal(1).scaleb(-modifiers.scale))
    if spec.family == TypeFamily.ENUM:
        rules["enum_values"] = enum_values
    return ValidationRuleSet(**rules)


def _wrap_arrays(rule: ValidationRuleSet, depth: int) -> ValidationRuleSet:
    for _ in range(depth):
        rule = ValidationRuleSet(is_array=True, array_item_rule=rule)
    return rule


def map_type(
    name: str,
    modifiers: Optional[TypeModifiers] = None,
    enums: Optional[EnumRegistry] = None,
    qualifier: Optional[str] = None,
) -> TargetType:
    """
    Map a PostgreSQL type name to its target representation.

    Args:
        name: Unqualified type name as written or as the parser normalised it
        modifiers: Length, precision/scale and array nesting
        enums: Enum registry for the current translation
        qualifier: Schema qualifier; pg_catalog always means the built-in

    Returns:
        TargetType with DDL type, JSON type/format and type-derived rules
    """
    modifiers = modifiers or TypeModifiers()
    enum_name = None
    enum_values: Tuple[str, ...] = ()

    if enums is not None and qualifier != BUILTIN_SCHEMA and name in enums:
        spec = ENUM_TYPE
        enum_name = name
        enum_values = enums.values_of(name)
        source_name = name
    else:
        source_name = name.strip().lower()
        spec = TYPE_TABLE.get(source_name, UNKNOWN_TYPE)

    validation = _wrap_arrays(
        _scalar_rules(spec, modifiers, enum_values),
        modifiers.array_depth,
    )
    return TargetType(
        source_name=source_name,
        family=spec.family,
        ddl_type=ARRAY_DDL_TYPE if modifiers.array_depth else spec.ddl_type,
        json_type=spec.json_type,
        json_format=spec.json_format,
        modifiers=modifiers,
        enum_name=enum_name,
        validation=validation,
    )


def extract_type_name(type_name: Node, entity: str = "column") -> Tuple[Optional[str], str]:
    """
    Read (qualifier, name) from a TypeName body.

    Raises:
        StructuralError: If the TypeName carries no name
    """
    names = string_list(type_name.get("names"))
    if not names:
        raise StructuralError("type name has no parts", entity)
    qualifier = names[-2] if len(names) > 1 else None
    return qualifier, names[-1]


def extract_modifiers(type_name: Node, family: TypeFamily) -> TypeModifiers:
    """Read length, precision/scale and array depth from a TypeName body."""
    typmods = [int_value(m) for m in type_name.get("typmods") or []]
    typmods = [m for m in typmods if m is not None]
    depth = len(type_name.get("arrayBounds") or [])

    if family == TypeFamily.CHAR and typmods:
        return TypeModifiers(length=typmods[0], array_depth=depth)
    if family == TypeFamily.DECIMAL and typmods:
        scale = typmods[1] if len(typmods) > 1 else 0
        return TypeModifiers(precision=typmods[0], scale=scale, array_depth=depth)
    return TypeModifiers(array_depth=depth)


def map_type_name(type_name: Node, enums: Optional[EnumRegistry] = None, entity: str = "column") -> TargetType:
    """Map a TypeName body, reading name, qualifier and modifiers from the node."""
    qualifier, name = extract_type_name(type_name, entity)
    if enums is not None and qualifier != BUILTIN_SCHEMA and name in enums:
        family = TypeFamily.ENUM
    else:
        family = TYPE_TABLE.get(name.lower(), UNKNOWN_TYPE).family
    return map_type(name, extract_modifiers(type_name, family), enums, qualifier)


def column_target(column: Column, enums: Optional[EnumRegistry] = None) -> TargetType:
    """Re-resolve the target type of a built column."""
    if column.enum_name is not None:
        return map_type(column.enum_name, column.type_modifiers, enums)
    return map_type(column.source_type, column.type_modifiers, qualifier=BUILTIN_SCHEMA)


__all__ = [
    "TargetType",
    "map_type",
    "column_target",
    "map_type_name",
    "extract_type_name",
    "extract_modifiers",
]
