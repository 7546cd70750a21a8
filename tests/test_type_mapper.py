# ============================================================================
# TYPE MAPPER TESTS
# ============================================================================
# STATUS: Tests - Type lookup and modifiers
# PURPOSE: Verify PostgreSQL type names land on the right DDL/JSON types
# CREATED: 13 OCT 2026
# ============================================================================
"""
Type Mapper Tests

Pure lookups, no parse trees beyond hand-built TypeName bodies.

Run with:
    pytest tests/test_type_mapper.py -v
"""

import pytest

from core.contracts import TypeFamily
from core.errors import StructuralError
from core.models import EnumRegistry, EnumType, TypeModifiers
from core.schema.type_mapper import extract_modifiers, map_type, map_type_name

from pg_ast import s, type_name


def _registry(**enums):
    return EnumRegistry({name: EnumType(name=name, values=tuple(values)) for name, values in enums.items()})


# ============================================================================
# SCALAR TYPES
# ============================================================================

class TestScalarTypes:
    """Built-in names map to one STRICT type and one JSON type."""

    @pytest.mark.parametrize("name,ddl,json_type,fmt", [
        ("int4", "INTEGER", "integer", None),
        ("bigint", "INTEGER", "integer", None),
        ("float8", "REAL", "number", None),
        ("numeric", "REAL", "number", None),
        ("text", "TEXT", "string", None),
        ("bool", "INTEGER", "boolean", None),
        ("timestamptz", "TEXT", "string", "date-time"),
        ("date", "TEXT", "string", "date"),
        ("time", "TEXT", "string", "time"),
        ("uuid", "TEXT", "string", "uuid"),
        ("bytea", "BLOB", "string", "binary"),
        ("jsonb", "TEXT", "object", None),
    ])
    def test_builtin(self, name, ddl, json_type, fmt):
        target = map_type(name)
        assert target.ddl_type == ddl
        assert target.json_type == json_type
        assert target.json_format == fmt

    def test_names_are_case_insensitive(self):
        assert map_type("VARCHAR").family == TypeFamily.CHAR

    def test_serial_is_integer_family(self):
        target = map_type("bigserial")
        assert target.family == TypeFamily.SERIAL
        assert target.ddl_type == "INTEGER"
        assert target.family.is_integer_domain()

    def test_unknown_type_is_any(self):
        target = map_type("geometry")
        assert not target.is_known
        assert target.ddl_type == "ANY"
        assert target.json_type is None


# ============================================================================
# MODIFIERS
# ============================================================================

class TestModifiers:
    """Length, precision/scale and arrays become validation rules."""

    def test_varchar_length(self):
        target = map_type("varchar", TypeModifiers(length=20))
        assert target.ddl_type == "TEXT"
        assert target.validation.max_length == 20

    def test_numeric_scale_gives_multiple_of(self):
        target = map_type("numeric", TypeModifiers(precision=10, scale=2))
        assert target.validation.multiple_of == pytest.approx(0.01)

    def test_numeric_without_scale_has_no_multiple_of(self):
        target = map_type("numeric", TypeModifiers(precision=10, scale=0))
        assert target.validation.multiple_of is None

    def test_array_is_text_with_nested_rules(self):
        target = map_type("varchar", TypeModifiers(length=5, array_depth=2))
        assert target.ddl_type == "TEXT"
        assert target.is_array
        assert target.validation.array_depth() == 2
        assert target.validation.innermost().max_length == 5

    def test_extract_modifiers_from_typmods(self):
        body = type_name("numeric", 12, 4, catalog=True)
        modifiers = extract_modifiers(body, TypeFamily.DECIMAL)
        assert modifiers.precision == 12
        assert modifiers.scale == 4

    def test_extract_modifiers_ignores_length_on_text(self):
        modifiers = extract_modifiers(type_name("text", array_depth=1), TypeFamily.TEXT)
        assert modifiers.length is None
        assert modifiers.array_depth == 1


# ============================================================================
# TYPE NAME NODES
# ============================================================================

class TestMapTypeName:
    """Reading TypeName bodies, including qualifiers and enums."""

    def test_catalog_qualified_builtin(self):
        target = map_type_name(type_name("varchar", 40, catalog=True))
        assert target.family == TypeFamily.CHAR
        assert target.modifiers.length == 40

    def test_enum_reference(self):
        enums = _registry(mood=["sad", "ok", "happy"])
        target = map_type_name(type_name("mood"), enums)
        assert target.family == TypeFamily.ENUM
        assert target.enum_name == "mood"
        assert target.validation.enum_values == ("sad", "ok", "happy")

    def test_catalog_qualifier_wins_over_enum_of_same_name(self):
        enums = _registry(text=["x"])
        target = map_type_name(type_name("text", catalog=True), enums)
        assert target.family == TypeFamily.TEXT
        assert target.enum_name is None

    def test_enum_array(self):
        enums = _registry(mood=["sad", "ok"])
        target = map_type_name(type_name("mood", array_depth=1), enums)
        assert target.ddl_type == "TEXT"
        assert target.validation.is_array
        assert target.validation.array_item_rule.enum_values == ("sad", "ok")

    def test_empty_names_is_structural_error(self):
        with pytest.raises(StructuralError):
            map_type_name({"names": []}, entity="t.c")

    def test_string_node_names(self):
        target = map_type_name({"names": [s("int8")]})
        assert target.ddl_type == "INTEGER"
