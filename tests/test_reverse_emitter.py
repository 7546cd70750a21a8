# ============================================================================
# REVERSE EMITTER TESTS
# ============================================================================
# STATUS: Tests - Declarative schema document to structural DDL
# PURPOSE: Verify type resolution through $ref chains and structure recovery
# CREATED: 13 OCT 2026
# ============================================================================
"""
Reverse Emitter Tests

Documents are written out by hand, the way a caller would send them.

Run with:
    pytest tests/test_reverse_emitter.py -v
"""

import pytest

from core.contracts import MarkerKind
from core.errors import CyclicReferenceError, StructuralError
from core.schema.reverse_emitter import ReverseDdlEmitter, parse_column_ref


def _doc(tables, defs=None):
    document = {"type": "object", "properties": {}}
    for name, (properties, required) in tables.items():
        document["properties"][name] = {
            "type": "object",
            "additionalProperties": False,
            "properties": properties,
            "required": required,
        }
    if defs is not None:
        document["$defs"] = defs
    return document


def _emit(document):
    return ReverseDdlEmitter().emit(document)


# ============================================================================
# TABLES
# ============================================================================

class TestTables:

    def test_structure_only(self):
        result = _emit(_doc({
            "users": ({
                "id": {"type": "integer", "$primaryKey": True},
                "email": {"type": "string", "maxLength": 120, "$index": "unique"},
                "age": {"type": "integer", "minimum": 0, "default": 18},
            }, ["email"]),
        }))
        assert result.output == (
            "CREATE TABLE users (\n"
            "  id INTEGER PRIMARY KEY AUTOINCREMENT,\n"
            "  email TEXT NOT NULL,\n"
            "  age INTEGER\n"
            ") STRICT;\n"
            "\n"
            "CREATE UNIQUE INDEX idx_users_email ON users(email);\n"
        )
        assert result.is_lossless

    @pytest.mark.parametrize("schema,ddl_type", [
        ({"type": "string", "format": "date-time"}, "TEXT"),
        ({"type": "number"}, "REAL"),
        ({"type": "boolean"}, "INTEGER"),
        ({"type": "object"}, "TEXT"),
        ({"type": "array", "items": {"type": "integer"}}, "TEXT"),
        ({"type": ["null", "integer"]}, "INTEGER"),
        ({}, "ANY"),
    ])
    def test_column_types(self, schema, ddl_type):
        ddl = _emit(_doc({"t": ({"c": schema}, [])})).output
        assert f"  c {ddl_type}\n" in ddl

    def test_text_primary_key(self):
        ddl = _emit(_doc({"t": ({"code": {"type": "string", "$primaryKey": True}}, [])})).output
        assert "  code TEXT PRIMARY KEY\n" in ddl

    def test_plain_index(self):
        ddl = _emit(_doc({"t": ({"a": {"type": "string", "$index": True}}, [])})).output
        assert ddl.endswith("CREATE INDEX idx_t_a ON t(a);\n")

    def test_empty_table(self):
        result = _emit(_doc({"t": ({}, [])}))
        assert result.output == "-- TABLE t: not supported\n"
        assert result.markers[0].kind == MarkerKind.UNSUPPORTED_CONSTRUCT

    def test_reserved_names_quoted(self):
        ddl = _emit(_doc({"order": ({"index": {"type": "integer"}}, [])})).output
        assert ddl.startswith('CREATE TABLE "order" (\n  "index" INTEGER\n')


# ============================================================================
# REFERENCES
# ============================================================================

class TestReferences:

    def test_foreign_key_takes_target_type(self):
        ddl = _emit(_doc({
            "customers": ({"id": {"type": "string", "$primaryKey": True}}, []),
            "orders": ({
                "cid": {
                    "$ref": "#/properties/customers/properties/id",
                    "$onDelete": "set null",
                    "$onUpdate": "cascade",
                },
            }, ["cid"]),
        })).output
        assert "  cid TEXT NOT NULL REFERENCES customers(id) ON DELETE SET NULL ON UPDATE CASCADE\n" in ddl

    def test_reference_chain(self):
        ddl = _emit(_doc({
            "a": ({"id": {"type": "integer", "$primaryKey": True}}, []),
            "b": ({"id": {"$ref": "#/properties/a/properties/id", "$primaryKey": True}}, []),
            "c": ({"b_id": {"$ref": "#/properties/b/properties/id"}}, []),
        })).output
        assert "  id INTEGER PRIMARY KEY REFERENCES a(id)\n" in ddl
        assert "  b_id INTEGER REFERENCES b(id)\n" in ddl

    def test_self_reference(self):
        ddl = _emit(_doc({"node": ({
            "id": {"type": "integer", "$primaryKey": True},
            "parent_id": {"$ref": "#/properties/node/properties/id"},
        }, [])})).output
        assert "  parent_id INTEGER REFERENCES node(id)\n" in ddl

    def test_defs_reference(self):
        ddl = _emit(_doc(
            {"p": ({"m": {"$ref": "#/$defs/mood"}}, [])},
            defs={"mood": {"type": "string", "enum": ["sad", "ok"]}},
        )).output
        assert "  m TEXT\n" in ddl

    def test_missing_target(self):
        result = _emit(_doc({"t": ({"x": {"$ref": "#/properties/ghost/properties/id"}}, [])}))
        assert "  x ANY REFERENCES ghost(id)\n" in result.output
        assert result.markers_of(MarkerKind.UNRESOLVED_REFERENCE)[0].entity == "t.x"

    def test_unrecognised_ref(self):
        result = _emit(_doc({"t": ({"x": {"$ref": "https://example.com/schema"}}, [])}))
        assert "  x ANY\n" in result.output
        assert result.markers[0].construct_name == "$ref"

    def test_cycle(self):
        with pytest.raises(CyclicReferenceError):
            _emit(_doc({
                "a": ({"x": {"$ref": "#/properties/b/properties/y"}}, []),
                "b": ({"y": {"$ref": "#/properties/a/properties/x"}}, []),
            }))

    def test_parse_column_ref(self):
        ref = parse_column_ref("#/properties/t/properties/c")
        assert (ref.table, ref.column) == ("t", "c")
        assert parse_column_ref("#/$defs/x") is None


# ============================================================================
# MALFORMED DOCUMENTS
# ============================================================================

class TestMalformed:

    def test_missing_properties(self):
        with pytest.raises(StructuralError) as exc_info:
            _emit({"type": "object"})
        assert exc_info.value.entity == "document"

    def test_required_names_unknown_property(self):
        with pytest.raises(StructuralError, match="ghost"):
            _emit(_doc({"t": ({"a": {"type": "string"}}, ["ghost"])}))

    def test_table_must_be_object(self):
        with pytest.raises(StructuralError):
            _emit({"type": "object", "properties": {"t": "not a table"}})
