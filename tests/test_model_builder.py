# ============================================================================
# MODEL BUILDER TESTS
# ============================================================================
# STATUS: Tests - PostgreSQL AST to canonical model
# PURPOSE: Verify handler dispatch, constraints, markers and structural errors
# CREATED: 13 OCT 2026
# ============================================================================
"""
Model Builder Tests

Builds canonical models from hand-made parse trees and checks the
resulting tables, columns, indexes and markers.

Run with:
    pytest tests/test_model_builder.py -v
"""

import pytest

from core.config import TranslatorDefaults
from core.contracts import FkAction, MarkerKind, TableConstraintKind, TypeFamily
from core.errors import StructuralError
from core.models import ComputedDefault, LiteralDefault
from core.schema.model_builder import ModelBuilder, build_model, registered_kinds

from pg_ast import (
    and_,
    check,
    col,
    column,
    const,
    constraint,
    create_enum,
    create_index,
    create_sequence,
    create_table,
    create_view,
    default,
    document,
    func,
    identity,
    in_list,
    not_null,
    nullable,
    op,
    primary_key,
    references,
    type_name,
    unique,
)


def _int():
    return type_name("int4", catalog=True)


def _text():
    return type_name("text", catalog=True)


def _kinds(markers):
    return [(m.kind, m.construct_name) for m in markers]


# ============================================================================
# REGISTRY
# ============================================================================

class TestHandlerRegistry:

    def test_registered_kinds(self):
        kinds = registered_kinds()
        assert "CreateStmt" in kinds["statements"]
        assert "IndexStmt" in kinds["statements"]
        assert kinds["table_elements"] == ["ColumnDef"]
        assert "CONSTR_CHECK" in kinds["column_constraints"]
        assert "CONSTR_EXCLUSION" in kinds["table_constraints"]


# ============================================================================
# TABLES & COLUMNS
# ============================================================================

class TestTables:

    def test_order_preserved(self):
        model = build_model(document(
            create_table("b", column("y", _int()), column("x", _int())),
            create_table("a", column("z", _int())),
        ))
        assert [t.name for t in model.tables] == ["b", "a"]
        assert [c.name for c in model.tables[0].columns] == ["y", "x"]
        assert [t.position for t in model.tables] == [0, 1]

    def test_not_null_and_null(self):
        model = build_model(document(create_table(
            "t",
            column("a", _int(), not_null()),
            column("b", _int(), not_null(), nullable()),
        )))
        table = model.get_table("t")
        assert table.get_column("a").is_required
        assert not table.get_column("b").is_required

    def test_serial_primary_key(self):
        model = build_model(document(create_table("t", column("id", type_name("serial"), primary_key()))))
        id_column = model.get_column("t", "id")
        assert id_column.is_primary_key
        assert id_column.is_auto_increment_eligible
        assert id_column.type_family == TypeFamily.SERIAL
        assert not id_column.is_required
        assert model.markers == ()

    def test_identity_column(self):
        model = build_model(document(create_table("t", column("id", type_name("int8", catalog=True), identity(), primary_key()))))
        assert model.get_column("t", "id").is_auto_increment_eligible

    def test_serial_outside_primary_key_is_marked(self):
        model = build_model(document(create_table(
            "t", column("id", _int(), primary_key()), column("seq", type_name("serial")),
        )))
        assert (MarkerKind.UNSUPPORTED_CONSTRUCT, "AUTO INCREMENT") in _kinds(model.markers)

    def test_unknown_type_marked(self):
        model = build_model(document(create_table("t", column("g", type_name("geometry")))))
        assert model.get_column("t", "g").type_family == TypeFamily.UNKNOWN
        marker = model.markers[0]
        assert marker.kind == MarkerKind.CLASSIFICATION_MISS
        assert marker.construct_name == "type geometry"
        assert marker.entity == "t.g"

    def test_table_markers_recorded_on_table(self):
        model = build_model(document(create_table("t", column("g", type_name("geometry")))))
        assert model.get_table("t").markers == model.markers

    def test_empty_table_builds(self):
        model = build_model(document(create_table("empty")))
        assert model.get_table("empty").columns == ()

    def test_enum_column(self):
        model = build_model(document(
            create_enum("mood", "sad", "ok"),
            create_table("p", column("m", type_name("mood"))),
        ))
        m = model.get_column("p", "m")
        assert m.type_family == TypeFamily.ENUM
        assert m.validation.enum_values == ("sad", "ok")

    def test_unsupported_table_options(self):
        model = build_model(document(create_table(
            "t", column("a", _int()),
            partspec={"strategy": "PARTITION_STRATEGY_RANGE"},
            inhRelations=[{"RangeVar": {"relname": "base"}}],
        )))
        constructs = [m.construct_name for m in model.get_table("t").markers]
        assert constructs == ["PARTITION BY", "INHERITS"]

    def test_like_clause_marked(self):
        model = build_model(document(create_table(
            "t", {"TableLikeClause": {"relation": {"relname": "base"}}}, column("a", _int()),
        )))
        assert model.markers[0].construct_name == "LIKE"
        assert [c.name for c in model.get_table("t").columns] == ["a"]


# ============================================================================
# KEYS
# ============================================================================

class TestKeys:

    def test_single_table_primary_key_folds_into_column(self):
        model = build_model(document(create_table("t", column("id", _int()), primary_key("id"))))
        table = model.get_table("t")
        assert table.get_column("id").is_primary_key
        assert table.constraints == ()
        assert table.primary_key_columns == ("id",)

    def test_composite_primary_key(self):
        model = build_model(document(create_table(
            "t", column("a", _int()), column("b", _int()), primary_key("a", "b", name="t_pkey"),
        )))
        table = model.get_table("t")
        assert table.constraints[0].kind == TableConstraintKind.PRIMARY_KEY
        assert table.constraints[0].columns == ("a", "b")
        assert table.constraints[0].name == "t_pkey"
        assert not table.get_column("a").is_primary_key
        assert table.primary_key_columns == ("a", "b")

    def test_table_constraint_before_columns(self):
        model = build_model(document(create_table("t", primary_key("id"), column("id", _int()))))
        assert model.get_column("t", "id").is_primary_key

    def test_unique_column_and_composite(self):
        model = build_model(document(create_table(
            "t", column("a", _int(), unique()), column("b", _int()), column("c", _int()), unique("b", "c"),
        )))
        table = model.get_table("t")
        assert table.get_column("a").is_unique
        assert table.constraints[0].kind == TableConstraintKind.UNIQUE

    def test_two_primary_keys_is_structural_error(self):
        with pytest.raises(StructuralError, match="multiple primary keys"):
            build_model(document(create_table(
                "t", column("a", _int(), primary_key()), column("b", _int(), primary_key()),
            )))

    def test_key_on_unknown_column(self):
        with pytest.raises(StructuralError, match="unknown column 'nope'"):
            build_model(document(create_table("t", column("a", _int()), primary_key("nope"))))

    def test_deferrable_marked(self):
        model = build_model(document(create_table(
            "t", column("a", _int(), unique(), constraint("CONSTR_ATTR_DEFERRABLE")),
        )))
        assert _kinds(model.markers) == [(MarkerKind.UNSUPPORTED_CONSTRUCT, "DEFERRABLE")]

    def test_exclusion_marked(self):
        model = build_model(document(create_table(
            "t", column("a", _int()), constraint("CONSTR_EXCLUSION", conname="no_overlap"),
        )))
        assert model.markers[0].construct_name == "EXCLUDE"


# ============================================================================
# DEFAULTS & CHECKS
# ============================================================================

class TestDefaultsAndChecks:

    def test_literal_and_computed_defaults(self):
        model = build_model(document(create_table(
            "t",
            column("status", _text(), default(const("a"))),
            column("created", type_name("timestamp", catalog=True), default(func("now"))),
        )))
        assert model.get_column("t", "status").default == LiteralDefault(value="a")
        created = model.get_column("t", "created").default
        assert isinstance(created, ComputedDefault)
        assert created.expression == "now()"
        assert model.markers == ()

    def test_unknown_default_function_marked(self):
        model = build_model(document(create_table("t", column("n", _int(), default(func("nextval_custom"))))))
        assert _kinds(model.markers) == [(MarkerKind.CLASSIFICATION_MISS, "DEFAULT nextval_custom()")]

    def test_column_check_merges_rules(self):
        expr = and_(op(col("age"), ">=", const(0)), op(col("age"), "<=", const(150)))
        model = build_model(document(create_table("t", column("age", _int(), check(expr)))))
        age = model.get_column("t", "age")
        assert age.validation.minimum == 0
        assert age.validation.maximum == 150
        assert age.checks[0].classified
        assert age.checks[0].expression == "age >= 0 AND age <= 150"

    def test_check_rules_merge_with_type_rules(self):
        model = build_model(document(create_table(
            "t", column("code", type_name("varchar", 3, catalog=True), check(in_list("code", "abc", "xyz"))),
        )))
        rules = model.get_column("t", "code").validation
        assert rules.max_length == 3
        assert rules.enum_values == ("abc", "xyz")

    def test_single_column_table_check_attaches_to_column(self):
        model = build_model(document(create_table(
            "t", column("qty", _int()), check(op(col("qty"), ">", const(0)), name="qty_positive"),
        )))
        table = model.get_table("t")
        assert table.checks == ()
        qty = table.get_column("qty")
        assert qty.validation.minimum == 1
        assert qty.checks[0].name == "qty_positive"

    def test_strict_bound_adjustment_can_be_disabled(self):
        defaults = TranslatorDefaults(adjust_integer_strict_bounds=False)
        model = ModelBuilder(defaults).build(document(create_table(
            "t", column("qty", _int(), check(op(col("qty"), ">", const(0)))),
        )))
        assert model.get_column("t", "qty").validation.exclusive_minimum == 0

    def test_multi_column_check_stays_on_table(self):
        model = build_model(document(create_table(
            "t", column("lo", _int()), column("hi", _int()), check(op(col("hi"), ">=", col("lo"))),
        )))
        table = model.get_table("t")
        assert table.checks[0].columns == ("hi", "lo")
        assert not table.checks[0].classified
        assert table.get_column("lo").checks == ()

    def test_opaque_column_check_kept(self):
        model = build_model(document(create_table(
            "t", column("code", _text(), check(op(func("length", col("code")), "=", const(3)))),
        )))
        code = model.get_column("t", "code")
        assert not code.checks[0].classified
        assert code.validation.is_empty()


# ============================================================================
# FOREIGN KEYS
# ============================================================================

class TestForeignKeys:

    def test_column_reference_with_actions(self):
        model = build_model(document(
            create_table("customers", column("id", _int(), primary_key())),
            create_table("orders", column("cid", _int(), references("customers", "id", on_delete="c", on_update="r"))),
        ))
        fk = model.get_column("orders", "cid").foreign_key
        assert (fk.target_table, fk.target_column) == ("customers", "id")
        assert fk.on_delete == FkAction.CASCADE
        assert fk.on_update == FkAction.RESTRICT

    def test_table_level_reference(self):
        model = build_model(document(
            create_table("customers", column("id", _int(), primary_key())),
            create_table("orders", column("cid", _int()), references("customers", "id", fk_columns=["cid"])),
        ))
        assert model.get_column("orders", "cid").foreign_key.target_column == "id"

    def test_reference_without_column_uses_target_primary_key(self):
        model = build_model(document(
            create_table("orders", column("cid", _int(), references("customers"))),
            create_table("customers", column("code", _text(), primary_key())),
        ))
        assert model.get_column("orders", "cid").foreign_key.target_column == "code"

    def test_reference_without_column_and_no_key_is_marked(self):
        model = build_model(document(
            create_table("customers", column("id", _int())),
            create_table("orders", column("cid", _int(), references("customers"))),
        ))
        assert model.get_column("orders", "cid").foreign_key is None
        assert _kinds(model.markers) == [(MarkerKind.UNRESOLVED_REFERENCE, "REFERENCES")]

    def test_composite_foreign_key_marked(self):
        model = build_model(document(
            create_table("p", column("a", _int()), column("b", _int()), primary_key("a", "b")),
            create_table(
                "c", column("a", _int()), column("b", _int()),
                references("p", fk_columns=["a", "b"], target_columns=["a", "b"]),
            ),
        ))
        assert model.markers[0].construct_name == "COMPOSITE FOREIGN KEY"
        assert model.get_column("c", "a").foreign_key is None


# ============================================================================
# INDEXES & OTHER STATEMENTS
# ============================================================================

class TestStatements:

    def test_index_name_generated(self):
        model = build_model(document(
            create_table("orders", column("cid", _int())),
            create_index("orders", "cid"),
        ))
        index = model.indexes[0]
        assert index.name == "idx_orders_cid"
        assert index.columns == ("cid",)
        assert not index.unique

    def test_index_prefix_from_defaults(self):
        model = ModelBuilder(TranslatorDefaults(index_prefix="ix")).build(document(
            create_table("orders", column("cid", _int())),
            create_index("orders", "cid"),
        ))
        assert model.indexes[0].name == "ix_orders_cid"

    def test_index_on_unknown_table(self):
        model = build_model(document(create_index("ghost", "a", name="ghost_a")))
        assert model.indexes == ()
        assert _kinds(model.markers) == [(MarkerKind.UNRESOLVED_REFERENCE, "INDEX")]

    def test_partial_index_unsupported(self):
        model = build_model(document(
            create_table("t", column("a", _int())),
            create_index("t", "a", name="t_a_pos", where=op(col("a"), ">", const(0))),
        ))
        assert model.indexes == ()
        assert model.unsupported[0].label == "PARTIAL INDEX t_a_pos"

    def test_expression_index_unsupported(self):
        model = build_model(document(
            create_table("t", column("a", _text())),
            create_index("t", name="t_lower_a", expressions=[func("lower", col("a"))]),
        ))
        assert model.unsupported[0].kind == "EXPRESSION INDEX"

    def test_non_btree_index_marked(self):
        model = build_model(document(
            create_table("t", column("a", _text())),
            create_index("t", "a", method="gin"),
        ))
        assert len(model.indexes) == 1
        assert model.markers[0].construct_name == "USING gin"

    def test_sequence_and_view_unsupported(self):
        model = build_model(document(create_sequence("order_seq"), create_view("recent_orders")))
        assert [u.label for u in model.unsupported] == ["SEQUENCE order_seq", "VIEW recent_orders"]
        assert [u.position for u in model.unsupported] == [0, 1]
        assert all(m.kind == MarkerKind.UNSUPPORTED_CONSTRUCT for m in model.markers)


# ============================================================================
# STRUCTURAL ERRORS
# ============================================================================

class TestStructuralErrors:

    def test_duplicate_table(self):
        with pytest.raises(StructuralError, match="duplicate table 't'"):
            build_model(document(create_table("t"), create_table("t")))

    def test_duplicate_column(self):
        with pytest.raises(StructuralError, match="duplicate column 'a'"):
            build_model(document(create_table("t", column("a", _int()), column("a", _text()))))

    def test_missing_relation(self):
        with pytest.raises(StructuralError) as exc_info:
            build_model(document({"CreateStmt": {"tableElts": []}}))
        assert exc_info.value.entity == "statement[0]"

    def test_column_without_type(self):
        with pytest.raises(StructuralError):
            build_model(document(create_table("t", {"ColumnDef": {"colname": "a"}})))

    def test_untagged_statement(self):
        with pytest.raises(StructuralError):
            build_model([{"CreateStmt": {}, "extra": 1}])
