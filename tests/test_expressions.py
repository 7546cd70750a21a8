# ============================================================================
# EXPRESSION RENDERER TESTS
# ============================================================================
# STATUS: Tests - AST expressions to SQL text
# PURPOSE: Verify PostgreSQL and SQLite renderings of CHECK/DEFAULT nodes
# CREATED: 13 OCT 2026
# ============================================================================
"""
Expression Renderer Tests

Run with:
    pytest tests/test_expressions.py -v
"""

import pytest

from core.ast.expressions import (
    POSTGRES,
    SQLITE,
    referenced_columns,
    render_expression,
    render_type_name,
    try_render,
)
from core.ast.nodes import const_value, normalize_statements
from core.errors import StructuralError, UnrenderableExpressionError

from pg_ast import (
    and_,
    any_array,
    between,
    cast,
    col,
    const,
    create_table,
    document,
    func,
    in_list,
    not_,
    null_test,
    op,
    or_,
    type_name,
    value_function,
)


# ============================================================================
# NODE ACCESS
# ============================================================================

class TestNodeAccess:
    """Constants and statement lists in every accepted layout."""

    def test_zero_integer_is_empty_object(self):
        assert const_value({"A_Const": {"ival": {}}}) == 0

    def test_legacy_constant_layout(self):
        assert const_value({"A_Const": {"val": {"Integer": {"ival": 7}}}}) == 7
        assert const_value({"A_Const": {"val": {"String": {"str": "x"}}}}) == "x"

    def test_large_integer_arrives_as_float_node(self):
        assert const_value({"A_Const": {"fval": {"fval": "9999999999"}}}) == 9999999999

    def test_null_constant(self):
        assert const_value(const(None)) is None

    def test_normalize_parser_output(self):
        statements = normalize_statements(document(create_table("a"), create_table("b")))
        assert [s["CreateStmt"]["relation"]["relname"] for s in statements] == ["a", "b"]

    def test_normalize_raw_stmt_list(self):
        statements = normalize_statements([{"RawStmt": {"stmt": create_table("a")}}])
        assert "CreateStmt" in statements[0]

    def test_normalize_single_node(self):
        assert normalize_statements(create_table("a")) == [create_table("a")]

    def test_normalize_rejects_scalar_root(self):
        with pytest.raises(StructuralError):
            normalize_statements("CREATE TABLE a ()")


# ============================================================================
# POSTGRES DIALECT
# ============================================================================

class TestPostgresRendering:
    """Normalised source text kept in the model and schema."""

    def test_range_conjunction(self):
        expr = and_(op(col("age"), ">=", const(0)), op(col("age"), "<=", const(150)))
        assert render_expression(expr) == "age >= 0 AND age <= 150"

    def test_or_inside_and_is_parenthesised(self):
        expr = and_(or_(op(col("a"), "=", const(1)), op(col("b"), "=", const(2))), op(col("c"), ">", const(0)))
        assert render_expression(expr) == "(a = 1 OR b = 2) AND c > 0"

    def test_in_list(self):
        assert render_expression(in_list("status", "a", "b")) == "status IN ('a', 'b')"

    def test_any_array(self):
        assert render_expression(any_array("status", "a", "b")) == "status = ANY (ARRAY['a', 'b'])"

    def test_function_drops_catalog(self):
        assert render_expression(func("now", schema="pg_catalog")) == "now()"

    def test_value_function(self):
        assert render_expression(value_function("SVFOP_CURRENT_TIMESTAMP")) == "CURRENT_TIMESTAMP"

    def test_cast(self):
        assert render_expression(cast(const("{}"), "jsonb")) == "'{}'::jsonb"

    def test_between(self):
        assert render_expression(between("n", 1, 10)) == "n BETWEEN 1 AND 10"

    def test_string_quotes_doubled(self):
        assert render_expression(op(col("name"), "<>", const("O'Brien"))) == "name <> 'O''Brien'"

    def test_reserved_column_is_quoted(self):
        assert render_expression(null_test(col("order"), negated=True)) == '"order" IS NOT NULL'

    def test_negation(self):
        assert render_expression(not_(op(col("a"), "=", const(1)))) == "NOT a = 1"

    def test_arithmetic_precedence(self):
        expr = op(op(col("a"), "+", const(1)), "*", const(2))
        assert render_expression(expr) == "(a + 1) * 2"

    def test_type_name(self):
        assert render_type_name(type_name("numeric", 10, 2, catalog=True)) == "numeric(10,2)"
        assert render_type_name(type_name("int4", array_depth=2)) == "int4[][]"


# ============================================================================
# SQLITE DIALECT
# ============================================================================

class TestSqliteRendering:
    """Text written into SQLite CHECK and DEFAULT clauses."""

    def test_boolean_constant(self):
        assert render_expression(op(col("flag"), "=", const(True)), SQLITE) == "flag = 1"

    def test_any_array_becomes_in(self):
        assert render_expression(any_array("s", "x", "y"), SQLITE) == "s IN ('x', 'y')"

    def test_known_function_translated(self):
        assert render_expression(func("now"), SQLITE) == "datetime('now')"

    def test_renamed_function(self):
        expr = op(func("char_length", col("code")), "<=", const(8))
        assert render_expression(expr, SQLITE) == "length(code) <= 8"

    def test_regex_operator(self):
        assert render_expression(op(col("code"), "~", const("^[a-z]+$")), SQLITE) == "code REGEXP '^[a-z]+$'"

    def test_enum_cast_dropped(self):
        assert render_expression(cast(const("new"), "order_status"), SQLITE) == "'new'"

    def test_builtin_cast(self):
        assert render_expression(cast(col("n"), "int4", catalog=True), SQLITE) == "CAST(n AS INTEGER)"

    def test_user_value_function_unrenderable(self):
        with pytest.raises(UnrenderableExpressionError):
            render_expression(value_function("SVFOP_CURRENT_USER"), SQLITE)

    def test_unknown_node_unrenderable(self):
        with pytest.raises(UnrenderableExpressionError):
            render_expression({"SubLink": {}}, SQLITE)

    def test_try_render_returns_none(self):
        assert try_render({"SubLink": {}}, SQLITE) is None

    def test_unknown_dialect(self):
        with pytest.raises(ValueError):
            render_expression(const(1), "oracle")


# ============================================================================
# COLUMN REFERENCES
# ============================================================================

class TestReferencedColumns:

    def test_distinct_in_order(self):
        expr = and_(op(col("b"), ">", col("a")), op(col("b"), "<", const(5)))
        assert referenced_columns(expr) == ["b", "a"]

    def test_constant_only(self):
        assert referenced_columns(op(const(1), "=", const(1))) == []
