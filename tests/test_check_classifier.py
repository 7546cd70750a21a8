# ============================================================================
# CHECK CLASSIFIER TESTS
# ============================================================================
# STATUS: Tests - CHECK expressions to validation rules
# PURPOSE: Verify ranges, membership lists and patterns are recovered
# CREATED: 13 OCT 2026
# ============================================================================
"""
Check Classifier Tests

Run with:
    pytest tests/test_check_classifier.py -v
"""

import pytest

from core.schema.check_classifier import classify_check

from pg_ast import and_, any_array, between, cast, col, const, func, in_list, op, or_


# ============================================================================
# RANGES
# ============================================================================

class TestRanges:
    """Comparisons against numeric constants."""

    def test_closed_range_conjunction(self):
        expr = and_(op(col("age"), ">=", const(0)), op(col("age"), "<=", const(150)))
        rules = classify_check(expr, "age", integer_domain=True)
        assert rules.minimum == 0
        assert rules.maximum == 150

    def test_swapped_operands_flip_operator(self):
        rules = classify_check(op(const(10), ">=", col("n")), "n")
        assert rules.maximum == 10
        assert rules.minimum is None

    def test_between(self):
        rules = classify_check(between("score", 1, 5), "score")
        assert (rules.minimum, rules.maximum) == (1, 5)

    def test_strict_bound_on_integer_becomes_inclusive(self):
        rules = classify_check(op(col("qty"), ">", const(0)), "qty", integer_domain=True)
        assert rules.minimum == 1
        assert rules.exclusive_minimum is None

    def test_strict_upper_bound_on_integer(self):
        rules = classify_check(op(col("qty"), "<", const(100)), "qty", integer_domain=True)
        assert rules.maximum == 99

    def test_strict_bound_on_real_stays_exclusive(self):
        rules = classify_check(op(col("price"), ">", const(0)), "price")
        assert rules.exclusive_minimum == 0
        assert rules.minimum is None

    def test_tightest_bound_wins(self):
        expr = and_(op(col("n"), ">=", const(0)), op(col("n"), ">=", const(5)), op(col("n"), "<", const(9.5)))
        rules = classify_check(expr, "n")
        assert rules.minimum == 5
        assert rules.exclusive_maximum == pytest.approx(9.5)

    def test_negative_constant(self):
        rules = classify_check(op(col("t"), ">=", op(None, "-", const(40))), "t")
        assert rules.minimum == -40

    def test_cast_constant(self):
        rules = classify_check(op(col("n"), "<=", cast(const(3), "int4", catalog=True)), "n")
        assert rules.maximum == 3


# ============================================================================
# MEMBERSHIP & PATTERN
# ============================================================================

class TestMembership:
    """Lists of allowed values."""

    def test_in_list(self):
        rules = classify_check(in_list("status", "a", "b", "c"), "status")
        assert rules.enum_values == ("a", "b", "c")

    def test_or_of_equalities(self):
        expr = or_(op(col("s"), "=", const("x")), op(const("y"), "=", col("s")))
        assert classify_check(expr, "s").enum_values == ("x", "y")

    def test_any_array(self):
        assert classify_check(any_array("s", "p", "q"), "s").enum_values == ("p", "q")

    def test_single_equality_is_one_value_enum(self):
        assert classify_check(op(col("kind"), "=", const("fixed")), "kind").enum_values == ("fixed",)

    def test_pattern(self):
        rules = classify_check(op(col("code"), "~", const("^[A-Z]{3}$")), "code")
        assert rules.pattern == "^[A-Z]{3}$"


# ============================================================================
# OPAQUE EXPRESSIONS
# ============================================================================

class TestOpaque:
    """Shapes that classify as None and stay verbatim."""

    def test_two_columns(self):
        assert classify_check(op(col("end_at"), ">", col("start_at")), "end_at") is None

    def test_other_column(self):
        assert classify_check(op(col("a"), ">", const(0)), "b") is None

    def test_function_call(self):
        expr = op(func("length", col("code")), "=", const(3))
        assert classify_check(expr, "code") is None

    def test_not_equal_is_not_a_range(self):
        assert classify_check(op(col("n"), "<>", const(0)), "n") is None

    def test_mixed_conjunction(self):
        expr = and_(op(col("n"), ">=", const(0)), in_list("n", 1, 2))
        assert classify_check(expr, "n") is None

    def test_string_range_is_opaque(self):
        assert classify_check(op(col("s"), ">=", const("a")), "s") is None
