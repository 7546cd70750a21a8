# ============================================================================
# CHECK CONSTRAINT CLASSIFIER
# ============================================================================
# STATUS: Core - CHECK expressions to validation rules
# PURPOSE: Recover ranges, membership lists and patterns for one column
# CREATED: 08 OCT 2026
# EXPORTS: classify_check
# DEPENDENCIES: core.ast, core.models, core.schema.lookups
# ============================================================================
"""
Check Constraint Classifier.

Recognised shapes, all on a single column:

    col >= 0                  minimum
    0 < col                   operands swapped, operator flipped
    col BETWEEN 1 AND 10      closed interval
    col >= 0 AND col <= 150   conjunction of ranges, tightest bounds win
    col IN ('a', 'b')         enum_values
    col = 'a' OR col = 'b'    enum_values
    col = ANY(ARRAY['a'])     enum_values
    col ~ '^[a-z]+$'          pattern

Anything else (including any expression that mentions a second column)
classifies as None, meaning opaque. Callers keep opaque CHECKs verbatim in
DDL and record a marker where the target cannot express them.

Strict bounds:
    Integer columns get the adjacent inclusive bound (col > 0 -> minimum 1).
    Other columns keep the strict bound as exclusive_minimum/maximum.
"""

import math
from dataclasses import dataclass
from typing import Any, List, Optional, Union

from core.ast.expressions import referenced_columns
from core.ast.nodes import const_value, is_tag, node_body, string_list
from core.models import ValidationRuleSet
from core.schema.lookups import RANGE_OPERATOR_FLIPS, REGEX_OPERATOR

Number = Union[int, float]

_NOT_A_CONSTANT = object()


@dataclass(frozen=True)
class _Bounds:
    lower: Optional[Number] = None
    lower_strict: bool = False
    upper: Optional[Number] = None
    upper_strict: bool = False

    def tightest(self, other: "_Bounds") -> "_Bounds":
        lower, lower_strict = self.lower, self.lower_strict
        if other.lower is not None and (
            lower is None
            or other.lower > lower
            or (other.lower == lower and other.lower_strict)
        ):
            lower, lower_strict = other.lower, other.lower_strict

        upper, upper_strict = self.upper, self.upper_strict
        if other.upper is not None and (
            upper is None
            or other.upper < upper
            or (other.upper == upper and other.upper_strict)
        ):
            upper, upper_strict = other.upper, other.upper_strict

        return _Bounds(lower, lower_strict, upper, upper_strict)


# ============================================================================
# NODE HELPERS
# ============================================================================

def _a_expr(node: Any, kind: str) -> Optional[dict]:
    if not is_tag(node, "A_Expr"):
        return None
    body = node_body(node)
    return body if body.get("kind", "AEXPR_OP") == kind else None


def _operator(body: dict) -> str:
    names = string_list(body.get("name"))
    return names[-1] if names else ""


def _is_column(node: Any, column_name: str) -> bool:
    if not is_tag(node, "ColumnRef"):
        return False
    fields = string_list(node_body(node).get("fields"))
    return bool(fields) and fields[-1] == column_name


def _constant(node: Any) -> Any:
    """Value of a constant, seeing through casts and unary minus."""
    if is_tag(node, "TypeCast"):
        return _constant(node_body(node).get("arg"))
    if is_tag(node, "A_Const"):
        return const_value(node)
    negation = _a_expr(node, "AEXPR_OP")
    if negation is not None and negation.get("lexpr") is None and _operator(negation) == "-":
        value = _constant(negation.get("rexpr"))
        if _is_number(value):
            return -value
    return _NOT_A_CONSTANT


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _list_items(node: Any) -> Optional[List[Any]]:
    if isinstance(node, list):
        return node
    if is_tag(node, "List"):
        return node_body(node).get("items") or []
    if is_tag(node, "A_ArrayExpr"):
        return node_body(node).get("elements") or []
    return None


def _constants(nodes: List[Any]) -> Optional[List[Any]]:
    values = [_constant(n) for n in nodes]
    if not values or any(v is _NOT_A_CONSTANT for v in values):
        return None
    return values


# ============================================================================
# RANGES
# ============================================================================

def _comparison_bounds(body: dict, column_name: str) -> Optional[_Bounds]:
    op = _operator(body)
    if op not in RANGE_OPERATOR_FLIPS:
        return None
    lexpr, rexpr = body.get("lexpr"), body.get("rexpr")
    if _is_column(rexpr, column_name) and not _is_column(lexpr, column_name):
        lexpr, rexpr, op = rexpr, lexpr, RANGE_OPERATOR_FLIPS[op]
    if not _is_column(lexpr, column_name):
        return None
    value = _constant(rexpr)
    if not _is_number(value):
        return None
    if op in (">=", ">"):
        return _Bounds(lower=value, lower_strict=op == ">")
    return _Bounds(upper=value, upper_strict=op == "<")


def _range_bounds(node: Any, column_name: str) -> Optional[_Bounds]:
    comparison = _a_expr(node, "AEXPR_OP")
    if comparison is not None:
        return _comparison_bounds(comparison, column_name)

    between = _a_expr(node, "AEXPR_BETWEEN")
    if between is not None:
        if not _is_column(between.get("lexpr"), column_name):
            return None
        items = _list_items(between.get("rexpr"))
        values = _constants(items) if items is not None else None
        if values is None or len(values) != 2 or not all(_is_number(v) for v in values):
            return None
        return _Bounds(lower=values[0], upper=values[1])

    if is_tag(node, "BoolExpr") and node_body(node).get("boolop") == "AND_EXPR":
        combined = _Bounds()
        for arg in node_body(node).get("args") or []:
            bounds = _range_bounds(arg, column_name)
            if bounds is None:
                return None
            combined = combined.tightest(bounds)
        return combined

    return None


def _bounds_to_rules(bounds: _Bounds, integer_domain: bool) -> Optional[ValidationRuleSet]:
    rules = {}
    if bounds.lower is not None:
        if not bounds.lower_strict:
            rules["minimum"] = bounds.lower
        elif integer_domain:
            rules["minimum"] = math.floor(bounds.lower) + 1
        else:
            rules["exclusive_minimum"] = bounds.lower
    if bounds.upper is not None:
        if not bounds.upper_strict:
            rules["maximum"] = bounds.upper
        elif integer_domain:
            rules["maximum"] = math.ceil(bounds.upper) - 1
        else:
            rules["exclusive_maximum"] = bounds.upper
    return ValidationRuleSet(**rules) if rules else None


# ============================================================================
# MEMBERSHIP & PATTERN
# ============================================================================

def _equality_value(node: Any, column_name: str) -> Any:
    body = _a_expr(node, "AEXPR_OP")
    if body is None or _operator(body) != "=":
        return _NOT_A_CONSTANT
    lexpr, rexpr = body.get("lexpr"), body.get("rexpr")
    if _is_column(rexpr, column_name):
        lexpr, rexpr = rexpr, lexpr
    if not _is_column(lexpr, column_name):
        return _NOT_A_CONSTANT
    return _constant(rexpr)


def _membership(node: Any, column_name: str) -> Optional[List[Any]]:
    in_list = _a_expr(node, "AEXPR_IN")
    if in_list is not None:
        if _operator(in_list) != "=" or not _is_column(in_list.get("lexpr"), column_name):
            return None
        items = _list_items(in_list.get("rexpr"))
        return _constants(items) if items is not None else None

    any_array = _a_expr(node, "AEXPR_OP_ANY")
    if any_array is not None:
        if _operator(any_array) != "=" or not _is_column(any_array.get("lexpr"), column_name):
            return None
        rexpr = any_array.get("rexpr")
        if is_tag(rexpr, "TypeCast"):
            rexpr = node_body(rexpr).get("arg")
        if not is_tag(rexpr, "A_ArrayExpr"):
            return None
        return _constants(_list_items(rexpr) or [])

    if is_tag(node, "BoolExpr") and node_body(node).get("boolop") == "OR_EXPR":
        values: List[Any] = []
        for arg in node_body(node).get("args") or []:
            arm = _membership(arg, column_name)
            if arm is None:
                return None
            values.extend(v for v in arm if v not in values)
        return values or None

    value = _equality_value(node, column_name)
    return None if value is _NOT_A_CONSTANT else [value]


def _pattern(node: Any, column_name: str) -> Optional[str]:
    body = _a_expr(node, "AEXPR_OP")
    if body is None or _operator(body) != REGEX_OPERATOR:
        return None
    if not _is_column(body.get("lexpr"), column_name):
        return None
    value = _constant(body.get("rexpr"))
    return value if isinstance(value, str) else None


# ============================================================================
# PUBLIC API
# ============================================================================

def classify_check(
    expr: Any,
    column_name: str,
    *,
    integer_domain: bool = False,
) -> Optional[ValidationRuleSet]:
    """
    Classify a CHECK expression against one column.

    Args:
        expr: Tagged expression node (Constraint.raw_expr)
        column_name: Column the rules would attach to
        integer_domain: True when the column holds whole numbers; strict
            bounds then become the adjacent inclusive bound

    Returns:
        ValidationRuleSet, or None when the expression is opaque
    """
    if referenced_columns(expr) != [column_name]:
        return None

    bounds = _range_bounds(expr, column_name)
    if bounds is not None:
        return _bounds_to_rules(bounds, integer_domain)

    values = _membership(expr, column_name)
    if values is not None:
        return ValidationRuleSet(enum_values=tuple(values))

    pattern = _pattern(expr, column_name)
    if pattern is not None:
        return ValidationRuleSet(pattern=pattern)

    return None


__all__ = ["classify_check"]
