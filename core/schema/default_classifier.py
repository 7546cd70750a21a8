# ============================================================================
# DEFAULT VALUE CLASSIFIER
# ============================================================================
# STATUS: Core - DEFAULT expressions to DefaultSpec
# PURPOSE: Separate constants from values computed at insert time
# CREATED: 08 OCT 2026
# EXPORTS: classify_default, literal_for_column, sqlite_default_expression
# DEPENDENCIES: core.ast, core.models, core.schema.lookups
# ============================================================================
"""
Default Value Classifier.

    DEFAULT 'a'               LiteralDefault('a')
    DEFAULT NULL              LiteralDefault(None)
    DEFAULT 't'::boolean      LiteralDefault(True)
    DEFAULT now()             ComputedDefault(FUNCTION_CALL, 'now()', 'now')
    DEFAULT CURRENT_DATE      ComputedDefault(VALUE_FUNCTION, 'CURRENT_DATE', 'current_date')
    DEFAULT '{}'::jsonb       ComputedDefault(TYPE_CAST, "'{}'::jsonb")
    DEFAULT 1 + 1             ComputedDefault(EXPRESSION, '1 + 1')

Known functions are translated through COMPUTED_DEFAULTS when DDL is
written; unknown ones pass through unchanged.
"""

from typing import Any, Optional

from core.ast.expressions import POSTGRES, SQLITE, render_expression
from core.ast.nodes import const_value, is_tag, node_body, string_list, unwrap
from core.contracts import DefaultKind, TypeFamily
from core.errors import UnrenderableExpressionError
from core.models import ComputedDefault, DefaultSpec, LiteralDefault, LiteralValue
from core.schema.lookups import BUILTIN_SCHEMA, COMPUTED_DEFAULTS, VALUE_FUNCTIONS

_BOOLEAN_TYPES = ("bool", "boolean")
_TRUE_SPELLINGS = ("t", "true", "y", "yes", "on", "1")
_FALSE_SPELLINGS = ("f", "false", "n", "no", "off", "0")


def _boolean_cast(body: dict) -> Optional[bool]:
    """'t'::boolean and friends, as older parsers emit boolean literals."""
    names = string_list((body.get("typeName") or {}).get("names"))
    if not names or names[-1].lower() not in _BOOLEAN_TYPES:
        return None
    arg = body.get("arg")
    if not is_tag(arg, "A_Const"):
        return None
    value = const_value(arg)
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        if value.lower() in _TRUE_SPELLINGS:
            return True
        if value.lower() in _FALSE_SPELLINGS:
            return False
    return None


def _function_key(kind: str, body: dict) -> Optional[str]:
    if kind == "FuncCall":
        names = string_list(body.get("funcname"))
        if len(names) > 1 and names[0] != BUILTIN_SCHEMA:
            return None
        return names[-1].lower() if names else None
    if kind == "SQLValueFunction":
        return VALUE_FUNCTIONS.get(body.get("op", ""))
    return None


def classify_default(expr: Any) -> DefaultSpec:
    """
    Classify a DEFAULT expression.

    Args:
        expr: Tagged expression node (Constraint.raw_expr)

    Returns:
        LiteralDefault for constants, ComputedDefault for everything else

    Raises:
        UnrenderableExpressionError: If the expression cannot even be
            written back as PostgreSQL text
    """
    kind, body = unwrap(expr)

    if kind == "A_Const":
        return LiteralDefault(value=const_value(body))

    if kind == "A_Expr" and body.get("lexpr") is None and string_list(body.get("name")) == ["-"]:
        operand = body.get("rexpr")
        value = const_value(operand) if is_tag(operand, "A_Const") else None
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return LiteralDefault(value=-value)

    if kind == "TypeCast":
        boolean = _boolean_cast(body)
        if boolean is not None:
            return LiteralDefault(value=boolean)

    if kind == "FuncCall":
        default_kind = DefaultKind.FUNCTION_CALL
    elif kind == "SQLValueFunction":
        default_kind = DefaultKind.VALUE_FUNCTION
    elif kind == "TypeCast":
        default_kind = DefaultKind.TYPE_CAST
    else:
        default_kind = DefaultKind.EXPRESSION

    return ComputedDefault(
        kind=default_kind,
        expression=render_expression(expr, POSTGRES),
        function=_function_key(kind, body),
        node=expr,
    )


def literal_for_column(default: LiteralDefault, family: TypeFamily) -> LiteralValue:
    """
    Value of a literal default as the column stores it.

    Boolean columns accept the textual spellings PostgreSQL accepts
    (DEFAULT 'yes'); those become real booleans here so no target ever
    receives a quoted string.
    """
    value = default.value
    if family == TypeFamily.BOOLEAN and isinstance(value, str):
        if value.lower() in _TRUE_SPELLINGS:
            return True
        if value.lower() in _FALSE_SPELLINGS:
            return False
    if family == TypeFamily.BOOLEAN and isinstance(value, int) and not isinstance(value, bool):
        return bool(value)
    return value


def is_known_function(default: ComputedDefault) -> bool:
    """Check if a computed default has a table entry or needs no translation."""
    if default.function is None:
        return True
    return default.function in COMPUTED_DEFAULTS


def sqlite_default_expression(default: ComputedDefault) -> Optional[str]:
    """
    SQLite text for a computed default, without the surrounding parentheses.

    Known functions use their COMPUTED_DEFAULTS entry. Function calls the
    renderer cannot write pass through as the normalised PostgreSQL text,
    since SQLite only resolves the name at insert time.

    Returns:
        None when the default has no SQLite form (CURRENT_USER and the
        other session value functions), so the caller can omit it
    """
    if default.function in COMPUTED_DEFAULTS:
        return COMPUTED_DEFAULTS[default.function]
    if not default.node:
        return default.expression
    try:
        return render_expression(default.node, SQLITE)
    except UnrenderableExpressionError:
        if default.kind == DefaultKind.FUNCTION_CALL:
            return default.expression
        return None


__all__ = [
    "classify_default",
    "is_known_function",
    "literal_for_column",
    "sqlite_default_expression",
]
