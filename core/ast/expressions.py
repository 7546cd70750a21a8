# ============================================================================
# EXPRESSION RENDERER
# ============================================================================
# STATUS: Core - Expression nodes to SQL text
# PURPOSE: Normalised PostgreSQL text and SQLite text from one AST walk
# CREATED: 08 OCT 2026
# EXPORTS: render_expression, render_type_name, referenced_columns,
#          POSTGRES, SQLITE
# DEPENDENCIES: core.ast.nodes, core.schema.lookups, core.schema.ddl_utils
# ============================================================================
"""
Expression Renderer.

One renderer per node kind, registered with @_renders. Each renderer returns
the text and its binding strength; the caller parenthesises a child only
when it binds more loosely than its parent.

Dialects:
    postgres  normalised source text (markers, ComputedDefault.expression)
    sqlite    text for CHECK and DEFAULT clauses in emitted DDL

Nodes with no rendering in the requested dialect raise
UnrenderableExpressionError; the caller decides whether that becomes a
marker or a comment.

Usage:
    from core.ast.expressions import render_expression

    render_expression(check_node, dialect="sqlite")
    # "age >= 0 AND age <= 150"
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from core.ast.nodes import (
    Node,
    const_value,
    is_tag,
    node_body,
    string_list,
    unwrap,
)
from core.errors import UnrenderableExpressionError
from core.schema.ddl_utils import quote_identifier, quote_literal, render_literal
from core.schema.lookups import (
    BUILTIN_SCHEMA,
    COMPARISON_OPERATORS,
    COMPUTED_DEFAULTS,
    SHARED_OPERATORS,
    SQLITE_FUNCTIONS,
    SQLITE_OPERATORS,
    TYPE_TABLE,
    VALUE_FUNCTIONS,
)

logger = logging.getLogger(__name__)

POSTGRES = "postgres"
SQLITE = "sqlite"
DIALECTS = (POSTGRES, SQLITE)

# Binding strength, loosest first
_OR = 1
_AND = 2
_NOT = 3
_IS = 4
_COMPARE = 5
_MATCH = 6      # LIKE, IN, BETWEEN, REGEXP
_OTHER_OP = 7   # ||, ~ and other user operators
_ADD = 8
_MUL = 9
_EXP = 10
_UNARY = 11
_CAST = 12
_ATOM = 13

Rendered = Tuple[str, int]
Renderer = Callable[["_ExpressionWriter", Node], Rendered]

_renderers: Dict[str, Renderer] = {}


def _renders(*kinds: str) -> Callable[[Renderer], Renderer]:
    """Register a renderer for one or more node kinds."""
    def decorator(func: Renderer) -> Renderer:
        for kind in kinds:
            _renderers[kind] = func
        return func
    return decorator


def render_type_name(type_name: Node) -> str:
    """
    PostgreSQL spelling of a TypeName body: varchar(20), numeric(10,2), int4[].

    The pg_catalog qualifier is dropped; other qualifiers are kept.
    """
    names = string_list(type_name.get("names"))
    if len(names) > 1 and names[0] == BUILTIN_SCHEMA:
        names = names[1:]
    text = ".".join(names)
    typmods = type_name.get("typmods") or []
    if typmods:
        mods = [str(const_value(m)) if is_tag(m, "A_Const") else "?" for m in typmods]
        text = f"{text}({','.join(mods)})"
    return text + "[]" * len(type_name.get("arrayBounds") or [])


def _operator_name(body: Node) -> str:
    names = string_list(body.get("name"))
    return names[-1] if names else ""


def _operator_strength(op: str) -> int:
    if op in COMPARISON_OPERATORS:
        return _COMPARE
    if op in ("+", "-"):
        return _ADD
    if op in ("*", "/", "%"):
        return _MUL
    if op == "^":
        return _EXP
    return _OTHER_OP


class _ExpressionWriter:
    """Walks one expression tree for one dialect."""

    def __init__(self, dialect: str):
        if dialect not in DIALECTS:
            raise ValueError(f"Unknown dialect: {dialect}")
        self.dialect = dialect

    @property
    def sqlite(self) -> bool:
        return self.dialect == SQLITE

    def unrenderable(self, kind: str) -> UnrenderableExpressionError:
        return UnrenderableExpressionError(kind, self.dialect)

    def render(self, node: Any) -> Rendered:
        kind, _ = unwrap(node)
        renderer = _renderers.get(kind)
        if renderer is None:
            raise self.unrenderable(kind)
        return renderer(self, node_body(node))

    def text(self, node: Any) -> str:
        return self.render(node)[0]

    def operand(self, node: Any, parent: int, right: bool = False) -> str:
        """Render a child, parenthesised when it binds looser than its parent."""
        text, strength = self.render(node)
        if strength < parent or (right and strength == parent and parent >= _COMPARE):
            return f"({text})"
        return text

    def items(self, node: Any) -> List[Any]:
        """Elements of a List node, an A_ArrayExpr or a bare list."""
        if isinstance(node, list):
            return node
        if is_tag(node, "List"):
            return node_body(node).get("items") or []
        if is_tag(node, "A_ArrayExpr"):
            return node_body(node).get("elements") or []
        raise self.unrenderable(unwrap(node)[0])

    def joined(self, nodes: List[Any]) -> str:
        return ", ".join(self.text(n) for n in nodes)


# ============================================================================
# LEAVES
# ============================================================================

@_renders("ColumnRef")
def _column_ref(writer: _ExpressionWriter, body: Node) -> Rendered:
    fields = string_list(body.get("fields"))
    return ".".join(quote_identifier(f) for f in fields), _ATOM


@_renders("A_Const")
def _constant(writer: _ExpressionWriter, body: Node) -> Rendered:
    value = const_value(body)
    if writer.sqlite:
        return render_literal(value), _ATOM
    if value is None:
        return "NULL", _ATOM
    if isinstance(value, bool):
        return ("TRUE" if value else "FALSE"), _ATOM
    if isinstance(value, str):
        return quote_literal(value), _ATOM
    return repr(value), _ATOM


@_renders("SQLValueFunction")
def _value_function(writer: _ExpressionWriter, body: Node) -> Rendered:
    keyword = VALUE_FUNCTIONS.get(body.get("op", ""))
    if keyword is None:
        raise writer.unrenderable(f"SQLValueFunction {body.get('op')}")
    if not writer.sqlite:
        return keyword.upper(), _ATOM
    if keyword not in COMPUTED_DEFAULTS:
        raise writer.unrenderable(keyword.upper())
    return COMPUTED_DEFAULTS[keyword], _ATOM


# ============================================================================
# OPERATORS
# ============================================================================

def _binary(writer: _ExpressionWriter, left: Any, op: str, right: Any, strength: int) -> Rendered:
    lhs = writer.operand(left, strength)
    rhs = writer.operand(right, strength, right=True)
    return f"{lhs} {op} {rhs}", strength


def _plain_operator(writer: _ExpressionWriter, body: Node) -> Rendered:
    op = _operator_name(body)
    lexpr = body.get("lexpr")
    rexpr = body.get("rexpr")

    if lexpr is None:
        if op not in ("-", "+"):
            raise writer.unrenderable(f"prefix operator {op}")
        return f"{op}{writer.operand(rexpr, _UNARY)}", _UNARY

    strength = _operator_strength(op)
    if writer.sqlite:
        if op in SQLITE_OPERATORS:
            op = SQLITE_OPERATORS[op]
            strength = _MATCH
        elif op not in SHARED_OPERATORS:
            raise writer.unrenderable(f"operator {op}")
    return _binary(writer, lexpr, op, rexpr, strength)


def _like(writer: _ExpressionWriter, body: Node, insensitive: bool) -> Rendered:
    negated = _operator_name(body).startswith("!")
    keyword = "ILIKE" if insensitive and not writer.sqlite else "LIKE"
    if negated:
        keyword = f"NOT {keyword}"
    return _binary(writer, body.get("lexpr"), keyword, body.get("rexpr"), _MATCH)


def _in_list(writer: _ExpressionWriter, body: Node) -> Rendered:
    keyword = "NOT IN" if _operator_name(body) == "<>" else "IN"
    lhs = writer.operand(body.get("lexpr"), _MATCH)
    return f"{lhs} {keyword} ({writer.joined(writer.items(body.get('rexpr')))})", _MATCH


def _between(writer: _ExpressionWriter, body: Node, kind: str) -> Rendered:
    if kind.endswith("_SYM") and writer.sqlite:
        raise writer.unrenderable("BETWEEN SYMMETRIC")
    bounds = writer.items(body.get("rexpr"))
    if len(bounds) != 2:
        raise writer.unrenderable(kind)
    keyword = "NOT BETWEEN" if kind.startswith("AEXPR_NOT") else "BETWEEN"
    if kind.endswith("_SYM"):
        keyword = f"{keyword} SYMMETRIC"
    lhs = writer.operand(body.get("lexpr"), _MATCH)
    low = writer.operand(bounds[0], _MATCH + 1)
    high = writer.operand(bounds[1], _MATCH + 1)
    return f"{lhs} {keyword} {low} AND {high}", _MATCH


def _quantified(writer: _ExpressionWriter, body: Node, quantifier: str) -> Rendered:
    op = _operator_name(body)
    rexpr = body.get("rexpr")
    if writer.sqlite:
        # col = ANY(ARRAY[...]) and col <> ALL(ARRAY[...]) are list membership
        membership = {("ANY", "="): "IN", ("ALL", "<>"): "NOT IN"}.get((quantifier, op))
        if membership is None or not is_tag(rexpr, "A_ArrayExpr"):
            raise writer.unrenderable(f"{op} {quantifier}")
        lhs = writer.operand(body.get("lexpr"), _MATCH)
        return f"{lhs} {membership} ({writer.joined(writer.items(rexpr))})", _MATCH
    lhs = writer.operand(body.get("lexpr"), _COMPARE)
    return f"{lhs} {op} {quantifier} ({writer.text(rexpr)})", _COMPARE


@_renders("A_Expr")
def _a_expr(writer: _ExpressionWriter, body: Node) -> Rendered:
    kind = body.get("kind", "AEXPR_OP")
    if kind == "AEXPR_OP":
        return _plain_operator(writer, body)
    if kind == "AEXPR_LIKE":
        return _like(writer, body, insensitive=False)
    if kind == "AEXPR_ILIKE":
        return _like(writer, body, insensitive=True)
    if kind == "AEXPR_IN":
        return _in_list(writer, body)
    if kind in ("AEXPR_BETWEEN", "AEXPR_NOT_BETWEEN", "AEXPR_BETWEEN_SYM", "AEXPR_NOT_BETWEEN_SYM"):
        return _between(writer, body, kind)
    if kind == "AEXPR_OP_ANY":
        return _quantified(writer, body, "ANY")
    if kind == "AEXPR_OP_ALL":
        return _quantified(writer, body, "ALL")
    if kind in ("AEXPR_DISTINCT", "AEXPR_NOT_DISTINCT"):
        negated = kind == "AEXPR_NOT_DISTINCT"
        if writer.sqlite:
            keyword = "IS" if negated else "IS NOT"
        else:
            keyword = "IS NOT DISTINCT FROM" if negated else "IS DISTINCT FROM"
        return _binary(writer, body.get("lexpr"), keyword, body.get("rexpr"), _IS)
    if kind == "AEXPR_NULLIF":
        name = "nullif" if writer.sqlite else "NULLIF"
        return f"{name}({writer.joined([body.get('lexpr'), body.get('rexpr')])})", _ATOM
    if kind == "AEXPR_SIMILAR" and not writer.sqlite:
        keyword = "NOT SIMILAR TO" if _operator_name(body).startswith("!") else "SIMILAR TO"
        return _binary(writer, body.get("lexpr"), keyword, body.get("rexpr"), _MATCH)
    raise writer.unrenderable(kind)


@_renders("BoolExpr")
def _bool_expr(writer: _ExpressionWriter, body: Node) -> Rendered:
    op = body.get("boolop", "AND_EXPR")
    args = body.get("args") or []
    if op == "NOT_EXPR":
        return f"NOT {writer.operand(args[0], _NOT)}", _NOT
    strength, keyword = (_AND, " AND ") if op == "AND_EXPR" else (_OR, " OR ")
    return keyword.join(writer.operand(a, strength) for a in args), strength


@_renders("NullTest")
def _null_test(writer: _ExpressionWriter, body: Node) -> Rendered:
    suffix = "IS NOT NULL" if body.get("nulltesttype") == "IS_NOT_NULL" else "IS NULL"
    return f"{writer.operand(body.get('arg'), _IS + 1)} {suffix}", _IS


@_renders("BooleanTest")
def _boolean_test(writer: _ExpressionWriter, body: Node) -> Rendered:
    test = body.get("booltesttype", "IS_TRUE")
    suffix = test.replace("_", " ")
    return f"{writer.operand(body.get('arg'), _IS + 1)} {suffix}", _IS


# ============================================================================
# CALLS, CASTS, COLLECTIONS
# ============================================================================

@_renders("FuncCall")
def _func_call(writer: _ExpressionWriter, body: Node) -> Rendered:
    names = string_list(body.get("funcname"))
    if len(names) > 1 and names[0] == BUILTIN_SCHEMA:
        names = names[1:]
    args = body.get("args") or []
    arg_text = "*" if body.get("agg_star") else writer.joined(args)

    if not writer.sqlite:
        return f"{'.'.join(names)}({arg_text})", _ATOM

    name = names[-1].lower()
    if not args and name in COMPUTED_DEFAULTS:
        return COMPUTED_DEFAULTS[name], _ATOM
    return f"{SQLITE_FUNCTIONS.get(name, name)}({arg_text})", _ATOM


@_renders("TypeCast")
def _type_cast(writer: _ExpressionWriter, body: Node) -> Rendered:
    type_name = body.get("typeName") or {}
    if not writer.sqlite:
        return f"{writer.operand(body.get('arg'), _CAST)}::{render_type_name(type_name)}", _CAST

    names = string_list(type_name.get("names"))
    spec = TYPE_TABLE.get(names[-1].lower()) if names else None
    arg = body.get("arg")
    if spec is None or type_name.get("arrayBounds"):
        # Enum and unknown casts keep the value and drop the cast
        return writer.render(arg)
    if spec.ddl_type == "INTEGER" and names[-1].lower() in ("bool", "boolean") and is_tag(arg, "A_Const"):
        value = const_value(arg)
        if isinstance(value, str):
            return ("1" if value.lower() in ("t", "true", "y", "yes", "on", "1") else "0"), _ATOM
    return f"CAST({writer.text(arg)} AS {spec.ddl_type})", _ATOM


@_renders("A_ArrayExpr")
def _array(writer: _ExpressionWriter, body: Node) -> Rendered:
    elements = body.get("elements") or []
    if writer.sqlite:
        return f"json_array({writer.joined(elements)})", _ATOM
    return f"ARRAY[{writer.joined(elements)}]", _ATOM


@_renders("List")
def _list(writer: _ExpressionWriter, body: Node) -> Rendered:
    return f"({writer.joined(body.get('items') or [])})", _ATOM


@_renders("CoalesceExpr")
def _coalesce(writer: _ExpressionWriter, body: Node) -> Rendered:
    name = "coalesce" if writer.sqlite else "COALESCE"
    return f"{name}({writer.joined(body.get('args') or [])})", _ATOM


@_renders("MinMaxExpr")
def _min_max(writer: _ExpressionWriter, body: Node) -> Rendered:
    greatest = body.get("op", "IS_GREATEST") == "IS_GREATEST"
    if writer.sqlite:
        name = "max" if greatest else "min"
    else:
        name = "GREATEST" if greatest else "LEAST"
    return f"{name}({writer.joined(body.get('args') or [])})", _ATOM


@_renders("CaseExpr")
def _case(writer: _ExpressionWriter, body: Node) -> Rendered:
    parts = ["CASE"]
    if body.get("arg"):
        parts.append(writer.text(body["arg"]))
    for when in body.get("args") or []:
        clause = node_body(when, "CaseWhen")
        parts.append(f"WHEN {writer.text(clause.get('expr'))} THEN {writer.text(clause.get('result'))}")
    if body.get("defresult"):
        parts.append(f"ELSE {writer.text(body['defresult'])}")
    parts.append("END")
    return " ".join(parts), _ATOM


# ============================================================================
# PUBLIC API
# ============================================================================

def render_expression(node: Any, dialect: str = POSTGRES) -> str:
    """
    Render an expression node as SQL text.

    Args:
        node: Tagged expression node
        dialect: "postgres" or "sqlite"

    Returns:
        Expression text without surrounding parentheses

    Raises:
        UnrenderableExpressionError: If a node has no rendering in the dialect
        ValueError: If the dialect is unknown
    """
    return _ExpressionWriter(dialect).text(node)


def referenced_columns(node: Any) -> List[str]:
    """Distinct column names referenced anywhere in an expression, in order."""
    found: List[str] = []

    def walk(value: Any) -> None:
        if isinstance(value, list):
            for item in value:
                walk(item)
        elif isinstance(value, dict):
            if is_tag(value, "ColumnRef"):
                fields = string_list(node_body(value).get("fields"))
                if fields and fields[-1] not in found:
                    found.append(fields[-1])
                return
            for item in value.values():
                walk(item)

    walk(node)
    return found


def try_render(node: Any, dialect: str = POSTGRES) -> Optional[str]:
    """render_expression, or None when the node cannot be rendered."""
    try:
        return render_expression(node, dialect)
    except UnrenderableExpressionError as exc:
        logger.debug(f"Expression not renderable: {exc}")
        return None


__all__ = [
    "POSTGRES",
    "SQLITE",
    "render_expression",
    "render_type_name",
    "referenced_columns",
    "try_render",
]
