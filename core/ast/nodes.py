# ============================================================================
# AST NODE ACCESS
# ============================================================================
# STATUS: Core - Read helpers for libpg_query JSON parse trees
# PURPOSE: Tag/body access, string and constant extraction, statement lists
# CREATED: 07 OCT 2026
# EXPORTS: node_tag, node_body, unwrap, string_value, string_list,
#          const_value, require, normalize_statements
# DEPENDENCIES: core.errors
# ============================================================================
"""
AST Node Access.

The parser emits protobuf-flavoured JSON: every node is a single-key object
whose key is the node kind, e.g. {"ColumnRef": {"fields": [...]}}. Protobuf
omits zero values, so {"ival": {}} is the integer 0 and a missing boolean
is False.

Both constant layouts seen in the wild are understood:
    {"A_Const": {"ival": {"ival": 5}}}                 (libpg_query 15+)
    {"A_Const": {"val": {"Integer": {"ival": 5}}}}     (older releases)
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from core.errors import StructuralError

Node = Dict[str, Any]
ConstValue = Union[bool, int, float, str, None]


# ============================================================================
# TAGS
# ============================================================================

def node_tag(node: Any) -> str:
    """
    Return the kind of a tagged node.

    Raises:
        StructuralError: If node is not a single-key object
    """
    if not isinstance(node, dict) or len(node) != 1:
        raise StructuralError(f"expected a tagged node, got {type(node).__name__}")
    return next(iter(node))


def node_body(node: Any, tag: Optional[str] = None) -> Node:
    """Return the body of a tagged node, optionally asserting its kind."""
    kind = node_tag(node)
    if tag is not None and kind != tag:
        raise StructuralError(f"expected {tag}, got {kind}")
    body = node[kind]
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise StructuralError(f"{kind} body is not an object")
    return body


def unwrap(node: Any) -> Tuple[str, Node]:
    """Split a tagged node into (kind, body)."""
    return node_tag(node), node_body(node)


def is_tag(node: Any, tag: str) -> bool:
    """Check the kind of a node without raising."""
    return isinstance(node, dict) and len(node) == 1 and tag in node


def require(body: Node, key: str, entity: str) -> Any:
    """
    Read a field the grammar guarantees is present.

    Raises:
        StructuralError: If the field is absent or empty
    """
    value = body.get(key)
    if value is None or value == "" or value == []:
        raise StructuralError(f"missing required field '{key}'", entity)
    return value


# ============================================================================
# STRINGS
# ============================================================================

def string_value(node: Any) -> str:
    """
    Extract the text of a String node.

    Accepts {"String": {"sval": "x"}}, the older {"String": {"str": "x"}},
    and the bare {"sval": "x"} form some tools produce.
    """
    if isinstance(node, str):
        return node
    if is_tag(node, "String"):
        body = node_body(node)
        return body.get("sval", body.get("str", ""))
    if isinstance(node, dict) and ("sval" in node or "str" in node):
        return node.get("sval", node.get("str", ""))
    raise StructuralError(f"expected String node, got {node_tag(node)}")


def string_list(nodes: Optional[Sequence[Any]]) -> List[str]:
    """Extract the texts of a list of String nodes, skipping A_Star."""
    return [string_value(n) for n in (nodes or []) if not is_tag(n, "A_Star")]


# ============================================================================
# CONSTANTS
# ============================================================================

def _parse_float_text(text: str) -> Union[int, float]:
    # Integers too large for int4 arrive as Float nodes
    try:
        return int(text)
    except ValueError:
        return float(text)


def _legacy_value(val: Node) -> ConstValue:
    kind, body = unwrap(val)
    if kind == "Integer":
        return int(body.get("ival", 0))
    if kind == "Float":
        return _parse_float_text(body.get("fval", body.get("str", "0")))
    if kind == "String":
        return body.get("sval", body.get("str", ""))
    if kind == "Boolean":
        return bool(body.get("boolval", False))
    if kind == "Null":
        return None
    raise StructuralError(f"unknown constant kind {kind}")


def const_value(node: Any) -> ConstValue:
    """
    Python value of an A_Const node (tagged or bare body).

    Raises:
        StructuralError: If the constant carries no recognised value
    """
    body = node_body(node, "A_Const") if is_tag(node, "A_Const") else node
    if body.get("isnull"):
        return None
    if "ival" in body:
        return int((body["ival"] or {}).get("ival", 0))
    if "fval" in body:
        return _parse_float_text((body["fval"] or {}).get("fval", "0"))
    if "sval" in body:
        return (body["sval"] or {}).get("sval", "")
    if "boolval" in body:
        return bool((body["boolval"] or {}).get("boolval", False))
    if "bsval" in body:
        return (body["bsval"] or {}).get("bsval", "")
    if "val" in body:
        return _legacy_value(body["val"])
    raise StructuralError("A_Const has no value")


def int_value(node: Any) -> Optional[int]:
    """Integer value of an A_Const, or None when it is not an integer."""
    if not is_tag(node, "A_Const"):
        return None
    value = const_value(node)
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


# ============================================================================
# STATEMENT LISTS
# ============================================================================

def _statement_of(entry: Any) -> Node:
    if is_tag(entry, "RawStmt"):
        entry = node_body(entry)
    if isinstance(entry, dict) and "stmt" in entry:
        return entry["stmt"]
    node_tag(entry)
    return entry


def normalize_statements(ast: Any) -> List[Node]:
    """
    Flatten any accepted AST shape into a list of tagged statement nodes.

    Accepted:
        {"stmts": [{"stmt": node}, ...]}    parser output
        [{"RawStmt": {"stmt": node}}, ...]  list of raw statements
        [{"stmt": node}, ...]               list of statement wrappers
        [node, ...]                         list of bare tagged nodes
        node                                a single tagged node

    Raises:
        StructuralError: If the shape is none of the above
    """
    if isinstance(ast, dict) and ("stmts" in ast or "version" in ast):
        entries = ast.get("stmts") or []
    elif isinstance(ast, list):
        entries = ast
    elif isinstance(ast, dict):
        entries = [ast]
    else:
        raise StructuralError(f"unsupported AST root: {type(ast).__name__}")

    if not isinstance(entries, list):
        raise StructuralError("'stmts' is not a list")
    return [_statement_of(entry) for entry in entries]


__all__ = [
    "Node",
    "ConstValue",
    "node_tag",
    "node_body",
    "unwrap",
    "is_tag",
    "require",
    "string_value",
    "string_list",
    "const_value",
    "int_value",
    "normalize_statements",
]
