# ============================================================================
# AST MODULE
# ============================================================================
# STATUS: Core - PostgreSQL parse tree access
# PURPOSE: Read libpg_query JSON nodes and render expressions as SQL text
# CREATED: 07 OCT 2026
# ============================================================================

from core.ast.nodes import (
    Node,
    node_tag,
    node_body,
    unwrap,
    is_tag,
    require,
    string_value,
    string_list,
    const_value,
    int_value,
    normalize_statements,
)
from core.ast.expressions import (
    POSTGRES,
    SQLITE,
    render_expression,
    render_type_name,
    referenced_columns,
    try_render,
)

__all__ = [
    # Nodes
    "Node",
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
    # Expressions
    "POSTGRES",
    "SQLITE",
    "render_expression",
    "render_type_name",
    "referenced_columns",
    "try_render",
]
