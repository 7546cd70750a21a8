# ============================================================================
# ENUM REGISTRY BUILDER
# ============================================================================
# STATUS: Core - Pre-pass over the statement list
# PURPOSE: Collect every CREATE TYPE ... AS ENUM before any column is mapped
# CREATED: 08 OCT 2026
# EXPORTS: collect_enums, count_enum_references
# DEPENDENCIES: core.ast, core.models
# ============================================================================
"""
Enum Registry Builder.

Runs over the whole document first so a column may reference an enum that
is declared further down.
"""

import logging
from typing import Dict, Iterable, List

from core.ast.nodes import Node, is_tag, node_body, require, string_list
from core.errors import StructuralError
from core.models import CanonicalModel, EnumRegistry, EnumType

logger = logging.getLogger(__name__)


def collect_enums(statements: Iterable[Node]) -> EnumRegistry:
    """
    Build the enum registry for one translation.

    Args:
        statements: Tagged statement nodes in document order

    Returns:
        Immutable registry, declaration order preserved

    Raises:
        StructuralError: On a malformed or duplicate enum declaration
    """
    enums: Dict[str, EnumType] = {}
    for position, statement in enumerate(statements):
        if not is_tag(statement, "CreateEnumStmt"):
            continue
        body = node_body(statement)
        entity = f"statement[{position}]"
        names = string_list(require(body, "typeName", entity))
        if not names:
            raise StructuralError("enum has no name", entity)
        name = names[-1]
        if name in enums:
            raise StructuralError(f"duplicate enum '{name}'", entity)
        enums[name] = EnumType(name=name, values=tuple(string_list(body.get("vals"))))
        logger.debug(f"Registered enum {name} with {len(enums[name].values)} values")
    return EnumRegistry(enums)


def count_enum_references(model: CanonicalModel) -> Dict[str, int]:
    """Number of columns referencing each registered enum."""
    counts: Dict[str, int] = {name: 0 for name in model.enums}
    for table in model.tables:
        for column in table.columns:
            if column.enum_name in counts:
                counts[column.enum_name] += 1
    return counts


def shared_enums(model: CanonicalModel, min_refs: int) -> List[str]:
    """Enums referenced often enough to become shared definitions."""
    return [name for name, count in count_enum_references(model).items() if count >= min_refs]


__all__ = ["collect_enums", "count_enum_references", "shared_enums"]
