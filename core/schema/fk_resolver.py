# ============================================================================
# FOREIGN KEY RESOLVER
# ============================================================================
# STATUS: Core - REFERENCES clauses to ForeignKeyRef
# PURPOSE: Target table/column, normalised actions, reference-chain walking
# CREATED: 08 OCT 2026
# EXPORTS: ForeignKeyDraft, read_fk, resolve_fk, parse_fk_action,
#          follow_reference
# DEPENDENCIES: core.ast, core.models, core.schema.lookups
# ============================================================================
"""
Foreign Key Resolver.

A Constraint node with contype CONSTR_FOREIGN carries:
    pktable        {"relname": "customers"}
    pk_attrs       [String]  referenced columns (may be absent)
    fk_attrs       [String]  referencing columns (table-level only)
    fk_del_action  one-character code, see FK_ACTION_CODES
    fk_upd_action  one-character code

Only single-column keys are represented. "REFERENCES customers" without a
column is kept as a draft and resolved against the target's primary key
once every table is built.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from core.ast.nodes import Node, string_list
from core.contracts import FkAction
from core.errors import CyclicReferenceError, StructuralError, UnsupportedConstructError
from core.models import CanonicalModel, Column, ForeignKeyRef
from core.schema.lookups import FK_ACTION_CODES

COMPOSITE_FOREIGN_KEY = "composite foreign key"


@dataclass(frozen=True)
class ForeignKeyDraft:
    """A reference whose target column may still be unknown."""
    target_table: str
    target_column: Optional[str]
    on_delete: FkAction = FkAction.NO_ACTION
    on_update: FkAction = FkAction.NO_ACTION

    def resolve(self, target_column: Optional[str] = None) -> ForeignKeyRef:
        return ForeignKeyRef(
            target_table=self.target_table,
            target_column=target_column or self.target_column,
            on_delete=self.on_delete,
            on_update=self.on_update,
        )


def parse_fk_action(code: Optional[str], entity: str = "foreign key") -> FkAction:
    """
    Normalise a referential action code.

    Raises:
        StructuralError: If the code is not one the parser emits
    """
    action = FK_ACTION_CODES.get(code or "")
    if action is None:
        raise StructuralError(f"unknown referential action code '{code}'", entity)
    return action


def read_fk(constraint: Node, entity: str = "foreign key") -> ForeignKeyDraft:
    """
    Read a FOREIGN constraint body into a draft.

    Raises:
        StructuralError: If pktable is missing
        UnsupportedConstructError: If more than one column is referenced
    """
    pktable = constraint.get("pktable") or {}
    target_table = pktable.get("relname")
    if not target_table:
        raise StructuralError("foreign key has no referenced table", entity)

    pk_attrs = string_list(constraint.get("pk_attrs"))
    fk_attrs = string_list(constraint.get("fk_attrs"))
    if len(pk_attrs) > 1 or len(fk_attrs) > 1:
        raise UnsupportedConstructError(COMPOSITE_FOREIGN_KEY, f"{target_table}({', '.join(pk_attrs)})")

    return ForeignKeyDraft(
        target_table=target_table,
        target_column=pk_attrs[0] if pk_attrs else None,
        on_delete=parse_fk_action(constraint.get("fk_del_action"), entity),
        on_update=parse_fk_action(constraint.get("fk_upd_action"), entity),
    )


def resolve_fk(constraint: Node, entity: str = "foreign key") -> ForeignKeyRef:
    """
    Resolve a FOREIGN constraint that names its referenced column.

    Raises:
        StructuralError: If pktable or the referenced column is missing
        UnsupportedConstructError: For composite keys
    """
    draft = read_fk(constraint, entity)
    if draft.target_column is None:
        raise StructuralError("foreign key has no referenced column", entity)
    return draft.resolve()


def follow_reference(model: CanonicalModel, table: str, column: str) -> Optional[Column]:
    """
    Follow a column's reference chain to the column that owns the type.

    Args:
        model: Canonical model
        table: Table of the referencing column
        column: Referencing column

    Returns:
        The first column in the chain without a foreign key, or None when
        some link in the chain points at a missing table or column

    Raises:
        CyclicReferenceError: If the chain returns to a column already visited
    """
    chain: List[str] = []
    visited: set = set()
    current: Tuple[str, str] = (table, column)
    while True:
        key = f"{current[0]}.{current[1]}"
        if current in visited:
            raise CyclicReferenceError(chain + [key])
        visited.add(current)
        chain.append(key)

        found = model.get_column(*current)
        if found is None:
            return None
        if found.foreign_key is None:
            return found
        current = (found.foreign_key.target_table, found.foreign_key.target_column)


__all__ = [
    "COMPOSITE_FOREIGN_KEY",
    "ForeignKeyDraft",
    "parse_fk_action",
    "read_fk",
    "resolve_fk",
    "follow_reference",
]
