# ============================================================================
# CANONICAL MODEL BUILDER
# ============================================================================
# STATUS: Core - PostgreSQL AST to canonical model
# PURPOSE: Dispatch statements, table elements and constraints to handlers
# CREATED: 09 OCT 2026
# EXPORTS: ModelBuilder, build_model
# DEPENDENCIES: core.ast, core.models, core.schema.*, core.config, core.logging
# ============================================================================
"""
Canonical Model Builder.

Four handler tables, one per AST layer, each populated at import time with
the decorator for that layer:

    @_statement("CreateStmt")                 top-level statements
    @_element("ColumnDef")                    CREATE TABLE elements
    @_column_constraint("CONSTR_NOTNULL")     constraints inside a ColumnDef
    @_table_constraint("CONSTR_PRIMARY")      table-level constraints

A kind with no handler falls through to that layer's catch-all, which records
an UNSUPPORTED_CONSTRUCT marker and moves on. Malformed nodes (a missing
field the grammar always provides) raise StructuralError and abort the
whole build.

Build order:
    1. normalize_statements()  accept every supported AST shape
    2. collect_enums()         complete pre-pass
    3. statement handlers      tables, indexes, unsupported statements
    4. resolve_references()    REFERENCES t without a column
    5. freeze()                immutable CanonicalModel

Usage:
    from core.schema.model_builder import build_model

    model = build_model(ast)
    model.get_column("orders", "total").validation.multiple_of
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from core.ast.expressions import POSTGRES, referenced_columns, render_expression
from core.ast.nodes import (
    Node,
    node_body,
    normalize_statements,
    require,
    string_list,
    unwrap,
)
from core.config import TranslatorDefaults, get_defaults
from core.contracts import DefaultKind, TableConstraintKind, TypeFamily
from core.errors import StructuralError, UnrenderableExpressionError, UnsupportedConstructError
from core.logging import log_context
from core.models import (
    CanonicalModel,
    CheckConstraint,
    Column,
    ComputedDefault,
    DefaultSpec,
    EnumRegistry,
    Index,
    Table,
    TableConstraint,
    TranslationMarker,
    UnsupportedStatement,
    ValidationRuleSet,
)
from core.schema.check_classifier import classify_check
from core.schema.ddl_utils import IndexBuilder
from core.schema.default_classifier import classify_default, is_known_function
from core.schema.enum_registry import collect_enums
from core.schema.fk_resolver import COMPOSITE_FOREIGN_KEY, ForeignKeyDraft, read_fk
from core.schema.lookups import STATEMENT_LABELS
from core.schema.type_mapper import TargetType, map_type_name

logger = logging.getLogger(__name__)


# ============================================================================
# BUILD STATE
# ============================================================================

@dataclass
class _ColumnDraft:
    """Mutable column while its constraints are being applied."""
    name: str
    target: TargetType
    entity: str
    is_primary_key: bool = False
    is_required: bool = False
    is_unique: bool = False
    is_auto_increment_eligible: bool = False
    default: Optional[DefaultSpec] = None
    validation: ValidationRuleSet = field(default_factory=ValidationRuleSet)
    foreign_key: Optional[ForeignKeyDraft] = None
    checks: List[CheckConstraint] = field(default_factory=list)

    def freeze(self, foreign_key_column: Optional[str] = None) -> Column:
        fk = None
        if self.foreign_key is not None and (self.foreign_key.target_column or foreign_key_column):
            fk = self.foreign_key.resolve(foreign_key_column)
        return Column(
            name=self.name,
            source_type=self.target.source_name,
            type_family=self.target.family,
            enum_name=self.target.enum_name,
            type_modifiers=self.target.modifiers,
            is_primary_key=self.is_primary_key,
            is_required=self.is_required,
            is_unique=self.is_unique,
            is_auto_increment_eligible=self.is_auto_increment_eligible,
            default=self.default,
            validation=self.validation,
            foreign_key=fk,
            checks=tuple(self.checks),
        )


@dataclass
class _TableDraft:
    """Mutable table while its elements are being applied."""
    name: str
    position: int
    columns: List[_ColumnDraft] = field(default_factory=list)
    constraints: List[TableConstraint] = field(default_factory=list)
    checks: List[CheckConstraint] = field(default_factory=list)
    markers: List[TranslationMarker] = field(default_factory=list)

    def get_column(self, name: str) -> Optional[_ColumnDraft]:
        for column in self.columns:
            if column.name == name:
                return column
        return None

    def require_column(self, name: str) -> _ColumnDraft:
        column = self.get_column(name)
        if column is None:
            raise StructuralError(f"constraint names unknown column '{name}'", self.name)
        return column

    def has_primary_key(self) -> bool:
        return any(c.is_primary_key for c in self.columns) or any(
            c.kind == TableConstraintKind.PRIMARY_KEY for c in self.constraints
        )

    def primary_key_columns(self) -> List[str]:
        for constraint in self.constraints:
            if constraint.kind == TableConstraintKind.PRIMARY_KEY:
                return list(constraint.columns)
        return [c.name for c in self.columns if c.is_primary_key]


class _BuildState:
    """Everything accumulated during one build call."""

    def __init__(self, enums: EnumRegistry, defaults: TranslatorDefaults):
        self.enums = enums
        self.defaults = defaults
        self.tables: List[_TableDraft] = []
        self.indexes: List[Index] = []
        self.unsupported: List[UnsupportedStatement] = []
        self.markers: List[TranslationMarker] = []

    def mark(self, marker: TranslationMarker, table: Optional[_TableDraft] = None) -> None:
        logger.warning(f"{marker.kind.value}: {marker.construct_name} at {marker.entity}: {marker.message}")
        self.markers.append(marker)
        if table is not None:
            table.markers.append(marker)

    def get_table(self, name: str) -> Optional[_TableDraft]:
        for table in self.tables:
            if table.name == name:
                return table
        return None

    def add_unsupported(self, label: str, name: Optional[str], position: int, message: str = "") -> None:
        statement = UnsupportedStatement(kind=label, name=name, position=position)
        self.unsupported.append(statement)
        self.mark(TranslationMarker.unsupported(label, name or f"statement[{position}]", message))


# ============================================================================
# HANDLER REGISTRIES
# ============================================================================

StatementHandler = Callable[[_BuildState, Node, int, str], None]
ElementHandler = Callable[[_BuildState, _TableDraft, Node, str], None]
ColumnConstraintHandler = Callable[[_BuildState, _TableDraft, _ColumnDraft, Node], None]
TableConstraintHandler = Callable[[_BuildState, _TableDraft, Node], None]

_statement_handlers: Dict[str, StatementHandler] = {}
_element_handlers: Dict[str, ElementHandler] = {}
_column_constraint_handlers: Dict[str, ColumnConstraintHandler] = {}
_table_constraint_handlers: Dict[str, TableConstraintHandler] = {}


def _registrar(registry: Dict[str, Callable]) -> Callable[..., Callable[[Callable], Callable]]:
    def register(*kinds: str) -> Callable[[Callable], Callable]:
        def decorator(func: Callable) -> Callable:
            for kind in kinds:
                if kind in registry:
                    raise ValueError(f"Handler already registered for {kind}")
                registry[kind] = func
            return func
        return decorator
    return register


_statement = _registrar(_statement_handlers)
_element = _registrar(_element_handlers)
_column_constraint = _registrar(_column_constraint_handlers)
_table_constraint = _registrar(_table_constraint_handlers)


def registered_kinds() -> Dict[str, List[str]]:
    """Node kinds with a dedicated handler, per layer."""
    return {
        "statements": sorted(_statement_handlers),
        "table_elements": sorted(_element_handlers),
        "column_constraints": sorted(_column_constraint_handlers),
        "table_constraints": sorted(_table_constraint_handlers),
    }


# ============================================================================
# STATEMENTS
# ============================================================================

def _statement_name(body: Node) -> Optional[str]:
    """Best-effort name of an unsupported statement, for its marker."""
    for key in ("trigname", "policy_name", "extname", "schemaname", "idxname", "rulename"):
        if body.get(key):
            return body[key]
    for key in ("relation", "view", "sequence", "typevar", "into"):
        relation = body.get(key)
        if isinstance(relation, dict):
            relation = relation.get("rel", relation)
            if isinstance(relation, dict) and relation.get("relname"):
                return relation["relname"]
    for key in ("funcname", "domainname", "typeName"):
        names = body.get(key)
        if isinstance(names, list) and names:
            try:
                return ".".join(string_list(names))
            except StructuralError:
                return None
    return None


def _unsupported_statement(state: _BuildState, body: Node, position: int, kind: str) -> None:
    label = STATEMENT_LABELS.get(kind, kind)
    state.add_unsupported(label, _statement_name(body), position)


@_statement("CreateEnumStmt")
def _create_enum(state: _BuildState, body: Node, position: int, kind: str) -> None:
    # Registered by the pre-pass; enums are inlined into referencing columns
    logger.debug(f"Enum at statement[{position}] already registered")


@_statement("CreateSeqStmt", "CompositeTypeStmt")
def _create_unsupported_object(state: _BuildState, body: Node, position: int, kind: str) -> None:
    _unsupported_statement(state, body, position, kind)


@_statement("CreateStmt")
def _create_table(state: _BuildState, body: Node, position: int, kind: str) -> None:
    entity = f"statement[{position}]"
    relation = require(body, "relation", entity)
    name = require(relation, "relname", entity)
    if state.get_table(name) is not None:
        raise StructuralError(f"duplicate table '{name}'", entity)

    table = _TableDraft(name=name, position=position)
    state.tables.append(table)

    with log_context(table=name, operation="build_table"):
        if body.get("partspec"):
            state.mark(TranslationMarker.unsupported("PARTITION BY", name, "partitioning dropped"), table)
        if body.get("inhRelations"):
            parents = ", ".join(r.get("RangeVar", {}).get("relname", "?") for r in body["inhRelations"])
            state.mark(TranslationMarker.unsupported("INHERITS", name, f"inherits from {parents}"), table)

        # Table constraints may name columns declared after them
        deferred: List[Node] = []
        for element in body.get("tableElts") or []:
            element_kind, element_body = unwrap(element)
            if element_kind == "Constraint":
                deferred.append(element_body)
                continue
            handler = _element_handlers.get(element_kind, _unsupported_element)
            handler(state, table, element_body, element_kind)

        for constraint in deferred:
            _apply_table_constraint(state, table, constraint)

        for column in table.columns:
            if column.is_auto_increment_eligible and not column.is_primary_key:
                state.mark(TranslationMarker.unsupported(
                    "AUTO INCREMENT", column.entity,
                    "auto-increment outside a single-column primary key is stored as a plain INTEGER",
                ), table)

        logger.debug(f"Built table {name} with {len(table.columns)} columns")


@_statement("IndexStmt")
def _create_index(state: _BuildState, body: Node, position: int, kind: str) -> None:
    entity = f"statement[{position}]"
    relation = require(body, "relation", entity)
    table_name = require(relation, "relname", entity)
    params = require(body, "indexParams", entity)
    index_name = body.get("idxname")

    columns: List[str] = []
    for param in params:
        elem = node_body(param, "IndexElem")
        if elem.get("expr") is not None or not elem.get("name"):
            state.add_unsupported("EXPRESSION INDEX", index_name or table_name, position)
            return
        columns.append(elem["name"])

    if body.get("whereClause") is not None:
        state.add_unsupported("PARTIAL INDEX", index_name or table_name, position)
        return

    table = state.get_table(table_name)
    if table is None:
        state.mark(TranslationMarker.unresolved(
            "INDEX", index_name or table_name, f"index on unknown table '{table_name}' skipped",
        ))
        return

    method = body.get("accessMethod")
    if method and method != "btree":
        state.mark(TranslationMarker.unsupported(
            f"USING {method}", index_name or table_name, "emitted as a plain index",
        ), table)

    if not index_name:
        index_name = IndexBuilder.generate_index_name(table_name, columns, prefix=state.defaults.index_prefix)

    state.indexes.append(Index(
        name=index_name,
        table=table_name,
        columns=tuple(columns),
        unique=bool(body.get("unique")),
        position=position,
    ))


# ============================================================================
# TABLE ELEMENTS
# ============================================================================

def _unsupported_element(state: _BuildState, table: _TableDraft, body: Node, kind: str) -> None:
    label = "LIKE" if kind == "TableLikeClause" else kind
    state.mark(TranslationMarker.unsupported(label, table.name), table)


@_element("ColumnDef")
def _column_def(state: _BuildState, table: _TableDraft, body: Node, kind: str) -> None:
    name = require(body, "colname", table.name)
    entity = f"{table.name}.{name}"
    if table.get_column(name) is not None:
        raise StructuralError(f"duplicate column '{name}'", table.name)

    type_name = require(body, "typeName", entity)
    target = map_type_name(type_name, state.enums, entity)
    if not target.is_known:
        state.mark(TranslationMarker.classification_miss(
            f"type {target.source_name}", entity, "unknown type mapped to ANY",
        ), table)

    column = _ColumnDraft(
        name=name,
        target=target,
        entity=entity,
        is_required=bool(body.get("is_not_null")),
        is_auto_increment_eligible=target.family == TypeFamily.SERIAL,
        validation=target.validation,
    )
    table.columns.append(column)

    with log_context(column=name):
        for constraint in body.get("constraints") or []:
            constraint_body = node_body(constraint, "Constraint")
            contype = require(constraint_body, "contype", entity)
            handler = _column_constraint_handlers.get(contype, _unsupported_column_constraint)
            handler(state, table, column, constraint_body)
            _check_deferrable(state, table, entity, constraint_body)
        logger.debug(f"Column {entity}: {target.source_name} -> {target.ddl_type}")


# ============================================================================
# COLUMN CONSTRAINTS
# ============================================================================

def _check_deferrable(state: _BuildState, table: _TableDraft, entity: str, body: Node) -> None:
    if body.get("deferrable") or body.get("initdeferred"):
        state.mark(TranslationMarker.unsupported("DEFERRABLE", entity, "constraint is checked immediately"), table)


def _unsupported_column_constraint(
    state: _BuildState, table: _TableDraft, column: _ColumnDraft, body: Node
) -> None:
    label = body.get("contype", "CONSTRAINT").replace("CONSTR_", "")
    state.mark(TranslationMarker.unsupported(label, column.entity), table)


@_column_constraint("CONSTR_NULL")
def _nullable(state: _BuildState, table: _TableDraft, column: _ColumnDraft, body: Node) -> None:
    column.is_required = False


@_column_constraint("CONSTR_NOTNULL")
def _not_null(state: _BuildState, table: _TableDraft, column: _ColumnDraft, body: Node) -> None:
    column.is_required = True


@_column_constraint("CONSTR_PRIMARY")
def _primary_key(state: _BuildState, table: _TableDraft, column: _ColumnDraft, body: Node) -> None:
    if table.has_primary_key() and not column.is_primary_key:
        raise StructuralError("multiple primary keys", table.name)
    column.is_primary_key = True


@_column_constraint("CONSTR_UNIQUE")
def _unique(state: _BuildState, table: _TableDraft, column: _ColumnDraft, body: Node) -> None:
    column.is_unique = True


@_column_constraint("CONSTR_IDENTITY")
def _identity(state: _BuildState, table: _TableDraft, column: _ColumnDraft, body: Node) -> None:
    column.is_auto_increment_eligible = True


@_column_constraint("CONSTR_DEFAULT")
def _default(state: _BuildState, table: _TableDraft, column: _ColumnDraft, body: Node) -> None:
    expr = require(body, "raw_expr", column.entity)
    try:
        default = classify_default(expr)
    except UnrenderableExpressionError as exc:
        state.mark(TranslationMarker.unsupported("DEFAULT", column.entity, str(exc)), table)
        return
    if (
        isinstance(default, ComputedDefault)
        and default.kind == DefaultKind.FUNCTION_CALL
        and not is_known_function(default)
    ):
        state.mark(TranslationMarker.classification_miss(
            f"DEFAULT {default.function}()", column.entity,
            f"no SQLite equivalent for {default.expression}; passed through unchanged",
        ), table)
    column.default = default


@_column_constraint("CONSTR_CHECK")
def _column_check(state: _BuildState, table: _TableDraft, column: _ColumnDraft, body: Node) -> None:
    _apply_check(state, table, body, owner=column)


@_column_constraint("CONSTR_FOREIGN")
def _column_foreign_key(state: _BuildState, table: _TableDraft, column: _ColumnDraft, body: Node) -> None:
    try:
        column.foreign_key = read_fk(body, column.entity)
    except UnsupportedConstructError as exc:
        state.mark(TranslationMarker.unsupported(exc.construct.upper(), column.entity, exc.detail), table)


@_column_constraint("CONSTR_GENERATED")
def _generated(state: _BuildState, table: _TableDraft, column: _ColumnDraft, body: Node) -> None:
    state.mark(TranslationMarker.unsupported(
        "GENERATED", column.entity, "generated column stored as a plain column",
    ), table)


@_column_constraint("CONSTR_ATTR_DEFERRABLE", "CONSTR_ATTR_DEFERRED")
def _deferrable_attr(state: _BuildState, table: _TableDraft, column: _ColumnDraft, body: Node) -> None:
    state.mark(TranslationMarker.unsupported("DEFERRABLE", column.entity, "constraint is checked immediately"), table)


@_column_constraint("CONSTR_ATTR_NOT_DEFERRABLE", "CONSTR_ATTR_IMMEDIATE")
def _immediate_attr(state: _BuildState, table: _TableDraft, column: _ColumnDraft, body: Node) -> None:
    # Matches SQLite's behaviour already
    pass


# ============================================================================
# CHECK CONSTRAINTS
# ============================================================================

def _apply_check(
    state: _BuildState,
    table: _TableDraft,
    body: Node,
    owner: Optional[_ColumnDraft] = None,
) -> None:
    """
    Attach a CHECK to its column, or to the table when it spans columns.

    Column checks that classify also merge their rules into the column's
    validation.
    """
    entity = owner.entity if owner else table.name
    expr = require(body, "raw_expr", entity)
    try:
        expression = render_expression(expr, POSTGRES)
    except UnrenderableExpressionError as exc:
        state.mark(TranslationMarker.unsupported("CHECK", entity, str(exc)), table)
        return

    columns = referenced_columns(expr)
    if owner is None and len(columns) == 1:
        owner = table.get_column(columns[0])

    single_column = owner is not None and columns in ([], [owner.name])
    rules = None
    if single_column:
        integer_domain = (
            owner.target.family.is_integer_domain()
            and state.defaults.adjust_integer_strict_bounds
        )
        rules = classify_check(expr, owner.name, integer_domain=integer_domain)

    check = CheckConstraint(
        name=body.get("conname"),
        expression=expression,
        columns=tuple(columns),
        classified=rules is not None,
        node=expr,
    )

    if not single_column:
        table.checks.append(check)
        return
    owner.checks.append(check)
    if rules is not None:
        owner.validation = owner.validation.merged_with(rules)


# ============================================================================
# TABLE CONSTRAINTS
# ============================================================================

def _apply_table_constraint(state: _BuildState, table: _TableDraft, body: Node) -> None:
    contype = require(body, "contype", table.name)
    handler = _table_constraint_handlers.get(contype, _unsupported_table_constraint)
    handler(state, table, body)
    _check_deferrable(state, table, table.name, body)


def _unsupported_table_constraint(state: _BuildState, table: _TableDraft, body: Node) -> None:
    label = body.get("contype", "CONSTRAINT").replace("CONSTR_", "")
    name = body.get("conname")
    state.mark(TranslationMarker.unsupported(label, table.name, f"constraint {name}" if name else ""), table)


def _keys(body: Node, entity: str) -> List[str]:
    return string_list(require(body, "keys", entity))


@_table_constraint("CONSTR_PRIMARY")
def _table_primary_key(state: _BuildState, table: _TableDraft, body: Node) -> None:
    keys = _keys(body, table.name)
    if table.has_primary_key():
        raise StructuralError("multiple primary keys", table.name)
    if len(keys) == 1:
        table.require_column(keys[0]).is_primary_key = True
        return
    for key in keys:
        table.require_column(key)
    table.constraints.append(TableConstraint(
        kind=TableConstraintKind.PRIMARY_KEY, columns=tuple(keys), name=body.get("conname"),
    ))


@_table_constraint("CONSTR_UNIQUE")
def _table_unique(state: _BuildState, table: _TableDraft, body: Node) -> None:
    keys = _keys(body, table.name)
    if len(keys) == 1:
        table.require_column(keys[0]).is_unique = True
        return
    for key in keys:
        table.require_column(key)
    table.constraints.append(TableConstraint(
        kind=TableConstraintKind.UNIQUE, columns=tuple(keys), name=body.get("conname"),
    ))


@_table_constraint("CONSTR_FOREIGN")
def _table_foreign_key(state: _BuildState, table: _TableDraft, body: Node) -> None:
    fk_attrs = string_list(require(body, "fk_attrs", table.name))
    try:
        draft = read_fk(body, table.name)
    except UnsupportedConstructError as exc:
        state.mark(TranslationMarker.unsupported(
            COMPOSITE_FOREIGN_KEY.upper(), table.name, f"({', '.join(fk_attrs)}) -> {exc.detail}",
        ), table)
        return
    table.require_column(fk_attrs[0]).foreign_key = draft


@_table_constraint("CONSTR_CHECK")
def _table_check(state: _BuildState, table: _TableDraft, body: Node) -> None:
    _apply_check(state, table, body)


@_table_constraint("CONSTR_EXCLUSION")
def _exclusion(state: _BuildState, table: _TableDraft, body: Node) -> None:
    name = body.get("conname")
    state.mark(TranslationMarker.unsupported("EXCLUDE", table.name, f"constraint {name}" if name else ""), table)


# ============================================================================
# BUILDER
# ============================================================================

class ModelBuilder:
    """
    Builds one CanonicalModel per call.

    The builder itself holds only configuration, so one instance can be
    shared across threads.
    """

    def __init__(self, defaults: Optional[TranslatorDefaults] = None):
        self.defaults = defaults or get_defaults().translator

    def build(self, ast: Any) -> CanonicalModel:
        """
        Build the canonical model for a parsed document.

        Args:
            ast: Parser output, a list of RawStmt wrappers, or bare nodes

        Returns:
            Frozen CanonicalModel

        Raises:
            StructuralError: If the AST is malformed
        """
        statements = normalize_statements(ast)
        enums = collect_enums(statements)
        state = _BuildState(enums, self.defaults)

        for position, statement in enumerate(statements):
            kind, body = unwrap(statement)
            handler = _statement_handlers.get(kind, _unsupported_statement)
            handler(state, body, position, kind)

        foreign_key_columns = self._resolve_references(state)
        return self._freeze(state, foreign_key_columns)

    def _resolve_references(self, state: _BuildState) -> Dict[str, str]:
        """
        Pick the target column for REFERENCES clauses that name none.

        Returns:
            "table.column" of each referencing column -> resolved target column
        """
        resolved: Dict[str, str] = {}
        for table in state.tables:
            for column in table.columns:
                draft = column.foreign_key
                if draft is None or draft.target_column is not None:
                    continue
                target = state.get_table(draft.target_table)
                keys = target.primary_key_columns() if target else []
                if len(keys) == 1:
                    resolved[column.entity] = keys[0]
                    continue
                reason = (
                    f"table '{draft.target_table}' not found" if target is None
                    else f"table '{draft.target_table}' has no single-column primary key"
                )
                state.mark(TranslationMarker.unresolved("REFERENCES", column.entity, reason), table)
        return resolved

    def _freeze(self, state: _BuildState, foreign_key_columns: Dict[str, str]) -> CanonicalModel:
        tables = tuple(
            Table(
                name=table.name,
                position=table.position,
                columns=tuple(c.freeze(foreign_key_columns.get(c.entity)) for c in table.columns),
                constraints=tuple(table.constraints),
                checks=tuple(table.checks),
                markers=tuple(table.markers),
            )
            for table in state.tables
        )
        return CanonicalModel(
            enums=state.enums,
            tables=tables,
            indexes=tuple(state.indexes),
            unsupported=tuple(state.unsupported),
            markers=tuple(state.markers),
        )


def build_model(ast: Any, defaults: Optional[TranslatorDefaults] = None) -> CanonicalModel:
    """Convenience wrapper around ModelBuilder(defaults).build(ast)."""
    return ModelBuilder(defaults).build(ast)


__all__ = ["ModelBuilder", "build_model", "registered_kinds"]
