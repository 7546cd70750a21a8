# ============================================================================
# SQLITE DDL EMITTER
# ============================================================================
# STATUS: Core - Canonical model to SQLite STRICT DDL
# PURPOSE: CREATE TABLE text with synthesized validation CHECKs
# CREATED: 10 OCT 2026
# EXPORTS: SqliteDdlEmitter
# DEPENDENCIES: core.ast, core.models, core.schema.*, core.config
# ============================================================================
"""
SQLite DDL Emitter.

SQLite STRICT tables enforce the storage class of each column and nothing
else, so every rule PostgreSQL enforces through the type itself becomes a
CHECK on the column:

    status  order_status      CHECK (status IS NULL OR status IN ('new', 'paid'))
    active  boolean           CHECK (active IS NULL OR active IN (0, 1))
    placed  timestamp         CHECK (placed IS NULL OR datetime(placed) IS NOT NULL)
    code    varchar(8)        CHECK (code IS NULL OR length(code) <= 8)
    total   numeric(10, 2)    CHECK (total IS NULL OR (abs(total) < 100000000
                                     AND abs(total * 100 - round(total * 100)) < 1e-09))
    meta    jsonb             CHECK (meta IS NULL OR json_valid(meta))
    tags    text[]            CHECK (tags IS NULL OR (json_valid(tags) AND json_type(tags) = 'array'))

Column clause order is fixed: type, PRIMARY KEY, NOT NULL, UNIQUE,
DEFAULT, REFERENCES, synthesized CHECKs, source CHECKs.

Usage:
    from core.schema.ddl_emitter import SqliteDdlEmitter

    result = SqliteDdlEmitter().emit(model)
    print(result.output)
"""

import logging
from typing import List, Optional, Sequence, Union

from core.ast.expressions import SQLITE, render_expression
from core.config import TranslatorDefaults, get_defaults
from core.contracts import MarkerKind, TableConstraintKind, TypeFamily
from core.errors import UnrenderableExpressionError
from core.models import (
    CanonicalModel,
    CheckConstraint,
    Column,
    ComputedDefault,
    ForeignKeyRef,
    Index,
    Table,
    TranslationMarker,
    TranslationResult,
    UnsupportedStatement,
)
from core.schema.ddl_utils import CommentBuilder, IndexBuilder, quote_identifier, render_literal
from core.schema.default_classifier import literal_for_column, sqlite_default_expression
from core.schema.lookups import TEMPORAL_CHECK_FUNCTIONS
from core.schema.type_mapper import column_target

logger = logging.getLogger(__name__)

_INDENT = "  "


def _format_number(value: Union[int, float]) -> str:
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e15:
        return str(int(value))
    return repr(value)


class SqliteDdlEmitter:
    """
    Render a CanonicalModel as SQLite DDL.

    The emitter never changes the model. Markers for expressions it
    cannot write are collected per call and returned with the output.
    """

    def __init__(self, defaults: Optional[TranslatorDefaults] = None):
        self.defaults = defaults or get_defaults().translator

    # =========================================================================
    # DOCUMENT
    # =========================================================================

    def emit(self, model: CanonicalModel) -> TranslationResult:
        """
        Generate the full document.

        Tables and unsupported-statement comments appear in source order,
        separated by blank lines; indexes follow as one block.

        Returns:
            TranslationResult with DDL text and every marker of the model
            plus those recorded while rendering
        """
        markers: List[TranslationMarker] = list(model.markers)
        blocks: List[tuple] = []

        for table in model.tables:
            blocks.append((table.position, self.generate_table(table, model, markers)))
        for statement in model.unsupported:
            blocks.append((statement.position, self.generate_unsupported(statement)))
        blocks.sort(key=lambda block: block[0])

        parts = [text for _, text in blocks]
        indexes = self.generate_indexes(model.indexes)
        if indexes:
            parts.append("\n".join(indexes))

        output = "\n\n".join(parts)
        if output:
            output += "\n"
        logger.info(f"Generated SQLite DDL for {len(model.tables)} tables, {len(indexes)} indexes")
        return TranslationResult(output=output, markers=markers)

    def generate_unsupported(self, statement: UnsupportedStatement) -> str:
        return CommentBuilder.not_supported(statement.label)

    def generate_indexes(self, indexes: Sequence[Index]) -> List[str]:
        return [
            IndexBuilder.create(index.table, index.columns, name=index.name, unique=index.unique)
            for index in sorted(indexes, key=lambda i: i.position)
        ]

    # =========================================================================
    # TABLES
    # =========================================================================

    def generate_table(self, table: Table, model: CanonicalModel, markers: List[TranslationMarker]) -> str:
        """
        Generate one CREATE TABLE ... STRICT statement.

        Unsupported constructs recorded on the table are written as
        comments directly above it.
        """
        logger.debug(f"Generating table {table.name}")
        lines = [
            CommentBuilder.not_supported(f"{m.construct_name} {m.entity}")
            for m in table.markers
            if m.kind == MarkerKind.UNSUPPORTED_CONSTRUCT
        ]

        if not table.columns:
            markers.append(TranslationMarker.unsupported(
                "TABLE", table.name, "SQLite tables need at least one column",
            ))
            lines.append(CommentBuilder.not_supported(f"TABLE {table.name}"))
            return "\n".join(lines)

        definitions = [self.generate_column(table, column, model, markers) for column in table.columns]

        for constraint in table.constraints:
            columns = ", ".join(quote_identifier(c) for c in constraint.columns)
            keyword = "PRIMARY KEY" if constraint.kind == TableConstraintKind.PRIMARY_KEY else "UNIQUE"
            definitions.append(f"{self._constraint_name(constraint.name)}{keyword} ({columns})")

        for check in table.checks:
            clause = self._source_check(check, table.name, markers)
            if clause:
                definitions.append(clause)

        body = ",\n".join(_INDENT + d for d in definitions)
        lines.append(f"CREATE TABLE {quote_identifier(table.name)} (\n{body}\n) STRICT;")
        return "\n".join(lines)

    # =========================================================================
    # COLUMNS
    # =========================================================================

    def generate_column(
        self,
        table: Table,
        column: Column,
        model: CanonicalModel,
        markers: List[TranslationMarker],
    ) -> str:
        """Column definition with every clause in the fixed order."""
        target = column_target(column, model.enums)
        entity = f"{table.name}.{column.name}"
        parts = [quote_identifier(column.name), target.ddl_type]

        if column.is_primary_key:
            autoincrement = target.ddl_type == "INTEGER" and column.is_auto_increment_eligible
            parts.append("PRIMARY KEY AUTOINCREMENT" if autoincrement else "PRIMARY KEY")
        if column.is_required:
            parts.append("NOT NULL")
        if column.is_unique and not column.is_primary_key:
            parts.append("UNIQUE")

        default = self._default_clause(column, entity, markers)
        if default:
            parts.append(default)

        if column.foreign_key is not None:
            parts.append(self._references(column.foreign_key))

        for condition in self.synthesized_checks(column, model):
            parts.append(f"CHECK ({quote_identifier(column.name)} IS NULL OR {condition})")

        for check in column.checks:
            clause = self._source_check(check, entity, markers)
            if clause:
                parts.append(clause)

        return " ".join(parts)

    def synthesized_checks(self, column: Column, model: CanonicalModel) -> List[str]:
        """
        Conditions that emulate type enforcement, in emission order.

        Each condition is written so it can follow "col IS NULL OR".
        """
        name = quote_identifier(column.name)
        family = column.type_family
        conditions: List[str] = []

        if column.is_array:
            # Element rules cannot be checked inside serialized arrays
            conditions.append(f"(json_valid({name}) AND json_type({name}) = 'array')")
            return conditions

        if column.enum_name is not None:
            values = model.enums.values_of(column.enum_name)
            if values:
                conditions.append(f"{name} IN ({', '.join(render_literal(v) for v in values)})")

        if family == TypeFamily.BOOLEAN:
            conditions.append(f"{name} IN (0, 1)")

        if family in TEMPORAL_CHECK_FUNCTIONS:
            conditions.append(f"{TEMPORAL_CHECK_FUNCTIONS[family]}({name}) IS NOT NULL")

        length = column.type_modifiers.length
        if family == TypeFamily.CHAR and length:
            conditions.append(f"length({name}) <= {length}")

        precision = self._precision_check(column)
        if precision:
            conditions.append(precision)

        if family == TypeFamily.JSON:
            conditions.append(f"json_valid({name})")

        return conditions

    def _precision_check(self, column: Column) -> Optional[str]:
        """
        Range and scale check for numeric(p, s) stored as REAL.

            abs(col) < 10^(p-s) AND abs(col - round(col, s)) < epsilon

        round(col, s) goes through SQLite's decimal formatting, so a value
        with at most s decimals compares equal to its own rounding at any
        magnitude.
        """
        modifiers = column.type_modifiers
        if column.type_family != TypeFamily.DECIMAL or not modifiers.precision:
            return None
        name = quote_identifier(column.name)
        scale = modifiers.scale or 0
        bound = 10 ** max(modifiers.precision - scale, 0)
        rounded = f"round({name}, {scale})" if scale > 0 else f"round({name})"
        epsilon = _format_number(self.defaults.decimal_epsilon)
        return f"(abs({name}) < {bound} AND abs({name} - {rounded}) < {epsilon})"

    @staticmethod
    def _default_clause(column: Column, entity: str, markers: List[TranslationMarker]) -> Optional[str]:
        default = column.default
        if default is None:
            return None
        if not isinstance(default, ComputedDefault):
            return f"DEFAULT {render_literal(literal_for_column(default, column.type_family))}"
        expression = sqlite_default_expression(default)
        if expression is None:
            markers.append(TranslationMarker.unsupported(
                f"DEFAULT {default.expression}", entity, "no SQLite equivalent; DEFAULT clause omitted",
            ))
            return None
        return f"DEFAULT ({expression})"

    @staticmethod
    def _references(fk: ForeignKeyRef) -> str:
        clause = f"REFERENCES {quote_identifier(fk.target_table)}({quote_identifier(fk.target_column)})"
        if not fk.on_delete.is_default():
            clause += f" ON DELETE {fk.on_delete.to_sql()}"
        if not fk.on_update.is_default():
            clause += f" ON UPDATE {fk.on_update.to_sql()}"
        return clause

    @staticmethod
    def _constraint_name(name: Optional[str]) -> str:
        return f"CONSTRAINT {quote_identifier(name)} " if name else ""

    def _source_check(self, check: CheckConstraint, entity: str, markers: List[TranslationMarker]) -> Optional[str]:
        """A user CHECK in SQLite dialect, or None with a marker when it cannot be written."""
        try:
            expression = render_expression(check.node, SQLITE)
        except UnrenderableExpressionError as exc:
            markers.append(TranslationMarker.unsupported(
                "CHECK", entity, f"{check.expression} dropped: {exc}",
            ))
            return None
        return f"{self._constraint_name(check.name)}CHECK ({expression})"


__all__ = ["SqliteDdlEmitter"]
