# ============================================================================
# REVERSE EMITTER (SCHEMA -> DDL)
# ============================================================================
# STATUS: Core - Declarative schema document back to structural SQLite DDL
# PURPOSE: Tables, columns, keys, NOT NULL and indexes from a schema document
# CREATED: 11 OCT 2026
# EXPORTS: ReverseDdlEmitter
# DEPENDENCIES: pydantic, core.models, core.schema.*, core.config
# ============================================================================
"""
Reverse Emitter.

Regenerates structure only. Defaults, validation keywords and $default
are read but never written back; a round trip through this emitter keeps
tables, columns, primary keys, references, NOT NULL and indexes.

$ref values are resolved to a concrete type before a column is written:

    #/properties/<table>/properties/<column>   a foreign key; the target
                                               column's type, followed
                                               through further $refs
    #/$defs/<name>                             a shared definition

Usage:
    from core.schema.reverse_emitter import ReverseDdlEmitter

    result = ReverseDdlEmitter().emit(document_dict)
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from pydantic import ValidationError

from core.config import TranslatorDefaults, get_defaults
from core.errors import CyclicReferenceError, StructuralError
from core.models import (
    PropertySchema,
    SchemaDocument,
    TableSchema,
    TranslationMarker,
    TranslationResult,
)
from core.schema.ddl_utils import CommentBuilder, IndexBuilder, quote_identifier
from core.schema.lookups import JSON_TO_DDL, UNKNOWN_TYPE

logger = logging.getLogger(__name__)

_PROPERTY_REF = re.compile(r"^#/properties/([^/]+)/properties/([^/]+)$")
_DEFS_REF = re.compile(r"^#/\$defs/([^/]+)$")

_INDENT = "  "


@dataclass(frozen=True)
class _ColumnRef:
    table: str
    column: str


def parse_column_ref(ref: str) -> Optional[_ColumnRef]:
    """Split "#/properties/<t>/properties/<c>" into its parts."""
    match = _PROPERTY_REF.match(ref)
    if match is None:
        return None
    return _ColumnRef(table=match.group(1), column=match.group(2))


def load_document(document: Any) -> SchemaDocument:
    """
    Validate a raw document.

    Raises:
        StructuralError: If the document does not have the expected shape
    """
    if isinstance(document, SchemaDocument):
        return document
    try:
        return SchemaDocument.model_validate(document)
    except ValidationError as exc:
        raise StructuralError(f"invalid schema document: {exc.error_count()} errors\n{exc}", "document")


class ReverseDdlEmitter:
    """Render a declarative schema document as structural SQLite DDL."""

    def __init__(self, defaults: Optional[TranslatorDefaults] = None):
        self.defaults = defaults or get_defaults().translator

    def emit(self, document: Any) -> TranslationResult:
        """
        Generate DDL for a schema document.

        Args:
            document: Raw dict or SchemaDocument

        Returns:
            TranslationResult with the DDL text

        Raises:
            StructuralError: If the document is malformed
            CyclicReferenceError: If a $ref chain loops
        """
        doc = load_document(document)
        markers: List[TranslationMarker] = []
        tables: List[str] = []
        indexes: List[str] = []

        for table_name, table in doc.properties.items():
            tables.append(self.generate_table(doc, table_name, table, markers))
            indexes.extend(self.generate_indexes(table_name, table))

        parts = list(tables)
        if indexes:
            parts.append("\n".join(indexes))
        output = "\n\n".join(parts)
        if output:
            output += "\n"
        logger.info(f"Regenerated DDL for {len(tables)} tables, {len(indexes)} indexes")
        return TranslationResult(output=output, markers=markers)

    # =========================================================================
    # TABLES
    # =========================================================================

    def generate_table(
        self,
        doc: SchemaDocument,
        table_name: str,
        table: TableSchema,
        markers: List[TranslationMarker],
    ) -> str:
        missing = [name for name in table.required if name not in table.properties]
        if missing:
            raise StructuralError(f"required names unknown properties: {', '.join(missing)}", table_name)
        if not table.properties:
            markers.append(TranslationMarker.unsupported(
                "TABLE", table_name, "SQLite tables need at least one column",
            ))
            return CommentBuilder.not_supported(f"TABLE {table_name}")

        definitions = [
            self.generate_column(doc, table_name, name, prop, name in table.required, markers)
            for name, prop in table.properties.items()
        ]
        body = ",\n".join(_INDENT + d for d in definitions)
        return f"CREATE TABLE {quote_identifier(table_name)} (\n{body}\n) STRICT;"

    def generate_column(
        self,
        doc: SchemaDocument,
        table_name: str,
        name: str,
        prop: PropertySchema,
        required: bool,
        markers: List[TranslationMarker],
    ) -> str:
        entity = f"{table_name}.{name}"
        ddl_type = self.resolve_type(doc, table_name, name, markers)
        parts = [quote_identifier(name), ddl_type]

        reference = parse_column_ref(prop.ref) if prop.ref else None
        if prop.primary_key:
            autoincrement = ddl_type == "INTEGER" and reference is None
            parts.append("PRIMARY KEY AUTOINCREMENT" if autoincrement else "PRIMARY KEY")
        if required:
            parts.append("NOT NULL")

        if reference is not None:
            clause = f"REFERENCES {quote_identifier(reference.table)}({quote_identifier(reference.column)})"
            if prop.on_delete:
                clause += f" ON DELETE {prop.on_delete.upper()}"
            if prop.on_update:
                clause += f" ON UPDATE {prop.on_update.upper()}"
            parts.append(clause)
        elif prop.ref and _DEFS_REF.match(prop.ref) is None:
            markers.append(TranslationMarker.unresolved("$ref", entity, f"unrecognised reference {prop.ref}"))

        return " ".join(parts)

    def generate_indexes(self, table_name: str, table: TableSchema) -> List[str]:
        statements = []
        for name, prop in table.properties.items():
            if prop.index is None or prop.index is False:
                continue
            statements.append(IndexBuilder.create(
                table_name, name, unique=prop.index == "unique", prefix=self.defaults.index_prefix,
            ))
        return statements

    # =========================================================================
    # TYPE RESOLUTION
    # =========================================================================

    def resolve_type(
        self,
        doc: SchemaDocument,
        table_name: str,
        column_name: str,
        markers: List[TranslationMarker],
    ) -> str:
        """
        STRICT type of a column, following $ref chains to a concrete type.

        A chain that ends at a missing table, column or definition yields
        ANY with an UNRESOLVED_REFERENCE marker.

        Raises:
            CyclicReferenceError: If the chain returns to a visited node
        """
        entity = f"{table_name}.{column_name}"
        chain: List[str] = []
        visited = set()
        prop: Optional[PropertySchema] = doc.properties[table_name].properties[column_name]
        key: Tuple[str, ...] = ("properties", table_name, column_name)

        while True:
            label = "/".join(key)
            if key in visited:
                raise CyclicReferenceError(chain + [label])
            visited.add(key)
            chain.append(label)

            if prop is None:
                markers.append(TranslationMarker.unresolved(
                    "$ref", entity, f"{' -> '.join(chain)} does not resolve",
                ))
                return UNKNOWN_TYPE.ddl_type
            if not prop.ref:
                return self._concrete_type(prop)

            reference = parse_column_ref(prop.ref)
            if reference is not None:
                key = ("properties", reference.table, reference.column)
                target = doc.properties.get(reference.table)
                prop = target.properties.get(reference.column) if target else None
                continue

            match = _DEFS_REF.match(prop.ref)
            if match is not None:
                key = ("$defs", match.group(1))
                prop = (doc.defs or {}).get(match.group(1))
                continue

            # Unrecognised $ref; the column clause records the marker
            return UNKNOWN_TYPE.ddl_type

    @staticmethod
    def _concrete_type(prop: PropertySchema) -> str:
        if prop.items is not None or prop.scalar_type == "array":
            return JSON_TO_DDL["array"]
        if prop.scalar_type is None:
            return UNKNOWN_TYPE.ddl_type
        return JSON_TO_DDL.get(prop.scalar_type, UNKNOWN_TYPE.ddl_type)


__all__ = ["ReverseDdlEmitter", "load_document", "parse_column_ref"]
