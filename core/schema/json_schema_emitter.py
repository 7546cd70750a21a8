# ============================================================================
# DECLARATIVE SCHEMA EMITTER
# ============================================================================
# STATUS: Core - Canonical model to JSON Schema document
# PURPOSE: Tables as object schemas, FKs as $ref paths, enums as $defs
# CREATED: 10 OCT 2026
# EXPORTS: DeclarativeSchemaEmitter
# DEPENDENCIES: core.models, core.schema.*, core.config
# ============================================================================
"""
Declarative Schema Emitter.

    CREATE TABLE orders (
        id serial PRIMARY KEY,
        customer_id int REFERENCES customers(id) ON DELETE CASCADE,
        total numeric(10, 2) NOT NULL CHECK (total >= 0)
    )

becomes

    "orders": {
        "type": "object",
        "additionalProperties": false,
        "properties": {
            "id": {"type": "integer", "$primaryKey": true},
            "customer_id": {"$ref": "#/properties/customers/properties/id",
                            "$onDelete": "cascade"},
            "total": {"type": "number", "minimum": 0, "multipleOf": 0.01}
        },
        "required": ["total"]
    }

A referencing column never repeats the type of the column it points at;
the reference chain is walked once here to prove it ends somewhere.
"""

import logging
from typing import Dict, List, Optional, Set, Tuple, Union

from core.config import TranslatorDefaults, get_defaults
from core.contracts import TableConstraintKind
from core.models import (
    CanonicalModel,
    Column,
    ComputedDefault,
    PropertySchema,
    SchemaDocument,
    Table,
    TableSchema,
    TranslationMarker,
    TranslationResult,
    ValidationRuleSet,
)
from core.schema.default_classifier import literal_for_column
from core.schema.enum_registry import shared_enums
from core.schema.fk_resolver import follow_reference
from core.schema.type_mapper import TargetType, column_target

logger = logging.getLogger(__name__)

IndexFlag = Union[bool, str]

_RULE_FIELDS = (
    "minimum",
    "maximum",
    "exclusive_minimum",
    "exclusive_maximum",
    "pattern",
    "max_length",
    "multiple_of",
)


def defs_path(name: str) -> str:
    return f"#/$defs/{name}"


class DeclarativeSchemaEmitter:
    """Render a CanonicalModel as a declarative schema document."""

    def __init__(self, defaults: Optional[TranslatorDefaults] = None):
        self.defaults = defaults or get_defaults().translator

    def emit(self, model: CanonicalModel) -> TranslationResult:
        """
        Generate the document.

        Returns:
            TranslationResult whose output is a JSON-compatible dict

        Raises:
            CyclicReferenceError: If a chain of foreign keys loops
        """
        markers: List[TranslationMarker] = list(model.markers)
        shared = set(shared_enums(model, self.defaults.shared_enum_min_refs))
        defs = {
            name: PropertySchema(type="string", enum=list(model.enums.values_of(name)))
            for name in model.enums
            if name in shared
        }
        index_flags = self._index_flags(model, markers)

        properties = {
            table.name: self.generate_table(table, model, shared, index_flags, markers)
            for table in model.tables
        }
        document = SchemaDocument(
            schema_uri=self.defaults.schema_uri,
            defs=defs or None,
            properties=properties,
        )
        logger.info(f"Generated declarative schema for {len(properties)} tables, {len(defs)} shared enums")
        return TranslationResult(output=document.to_json_dict(), markers=markers)

    # =========================================================================
    # INDEXES
    # =========================================================================

    def _index_flags(
        self, model: CanonicalModel, markers: List[TranslationMarker]
    ) -> Dict[Tuple[str, str], IndexFlag]:
        """$index value per (table, column) from single-column indexes."""
        flags: Dict[Tuple[str, str], IndexFlag] = {}
        for index in model.indexes:
            if len(index.columns) != 1:
                markers.append(TranslationMarker.unsupported(
                    "composite index", index.name, f"({', '.join(index.columns)}) on {index.table}",
                ))
                continue
            key = (index.table, index.columns[0])
            if index.unique or flags.get(key) == "unique":
                flags[key] = "unique"
            else:
                flags[key] = True
        return flags

    # =========================================================================
    # TABLES
    # =========================================================================

    def generate_table(
        self,
        table: Table,
        model: CanonicalModel,
        shared: Set[str],
        index_flags: Dict[Tuple[str, str], IndexFlag],
        markers: List[TranslationMarker],
    ) -> TableSchema:
        """Object schema for one table."""
        composite_key: Tuple[str, ...] = ()
        for constraint in table.constraints:
            label = (
                "composite primary key"
                if constraint.kind == TableConstraintKind.PRIMARY_KEY
                else "composite unique"
            )
            if constraint.kind == TableConstraintKind.PRIMARY_KEY:
                composite_key = constraint.columns
            markers.append(TranslationMarker.unsupported(
                label, table.name, f"({', '.join(constraint.columns)})",
            ))
        for check in table.checks:
            markers.append(TranslationMarker.unsupported(
                "table CHECK", table.name, f"{check.expression} has no declarative form",
            ))

        properties: Dict[str, PropertySchema] = {}
        for column in table.columns:
            entity = f"{table.name}.{column.name}"
            for check in column.checks:
                if not check.classified:
                    markers.append(TranslationMarker.classification_miss(
                        "CHECK", entity, f"{check.expression} omitted",
                    ))
            properties[column.name] = self.generate_property(
                table, column, model, shared, index_flags.get((table.name, column.name)), markers,
            )

        required = [
            c.name for c in table.columns
            if c.is_required and not c.is_primary_key and c.name not in composite_key
        ]
        return TableSchema(properties=properties, required=required)

    # =========================================================================
    # COLUMNS
    # =========================================================================

    def generate_property(
        self,
        table: Table,
        column: Column,
        model: CanonicalModel,
        shared: Set[str],
        index_flag: Optional[IndexFlag],
        markers: List[TranslationMarker],
    ) -> PropertySchema:
        """
        Property for one column.

        A referencing column gets only its $ref and actions; every other
        column gets type, format and validation keywords.
        """
        fields: Dict[str, object] = {}
        fk = column.foreign_key
        if fk is not None:
            if follow_reference(model, table.name, column.name) is None:
                markers.append(TranslationMarker.unresolved(
                    "REFERENCES", f"{table.name}.{column.name}", f"{fk.path} does not resolve to a column",
                ))
            for check in column.checks:
                if check.classified:
                    markers.append(TranslationMarker.unsupported(
                        "CHECK", f"{table.name}.{column.name}",
                        f"{check.expression} dropped: a referencing column carries only its $ref",
                    ))
            fields["ref"] = fk.path
            if not fk.on_delete.is_default():
                fields["on_delete"] = fk.on_delete.value
            if not fk.on_update.is_default():
                fields["on_update"] = fk.on_update.value
        else:
            target = column_target(column, model.enums)
            value = self._value_schema(column, target, column.validation, shared, model)
            fields.update(value.model_dump(exclude_none=True))

        if column.default is not None:
            if isinstance(column.default, ComputedDefault):
                fields["computed_default"] = column.default.expression
            else:
                literal = literal_for_column(column.default, column.type_family)
                if literal is not None:
                    fields["default"] = literal

        if column.is_primary_key:
            fields["primary_key"] = True
        if column.is_unique:
            fields["index"] = "unique"
        elif index_flag is not None:
            fields["index"] = index_flag

        return PropertySchema(**fields)

    def _value_schema(
        self,
        column: Column,
        target: TargetType,
        rules: ValidationRuleSet,
        shared: Set[str],
        model: CanonicalModel,
    ) -> PropertySchema:
        """
        Type and validation keywords, nested once per array dimension.

        A shared enum is referenced through $defs unless a CHECK narrowed
        its labels, in which case the narrowed list is written inline.
        """
        if rules.is_array:
            item_rules = rules.array_item_rule or ValidationRuleSet()
            return PropertySchema(
                type="array",
                items=self._value_schema(column, target, item_rules, shared, model),
            )

        declared = model.enums.values_of(column.enum_name) if column.enum_name else ()
        narrowed = rules.enum_values is not None and tuple(rules.enum_values) != tuple(declared)
        if column.enum_name is not None and column.enum_name in shared and not narrowed:
            fields: Dict[str, object] = {"ref": defs_path(column.enum_name)}
        else:
            fields = {"type": target.json_type, "format": target.json_format}
            if rules.enum_values is not None:
                fields["enum"] = list(rules.enum_values)

        for name in _RULE_FIELDS:
            value = getattr(rules, name)
            if value is not None:
                fields[name] = value
        return PropertySchema(**fields)


__all__ = ["DeclarativeSchemaEmitter", "defs_path"]
