# ============================================================================
# TRANSLATION LOOKUP TABLES
# ============================================================================
# STATUS: Core - Single source for every name-to-meaning table
# PURPOSE: Type names, function names, operators, FK action codes, keywords
# CREATED: 07 OCT 2026
# EXPORTS: TypeSpec, TYPE_TABLE, SERIAL_TYPES, COMPUTED_DEFAULTS,
#          SQLITE_FUNCTIONS, SQLITE_OPERATORS, FK_ACTION_CODES,
#          VALUE_FUNCTIONS, SQLITE_RESERVED, TEMPORAL_CHECK_FUNCTIONS,
#          STATEMENT_LABELS, JSON_TO_DDL
# DEPENDENCIES: core.contracts
# ============================================================================
"""
Translation Lookup Tables.

Every classifier, mapper and emitter consults these tables. Nothing else in
the codebase keeps its own copy of a type list or function list.

Usage:
    from core.schema.lookups import TYPE_TABLE, COMPUTED_DEFAULTS

    spec = TYPE_TABLE["varchar"]   # TypeSpec(ddl_type='TEXT', ...)
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional

from core.contracts import FkAction, TypeFamily


# ============================================================================
# TYPE TABLE
# ============================================================================

@dataclass(frozen=True)
class TypeSpec:
    """How one PostgreSQL type name lands in each target."""
    family: TypeFamily
    ddl_type: str                       # STRICT-compatible SQLite type
    json_type: Optional[str] = None     # Declarative schema "type"
    json_format: Optional[str] = None   # Declarative schema "format"


def _spec(family: TypeFamily, ddl_type: str, json_type: str, json_format: Optional[str] = None) -> TypeSpec:
    return TypeSpec(family=family, ddl_type=ddl_type, json_type=json_type, json_format=json_format)


_INTEGER = _spec(TypeFamily.INTEGER, "INTEGER", "integer")
_SERIAL = _spec(TypeFamily.SERIAL, "INTEGER", "integer")
_FLOAT = _spec(TypeFamily.FLOAT, "REAL", "number")
_DECIMAL = _spec(TypeFamily.DECIMAL, "REAL", "number")
_TEXT = _spec(TypeFamily.TEXT, "TEXT", "string")
_CHAR = _spec(TypeFamily.CHAR, "TEXT", "string")
_BOOLEAN = _spec(TypeFamily.BOOLEAN, "INTEGER", "boolean")
_TIMESTAMP = _spec(TypeFamily.TIMESTAMP, "TEXT", "string", "date-time")
_DATE = _spec(TypeFamily.DATE, "TEXT", "string", "date")
_TIME = _spec(TypeFamily.TIME, "TEXT", "string", "time")
_INTERVAL = _spec(TypeFamily.INTERVAL, "TEXT", "string")
_UUID = _spec(TypeFamily.UUID, "TEXT", "string", "uuid")
_BINARY = _spec(TypeFamily.BINARY, "BLOB", "string", "binary")
_JSON = _spec(TypeFamily.JSON, "TEXT", "object")
_OTHER = _spec(TypeFamily.OTHER, "TEXT", "string")

# Keys are lower-case, unqualified. Parser output uses the internal names
# (int4, float8, bpchar, timestamptz); SQL spellings are kept as aliases.
TYPE_TABLE: Dict[str, TypeSpec] = {
    # Integers
    "int2": _INTEGER,
    "smallint": _INTEGER,
    "int4": _INTEGER,
    "int": _INTEGER,
    "integer": _INTEGER,
    "int8": _INTEGER,
    "bigint": _INTEGER,
    "oid": _INTEGER,
    "xid": _INTEGER,
    "xid8": _INTEGER,
    "cid": _INTEGER,

    # Auto-incrementing integers
    "serial": _SERIAL,
    "serial2": _SERIAL,
    "serial4": _SERIAL,
    "serial8": _SERIAL,
    "smallserial": _SERIAL,
    "bigserial": _SERIAL,

    # Floating point
    "float4": _FLOAT,
    "real": _FLOAT,
    "float8": _FLOAT,
    "float": _FLOAT,
    "double precision": _FLOAT,
    "money": _FLOAT,

    # Fixed point
    "numeric": _DECIMAL,
    "decimal": _DECIMAL,

    # Text
    "text": _TEXT,
    "name": _TEXT,
    "citext": _TEXT,
    "varchar": _CHAR,
    "character varying": _CHAR,
    "char": _CHAR,
    "character": _CHAR,
    "bpchar": _CHAR,

    # Boolean
    "bool": _BOOLEAN,
    "boolean": _BOOLEAN,

    # Date/time
    "timestamp": _TIMESTAMP,
    "timestamptz": _TIMESTAMP,
    "timestamp without time zone": _TIMESTAMP,
    "timestamp with time zone": _TIMESTAMP,
    "date": _DATE,
    "time": _TIME,
    "timetz": _TIME,
    "time without time zone": _TIME,
    "time with time zone": _TIME,
    "interval": _INTERVAL,

    # Identifiers and documents
    "uuid": _UUID,
    "bytea": _BINARY,
    "json": _JSON,
    "jsonb": _JSON,

    # Stored as text
    "inet": _OTHER,
    "cidr": _OTHER,
    "macaddr": _OTHER,
    "macaddr8": _OTHER,
    "bit": _OTHER,
    "varbit": _OTHER,
    "bit varying": _OTHER,
    "xml": _OTHER,
    "tsvector": _OTHER,
    "tsquery": _OTHER,
    "point": _OTHER,
    "line": _OTHER,
    "lseg": _OTHER,
    "box": _OTHER,
    "path": _OTHER,
    "polygon": _OTHER,
    "circle": _OTHER,
    "int4range": _OTHER,
    "int8range": _OTHER,
    "numrange": _OTHER,
    "tsrange": _OTHER,
    "tstzrange": _OTHER,
    "daterange": _OTHER,
    "pg_lsn": _OTHER,
}

# Unknown names map to the permissive STRICT type and carry no JSON type
UNKNOWN_TYPE = TypeSpec(family=TypeFamily.UNKNOWN, ddl_type="ANY")

# Enum columns are stored as text and validated by membership
ENUM_TYPE = TypeSpec(family=TypeFamily.ENUM, ddl_type="TEXT", json_type="string")

# Array columns are stored as JSON text
ARRAY_DDL_TYPE = "TEXT"

SERIAL_TYPES: FrozenSet[str] = frozenset(
    name for name, spec in TYPE_TABLE.items() if spec.family == TypeFamily.SERIAL
)

# Schema qualifier that always means the built-in type
BUILTIN_SCHEMA = "pg_catalog"

# SQLite function that accepts a well-formed value of each temporal family
TEMPORAL_CHECK_FUNCTIONS: Dict[TypeFamily, str] = {
    TypeFamily.TIMESTAMP: "datetime",
    TypeFamily.DATE: "date",
    TypeFamily.TIME: "time",
}


# ============================================================================
# FUNCTIONS
# ============================================================================

_SQLITE_UUID_V4 = (
    "lower(hex(randomblob(4))) || '-' || lower(hex(randomblob(2))) || '-4' || "
    "substr(lower(hex(randomblob(2))), 2) || '-' || "
    "substr('89ab', abs(random()) % 4 + 1, 1) || "
    "substr(lower(hex(randomblob(2))), 2) || '-' || lower(hex(randomblob(6)))"
)

# Zero-argument functions and value functions with a SQLite equivalent.
# Keys are lower-case names as they appear in FuncCall or SQLValueFunction.
COMPUTED_DEFAULTS: Dict[str, str] = {
    "now": "datetime('now')",
    "current_timestamp": "datetime('now')",
    "clock_timestamp": "datetime('now')",
    "statement_timestamp": "datetime('now')",
    "transaction_timestamp": "datetime('now')",
    "current_date": "date('now')",
    "current_time": "time('now')",
    "localtime": "time('now', 'localtime')",
    "localtimestamp": "datetime('now', 'localtime')",
    "random": "random()",
    "gen_random_uuid": _SQLITE_UUID_V4,
    "uuid_generate_v4": _SQLITE_UUID_V4,
}

# Scalar functions renamed when an expression is written for SQLite
SQLITE_FUNCTIONS: Dict[str, str] = {
    "length": "length",
    "char_length": "length",
    "character_length": "length",
    "octet_length": "length",
    "lower": "lower",
    "upper": "upper",
    "substr": "substr",
    "substring": "substr",
    "trim": "trim",
    "btrim": "trim",
    "ltrim": "ltrim",
    "rtrim": "rtrim",
    "replace": "replace",
    "coalesce": "coalesce",
    "nullif": "nullif",
    "abs": "abs",
    "round": "round",
    "greatest": "max",
    "least": "min",
}

# SQLValueFunction op codes -> SQL keyword (lower-case)
VALUE_FUNCTIONS: Dict[str, str] = {
    "SVFOP_CURRENT_DATE": "current_date",
    "SVFOP_CURRENT_TIME": "current_time",
    "SVFOP_CURRENT_TIME_N": "current_time",
    "SVFOP_CURRENT_TIMESTAMP": "current_timestamp",
    "SVFOP_CURRENT_TIMESTAMP_N": "current_timestamp",
    "SVFOP_LOCALTIME": "localtime",
    "SVFOP_LOCALTIME_N": "localtime",
    "SVFOP_LOCALTIMESTAMP": "localtimestamp",
    "SVFOP_LOCALTIMESTAMP_N": "localtimestamp",
    "SVFOP_CURRENT_ROLE": "current_role",
    "SVFOP_CURRENT_USER": "current_user",
    "SVFOP_USER": "user",
    "SVFOP_SESSION_USER": "session_user",
    "SVFOP_CURRENT_CATALOG": "current_catalog",
    "SVFOP_CURRENT_SCHEMA": "current_schema",
}


# ============================================================================
# OPERATORS
# ============================================================================

# Operators with a different SQLite spelling
SQLITE_OPERATORS: Dict[str, str] = {
    "~~": "LIKE",
    "~~*": "LIKE",
    "!~~": "NOT LIKE",
    "!~~*": "NOT LIKE",
    "~": "REGEXP",
    "~*": "REGEXP",
    "!~": "NOT REGEXP",
    "!~*": "NOT REGEXP",
    "!=": "<>",
}

# Operators both dialects spell the same way
SHARED_OPERATORS: FrozenSet[str] = frozenset({
    "=", "<>", "<", ">", "<=", ">=", "+", "-", "*", "/", "%", "||",
})

COMPARISON_OPERATORS: FrozenSet[str] = frozenset({"=", "<>", "!=", "<", ">", "<=", ">="})

# Range comparisons understood by the check classifier, keyed by operator,
# with the operator obtained when operands are swapped
RANGE_OPERATOR_FLIPS: Dict[str, str] = {
    ">=": "<=",
    "<=": ">=",
    ">": "<",
    "<": ">",
}

# Pattern-match operator the classifier turns into a regex rule
REGEX_OPERATOR = "~"


# Declarative schema "type" back to a STRICT column type
JSON_TO_DDL: Dict[str, str] = {
    "string": "TEXT",
    "integer": "INTEGER",
    "number": "REAL",
    "boolean": "INTEGER",
    "object": "TEXT",
    "array": "TEXT",
}


# ============================================================================
# FOREIGN KEYS
# ============================================================================

# libpg_query single-character action codes
FK_ACTION_CODES: Dict[str, FkAction] = {
    "a": FkAction.NO_ACTION,
    "r": FkAction.RESTRICT,
    "c": FkAction.CASCADE,
    "n": FkAction.SET_NULL,
    "d": FkAction.SET_DEFAULT,
    "": FkAction.NO_ACTION,
    " ": FkAction.NO_ACTION,
}


# ============================================================================
# STATEMENTS
# ============================================================================

# Labels for top-level statements that have no counterpart in any target
STATEMENT_LABELS: Dict[str, str] = {
    "CreateSeqStmt": "SEQUENCE",
    "AlterSeqStmt": "ALTER SEQUENCE",
    "CompositeTypeStmt": "COMPOSITE TYPE",
    "CreateDomainStmt": "DOMAIN",
    "CreateRangeStmt": "RANGE TYPE",
    "ViewStmt": "VIEW",
    "CreateTableAsStmt": "CREATE TABLE AS",
    "CreateFunctionStmt": "FUNCTION",
    "CreateTrigStmt": "TRIGGER",
    "CreatePolicyStmt": "POLICY",
    "AlterTableStmt": "ALTER TABLE",
    "CreateSchemaStmt": "SCHEMA",
    "CreateExtensionStmt": "EXTENSION",
    "CommentStmt": "COMMENT",
    "GrantStmt": "GRANT",
    "DropStmt": "DROP",
    "RuleStmt": "RULE",
    "DoStmt": "DO",
    "VariableSetStmt": "SET",
    "TransactionStmt": "TRANSACTION",
}


# ============================================================================
# SQLITE KEYWORDS
# ============================================================================

SQLITE_RESERVED: FrozenSet[str] = frozenset({
    "abort", "action", "add", "after", "all", "alter", "always", "analyze",
    "and", "as", "asc", "attach", "autoincrement", "before", "begin",
    "between", "by", "cascade", "case", "cast", "check", "collate", "column",
    "commit", "conflict", "constraint", "create", "cross", "current",
    "current_date", "current_time", "current_timestamp", "database", "default",
    "deferrable", "deferred", "delete", "desc", "detach", "distinct", "do",
    "drop", "each", "else", "end", "escape", "except", "exclude", "exclusive",
    "exists", "explain", "fail", "filter", "first", "following", "for",
    "foreign", "from", "full", "generated", "glob", "group", "groups",
    "having", "if", "ignore", "immediate", "in", "index", "indexed",
    "initially", "inner", "insert", "instead", "intersect", "into", "is",
    "isnull", "join", "key", "last", "left", "like", "limit", "match",
    "materialized", "natural", "no", "not", "nothing", "notnull", "null",
    "nulls", "of", "offset", "on", "or", "order", "others", "outer", "over",
    "partition", "plan", "pragma", "preceding", "primary", "query", "raise",
    "range", "recursive", "references", "regexp", "reindex", "release",
    "rename", "replace", "restrict", "returning", "right", "rollback", "row",
    "rows", "savepoint", "select", "set", "table", "temp", "temporary",
    "then", "ties", "to", "transaction", "trigger", "unbounded", "union",
    "unique", "update", "using", "vacuum", "values", "view", "virtual",
    "when", "where", "window", "with", "without",
})


__all__ = [
    "TypeSpec",
    "TYPE_TABLE",
    "UNKNOWN_TYPE",
    "ENUM_TYPE",
    "ARRAY_DDL_TYPE",
    "SERIAL_TYPES",
    "BUILTIN_SCHEMA",
    "TEMPORAL_CHECK_FUNCTIONS",
    "COMPUTED_DEFAULTS",
    "SQLITE_FUNCTIONS",
    "VALUE_FUNCTIONS",
    "SQLITE_OPERATORS",
    "SHARED_OPERATORS",
    "COMPARISON_OPERATORS",
    "RANGE_OPERATOR_FLIPS",
    "REGEX_OPERATOR",
    "JSON_TO_DDL",
    "FK_ACTION_CODES",
    "STATEMENT_LABELS",
    "SQLITE_RESERVED",
]
