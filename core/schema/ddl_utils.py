# ============================================================================
# DDL UTILITIES
# ============================================================================
# STATUS: Core - DRY utilities for SQLite DDL text generation
# PURPOSE: Identifier quoting, literal rendering, index and comment builders
# CREATED: 07 OCT 2026
# EXPORTS: quote_identifier, quote_literal, render_literal, IndexBuilder,
#          CommentBuilder
# DEPENDENCIES: core.schema.lookups
# ============================================================================
"""
DDL Utilities - Shared SQLite Text Patterns.

Every emitter writes identifiers and literals through these helpers so the
quoting rules live in one place.

Usage:
    from core.schema.ddl_utils import IndexBuilder, quote_identifier

    IndexBuilder.create("orders", ["customer_id"])
    # 'CREATE INDEX idx_orders_customer_id ON orders(customer_id);'

    quote_identifier("order")
    # '"order"'
"""

import re
from typing import List, Optional, Sequence, Union

from core.schema.lookups import SQLITE_RESERVED

_BARE_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


# ============================================================================
# IDENTIFIERS & LITERALS
# ============================================================================

def needs_quoting(name: str) -> bool:
    """Check if an identifier must be double-quoted in SQLite."""
    return name.lower() in SQLITE_RESERVED or not _BARE_IDENTIFIER.match(name)


def quote_identifier(name: str) -> str:
    """
    Quote an identifier only when SQLite requires it.

    Args:
        name: Table, column, index or constraint name

    Returns:
        The name unchanged, or wrapped in double quotes with embedded
        quotes doubled.
    """
    if not needs_quoting(name):
        return name
    return '"' + name.replace('"', '""') + '"'


def quote_literal(text: str) -> str:
    """Single-quote a string literal, doubling embedded quotes."""
    return "'" + text.replace("'", "''") + "'"


def render_literal(value: Union[bool, int, float, str, None]) -> str:
    """
    Render a constant as SQLite literal text.

    Booleans become 0/1; SQLite has no boolean storage class.
    """
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (int, float)):
        return repr(value)
    return quote_literal(str(value))


# ============================================================================
# INDEX BUILDER
# ============================================================================

class IndexBuilder:
    """
    Builder for SQLite index DDL statements.

    All methods are static and return statement text.
    """

    @staticmethod
    def _normalize_columns(columns: Union[str, Sequence[str]]) -> List[str]:
        """Convert single column or sequence to list."""
        if isinstance(columns, str):
            return [columns]
        return list(columns)

    @staticmethod
    def generate_index_name(
        table: str,
        columns: Union[str, Sequence[str]],
        prefix: str = "idx",
    ) -> str:
        """Generate conventional index name: <prefix>_<table>_<col>[_<col>...]."""
        col_part = "_".join(IndexBuilder._normalize_columns(columns))
        return f"{prefix}_{table}_{col_part}"

    @staticmethod
    def create(
        table: str,
        columns: Union[str, Sequence[str]],
        name: Optional[str] = None,
        unique: bool = False,
        prefix: str = "idx",
    ) -> str:
        """
        Create a plain or unique index.

        Args:
            table: Table name
            columns: Column name(s) to index
            name: Optional custom index name
            unique: If True, emit CREATE UNIQUE INDEX
            prefix: Prefix used when the name is generated

        Returns:
            CREATE [UNIQUE] INDEX statement
        """
        cols = IndexBuilder._normalize_columns(columns)
        idx_name = name or IndexBuilder.generate_index_name(table, cols, prefix=prefix)
        col_sql = ", ".join(quote_identifier(c) for c in cols)
        keyword = "CREATE UNIQUE INDEX" if unique else "CREATE INDEX"
        return f"{keyword} {quote_identifier(idx_name)} ON {quote_identifier(table)}({col_sql});"


# ============================================================================
# COMMENT BUILDER
# ============================================================================

class CommentBuilder:
    """Builder for single-line SQL comments."""

    @staticmethod
    def line(text: str) -> str:
        """A -- comment; embedded newlines are folded into spaces."""
        return "-- " + " ".join(text.split())

    @staticmethod
    def not_supported(label: str) -> str:
        """Comment standing in for a construct the target cannot express."""
        return CommentBuilder.line(f"{label}: not supported")


__all__ = [
    "needs_quoting",
    "quote_identifier",
    "quote_literal",
    "render_literal",
    "IndexBuilder",
    "CommentBuilder",
]
