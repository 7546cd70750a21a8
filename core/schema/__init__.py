# ============================================================================
# SCHEMA MODULE
# ============================================================================
# STATUS: Core - PostgreSQL AST to SQLite DDL / declarative schema
# PURPOSE: Type mapping, classifiers, model builder and emitters
# CREATED: 07 OCT 2026
# ============================================================================
"""
Schema Module.

Only the leaf utilities are re-exported here. The builder and emitters read
AST nodes through core.ast, which itself renders identifiers with these
utilities, so import those by module path:

    from core.schema.model_builder import ModelBuilder
    from core.schema.ddl_emitter import SqliteDdlEmitter
"""

from core.schema.ddl_utils import (
    IndexBuilder,
    CommentBuilder,
    quote_identifier,
    quote_literal,
    render_literal,
)
from core.schema.lookups import TYPE_TABLE, TypeSpec

__all__ = [
    # Utilities
    "IndexBuilder",
    "CommentBuilder",
    "quote_identifier",
    "quote_literal",
    "render_literal",
    # Lookups
    "TYPE_TABLE",
    "TypeSpec",
]
