# ============================================================================
# SERVICES MODULE
# ============================================================================
# STATUS: Core - Translation entry points
# PURPOSE: Public API of the translator
# CREATED: 12 OCT 2026
# ============================================================================
"""
Services Module

Translation entry points used by the HTTP API and by library callers.

Usage:
    from services import translate_to_declarative_schema

    document = translate_to_declarative_schema(ast)
"""

from .translation_service import (
    TranslationService,
    translate_to_constrained_ddl,
    translate_to_declarative_schema,
    render_ddl_from_declarative_schema,
)

__all__ = [
    "TranslationService",
    "translate_to_constrained_ddl",
    "translate_to_declarative_schema",
    "render_ddl_from_declarative_schema",
]
