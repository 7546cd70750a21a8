# ============================================================================
# TRANSLATION SERVICE
# ============================================================================
# STATUS: Core - Public translation entry points
# PURPOSE: AST -> SQLite DDL, AST -> declarative schema, schema -> DDL
# CREATED: 12 OCT 2026
# EXPORTS: TranslationService, translate_to_constrained_ddl,
#          translate_to_declarative_schema, render_ddl_from_declarative_schema
# ============================================================================
"""
Translation Service

Each call builds its own canonical model and hands it to exactly one
emitter. Nothing is cached between calls, so one service instance can be
shared freely.

Usage:
    from services import TranslationService

    service = TranslationService()
    result = service.to_constrained_ddl(ast)
    result.output          # DDL text
    result.markers         # fidelity losses, possibly empty

    # Plain-value shortcuts
    from services import translate_to_constrained_ddl
    ddl = translate_to_constrained_ddl(ast)
"""

import uuid
from typing import Any, Dict, Optional

from core.config import TranslatorDefaults, get_defaults
from core.logging import ComponentType, get_logger, log_checkpoint, log_context
from core.models import CanonicalModel, TranslationResult
from core.schema.ddl_emitter import SqliteDdlEmitter
from core.schema.json_schema_emitter import DeclarativeSchemaEmitter
from core.schema.model_builder import ModelBuilder
from core.schema.reverse_emitter import ReverseDdlEmitter

logger = get_logger(__name__, ComponentType.SERVICE)


class TranslationService:
    """Facade over the model builder and the three emitters."""

    TARGET_DDL = "sqlite_ddl"
    TARGET_SCHEMA = "declarative_schema"
    TARGET_REVERSE = "schema_ddl"

    def __init__(self, defaults: Optional[TranslatorDefaults] = None):
        """
        Initialize translation service.

        Args:
            defaults: Translator policy; read from the environment if omitted
        """
        self.defaults = defaults or get_defaults().translator
        self._builder = ModelBuilder(self.defaults)
        self._ddl_emitter = SqliteDdlEmitter(self.defaults)
        self._schema_emitter = DeclarativeSchemaEmitter(self.defaults)
        self._reverse_emitter = ReverseDdlEmitter(self.defaults)

    @staticmethod
    def _new_translation_id() -> str:
        return f"tr-{uuid.uuid4().hex[:12]}"

    def build_model(self, ast: Any) -> CanonicalModel:
        """Build the canonical model without emitting anything."""
        return self._builder.build(ast)

    def to_constrained_ddl(self, ast: Any) -> TranslationResult:
        """
        Translate a PostgreSQL AST to SQLite STRICT DDL.

        Raises:
            StructuralError: If the AST is malformed
        """
        with log_context(translation_id=self._new_translation_id(), target=self.TARGET_DDL):
            model = self.build_model(ast)
            log_checkpoint("model_built", {"tables": len(model.tables), "markers": len(model.markers)})
            result = self._ddl_emitter.emit(model)
            self._log_result(result)
            return result

    def to_declarative_schema(self, ast: Any) -> TranslationResult:
        """
        Translate a PostgreSQL AST to a declarative schema document.

        Raises:
            StructuralError: If the AST is malformed
            CyclicReferenceError: If foreign keys form a loop
        """
        with log_context(translation_id=self._new_translation_id(), target=self.TARGET_SCHEMA):
            model = self.build_model(ast)
            log_checkpoint("model_built", {"tables": len(model.tables), "markers": len(model.markers)})
            result = self._schema_emitter.emit(model)
            self._log_result(result)
            return result

    def render_ddl(self, document: Any) -> TranslationResult:
        """
        Regenerate structural DDL from a declarative schema document.

        Raises:
            StructuralError: If the document is malformed
            CyclicReferenceError: If $ref values form a loop
        """
        with log_context(translation_id=self._new_translation_id(), target=self.TARGET_REVERSE):
            result = self._reverse_emitter.emit(document)
            self._log_result(result)
            return result

    @staticmethod
    def _log_result(result: TranslationResult) -> None:
        log_checkpoint("output_emitted", {"markers": len(result.markers)})
        if result.is_lossless:
            logger.info("Translation completed without fidelity loss")
        else:
            logger.info(f"Translation completed with {len(result.markers)} markers")


# ============================================================================
# MODULE-LEVEL ENTRY POINTS
# ============================================================================

def translate_to_constrained_ddl(ast: Any, defaults: Optional[TranslatorDefaults] = None) -> str:
    """SQLite DDL text for a PostgreSQL AST."""
    return TranslationService(defaults).to_constrained_ddl(ast).output


def translate_to_declarative_schema(ast: Any, defaults: Optional[TranslatorDefaults] = None) -> Dict[str, Any]:
    """Declarative schema document for a PostgreSQL AST."""
    return TranslationService(defaults).to_declarative_schema(ast).output


def render_ddl_from_declarative_schema(document: Any, defaults: Optional[TranslatorDefaults] = None) -> str:
    """Structural SQLite DDL for a declarative schema document."""
    return TranslationService(defaults).render_ddl(document).output


__all__ = [
    "TranslationService",
    "translate_to_constrained_ddl",
    "translate_to_declarative_schema",
    "render_ddl_from_declarative_schema",
]
