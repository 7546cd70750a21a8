# ============================================================================
# API ROUTES
# ============================================================================
# STATUS: Core - FastAPI route definitions
# PURPOSE: HTTP endpoints for the three translations
# CREATED: 12 OCT 2026
# ============================================================================
"""
API Routes

FastAPI routes for the DDL translator. Mounted under /api/v1 by main.py.

    POST /translate/ddl       AST      -> SQLite DDL
    POST /translate/schema    AST      -> declarative schema document
    POST /render/ddl          document -> structural SQLite DDL

StructuralError maps to 422; any other TranslationError maps to 400.
"""

from fastapi import APIRouter, Depends, HTTPException

from core.errors import StructuralError, TranslationError
from core.logging import ComponentType, get_logger
from core.models import TranslationResult
from services import TranslationService
from .schemas import (
    DdlResponse,
    ErrorDetail,
    ErrorResponse,
    RenderRequest,
    SchemaResponse,
    TranslateRequest,
)

logger = get_logger(__name__, ComponentType.API)

router = APIRouter()

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
}


# ============================================================================
# DEPENDENCY INJECTION
# ============================================================================
# Set by the main app at startup; tests may swap it

_translation_service = None


def set_services(translation_service: TranslationService) -> None:
    """Set service instances for dependency injection."""
    global _translation_service
    _translation_service = translation_service


def get_translation_service() -> TranslationService:
    if _translation_service is None:
        raise HTTPException(500, "Translation service not initialized")
    return _translation_service


def _http_error(exc: TranslationError) -> HTTPException:
    status = 422 if isinstance(exc, StructuralError) else 400
    logger.warning(f"Translation failed ({status}): {exc}")
    detail = ErrorDetail(error=type(exc).__name__, detail=str(exc), entity=getattr(exc, "entity", None))
    return HTTPException(status, detail=detail.model_dump())


def _markers(result: TranslationResult) -> list:
    return [m.model_dump(mode="json", by_alias=True) for m in result.markers]


# ============================================================================
# TRANSLATION
# ============================================================================

@router.post("/translate/ddl", response_model=DdlResponse, responses=_ERROR_RESPONSES, tags=["Translate"])
def translate_ddl(
    request: TranslateRequest,
    service: TranslationService = Depends(get_translation_service),
):
    """Translate a PostgreSQL AST to SQLite STRICT DDL."""
    try:
        result = service.to_constrained_ddl(request.ast)
    except TranslationError as e:
        raise _http_error(e)
    return DdlResponse(output=result.output, markers=_markers(result))


@router.post("/translate/schema", response_model=SchemaResponse, responses=_ERROR_RESPONSES, tags=["Translate"])
def translate_schema(
    request: TranslateRequest,
    service: TranslationService = Depends(get_translation_service),
):
    """Translate a PostgreSQL AST to a declarative schema document."""
    try:
        result = service.to_declarative_schema(request.ast)
    except TranslationError as e:
        raise _http_error(e)
    return SchemaResponse(output=result.output, markers=_markers(result))


@router.post("/render/ddl", response_model=DdlResponse, responses=_ERROR_RESPONSES, tags=["Render"])
def render_ddl(
    request: RenderRequest,
    service: TranslationService = Depends(get_translation_service),
):
    """Regenerate structural SQLite DDL from a declarative schema document."""
    try:
        result = service.render_ddl(request.document)
    except TranslationError as e:
        raise _http_error(e)
    return DdlResponse(output=result.output, markers=_markers(result))
