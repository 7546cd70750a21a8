# ============================================================================
# API MODULE
# ============================================================================
# STATUS: Core - FastAPI routes
# PURPOSE: HTTP API for the DDL translator
# CREATED: 12 OCT 2026
# ============================================================================
"""
API Module

FastAPI routes for the DDL translator.
"""

from .routes import router, set_services
from .schemas import (
    TranslateRequest,
    RenderRequest,
    DdlResponse,
    SchemaResponse,
    MarkerResponse,
)

__all__ = [
    "router",
    "set_services",
    "TranslateRequest",
    "RenderRequest",
    "DdlResponse",
    "SchemaResponse",
    "MarkerResponse",
]
