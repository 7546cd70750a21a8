# ============================================================================
# DDL TRANSLATOR - MAIN APPLICATION
# ============================================================================
# STATUS: Core - FastAPI application entry point
# PURPOSE: HTTP surface over the translation service
# CREATED: 12 OCT 2026
# ============================================================================
"""
DDL Translator Main Application

FastAPI application that:
1. Translates PostgreSQL parse trees to SQLite DDL
2. Translates PostgreSQL parse trees to declarative schema documents
3. Regenerates structural DDL from schema documents

Usage:
    uvicorn main:app --host 0.0.0.0 --port 8000
"""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from __version__ import __version__, BUILD_DATE, CODENAME
from api.routes import router, set_services
from api.schemas import HealthResponse
from core.config import get_defaults
from services import TranslationService

# Configure logging using our structured logging system
from core.logging import configure_logging, get_logger

_logging_defaults = get_defaults().logging
configure_logging(
    level=_logging_defaults.level,
    json_output=_logging_defaults.json_output,
)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Creates the translation service on startup.
    """
    logger.info(f"Starting {CODENAME} v{__version__} (Build {BUILD_DATE})")

    defaults = get_defaults().translator
    set_services(TranslationService(defaults))
    logger.info(
        f"Translation service initialized "
        f"(epsilon={defaults.decimal_epsilon}, shared_enum_min_refs={defaults.shared_enum_min_refs})"
    )

    yield

    logger.info(f"{CODENAME} stopped")


# Create FastAPI app
app = FastAPI(
    title=CODENAME,
    description="PostgreSQL DDL to SQLite STRICT DDL and declarative schema documents",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(router, prefix="/api/v1")


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health():
    """Liveness check."""
    return HealthResponse(status="ok", version=__version__)


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": CODENAME,
        "version": __version__,
        "build_date": BUILD_DATE,
        "status": "running",
        "docs": "/docs",
    }


# ============================================================================
# MAIN ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "8000"))

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=os.environ.get("RELOAD", "false").lower() == "true",
    )
