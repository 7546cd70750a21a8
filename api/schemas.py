# ============================================================================
# API SCHEMAS
# ============================================================================
# STATUS: Core - Request/Response schemas
# PURPOSE: Pydantic models for API validation
# CREATED: 12 OCT 2026
# ============================================================================
"""
API Schemas

Request and response models for the translation API.
"""

from typing import Any, Dict, List, Union

from pydantic import BaseModel, Field

from core.contracts import MarkerKind


# ============================================================================
# REQUEST SCHEMAS
# ============================================================================

class TranslateRequest(BaseModel):
    """Request to translate a parsed PostgreSQL document."""
    ast: Union[Dict[str, Any], List[Any]] = Field(
        ...,
        description="libpg_query JSON parse tree: {'stmts': [...]} or a list of statements"
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "ast": {
                        "stmts": [
                            {
                                "stmt": {
                                    "CreateStmt": {
                                        "relation": {"relname": "t"},
                                        "tableElts": [
                                            {
                                                "ColumnDef": {
                                                    "colname": "id",
                                                    "typeName": {"names": [{"String": {"sval": "serial"}}]},
                                                }
                                            }
                                        ],
                                    }
                                }
                            }
                        ]
                    }
                }
            ]
        }
    }


class RenderRequest(BaseModel):
    """Request to regenerate DDL from a declarative schema document."""
    document: Dict[str, Any] = Field(..., description="Declarative schema document")


# ============================================================================
# RESPONSE SCHEMAS
# ============================================================================

class MarkerResponse(BaseModel):
    """One recorded fidelity loss."""
    kind: MarkerKind
    construct_name: str = Field(..., alias="construct")
    entity: str
    message: str = ""

    model_config = {"populate_by_name": True}


class DdlResponse(BaseModel):
    """DDL text plus markers."""
    output: str
    markers: List[MarkerResponse] = []


class SchemaResponse(BaseModel):
    """Declarative schema document plus markers."""
    output: Dict[str, Any]
    markers: List[MarkerResponse] = []


class ErrorDetail(BaseModel):
    """What went wrong and where."""
    error: str
    detail: str
    entity: Union[str, None] = None


class ErrorResponse(BaseModel):
    """
    Error body as HTTPException writes it.

    On 422 the detail is a list instead when the request body itself
    failed validation.
    """
    detail: Union[ErrorDetail, List[Dict[str, Any]]]


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "ok"
    version: str
