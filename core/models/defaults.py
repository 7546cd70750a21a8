# ============================================================================
# DEFAULT VALUE MODEL
# ============================================================================
# STATUS: Core model - Column DEFAULT clauses
# PURPOSE: Tagged union of literal vs. computed defaults
# CREATED: 07 OCT 2026
# EXPORTS: LiteralDefault, ComputedDefault, DefaultSpec
# DEPENDENCIES: pydantic
# ============================================================================
"""
Default Value Model

LiteralDefault holds a constant. ComputedDefault keeps the normalised source
text and the original AST node, so an emitter can either translate a known
function or pass the expression through unchanged.
"""

from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, Field

from core.contracts import DefaultKind
from core.models.validation import LiteralValue


class LiteralDefault(BaseModel):
    """A constant default (integer, float, string, boolean or NULL)."""
    variant: Literal["literal"] = "literal"
    value: LiteralValue = None

    model_config = {"frozen": True}


class ComputedDefault(BaseModel):
    """A default evaluated at insert time."""
    variant: Literal["computed"] = "computed"
    kind: DefaultKind
    expression: str = Field(..., description="Normalised PostgreSQL text")
    function: Optional[str] = Field(
        default=None,
        description="Lower-case lookup key for known functions"
    )
    node: Dict[str, Any] = Field(default_factory=dict, exclude=True, repr=False)

    model_config = {"frozen": True}


DefaultSpec = Union[LiteralDefault, ComputedDefault]

__all__ = ["LiteralDefault", "ComputedDefault", "DefaultSpec"]
