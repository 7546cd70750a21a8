# ============================================================================
# TRANSLATION MARKERS & RESULTS
# ============================================================================
# STATUS: Core model - Fidelity-loss audit trail
# PURPOSE: Typed markers returned alongside successful output
# CREATED: 07 OCT 2026
# EXPORTS: TranslationMarker, TranslationResult
# DEPENDENCIES: pydantic
# ============================================================================
"""
Translation Markers

Every construct that could not be carried into the target is recorded as a
TranslationMarker bound to the entity it affects ("orders", "orders.total",
"statement[3]"). Markers never replace output; they accompany it.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from pydantic import BaseModel, Field

from core.contracts import MarkerKind


class TranslationMarker(BaseModel):
    """A recorded loss of fidelity."""
    kind: MarkerKind
    construct_name: str = Field(..., alias="construct", description="What could not be represented")
    entity: str = Field(..., description="Table, column or statement affected")
    message: str = ""

    model_config = {"frozen": True, "populate_by_name": True}

    @classmethod
    def unsupported(cls, construct: str, entity: str, message: str = "") -> "TranslationMarker":
        """Create an UNSUPPORTED_CONSTRUCT marker."""
        return cls(
            kind=MarkerKind.UNSUPPORTED_CONSTRUCT,
            construct=construct,
            entity=entity,
            message=message or f"{construct} is not supported",
        )

    @classmethod
    def classification_miss(cls, construct: str, entity: str, message: str = "") -> "TranslationMarker":
        """Create a CLASSIFICATION_MISS marker."""
        return cls(
            kind=MarkerKind.CLASSIFICATION_MISS,
            construct=construct,
            entity=entity,
            message=message,
        )

    @classmethod
    def unresolved(cls, construct: str, entity: str, message: str = "") -> "TranslationMarker":
        """Create an UNRESOLVED_REFERENCE marker."""
        return cls(
            kind=MarkerKind.UNRESOLVED_REFERENCE,
            construct=construct,
            entity=entity,
            message=message,
        )


@dataclass
class TranslationResult:
    """
    Output of one translation call.

    output is a DDL string or a schema document, depending on the target.
    """
    output: Any
    markers: List[TranslationMarker] = field(default_factory=list)

    @property
    def is_lossless(self) -> bool:
        """True when nothing was dropped or left untranslated."""
        return not self.markers

    def markers_of(self, kind: MarkerKind) -> List[TranslationMarker]:
        """Markers of one kind, in the order they were recorded."""
        return [m for m in self.markers if m.kind == kind]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "output": self.output,
            "markers": [m.model_dump(mode="json", by_alias=True) for m in self.markers],
        }


__all__ = ["TranslationMarker", "TranslationResult"]
