# ============================================================================
# FOREIGN KEY MODEL
# ============================================================================
# STATUS: Core model - Column references
# PURPOSE: Single-column foreign key with normalised actions
# CREATED: 07 OCT 2026
# EXPORTS: ForeignKeyRef
# DEPENDENCIES: pydantic
# ============================================================================

from pydantic import BaseModel, Field

from core.contracts import FkAction


class ForeignKeyRef(BaseModel):
    """Reference from one column to a column of another (or the same) table."""
    target_table: str = Field(..., min_length=1)
    target_column: str = Field(..., min_length=1)
    on_delete: FkAction = FkAction.NO_ACTION
    on_update: FkAction = FkAction.NO_ACTION

    model_config = {"frozen": True}

    @property
    def path(self) -> str:
        """Declarative-schema reference path."""
        return f"#/properties/{self.target_table}/properties/{self.target_column}"


__all__ = ["ForeignKeyRef"]
