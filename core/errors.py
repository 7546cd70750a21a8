# ============================================================================
# TRANSLATION ERRORS
# ============================================================================
# STATUS: Foundation - Error taxonomy
# PURPOSE: Hard failures vs. recoverable unsupported constructs
# CREATED: 06 OCT 2026
# ============================================================================
"""
Translation Errors

StructuralError aborts the whole translation. UnsupportedConstructError is
raised inside components and converted into a TranslationMarker by the
caller, so translation continues.
"""

from typing import Optional, Sequence


class TranslationError(Exception):
    """Base exception for translation errors."""
    pass


class StructuralError(TranslationError):
    """Raised when the AST or schema document violates a required invariant."""
    def __init__(self, message: str, entity: Optional[str] = None):
        self.entity = entity
        if entity:
            message = f"{entity}: {message}"
        super().__init__(message)


class CyclicReferenceError(StructuralError):
    """Raised when a chain of references loops back on itself."""
    def __init__(self, chain: Sequence[str]):
        self.chain = list(chain)
        super().__init__(f"Cyclic reference: {' -> '.join(self.chain)}")


class UnsupportedConstructError(TranslationError):
    """Raised when a recognized construct has no representation in the target."""
    def __init__(self, construct: str, detail: str = ""):
        self.construct = construct
        self.detail = detail
        message = f"Unsupported: {construct}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class UnrenderableExpressionError(UnsupportedConstructError):
    """Raised when an expression node cannot be written in the requested dialect."""
    def __init__(self, node_kind: str, dialect: str):
        self.node_kind = node_kind
        self.dialect = dialect
        super().__init__(f"expression {node_kind}", f"no {dialect} rendering")


__all__ = [
    "TranslationError",
    "StructuralError",
    "CyclicReferenceError",
    "UnsupportedConstructError",
    "UnrenderableExpressionError",
]
