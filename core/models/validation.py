# ============================================================================
# VALIDATION RULE SET
# ============================================================================
# STATUS: Core model - Per-column validation intent
# PURPOSE: Dialect-neutral rules recovered from types and CHECK constraints
# CREATED: 07 OCT 2026
# EXPORTS: ValidationRuleSet, LiteralValue
# DEPENDENCIES: pydantic
# ============================================================================
"""
Validation Rule Set

Rules come from two places:
- the column type (max_length, multiple_of, enum labels, array nesting)
- classified CHECK constraints (bounds, membership, pattern)

A single CHECK classifies to one shape. Several CHECKs on one column are
combined with merged_with(), where the later rule wins on a key collision.
"""

from typing import Optional, Tuple, Union

from pydantic import BaseModel

LiteralValue = Union[bool, int, float, str, None]

# Fields that describe values rather than array structure
_VALUE_RULE_FIELDS = (
    "minimum",
    "maximum",
    "exclusive_minimum",
    "exclusive_maximum",
    "enum_values",
    "pattern",
    "max_length",
    "multiple_of",
)


class ValidationRuleSet(BaseModel):
    """
    Validation rules for a column (or for the items of an array column).

    For an N-dimensional array, is_array is True and array_item_rule nests
    N levels deep; scalar rules derived from the type live on the innermost
    level.
    """
    minimum: Optional[Union[int, float]] = None
    maximum: Optional[Union[int, float]] = None
    exclusive_minimum: Optional[Union[int, float]] = None
    exclusive_maximum: Optional[Union[int, float]] = None
    enum_values: Optional[Tuple[LiteralValue, ...]] = None
    pattern: Optional[str] = None
    max_length: Optional[int] = None
    multiple_of: Optional[float] = None
    is_array: bool = False
    array_item_rule: Optional["ValidationRuleSet"] = None

    model_config = {"frozen": True}

    def is_empty(self) -> bool:
        """True when no rule is set."""
        return not self.is_array and all(
            getattr(self, name) is None for name in _VALUE_RULE_FIELDS
        )

    def merged_with(self, other: "ValidationRuleSet") -> "ValidationRuleSet":
        """
        Union of two rule sets; keys set on `other` win.

        Array structure is kept from whichever side declares it.
        """
        updates = {
            name: getattr(other, name)
            for name in _VALUE_RULE_FIELDS
            if getattr(other, name) is not None
        }
        if other.is_array:
            updates["is_array"] = True
            updates["array_item_rule"] = other.array_item_rule
        return self.model_copy(update=updates)

    def array_depth(self) -> int:
        """Number of nested array levels."""
        depth = 0
        rule: Optional[ValidationRuleSet] = self
        while rule is not None and rule.is_array:
            depth += 1
            rule = rule.array_item_rule
        return depth

    def innermost(self) -> "ValidationRuleSet":
        """The rule set applied to scalar elements."""
        rule = self
        while rule.is_array and rule.array_item_rule is not None:
            rule = rule.array_item_rule
        return rule


ValidationRuleSet.model_rebuild()

__all__ = ["ValidationRuleSet", "LiteralValue"]
