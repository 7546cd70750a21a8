# ============================================================================
# ENUM TYPE MODEL
# ============================================================================
# STATUS: Core model - Named enumerations declared with CREATE TYPE ... AS ENUM
# PURPOSE: Immutable enum lookup shared by every translation stage
# CREATED: 06 OCT 2026
# EXPORTS: EnumType, EnumRegistry
# DEPENDENCIES: pydantic
# ============================================================================
"""
Enum Type Model

EnumRegistry is built once per translation (see core.schema.enum_registry)
and only read afterwards. It is passed explicitly into every component that
needs it; there is no global registry.
"""

from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

from pydantic import BaseModel, Field, GetCoreSchemaHandler
from pydantic_core import core_schema


class EnumType(BaseModel):
    """A named enumeration and its ordered labels."""
    name: str = Field(..., min_length=1)
    values: Tuple[str, ...] = Field(default_factory=tuple)

    model_config = {"frozen": True}


class EnumRegistry(Mapping[str, EnumType]):
    """
    Read-only name -> EnumType mapping.

    Iteration follows declaration order so anything derived from it is
    deterministic.
    """

    def __init__(self, enums: Optional[Dict[str, EnumType]] = None):
        self._enums: Dict[str, EnumType] = dict(enums or {})

    def __getitem__(self, name: str) -> EnumType:
        return self._enums[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._enums)

    def __len__(self) -> int:
        return len(self._enums)

    def __repr__(self) -> str:
        return f"EnumRegistry({list(self._enums)})"

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.is_instance_schema(cls)

    def values_of(self, name: str) -> Tuple[str, ...]:
        """Return the labels of an enum, or an empty tuple if unknown."""
        enum_type = self._enums.get(name)
        return enum_type.values if enum_type else ()


__all__ = ["EnumType", "EnumRegistry"]
