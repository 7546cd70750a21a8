# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# STATUS: Core - Default configuration values
# PURPOSE: Centralized policy knobs for translation, logging and the API
# CREATED: 09 OCT 2026
# ============================================================================
"""
Configuration Defaults

Policy values that are choices rather than derived constants live here:
the tolerance used by numeric precision CHECKs, whether strict bounds on
integer columns become inclusive ones, and when an enum becomes a shared
definition in the declarative schema.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides
- Type-safe access
"""

import os
from dataclasses import dataclass, field
from typing import Optional

DRAFT_2020_12 = "https://json-schema.org/draft/2020-12/schema"

_TRUTHY = ("1", "true", "yes", "on")


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


@dataclass(frozen=True)
class TranslatorDefaults:
    """
    Defaults for the translation pipeline.

    decimal_epsilon bounds the rounding error tolerated by the numeric
    scale CHECK: abs(col - round(col, s)) < decimal_epsilon.
    """
    decimal_epsilon: float = 1e-9
    adjust_integer_strict_bounds: bool = True
    shared_enum_min_refs: int = 2
    schema_uri: str = DRAFT_2020_12
    index_prefix: str = "idx"

    def __post_init__(self):
        if self.decimal_epsilon <= 0:
            raise ValueError("decimal_epsilon must be positive")
        if self.shared_enum_min_refs < 1:
            raise ValueError("shared_enum_min_refs must be at least 1")

    @classmethod
    def from_env(cls) -> "TranslatorDefaults":
        """Create from environment variables."""
        return cls(
            decimal_epsilon=float(os.getenv("DDL_DECIMAL_EPSILON", 1e-9)),
            adjust_integer_strict_bounds=_env_bool("DDL_ADJUST_INTEGER_BOUNDS", True),
            shared_enum_min_refs=int(os.getenv("DDL_SHARED_ENUM_MIN_REFS", 2)),
            schema_uri=os.getenv("DDL_SCHEMA_URI", DRAFT_2020_12),
            index_prefix=os.getenv("DDL_INDEX_PREFIX", "idx"),
        )


@dataclass(frozen=True)
class LoggingDefaults:
    """Defaults for log output."""
    level: str = "INFO"
    json_output: bool = False

    @classmethod
    def from_env(cls) -> "LoggingDefaults":
        """Create from environment variables."""
        return cls(
            level=os.getenv("LOG_LEVEL", "INFO"),
            json_output=os.getenv("LOG_FORMAT", "").lower() == "json",
        )


# ============================================================================
# GLOBAL DEFAULTS INSTANCE
# ============================================================================

@dataclass
class Defaults:
    """Container for all default configurations."""
    translator: TranslatorDefaults = field(default_factory=TranslatorDefaults)
    logging: LoggingDefaults = field(default_factory=LoggingDefaults)

    @classmethod
    def from_env(cls) -> "Defaults":
        """Create all defaults from environment variables."""
        return cls(
            translator=TranslatorDefaults.from_env(),
            logging=LoggingDefaults.from_env(),
        )


_defaults: Optional[Defaults] = None


def get_defaults() -> Defaults:
    """Get global defaults instance."""
    global _defaults
    if _defaults is None:
        _defaults = Defaults.from_env()
    return _defaults


def reset_defaults() -> None:
    """Reset defaults (for testing)."""
    global _defaults
    _defaults = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "DRAFT_2020_12",
    "TranslatorDefaults",
    "LoggingDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
