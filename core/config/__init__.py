# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# CREATED: 09 OCT 2026
# ============================================================================
"""
Configuration Module

Provides centralized configuration and defaults for the DDL translator.
"""

from core.config.defaults import (
    DRAFT_2020_12,
    TranslatorDefaults,
    LoggingDefaults,
    Defaults,
    get_defaults,
    reset_defaults,
)

__all__ = [
    "DRAFT_2020_12",
    "TranslatorDefaults",
    "LoggingDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
