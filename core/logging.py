# ============================================================================
# STRUCTURED LOGGING
# ============================================================================
# STATUS: Core - Structured logging with context
# PURPOSE: Consistent, queryable logging across all translation stages
# CREATED: 09 OCT 2026
# ============================================================================
"""
Structured Logging

Every translation runs inside a log context naming the translation, its
target (ddl, schema, reverse) and, while the builder works, the table and
column being read. Formatters attach that context to each record so a
single translation can be followed through the builder, classifiers and
emitters.

Usage:
    from core.logging import get_logger, log_context

    logger = get_logger("services.translation", ComponentType.SERVICE)

    with log_context(translation_id="tr-123", target="ddl"):
        with log_context(table="orders", column="total"):
            logger.info("Mapped numeric(10,2) to REAL")
"""

import json
import logging
import sys
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field, fields, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Union


class ComponentType(str, Enum):
    """Pipeline stage a logger belongs to."""
    BUILDER = "builder"
    CLASSIFIER = "classifier"
    EMITTER = "emitter"
    SERVICE = "service"
    API = "api"


# ============================================================================
# CONTEXT
# ============================================================================

@dataclass(frozen=True)
class LogContext:
    """
    Fields attached to every record logged while the context is active.

    Keyword arguments that are not named fields land in ``extra``.
    """
    translation_id: Optional[str] = None
    target: Optional[str] = None
    table: Optional[str] = None
    column: Optional[str] = None
    component: Optional[str] = None
    operation: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def merged(self, **values) -> "LogContext":
        """Child context: given values override, everything else inherits."""
        named = {f.name for f in fields(self)} - {"extra"}
        overrides = {k: v for k, v in values.items() if k in named}
        extra = dict(self.extra)
        extra.update({k: v for k, v in values.items() if k not in named and k != "extra"})
        extra.update(values.get("extra") or {})
        return replace(self, extra=extra, **overrides)

    def to_dict(self) -> Dict[str, Any]:
        """Flat dict of the set fields followed by extra."""
        result = {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "extra" and getattr(self, f.name) is not None
        }
        result.update(self.extra)
        return result

    @property
    def location(self) -> Optional[str]:
        """table or table.column, when the builder is inside one."""
        if self.table is None:
            return None
        return f"{self.table}.{self.column}" if self.column else self.table


_EMPTY_CONTEXT = LogContext()
_local = threading.local()


def _stack() -> List[LogContext]:
    if not hasattr(_local, "stack"):
        _local.stack = []
    return _local.stack


def get_current_context() -> LogContext:
    """Innermost active context for this thread."""
    stack = _stack()
    return stack[-1] if stack else _EMPTY_CONTEXT


@contextmanager
def log_context(**values):
    """
    Push a child of the current context for the duration of the block.

    Example:
        with log_context(table="orders", operation="build_table"):
            logger.debug("Building table")
    """
    context = get_current_context().merged(**values)
    stack = _stack()
    stack.append(context)
    try:
        yield context
    finally:
        stack.pop()


def _utc_now(fmt: str) -> str:
    return datetime.now(timezone.utc).strftime(fmt)


# ============================================================================
# FORMATTERS
# ============================================================================

class StructuredFormatter(logging.Formatter):
    """One JSON object per record, for log aggregation."""

    def __init__(
        self,
        include_timestamp: bool = True,
        include_level: bool = True,
        include_logger: bool = True,
        include_context: bool = True,
    ):
        super().__init__()
        self.include_timestamp = include_timestamp
        self.include_level = include_level
        self.include_logger = include_logger
        self.include_context = include_context

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {}
        if self.include_timestamp:
            payload["timestamp"] = _utc_now("%Y-%m-%dT%H:%M:%S.%fZ")
        if self.include_level:
            payload["level"] = record.levelname
        if self.include_logger:
            payload["logger"] = record.name
        payload["message"] = record.getMessage()

        if self.include_context:
            context = get_current_context().to_dict()
            if context:
                payload["context"] = context

        data = getattr(record, "extra", None)
        if data:
            payload["data"] = data
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        payload["source"] = {"file": record.filename, "line": record.lineno, "function": record.funcName}
        return json.dumps(payload, default=str)


class HumanFormatter(logging.Formatter):
    """
    Single-line output for development.

        2026-10-14 09:12:03 INFO     core.schema.model_builder [tr=3f2a, at=orders.total]: ...
    """

    def format(self, record: logging.LogRecord) -> str:
        context = get_current_context()
        tags = []
        if context.translation_id:
            tags.append(f"tr={context.translation_id}")
        if context.target:
            tags.append(f"target={context.target}")
        if context.location:
            tags.append(f"at={context.location}")

        line = f"{_utc_now('%Y-%m-%d %H:%M:%S')} {record.levelname:<8} {record.name}"
        if tags:
            line += f" [{', '.join(tags)}]"
        line += f": {record.getMessage()}"

        data = getattr(record, "extra", None)
        if data:
            line += f" {data}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


# ============================================================================
# LOGGERS
# ============================================================================

class ContextLogger(logging.LoggerAdapter):
    """
    Adapter that copies the active context onto each record.

    Formatters read the merged fields from ``record.extra``.
    """

    def process(self, msg, kwargs):
        data = dict(kwargs.get("extra") or {})
        data.update(get_current_context().to_dict())
        component = (self.extra or {}).get("component")
        if component is not None:
            data.setdefault("component", component.value)
        kwargs["extra"] = {"extra": data}
        return msg, kwargs


def get_logger(name: str, component: Optional[ComponentType] = None) -> ContextLogger:
    """Context-aware logger for a module, tagged with its pipeline stage."""
    return ContextLogger(logging.getLogger(name), {"component": component})


def configure_logging(level: Union[str, int] = "INFO", json_output: bool = False) -> None:
    """
    Replace the root handlers with a single stdout handler.

    Args:
        level: Level name or number
        json_output: StructuredFormatter when True, HumanFormatter otherwise
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter() if json_output else HumanFormatter())
    logging.basicConfig(level=level, handlers=[handler], force=True)


# ============================================================================
# CHECKPOINTS
# ============================================================================

def log_checkpoint(
    name: str,
    data: Optional[Dict[str, Any]] = None,
    logger: Optional[logging.Logger] = None,
) -> None:
    """
    Log a named milestone of the current translation.

    Checkpoints ("model_built", "output_emitted") go to the "checkpoint"
    logger unless another is given, so they can be filtered on their own.
    """
    context = get_current_context()
    record: Dict[str, Any] = {"checkpoint": name, "timestamp": _utc_now("%Y-%m-%dT%H:%M:%S.%fZ")}
    if context.translation_id:
        record["translation_id"] = context.translation_id
    if context.target:
        record["target"] = context.target
    if data:
        record["data"] = data

    (logger or logging.getLogger("checkpoint")).info(f"CHECKPOINT: {name}", extra={"extra": record})


__all__ = [
    "ComponentType",
    "LogContext",
    "StructuredFormatter",
    "HumanFormatter",
    "ContextLogger",
    "get_logger",
    "configure_logging",
    "log_context",
    "get_current_context",
    "log_checkpoint",
]
