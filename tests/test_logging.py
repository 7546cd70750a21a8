# ============================================================================
# LOGGING TESTS
# ============================================================================
# STATUS: Tests - Structured logging
# PURPOSE: Verify context nesting, formatters and checkpoints
# CREATED: 14 OCT 2026
# ============================================================================
"""
Logging Tests

Run with:
    pytest tests/test_logging.py -v
"""

import json
import logging

from core.logging import (
    ComponentType,
    HumanFormatter,
    StructuredFormatter,
    get_current_context,
    get_logger,
    log_checkpoint,
    log_context,
)


def _record(message="hello", extra=None):
    record = logging.LogRecord("services.translation", logging.INFO, __file__, 10, message, None, None)
    if extra is not None:
        record.extra = extra
    return record


# ============================================================================
# CONTEXT
# ============================================================================

class TestLogContext:

    def test_empty_outside_context(self):
        assert get_current_context().to_dict() == {}

    def test_nested_contexts_merge(self):
        with log_context(translation_id="tr-1", target="sqlite"):
            with log_context(table="orders", extra={"statements": 3}):
                context = get_current_context().to_dict()
                assert context == {
                    "translation_id": "tr-1",
                    "target": "sqlite",
                    "table": "orders",
                    "statements": 3,
                }
            assert get_current_context().table is None
        assert get_current_context().translation_id is None

    def test_unnamed_values_go_to_extra(self):
        with log_context(table="t", statement=4):
            context = get_current_context()
            assert context.extra == {"statement": 4}
            assert context.location == "t"

    def test_inner_value_overrides(self):
        with log_context(table="a"):
            with log_context(table="b"):
                assert get_current_context().table == "b"
            assert get_current_context().table == "a"


# ============================================================================
# FORMATTERS
# ============================================================================

class TestFormatters:

    def test_structured_output(self):
        with log_context(translation_id="tr-9"):
            line = StructuredFormatter().format(_record(extra={"tables": 2}))
        data = json.loads(line)
        assert data["message"] == "hello"
        assert data["level"] == "INFO"
        assert data["logger"] == "services.translation"
        assert data["context"] == {"translation_id": "tr-9"}
        assert data["data"] == {"tables": 2}

    def test_structured_without_timestamp(self):
        data = json.loads(StructuredFormatter(include_timestamp=False).format(_record()))
        assert "timestamp" not in data

    def test_human_output_has_location(self):
        with log_context(translation_id="tr-9", table="orders", column="total"):
            line = HumanFormatter().format(_record())
        assert "[tr=tr-9, at=orders.total]" in line
        assert line.endswith("services.translation [tr=tr-9, at=orders.total]: hello")


# ============================================================================
# LOGGERS & CHECKPOINTS
# ============================================================================

class TestLoggers:

    def test_component_attached(self, caplog):
        logger = get_logger("tests.component", ComponentType.EMITTER)
        with caplog.at_level(logging.INFO, logger="tests.component"):
            with log_context(table="t"):
                logger.info("emitting")
        record = caplog.records[-1]
        assert record.extra["component"] == "emitter"
        assert record.extra["table"] == "t"

    def test_checkpoint(self, caplog):
        with caplog.at_level(logging.INFO, logger="checkpoint"):
            with log_context(translation_id="tr-2", target="schema"):
                log_checkpoint("model_built", {"tables": 1})
        record = caplog.records[-1]
        assert record.getMessage() == "CHECKPOINT: model_built"
        assert record.extra["translation_id"] == "tr-2"
        assert record.extra["target"] == "schema"
        assert record.extra["data"] == {"tables": 1}
