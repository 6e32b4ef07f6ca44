"""
Tests for structured JSON logging.
"""

import json
import logging
import sys

from contact_intake.shared.logging import StructuredFormatter, correlation_id_var, setup_logging


def _record(message: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord("contact_intake.test", logging.INFO, __file__, 1, message, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:
    def test_basic_fields(self) -> None:
        payload = json.loads(StructuredFormatter().format(_record("hello")))

        assert payload["message"] == "hello"
        assert payload["level"] == "INFO"
        assert payload["logger"] == "contact_intake.test"
        assert "timestamp" in payload

    def test_extra_fields_included(self) -> None:
        payload = json.loads(StructuredFormatter().format(_record("stored", contact_id=7)))

        assert payload["contact_id"] == 7

    def test_extra_does_not_override_base_keys(self) -> None:
        payload = json.loads(StructuredFormatter().format(_record("x", level="custom")))

        assert payload["level"] == "INFO"
        assert payload["extra_level"] == "custom"

    def test_correlation_id_from_context(self) -> None:
        token = correlation_id_var.set("req-42")
        try:
            payload = json.loads(StructuredFormatter().format(_record("x")))
        finally:
            correlation_id_var.reset(token)

        assert payload["correlation_id"] == "req-42"

    def test_exception_rendered(self) -> None:
        try:
            raise ValueError("bad")
        except ValueError:
            record = logging.LogRecord(
                "t", logging.ERROR, __file__, 1, "failed", (), sys.exc_info()
            )

        payload = json.loads(StructuredFormatter().format(record))

        assert "ValueError: bad" in payload["exception"]


class TestSetupLogging:
    def test_installs_single_json_handler(self) -> None:
        root = logging.getLogger()
        previous_handlers, previous_level = root.handlers[:], root.level
        try:
            setup_logging("debug")

            assert root.level == logging.DEBUG
            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, StructuredFormatter)
            assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
        finally:
            root.handlers = previous_handlers
            root.setLevel(previous_level)
