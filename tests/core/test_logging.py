"""Tests for logger naming and the compact formatter."""

import logging

import pytest

from scobo.core.ingest import ingest_queue, log_writer
from scobo.core.logging.logger import CompactFormatter
from scobo.persistence.event_log import serialization, store


class TestLoggerNames:
    """Module loggers live in the scobo namespace."""

    @pytest.mark.parametrize("module", [serialization, store, ingest_queue, log_writer])
    def test_module_logger_is_namespaced(self, module):
        assert module.logger.name == module.__name__
        assert module.logger.name.startswith("scobo.")

    def test_compact_formatter_shortens_scobo_names(self):
        record = logging.LogRecord(
            serialization.logger.name, logging.WARNING, __file__, 1, "bad line", None, None
        )

        output = CompactFormatter("[%(name)s] %(message)s").format(record)

        assert output == "[event_log.serialization] bad line"

    def test_compact_formatter_keeps_foreign_names(self):
        record = logging.LogRecord(
            "uvicorn.error", logging.INFO, __file__, 1, "started", None, None
        )

        output = CompactFormatter("[%(name)s] %(message)s").format(record)

        assert output == "[uvicorn.error] started"
